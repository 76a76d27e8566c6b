"""Command-line interface for mcorr."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import numpy as np
import typer
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from mcorr import __version__
from mcorr.analysis.collect import collect
from mcorr.batch_workers import P2Task
from mcorr.core.codons import CODON_LENGTH, GeneticCode, extract_codons
from mcorr.io.fasta import load_mate_sequences
from mcorr.io.output import write_csv
from mcorr.io.xmfa import count_alignments, read_xmfa
from mcorr.pipeline import PipelineError, get_worker_count, run_pipeline

SYNONYMOUS_THIRD_POSITION = 4


def create_progress() -> Progress:
    """Create a progress bar that renders on stderr."""
    return Progress(
        SpinnerColumn(style="bold magenta"),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=Console(stderr=True),
    )


def parse_codon_position(selector: int) -> tuple[bool, int]:
    """Map the --codon-position selector to (synonymous, codon index).

    Selectors 1-3 pick a codon position; 4 means synonymous sites at the
    third codon position.

    Raises:
        ValueError: If the selector is outside 1-4
    """
    if selector < 1 or selector > SYNONYMOUS_THIRD_POSITION:
        raise ValueError("--codon-position should be in the range of 1 to 4.")
    if selector == SYNONYMOUS_THIRD_POSITION:
        return True, 2
    return False, selector - 1


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"mcorr {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="mcorr",
    help="mcorr: mutational correlation across aligned coding sequences.\n\n"
    "Computes, for every pair of genomes, the probability that two sites a "
    "given distance apart are both substituted (P2).",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = False,
) -> None:
    """mcorr: mutational correlation across aligned coding sequences."""
    pass


@app.command()
def pair(
    alignment_file: Annotated[
        Path,
        typer.Argument(help="Alignment file in XMFA format"),
    ],
    output_file: Annotated[
        Path,
        typer.Argument(help="Output file in CSV format"),
    ],
    second_alignment: Annotated[
        Optional[Path],
        typer.Option(
            "--second-alignment",
            help="Second alignment (FASTA); its sequences are compared against each block",
        ),
    ] = None,
    max_corr_length: Annotated[
        int,
        typer.Option(
            "--max-corr-length",
            min=CODON_LENGTH,
            help="Maximum length of correlation (base pairs)",
        ),
    ] = 300,
    num_cpu: Annotated[
        int,
        typer.Option(
            "--num-cpu",
            "-w",
            min=0,
            help="Number of worker processes (0 = all available cores)",
        ),
    ] = 0,
    num_boot: Annotated[
        int,
        typer.Option("--num-boot", min=0, help="Number of bootstrap replicates over genes"),
    ] = 1000,
    codon_position: Annotated[
        int,
        typer.Option(
            "--codon-position",
            help="Codon position (1: first; 2: second; 3: third; "
            "4: synonymous at third codon position)",
        ),
    ] = 4,
    genetic_code: Annotated[
        str,
        typer.Option("--genetic-code", "-g", help="NCBI genetic code table id"),
    ] = "11",
    reading_frame: Annotated[
        int,
        typer.Option("--reading-frame", "-r", min=1, max=3, help="Reading frame (1, 2, or 3)"),
    ] = 1,
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", help="Random seed for bootstrapping"),
    ] = None,
) -> None:
    """Calculate mutational correlation for each pair of genomes.

    Examples:

        mcorr pair alignments.xmfa output.csv

        mcorr pair alignments.xmfa output.csv --codon-position 3 --num-cpu 8

        mcorr pair core.xmfa output.csv --second-alignment reference.fasta
    """
    try:
        synonymous, codon_index = parse_codon_position(codon_position)
        code = GeneticCode(genetic_code)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    mate_sequences = None
    if second_alignment is not None:
        try:
            mate_sequences = load_mate_sequences(second_alignment)
        except (OSError, ValueError) as e:
            typer.echo(f"Error: Cannot read second alignment: {e}", err=True)
            raise typer.Exit(1)
        typer.echo(
            f"Loaded {len(mate_sequences)} sequences from {second_alignment.name}",
            err=True,
        )

    try:
        total_blocks = count_alignments(alignment_file)
    except (OSError, ValueError) as e:
        typer.echo(f"Error: Cannot read alignment: {e}", err=True)
        raise typer.Exit(1)

    task = P2Task(
        codon_offset=reading_frame - 1,
        max_codon_lag=max_corr_length // CODON_LENGTH,
        genetic_code=code,
        synonymous=synonymous,
        codon_position=codon_index,
        mate_sequences=mate_sequences,
    )
    num_workers = get_worker_count(num_cpu)

    try:
        with create_progress() as progress:
            progress_id = progress.add_task("Processing alignments", total=total_blocks)
            results = run_pipeline(
                read_xmfa(alignment_file),
                task,
                num_workers=num_workers,
                on_block=lambda _: progress.advance(progress_id),
            )
            collectors = collect(results, num_boot=num_boot, rng=np.random.default_rng(seed))
        write_csv(collectors, output_file)
    except (PipelineError, OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(
        f"Wrote {len(collectors)} genome pairs from {total_blocks} alignments to {output_file}",
        err=True,
    )


@app.command()
def info(
    alignment_file: Annotated[
        Path,
        typer.Argument(help="Alignment file in XMFA format"),
    ],
    reading_frame: Annotated[
        int,
        typer.Option("--reading-frame", "-r", min=1, max=3, help="Reading frame (1, 2, or 3)"),
    ] = 1,
) -> None:
    """Display information about an XMFA alignment file.

    Shows block, genome, sequence and codon counts.
    """
    num_blocks = 0
    num_sequences = 0
    num_codons = 0
    genomes: set[str] = set()
    try:
        for alignment in read_xmfa(alignment_file):
            num_blocks += 1
            num_sequences += len(alignment)
            num_codons += len(extract_codons(alignment.sequences[0], reading_frame - 1))
            genomes.update(alignment.genomes)
    except (OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"File: {alignment_file.name}")
    typer.echo(f"Alignments: {num_blocks}")
    typer.echo(f"Sequences: {num_sequences}")
    typer.echo(f"Genomes: {len(genomes)}")
    typer.echo(f"Codons per genome: {num_codons}")
    typer.echo(f"Reading frame: {reading_frame}")

    if genomes:
        typer.echo("\nGenomes:")
        for genome in sorted(genomes):
            typer.echo(f"  {genome}")


if __name__ == "__main__":
    app()
