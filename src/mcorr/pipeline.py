"""Parallel dispatch of alignment blocks to correlation workers.

The dispatcher is the only reader of the alignment source, so every block is
handed to exactly one worker. Blocks are submitted to a process pool with a
cap on in-flight blocks, and the profiles of each finished block are yielded
as soon as it completes. The returned iterator ends once the source is
exhausted and every submitted block has been collected.
"""

from __future__ import annotations

import os
from concurrent.futures import FIRST_COMPLETED, Future, ProcessPoolExecutor, wait
from concurrent.futures.process import BrokenProcessPool
from typing import Callable, Iterable, Iterator

from mcorr.analysis.p2 import CorrResults
from mcorr.batch_workers import (
    P2Task,
    WorkerResult,
    init_worker,
    process_alignment,
    process_alignment_in_worker,
)
from mcorr.core.sequences import Alignment

IN_FLIGHT_PER_WORKER = 4


class PipelineError(RuntimeError):
    """Fatal failure while reading alignments or processing a block."""


def get_worker_count(requested: int) -> int:
    """Determine the number of workers.

    Args:
        requested: Number of workers requested (0 = all available cores)

    Returns:
        Number of workers to use
    """
    if requested < 0:
        raise ValueError(f"Number of workers must be non-negative, got {requested}")
    if requested > 0:
        return requested
    return os.cpu_count() or 1


def _next_alignment(source: Iterator[Alignment]) -> Alignment | None:
    try:
        return next(source)
    except StopIteration:
        return None
    except Exception as e:
        raise PipelineError(f"Failed to read alignments: {e}") from e


def _unpack(
    worker_result: WorkerResult, on_block: Callable[[str], None] | None
) -> list[CorrResults]:
    if worker_result.error:
        raise PipelineError(worker_result.error)
    if on_block is not None:
        on_block(worker_result.gene_id)
    return worker_result.results


def _run_sequential(
    alignments: Iterable[Alignment],
    task: P2Task,
    on_block: Callable[[str], None] | None,
) -> Iterator[CorrResults]:
    source = iter(alignments)
    while True:
        alignment = _next_alignment(source)
        if alignment is None:
            return
        yield from _unpack(process_alignment(alignment, task), on_block)


def _run_parallel(
    alignments: Iterable[Alignment],
    task: P2Task,
    num_workers: int,
    on_block: Callable[[str], None] | None,
) -> Iterator[CorrResults]:
    source = iter(alignments)
    max_in_flight = IN_FLIGHT_PER_WORKER * num_workers
    pending: set[Future] = set()

    with ProcessPoolExecutor(
        max_workers=num_workers, initializer=init_worker, initargs=(task,)
    ) as executor:
        try:
            exhausted = False
            while True:
                while not exhausted and len(pending) < max_in_flight:
                    alignment = _next_alignment(source)
                    if alignment is None:
                        exhausted = True
                    else:
                        try:
                            future = executor.submit(process_alignment_in_worker, alignment)
                        except BrokenProcessPool as e:
                            raise PipelineError(f"Worker pool failed: {e}") from e
                        pending.add(future)

                if not pending:
                    return

                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    try:
                        worker_result = future.result()
                    except Exception as e:
                        raise PipelineError(f"Worker process failed: {e}") from e
                    yield from _unpack(worker_result, on_block)
        finally:
            for future in pending:
                future.cancel()


def run_pipeline(
    alignments: Iterable[Alignment],
    task: P2Task,
    num_workers: int = 1,
    on_block: Callable[[str], None] | None = None,
) -> Iterator[CorrResults]:
    """Compute correlation profiles for every block of an alignment stream.

    Profiles of different blocks and pairs arrive in no particular order;
    within one profile the records are in ascending lag order.

    Args:
        alignments: Single-pass source of alignment blocks
        task: Calculator settings and mate lookup, shared by all workers
        num_workers: Number of worker processes (1 = run in this process)
        on_block: Called with the gene id of each finished block

    Returns:
        Iterator over CorrResults; exhausted once all blocks are processed

    Raises:
        PipelineError: While iterating, if the source cannot be read or a
            block cannot be processed
    """
    if num_workers < 1:
        raise ValueError(f"num_workers must be at least 1, got {num_workers}")
    if num_workers == 1:
        return _run_sequential(alignments, task, on_block)
    return _run_parallel(alignments, task, num_workers, on_block)
