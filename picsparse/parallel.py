"""
Parallel Batch Engine — one process per source file.

Extraction of a single buffer is CPU-bound pure Python, so threads gain
nothing under the GIL. Directory batches instead hand whole files to a
multiprocessing pool:

  • Each worker extracts one file end to end (read → extract → save).
  • The boundary resolver needs the complete match list of its buffer,
    so a file is never split across workers.
  • Results come back in input order.
"""

import os
import logging
import multiprocessing as mp
from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ParallelBatchConfig:
    num_workers: int = 0            # 0 = auto-detect
    max_workers: int = 8
    chunksize: int = 1


def optimal_worker_count(file_count: int, config: ParallelBatchConfig) -> int:
    """
    Rules:
      • At least 1 worker.
      • Never more workers than files.
      • Never exceed CPU count or max_workers.
    """
    if file_count <= 1:
        return 1
    if config.num_workers > 0:
        return max(1, min(config.num_workers, config.max_workers, file_count))
    cpu_count = os.cpu_count() or 2
    return max(1, min(file_count, cpu_count, config.max_workers))


def map_files(
    func: Callable[[str], T],
    paths: Sequence[str],
    config: ParallelBatchConfig,
) -> list[T]:
    """Apply `func` to every path, in worker processes when worthwhile.

    `func` must be picklable (a module-level function or functools.partial
    of one).
    """
    workers = optimal_worker_count(len(paths), config)
    if workers <= 1:
        return [func(p) for p in paths]

    logger.info("Processing %d files with %d worker processes", len(paths), workers)
    with mp.Pool(processes=workers) as pool:
        return pool.map(func, paths, chunksize=config.chunksize)
