"""Fork-join execution of the chunk diff over a thread pool.

One task is submitted per chunk. Chunks never overlap, so workers write the
shared diff raster without locking; only the aggregate counters go through
a lock. The call blocks until every chunk is done and re-raises the first
worker failure, so a partial result is never returned.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np
from PIL import Image

from imagediff import registry
from imagediff.core.chunks import partition, resolve_parallelism
from imagediff.core.engine import compute_diff_chunk
from imagediff.core.raster import as_rgba, check_same_bounds
from imagediff.core.stats import compute_stats
from imagediff.core.types import Chunk, CounterTotals, DiffConfig, DiffResult, ImageStats, RenderMode

logger = logging.getLogger(__name__)


def run_chunks(
    left: np.ndarray,
    right: np.ndarray,
    diff: np.ndarray,
    chunks: list[Chunk],
    config: DiffConfig,
    mode: RenderMode,
    left_stats: ImageStats | None = None,
    right_stats: ImageStats | None = None,
    max_workers: int | None = None,
) -> CounterTotals:
    """Run compute_diff_chunk for every chunk concurrently and sum the counts."""
    totals = CounterTotals()
    if not chunks:
        return totals

    def _work(chunk: Chunk) -> None:
        counts = compute_diff_chunk(left, right, diff, chunk, config, mode, left_stats, right_stats)
        totals.add(counts)

    workers = min(len(chunks), max_workers or len(chunks))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='imagediff') as pool:
        futures = [pool.submit(_work, chunk) for chunk in chunks]
        for future in futures:
            future.result()
    return totals


def run_diff(
    left: Image.Image | np.ndarray,
    right: Image.Image | np.ndarray,
    config: DiffConfig | None = None,
) -> DiffResult:
    """Compute the full diff raster and aggregate counts for two images.

    Raises DimensionMismatchError or EmptyImageError before any work starts.
    """
    config = config or DiffConfig()
    left_arr = as_rgba(left)
    right_arr = as_rgba(right)
    width, height = check_same_bounds(left_arr, right_arr)

    # Resolve once up front so workers only read the populated registry
    mode = registry.get(config.diff_mode)

    left_stats = right_stats = None
    if config.normalized:
        logger.debug('Calculating statistics for left image')
        left_stats = compute_stats(left_arr)
        logger.debug('Calculating statistics for right image')
        right_stats = compute_stats(right_arr)

    parallelism = resolve_parallelism(config.workers)
    chunks = list(partition((0, 0, width, height), parallelism, config.min_chunk_size))

    diff = np.zeros_like(left_arr)
    totals = run_chunks(
        left_arr,
        right_arr,
        diff,
        chunks,
        config,
        mode,
        left_stats,
        right_stats,
        max_workers=parallelism,
    )
    counts = totals.snapshot()
    logger.debug('Non-zero pixels left %d right %d diff %d', counts.left, counts.right, counts.diff)

    return DiffResult(
        image=diff,
        counts=counts,
        chunks=len(chunks),
        left_stats=left_stats,
        right_stats=right_stats,
    )
