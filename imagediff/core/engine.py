"""Per-chunk difference computation.

For every pixel of the chunk:
  - left/right counts grow when that image's pixel has any non-zero channel
  - channel differences are |left - right|, optionally after z-scoring each
    sample with its own image's statistics
  - the diff count grows when the four channel differences sum to non-zero
    (alpha included, whatever the rendering mode)
  - output RGB comes from the render mode; output alpha is always opaque

Each call writes only inside its chunk of the shared diff raster.
"""

import logging

import numpy as np

from imagediff.core.stats import normalize_channels
from imagediff.core.types import MAX_CHANNEL, Chunk, DiffConfig, DiffCounts, ImageStats, RenderMode

logger = logging.getLogger(__name__)


def compute_diff_chunk(
    left: np.ndarray,
    right: np.ndarray,
    diff: np.ndarray,
    chunk: Chunk,
    config: DiffConfig,
    mode: RenderMode,
    left_stats: ImageStats | None = None,
    right_stats: ImageStats | None = None,
) -> DiffCounts:
    """Diff one chunk of two RGBA rasters into `diff`, rendering RGB with `mode`.

    Returns the chunk's counts.
    """
    if config.verbose:
        logger.debug(
            'Processing chunk: startX=%d, endX=%d, startY=%d, endY=%d',
            chunk.start_x,
            chunk.end_x,
            chunk.start_y,
            chunk.end_y,
        )

    rows, cols = chunk.slices()
    lpx = left[rows, cols].astype(np.float64)
    rpx = right[rows, cols].astype(np.float64)

    left_count = int(np.count_nonzero(lpx.sum(axis=-1) > 0))
    right_count = int(np.count_nonzero(rpx.sum(axis=-1) > 0))

    if config.normalized:
        if left_stats is None or right_stats is None:
            raise ValueError('Normalized diff requires statistics for both images')
        lpx = normalize_channels(lpx, left_stats)
        rpx = normalize_channels(rpx, right_stats)

    delta = np.abs(lpx - rpx)
    diff_count = int(np.count_nonzero(delta.sum(axis=-1) > 0))

    diff[rows, cols, :3] = mode.apply(delta[..., :3], config.scale)
    diff[rows, cols, 3] = MAX_CHANNEL

    return DiffCounts(left=left_count, right=right_count, diff=diff_count)
