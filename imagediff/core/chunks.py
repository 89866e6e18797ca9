"""Split image bounds into a grid of non-overlapping chunks for parallel work."""

import logging
import math
import os
from collections.abc import Iterator

from imagediff.core.types import MIN_CHUNK_SIZE, Chunk

logger = logging.getLogger(__name__)


def resolve_parallelism(hint: int | None = None) -> int:
    """Parallelism hint, falling back to the logical CPU count. Never below 1."""
    if hint is None:
        hint = os.cpu_count()
    if hint is None or hint < 1:
        return 1
    return int(hint)


def grid_size(width: int, height: int, parallelism: int, min_size: int = MIN_CHUNK_SIZE) -> tuple[int, int]:
    """Choose (columns, rows) so columns*rows >= parallelism without chunks below min_size."""
    parallelism = max(parallelism, 1)
    # a chunk edge below one pixel would yield empty chunks
    min_size = max(min_size, 1)
    nx = math.isqrt(parallelism)
    ny = -(-parallelism // nx)

    if width // nx < min_size:
        nx = width // min_size
    if height // ny < min_size:
        ny = height // min_size

    return max(nx, 1), max(ny, 1)


def partition(
    bounds: tuple[int, int, int, int],
    parallelism: int,
    min_size: int = MIN_CHUNK_SIZE,
) -> Iterator[Chunk]:
    """Yield chunks tiling bounds (x1, y1, x2, y2) exactly, row-major.

    The last chunk in each row and column absorbs the integer-division
    remainder so the union covers the full rectangle.
    """
    x1, y1, x2, y2 = bounds
    width = x2 - x1
    height = y2 - y1
    nx, ny = grid_size(width, height, parallelism, min_size)
    logger.debug('Splitting %dx%d into %d chunks (%dx%d)', width, height, nx * ny, nx, ny)

    chunk_w = width // nx
    chunk_h = height // ny

    for i in range(ny):
        start_y = y1 + i * chunk_h
        end_y = y2 if i == ny - 1 else start_y + chunk_h
        for j in range(nx):
            start_x = x1 + j * chunk_w
            end_x = x2 if j == nx - 1 else start_x + chunk_w
            yield Chunk(start_x, end_x, start_y, end_y)
