"""Side-by-side composite: left image, diff image, right image."""

import numpy as np
from PIL import Image

from imagediff.core.raster import as_rgba, check_same_bounds


def compose(
    left: Image.Image | np.ndarray,
    diff: Image.Image | np.ndarray,
    right: Image.Image | np.ndarray,
) -> np.ndarray:
    """Block-copy the three images into one (H, 3W, 4) raster, left to right."""
    left_arr = as_rgba(left)
    diff_arr = as_rgba(diff)
    right_arr = as_rgba(right)
    width, height = check_same_bounds(left_arr, diff_arr, right_arr)

    out = np.empty((height, width * 3, 4), dtype=np.uint8)
    out[:, :width] = left_arr
    out[:, width : width * 2] = diff_arr
    out[:, width * 2 :] = right_arr
    return out
