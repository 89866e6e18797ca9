"""Coerce PIL images and numpy arrays into RGBA uint8 rasters, and check their bounds."""

import numpy as np
from PIL import Image

from imagediff.core.errors import DimensionMismatchError, EmptyImageError, InvalidImageError
from imagediff.core.types import MAX_CHANNEL


def as_rgba(image: Image.Image | np.ndarray) -> np.ndarray:
    """Return an (H, W, 4) uint8 array for a PIL image or an array.

    Accepts (H, W, 4) and (H, W, 3) arrays (alpha filled opaque) and
    (H, W) grayscale arrays (replicated into RGB).
    """
    # Channels stay straight, never premultiplied: colour under alpha 0 is
    # still a non-background pixel and still takes part in the diff.
    if isinstance(image, Image.Image):
        return np.array(image.convert('RGBA'))

    arr = np.asarray(image)
    if arr.ndim == 2:
        arr = np.repeat(arr[:, :, None], 3, axis=2)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise InvalidImageError(f'Expected an (H, W), (H, W, 3) or (H, W, 4) array, got shape {arr.shape}')

    arr = np.clip(arr, 0, MAX_CHANNEL).astype(np.uint8, copy=False)
    if arr.shape[2] == 3:
        alpha = np.full(arr.shape[:2] + (1,), MAX_CHANNEL, dtype=np.uint8)
        arr = np.concatenate([arr, alpha], axis=2)
    return arr


def size_of(arr: np.ndarray) -> tuple[int, int]:
    """(width, height) of an image array."""
    return int(arr.shape[1]), int(arr.shape[0])


def check_same_bounds(*arrays: np.ndarray) -> tuple[int, int]:
    """Fail fast on empty or mismatched images. Returns the shared (width, height)."""
    first = size_of(arrays[0])
    for arr in arrays[1:]:
        other = size_of(arr)
        if other != first:
            raise DimensionMismatchError(first, other)
    if first[0] == 0 or first[1] == 0:
        raise EmptyImageError(f'Image has zero area: {first[0]}x{first[1]}')
    return first


def clip_channel(values: np.ndarray) -> np.ndarray:
    """Clip scaled differences into 0..255 and truncate to uint8."""
    return np.clip(values, 0, MAX_CHANNEL).astype(np.uint8)
