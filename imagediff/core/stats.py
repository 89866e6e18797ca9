"""Per-channel image statistics and z-score normalisation.

Statistics are computed in two passes over every pixel: first the channel
means, then the mean of squared deviations from those means. The standard
deviation is the population one (divisor = pixel count).

Normalisation maps a raw channel sample to (value - mean) / std. A channel
with zero deviation cannot be z-scored, so the raw value is returned as is.
"""

import numpy as np

from imagediff.core.types import ImageStats


def compute_stats(arr: np.ndarray) -> ImageStats:
    """Mean and population standard deviation of each RGBA channel.

    The image must have a non-zero area.
    """
    pixels = arr.reshape(-1, 4).astype(np.float64)
    count = float(pixels.shape[0])

    means = pixels.sum(axis=0) / count
    sq_dev = ((pixels - means) ** 2).sum(axis=0) / count
    stds = np.sqrt(sq_dev)

    return ImageStats(
        mean_r=float(means[0]),
        mean_g=float(means[1]),
        mean_b=float(means[2]),
        mean_a=float(means[3]),
        std_r=float(stds[0]),
        std_g=float(stds[1]),
        std_b=float(stds[2]),
        std_a=float(stds[3]),
    )


def normalize(value: float, mean: float, std: float) -> float:
    """Z-score one sample. Returns the raw value when std is zero."""
    if std == 0:
        return float(value)
    return (value - mean) / std


def normalize_channels(values: np.ndarray, stats: ImageStats) -> np.ndarray:
    """Vectorised normalize() over an (..., 4) float array, channel by channel."""
    means = np.asarray(stats.means, dtype=np.float64)
    stds = np.asarray(stats.stds, dtype=np.float64)
    zero = stds == 0
    divisor = np.where(zero, 1.0, stds)
    scored = (values - means) / divisor
    return np.where(zero, values, scored)
