"""Grayscale: mean of the R, G, B differences, scaled and clipped to 0..255.

The same intensity is written to all three output channels.

Example:
    imagediff left.png right.png --diff-mode gray --scale 4
"""

import numpy as np

from imagediff.core.raster import clip_channel
from imagediff.core.types import RenderMode

mode = RenderMode(
    name='gray',
    label='Grayscale',
    help='Average RGB difference times scale, as a gray level.',
)


@mode.render
def render(delta: np.ndarray, scale: float) -> np.ndarray:
    avg = (delta[..., 0] + delta[..., 1] + delta[..., 2]) / 3.0
    gray = clip_channel(avg * scale)
    return np.repeat(gray[..., None], 3, axis=-1)
