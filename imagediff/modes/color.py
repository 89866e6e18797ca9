"""Colour: each of R, G, B difference scaled and clipped independently.

This is the default, and the fallback for any unrecognised mode name.

Example:
    imagediff left.png right.png --diff-mode color --scale 2
"""

import numpy as np

from imagediff.core.raster import clip_channel
from imagediff.core.types import RenderMode

mode = RenderMode(
    name='color',
    label='Color',
    help='Per-channel RGB difference times scale (default).',
)


@mode.render
def render(delta: np.ndarray, scale: float) -> np.ndarray:
    return clip_channel(delta * scale)
