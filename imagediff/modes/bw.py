"""Black-and-white: any RGB difference renders as white, none as black.

The scale factor is ignored. Alpha differences never turn a pixel white
(they are still counted as differing pixels).

Example:
    imagediff left.png right.png --diff-mode bw
"""

import numpy as np

from imagediff.core.types import MAX_CHANNEL, RenderMode

mode = RenderMode(
    name='bw',
    label='Black-and-White',
    help='White where any of R, G, B differ, black elsewhere.',
)


@mode.render
def render(delta: np.ndarray, scale: float) -> np.ndarray:
    changed = np.any(delta > 0, axis=-1)
    out = np.zeros(delta.shape, dtype=np.uint8)
    out[changed] = MAX_CHANNEL
    return out
