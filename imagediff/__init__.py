"""imagediff: parallel per-pixel image differencing.

Public entry points:
  run_diff(left, right, config)   diff raster + aggregate counts
  compose(left, diff, right)      side-by-side composite raster
"""

from imagediff.core.composite import compose
from imagediff.core.scheduler import run_diff
from imagediff.core.types import DiffConfig, DiffCounts, DiffResult

__version__ = '0.1.0'

__all__ = ['DiffConfig', 'DiffCounts', 'DiffResult', 'compose', 'run_diff']
