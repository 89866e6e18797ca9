"""Shared types for imagediff: ImageStats, Chunk, DiffCounts, DiffConfig, RenderMode, DiffResult, DiffReport."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import numpy as np

MAX_CHANNEL = 255
MIN_CHUNK_SIZE = 32
DEFAULT_SCALE = 2.0
DEFAULT_NORMALIZED_SCALE = 50.0
DEFAULT_MODE = 'color'


@dataclass(frozen=True)
class ImageStats:
    """Per-channel mean and population standard deviation of one image."""

    mean_r: float = 0.0
    mean_g: float = 0.0
    mean_b: float = 0.0
    mean_a: float = 0.0
    std_r: float = 0.0
    std_g: float = 0.0
    std_b: float = 0.0
    std_a: float = 0.0

    @property
    def means(self) -> tuple[float, float, float, float]:
        return (self.mean_r, self.mean_g, self.mean_b, self.mean_a)

    @property
    def stds(self) -> tuple[float, float, float, float]:
        return (self.std_r, self.std_g, self.std_b, self.std_a)

    def as_dict(self) -> dict[str, list[float]]:
        return {
            'mean': [round(v, 4) for v in self.means],
            'std': [round(v, 4) for v in self.stds],
        }


@dataclass(frozen=True)
class Chunk:
    """Half-open rectangle [start_x, end_x) x [start_y, end_y)."""

    start_x: int
    end_x: int
    start_y: int
    end_y: int

    @property
    def width(self) -> int:
        return self.end_x - self.start_x

    @property
    def height(self) -> int:
        return self.end_y - self.start_y

    def slices(self) -> tuple[slice, slice]:
        """Row/column slices selecting this chunk from an (H, W, ...) array."""
        return slice(self.start_y, self.end_y), slice(self.start_x, self.end_x)


@dataclass(frozen=True)
class DiffCounts:
    """Non-background pixels in each image and differing pixels."""

    left: int = 0
    right: int = 0
    diff: int = 0

    def __add__(self, other: DiffCounts) -> DiffCounts:
        return DiffCounts(self.left + other.left, self.right + other.right, self.diff + other.diff)


class CounterTotals:
    """Lock-guarded accumulator shared by concurrently running chunk workers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._totals = DiffCounts()

    def add(self, counts: DiffCounts) -> None:
        with self._lock:
            self._totals = self._totals + counts

    def snapshot(self) -> DiffCounts:
        with self._lock:
            return self._totals


@dataclass(frozen=True)
class DiffConfig:
    """Immutable settings for one diff run."""

    normalized: bool = False
    scale: float = DEFAULT_SCALE
    diff_mode: str = DEFAULT_MODE
    verbose: bool = False
    min_chunk_size: int = MIN_CHUNK_SIZE
    workers: int | None = None  # parallelism hint, None = os.cpu_count()


class RenderMode:
    """A self-registering rendering policy for per-channel differences.

    Usage in a mode module:

        mode = RenderMode(name='gray', label='Grayscale', help='Average RGB difference')

        @mode.render
        def render(delta, scale):
            ...

    The render function receives an (h, w, 3) float array of absolute RGB
    differences and the scale factor, and returns an (h, w, 3) uint8 array.
    """

    def __init__(self, name: str, label: str, help: str = ''):
        self.name = name
        self.label = label
        self.help = help
        self._render_fn: Callable | None = None

    def render(self, fn: Callable) -> Callable:
        """Decorator to register the render function."""
        self._render_fn = fn
        return fn

    def apply(self, delta: np.ndarray, scale: float) -> np.ndarray:
        """Render absolute RGB differences into output RGB channels."""
        if self._render_fn is None:
            raise RuntimeError(f'Render mode {self.name} has no render function')
        return self._render_fn(delta, scale)


@dataclass
class DiffResult:
    """Output of a full diff run: the populated diff raster plus aggregate counts."""

    image: np.ndarray
    counts: DiffCounts
    chunks: int = 0
    left_stats: ImageStats | None = None
    right_stats: ImageStats | None = None

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])


@dataclass
class DiffReport:
    """Summary of a CLI run for text/JSON output."""

    left_path: str = ''
    right_path: str = ''
    output_path: str = ''
    width: int = 0
    height: int = 0
    mode: str = DEFAULT_MODE
    mode_label: str = 'Color'
    scale: float = DEFAULT_SCALE
    normalized: bool = False
    composite: bool = False
    chunks: int = 0
    counts: DiffCounts = field(default_factory=DiffCounts)
    stats: dict[str, Any] = field(default_factory=dict)

    @property
    def diff_pct(self) -> float:
        return self.counts.diff * 100.0 / max(self.width * self.height, 1)
