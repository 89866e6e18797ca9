"""Tests for imagediff.core.scheduler: fork-join diff over all chunks."""

import numpy as np
import pytest
from imagediff import registry
from imagediff.core.errors import DimensionMismatchError, EmptyImageError, PreconditionError
from imagediff.core.scheduler import run_chunks, run_diff
from imagediff.core.types import Chunk, DiffConfig, DiffCounts
from PIL import Image


def _noise(w: int, h: int, seed: int) -> np.ndarray:
    arr = np.random.default_rng(seed).integers(0, 256, size=(h, w, 4), dtype=np.uint8)
    arr[::7, ::5] = 0  # some background pixels
    return arr


class TestRunDiff:
    def test_uniform_images(self):
        left = np.full((2, 2, 4), (100, 150, 200, 255), dtype=np.uint8)
        right = np.full((2, 2, 4), (120, 170, 220, 255), dtype=np.uint8)
        result = run_diff(left, right, DiffConfig(scale=1.0))
        assert result.counts == DiffCounts(4, 4, 4)
        assert (result.image == (20, 20, 20, 255)).all()
        assert result.chunks == 1

    def test_matches_single_chunk_reference(self):
        left = _noise(300, 200, 1)
        right = _noise(300, 200, 2)
        config = DiffConfig(scale=3.0, diff_mode='gray', workers=1)
        serial = run_diff(left, right, config)
        parallel = run_diff(left, right, DiffConfig(scale=3.0, diff_mode='gray', workers=16))
        assert serial.chunks == 1
        assert parallel.chunks > 1
        assert parallel.counts == serial.counts
        assert np.array_equal(parallel.image, serial.image)

    def test_deterministic(self):
        left = _noise(257, 129, 3)
        right = _noise(257, 129, 4)
        config = DiffConfig(normalized=True, scale=50.0, workers=8)
        first = run_diff(left, right, config)
        for _ in range(3):
            again = run_diff(left, right, config)
            assert again.counts == first.counts
            assert np.array_equal(again.image, first.image)

    def test_counts_against_numpy(self):
        left = _noise(130, 70, 5)
        right = left.copy()
        right[10:20, 30:40, 0] ^= 1
        result = run_diff(left, right, DiffConfig(workers=4))
        assert result.counts.left == int(np.count_nonzero(left.astype(int).sum(axis=-1)))
        assert result.counts.diff == 100

    def test_every_pixel_opaque(self):
        result = run_diff(_noise(90, 90, 6), _noise(90, 90, 7), DiffConfig(workers=9))
        assert (result.image[..., 3] == 255).all()

    def test_stats_only_when_normalized(self):
        img = _noise(40, 40, 8)
        assert run_diff(img, img).left_stats is None
        normalized = run_diff(img, img, DiffConfig(normalized=True))
        assert normalized.left_stats is not None
        assert normalized.right_stats == normalized.left_stats

    def test_accepts_pil_images(self):
        left = Image.new('RGB', (4, 3), (10, 20, 30))
        right = Image.new('RGB', (4, 3), (10, 20, 40))
        result = run_diff(left, right, DiffConfig(scale=1.0))
        assert result.width == 4
        assert result.height == 3
        assert result.image[0, 0].tolist() == [0, 0, 10, 255]
        assert result.counts.diff == 12

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            run_diff(np.zeros((2, 2, 4), np.uint8), np.zeros((2, 3, 4), np.uint8))

    def test_empty_image(self):
        with pytest.raises(EmptyImageError):
            run_diff(np.zeros((0, 5, 4), np.uint8), np.zeros((0, 5, 4), np.uint8))

    def test_precondition_is_value_error(self):
        assert issubclass(PreconditionError, ValueError)

    def test_mismatch_fails_before_statistics(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _boom(arr):
            raise AssertionError('statistics must not run')

        monkeypatch.setattr('imagediff.core.scheduler.compute_stats', _boom)
        with pytest.raises(DimensionMismatchError):
            run_diff(np.zeros((2, 2, 4), np.uint8), np.zeros((3, 2, 4), np.uint8), DiffConfig(normalized=True))


class TestRunChunks:
    def test_no_chunks(self):
        img = np.zeros((1, 1, 4), np.uint8)
        assert run_chunks(img, img, img.copy(), [], DiffConfig(), registry.get('color')).snapshot() == DiffCounts()

    def test_worker_failure_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _fail(*args, **kwargs):
            raise RuntimeError('chunk failed')

        monkeypatch.setattr('imagediff.core.scheduler.compute_diff_chunk', _fail)
        img = np.zeros((4, 4, 4), np.uint8)
        with pytest.raises(RuntimeError, match='chunk failed'):
            run_chunks(img, img, img.copy(), [Chunk(0, 2, 0, 4), Chunk(2, 4, 0, 4)], DiffConfig(), registry.get('color'))

    def test_sums_chunk_counts(self):
        left = np.full((4, 4, 4), 1, np.uint8)
        right = np.zeros((4, 4, 4), np.uint8)
        chunks = [Chunk(0, 2, 0, 2), Chunk(2, 4, 0, 2), Chunk(0, 4, 2, 4)]
        totals = run_chunks(left, right, np.zeros_like(left), chunks, DiffConfig(), registry.get('color'), max_workers=2)
        assert totals.snapshot() == DiffCounts(16, 0, 16)
