"""Tests for imagediff.core.stats: channel statistics and normalisation."""

import numpy as np
import pytest
from imagediff.core.stats import compute_stats, normalize, normalize_channels
from imagediff.core.types import ImageStats


def _solid(w: int, h: int, rgba: tuple[int, int, int, int]) -> np.ndarray:
    return np.full((h, w, 4), rgba, dtype=np.uint8)


class TestComputeStats:
    def test_solid_white(self):
        stats = compute_stats(_solid(2, 2, (255, 255, 255, 255)))
        assert stats.means == (255.0, 255.0, 255.0, 255.0)
        assert stats.stds == (0.0, 0.0, 0.0, 0.0)

    def test_constant_colour_mean_is_colour(self):
        stats = compute_stats(_solid(7, 3, (100, 150, 200, 255)))
        assert stats.means == pytest.approx((100.0, 150.0, 200.0, 255.0))
        assert stats.stds == (0.0, 0.0, 0.0, 0.0)

    def test_checkerboard(self):
        arr = np.zeros((2, 2, 4), dtype=np.uint8)
        arr[..., 3] = 255
        arr[0, 0, :3] = 255
        arr[1, 1, :3] = 255
        stats = compute_stats(arr)
        assert stats.means == pytest.approx((127.5, 127.5, 127.5, 255.0))
        assert stats.stds == pytest.approx((127.5, 127.5, 127.5, 0.0))

    def test_single_pixel(self):
        stats = compute_stats(_solid(1, 1, (100, 150, 200, 255)))
        assert stats.mean_r == 100.0
        assert stats.std_b == 0.0

    def test_transparent(self):
        stats = compute_stats(_solid(2, 2, (100, 100, 100, 0)))
        assert stats.mean_a == 0.0
        assert stats.std_a == 0.0

    def test_population_not_sample_deviation(self):
        # values 0 and 10: population std 5, sample std ~7.07
        arr = np.zeros((1, 2, 4), dtype=np.uint8)
        arr[0, 1, 0] = 10
        stats = compute_stats(arr)
        assert stats.std_r == pytest.approx(5.0)

    def test_as_dict(self):
        stats = compute_stats(_solid(2, 2, (1, 2, 3, 4)))
        assert stats.as_dict() == {'mean': [1.0, 2.0, 3.0, 4.0], 'std': [0.0, 0.0, 0.0, 0.0]}


class TestNormalize:
    def test_normal(self):
        assert normalize(100, 50, 25) == pytest.approx(2.0)

    def test_zero_std_returns_value_unchanged(self):
        assert normalize(100, 50, 0) == 100.0

    def test_at_mean(self):
        assert normalize(50, 50, 10) == 0.0

    def test_negative_std(self):
        assert normalize(100, 150, -25) == pytest.approx(2.0)


class TestNormalizeChannels:
    def test_matches_scalar_per_channel(self):
        stats = ImageStats(mean_r=50, mean_g=50, mean_b=150, mean_a=0, std_r=25, std_g=0, std_b=-25, std_a=10)
        values = np.array([[100.0, 100.0, 100.0, 0.0]])
        out = normalize_channels(values, stats)
        expected = [normalize(100, 50, 25), normalize(100, 50, 0), normalize(100, 150, -25), normalize(0, 0, 10)]
        assert out[0].tolist() == pytest.approx(expected)

    def test_zero_std_emits_no_warning(self):
        stats = ImageStats()
        values = np.full((2, 2, 4), 7.0)
        with np.errstate(all='raise'):
            out = normalize_channels(values, stats)
        assert np.array_equal(out, values)
