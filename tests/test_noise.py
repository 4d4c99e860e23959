"""Tests for seeded noise sampling."""

import math

import pytest
from py_planetgen.core.noise import CHANNEL_OFFSETS, NoiseProvider, channel_seed


class TestNoiseProvider:
    """Test noise determinism and ranges."""

    @pytest.fixture
    def noise(self):
        return NoiseProvider(12345)

    @pytest.fixture
    def points(self):
        return [(x * 13.7, z * -7.3) for x in range(-10, 10) for z in range(-5, 5)]

    def test_same_seed_same_values(self, points):
        """Two providers with one seed agree everywhere."""
        a = NoiseProvider(777)
        b = NoiseProvider(777)
        for x, z in points:
            assert a.sample_2d(x * 0.01, z * 0.01) == b.sample_2d(x * 0.01, z * 0.01)
            assert a.biome_selector(x, z) == b.biome_selector(x, z)

    def test_different_seeds_differ(self, points):
        a = NoiseProvider(1)
        b = NoiseProvider(2)
        assert any(a.sample_2d(x * 0.01, z * 0.01) != b.sample_2d(x * 0.01, z * 0.01) for x, z in points)

    def test_values_in_unit_range(self, noise, points):
        for x, z in points:
            assert -1.0 <= noise.sample(x * 0.05, 3.0, z * 0.05) <= 1.0
            assert -1.0 <= noise.sample_2d(x * 0.05, z * 0.05) <= 1.0
            assert 0.0 <= noise.ridge(x * 0.05, z * 0.05) <= 1.0
            assert -1.0 <= noise.turbulent(x * 0.05, z * 0.05, 4, 0.5) <= 1.0

    def test_ridge_is_folded_base_noise(self, noise, points):
        for x, z in points:
            assert noise.ridge(x * 0.02, z * 0.02) == abs(noise.sample_2d(x * 0.02, z * 0.02))

    def test_turbulent_single_octave_matches_base(self, noise):
        assert noise.turbulent(0.37, 1.91, 1, 0.5) == noise.sample_2d(0.37, 1.91)

    def test_turbulent_without_octaves_is_zero(self, noise):
        assert noise.turbulent(1.0, 2.0, 0) == 0.0

    def test_wind_direction_is_an_angle(self, noise, points):
        for x, z in points:
            angle = noise.wind_direction(x * 100, z * 100)
            assert 0.0 <= angle <= 2 * math.pi

    def test_wind_aligned_follows_wind_axes(self, noise, points):
        for x, z in points:
            angle = noise.wind_direction(x, z)
            along = x * math.cos(angle) - z * math.sin(angle)
            across = x * math.sin(angle) + z * math.cos(angle)
            value = noise.wind_aligned(x, z, 0.008)
            assert -1.0 <= value <= 1.0
            assert value == pytest.approx(noise.sample_2d(along * 0.008, across * 0.008 * 0.3))

    def test_channels_are_independent(self, noise, points):
        """Named channels do not simply mirror the master channel."""
        assert any(
            noise.channel("erosion", x * 0.01, z * 0.01) != noise.channel("master", x * 0.01, z * 0.01)
            for x, z in points
        )

    def test_channel_seeds_fit_in_signed_64_bits(self):
        for name in CHANNEL_OFFSETS:
            for seed in (0, -1, 2 ** 63 - 1, -(2 ** 63)):
                derived = channel_seed(seed, name)
                assert 0 <= derived < 2 ** 63

    def test_extreme_seed_is_usable(self):
        noise = NoiseProvider(-(2 ** 63))
        assert -1.0 <= noise.sample_2d(0.5, 0.5) <= 1.0
