"""
Seeded noise sampling for terrain synthesis.

This module implements:
- Smooth OpenSimplex noise on independent, seed-derived channels
- Ridged noise (folded absolute value) for canyons and flow channels
- Turbulent fractal sums for rough volcanic texture
- Wind-aligned sampling along a noise-driven prevailing direction
"""

import math
from typing import Dict

from opensimplex import OpenSimplex

# Offsets added to the planet seed for each independent channel
CHANNEL_OFFSETS: Dict[str, int] = {
    "master": 0,
    "wind": 1000,
    "erosion": 2000,
    "temperature": 3000,
    "biome": 4000,
    "moisture": 5000,
    "tectonic": 6000,
}

_SEED_MASK = 0x7FFFFFFFFFFFFFFF


def channel_seed(seed: int, channel: str) -> int:
    """Derive the generator seed for a named channel."""
    return (seed + CHANNEL_OFFSETS[channel]) & _SEED_MASK


def _clamp_unit(value: float) -> float:
    return max(-1.0, min(1.0, float(value)))


class NoiseProvider:
    """
    Deterministic multi-channel noise sampler.

    All generators are built in the constructor and only read afterwards, so a
    provider can be shared between sampling threads.
    """

    def __init__(self, seed: int):
        """
        Initialize noise provider.

        Args:
            seed: Planet seed (any signed 64-bit integer)
        """
        self.seed = seed
        self._channels = {
            name: OpenSimplex(seed=channel_seed(seed, name)) for name in CHANNEL_OFFSETS
        }
        self._master = self._channels["master"]

    def __repr__(self) -> str:
        return f"NoiseProvider(seed={self.seed})"

    # Smooth noise

    def sample(self, x: float, y: float, z: float) -> float:
        """Smooth 3D noise in [-1, 1]."""
        return _clamp_unit(self._master.noise3(x, y, z))

    def sample_2d(self, x: float, z: float) -> float:
        """Smooth noise on the y=0 plane, in [-1, 1]."""
        return _clamp_unit(self._master.noise3(x, 0.0, z))

    def channel(self, name: str, x: float, z: float) -> float:
        """Sample a named channel at (x, z), in [-1, 1]."""
        return _clamp_unit(self._channels[name].noise2(x, z))

    # Derived noise shapes

    def ridge(self, x: float, z: float) -> float:
        """Ridged noise in [0, 1]; zero crossings of the base noise become sharp creases."""
        return abs(self.sample_2d(x, z))

    def turbulent(self, x: float, z: float, octaves: int = 4, persistence: float = 0.5) -> float:
        """
        Fractal sum of the base noise.

        Frequency doubles per octave and amplitude is scaled by persistence; the
        sum is normalized by total amplitude so the result stays in [-1, 1].
        """
        if octaves < 1:
            return 0.0

        total = 0.0
        frequency = 1.0
        amplitude = 1.0
        max_value = 0.0

        for _ in range(octaves):
            total += self.sample_2d(x * frequency, z * frequency) * amplitude
            max_value += amplitude
            amplitude *= persistence
            frequency *= 2.0

        if max_value == 0:
            return 0.0
        return _clamp_unit(total / max_value)

    def wind_direction(self, x: float, z: float) -> float:
        """Prevailing wind angle in radians, in [0, 2*pi]."""
        return (self.channel("wind", x * 0.0001, z * 0.0001) + 1.0) * math.pi

    def wind_aligned(self, x: float, z: float, frequency: float) -> float:
        """Sample base noise along axes rotated to the local wind direction."""
        angle = self.wind_direction(x, z)
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        wind_x = x * cos_a - z * sin_a
        wind_z = x * sin_a + z * cos_a
        return self.sample_2d(wind_x * frequency, wind_z * frequency * 0.3)

    # Named channels

    def erosion(self, x: float, z: float) -> float:
        return self.channel("erosion", x, z)

    def temperature(self, x: float, z: float) -> float:
        return self.channel("temperature", x * 0.0001, z * 0.0001)

    def moisture(self, x: float, z: float) -> float:
        return self.channel("moisture", x * 0.0002, z * 0.0002)

    def tectonic(self, x: float, z: float) -> float:
        return self.channel("tectonic", x * 0.0003, z * 0.0003)

    def biome_selector(self, x: float, z: float) -> float:
        return self.channel("biome", x, z)
