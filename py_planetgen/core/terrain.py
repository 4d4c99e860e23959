"""
Per-coordinate terrain sampling.

This module is the engine's host-facing surface: height sampling, scalar
fields, biome lookup and column building for an existing PlanetModel. All of
it is pure with respect to the model, so hosts may call it from any number of
worker threads.
"""

from enum import Enum
from typing import Optional, Union

import numpy as np

from ..config import settings
from .biomes import BIOME_VARIANTS, BiomeType, BiomeVariant
from .octaves import OctaveContext
from .planet_config import Archetype
from .planet_model import PlanetModel, create_model
from .terrain_column import TerrainColumn, TerrainColumnBuilder


class ScalarField(str, Enum):
    """Scalar fields exposed per coordinate."""

    TEMPERATURE = "temperature"
    MOISTURE = "moisture"
    TECTONIC_ACTIVITY = "tectonic_activity"
    EROSION = "erosion"
    HABITABILITY = "habitability"


def _unit(value: float) -> float:
    return max(0.0, min(1.0, value))


class TerrainSampler:
    """Samples heights, fields and columns from planet models."""

    def __init__(self, builder: Optional[TerrainColumnBuilder] = None):
        """
        Initialize sampler.

        Args:
            builder: Column builder, defaults to the settings vertical range
        """
        self.builder = builder if builder is not None else TerrainColumnBuilder()

    def biome_at(self, model: PlanetModel, x: float, z: float) -> BiomeType:
        return model.biome_weights.select(model.noise, x, z)

    def variant_at(self, model: PlanetModel, x: float, z: float) -> BiomeVariant:
        return BIOME_VARIANTS[self.biome_at(model, x, z)]

    def sample_height(self, model: Optional[PlanetModel], x: float, z: float) -> float:
        if model is None:
            return float(settings.fallback_surface_height)
        return self._height(model, x, z, self.biome_at(model, x, z))

    def _height(self, model: PlanetModel, x: float, z: float, biome: BiomeType) -> float:
        variant = BIOME_VARIANTS[biome]
        base = model.base_height + variant.base_offset
        context = OctaveContext(model=model, noise=model.noise)
        return base + model.octaves.evaluate(variant.recipe, x, z, context)

    def sample_scalar_field(
        self, model: PlanetModel, x: float, z: float, field: Union[ScalarField, str]
    ) -> float:
        """
        Sample a scalar field at (x, z).

        Raises:
            ValueError: If the field name is unknown
        """
        field = ScalarField(field)
        noise = model.noise

        if field == ScalarField.TEMPERATURE:
            return model.average_surface_temp + noise.temperature(x, z) * self._temperature_swing(model)

        if field == ScalarField.MOISTURE:
            return self._moisture(model, x, z)

        if field == ScalarField.TECTONIC_ACTIVITY:
            return _unit(model.tectonic_activity + noise.tectonic(x, z) * 0.15)

        if field == ScalarField.EROSION:
            local = 0.75 + 0.25 * noise.erosion(x * 0.002, z * 0.002)
            return _unit(model.erosion_rate / 3.0 * local)

        return _unit(model.habitability * (0.8 + 0.2 * self._moisture(model, x, z)))

    def _temperature_swing(self, model: PlanetModel) -> float:
        config = model.config
        if config.archetype in (Archetype.DESERT, Archetype.HOTHOUSE):
            return config.desert.day_night_temp_diff * 0.5
        if config.archetype == Archetype.ROCKY:
            return config.rocky.temperature_variation * 0.5
        return 10.0 * (1.0 - model.traits.thermal_regulation)

    def _moisture(self, model: PlanetModel, x: float, z: float) -> float:
        config = model.config
        base = model.water_content
        if config.archetype in (Archetype.DESERT, Archetype.HOTHOUSE):
            base = max(base, config.desert.humidity)
        elif config.archetype == Archetype.OCEANIC:
            base = max(base, config.oceanic.atmospheric_humidity)
        return _unit(base + model.noise.moisture(x, z) * 0.2)

    def build_column(self, model: Optional[PlanetModel], x: int, z: int) -> TerrainColumn:
        """Build the column at (x, z); the flat fallback column when model is None."""
        if model is None:
            return self.builder.fallback(x, z)

        biome = self.biome_at(model, x, z)
        height = self._height(model, x, z, biome)
        return self.builder.build(x, z, height, BIOME_VARIANTS[biome], model)

    def sample_heightmap(self, model: Optional[PlanetModel], origin_x: int, origin_z: int, size: int = 16) -> np.ndarray:
        """
        Heights for a square block of coordinates.

        Returns:
            Array of shape (size, size) where ``[i, j]`` is the height at
            ``(origin_x + i, origin_z + j)``
        """
        if size <= 0:
            raise ValueError(f"size must be positive, got {size}")

        heights = np.empty((size, size), dtype=np.float64)
        for i in range(size):
            for j in range(size):
                heights[i, j] = self.sample_height(model, origin_x + i, origin_z + j)
        return heights


_default_sampler = TerrainSampler()


def sample_height(model: Optional[PlanetModel], x: float, z: float) -> float:
    """Aggregated terrain height at (x, z)."""
    return _default_sampler.sample_height(model, x, z)


def sample_scalar_field(model: PlanetModel, x: float, z: float, field: Union[ScalarField, str]) -> float:
    """Scalar field value at (x, z)."""
    return _default_sampler.sample_scalar_field(model, x, z, field)


def build_column(model: Optional[PlanetModel], x: int, z: int) -> TerrainColumn:
    """Complete terrain column at (x, z)."""
    return _default_sampler.build_column(model, x, z)


def biome_at(model: PlanetModel, x: float, z: float) -> BiomeType:
    """Biome selected at (x, z)."""
    return _default_sampler.biome_at(model, x, z)


def sample_heightmap(model: Optional[PlanetModel], origin_x: int, origin_z: int, size: int = 16) -> np.ndarray:
    """Heights for a ``size`` x ``size`` block starting at the origin."""
    return _default_sampler.sample_heightmap(model, origin_x, origin_z, size)


__all__ = [
    'ScalarField', 'TerrainSampler', 'create_model', 'sample_height', 'sample_scalar_field',
    'build_column', 'biome_at', 'sample_heightmap',
]
