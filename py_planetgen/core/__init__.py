"""
Core terrain synthesis functionality.
"""

from .noise import NoiseProvider
from .planet_config import (
    Archetype, AtmosphereComposition, CrustComposition, DesertSettings, OceanicSettings,
    PlanetAge, PlanetConfig, RockySettings,
)
from .octaves import Octave, OctaveConfiguration, OctaveContext, OctaveRegistry, OctaveType, create_default_registry
from .biomes import BIOME_VARIANTS, BiomeType, BiomeVariant, BiomeWeightCalculator, BiomeWeights
from .planet_model import PlanetModel, PlanetValidationError, create_model
from .terrain_column import ColumnWriter, TerrainColumn, TerrainColumnBuilder, write_column
from .terrain import ScalarField, TerrainSampler, biome_at, build_column, sample_height, sample_heightmap, sample_scalar_field
from .registry import PlanetRegistry

__all__ = ['NoiseProvider', 'Archetype', 'AtmosphereComposition', 'CrustComposition', 'DesertSettings',
           'OceanicSettings', 'PlanetAge', 'PlanetConfig', 'RockySettings',
           'Octave', 'OctaveConfiguration', 'OctaveContext', 'OctaveRegistry', 'OctaveType',
           'create_default_registry', 'BIOME_VARIANTS', 'BiomeType', 'BiomeVariant',
           'BiomeWeightCalculator', 'BiomeWeights', 'PlanetModel', 'PlanetValidationError', 'create_model',
           'ColumnWriter', 'TerrainColumn', 'TerrainColumnBuilder', 'write_column',
           'ScalarField', 'TerrainSampler', 'biome_at', 'build_column', 'sample_height',
           'sample_heightmap', 'sample_scalar_field', 'PlanetRegistry']
