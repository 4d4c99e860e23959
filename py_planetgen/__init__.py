"""
Planetary terrain synthesis engine.

Derives planet physics from a validated configuration and turns any world
coordinate into a deterministic height, scalar fields and a material column.
"""

from .core import (
    PlanetConfig,
    PlanetModel,
    PlanetRegistry,
    PlanetValidationError,
    ScalarField,
    TerrainColumn,
    build_column,
    create_model,
    sample_height,
    sample_scalar_field,
    write_column,
)

__version__ = "0.1.0"

__all__ = ['PlanetConfig', 'PlanetModel', 'PlanetRegistry', 'PlanetValidationError', 'ScalarField',
           'TerrainColumn', 'build_column', 'create_model', 'sample_height', 'sample_scalar_field',
           'write_column']
