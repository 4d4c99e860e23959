"""
Immutable planet model derived from a PlanetConfig.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from ..config import settings
from .biomes import BiomeWeightCalculator, BiomeWeights
from .noise import NoiseProvider
from .octaves import OctaveRegistry, create_default_registry
from .palette import MaterialPalette, palette_for
from .physics import GeologicalStage, Traits, derive_physics
from .planet_config import PlanetConfig

logger = structlog.get_logger()


class PlanetValidationError(ValueError):
    """Raised when a planet configuration fails validation."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []


@dataclass(frozen=True)
class PlanetModel:
    """
    Physical properties of one planet.

    Built once by :func:`create_model` and never mutated; safe to share between
    sampling threads. Equality ignores the noise provider and octave registry,
    which are fully determined by the config.
    """

    config: PlanetConfig

    # Core physics
    gravity: float
    atmospheric_pressure: float
    erosion_rate: float
    has_loose_material_formations: bool
    loose_material_formation_height: float
    solid_material_exposure: float

    # Hydrosphere and terrain baseline
    sea_level: int
    has_liquid: bool
    base_height: float

    # Universal properties
    average_surface_temp: float
    habitability: float
    water_erosion: float
    wind_erosion: float
    geological_stage: GeologicalStage

    # Inputs after physical constraints and overrides
    tectonic_activity: float
    water_content: float
    atmospheric_density: float

    traits: Traits
    palette: MaterialPalette
    biome_weights: Optional[BiomeWeights] = None

    noise: NoiseProvider = field(default=None, compare=False, repr=False)
    octaves: OctaveRegistry = field(default=None, compare=False, repr=False)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def seed(self) -> int:
        return self.config.seed

    def summary(self) -> Dict[str, Any]:
        """Key derived values, suitable for structured logging."""
        return {
            "planet": self.config.name,
            "archetype": self.config.archetype.value,
            "gravity": round(self.gravity, 3),
            "atmospheric_pressure": round(self.atmospheric_pressure, 3),
            "erosion_rate": round(self.erosion_rate, 3),
            "average_surface_temp": round(self.average_surface_temp, 1),
            "habitability": round(self.habitability, 3),
            "geological_stage": self.geological_stage.value,
            "sea_level": self.sea_level,
            "has_liquid": self.has_liquid,
        }


def _base_height(config: PlanetConfig, sea_level: int) -> float:
    # Thicker crust stands higher; kept well inside the column range
    height = sea_level + config.crustal_thickness / 10.0 - 20.0
    return float(max(settings.world_min_y + 16, min(settings.world_max_y - 64, height)))


def create_model(
    config: Union[PlanetConfig, Mapping[str, Any]],
    octaves: Optional[OctaveRegistry] = None,
    calculator: Optional[BiomeWeightCalculator] = None,
) -> PlanetModel:
    """
    Derive a PlanetModel from a configuration.

    Args:
        config: A PlanetConfig, or a mapping validated into one
        octaves: Octave registry, defaults to the built-in octaves
        calculator: Biome weight calculator, defaults to settings-driven one

    Returns:
        Fully derived, immutable PlanetModel

    Raises:
        PlanetValidationError: If the configuration is invalid
    """
    if not isinstance(config, PlanetConfig):
        try:
            config = PlanetConfig.model_validate(config)
        except ValidationError as exc:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}" for err in exc.errors()
            )
            raise PlanetValidationError(f"Invalid planet configuration: {details}", exc.errors()) from exc

    logger.info("Creating planet model", planet=config.name, archetype=config.archetype.value)

    physics = derive_physics(config, settings.default_sea_level)

    model = PlanetModel(
        config=config,
        gravity=physics.gravity,
        atmospheric_pressure=physics.atmospheric_pressure,
        erosion_rate=physics.erosion_rate,
        has_loose_material_formations=physics.has_loose_material_formations,
        loose_material_formation_height=physics.loose_material_formation_height,
        solid_material_exposure=physics.solid_material_exposure,
        sea_level=physics.sea_level,
        has_liquid=physics.has_liquid,
        base_height=_base_height(config, physics.sea_level),
        average_surface_temp=physics.universal.average_surface_temp,
        habitability=physics.universal.habitability,
        water_erosion=physics.universal.water_erosion,
        wind_erosion=physics.universal.wind_erosion,
        geological_stage=physics.universal.geological_stage,
        tectonic_activity=physics.inputs.tectonic_activity,
        water_content=physics.inputs.water_content,
        atmospheric_density=physics.inputs.atmospheric_density,
        traits=physics.traits,
        palette=palette_for(config),
        noise=NoiseProvider(config.seed),
        octaves=octaves if octaves is not None else create_default_registry(),
    )

    calculator = calculator if calculator is not None else BiomeWeightCalculator()
    model = replace(model, biome_weights=calculator.calculate(model))

    logger.info("Planet model ready", **model.summary())
    return model
