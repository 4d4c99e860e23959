"""
Validated planet configuration.

A PlanetConfig is the only input to the engine. It is immutable and every
slider carries its documented range; out-of-range values raise pydantic's
ValidationError at construction and are never clamped here.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PlanetAge(str, Enum):
    """Configured planet age."""

    YOUNG = "young"
    MATURE = "mature"
    ANCIENT = "ancient"


class Archetype(str, Enum):
    """World archetypes with their own physics and biome catalogs."""

    DESERT = "desert"
    HOTHOUSE = "hothouse"
    OCEANIC = "oceanic"
    ROCKY = "rocky"

    @property
    def slider_family(self) -> str:
        """Name of the slider block this archetype reads."""
        if self in (Archetype.DESERT, Archetype.HOTHOUSE):
            return "desert"
        return self.value


class CrustComposition(str, Enum):
    SILICATE = "silicate"
    FERROUS = "ferrous"
    BASALT = "basalt"
    REGOLITH = "regolith"
    HADEAN = "hadean"
    CARBON = "carbon"
    SULFUR = "sulfur"
    HALIDE = "halide"
    METAL = "metal"


class AtmosphereComposition(str, Enum):
    OXYGEN_RICH = "oxygen_rich"
    CARBON_DIOXIDE = "carbon_dioxide"
    METHANE = "methane"
    NITROGEN_RICH = "nitrogen_rich"
    NOBLE_GAS_MIXTURE = "noble_gas_mixture"
    WATER_VAPOR_RICH = "water_vapor_rich"
    HYDROGEN_SULFIDE = "hydrogen_sulfide"
    TRACE_ATMOSPHERE = "trace_atmosphere"
    VACUUM = "vacuum"


class RockType(str, Enum):
    SANDSTONE = "sandstone"
    GRANITE = "granite"
    LIMESTONE = "limestone"
    VOLCANIC = "volcanic"


class OceanType(str, Enum):
    TROPICAL = "tropical"
    TEMPERATE = "temperate"
    POLAR = "polar"
    DEEP_ABYSS = "deep_abyss"
    ARCHIPELAGO = "archipelago"


class GeologicalActivity(str, Enum):
    DEAD = "dead"
    DORMANT = "dormant"
    MINIMAL = "minimal"
    MODERATE = "moderate"


class SurfaceType(str, Enum):
    REGOLITH = "regolith"
    BASALTIC = "basaltic"
    ANORTHOSITIC = "anorthositic"
    METALLIC = "metallic"
    FRACTURED = "fractured"


class _Sliders(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class DesertSettings(_Sliders):
    """Sliders for desert and hothouse worlds."""

    surface_temperature: float = Field(45.0, ge=-50, le=150, description="Mean surface temperature in C")
    humidity: float = Field(0.1, ge=0, le=1, description="Atmospheric humidity")
    wind_strength: float = Field(1.0, ge=0, le=2, description="Prevailing wind strength")
    sand_density: float = Field(0.7, ge=0, le=1, description="Fraction of surface covered by sand")
    has_dunes: bool = Field(True, description="Whether dune fields form")
    day_night_temp_diff: float = Field(30.0, ge=0, le=100, description="Diurnal temperature swing in C")
    dust_storm_frequency: float = Field(0.3, ge=0, le=1, description="Relative dust storm frequency")
    dominant_rock: RockType = Field(RockType.SANDSTONE, description="Most exposed rock type")


class OceanicSettings(_Sliders):
    """Sliders for ocean-dominated worlds."""

    ocean_coverage: float = Field(0.7, ge=0, le=1, description="Fraction of surface under water")
    average_ocean_depth: float = Field(40.0, ge=5, le=100, description="Mean ocean depth in blocks")
    continental_shelf_width: float = Field(20.0, ge=0, le=50, description="Shelf width in blocks")
    tidal_range: float = Field(2.0, ge=0, le=10, description="Tidal range in blocks")
    continent_count: int = Field(3, ge=1, le=8, description="Number of continents")
    atmospheric_humidity: float = Field(0.6, ge=0, le=1, description="Atmospheric humidity")
    has_ice_caps: bool = Field(True, description="Whether polar ice caps exist")
    crustal_activity: float = Field(1.0, ge=0, le=2, description="Plate activity")
    dominant_ocean_type: OceanType = Field(OceanType.TEMPERATE, description="Prevailing ocean character")
    weather_intensity: float = Field(1.0, ge=0, le=2, description="Storm and weather strength")


class RockySettings(_Sliders):
    """Sliders for airless or near-airless rocky worlds."""

    crater_density: float = Field(1.0, ge=0, le=2, description="Crater frequency")
    regolith_depth: float = Field(5.0, ge=0, le=20, description="Loose regolith depth in blocks")
    exposed_bedrock_ratio: float = Field(0.3, ge=0, le=1, description="Fraction of exposed bedrock")
    activity: GeologicalActivity = Field(GeologicalActivity.DEAD, description="Residual geological activity")
    mineral_richness: float = Field(1.0, ge=0, le=2, description="Mineral abundance")
    dominant_surface: SurfaceType = Field(SurfaceType.REGOLITH, description="Dominant surface type")
    temperature_variation: float = Field(100.0, ge=0, le=200, description="Day/night temperature swing in C")
    has_subsurface_caverns: bool = Field(False, description="Whether lava tubes or caverns exist")
    impact_history: float = Field(1.0, ge=0, le=2, description="Intensity of past bombardment")


_FAMILY_DEFAULTS = {
    "desert": DesertSettings,
    "oceanic": OceanicSettings,
    "rocky": RockySettings,
}


class PlanetConfig(BaseModel):
    """Immutable input describing one planet."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Unique planet name")
    seed: int = Field(..., ge=-(2 ** 63), le=2 ** 63 - 1, description="64-bit generation seed")
    age: PlanetAge = Field(PlanetAge.MATURE, description="Configured planet age")
    archetype: Archetype = Field(..., description="World archetype")

    circumference: int = Field(40000, gt=0, description="Planet circumference in km")
    distance_from_star: int = Field(150, ge=0, description="Orbital distance in millions of km")
    crust_composition: CrustComposition = Field(CrustComposition.SILICATE, description="Crust composition")
    atmosphere_composition: AtmosphereComposition = Field(
        AtmosphereComposition.NITROGEN_RICH, description="Dominant atmosphere"
    )
    tectonic_activity: float = Field(0.5, ge=0, le=1, description="Plate tectonic activity")
    water_content: float = Field(0.5, ge=0, le=1, description="Surface water abundance")
    atmospheric_density: float = Field(0.5, ge=0, le=1, description="Relative atmospheric density")
    crustal_thickness: int = Field(300, gt=0, description="Crustal thickness in km")
    rotation_period: float = Field(1.0, gt=0, description="Rotation period in Earth days")

    desert: Optional[DesertSettings] = None
    oceanic: Optional[OceanicSettings] = None
    rocky: Optional[RockySettings] = None

    @model_validator(mode="before")
    @classmethod
    def _fill_slider_block(cls, data):
        if not isinstance(data, dict):
            return data
        try:
            family = Archetype(data.get("archetype")).slider_family
        except ValueError:
            return data
        if data.get(family) is None:
            return {**data, family: _FAMILY_DEFAULTS[family]()}
        return data

    @model_validator(mode="after")
    def _check_slider_block(self) -> "PlanetConfig":
        family = self.archetype.slider_family
        for other in _FAMILY_DEFAULTS:
            if other != family and getattr(self, other) is not None:
                raise ValueError(
                    f"{other} sliders cannot be used with archetype '{self.archetype.value}'"
                )
        return self

    @property
    def sliders(self):
        """The slider block matching this planet's archetype."""
        return getattr(self, self.archetype.slider_family)

    @property
    def is_atmosphere_free(self) -> bool:
        return (
            self.atmosphere_composition == AtmosphereComposition.VACUUM
            or self.atmospheric_density == 0.0
        )
