"""
Planet physics derivation.

This module implements:
- Input constraint adjustment (hadean crust, vacuum and trace atmospheres)
- Universal properties: size gravity, geological stage, surface temperature,
  habitability, water and wind erosion
- Archetype physics for desert, oceanic and rocky worlds
- Hard overrides that always win over the weighted formulas

Every coefficient below is a tunable "feel" constant; the formulas only need to
keep their monotonic relationships and documented ranges.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Union

import structlog

from .planet_config import (
    Archetype,
    AtmosphereComposition,
    CrustComposition,
    GeologicalActivity,
    OceanType,
    PlanetAge,
    PlanetConfig,
    SurfaceType,
)

logger = structlog.get_logger()

EARTH_GRAVITY = 9.81
EARTH_CIRCUMFERENCE = 40075.0
ASTRONOMICAL_UNIT_KM = 149_597_870.7
KELVIN_OFFSET = 273.15

# Loose crust tectonic cap: anything above the limit is reset to the value
REGOLITH_TECTONIC_LIMIT = 0.3
REGOLITH_TECTONIC_VALUE = 0.2

GREENHOUSE_EFFECT = {
    AtmosphereComposition.CARBON_DIOXIDE: 100.0,
    AtmosphereComposition.WATER_VAPOR_RICH: 80.0,
    AtmosphereComposition.METHANE: 60.0,
    AtmosphereComposition.HYDROGEN_SULFIDE: 25.0,
    AtmosphereComposition.OXYGEN_RICH: 15.0,
    AtmosphereComposition.NITROGEN_RICH: 15.0,
    AtmosphereComposition.NOBLE_GAS_MIXTURE: 5.0,
    AtmosphereComposition.TRACE_ATMOSPHERE: 2.0,
    AtmosphereComposition.VACUUM: 0.0,
}


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class GeologicalStage(str, Enum):
    """Derived maturity of the crust, independent of the configured age."""

    INFANT = "infant"
    YOUNG = "young"
    OLD = "old"
    DEAD = "dead"


WATER_EROSION_AGE_FACTOR = {
    GeologicalStage.INFANT: 0.1,
    GeologicalStage.YOUNG: 0.5,
    GeologicalStage.OLD: 1.0,
    GeologicalStage.DEAD: 1.5,
}

WIND_EROSION_AGE_FACTOR = {
    GeologicalStage.INFANT: 0.2,
    GeologicalStage.YOUNG: 0.7,
    GeologicalStage.OLD: 1.0,
    GeologicalStage.DEAD: 0.5,
}


@dataclass(frozen=True)
class ConstrainedInputs:
    """Universal inputs after physical consistency adjustments."""

    water_content: float
    atmospheric_density: float
    tectonic_activity: float


@dataclass(frozen=True)
class UniversalProperties:
    """Properties every archetype shares."""

    size_gravity: float
    geological_stage: GeologicalStage
    average_surface_temp: float
    habitability: float
    water_erosion: float
    wind_erosion: float


@dataclass(frozen=True)
class DesertTraits:
    thermal_inertia: float
    rock_exposure: float


@dataclass(frozen=True)
class OceanicTraits:
    thermal_regulation: float
    biodiversity_index: float
    storm_intensity: float
    coastline_complexity: float


@dataclass(frozen=True)
class RockyTraits:
    thermal_inertia: float
    surface_roughness: float
    seismic_activity: float
    typical_crater_size: int
    resource_accessibility: float


Traits = Union[DesertTraits, OceanicTraits, RockyTraits]


@dataclass(frozen=True)
class ArchetypeProperties:
    """Archetype-specific output feeding the final model."""

    gravity_factor: float
    relative_pressure: float
    erosion_rate: float
    has_loose_material_formations: bool
    loose_material_formation_height: float
    solid_material_exposure: float
    sea_level: int
    traits: Traits


class PhysicsCalculator:
    """Universal physics shared by every archetype."""

    def constrain(self, config: PlanetConfig) -> ConstrainedInputs:
        """Adjust inputs that are physically inconsistent with each other."""
        water = config.water_content
        density = config.atmospheric_density
        tectonic = config.tectonic_activity

        if config.crust_composition == CrustComposition.HADEAN:
            if water > 0.1:
                logger.warning("Hadean crust cannot hold surface water", planet=config.name, water=water)
                water = 0.0
            tectonic = max(tectonic, 0.8)

        if config.atmosphere_composition == AtmosphereComposition.VACUUM and density > 0.0:
            logger.warning("Vacuum atmosphere forces zero density", planet=config.name, density=density)
            density = 0.0

        if config.atmosphere_composition == AtmosphereComposition.TRACE_ATMOSPHERE and density > 0.8:
            logger.warning("Trace atmosphere cannot be dense", planet=config.name, density=density)
            density = 0.1

        return ConstrainedInputs(water, density, tectonic)

    def size_gravity(self, circumference: int) -> float:
        """Surface gravity for a planet of Earth density."""
        return EARTH_GRAVITY * (circumference / EARTH_CIRCUMFERENCE)

    def geological_stage(self, crust: CrustComposition, tectonic: float) -> GeologicalStage:
        if crust == CrustComposition.REGOLITH:
            return GeologicalStage.DEAD
        if crust == CrustComposition.HADEAN:
            return GeologicalStage.INFANT
        if tectonic > 0.7:
            return GeologicalStage.YOUNG
        if tectonic > 0.2:
            return GeologicalStage.OLD
        return GeologicalStage.DEAD

    def average_surface_temp(
        self,
        distance_from_star: int,
        atmosphere: AtmosphereComposition,
        density: float,
        stage: GeologicalStage,
    ) -> float:
        """
        Mean surface temperature in degrees Celsius.

        Stellar heating falls off with the square root of distance in AU; a
        star-grazing orbit is treated as 0.01 AU.
        """
        distance_au = max(distance_from_star * 1_000_000.0 / ASTRONOMICAL_UNIT_KM, 0.01)
        kelvin = 279.0 / math.sqrt(distance_au)
        kelvin += GREENHOUSE_EFFECT[atmosphere] * density

        if stage == GeologicalStage.INFANT:
            kelvin += 200.0
        elif stage == GeologicalStage.YOUNG:
            kelvin += 50.0

        return kelvin - KELVIN_OFFSET

    def habitability(
        self,
        temperature: float,
        atmosphere: AtmosphereComposition,
        water: float,
        crust: CrustComposition,
        density: float,
    ) -> float:
        score = 0.0

        if -10 <= temperature <= 40:
            score += 0.4
            if 0 <= temperature <= 30:
                score += 0.2
        elif -50 <= temperature <= 80:
            score += 0.1

        score += water * 0.3

        if atmosphere == AtmosphereComposition.OXYGEN_RICH:
            score += 0.2
        elif atmosphere == AtmosphereComposition.NITROGEN_RICH:
            score += 0.15
        elif atmosphere == AtmosphereComposition.CARBON_DIOXIDE:
            if density < 0.5:
                score += 0.05
        elif atmosphere == AtmosphereComposition.WATER_VAPOR_RICH:
            score += 0.1
        elif atmosphere in (AtmosphereComposition.VACUUM, AtmosphereComposition.HYDROGEN_SULFIDE):
            score = 0.0  # lethal
        else:
            score += 0.02

        if crust == CrustComposition.SILICATE:
            score += 0.1
        elif crust in (CrustComposition.HADEAN, CrustComposition.METAL):
            score = min(score, 0.1)

        return clamp(score, 0.0, 1.0)

    def water_erosion(self, temperature: float, water: float, stage: GeologicalStage) -> float:
        if water < 0.1:
            return 0.0

        erosion = water * 0.5
        if 0 <= temperature <= 100:
            erosion *= 1.5
        elif temperature < 0:
            erosion *= 0.3
        else:
            erosion *= 0.1

        return min(1.0, erosion * WATER_EROSION_AGE_FACTOR[stage])

    def wind_erosion(self, density: float, stage: GeologicalStage) -> float:
        if density < 0.1:
            return 0.0
        return min(1.0, density * 0.6 * WIND_EROSION_AGE_FACTOR[stage])

    def universal(self, config: PlanetConfig, inputs: ConstrainedInputs) -> UniversalProperties:
        stage = self.geological_stage(config.crust_composition, inputs.tectonic_activity)
        temperature = self.average_surface_temp(
            config.distance_from_star,
            config.atmosphere_composition,
            inputs.atmospheric_density,
            stage,
        )
        return UniversalProperties(
            size_gravity=self.size_gravity(config.circumference),
            geological_stage=stage,
            average_surface_temp=temperature,
            habitability=self.habitability(
                temperature,
                config.atmosphere_composition,
                inputs.water_content,
                config.crust_composition,
                inputs.atmospheric_density,
            ),
            water_erosion=self.water_erosion(temperature, inputs.water_content, stage),
            wind_erosion=self.wind_erosion(inputs.atmospheric_density, stage),
        )


class ArchetypePhysics:
    """Interface for archetype-specific derivation."""

    def derive(
        self, config: PlanetConfig, inputs: ConstrainedInputs, universal: UniversalProperties,
        default_sea_level: int,
    ) -> ArchetypeProperties:
        raise NotImplementedError


class DesertPhysics(ArchetypePhysics):
    """Arid worlds: wind-driven erosion, dunes and exposed rock."""

    def derive(self, config, inputs, universal, default_sea_level):
        s = config.desert
        young = config.age == PlanetAge.YOUNG
        ancient = config.age == PlanetAge.ANCIENT

        # Hot, young worlds lose volatiles and read as lighter
        gravity = 0.7
        if young:
            gravity += 0.1
        if s.surface_temperature > 50:
            gravity -= 0.1
        gravity = clamp(gravity, 0.3, 1.2)

        pressure = 0.3 * (0.5 + s.humidity * 0.5)
        if s.surface_temperature > 40:
            pressure *= 0.7
        pressure += s.dust_storm_frequency * 0.2
        pressure = clamp(pressure, 0.1, 1.0)

        erosion = min(s.wind_strength * s.sand_density * (2.0 - s.humidity), 3.0)

        if s.has_dunes:
            dune_height = s.sand_density * s.wind_strength * 15.0
            if ancient:
                dune_height *= 1.5
            dune_height = min(dune_height, 40.0)
        else:
            dune_height = 0.0

        exposure = 1.0 - s.sand_density + erosion * 0.2
        if young:
            exposure *= 0.7
        exposure = clamp(exposure, 0.0, 1.0)

        thermal_inertia = clamp(0.5 - s.sand_density * 0.3 + exposure * 0.4, 0.1, 1.0)

        return ArchetypeProperties(
            gravity_factor=gravity,
            relative_pressure=pressure,
            erosion_rate=erosion,
            has_loose_material_formations=s.has_dunes and dune_height > 0.0,
            loose_material_formation_height=dune_height,
            solid_material_exposure=exposure,
            sea_level=default_sea_level - 12,
            traits=DesertTraits(thermal_inertia=thermal_inertia, rock_exposure=exposure),
        )


COASTLINE_BONUS = {
    OceanType.ARCHIPELAGO: 0.8,
    OceanType.TROPICAL: 0.6,
    OceanType.TEMPERATE: 0.5,
    OceanType.POLAR: 0.3,
    OceanType.DEEP_ABYSS: 0.2,
}


class OceanicPhysics(ArchetypePhysics):
    """Ocean worlds: humid, thermally regulated, storm driven."""

    def derive(self, config, inputs, universal, default_sea_level):
        s = config.oceanic

        gravity = 0.9 + s.ocean_coverage * 0.3
        if config.age == PlanetAge.ANCIENT:
            gravity -= 0.1
        elif config.age == PlanetAge.YOUNG:
            gravity += 0.1
        gravity = clamp(gravity, 0.6, 1.4)

        pressure = clamp(
            0.8 + s.atmospheric_humidity * 0.4 + s.ocean_coverage * 0.3 + s.weather_intensity * 0.2,
            0.5,
            1.5,
        )

        sea_level = 62 + int(s.average_ocean_depth * 0.3) - int(s.tidal_range * 2)

        regulation = clamp(
            s.ocean_coverage * 0.8 + s.average_ocean_depth / 100.0 * 0.4 + s.atmospheric_humidity * 0.3,
            0.1,
            1.0,
        )

        biodiversity = 0.6 + s.ocean_coverage * 0.3 + s.continental_shelf_width / 50.0 * 0.2
        if 0.3 < s.crustal_activity < 1.5:
            biodiversity += 0.2
        biodiversity = clamp(biodiversity + regulation * 0.2, 0.1, 1.0)

        storms = clamp(
            s.weather_intensity * 0.5 + s.ocean_coverage * 0.3 + s.atmospheric_humidity * 0.4
            - regulation * 0.2,
            0.0,
            1.0,
        )

        coastline = clamp(
            s.continent_count / 8.0 * 0.4 + s.crustal_activity * 0.3 + COASTLINE_BONUS[s.dominant_ocean_type],
            0.1,
            1.0,
        )

        erosion = min(universal.water_erosion * 2.0 + universal.wind_erosion + storms * 0.5, 3.0)

        return ArchetypeProperties(
            gravity_factor=gravity,
            relative_pressure=pressure,
            erosion_rate=erosion,
            has_loose_material_formations=False,
            loose_material_formation_height=0.0,
            solid_material_exposure=clamp((1.0 - s.ocean_coverage) * 0.5, 0.0, 1.0),
            sea_level=sea_level,
            traits=OceanicTraits(
                thermal_regulation=regulation,
                biodiversity_index=biodiversity,
                storm_intensity=storms,
                coastline_complexity=coastline,
            ),
        )


ACTIVITY_PRESSURE = {
    GeologicalActivity.DEAD: 0.0,
    GeologicalActivity.DORMANT: 0.02,
    GeologicalActivity.MINIMAL: 0.05,
    GeologicalActivity.MODERATE: 0.1,
}

ACTIVITY_ROUGHNESS = {
    GeologicalActivity.DEAD: 0.0,
    GeologicalActivity.DORMANT: 0.1,
    GeologicalActivity.MINIMAL: 0.2,
    GeologicalActivity.MODERATE: 0.4,
}

ACTIVITY_SEISMIC = {
    GeologicalActivity.DEAD: 0.0,
    GeologicalActivity.DORMANT: 0.1,
    GeologicalActivity.MINIMAL: 0.3,
    GeologicalActivity.MODERATE: 0.7,
}

SURFACE_INERTIA = {
    SurfaceType.METALLIC: 0.4,
    SurfaceType.BASALTIC: 0.3,
    SurfaceType.ANORTHOSITIC: 0.2,
    SurfaceType.REGOLITH: 0.1,
    SurfaceType.FRACTURED: 0.05,
}


class RockyPhysics(ArchetypePhysics):
    """Airless or near-airless worlds shaped by impacts."""

    def derive(self, config, inputs, universal, default_sea_level):
        s = config.rocky
        young = config.age == PlanetAge.YOUNG

        gravity = 0.4
        if config.age == PlanetAge.ANCIENT:
            gravity += 0.2
        elif young:
            gravity += 0.1
        gravity += s.mineral_richness * 0.15
        if s.dominant_surface == SurfaceType.METALLIC:
            gravity += 0.2
        gravity = clamp(gravity, 0.1, 0.8)

        pressure = inputs.atmospheric_density * 0.3 + ACTIVITY_PRESSURE[s.activity]
        if young:
            pressure += 0.05
        pressure = clamp(pressure, 0.0, 0.3)

        thermal_inertia = clamp(
            0.1 + s.regolith_depth / 20.0 * 0.2 + s.exposed_bedrock_ratio * 0.3
            + SURFACE_INERTIA[s.dominant_surface],
            0.05,
            0.8,
        )

        roughness = clamp(
            0.5 + s.crater_density * 0.3 + s.impact_history * 0.2 + ACTIVITY_ROUGHNESS[s.activity]
            + s.exposed_bedrock_ratio * 0.2,
            0.2,
            2.0,
        )

        seismic = ACTIVITY_SEISMIC[s.activity]
        if young:
            seismic += 0.2
        seismic = clamp(seismic, 0.0, 1.0)

        crater_size = 15 + int(s.impact_history * 10)
        if young:
            crater_size += 5
        elif config.age == PlanetAge.ANCIENT:
            crater_size -= 5
        crater_size = int(clamp(crater_size, 8, 40))

        resources = clamp(
            s.mineral_richness * 0.5 + s.exposed_bedrock_ratio * 0.3 + s.crater_density * 0.2
            - s.regolith_depth / 20.0 * 0.3,
            0.1,
            1.0,
        )

        erosion = min(universal.wind_erosion + s.regolith_depth / 20.0 * 0.2 + universal.water_erosion, 3.0)

        return ArchetypeProperties(
            gravity_factor=gravity,
            relative_pressure=pressure,
            erosion_rate=erosion,
            has_loose_material_formations=s.regolith_depth > 0.0,
            loose_material_formation_height=s.regolith_depth * 0.5,
            solid_material_exposure=clamp(s.exposed_bedrock_ratio + s.crater_density * 0.1, 0.0, 1.0),
            sea_level=default_sea_level,
            traits=RockyTraits(
                thermal_inertia=thermal_inertia,
                surface_roughness=roughness,
                seismic_activity=seismic,
                typical_crater_size=crater_size,
                resource_accessibility=resources,
            ),
        )


ARCHETYPE_PHYSICS: Dict[Archetype, ArchetypePhysics] = {
    Archetype.DESERT: DesertPhysics(),
    Archetype.HOTHOUSE: DesertPhysics(),
    Archetype.OCEANIC: OceanicPhysics(),
    Archetype.ROCKY: RockyPhysics(),
}


@dataclass(frozen=True)
class DerivedPhysics:
    """Final physical properties before they are frozen into a PlanetModel."""

    gravity: float
    atmospheric_pressure: float
    erosion_rate: float
    has_loose_material_formations: bool
    loose_material_formation_height: float
    solid_material_exposure: float
    sea_level: int
    has_liquid: bool
    inputs: ConstrainedInputs
    universal: UniversalProperties
    traits: Traits


def apply_overrides(config: PlanetConfig, physics: DerivedPhysics) -> DerivedPhysics:
    """
    Apply hard physical overrides.

    Runs after every weighted formula and is idempotent: applying it to its own
    output changes nothing.
    """
    result = physics

    if config.is_atmosphere_free and result.atmospheric_pressure != 0.0:
        result = replace(result, atmospheric_pressure=0.0)

    inputs = result.inputs
    if (
        config.crust_composition == CrustComposition.REGOLITH
        and inputs.tectonic_activity > REGOLITH_TECTONIC_LIMIT
    ):
        result = replace(result, inputs=replace(inputs, tectonic_activity=REGOLITH_TECTONIC_VALUE))

    return result


def derive_physics(config: PlanetConfig, default_sea_level: int) -> DerivedPhysics:
    """
    Derive every physical property of a validated config.

    Args:
        config: Validated planet configuration
        default_sea_level: Sea level used by archetypes without their own

    Returns:
        DerivedPhysics with overrides applied
    """
    calculator = PhysicsCalculator()
    inputs = calculator.constrain(config)
    universal = calculator.universal(config, inputs)
    archetype = ARCHETYPE_PHYSICS[config.archetype].derive(config, inputs, universal, default_sea_level)

    density_factor = 0.5 + inputs.atmospheric_density
    has_liquid = inputs.water_content >= 0.1 and -20.0 <= universal.average_surface_temp <= 120.0

    physics = DerivedPhysics(
        gravity=universal.size_gravity * archetype.gravity_factor,
        atmospheric_pressure=archetype.relative_pressure * density_factor,
        erosion_rate=archetype.erosion_rate,
        has_loose_material_formations=archetype.has_loose_material_formations,
        loose_material_formation_height=archetype.loose_material_formation_height,
        solid_material_exposure=archetype.solid_material_exposure,
        sea_level=archetype.sea_level,
        has_liquid=has_liquid,
        inputs=inputs,
        universal=universal,
        traits=archetype.traits,
    )
    return apply_overrides(config, physics)
