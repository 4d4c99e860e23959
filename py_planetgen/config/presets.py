"""
Reference planet configurations.

Earth-, Mars-, Venus- and Moon-like bodies plus a molten hadean world, used as
ready-made inputs and as fixtures for physics sanity checks.
"""

from typing import Dict, List

from ..core.planet_config import (
    Archetype,
    AtmosphereComposition,
    CrustComposition,
    DesertSettings,
    GeologicalActivity,
    OceanicSettings,
    OceanType,
    PlanetAge,
    PlanetConfig,
    RockType,
    RockySettings,
    SurfaceType,
)

PLANET_PRESETS: Dict[str, PlanetConfig] = {
    "earth_like": PlanetConfig(
        name="Terra_Prime",
        seed=12345,
        age=PlanetAge.MATURE,
        archetype=Archetype.OCEANIC,
        circumference=40000,
        distance_from_star=150,
        crust_composition=CrustComposition.SILICATE,
        atmosphere_composition=AtmosphereComposition.OXYGEN_RICH,
        tectonic_activity=0.6,
        water_content=0.7,
        atmospheric_density=0.5,
        crustal_thickness=300,
        rotation_period=1.0,
        oceanic=OceanicSettings(
            ocean_coverage=0.71,
            average_ocean_depth=40.0,
            continental_shelf_width=20.0,
            tidal_range=2.0,
            continent_count=7,
            atmospheric_humidity=0.7,
            has_ice_caps=True,
            crustal_activity=1.0,
            dominant_ocean_type=OceanType.TEMPERATE,
            weather_intensity=1.0,
        ),
    ),
    "mars_like": PlanetConfig(
        name="Rust_World",
        seed=54321,
        age=PlanetAge.ANCIENT,
        archetype=Archetype.DESERT,
        circumference=21000,
        distance_from_star=228,
        crust_composition=CrustComposition.FERROUS,
        atmosphere_composition=AtmosphereComposition.CARBON_DIOXIDE,
        tectonic_activity=0.1,
        water_content=0.1,
        atmospheric_density=0.2,
        crustal_thickness=200,
        rotation_period=1.03,
        desert=DesertSettings(
            surface_temperature=-20.0,
            humidity=0.02,
            wind_strength=1.4,
            sand_density=0.6,
            has_dunes=True,
            day_night_temp_diff=60.0,
            dust_storm_frequency=0.6,
            dominant_rock=RockType.VOLCANIC,
        ),
    ),
    "venus_like": PlanetConfig(
        name="Inferno_Prime",
        seed=98765,
        age=PlanetAge.MATURE,
        archetype=Archetype.HOTHOUSE,
        circumference=38000,
        distance_from_star=108,
        crust_composition=CrustComposition.BASALT,
        atmosphere_composition=AtmosphereComposition.CARBON_DIOXIDE,
        tectonic_activity=0.8,
        water_content=0.0,
        atmospheric_density=0.9,
        crustal_thickness=400,
        rotation_period=243.0,
        desert=DesertSettings(
            surface_temperature=140.0,
            humidity=0.0,
            wind_strength=0.4,
            sand_density=0.2,
            has_dunes=False,
            day_night_temp_diff=5.0,
            dust_storm_frequency=0.1,
            dominant_rock=RockType.VOLCANIC,
        ),
    ),
    "moon_like": PlanetConfig(
        name="Luna_Minor",
        seed=11111,
        age=PlanetAge.ANCIENT,
        archetype=Archetype.ROCKY,
        circumference=11000,
        distance_from_star=150,
        crust_composition=CrustComposition.REGOLITH,
        atmosphere_composition=AtmosphereComposition.VACUUM,
        tectonic_activity=0.0,
        water_content=0.05,
        atmospheric_density=0.0,
        crustal_thickness=100,
        rotation_period=27.3,
        rocky=RockySettings(
            crater_density=1.6,
            regolith_depth=8.0,
            exposed_bedrock_ratio=0.2,
            activity=GeologicalActivity.DEAD,
            mineral_richness=0.8,
            dominant_surface=SurfaceType.ANORTHOSITIC,
            temperature_variation=180.0,
            has_subsurface_caverns=False,
            impact_history=1.8,
        ),
    ),
    "hadean_world": PlanetConfig(
        name="Primordial",
        seed=99999,
        age=PlanetAge.YOUNG,
        archetype=Archetype.HOTHOUSE,
        circumference=35000,
        distance_from_star=120,
        crust_composition=CrustComposition.HADEAN,
        atmosphere_composition=AtmosphereComposition.WATER_VAPOR_RICH,
        tectonic_activity=1.0,
        water_content=0.8,
        atmospheric_density=0.7,
        crustal_thickness=50,
        rotation_period=0.3,
        desert=DesertSettings(
            surface_temperature=150.0,
            humidity=0.3,
            wind_strength=1.0,
            sand_density=0.1,
            has_dunes=False,
            day_night_temp_diff=10.0,
            dust_storm_frequency=0.2,
            dominant_rock=RockType.VOLCANIC,
        ),
    ),
}


def get_preset(name: str) -> PlanetConfig:
    """
    Get a preset configuration by name.

    Raises:
        KeyError: If no preset has that name
    """
    if name not in PLANET_PRESETS:
        raise KeyError(f"Unknown planet preset '{name}'. Available: {', '.join(list_presets())}")
    return PLANET_PRESETS[name]


def list_presets() -> List[str]:
    return sorted(PLANET_PRESETS)
