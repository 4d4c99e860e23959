"""Shared fixtures for planet generation tests."""

import pytest

from py_planetgen.config import get_preset
from py_planetgen.core.planet_config import Archetype, DesertSettings, PlanetConfig, RockType
from py_planetgen.core.planet_model import create_model


def desert_config(name="Dune_World", seed=4242, **desert_overrides):
    """Desert config with optional slider overrides."""
    sliders = dict(
        surface_temperature=45.0,
        humidity=0.05,
        wind_strength=1.0,
        sand_density=0.3,
        has_dunes=True,
        day_night_temp_diff=30.0,
        dust_storm_frequency=0.3,
        dominant_rock=RockType.SANDSTONE,
    )
    sliders.update(desert_overrides)
    return PlanetConfig(
        name=name,
        seed=seed,
        archetype=Archetype.DESERT,
        circumference=30000,
        distance_from_star=140,
        water_content=0.05,
        atmospheric_density=0.3,
        desert=DesertSettings(**sliders),
    )


@pytest.fixture
def make_desert_config():
    return desert_config


@pytest.fixture
def earth_model():
    return create_model(get_preset("earth_like"))


@pytest.fixture
def moon_model():
    return create_model(get_preset("moon_like"))


@pytest.fixture
def venus_model():
    return create_model(get_preset("venus_like"))


@pytest.fixture
def desert_model():
    return create_model(desert_config())
