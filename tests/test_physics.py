"""Tests for planet physics derivation."""

import pytest

from py_planetgen.config import PLANET_PRESETS, get_preset, list_presets
from py_planetgen.core.physics import (
    DesertTraits,
    GeologicalStage,
    OceanicTraits,
    PhysicsCalculator,
    RockyTraits,
    apply_overrides,
    derive_physics,
)
from py_planetgen.core.planet_config import (
    Archetype,
    AtmosphereComposition,
    CrustComposition,
    GeologicalActivity,
    OceanicSettings,
    PlanetAge,
    PlanetConfig,
    RockySettings,
)
from py_planetgen.core.planet_model import create_model


def rocky_config(**overrides):
    fields = dict(name="Rock", seed=3, archetype=Archetype.ROCKY, circumference=15000)
    fields.update(overrides)
    return PlanetConfig(**fields)


class TestScenarios:
    """Reference planet comparisons."""

    def test_earth_heavier_and_denser_than_moon(self, earth_model, moon_model):
        assert earth_model.gravity > moon_model.gravity
        assert earth_model.atmospheric_pressure > moon_model.atmospheric_pressure
        assert moon_model.atmospheric_pressure == 0.0

    def test_venus_hotter_and_less_habitable_than_earth(self, earth_model, venus_model):
        assert venus_model.average_surface_temp > earth_model.average_surface_temp
        assert venus_model.habitability < earth_model.habitability

    def test_earth_is_temperate_with_oceans(self, earth_model):
        assert 0.0 < earth_model.average_surface_temp < 30.0
        assert earth_model.has_liquid
        assert earth_model.habitability > 0.6
        assert earth_model.geological_stage == GeologicalStage.OLD

    def test_moon_is_dry_and_dead(self, moon_model):
        assert not moon_model.has_liquid
        assert moon_model.habitability == 0.0
        assert moon_model.geological_stage == GeologicalStage.DEAD

    def test_hadean_world_loses_water(self):
        model = create_model(get_preset("hadean_world"))
        assert model.water_content == 0.0
        assert model.tectonic_activity >= 0.8
        assert model.geological_stage == GeologicalStage.INFANT
        assert not model.has_liquid
        assert model.habitability <= 0.1

    def test_traits_match_archetype(self, earth_model, moon_model, desert_model):
        assert isinstance(earth_model.traits, OceanicTraits)
        assert isinstance(moon_model.traits, RockyTraits)
        assert isinstance(desert_model.traits, DesertTraits)

    @pytest.mark.parametrize("preset", sorted(PLANET_PRESETS))
    def test_derived_values_in_range(self, preset):
        model = create_model(get_preset(preset))
        assert model.gravity > 0
        assert model.atmospheric_pressure >= 0
        assert 0.0 <= model.erosion_rate <= 3.0
        assert 0.0 <= model.solid_material_exposure <= 1.0
        assert 0.0 <= model.habitability <= 1.0
        assert 0.0 <= model.water_erosion <= 1.0
        assert 0.0 <= model.wind_erosion <= 1.0
        assert model.loose_material_formation_height >= 0


class TestOverrides:
    """Hard physical overrides."""

    def test_vacuum_forces_zero_pressure(self):
        """Sliders that maximize pressure cannot beat a vacuum."""
        config = rocky_config(
            age=PlanetAge.YOUNG,
            atmosphere_composition=AtmosphereComposition.VACUUM,
            atmospheric_density=1.0,
            rocky=RockySettings(activity=GeologicalActivity.MODERATE),
        )
        model = create_model(config)
        assert model.atmospheric_pressure == 0.0
        assert model.atmospheric_density == 0.0

    def test_zero_density_forces_zero_pressure(self):
        config = rocky_config(
            age=PlanetAge.YOUNG,
            atmosphere_composition=AtmosphereComposition.NITROGEN_RICH,
            atmospheric_density=0.0,
            rocky=RockySettings(activity=GeologicalActivity.MODERATE),
        )
        assert create_model(config).atmospheric_pressure == 0.0

    def test_oceanic_vacuum_forces_zero_pressure(self):
        config = PlanetConfig(
            name="Dry_Sea",
            seed=9,
            archetype=Archetype.OCEANIC,
            atmosphere_composition=AtmosphereComposition.VACUUM,
            atmospheric_density=0.9,
            oceanic=OceanicSettings(ocean_coverage=1.0, atmospheric_humidity=1.0, weather_intensity=2.0),
        )
        assert create_model(config).atmospheric_pressure == 0.0

    def test_regolith_crust_caps_tectonic_activity(self):
        config = rocky_config(crust_composition=CrustComposition.REGOLITH, tectonic_activity=0.9)
        assert create_model(config).tectonic_activity <= 0.3

    def test_regolith_crust_keeps_low_tectonic_activity(self):
        config = rocky_config(crust_composition=CrustComposition.REGOLITH, tectonic_activity=0.25)
        assert create_model(config).tectonic_activity == 0.25

    def test_overrides_are_idempotent(self):
        config = rocky_config(
            crust_composition=CrustComposition.REGOLITH,
            tectonic_activity=1.0,
            atmosphere_composition=AtmosphereComposition.VACUUM,
        )
        once = derive_physics(config, 62)
        assert apply_overrides(config, once) == once

    def test_trace_atmosphere_cannot_be_dense(self):
        config = rocky_config(
            atmosphere_composition=AtmosphereComposition.TRACE_ATMOSPHERE, atmospheric_density=0.95
        )
        assert create_model(config).atmospheric_density == 0.1


class TestPhysicsCalculator:
    """Universal formulas and their monotonic relationships."""

    @pytest.fixture
    def calculator(self):
        return PhysicsCalculator()

    def test_size_gravity_scales_with_circumference(self, calculator):
        assert calculator.size_gravity(40075) == pytest.approx(9.81)
        assert calculator.size_gravity(20000) < calculator.size_gravity(40000)

    @pytest.mark.parametrize("crust,tectonic,stage", [
        (CrustComposition.REGOLITH, 0.9, GeologicalStage.DEAD),
        (CrustComposition.HADEAN, 0.0, GeologicalStage.INFANT),
        (CrustComposition.SILICATE, 0.8, GeologicalStage.YOUNG),
        (CrustComposition.SILICATE, 0.5, GeologicalStage.OLD),
        (CrustComposition.BASALT, 0.1, GeologicalStage.DEAD),
    ])
    def test_geological_stage(self, calculator, crust, tectonic, stage):
        assert calculator.geological_stage(crust, tectonic) == stage

    def test_closer_orbit_is_hotter(self, calculator):
        near = calculator.average_surface_temp(80, AtmosphereComposition.NITROGEN_RICH, 0.5, GeologicalStage.OLD)
        far = calculator.average_surface_temp(300, AtmosphereComposition.NITROGEN_RICH, 0.5, GeologicalStage.OLD)
        assert near > far

    def test_greenhouse_gases_warm(self, calculator):
        co2 = calculator.average_surface_temp(150, AtmosphereComposition.CARBON_DIOXIDE, 0.8, GeologicalStage.OLD)
        noble = calculator.average_surface_temp(150, AtmosphereComposition.NOBLE_GAS_MIXTURE, 0.8, GeologicalStage.OLD)
        assert co2 > noble

    def test_star_grazing_orbit_is_finite(self, calculator):
        temperature = calculator.average_surface_temp(0, AtmosphereComposition.VACUUM, 0.0, GeologicalStage.DEAD)
        assert temperature > 1000

    def test_lethal_atmosphere_caps_habitability(self, calculator):
        assert calculator.habitability(
            20.0, AtmosphereComposition.HYDROGEN_SULFIDE, 1.0, CrustComposition.SILICATE, 0.5
        ) <= 0.1

    def test_water_erosion_requires_water(self, calculator):
        assert calculator.water_erosion(20.0, 0.05, GeologicalStage.OLD) == 0.0
        assert calculator.water_erosion(20.0, 0.8, GeologicalStage.OLD) > 0.0

    def test_wind_erosion_requires_atmosphere(self, calculator):
        assert calculator.wind_erosion(0.05, GeologicalStage.OLD) == 0.0
        assert calculator.wind_erosion(0.8, GeologicalStage.OLD) > 0.0


class TestArchetypePhysics:
    """Archetype-specific relationships."""

    def test_hot_desert_has_lower_gravity(self, make_desert_config):
        hot = create_model(make_desert_config(surface_temperature=70.0))
        mild = create_model(make_desert_config(surface_temperature=30.0))
        assert hot.gravity < mild.gravity

    def test_desert_without_dunes_has_no_formations(self, make_desert_config):
        model = create_model(make_desert_config(has_dunes=False))
        assert not model.has_loose_material_formations
        assert model.loose_material_formation_height == 0.0

    def test_ancient_dunes_are_taller(self, make_desert_config):
        mature = create_model(make_desert_config(sand_density=0.8, wind_strength=1.5))
        config = make_desert_config(sand_density=0.8, wind_strength=1.5)
        ancient = create_model(config.model_copy(update={"age": PlanetAge.ANCIENT}))
        assert ancient.loose_material_formation_height > mature.loose_material_formation_height
        assert ancient.loose_material_formation_height <= 40.0

    def test_humid_ocean_world_is_denser(self):
        def ocean(humidity):
            return create_model(PlanetConfig(
                name="Ocean",
                seed=5,
                archetype=Archetype.OCEANIC,
                oceanic=OceanicSettings(atmospheric_humidity=humidity, ocean_coverage=0.5, weather_intensity=0.5),
            ))

        assert ocean(0.9).atmospheric_pressure > ocean(0.1).atmospheric_pressure
        assert ocean(0.9).traits.thermal_regulation > ocean(0.1).traits.thermal_regulation

    def test_oceanic_sea_level_tracks_depth(self):
        shallow = create_model(PlanetConfig(
            name="Shallow", seed=5, archetype=Archetype.OCEANIC,
            oceanic=OceanicSettings(average_ocean_depth=10.0, tidal_range=0.0),
        ))
        deep = create_model(PlanetConfig(
            name="Deep", seed=5, archetype=Archetype.OCEANIC,
            oceanic=OceanicSettings(average_ocean_depth=90.0, tidal_range=0.0),
        ))
        assert shallow.sea_level == 65
        assert deep.sea_level == 89

    def test_craters_roughen_surface(self):
        smooth = create_model(rocky_config(rocky=RockySettings(crater_density=0.2, impact_history=0.2)))
        rough = create_model(rocky_config(rocky=RockySettings(crater_density=1.8, impact_history=1.8)))
        assert rough.traits.surface_roughness > smooth.traits.surface_roughness

    def test_activity_raises_seismicity_and_pressure(self):
        dead = create_model(rocky_config(rocky=RockySettings(activity=GeologicalActivity.DEAD)))
        active = create_model(rocky_config(rocky=RockySettings(activity=GeologicalActivity.MODERATE)))
        assert active.traits.seismic_activity > dead.traits.seismic_activity
        assert active.atmospheric_pressure > dead.atmospheric_pressure

    def test_crater_size_within_bounds(self):
        model = create_model(rocky_config(rocky=RockySettings(impact_history=2.0)))
        assert 8 <= model.traits.typical_crater_size <= 40


class TestModelDeterminism:
    """Same config, same model."""

    def test_models_are_equal(self, make_desert_config):
        assert create_model(make_desert_config()) == create_model(make_desert_config())

    def test_model_is_frozen(self, earth_model):
        with pytest.raises(AttributeError):
            earth_model.gravity = 1.0

    def test_summary_has_key_values(self, earth_model):
        summary = earth_model.summary()
        assert summary["planet"] == "Terra_Prime"
        assert summary["archetype"] == "oceanic"
        assert summary["has_liquid"] is True


class TestPresets:
    """Preset lookup."""

    def test_list_presets(self):
        assert set(list_presets()) == {"earth_like", "mars_like", "venus_like", "moon_like", "hadean_world"}

    def test_unknown_preset(self):
        with pytest.raises(KeyError):
            get_preset("krypton")

    def test_earth_preset_values(self):
        earth = get_preset("earth_like")
        assert earth.oceanic.ocean_coverage == 0.71
        assert earth.oceanic.atmospheric_humidity == 0.7
        assert earth.age != PlanetAge.ANCIENT
