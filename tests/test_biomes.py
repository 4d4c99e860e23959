"""Tests for biome weights and selection."""

import math

import pytest

from py_planetgen.config import PLANET_PRESETS, get_preset, settings
from py_planetgen.core.biomes import (
    BIOME_VARIANTS,
    DEFAULT_BIOMES,
    BiomeType,
    BiomeWeightCalculator,
    BiomeWeights,
)
from py_planetgen.core.planet_config import Archetype
from py_planetgen.core.planet_model import create_model
from py_planetgen.core.terrain import biome_at


class NothingEligible(BiomeWeightCalculator):
    """Calculator whose gates reject every biome."""

    def raw_weights(self, model):
        return {biome: None for biome in super().raw_weights(model)}


class TestBiomeCatalog:
    """Static biome data."""

    def test_every_biome_has_a_variant(self):
        for biome in BiomeType:
            variant = BIOME_VARIANTS[biome]
            assert variant.biome == biome
            assert variant.recipe
            assert variant.surface_depth > 0

    def test_default_biomes_cover_archetypes(self):
        assert set(DEFAULT_BIOMES) == set(Archetype)

    @pytest.mark.parametrize("archetype,biome", [
        (Archetype.DESERT, BiomeType.VOLCANIC_WASTELAND),
        (Archetype.HOTHOUSE, BiomeType.VOLCANIC_WASTELAND),
        (Archetype.OCEANIC, BiomeType.DEEP_OCEAN),
        (Archetype.ROCKY, BiomeType.CRATERED_PLAINS),
    ])
    def test_default_biome_per_archetype(self, archetype, biome):
        assert DEFAULT_BIOMES[archetype] == biome


class TestBiomeWeightCalculator:
    """Gates, floors and default injection."""

    def test_salt_flats_on_dry_exposed_desert(self, desert_model):
        assert desert_model.traits.rock_exposure > 0.3
        assert desert_model.biome_weights[BiomeType.SALT_FLATS] > 0.0

    def test_salt_flats_gated_out_when_humid(self, make_desert_config):
        model = create_model(make_desert_config(humidity=0.5))
        assert model.biome_weights[BiomeType.SALT_FLATS] == 0.0
        assert model.biome_weights[BiomeType.SCRUBLAND] > 0.0

    def test_dunes_need_formations(self, make_desert_config):
        model = create_model(make_desert_config(has_dunes=False))
        assert model.biome_weights[BiomeType.DUNE_SEA] == 0.0

    def test_hothouse_gets_volcanic_wasteland(self, venus_model):
        assert venus_model.biome_weights[BiomeType.VOLCANIC_WASTELAND] > 0.0

    def test_ocean_biomes_need_liquid(self, earth_model, moon_model):
        assert earth_model.biome_weights[BiomeType.DEEP_OCEAN] > 0.0
        assert BiomeType.DEEP_OCEAN not in moon_model.biome_weights

    def test_weights_stay_within_archetype(self, earth_model):
        assert all(BiomeType.DEEP_OCEAN <= biome <= BiomeType.OCEANIC_HIGHLANDS for biome in earth_model.biome_weights)

    @pytest.mark.parametrize("preset", sorted(PLANET_PRESETS))
    def test_weights_are_floored_and_positive(self, preset):
        weights = create_model(get_preset(preset)).biome_weights
        assert weights.total_weight() > 0
        assert weights.selectable()
        for biome, weight in weights.items():
            assert weight == 0.0 or weight >= 0.5

    def test_custom_floor(self, desert_model):
        weights = BiomeWeightCalculator(min_weight=10.0).calculate(desert_model)
        for biome in weights.selectable():
            assert weights[biome] >= 10.0

    def test_default_injected_when_nothing_eligible(self, desert_model):
        weights = NothingEligible().calculate(desert_model)
        assert weights.selectable() == [BiomeType.VOLCANIC_WASTELAND]
        assert weights[BiomeType.VOLCANIC_WASTELAND] == 1.0

    def test_default_biome_always_selected_after_injection(self, moon_model):
        weights = NothingEligible().calculate(moon_model)
        for u in (0.0, 0.3, 0.999):
            assert weights.choose(u) == BiomeType.CRATERED_PLAINS


class TestBiomeWeights:
    """Cumulative table and selection walk."""

    def test_tie_goes_to_earlier_biome(self):
        weights = BiomeWeights({BiomeType.DUNE_SEA: 1.0, BiomeType.GRANITE_MESAS: 1.0})
        assert weights.choose(0.5) == BiomeType.DUNE_SEA
        assert weights.choose(0.5000001) == BiomeType.GRANITE_MESAS

    def test_zero_weight_is_never_chosen(self):
        weights = BiomeWeights({BiomeType.DUNE_SEA: 0.0, BiomeType.GRANITE_MESAS: 2.0})
        assert weights.choose(0.0) == BiomeType.GRANITE_MESAS
        assert weights.selectable() == [BiomeType.GRANITE_MESAS]

    def test_walk_follows_declaration_order(self):
        weights = BiomeWeights({BiomeType.SALT_FLATS: 1.0, BiomeType.DUNE_SEA: 3.0})
        assert [b for b, _ in weights.cumulative] == [BiomeType.DUNE_SEA, BiomeType.SALT_FLATS]
        assert weights.choose(0.7) == BiomeType.DUNE_SEA
        assert weights.choose(0.8) == BiomeType.SALT_FLATS

    def test_top_of_range_picks_last(self):
        weights = BiomeWeights({BiomeType.DUNE_SEA: 1.0, BiomeType.SCRUBLAND: 1.0})
        assert weights.choose(math.nextafter(1.0, 0.0)) == BiomeType.SCRUBLAND

    @pytest.mark.parametrize("weights", [
        {BiomeType.DUNE_SEA: -1.0, BiomeType.GRANITE_MESAS: 2.0},
        {BiomeType.DUNE_SEA: math.nan},
        {BiomeType.DUNE_SEA: math.inf},
        {BiomeType.DUNE_SEA: 0.0, BiomeType.GRANITE_MESAS: 0.0},
        {},
    ])
    def test_invalid_weights_rejected(self, weights):
        with pytest.raises(ValueError):
            BiomeWeights(weights)

    def test_missing_biome_reads_zero(self):
        weights = BiomeWeights({BiomeType.DUNE_SEA: 1.0})
        assert weights[BiomeType.VOLCANIC_FIELDS] == 0.0


class TestBiomeSelection:
    """Spatial behavior of selection."""

    def test_selection_is_deterministic(self, make_desert_config):
        a = create_model(make_desert_config())
        b = create_model(make_desert_config())
        for x in range(-50000, 50000, 3331):
            for z in range(-50000, 50000, 4447):
                assert biome_at(a, x, z) == biome_at(b, x, z)

    def test_adjacent_coordinates_agree(self, desert_model):
        same = 0
        total = 0
        for x in range(-60000, 60000, 1201):
            for z in range(-60000, 60000, 2903):
                total += 1
                if biome_at(desert_model, x, z) == biome_at(desert_model, x + 1, z):
                    same += 1
        assert same / total >= 0.95

    def test_large_areas_show_variety(self, desert_model):
        seen = {
            biome_at(desert_model, x, z)
            for x in range(-200000, 200000, 4001)
            for z in range(-200000, 200000, 4001)
        }
        assert len(seen) >= 2
        assert seen <= set(desert_model.biome_weights.selectable())

    def test_selected_biome_is_selectable(self, earth_model):
        selectable = set(earth_model.biome_weights.selectable())
        for x in range(0, 100000, 9973):
            assert biome_at(earth_model, x, -x) in selectable

    def test_calculator_scale_reaches_selection(self, make_desert_config):
        model = create_model(make_desert_config(), calculator=BiomeWeightCalculator(noise_scale=0.5))
        assert model.biome_weights.noise_scale == 0.5
        for x in range(-400, 400, 37):
            for z in range(-400, 400, 53):
                u = (model.noise.biome_selector(x * 0.5, z * 0.5) + 1.0) * 0.5
                expected = model.biome_weights.choose(min(max(u, 0.0), 0.999999))
                assert biome_at(model, x, z) == expected

    def test_selector_scale_changes_biome_layout(self, make_desert_config):
        coarse = create_model(make_desert_config())
        fine = create_model(make_desert_config(), calculator=BiomeWeightCalculator(noise_scale=0.5))
        assert coarse.biome_weights.noise_scale == settings.biome_noise_scale
        points = [(x, z) for x in range(-400, 400, 37) for z in range(-400, 400, 53)]
        assert any(biome_at(coarse, x, z) != biome_at(fine, x, z) for x, z in points)


class TestBiomeWeightsIdentity:
    """Equality and hashing of weight tables and models."""

    def test_equal_tables_hash_equal(self):
        a = BiomeWeights({BiomeType.DUNE_SEA: 1.0, BiomeType.SALT_FLATS: 2.0})
        b = BiomeWeights({BiomeType.SALT_FLATS: 2.0, BiomeType.DUNE_SEA: 1.0})
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_scale_is_part_of_identity(self):
        a = BiomeWeights({BiomeType.DUNE_SEA: 1.0}, noise_scale=0.001)
        b = BiomeWeights({BiomeType.DUNE_SEA: 1.0}, noise_scale=0.002)
        assert a != b

    def test_models_are_hashable(self, make_desert_config, earth_model):
        a = create_model(make_desert_config())
        b = create_model(make_desert_config())
        assert isinstance(hash(earth_model), int)
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b, earth_model}) == 2
