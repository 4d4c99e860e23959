"""
Biome variants and weighted biome selection.

This module implements:
- The biome catalog: every variant's terrain recipe, base offset and surface role
- Threshold-gated weight rules per archetype with a minimum weight floor
- Default-biome injection when every weight degenerates
- Deterministic cumulative-weight selection from large-scale noise
"""

import math
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Tuple

import structlog

from ..config import settings
from .noise import NoiseProvider
from .octaves import OctaveConfiguration, OctaveType
from .planet_config import Archetype, GeologicalActivity, OceanType, RockType, SurfaceType

if TYPE_CHECKING:
    from .planet_model import PlanetModel

logger = structlog.get_logger()

_BELOW_ONE = math.nextafter(1.0, 0.0)


class BiomeType(IntEnum):
    """Biome variants; declaration order is the selection walk order."""

    # Desert and hothouse
    DUNE_SEA = 0
    GRANITE_MESAS = 1
    LIMESTONE_CANYONS = 2
    SALT_FLATS = 3
    SCRUBLAND = 4
    VOLCANIC_WASTELAND = 5
    # Oceanic
    DEEP_OCEAN = 6
    CONTINENTAL_SHELF = 7
    ARCHIPELAGO = 8
    COASTAL_LOWLANDS = 9
    OCEANIC_HIGHLANDS = 10
    # Rocky
    CRATERED_PLAINS = 11
    REGOLITH_FIELDS = 12
    BASALTIC_MARIA = 13
    FRACTURED_BADLANDS = 14
    VOLCANIC_FIELDS = 15


# Biome names for display
BIOME_NAMES = {
    BiomeType.DUNE_SEA: "Dune Sea",
    BiomeType.GRANITE_MESAS: "Granite Mesas",
    BiomeType.LIMESTONE_CANYONS: "Limestone Canyons",
    BiomeType.SALT_FLATS: "Salt Flats",
    BiomeType.SCRUBLAND: "Scrubland",
    BiomeType.VOLCANIC_WASTELAND: "Volcanic Wasteland",
    BiomeType.DEEP_OCEAN: "Deep Ocean",
    BiomeType.CONTINENTAL_SHELF: "Continental Shelf",
    BiomeType.ARCHIPELAGO: "Archipelago",
    BiomeType.COASTAL_LOWLANDS: "Coastal Lowlands",
    BiomeType.OCEANIC_HIGHLANDS: "Oceanic Highlands",
    BiomeType.CRATERED_PLAINS: "Cratered Plains",
    BiomeType.REGOLITH_FIELDS: "Regolith Fields",
    BiomeType.BASALTIC_MARIA: "Basaltic Maria",
    BiomeType.FRACTURED_BADLANDS: "Fractured Badlands",
    BiomeType.VOLCANIC_FIELDS: "Volcanic Fields",
}


class SurfaceRole(str, Enum):
    """Palette role used for a biome's top layer."""

    LOOSE = "loose"
    BASE = "base"
    UPPER = "upper"
    FEATURE = "feature"
    CONDITIONS = "conditions"  # chosen from local elevation, erosion and habitability


@dataclass(frozen=True)
class BiomeVariant:
    """A terrain look: ordered octave recipe plus surface rules."""

    biome: BiomeType
    recipe: Tuple[OctaveConfiguration, ...]
    base_offset: float = 0.0
    surface: SurfaceRole = SurfaceRole.CONDITIONS
    surface_depth: int = 3

    @property
    def name(self) -> str:
        return BIOME_NAMES[self.biome]


def _octave(octave: OctaveType, **params) -> OctaveConfiguration:
    return OctaveConfiguration.of(octave, **params)


FOUNDATION = OctaveType.FOUNDATION
DUNE = OctaveType.DUNE
MESA = OctaveType.MESA
CANYON = OctaveType.CANYON
DETAIL = OctaveType.DETAIL
VOLCANIC_FLOW = OctaveType.VOLCANIC_FLOW
WIND_EROSION = OctaveType.WIND_EROSION
ROLLING = OctaveType.ROLLING_TERRAIN

BIOME_VARIANTS: Dict[BiomeType, BiomeVariant] = {
    BiomeType.DUNE_SEA: BiomeVariant(
        BiomeType.DUNE_SEA,
        (
            _octave(FOUNDATION, amplitude=8.0, frequency=0.0003),
            _octave(DUNE, max_height=45.0, min_height=1.0, dune_spacing=0.003,
                    sharpness=2.0, elevation_variation=30.0),
            _octave(DETAIL, intensity=0.8, frequency=0.025),
        ),
        surface=SurfaceRole.LOOSE,
        surface_depth=6,
    ),
    BiomeType.GRANITE_MESAS: BiomeVariant(
        BiomeType.GRANITE_MESAS,
        (
            _octave(FOUNDATION, amplitude=20.0, frequency=0.0008),
            _octave(MESA, mesa_height=50.0, plateau_frequency=0.012, steepness=3.5),
            _octave(CANYON, depth=15.0, width=0.015, complexity=0.4, steepness=2.0),
            _octave(DETAIL, intensity=1.2, frequency=0.02),
        ),
        base_offset=10.0,
        surface=SurfaceRole.UPPER,
    ),
    BiomeType.LIMESTONE_CANYONS: BiomeVariant(
        BiomeType.LIMESTONE_CANYONS,
        (
            _octave(FOUNDATION, amplitude=12.0, frequency=0.0006),
            _octave(CANYON, depth=40.0, width=0.004, complexity=0.9, network_density=1.5, steepness=1.8),
            _octave(CANYON, depth=18.0, width=0.012, complexity=0.6, network_density=0.8, steepness=1.2),
            _octave(DETAIL, intensity=0.6, frequency=0.018),
        ),
        base_offset=5.0,
    ),
    BiomeType.SALT_FLATS: BiomeVariant(
        BiomeType.SALT_FLATS,
        (
            _octave(FOUNDATION, amplitude=2.0, frequency=0.0002),
            _octave(CANYON, depth=6.0, width=0.003, complexity=0.2, steepness=0.8),
            _octave(DETAIL, intensity=0.3, frequency=0.035, salt_patterns=True),
            _octave(DETAIL, intensity=0.15, frequency=0.008, salt_patterns=True),
        ),
        base_offset=-8.0,
        surface=SurfaceRole.LOOSE,
        surface_depth=2,
    ),
    BiomeType.SCRUBLAND: BiomeVariant(
        BiomeType.SCRUBLAND,
        (
            _octave(FOUNDATION, amplitude=10.0, frequency=0.0007),
            _octave(ROLLING, hill_height=8.0, hill_frequency=0.012),
            _octave(WIND_EROSION, erosion_strength=1.5),
            _octave(DETAIL, intensity=0.5, frequency=0.03),
        ),
    ),
    BiomeType.VOLCANIC_WASTELAND: BiomeVariant(
        BiomeType.VOLCANIC_WASTELAND,
        (
            _octave(FOUNDATION, amplitude=15.0, frequency=0.0008),
            _octave(VOLCANIC_FLOW, flow_height=20.0, channel_depth=10.0, roughness=0.6),
            _octave(DETAIL, intensity=0.8, frequency=0.02, volcanic=True),
        ),
        base_offset=15.0,
        surface=SurfaceRole.FEATURE,
    ),
    BiomeType.DEEP_OCEAN: BiomeVariant(
        BiomeType.DEEP_OCEAN,
        (
            _octave(FOUNDATION, amplitude=12.0, frequency=0.0008),
            _octave(ROLLING, hill_height=6.0, hill_frequency=0.004),
            _octave(DETAIL, intensity=0.5, frequency=0.02),
        ),
        base_offset=-35.0,
        surface=SurfaceRole.LOOSE,
        surface_depth=4,
    ),
    BiomeType.CONTINENTAL_SHELF: BiomeVariant(
        BiomeType.CONTINENTAL_SHELF,
        (
            _octave(FOUNDATION, amplitude=6.0, frequency=0.001),
            _octave(DETAIL, intensity=0.4, frequency=0.03),
        ),
        base_offset=-12.0,
        surface=SurfaceRole.LOOSE,
        surface_depth=4,
    ),
    BiomeType.ARCHIPELAGO: BiomeVariant(
        BiomeType.ARCHIPELAGO,
        (
            _octave(FOUNDATION, amplitude=18.0, frequency=0.004),
            _octave(ROLLING, hill_height=10.0, hill_frequency=0.01),
            _octave(DETAIL, intensity=0.6, frequency=0.03),
        ),
        base_offset=-4.0,
    ),
    BiomeType.COASTAL_LOWLANDS: BiomeVariant(
        BiomeType.COASTAL_LOWLANDS,
        (
            _octave(FOUNDATION, amplitude=8.0, frequency=0.0006),
            _octave(ROLLING, hill_height=6.0, hill_frequency=0.01),
            _octave(WIND_EROSION, erosion_strength=1.5),
            _octave(DETAIL, intensity=0.4, frequency=0.025),
        ),
        base_offset=4.0,
    ),
    BiomeType.OCEANIC_HIGHLANDS: BiomeVariant(
        BiomeType.OCEANIC_HIGHLANDS,
        (
            _octave(FOUNDATION, amplitude=30.0, frequency=0.0009),
            _octave(ROLLING, hill_height=14.0, hill_frequency=0.008, rock_outcrop_intensity=0.5),
            _octave(DETAIL, intensity=1.0, frequency=0.02),
        ),
        base_offset=25.0,
    ),
    BiomeType.CRATERED_PLAINS: BiomeVariant(
        BiomeType.CRATERED_PLAINS,
        (
            _octave(FOUNDATION, amplitude=10.0, frequency=0.0008),
            _octave(CANYON, depth=8.0, width=0.01, complexity=0.3, steepness=2.5),
            _octave(DETAIL, intensity=0.6, frequency=0.03),
        ),
        surface=SurfaceRole.BASE,
    ),
    BiomeType.REGOLITH_FIELDS: BiomeVariant(
        BiomeType.REGOLITH_FIELDS,
        (
            _octave(FOUNDATION, amplitude=6.0, frequency=0.0005),
            _octave(ROLLING, hill_height=5.0, hill_frequency=0.008),
            _octave(DETAIL, intensity=0.4, frequency=0.02),
        ),
        base_offset=-2.0,
        surface=SurfaceRole.LOOSE,
        surface_depth=5,
    ),
    BiomeType.BASALTIC_MARIA: BiomeVariant(
        BiomeType.BASALTIC_MARIA,
        (
            _octave(FOUNDATION, amplitude=4.0, frequency=0.0004),
            _octave(DETAIL, intensity=0.3, frequency=0.015, volcanic=True),
        ),
        base_offset=-6.0,
        surface=SurfaceRole.BASE,
    ),
    BiomeType.FRACTURED_BADLANDS: BiomeVariant(
        BiomeType.FRACTURED_BADLANDS,
        (
            _octave(FOUNDATION, amplitude=16.0, frequency=0.001),
            _octave(CANYON, depth=14.0, width=0.006, complexity=0.8, network_density=1.4, steepness=1.5),
            _octave(MESA, mesa_height=25.0, plateau_frequency=0.01, steepness=3.0),
            _octave(DETAIL, intensity=1.0, frequency=0.025),
        ),
        base_offset=6.0,
        surface=SurfaceRole.UPPER,
    ),
    BiomeType.VOLCANIC_FIELDS: BiomeVariant(
        BiomeType.VOLCANIC_FIELDS,
        (
            _octave(FOUNDATION, amplitude=14.0, frequency=0.0008),
            _octave(VOLCANIC_FLOW, flow_height=18.0, channel_depth=8.0, roughness=0.7),
            _octave(DETAIL, intensity=0.8, frequency=0.02, volcanic=True),
        ),
        base_offset=12.0,
        surface=SurfaceRole.FEATURE,
    ),
}

# Fallback biome injected when every weight degenerates
DEFAULT_BIOMES = {
    Archetype.DESERT: BiomeType.VOLCANIC_WASTELAND,
    Archetype.HOTHOUSE: BiomeType.VOLCANIC_WASTELAND,
    Archetype.OCEANIC: BiomeType.DEEP_OCEAN,
    Archetype.ROCKY: BiomeType.CRATERED_PLAINS,
}


class BiomeWeights:
    """
    Non-negative weight per biome plus the cumulative table used for selection.

    The cumulative table only holds positive weights and follows BiomeType
    declaration order, so the same weights and uniform sample always choose
    the same biome. ``noise_scale`` is the selector frequency used by
    :meth:`select`.
    """

    def __init__(self, weights: Mapping[BiomeType, float], noise_scale: Optional[float] = None):
        self.noise_scale = settings.biome_noise_scale if noise_scale is None else noise_scale
        ordered = sorted(weights.items(), key=lambda item: item[0])
        for biome, weight in ordered:
            if not math.isfinite(weight) or weight < 0:
                raise ValueError(f"Invalid weight {weight} for {biome.name}")

        self._weights: Dict[BiomeType, float] = dict(ordered)

        cumulative: List[Tuple[BiomeType, float]] = []
        running = 0.0
        for biome, weight in ordered:
            if weight > 0:
                running += weight
                cumulative.append((biome, running))

        if running <= 0:
            raise ValueError("Biome weights must have a positive total")

        self._total = running
        self._cumulative = tuple(cumulative)

    def __getitem__(self, biome: BiomeType) -> float:
        return self._weights.get(biome, 0.0)

    def __contains__(self, biome: BiomeType) -> bool:
        return biome in self._weights

    def __iter__(self):
        return iter(self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BiomeWeights):
            return NotImplemented
        return self._weights == other._weights and self.noise_scale == other.noise_scale

    def __hash__(self) -> int:
        return hash((tuple(self._weights.items()), self.noise_scale))

    def __repr__(self) -> str:
        parts = ", ".join(f"{b.name}={w:.3f}" for b, w in self._weights.items())
        return f"BiomeWeights({parts})"

    def items(self):
        return self._weights.items()

    def total_weight(self) -> float:
        return self._total

    @property
    def cumulative(self) -> Tuple[Tuple[BiomeType, float], ...]:
        return self._cumulative

    def selectable(self) -> List[BiomeType]:
        return [biome for biome, _ in self._cumulative]

    def choose(self, u: float) -> BiomeType:
        """
        Walk the cumulative table for a uniform sample in [0, 1).

        Returns the first biome whose cumulative weight meets the target; on
        ties the earlier-declared biome wins.
        """
        target = u * self._total
        for biome, cumulative in self._cumulative:
            if cumulative >= target:
                return biome
        return self._cumulative[-1][0]

    def select(self, noise: NoiseProvider, x: float, z: float) -> BiomeType:
        """Choose the biome at (x, z) from a large-scale selector noise sample."""
        sample = noise.biome_selector(x * self.noise_scale, z * self.noise_scale)
        u = min(max((sample + 1.0) * 0.5, 0.0), _BELOW_ONE)
        return self.choose(u)


class BiomeWeightCalculator:
    """Computes the biome weight table for a planet."""

    def __init__(self, min_weight: Optional[float] = None, noise_scale: Optional[float] = None):
        """
        Initialize calculator.

        Args:
            min_weight: Floor applied to every biome that passes its gate
            noise_scale: Selector noise frequency stored on every table it builds
        """
        self.min_weight = settings.min_biome_weight if min_weight is None else min_weight
        self.noise_scale = settings.biome_noise_scale if noise_scale is None else noise_scale

    def raw_weights(self, model: "PlanetModel") -> Dict[BiomeType, Optional[float]]:
        """Formula weight per catalog biome; None where the gate fails."""
        archetype = model.config.archetype
        if archetype in (Archetype.DESERT, Archetype.HOTHOUSE):
            return self._desert_weights(model)
        if archetype == Archetype.OCEANIC:
            return self._oceanic_weights(model)
        return self._rocky_weights(model)

    def calculate(self, model: "PlanetModel") -> BiomeWeights:
        """
        Build the weight table for a model.

        Gated-out biomes get 0.0, eligible biomes at least ``min_weight``. If
        nothing is selectable the archetype's default biome gets weight 1.0.
        """
        weights: Dict[BiomeType, float] = {}
        for biome, raw in self.raw_weights(model).items():
            if raw is None or not math.isfinite(raw):
                weights[biome] = 0.0
            else:
                weights[biome] = max(raw, self.min_weight)

        if sum(weights.values()) <= 0:
            default = DEFAULT_BIOMES[model.config.archetype]
            logger.warning(
                "No eligible biomes, injecting default",
                planet=model.config.name,
                biome=default.name,
            )
            weights[default] = 1.0

        table = BiomeWeights(weights, noise_scale=self.noise_scale)
        logger.info(
            "Calculated biome weights",
            planet=model.config.name,
            selectable=[b.name for b in table.selectable()],
            total=round(table.total_weight(), 3),
        )
        return table

    def _desert_weights(self, model):
        s = model.config.desert
        exposure = model.traits.rock_exposure
        hothouse = model.config.archetype == Archetype.HOTHOUSE
        volcanic_rock = s.dominant_rock == RockType.VOLCANIC

        weights = {
            BiomeType.DUNE_SEA: None,
            BiomeType.GRANITE_MESAS: 2.0 + exposure,
            BiomeType.LIMESTONE_CANYONS: 2.0 + s.humidity * 2.0,
            BiomeType.SALT_FLATS: None,
            BiomeType.SCRUBLAND: None,
            BiomeType.VOLCANIC_WASTELAND: None,
        }

        if model.has_loose_material_formations:
            weights[BiomeType.DUNE_SEA] = 2.0 + s.sand_density
        if s.dominant_rock == RockType.GRANITE:
            weights[BiomeType.GRANITE_MESAS] += 1.0
        if s.dominant_rock == RockType.LIMESTONE:
            weights[BiomeType.LIMESTONE_CANYONS] += 1.0
        if s.humidity < 0.15 and exposure > 0.3:
            weights[BiomeType.SALT_FLATS] = 2.0 + (1.0 - s.humidity)
        if s.humidity >= 0.1:
            weights[BiomeType.SCRUBLAND] = 1.0 + s.humidity * 4.0
        if volcanic_rock or hothouse:
            weights[BiomeType.VOLCANIC_WASTELAND] = (
                1.0 + (1.0 if volcanic_rock else 0.0) + (1.0 if s.surface_temperature > 60 else 0.0)
            )

        return weights

    def _oceanic_weights(self, model):
        s = model.config.oceanic
        coastline = model.traits.coastline_complexity

        weights = {
            BiomeType.DEEP_OCEAN: None,
            BiomeType.CONTINENTAL_SHELF: None,
            BiomeType.ARCHIPELAGO: None,
            BiomeType.COASTAL_LOWLANDS: 1.0 + (1.0 - s.ocean_coverage) * 2.0,
            BiomeType.OCEANIC_HIGHLANDS: None,
        }

        if model.has_liquid:
            weights[BiomeType.DEEP_OCEAN] = 1.0 + s.ocean_coverage * 4.0
            if s.continental_shelf_width > 0:
                weights[BiomeType.CONTINENTAL_SHELF] = 1.0 + s.continental_shelf_width / 50.0 * 2.0
        if coastline > 0.5:
            bonus = 1.0 if s.dominant_ocean_type == OceanType.ARCHIPELAGO else 0.0
            weights[BiomeType.ARCHIPELAGO] = 1.0 + coastline * 2.0 + bonus
        if model.tectonic_activity > 0.3:
            weights[BiomeType.OCEANIC_HIGHLANDS] = model.tectonic_activity * 2.0 + s.crustal_activity * 0.5

        return weights

    def _rocky_weights(self, model):
        s = model.config.rocky
        seismic = model.traits.seismic_activity

        weights = {
            BiomeType.CRATERED_PLAINS: 1.0 + s.crater_density * 2.0 + s.impact_history * 0.5,
            BiomeType.REGOLITH_FIELDS: None,
            BiomeType.BASALTIC_MARIA: 1.0 + (1.0 - s.exposed_bedrock_ratio) * 0.5,
            BiomeType.FRACTURED_BADLANDS: None,
            BiomeType.VOLCANIC_FIELDS: None,
        }

        if model.has_loose_material_formations:
            weights[BiomeType.REGOLITH_FIELDS] = 1.0 + s.regolith_depth / 20.0 * 3.0
        if s.dominant_surface == SurfaceType.BASALTIC:
            weights[BiomeType.BASALTIC_MARIA] += 1.5
        if seismic > 0.2 or s.dominant_surface == SurfaceType.FRACTURED:
            weights[BiomeType.FRACTURED_BADLANDS] = 1.0 + seismic * 2.0
        if s.activity == GeologicalActivity.MODERATE:
            weights[BiomeType.VOLCANIC_FIELDS] = 1.0 + seismic

        return weights
