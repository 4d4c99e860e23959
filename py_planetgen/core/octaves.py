"""
Composable terrain octaves.

This module implements:
- OctaveConfiguration: an octave identifier plus a typed parameter bag
- Octave: the shared contract for height contributions and archetype support
- Concrete octaves: foundation, dune, mesa, canyon, detail, volcanic flow,
  wind erosion and rolling terrain
- OctaveRegistry: lookup from octave type to implementation

A biome's height at (x, z) is the sum of its listed octaves, each evaluated
with its own configuration. Octaves are pure; non-finite results are replaced
by the octave's default contribution.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, Optional, Sequence, Tuple, Union

import structlog

from .noise import NoiseProvider
from .planet_config import Archetype

if TYPE_CHECKING:
    from .planet_model import PlanetModel

logger = structlog.get_logger()

ParameterValue = Union[float, bool]

ALL_ARCHETYPES = frozenset(Archetype)
DESERT_LIKE = frozenset({Archetype.DESERT, Archetype.HOTHOUSE})


class OctaveType(str, Enum):
    """Identifiers of the available octaves."""

    FOUNDATION = "foundation"
    DUNE = "dune"
    MESA = "mesa"
    CANYON = "canyon"
    DETAIL = "detail"
    VOLCANIC_FLOW = "volcanic_flow"
    WIND_EROSION = "wind_erosion"
    ROLLING_TERRAIN = "rolling_terrain"


@dataclass(frozen=True)
class Parameter:
    """Documented default and valid domain of one octave parameter."""

    default: ParameterValue
    minimum: Optional[float] = None
    exclusive: bool = False  # minimum itself is out of domain
    maximum: Optional[float] = None

    def accepts(self, value: float) -> bool:
        if not math.isfinite(value):
            return False
        if self.minimum is not None:
            if self.exclusive and value <= self.minimum:
                return False
            if value < self.minimum:
                return False
        if self.maximum is not None and value > self.maximum:
            return False
        return True


def positive(default: float) -> Parameter:
    return Parameter(default, minimum=0.0, exclusive=True)


def non_negative(default: float) -> Parameter:
    return Parameter(default, minimum=0.0)


def flag(default: bool) -> Parameter:
    return Parameter(default)


@dataclass(frozen=True)
class OctaveConfiguration:
    """
    One layer of a biome's terrain recipe.

    Parameters are stored as sorted (name, value) pairs so configurations are
    hashable and immutable. Lookups never fail: unknown names and wrongly typed
    values resolve to the octave's documented default.
    """

    octave: OctaveType
    parameters: Tuple[Tuple[str, ParameterValue], ...] = ()

    @classmethod
    def of(cls, octave: OctaveType, **parameters: ParameterValue) -> "OctaveConfiguration":
        return cls(octave, tuple(sorted(parameters.items())))

    def as_dict(self) -> Dict[str, ParameterValue]:
        return dict(self.parameters)

    def documented_default(self, name: str) -> Optional[ParameterValue]:
        spec = OCTAVE_CLASSES[self.octave].PARAMETERS.get(name)
        return None if spec is None else spec.default

    def get_float(self, name: str, default: Optional[float] = None) -> float:
        if default is None:
            documented = self.documented_default(name)
            default = 0.0 if documented is None else float(documented)

        value = self.as_dict().get(name)
        # bool is an int subclass; a flag is never a number here
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return default
        value = float(value)
        return value if math.isfinite(value) else default

    def get_bool(self, name: str, default: Optional[bool] = None) -> bool:
        if default is None:
            default = bool(self.documented_default(name))
        value = self.as_dict().get(name)
        return value if isinstance(value, bool) else default

    def with_parameter(self, name: str, value: ParameterValue) -> "OctaveConfiguration":
        params = self.as_dict()
        params[name] = value
        return OctaveConfiguration(self.octave, tuple(sorted(params.items())))


@dataclass(frozen=True)
class OctaveContext:
    """Shared sampling state for one coordinate."""

    model: "PlanetModel"
    noise: NoiseProvider


def smoothstep(edge0: float, edge1: float, x: float) -> float:
    t = max(0.0, min(1.0, (x - edge0) / (edge1 - edge0)))
    return t * t * (3.0 - 2.0 * t)


def signed_power(value: float, power: float) -> float:
    return math.copysign(abs(value) ** power, value)


class Octave:
    """
    Base class for height contributions.

    Subclasses declare their parameters and supported archetypes, and
    implement ``contribute``. Callers use ``generate``, which
    guarantees a finite result.
    """

    octave_type: OctaveType
    name: str = "octave"
    supported_archetypes: FrozenSet[Archetype] = ALL_ARCHETYPES
    PARAMETERS: Dict[str, Parameter] = {}

    def supports(self, archetype: Archetype) -> bool:
        return archetype in self.supported_archetypes

    def param(self, config: OctaveConfiguration, name: str) -> float:
        """Read a numeric parameter, falling back to the default when out of domain."""
        spec = self.PARAMETERS[name]
        value = config.get_float(name, float(spec.default))
        return value if spec.accepts(value) else float(spec.default)

    def flag(self, config: OctaveConfiguration, name: str) -> bool:
        return config.get_bool(name, bool(self.PARAMETERS[name].default))

    def default_contribution(self) -> float:
        return 0.0

    def contribute(self, x: float, z: float, context: OctaveContext, config: OctaveConfiguration) -> float:
        raise NotImplementedError

    def generate(self, x: float, z: float, context: OctaveContext, config: OctaveConfiguration) -> float:
        """Height contribution at (x, z); always finite."""
        try:
            value = self.contribute(x, z, context, config)
        except (OverflowError, ZeroDivisionError, ValueError):
            value = math.nan

        if not math.isfinite(value):
            logger.debug("Non-finite octave output replaced", octave=self.name, x=x, z=z)
            return self.default_contribution()
        return float(value)

    def describe(self) -> str:
        lines = [f"{self.name} parameters:"]
        for pname, spec in self.PARAMETERS.items():
            lines.append(f"- {pname} (default {spec.default})")
        return "\n".join(lines)


class FoundationOctave(Octave):
    """Continental-scale elevation from two octaves of base noise."""

    octave_type = OctaveType.FOUNDATION
    name = "Foundation"
    PARAMETERS = {
        "amplitude": non_negative(10.0),
        "frequency": positive(0.001),
    }

    def contribute(self, x, z, context, config):
        amplitude = self.param(config, "amplitude")
        frequency = self.param(config, "frequency")
        noise = context.noise

        broad = noise.sample_2d(x * frequency, z * frequency) * amplitude
        finer = noise.sample_2d(x * frequency * 2.5, z * frequency * 2.5) * amplitude * 0.5
        return broad + finer


class DuneOctave(Octave):
    """Wind-shaped dune fields over a broad rolling sand sea."""

    octave_type = OctaveType.DUNE
    name = "Dune"
    supported_archetypes = DESERT_LIKE
    PARAMETERS = {
        "max_height": non_negative(35.0),
        "min_height": non_negative(5.0),
        "dune_spacing": positive(0.004),
        "sharpness": positive(2.0),
        "elevation_variation": non_negative(30.0),
    }

    def contribute(self, x, z, context, config):
        model = context.model
        if not model.has_loose_material_formations:
            return 0.0

        min_height = self.param(config, "min_height")
        max_height = max(self.param(config, "max_height"), min_height, model.loose_material_formation_height)
        spacing = self.param(config, "dune_spacing")
        sharpness = self.param(config, "sharpness")
        variation = self.param(config, "elevation_variation")
        noise = context.noise

        # Broad elevation shifts across the whole field
        elevation = (noise.sample_2d(x * 0.0002, z * 0.0002) + 1.0) * 0.5 * variation
        elevation += noise.sample_2d(x * 0.0006, z * 0.0006) * variation * 0.5

        crest = 1.0 / sharpness
        pattern = (
            signed_power(noise.sample_2d(x * spacing * 0.5, z * spacing * 0.3), crest) * 0.4
            + signed_power(noise.sample_2d(x * spacing, z * spacing * 0.6), crest) * 0.6
            + noise.sample_2d(x * spacing * 1.8, z * spacing * 1.2) * 0.3
        )
        dune = smoothstep(0.0, 1.0, max(0.0, min(1.0, (pattern + 1.2) / 2.4)))

        channels = smoothstep(0.0, 1.0, abs(noise.wind_aligned(x, z, spacing * 2.0)))
        dune *= 0.4 + channels * 0.6

        contribution = min_height + dune * (max_height - min_height)
        height = elevation + contribution

        if contribution > min_height + 5.0:
            ripples = noise.sample_2d(x * 0.02, z * 0.015) + noise.sample_2d(x * 0.08, z * 0.06) * 0.5
            height += ripples * min(1.0, (contribution - min_height) / 15.0)

        return height


class MesaOctave(Octave):
    """Flat-topped plateaus with stratified, eroded flanks."""

    octave_type = OctaveType.MESA
    name = "Mesa"
    supported_archetypes = DESERT_LIKE | {Archetype.ROCKY}
    PARAMETERS = {
        "mesa_height": non_negative(60.0),
        "plateau_frequency": positive(0.008),
        "steepness": positive(4.0),
        "erosion_intensity": non_negative(0.6),
        "layering": non_negative(0.8),
    }

    def contribute(self, x, z, context, config):
        height = self.param(config, "mesa_height")
        freq = self.param(config, "plateau_frequency")
        steepness = self.param(config, "steepness")
        erosion_intensity = self.param(config, "erosion_intensity")
        layering = self.param(config, "layering")
        noise = context.noise

        placement = noise.sample_2d(x * freq * 0.6, z * freq * 0.4)
        secondary = noise.sample_2d(x * freq * 1.2, z * freq * 0.8) * 0.7
        pattern = placement + secondary * 0.6

        mask = min(1.0, max(0.0, pattern + 0.4) ** steepness)

        strata = math.sin(noise.sample_2d(x * freq * 8.0, z * freq * 8.0) * 12.0) * layering
        layered = height * mask + strata * mask * (1.0 - mask) * 4.0

        top = 0.0
        if mask > 0.8:
            top = noise.sample_2d(x * freq * 4.0, z * freq * 4.0) * 2.0

        erosion = 0.0
        if 0.1 < mask < 0.9:
            erosion = (
                noise.ridge(x * freq * 3.0, z * freq * 3.0)
                * erosion_intensity * height * 0.3 * math.sin(mask * math.pi)
            )

        pedestal = 0.0
        if 0.05 < mask < 0.3:
            pedestal = max(0.0, noise.sample_2d(x * freq * 6.0, z * freq * 6.0)) * height * 0.15

        result = layered + top - erosion + pedestal
        if mask > 0.7:
            result += noise.sample_2d(x * 0.04, z * 0.04) * 0.8

        return max(0.0, result)


class CanyonOctave(Octave):
    """Branching canyon networks carved as negative height."""

    octave_type = OctaveType.CANYON
    name = "Canyon"
    supported_archetypes = DESERT_LIKE | {Archetype.ROCKY}
    PARAMETERS = {
        "depth": non_negative(20.0),
        "width": positive(0.005),
        "complexity": non_negative(0.5),
        "network_density": non_negative(1.0),
        "steepness": positive(1.0),
    }

    def contribute(self, x, z, context, config):
        depth = self.param(config, "depth")
        if depth == 0.0:
            return 0.0
        width = self.param(config, "width")
        complexity = self.param(config, "complexity")
        density = self.param(config, "network_density")
        steepness = self.param(config, "steepness")
        noise = context.noise

        primary = noise.ridge(x * width, z * width)
        secondary = noise.ridge(x * width * 2.0, z * width * 2.0) * 0.6
        detail = noise.ridge(x * width * 4.0, z * width * 4.0) * 0.3

        combined = min(primary, secondary * density)
        combined = min(combined, detail * complexity)

        carve = max(0.0, 1.0 - combined) * depth
        if steepness != 1.0:
            carve = (carve / depth) ** steepness * depth

        return -carve


class DetailOctave(Octave):
    """Low-amplitude surface texture with optional pattern terms."""

    octave_type = OctaveType.DETAIL
    name = "Detail"
    PARAMETERS = {
        "intensity": non_negative(0.1),
        "frequency": positive(0.01),
        "salt_patterns": flag(False),
        "volcanic": flag(False),
    }

    def contribute(self, x, z, context, config):
        intensity = self.param(config, "intensity")
        freq = self.param(config, "frequency")
        noise = context.noise

        value = noise.sample_2d(x * freq, z * freq) * intensity
        value += noise.sample_2d(x * freq * 3.0, z * freq * 3.0) * intensity * 0.3

        if self.flag(config, "salt_patterns"):
            # crystalline crusts
            value += abs(noise.sample_2d(x * freq * 8.0, z * freq * 8.0) * intensity * 0.5)

        if self.flag(config, "volcanic"):
            value += noise.ridge(x * freq * 2.0, z * freq * 2.0) * intensity * 0.8

        return value


class VolcanicFlowOctave(Octave):
    """Lava flow buildup cut by cooled flow channels."""

    octave_type = OctaveType.VOLCANIC_FLOW
    name = "VolcanicFlow"
    supported_archetypes = frozenset({Archetype.HOTHOUSE, Archetype.ROCKY})
    PARAMETERS = {
        "flow_height": non_negative(20.0),
        "channel_depth": non_negative(10.0),
        "roughness": non_negative(0.6),
    }

    def contribute(self, x, z, context, config):
        flow_height = self.param(config, "flow_height")
        channel_depth = self.param(config, "channel_depth")
        roughness = self.param(config, "roughness")
        noise = context.noise

        channels = noise.ridge(x * 0.008, z * 0.012)
        buildup = (noise.sample_2d(x * 0.002, z * 0.002) + 1.0) * 0.5 * flow_height
        rough = noise.turbulent(x * 0.01, z * 0.01, 3, 0.5) * roughness * flow_height * 0.3

        height = buildup + rough
        if channels < 0.3:
            height -= channel_depth * (0.3 - channels) * 3.0
        return height


class WindErosionOctave(Octave):
    """
    Streaked wind erosion.

    A stretched noise channel gates each coordinate into or out of a streak.
    Inside a streak height is removed, more toward the south and twice as much
    where the uneroded terrain is already high; outside, a little material is
    deposited.
    """

    octave_type = OctaveType.WIND_EROSION
    name = "WindErosion"
    supported_archetypes = DESERT_LIKE | {Archetype.OCEANIC}
    PARAMETERS = {
        "erosion_strength": non_negative(8.0),
        "streak_threshold": Parameter(0.4, minimum=0.0, maximum=1.0),
        "elevation_threshold": Parameter(10.0),
    }

    def contribute(self, x, z, context, config):
        strength = self.param(config, "erosion_strength")
        threshold = self.param(config, "streak_threshold")
        elevation_threshold = self.param(config, "elevation_threshold")
        noise = context.noise

        base_height = noise.sample_2d(x * 0.003, z * 0.003) * 20.0
        streak = abs(noise.sample_2d(x * 0.02, z * 0.008))

        if streak < threshold:
            gradient = math.sin(z * 0.01) * 0.5 + 0.5
            amount = -strength * (1.0 + gradient) * 2.0
            if base_height > elevation_threshold:
                amount *= 2.0
            return amount

        return strength * 0.3


class RollingTerrainOctave(Octave):
    """Gentle hills with rock outcrops, dry washes and sediment deposits."""

    octave_type = OctaveType.ROLLING_TERRAIN
    name = "RollingTerrain"
    supported_archetypes = DESERT_LIKE | {Archetype.OCEANIC, Archetype.ROCKY}
    PARAMETERS = {
        "hill_height": non_negative(8.0),
        "hill_frequency": positive(0.012),
        "rock_outcrop_intensity": non_negative(0.3),
        "wash_depth": non_negative(2.0),
        "undulation_strength": non_negative(1.0),
    }

    def contribute(self, x, z, context, config):
        hill_height = self.param(config, "hill_height")
        freq = self.param(config, "hill_frequency")
        outcrop_intensity = self.param(config, "rock_outcrop_intensity")
        wash_depth = self.param(config, "wash_depth")
        undulation = self.param(config, "undulation_strength")
        noise = context.noise

        hills = noise.sample_2d(x * freq * 0.4, z * freq * 0.6) * hill_height * 0.7
        hills += noise.sample_2d(x * freq, z * freq * 0.8) * hill_height * 0.4
        hills += noise.sample_2d(x * freq * 2.5, z * freq * 2.0) * hill_height * 0.2
        height = hills * undulation

        outcrop = noise.sample_2d(x * freq * 5.0, z * freq * 4.0)
        if outcrop > 0.6:
            height += ((outcrop - 0.6) / 0.4) ** 1.5 * hill_height * outcrop_intensity

        wash = noise.ridge(x * freq * 3.0, z * freq * 2.5)
        if wash < 0.3:
            height -= (0.3 - wash) / 0.3 * wash_depth

        deposit = noise.sample_2d(x * freq * 1.8, z * freq * 2.2)
        if deposit > 0.2:
            height += (deposit - 0.2) * hill_height * 0.3

        height += noise.sample_2d(x * 0.04, z * 0.035) * 0.6
        return height


OCTAVE_CLASSES = {
    OctaveType.FOUNDATION: FoundationOctave,
    OctaveType.DUNE: DuneOctave,
    OctaveType.MESA: MesaOctave,
    OctaveType.CANYON: CanyonOctave,
    OctaveType.DETAIL: DetailOctave,
    OctaveType.VOLCANIC_FLOW: VolcanicFlowOctave,
    OctaveType.WIND_EROSION: WindErosionOctave,
    OctaveType.ROLLING_TERRAIN: RollingTerrainOctave,
}


class OctaveRegistry:
    """Maps octave types to implementations for one generation setup."""

    def __init__(self, octaves: Optional[Iterable[Octave]] = None):
        self._octaves: Dict[OctaveType, Octave] = {}
        for octave in octaves or ():
            self.register(octave)

    def register(self, octave: Octave) -> None:
        self._octaves[octave.octave_type] = octave

    def get(self, octave_type: OctaveType) -> Optional[Octave]:
        return self._octaves.get(octave_type)

    def __contains__(self, octave_type: OctaveType) -> bool:
        return octave_type in self._octaves

    def __len__(self) -> int:
        return len(self._octaves)

    def evaluate(
        self,
        recipe: Sequence[OctaveConfiguration],
        x: float,
        z: float,
        context: OctaveContext,
    ) -> float:
        """
        Sum the contributions of a recipe at (x, z).

        Octaves missing from the registry or not supporting the planet's
        archetype contribute nothing.
        """
        archetype = context.model.config.archetype
        total = 0.0
        for config in recipe:
            octave = self._octaves.get(config.octave)
            if octave is None or not octave.supports(archetype):
                continue
            total += octave.generate(x, z, context, config)
        return total


def create_default_registry() -> OctaveRegistry:
    """Registry holding one instance of every built-in octave."""
    return OctaveRegistry(cls() for cls in OCTAVE_CLASSES.values())
