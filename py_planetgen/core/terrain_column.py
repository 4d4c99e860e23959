"""
Terrain column construction.

This module implements:
- TerrainColumn: one material (or empty) per vertical slot for an (x, z)
- TerrainColumnBuilder: stacks floor, deep, mid and surface layers under the
  sampled height and fills liquid up to sea level on planets that hold it
- The flat fallback column used when no planet model is available
- ColumnWriter: the contract a host implements to receive columns
"""

import threading
from typing import Iterator, Optional, Protocol, Tuple

import numpy as np
import structlog

from ..config import settings
from .biomes import BiomeVariant, SurfaceRole
from .palette import MaterialId, MaterialPalette

logger = structlog.get_logger()

# Slot codes; index into a column's material table
EMPTY = 0
FLOOR = 1
DEEP = 2
MID = 3
SURFACE = 4
LIQUID = 5

MID_LAYER_DEPTH = 8

FALLBACK_FLOOR: MaterialId = "bedrock"
FALLBACK_ROCK: MaterialId = "stone"
# Fallback floor spans min_y .. min_y + FALLBACK_FLOOR_DEPTH
FALLBACK_FLOOR_DEPTH = 4


class TerrainColumn:
    """Vertical material sequence for one horizontal coordinate."""

    def __init__(
        self,
        x: int,
        z: int,
        min_y: int,
        surface_height: int,
        slots: np.ndarray,
        materials: Tuple[Optional[MaterialId], ...],
        height: Optional[float] = None,
    ):
        self.x = x
        self.z = z
        self.min_y = min_y
        self._surface_height = surface_height
        self._slots = slots
        self._slots.setflags(write=False)
        self._materials = materials
        self.height = float(surface_height) if height is None else height

    @property
    def max_y(self) -> int:
        return self.min_y + len(self._slots) - 1

    def __len__(self) -> int:
        return len(self._slots)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TerrainColumn):
            return NotImplemented
        return (
            self.x == other.x
            and self.z == other.z
            and self.min_y == other.min_y
            and self._surface_height == other._surface_height
            and self.height == other.height
            and list(self.materials()) == list(other.materials())
        )

    def __repr__(self) -> str:
        return f"TerrainColumn(x={self.x}, z={self.z}, surface={self._surface_height})"

    def surface_height(self) -> int:
        """Y of the topmost solid slot."""
        return self._surface_height

    def material_at(self, y: int) -> Optional[MaterialId]:
        """
        Material in slot y, or None for empty.

        Raises:
            IndexError: If y is outside the column's vertical range
        """
        if y < self.min_y or y > self.max_y:
            raise IndexError(f"y={y} outside column range [{self.min_y}, {self.max_y}]")
        return self._materials[self._slots[y - self.min_y]]

    def is_liquid(self, y: int) -> bool:
        if y < self.min_y or y > self.max_y:
            return False
        return int(self._slots[y - self.min_y]) == LIQUID

    def materials(self) -> Iterator[Tuple[int, Optional[MaterialId]]]:
        """Yield (y, material) for every slot, bottom up."""
        for offset, code in enumerate(self._slots):
            yield self.min_y + offset, self._materials[code]

    def layer_codes(self) -> np.ndarray:
        """Read-only slot codes (EMPTY, FLOOR, DEEP, MID, SURFACE, LIQUID)."""
        return self._slots


class ColumnWriter(Protocol):
    """Host-side receiver of generated columns."""

    def set_material(self, x: int, y: int, z: int, material: MaterialId) -> None:
        ...


def write_column(column: TerrainColumn, writer: ColumnWriter) -> int:
    """
    Hand every non-empty slot of a column to the host.

    Returns:
        Number of slots written
    """
    written = 0
    for y, material in column.materials():
        if material is None:
            continue
        writer.set_material(column.x, y, column.z, material)
        written += 1
    return written


class TerrainColumnBuilder:
    """Builds terrain columns over a fixed vertical range."""

    def __init__(self, min_y: Optional[int] = None, max_y: Optional[int] = None):
        """
        Initialize builder.

        Args:
            min_y: Lowest slot, defaults to ``settings.world_min_y``
            max_y: Highest slot, defaults to ``settings.world_max_y``
        """
        self.min_y = settings.world_min_y if min_y is None else min_y
        self.max_y = settings.world_max_y if max_y is None else max_y
        if self.max_y < self.min_y:
            raise ValueError(f"max_y ({self.max_y}) must not be below min_y ({self.min_y})")
        self._ys = np.arange(self.min_y, self.max_y + 1)
        self._fallback_logged = False
        self._fallback_lock = threading.Lock()

    def clamp_height(self, height: float) -> int:
        """Round a height to a slot, clamped to the vertical range."""
        if np.isnan(height):
            height = self.min_y
        elif np.isinf(height):
            height = self.min_y if height < 0 else self.max_y
        return int(min(self.max_y, max(self.min_y, round(height))))

    def build(
        self,
        x: int,
        z: int,
        height: float,
        variant: Optional[BiomeVariant],
        model,
    ) -> TerrainColumn:
        """
        Build the column at (x, z).

        Args:
            x, z: Host world coordinates
            height: Aggregated terrain height
            variant: Biome variant governing the surface
            model: PlanetModel, or None when no model is ready

        Returns:
            TerrainColumn; the flat fallback column when model is None
        """
        if model is None:
            return self.fallback(x, z)

        surface = self.clamp_height(height)
        palette: MaterialPalette = model.palette
        submerged = model.has_liquid and surface < model.sea_level

        surface_depth = variant.surface_depth if variant is not None else 3
        surface_material = self._surface_material(variant, model, surface, submerged)

        ys = self._ys
        slots = np.full(len(ys), EMPTY, dtype=np.int8)
        solid = ys <= surface
        slots[solid] = DEEP
        slots[solid & (ys > surface - surface_depth - MID_LAYER_DEPTH)] = MID
        slots[solid & (ys > surface - surface_depth)] = SURFACE
        slots[solid & (ys == self.min_y)] = FLOOR

        if model.has_liquid:
            slots[(ys > surface) & (ys <= model.sea_level)] = LIQUID

        materials = (None, palette.floor, palette.base_rock, palette.upper_rock, surface_material, palette.liquid)
        return TerrainColumn(x, z, self.min_y, surface, slots, materials, height=float(height))

    def fallback(self, x: int, z: int) -> TerrainColumn:
        """Flat stone column used while no planet model is available."""
        with self._fallback_lock:
            first = not self._fallback_logged
            self._fallback_logged = True
        if first:
            logger.warning("No planet model available, building flat fallback terrain", x=x, z=z)

        surface = self.clamp_height(settings.fallback_surface_height)
        ys = self._ys
        slots = np.full(len(ys), EMPTY, dtype=np.int8)
        slots[ys <= surface] = DEEP
        slots[ys <= min(surface, self.min_y + FALLBACK_FLOOR_DEPTH)] = FLOOR

        materials = (None, FALLBACK_FLOOR, FALLBACK_ROCK, FALLBACK_ROCK, FALLBACK_ROCK, None)
        return TerrainColumn(x, z, self.min_y, surface, slots, materials)

    def _surface_material(self, variant, model, surface: int, submerged: bool) -> MaterialId:
        palette = model.palette
        if submerged:
            return palette.loose_rock

        role = variant.surface if variant is not None else SurfaceRole.CONDITIONS
        if role == SurfaceRole.LOOSE:
            return palette.loose_rock
        if role == SurfaceRole.BASE:
            return palette.base_rock
        if role == SurfaceRole.UPPER:
            return palette.upper_rock
        if role == SurfaceRole.FEATURE:
            return palette.feature_rock

        elevation = min(1.0, max(0.0, (surface - model.sea_level) / 64.0))
        erosion = min(1.0, model.erosion_rate / 3.0)
        return palette.surface_for_conditions(elevation, erosion, model.habitability)
