"""
Material palettes.

Material identifiers are opaque strings; the host resolves them against its own
material registry. The engine only relies on the roles below and the order in
which columns stack them.
"""

from dataclasses import dataclass, replace
from typing import Dict

from .planet_config import Archetype, CrustComposition, PlanetConfig

MaterialId = str


@dataclass(frozen=True)
class MaterialPalette:
    """Per-planet mapping from geological role to material."""

    base_rock: MaterialId      # deep crust
    upper_rock: MaterialId     # layered rock near the surface
    feature_rock: MaterialId   # intrusions on high ground
    loose_rock: MaterialId     # eroded fragments, sand, regolith
    organic_rock: MaterialId   # soil on habitable worlds
    floor: MaterialId = "bedrock"
    liquid: MaterialId = "water"

    def surface_for_conditions(self, elevation: float, erosion: float, habitability: float) -> MaterialId:
        """
        Pick the surface material for normalized local conditions.

        Args:
            elevation: Height above sea level normalized to [0, 1]
            erosion: Local erosion in [0, 1]
            habitability: Planet habitability in [0, 1]
        """
        if habitability > 0.6 and elevation > 0.3 and self.organic_rock:
            return self.organic_rock
        if erosion > 0.5:
            return self.loose_rock
        if elevation > 0.7:
            return self.upper_rock
        return self.base_rock


CRUST_PALETTES: Dict[CrustComposition, MaterialPalette] = {
    CrustComposition.SILICATE: MaterialPalette(
        "stone", "andesite", "granite", "gravel", "grass_block"
    ),
    CrustComposition.FERROUS: MaterialPalette(
        "granite", "red_sandstone", "raw_iron_block", "red_sand", "rooted_dirt"
    ),
    CrustComposition.BASALT: MaterialPalette(
        "basalt", "smooth_basalt", "magma_block", "gray_concrete_powder", "rooted_dirt"
    ),
    CrustComposition.REGOLITH: MaterialPalette(
        "cobblestone", "cobbled_deepslate", "andesite", "gravel", ""
    ),
    CrustComposition.HADEAN: MaterialPalette(
        "magma_block", "blackstone", "blackstone", "netherrack", "", liquid="lava"
    ),
    CrustComposition.CARBON: MaterialPalette(
        "coal_block", "blackstone", "diamond_block", "black_concrete_powder", "podzol"
    ),
    CrustComposition.SULFUR: MaterialPalette(
        "yellow_terracotta", "orange_terracotta", "raw_gold_block", "yellow_concrete_powder", "coarse_dirt"
    ),
    CrustComposition.HALIDE: MaterialPalette(
        "white_terracotta", "calcite", "quartz_block", "white_concrete_powder", "sand"
    ),
    CrustComposition.METAL: MaterialPalette(
        "iron_block", "raw_copper_block", "raw_iron_block", "light_gray_concrete_powder", "grass_block"
    ),
}


def palette_for(config: PlanetConfig) -> MaterialPalette:
    """Build the palette for a planet from its crust and archetype."""
    palette = CRUST_PALETTES[config.crust_composition]

    if config.archetype in (Archetype.DESERT, Archetype.HOTHOUSE):
        # Scorching deserts weather to red sand
        sand = "red_sand" if config.desert.surface_temperature > 45 else "sand"
        palette = replace(palette, loose_rock=sand, upper_rock="sandstone")
    elif config.archetype == Archetype.ROCKY:
        # Airless worlds never grow soil
        palette = replace(palette, organic_rock="")

    return palette
