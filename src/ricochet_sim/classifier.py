# MIT License (see LICENSE)
"""
Material classification: impacted entity → MaterialProperties.

Dispatch per ImpactedEntity variant:
    SolidObject  → its stuff, or its own definition if it is a raw material
    Roof         → granite-like slab or steel-like sheeting
    Terrain      → ordered rule chain (liquid, loose soil, concrete, cost
                   list, dries-to, burned-from, fallback)
    NoEntity     → Unyielding default

Classification reads only static definitions, so the same entity always
yields equal properties. The single exception is concrete-like terrain,
which draws its failure mode from the caller's random generator.

Reference chains (terrain cost lists, dries-to and burned-from links) are
followed at most max_depth steps; deeper chains resolve to Unyielding.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass

import numpy as np

from . import constants as C
from .materials import (
    ARMOR_BLUNT,
    ARMOR_SHARP,
    BLUNT_DAMAGE_MULTIPLIER,
    MASS,
    MAX_HIT_POINTS,
    SHARP_DAMAGE_MULTIPLIER,
    FailureMode,
    MaterialCatalog,
    MaterialProperties,
    RoofDef,
    StuffCategory,
    StuffDef,
    TerrainDef,
    Thing,
)
from .types import ImpactedEntity, NoEntity, Roof, SolidObject, Terrain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryRule:
    """How one stuff category turns stats into density and hardness."""
    density: float
    multiplier: float
    stats: tuple[str, ...]
    failure_mode: FailureMode


_ARMOR_AND_MULTIPLIERS = (ARMOR_BLUNT, ARMOR_SHARP, BLUNT_DAMAGE_MULTIPLIER, SHARP_DAMAGE_MULTIPLIER)

# Insertion order is lookup precedence when a stuff has several categories.
CATEGORY_TABLE: dict[StuffCategory, CategoryRule] = {
    StuffCategory.METALLIC: CategoryRule(7.8, 60.0, _ARMOR_AND_MULTIPLIERS, FailureMode.MALLEABLE),
    StuffCategory.WOODY: CategoryRule(0.8, 5.0, _ARMOR_AND_MULTIPLIERS, FailureMode.FRANGIBLE),
    StuffCategory.STONY: CategoryRule(
        4.0, 12.0,
        (MASS, MAX_HIT_POINTS, BLUNT_DAMAGE_MULTIPLIER, SHARP_DAMAGE_MULTIPLIER),
        FailureMode.FRANGIBLE,
    ),
    StuffCategory.FABRIC: CategoryRule(0.3, 5.0, (ARMOR_BLUNT, ARMOR_SHARP), FailureMode.FRANGIBLE),
    StuffCategory.LEATHERY: CategoryRule(1.0, 2.0, (ARMOR_BLUNT, ARMOR_SHARP), FailureMode.MALLEABLE),
}

UNYIELDING_DEFAULT = MaterialProperties.of(C.GRANITE, FailureMode.UNYIELDING)

WATER_TAG = "Water"
CONCRETE_TAG = "CE_Concrete"
MOVING_FLUID = "MovingFluid"
DIGGABLE = "Diggable"
FILTH_DIRT = "Filth_Dirt"
FILTH_SAND = "Filth_Sand"
ICE_SCATTER = "SoftGray"
ROCKY_SCATTER = "Rocky"


class MaterialModel:
    """
    Derives MaterialProperties for impacted entities.

    Args:
        catalog: Definitions that name references are resolved against.
        max_depth: Maximum number of reference hops before giving up.
    """

    def __init__(self, catalog: MaterialCatalog | None = None, max_depth: int = C.MAX_CLASSIFY_DEPTH):
        self.catalog = catalog if catalog is not None else MaterialCatalog()
        self.max_depth = max_depth

    def classify(self, entity: ImpactedEntity, rng: np.random.Generator) -> MaterialProperties:
        if isinstance(entity, SolidObject):
            return self.classify_thing(entity.thing)
        if isinstance(entity, Roof):
            return self.classify_roof(entity.roof)
        if isinstance(entity, Terrain):
            return self.classify_terrain(entity.terrain, rng)
        if isinstance(entity, NoEntity):
            return UNYIELDING_DEFAULT
        raise TypeError(f"Unknown impacted entity type: {type(entity)}")

    # -------------------------------------------------------------------------
    # Solid objects and raw materials
    # -------------------------------------------------------------------------

    def classify_thing(self, thing: Thing) -> MaterialProperties:
        if thing.stuff is not None:
            return self.classify_stuff(thing.stuff)
        if isinstance(thing.definition, StuffDef):
            return self.classify_stuff(thing.definition)
        return UNYIELDING_DEFAULT

    def classify_stuff(self, stuff: StuffDef) -> MaterialProperties:
        """
        Category table lookup (maths.md Eq 1).

        hardness = multiplier · Σ stats,  density = category constant
        """
        for category, rule in CATEGORY_TABLE.items():
            if category in stuff.categories:
                hardness = rule.multiplier * sum(stuff.stat(key) for key in rule.stats)
                return MaterialProperties(rule.density, hardness, rule.failure_mode)
        return UNYIELDING_DEFAULT

    # -------------------------------------------------------------------------
    # Roofs
    # -------------------------------------------------------------------------

    def classify_roof(self, roof: RoofDef) -> MaterialProperties:
        # Rock slabs chip rather than deflect cleanly.
        if roof.is_thick or roof.is_natural:
            return MaterialProperties.of(C.GRANITE, FailureMode.FRANGIBLE)
        return MaterialProperties.of(C.STEEL, FailureMode.MALLEABLE)

    # -------------------------------------------------------------------------
    # Terrain
    # -------------------------------------------------------------------------

    def classify_terrain(self, terrain: TerrainDef, rng: np.random.Generator) -> MaterialProperties:
        return self._classify_terrain(terrain, rng, depth=0)

    def _classify_terrain(self, terrain: TerrainDef, rng: np.random.Generator, depth: int) -> MaterialProperties:
        if depth > self.max_depth:
            logger.warning(
                "Terrain reference chain exceeds %d steps at '%s', assuming unyielding",
                self.max_depth, terrain.name,
            )
            return UNYIELDING_DEFAULT

        # 1. Liquids
        if WATER_TAG in terrain.tags or terrain.take_splashes or MOVING_FLUID in terrain.affordances:
            return MaterialProperties.of(C.WATER, FailureMode.LIQUID)

        # 2. Loose ground
        if DIGGABLE in terrain.affordances or terrain.generated_filth == FILTH_DIRT or terrain.take_footprints:
            return MaterialProperties.of(_loose_ground(terrain), FailureMode.FRANGIBLE)

        # 3. Concrete and paving
        if CONCRETE_TAG in terrain.tags or terrain.scatter_type == ROCKY_SCATTER:
            if rng.random() < C.CONCRETE_FRANGIBLE_CHANCE:
                mode = FailureMode.FRANGIBLE
            else:
                mode = FailureMode.MALLEABLE
            return MaterialProperties.of(C.CONCRETE, mode)

        # 4. Built floors: first raw material in the cost list
        for name in terrain.cost_list:
            stuff = self.catalog.stuff(name)
            if stuff is not None:
                return self.classify_stuff(stuff)

        # 5. Wet terrain behaves like its dry form
        dry = self.catalog.terrain(terrain.dries_to)
        if dry is not None:
            return self._classify_terrain(dry, rng, depth + 1)

        # 6. Burned terrain behaves like what it was burned from
        source = self.catalog.burned_source(terrain)
        if source is not None:
            return self._classify_terrain(source, rng, depth + 1)

        return UNYIELDING_DEFAULT


def _loose_ground(terrain: TerrainDef) -> tuple[float, float]:
    """Pick (density, hardness) for diggable terrain."""
    if terrain.dries_to is not None:
        return C.WET_SOIL
    if terrain.scatter_type == ICE_SCATTER:
        return C.ICE
    if terrain.fertility > C.HIGH_FERTILITY:
        return C.CLAY
    if terrain.generated_filth == FILTH_SAND:
        return C.SAND
    return C.LOOSE_SOIL
