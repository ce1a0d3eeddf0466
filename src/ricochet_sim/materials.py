# MIT License (see LICENSE)
"""
Material definitions for ricochet resolution.

Static definitions describe what an impacted entity is made of: raw
materials ("stuff") with their category tags and stat values, the things
built from them, terrain types and roof types. MaterialProperties is the
per-impact summary derived from these definitions by the classifier in
classifier.py.

Definitions reference each other by name (a terrain's cost list names a
stuff, a terrain dries to another terrain). MaterialCatalog resolves
those names.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class FailureMode(Enum):
    """How an impacted surface deforms, which selects the ricochet law."""
    UNYIELDING = "unyielding"   # hard and non-deformable
    MALLEABLE = "malleable"     # ductile: metals, leather, thin roofing
    FRANGIBLE = "frangible"     # brittle or granular: wood, stone, soil
    LIQUID = "liquid"           # no solid resistance


class StuffCategory(Enum):
    """Material family used to derive density and hardness from stats."""
    METALLIC = "metallic"
    WOODY = "woody"
    STONY = "stony"
    FABRIC = "fabric"
    LEATHERY = "leathery"


# Stat keys understood by the category table.
ARMOR_BLUNT = "armor_blunt"
ARMOR_SHARP = "armor_sharp"
BLUNT_DAMAGE_MULTIPLIER = "blunt_damage_multiplier"
SHARP_DAMAGE_MULTIPLIER = "sharp_damage_multiplier"
MASS = "mass"
MAX_HIT_POINTS = "max_hit_points"


@dataclass(frozen=True)
class MaterialProperties:
    """
    Physical summary of an impacted surface.

    Attributes:
        density: Density in kg/L.
        hardness: Yield/armor proxy in GPa-scaled units.
        failure_mode: Deformation class of the surface.
    """
    density: float
    hardness: float
    failure_mode: FailureMode

    @classmethod
    def of(cls, constants: tuple[float, float], mode: FailureMode) -> "MaterialProperties":
        """Build from a (density, hardness) pair in constants.py."""
        density, hardness = constants
        return cls(density=density, hardness=hardness, failure_mode=mode)


@dataclass(frozen=True)
class StuffDef:
    """
    A raw material that things can be built from (steel, wood, granite blocks).

    Attributes:
        name: Unique definition name.
        categories: Material families this stuff belongs to.
        stat_bases: Stat name → value. Missing stats count as 0.
    """
    name: str
    categories: frozenset[StuffCategory] = frozenset()
    stat_bases: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "categories", frozenset(self.categories))

    def stat(self, key: str) -> float:
        return float(self.stat_bases.get(key, 0.0))


@dataclass(frozen=True)
class ThingDef:
    """Definition of a solid object type that is not itself a raw material."""
    name: str


@dataclass(frozen=True)
class Thing:
    """
    A solid object instance.

    Attributes:
        definition: Its type. A StuffDef here means the thing is a chunk of
                    raw material (a steel slag chunk, a stack of blocks).
        stuff: Material it was built from, for stuff-substitutable
               objects such as walls.
    """
    definition: ThingDef | StuffDef
    stuff: StuffDef | None = None

    @property
    def label(self) -> str:
        if self.stuff is not None:
            return f"{self.definition.name}({self.stuff.name})"
        return self.definition.name


@dataclass(frozen=True)
class RoofDef:
    """Roof type. Thick or natural roofs are rock slabs."""
    name: str
    is_thick: bool = False
    is_natural: bool = False


@dataclass(frozen=True)
class TerrainDef:
    """
    Terrain type with the tags the classifier inspects.

    Attributes:
        name: Unique definition name.
        tags: Free-form tags ("Water", "CE_Concrete").
        affordances: What the terrain supports ("Diggable", "MovingFluid").
        take_splashes: Whether projectiles splash on it.
        take_footprints: Whether pawns leave footprints (loose ground).
        generated_filth: Residue it produces ("Filth_Dirt", "Filth_Sand").
        scatter_type: Visual scatter pattern ("Rocky", "SoftGray" for ice).
        fertility: Plant fertility; clay-rich soils are highly fertile.
        dries_to: Name of the terrain it becomes when dry.
        burned_def: Name of the terrain it becomes when burned.
        cost_list: Names of the things it is built from, in order.
    """
    name: str
    tags: frozenset[str] = frozenset()
    affordances: frozenset[str] = frozenset()
    take_splashes: bool = False
    take_footprints: bool = False
    generated_filth: str | None = None
    scatter_type: str | None = None
    fertility: float = 0.0
    dries_to: str | None = None
    burned_def: str | None = None
    cost_list: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", frozenset(self.tags))
        object.__setattr__(self, "affordances", frozenset(self.affordances))
        object.__setattr__(self, "cost_list", tuple(self.cost_list))


@dataclass
class MaterialCatalog:
    """
    Lookup of stuff, terrain and roof definitions by name.

    Example:
        catalog = MaterialCatalog()
        catalog.add_stuff(StuffDef("Steel", {StuffCategory.METALLIC}, {...}))
        catalog.add_terrain(TerrainDef("Soil", affordances={"Diggable"}))
    """
    stuffs: dict[str, StuffDef] = field(default_factory=dict)
    terrains: dict[str, TerrainDef] = field(default_factory=dict)
    roofs: dict[str, RoofDef] = field(default_factory=dict)

    def add_stuff(self, stuff: StuffDef) -> StuffDef:
        self.stuffs[stuff.name] = stuff
        return stuff

    def add_terrain(self, terrain: TerrainDef) -> TerrainDef:
        self.terrains[terrain.name] = terrain
        return terrain

    def add_roof(self, roof: RoofDef) -> RoofDef:
        self.roofs[roof.name] = roof
        return roof

    def stuff(self, name: str) -> StuffDef | None:
        return self.stuffs.get(name)

    def terrain(self, name: str | None) -> TerrainDef | None:
        if name is None:
            return None
        return self.terrains.get(name)

    def roof(self, name: str) -> RoofDef | None:
        return self.roofs.get(name)

    def burned_source(self, terrain: TerrainDef) -> TerrainDef | None:
        """First terrain whose burned form is the given terrain."""
        for candidate in self.terrains.values():
            if candidate.burned_def == terrain.name:
                return candidate
        return None
