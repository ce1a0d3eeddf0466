# MIT License (see LICENSE)
"""
Impact orchestration: the single entry point called by the host on impact.

The ImpactOrchestrator class validates the environment and drives one
impact through the pipeline:
    1. Resolve what was hit (object bounds, terrain or roof at the cell).
    2. Geometry: surface normal and impact class.
    3. Classification: material properties of the hit entity.
    4. Solve: Penetrate, Ricochet or Fragment.
    5. Emit: relaunch or destroy through the motion adapter.

Map, terrain and roof data are read through the MapView interface; the
orchestrator owns none of it and keeps no state between impacts.
Anomalies (null or out-of-bounds map, unknown surface, a non-finite or
zero-length input vector) are logged and reported as Penetrate, so
ambiguous geometry never produces a ricochet.
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from contextlib import nullcontext
from dataclasses import dataclass, field

import numpy as np

from .classifier import MaterialModel
from .constants import DEFAULT_ROOF_HEIGHT, GROUND_EPS
from .geometry import resolve_normal
from .materials import MaterialCatalog, RoofDef, TerrainDef, Thing
from .motion import ProjectileMotionAdapter
from .profiler import ImpactProfiler
from .solver import RicochetSolver, SolverConfig
from .types import (
    BounceOutcome,
    Bounds,
    ImpactContext,
    ImpactedEntity,
    OutcomeKind,
    ProjectileProperties,
    RelaunchCommand,
    Roof,
    SolidObject,
    Terrain,
)
from .util import f64, norm

logger = logging.getLogger(__name__)

Cell = tuple[int, int]


def cell_of(position: np.ndarray) -> Cell:
    """Map cell containing a 3D position (x, z floored)."""
    return int(np.floor(position[0])), int(np.floor(position[2]))


# =============================================================================
# Map queries
# =============================================================================

class MapView(ABC):
    """Read-only view of the host map used to resolve impacts."""

    @abstractmethod
    def in_bounds(self, cell: Cell) -> bool:
        ...

    @abstractmethod
    def terrain_at(self, cell: Cell) -> TerrainDef | None:
        ...

    @abstractmethod
    def roof_at(self, cell: Cell) -> RoofDef | None:
        ...

    @abstractmethod
    def roof_height(self, cell: Cell) -> float:
        ...

    @abstractmethod
    def bounds_of(self, thing: Thing) -> Bounds | None:
        ...


@dataclass
class GridMap(MapView):
    """
    Rectangular cell map with per-cell terrain and roofs.

    Attributes:
        width: Number of cells along x.
        depth: Number of cells along z.
        default_terrain: Terrain of cells without an explicit entry.
        roof_level: Height of every roof slab.
        terrain: Per-cell terrain overrides.
        roofs: Roofed cells.
    """
    width: int
    depth: int
    default_terrain: TerrainDef | None = None
    roof_level: float = DEFAULT_ROOF_HEIGHT
    terrain: dict[Cell, TerrainDef] = field(default_factory=dict)
    roofs: dict[Cell, RoofDef] = field(default_factory=dict)
    _placed: dict[int, tuple[Thing, Bounds]] = field(default_factory=dict, repr=False)

    def in_bounds(self, cell: Cell) -> bool:
        x, z = cell
        return 0 <= x < self.width and 0 <= z < self.depth

    def terrain_at(self, cell: Cell) -> TerrainDef | None:
        return self.terrain.get(cell, self.default_terrain)

    def roof_at(self, cell: Cell) -> RoofDef | None:
        return self.roofs.get(cell)

    def roof_height(self, cell: Cell) -> float:
        return self.roof_level

    def bounds_of(self, thing: Thing) -> Bounds | None:
        entry = self._placed.get(id(thing))
        return entry[1] if entry is not None else None

    def place(self, thing: Thing, bounds: Bounds) -> Thing:
        self._placed[id(thing)] = (thing, bounds)
        return thing

    def set_roof(self, cell: Cell, roof: RoofDef) -> None:
        self.roofs[cell] = roof

    def set_terrain(self, cell: Cell, terrain: TerrainDef) -> None:
        self.terrain[cell] = terrain


# =============================================================================
# Orchestration
# =============================================================================

@dataclass
class ImpactEvent:
    """
    An impact reported by the projectile-motion subsystem.

    Attributes:
        hit_thing: Object that was hit, or None for ground/roof.
        position: Impact point (x, y, z).
        map: Map the impact happened on (may be None from a stale caller).
        speed: Projectile speed in m/s.
        direction: Projectile travel direction.
        projectile: Physical make-up of the projectile.
    """
    hit_thing: Thing | None
    position: np.ndarray | tuple[float, float, float]
    map: MapView | None
    speed: float
    direction: np.ndarray | tuple[float, float, float]
    projectile: ProjectileProperties = field(default_factory=ProjectileProperties)


class ImpactOrchestrator:
    """
    Resolves impacts and tells the motion subsystem what to do.

    Args:
        motion: Receives relaunch and destroy instructions.
        catalog: Material definitions for name resolution.
        config: Solver constants.
        profiler: Optional stage timer.
    """

    def __init__(
        self,
        motion: ProjectileMotionAdapter,
        catalog: MaterialCatalog | None = None,
        config: SolverConfig | None = None,
        profiler: ImpactProfiler | None = None,
    ):
        self.motion = motion
        self.materials = MaterialModel(catalog)
        self.solver = RicochetSolver(config)
        self.profiler = profiler

    def on_impact(self, event: ImpactEvent, rng: np.random.Generator) -> BounceOutcome:
        """
        Resolve one impact end to end.

        Returns:
            The outcome. Ricochet has already been relaunched and Fragment
            destroyed by the time this returns.
        """
        position = f64(event.position)
        world = event.map

        if world is None:
            logger.warning("Tried to resolve an impact in a null map")
            return self._finish(BounceOutcome.penetrate())
        direction = f64(event.direction)
        if not (np.all(np.isfinite(position)) and np.all(np.isfinite(direction))):
            logger.warning("Non-finite impact position %s or direction %s", position, direction)
            return self._finish(BounceOutcome.penetrate())
        if norm(direction) < 1e-12:
            logger.warning("Zero-length travel direction at %s", position)
            return self._finish(BounceOutcome.penetrate())
        cell = cell_of(position)
        if not world.in_bounds(cell):
            logger.warning("Tried to resolve an impact out of bounds at cell %s", cell)
            return self._finish(BounceOutcome.penetrate())

        entity = self._impacted_entity(event.hit_thing, position, cell, world)
        if entity is None:
            return self._finish(BounceOutcome.penetrate())

        context = ImpactContext.build(position, entity, direction, event.speed, event.projectile)

        with self._section("geometry"):
            normal, _ = resolve_normal(context, roof_height=world.roof_height(cell))
        with self._section("classify"):
            material = self.materials.classify(entity, rng)
        with self._section("solve"):
            outcome = self.solver.solve(context, normal, material, rng)

        if outcome.is_ricochet:
            self.motion.launch(RelaunchCommand(
                origin=(float(position[0]), float(position[2])),
                angle=outcome.new_deflection_angle,
                heading=outcome.new_heading,
                height=float(position[1]),
                speed=outcome.new_speed,
            ))
        elif outcome.kind is OutcomeKind.FRAGMENT:
            self.motion.destroy()

        return self._finish(outcome)

    def _impacted_entity(
        self,
        hit_thing: Thing | None,
        position: np.ndarray,
        cell: Cell,
        world: MapView,
    ) -> ImpactedEntity | None:
        if hit_thing is not None:
            bounds = world.bounds_of(hit_thing)
            if bounds is None:
                logger.warning("No bounds for %s at cell %s", hit_thing.label, cell)
                return None
            return SolidObject(hit_thing, bounds)

        if position[1] < GROUND_EPS:
            terrain = world.terrain_at(cell)
            if terrain is None:
                logger.warning("No terrain at cell %s", cell)
                return None
            return Terrain(terrain)

        roof = world.roof_at(cell)
        if roof is None:
            logger.warning("Elevated impact at cell %s has no roof to hit", cell)
            return None
        return Roof(roof, world.roof_height(cell))

    def _section(self, name: str):
        if self.profiler is None:
            return nullcontext()
        return self.profiler.section(name)

    def _finish(self, outcome: BounceOutcome) -> BounceOutcome:
        if self.profiler is not None:
            self.profiler.stats.count(outcome.kind)
        return outcome

