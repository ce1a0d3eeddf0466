# MIT License (see LICENSE)
"""
ricochet_sim - Projectile ricochet resolution for game simulations.

Given a projectile hitting terrain, a roof or a solid object, decides
whether it penetrates, ricochets or fragments, and for a ricochet
computes the new speed, launch angle and heading.

Main entry points:
    - ImpactOrchestrator: Host-facing on-impact callback.
    - MaterialModel: Impacted entity → density, hardness, failure mode.
    - resolve_normal: Surface normal and impact class.
    - RicochetSolver: The physics core.

Submodules:
    - io: JSON definitions, solver configuration and maps.

Example:
    import numpy as np
    from ricochet_sim import GridMap, ImpactEvent, ImpactOrchestrator, RecordingMotion

    motion = RecordingMotion()
    orchestrator = ImpactOrchestrator(motion, catalog)
    event = ImpactEvent(None, (4.5, 0.0, 4.5), grid, 400.0, (1.0, -0.1, 0.0))
    outcome = orchestrator.on_impact(event, np.random.default_rng(0))
"""
from .materials import (
    FailureMode,
    MaterialCatalog,
    MaterialProperties,
    RoofDef,
    StuffCategory,
    StuffDef,
    TerrainDef,
    Thing,
    ThingDef,
)
from .types import (
    BounceOutcome,
    Bounds,
    ImpactContext,
    NoEntity,
    OutcomeKind,
    ProjectileProperties,
    RelaunchCommand,
    Roof,
    SolidObject,
    Terrain,
)
from .classifier import MaterialModel
from .geometry import ImpactClass, resolve_normal
from .solver import RicochetSolver, SolverConfig
from .motion import ProjectileMotionAdapter, RecordingMotion, DebugMotion, NullMotion
from .orchestrator import GridMap, ImpactEvent, ImpactOrchestrator, MapView

__all__ = [
    # Materials
    "FailureMode",
    "MaterialCatalog",
    "MaterialModel",
    "MaterialProperties",
    "RoofDef",
    "StuffCategory",
    "StuffDef",
    "TerrainDef",
    "Thing",
    "ThingDef",
    # Impact data
    "BounceOutcome",
    "Bounds",
    "ImpactContext",
    "NoEntity",
    "OutcomeKind",
    "ProjectileProperties",
    "RelaunchCommand",
    "Roof",
    "SolidObject",
    "Terrain",
    # Pipeline
    "ImpactClass",
    "resolve_normal",
    "RicochetSolver",
    "SolverConfig",
    "ImpactOrchestrator",
    "ImpactEvent",
    # Host interfaces
    "MapView",
    "GridMap",
    "ProjectileMotionAdapter",
    "RecordingMotion",
    "DebugMotion",
    "NullMotion",
]
