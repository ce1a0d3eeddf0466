# MIT License (see LICENSE)
"""
Core type definitions for ricochet resolution.

Defines the data that flows through a single impact:
- ImpactedEntity: what was hit (nothing, terrain, roof, or a solid object)
- ImpactContext: immutable snapshot of the impact
- BounceOutcome: the decision and post-impact state
- RelaunchCommand: what the projectile-motion subsystem receives

Coordinates are (x, y, z) with y up. Projectile units: speed m/s,
density kg/L, hardness GPa, diameter mm, mass g.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from .materials import RoofDef, TerrainDef, Thing
from .util import f64, norm


# =============================================================================
# Impacted entity variants
# =============================================================================

@dataclass(frozen=True)
class Bounds:
    """
    Footprint centre and height of a solid object.

    Attributes:
        center: Horizontal centre (x, z).
        top: Highest point (height).
    """
    center: tuple[float, float]
    top: float = 1.0


@dataclass(frozen=True)
class NoEntity:
    """Nothing was hit directly: the projectile reached ground or roof level."""


@dataclass(frozen=True)
class Terrain:
    terrain: TerrainDef


@dataclass(frozen=True)
class Roof:
    roof: RoofDef
    height: float


@dataclass(frozen=True)
class SolidObject:
    thing: Thing
    bounds: Bounds


# Union type for impacted-entity dispatch
ImpactedEntity = NoEntity | Terrain | Roof | SolidObject


# =============================================================================
# Impact snapshot and results
# =============================================================================

@dataclass(frozen=True)
class ProjectileProperties:
    """
    Physical make-up of the projectile.

    Attributes:
        density: kg/L (lead ≈ 11.3, steel ≈ 7.8).
        hardness: GPa-scaled yield strength.
        diameter: Calibre in mm.
        mass: Mass in g.
    """
    density: float = 11.3
    hardness: float = 1.0
    diameter: float = 5.56
    mass: float = 4.0

    def __post_init__(self) -> None:
        if self.diameter <= 0:
            raise ValueError(f"Projectile diameter must be positive, got {self.diameter}")
        if self.mass <= 0:
            raise ValueError(f"Projectile mass must be positive, got {self.mass}")


@dataclass(frozen=True)
class ImpactContext:
    """
    Immutable snapshot of one impact, built once and never modified.

    Attributes:
        position: Impact point (x, y, z).
        impacted_entity: What was hit.
        incident_direction: Unit travel direction at impact (normalised on init).
        speed: Speed at impact in m/s.
        projectile_density: kg/L.
        projectile_hardness: GPa-scaled.
        projectile_diameter: mm.
        projectile_mass: g.
    """
    position: np.ndarray
    impacted_entity: ImpactedEntity
    incident_direction: np.ndarray
    speed: float
    projectile_density: float = 11.3
    projectile_hardness: float = 1.0
    projectile_diameter: float = 5.56
    projectile_mass: float = 4.0

    def __post_init__(self) -> None:
        """Convert vectors to float64 and normalise the direction."""
        object.__setattr__(self, "position", f64(self.position))
        d = f64(self.incident_direction)
        n = norm(d)
        if n < 1e-12:
            raise ValueError("Incident direction must be non-zero")
        object.__setattr__(self, "incident_direction", d / n)

    @classmethod
    def build(
        cls,
        position,
        entity: ImpactedEntity,
        direction,
        speed: float,
        projectile: ProjectileProperties,
    ) -> "ImpactContext":
        return cls(
            position=position,
            impacted_entity=entity,
            incident_direction=direction,
            speed=speed,
            projectile_density=projectile.density,
            projectile_hardness=projectile.hardness,
            projectile_diameter=projectile.diameter,
            projectile_mass=projectile.mass,
        )

    @property
    def height(self) -> float:
        return float(self.position[1])


class OutcomeKind(Enum):
    PENETRATE = "penetrate"
    RICOCHET = "ricochet"
    FRAGMENT = "fragment"


@dataclass(frozen=True)
class BounceOutcome:
    """
    Result of one impact. Produced once, consumed by the relaunch call.

    Attributes:
        kind: Penetrate, Ricochet or Fragment.
        new_speed: Speed after impact in m/s (0 unless Ricochet).
        new_deflection_angle: Vertical launch angle of the new direction, radians.
        new_heading: Map heading of the new direction, degrees in [0, 360).
        exit_angle: Ricochet angle above the surface plane, degrees.
        direction: Reflected unit direction, None unless Ricochet.
    """
    kind: OutcomeKind
    new_speed: float = 0.0
    new_deflection_angle: float = 0.0
    new_heading: float = 0.0
    exit_angle: float = 0.0
    direction: np.ndarray | None = field(default=None, compare=False)

    @classmethod
    def penetrate(cls) -> "BounceOutcome":
        return cls(kind=OutcomeKind.PENETRATE)

    @classmethod
    def fragment(cls) -> "BounceOutcome":
        return cls(kind=OutcomeKind.FRAGMENT)

    @property
    def is_ricochet(self) -> bool:
        return self.kind is OutcomeKind.RICOCHET


@dataclass(frozen=True)
class RelaunchCommand:
    """
    Launch instruction for the projectile-motion subsystem.

    Attributes:
        origin: New horizontal position (x, z).
        angle: Vertical launch angle, radians.
        heading: Map heading, degrees.
        height: Launch height.
        speed: Launch speed in m/s.
    """
    origin: tuple[float, float]
    angle: float
    heading: float
    height: float
    speed: float
