# MIT License (see LICENSE)
"""
Ricochet solver: Penetrate, Ricochet or Fragment for one impact.

Given the impact snapshot, the resolved surface normal and the surface
material, the solver computes the incident angle α above the surface
plane, a critical angle for the material's failure mode, and, when
α is at or below it, the post-impact speed and exit angle. The exit
direction stays in the vertical plane spanned by the incident ray and
the normal.

Failure-mode laws (equations in maths.md):
    Malleable   Tate penetration quadratic → critical angle (Eq 4, 5),
                ballistic limit v50 scales the speed loss (Eq 3, 6),
                steep exit at a fixed angle.
    Unyielding  always ricochets, flat 2° exit (Eq 7).
    Frangible   Birkhoff-type quadratic with strength and sinkage
                terms → critical angle (Eq 8), blended speed and exit
                laws (Eq 9).
    Liquid      as Frangible with water constants.

A negative discriminant in either quadratic means no incidence can
produce a ricochet, which is a Penetrate outcome, not an error.

The legacy angle model keeps the speed and picks exit angles from a
small rule table, with a randomised exit near the critical angle.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from . import constants as C
from .materials import FailureMode, MaterialProperties
from .types import BounceOutcome, ImpactContext, OutcomeKind
from .util import any_perpendicular, elevation, heading_degrees, norm, rotate_about_axis, unit

logger = logging.getLogger(__name__)

ANGLE_MODELS = ("analytic", "legacy")

# (context, material, incident angle in degrees) → True to fragment
FragmentationHook = Callable[[ImpactContext, MaterialProperties, float], bool]


@dataclass(frozen=True)
class SolverConfig:
    """
    Tunable constants of the ricochet model.

    Attributes:
        angle_model: "analytic" (critical-angle physics) or "legacy"
                     (rule table with randomised near-critical exits).
        malleable_exit_deg: Exit angle after a malleable ricochet.
        unyielding_exit_deg: Exit angle after an unyielding ricochet.
        length_factor: Projectile length / diameter.
        birkhoff_angle_deg: Base skipping angle of the frangible model.
        reference_diameter: Calibre (mm) at which the sinkage term equals
                            the square root of the density ratio.
        gravity: Local gravity in m/s².
        legacy_critical_angle_deg: Critical angle of the legacy model.
        legacy_band_deg: Width of the randomised band below it.
        fragmentation: Optional hook turning unyielding ricochets into
                       Fragment outcomes. Never serialised.
    """
    angle_model: str = "analytic"
    malleable_exit_deg: float = C.MALLEABLE_EXIT_DEG
    unyielding_exit_deg: float = C.UNYIELDING_EXIT_DEG
    length_factor: float = C.LENGTH_FACTOR
    birkhoff_angle_deg: float = C.BIRKHOFF_ANGLE_DEG
    reference_diameter: float = C.REFERENCE_DIAMETER_MM
    gravity: float = C.G_EARTH
    legacy_critical_angle_deg: float = 90.0
    legacy_band_deg: float = 10.0
    fragmentation: FragmentationHook | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.angle_model not in ANGLE_MODELS:
            raise ValueError(f"Unknown angle model: '{self.angle_model}'")
        if self.length_factor <= 0:
            raise ValueError(f"Length factor must be positive, got {self.length_factor}")
        if self.reference_diameter <= 0:
            raise ValueError(f"Reference diameter must be positive, got {self.reference_diameter}")


# =============================================================================
# Equations
# =============================================================================

def incident_angle(direction: np.ndarray, normal: np.ndarray) -> float:
    """
    Angle between the travel direction and the surface plane, degrees.

    α = 90° − ∠(−d, n) = asin(−d·n)   (maths.md Eq 2)

    Negative when the projectile travels away from the surface.
    """
    s = -float(np.dot(unit(direction), unit(normal)))
    return float(np.degrees(np.arcsin(np.clip(s, -1.0, 1.0))))


def ballistic_limit(hardness: float, diameter: float, mass: float, length_factor: float = C.LENGTH_FACTOR) -> float:
    """
    Ballistic limit speed v50 of a malleable plate (maths.md Eq 3).

    v50 = 11.9 · H_psi^0.333 · (r · k_L)^0.75 / sqrt(m)

    Args:
        hardness: Target hardness, GPa.
        diameter: Projectile calibre, mm.
        mass: Projectile mass, g.
        length_factor: Projectile length / diameter.
    """
    psi = max(hardness, C.HARDNESS_EPS) * C.GPA_TO_PSI
    radius = 0.5 * diameter
    return 11.9 * psi ** 0.333 * (radius * length_factor) ** 0.75 / np.sqrt(mass)


def tate_penetration_velocity(rho_p: float, rho_t: float, y_p: float, r_t: float, v: float) -> float | None:
    """
    Penetration (interface) velocity u from Tate's modified Bernoulli balance.

        ½ ρp (V − u)² + Yp = ½ ρt u² + Rt        (maths.md Eq 4)

    All arguments in SI units. Returns None when the discriminant is
    negative, otherwise u clamped to [0, V].
    """
    a = 0.5 * (rho_p - rho_t)
    b = -rho_p * v
    c = 0.5 * rho_p * v * v + y_p - r_t

    if abs(a) < 1e-9:
        u = -c / b if abs(b) > 1e-15 else 0.0
    else:
        disc = b * b - 4.0 * a * c
        if disc < 0:
            return None
        u = (-b - float(np.sqrt(disc))) / (2.0 * a)

    return min(max(u, 0.0), v)


def malleable_critical_angle(context: ImpactContext, material: MaterialProperties, config: SolverConfig) -> float | None:
    """
    Critical angle for a ductile target in degrees, or None if no ricochet is possible.

        tan³θc = (2/3) (ρp V² / Yp) ((L² + D²) / L²) (V − u) / V    (maths.md Eq 5)
    """
    v = context.speed
    rho_p = max(context.projectile_density, C.DENSITY_EPS) * C.DENSITY_TO_SI
    rho_t = max(material.density, C.DENSITY_EPS) * C.DENSITY_TO_SI
    y_p = max(context.projectile_hardness, C.HARDNESS_EPS) * C.HARDNESS_TO_SI
    r_t = max(material.hardness, 0.0) * C.HARDNESS_TO_SI

    u = tate_penetration_velocity(rho_p, rho_t, y_p, r_t, v)
    if u is None:
        return None

    shape = 1.0 + 1.0 / (config.length_factor * config.length_factor)
    tan3 = (2.0 / 3.0) * (rho_p * v * v / y_p) * shape * (v - u) / v
    return float(np.degrees(np.arctan(np.cbrt(tan3))))


def frangible_critical_angle(context: ImpactContext, material: MaterialProperties, config: SolverConfig) -> float | None:
    """
    Critical angle for a brittle, granular or liquid target in degrees,
    or None if no ricochet is possible.

    θc is the larger root of

        √σ θ² − 2 θB (1 + η) θ + θB² γ = 0         (maths.md Eq 8)

    with density ratio σ = ρp/ρt, strength term η = sqrt(Ht/ρt) and
    sinkage term γ = √σ · (g d) / (g0 d_ref).
    """
    rho_t = max(material.density, C.DENSITY_EPS)
    sigma = max(context.projectile_density, C.DENSITY_EPS) / rho_t
    eta = float(np.sqrt(max(material.hardness, 0.0) / rho_t))
    root_sigma = float(np.sqrt(sigma))
    gamma = root_sigma * (config.gravity * context.projectile_diameter) / (C.G_EARTH * config.reference_diameter)
    theta_b = np.radians(config.birkhoff_angle_deg)

    lift = 1.0 + eta
    disc = lift * lift - root_sigma * gamma
    if disc < 0:
        return None

    theta = theta_b * (lift + float(np.sqrt(disc))) / root_sigma
    return float(min(np.degrees(theta), 90.0))


def along_surface(direction: np.ndarray, normal: np.ndarray) -> np.ndarray:
    """Unit projection of direction onto the surface plane."""
    n = unit(normal)
    flat = direction - float(np.dot(direction, n)) * n
    if norm(flat) < 1e-9:
        return any_perpendicular(n)
    return unit(flat)


def reflect(direction: np.ndarray, normal: np.ndarray, alpha: float, exit_angle: float) -> np.ndarray:
    """
    Direction after a ricochet leaving the surface at exit_angle degrees.

    The back-ray −d is rotated about d × n by (α + exit) − 180°, which
    keeps the result in the plane of incidence (maths.md Eq 10). A
    head-on hit has no unique plane, so any axis in the surface is used.
    """
    d = unit(direction)
    axis = np.cross(d, normal)
    if norm(axis) < 1e-9:
        axis = any_perpendicular(normal)
    turn = np.radians(alpha + exit_angle) - np.pi
    return unit(rotate_about_axis(-d, axis, turn))


# =============================================================================
# Solver
# =============================================================================

class RicochetSolver:
    """
    Decides the outcome of a single impact.

    Usage:
        solver = RicochetSolver(SolverConfig())
        outcome = solver.solve(context, normal, material, rng)
    """

    def __init__(self, config: SolverConfig | None = None):
        self.config = config if config is not None else SolverConfig()

    def solve(
        self,
        context: ImpactContext,
        normal: np.ndarray,
        material: MaterialProperties,
        rng: np.random.Generator | None = None,
    ) -> BounceOutcome:
        alpha = incident_angle(context.incident_direction, normal)
        if alpha < 0:
            logger.error(
                "Incident angle %.3f° is below zero for impact on %s, clamping to 0",
                alpha, type(context.impacted_entity).__name__,
            )
            alpha = 0.0

        if context.speed <= 0:
            return BounceOutcome.penetrate()

        if self.config.angle_model == "legacy":
            outcome = self._solve_legacy(context, normal, material, alpha, rng)
        else:
            outcome = self._solve_analytic(context, normal, material, alpha)

        logger.debug(
            "%s on %s surface: α=%.2f° → %s at %.1f m/s",
            type(context.impacted_entity).__name__, material.failure_mode.value,
            alpha, outcome.kind.value, outcome.new_speed,
        )
        return outcome

    # -------------------------------------------------------------------------
    # Analytic model
    # -------------------------------------------------------------------------

    def _solve_analytic(
        self,
        context: ImpactContext,
        normal: np.ndarray,
        material: MaterialProperties,
        alpha: float,
    ) -> BounceOutcome:
        mode = material.failure_mode
        v = context.speed
        sin_a = float(np.sin(np.radians(alpha)))

        if mode is FailureMode.UNYIELDING:
            hook = self.config.fragmentation
            if hook is not None and hook(context, material, alpha):
                return BounceOutcome.fragment()
            # Eq 7
            new_speed = v * (1.0 - 0.5 * sin_a * sin_a)
            return self._ricochet(context, normal, alpha, self.config.unyielding_exit_deg, new_speed)

        if mode is FailureMode.MALLEABLE:
            critical = malleable_critical_angle(context, material, self.config)
            if critical is None or alpha > critical:
                return BounceOutcome.penetrate()
            v50 = max(
                ballistic_limit(material.hardness, context.projectile_diameter,
                                context.projectile_mass, self.config.length_factor),
                1e-12,
            )
            # Eq 6
            half_sin2 = 0.5 * sin_a * sin_a
            loss = half_sin2 + (1.0 - half_sin2) * float(np.sqrt(sin_a * v / v50))
            return self._ricochet(context, normal, alpha, self.config.malleable_exit_deg, v * (1.0 - loss))

        # Frangible, Liquid
        critical = frangible_critical_angle(context, material, self.config)
        if critical is None or critical <= 0:
            return BounceOutcome.penetrate()
        ratio = alpha / critical
        # Eq 9
        new_speed = v * (1.0 - ratio)
        exit_angle = alpha * (2.5 - 1.5 * ratio)
        return self._ricochet(context, normal, alpha, exit_angle, new_speed)

    # -------------------------------------------------------------------------
    # Legacy model
    # -------------------------------------------------------------------------

    def _solve_legacy(
        self,
        context: ImpactContext,
        normal: np.ndarray,
        material: MaterialProperties,
        alpha: float,
        rng: np.random.Generator | None,
    ) -> BounceOutcome:
        mode = material.failure_mode
        critical = self.config.legacy_critical_angle_deg
        floor = self.config.unyielding_exit_deg

        if alpha <= critical - self.config.legacy_band_deg:
            if mode is FailureMode.UNYIELDING:
                exit_angle = floor
            elif mode is FailureMode.MALLEABLE:
                exit_angle = min(90.0, 2.0 * alpha)
            else:
                exit_angle = min(90.0, 0.5 * alpha)
        elif alpha <= critical:
            if rng is None:
                raise ValueError("Legacy angle model needs a random generator near the critical angle")
            exit_angle = float(rng.uniform(floor, max(floor, min(90.0, 2.0 * alpha))))
        elif mode is FailureMode.UNYIELDING:
            return BounceOutcome.fragment()
        else:
            return BounceOutcome.penetrate()

        return self._ricochet(context, normal, alpha, exit_angle, context.speed)

    # -------------------------------------------------------------------------

    def _ricochet(
        self,
        context: ImpactContext,
        normal: np.ndarray,
        alpha: float,
        exit_angle: float,
        new_speed: float,
    ) -> BounceOutcome:
        if new_speed <= 0:
            return BounceOutcome.penetrate()
        # A ricochet never adds energy.
        new_speed = min(new_speed, context.speed)

        incoming = context.incident_direction
        if float(np.dot(incoming, normal)) > 0:
            # Travelling away from the surface: alpha was clamped to 0.
            incoming = along_surface(incoming, normal)
        direction = reflect(incoming, normal, alpha, exit_angle)
        return BounceOutcome(
            kind=OutcomeKind.RICOCHET,
            new_speed=float(new_speed),
            new_deflection_angle=elevation(direction),
            new_heading=heading_degrees(direction),
            exit_angle=float(exit_angle),
            direction=direction,
        )
