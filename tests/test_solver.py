import logging

import numpy as np
import pytest

from ricochet_sim.materials import FailureMode, MaterialProperties, TerrainDef
from ricochet_sim.solver import (
    RicochetSolver,
    SolverConfig,
    ballistic_limit,
    frangible_critical_angle,
    incident_angle,
    malleable_critical_angle,
    reflect,
    tate_penetration_velocity,
)
from ricochet_sim.types import ImpactContext, OutcomeKind, Terrain

UP = np.array([0.0, 1.0, 0.0])
STEEL = MaterialProperties(7.8, 201.0, FailureMode.MALLEABLE)
SOIL = MaterialProperties(1.4, 0.2, FailureMode.FRANGIBLE)
WATER = MaterialProperties(1.0, 0.0, FailureMode.LIQUID)
ROCK = MaterialProperties(2.7, 12.0, FailureMode.UNYIELDING)


def grazing(alpha_deg: float, speed: float = 400.0, **projectile) -> ImpactContext:
    """Projectile heading +x, descending at alpha onto flat ground."""
    a = np.radians(alpha_deg)
    return ImpactContext(
        position=(4.5, 0.0, 4.5),
        impacted_entity=Terrain(TerrainDef("Ground")),
        incident_direction=(np.cos(a), -np.sin(a), 0.0),
        speed=speed,
        **projectile,
    )


def test_incident_angle():
    a = np.radians(10.0)
    assert incident_angle(np.array([np.cos(a), -np.sin(a), 0.0]), UP) == pytest.approx(10.0)
    assert incident_angle(np.array([0.0, -1.0, 0.0]), UP) == pytest.approx(90.0)
    # Travelling away from the surface
    assert incident_angle(np.array([np.cos(a), np.sin(a), 0.0]), UP) == pytest.approx(-10.0)


def test_negative_incident_angle_is_clamped_and_logged(caplog):
    a = np.radians(10.0)
    ctx = ImpactContext(
        position=(1.0, 0.0, 1.0),
        impacted_entity=Terrain(TerrainDef("Ground")),
        incident_direction=(np.cos(a), np.sin(a), 0.0),
        speed=300.0,
    )
    with caplog.at_level(logging.ERROR):
        out = RicochetSolver().solve(ctx, UP, ROCK)

    assert [r.levelno for r in caplog.records] == [logging.ERROR]
    # α clamped to 0: no speed loss on an unyielding surface
    assert out.kind is OutcomeKind.RICOCHET
    assert out.new_speed == pytest.approx(300.0)


@pytest.mark.parametrize("climb", [10.0, 45.0, 90.0])
def test_clamped_incidence_leaves_at_exit_angle(climb):
    """A projectile already climbing away leaves at the exit angle, not climb + exit."""
    a = np.radians(climb)
    ctx = ImpactContext(
        position=(1.0, 0.0, 1.0),
        impacted_entity=Terrain(TerrainDef("Ground")),
        incident_direction=(np.cos(a), np.sin(a), 0.0),
        speed=300.0,
    )
    out = RicochetSolver().solve(ctx, UP, ROCK)

    assert out.exit_angle == 2.0
    assert np.degrees(out.new_deflection_angle) == pytest.approx(out.exit_angle)
    if climb < 90.0:
        assert out.new_heading == pytest.approx(270.0)


# =============================================================================
# Unyielding
# =============================================================================

@pytest.mark.parametrize("alpha", np.linspace(0.0, 90.0, 19))
def test_unyielding_always_ricochets_at_two_degrees(alpha):
    """V' = V (1 − sin²α / 2), exit angle 2°."""
    out = RicochetSolver().solve(grazing(alpha), UP, ROCK)
    s = np.sin(np.radians(alpha))

    assert out.kind is OutcomeKind.RICOCHET
    assert out.exit_angle == 2.0
    assert out.new_speed == pytest.approx(400.0 * (1 - 0.5 * s * s))
    assert out.new_speed <= 400.0


def test_unyielding_exit_direction():
    out = RicochetSolver().solve(grazing(10.0), UP, ROCK)

    # Flat 2° climb, still travelling along +x
    assert out.new_deflection_angle == pytest.approx(np.radians(2.0))
    assert out.direction[0] > 0.99
    assert out.new_heading == pytest.approx(270.0)


def test_fragmentation_hook():
    seen = []

    def shatter(context, material, alpha):
        seen.append(alpha)
        return alpha > 30.0

    solver = RicochetSolver(SolverConfig(fragmentation=shatter))

    assert solver.solve(grazing(10.0), UP, ROCK).kind is OutcomeKind.RICOCHET
    assert solver.solve(grazing(45.0), UP, ROCK).kind is OutcomeKind.FRAGMENT
    assert seen == [pytest.approx(10.0), pytest.approx(45.0)]
    # Only unyielding surfaces consult the hook
    solver.solve(grazing(45.0), UP, SOIL)
    assert len(seen) == 2


# =============================================================================
# Malleable
# =============================================================================

def test_tate_velocity_equal_densities():
    """ρp = ρt and Yp = Rt: u = V/2 exactly."""
    assert tate_penetration_velocity(7800.0, 7800.0, 1e9, 1e9, 600.0) == pytest.approx(300.0)


def test_tate_velocity_hard_target_clamps_to_zero():
    u = tate_penetration_velocity(11300.0, 7800.0, 1e9, 201e9, 400.0)
    assert u == 0.0


def test_malleable_critical_angle_hard_plate():
    """
    u = 0 on a plate far harder than the bullet, so
    tan³θc = (2/3) (ρp V² / Yp) (1 + 1/k_L²).
    """
    cfg = SolverConfig()
    tan3 = (2 / 3) * (11300.0 * 400.0 ** 2 / 1e9) * (1 + 1 / 9)
    expected = np.degrees(np.arctan(np.cbrt(tan3)))

    assert malleable_critical_angle(grazing(5.0), STEEL, cfg) == pytest.approx(expected)


def test_metallic_wall_scenario():
    """Steel at 5°: ricochet, 80° exit, speed per Eq 6."""
    ctx = grazing(5.0)
    out = RicochetSolver().solve(ctx, UP, STEEL)

    v50 = ballistic_limit(201.0, ctx.projectile_diameter, ctx.projectile_mass)
    s = np.sin(np.radians(5.0))
    loss = 0.5 * s * s + (1 - 0.5 * s * s) * np.sqrt(s * 400.0 / v50)

    assert out.kind is OutcomeKind.RICOCHET
    assert out.exit_angle == 80.0
    assert out.new_speed < 400.0
    assert out.new_speed == pytest.approx(400.0 * (1 - loss))


def test_malleable_beyond_critical_penetrates():
    assert RicochetSolver().solve(grazing(70.0), UP, STEEL).kind is OutcomeKind.PENETRATE


@pytest.mark.parametrize("alpha", [0.0, 1.0, 5.0, 30.0, 60.0, 89.0])
def test_malleable_negative_discriminant_always_penetrates(alpha):
    """
    Dense, hard penetrator into a soft ductile target:
    ρp ρt V² < 2 (ρp − ρt)(Yp − Rt) → Δ < 0.
    """
    leather = MaterialProperties(1.0, 0.5, FailureMode.MALLEABLE)
    ctx = grazing(alpha, speed=100.0, projectile_density=19.3, projectile_hardness=20.0)

    assert malleable_critical_angle(ctx, leather, SolverConfig()) is None
    assert RicochetSolver().solve(ctx, UP, leather).kind is OutcomeKind.PENETRATE


def test_ballistic_limit_scaling():
    base = ballistic_limit(200.0, 5.56, 4.0)
    assert ballistic_limit(200.0, 5.56, 16.0) == pytest.approx(base / 2)
    assert ballistic_limit(200.0 * 8, 5.56, 4.0) == pytest.approx(base * 8 ** 0.333)


# =============================================================================
# Frangible and liquid
# =============================================================================

def test_frangible_critical_angle_soil():
    """
    σ = 11.3/1.4, η = √(0.2/1.4), γ = √σ · 5.56/100
    θc = θB ((1+η) + √((1+η)² − √σ γ)) / √σ ≈ 16.36°
    """
    assert frangible_critical_angle(grazing(10.0), SOIL, SolverConfig()) == pytest.approx(16.36, abs=0.02)


def test_loose_soil_scenario():
    out = RicochetSolver().solve(grazing(10.0), UP, SOIL)
    critical = frangible_critical_angle(grazing(10.0), SOIL, SolverConfig())
    ratio = 10.0 / critical

    assert out.kind is OutcomeKind.RICOCHET
    assert out.new_speed < 400.0
    assert out.new_speed == pytest.approx(400.0 * (1 - ratio))
    assert 10.0 <= out.exit_angle <= 25.0
    assert out.exit_angle == pytest.approx(10.0 * (2.5 - 1.5 * ratio))
    assert out.new_deflection_angle == pytest.approx(np.radians(out.exit_angle))


def test_frangible_beyond_critical_penetrates():
    assert RicochetSolver().solve(grazing(20.0), UP, SOIL).kind is OutcomeKind.PENETRATE


def test_water_has_no_division_by_zero():
    """Hardness 0: η = 0, θc ≈ 8.6° for a rifle bullet."""
    cfg = SolverConfig()
    critical = frangible_critical_angle(grazing(5.0), WATER, cfg)

    assert critical == pytest.approx(8.62, abs=0.02)
    assert RicochetSolver(cfg).solve(grazing(5.0), UP, WATER).kind is OutcomeKind.RICOCHET
    assert RicochetSolver(cfg).solve(grazing(20.0), UP, WATER).kind is OutcomeKind.PENETRATE

    vacuum = MaterialProperties(0.0, 0.0, FailureMode.LIQUID)
    RicochetSolver(cfg).solve(grazing(5.0), UP, vacuum)


def test_large_dense_shell_plunges_into_water():
    """(1 + η)² < √σ γ: no ricochet at any angle."""
    ctx = grazing(1.0, projectile_density=7.8, projectile_diameter=120.0, projectile_mass=20000.0)
    assert frangible_critical_angle(ctx, WATER, SolverConfig()) is None
    assert RicochetSolver().solve(ctx, UP, WATER).kind is OutcomeKind.PENETRATE


def test_ricochet_never_gains_speed():
    solver = RicochetSolver()
    materials = [STEEL, SOIL, WATER, ROCK, MaterialProperties(2.4, 10.0, FailureMode.FRANGIBLE)]
    for material in materials:
        for alpha in np.linspace(0.0, 90.0, 46):
            for speed in (50.0, 400.0, 900.0):
                out = solver.solve(grazing(alpha, speed=speed), UP, material)
                if out.kind is OutcomeKind.RICOCHET:
                    assert 0.0 < out.new_speed <= speed


def test_zero_speed_penetrates():
    assert RicochetSolver().solve(grazing(5.0, speed=0.0), UP, ROCK).kind is OutcomeKind.PENETRATE


# =============================================================================
# Reflection
# =============================================================================

def test_reflection_stays_in_plane_of_incidence():
    rng = np.random.default_rng(11)
    for _ in range(100):
        n = rng.normal(size=3)
        n /= np.linalg.norm(n)
        d = rng.normal(size=3)
        d -= 1.2 * abs(d @ n) * n + 0.1 * n   # make it point into the surface
        d /= np.linalg.norm(d)
        alpha = incident_angle(d, n)
        exit_angle = rng.uniform(0.0, 90.0)

        r = reflect(d, n, alpha, exit_angle)

        assert np.linalg.norm(r) == pytest.approx(1.0)
        assert float(r @ np.cross(d, n)) == pytest.approx(0.0, abs=1e-9)
        assert np.degrees(np.arcsin(r @ n)) == pytest.approx(exit_angle, abs=1e-6)
        # Keeps going the same way along the surface
        assert float((r - (r @ n) * n) @ (d - (d @ n) * n)) >= -1e-9


def test_head_on_reflection():
    r = reflect(np.array([0.0, -1.0, 0.0]), UP, 90.0, 2.0)
    assert np.degrees(np.arcsin(r @ UP)) == pytest.approx(2.0)


# =============================================================================
# Legacy angle model
# =============================================================================

def test_legacy_exit_angles_by_mode():
    solver = RicochetSolver(SolverConfig(angle_model="legacy"))
    ctx = grazing(10.0)

    rock = solver.solve(ctx, UP, ROCK)
    metal = solver.solve(ctx, UP, STEEL)
    soil = solver.solve(ctx, UP, SOIL)

    assert rock.exit_angle == 2.0
    assert metal.exit_angle == pytest.approx(20.0)
    assert soil.exit_angle == pytest.approx(5.0)
    # Legacy ricochets keep their speed
    assert rock.new_speed == metal.new_speed == soil.new_speed == 400.0


def test_legacy_near_critical_band_is_seeded():
    solver = RicochetSolver(SolverConfig(angle_model="legacy"))
    ctx = grazing(85.0)

    a = solver.solve(ctx, UP, SOIL, np.random.default_rng(5))
    b = solver.solve(ctx, UP, SOIL, np.random.default_rng(5))

    assert a.kind is OutcomeKind.RICOCHET
    assert a.exit_angle == b.exit_angle
    assert 2.0 <= a.exit_angle <= 90.0
    with pytest.raises(ValueError):
        solver.solve(ctx, UP, SOIL)


def test_legacy_beyond_critical():
    solver = RicochetSolver(SolverConfig(angle_model="legacy", legacy_critical_angle_deg=30.0))
    ctx = grazing(40.0)

    assert solver.solve(ctx, UP, ROCK).kind is OutcomeKind.FRAGMENT
    assert solver.solve(ctx, UP, SOIL).kind is OutcomeKind.PENETRATE


def test_config_validation():
    with pytest.raises(ValueError):
        SolverConfig(angle_model="quantum")
    with pytest.raises(ValueError):
        SolverConfig(length_factor=0.0)
