import numpy as np
import pytest

from ricochet_sim.geometry import ImpactClass, face_normal, resolve_normal
from ricochet_sim.materials import RoofDef, TerrainDef, Thing, ThingDef
from ricochet_sim.types import Bounds, ImpactContext, NoEntity, Roof, SolidObject, Terrain

WALL = SolidObject(Thing(ThingDef("Wall")), Bounds(center=(5.5, 5.5), top=2.0))


def context(position, entity, direction=(1.0, -0.2, 0.0)) -> ImpactContext:
    return ImpactContext(position=position, impacted_entity=entity, incident_direction=direction, speed=300.0)


def test_ground_hit_without_entity():
    n, cls = resolve_normal(context((3.2, 0.0, 4.1), NoEntity()))
    assert cls is ImpactClass.TERRAIN
    assert np.allclose(n, [0.0, 1.0, 0.0])


def test_elevated_hit_without_entity_is_roof():
    above, cls_above = resolve_normal(context((3.2, 2.0, 4.1), NoEntity()), roof_height=2.0)
    below, cls_below = resolve_normal(context((3.2, 1.5, 4.1), NoEntity(), (1.0, 0.3, 0.0)), roof_height=2.0)

    assert cls_above is cls_below is ImpactClass.ROOF
    assert np.allclose(above, [0.0, 1.0, 0.0])
    assert np.allclose(below, [0.0, -1.0, 0.0])


def test_terrain_and_roof_variants():
    n, cls = resolve_normal(context((1.0, 0.0, 1.0), Terrain(TerrainDef("Soil"))))
    assert cls is ImpactClass.TERRAIN and np.allclose(n, [0.0, 1.0, 0.0])

    roof = Roof(RoofDef("RoofRockThick", is_thick=True), height=2.0)
    n, cls = resolve_normal(context((1.0, 1.99, 1.0), roof, (0.0, 1.0, 0.2)))
    assert cls is ImpactClass.ROOF and np.allclose(n, [0.0, -1.0, 0.0])

    # Within epsilon of the roof plane counts as the top face
    n, _ = resolve_normal(context((1.0, 1.9995, 1.0), roof))
    assert np.allclose(n, [0.0, 1.0, 0.0])


def test_object_top():
    n, cls = resolve_normal(context((5.6, 1.9995, 5.4), WALL))
    assert cls is ImpactClass.OBJECT_TOP
    assert np.allclose(n, [0.0, 1.0, 0.0])


@pytest.mark.parametrize("x, z, expected", [
    (6.0, 5.5, [1.0, 0.0, 0.0]),     # right
    (5.0, 5.5, [-1.0, 0.0, 0.0]),    # left
    (5.5, 6.0, [0.0, 0.0, 1.0]),     # forward
    (5.5, 5.0, [0.0, 0.0, -1.0]),    # back
    (6.0, 5.9, [1.0, 0.0, 0.0]),     # nearer the right face than the front
    (5.6, 6.0, [0.0, 0.0, 1.0]),
])
def test_object_faces(x, z, expected):
    n, cls = resolve_normal(context((x, 0.5, z), WALL))
    assert cls is ImpactClass.OBJECT_FACE
    assert np.allclose(n, expected)


def test_face_normal_is_a_copy():
    n = face_normal(1.0, 0.0)
    n[0] = 99.0
    assert face_normal(1.0, 0.0)[0] == 1.0


def test_normals_are_unit_length():
    rng = np.random.default_rng(3)
    entities = [
        NoEntity(),
        Terrain(TerrainDef("Soil")),
        Roof(RoofDef("RoofConstructed"), height=2.0),
        WALL,
    ]
    for _ in range(200):
        pos = (rng.uniform(0, 10), rng.uniform(0, 3), rng.uniform(0, 10))
        for entity in entities:
            n, _ = resolve_normal(context(pos, entity))
            assert abs(np.linalg.norm(n) - 1.0) <= 1e-5


def test_unknown_entity_raises():
    ctx = context((0.0, 0.0, 0.0), NoEntity())
    object.__setattr__(ctx, "impacted_entity", 42)
    with pytest.raises(TypeError):
        resolve_normal(ctx)
