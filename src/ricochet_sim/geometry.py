# MIT License (see LICENSE)
r"""
Impact geometry: surface normal and impact class.

Solid objects are treated as boxes. A side hit is quantised to one of
the four horizontal face normals by rotating the centre→impact offset
by 45° and reading the signs of its components:

            +z (forward)
         \   |   /
          \  |  /
    -x ----- + ----- +x
   (left)  / | \  (right)
          /  |  \
            -z (back)

The diagonals of the footprint become the axes after rotation, so each
quadrant of the rotated frame maps to exactly one face.
"""
from __future__ import annotations
from enum import Enum

import numpy as np

from .constants import DEFAULT_ROOF_HEIGHT, GROUND_EPS, TOP_EPS
from .types import ImpactContext, NoEntity, Roof, SolidObject, Terrain
from .util import DOWN, UP, rotate_horizontal

RIGHT = np.array([1.0, 0.0, 0.0], dtype=np.float64)
LEFT = np.array([-1.0, 0.0, 0.0], dtype=np.float64)
FORWARD = np.array([0.0, 0.0, 1.0], dtype=np.float64)
BACK = np.array([0.0, 0.0, -1.0], dtype=np.float64)


class ImpactClass(Enum):
    TERRAIN = "terrain"
    ROOF = "roof"
    OBJECT_TOP = "object_top"
    OBJECT_FACE = "object_face"


def resolve_normal(
    context: ImpactContext,
    roof_height: float = DEFAULT_ROOF_HEIGHT,
    ground_eps: float = GROUND_EPS,
    top_eps: float = TOP_EPS,
    face_rotation_deg: float = 45.0,
) -> tuple[np.ndarray, ImpactClass]:
    """
    Resolve the unit surface normal at the impact point.

    Args:
        context: The impact snapshot.
        roof_height: Height of the roof plane at the impact cell, used when
                     nothing was hit directly.
        ground_eps: Heights below this count as ground level.
        top_eps: Tolerance for hits on the top of a roof or object.
        face_rotation_deg: Rotation applied before quadrant classification.

    Returns:
        (normal, impact class). The normal is a fresh float64 unit vector.
    """
    entity = context.impacted_entity
    y = context.height

    if isinstance(entity, NoEntity):
        if y < ground_eps:
            return UP.copy(), ImpactClass.TERRAIN
        return _roof_normal(y, roof_height, top_eps), ImpactClass.ROOF
    if isinstance(entity, Terrain):
        return UP.copy(), ImpactClass.TERRAIN
    if isinstance(entity, Roof):
        return _roof_normal(y, entity.height, top_eps), ImpactClass.ROOF
    if isinstance(entity, SolidObject):
        if y >= entity.bounds.top - top_eps:
            return UP.copy(), ImpactClass.OBJECT_TOP
        cx, cz = entity.bounds.center
        dx = float(context.position[0]) - cx
        dz = float(context.position[2]) - cz
        return face_normal(dx, dz, face_rotation_deg), ImpactClass.OBJECT_FACE

    raise TypeError(f"Unknown impacted entity type: {type(entity)}")


def _roof_normal(y: float, roof_height: float, top_eps: float) -> np.ndarray:
    # Hit from above lands on the roof's upper face.
    if y >= roof_height - top_eps:
        return UP.copy()
    return DOWN.copy()


def face_normal(dx: float, dz: float, rotation_deg: float = 45.0) -> np.ndarray:
    """Quantise a horizontal offset from an object's centre to a face normal."""
    rx, rz = rotate_horizontal(dx, dz, rotation_deg)
    if rx > 0:
        return (BACK if rz < 0 else RIGHT).copy()
    return (LEFT if rz < 0 else FORWARD).copy()
