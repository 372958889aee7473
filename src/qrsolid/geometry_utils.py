"""Common geometric helpers shared across exporters and validators."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

Vec3 = Tuple[float, float, float]

epsilon = 1e-10


@dataclass(frozen=True)
class Triangle:
    """Immutable triangle representation in XYZ space."""

    normal: Vec3
    v0: Vec3
    v1: Vec3
    v2: Vec3


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point or vector as a float tuple."""

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def mag(v: Vec3) -> float:
    return math.sqrt(dot(v, v))


def triangle_normal(v0: Vec3, v1: Vec3, v2: Vec3) -> Vec3 | None:
    """Return the unit normal of a triangle or ``None`` if degenerate."""

    a = (v1[0] - v0[0], v1[1] - v0[1], v1[2] - v0[2])
    b = (v2[0] - v0[0], v2[1] - v0[1], v2[2] - v0[2])
    n = cross(a, b)
    length = mag(n)
    if length <= epsilon:
        return None
    return (n[0] / length, n[1] / length, n[2] / length)


def triangle_area(v0: Vec3, v1: Vec3, v2: Vec3) -> float:
    """Return the area of a triangle."""

    a = (v1[0] - v0[0], v1[1] - v0[1], v1[2] - v0[2])
    b = (v2[0] - v0[0], v2[1] - v0[1], v2[2] - v0[2])
    return 0.5 * mag(cross(a, b))


def triangle_centroid(v0: Vec3, v1: Vec3, v2: Vec3) -> Vec3:
    """Return the centroid of a triangle."""

    return (
        (v0[0] + v1[0] + v2[0]) / 3.0,
        (v0[1] + v1[1] + v2[1]) / 3.0,
        (v0[2] + v1[2] + v2[2]) / 3.0,
    )


def vertex_key(v: Vec3, tol: float = 1e-6) -> Tuple[int, int, int]:
    """Create a hashable key for vertex deduplication."""

    scale = 1.0 / tol
    return (int(round(v[0] * scale)), int(round(v[1] * scale)), int(round(v[2] * scale)))


def triangles_from_mesh(mesh: Iterable[Tuple[Vec3, Vec3, Vec3, Vec3]]) -> Iterable[Triangle]:
    """Convert ``(normal, v0, v1, v2)`` tuples into ``Triangle`` instances."""

    for normal, v0, v1, v2 in mesh:
        yield Triangle(normal=normal, v0=v0, v1=v1, v2=v2)


__all__ = [
    "Triangle",
    "Vec3",
    "to_vec3",
    "cross",
    "dot",
    "mag",
    "triangle_normal",
    "triangle_area",
    "triangle_centroid",
    "vertex_key",
    "triangles_from_mesh",
]
