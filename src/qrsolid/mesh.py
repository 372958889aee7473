"""Triangulated views of solids and the immutable mesh buffer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Tuple, Union

from qrsolid.geometry import Solid
from qrsolid.geometry_utils import Triangle, Vec3, triangles_from_mesh
from qrsolid.scene import Scene

logger = logging.getLogger(__name__)

TriTuple = Tuple[Vec3, Vec3, Vec3, Vec3]

TRIANGLES_PER_SOLID = 12

# Faces in export order.  Each entry is the outward normal and the four
# corners as (x, y, z) selectors into (lo, hi), listed counter-clockwise
# when seen from outside.
_FACES = (
    ((-1.0, 0.0, 0.0), ((0, 0, 0), (0, 0, 1), (0, 1, 1), (0, 1, 0))),
    ((1.0, 0.0, 0.0), ((1, 0, 0), (1, 1, 0), (1, 1, 1), (1, 0, 1))),
    ((0.0, -1.0, 0.0), ((0, 0, 0), (1, 0, 0), (1, 0, 1), (0, 0, 1))),
    ((0.0, 1.0, 0.0), ((0, 1, 0), (0, 1, 1), (1, 1, 1), (1, 1, 0))),
    ((0.0, 0.0, -1.0), ((0, 0, 0), (0, 1, 0), (1, 1, 0), (1, 0, 0))),
    ((0.0, 0.0, 1.0), ((0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1))),
)


def solid_triangles(solid: Solid) -> Iterator[TriTuple]:
    """Yield the 12 triangles of ``solid`` as ``(normal, v0, v1, v2)``.

    Faces come in the order -X, +X, -Y, +Y, -Z, +Z, two triangles each.
    """

    lo, hi = solid.bounds
    pick = (lo, hi)
    for normal, corners in _FACES:
        a, b, c, d = (
            (pick[sx][0], pick[sy][1], pick[sz][2]) for sx, sy, sz in corners
        )
        yield normal, a, b, c
        yield normal, a, c, d


def mesh_view(solids: Iterable[Solid]) -> Iterator[TriTuple]:
    """Yield triangles for every solid in order."""

    for solid in solids:
        yield from solid_triangles(solid)


@dataclass(frozen=True)
class MeshBuffer:
    """Triangles ready for serialization; ``name`` ends up in the STL header."""

    triangles: Tuple[Triangle, ...]
    name: str = ""

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    @property
    def byte_size(self) -> int:
        """Length of the binary STL encoding of this buffer."""
        return 84 + 50 * len(self.triangles)

    def to_bytes(self) -> bytes:
        from qrsolid.io.stl import stl_bytes

        return stl_bytes(self, name=self.name)

    def __len__(self) -> int:
        return len(self.triangles)

    def __iter__(self) -> Iterator[Triangle]:
        return iter(self.triangles)


def export_scene(scene: Union[Scene, Sequence[Solid]], name: str = "") -> MeshBuffer:
    """Triangulate a scene snapshot (or a plain list of solids)."""

    solids = scene.current() if isinstance(scene, Scene) else tuple(scene)
    triangles = tuple(triangles_from_mesh(mesh_view(solids)))
    logger.debug("exported %d solids as %d triangles", len(solids), len(triangles))
    return MeshBuffer(triangles=triangles, name=name)


__all__ = [
    "TRIANGLES_PER_SOLID",
    "MeshBuffer",
    "solid_triangles",
    "mesh_view",
    "export_scene",
]
