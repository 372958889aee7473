"""Flat vertex arrays for drawing a scene, independent of any window toolkit."""

from __future__ import annotations

from typing import Collection, Dict, Iterable, List, Tuple

from qrsolid.geometry import MaterialTag, Solid
from qrsolid.mesh import solid_triangles

MATERIAL_COLORS: Dict[MaterialTag, Tuple[float, float, float, float]] = {
    MaterialTag.MODULE_DARK: (0.25, 0.25, 0.25, 1.0),
    MaterialTag.BASE_PLATE_LIGHT: (1.0, 1.0, 1.0, 1.0),
}

# pyglet 2.1 renamed the default model shader inputs to the glTF names
_ATTRIBUTE_SETS = (
    ("POSITION", "NORMAL", "COLOR_0"),
    ("position", "normals", "colors"),
)


def vertex_arrays(solids: Iterable[Solid]) -> Tuple[List[float], List[float], List[float]]:
    """Return ``(positions, normals, colors)`` with three vertices per triangle.

    Positions and normals hold three floats per vertex, colors hold four
    (RGBA).
    """

    positions: List[float] = []
    normals: List[float] = []
    colors: List[float] = []
    for solid in solids:
        color = MATERIAL_COLORS[solid.material]
        for normal, v0, v1, v2 in solid_triangles(solid):
            for vertex in (v0, v1, v2):
                positions.extend(vertex)
                normals.extend(normal)
                colors.extend(color)
    return positions, normals, colors


def attribute_names(available: Collection[str]) -> Tuple[str, str, str]:
    """Pick the position, normal and color attribute names a shader declares."""

    for names in _ATTRIBUTE_SETS:
        if all(name in available for name in names):
            return names
    raise RuntimeError(f"shader has no known vertex attributes: {sorted(available)}")


__all__ = ["MATERIAL_COLORS", "vertex_arrays", "attribute_names"]
