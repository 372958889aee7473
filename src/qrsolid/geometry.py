"""Map a module grid onto axis-aligned solids.

The printed model is a base plate whose top face lies in the ``z = 0``
plane, with one block per dark module standing on it.  Grid coordinates
have their origin at the top-left corner and ``y`` growing downwards, so
the builder flips ``y`` to get a right-handed model viewed from above::

    grid (x, y)  ->  model (x * s - F/2 + s/2,  -(y * s - F/2 + s/2))

where ``F`` is the footprint edge length and ``s = F / size`` the module
pitch.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from qrsolid.errors import InvalidParameter
from qrsolid.geometry_utils import Vec3, to_vec3
from qrsolid.grid import ModuleGrid

logger = logging.getLogger(__name__)

Footprint = Tuple[float, float, float, float]


class MaterialTag(Enum):
    MODULE_DARK = "ModuleDark"
    BASE_PLATE_LIGHT = "BasePlateLight"


@dataclass(frozen=True)
class Solid:
    """Axis-aligned box given by its ``center`` and full ``extents``.

    ``extents`` are ``(width, depth, height)`` along x, y and z.
    """

    center: Vec3
    extents: Vec3
    material: MaterialTag

    def __post_init__(self) -> None:
        center = to_vec3(self.center)
        extents = to_vec3(self.extents)
        if not all(math.isfinite(c) for c in center):
            raise InvalidParameter(f"Value out of range: center={center!r}")
        if not all(math.isfinite(e) and e > 0 for e in extents):
            raise InvalidParameter(f"Value out of range: extents={extents!r}")
        object.__setattr__(self, "center", center)
        object.__setattr__(self, "extents", extents)
        object.__setattr__(self, "material", MaterialTag(self.material))

    @property
    def bounds(self) -> Tuple[Vec3, Vec3]:
        """Return ``(min_corner, max_corner)``."""

        cx, cy, cz = self.center
        hx, hy, hz = (e / 2.0 for e in self.extents)
        return (cx - hx, cy - hy, cz - hz), (cx + hx, cy + hy, cz + hz)

    @property
    def footprint(self) -> Footprint:
        """Return ``(xmin, ymin, xmax, ymax)``."""

        lo, hi = self.bounds
        return lo[0], lo[1], hi[0], hi[1]

    @property
    def bottom(self) -> float:
        return self.center[2] - self.extents[2] / 2.0

    @property
    def top(self) -> float:
        return self.center[2] + self.extents[2] / 2.0


def _require_positive(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter(f"Value out of range: {name}={value!r}") from None
    if not (math.isfinite(value) and value > 0):
        raise InvalidParameter(f"Value out of range: {name}={value!r}")
    return value


def build_solids(grid: ModuleGrid,
                 footprint_mm: float,
                 border_mm: float,
                 module_thickness_mm: float,
                 base_thickness_mm: float) -> List[Solid]:
    """Return one solid per dark module followed by the base plate.

    Module solids are emitted in row-major ``(y, x)`` order so the result,
    and therefore any exported mesh, is byte-for-byte reproducible.
    """

    footprint_mm = _require_positive("footprint_mm", footprint_mm)
    border_mm = _require_positive("border_mm", border_mm)
    module_thickness_mm = _require_positive("module_thickness_mm", module_thickness_mm)
    base_thickness_mm = _require_positive("base_thickness_mm", base_thickness_mm)
    if grid.size <= 0:
        raise InvalidParameter(f"Value out of range: size={grid.size!r}")

    scale = footprint_mm / grid.size
    half = footprint_mm / 2.0
    module_extents = (scale, scale, module_thickness_mm)
    module_z = module_thickness_mm / 2.0

    solids: List[Solid] = []
    for x, y in grid.dark_modules():
        cx = x * scale - half + scale / 2.0
        cy = -(y * scale - half + scale / 2.0)
        solids.append(Solid((cx, cy, module_z), module_extents, MaterialTag.MODULE_DARK))

    plate = footprint_mm + 2.0 * border_mm
    solids.append(Solid((0.0, 0.0, -base_thickness_mm / 2.0),
                        (plate, plate, base_thickness_mm),
                        MaterialTag.BASE_PLATE_LIGHT))

    logger.debug("built %d module solids on a %.3f mm plate (pitch %.4f mm)",
                 len(solids) - 1, plate, scale)
    return solids


def bounding_box(solids: Iterable[Solid]) -> Tuple[Vec3, Vec3] | None:
    """Return the combined ``(min_corner, max_corner)`` or ``None`` if empty."""

    lo: List[float] | None = None
    hi: List[float] | None = None
    for solid in solids:
        s_lo, s_hi = solid.bounds
        if lo is None:
            lo, hi = list(s_lo), list(s_hi)
            continue
        for i in range(3):
            lo[i] = min(lo[i], s_lo[i])
            hi[i] = max(hi[i], s_hi[i])
    if lo is None:
        return None
    return (lo[0], lo[1], lo[2]), (hi[0], hi[1], hi[2])


def module_solids(solids: Sequence[Solid]) -> List[Solid]:
    return [s for s in solids if s.material is MaterialTag.MODULE_DARK]


def base_plates(solids: Sequence[Solid]) -> List[Solid]:
    return [s for s in solids if s.material is MaterialTag.BASE_PLATE_LIGHT]


__all__ = [
    "MaterialTag",
    "Solid",
    "build_solids",
    "bounding_box",
    "module_solids",
    "base_plates",
]
