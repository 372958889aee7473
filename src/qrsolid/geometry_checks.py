"""Validation helpers for generated layouts and meshes."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence

from qrsolid.geometry import Solid, base_plates, module_solids
from qrsolid.geometry_utils import (
    dot,
    epsilon,
    mag,
    triangle_area,
    triangle_centroid,
    triangle_normal,
    vertex_key,
)
from qrsolid.mesh import TRIANGLES_PER_SOLID, MeshBuffer

_TOL = 1e-9


@dataclass
class CheckResult:
    ok: bool
    warnings: List[str]

    def __bool__(self) -> bool:
        return self.ok


def footprints_overlap(a: Solid, b: Solid, tol: float = _TOL) -> bool:
    """Return ``True`` if the x/y footprints share a region of positive area.

    Touching edges do not count as overlap.
    """

    ax0, ay0, ax1, ay1 = a.footprint
    bx0, by0, bx1, by1 = b.footprint
    return (min(ax1, bx1) - max(ax0, bx0) > tol) and (min(ay1, by1) - max(ay0, by0) > tol)


def footprint_within(inner: Solid, outer: Solid, tol: float = _TOL) -> bool:
    ix0, iy0, ix1, iy1 = inner.footprint
    ox0, oy0, ox1, oy1 = outer.footprint
    return ix0 >= ox0 - tol and iy0 >= oy0 - tol and ix1 <= ox1 + tol and iy1 <= oy1 + tol


def _overlapping_pairs(modules: Sequence[Solid], tol: float) -> List[tuple[int, int]]:
    # sweep along x so grid-aligned layouts stay close to linear
    order = sorted(range(len(modules)), key=lambda i: modules[i].footprint[0])
    pairs = []
    for pos, i in enumerate(order):
        x_end = modules[i].footprint[2]
        for j in order[pos + 1:]:
            if modules[j].footprint[0] >= x_end - tol:
                break
            if footprints_overlap(modules[i], modules[j], tol):
                pairs.append((min(i, j), max(i, j)))
    return pairs


def check_layout(solids: Sequence[Solid], tol: float = 1e-6) -> CheckResult:
    """Verify plate count, module overlap, containment and flush seating."""

    warnings: List[str] = []
    plates = base_plates(solids)
    modules = module_solids(solids)

    if len(plates) != 1:
        return CheckResult(False, [f'expected exactly one base plate, found {len(plates)}'])
    plate = plates[0]

    overlaps = _overlapping_pairs(modules, tol)
    if overlaps:
        warnings.append(f'{len(overlaps)} overlapping module pairs: {overlaps[:5]}')

    outside = [idx for idx, m in enumerate(modules) if not footprint_within(m, plate, tol)]
    if outside:
        warnings.append(f'modules outside the base plate: {outside[:5]}')

    floating = [idx for idx, m in enumerate(modules) if not math.isclose(m.bottom, plate.top, abs_tol=tol)]
    if floating:
        warnings.append(f'modules not seated on the plate top: {floating[:5]}')

    return CheckResult(not warnings, warnings)


def _edge_key(a, b):
    return (a, b) if a < b else (b, a)


def mesh_closed(buffer: MeshBuffer) -> CheckResult:
    """Check that every per-solid group of triangles is a closed shell of non-degenerate facets."""

    tris = buffer.triangles
    if len(tris) % TRIANGLES_PER_SOLID:
        return CheckResult(False, [f'{len(tris)} triangles is not a multiple of {TRIANGLES_PER_SOLID}'])

    warnings: List[str] = []
    for group, start in enumerate(range(0, len(tris), TRIANGLES_PER_SOLID)):
        edges = Counter()
        for tri in tris[start:start + TRIANGLES_PER_SOLID]:
            a, b, c = (vertex_key(v) for v in (tri.v0, tri.v1, tri.v2))
            edges[_edge_key(a, b)] += 1
            edges[_edge_key(b, c)] += 1
            edges[_edge_key(c, a)] += 1
        boundary = sum(1 for count in edges.values() if count == 1)
        invalid = sum(1 for count in edges.values() if count > 2)
        if boundary or invalid:
            warnings.append(f'solid {group}: {boundary} boundary edges, {invalid} non-manifold edges')
        degenerate = sum(1 for tri in tris[start:start + TRIANGLES_PER_SOLID]
                         if triangle_area(tri.v0, tri.v1, tri.v2) <= epsilon)
        if degenerate:
            warnings.append(f'solid {group}: {degenerate} degenerate facets')

    return CheckResult(not warnings, warnings)


def faces_outward(buffer: MeshBuffer, solids: Sequence[Solid], tol: float = 1e-6) -> CheckResult:
    """Check unit length, outward direction and winding of every facet."""

    tris = buffer.triangles
    if len(tris) != TRIANGLES_PER_SOLID * len(solids):
        return CheckResult(False, [f'{len(tris)} triangles for {len(solids)} solids'])

    inward = []
    not_unit = []
    misordered = []
    for idx, tri in enumerate(tris):
        center = solids[idx // TRIANGLES_PER_SOLID].center
        if not math.isclose(mag(tri.normal), 1.0, abs_tol=tol):
            not_unit.append(idx)
        c = triangle_centroid(tri.v0, tri.v1, tri.v2)
        if dot(tri.normal, (c[0] - center[0], c[1] - center[1], c[2] - center[2])) <= 0:
            inward.append(idx)
        winding = triangle_normal(tri.v0, tri.v1, tri.v2)
        if winding is None or dot(winding, tri.normal) <= 0:
            misordered.append(idx)

    warnings = []
    if not_unit:
        warnings.append(f'non-unit normals at triangles {not_unit[:5]}')
    if inward:
        warnings.append(f'inward-facing triangles {inward[:5]}')
    if misordered:
        warnings.append(f'winding disagrees with normal at triangles {misordered[:5]}')
    return CheckResult(not warnings, warnings)


__all__ = [
    'CheckResult',
    'footprints_overlap',
    'footprint_within',
    'check_layout',
    'mesh_closed',
    'faces_outward',
]
