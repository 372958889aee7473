"""
Flat 2D drawing of a module grid, exported as DXF.

Useful for laser cutting, vinyl plotting, or checking a symbol before
printing the solid.  Each module is ``scale`` drawing units wide and the
quiet zone adds ``border`` light modules on every side; row 0 of the grid
ends up at the top of the drawing.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import List, Tuple

from qrsolid.errors import InvalidParameter
from qrsolid.grid import ModuleGrid

logger = logging.getLogger(__name__)

MODULE_LAYER = "MODULES"
BORDER_LAYER = "BORDER"


def _square(x0: float, y0: float, size: float) -> List[Tuple[float, float]]:
    return [(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)]


def sketch_document(grid: ModuleGrid, scale: float = 10.0, border: int = 4):
    """Return an ``ezdxf`` document with the symbol drawn in model space."""

    if not scale > 0 or border < 0:
        raise InvalidParameter(f"Value out of range: scale={scale!r}, border={border!r}")

    import ezdxf
    from ezdxf import units

    doc = ezdxf.new("R2010")
    doc.units = units.MM
    doc.layers.add(MODULE_LAYER, color=7)
    doc.layers.add(BORDER_LAYER, color=8)
    msp = doc.modelspace()

    width = (grid.size + 2 * border) * scale
    msp.add_lwpolyline(_square(0.0, 0.0, width), close=True, dxfattribs={"layer": BORDER_LAYER})

    top_row = grid.size + border - 1
    for x, y in grid.dark_modules():
        corners = _square((x + border) * scale, (top_row - y) * scale, scale)
        msp.add_lwpolyline(corners, close=True, dxfattribs={"layer": MODULE_LAYER})
        hatch = msp.add_hatch(color=7, dxfattribs={"layer": MODULE_LAYER})
        hatch.paths.add_polyline_path(corners, is_closed=True)

    logger.debug("sketched %d modules on a %.2f unit square", grid.dark_count, width)
    return doc


def sketch_bytes(grid: ModuleGrid, scale: float = 10.0, border: int = 4) -> bytes:
    stream = io.StringIO()
    sketch_document(grid, scale, border).write(stream)
    return stream.getvalue().encode("utf-8")


def write_dxf(grid: ModuleGrid, path_or_file, scale: float = 10.0, border: int = 4) -> None:
    """Write the drawing to a path or an open text stream."""

    doc = sketch_document(grid, scale, border)
    if hasattr(path_or_file, "write"):
        doc.write(path_or_file)
    else:
        doc.saveas(Path(path_or_file))


__all__ = ["MODULE_LAYER", "BORDER_LAYER", "sketch_document", "sketch_bytes", "write_dxf"]
