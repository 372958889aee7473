"""Encode, build, display and export: the whole pipeline behind one object."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from qrsolid.config import ModelConfig
from qrsolid.errors import EncodingFailed, NothingDrawn, QrSolidError
from qrsolid.geometry import Solid, build_solids
from qrsolid.grid import EccLevel, ModuleGrid, encode
from qrsolid.io.sink import FileSink
from qrsolid.io.stl import stl_bytes
from qrsolid.mesh import MeshBuffer, export_scene
from qrsolid.payload import WifiNetwork, wifi_uri
from qrsolid.scene import Scene

logger = logging.getLogger(__name__)

Encoder = Callable[[str, EccLevel], ModuleGrid]


class BarcodeModel:
    """Owns the live :class:`Scene` and the grid it was built from.

    A failed ``draw()`` leaves both untouched, so whatever was displayed
    before stays on screen and remains exportable.
    """

    def __init__(self, config: Optional[ModelConfig] = None,
                 scene: Optional[Scene] = None,
                 encoder: Encoder = encode):
        self.config = config or ModelConfig()
        self.scene = scene if scene is not None else Scene()
        self.encoder = encoder
        self.grid: Optional[ModuleGrid] = None
        self.text: Optional[str] = None

    def _encode(self, text: str) -> ModuleGrid:
        level = EccLevel.parse(self.config.ecc)
        try:
            return self.encoder(text, level)
        except QrSolidError:
            raise
        except Exception as exc:
            raise EncodingFailed(f"QR encoder rejected payload: {exc}") from exc

    def draw(self, text: str) -> Tuple[Solid, ...]:
        grid = self._encode(text)
        cfg = self.config
        solids = build_solids(grid,
                              cfg.footprint_mm,
                              cfg.border_mm,
                              cfg.module_thickness_mm,
                              cfg.base_thickness_mm)
        before = self.scene.generation
        try:
            self.scene.replace(solids)
        finally:
            # a listener may raise after the swap; keep grid and text in step with the scene
            if self.scene.generation != before:
                self.grid = grid
                self.text = text
        logger.info("drew %dx%d symbol as %d solids", grid.size, grid.size, len(solids))
        return self.scene.current()

    def draw_network(self, network: WifiNetwork) -> Tuple[Solid, ...]:
        content = wifi_uri(network)
        logger.debug("network payload: %s", content)
        return self.draw(content)

    def mesh(self) -> MeshBuffer:
        return export_scene(self.scene, name=self.config.header)

    def export(self, sink: FileSink, *, name: Optional[str] = None) -> MeshBuffer:
        """Serialize the current scene as binary STL and hand it to ``sink``."""

        buffer = self.mesh()
        data = stl_bytes(buffer)
        sink.write(data, name or self.config.export_name)
        logger.info("exported %d triangles (%d bytes)", buffer.triangle_count, len(data))
        return buffer

    def export_sketch(self, sink: FileSink, *, scale: float = 10.0, border: int = 4,
                      name: Optional[str] = None) -> None:
        from qrsolid.sketch import sketch_bytes

        if self.grid is None:
            raise NothingDrawn("nothing drawn yet")
        sink.write(sketch_bytes(self.grid, scale, border), name or self.config.sketch_name)


__all__ = ["BarcodeModel"]
