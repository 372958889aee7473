"""Interactive pyglet window that follows a live :class:`Scene`."""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

import pyglet
from pyglet.gl import GL_DEPTH_TEST, GL_TRIANGLES, glClearColor, glEnable
from pyglet.math import Mat4, Vec3
from pyglet.window import key

from qrsolid.geometry import bounding_box
from qrsolid.render import MATERIAL_COLORS, attribute_names, vertex_arrays
from qrsolid.scene import Scene

logger = logging.getLogger(__name__)


class SceneWindow(pyglet.window.Window):
    """Orbit view of the scene.

    Drag to orbit, scroll to zoom, ``E`` to export, ``Esc`` to close.
    """

    def __init__(self, scene: Scene, *, on_export: Optional[Callable[[], None]] = None,
                 width: int = 1024, height: int = 768):
        super().__init__(width=width, height=height, caption="qrsolid", resizable=True)
        self.scene = scene
        self.on_export = on_export
        self.program = pyglet.model.get_default_shader()
        self._attributes = attribute_names(self.program.attributes)
        self.batch = pyglet.graphics.Batch()
        self._vertex_list = None
        self._built_generation = -1
        self.azimuth = -90.0
        self.elevation = 50.0
        self.distance = 120.0
        self._unsubscribe = scene.subscribe(self._on_scene_replaced)
        glClearColor(0.93, 0.93, 0.93, 1.0)
        glEnable(GL_DEPTH_TEST)

    def _on_scene_replaced(self, scene: Scene) -> None:
        # rebuilt lazily on the next frame
        self.invalid = True

    def _rebuild(self) -> None:
        if self._vertex_list is not None:
            self._vertex_list.delete()
            self._vertex_list = None

        solids = self.scene.current()
        self._built_generation = self.scene.generation
        positions, normals, colors = vertex_arrays(solids)

        box = bounding_box(solids)
        if box is not None:
            lo, hi = box
            self.distance = max(hi[0] - lo[0], hi[1] - lo[1], 1.0) * 1.3

        count = len(positions) // 3
        if count:
            position, normal, color = self._attributes
            self._vertex_list = self.program.vertex_list(
                count, GL_TRIANGLES, batch=self.batch,
                **{position: ('f', positions),
                   normal: ('f', normals),
                   color: ('f', colors)},
            )
        logger.debug("viewer rebuilt %d vertices for generation %d", count, self._built_generation)

    def _view_matrix(self) -> Mat4:
        theta = math.radians(self.azimuth)
        phi = math.radians(self.elevation)
        eye = Vec3(self.distance * math.cos(phi) * math.cos(theta),
                   self.distance * math.cos(phi) * math.sin(theta),
                   self.distance * math.sin(phi))
        return Mat4.look_at(eye, Vec3(0.0, 0.0, 0.0), Vec3(0.0, 0.0, 1.0))

    def on_draw(self):
        if self._built_generation != self.scene.generation:
            self._rebuild()
        self.clear()
        self.projection = Mat4.perspective_projection(self.aspect_ratio, z_near=0.1, z_far=2000.0, fov=60)
        self.view = self._view_matrix()
        self.program.use()
        if 'model' in self.program.uniforms:
            self.program['model'] = Mat4()
        self.batch.draw()

    def on_mouse_drag(self, x, y, dx, dy, buttons, modifiers):
        self.azimuth -= dx * 0.5
        self.elevation = max(-89.0, min(89.0, self.elevation - dy * 0.5))

    def on_mouse_scroll(self, x, y, scroll_x, scroll_y):
        self.distance = max(1.0, self.distance * (0.9 ** scroll_y))

    def on_key_press(self, symbol, modifiers):
        if symbol == key.E and self.on_export is not None:
            self.on_export()
            return
        super().on_key_press(symbol, modifiers)

    def on_close(self):
        self._unsubscribe()
        super().on_close()


def view_scene(scene: Scene, *, on_export: Optional[Callable[[], None]] = None) -> None:
    """Open a :class:`SceneWindow` and run the pyglet event loop."""

    SceneWindow(scene, on_export=on_export)
    pyglet.app.run()


__all__ = ["MATERIAL_COLORS", "SceneWindow", "view_scene"]
