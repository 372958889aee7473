import pytest

from qrsolid.geometry import MaterialTag, Solid, build_solids
from qrsolid.grid import ModuleGrid
from qrsolid.render import MATERIAL_COLORS, attribute_names, vertex_arrays


def test_vertex_arrays_three_vertices_per_triangle():
    solids = build_solids(ModuleGrid.from_rows(["#.", ".#"]), 80.0, 5.0, 2.0, 5.0)
    positions, normals, colors = vertex_arrays(solids)
    vertices = len(solids) * 12 * 3
    assert len(positions) == vertices * 3
    assert len(normals) == vertices * 3
    assert len(colors) == vertices * 4


def test_vertex_arrays_colors_follow_material():
    plate = Solid(center=(0.0, 0.0, -2.5), extents=(10.0, 10.0, 5.0),
                  material=MaterialTag.BASE_PLATE_LIGHT)
    _, _, colors = vertex_arrays([plate])
    assert tuple(colors[:4]) == MATERIAL_COLORS[MaterialTag.BASE_PLATE_LIGHT]


def test_vertex_arrays_empty_scene():
    assert vertex_arrays([]) == ([], [], [])


def test_attribute_names_for_gltf_style_shader():
    available = {"POSITION": 0, "NORMAL": 1, "COLOR_0": 2, "TEXCOORD_0": 3}
    assert attribute_names(available) == ("POSITION", "NORMAL", "COLOR_0")


def test_attribute_names_for_older_default_shader():
    available = {"position": 0, "normals": 1, "colors": 2}
    assert attribute_names(available) == ("position", "normals", "colors")


def test_attribute_names_unknown_shader():
    with pytest.raises(RuntimeError):
        attribute_names({"vertex": 0})
