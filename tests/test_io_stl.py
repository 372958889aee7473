import io
import struct

import pytest

from qrsolid.geometry import build_solids
from qrsolid.grid import ModuleGrid
from qrsolid.io.stl import read_stl, stl_bytes, write_stl
from qrsolid.mesh import export_scene
from qrsolid.scene import Scene


def _plate_only_scene(size=10):
    return Scene(build_solids(ModuleGrid.empty(size), 80, 5, 2, 5))


def _checker_scene():
    rows = ["#.#.#", ".#.#.", "#.#.#", ".#.#.", "#.#.#"]
    return Scene(build_solids(ModuleGrid.from_rows(rows), 80, 5, 2, 5))


def test_plate_only_layout():
    data = stl_bytes(_plate_only_scene())
    assert len(data) == 84 + 600 == 684
    assert struct.unpack('<I', data[80:84])[0] == 12


def test_byte_length_formula():
    scene = _checker_scene()
    data = stl_bytes(scene)
    assert len(data) == 84 + 50 * (12 * len(scene))


def test_header_count_matches_records():
    data = stl_bytes(_checker_scene())
    count = struct.unpack('<I', data[80:84])[0]
    assert (len(data) - 84) % 50 == 0
    assert count == (len(data) - 84) // 50


def test_header_is_zero_filled():
    data = stl_bytes(_plate_only_scene())
    assert data[:80] == b'\0' * 80
    named = stl_bytes(_plate_only_scene(), name='QR Code')
    assert named[:7] == b'QR Code'
    assert named[7:80] == b'\0' * 73


def test_first_record_is_exact():
    data = stl_bytes(_plate_only_scene())
    record = data[84:134]
    expected = struct.pack(
        '<12fH',
        -1.0, 0.0, 0.0,
        -45.0, -45.0, -5.0,
        -45.0, -45.0, 0.0,
        -45.0, 45.0, 0.0,
        0,
    )
    assert record == expected


def test_attribute_bytes_are_zero():
    data = stl_bytes(_checker_scene())
    for offset in range(84 + 48, len(data), 50):
        assert data[offset:offset + 2] == b'\0\0'


def test_empty_scene_exports_header_only():
    data = stl_bytes(Scene())
    assert len(data) == 84
    assert struct.unpack('<I', data[80:84])[0] == 0


def test_mesh_buffer_to_bytes_matches_stl_bytes():
    buffer = export_scene(_checker_scene(), name='demo')
    assert buffer.to_bytes() == stl_bytes(buffer)
    assert len(buffer.to_bytes()) == buffer.byte_size


def test_write_stl_to_path(tmp_path):
    path = tmp_path / 'plate.stl'
    write_stl(_plate_only_scene(), path)
    assert path.stat().st_size == 684


def test_write_stl_ascii():
    buf = io.StringIO()
    write_stl(_plate_only_scene(), buf, binary=False, name='ascii_test')

    text = buf.getvalue()
    assert text.startswith('solid ascii_test')
    assert text.count('facet normal') == 12
    assert text.count('vertex') == 36
    assert text.strip().endswith('endsolid ascii_test')


def test_read_stl_binary_roundtrip(tmp_path):
    scene = _checker_scene()
    path = tmp_path / 'checker.stl'
    write_stl(scene, path, name='checker')

    imported = read_stl(path)
    original = export_scene(scene)
    assert imported.name == 'checker'
    assert imported.triangle_count == original.triangle_count
    assert imported.triangles[0].normal == original.triangles[0].normal


def test_read_stl_ascii_roundtrip(tmp_path):
    path = tmp_path / 'plate_ascii.stl'
    write_stl(_plate_only_scene(), path, binary=False, name='plate')

    imported = read_stl(path)
    assert imported.name == 'plate'
    assert imported.triangle_count == 12
    assert imported.triangles[0].v0 == (-45.0, -45.0, -5.0)


def test_read_stl_empty(tmp_path):
    path = tmp_path / 'empty.stl'
    with open(path, 'wb') as f:
        f.write(b'\0' * 80)
        f.write(struct.pack('<I', 0))

    imported = read_stl(path)
    assert imported.triangle_count == 0


def test_read_stl_truncated_raises():
    data = stl_bytes(_plate_only_scene())
    with pytest.raises(ValueError):
        read_stl(io.BytesIO(data[:-10]))
