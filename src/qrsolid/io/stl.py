"""STL import and export for qrsolid meshes."""

from __future__ import annotations

import io
import logging
import re
import struct
from typing import Iterable, List, Sequence, Union

from qrsolid.geometry import Solid
from qrsolid.geometry_utils import Triangle
from qrsolid.mesh import MeshBuffer, export_scene
from qrsolid.scene import Scene

logger = logging.getLogger(__name__)

_HEADER_SIZE = 80
_STRUCT_COUNT = struct.Struct('<I')
_STRUCT_TRIANGLE = struct.Struct('<12fH')

Exportable = Union[MeshBuffer, Scene, Sequence[Solid]]


def _as_buffer(obj: Exportable) -> MeshBuffer:
    if isinstance(obj, MeshBuffer):
        return obj
    return export_scene(obj)


def write_stl(obj: Exportable, path_or_file, *, binary: bool = True, name: str | None = None) -> None:
    """Write ``obj`` (mesh buffer, scene or solids) to STL.

    ``path_or_file`` can be a filesystem path or an open binary/text stream.
    When ``name`` is omitted the buffer's own name is used.
    """

    buffer = _as_buffer(obj)
    label = buffer.name if name is None else name

    if binary:
        _write_binary(buffer.triangles, path_or_file, label)
    else:
        _write_ascii(buffer.triangles, path_or_file, label)


def stl_bytes(obj: Exportable, *, name: str | None = None) -> bytes:
    """Return the binary STL encoding of ``obj``."""

    stream = io.BytesIO()
    write_stl(obj, stream, binary=True, name=name)
    return stream.getvalue()


def _header(name: str) -> bytes:
    header = (name or '')[:_HEADER_SIZE].encode('ascii', errors='replace')
    return header.ljust(_HEADER_SIZE, b'\0')


def _write_binary(triangles: Sequence[Triangle], path_or_file, name: str) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'wb')
        close_when_done = True

    try:
        stream.write(_header(name))
        stream.write(_STRUCT_COUNT.pack(len(triangles)))

        for tri in triangles:
            data = _STRUCT_TRIANGLE.pack(
                *tri.normal,
                *tri.v0,
                *tri.v1,
                *tri.v2,
                0,
            )
            stream.write(data)
    finally:
        if close_when_done:
            stream.close()
    logger.debug("wrote binary STL with %d triangles", len(triangles))


def _write_ascii(triangles: Iterable[Triangle], path_or_file, name: str) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'w', encoding='ascii')
        close_when_done = True

    name = name or 'qrsolid'
    try:
        print(f"solid {name}", file=stream)
        for tri in triangles:
            print(f"  facet normal {tri.normal[0]:.6e} {tri.normal[1]:.6e} {tri.normal[2]:.6e}", file=stream)
            print("    outer loop", file=stream)
            print(f"      vertex {tri.v0[0]:.6e} {tri.v0[1]:.6e} {tri.v0[2]:.6e}", file=stream)
            print(f"      vertex {tri.v1[0]:.6e} {tri.v1[1]:.6e} {tri.v1[2]:.6e}", file=stream)
            print(f"      vertex {tri.v2[0]:.6e} {tri.v2[1]:.6e} {tri.v2[2]:.6e}", file=stream)
            print("    endloop", file=stream)
            print("  endfacet", file=stream)
        print(f"endsolid {name}", file=stream)
    finally:
        if close_when_done:
            stream.close()


# ---------------------------------------------------------------------------
# STL Import
# ---------------------------------------------------------------------------


def _is_binary_stl(data: bytes) -> bool:
    """Determine if STL data is binary format.

    Binary STL has 80-byte header + 4-byte count, then 50 bytes per triangle.
    ASCII STL starts with 'solid' keyword.
    """
    if len(data) < 84:
        return False

    header = data[:80].decode('ascii', errors='ignore').strip().lower()
    if not header.startswith('solid'):
        return True

    # 'solid' may just be header text; trust the size when it matches
    tri_count = _STRUCT_COUNT.unpack(data[80:84])[0]
    if len(data) == 84 + tri_count * 50:
        rest = data[84:min(200, len(data))]
        return not (b'facet' in rest or b'vertex' in rest)
    return False


def _parse_binary_stl(data: bytes) -> tuple[str, List[Triangle]]:
    if len(data) < 84:
        raise ValueError("Invalid binary STL: file too small")

    name = data[:_HEADER_SIZE].rstrip(b'\0 ').decode('ascii', errors='replace')
    tri_count = _STRUCT_COUNT.unpack(data[80:84])[0]
    if len(data) < 84 + tri_count * 50:
        raise ValueError(f"Invalid binary STL: header announces {tri_count} triangles "
                         f"but only {(len(data) - 84) // 50} are present")

    triangles = []
    for offset in range(84, 84 + tri_count * 50, 50):
        values = _STRUCT_TRIANGLE.unpack_from(data, offset)
        triangles.append(Triangle(normal=values[0:3], v0=values[3:6], v1=values[6:9], v2=values[9:12]))
    return name, triangles


_FACET = re.compile(
    r'facet\s+normal\s+([eE\d.+-]+)\s+([eE\d.+-]+)\s+([eE\d.+-]+)\s+'
    r'outer\s+loop\s+'
    r'vertex\s+([eE\d.+-]+)\s+([eE\d.+-]+)\s+([eE\d.+-]+)\s+'
    r'vertex\s+([eE\d.+-]+)\s+([eE\d.+-]+)\s+([eE\d.+-]+)\s+'
    r'vertex\s+([eE\d.+-]+)\s+([eE\d.+-]+)\s+([eE\d.+-]+)\s+'
    r'endloop\s+endfacet',
    re.IGNORECASE
)


def _parse_ascii_stl(text: str) -> tuple[str, List[Triangle]]:
    first = text.lstrip().splitlines()[0] if text.strip() else ''
    name = first[len('solid'):].strip() if first.lower().startswith('solid') else ''

    triangles = []
    for match in _FACET.finditer(text):
        values = tuple(float(g) for g in match.groups())
        triangles.append(Triangle(normal=values[0:3], v0=values[3:6], v1=values[6:9], v2=values[9:12]))
    return name, triangles


def read_stl(path_or_file) -> MeshBuffer:
    """Read a binary or ASCII STL file into a :class:`MeshBuffer`.

    Binary files must contain at least as many triangle records as their
    header announces; a truncated file raises ``ValueError``.
    """

    if hasattr(path_or_file, 'read'):
        data = path_or_file.read()
        if isinstance(data, str):
            data = data.encode('utf-8')
    else:
        with open(path_or_file, 'rb') as f:
            data = f.read()

    if _is_binary_stl(data):
        name, triangles = _parse_binary_stl(data)
    else:
        name, triangles = _parse_ascii_stl(data.decode('utf-8', errors='replace'))

    return MeshBuffer(triangles=tuple(triangles), name=name)


__all__ = ['write_stl', 'stl_bytes', 'read_stl']
