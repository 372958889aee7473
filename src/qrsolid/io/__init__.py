"""I/O utilities for qrsolid."""

from .stl import read_stl, stl_bytes, write_stl
from .sink import DirectorySink, FileSink, MemorySink, StreamSink

__all__ = [
    'read_stl',
    'stl_bytes',
    'write_stl',
    'FileSink',
    'DirectorySink',
    'MemorySink',
    'StreamSink',
]
