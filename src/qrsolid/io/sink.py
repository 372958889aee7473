"""Destinations for exported artifacts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Dict, Optional, Protocol

from qrsolid.errors import ExportFailed

logger = logging.getLogger(__name__)


class FileSink(Protocol):
    """Anything that can persist a byte buffer under a suggested file name."""

    def write(self, data: bytes, suggested_name: str) -> None:
        ...


class DirectorySink:
    """Write each artifact as ``root / suggested_name``."""

    def __init__(self, root: Path | str, *, overwrite: bool = False):
        self.root = Path(root)
        self.overwrite = overwrite
        self.last_path: Optional[Path] = None

    def write(self, data: bytes, suggested_name: str) -> None:
        target = self.root / Path(suggested_name).name
        try:
            if target.exists() and not self.overwrite:
                raise FileExistsError(f"export target already exists: {target}")
            self.root.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise ExportFailed(f"could not write {target}: {exc}") from exc
        self.last_path = target
        logger.info("wrote %d bytes to %s", len(data), target)


class StreamSink:
    """Write artifacts to an already open binary stream (e.g. stdout)."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def write(self, data: bytes, suggested_name: str) -> None:
        try:
            self.stream.write(data)
            self.stream.flush()
        except OSError as exc:
            raise ExportFailed(f"could not write {suggested_name}: {exc}") from exc


class MemorySink:
    """Keep artifacts in a dictionary; useful for embedding and tests."""

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}

    def write(self, data: bytes, suggested_name: str) -> None:
        self.files[suggested_name] = bytes(data)


__all__ = ['FileSink', 'DirectorySink', 'StreamSink', 'MemorySink']
