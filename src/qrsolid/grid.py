"""Square module grids and the QR encoder that produces them."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Iterator, Sequence, Tuple

import numpy as np

from qrsolid.errors import EncodingFailed, InvalidParameter

logger = logging.getLogger(__name__)

_DARK_CHARS = frozenset("#1Xx")
_LIGHT_CHARS = frozenset(".0 _")


class EccLevel(Enum):
    """QR error correction level."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    QUARTILE = "QUARTILE"
    HIGH = "HIGH"

    @classmethod
    def parse(cls, value: "EccLevel | str") -> "EccLevel":
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            names = ", ".join(level.name for level in cls)
            raise InvalidParameter(f"unknown error correction level {value!r} (expected one of {names})") from None

    def to_qrcode(self) -> int:
        from qrcode import constants

        return {
            EccLevel.LOW: constants.ERROR_CORRECT_L,
            EccLevel.MEDIUM: constants.ERROR_CORRECT_M,
            EccLevel.QUARTILE: constants.ERROR_CORRECT_Q,
            EccLevel.HIGH: constants.ERROR_CORRECT_H,
        }[self]


class ModuleGrid:
    """Immutable ``size x size`` boolean matrix; ``True`` marks a dark module.

    Rows are indexed by ``y`` (top to bottom) and columns by ``x`` (left to
    right), matching the way QR symbols are drawn.
    """

    __slots__ = ("_modules",)

    def __init__(self, modules: Iterable[Sequence[bool]] | np.ndarray):
        try:
            arr = np.array(modules, dtype=bool)
        except (ValueError, TypeError) as exc:
            raise InvalidParameter(f"module grid must be square, got ragged rows: {exc}") from exc
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise InvalidParameter(f"module grid must be square, got shape {arr.shape}")
        if arr.shape[0] == 0:
            raise InvalidParameter("module grid must not be empty")
        arr.setflags(write=False)
        self._modules = arr

    @classmethod
    def empty(cls, size: int) -> "ModuleGrid":
        if size <= 0:
            raise InvalidParameter(f"Value out of range: size={size!r}")
        return cls(np.zeros((size, size), dtype=bool))

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "ModuleGrid":
        """Build a grid from strings such as ``"#..#"`` (``#``/``1`` dark)."""

        parsed = []
        for y, row in enumerate(rows):
            line = []
            for x, ch in enumerate(row):
                if ch in _DARK_CHARS:
                    line.append(True)
                elif ch in _LIGHT_CHARS:
                    line.append(False)
                else:
                    raise InvalidParameter(f"unexpected module character {ch!r} at ({x}, {y})")
            parsed.append(line)
        if not parsed or any(len(line) != len(parsed) for line in parsed):
            raise InvalidParameter("module grid must be square")
        return cls(parsed)

    @property
    def size(self) -> int:
        return int(self._modules.shape[0])

    @property
    def dark_count(self) -> int:
        return int(self._modules.sum())

    def module(self, x: int, y: int) -> bool:
        """Return the module at ``(x, y)``; anything outside the grid is light."""

        if 0 <= x < self.size and 0 <= y < self.size:
            return bool(self._modules[y, x])
        return False

    def dark_modules(self) -> Iterator[Tuple[int, int]]:
        """Yield ``(x, y)`` of every dark module in row-major order."""

        for y, x in zip(*np.nonzero(self._modules)):
            yield int(x), int(y)

    def to_array(self) -> np.ndarray:
        return self._modules.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleGrid):
            return NotImplemented
        return np.array_equal(self._modules, other._modules)

    def __hash__(self) -> int:
        return hash((self.size, self._modules.tobytes()))

    def __repr__(self) -> str:
        return f"ModuleGrid(size={self.size}, dark={self.dark_count})"


def encode(text: str, ecc: EccLevel | str = EccLevel.LOW) -> ModuleGrid:
    """Encode ``text`` as a QR symbol using the smallest version that fits.

    The returned grid excludes the quiet zone; the base plate border takes
    its place in the printed model.
    """

    import qrcode
    from qrcode.exceptions import DataOverflowError

    level = EccLevel.parse(ecc)
    qr = qrcode.QRCode(version=None, error_correction=level.to_qrcode(), border=0)
    try:
        qr.add_data(text)
        qr.make(fit=True)
        matrix = qr.get_matrix()
    except DataOverflowError as exc:
        raise EncodingFailed(f"payload of {len(text)} characters does not fit a QR code at level {level.name}") from exc
    except (ValueError, TypeError) as exc:
        raise EncodingFailed(f"QR encoder rejected payload: {exc}") from exc
    grid = ModuleGrid(matrix)
    logger.debug("encoded %d characters as version %s (%dx%d)", len(text), qr.version, grid.size, grid.size)
    return grid


__all__ = ["EccLevel", "ModuleGrid", "encode"]
