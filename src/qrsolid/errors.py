"""Exceptions raised by qrsolid.

Every failure in this package is deterministic for a given input, so
nothing here is retried; callers decide whether to report or abort.
"""


class QrSolidError(Exception):
    """Base class for all qrsolid errors."""


class InvalidParameter(QrSolidError, ValueError):
    """A geometry or configuration value is out of range."""


class EncodingFailed(QrSolidError, ValueError):
    """The QR encoder rejected the payload (too long, bad level, ...)."""


class ExportFailed(QrSolidError, OSError):
    """The host refused to persist an exported artifact."""


class NothingDrawn(QrSolidError, LookupError):
    """An export needs a symbol but no payload has been drawn yet."""


__all__ = [
    "QrSolidError",
    "InvalidParameter",
    "EncodingFailed",
    "ExportFailed",
    "NothingDrawn",
]
