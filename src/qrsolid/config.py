"""Model configuration: physical sizes, encoder level and export names."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping

from qrsolid.errors import InvalidParameter

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "qrsolid.yaml"

_NUMERIC_FIELDS = ("footprint_mm", "border_mm", "module_thickness_mm", "base_thickness_mm")


@dataclass(frozen=True)
class ModelConfig:
    """Parameters shared by the geometry builder, exporter and CLI.

    All lengths are millimetres.  ``footprint_mm`` is the printed edge length
    of the module field, ``border_mm`` the light margin added on every side of
    the base plate.
    """

    footprint_mm: float = 80.0
    border_mm: float = 5.0
    module_thickness_mm: float = 2.0
    base_thickness_mm: float = 5.0
    ecc: str = "LOW"
    export_name: str = "QR Code.stl"
    sketch_name: str = "QR Code.dxf"
    header: str = ""
    initial_text: str = "Hello World"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ModelConfig":
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise InvalidParameter(f"configuration must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidParameter(f"unknown configuration keys: {', '.join(unknown)}")
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in _NUMERIC_FIELDS:
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise InvalidParameter(f"{key} must be a number, got {value!r}")
                values[key] = float(value)
            else:
                if not isinstance(value, str):
                    raise InvalidParameter(f"{key} must be a string, got {value!r}")
                values[key] = value
        return cls(**values)

    @classmethod
    def load(cls, path: Path | str) -> "ModelConfig":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"configuration not found: {path}")
        import yaml  # local import to avoid hard dependency if unused

        with path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
        logger.debug("loaded configuration from %s", path)
        return cls.from_mapping(data)

    def save(self, path: Path | str) -> None:
        import yaml

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fp:
            yaml.safe_dump(self.to_dict(), fp, sort_keys=False)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    def replace(self, **overrides: Any) -> "ModelConfig":
        """Return a copy with every non-``None`` override applied."""

        data = self.to_dict()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return ModelConfig.from_mapping(data)


__all__ = ["ModelConfig", "CONFIG_FILENAME"]
