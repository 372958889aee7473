"""Wi-Fi network payloads in the ``WIFI:`` URI form understood by phones."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

_FALSE_STRINGS = frozenset({"", "0", "false", "off", "no"})


def _form_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


@dataclass(frozen=True)
class WifiNetwork:
    ssid: str
    security: str = "none"
    password: str = ""
    hidden: bool = False

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "WifiNetwork":
        """Build a network from submitted form fields.

        A form without a ``security`` field at all is treated as ``WPA``;
        the ``hidden`` checkbox counts as set for any value except the usual
        false spellings.
        """

        security = form["security"] if "security" in form else "WPA"
        return cls(
            ssid=str(form.get("ssid") or ""),
            security=str(security or "none"),
            password=str(form.get("password") or ""),
            hidden=_form_flag(form.get("hidden")),
        )

    @property
    def secured(self) -> bool:
        return (self.security or "none") != "none"


def wifi_uri(network: WifiNetwork) -> str:
    """Return e.g. ``WIFI:S:Home;T:WPA;P:secret;H:true``.

    Field values are inserted verbatim.
    """

    parts = [f"S:{network.ssid}"]
    if network.secured:
        parts.append(f"T:{network.security}")
        parts.append(f"P:{network.password}")
    if network.hidden:
        parts.append("H:true")
    return "WIFI:" + ";".join(parts)


__all__ = ["WifiNetwork", "wifi_uri"]
