"""Conversion between destination names and URL fragment tokens."""
from __future__ import annotations

from typing import Iterable, Optional

from .config import Destination

_OFFICE_TOKENS = ("cashier", "registrar")


def to_slug(name: str) -> str:
    """Return the address token for a destination name.

    ``"ADMIN BUILDING"`` becomes ``"admin"`` and ``"CLINIC OFFICE"`` becomes
    ``"clinic"``.
    """

    return name.lower().replace(" building", "").replace(" office", "").replace(" ", "-")


def _capitalize_parts(token: str) -> str:
    return " ".join(part[:1].upper() + part[1:] for part in token.split("-"))


def from_slug(token: str) -> str:
    """Best-effort display name for a token.

    Not an inverse of :func:`to_slug`; use :func:`resolve` to match a token
    against the catalog.
    """

    if token == "centennial":
        return "CENTENNIAL BUILDING"
    if any(office in token for office in _OFFICE_TOKENS):
        return _capitalize_parts(token) + " Office"
    return _capitalize_parts(token) + " BUILDING"


def resolve(token: str, destinations: Iterable[Destination]) -> Optional[Destination]:
    """Return the destination whose name encodes to ``token``."""

    if not token:
        return None
    for destination in destinations:
        if to_slug(destination.name) == token:
            return destination
    return None
