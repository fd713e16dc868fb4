"""Permission levels and the effective read/write/own triple.

Provides:
- ``PermissionLevel``: ordered levels none < read < write < own.
- ``parse_permission_level()``: normalize a stored code into a level.
- ``EffectivePermission``: monotonic read/write/own booleans.
- ``max_level()`` and ``take_upto()``: reductions over level sequences.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable, Iterable, Iterator, Optional, TypeVar

from pydantic import BaseModel

from .exceptions import DataIntegrityError

T = TypeVar("T")


class PermissionLevel(IntEnum):
    """Access level held by a principal on a path.

    Totally ordered: a higher level implies every lower one.
    """

    NONE = 0
    READ = 1
    WRITE = 2
    OWN = 3


# Every access type the grant store knows, by code and name. Only read object,
# modify object and own carry read/write/own; the rest grant none of them.
ACCESS_TYPES: dict[int, str] = {
    -1: "none",
    1000: "null",
    1010: "execute",
    1020: "read_annotation",
    1030: "read_system_metadata",
    1040: "read_metadata",
    1050: "read_object",
    1060: "write_annotation",
    1070: "create_metadata",
    1080: "modify_metadata",
    1090: "delete_metadata",
    1100: "administer_object",
    1110: "create_object",
    1120: "modify_object",
    1130: "delete_object",
    1140: "create_token",
    1150: "delete_token",
    1160: "curate",
    1200: "own",
}

_GRANTING_CODES = {
    1050: PermissionLevel.READ,
    1120: PermissionLevel.WRITE,
    1200: PermissionLevel.OWN,
}

ACCESS_TYPE_CODES: dict[int, PermissionLevel] = {
    code: _GRANTING_CODES.get(code, PermissionLevel.NONE) for code in ACCESS_TYPES
}

ACCESS_TYPE_NAMES: dict[str, PermissionLevel] = {
    name: ACCESS_TYPE_CODES[code] for code, name in ACCESS_TYPES.items()
}
ACCESS_TYPE_NAMES.update(
    {
        "read": PermissionLevel.READ,
        "write": PermissionLevel.WRITE,
    }
)

LEVEL_CODES: dict[PermissionLevel, int] = {
    PermissionLevel.NONE: 1000,
    PermissionLevel.READ: 1050,
    PermissionLevel.WRITE: 1120,
    PermissionLevel.OWN: 1200,
}


def parse_permission_level(raw: Any) -> PermissionLevel:
    """Normalize a stored permission representation into a PermissionLevel.

    Accepts ``PermissionLevel`` members, integer access type codes
    (``1050`` → read), numeric strings (``"1200"`` → own) and access type
    names (``"write"``, ``"modify object"``). Access types that carry neither
    read, write nor own, such as ``1040`` (read metadata), decode to NONE.

    Raises:
        DataIntegrityError: If the value is not a known access type.
    """
    if isinstance(raw, PermissionLevel):
        return raw
    if isinstance(raw, bool):
        raise DataIntegrityError(f"Unrecognized permission code: {raw!r}", raw=raw)
    if isinstance(raw, int):
        try:
            return ACCESS_TYPE_CODES[raw]
        except KeyError:
            raise DataIntegrityError(f"Unrecognized permission code: {raw}", raw=raw) from None
    if isinstance(raw, str):
        value = raw.strip()
        if value.removeprefix("-").isdigit():
            return parse_permission_level(int(value))
        try:
            return ACCESS_TYPE_NAMES[value.lower().replace(" ", "_")]
        except KeyError:
            raise DataIntegrityError(f"Unrecognized permission name: {raw!r}", raw=raw) from None
    raise DataIntegrityError(f"Unsupported permission type {type(raw).__name__}", raw=raw)


def format_permission(level: PermissionLevel) -> Optional[str]:
    """Level name for display, ``None`` for no permission."""
    if level is PermissionLevel.NONE:
        return None
    return level.name.lower()


def max_level(levels: Iterable[PermissionLevel]) -> PermissionLevel:
    """Highest level in ``levels``; NONE when empty."""
    return max(levels, default=PermissionLevel.NONE)


def take_upto(items: Iterable[T], stop: Callable[[T], bool]) -> Iterator[T]:
    """Yield items up to and including the first one matching ``stop``.

    Example::

        >>> list(take_upto([1, 2, 3, 4], lambda x: x == 2))
        [1, 2]
    """
    for item in items:
        yield item
        if stop(item):
            return


class EffectivePermission(BaseModel):
    """Read/write/own booleans for a (principal, path) pair."""

    read: bool = False
    write: bool = False
    own: bool = False

    model_config = {"frozen": True}

    @classmethod
    def from_level(cls, level: PermissionLevel) -> "EffectivePermission":
        """Expand a level monotonically: own implies write implies read."""
        return cls(
            read=level >= PermissionLevel.READ,
            write=level >= PermissionLevel.WRITE,
            own=level >= PermissionLevel.OWN,
        )

    @property
    def level(self) -> PermissionLevel:
        if self.own:
            return PermissionLevel.OWN
        if self.write:
            return PermissionLevel.WRITE
        if self.read:
            return PermissionLevel.READ
        return PermissionLevel.NONE

    def allows(self, level: PermissionLevel) -> bool:
        return self.level >= level


NO_ACCESS = EffectivePermission()


__all__ = [
    "ACCESS_TYPE_CODES",
    "ACCESS_TYPE_NAMES",
    "ACCESS_TYPES",
    "EffectivePermission",
    "LEVEL_CODES",
    "NO_ACCESS",
    "PermissionLevel",
    "format_permission",
    "max_level",
    "parse_permission_level",
    "take_upto",
]
