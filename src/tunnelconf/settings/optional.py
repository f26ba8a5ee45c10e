"""
Optional field primitives for tunnel settings.

Every optional settings field is three-valued:

- absent: no source has an opinion yet, represented by the ``UNSET`` sentinel
- present-empty: a source explicitly chose ``""``, ``0``, ``False`` or ``[]``
- present-value: anything else

``None`` is never used to mean "absent". The helpers below are the per-field
building blocks of the resolution algebra in ``tunnelconf.settings.base``.
"""

from __future__ import annotations

import copy as _copy
import enum as _enum
import typing as _typing

T = _typing.TypeVar("T")


class Unset(_enum.Enum):
    """Type of the ``UNSET`` sentinel."""

    UNSET = "<unset>"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: _typing.Final = Unset.UNSET
"""Marks a field that no source has decided yet."""


def is_set(value: object) -> bool:
    """Return True if the value is present (even if empty)."""
    return value is not UNSET


def copy_value(value: T) -> T:
    """
    Return an independent copy of a field value.

    Lists, dicts and nested models are deep copied so the result never
    shares backing storage with the input.
    """
    if value is UNSET:
        return value
    return _copy.deepcopy(value)


def merge_value(current: T | Unset, other: T | Unset) -> T | Unset:
    """Keep ``current`` if present, otherwise take ``other`` (which may be absent)."""
    if current is not UNSET:
        return copy_value(current)
    return copy_value(other)


def override_value(current: T | Unset, other: T | Unset) -> T | Unset:
    """Take ``other`` if present, otherwise keep ``current``."""
    if other is not UNSET:
        return copy_value(other)
    return copy_value(current)


def default_value(current: T | Unset, default: T) -> T:
    """Return ``current`` if present, otherwise ``default``."""
    if current is not UNSET:
        return copy_value(current)
    return copy_value(default)


def value_or(value: T | Unset, fallback: T) -> T:
    """Read a field for checking, treating absent as ``fallback``."""
    if value is UNSET:
        return fallback
    return value


def obfuscate(value: str | Unset) -> str:
    """
    Redact a secret for display.

    Absent and empty secrets both render ``[not set]``; any other value
    renders ``[set]``. The length of the secret is not revealed.
    """
    if value is UNSET or value == "":
        return "[not set]"
    return "[set]"
