"""Base model and resolution algebra for tunnel settings.

Every settings domain (WireGuard, OpenVPN, control server, updater) and the
top level ``Settings`` aggregate derive from ``SettingsBase``. The algebra is
implemented once here, field by field, using the helpers in
``tunnelconf.settings.optional``:

- ``copy()``: independent deep copy
- ``merge_with(other)``: fill fields that are still absent
- ``override_with(other)``: replace fields that ``other`` sets
- ``_with_defaults(context)``: fill fields still absent with defaults

All operations return a new model; neither operand is modified. Nested
``SettingsBase`` sections are combined recursively, other values (including
``IPNet`` and ``Endpoint``) are treated as atomic.

``_with_defaults`` is private on purpose: callers go through
``tunnelconf.resolve`` so that defaults are applied once, after every source
has been combined.

Design decision: models use ``extra="allow"`` so unknown keys coming from a
YAML file are kept and can be reported with ``collect_all_extra_fields()``.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing

import pydantic as _pydantic

import tunnelconf.settings.optional as optional


@_dataclasses.dataclass(frozen=True)
class DefaultsContext:
    """Already resolved values that some defaults depend on."""

    vpn_provider: str = ""


class ValueBase(_pydantic.BaseModel):
    """Base class for atomic value types such as ``IPNet`` and ``Endpoint``."""

    model_config = _pydantic.ConfigDict(frozen=True, extra="forbid")


class SettingsBase(_pydantic.BaseModel):
    """
    Base class for all settings models.

    Fields default to ``optional.UNSET`` unless they hold a nested section.
    """

    model_config = _pydantic.ConfigDict(frozen=True, extra="allow")

    # =========================================================================
    # Resolution algebra
    # =========================================================================

    def copy(self) -> _typing.Self:  # type: ignore[override]
        """Return a copy sharing no list, dict or model storage with self."""
        return self.model_copy(deep=True)

    def merge_with(self, other: _typing.Self) -> _typing.Self:
        """
        Merge ``other`` into every field of self that is still absent.

        Present fields of self are kept, even when empty.
        """
        updates: dict[str, _typing.Any] = {}
        for name in type(self).model_fields:
            mine = getattr(self, name)
            theirs = getattr(other, name)
            if isinstance(mine, SettingsBase) and isinstance(theirs, SettingsBase):
                updates[name] = mine.merge_with(theirs)
            else:
                updates[name] = optional.merge_value(mine, theirs)
        return self._rebuild(updates)

    def override_with(self, other: _typing.Self) -> _typing.Self:
        """Replace every field of self that is present in ``other``."""
        updates: dict[str, _typing.Any] = {}
        for name in type(self).model_fields:
            mine = getattr(self, name)
            theirs = getattr(other, name)
            if isinstance(mine, SettingsBase) and isinstance(theirs, SettingsBase):
                updates[name] = mine.override_with(theirs)
            else:
                updates[name] = optional.override_value(mine, theirs)
        return self._rebuild(updates)

    def _with_defaults(self, context: DefaultsContext | None = None) -> _typing.Self:
        """
        Fill every field still absent with its default.

        Args:
            context: Resolved values that defaults may depend on.

        Returns:
            A new model. Applying it again returns an equal model.
        """
        if context is None:
            context = DefaultsContext()
        defaults = self._defaults(context)
        updates: dict[str, _typing.Any] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if isinstance(value, SettingsBase):
                updates[name] = value._with_defaults(context)
            elif name in defaults:
                updates[name] = optional.default_value(value, defaults[name])
            else:
                updates[name] = optional.copy_value(value)
        return self._rebuild(updates)

    def _defaults(self, context: DefaultsContext) -> dict[str, _typing.Any]:  # noqa: ARG002
        """Return the default value of each field that has one."""
        return {}

    def _rebuild(self, updates: dict[str, _typing.Any]) -> _typing.Self:
        """Build a new model from per-field values, keeping a copy of extras."""
        extras = optional.copy_value(dict(self.model_extra or {}))
        return self.model_copy(update={**extras, **updates})

    def is_empty(self) -> bool:
        """Check if no field (recursively) has been set."""
        for name in type(self).model_fields:
            value = getattr(self, name)
            if isinstance(value, SettingsBase):
                if not value.is_empty():
                    return False
            elif optional.is_set(value):
                return False
        return True

    # =========================================================================
    # Introspection
    # =========================================================================

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Recursively collect unknown fields from this model and nested sections.

        Returns a flat dict with dotted paths as keys, e.g.
        ``{"wireguard.privte_key": "..."}``.

        Args:
            prefix: Dotted path prefix (used in recursion).
        """
        result: dict[str, _typing.Any] = {}

        for key, value in (self.model_extra or {}).items():
            path = f"{prefix}.{key}" if prefix else key
            result[path] = value

        for field_name in type(self).model_fields:
            value = getattr(self, field_name)
            if isinstance(value, SettingsBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result
