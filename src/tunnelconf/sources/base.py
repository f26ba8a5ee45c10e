"""Source interface.

A source reads one kind of input and returns a partial ``Settings``
fragment. Fields the input says nothing about stay ``UNSET``. A source
whose input simply does not exist returns an empty fragment; a source whose
input is malformed raises ``SourceError``.
"""

from __future__ import annotations

import typing as _typing

if _typing.TYPE_CHECKING:
    import tunnelconf.settings.settings as settings_module


class Source(_typing.Protocol):
    """Producer of a settings fragment."""

    name: str

    def read(self) -> settings_module.Settings:
        """
        Read the input into a fragment.

        Raises:
            errors.SourceError: If the input is malformed.
        """
        ...
