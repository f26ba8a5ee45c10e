"""
Settings resolution pipeline.

Resolution always runs in the same order:

1. combine source fragments in declared priority order
2. fill the fields still absent with defaults, once
3. validate

``Resolver`` is the only public way to get defaulted settings, so defaults
can never be applied to a partial combination of sources.

Example:
    >>> resolver = Resolver()
    >>> resolver.add(env_fragment, name="environment")
    >>> resolver.add(file_fragment, name="files")
    >>> settings = resolver.resolve()
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import tunnelconf.settings.settings as settings_module
import tunnelconf.sources.base as sources_base

_logger = _logging.getLogger(__name__)

Mode = _typing.Literal["merge", "override"]


@_dataclasses.dataclass(frozen=True)
class Fragment:
    """A source's contribution, kept for diagnostics after resolution."""

    name: str
    mode: Mode
    settings: settings_module.Settings


class Resolver:
    """
    Combine fragments, apply defaults and validate.

    Fragments are applied in the order they are added, starting from empty
    settings:

    - ``mode="merge"`` fills only fields still absent, so earlier fragments
      win (add the highest priority source first).
    - ``mode="override"`` replaces every field the fragment sets, so this
      fragment wins over everything added before it.
    """

    def __init__(self) -> None:
        self._fragments: list[Fragment] = []

    def add(
        self,
        fragment: settings_module.Settings,
        *,
        name: str,
        mode: Mode = "merge",
    ) -> None:
        """
        Record a fragment.

        Args:
            fragment: Partial settings read by one source. A copy is kept,
                so later changes to the caller's value have no effect.
            name: Source name, used in logs and diagnostics.
            mode: How the fragment combines with the fragments before it.
        """
        if mode not in ("merge", "override"):
            raise ValueError(f"unknown combination mode: {mode!r}")
        self._fragments.append(Fragment(name=name, mode=mode, settings=fragment.copy()))

    def add_source(self, source: sources_base.Source, *, mode: Mode = "merge") -> None:
        """
        Read a source and record its fragment.

        Raises:
            errors.SourceError: Propagated unchanged from the source.
        """
        fragment = source.read()
        _logger.debug("Read settings fragment from %s", source.name)
        self.add(fragment, name=source.name, mode=mode)

    @property
    def fragments(self) -> list[Fragment]:
        """Recorded fragments, in the order they were added."""
        return [
            _dataclasses.replace(fragment, settings=fragment.settings.copy())
            for fragment in self._fragments
        ]

    def combine(self) -> settings_module.Settings:
        """Return the combination of every fragment, without defaults."""
        combined = settings_module.Settings()
        for fragment in self._fragments:
            if fragment.mode == "override":
                combined = combined.override_with(fragment.settings)
            else:
                combined = combined.merge_with(fragment.settings)
        return combined

    def resolve(self) -> settings_module.Settings:
        """
        Combine, default and validate.

        Returns:
            Fully resolved settings, owned by the caller.

        Raises:
            errors.ValidationError: If the resolved settings are not valid.
        """
        combined = self.combine()
        resolved = combined._with_defaults()
        _logger.debug(
            "Resolved settings from %d fragment(s): provider=%s type=%s",
            len(self._fragments),
            resolved.vpn_provider,
            resolved.vpn_type,
        )
        resolved.validate()
        return resolved


def resolve_settings(*fragments: settings_module.Settings) -> settings_module.Settings:
    """
    Resolve fragments given highest priority first.

    Raises:
        errors.ValidationError: If the resolved settings are not valid.
    """
    resolver = Resolver()
    for index, fragment in enumerate(fragments):
        resolver.add(fragment, name=f"fragment {index + 1}")
    return resolver.resolve()


def resolve_sources(
    sources: _typing.Iterable[sources_base.Source],
) -> settings_module.Settings:
    """
    Read sources given highest priority first and resolve their fragments.

    Raises:
        errors.SourceError: If a source cannot read its input.
        errors.ValidationError: If the resolved settings are not valid.
    """
    resolver = Resolver()
    for source in sources:
        resolver.add_source(source)
    return resolver.resolve()
