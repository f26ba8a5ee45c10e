"""
YAML configuration file source.

The file holds a mapping shaped like ``Settings``::

    vpn_provider: mullvad
    vpn_type: wireguard
    wireguard:
      private_key: oMNSf/zJ0pt1ciy+qIRk8Rlyfs9accwuRLnKd85Yl1Q=
      addresses:
        - 10.64.222.21/32
    updater:
      period: 24h

Keys that are left out stay unset. Unknown keys are kept and logged as a
warning, so a typo never silently changes the result.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import yaml as _yaml

import tunnelconf.settings.errors as errors
import tunnelconf.settings.settings as settings_module

_logger = _logging.getLogger(__name__)


class YamlSource:
    """Settings source backed by a YAML file."""

    name = "yaml"

    def __init__(self, path: _pathlib.Path) -> None:
        self.path = path

    def read(self) -> settings_module.Settings:
        """
        Load and validate the YAML file.

        Returns:
            An empty fragment if the file does not exist or is empty.

        Raises:
            errors.SourceError: If the file cannot be read, is not valid YAML,
                is not a mapping or does not match the settings shape.
        """
        data = self._load()
        if data is None:
            return settings_module.Settings()

        try:
            fragment = settings_module.Settings.model_validate(data)
        except _pydantic.ValidationError as e:
            raise errors.SourceError(str(self.path), f"invalid settings: {e}") from e

        unknown = fragment.collect_all_extra_fields()
        if unknown:
            _logger.warning(
                "Unknown keys in %s are ignored: %s",
                self.path,
                ", ".join(sorted(unknown)),
            )
        _logger.debug("Read YAML configuration file %s", self.path)
        return fragment

    def _load(self) -> dict[str, _typing.Any] | None:
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            _logger.debug("YAML configuration file %s does not exist, skipping", self.path)
            return None
        except OSError as e:
            raise errors.SourceError(str(self.path), f"reading file: {e}") from e

        try:
            data = _yaml.safe_load(content)
        except _yaml.YAMLError as e:
            raise errors.SourceError(str(self.path), f"parsing YAML: {e}") from e

        if data is None:
            return None
        if not isinstance(data, dict):
            raise errors.SourceError(
                str(self.path),
                f"expected a mapping at the top level, got {type(data).__name__}",
            )
        return data
