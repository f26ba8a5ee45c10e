"""
Main CLI entry point for tunnelconf.

Provides the command-line interface using Click. Every command reads the
configured sources (environment, key files, YAML), resolves them and then
either prints, validates or lists the sources.
"""

import datetime as _datetime
import ipaddress as _ipaddress
import json as _json
import logging as _logging
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.markup as _rich_markup

import tunnelconf
import tunnelconf.config as config
import tunnelconf.resolve as resolve
import tunnelconf.settings as settings
import tunnelconf.settings.optional as optional
import tunnelconf.utils.durations as durations

_logger = _logging.getLogger(__name__)

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

# Fields never printed in clear text
SECRET_FIELDS = frozenset(
    {
        "private_key",
        "pre_shared_key",
        "password",
        "cert",
        "key",
        "encrypted_key",
        "key_passphrase",
    }
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(level: str) -> None:
    """Set the root log level, adding a stderr handler if none is configured."""
    _logging.basicConfig(format=LOG_FORMAT)
    _logging.getLogger().setLevel(level.upper())


def _print_error(kind: str, error: Exception) -> None:
    """Print an error on stderr, styled with rich."""
    console = _rich_console.Console(stderr=True)
    console.print(f"[bold red]{kind}:[/bold red] {_rich_markup.escape(str(error))}", highlight=False)


def _resolve(reader: config.ReaderSettings) -> settings.Settings:
    """Read every source and resolve, exiting with status 1 on failure."""
    try:
        return resolve.resolve_sources(reader.build_sources())
    except settings.SourceError as e:
        _print_error("Source error", e)
        raise SystemExit(1) from None
    except settings.ValidationError as e:
        _print_error("Invalid settings", e)
        raise SystemExit(1) from None


def to_jsonable(value: _typing.Any, name: str = "") -> _typing.Any:
    """
    Convert settings into JSON compatible values.

    Unset values become None, secrets become ``[set]`` or ``[not set]``,
    network values use their string notation and durations use Go style
    notation such as ``24h0m0s``.

    Args:
        value: Settings model or field value.
        name: Field name of ``value``, used to spot secrets.
    """
    if name in SECRET_FIELDS and (isinstance(value, str) or not optional.is_set(value)):
        return optional.obfuscate(value)
    if isinstance(value, optional.Unset):
        return None
    if isinstance(value, settings.SettingsBase):
        return {
            field: to_jsonable(getattr(value, field), field)
            for field in type(value).model_fields
        }
    if isinstance(value, _pydantic.BaseModel):
        return str(value)
    if isinstance(value, _datetime.timedelta):
        return durations.format_duration(value)
    if isinstance(value, _ipaddress.IPv4Address | _ipaddress.IPv6Address):
        return str(value)
    if isinstance(value, list):
        return [to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    return value


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(tunnelconf.__version__, "-v", "--version", prog_name="tunnelconf")
@_click.option(
    "--log-level",
    type=_click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Log level (default: TUNNELCONF_LOG_LEVEL or warning)",
)
@_click.pass_context
def cli(ctx: _click.Context, log_level: str | None) -> None:
    """tunnelconf - resolve and check VPN tunnel settings.

    Settings are read from environment variables, WireGuard and OpenVPN key
    files and a YAML file, in that order of precedence. Source locations are
    configured with TUNNELCONF_* environment variables.
    """
    try:
        reader = config.ReaderSettings()
    except _pydantic.ValidationError as e:
        raise _click.ClickException(f"invalid TUNNELCONF_* configuration: {e}") from e
    if log_level is not None:
        reader = reader.model_copy(update={"log_level": log_level.lower()})
    _configure_logging(reader.log_level)
    _logger.debug("Reader settings: %s", reader)

    ctx.ensure_object(dict)
    ctx.obj["reader"] = reader


@cli.command()
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def show(ctx: _click.Context, as_json: bool) -> None:
    """Show the resolved settings.

    Examples:
        tunnelconf show          # Show the settings tree
        tunnelconf show --json   # Show as JSON, secrets redacted
    """
    resolved = _resolve(ctx.obj["reader"])
    if as_json:
        _click.echo(_json.dumps(to_jsonable(resolved), indent=2))
    else:
        _click.echo(str(resolved))


@cli.command()
@_click.pass_context
def validate(ctx: _click.Context) -> None:
    """Check the resolved settings.

    Exits with status 0 when the settings are valid and 1 otherwise, with
    the reason printed on stderr.
    """
    resolved = _resolve(ctx.obj["reader"])
    _click.echo(f"Settings are valid ({resolved.vpn_type} with {resolved.vpn_provider})")


@cli.command()
@_click.pass_context
def paths(ctx: _click.Context) -> None:
    """Show source file paths and whether they exist."""
    reader: config.ReaderSettings = ctx.obj["reader"]
    for name, path in reader.source_paths():
        status = "✓" if path.exists() else "✗"
        _click.echo(f"{status} {name}: {path}")


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="tunnelconf")


if __name__ == "__main__":
    main()
