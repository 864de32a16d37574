"""Configuration loading for the :mod:`ballast` toolkit."""

from __future__ import annotations

import contextlib
import contextvars
import dataclasses as dc
import typing as typ
from collections import abc as cabc

from cyclopts.config import Toml
from cyclopts.exceptions import CycloptsError

from ballast.utils import normalise_workspace_root

if typ.TYPE_CHECKING:
    from pathlib import Path

CONFIG_FILENAME = "ballast.toml"


class ConfigurationError(RuntimeError):
    """Raised when the :mod:`ballast` configuration is invalid."""


class ConfigurationNotLoadedError(ConfigurationError):
    """Raised when code accesses the configuration before it is loaded."""


@dc.dataclass(frozen=True, slots=True)
class InstallConfig:
    """Settings for the ``install`` command."""

    fail_on_error: bool = False

    @classmethod
    def from_mapping(cls, mapping: cabc.Mapping[str, typ.Any] | None) -> InstallConfig:
        """Create an :class:`InstallConfig` from a TOML table mapping."""
        if mapping is None:
            return cls()
        unknown = set(mapping) - {"fail_on_error"}
        if unknown:
            joined = ", ".join(sorted(unknown))
            message = f"Unknown install option(s): {joined}."
            raise ConfigurationError(message)
        return cls(
            fail_on_error=_boolean(
                mapping.get("fail_on_error"), "install.fail_on_error"
            ),
        )


@dc.dataclass(frozen=True, slots=True)
class BallastConfig:
    """Strongly-typed representation of ``ballast.toml``."""

    install: InstallConfig = dc.field(default_factory=InstallConfig)

    @classmethod
    def from_mapping(cls, mapping: cabc.Mapping[str, typ.Any]) -> BallastConfig:
        """Create a :class:`BallastConfig` from a parsed configuration mapping."""
        unknown = set(mapping) - {"install"}
        if unknown:
            joined = ", ".join(sorted(unknown))
            message = f"Unknown configuration section(s): {joined}."
            raise ConfigurationError(message)
        return cls(
            install=InstallConfig.from_mapping(
                _optional_mapping(mapping.get("install"), "install")
            ),
        )


_active_config: contextvars.ContextVar[BallastConfig] = contextvars.ContextVar(
    "ballast_active_config"
)


def build_loader(workspace_root: Path) -> Toml:
    """Return a Cyclopts loader for ``ballast.toml`` in ``workspace_root``."""
    resolved = normalise_workspace_root(workspace_root)
    return Toml(
        path=resolved / CONFIG_FILENAME,
        must_exist=False,
        search_parents=False,
        allow_unknown=True,
        use_commands_as_keys=True,
    )


def load_from_loader(loader: Toml) -> BallastConfig:
    """Load and validate configuration using ``loader``.

    A missing ``ballast.toml`` yields the default configuration.
    """
    if not loader.path.exists():
        return BallastConfig()
    try:
        raw = loader.config
    except (ValueError, CycloptsError) as exc:
        raise ConfigurationError(str(exc)) from exc
    if not isinstance(raw, cabc.Mapping):
        message = "Configuration root must be a TOML table."
        raise ConfigurationError(message)
    return BallastConfig.from_mapping(raw)


def load_configuration(workspace_root: Path) -> BallastConfig:
    """Load configuration for ``workspace_root`` using Cyclopts."""
    loader = build_loader(workspace_root)
    return load_from_loader(loader)


@contextlib.contextmanager
def use_configuration(configuration: BallastConfig) -> typ.Iterator[None]:
    """Set ``configuration`` as the active configuration for the current context."""
    token = _active_config.set(configuration)
    try:
        yield
    finally:
        _active_config.reset(token)


def current_configuration() -> BallastConfig:
    """Return the active configuration or raise if none has been set."""
    try:
        return _active_config.get()
    except LookupError as exc:
        message = "Configuration has not been loaded yet."
        raise ConfigurationNotLoadedError(message) from exc


def _boolean(value: object, field_name: str) -> bool:
    """Return ``value`` as a boolean, defaulting to ``False`` when unset."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    message = f"{field_name} must be a boolean; received {type(value).__name__}."
    raise ConfigurationError(message)


def _optional_mapping(
    value: object, field_name: str
) -> cabc.Mapping[str, typ.Any] | None:
    """Ensure ``value`` is a mapping if provided."""
    if value is None:
        return None
    if isinstance(value, cabc.Mapping):
        return value
    message = f"{field_name} must be a TOML table; received {type(value).__name__}."
    raise ConfigurationError(message)
