"""
Pug Renderer Configuration Module

This module handles the renderer settings using Pydantic's BaseSettings and
turns them into the option set handed to the Pug engine.

Two layers are involved:
1. PugSettings - typed settings loaded from PUG_* environment variables / .env
2. Config - a read-only dotted-path view ("app.pug.pretty") over those settings

resolve_options() reads a Config once and derives the base renderer options.
Any object exposing get(key, default) can stand in for Config.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Views directory used when app.pug.basedir is not configured
DEFAULT_BASEDIR = "resources/views"


class PugSettings(BaseSettings):
    """
    Renderer settings loaded from environment variables.

    Pydantic automatically reads these values from:
    1. Environment variables prefixed with PUG_ (highest priority)
    2. .env file (if exists)
    3. Default values

    Fields left as None are treated as "not configured" by Config.
    """

    model_config = SettingsConfigDict(env_prefix="PUG_", env_file=".env", extra="ignore")

    # Views directory, relative to the application base path
    basedir: str | None = None

    # Pretty-print rendered HTML (indentation and newlines)
    pretty: bool = False

    # Keep compiled templates in the engine's cache
    cache: bool = False

    # Doctype used when a template does not declare one
    doctype: str | None = None

    # Custom filters, name -> callable
    filters: dict[str, Any] | None = None

    # Expose template locals under a single `self` variable
    self_context: bool = False

    # Log compiled template source
    debug: bool = False

    # Extra values merged over the options above and available to every template
    globals: dict[str, Any] = {}

    # Let per-call options override registry globals (legacy order: registry wins)
    call_options_win: bool = False

    # Keep request-derived globals per request instead of in the shared registry
    isolate_requests: bool = False


class Config:
    """Read-only dotted-path view over nested configuration data."""

    def __init__(self, data: Mapping[str, Any] | None = None):
        self._data = dict(data or {})

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a dotted key such as "app.pug.basedir".

        Returns default when any segment of the path is missing.
        """
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]
        return node

    @classmethod
    def from_settings(cls, settings: PugSettings | None = None) -> "Config":
        """Nest PugSettings under app.pug, dropping unset (None) fields."""
        if settings is None:
            settings = PugSettings()
        pug = settings.model_dump(exclude_none=True)
        pug["self"] = pug.pop("self_context", False)
        return cls({"app": {"pug": pug}})


def views_path(config: Any, base_path: Path | str) -> Path:
    """Absolute views directory: base_path joined with app.pug.basedir or the default."""
    return Path(base_path) / (config.get("app.pug.basedir") or DEFAULT_BASEDIR)


def resolve_options(config: Any, base_path: Path | str) -> dict[str, Any]:
    """
    Derive the base renderer options from configuration.

    The configured globals map is merged last, so it may override any of
    the fixed option names (e.g. pretty or cache).

    Args:
        config: Configuration source exposing get(key, default)
        base_path: Application root the views directory is relative to

    Returns:
        Mutable options dict, later owned by the GlobalRegistry
    """
    configured_basedir = config.get("app.pug.basedir")
    if not configured_basedir:
        logger.warning(
            "Pug views directory (app.pug.basedir) not set, defaulting to %r",
            DEFAULT_BASEDIR,
        )

    options: dict[str, Any] = {
        "basedir": views_path(config, base_path),
        "pretty": config.get("app.pug.pretty") or False,
        "cache": config.get("app.pug.cache") or False,
        "doctype": config.get("app.pug.doctype") or None,
        "filters": config.get("app.pug.filters") or None,
        "self": config.get("app.pug.self") or False,
        "debug": config.get("app.pug.debug") or False,
    }

    options.update(config.get("app.pug.globals", {}) or {})
    return options


def config_getter(config: Any) -> Callable[..., Any] | None:
    """Return config.get if the source exposes a callable get, else None."""
    getter = getattr(config, "get", None)
    return getter if callable(getter) else None


# Global settings instance used when no explicit configuration is passed
settings = PugSettings()
