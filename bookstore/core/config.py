"""Harness configuration using Pydantic Settings.

The effective configuration is layered, later layers winning key-wise:

1. ``config.properties`` bundled with the package
2. ``config-<env>.properties``; ``<env>`` comes from the caller, else the
   ``BOOKSTORE_ENV`` environment variable, else ``dev``
3. Environment variables named after the settings fields (``API_BASE_URL``,
   ``API_VERSION``, ...)
4. Explicit overrides passed by the caller (``--api-option`` on the pytest
   command line)

``resolve_settings()`` builds a fresh snapshot; ``get_settings()`` resolves
once per process and hands the same frozen object to every caller.
Point ``BOOKSTORE_CONFIG_DIR`` at another directory to replace the bundled
property files.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import httpx
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, EnvSettingsSource, SettingsConfigDict

from bookstore.core.errors import ConfigurationError
from bookstore.core.properties import load_properties, merge_layers

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = "dev"
ENV_SELECTOR_VAR = "BOOKSTORE_ENV"
CONFIG_DIR_VAR = "BOOKSTORE_CONFIG_DIR"
DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[1] / "resources"

# Dotted property key -> settings field
PROPERTY_FIELDS: dict[str, str] = {
    "api.base.url": "api_base_url",
    "api.version": "api_version",
    "api.request.timeout": "api_request_timeout",
    "api.connection.timeout": "api_connection_timeout",
    "test.environment": "test_environment",
    "test.logging.enabled": "test_logging_enabled",
    "test.logging.structured": "test_logging_structured",
    "test.report.path": "test_report_path",
    "debug.mode": "debug_mode",
}
FIELD_PROPERTIES: dict[str, str] = {field: key for key, field in PROPERTY_FIELDS.items()}


class ApiSettings(BaseSettings):
    """
    Effective configuration snapshot.

    Frozen once built. Construct through ``resolve_settings()`` so that the
    property files and environment variables are layered in order; calling
    ``ApiSettings()`` directly only applies keyword arguments over defaults.
    """

    model_config = SettingsConfigDict(env_prefix="", extra="ignore", frozen=True)

    # API
    api_base_url: str = "https://fakerestapi.azurewebsites.net"
    api_version: str = "v1"
    api_request_timeout: int = Field(default=30000, ge=0)
    api_connection_timeout: int = Field(default=10000, ge=0)

    # Test run
    test_environment: str = DEFAULT_ENVIRONMENT
    test_logging_enabled: bool = True
    test_logging_structured: bool = False
    test_report_path: str = "test-output/reports"
    debug_mode: bool = False

    # Every merged key, including ones the harness does not model
    merged_properties: tuple[tuple[str, str], ...] = Field(default=(), exclude=True, repr=False)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Layering is done by ``resolve_settings``; only init kwargs apply here."""
        return (init_settings,)

    @property
    def raw_properties(self) -> Mapping[str, str]:
        """Read-only view of every merged key."""
        return MappingProxyType(dict(self.merged_properties))

    @property
    def api_url(self) -> str:
        """Versioned API root, e.g. ``https://host/api/v1``."""
        return f"{self.api_base_url.rstrip('/')}/api/{self.api_version}"

    @property
    def books_endpoint(self) -> str:
        return f"{self.api_url}/Books"

    @property
    def authors_endpoint(self) -> str:
        return f"{self.api_url}/Authors"

    @property
    def request_timeout_seconds(self) -> float:
        return self.api_request_timeout / 1000

    @property
    def connection_timeout_seconds(self) -> float:
        return self.api_connection_timeout / 1000

    @property
    def http_timeout(self) -> httpx.Timeout:
        """Per-request timeout handed to the transport."""
        return httpx.Timeout(
            self.request_timeout_seconds,
            connect=self.connection_timeout_seconds,
        )

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.debug_mode else "INFO"

    def get(self, key: str, default: str | None = None) -> str | None:
        """Look up a property by its dotted key."""
        raw = self.raw_properties
        if key in raw:
            return raw[key]
        field_name = PROPERTY_FIELDS.get(key)
        if field_name is not None:
            value = getattr(self, field_name)
            if isinstance(value, bool):
                return str(value).lower()
            return str(value)
        return default


def _to_property_keys(layer: Mapping[str, Any]) -> dict[str, str]:
    """Normalize field-named keys (``api_base_url``) to dotted property keys."""
    normalized: dict[str, str] = {}
    for key, value in layer.items():
        key = str(key)
        normalized[FIELD_PROPERTIES.get(key.lower(), key)] = str(value)
    return normalized


def _load_layer(path: Path) -> dict[str, str]:
    layer = load_properties(path)
    if layer:
        logger.debug("Loaded properties from: %s", path)
    else:
        logger.warning("Properties file not found or empty: %s", path)
    return layer


def _environment_layer() -> dict[str, str]:
    """Read field-named environment variables through pydantic-settings."""
    values = EnvSettingsSource(ApiSettings)()
    return {k: v for k, v in values.items() if k in FIELD_PROPERTIES and v is not None}


def _configuration_error(exc: ValidationError) -> ConfigurationError:
    problems = []
    for error in exc.errors():
        field_name = str(error["loc"][0]) if error.get("loc") else "?"
        key = FIELD_PROPERTIES.get(field_name, field_name)
        problems.append(f"{key}: {error['msg']} (got {error.get('input')!r})")
    return ConfigurationError(
        "Invalid configuration: " + "; ".join(problems),
        details={"errors": problems},
    )


def selected_environment(environment: str | None = None) -> str:
    """Overlay selector: explicit argument, then ``BOOKSTORE_ENV``, then ``dev``."""
    return environment or os.getenv(ENV_SELECTOR_VAR) or DEFAULT_ENVIRONMENT


def resolve_settings(
    environment: str | None = None,
    overrides: Mapping[str, Any] | None = None,
    config_dir: str | Path | None = None,
) -> ApiSettings:
    """
    Build a fresh configuration snapshot from all layers.

    Args:
        environment: Overlay selector (``dev`` -> ``config-dev.properties``)
        overrides: Highest-priority values, keyed by dotted property key or
            field name
        config_dir: Directory holding the property files

    Raises:
        ConfigurationError: A value cannot be parsed into its field type
    """
    env = selected_environment(environment)
    directory = Path(config_dir or os.getenv(CONFIG_DIR_VAR) or DEFAULT_CONFIG_DIR)

    raw = merge_layers(
        _load_layer(directory / "config.properties"),
        _load_layer(directory / f"config-{env}.properties"),
        _to_property_keys(_environment_layer()),
        _to_property_keys(overrides or {}),
    )
    raw.setdefault("test.environment", env)

    values = {PROPERTY_FIELDS[key]: value for key, value in raw.items() if key in PROPERTY_FIELDS}
    try:
        settings = ApiSettings(**values, merged_properties=tuple(raw.items()))
    except ValidationError as exc:
        raise _configuration_error(exc) from exc

    logger.info(
        "Configuration loaded successfully for environment: %s",
        settings.test_environment,
        extra={"api_url": settings.api_url},
    )
    return settings


_settings: ApiSettings | None = None
_settings_lock = threading.Lock()


def get_settings(
    environment: str | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ApiSettings:
    """
    Process-wide configuration snapshot.

    The first caller resolves it; every later caller gets the identical
    object. Arguments only matter on the first call.
    """
    global _settings
    if _settings is None:
        with _settings_lock:
            if _settings is None:
                _settings = resolve_settings(environment, overrides)
                return _settings

    if environment or overrides:
        logger.debug("Settings already resolved; ignoring environment/overrides arguments")
    return _settings


def reset_settings() -> None:
    """Forget the cached snapshot so the next ``get_settings()`` resolves again."""
    global _settings
    with _settings_lock:
        _settings = None
