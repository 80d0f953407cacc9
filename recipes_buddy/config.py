"""Settings loader for the recipes buddy backend.

Settings come from a YAML file (``config/settings.yaml`` by default) and
are then overridden by environment variables, so the API key never has to
live on disk.
"""
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from recipes_buddy.data_layer.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = "config/settings.yaml"
DEFAULT_STATIC_SEARCH_PATH = Path(__file__).parent / "data" / "static_search_response.json"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _as_bool(value: Any) -> bool:
    """Interpret YAML booleans and their quoted string forms."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


@dataclass(frozen=True)
class Settings:
    """Resolved configuration.

    Attributes mirror the YAML sections: ``spoonacular``, ``http``,
    ``rate_limit``, ``calories``, ``logging``, ``server`` and ``cors``.
    """

    base_url: str = "https://api.spoonacular.com"
    api_key: Optional[str] = None
    auth_header: str = "x-api-key"
    mock_mode: bool = False
    static_search_path: Path = DEFAULT_STATIC_SEARCH_PATH

    connect_timeout: float = 5.0
    read_timeout: float = 10.0
    retry_attempts: int = 2
    retry_delay: float = 1.0

    rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True
    rate_limit_storage_uri: str = "memory://"
    retry_after_seconds: int = 60

    lookup_workers: int = 1

    log_level: str = "INFO"
    log_json: bool = False

    host: str = "0.0.0.0"
    port: int = 8080
    cors_allow_origins: List[str] = field(default_factory=lambda: ["http://localhost:5173"])

    def require_api_key(self) -> str:
        """Return the API key or raise if it is not configured.

        Raises:
            ConfigurationError: If no key is set
        """
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError(
                "Spoonacular API key not found. "
                "Please set the SPOONACULAR_API_KEY environment variable",
                setting="spoonacular.api_key",
            )
        return self.api_key.strip()

    def __repr__(self) -> str:
        # Keep the credential out of logs and tracebacks
        masked = "***" if self.api_key else None
        return f"Settings(base_url={self.base_url!r}, api_key={masked!r}, mock_mode={self.mock_mode!r})"


class SettingsLoader:
    """Loader for settings from YAML plus environment overrides."""

    def __init__(self, yaml_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        """Initialize settings loader.

        Args:
            yaml_path: Path to YAML settings file; a missing file means defaults
            environ: Environment mapping (defaults to ``os.environ``)
        """
        self.yaml_path = Path(yaml_path or DEFAULT_CONFIG_PATH)
        self.environ = os.environ if environ is None else environ

    def load(self) -> Settings:
        """Load settings.

        Returns:
            Settings object

        Raises:
            ConfigurationError: If the YAML file is not a mapping
        """
        data: Dict[str, Any] = {}
        if self.yaml_path.exists():
            with open(self.yaml_path, "r") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ConfigurationError(
                    f"Settings file {self.yaml_path} must contain a mapping"
                )

        settings = self._from_yaml(data)
        return self._apply_environment(settings)

    def _from_yaml(self, data: Dict[str, Any]) -> Settings:
        spoonacular = data.get("spoonacular") or {}
        http = data.get("http") or {}
        rate_limit = data.get("rate_limit") or {}
        calories = data.get("calories") or {}
        logging_cfg = data.get("logging") or {}
        server = data.get("server") or {}
        cors = data.get("cors") or {}

        defaults = Settings()
        static_path = spoonacular.get("static_search_path")

        return Settings(
            base_url=str(spoonacular.get("base_url", defaults.base_url)).rstrip("/"),
            api_key=spoonacular.get("api_key"),
            auth_header=str(spoonacular.get("auth_header", defaults.auth_header)),
            mock_mode=_as_bool(spoonacular.get("mock_mode", defaults.mock_mode)),
            static_search_path=Path(static_path) if static_path else defaults.static_search_path,
            connect_timeout=float(http.get("connect_timeout", defaults.connect_timeout)),
            read_timeout=float(http.get("read_timeout", defaults.read_timeout)),
            retry_attempts=int(http.get("retry_attempts", defaults.retry_attempts)),
            retry_delay=float(http.get("retry_delay", defaults.retry_delay)),
            rate_limit=str(rate_limit.get("rate", defaults.rate_limit)),
            rate_limit_enabled=_as_bool(rate_limit.get("enabled", defaults.rate_limit_enabled)),
            rate_limit_storage_uri=str(rate_limit.get("storage_uri", defaults.rate_limit_storage_uri)),
            retry_after_seconds=int(rate_limit.get("retry_after", defaults.retry_after_seconds)),
            lookup_workers=max(1, int(calories.get("lookup_workers", defaults.lookup_workers))),
            log_level=str(logging_cfg.get("level", defaults.log_level)).upper(),
            log_json=_as_bool(logging_cfg.get("json", defaults.log_json)),
            host=str(server.get("host", defaults.host)),
            port=int(server.get("port", defaults.port)),
            cors_allow_origins=[str(o) for o in cors.get("allow_origins", defaults.cors_allow_origins)],
        )

    def _apply_environment(self, settings: Settings) -> Settings:
        env = self.environ
        overrides: Dict[str, Any] = {}

        if env.get("SPOONACULAR_API_KEY"):
            overrides["api_key"] = env["SPOONACULAR_API_KEY"]
        if env.get("SPOONACULAR_BASE_URL"):
            overrides["base_url"] = env["SPOONACULAR_BASE_URL"].rstrip("/")
        if env.get("SPOONACULAR_AUTH_HEADER"):
            overrides["auth_header"] = env["SPOONACULAR_AUTH_HEADER"]
        if env.get("SPOONACULAR_MOCK_MODE"):
            overrides["mock_mode"] = _as_bool(env["SPOONACULAR_MOCK_MODE"])
        if env.get("RATE_LIMIT"):
            overrides["rate_limit"] = env["RATE_LIMIT"]
        if env.get("LOG_LEVEL"):
            overrides["log_level"] = env["LOG_LEVEL"].upper()

        return replace(settings, **overrides) if overrides else settings


def load_settings(yaml_path: Optional[str] = None) -> Settings:
    """Load settings from ``yaml_path`` (or the default path) and the environment."""
    return SettingsLoader(yaml_path).load()
