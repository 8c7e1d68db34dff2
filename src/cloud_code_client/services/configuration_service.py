import json
import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "CLOUDCODE_"
NESTED_ENV_PREFIX = "CLOUDCODE__"

# A "//" comment outside a JSON string literal, up to the end of the line
_LINE_COMMENT = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*')


class Environment(Enum):
    """Application environments."""
    DEVELOPMENT = "Development"
    STAGING = "Staging"
    PRODUCTION = "Production"


@dataclass
class HttpConfig:
    """HTTP transport configuration."""
    timeout: float = 30.0
    connect_timeout: float = 10.0
    max_retries: int = 3
    max_connections: int = 100


def strip_json_comments(text: str) -> str:
    """Remove ``//`` line comments from appsettings JSON, leaving strings intact."""
    return _LINE_COMMENT.sub(lambda m: m.group(1) or "", text)


def coerce_setting(raw: str) -> Any:
    """Interpret an environment variable value as JSON, a bool or a number where possible."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass
    lowered = raw.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    return raw


def deep_merge(base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``update`` into ``base`` in place; nested sections merge key by key."""
    for key, value in update.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            deep_merge(current, value)
        else:
            base[key] = value
    return base


class ConfigurationService:
    """
    Client configuration loaded from settings files, environment variables
    and explicit overrides, in that order of precedence.

    Instances are constructed explicitly and handed to the client; there is
    no process-wide default.
    """

    REQUIRED_KEYS = ("ServerUrl", "ApplicationId")

    # Flat environment variables and the top-level keys they set
    ENV_KEYS = {
        f"{ENV_PREFIX}SERVER_URL": "ServerUrl",
        f"{ENV_PREFIX}APPLICATION_ID": "ApplicationId",
        f"{ENV_PREFIX}REST_API_KEY": "RestApiKey",
        f"{ENV_PREFIX}MASTER_KEY": "MasterKey",
    }

    def __init__(
        self,
        base_path: Optional[Path] = None,
        environment: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        load_files: bool = True,
        load_environment_variables: bool = True
    ):
        """
        Args:
            base_path: Directory holding appsettings files (defaults to the working directory)
            environment: Environment name (Development, Staging, Production)
            overrides: Nested settings merged after every other source
            load_files: Whether appsettings files are read
            load_environment_variables: Whether CLOUDCODE_* variables are applied
        """
        self.logger = logging.getLogger(__name__)
        self.base_path = Path(base_path) if base_path is not None else Path.cwd()
        self.environment = (
            environment
            or os.environ.get(f"{ENV_PREFIX}ENVIRONMENT")
            or Environment.DEVELOPMENT.value
        )
        self.config: Dict[str, Any] = {}
        self._http_config: Optional[HttpConfig] = None

        try:
            if load_files:
                for file_name in ("appsettings.json", f"appsettings.{self.environment}.json"):
                    self._load_settings_file(self.base_path / file_name)
            if load_environment_variables:
                self._apply_environment(os.environ)
            deep_merge(self.config, overrides or {})
            self._validate()
        except Exception as e:
            self.logger.error(f"Failed to load configuration: {e}")
            raise

        self.logger.debug(f"Configuration loaded for environment: {self.environment}")

    @classmethod
    def from_settings(cls, **settings: Any) -> "ConfigurationService":
        """Build a configuration purely from keyword arguments, ignoring files and environment."""
        top_level = {
            "server_url": "ServerUrl",
            "application_id": "ApplicationId",
            "rest_api_key": "RestApiKey",
            "master_key": "MasterKey",
        }
        overrides: Dict[str, Any] = {}
        for name, value in settings.items():
            if name in top_level:
                overrides[top_level[name]] = value
            elif name == "poll_interval":
                overrides.setdefault("Jobs", {})["PollInterval"] = value
            elif name in ("timeout", "connect_timeout", "max_retries", "max_connections"):
                section_key = "".join(part.capitalize() for part in name.split("_"))
                overrides.setdefault("Http", {})[section_key] = value
            else:
                raise TypeError(f"Unknown setting: {name}")
        return cls(overrides=overrides, load_files=False, load_environment_variables=False)

    def _load_settings_file(self, path: Path) -> None:
        """Merge an optional appsettings file into the configuration."""
        if not path.is_file():
            self.logger.debug(f"Optional configuration file not found: {path}")
            return
        try:
            settings = json.loads(strip_json_comments(path.read_text(encoding="utf-8")))
        except json.JSONDecodeError as e:
            self.logger.error(f"Invalid JSON in configuration file {path}: {e}")
            raise
        deep_merge(self.config, settings)
        self.logger.debug(f"Loaded configuration from {path}")

    def _apply_environment(self, environ: Dict[str, str]) -> None:
        """Apply CLOUDCODE__Section__Key nested values, then the flat CLOUDCODE_* keys."""
        for name, raw in environ.items():
            if not name.startswith(NESTED_ENV_PREFIX):
                continue
            path = name[len(NESTED_ENV_PREFIX):].split("__")
            section = self.config
            for key in path[:-1]:
                if not isinstance(section.get(key), dict):
                    section[key] = {}
                section = section[key]
            section[path[-1]] = coerce_setting(raw)
            self.logger.debug(f"Set {':'.join(path)} from environment variable {name}")

        for name, key in self.ENV_KEYS.items():
            raw = environ.get(name)
            if raw:
                self.config[key] = raw
                self.logger.debug(f"Overrode {key} from environment variable {name}")

    def _validate(self) -> None:
        missing_keys = [key for key in self.REQUIRED_KEYS if not self.get_value(key)]
        if missing_keys:
            raise ValueError(f"Missing required configuration keys: {missing_keys}")

        server_url = str(self.get_value("ServerUrl"))
        if not server_url.startswith(("http://", "https://")):
            raise ValueError(f"ServerUrl must be an http(s) URL, got: {server_url}")

        http_section = self.get_section("Http")
        self._http_config = HttpConfig(
            timeout=float(http_section.get("Timeout", 30.0)),
            connect_timeout=float(http_section.get("ConnectTimeout", 10.0)),
            max_retries=int(http_section.get("MaxRetries", 3)),
            max_connections=int(http_section.get("MaxConnections", 100))
        )
        if self._http_config.max_retries < 1:
            raise ValueError("Http:MaxRetries must be at least 1")
        if self.get_poll_interval() < 0:
            raise ValueError("Jobs:PollInterval must not be negative")

    def get_value(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key.
        Nested keys are separated with ':' (e.g. "Http:MaxRetries").
        """
        value: Any = self.config
        for part in key.split(":"):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def get_section(self, key: str) -> Dict[str, Any]:
        """Get a configuration section as a dictionary."""
        value = self.get_value(key, {})
        return value if isinstance(value, dict) else {}

    def __getitem__(self, key: str) -> Any:
        value = self.get_value(key)
        if value is None:
            raise KeyError(f"Configuration key '{key}' not found")
        return value

    def get(self, key: str, default: Any = None) -> Any:
        return self.get_value(key, default)

    # Server connection

    def get_server_url(self) -> str:
        """Get the server URL, always ending with a slash."""
        url = str(self.get_value("ServerUrl"))
        return url if url.endswith("/") else url + "/"

    def get_application_id(self) -> str:
        return str(self.get_value("ApplicationId"))

    def get_rest_api_key(self) -> Optional[str]:
        return self.get_value("RestApiKey") or None

    def get_master_key(self) -> Optional[str]:
        return self.get_value("MasterKey") or None

    def get_http_config(self) -> HttpConfig:
        return self._http_config or HttpConfig()

    # Jobs

    def get_poll_interval(self) -> float:
        """Seconds between job status polls."""
        return float(self.get_value("Jobs:PollInterval", 0.1))

    # Logging

    def get_log_level(self) -> str:
        return self.get_value("Logging:LogLevel", "Information")

    def get_log_file(self) -> Optional[str]:
        return self.get_value("Logging:File") or None

    def get_environment(self) -> str:
        return self.environment

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION.value
