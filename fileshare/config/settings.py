"""
File Share Configuration

Configuration settings for the file share service. Values come from the
built-in defaults, then an optional JSON file, then environment variables.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

# JSON key -> attribute name
JSON_KEYS = {
    "bindTo": "address",
    "publicUrl": "public_url",
    "apiPrefix": "api_prefix",
    "storage": "storage",
    "gcInterval": "gc_interval",
    "loglevel": "log_level",
    "databaseUrl": "database_url",
    "brokerUrl": "broker_url",
    "collectOnStartup": "collect_on_startup",
}

# Environment variable -> attribute name
ENV_VARS = {
    "FILESHARE_BIND": "address",
    "FILESHARE_PUBLIC_URL": "public_url",
    "FILESHARE_API_PREFIX": "api_prefix",
    "FILESHARE_STORAGE": "storage",
    "FILESHARE_GC_INTERVAL": "gc_interval",
    "FILESHARE_LOG_LEVEL": "log_level",
    "FILESHARE_DATABASE_URL": "database_url",
    "CELERY_BROKER_URL": "broker_url",
    "FILESHARE_COLLECT_ON_STARTUP": "collect_on_startup",
}


class ConfigurationError(Exception):
    """Raised when the configuration cannot be loaded or is invalid."""
    pass


class FileShareConfig:
    """File share configuration settings."""

    def __init__(self):
        self.address = ":8080"
        self.public_url = "http://localhost:8080"
        self.api_prefix = "/file-share-v1"
        self.storage = "./storage"
        self.gc_interval = 60
        self.log_level = "debug"
        self.database_url: Optional[str] = None
        self.broker_url = "redis://localhost:6379/0"
        self.collect_on_startup = True

    @classmethod
    def load(cls, config_file: Optional[str] = None,
             environ: Optional[Dict[str, str]] = None) -> "FileShareConfig":
        """
        Build the configuration.

        Args:
            config_file: Optional JSON file; falls back to FILESHARE_CONFIG
            environ: Environment mapping, defaults to os.environ

        Returns:
            Validated FileShareConfig

        Raises:
            ConfigurationError: If the file is unreadable or a value is invalid
        """
        if environ is None:
            environ = os.environ

        config = cls()

        config_file = config_file or environ.get("FILESHARE_CONFIG")
        if config_file:
            config.update_from_json(config_file)

        config.update_from_env(environ)
        config.validate()
        return config

    def update_from_json(self, config_file: str) -> None:
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                f"Failed to load configuration from {config_file}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file {config_file} must contain a JSON object"
            )

        for key, attr in JSON_KEYS.items():
            if key in data:
                self._set(attr, data[key])

    def update_from_env(self, environ: Dict[str, str]) -> None:
        for var, attr in ENV_VARS.items():
            value = environ.get(var)
            if value is not None and value != "":
                self._set(attr, value)

    def _set(self, attr: str, value: Any) -> None:
        if attr == "gc_interval":
            try:
                value = int(value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid gc interval: {value!r}") from e
        elif attr == "collect_on_startup" and isinstance(value, str):
            value = value.strip().lower() in ("1", "true", "yes", "on")
        elif attr == "log_level":
            value = str(value).lower()

        setattr(self, attr, value)

    def validate(self) -> None:
        if self.gc_interval <= 0:
            raise ConfigurationError(
                f"gc interval must be positive, got {self.gc_interval}"
            )

    @property
    def files_path(self) -> str:
        """Blob root: one level under the storage directory."""
        return str(Path(self.storage) / "files")

    @property
    def effective_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{Path(self.storage) / 'index.db'}"

    @property
    def host_and_port(self) -> Tuple[str, int]:
        """Split ``address`` (``host:port`` or ``:port``) for the web server."""
        host, _, port = self.address.rpartition(":")
        try:
            return host or "0.0.0.0", int(port)
        except ValueError as e:
            raise ConfigurationError(f"Invalid bind address: {self.address!r}") from e

    def download_url(self, file_id: str) -> str:
        return f"{self.public_url}{self.api_prefix}/download/{file_id}"
