"""Server configuration from environment variables."""
import logging
import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .utils.errors import ConfigError

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


@dataclass(frozen=True)
class ServerConfig:
    """Runtime settings for the HTTP server and dispatcher."""

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"
    environment: str = "development"
    tool_timeout: Optional[float] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """Build a config from ``environ`` (defaults to ``os.environ``).

        Raises:
            ConfigError: if PORT, LOG_LEVEL or TOOL_TIMEOUT is invalid.
        """
        env = os.environ if environ is None else environ

        log_level = env.get("LOG_LEVEL", "info").lower()
        if log_level not in LOG_LEVELS:
            raise ConfigError(f"Invalid LOG_LEVEL: {log_level}")

        port_value = env.get("PORT", "3000")
        try:
            port = int(port_value)
        except ValueError:
            raise ConfigError(f"Invalid PORT: {port_value}")
        if not 0 < port < 65536:
            raise ConfigError(f"PORT out of range: {port}")

        tool_timeout = None
        timeout_value = env.get("TOOL_TIMEOUT")
        if timeout_value:
            try:
                tool_timeout = float(timeout_value)
            except ValueError:
                raise ConfigError(f"Invalid TOOL_TIMEOUT: {timeout_value}")
            if not math.isfinite(tool_timeout) or tool_timeout <= 0:
                raise ConfigError(f"TOOL_TIMEOUT must be a positive number: {timeout_value}")

        return cls(
            host=env.get("HOST", "0.0.0.0"),
            port=port,
            log_level=log_level,
            environment=env.get("APP_ENV", "development"),
            tool_timeout=tool_timeout,
        )

    @property
    def logging_level(self) -> int:
        return LOG_LEVELS[self.log_level]


def configure_logging(config: ServerConfig) -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(level=config.logging_level, format=LOG_FORMAT)
