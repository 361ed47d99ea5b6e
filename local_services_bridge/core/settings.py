"""
Process Settings.

This module defines the bridge's process-level settings using Pydantic's
BaseSettings. Values are read from environment variables (and an optional
.env file). Service connection details are not settings: they come from the
host's configuration snapshot, see ``local_services_bridge.config``.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BridgeSettings(BaseSettings):
    """
    Bridge settings model.

    All properties are bound from ``LOCAL_SERVICES_BRIDGE_*`` environment
    variables, e.g. ``LOCAL_SERVICES_BRIDGE_LOG_LEVEL=DEBUG``.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOCAL_SERVICES_BRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Console log level for the bridge")
    log_format: Literal["simple", "detailed", "json"] = Field(
        default="detailed", description="Log line format (simple, detailed or json)"
    )
    enable_file_logging: bool = Field(default=False, description="Also write logs to a file under log_file_dir")
    log_file_dir: str = Field(default="logs", description="Directory for the log file when file logging is on")


def get_settings() -> BridgeSettings:
    return BridgeSettings()
