from .logging_config import get_logger, setup_logging
from .settings import BridgeSettings, get_settings

__all__ = [
    "BridgeSettings",
    "get_logger",
    "get_settings",
    "setup_logging",
]
