"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    ProtocolEngineError,
    InvalidProfileError,
    InventoryError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ProtocolEngineError",
    "InvalidProfileError",
    "InventoryError",
]
