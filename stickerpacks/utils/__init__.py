"""Utility modules for the sticker pack service.

- **errors** -- exception hierarchy rooted at StickerPackError.
- **logging** -- structlog setup with console / JSON renderers.
"""

from stickerpacks.utils.errors import (
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    StickerPackError,
    StorageUnavailableError,
    ValidationError,
    ValidationReason,
)
from stickerpacks.utils.logging import configure_logging, get_logger

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "NotFoundError",
    "StickerPackError",
    "StorageUnavailableError",
    "ValidationError",
    "ValidationReason",
    "configure_logging",
    "get_logger",
]
