"""Abstract interface for sticker asset (blob) storage.

Blobs are write-once.  The caller proposes a key; the provider may alter
it to avoid overwriting an existing blob and returns the key it actually
used, which is what the submission record must reference.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IBlobProvider(ABC):
    """Abstract base class for durable asset storage."""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the storage location (idempotent)."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for logs and error messages."""

    @abstractmethod
    async def put(self, key: str, data: bytes) -> str:
        """Store ``data`` under ``key`` without overwriting anything.

        Returns the key the blob was finally stored under.
        """
