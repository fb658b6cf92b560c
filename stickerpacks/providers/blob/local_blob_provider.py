"""Filesystem blob store for uploaded sticker files.

Files land in ``<public_dir>/uploads`` and are served by the ``/static``
mount.  Writes use exclusive create (``"xb"``) so an existing sticker is
never overwritten.  When the proposed key is already taken, a ``-<n>``
suffix is inserted before the extension (``1700000000000.png`` →
``1700000000000-1.png``) until a free name is found.

File I/O is synchronous and runs via ``asyncio.to_thread`` so uploads do
not block the event loop.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from stickerpacks.interfaces.blob_provider import IBlobProvider
from stickerpacks.utils.errors import StorageUnavailableError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_ROOT = Path("public/uploads")

# Upper bound on suffix attempts for one key.
_MAX_SUFFIX_ATTEMPTS = 1000


def _split_key(key: str) -> tuple[str, str]:
    """Split a key at its first ``.`` into (stem, extension)."""
    dot = key.find(".")
    if dot == -1:
        return key, ""
    return key[:dot], key[dot:]


class LocalBlobProvider(IBlobProvider):
    """Stores blobs as files in a single directory."""

    def __init__(self, root_dir: str | Path = _DEFAULT_ROOT) -> None:
        self._root = Path(root_dir)

    @property
    def root_dir(self) -> Path:
        return self._root

    def get_provider_name(self) -> str:
        return "local_blob"

    async def initialize(self) -> None:
        await asyncio.to_thread(self._root.mkdir, parents=True, exist_ok=True)
        logger.info("blob_store_initialized", path=str(self._root))

    async def put(self, key: str, data: bytes) -> str:
        if not key or Path(key).name != key:
            raise ValueError(f"Blob key must be a bare filename: {key!r}")

        try:
            stored_key = await asyncio.to_thread(self._write_exclusive, key, data)
        except OSError as exc:
            logger.error("blob_write_failed", key=key, error=str(exc))
            raise StorageUnavailableError(
                message=f"Could not write asset '{key}': {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if stored_key != key:
            logger.info("blob_key_collision", requested=key, stored=stored_key)
        return stored_key

    def _write_exclusive(self, key: str, data: bytes) -> str:
        stem, ext = _split_key(key)
        for attempt in range(_MAX_SUFFIX_ATTEMPTS):
            candidate = key if attempt == 0 else f"{stem}-{attempt}{ext}"
            try:
                with open(self._root / candidate, "xb") as fh:
                    fh.write(data)
            except FileExistsError:
                continue
            return candidate
        raise FileExistsError(f"No free blob name for {key!r}")
