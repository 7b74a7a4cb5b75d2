"""
Object store port and its filesystem backend.

Documents are addressed by an opaque key such as
"users/<owner>/eventos/<event>/<stamp>_<name>". The database keeps the key
and the metadata, the store keeps the bytes.
"""
import logging
from functools import lru_cache
from pathlib import Path

from starlette.concurrency import run_in_threadpool

from eventdesk.config import settings
from eventdesk.errors import ObjectNotFoundError, StorageError

logger = logging.getLogger(__name__)


class ObjectStore:
    """Interface every storage backend implements."""

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        raise NotImplementedError

    async def get(self, key: str) -> bytes:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError


class LocalObjectStore(ObjectStore):
    """Stores each object as a file below a root directory."""

    def __init__(self, root):
        self.root = Path(root).resolve()

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise StorageError(f"Key outside storage root: {key!r}")
        return path

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path(key)
        try:
            await run_in_threadpool(self._write, path, data)
        except OSError as e:
            logger.error(f"Failed to store object {key}: {e}")
            raise StorageError(f"Could not store {key}") from e

    async def get(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return await run_in_threadpool(path.read_bytes)
        except FileNotFoundError:
            raise ObjectNotFoundError(key) from None
        except OSError as e:
            logger.error(f"Failed to read object {key}: {e}")
            raise StorageError(f"Could not read {key}") from e

    async def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            await run_in_threadpool(path.unlink, missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not delete {key}") from e


@lru_cache
def get_object_store() -> ObjectStore:
    """Dependency returning the configured document store."""
    return LocalObjectStore(settings.DOCUMENTS_STORAGE_DIR)
