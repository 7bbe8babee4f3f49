import structlog

from .base import StorageBackend
from .memory import MemoryStorageBackend
from .file import FileStorageBackend


logger = structlog.get_logger("sizefit")


def get_backend(name: str, storage_dir: str | None = None) -> StorageBackend:
    name = (name or "memory").lower()
    if name == "memory":
        return MemoryStorageBackend()
    if name in ("file", "json", "disk"):
        if not storage_dir:
            raise ValueError("storage_dir is required for the file storage backend")
        return FileStorageBackend(storage_dir)
    logger.warning("unknown_storage_backend", backend=name, fallback="memory")
    return MemoryStorageBackend()
