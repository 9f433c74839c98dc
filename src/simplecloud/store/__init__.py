"""Resource store and its durable backends."""

from simplecloud.store.backends import (
    FileBackend,
    MemoryBackend,
    S3Backend,
    build_backend,
)
from simplecloud.store.base import ResourceStorer, StateBackend
from simplecloud.store.store import ResourceStore

__all__ = [
    "FileBackend",
    "MemoryBackend",
    "ResourceStore",
    "ResourceStorer",
    "S3Backend",
    "StateBackend",
    "build_backend",
]
