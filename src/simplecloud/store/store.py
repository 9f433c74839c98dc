"""In-memory resource store backed by a pluggable durable backend."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List

import structlog

from simplecloud.store.base import StateBackend

logger = structlog.get_logger()


class ResourceStore:
    """Thread-safe ``{id -> bytes}`` map with explicit load and save.

    A single re-entrant lock guards every operation, so a caller holding
    :meth:`locked` can run ``exists`` followed by ``set`` atomically.
    """

    def __init__(self, backend: StateBackend) -> None:
        self._backend = backend
        self._data: Dict[str, bytes] = {}
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield

    def exists(self, resource_id: str) -> bool:
        with self._lock:
            return resource_id in self._data

    def get(self, resource_id: str) -> bytes:
        with self._lock:
            try:
                return self._data[resource_id]
            except KeyError:
                raise KeyError(f"Resource '{resource_id}' is not in the store") from None

    def set(self, resource_id: str, data: bytes) -> None:
        with self._lock:
            self._data[resource_id] = data

    def delete(self, resource_id: str) -> None:
        with self._lock:
            self._data.pop(resource_id, None)

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._data)

    def load(self) -> None:
        data = self._backend.read()
        with self._lock:
            self._data = dict(data)
        logger.debug("state_loaded", resources=len(data))

    def save(self) -> None:
        with self._lock:
            snapshot = dict(self._data)
        self._backend.write(snapshot)
        logger.debug("state_written", resources=len(snapshot))
