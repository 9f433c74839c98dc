from __future__ import annotations

from typing import ContextManager, Dict, Protocol


class StateBackend(Protocol):
    """Durable home of the ``{id -> serialized record}`` mapping."""

    def read(self) -> Dict[str, bytes]:
        ...

    def write(self, data: Dict[str, bytes]) -> None:
        ...


class ResourceStorer(Protocol):
    """Idempotency ledger mapping internal ids to serialized resource records.

    All operations between ``load`` and ``save`` act on memory only.
    ``locked`` holds the store lock across a read-check-then-write sequence.
    """

    def exists(self, resource_id: str) -> bool:
        ...

    def get(self, resource_id: str) -> bytes:
        ...

    def set(self, resource_id: str, data: bytes) -> None:
        ...

    def delete(self, resource_id: str) -> None:
        ...

    def load(self) -> None:
        ...

    def save(self) -> None:
        ...

    def locked(self) -> ContextManager[None]:
        ...
