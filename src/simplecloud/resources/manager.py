from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

InputT = TypeVar("InputT", contravariant=True)
OutputT = TypeVar("OutputT")


@runtime_checkable
class ResourceManager(Protocol[InputT, OutputT]):
    """Contract every concrete resource kind implements.

    Provider identifiers are opaque strings; composite identifiers are
    encoded by the implementation. Waiting for remote state to settle,
    pagination and retries happen inside these calls.
    """

    def create(self, input: InputT) -> tuple[str, OutputT]:
        """Create the remote resource and return ``(provider_id, output)``."""
        ...

    def retrieve(self, provider_id: str) -> OutputT:
        """Fetch the current remote representation."""
        ...

    def update(self, provider_id: str, input: InputT) -> tuple[str, OutputT]:
        """Update in place or replace; a changed provider id means replacement."""
        ...

    def delete(self, provider_id: str) -> bool:
        """Delete the remote resource; False when it was already absent."""
        ...
