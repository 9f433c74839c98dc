"""Result types for apply and destroy runs."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class ApplyResult:
    """Outcome of one apply pass."""

    created: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    rolled_back: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0
    errors: List[str] = field(default_factory=list)

    @property
    def total_resources(self) -> int:
        """Number of resources converged in this pass."""
        return len(self.created) + len(self.updated) + len(self.unchanged)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0


@dataclass
class DestroyResult:
    """Outcome of one destroy pass."""

    deleted: List[str] = field(default_factory=list)
    absent: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0


class ResultCollector:
    """Aggregates per-resource outcomes while a run executes."""

    def __init__(self) -> None:
        self._apply = ApplyResult()
        self._destroy = DestroyResult()

    def record_created(self, resource_id: str) -> None:
        self._apply.created.append(resource_id)

    def record_updated(self, resource_id: str) -> None:
        self._apply.updated.append(resource_id)

    def record_unchanged(self, resource_id: str) -> None:
        self._apply.unchanged.append(resource_id)

    def record_rolled_back(self, resource_id: str) -> None:
        self._apply.rolled_back.append(resource_id)

    def record_deleted(self, resource_id: str, deleted: bool) -> None:
        if deleted:
            self._destroy.deleted.append(resource_id)
        else:
            self._destroy.absent.append(resource_id)

    def record_error(self, resource_id: str | None, error: Exception) -> None:
        message = f"{resource_id}: {error}" if resource_id else str(error)
        self._apply.errors.append(message)
        self._destroy.errors.append(message)

    def finalize_apply(self, duration: float) -> ApplyResult:
        self._apply.duration_seconds = duration
        return self._apply

    def finalize_destroy(self, duration: float) -> DestroyResult:
        self._destroy.duration_seconds = duration
        return self._destroy
