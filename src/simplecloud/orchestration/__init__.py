"""Orchestration package: apply, destroy and rollback."""

from simplecloud.orchestration.engine import (
    ProvisioningEngine,
    RollbackEntry,
    RollbackStack,
)
from simplecloud.orchestration.results import ApplyResult, DestroyResult, ResultCollector

__all__ = [
    "ApplyResult",
    "DestroyResult",
    "ProvisioningEngine",
    "ResultCollector",
    "RollbackEntry",
    "RollbackStack",
]
