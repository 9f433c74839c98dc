"""simplecloud: declare cloud resources, then apply or destroy them in dependency order."""

from simplecloud.core.errors import (
    AuthorizationError,
    ConfigurationError,
    ErrorCode,
    ManagerError,
    PlanningError,
    RollbackError,
    SimpleCloudError,
    StateSaveError,
    StoreError,
)
from simplecloud.orchestration import ApplyResult, DestroyResult, ProvisioningEngine
from simplecloud.planning import Planner, TopologicalPlanner
from simplecloud.resources import (
    Dependency,
    LazyResource,
    Resource,
    ResourceManager,
    ResourceState,
)
from simplecloud.store import FileBackend, MemoryBackend, ResourceStore, ResourceStorer

__version__ = "0.1.0"

__all__ = [
    "ApplyResult",
    "AuthorizationError",
    "ConfigurationError",
    "Dependency",
    "DestroyResult",
    "ErrorCode",
    "FileBackend",
    "LazyResource",
    "ManagerError",
    "MemoryBackend",
    "Planner",
    "PlanningError",
    "ProvisioningEngine",
    "Resource",
    "ResourceManager",
    "ResourceState",
    "ResourceStore",
    "ResourceStorer",
    "RollbackError",
    "SimpleCloudError",
    "StateSaveError",
    "StoreError",
    "TopologicalPlanner",
]
