"""Resource records, planning handles and the manager contract."""

from simplecloud.resources.manager import ResourceManager
from simplecloud.resources.models import (
    ApplyFn,
    Dependency,
    LazyResource,
    Resource,
    ResourceState,
)

__all__ = [
    "ApplyFn",
    "Dependency",
    "LazyResource",
    "Resource",
    "ResourceManager",
    "ResourceState",
]
