"""Core building blocks shared by every simplecloud layer."""

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
    format_error_message,
)

__all__ = [
    "AuthorizationError",
    "ConfigurationError",
    "ErrorCode",
    "ManagerError",
    "PlanningError",
    "RollbackError",
    "SimpleCloudError",
    "StateSaveError",
    "StoreError",
    "format_error_message",
]
