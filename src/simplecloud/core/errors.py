"""
Error taxonomy for the provisioning engine.

Every layer raises one of the tagged errors below, naming the offending
resource id and chaining the lower-level cause with ``raise ... from``.

Categories:
- ConfigurationError: engine wiring or declaration problems
- StoreError: resource store reads, writes and (de)serialization
- StateSaveError: durable save failed after remote work completed
- ManagerError: remote create/retrieve/update/destroy failures
- AuthorizationError: planner rejected a creation or deletion
- PlanningError: dependency cycles and dependency-apply failures
- RollbackError: a destroy failed while undoing a partial apply
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Tags identifying the specific failure cause."""

    MISSING_PLANNER = "missing_planner"
    MISSING_STORE = "missing_store"
    MISSING_MANAGER = "missing_manager"
    BLANK_RESOURCE_ID = "blank_resource_id"
    DUPLICATE_RESOURCE_ID = "duplicate_resource_id"
    UNDECLARED_RESOURCE = "undeclared_resource"

    STORE_EXISTS = "store_exists"
    STORE_GET = "store_get"
    STORE_SET = "store_set"
    STORE_DELETE = "store_delete"
    STORE_LOAD = "store_load"
    STORE_SAVE = "store_save"
    RESOURCE_TO_BYTES = "resource_to_bytes"
    RESOURCE_FROM_BYTES = "resource_from_bytes"

    MANAGER_CREATE = "manager_create"
    MANAGER_RETRIEVE = "manager_retrieve"
    MANAGER_UPDATE = "manager_update"
    MANAGER_DESTROY = "manager_destroy"
    INVALID_PROVIDER_ID = "invalid_provider_id"

    CREATE_NOT_AUTHORIZED = "create_not_authorized"
    DELETE_NOT_AUTHORIZED = "delete_not_authorized"

    DEPENDENCY_CYCLE = "dependency_cycle"
    DEPENDENCY_APPLY = "dependency_apply"

    ROLLBACK_DESTROY = "rollback_destroy"


class SimpleCloudError(Exception):
    """Base exception for all engine errors."""

    default_code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        resource_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.resource_id = resource_id
        self.details = details or {}

    def __str__(self) -> str:
        return format_error_message(self)


class ConfigurationError(SimpleCloudError):
    """Raised when the engine is miswired or a declaration is invalid."""


class StoreError(SimpleCloudError):
    """Raised when the resource store fails."""


class StateSaveError(StoreError):
    """Raised when durable state could not be saved after an apply or destroy."""

    default_code = ErrorCode.STORE_SAVE


class ManagerError(SimpleCloudError):
    """Raised when a resource manager call fails."""


class AuthorizationError(SimpleCloudError):
    """Raised when the planner refuses a resource."""


class PlanningError(SimpleCloudError):
    """Raised for dependency graph problems."""


class RollbackError(SimpleCloudError):
    """Raised when rollback of a partial apply could not complete."""

    default_code = ErrorCode.ROLLBACK_DESTROY

    def __init__(
        self,
        message: str,
        *,
        original_error: BaseException | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.original_error = original_error


def format_error_message(error: SimpleCloudError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    parts = []
    if error.code is not None:
        parts.append(f"code={error.code.value}")
    if error.resource_id is not None:
        parts.append(f"id={error.resource_id}")
    parts.extend(f"{k}={v}" for k, v in error.details.items())
    if parts:
        msg = f"{msg} ({', '.join(parts)})"
    if error.__cause__ is not None:
        msg = f"{msg}: caused by {error.__cause__}"
    return msg
