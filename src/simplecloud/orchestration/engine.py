"""Apply/destroy orchestration with optional rollback."""

from __future__ import annotations

import time
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional

import structlog

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
from simplecloud.logging import bind_context, configure_logging
from simplecloud.orchestration.results import ApplyResult, DestroyResult, ResultCollector
from simplecloud.planning.planner import Planner, TopologicalPlanner
from simplecloud.resources.manager import ResourceManager
from simplecloud.resources.models import ApplyFn, LazyResource, Resource, ResourceState
from simplecloud.store.backends import build_backend
from simplecloud.store.base import ResourceStorer
from simplecloud.store.store import ResourceStore

if TYPE_CHECKING:
    from simplecloud.config.settings import Settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class RollbackEntry:
    """A resource created during the current apply, undoable by deletion."""

    resource_id: str
    provider_id: str
    manager: ResourceManager[Any, Any]


class RollbackStack:
    """LIFO of resources created in the current apply."""

    def __init__(self) -> None:
        self._entries: List[RollbackEntry] = []

    def push(self, entry: RollbackEntry) -> None:
        self._entries.append(entry)

    def pop(self) -> RollbackEntry | None:
        return self._entries.pop() if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def ids(self) -> List[str]:
        return [e.resource_id for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)


class ProvisioningEngine:
    """Declares resources, then converges them in dependency order.

    The engine owns its planner and store. Each declared resource is
    created when the store has no record for its id and updated otherwise;
    the store is saved once the pass ends.
    """

    def __init__(
        self,
        store: Optional[ResourceStorer],
        planner: Optional[Planner],
        *,
        rollback: bool = False,
        halt_on_destroy_error: bool = True,
        skip_unchanged_updates: bool = False,
        load: bool = True,
    ) -> None:
        self._store = store
        self._planner = planner
        self._validate_wiring()
        self.rollback = rollback
        self.halt_on_destroy_error = halt_on_destroy_error
        self.skip_unchanged_updates = skip_unchanged_updates

        self._declared: Dict[str, LazyResource[Any]] = {}
        self._states: Dict[str, ResourceState] = {}
        self._rollback_stack = RollbackStack()
        self._collector = ResultCollector()
        self.last_result: ApplyResult | DestroyResult | None = None

        if load:
            self.load()

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        planner: Optional[Planner] = None,
        **kwargs: Any,
    ) -> "ProvisioningEngine":
        """Build an engine whose store, planner, policy and logging come from settings."""
        configure_logging(settings.log_level)
        store = ResourceStore(build_backend(settings))
        return cls(
            store,
            planner or TopologicalPlanner(),
            rollback=settings.rollback,
            halt_on_destroy_error=settings.halt_on_destroy_error,
            skip_unchanged_updates=settings.skip_unchanged_updates,
            **kwargs,
        )

    @property
    def store(self) -> ResourceStorer:
        if self._store is None:
            raise ConfigurationError("Resource store is missing", code=ErrorCode.MISSING_STORE)
        return self._store

    @property
    def planner(self) -> Planner:
        if self._planner is None:
            raise ConfigurationError("Resource planner is missing", code=ErrorCode.MISSING_PLANNER)
        return self._planner

    def load(self) -> None:
        try:
            self.store.load()
        except Exception as exc:
            raise StoreError("Failed to load resource state", code=ErrorCode.STORE_LOAD) from exc

    def save(self) -> None:
        try:
            self.store.save()
        except Exception as exc:
            raise StateSaveError("Failed to save resource state") from exc
        logger.info("state_saved")

    # Declaration

    def create_resource(
        self,
        resource_id: str,
        input: Any,
        manager: Optional[ResourceManager[Any, Any]],
        *,
        depends_on: Iterable[str] = (),
    ) -> LazyResource[Any]:
        """Declare a resource and register it with the planner."""
        self._validate_wiring()
        if manager is None:
            raise ConfigurationError(
                "Resource manager is missing",
                code=ErrorCode.MISSING_MANAGER,
                resource_id=resource_id or None,
            )
        if not resource_id or not resource_id.strip():
            raise ConfigurationError("Resource id is blank", code=ErrorCode.BLANK_RESOURCE_ID)
        if resource_id in self._declared:
            raise ConfigurationError(
                "Another resource with the same id was already declared",
                code=ErrorCode.DUPLICATE_RESOURCE_ID,
                resource_id=resource_id,
            )

        lazy: LazyResource[Any] = LazyResource(
            id=resource_id,
            input=input,
            manager=manager,
            explicit_depends_on=list(depends_on),
        )
        lazy.create_fn = partial(self._converge, resource_id)
        lazy.delete_fn = partial(self._delete, resource_id)

        try:
            self.planner.add_resource(lazy)
        except Exception as exc:
            raise AuthorizationError(
                "Creation not authorized by planner",
                code=ErrorCode.CREATE_NOT_AUTHORIZED,
                resource_id=resource_id,
            ) from exc

        self._declared[resource_id] = lazy
        self._states[resource_id] = ResourceState.PLANNED
        logger.debug("resource_planned", resource_id=resource_id)
        return lazy

    def add_dependency(
        self,
        dependent: LazyResource[Any],
        dependency: LazyResource[Any] | str,
        apply_fn: ApplyFn | None = None,
    ) -> None:
        """Make ``dependent`` wait for ``dependency``.

        ``apply_fn(dependent.input, dependency_record)`` runs immediately
        before the dependent is created or updated.
        """
        target_id = dependency if isinstance(dependency, str) else dependency.id
        if not target_id or not target_id.strip():
            raise ConfigurationError("Dependency id is blank", code=ErrorCode.BLANK_RESOURCE_ID)
        dependent.add_dependency(target_id, apply_fn)

    def state_of(self, resource_id: str) -> ResourceState:
        return self._states.get(resource_id, ResourceState.UNPLANNED)

    # Apply

    def apply(self) -> ApplyResult:
        """Create or update every declared resource in creation order.

        Stops at the first failure. With rollback enabled, resources created
        earlier in the same call are deleted in reverse order before the
        error propagates.
        """
        order = self.planner.topo_sort_for_creation()
        self._rollback_stack.clear()
        self._collector = ResultCollector()
        start = time.monotonic()

        try:
            for lazy in order:
                self._bound(lazy, lazy.create_fn)()
        except Exception as exc:
            failed_id = getattr(exc, "resource_id", None)
            self._collector.record_error(failed_id, exc)
            logger.error(
                "apply_failed",
                resource_id=failed_id,
                error_type=type(exc).__name__,
                message=str(exc),
            )
            rollback_error: RollbackError | None = None
            if self.rollback:
                try:
                    self._roll_back(exc)
                except RollbackError as rb_exc:
                    rollback_error = rb_exc
            self._save_after_failure()
            self.last_result = self._collector.finalize_apply(time.monotonic() - start)
            if rollback_error is not None:
                raise rollback_error
            raise

        result = self._collector.finalize_apply(time.monotonic() - start)
        self.last_result = result
        self.save()
        return result

    def _converge(self, resource_id: str) -> Resource[Any, Any]:
        lazy = self._declared[resource_id]
        log = bind_context(resource_id=resource_id)
        try:
            self._apply_dependencies(lazy)
            with self.store.locked():
                if not self._exists(resource_id):
                    resource = self._create(lazy)
                    self._rollback_stack.push(
                        RollbackEntry(resource_id, resource.provider_id, lazy.manager)
                    )
                    self._write(resource)
                    self._collector.record_created(resource_id)
                    log.info("resource_created", provider_id=resource.provider_id)
                else:
                    prior = self._read(resource_id)
                    if self.skip_unchanged_updates and prior.input == lazy.input:
                        resource = prior
                        self._collector.record_unchanged(resource_id)
                        log.info("resource_update_skipped")
                    else:
                        resource = self._update(lazy, prior)
                        self._write(resource)
                        self._collector.record_updated(resource_id)
                        log.info("resource_updated", provider_id=resource.provider_id)
        except Exception:
            self._states[resource_id] = ResourceState.FAILED
            raise
        self._states[resource_id] = ResourceState.CREATED
        return resource

    def _apply_dependencies(self, lazy: LazyResource[Any]) -> None:
        # Applied values are rebuilt from the current records on every pass.
        if any(dep.apply is not None for dep in lazy.dependencies):
            lazy.reset_input()
        for dep in lazy.dependencies:
            if dep.apply is None:
                continue
            try:
                target = self._read(dep.target_id)
            except StoreError as exc:
                raise StoreError(
                    "Dependency record is unavailable",
                    code=exc.code,
                    resource_id=lazy.id,
                    details={"dependency": dep.target_id},
                ) from exc
            try:
                dep.apply(lazy.input, target)
            except SimpleCloudError:
                raise
            except Exception as exc:
                raise PlanningError(
                    "Failed to apply dependency",
                    code=ErrorCode.DEPENDENCY_APPLY,
                    resource_id=lazy.id,
                    details={"dependency": dep.target_id},
                ) from exc

    def _create(self, lazy: LazyResource[Any]) -> Resource[Any, Any]:
        try:
            provider_id, output = lazy.manager.create(lazy.input)
        except Exception as exc:
            raise ManagerError(
                "Failed to create resource",
                code=ErrorCode.MANAGER_CREATE,
                resource_id=lazy.id,
            ) from exc
        self._check_provider_id(lazy.id, provider_id, "create")
        return Resource(
            id=lazy.id,
            provider_id=provider_id,
            input=lazy.input,
            output=output,
            depends_on=lazy.depends_on,
        )

    def _update(self, lazy: LazyResource[Any], prior: Resource[Any, Any]) -> Resource[Any, Any]:
        try:
            provider_id, output = lazy.manager.update(prior.provider_id, lazy.input)
        except Exception as exc:
            raise ManagerError(
                "Failed to update resource",
                code=ErrorCode.MANAGER_UPDATE,
                resource_id=lazy.id,
            ) from exc
        self._check_provider_id(lazy.id, provider_id, "update")
        if provider_id != prior.provider_id:
            bind_context(resource_id=lazy.id).info(
                "resource_replaced",
                old_provider_id=prior.provider_id,
                provider_id=provider_id,
            )
        return Resource(
            id=lazy.id,
            provider_id=provider_id,
            input=lazy.input,
            output=output,
            depends_on=lazy.depends_on,
        )

    @staticmethod
    def _check_provider_id(resource_id: str, provider_id: Any, operation: str) -> None:
        if not isinstance(provider_id, str) or not provider_id.strip():
            raise ManagerError(
                "Manager returned a blank provider id",
                code=ErrorCode.INVALID_PROVIDER_ID,
                resource_id=resource_id,
                details={"operation": operation},
            )

    def _roll_back(self, original: BaseException) -> None:
        logger.warning("rollback_started", resources=self._rollback_stack.ids())
        while (entry := self._rollback_stack.pop()) is not None:
            try:
                entry.manager.delete(entry.provider_id)
                self.store.delete(entry.resource_id)
            except Exception as exc:
                logger.error(
                    "rollback_failed",
                    resource_id=entry.resource_id,
                    error_type=type(exc).__name__,
                    message=str(exc),
                )
                raise RollbackError(
                    "Rollback aborted: failed to destroy resource",
                    resource_id=entry.resource_id,
                    original_error=original,
                    details={"remaining": self._rollback_stack.ids()},
                ) from exc
            self._states[entry.resource_id] = ResourceState.DESTROYED
            self._collector.record_rolled_back(entry.resource_id)
            logger.info("resource_rolled_back", resource_id=entry.resource_id)

    # Destroy

    def destroy(self) -> DestroyResult:
        """Delete every declared resource in deletion order."""
        order = self.planner.topo_sort_for_deletion()
        self._collector = ResultCollector()
        start = time.monotonic()
        first_error: Exception | None = None

        for lazy in order:
            try:
                self._bound(lazy, lazy.delete_fn)()
            except Exception as exc:
                self._collector.record_error(lazy.id, exc)
                logger.error(
                    "destroy_failed",
                    resource_id=lazy.id,
                    error_type=type(exc).__name__,
                    message=str(exc),
                )
                if first_error is None:
                    first_error = exc
                if self.halt_on_destroy_error:
                    break

        result = self._collector.finalize_destroy(time.monotonic() - start)
        self.last_result = result
        if first_error is not None:
            self._save_after_failure()
            raise first_error
        self.save()
        return result

    def _delete(self, resource_id: str) -> bool:
        lazy = self._declared[resource_id]
        log = bind_context(resource_id=resource_id)
        try:
            with self.store.locked():
                if not self._exists(resource_id):
                    self._collector.record_deleted(resource_id, False)
                    log.info("resource_absent")
                    return False
                prior = self._read(resource_id)
                try:
                    deleted = lazy.manager.delete(prior.provider_id)
                except Exception as exc:
                    raise ManagerError(
                        "Failed to destroy resource",
                        code=ErrorCode.MANAGER_DESTROY,
                        resource_id=resource_id,
                    ) from exc
                try:
                    self.store.delete(resource_id)
                except Exception as exc:
                    raise StoreError(
                        "Failed to delete resource from store",
                        code=ErrorCode.STORE_DELETE,
                        resource_id=resource_id,
                    ) from exc
        except Exception:
            self._states[resource_id] = ResourceState.FAILED
            raise
        self._states[resource_id] = ResourceState.DESTROYED
        self._collector.record_deleted(resource_id, bool(deleted))
        log.info("resource_deleted", provider_id=prior.provider_id, remote_deleted=bool(deleted))
        return bool(deleted)

    # Reads

    def get_resource(self, resource_id: str) -> Resource[Any, Any] | None:
        """Return the persisted record for ``resource_id``, or None."""
        if not self._exists(resource_id):
            return None
        return self._read(resource_id)

    def retrieve(
        self,
        resource_id: str,
        manager: Optional[ResourceManager[Any, Any]] = None,
    ) -> Any:
        """Re-fetch the remote representation of a recorded resource."""
        if manager is None and resource_id in self._declared:
            manager = self._declared[resource_id].manager
        if manager is None:
            raise ConfigurationError(
                "Resource manager is missing",
                code=ErrorCode.MISSING_MANAGER,
                resource_id=resource_id,
            )
        record = self._read(resource_id)
        try:
            return manager.retrieve(record.provider_id)
        except Exception as exc:
            raise ManagerError(
                "Failed to retrieve resource",
                code=ErrorCode.MANAGER_RETRIEVE,
                resource_id=resource_id,
            ) from exc

    # Store access

    def _exists(self, resource_id: str) -> bool:
        try:
            return self.store.exists(resource_id)
        except Exception as exc:
            raise StoreError(
                "Failed to check resource existence in store",
                code=ErrorCode.STORE_EXISTS,
                resource_id=resource_id,
            ) from exc

    def _read(self, resource_id: str) -> Resource[Any, Any]:
        try:
            raw = self.store.get(resource_id)
        except Exception as exc:
            raise StoreError(
                "Failed to retrieve resource from store",
                code=ErrorCode.STORE_GET,
                resource_id=resource_id,
            ) from exc
        try:
            return Resource.from_json(raw)
        except Exception as exc:
            raise StoreError(
                "Failed to deserialize resource",
                code=ErrorCode.RESOURCE_FROM_BYTES,
                resource_id=resource_id,
            ) from exc

    def _write(self, resource: Resource[Any, Any]) -> None:
        try:
            raw = resource.to_json()
        except Exception as exc:
            raise StoreError(
                "Failed to serialize resource",
                code=ErrorCode.RESOURCE_TO_BYTES,
                resource_id=resource.id,
            ) from exc
        try:
            self.store.set(resource.id, raw)
        except Exception as exc:
            raise StoreError(
                "Failed to store resource",
                code=ErrorCode.STORE_SET,
                resource_id=resource.id,
            ) from exc

    def _save_after_failure(self) -> None:
        # Records of work that did complete must survive a failed run.
        try:
            self.store.save()
        except Exception as exc:
            logger.error("state_save_failed", error_type=type(exc).__name__, message=str(exc))

    def _bound(self, lazy: LazyResource[Any], fn: Optional[Callable[[], Any]]) -> Callable[[], Any]:
        if fn is None or self._declared.get(lazy.id) is not lazy:
            raise ConfigurationError(
                "Planned resource was not declared through this engine",
                code=ErrorCode.UNDECLARED_RESOURCE,
                resource_id=lazy.id,
            )
        return fn

    def _validate_wiring(self) -> None:
        if self._planner is None:
            raise ConfigurationError("Resource planner is missing", code=ErrorCode.MISSING_PLANNER)
        if self._store is None:
            raise ConfigurationError("Resource store is missing", code=ErrorCode.MISSING_STORE)
