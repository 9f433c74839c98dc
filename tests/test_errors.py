"""Tests for core/errors.py."""

import pytest

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


class TestSimpleCloudError:
    """Tests for the base error."""

    def test_attributes(self):
        error = SimpleCloudError(
            "boom", code=ErrorCode.STORE_GET, resource_id="r1", details={"k": "v"}
        )

        assert error.message == "boom"
        assert error.code == ErrorCode.STORE_GET
        assert error.resource_id == "r1"
        assert error.details == {"k": "v"}

    def test_defaults(self):
        error = SimpleCloudError("boom")

        assert error.code is None
        assert error.resource_id is None
        assert error.details == {}
        assert str(error) == "boom"

    @pytest.mark.parametrize(
        "cls",
        [
            ConfigurationError,
            StoreError,
            StateSaveError,
            ManagerError,
            AuthorizationError,
            PlanningError,
            RollbackError,
        ],
    )
    def test_subclasses(self, cls):
        assert issubclass(cls, SimpleCloudError)

    def test_state_save_error_is_store_error(self):
        error = StateSaveError("save failed")

        assert isinstance(error, StoreError)
        assert error.code == ErrorCode.STORE_SAVE

    def test_error_code_is_str(self):
        assert ErrorCode.DEPENDENCY_CYCLE == "dependency_cycle"


class TestRollbackError:
    """Tests for RollbackError."""

    def test_carries_original_error(self):
        original = ManagerError("create failed", code=ErrorCode.MANAGER_CREATE, resource_id="r3")

        error = RollbackError("rollback aborted", resource_id="r1", original_error=original)

        assert error.original_error is original
        assert error.code == ErrorCode.ROLLBACK_DESTROY
        assert error.resource_id == "r1"

    def test_explicit_code_wins(self):
        error = RollbackError("x", code=ErrorCode.DELETE_NOT_AUTHORIZED)

        assert error.code == ErrorCode.DELETE_NOT_AUTHORIZED


class TestFormatErrorMessage:
    """Tests for format_error_message."""

    def test_includes_code_id_and_details(self):
        error = PlanningError(
            "Dependency cycle detected",
            code=ErrorCode.DEPENDENCY_CYCLE,
            resource_id="a",
            details={"cycle": "a -> b -> a"},
        )

        assert format_error_message(error) == (
            "Dependency cycle detected (code=dependency_cycle, id=a, cycle=a -> b -> a)"
        )

    def test_includes_cause(self):
        try:
            try:
                raise RuntimeError("throttled")
            except RuntimeError as exc:
                raise ManagerError(
                    "Failed to create resource", code=ErrorCode.MANAGER_CREATE, resource_id="r1"
                ) from exc
        except ManagerError as error:
            message = str(error)

        assert message == (
            "Failed to create resource (code=manager_create, id=r1): caused by throttled"
        )
