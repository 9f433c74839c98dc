"""Tests for logging.py."""

import logging

import pytest
import structlog

from simplecloud.logging import SDK_LOGGERS, bind_context, configure_logging, resolve_level


@pytest.fixture
def restore_structlog():
    saved = structlog.get_config()
    root_level = logging.getLogger().level
    sdk_levels = {name: logging.getLogger(name).level for name in SDK_LOGGERS}
    yield
    structlog.configure(**saved)
    logging.getLogger().setLevel(root_level)
    for name, level in sdk_levels.items():
        logging.getLogger(name).setLevel(level)


class TestResolveLevel:
    """Tests for resolve_level."""

    def test_names_are_case_insensitive(self):
        assert resolve_level("debug") == logging.DEBUG

    def test_ints_pass_through(self):
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_unknown_name_rejected(self):
        with pytest.raises(ValueError, match="nope"):
            resolve_level("nope")


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_renderer_installed(self, restore_structlog):
        configure_logging(logging.DEBUG)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_accepts_level_name(self, restore_structlog):
        configure_logging("warning")

        assert structlog.get_config()["wrapper_class"] is structlog.stdlib.BoundLogger
        assert logging.getLogger().level == logging.WARNING

    def test_sdk_loggers_stay_at_warning(self, restore_structlog):
        configure_logging("DEBUG")

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("botocore").level == logging.WARNING
        assert logging.getLogger("boto3").level == logging.WARNING


class TestBindContext:
    """Tests for bind_context."""

    def test_binds_fields(self, restore_structlog):
        logger = bind_context(run_id="run-1", resource_id="r1")

        bound = logger.bind()
        assert bound._context["run_id"] == "run-1"
        assert bound._context["resource_id"] == "r1"

    def test_bound_logger_emits_context(self, restore_structlog):
        with structlog.testing.capture_logs() as captured:
            bind_context(resource_id="vpc").info("resource_created", provider_id="vpc-1")

        assert captured == [
            {"event": "resource_created", "resource_id": "vpc", "provider_id": "vpc-1", "log_level": "info"}
        ]
