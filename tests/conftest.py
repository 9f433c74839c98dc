"""Root test configuration and shared fixtures."""

import copy
import logging

import pytest
import structlog

from simplecloud.orchestration import ProvisioningEngine
from simplecloud.planning import TopologicalPlanner
from simplecloud.store import MemoryBackend, ResourceStore


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


class FakeManager:
    """In-memory resource manager recording every call.

    Inputs are dicts carrying a ``name``; names listed in the ``fail_*`` sets
    make the matching operation raise.
    """

    def __init__(self, prefix="p"):
        self.prefix = prefix
        self.remote = {}
        self.calls = []
        self.counter = 0
        self.fail_create = set()
        self.fail_update = set()
        self.fail_delete = set()
        self.replace_on_update = False

    def _next_id(self):
        self.counter += 1
        return f"{self.prefix}-{self.counter}"

    def create(self, input):
        self.calls.append(("create", copy.deepcopy(input)))
        if input.get("name") in self.fail_create:
            raise RuntimeError(f"create failed for {input.get('name')}")
        provider_id = self._next_id()
        self.remote[provider_id] = copy.deepcopy(input)
        return provider_id, {"arn": f"arn:{provider_id}"}

    def retrieve(self, provider_id):
        self.calls.append(("retrieve", provider_id))
        return copy.deepcopy(self.remote[provider_id])

    def update(self, provider_id, input):
        self.calls.append(("update", provider_id, copy.deepcopy(input)))
        if input.get("name") in self.fail_update:
            raise RuntimeError(f"update failed for {input.get('name')}")
        if self.replace_on_update:
            self.remote.pop(provider_id, None)
            provider_id = self._next_id()
        self.remote[provider_id] = copy.deepcopy(input)
        return provider_id, {"arn": f"arn:{provider_id}"}

    def delete(self, provider_id):
        self.calls.append(("delete", provider_id))
        name = (self.remote.get(provider_id) or {}).get("name")
        if name in self.fail_delete:
            raise RuntimeError(f"delete failed for {name}")
        return self.remote.pop(provider_id, None) is not None

    def operations(self, kind):
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def manager():
    return FakeManager()


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def make_engine(backend):
    """Build engines sharing one in-memory backend, like successive runs."""

    def _make(**kwargs):
        return ProvisioningEngine(ResourceStore(backend), TopologicalPlanner(), **kwargs)

    return _make
