"""Resource records and planning-time handles."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from pydantic_core import to_jsonable_python

if TYPE_CHECKING:
    from simplecloud.resources.manager import ResourceManager

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")

# Mutates the dependent's input using the dependency's persisted record.
ApplyFn = Callable[[Any, "Resource[Any, Any]"], None]


class ResourceState(str, Enum):
    """Lifecycle of a single resource id during one engine run."""

    UNPLANNED = "unplanned"
    PLANNED = "planned"
    CREATED = "created"
    FAILED = "failed"
    DESTROYED = "destroyed"


@dataclass
class Resource(Generic[InputT, OutputT]):
    """Durable record of a provisioned entity."""

    id: str
    provider_id: str
    input: InputT
    output: OutputT
    depends_on: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "providerId": self.provider_id,
            "input": self.input,
            "output": to_jsonable_python(self.output),
            "dependsOn": list(self.depends_on),
        }

    def to_json(self) -> bytes:
        """Serialize for storage; the same record always encodes to the same bytes.

        Inputs must already be plain JSON values and raise ``TypeError``
        otherwise. Output snapshots are converted to JSON-compatible values
        first, so SDK datetimes are stored as ISO 8601 strings.
        """
        return json.dumps(self.to_dict(), sort_keys=True).encode("utf-8")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Resource[Any, Any]":
        return cls(
            id=data["id"],
            provider_id=data["providerId"],
            input=data.get("input"),
            output=data.get("output"),
            depends_on=list(data.get("dependsOn") or []),
        )

    @classmethod
    def from_json(cls, raw: bytes | str) -> "Resource[Any, Any]":
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Resource record must be a JSON object, got {type(data).__name__}")
        return cls.from_dict(data)


@dataclass(frozen=True)
class Dependency:
    """Tagged dependency record: the target id and the operation to run on it.

    The engine resolves ``target_id`` through the resource store, so a
    dependency never references another LazyResource directly.
    """

    target_id: str
    apply: ApplyFn | None = None


@dataclass
class LazyResource(Generic[InputT]):
    """A declared, not-yet-materialized resource."""

    id: str
    input: InputT
    manager: "ResourceManager[Any, Any]"
    dependencies: list[Dependency] = field(default_factory=list)
    explicit_depends_on: list[str] = field(default_factory=list)
    create_fn: Callable[[], Resource[Any, Any]] | None = field(default=None, repr=False)
    delete_fn: Callable[[], bool] | None = field(default=None, repr=False)
    declared_input: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.declared_input is None:
            self.declared_input = copy.deepcopy(self.input)

    def add_dependency(self, target_id: str, apply: ApplyFn | None = None) -> None:
        self.dependencies.append(Dependency(target_id=target_id, apply=apply))

    def reset_input(self) -> None:
        """Restore the input as declared, dropping values applied from dependencies."""
        self.input = copy.deepcopy(self.declared_input)

    @property
    def depends_on(self) -> list[str]:
        """Ordered, de-duplicated ids this resource depends on."""
        seen: dict[str, None] = {}
        for dep_id in self.explicit_depends_on:
            seen.setdefault(dep_id, None)
        for dep in self.dependencies:
            seen.setdefault(dep.target_id, None)
        return list(seen)
