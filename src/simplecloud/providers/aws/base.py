from __future__ import annotations

from typing import Any, Iterable

import structlog
from botocore.exceptions import ClientError

logger = structlog.get_logger()


class AwsManagerError(RuntimeError):
    pass


def error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


def is_not_found(exc: ClientError, codes: Iterable[str]) -> bool:
    return error_code(exc) in set(codes)


def tags_from_specifications(input: dict[str, Any]) -> list[dict[str, str]]:
    """Flatten ``TagSpecifications`` from a create request into a tag list."""
    tags: list[dict[str, str]] = []
    for spec in input.get("TagSpecifications") or []:
        tags.extend(spec.get("Tags") or [])
    return tags


class AwsResourceManager:
    """Shared plumbing for boto3-backed resource managers."""

    kind = "resource"

    def __init__(self, client: Any) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        return self._client

    def _require_unchanged(self, current: dict[str, Any], input: dict[str, Any], keys: Iterable[str]) -> None:
        for key in keys:
            if key in input and key in current and input[key] != current[key]:
                raise AwsManagerError(
                    f"{self.kind} attribute {key} cannot change in place "
                    f"({current[key]!r} -> {input[key]!r})"
                )
