"""Durable state backends for the resource store.

Every backend persists the whole ``{id -> serialized record}`` mapping at
once. On disk and in object storage each record is embedded as a JSON
object so state files stay readable and diffable.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

import structlog
from botocore.exceptions import ClientError

if TYPE_CHECKING:
    from simplecloud.config.settings import Settings
    from simplecloud.store.base import StateBackend

logger = structlog.get_logger()

DEFAULT_STATE_PATH = Path("simplecloud-state.json")


def encode_state(data: Dict[str, bytes]) -> str:
    payload = {key: json.loads(value) for key, value in data.items()}
    return json.dumps(payload, indent=2, sort_keys=True) + "\n"


def decode_state(text: str) -> Dict[str, bytes]:
    payload = json.loads(text) if text.strip() else {}
    if not isinstance(payload, dict):
        raise ValueError("State document must be a JSON object")
    return {
        key: json.dumps(value, sort_keys=True).encode("utf-8") for key, value in payload.items()
    }


class MemoryBackend:
    """Keeps state in process memory; useful for tests and dry runs."""

    def __init__(self, initial: Dict[str, bytes] | None = None) -> None:
        self.data: Dict[str, bytes] = dict(initial or {})
        self.writes = 0

    def read(self) -> Dict[str, bytes]:
        return dict(self.data)

    def write(self, data: Dict[str, bytes]) -> None:
        self.data = dict(data)
        self.writes += 1


class FileBackend:
    """Indented JSON document on the local filesystem."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path else DEFAULT_STATE_PATH

    def read(self) -> Dict[str, bytes]:
        if not self.path.exists():
            logger.info("state_file_missing", path=str(self.path), action="will_create_on_save")
            return {}
        logger.info("state_file_read", path=str(self.path))
        return decode_state(self.path.read_text())

    def write(self, data: Dict[str, bytes]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(encode_state(data))


class S3Backend:
    """Single JSON object in an S3 bucket."""

    _MISSING_CODES = {"NoSuchKey", "404", "NotFound"}

    def __init__(self, bucket: str, key: str, client: Any) -> None:
        if not bucket:
            raise ValueError("S3 state bucket is required")
        self.bucket = bucket
        self.key = key
        self._client = client

    def read(self) -> Dict[str, bytes]:
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=self.key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in self._MISSING_CODES:
                logger.info("state_object_missing", bucket=self.bucket, key=self.key)
                return {}
            raise
        body = response["Body"].read()
        return decode_state(body.decode("utf-8") if isinstance(body, bytes) else body)

    def write(self, data: Dict[str, bytes]) -> None:
        self._client.put_object(
            Bucket=self.bucket,
            Key=self.key,
            Body=encode_state(data).encode("utf-8"),
            ContentType="application/json",
        )


def build_backend(settings: "Settings") -> "StateBackend":
    """Create the state backend selected by settings."""
    kind = settings.state_backend
    if kind == "memory":
        return MemoryBackend()
    if kind == "file":
        return FileBackend(settings.state_path)
    if kind == "s3":
        import boto3

        client = boto3.client("s3", region_name=settings.aws_region)
        return S3Backend(settings.state_bucket or "", settings.state_key, client)
    raise ValueError(f"Unknown state backend '{kind}'")
