"""
execution_poller.models — Execution snapshots and poll outcomes.

ExecutionRecord mirrors the Appwrite `Execution` document returned by
createExecution / getExecution. The poller never mutates a record; each
poll produces a fresh snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

CONTENT_LENGTH_HEADER = "content-length"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ExecutionStatus(StrEnum):
    WAITING = "waiting"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({ExecutionStatus.COMPLETED.value, ExecutionStatus.FAILED.value})


class OutcomeKind(StrEnum):
    SUCCESS = "success"
    EMPTY_BODY = "empty_body"
    FAILED = "failed"
    TIMEOUT = "timeout"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResponseHeader:
    name: str
    value: str


@dataclass(frozen=True)
class ExecutionRecord:
    """Snapshot of a platform execution.

    `status` is kept as the raw string so unknown platform states are
    logged verbatim rather than rejected.
    """

    execution_id: str
    status: str
    response_status_code: int = 0
    response_body: str = ""
    response_headers: tuple[ResponseHeader, ...] = ()
    errors: str = ""
    logs: str = ""
    duration: float = 0.0
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, payload: Any) -> ExecutionRecord:
        """Build a record from an SDK response (plain dict or SDK model)."""
        data = _as_dict(payload)
        headers = tuple(
            ResponseHeader(name=str(h.get("name", "")), value=str(h.get("value", "")))
            for h in (_as_dict(item) for item in data.get("responseHeaders") or [])
        )
        return cls(
            execution_id=str(data.get("$id", "")),
            status=str(data.get("status", "")),
            response_status_code=int(data.get("responseStatusCode") or 0),
            response_body=str(data.get("responseBody") or ""),
            response_headers=headers,
            errors=str(data.get("errors") or ""),
            logs=str(data.get("logs") or ""),
            duration=float(data.get("duration") or 0.0),
            raw=data,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def header(self, name: str) -> str | None:
        """Return the first response header matching `name` (case-insensitive)."""
        wanted = name.lower()
        for header in self.response_headers:
            if header.name.lower() == wanted:
                return header.value
        return None

    @property
    def content_length(self) -> str | None:
        return self.header(CONTENT_LENGTH_HEADER)

    def to_dict(self) -> dict[str, Any]:
        if self.raw:
            return dict(self.raw)
        return {
            "$id": self.execution_id,
            "status": self.status,
            "responseStatusCode": self.response_status_code,
            "responseBody": self.response_body,
            "responseHeaders": [{"name": h.name, "value": h.value} for h in self.response_headers],
            "errors": self.errors,
            "logs": self.logs,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class PollAttempt:
    sequence: int
    elapsed_seconds: float
    record: ExecutionRecord


@dataclass(frozen=True)
class PollOutcome:
    """Result of one poll run.

    parsed_body is set only for SUCCESS with a JSON body; content_length
    only for EMPTY_BODY when the platform reported one.
    """

    kind: OutcomeKind
    execution_id: str
    attempts: tuple[PollAttempt, ...]
    record: ExecutionRecord | None = None
    parsed_body: Any = None
    content_length: str | None = None

    @property
    def poll_count(self) -> int:
        return len(self.attempts)


def _as_dict(payload: Any) -> dict[str, Any]:
    if isinstance(payload, dict):
        return payload
    # Newer SDK releases return pydantic models keyed by their API aliases.
    if hasattr(payload, "model_dump"):
        return dict(payload.model_dump(by_alias=True))
    if hasattr(payload, "to_dict"):
        return dict(payload.to_dict())
    raise TypeError(f"Unsupported execution payload type: {type(payload).__name__}")
