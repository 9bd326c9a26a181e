"""Unit tests for execution_poller.models."""

from __future__ import annotations

from typing import Any

import pytest

from execution_poller.models import (
    ExecutionRecord,
    ExecutionStatus,
    OutcomeKind,
    PollAttempt,
    PollOutcome,
    ResponseHeader,
)

_COMPLETED: dict[str, Any] = {
    "$id": "exec-42",
    "$createdAt": "2026-10-19T10:00:00.000+00:00",
    "functionId": "fn-1",
    "status": "completed",
    "responseStatusCode": 200,
    "responseBody": "",
    "responseHeaders": [
        {"name": "Content-Type", "value": "application/json"},
        {"name": "Content-Length", "value": "131"},
    ],
    "logs": "Received request to path: /test",
    "errors": "",
    "duration": 2.013,
}


class _SdkModel:
    """Mimics SDK releases that return pydantic models instead of dicts."""

    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data

    def model_dump(self, *, by_alias: bool = False) -> dict[str, Any]:
        assert by_alias
        return dict(self._data)


def test_from_payload_maps_platform_fields() -> None:
    record = ExecutionRecord.from_payload(_COMPLETED)

    assert record.execution_id == "exec-42"
    assert record.status == ExecutionStatus.COMPLETED
    assert record.response_status_code == 200
    assert record.response_body == ""
    assert record.response_headers[0] == ResponseHeader(
        name="Content-Type", value="application/json"
    )
    assert record.logs == "Received request to path: /test"
    assert record.duration == pytest.approx(2.013)
    assert record.is_terminal


def test_from_payload_accepts_sdk_models() -> None:
    record = ExecutionRecord.from_payload(_SdkModel(_COMPLETED))

    assert record.execution_id == "exec-42"
    assert record.content_length == "131"


def test_from_payload_tolerates_missing_and_null_fields() -> None:
    record = ExecutionRecord.from_payload(
        {"$id": "exec-1", "status": "waiting", "responseBody": None, "responseHeaders": None}
    )

    assert record.response_body == ""
    assert record.response_headers == ()
    assert record.response_status_code == 0
    assert not record.is_terminal


def test_from_payload_rejects_unknown_types() -> None:
    with pytest.raises(TypeError, match="Unsupported execution payload"):
        ExecutionRecord.from_payload(["not", "a", "record"])


def test_header_lookup_is_case_insensitive() -> None:
    record = ExecutionRecord.from_payload(_COMPLETED)

    assert record.header("content-type") == "application/json"
    assert record.content_length == "131"
    assert record.header("x-missing") is None


@pytest.mark.parametrize(
    ("status", "terminal"),
    [
        ("waiting", False),
        ("processing", False),
        ("scheduled", False),
        ("completed", True),
        ("failed", True),
        ("something-new", False),
    ],
)
def test_only_completed_and_failed_are_terminal(status: str, terminal: bool) -> None:
    record = ExecutionRecord(execution_id="e", status=status)
    assert record.is_terminal is terminal


def test_to_dict_prefers_raw_platform_document() -> None:
    record = ExecutionRecord.from_payload(_COMPLETED)
    assert record.to_dict()["functionId"] == "fn-1"

    built = ExecutionRecord(
        execution_id="e-2",
        status="failed",
        errors="boom",
        response_headers=(ResponseHeader("x-a", "1"),),
    )
    assert built.to_dict() == {
        "$id": "e-2",
        "status": "failed",
        "responseStatusCode": 0,
        "responseBody": "",
        "responseHeaders": [{"name": "x-a", "value": "1"}],
        "errors": "boom",
        "logs": "",
        "duration": 0.0,
    }


def test_poll_outcome_counts_attempts() -> None:
    record = ExecutionRecord(execution_id="e", status="processing")
    attempts = tuple(
        PollAttempt(sequence=i, elapsed_seconds=i * 2.0, record=record) for i in (1, 2)
    )

    outcome = PollOutcome(kind=OutcomeKind.TIMEOUT, execution_id="e", attempts=attempts)

    assert outcome.poll_count == 2
    assert outcome.parsed_body is None
