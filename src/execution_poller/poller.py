"""
execution_poller.poller — Create one async execution and poll it to completion.

Loop contract:
  1. create the execution (async) and record its id and initial status
  2. sleep initial_delay_seconds
  3. read the execution; stop on `completed` or `failed`; stop once more
     than timeout_seconds have elapsed since the loop began; otherwise
     sleep interval_seconds and read again

A `completed` execution with an empty responseBody is reported separately
from success. When the platform still reports a content-length header the
function did produce a body; get-execution just does not return it for
async executions.

Exceptions raised by the client abort the run; nothing is retried here.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from typing import Any

from aws_lambda_powertools import Logger

from execution_poller.client import ExecutionsClient, InvocationRequest
from execution_poller.config import (
    DEFAULT_INITIAL_DELAY_SECONDS,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
)
from execution_poller.models import (
    ExecutionRecord,
    ExecutionStatus,
    OutcomeKind,
    PollAttempt,
    PollOutcome,
)

logger = Logger(service="execution-poller")


def poll_execution(
    client: ExecutionsClient,
    function_id: str,
    body: str,
    path: str = "/",
    *,
    initial_delay_seconds: float = DEFAULT_INITIAL_DELAY_SECONDS,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> PollOutcome:
    """Run one create-then-poll cycle and return how it ended."""
    logger.append_keys(function_id=function_id)
    try:
        return _poll(
            client,
            function_id,
            body,
            path,
            initial_delay_seconds=initial_delay_seconds,
            interval_seconds=interval_seconds,
            timeout_seconds=timeout_seconds,
            sleep=sleep,
            clock=clock,
        )
    finally:
        logger.remove_keys(["function_id", "execution_id"])


def _poll(
    client: ExecutionsClient,
    function_id: str,
    body: str,
    path: str,
    *,
    initial_delay_seconds: float,
    interval_seconds: float,
    timeout_seconds: float,
    sleep: Callable[[float], None],
    clock: Callable[[], float],
) -> PollOutcome:
    logger.info("Creating async execution", extra={"path": path, "body": body})

    created = client.create(InvocationRequest(function_id=function_id, body=body, path=path))
    execution_id = created.execution_id
    logger.append_keys(execution_id=execution_id)
    logger.info("Execution created", extra={"initial_status": created.status})

    logger.debug("Waiting before first poll", extra={"delay_seconds": initial_delay_seconds})
    sleep(initial_delay_seconds)

    attempts: list[PollAttempt] = []
    started = clock()
    while True:
        record = client.get(function_id, execution_id)
        elapsed = clock() - started
        attempt = PollAttempt(sequence=len(attempts) + 1, elapsed_seconds=elapsed, record=record)
        attempts.append(attempt)
        _log_attempt(attempt)

        if record.status == ExecutionStatus.COMPLETED:
            return _completed_outcome(execution_id, record, tuple(attempts))

        if record.status == ExecutionStatus.FAILED:
            logger.error(
                "Execution failed",
                extra={
                    "errors": record.errors,
                    "response_status_code": record.response_status_code,
                },
            )
            return PollOutcome(
                kind=OutcomeKind.FAILED,
                execution_id=execution_id,
                attempts=tuple(attempts),
                record=record,
            )

        if elapsed > timeout_seconds:
            logger.warning(
                f"Polling exceeded {timeout_seconds:g} seconds",
                extra={"poll_count": len(attempts), "last_status": record.status},
            )
            return PollOutcome(
                kind=OutcomeKind.TIMEOUT,
                execution_id=execution_id,
                attempts=tuple(attempts),
                record=record,
            )

        logger.debug("Waiting before next poll", extra={"delay_seconds": interval_seconds})
        sleep(interval_seconds)


def _log_attempt(attempt: PollAttempt) -> None:
    record = attempt.record
    logger.info(
        f"Poll #{attempt.sequence}",
        extra={
            "status": record.status,
            "elapsed_seconds": round(attempt.elapsed_seconds, 3),
            "response_status_code": record.response_status_code,
            "response_body": record.response_body,
            "response_body_length": len(record.response_body),
            "response_headers": [
                {"name": h.name, "value": h.value} for h in record.response_headers
            ],
        },
    )


def _completed_outcome(
    execution_id: str,
    record: ExecutionRecord,
    attempts: tuple[PollAttempt, ...],
) -> PollOutcome:
    logger.info("Execution completed", extra={"execution": record.to_dict()})

    if record.response_body:
        parsed = _parse_body(record.response_body)
        logger.info("responseBody is available", extra={"parsed_body": parsed})
        return PollOutcome(
            kind=OutcomeKind.SUCCESS,
            execution_id=execution_id,
            attempts=attempts,
            record=record,
            parsed_body=parsed,
        )

    content_length = record.content_length
    logger.warning("responseBody is empty for a completed async execution")
    if content_length is not None:
        logger.warning(
            f"content-length header shows {content_length} bytes; the function returned "
            "data but get-execution does not expose it",
            extra={"content_length": content_length},
        )
    return PollOutcome(
        kind=OutcomeKind.EMPTY_BODY,
        execution_id=execution_id,
        attempts=attempts,
        record=record,
        content_length=content_length,
    )


def _parse_body(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("responseBody is not valid JSON", extra={"response_body": raw})
        return None
