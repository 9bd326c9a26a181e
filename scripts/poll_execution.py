#!/usr/bin/env python3
"""
poll_execution.py — Check whether getExecution returns responseBody for async runs.

Creates one async execution of a deployed function (functions/delayed-response
by default on path /test), polls getExecution until it completes, fails or
times out, and prints a diagnosis.

Configuration is read from APPWRITE_ENDPOINT, APPWRITE_PROJECT_ID,
APPWRITE_FUNCTION_ID and APPWRITE_API_KEY (or .env.local / .env); flags
override the environment. Placeholder values abort before any network call.

Usage:
    uv run python scripts/poll_execution.py \\
        [--endpoint https://cloud.appwrite.io/v1] \\
        [--project-id <project>] [--function-id <function>] [--api-key <key>] \\
        [--path /test] [--body '{"test": true}'] \\
        [--initial-delay 1] [--interval 2] [--timeout 60]

Local run against tests/mocks/mock_executions:
    uv run uvicorn tests.mocks.mock_executions.main:app --port 8770
    uv run python scripts/poll_execution.py --endpoint http://localhost:8770/v1 \\
        --project-id local --function-id delayed-response --api-key local

Exit codes:
    0 responseBody returned   1 configuration error   2 empty responseBody
    3 execution failed        4 polling timed out     5 request error
"""

from __future__ import annotations

import argparse
import json
import sys

from execution_poller.client import ExecutionsClient, build_functions
from execution_poller.config import DEFAULT_BODY, DEFAULT_PATH, PollerSettings, load_settings
from execution_poller.exceptions import ConfigurationError
from execution_poller.models import OutcomeKind, PollOutcome
from execution_poller.poller import logger, poll_execution

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_EMPTY_BODY = 2
EXIT_FAILED = 3
EXIT_TIMEOUT = 4
EXIT_REQUEST_ERROR = 5

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

_EXIT_CODES = {
    OutcomeKind.SUCCESS: EXIT_OK,
    OutcomeKind.EMPTY_BODY: EXIT_EMPTY_BODY,
    OutcomeKind.FAILED: EXIT_FAILED,
    OutcomeKind.TIMEOUT: EXIT_TIMEOUT,
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Poll an async Appwrite execution and report whether responseBody is exposed."
    )
    parser.add_argument("--endpoint", default=None, help="Appwrite API endpoint")
    parser.add_argument("--project-id", default=None, help="Appwrite project ID")
    parser.add_argument("--function-id", default=None, help="ID of the deployed test function")
    parser.add_argument("--api-key", default=None, help="Appwrite API key")
    parser.add_argument("--path", default=DEFAULT_PATH, help="Function path (default /test)")
    parser.add_argument("--body", default=DEFAULT_BODY, help="Execution body (default test JSON)")
    parser.add_argument(
        "--initial-delay",
        type=float,
        default=None,
        help="Seconds to wait before the first poll (default 1)",
    )
    parser.add_argument(
        "--interval", type=float, default=None, help="Seconds between polls (default 2)"
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="Give up after this many seconds (default 60)"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Structured log level (default INFO)",
    )
    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> PollerSettings:
    return load_settings().with_overrides(
        endpoint=args.endpoint,
        project_id=args.project_id,
        function_id=args.function_id,
        api_key=args.api_key,
        initial_delay_seconds=args.initial_delay,
        interval_seconds=args.interval,
        timeout_seconds=args.timeout,
    )


def build_client(settings: PollerSettings) -> ExecutionsClient:
    return ExecutionsClient(build_functions(settings))


def print_report(outcome: PollOutcome) -> None:
    print(f"\nExecution ID: {outcome.execution_id}")
    print(f"Polls: {outcome.poll_count}")
    if outcome.kind == OutcomeKind.SUCCESS:
        print("SUCCESS: responseBody is available")
        if outcome.parsed_body is not None:
            print(f"Parsed response: {json.dumps(outcome.parsed_body, indent=2)}")
    elif outcome.kind == OutcomeKind.EMPTY_BODY:
        print("FAILURE: responseBody is empty")
        print("This confirms the platform limitation for async executions.")
        if outcome.content_length is not None:
            print(f"Note: content-length header shows {outcome.content_length} bytes")
            print("The backend DID return data, but getExecution does not expose it.")
    elif outcome.kind == OutcomeKind.FAILED:
        errors = outcome.record.errors if outcome.record else ""
        print("EXECUTION FAILED")
        print(f"Errors: {errors}")
    else:
        print("TIMEOUT: polling ended before the execution reached a terminal status")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logger.setLevel(args.log_level)

    try:
        settings = resolve_settings(args).validate()
    except ConfigurationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        print(
            "       Set the Appwrite endpoint, project ID, function ID and API key "
            "(flags or APPWRITE_* environment variables).",
            file=sys.stderr,
        )
        return EXIT_CONFIG
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    print("Appwrite getExecution polling test")
    print(f"Function ID: {settings.function_id}")
    print(f"Path: {args.path}")
    print(f"Body: {args.body}")

    try:
        outcome = poll_execution(
            build_client(settings),
            settings.function_id,
            args.body,
            args.path,
            initial_delay_seconds=settings.initial_delay_seconds,
            interval_seconds=settings.interval_seconds,
            timeout_seconds=settings.timeout_seconds,
        )
    except Exception as exc:
        logger.exception("Polling test failed")
        print(f"Test failed with error: {exc}", file=sys.stderr)
        return EXIT_REQUEST_ERROR

    print_report(outcome)
    return _EXIT_CODES[outcome.kind]


if __name__ == "__main__":
    raise SystemExit(main())
