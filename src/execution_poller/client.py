"""
execution_poller.client — Appwrite Functions adapter.

Wraps the Appwrite SDK `Functions` service so the poll loop deals only in
ExecutionRecord snapshots. Any SDK exception (AppwriteException, network
errors) propagates to the caller unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from appwrite.client import Client
from appwrite.services.functions import Functions

from execution_poller.config import PollerSettings
from execution_poller.models import ExecutionRecord


class FunctionsService(Protocol):
    def create_execution(self, function_id: str, **kwargs: Any) -> Any: ...

    def get_execution(self, function_id: str, execution_id: str) -> Any: ...


@dataclass(frozen=True)
class InvocationRequest:
    function_id: str
    body: str
    path: str = "/"
    asynchronous: bool = True


class ExecutionsClient:
    """Create and read executions of one deployed function."""

    def __init__(self, functions: FunctionsService) -> None:
        self._functions = functions

    def create(self, request: InvocationRequest) -> ExecutionRecord:
        # `async` is a keyword in Python; the SDK exposes the flag as `xasync`.
        payload = self._functions.create_execution(
            request.function_id,
            body=request.body,
            xasync=request.asynchronous,
            path=request.path,
        )
        return ExecutionRecord.from_payload(payload)

    def get(self, function_id: str, execution_id: str) -> ExecutionRecord:
        payload = self._functions.get_execution(function_id, execution_id)
        return ExecutionRecord.from_payload(payload)


def build_functions(settings: PollerSettings) -> Functions:
    """Create an authenticated Appwrite Functions service."""
    client = Client()
    client.set_endpoint(settings.endpoint)
    client.set_project(settings.project_id)
    client.set_key(settings.api_key)
    return Functions(client)
