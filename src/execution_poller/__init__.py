"""
execution_poller — Poll an Appwrite function execution until it is terminal.

Diagnostic client for checking whether get-execution exposes responseBody
for asynchronous executions.
"""

from execution_poller.client import ExecutionsClient, InvocationRequest, build_functions
from execution_poller.config import PollerSettings, load_settings
from execution_poller.exceptions import ConfigurationError, PollerError
from execution_poller.models import ExecutionRecord, ExecutionStatus, OutcomeKind, PollOutcome
from execution_poller.poller import poll_execution

__all__ = [
    "ConfigurationError",
    "ExecutionRecord",
    "ExecutionStatus",
    "ExecutionsClient",
    "InvocationRequest",
    "OutcomeKind",
    "PollOutcome",
    "PollerError",
    "PollerSettings",
    "build_functions",
    "load_settings",
    "poll_execution",
]
