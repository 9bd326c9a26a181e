"""
execution_poller.exceptions — Poller error types.

Transport errors from the platform SDK are not wrapped; they propagate to
the CLI driver unchanged.
"""


class PollerError(RuntimeError):
    """Base class for poller errors."""


class ConfigurationError(PollerError):
    """
    Raised when required settings still hold placeholder or empty values.

    Attributes:
        unresolved: Names of the settings that must be replaced before a run.
    """

    def __init__(self, unresolved: list[str]) -> None:
        self.unresolved = list(unresolved)
        super().__init__(f"Unresolved configuration values: {', '.join(self.unresolved)}")
