"""Error types for the finvoice pipeline.

Capture errors and parse misses are not exceptions; they are reported
through callbacks and the conversational fallback. These exceptions cover
outbound action execution, engine startup, and configuration.
"""


class FinvoiceError(Exception):
    """Base exception for finvoice errors."""

    pass


class ExecutionError(FinvoiceError):
    """Raised when an outbound action fails in the application layer."""

    def __init__(
        self, message: str, action: str | None = None, cause: Exception | None = None
    ) -> None:
        """Initialize execution error.

        Args:
            message: Error message.
            action: Kind of the action that failed.
            cause: Underlying exception if available.
        """
        super().__init__(message)
        self.action = action
        self.cause = cause


class UnknownActionError(ExecutionError):
    """Raised when an executor receives an action kind it cannot handle."""

    pass


class EngineError(FinvoiceError):
    """Raised when a recognition or synthesis engine cannot be started."""

    def __init__(self, message: str, engine: str | None = None) -> None:
        super().__init__(message)
        self.engine = engine


class ConfigError(FinvoiceError):
    """Raised when configuration cannot be loaded or is invalid."""

    pass


__all__ = [
    "ConfigError",
    "EngineError",
    "ExecutionError",
    "FinvoiceError",
    "UnknownActionError",
]
