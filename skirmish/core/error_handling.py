"""
Centralized error handling for the resolver.

Every player command runs behind this boundary: an unexpected fault is
recorded with its context and turned into a non-fatal result, so a single
bad action never corrupts an encounter.
"""

import logging
import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")


class GameException(Exception):
    """Base class for errors raised by the resolver."""


class CombatError(GameException):
    """Raised when the resolver is invoked with inputs it cannot resolve."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context: dict[str, Any] = context or {}


class ErrorSeverity(Enum):
    """Enumeration of error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class GameError:
    """Represents an error with severity, context, and optional exception information."""

    message: str
    severity: ErrorSeverity
    context: dict[str, Any]
    exception: Optional[Exception] = None


class ErrorHandler:
    """Records and logs errors by severity."""

    def __init__(self) -> None:
        self.logger = logging.getLogger("skirmish.errors")
        self.error_history: list[GameError] = []

    def handle(
        self,
        message: str,
        severity: ErrorSeverity,
        context: Optional[dict[str, Any]] = None,
        exception: Optional[Exception] = None,
    ) -> GameError:
        """Record an error and log it according to its severity."""
        error = GameError(
            message=message,
            severity=severity,
            context=context or {},
            exception=exception,
        )
        self.error_history.append(error)

        # Prefix context keys to avoid clashing with LogRecord attributes.
        safe_context = {f"ctx_{key}": value for key, value in error.context.items()}

        if error.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(f"CRITICAL: {error.message}", extra=safe_context)
            if error.exception:
                self.logger.critical(
                    "".join(traceback.format_exception(error.exception))
                )
        elif error.severity == ErrorSeverity.HIGH:
            self.logger.error(f"ERROR: {error.message}", extra=safe_context)
            if error.exception:
                self.logger.debug(
                    "".join(traceback.format_exception(error.exception))
                )
        elif error.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(f"WARNING: {error.message}", extra=safe_context)
        else:
            self.logger.info(f"INFO: {error.message}", extra=safe_context)
        return error

    def safe_execute(
        self,
        operation: Callable[[], T],
        default: T,
        error_message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[dict[str, Any]] = None,
    ) -> T:
        """Run an operation, returning `default` if it raises."""
        try:
            return operation()
        except Exception as e:
            self.handle(
                f"{error_message}: {e!s}",
                severity,
                context,
                e,
            )
            return default


# Global error handler instance
ERROR_HANDLER = ErrorHandler()
