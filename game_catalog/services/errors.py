"""Error types and reporting for the Game Catalog application.

Every failure a screen can hit is one of three kinds: the backend could
not be reached (``NetworkError``), the backend refused the request
(``ApiError``), or the input was rejected before sending
(``ValidationError``). ``classify`` maps anything else onto the same
hierarchy, and ``ErrorReporter`` logs each failure with its technical
details while handing the screen a short ``ErrorReport`` to display.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

import httpx
import structlog

log = structlog.stdlib.get_logger()


class ErrorKind(Enum):
    """What went wrong, as far as the user is concerned."""
    NETWORK = "network"
    API = "api"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    UNEXPECTED = "unexpected"


class ErrorSeverity(Enum):
    """How loudly a failure is shown and logged."""
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ErrorReport:
    """What a screen shows for a failure."""
    message: str
    kind: ErrorKind
    severity: ErrorSeverity
    hints: tuple[str, ...] = ()
    details: str | None = None

    def render(self, with_hints: bool = True, max_hints: int = 3) -> str:
        """Format the message, optionally followed by a short list of hints."""
        if not with_hints or not self.hints:
            return self.message
        lines = [self.message, "", "Try:"]
        lines.extend(f"  • {hint}" for hint in self.hints[:max_hints])
        return "\n".join(lines)


class CatalogError(Exception):
    """Base class for failures the UI knows how to present."""

    kind: ClassVar[ErrorKind] = ErrorKind.UNEXPECTED
    severity: ClassVar[ErrorSeverity] = ErrorSeverity.ERROR

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def hints(self) -> tuple[str, ...]:
        return ()

    def report(self) -> ErrorReport:
        return ErrorReport(
            message=self.message,
            kind=self.kind,
            severity=self.severity,
            hints=self.hints,
            details=self.details,
        )


class NetworkError(CatalogError):
    """The request never produced a response (connection refused, DNS, timeout)."""

    kind = ErrorKind.NETWORK

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        url: str | None = None,
    ) -> None:
        parts: list[str] = []
        if url:
            parts.append(f"URL: {url}")
        if original_error is not None:
            parts.append(f"{type(original_error).__name__}: {original_error}")
        super().__init__(message, "\n".join(parts) or None)
        self.original_error = original_error
        self.url = url

    @property
    def hints(self) -> tuple[str, ...]:
        return (
            "Check that the catalog backend is running",
            "Verify the API URL in settings",
            "Try again in a few moments",
        )


class ApiError(CatalogError):
    """The backend answered with a non-success status.

    The message is the response body text as sent by the backend, or a
    generic status line when the body is empty.
    """

    kind = ErrorKind.API

    def __init__(
        self,
        message: str,
        status_code: int,
        method: str | None = None,
        url: str | None = None,
    ) -> None:
        details = f"Status: {status_code}"
        if method and url:
            details += f"\n{method} {url}"
        super().__init__(message, details)
        self.status_code = status_code
        self.method = method
        self.url = url

    @property
    def hints(self) -> tuple[str, ...]:
        if self.status_code == 404:
            return ("The record may have been deleted by someone else", "Refresh the list and try again")
        if self.status_code >= 500:
            return ("The server is experiencing issues", "Try again later")
        return ("Review the submitted data and try again",)


class MalformedResponseError(CatalogError):
    """The backend answered successfully but the body could not be decoded."""

    kind = ErrorKind.API


class ValidationError(CatalogError):
    """Input rejected locally, before any request is sent."""

    kind = ErrorKind.VALIDATION
    severity = ErrorSeverity.WARNING

    def __init__(self, message: str, field: str | None = None, value: Any = None) -> None:
        parts: list[str] = []
        if field:
            parts.append(f"Field: {field}")
        if value is not None:
            parts.append(f"Value: {str(value)[:100]}")
        super().__init__(message, "\n".join(parts) or None)
        self.field = field
        self.value = value


class CategoryInUseError(ValidationError):
    """Raised when deleting a category that still has games attached."""

    def __init__(self, category_name: str, game_count: int) -> None:
        super().__init__(
            f'Cannot delete category "{category_name}": it has {game_count} associated game(s).',
            field="category",
            value=category_name,
        )
        self.category_name = category_name
        self.game_count = game_count

    @property
    def hints(self) -> tuple[str, ...]:
        return ("Move or delete the category's games first",)


class ConfigurationError(CatalogError):
    """The settings could not be validated or persisted."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str, setting: str | None = None, expected: str | None = None) -> None:
        super().__init__(message, f"Setting: {setting}" if setting else None)
        self.setting = setting
        self.expected = expected

    @property
    def hints(self) -> tuple[str, ...]:
        hints = ("Check the configuration settings", "Reset to default values if needed")
        if self.expected:
            hints += (f"Expected: {self.expected}",)
        return hints


def classify(error: Exception, url: str | None = None) -> CatalogError:
    """Map any exception onto the catalog error hierarchy."""
    if isinstance(error, CatalogError):
        return error
    if isinstance(error, httpx.ConnectError):
        return NetworkError("Unable to reach the catalog server. Please check that it is running.", error, url)
    if isinstance(error, httpx.TimeoutException):
        return NetworkError("The request timed out. The server may be slow or unavailable.", error, url)
    if isinstance(error, httpx.RequestError):
        return NetworkError("A network error occurred. Please check your connection.", error, url)

    details = f"{type(error).__name__}: {error}"
    # JSONDecodeError is a ValueError; check it first
    if isinstance(error, json.JSONDecodeError):
        return MalformedResponseError("The server sent a response that could not be read.", details)
    if isinstance(error, (KeyError, TypeError, ValueError)):
        return MalformedResponseError("The server sent data in an unexpected format.", details)
    return CatalogError("An unexpected error occurred. Please try again.", details)


class ErrorReporter:
    """Logs failures with their technical details."""

    def report(
        self,
        error: Exception,
        operation: str,
        component: str,
        **context: Any,
    ) -> ErrorReport:
        """Classify and log ``error``, returning what the user should see."""
        report = classify(error, url=context.get("url")).report()

        emit = log.warning if report.severity == ErrorSeverity.WARNING else log.error
        emit(
            f"{operation} failed",
            error_message=report.message,
            kind=report.kind.value,
            component=component,
            details=report.details,
            **context,
        )
        return report


_reporter: ErrorReporter | None = None


def get_error_reporter() -> ErrorReporter:
    """Get the process-wide error reporter."""
    global _reporter
    if _reporter is None:
        _reporter = ErrorReporter()
    return _reporter


def report_error(error: Exception, operation: str, component: str, **context: Any) -> ErrorReport:
    """Report ``error`` through the process-wide reporter."""
    return get_error_reporter().report(error, operation, component, **context)
