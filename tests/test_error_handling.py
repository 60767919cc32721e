"""Property-based tests for error classification and reporting."""

import json

import httpx
import pytest
from hypothesis import given, strategies as st

from game_catalog.services.errors import (
    ApiError,
    CatalogError,
    CategoryInUseError,
    ConfigurationError,
    ErrorKind,
    ErrorReport,
    ErrorReporter,
    ErrorSeverity,
    MalformedResponseError,
    NetworkError,
    ValidationError,
    classify,
    get_error_reporter,
)


class TestErrorReportingProperties:
    """Property-based tests for user-facing error reports."""

    @given(
        error_type=st.sampled_from(["connect", "timeout", "request"]),
        error_message=st.text(min_size=1, max_size=100),
    )
    def test_transport_failures_become_network_errors(self, error_type: str, error_message: str) -> None:
        """Any httpx transport failure is reported as a network error with the URL in its details."""
        if error_type == "connect":
            error: Exception = httpx.ConnectError(error_message)
        elif error_type == "timeout":
            error = httpx.TimeoutException(error_message)
        else:
            error = httpx.RequestError(error_message)

        report = ErrorReporter().report(
            error,
            operation="list games",
            component="game_list",
            url="http://catalog.test/api/games",
        )

        assert isinstance(report, ErrorReport)
        assert report.kind == ErrorKind.NETWORK
        assert report.severity == ErrorSeverity.ERROR
        assert report.hints
        assert report.details is not None
        assert report.details.startswith("URL: http://catalog.test/api/games")
        assert type(error).__name__ in report.details

    @given(
        status=st.integers(min_value=400, max_value=599),
        body=st.text(min_size=1, max_size=100),
    )
    def test_api_errors_keep_backend_message(self, status: int, body: str) -> None:
        """The user sees the backend's own text; the status goes to the details."""
        report = ErrorReporter().report(
            ApiError(body, status_code=status, method="GET", url="http://catalog.test/api/games"),
            operation="list games",
            component="game_list",
        )

        assert report.message == body
        assert report.kind == ErrorKind.API
        assert report.details == f"Status: {status}\nGET http://catalog.test/api/games"

    @given(
        field_name=st.sampled_from(["name", "price", "release_date", "developer", "category_id"]),
        value=st.text(max_size=300),
    )
    def test_validation_error_values_are_truncated(self, field_name: str, value: str) -> None:
        error = ValidationError(f"Invalid {field_name}", field=field_name, value=value)

        assert error.severity == ErrorSeverity.WARNING
        assert error.kind == ErrorKind.VALIDATION
        assert error.details is not None
        assert error.details.startswith(f"Field: {field_name}\nValue: ")
        assert len(error.details.split("\nValue: ", 1)[1]) <= 100


class TestClassify:
    """Examples of mapping standard exceptions onto catalog errors."""

    def test_catalog_errors_pass_through_unchanged(self) -> None:
        original = ConfigurationError("Bad URL", setting="api_base_url", expected="http(s) URL")

        assert classify(original) is original
        assert "Expected: http(s) URL" in original.hints

    def test_undecodable_response(self) -> None:
        try:
            json.loads("<html>")
        except json.JSONDecodeError as e:
            error = classify(e)

        assert isinstance(error, MalformedResponseError)
        assert error.kind == ErrorKind.API
        assert error.message == "The server sent a response that could not be read."
        assert (error.details or "").startswith("JSONDecodeError")

    @pytest.mark.parametrize("raised", [KeyError("nome"), TypeError("bad"), ValueError("bad date")])
    def test_malformed_payload(self, raised: Exception) -> None:
        error = classify(raised)

        assert isinstance(error, MalformedResponseError)
        assert error.message == "The server sent data in an unexpected format."

    def test_unknown_exception_is_unexpected(self) -> None:
        error = classify(RuntimeError("boom"))

        assert type(error) is CatalogError
        assert error.kind == ErrorKind.UNEXPECTED
        assert error.details == "RuntimeError: boom"

    def test_url_only_applies_to_new_network_errors(self) -> None:
        error = classify(httpx.ConnectError("refused"), url="http://x/api/games")

        assert isinstance(error, NetworkError)
        assert error.url == "http://x/api/games"


class TestErrorTypes:
    """Tests for the concrete error classes."""

    def test_not_found_suggests_refresh(self) -> None:
        error = ApiError("not found", status_code=404)

        assert str(error) == "not found"
        assert "Refresh the list and try again" in error.hints

    def test_server_error_suggests_waiting(self) -> None:
        assert "Try again later" in ApiError("Internal error", status_code=503).hints

    def test_client_error_suggests_reviewing_input(self) -> None:
        error = ApiError("Nome é obrigatório", status_code=400)

        assert error.hints == ("Review the submitted data and try again",)

    def test_network_error_without_details(self) -> None:
        error = NetworkError("Offline")

        assert error.details is None
        assert error.kind == ErrorKind.NETWORK

    def test_category_in_use_is_a_warning(self) -> None:
        error = CategoryInUseError("Adventure", 2)

        assert isinstance(error, ValidationError)
        assert error.severity == ErrorSeverity.WARNING
        assert error.message == 'Cannot delete category "Adventure": it has 2 associated game(s).'
        assert error.report().hints == ("Move or delete the category's games first",)


class TestErrorReporter:
    """Tests for reporting and message formatting."""

    def test_unknown_errors_get_a_generic_message(self) -> None:
        reporter = ErrorReporter()
        first = reporter.report(RuntimeError("first"), "op", "component")
        second = reporter.report(NetworkError("second"), "op", "component", id=4)

        assert first.message == "An unexpected error occurred. Please try again."
        assert first.details == "RuntimeError: first"
        assert second.message == "second"
        assert second.kind == ErrorKind.NETWORK

    def test_render_lists_at_most_three_hints(self) -> None:
        report = ErrorReport(
            message="Something failed",
            kind=ErrorKind.API,
            severity=ErrorSeverity.ERROR,
            hints=("one", "two", "three", "four"),
        )

        rendered = report.render()

        assert rendered.splitlines()[0] == "Something failed"
        assert "• three" in rendered
        assert "four" not in rendered
        assert report.render(with_hints=False) == "Something failed"

    def test_global_reporter_is_shared(self) -> None:
        assert get_error_reporter() is get_error_reporter()
