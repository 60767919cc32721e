"""Service layer: backend gateway, validation, list state and infrastructure."""

from .api_client import CatalogApiClient, GamesApi, ResourceApi
from .config import ConfigurationService, ValidationResult
from .errors import (
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
    report_error,
)
from .sync import (
    CatalogSummary,
    CategorySummary,
    ResourceList,
    catalog_summary,
    category_summary,
    check_category_deletable,
    filter_games,
)
from .validation import (
    FormValidationResult,
    clear_field_error,
    validate_category_form,
    validate_game_form,
)

__all__ = [
    "ApiError",
    "CatalogApiClient",
    "CatalogError",
    "CatalogSummary",
    "CategoryInUseError",
    "CategorySummary",
    "ConfigurationError",
    "ConfigurationService",
    "ErrorKind",
    "ErrorReport",
    "ErrorReporter",
    "ErrorSeverity",
    "FormValidationResult",
    "GamesApi",
    "MalformedResponseError",
    "NetworkError",
    "ResourceApi",
    "ResourceList",
    "ValidationError",
    "ValidationResult",
    "catalog_summary",
    "category_summary",
    "check_category_deletable",
    "classify",
    "clear_field_error",
    "filter_games",
    "get_error_reporter",
    "report_error",
    "validate_category_form",
    "validate_game_form",
]
