"""
PageMeta — Custom Exception Hierarchy
=====================================

What:  Application-specific exceptions for the pagination pipeline.
Why:   Each failure maps to one HTTP status and one error code, so the
       middleware and the host's exception handlers answer consistently.
How:   Each exception carries a message and an optional context dict.
       The middleware turns `InvalidParameterError` into a 400 response;
       `main.register_exception_handlers` covers errors raised by handlers.

Exception Hierarchy:
    PageMetaError (base)                  → 500 Internal Server Error
    ├── ValidationError                   → 400 Bad Request
    │   └── InvalidParameterError         → 400 Bad Request (page/limit)
    └── ConfigurationError                → raised at registration time
        └── PaginationNotConfiguredError  → 500 (middleware not installed)
"""

from typing import Any, Dict, Optional


class PageMetaError(Exception):
    """
    Base exception for all PageMeta errors.

    Attributes:
        message:  Error description (safe to return in an API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PageMetaError):
    """
    Raised when client input fails validation.

    HTTP:    400 Bad Request

    Example response:
        {
            "error": "invalid_parameter",
            "message": "Query parameter 'page' must be an integer, got 'abc'",
            "details": {"field": "page", "value": "abc"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidParameterError(ValidationError):
    """
    Raised when `page` or `limit` is not a base-10 integer.

    When:    `?page=abc`, `?limit=10.5`, `?limit=` with `on_invalid="reject"`.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        parameter: str,
        value: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["value"] = value
        super().__init__(
            message=f"Query parameter '{parameter}' must be an integer, got '{value}'",
            field=parameter,
            context=ctx,
        )
        self.parameter = parameter
        self.value = value


class ConfigurationError(PageMetaError):
    """
    Raised when registration options are invalid.

    When:    `limit=0`, `name == results`, unknown option keys.
    """

    def __init__(
        self,
        message: str = "Invalid pagination configuration",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PaginationNotConfiguredError(ConfigurationError):
    """
    Raised when a handler asks for the pagination context but the
    middleware never ran for this request.

    HTTP:    500 Internal Server Error (a deployment mistake, not a client one)
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=(
                "Pagination context is missing. "
                "Register the middleware with register_pagination(app)."
            ),
            context=context,
        )
