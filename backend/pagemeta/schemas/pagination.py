"""
PageMeta — Pydantic Schemas
===========================

What:  The per-request pagination context and the error response body.
Why:   The context is the only state shared between the two middleware
       stages; making it a validated model keeps handler-supplied counts
       honest (`count` must be an integer).
Who:   Created by the extractor, stored on `request.state.pagination`,
       read by the composer and by handlers through `get_pagination`.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class PaginationContext(BaseModel):
    """
    Pagination values of one request.

    A fresh instance is created for every request and lives on that
    request's scope. It is never cached on the middleware or the module.

    Fields:
        page:  Requested page (default 1)
        limit: Requested page size (default: the configured default limit)
        count: Total matching items, set by the handler; None means unknown
    """

    model_config = ConfigDict(validate_assignment=True)

    page: int = Field(default=1, description="Requested page number")
    limit: int = Field(description="Requested page size")
    count: Optional[int] = Field(
        default=None,
        description="Total matching items reported by the handler",
    )

    def to_meta(self) -> Dict[str, Any]:
        """
        Metadata object for the response envelope.

        `found` is only present when the handler set `count`; it is never
        emitted as null or zero to mean "unknown".
        """
        meta: Dict[str, Any] = {"page": self.page, "limit": self.limit}
        if self.count is not None:
            meta["found"] = self.count
        return meta


class ErrorResponse(BaseModel):
    """
    Standardized error response format.

    Example:
        {
            "error": "invalid_parameter",
            "message": "Query parameter 'limit' must be an integer, got 'ten'",
            "details": {"field": "limit", "value": "ten"}
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
