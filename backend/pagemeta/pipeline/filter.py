"""
PageMeta — Route/Format Filter
==============================

What:  Decides whether a response qualifies for the metadata envelope.
How:   Exact match of the route template against the configured routes
       (or the "*" wildcard), then the request's `format` value against
       the excluded formats.

Truth table:
    routes         route      format   → verdict
    ["*"]          any        None     → True
    ["/with"]      "/with"    None     → True
    ["/with"]      "/other"   None     → False
    ["/a", "*"]    "/b"       None     → False  ("*" only counts first)
    []             any        any      → False
    ["*"]          any        "csv"    → False  (excludeFormats=["csv"])
"""

from typing import Optional

from pagemeta.config import PaginationOptions


def route_allowed(route_path: str, options: PaginationOptions) -> bool:
    return options.all_routes or route_path in options.routes


def format_allowed(response_format: Optional[str], options: PaginationOptions) -> bool:
    if response_format is None:
        return True
    return response_format not in options.exclude_formats


def should_enrich(
    route_path: str, response_format: Optional[str], options: PaginationOptions
) -> bool:
    """Filter verdict for one request/response pair."""
    return route_allowed(route_path, options) and format_allowed(response_format, options)
