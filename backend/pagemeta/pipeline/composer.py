"""
PageMeta — Envelope Composer
============================

What:  Shapes the final response body from the handler's body, the
       request's pagination context and the filter verdict.
How:   Branches explicitly on the body's shape:

    Approved:
        {meta_key: {...}, ...}    → metadata merged into the existing mapping
        {meta_key: <non-mapping>} → that value replaced by the metadata
        anything else             → {meta_key: meta, results_key: body}
    Rejected:
        {meta_key: {...}, ...}    → page/limit/found removed from that mapping
        anything else             → unchanged

    The input body is never mutated; a new body is returned. Key order is
    preserved on merge/strip, and the wrapper always lists `meta_key` first.
"""

from collections.abc import Mapping
from typing import Any, Dict

from pagemeta.config import META_FIELDS, PaginationOptions
from pagemeta.schemas.pagination import PaginationContext


def build_meta(context: PaginationContext) -> Dict[str, Any]:
    """`{page, limit, found?}` for the given context."""
    return context.to_meta()


def wrap(body: Any, meta: Dict[str, Any], options: PaginationOptions) -> Dict[str, Any]:
    """New two-key envelope, metadata first."""
    envelope: Dict[str, Any] = {}
    envelope[options.meta_key] = meta
    envelope[options.results_key] = body
    return envelope


def merge(body: Mapping, meta: Dict[str, Any], options: PaginationOptions) -> Dict[str, Any]:
    existing = body[options.meta_key]
    merged = dict(body)
    if isinstance(existing, Mapping):
        merged[options.meta_key] = {**existing, **meta}
    else:
        merged[options.meta_key] = dict(meta)
    return merged


def strip(body: Any, options: PaginationOptions) -> Any:
    """Remove this package's fields from an existing metadata mapping."""
    if not isinstance(body, Mapping):
        return body
    existing = body.get(options.meta_key)
    if not isinstance(existing, Mapping):
        return body

    stripped = dict(body)
    stripped[options.meta_key] = {
        key: value for key, value in existing.items() if key not in META_FIELDS
    }
    return stripped


def compose_envelope(
    body: Any,
    context: PaginationContext,
    approved: bool,
    options: PaginationOptions,
) -> Any:
    """
    Final response body for one request.

    Args:
        body:     Decoded JSON body produced by the handler (any JSON value).
        context:  The request's pagination context; trusted as-is.
        approved: Filter verdict from `should_enrich`.
        options:  Registration options (meta/results keys).
    """
    if not approved:
        return strip(body, options)

    meta = build_meta(context)
    if isinstance(body, Mapping) and options.meta_key in body:
        return merge(body, meta, options)
    return wrap(body, meta, options)
