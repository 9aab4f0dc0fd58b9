"""
PageMeta — Parameter Extractor
==============================

What:  Reads `page` and `limit` from the query string and removes them.
Why:   Handlers treat their query parameters as filter criteria; pagination
       parameters must not leak into those filters.
How:   Works on `(key, value)` pairs so repeated keys and parameter order
       survive the round trip through the rewritten query string.

Parsing rules:
    - Accepted: optional sign followed by ASCII digits, surrounding
      whitespace ignored ("3", " 10 ", "+2", "-1").
    - Rejected: "", "abc", "10.5", "1e3", "0x10", "1_000", non-ASCII digits.
    - Repeated keys: the last value wins (matches Starlette's
      `QueryParams.__getitem__`); every occurrence is stripped.
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple

from pagemeta.config import PaginationOptions
from pagemeta.exceptions import InvalidParameterError
from pagemeta.schemas.pagination import PaginationContext

logger = logging.getLogger(__name__)

PAGE_PARAM = "page"
LIMIT_PARAM = "limit"
DEFAULT_PAGE = 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

QueryItems = Sequence[Tuple[str, str]]


def parse_int(value: str) -> Optional[int]:
    """Parse a base-10 integer; None when `value` is not one."""
    stripped = value.strip()
    if not _INTEGER_RE.fullmatch(stripped):
        return None
    return int(stripped)


def _last_value(query: QueryItems, key: str) -> Optional[str]:
    found = None
    for k, v in query:
        if k == key:
            found = v
    return found


def _resolve(
    query: QueryItems, key: str, default: int, options: PaginationOptions
) -> int:
    raw = _last_value(query, key)
    if raw is None:
        return default

    parsed = parse_int(raw)
    if parsed is not None:
        return parsed

    if options.on_invalid == "reject":
        raise InvalidParameterError(parameter=key, value=raw)

    logger.warning(
        "Ignoring malformed query parameter %s=%r, using default %d",
        key,
        raw,
        default,
    )
    return default


def extract_pagination(
    query: QueryItems, options: PaginationOptions
) -> Tuple[PaginationContext, List[Tuple[str, str]]]:
    """
    Resolve pagination values and the query the handler should see.

    Args:
        query:   Query string as `(key, value)` pairs, in request order.
        options: Registration options (default limit, invalid-value policy).

    Returns:
        (context, remaining_query) where `remaining_query` is `query`
        without any `page`/`limit` pairs.

    Raises:
        InvalidParameterError: malformed value and `on_invalid == "reject"`.
    """
    context = PaginationContext(
        page=_resolve(query, PAGE_PARAM, DEFAULT_PAGE, options),
        limit=_resolve(query, LIMIT_PARAM, options.default_limit, options),
    )
    remaining = [(k, v) for k, v in query if k not in (PAGE_PARAM, LIMIT_PARAM)]
    return context, remaining
