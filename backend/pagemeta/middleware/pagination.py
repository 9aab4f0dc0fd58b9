"""
PageMeta — Pagination Middleware
================================

What:  Runs the pagination pipeline around every request.
Why:   The handler only computes its page of data (and optionally the total
       count); paging bookkeeping and the response envelope live here.
How:   Two hooks inside one `dispatch`:

    1. Before the handler (extractor):
       - parse `page`/`limit`, store the context on `request.state.pagination`
       - rewrite `scope["query_string"]` without `page`/`limit`
       - malformed value with on_invalid="reject" → 400, handler never runs
    2. After the handler (filter + composer):
       - only successful (< 400), non-empty JSON responses are candidates
       - decode the body, compose the envelope, re-encode as JSONResponse
         with the original status and headers

Per-request state:
    The context is stored on the request scope (`scope["state"]`), which is
    shared with the handler's own `Request` object and dropped with it.
    The middleware instance holds only the immutable options, so interleaved
    requests on the event loop cannot see each other's values.
"""

import json
import logging
from typing import Any, Optional
from urllib.parse import urlencode

from pydantic import ValidationError as PydanticValidationError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from pagemeta.config import PaginationOptions
from pagemeta.exceptions import ConfigurationError, InvalidParameterError
from pagemeta.pipeline.composer import compose_envelope
from pagemeta.pipeline.extractor import extract_pagination
from pagemeta.pipeline.filter import should_enrich
from pagemeta.schemas.pagination import ErrorResponse, PaginationContext

logger = logging.getLogger(__name__)

FORMAT_PARAM = "format"


def reject_constant(name: str) -> Any:
    """
    `parse_constant` hook for `json.loads`.

    What: Refuses NaN, Infinity and -Infinity while decoding.
    Why:  `JSONResponse` renders with `allow_nan=False`, so a body carrying them
          could be decoded but never re-encoded; refusing at decode time sends
          it down the unmodified pass-through path instead.
    """
    raise ValueError(f"Non-finite JSON constant {name}")


def is_json_media_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def route_path_of(request: Request) -> str:
    """
    Route template matched for this request (e.g. "/items/{item_id}").

    FastAPI records the matched route in `scope["route"]` during routing;
    plain Starlette routes don't, so the raw URL path is the fallback.
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class PaginationMiddleware(BaseHTTPMiddleware):
    """
    Reads pagination parameters and injects the metadata envelope.

    Args:
        app:     The wrapped ASGI application.
        options: Validated registration options. Usually built by
                 `register_pagination()`; defaults apply when omitted.
    """

    def __init__(self, app: ASGIApp, options: Optional[PaginationOptions] = None):
        super().__init__(app)
        self.options = options or PaginationOptions()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # ── Before the handler ────────────────────────────────────────────
        query = request.query_params.multi_items()
        response_format = request.query_params.get(FORMAT_PARAM)

        try:
            context, remaining = extract_pagination(query, self.options)
        except InvalidParameterError as exc:
            logger.warning(
                "Rejected %s %s: %s", request.method, request.url.path, exc.message
            )
            return JSONResponse(
                status_code=400,
                content=ErrorResponse(
                    error="invalid_parameter",
                    message=exc.message,
                    details=exc.context,
                ).model_dump(),
            )

        # What: Context on the request's own scope (scope["state"])
        # Why:  The handler's Request shares this dict; nothing outlives the request
        request.state.pagination = context

        # What: Re-encode the query without page/limit
        # How:  Starlette builds each Request's query_params from scope["query_string"],
        #       so the handler sees only the remaining pairs. Left untouched when
        #       nothing was stripped, to keep the client's exact encoding.
        if len(remaining) != len(query):
            request.scope["query_string"] = urlencode(remaining).encode("latin-1")

        response = await call_next(request)

        # ── After the handler ─────────────────────────────────────────────
        # Error responses and non-JSON bodies are never candidates
        if response.status_code >= 400:
            return response
        if not is_json_media_type(response.headers.get("content-type", "")):
            return response

        # What: Drain the streamed body so it can be decoded
        # Why:  call_next hands back a streaming response; once consumed, every
        #       return path below must rebuild the response from `body`
        body = b"".join([chunk async for chunk in response.body_iterator])
        if not body:
            return self._replay(response, body)

        try:
            payload = json.loads(body, parse_constant=reject_constant)
        except ValueError:
            logger.warning(
                "Response for %s is not valid JSON; leaving it unmodified",
                request.url.path,
            )
            return self._replay(response, body)

        # Handlers may replace the context object instead of mutating it
        current: PaginationContext = getattr(request.state, "pagination", context)
        route_path = route_path_of(request)
        approved = should_enrich(route_path, response_format, self.options)
        logger.debug(
            "Pagination for %s (format=%s): %s page=%d limit=%d found=%s",
            route_path,
            response_format,
            "enrich" if approved else "strip",
            current.page,
            current.limit,
            current.count,
        )

        envelope = compose_envelope(payload, current, approved, self.options)
        try:
            return self._render(response, envelope)
        except ValueError:
            # Overflowing literals such as 1e999 decode to inf and can't be rendered
            logger.warning(
                "Response for %s cannot be re-encoded as JSON; leaving it unmodified",
                request.url.path,
            )
            return self._replay(response, body)

    @staticmethod
    def _replay(response: Response, body: bytes) -> Response:
        """Rebuild a response whose body iterator was already consumed."""
        replayed = Response(content=body, status_code=response.status_code)
        replayed.raw_headers = list(response.raw_headers)
        return replayed

    @staticmethod
    def _render(response: Response, content: Any) -> Response:
        # What: Original headers (content-type, custom headers, cookies) are kept
        # Why content-length is recomputed: the envelope changes the body size, and
        #     a stale length truncates or stalls the client's read
        rendered = JSONResponse(content=content, status_code=response.status_code)
        rendered.raw_headers = [
            (key, value)
            for key, value in response.raw_headers
            if key.lower() != b"content-length"
        ]
        rendered.raw_headers.append(
            (b"content-length", str(len(rendered.body)).encode("latin-1"))
        )
        return rendered


def register_pagination(app: Any, **options: Any) -> PaginationOptions:
    """
    Install the pagination middleware on a FastAPI/Starlette app.

    Accepts the option keys `limit`, `name`, `results`, `routes`,
    `excludeFormats`, `onInvalid` (or their attribute names).

    Returns:
        The validated options, also stored on `app.state.pagination_options`.

    Raises:
        ConfigurationError: invalid or unknown options.

    Example:
        app = FastAPI()
        register_pagination(app, limit=25, routes=["/items"])
    """
    try:
        validated = PaginationOptions.model_validate(options)
    except PydanticValidationError as exc:
        raise ConfigurationError(
            message=f"Invalid pagination options: {exc.error_count()} error(s)",
            context={"errors": exc.errors(include_url=False)},
        ) from exc

    app.add_middleware(PaginationMiddleware, options=validated)
    app.state.pagination_options = validated
    logger.info(
        "Pagination middleware registered (limit=%d, name=%r, routes=%s)",
        validated.default_limit,
        validated.meta_key,
        list(validated.routes),
    )
    return validated
