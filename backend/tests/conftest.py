"""
PageMeta — Test Configuration (conftest.py)
===========================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Most integration tests need the same host application with a handful
       of routes; only the registration options differ.
How:   `build_app` creates a fresh FastAPI host per test with the given
       options; `client_for` wraps an app in an HTTPX AsyncClient talking
       to it through ASGITransport (no server needed).

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── options:     Default PaginationOptions
    ├── build_app:   Factory → FastAPI host with the standard test routes
    ├── client_for:  Factory → AsyncClient for a given app
    └── client:      AsyncClient for a host with default options
"""

import os

# Keep test output quiet and independent of the developer's environment
os.environ["PAGEMETA_LOG_LEVEL"] = "WARNING"

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable

import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import PlainTextResponse
from httpx import ASGITransport, AsyncClient

from pagemeta.config import PaginationOptions, Settings
from pagemeta.dependencies import get_pagination
from pagemeta.main import create_app
from pagemeta.schemas.pagination import PaginationContext

ITEMS = [{"id": i, "name": f"item-{i}"} for i in range(1, 8)]


def add_test_routes(app: FastAPI) -> None:
    """Routes mirroring the handlers a host application would have."""

    @app.get("/")
    async def root():
        return "ok"

    @app.get("/new")
    async def with_existing_meta():
        return {
            "meta": {"provided_by": "company", "domain": "example.com"},
            "results": "ok",
        }

    @app.get("/with")
    async def with_route():
        return {
            "meta": {"provided_by": "company", "domain": "example.com"},
            "results": "ok",
        }

    @app.get("/without")
    async def without_route():
        return {"this": "that"}

    @app.get("/with_meta")
    async def with_meta_route():
        return {"meta": {"important": "yes"}, "results": {"this": "that"}}

    @app.get("/stale_meta")
    async def stale_meta_route():
        """Metadata left over from an upstream paginated source."""
        return {
            "meta": {"important": "yes", "page": 9, "limit": 9, "found": 1},
            "results": {"this": "that"},
        }

    @app.get("/nan")
    async def non_finite():
        return Response(content=b'{"x": NaN}', media_type="application/json")

    @app.get("/overflow")
    async def overflow():
        return Response(content=b'{"x": 1e999}', media_type="application/json")

    @app.get("/broken")
    async def broken_json():
        return Response(content=b'{"x": ', media_type="application/json")

    @app.get("/list")
    async def plain_list():
        return [1, 2, 3]

    @app.get("/query")
    async def echo_query(request: Request):
        """Query parameters and pagination values as seen by the handler."""
        context = request.state.pagination
        return {
            "query": dict(request.query_params),
            "page": context.page,
            "limit": context.limit,
        }

    @app.get("/items")
    async def list_items(pagination: PaginationContext = Depends(get_pagination)):
        start = (pagination.page - 1) * pagination.limit
        pagination.count = len(ITEMS)
        return ITEMS[start:start + pagination.limit]

    @app.get("/items/{item_id}")
    async def get_item(item_id: int):
        return ITEMS[item_id - 1]

    @app.get("/slow")
    async def slow(request: Request, delay: float = 0.0):
        # Yield to the event loop so concurrent requests interleave
        await asyncio.sleep(delay)
        context = request.state.pagination
        return {"page": context.page, "limit": context.limit}

    @app.get("/headers")
    async def with_headers(response: Response):
        response.headers["X-Total-Count"] = "42"
        return {"ok": True}

    @app.get("/text")
    async def text():
        return PlainTextResponse("ok")

    @app.get("/empty", status_code=204)
    async def empty():
        return Response(status_code=204)

    @app.get("/missing")
    async def missing():
        raise HTTPException(status_code=404, detail="Not here")


@pytest.fixture
def options():
    """Default registration options."""
    return PaginationOptions()


@pytest.fixture
def build_app() -> Callable[..., FastAPI]:
    """
    Factory for a host app with the standard test routes.

    Usage:
        app = build_app(limit=1000, routes=["/with"])
    """

    def _build(**options: Any) -> FastAPI:
        app = create_app(settings=Settings(), **options)
        add_test_routes(app)
        return app

    return _build


@pytest.fixture
def client_for():
    """
    Factory for an HTTPX AsyncClient bound to an app.

    Usage:
        async with client_for(app) as client:
            response = await client.get("/")
    """

    @asynccontextmanager
    async def _client(app: FastAPI) -> AsyncIterator[AsyncClient]:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    return _client


@pytest_asyncio.fixture
async def client(build_app, client_for):
    """AsyncClient for a host registered with default options."""
    async with client_for(build_app()) as test_client:
        yield test_client
