"""
PageMeta — FastAPI Host Application Factory
===========================================

What:  Builds a FastAPI application with the pagination middleware, logging
       and error handlers wired the way the package expects.
Why:   Hosts that don't need their own setup get a working stack in one call;
       the test suite uses it to exercise the middleware end to end.
How:   Factory pattern: `create_app(**options)` merges `Settings` defaults
       with explicit options and returns a configured FastAPI instance.
       Routes are added by the caller.

Lifecycle:
    Startup:
    1. Initialize logging
    2. Log the active pagination options
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pagemeta import __version__
from pagemeta.config import Settings, settings as default_settings
from pagemeta.exceptions import PageMetaError, ValidationError
from pagemeta.middleware.pagination import register_pagination
from pagemeta.schemas.pagination import ErrorResponse

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    options = app.state.pagination_options
    logger.info(
        "PageMeta host ready: limit=%d name=%r results=%r routes=%s exclude=%s on_invalid=%s",
        options.default_limit,
        options.meta_key,
        options.results_key,
        list(options.routes),
        sorted(options.exclude_formats),
        options.on_invalid,
    )
    yield
    logger.info("PageMeta host shutting down")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map PageMeta exceptions raised inside handlers to JSON error responses.

    Handler hierarchy:
        ValidationError (incl. InvalidParameterError) → 400 Bad Request
        PageMetaError (base, incl. configuration)     → 500 Internal Server Error

    Malformed `page`/`limit` in the query string never reach these handlers:
    the middleware answers 400 itself before routing.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent invalid input."""
        logger.warning("Validation error on %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error="invalid_parameter",
                message=exc.message,
                details=exc.context,
            ).model_dump(),
        )

    @app.exception_handler(PageMetaError)
    async def handle_pagemeta_error(request: Request, exc: PageMetaError):
        """Misconfiguration or internal failure; details logged server-side."""
        logger.error(
            "PageMeta error on %s: %s | Context: %s",
            request.url.path,
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="server_error",
                message=exc.message,
            ).model_dump(),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None, **options: Any) -> FastAPI:
    """
    Create a FastAPI host with the pagination middleware installed.

    Args:
        settings: Process settings; the module-level `settings` by default.
        options:  Registration options overriding the settings defaults,
                  using the option keys (`limit`, `name`, `results`,
                  `routes`, `excludeFormats`, `onInvalid`) or attribute names.

    Raises:
        ConfigurationError: invalid options.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level)

    app = FastAPI(
        title="PageMeta",
        version=__version__,
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    merged = settings.pagination_options()
    aliases = {
        "limit": "default_limit",
        "name": "meta_key",
        "results": "results_key",
        "excludeFormats": "exclude_formats",
        "onInvalid": "on_invalid",
    }
    for key, value in options.items():
        merged[aliases.get(key, key)] = value
    register_pagination(app, **merged)

    return app
