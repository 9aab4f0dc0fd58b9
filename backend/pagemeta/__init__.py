"""
PageMeta — Package Initializer
==============================

What: Pagination metadata middleware for FastAPI/Starlette applications.
Why:  List endpoints all need the same `page`/`limit` bookkeeping and the same
      response envelope; doing it once in middleware keeps handlers thin.
Who:  Imported by host applications (`from pagemeta import register_pagination`).

Architecture Note:
    The package is a two-stage pipeline wrapped around the host's handler:

    ┌─────────────────────────────────────┐
    │     Middleware (host glue)          │  ← Starlette request/response objects
    ├─────────────────────────────────────┤
    │  Pipeline: extractor → filter →     │  ← Pure functions, no HTTP types
    │            composer                 │
    ├─────────────────────────────────────┤
    │  Config & Schemas (Data)            │  ← Pydantic models
    └─────────────────────────────────────┘

    Pipeline modules never import Starlette, so they are tested without a
    running application.
"""

__version__ = "1.0.0"

from pagemeta.config import PaginationOptions
from pagemeta.dependencies import get_pagination
from pagemeta.middleware.pagination import PaginationMiddleware, register_pagination
from pagemeta.schemas.pagination import PaginationContext

__all__ = [
    "PaginationContext",
    "PaginationMiddleware",
    "PaginationOptions",
    "get_pagination",
    "register_pagination",
]
