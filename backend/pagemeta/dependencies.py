"""FastAPI dependency exposing the request's pagination context to handlers."""

from fastapi import Request

from pagemeta.exceptions import PaginationNotConfiguredError
from pagemeta.schemas.pagination import PaginationContext


def get_pagination(request: Request) -> PaginationContext:
    """
    Pagination context stored by `PaginationMiddleware` for this request.

    Handlers read `page`/`limit` from it and may report the total number of
    matching items, which the response metadata exposes as `found`:

        @app.get("/items")
        async def list_items(pagination: PaginationContext = Depends(get_pagination)):
            items, total = await repo.page(pagination.page, pagination.limit)
            pagination.count = total
            return items
    """
    context = getattr(request.state, "pagination", None)
    if context is None:
        raise PaginationNotConfiguredError(context={"path": request.url.path})
    return context
