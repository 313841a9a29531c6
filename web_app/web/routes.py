"""Web routes implementation."""

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from shortlink.errors import StoreError
from shortlink.shortcode import ShortCodeGenerator
from shortlink.common.logging_config import get_logger
from ..api.schemas import STORE_FAILURE

router = APIRouter()

logger = get_logger("shortlink.web")


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request):
    """Serve the configured home page, or 404 when there is none."""
    index_html = request.app.state.index_html

    if index_html is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    return HTMLResponse(content=index_html)


@router.get("/{code}", include_in_schema=False)
async def redirect_to_url(request: Request, code: str):
    """Permanently redirect to the URL stored for a code."""
    if not ShortCodeGenerator.is_valid_format(code):
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    service = request.app.state.service

    try:
        url = await service.resolve(code)
    except StoreError as e:
        logger.error(f"db error: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=STORE_FAILURE.model_dump(),
        )

    if url is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    return RedirectResponse(url=url, status_code=status.HTTP_308_PERMANENT_REDIRECT)
