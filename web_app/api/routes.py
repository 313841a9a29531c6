"""API routes implementation."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from .schemas import PutResponse, STORE_FAILURE
from shortlink.errors import StoreError, ValidationError
from shortlink.common.logging_config import get_logger

router = APIRouter()

logger = get_logger("shortlink.web")


@router.post(
    "/put",
    status_code=status.HTTP_201_CREATED,
    response_model=PutResponse,
    responses={
        400: {"model": PutResponse, "description": "URL rejected"},
        500: {"model": PutResponse, "description": "Store failure"},
    },
    summary="Shorten a URL",
    description=(
        "The request body is the raw URL. Submitting a URL that is already "
        "known returns its existing code."
    ),
)
async def put_url(request: Request):
    """Store a URL and return its short code."""
    service = request.app.state.service
    raw_url = await request.body()

    try:
        code, created = await service.shorten(raw_url)
    except ValidationError as e:
        logger.info(f"Rejected URL: {e}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=PutResponse(ok=False, msg=str(e)).model_dump(),
        )
    except StoreError as e:
        logger.error(f"db error: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=STORE_FAILURE.model_dump(),
        )

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=PutResponse(ok=True, msg=code).model_dump(),
    )
