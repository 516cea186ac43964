from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from shorturl_app.api.errors import INVALID_URL, NOT_FOUND, SERVER_ERROR
from shorturl_app.dependencies import get_url_service
from shorturl_app.schemas.url import ErrorResponse, ShortURLResponse
from shorturl_app.services.url_service import URLService

router = APIRouter(prefix="/api/shorturl", tags=["shorturl"])


async def read_submitted_url(request: Request):
    """
    Pull the submitted URL out of a JSON or form body.

    Accepts the ``url`` field, falling back to ``original_url``. Returns None
    when the body is malformed or carries neither field.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            return None
        if not isinstance(payload, dict):
            return None
    else:
        try:
            payload = await request.form()
        except (HTTPException, MultiPartException):
            # Starlette rejects unparseable multipart/urlencoded bodies with a 400
            return None

    return payload.get("url") or payload.get("original_url")


@router.post(
    "",
    response_model=ShortURLResponse,
    responses={
        200: {"description": f"Short URL, or {INVALID_URL}", "model": ShortURLResponse},
        500: {"description": SERVER_ERROR, "model": ErrorResponse},
    },
)
async def create_short_url(
    request: Request,
    url_service: URLService = Depends(get_url_service)
):
    """Shorten a URL (get-or-create: the same URL always gets the same id)"""
    raw_url = await read_submitted_url(request)
    mapping = await url_service.shorten(raw_url)
    return ShortURLResponse.from_mapping(mapping)


@router.get(
    "/{short}",
    response_class=RedirectResponse,
    responses={
        200: {"description": NOT_FOUND, "model": ErrorResponse},
        500: {"description": SERVER_ERROR, "model": ErrorResponse},
    },
)
async def redirect_to_original_url(
    short: str,
    url_service: URLService = Depends(get_url_service)
):
    """Redirect to the original URL for a short identifier"""
    original_url = await url_service.resolve(short)
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
