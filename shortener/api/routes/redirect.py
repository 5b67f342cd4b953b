"""URL redirection endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import RedirectResponse

from shortener.api.dependencies import get_shortener_service
from shortener.db.session import get_db
from shortener.services.exceptions import URLNotFoundError
from shortener.services.shortener import ShortenedURLService

# Create router with tags
router = APIRouter(tags=["redirect"])


@router.get(
    "/{short_code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_303_SEE_OTHER
)
async def redirect_to_original_url(
    short_code: str,
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service)
):
    """Redirect to the URL mapped to the short code."""
    try:
        target = await shortener_service.resolve(db, short_code)
    except URLNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    logger.bind(short_code=short_code).debug(f"Redirecting {short_code}")
    return RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)
