from fastapi import APIRouter, Depends, HTTPException, Path, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.api import schemas
from shortener.api.dependencies import get_base_url, get_shortener_service
from shortener.db.session import get_db
from shortener.services.exceptions import (
    AuthError,
    StoreError,
    URLNotFoundError,
    URLValidationError,
)
from shortener.services.shortener import ShortenedURLService

router = APIRouter(tags=["shortener"])


@router.get("/", response_class=PlainTextResponse)
async def index():
    return "Hello, world! :D"


@router.post(
    "/shorten",
    response_model=schemas.ShortenResponse,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Empty URL"},
        500: {"model": schemas.ErrorResponse, "description": "Database error"}
    }
)
async def shorten_url(
    payload: schemas.ShortenRequest,
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
    base_url: str = Depends(get_base_url)
):
    try:
        short_code = await shortener_service.shorten(db=db, raw_url=payload.url)
    except URLValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return schemas.ShortenResponse(
        short_code=short_code,
        short_url=f"{base_url}/{short_code}"
    )


@router.delete(
    "/{short_code}",
    response_model=schemas.MessageResponse,
    responses={
        401: {"model": schemas.ErrorResponse, "description": "Wrong credentials"},
        404: {"model": schemas.ErrorResponse, "description": "Short code not found"},
        500: {"model": schemas.ErrorResponse, "description": "Database error"}
    }
)
async def delete_url(
    credentials: schemas.DeleteRequest,
    short_code: str = Path(..., description="The short code to delete"),
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service)
):
    try:
        await shortener_service.delete(
            db=db,
            short_code=short_code,
            username=credentials.username,
            password=credentials.password
        )
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except URLNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return schemas.MessageResponse(detail="Short code deleted.")
