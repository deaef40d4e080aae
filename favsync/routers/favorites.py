"""Routes for a user's cloud favorites."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from favsync.auth import get_current_user_id
from favsync.database import get_db
from favsync.models import UserFavorite

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/favorites", tags=["favorites"])


class FavoriteCreate(BaseModel):
    """Body of POST /favorites. Fields are checked by the route for a 400."""

    book_slug: Optional[str] = None
    chapter_id: Optional[str] = None
    paragraph_index: Optional[int] = None
    paragraph_text: Optional[str] = None


@router.get("")
async def list_favorites(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """List the user's favorites, newest first."""
    result = await db.execute(
        select(UserFavorite)
        .where(UserFavorite.user_id == user_id)
        .order_by(UserFavorite.created_at.desc(), UserFavorite.id.desc())
    )
    favorites = [favorite.to_dict() for favorite in result.scalars().all()]
    return JSONResponse(content={"favorites": favorites})


@router.post("")
async def add_favorite(
    body: FavoriteCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Add a favorite. An existing natural key is reported, not duplicated."""
    if not body.book_slug or not body.chapter_id or body.paragraph_index is None or not body.paragraph_text:
        return JSONResponse(content={"error": "Incomplete data"}, status_code=400)

    natural_key = (
        UserFavorite.user_id == user_id,
        UserFavorite.book_slug == body.book_slug,
        UserFavorite.chapter_id == body.chapter_id,
        UserFavorite.paragraph_index == body.paragraph_index,
    )
    existing = await db.execute(select(UserFavorite.id).where(*natural_key))
    if existing.scalar_one_or_none() is not None:
        return JSONResponse(content={"message": "Favorite already exists"}, status_code=200)

    favorite = UserFavorite(
        user_id=user_id,
        book_slug=body.book_slug,
        chapter_id=body.chapter_id,
        paragraph_index=body.paragraph_index,
        paragraph_text=body.paragraph_text,
    )
    db.add(favorite)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent insert of the same key
        await db.rollback()
        return JSONResponse(content={"message": "Favorite already exists"}, status_code=200)
    await db.refresh(favorite)

    return JSONResponse(
        content={"message": "Favorite added", "favorite": favorite.to_dict()},
        status_code=201,
    )


@router.delete("/{favorite_id}")
async def remove_favorite(
    favorite_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    result = await db.execute(
        select(UserFavorite).where(
            UserFavorite.id == favorite_id, UserFavorite.user_id == user_id
        )
    )
    favorite = result.scalar_one_or_none()
    if favorite is None:
        return JSONResponse(content={"error": "Favorite not found"}, status_code=404)
    await db.delete(favorite)
    await db.commit()
    return JSONResponse(content={"message": "Favorite removed"})


@router.delete("")
async def clear_favorites(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    await db.execute(delete(UserFavorite).where(UserFavorite.user_id == user_id))
    await db.commit()
    logger.info(f"Cleared all favorites of user {user_id}")
    return JSONResponse(content={"message": "All favorites removed"})
