"""Favorite router - FastAPI endpoints for saved businesses"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import FavoriteCreate, FavoriteResponse, FavoriteStatus
from .service import FavoriteService

router = APIRouter(prefix="/favorites", tags=["Favorites"])


def get_favorite_service(db: Session = Depends(get_db)) -> FavoriteService:
    """Dependency injection for FavoriteService"""
    return FavoriteService(db)


@router.get("", response_model=list[FavoriteResponse])
async def list_favorites(
    current_user: User = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    """The caller's saved businesses, most recently saved first"""
    return service.list_favorites(current_user)


@router.post("", response_model=FavoriteResponse, status_code=201)
async def add_favorite(
    data: FavoriteCreate,
    current_user: User = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    return service.add_favorite(data.businessId, current_user)


@router.get("/{business_id}", response_model=FavoriteStatus)
async def check_favorite(
    business_id: str,
    current_user: User = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    return FavoriteStatus(business_id=business_id, is_favorite=service.is_favorite(business_id, current_user))


@router.delete("/{business_id}")
async def remove_favorite(
    business_id: str,
    current_user: User = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    service.remove_favorite(business_id, current_user)
    return {"message": "Removed from favorites"}
