"""Favorite service - Business logic for a customer's saved businesses"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Business, Favorite, User
from .repository import FavoriteRepository

logger = logging.getLogger(__name__)


class FavoriteService:
    """Service layer for favorite business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = FavoriteRepository()

    def list_favorites(self, user: User) -> list[Favorite]:
        return self.repo.list_for_user(self.db, user.id)

    def add_favorite(self, business_id: str, user: User) -> Favorite:
        """Save a listed business; each business can be saved once"""
        business = self.db.query(Business).filter(Business.id == business_id).first()
        if not business or business.status != "approved" or not business.is_active:
            raise HTTPException(status_code=404, detail="Business not found")

        if self.repo.get(self.db, user.id, business.id):
            raise HTTPException(status_code=409, detail="Business is already in your favorites")

        favorite = self.repo.create(self.db, user.id, business.id)
        logger.info(f"⭐ User {user.id} saved business {business.id}")
        return favorite

    def remove_favorite(self, business_id: str, user: User) -> None:
        favorite = self.repo.get(self.db, user.id, business_id)
        if not favorite:
            raise HTTPException(status_code=404, detail="Business is not in your favorites")
        self.repo.delete(self.db, favorite)
        logger.info(f"🗑️ User {user.id} removed business {business_id} from favorites")

    def is_favorite(self, business_id: str, user: User) -> bool:
        return self.repo.get(self.db, user.id, business_id) is not None
