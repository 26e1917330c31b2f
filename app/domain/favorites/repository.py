"""Favorite repository - Database operations for saved businesses"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Business, Favorite


class FavoriteRepository:
    """Repository for favorite database operations"""

    @staticmethod
    def list_for_user(db: Session, user_id: str) -> list[Favorite]:
        return (
            db.query(Favorite)
            .join(Business, Favorite.business_id == Business.id)
            .options(joinedload(Favorite.business).selectinload(Business.categories))
            .filter(
                Favorite.user_id == user_id,
                Business.status == "approved",
                Business.is_active.is_(True),
            )
            .order_by(Favorite.created_at.desc(), Favorite.id)
            .all()
        )

    @staticmethod
    def get(db: Session, user_id: str, business_id: str) -> Optional[Favorite]:
        return (
            db.query(Favorite)
            .filter(Favorite.user_id == user_id, Favorite.business_id == business_id)
            .first()
        )

    @staticmethod
    def create(db: Session, user_id: str, business_id: str) -> Favorite:
        favorite = Favorite(user_id=user_id, business_id=business_id)
        db.add(favorite)
        db.commit()
        db.refresh(favorite)
        return favorite

    @staticmethod
    def delete(db: Session, favorite: Favorite) -> None:
        db.delete(favorite)
        db.commit()
