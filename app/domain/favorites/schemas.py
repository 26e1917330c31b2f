"""Favorite domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..businesses.schemas import BusinessResponse


class FavoriteCreate(BaseModel):
    businessId: str


class FavoriteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    business_id: str
    created_at: Optional[datetime] = None
    business: BusinessResponse


class FavoriteStatus(BaseModel):
    business_id: str
    is_favorite: bool
