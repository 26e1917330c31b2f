"""Service domain schemas - Pydantic models for bookable services"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

MAX_SERVICE_DURATION = 24 * 60


class ServiceCreate(BaseModel):
    """Schema for creating a service under a business"""

    businessId: str
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    duration: int = Field(gt=0, le=MAX_SERVICE_DURATION)
    categoryId: Optional[str] = None


class ServiceUpdate(BaseModel):
    """Schema for updating a service (business cannot change)"""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    duration: Optional[int] = Field(default=None, gt=0, le=MAX_SERVICE_DURATION)
    categoryId: Optional[str] = None
    isActive: Optional[bool] = None


class ServiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    business_id: str
    category_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    price: Decimal
    duration: int
    is_active: bool
    created_at: Optional[datetime] = None

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)
