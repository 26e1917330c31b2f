"""Review domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReviewCreate(BaseModel):
    """Review a business, or one of its services"""

    businessId: Optional[str] = None
    serviceId: Optional[str] = None
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def one_target(self):
        if bool(self.businessId) == bool(self.serviceId):
            raise ValueError("Provide exactly one of businessId or serviceId")
        return self


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=1000)


class ReviewResponse(BaseModel):
    id: str
    business_id: str
    service_id: Optional[str] = None
    user_id: str
    user_name: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None


class ReviewReportCreate(BaseModel):
    reason: str = Field(min_length=1, max_length=500)


class ContentReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    reporter_id: str
    review_id: str
    reason: str
    status: str
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
