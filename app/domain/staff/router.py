"""Staff router - FastAPI endpoints for business owners' team management"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_business_owner
from ...database import get_db
from ...models import User
from .schemas import StaffCreate, StaffResponse, StaffUpdate
from .service import StaffService

router = APIRouter(prefix="/businesses/{business_id}/staff", tags=["Staff"])


def get_staff_service(db: Session = Depends(get_db)) -> StaffService:
    """Dependency injection for StaffService"""
    return StaffService(db)


@router.get("", response_model=list[StaffResponse])
async def list_staff(
    business_id: str,
    active_only: bool = Query(False),
    current_user: User = Depends(require_business_owner),
    service: StaffService = Depends(get_staff_service),
):
    """The business's staff, ordered by name"""
    return service.list_staff(business_id, current_user, active_only)


@router.post("", response_model=StaffResponse, status_code=201)
async def add_staff(
    business_id: str,
    data: StaffCreate,
    current_user: User = Depends(require_business_owner),
    service: StaffService = Depends(get_staff_service),
):
    return service.add_staff(business_id, data, current_user)


@router.patch("/{staff_id}", response_model=StaffResponse)
async def update_staff(
    business_id: str,
    staff_id: str,
    data: StaffUpdate,
    current_user: User = Depends(require_business_owner),
    service: StaffService = Depends(get_staff_service),
):
    return service.update_staff(business_id, staff_id, data, current_user)


@router.delete("/{staff_id}")
async def remove_staff(
    business_id: str,
    staff_id: str,
    current_user: User = Depends(require_business_owner),
    service: StaffService = Depends(get_staff_service),
):
    service.remove_staff(business_id, staff_id, current_user)
    return {"message": "Staff member removed"}
