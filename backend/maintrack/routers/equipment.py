"""Equipment endpoints."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User
from ..schemas import (
    EquipmentListResponse,
    EquipmentResponse,
    MaintenanceRequestListResponse,
)
from ..services.query_builder import Pagination, RequestFilters, split_csv
from ..services.request_response_builder import requests_to_response
from ..use_cases.equipment import get_equipment_use_case, list_equipment_use_case
from ..use_cases.maintenance_requests import list_requests_use_case
from .maintenance_requests import page_response

router = APIRouter(prefix="/equipment", tags=["equipment"])


@router.get("", response_model=EquipmentListResponse)
def list_equipment(
    search: Optional[str] = None,
    status: Optional[str] = None,
    department: Optional[str] = None,
    page: int = 1,
    limit: int = 100,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List equipment visible to the current user."""
    items, page_info = list_equipment_use_case(
        db=db,
        actor_id=current_user.id,
        pagination=Pagination.build(page, limit),
        search=search,
        status=status,
        department=department,
    )
    return EquipmentListResponse(
        items=[EquipmentResponse.model_validate(item) for item in items],
        pagination=page_response(page_info),
    )


@router.get("/{equipment_id}", response_model=EquipmentResponse)
def get_equipment(
    equipment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get single equipment if it is within the user's scope."""
    return get_equipment_use_case(db=db, actor_id=current_user.id, equipment_id=equipment_id)


@router.get("/{equipment_id}/maintenance-requests", response_model=MaintenanceRequestListResponse)
def get_equipment_maintenance_requests(
    equipment_id: UUID,
    state: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Maintenance history for one equipment, limited to requests the user may see."""
    items, page_info = list_requests_use_case(
        db=db,
        actor_id=current_user.id,
        filters=RequestFilters(equipment_id=equipment_id, states=split_csv(state)),
        pagination=Pagination.build(page, limit),
    )
    return MaintenanceRequestListResponse(
        items=requests_to_response(items),
        pagination=page_response(page_info),
    )
