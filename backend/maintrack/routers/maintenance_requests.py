"""Maintenance request endpoints."""
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User
from ..schemas import (
    MaintenanceRequestCreate,
    MaintenanceRequestListResponse,
    MaintenanceRequestResponse,
    PageResponse,
    RequestStateUpdate,
)
from ..services.query_builder import PageInfo, Pagination, RequestFilters, split_csv
from ..services.request_response_builder import request_to_response, requests_to_response
from ..use_cases.maintenance_requests import (
    create_request_use_case,
    delete_request_use_case,
    get_request_use_case,
    list_requests_use_case,
    transition_state_use_case,
)

router = APIRouter(prefix="/maintenance-requests", tags=["maintenance-requests"])


def page_response(page: PageInfo) -> PageResponse:
    return PageResponse(
        page=page.page,
        limit=page.limit,
        total=page.total,
        total_pages=page.total_pages,
    )


@router.post("", response_model=MaintenanceRequestResponse, status_code=status.HTTP_201_CREATED)
def create_request(
    data: MaintenanceRequestCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a maintenance request; team and technician are auto-filled from the target."""
    created = create_request_use_case(db=db, data=data, creator_id=current_user.id)
    return request_to_response(created.request, auto_fill=created.auto_fill)


@router.get("", response_model=MaintenanceRequestListResponse)
def list_requests(
    search: Optional[str] = None,
    state: Optional[str] = Query(None, description="Comma-separated states"),
    type: Optional[str] = None,
    category: Optional[str] = None,
    team_id: Optional[UUID] = None,
    equipment_id: Optional[UUID] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    date_field: str = "created_at",
    sort_by: str = "created_at",
    sort_order: str = "desc",
    page: int = 1,
    limit: int = 10,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List requests visible to the current user."""
    filters = RequestFilters(
        search=search,
        states=split_csv(state),
        type=type,
        category=category,
        team_id=team_id,
        equipment_id=equipment_id,
        date_from=date_from,
        date_to=date_to,
        date_field=date_field,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    items, page_info = list_requests_use_case(
        db=db,
        actor_id=current_user.id,
        filters=filters,
        pagination=Pagination.build(page, limit),
    )
    return MaintenanceRequestListResponse(
        items=requests_to_response(items),
        pagination=page_response(page_info),
    )


@router.get("/{request_id}", response_model=MaintenanceRequestResponse)
def get_request(
    request_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get request details."""
    request = get_request_use_case(db=db, actor_id=current_user.id, request_id=request_id)
    return request_to_response(request)


@router.put("/{request_id}/state", response_model=MaintenanceRequestResponse)
def update_request_state(
    request_id: UUID,
    data: RequestStateUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Move request through the workflow, optionally recording duration/technician."""
    request = transition_state_use_case(
        db=db,
        actor_id=current_user.id,
        request_id=request_id,
        new_state=data.state,
        duration_hours=data.duration_hours,
        assigned_technician_id=data.assigned_technician_id,
    )
    return request_to_response(request)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_request(
    request_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete request (admin override)."""
    delete_request_use_case(db=db, actor_id=current_user.id, request_id=request_id)
