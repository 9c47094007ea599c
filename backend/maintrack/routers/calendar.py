"""Preventive maintenance calendar endpoints."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User
from ..schemas import CalendarResponse, UserBrief
from ..services.request_response_builder import requests_to_response
from ..use_cases.preventive_calendar import (
    get_scheduled_requests_use_case,
    list_calendar_technicians_use_case,
)

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/scheduled", response_model=CalendarResponse)
def get_scheduled_requests(
    month: Optional[int] = None,
    year: Optional[int] = None,
    technician_id: Optional[UUID] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Open requests scheduled in one month, keyed by YYYY-MM-DD."""
    scheduled = get_scheduled_requests_use_case(
        db=db,
        actor_id=current_user.id,
        month=month,
        year=year,
        technician_id=technician_id,
    )
    return CalendarResponse(
        month=scheduled.month,
        year=scheduled.year,
        requests_by_date={
            day: requests_to_response(items) for day, items in scheduled.requests_by_date.items()
        },
        total_requests=scheduled.total_requests,
    )


@router.get("/technicians", response_model=list[UserBrief])
def list_calendar_technicians(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Technicians for the calendar filter; empty unless the caller may assign work."""
    technicians = list_calendar_technicians_use_case(db=db, actor_id=current_user.id)
    return [UserBrief.model_validate(user) for user in technicians]
