"""Preventive maintenance calendar: open scheduled requests of one month, grouped by day."""
from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from ..config import settings
from ..domain_errors import ValidationError
from ..models import MaintenanceRequest, User
from ..security import apply_request_scope, load_staff_actor
from ..services.request_response_builder import REQUEST_RELATION_OPTIONS
from ..services.request_states import REPAIRED, SCRAP
from ..services.role_policy import Role, can_assign_technician, request_scope

CLOSED_STATES = (REPAIRED, SCRAP)


@dataclass(frozen=True)
class ScheduledMonth:
    month: int
    year: int
    requests_by_date: dict[str, list[MaintenanceRequest]] = field(default_factory=dict)

    @property
    def total_requests(self) -> int:
        return sum(len(items) for items in self.requests_by_date.values())


def _parse_month_year(month: int | None, year: int | None) -> tuple[int, int]:
    if month is None or year is None:
        raise ValidationError("Month and year are required")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12", details={"month": month})
    if not settings.CALENDAR_MIN_YEAR <= year <= settings.CALENDAR_MAX_YEAR:
        raise ValidationError(
            f"Year must be between {settings.CALENDAR_MIN_YEAR} and {settings.CALENDAR_MAX_YEAR}",
            details={"year": year},
        )
    return month, year


def month_bounds(month: int, year: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def get_scheduled_requests_use_case(
    *,
    db: Session,
    actor_id: UUID,
    month: int | None,
    year: int | None,
    technician_id: UUID | None = None,
) -> ScheduledMonth:
    """Requests with a scheduled date in the month that are not closed yet.

    Visibility follows the actor's request scope. The technician filter is
    honoured only for roles that may assign technicians and is ignored otherwise.
    """
    month, year = _parse_month_year(month, year)
    actor = load_staff_actor(db, actor_id)
    first_day, last_day = month_bounds(month, year)

    query = apply_request_scope(db.query(MaintenanceRequest), request_scope(actor))
    query = query.filter(
        MaintenanceRequest.scheduled_date >= first_day,
        MaintenanceRequest.scheduled_date <= last_day,
        MaintenanceRequest.state.notin_(CLOSED_STATES),
    )
    if technician_id and can_assign_technician(actor):
        query = query.filter(MaintenanceRequest.assigned_technician_id == technician_id)

    requests = (
        query.options(*REQUEST_RELATION_OPTIONS)
        .order_by(
            MaintenanceRequest.scheduled_date.asc(),
            MaintenanceRequest.created_at.asc(),
            MaintenanceRequest.id.asc(),
        )
        .all()
    )

    grouped: dict[str, list[MaintenanceRequest]] = {}
    for request in requests:
        grouped.setdefault(request.scheduled_date.isoformat(), []).append(request)
    return ScheduledMonth(month=month, year=year, requests_by_date=grouped)


def list_calendar_technicians_use_case(*, db: Session, actor_id: UUID) -> list[User]:
    """Technicians offered as a calendar filter; empty for roles that cannot use the filter."""
    actor = load_staff_actor(db, actor_id)
    if not can_assign_technician(actor):
        return []
    return (
        db.query(User)
        .filter(User.role == Role.TECHNICIAN.value)
        .order_by(User.name.asc(), User.id.asc())
        .all()
    )
