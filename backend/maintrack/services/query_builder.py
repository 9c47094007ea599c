"""Access-scoped list queries for maintenance requests and equipment.

Caller filters are ANDed onto the role scope, so they can only narrow the
visible set.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from ..config import settings
from ..domain_errors import ValidationError
from ..models import REQUEST_TYPES, Equipment, MaintenanceRequest, WorkCenter
from ..security import apply_equipment_scope, apply_request_scope
from .request_states import REQUEST_STATES
from .request_target import REQUEST_CATEGORIES
from .role_policy import EquipmentScope, RequestScope

SORTABLE_REQUEST_FIELDS: tuple[str, ...] = (
    "created_at",
    "updated_at",
    "scheduled_date",
    "subject",
    "state",
    "type",
)
REQUEST_DATE_FIELDS: tuple[str, ...] = ("created_at", "updated_at", "scheduled_date")
SORT_ORDERS: tuple[str, ...] = ("asc", "desc")


def split_csv(value: str | None) -> tuple[str, ...]:
    """Parse a multi-select query value like ``new,in_progress``."""
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class RequestFilters:
    search: str | None = None
    states: tuple[str, ...] = ()
    type: str | None = None
    category: str | None = None
    team_id: UUID | None = None
    equipment_id: UUID | None = None
    date_from: date | datetime | None = None
    date_to: date | datetime | None = None
    date_field: str = "created_at"
    sort_by: str = "created_at"
    sort_order: str = "desc"

    def validate(self) -> None:
        unknown_states = [state for state in self.states if state not in REQUEST_STATES]
        if unknown_states:
            raise ValidationError(
                f"Unknown state filter: {', '.join(unknown_states)}",
                details={"allowed": list(REQUEST_STATES)},
            )
        if self.type is not None and self.type not in REQUEST_TYPES:
            raise ValidationError("Type must be corrective or preventive")
        if self.category is not None and self.category not in REQUEST_CATEGORIES:
            raise ValidationError("Category must be equipment or work_center")
        if self.date_field not in REQUEST_DATE_FIELDS:
            raise ValidationError(
                f"Unsupported date field: {self.date_field}",
                details={"allowed": list(REQUEST_DATE_FIELDS)},
            )
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValidationError("date_from must not be after date_to")


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    limit: int = 10

    @classmethod
    def build(cls, page: Any = None, limit: Any = None) -> "Pagination":
        """Clamp raw page/limit values into the supported range."""
        try:
            page_value = int(page) if page is not None else 1
        except (TypeError, ValueError):
            page_value = 1
        try:
            limit_value = int(limit) if limit is not None else settings.DEFAULT_PAGE_SIZE
        except (TypeError, ValueError):
            limit_value = settings.DEFAULT_PAGE_SIZE
        return cls(
            page=max(1, page_value),
            limit=min(settings.MAX_PAGE_SIZE, max(1, limit_value)),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageInfo:
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def _request_search_clause(search: str):
    # Wildcards in user input match literally.
    return (
        MaintenanceRequest.subject.icontains(search, autoescape=True)
        | MaintenanceRequest.equipment.has(Equipment.name.icontains(search, autoescape=True))
        | MaintenanceRequest.equipment.has(Equipment.serial_number.icontains(search, autoescape=True))
        | MaintenanceRequest.work_center.has(WorkCenter.name.icontains(search, autoescape=True))
        | MaintenanceRequest.work_center.has(WorkCenter.code.icontains(search, autoescape=True))
    )


def apply_request_filters(query: Any, filters: RequestFilters):
    if filters.search and filters.search.strip():
        query = query.filter(_request_search_clause(filters.search.strip()))
    if filters.states:
        query = query.filter(MaintenanceRequest.state.in_(filters.states))
    if filters.type:
        query = query.filter(MaintenanceRequest.type == filters.type)
    if filters.category:
        query = query.filter(MaintenanceRequest.category == filters.category)
    if filters.team_id:
        query = query.filter(MaintenanceRequest.team_id == filters.team_id)
    if filters.equipment_id:
        query = query.filter(MaintenanceRequest.equipment_id == filters.equipment_id)

    date_column = getattr(MaintenanceRequest, filters.date_field)
    if filters.date_from:
        query = query.filter(date_column >= filters.date_from)
    if filters.date_to:
        query = query.filter(date_column <= filters.date_to)
    return query


def request_order_by(filters: RequestFilters) -> tuple:
    sort_by = filters.sort_by if filters.sort_by in SORTABLE_REQUEST_FIELDS else "created_at"
    sort_order = filters.sort_order if filters.sort_order in SORT_ORDERS else "desc"
    column = getattr(MaintenanceRequest, sort_by)
    primary = column.asc() if sort_order == "asc" else column.desc()
    # Stable pages when the sort column has ties.
    return primary, MaintenanceRequest.id.asc()


def build_request_query(db: Session, scope: RequestScope, filters: RequestFilters):
    """Role scope AND caller filters, unordered and unpaginated."""
    filters.validate()
    query = db.query(MaintenanceRequest)
    query = apply_request_scope(query, scope)
    return apply_request_filters(query, filters)


def paginate(query: Any, pagination: Pagination, order_by: tuple) -> tuple[list, PageInfo]:
    total = query.count()
    items = query.order_by(*order_by).offset(pagination.offset).limit(pagination.limit).all()
    return items, PageInfo(page=pagination.page, limit=pagination.limit, total=total)


def build_equipment_query(
    db: Session,
    scope: EquipmentScope,
    *,
    search: str | None = None,
    status: str | None = None,
    department: str | None = None,
):
    query = apply_equipment_scope(db.query(Equipment), scope)
    if status:
        query = query.filter(Equipment.status == status)
    if department:
        query = query.filter(Equipment.department == department)
    if search and search.strip():
        term = search.strip()
        query = query.filter(
            Equipment.name.icontains(term, autoescape=True)
            | Equipment.serial_number.icontains(term, autoescape=True)
            | Equipment.department.icontains(term, autoescape=True)
            | Equipment.location.icontains(term, autoescape=True)
        )
    return query
