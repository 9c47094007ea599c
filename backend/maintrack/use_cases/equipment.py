"""Equipment read use-cases scoped by role."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from ..domain_errors import NotFound
from ..models import Equipment
from ..security import load_actor
from ..services.query_builder import PageInfo, Pagination, build_equipment_query, paginate
from ..services.role_policy import EquipmentScope, equipment_scope

EQUIPMENT_RELATION_OPTIONS = (
    selectinload(Equipment.maintenance_team),
    selectinload(Equipment.default_technician),
    selectinload(Equipment.work_center),
)


def get_equipment_scope_use_case(*, db: Session, actor_id: UUID) -> EquipmentScope:
    """Equipment visibility for the actor, for equipment-listing collaborators."""
    return equipment_scope(load_actor(db, actor_id))


def list_equipment_use_case(
    *,
    db: Session,
    actor_id: UUID,
    pagination: Pagination,
    search: str | None = None,
    status: str | None = None,
    department: str | None = None,
) -> tuple[list[Equipment], PageInfo]:
    scope = get_equipment_scope_use_case(db=db, actor_id=actor_id)
    query = build_equipment_query(db, scope, search=search, status=status, department=department)
    query = query.options(*EQUIPMENT_RELATION_OPTIONS)
    return paginate(query, pagination, (Equipment.name.asc(), Equipment.id.asc()))


def get_equipment_use_case(*, db: Session, actor_id: UUID, equipment_id: UUID) -> Equipment:
    """Equipment outside the actor's scope is reported as missing."""
    scope = get_equipment_scope_use_case(db=db, actor_id=actor_id)
    equipment = (
        build_equipment_query(db, scope)
        .filter(Equipment.id == equipment_id)
        .first()
    )
    if not equipment:
        raise NotFound("Equipment not found")
    return equipment
