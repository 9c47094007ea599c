"""Work center read use-cases for staff screens."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from ..domain_errors import NotFound
from ..models import WorkCenter
from ..security import load_staff_actor


def list_work_centers_use_case(
    *,
    db: Session,
    actor_id: UUID,
    search: str | None = None,
    team_id: UUID | None = None,
) -> list[WorkCenter]:
    """All work centers ordered by name, optionally narrowed by name/code or default team."""
    load_staff_actor(db, actor_id)

    query = db.query(WorkCenter).options(selectinload(WorkCenter.default_team))
    if search and search.strip():
        term = search.strip()
        query = query.filter(
            WorkCenter.name.icontains(term, autoescape=True)
            | WorkCenter.code.icontains(term, autoescape=True)
        )
    if team_id:
        query = query.filter(WorkCenter.default_team_id == team_id)
    return query.order_by(WorkCenter.name.asc(), WorkCenter.id.asc()).all()


def get_work_center_use_case(*, db: Session, actor_id: UUID, work_center_id: UUID) -> WorkCenter:
    load_staff_actor(db, actor_id)

    work_center = (
        db.query(WorkCenter)
        .options(selectinload(WorkCenter.default_team))
        .filter(WorkCenter.id == work_center_id)
        .first()
    )
    if not work_center:
        raise NotFound("Work center not found")
    return work_center
