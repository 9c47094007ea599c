"""Auto-fill of a request's responsible team and technician from its target.

Each target has exactly one source: the equipment row or the work center row.
There is no fallback between them.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.orm import Session

from ..domain_errors import IncompleteConfigurationError, NotFound
from ..models import Equipment, WorkCenter
from .request_target import EquipmentTarget, RequestTarget, WorkCenterTarget


@dataclass(frozen=True)
class AutoFill:
    team_id: UUID | None
    team_name: str | None = None
    suggested_technician_id: UUID | None = None
    suggested_technician_name: str | None = None
    work_center_id: UUID | None = None
    work_center_name: str | None = None


def resolve_from_equipment(db: Session, equipment_id: UUID) -> AutoFill:
    equipment = db.query(Equipment).filter(Equipment.id == equipment_id).first()
    if not equipment:
        raise NotFound("Equipment not found")

    team = equipment.maintenance_team
    technician = equipment.default_technician
    work_center = equipment.work_center
    return AutoFill(
        team_id=equipment.maintenance_team_id,
        team_name=team.name if team is not None else None,
        suggested_technician_id=equipment.default_technician_id,
        suggested_technician_name=technician.name if technician is not None else None,
        work_center_id=equipment.work_center_id,
        work_center_name=work_center.name if work_center is not None else None,
    )


def resolve_from_work_center(db: Session, work_center_id: UUID) -> AutoFill:
    work_center = db.query(WorkCenter).filter(WorkCenter.id == work_center_id).first()
    if not work_center:
        raise NotFound("Work center not found")

    if not work_center.default_team_id:
        raise IncompleteConfigurationError(
            f'Work center "{work_center.name}" does not have a default maintenance team assigned. '
            "Please contact an administrator to configure the work center before creating requests.",
            details={"work_center_id": str(work_center.id)},
        )

    team = work_center.default_team
    return AutoFill(
        team_id=work_center.default_team_id,
        team_name=team.name if team is not None else None,
        work_center_id=work_center.id,
        work_center_name=work_center.name,
    )


def resolve_target(db: Session, target: RequestTarget) -> AutoFill:
    if isinstance(target, EquipmentTarget):
        return resolve_from_equipment(db, target.equipment_id)
    if isinstance(target, WorkCenterTarget):
        return resolve_from_work_center(db, target.work_center_id)
    raise TypeError(f"Unsupported request target: {target!r}")
