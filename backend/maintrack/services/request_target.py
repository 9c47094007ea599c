"""What a maintenance request points at: one equipment or one work center."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union
from uuid import UUID

from .role_policy import EQUIPMENT_CATEGORY, WORK_CENTER_CATEGORY

REQUEST_CATEGORIES: tuple[str, ...] = (EQUIPMENT_CATEGORY, WORK_CENTER_CATEGORY)


@dataclass(frozen=True)
class EquipmentTarget:
    equipment_id: UUID


@dataclass(frozen=True)
class WorkCenterTarget:
    work_center_id: UUID


RequestTarget = Union[EquipmentTarget, WorkCenterTarget]


def target_columns(target: RequestTarget) -> dict[str, object]:
    """Column values for a request row; exactly one reference is set."""
    if isinstance(target, EquipmentTarget):
        return {
            "category": EQUIPMENT_CATEGORY,
            "equipment_id": target.equipment_id,
            "work_center_id": None,
        }
    if isinstance(target, WorkCenterTarget):
        return {
            "category": WORK_CENTER_CATEGORY,
            "equipment_id": None,
            "work_center_id": target.work_center_id,
        }
    raise TypeError(f"Unsupported request target: {target!r}")


def target_of(request) -> RequestTarget | None:
    """Rebuild the target of a stored request; None if its columns are inconsistent."""
    if request.category == EQUIPMENT_CATEGORY and request.equipment_id is not None:
        return EquipmentTarget(request.equipment_id)
    if request.category == WORK_CENTER_CATEGORY and request.work_center_id is not None:
        return WorkCenterTarget(request.work_center_id)
    return None
