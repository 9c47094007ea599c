"""Maintenance request response serialization helpers."""
from __future__ import annotations

from sqlalchemy.orm import selectinload

from ..models import MaintenanceRequest
from ..schemas import (
    AutoFilledInfo,
    EquipmentBrief,
    MaintenanceRequestResponse,
    TeamBrief,
    UserBrief,
    WorkCenterBrief,
)
from .auto_fill import AutoFill
from .request_states import get_allowed_transitions

REQUEST_RELATION_OPTIONS = (
    selectinload(MaintenanceRequest.equipment),
    selectinload(MaintenanceRequest.work_center),
    selectinload(MaintenanceRequest.team),
    selectinload(MaintenanceRequest.assigned_technician),
    selectinload(MaintenanceRequest.creator),
)


def _brief(schema, obj):
    if obj is None:
        return None
    return schema.model_validate(obj)


def auto_filled_info(auto_fill: AutoFill) -> AutoFilledInfo:
    return AutoFilledInfo(
        team=auto_fill.team_id is not None,
        work_center=auto_fill.work_center_id is not None,
        suggested_technician=auto_fill.suggested_technician_name,
    )


def request_to_response(
    request: MaintenanceRequest,
    *,
    auto_fill: AutoFill | None = None,
) -> MaintenanceRequestResponse:
    return MaintenanceRequestResponse(
        id=request.id,
        subject=request.subject,
        description=request.description,
        type=request.type,
        category=request.category,
        state=request.state,
        allowed_transitions=list(get_allowed_transitions(request.state)),
        equipment_id=request.equipment_id,
        work_center_id=request.work_center_id,
        team_id=request.team_id,
        assigned_technician_id=request.assigned_technician_id,
        scheduled_date=request.scheduled_date,
        duration_hours=request.duration_hours,
        created_by=request.created_by,
        created_at=request.created_at,
        updated_at=request.updated_at,
        equipment=_brief(EquipmentBrief, request.equipment),
        work_center=_brief(WorkCenterBrief, request.work_center),
        team=_brief(TeamBrief, request.team),
        assigned_technician=_brief(UserBrief, request.assigned_technician),
        creator=_brief(UserBrief, request.creator),
        auto_filled=auto_filled_info(auto_fill) if auto_fill is not None else None,
    )


def requests_to_response(requests: list[MaintenanceRequest]) -> list[MaintenanceRequestResponse]:
    return [request_to_response(request) for request in requests]
