"""Maintenance request lifecycle use-cases: create, read, list, transition, delete."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from numbers import Real
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..domain_errors import Forbidden, InternalError, InvalidStateTransition, NotFound, ValidationError
from ..models import REQUEST_TYPES, MaintenanceRequest, User
from ..schemas import MaintenanceRequestCreate
from ..security import actor_from_user, load_actor
from ..services.auto_fill import AutoFill, resolve_target
from ..services.query_builder import (
    PageInfo,
    Pagination,
    RequestFilters,
    build_request_query,
    paginate,
    request_order_by,
)
from ..services.request_response_builder import REQUEST_RELATION_OPTIONS
from ..services.request_states import IN_PROGRESS, NEW, REPAIRED, SCRAP, validate_state_transition
from ..services.request_target import (
    REQUEST_CATEGORIES,
    EquipmentTarget,
    RequestTarget,
    WorkCenterTarget,
    target_columns,
    target_of,
)
from ..services.role_policy import (
    EQUIPMENT_CATEGORY,
    WORK_CENTER_CATEGORY,
    can_access_request,
    can_assign_technician,
    can_change_state,
    can_create_work_center_request,
    can_delete_requests,
    is_team_member,
    request_scope,
)

logger = logging.getLogger(__name__)

SUBJECT_MIN_LENGTH = 3
SUBJECT_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 500
SCRAPPED_EQUIPMENT_STATUS = "scrapped"

UNRESOLVED_TEAM_MESSAGE = (
    "Unable to create request: No maintenance team could be determined. "
    "Please contact an administrator."
)


@dataclass(frozen=True)
class CreatedRequest:
    request: MaintenanceRequest
    auto_fill: AutoFill


def _commit(db: Session, *, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to %s", action)
        raise InternalError(f"Failed to {action}") from exc


def _get_request_or_404(*, db: Session, request_id: UUID) -> MaintenanceRequest:
    request = db.query(MaintenanceRequest).filter(MaintenanceRequest.id == request_id).first()
    if not request:
        raise NotFound("Request not found")
    return request


def _validate_text_fields(data: MaintenanceRequestCreate) -> str:
    subject = (data.subject or "").strip()
    if not subject or not data.type:
        raise ValidationError(
            "Missing required fields",
            details={"required": ["subject", "type"]},
        )
    if not SUBJECT_MIN_LENGTH <= len(subject) <= SUBJECT_MAX_LENGTH:
        raise ValidationError(
            f"Subject must be between {SUBJECT_MIN_LENGTH} and {SUBJECT_MAX_LENGTH} characters"
        )
    if data.description and len(data.description.strip()) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters")
    if data.type not in REQUEST_TYPES:
        raise ValidationError("Type must be corrective or preventive")
    return subject


def _target_from_input(*, data: MaintenanceRequestCreate, creator) -> RequestTarget:
    category = data.category or EQUIPMENT_CATEGORY
    if category not in REQUEST_CATEGORIES:
        raise ValidationError("Category must be equipment or work_center")

    if category == WORK_CENTER_CATEGORY:
        if not can_create_work_center_request(creator):
            raise Forbidden("Portal users cannot create work center requests")
        if data.equipment_id is not None:
            raise ValidationError("Work center requests must not reference equipment")
        if not data.work_center_id:
            raise ValidationError("work_center_id is required for work center requests")
        return WorkCenterTarget(data.work_center_id)

    if data.work_center_id is not None:
        raise ValidationError("Equipment requests must not reference a work center")
    if not data.equipment_id:
        raise ValidationError("equipment_id is required for equipment requests")
    return EquipmentTarget(data.equipment_id)


def create_request_use_case(
    *,
    db: Session,
    data: MaintenanceRequestCreate,
    creator_id: UUID,
) -> CreatedRequest:
    """Validate input, auto-fill the responsible team and persist a ``new`` request."""
    creator = load_actor(db, creator_id)

    subject = _validate_text_fields(data)
    target = _target_from_input(data=data, creator=creator)
    if data.type == "preventive" and not data.scheduled_date:
        raise ValidationError("Preventive maintenance requires a scheduled_date")

    auto_fill = resolve_target(db, target)
    if not auto_fill.team_id:
        raise ValidationError(UNRESOLVED_TEAM_MESSAGE)

    request = MaintenanceRequest(
        subject=subject,
        description=(data.description or "").strip() or None,
        type=data.type,
        state=NEW,
        team_id=auto_fill.team_id,
        assigned_technician_id=auto_fill.suggested_technician_id,
        scheduled_date=data.scheduled_date,
        created_by=creator.id,
        **target_columns(target),
    )
    db.add(request)
    _commit(db, action="create maintenance request")
    db.refresh(request)
    return CreatedRequest(request=request, auto_fill=auto_fill)


def list_requests_use_case(
    *,
    db: Session,
    actor_id: UUID,
    filters: RequestFilters,
    pagination: Pagination,
) -> tuple[list[MaintenanceRequest], PageInfo]:
    """List requests visible to the actor, narrowed by caller filters."""
    actor = load_actor(db, actor_id)
    query = build_request_query(db, request_scope(actor), filters)
    query = query.options(*REQUEST_RELATION_OPTIONS)
    return paginate(query, pagination, request_order_by(filters))


def get_request_use_case(*, db: Session, actor_id: UUID, request_id: UUID) -> MaintenanceRequest:
    request = _get_request_or_404(db=db, request_id=request_id)
    actor = load_actor(db, actor_id)
    if not can_access_request(actor, request):
        raise Forbidden("You don't have permission to view this request")
    return request


def _validate_duration(duration_hours: object) -> float:
    if isinstance(duration_hours, bool) or not isinstance(duration_hours, Real):
        raise ValidationError("Duration hours must be a positive number")
    value = float(duration_hours)
    if not math.isfinite(value) or value <= 0:
        raise ValidationError("Duration hours must be a positive number")
    if value < settings.MIN_DURATION_HOURS or value > settings.MAX_DURATION_HOURS:
        raise ValidationError(
            f"Duration hours must be between {settings.MIN_DURATION_HOURS:g} "
            f"and {settings.MAX_DURATION_HOURS:g}"
        )
    return value


def _validate_technician_change(
    *,
    db: Session,
    actor,
    request: MaintenanceRequest,
    technician_id: UUID,
) -> None:
    if not can_assign_technician(actor):
        raise Forbidden("Only administrators and managers can assign technicians")

    technician = db.query(User).filter(User.id == technician_id).first()
    if not technician:
        raise NotFound("Technician not found")
    if not is_team_member(actor_from_user(technician), request.team_id):
        raise ValidationError("Technician must be a member of the request team")


def transition_state_use_case(
    *,
    db: Session,
    actor_id: UUID,
    request_id: UUID,
    new_state: str,
    duration_hours: float | None = None,
    assigned_technician_id: UUID | None = None,
) -> MaintenanceRequest:
    """Move a request through the workflow.

    ``duration_hours`` and ``assigned_technician_id`` are optional; ``None``
    means "not supplied". The state write and the scrap side effect on the
    target equipment are committed together.
    """
    request = _get_request_or_404(db=db, request_id=request_id)
    actor = load_actor(db, actor_id)

    if not can_access_request(actor, request):
        raise Forbidden("You don't have permission to update this request")
    if not can_change_state(actor):
        raise Forbidden("Portal users cannot change request state")

    result = validate_state_transition(request.state, new_state)
    if not result.allowed:
        raise InvalidStateTransition(
            result.reason or "Invalid state transition",
            details={"from": request.state, "to": new_state},
        )

    if new_state == IN_PROGRESS and not request.assigned_technician_id:
        raise ValidationError(
            "Cannot start work: A technician must be assigned to this request before work can begin"
        )

    if new_state == REPAIRED and duration_hours is None:
        raise ValidationError("Duration hours required when marking as repaired")
    duration_value = _validate_duration(duration_hours) if duration_hours is not None else None

    technician_changed = (
        assigned_technician_id is not None
        and assigned_technician_id != request.assigned_technician_id
    )
    if technician_changed:
        _validate_technician_change(
            db=db,
            actor=actor,
            request=request,
            technician_id=assigned_technician_id,
        )

    equipment_to_scrap = None
    if new_state == SCRAP and isinstance(target_of(request), EquipmentTarget):
        equipment = request.equipment
        if equipment is None:
            raise NotFound("Equipment not found")
        if equipment.status == SCRAPPED_EQUIPMENT_STATUS:
            raise ValidationError("Equipment is already marked as scrapped")
        equipment_to_scrap = equipment

    if new_state == request.state and duration_value is None and not technician_changed:
        # Idempotent re-apply of a non-terminal state.
        return request

    old_state = request.state
    if equipment_to_scrap is not None:
        equipment_to_scrap.status = SCRAPPED_EQUIPMENT_STATUS
    request.state = new_state
    if duration_value is not None:
        request.duration_hours = duration_value
    if technician_changed:
        request.assigned_technician_id = assigned_technician_id

    _commit(db, action="update request state")

    if equipment_to_scrap is not None:
        logger.info(
            "Equipment %s marked as scrapped due to request %s by user %s",
            equipment_to_scrap.serial_number,
            request.id,
            actor.id,
        )
    logger.info(
        "request.state_changed request=%s from=%s to=%s actor=%s",
        request.id,
        old_state,
        new_state,
        actor.id,
    )
    return request


def delete_request_use_case(*, db: Session, actor_id: UUID, request_id: UUID) -> None:
    """Administrative removal, regardless of workflow state."""
    actor = load_actor(db, actor_id)
    if not can_delete_requests(actor):
        raise Forbidden("Only administrators can delete requests")

    request = _get_request_or_404(db=db, request_id=request_id)
    db.delete(request)
    _commit(db, action="delete maintenance request")
    logger.info("request.deleted request=%s actor=%s", request_id, actor.id)
