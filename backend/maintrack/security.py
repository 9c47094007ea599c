"""Security helpers: actor resolution and role-scoped SQLAlchemy filters."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import false, or_
from sqlalchemy.orm import Session

from .domain_errors import Forbidden, NotFound
from .models import Equipment, MaintenanceRequest, User
from .services.role_policy import (
    ACTIVE_EQUIPMENT_STATUS,
    EQUIPMENT_CATEGORY,
    SEE_OWN_EQUIPMENT_REQUESTS,
    SEE_OWNED_OR_ACTIVE_EQUIPMENT,
    SEE_TEAM,
    Actor,
    EquipmentScope,
    RequestScope,
    can_view_directory,
)


def actor_from_user(user: User) -> Actor:
    return Actor(
        id=user.id,
        role=user.role,
        team_ids=frozenset(membership.team_id for membership in user.team_memberships),
    )


def load_actor(db: Session, actor_id: UUID) -> Actor:
    """Load the calling identity with its current team memberships or raise 404."""
    user = db.query(User).filter(User.id == actor_id).first()
    if not user:
        raise NotFound("User not found")
    return actor_from_user(user)


def load_staff_actor(db: Session, actor_id: UUID) -> Actor:
    """Like load_actor, but portal users and unknown roles are refused."""
    actor = load_actor(db, actor_id)
    if not can_view_directory(actor):
        raise Forbidden("Access denied")
    return actor


def apply_request_scope(query: Any, scope: RequestScope):
    """Restrict a MaintenanceRequest query to what the scope allows."""
    if scope.is_empty:
        return query.filter(false())
    if scope.is_unrestricted:
        return query
    if scope.visibility == SEE_OWN_EQUIPMENT_REQUESTS:
        return query.filter(
            MaintenanceRequest.created_by == scope.actor_id,
            MaintenanceRequest.category == EQUIPMENT_CATEGORY,
        )
    if scope.visibility == SEE_TEAM:
        return query.filter(MaintenanceRequest.team_id.in_(tuple(scope.team_ids)))
    return query.filter(false())


def apply_equipment_scope(query: Any, scope: EquipmentScope):
    """Restrict an Equipment query to what the scope allows."""
    if scope.is_empty:
        return query.filter(false())
    if scope.is_unrestricted:
        return query
    if scope.visibility == SEE_OWNED_OR_ACTIVE_EQUIPMENT:
        return query.filter(
            or_(
                Equipment.employee_owner_id == scope.actor_id,
                Equipment.status == ACTIVE_EQUIPMENT_STATUS,
            )
        )
    if scope.visibility == SEE_TEAM:
        return query.filter(Equipment.maintenance_team_id.in_(tuple(scope.team_ids)))
    return query.filter(false())
