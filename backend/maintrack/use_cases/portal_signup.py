"""Portal self-registration with best-effort starter equipment."""
from __future__ import annotations

import logging
from collections.abc import Callable
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..domain_errors import InternalError, ValidationError
from ..models import Equipment, User
from ..services.role_policy import ACTIVE_EQUIPMENT_STATUS, Role

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8


def assign_starter_equipment(db: Session, *, user_id: UUID, count: int) -> list[Equipment]:
    """Give the user up to ``count`` active equipment that nobody owns yet."""
    if count <= 0:
        return []
    available = (
        db.query(Equipment)
        .filter(
            Equipment.status == ACTIVE_EQUIPMENT_STATUS,
            Equipment.employee_owner_id.is_(None),
        )
        .order_by(Equipment.created_at.asc(), Equipment.id.asc())
        .limit(count)
        .all()
    )
    if not available:
        return []
    for equipment in available:
        equipment.employee_owner_id = user_id
    db.commit()
    return available


def register_portal_user_use_case(
    *,
    db: Session,
    name: str,
    email: str,
    password: str,
    hash_password: Callable[[str], str],
) -> tuple[User, list[Equipment]]:
    normalized_email = email.strip().lower()
    if not name.strip() or not normalized_email:
        raise ValidationError("Name and email are required")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")

    existing = db.query(User).filter(User.email == normalized_email).first()
    if existing:
        raise ValidationError("Email is already registered")

    user = User(
        name=name.strip(),
        email=normalized_email,
        password_hash=hash_password(password),
        role=Role.PORTAL.value,
    )
    db.add(user)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to register portal user")
        raise InternalError("Failed to register user") from exc

    # Convenience only: the account stays valid without starter equipment.
    try:
        assigned = assign_starter_equipment(
            db,
            user_id=user.id,
            count=settings.PORTAL_STARTER_EQUIPMENT_COUNT,
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Starter equipment assignment failed for user %s (ignored)", user.id)
        assigned = []

    return user, assigned
