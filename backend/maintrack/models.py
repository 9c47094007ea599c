"""SQLAlchemy models."""
from sqlalchemy import (
    Column, String, Date, DateTime, Float, Text,
    ForeignKey, CheckConstraint, Index, Uuid, and_, or_,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from .database import Base
from .services.request_states import REQUEST_STATES
from .services.role_policy import ROLE_VALUES

EQUIPMENT_STATUSES = ("active", "scrapped")
REQUEST_TYPES = ("corrective", "preventive")


class User(Base):
    """User (actor) model."""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(role.in_(ROLE_VALUES), name="chk_user_role"),
    )

    # Relationships
    team_memberships = relationship("TeamMember", back_populates="user", cascade="all, delete-orphan")


class Team(Base):
    """Maintenance team model."""
    __tablename__ = "teams"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    members = relationship("TeamMember", back_populates="team", cascade="all, delete-orphan")


class TeamMember(Base):
    """Team membership (many-to-many users <-> teams)."""
    __tablename__ = "team_members"

    team_id = Column(Uuid, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    team = relationship("Team", back_populates="members")
    user = relationship("User", back_populates="team_memberships")


class WorkCenter(Base):
    """Work center (area/location target not tied to one asset)."""
    __tablename__ = "work_centers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    code = Column(String(50), unique=True, nullable=False, index=True)
    # Nullable in storage; a request cannot target the work center until it is set.
    default_team_id = Column(Uuid, ForeignKey("teams.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    default_team = relationship("Team")


class Equipment(Base):
    """Maintainable asset."""
    __tablename__ = "equipment"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    serial_number = Column(String(100), unique=True, nullable=False, index=True)
    department = Column(String(100), nullable=True, index=True)
    location = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default="active", index=True)
    employee_owner_id = Column(Uuid, ForeignKey("users.id"), nullable=True, index=True)
    maintenance_team_id = Column(Uuid, ForeignKey("teams.id"), nullable=True, index=True)
    default_technician_id = Column(Uuid, ForeignKey("users.id"), nullable=True)
    work_center_id = Column(Uuid, ForeignKey("work_centers.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(status.in_(EQUIPMENT_STATUSES), name="chk_equipment_status"),
    )

    employee_owner = relationship("User", foreign_keys=[employee_owner_id])
    maintenance_team = relationship("Team", foreign_keys=[maintenance_team_id])
    default_technician = relationship("User", foreign_keys=[default_technician_id])
    work_center = relationship("WorkCenter")


class MaintenanceRequest(Base):
    """Maintenance request (ticket)."""
    __tablename__ = "maintenance_requests"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    subject = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(20), nullable=False, index=True)
    category = Column(String(20), nullable=False, default="equipment", index=True)
    state = Column(String(20), nullable=False, default="new", index=True)
    equipment_id = Column(Uuid, ForeignKey("equipment.id"), nullable=True, index=True)
    work_center_id = Column(Uuid, ForeignKey("work_centers.id"), nullable=True, index=True)
    team_id = Column(Uuid, ForeignKey("teams.id"), nullable=False, index=True)
    assigned_technician_id = Column(Uuid, ForeignKey("users.id"), nullable=True, index=True)
    scheduled_date = Column(Date, nullable=True, index=True)
    duration_hours = Column(Float, nullable=True)
    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(type.in_(REQUEST_TYPES), name="chk_request_type"),
        CheckConstraint(category.in_(("equipment", "work_center")), name="chk_request_category"),
        CheckConstraint(state.in_(REQUEST_STATES), name="chk_request_state"),
        CheckConstraint(
            or_(
                and_(category == "equipment", equipment_id.isnot(None), work_center_id.is_(None)),
                and_(category == "work_center", work_center_id.isnot(None), equipment_id.is_(None)),
            ),
            name="chk_request_target",
        ),
        CheckConstraint(
            or_(type != "preventive", scheduled_date.isnot(None)),
            name="chk_request_preventive_scheduled",
        ),
        CheckConstraint(
            or_(duration_hours.is_(None), duration_hours > 0),
            name="chk_request_duration_positive",
        ),
        Index("idx_requests_team_state", "team_id", "state"),
    )

    equipment = relationship("Equipment")
    work_center = relationship("WorkCenter")
    team = relationship("Team")
    assigned_technician = relationship("User", foreign_keys=[assigned_technician_id])
    creator = relationship("User", foreign_keys=[created_by])
