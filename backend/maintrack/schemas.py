"""Pydantic schemas for API."""
from pydantic import BaseModel, Field, ConfigDict, StrictFloat, StrictInt
from typing import Optional, Union
from datetime import date, datetime
from uuid import UUID


# Brief nested schemas
class UserBrief(BaseModel):
    """Brief user info for nested responses."""
    id: UUID
    name: str
    email: str
    model_config = ConfigDict(from_attributes=True)


class TeamBrief(BaseModel):
    id: UUID
    name: str
    model_config = ConfigDict(from_attributes=True)


class WorkCenterBrief(BaseModel):
    id: UUID
    name: str
    code: str
    model_config = ConfigDict(from_attributes=True)


class EquipmentBrief(BaseModel):
    id: UUID
    name: str
    serial_number: str
    status: str
    model_config = ConfigDict(from_attributes=True)


# Auth schemas
class LoginRequest(BaseModel):
    email: str
    password: str


class SignupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    password: str


class UserResponse(BaseModel):
    id: UUID
    name: str
    email: str
    role: str
    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class SignupResponse(BaseModel):
    user: UserResponse
    assigned_equipment: list[EquipmentBrief]


# Maintenance request schemas
class MaintenanceRequestCreate(BaseModel):
    # Presence/enum checks are done by the use-case so they surface as VALIDATION_ERROR.
    subject: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    equipment_id: Optional[UUID] = None
    work_center_id: Optional[UUID] = None
    scheduled_date: Optional[date] = None


class RequestStateUpdate(BaseModel):
    state: str
    duration_hours: Optional[Union[StrictInt, StrictFloat]] = None
    assigned_technician_id: Optional[UUID] = None


class AutoFilledInfo(BaseModel):
    team: bool
    work_center: bool
    suggested_technician: Optional[str] = None


class MaintenanceRequestResponse(BaseModel):
    id: UUID
    subject: str
    description: Optional[str] = None
    type: str
    category: str
    state: str
    allowed_transitions: list[str]
    equipment_id: Optional[UUID] = None
    work_center_id: Optional[UUID] = None
    team_id: UUID
    assigned_technician_id: Optional[UUID] = None
    scheduled_date: Optional[date] = None
    duration_hours: Optional[float] = None
    created_by: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    equipment: Optional[EquipmentBrief] = None
    work_center: Optional[WorkCenterBrief] = None
    team: Optional[TeamBrief] = None
    assigned_technician: Optional[UserBrief] = None
    creator: Optional[UserBrief] = None
    auto_filled: Optional[AutoFilledInfo] = None


# Pagination
class PageResponse(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class MaintenanceRequestListResponse(BaseModel):
    items: list[MaintenanceRequestResponse]
    pagination: PageResponse


# Equipment
class EquipmentResponse(BaseModel):
    id: UUID
    name: str
    serial_number: str
    department: Optional[str] = None
    location: Optional[str] = None
    status: str
    employee_owner_id: Optional[UUID] = None
    maintenance_team_id: Optional[UUID] = None
    default_technician_id: Optional[UUID] = None
    work_center_id: Optional[UUID] = None
    maintenance_team: Optional[TeamBrief] = None
    default_technician: Optional[UserBrief] = None
    work_center: Optional[WorkCenterBrief] = None
    model_config = ConfigDict(from_attributes=True)


class EquipmentListResponse(BaseModel):
    items: list[EquipmentResponse]
    pagination: PageResponse


# Work centers / teams
class WorkCenterResponse(BaseModel):
    id: UUID
    name: str
    code: str
    default_team_id: Optional[UUID] = None
    default_team: Optional[TeamBrief] = None
    model_config = ConfigDict(from_attributes=True)


class TeamMemberBrief(BaseModel):
    id: UUID
    name: str
    email: str
    role: str
    model_config = ConfigDict(from_attributes=True)


class TeamResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    members: list[TeamMemberBrief]


# Calendar
class CalendarResponse(BaseModel):
    month: int
    year: int
    requests_by_date: dict[str, list[MaintenanceRequestResponse]]
    total_requests: int


# Admin
class TechnicianTeamsUpdate(BaseModel):
    team_ids: list[UUID]


class TechnicianTeamsResponse(BaseModel):
    id: UUID
    name: str
    email: str
    role: str
    teams: list[TeamBrief]


# System
class HealthCheckResponse(BaseModel):
    status: str
    database: str
    version: str
