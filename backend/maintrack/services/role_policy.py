"""Role policy: visibility scopes and action permissions per role.

Every permission check in the service goes through ``ROLE_POLICIES``. An
unknown role string resolves to ``RESTRICTED_POLICY`` (sees nothing, may do
nothing) instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import UUID


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    TECHNICIAN = "technician"
    PORTAL = "portal"

    @classmethod
    def parse(cls, value: Any) -> "Role | None":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


ROLE_VALUES: tuple[str, ...] = tuple(role.value for role in Role)

# Visibility kinds.
SEE_ALL = "all"
SEE_NONE = "none"
SEE_TEAM = "team"
SEE_OWN_EQUIPMENT_REQUESTS = "own_equipment_requests"
SEE_OWNED_OR_ACTIVE_EQUIPMENT = "owned_or_active_equipment"

EQUIPMENT_CATEGORY = "equipment"
WORK_CENTER_CATEGORY = "work_center"
ACTIVE_EQUIPMENT_STATUS = "active"


@dataclass(frozen=True)
class Actor:
    """Authenticated identity as seen by the policy layer."""

    id: UUID
    role: str
    team_ids: frozenset[UUID] = frozenset()


@dataclass(frozen=True)
class RolePolicy:
    request_visibility: str
    equipment_visibility: str
    can_change_state: bool
    can_assign_technician: bool
    can_create_work_center_request: bool
    can_delete_requests: bool
    can_manage_teams: bool
    can_view_directory: bool


RESTRICTED_POLICY = RolePolicy(
    request_visibility=SEE_NONE,
    equipment_visibility=SEE_NONE,
    can_change_state=False,
    can_assign_technician=False,
    can_create_work_center_request=False,
    can_delete_requests=False,
    can_manage_teams=False,
    can_view_directory=False,
)

ROLE_POLICIES: dict[Role, RolePolicy] = {
    Role.ADMIN: RolePolicy(
        request_visibility=SEE_ALL,
        equipment_visibility=SEE_ALL,
        can_change_state=True,
        can_assign_technician=True,
        can_create_work_center_request=True,
        can_delete_requests=True,
        can_manage_teams=True,
        can_view_directory=True,
    ),
    Role.MANAGER: RolePolicy(
        request_visibility=SEE_ALL,
        equipment_visibility=SEE_ALL,
        can_change_state=True,
        can_assign_technician=True,
        can_create_work_center_request=True,
        can_delete_requests=False,
        can_manage_teams=False,
        can_view_directory=True,
    ),
    Role.TECHNICIAN: RolePolicy(
        request_visibility=SEE_TEAM,
        equipment_visibility=SEE_TEAM,
        can_change_state=True,
        can_assign_technician=False,
        can_create_work_center_request=True,
        can_delete_requests=False,
        can_manage_teams=False,
        can_view_directory=True,
    ),
    Role.PORTAL: RolePolicy(
        request_visibility=SEE_OWN_EQUIPMENT_REQUESTS,
        equipment_visibility=SEE_OWNED_OR_ACTIVE_EQUIPMENT,
        can_change_state=False,
        can_assign_technician=False,
        can_create_work_center_request=False,
        can_delete_requests=False,
        can_manage_teams=False,
        can_view_directory=False,
    ),
}

_missing_roles = set(Role) - set(ROLE_POLICIES)
if _missing_roles:
    raise RuntimeError(f"Role policy table is missing roles: {sorted(r.value for r in _missing_roles)}")


def get_role_policy(role: Any) -> RolePolicy:
    parsed = Role.parse(role)
    if parsed is None:
        return RESTRICTED_POLICY
    return ROLE_POLICIES[parsed]


@dataclass(frozen=True)
class RequestScope:
    """Subset of maintenance requests an actor may see."""

    visibility: str
    actor_id: UUID | None = None
    team_ids: frozenset[UUID] = frozenset()

    @property
    def is_unrestricted(self) -> bool:
        return self.visibility == SEE_ALL

    @property
    def is_empty(self) -> bool:
        if self.visibility == SEE_TEAM:
            return not self.team_ids
        return self.visibility not in (SEE_ALL, SEE_OWN_EQUIPMENT_REQUESTS)


@dataclass(frozen=True)
class EquipmentScope:
    """Subset of equipment an actor may see."""

    visibility: str
    actor_id: UUID | None = None
    team_ids: frozenset[UUID] = frozenset()

    @property
    def is_unrestricted(self) -> bool:
        return self.visibility == SEE_ALL

    @property
    def is_empty(self) -> bool:
        if self.visibility == SEE_TEAM:
            return not self.team_ids
        return self.visibility not in (SEE_ALL, SEE_OWNED_OR_ACTIVE_EQUIPMENT)


def request_scope(actor: Actor) -> RequestScope:
    policy = get_role_policy(actor.role)
    return RequestScope(
        visibility=policy.request_visibility,
        actor_id=actor.id,
        team_ids=frozenset(actor.team_ids),
    )


def equipment_scope(actor: Actor) -> EquipmentScope:
    policy = get_role_policy(actor.role)
    return EquipmentScope(
        visibility=policy.equipment_visibility,
        actor_id=actor.id,
        team_ids=frozenset(actor.team_ids),
    )


def can_access_request(actor: Actor, request: Any) -> bool:
    """Record-level access check used for detail reads and updates."""
    visibility = get_role_policy(actor.role).request_visibility
    if visibility == SEE_ALL:
        return True
    if visibility == SEE_OWN_EQUIPMENT_REQUESTS:
        return request.created_by == actor.id
    if visibility == SEE_TEAM:
        return request.team_id in actor.team_ids
    return False


def can_create_work_center_request(actor: Actor) -> bool:
    return get_role_policy(actor.role).can_create_work_center_request


def can_change_state(actor: Actor) -> bool:
    return get_role_policy(actor.role).can_change_state


def can_assign_technician(actor: Actor) -> bool:
    return get_role_policy(actor.role).can_assign_technician


def is_team_member(actor: Actor, team_id: UUID | None) -> bool:
    return team_id is not None and team_id in actor.team_ids


def can_delete_requests(actor: Actor) -> bool:
    return get_role_policy(actor.role).can_delete_requests


def can_manage_teams(actor: Actor) -> bool:
    return get_role_policy(actor.role).can_manage_teams


def can_view_directory(actor: Actor) -> bool:
    """Staff-only reference lists: work centers, teams, the calendar."""
    return get_role_policy(actor.role).can_view_directory
