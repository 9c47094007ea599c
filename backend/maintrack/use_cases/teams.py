"""Team listing, narrowed to own teams for technicians."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from ..models import Team, TeamMember, User
from ..security import load_staff_actor
from ..services.role_policy import SEE_TEAM, request_scope


def list_teams_use_case(*, db: Session, actor_id: UUID) -> list[Team]:
    """Teams ordered by name with their members loaded.

    A technician only sees the teams they belong to, which is the same set
    that bounds their request visibility.
    """
    actor = load_staff_actor(db, actor_id)
    scope = request_scope(actor)

    query = db.query(Team).options(selectinload(Team.members).selectinload(TeamMember.user))
    if scope.visibility == SEE_TEAM:
        if not scope.team_ids:
            return []
        query = query.filter(Team.id.in_(tuple(scope.team_ids)))
    return query.order_by(Team.name.asc()).all()


def sorted_members(team: Team) -> list[User]:
    return sorted((membership.user for membership in team.members), key=lambda user: (user.name, str(user.id)))
