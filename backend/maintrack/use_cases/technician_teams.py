"""Admin use-case: replace a technician's team memberships."""
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..domain_errors import Forbidden, InternalError, NotFound, ValidationError
from ..models import Team, TeamMember, User
from ..security import load_actor
from ..services.role_policy import Role, can_manage_teams

logger = logging.getLogger(__name__)

_TEAM_ELIGIBLE_ROLES = (Role.TECHNICIAN.value, Role.MANAGER.value)


def update_technician_teams_use_case(
    *,
    db: Session,
    actor_id: UUID,
    technician_id: UUID,
    team_ids: list[UUID],
) -> tuple[User, list[Team]]:
    """Replace all memberships of a technician/manager in one transaction."""
    actor = load_actor(db, actor_id)
    if not can_manage_teams(actor):
        raise Forbidden("Only administrators can manage team memberships")

    technician = db.query(User).filter(User.id == technician_id).first()
    if not technician:
        raise NotFound("Technician not found")
    if technician.role not in _TEAM_ELIGIBLE_ROLES:
        raise ValidationError("User is not a technician or manager")

    unique_team_ids = list(dict.fromkeys(team_ids))
    teams: list[Team] = []
    if unique_team_ids:
        teams = db.query(Team).filter(Team.id.in_(unique_team_ids)).all()
        if len(teams) != len(unique_team_ids):
            raise ValidationError("One or more team IDs are invalid")

    wanted = {team.id for team in teams}
    try:
        existing = db.query(TeamMember).filter(TeamMember.user_id == technician.id).all()
        for membership in existing:
            if membership.team_id not in wanted:
                db.delete(membership)
        current = {membership.team_id for membership in existing}
        db.add_all(
            [TeamMember(user_id=technician.id, team_id=team.id) for team in teams if team.id not in current]
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to replace team memberships for user %s", technician.id)
        raise InternalError("Failed to update technician teams") from exc
    db.refresh(technician)

    logger.info(
        "teams.memberships_replaced user=%s teams=%s actor=%s",
        technician.id,
        [str(team.id) for team in teams],
        actor.id,
    )
    return technician, sorted(teams, key=lambda team: team.name)
