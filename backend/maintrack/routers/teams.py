"""Team endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User
from ..schemas import TeamMemberBrief, TeamResponse
from ..use_cases.teams import list_teams_use_case, sorted_members

router = APIRouter(prefix="/teams", tags=["teams"])


@router.get("", response_model=list[TeamResponse])
def list_teams(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    teams = list_teams_use_case(db=db, actor_id=current_user.id)
    return [
        TeamResponse(
            id=team.id,
            name=team.name,
            description=team.description,
            members=[TeamMemberBrief.model_validate(user) for user in sorted_members(team)],
        )
        for team in teams
    ]
