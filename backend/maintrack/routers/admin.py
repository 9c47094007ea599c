"""Admin endpoints: technician team memberships."""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User
from ..schemas import TeamBrief, TechnicianTeamsResponse, TechnicianTeamsUpdate
from ..use_cases.technician_teams import update_technician_teams_use_case

router = APIRouter(prefix="/admin", tags=["admin"])


@router.put("/technicians/{technician_id}/teams", response_model=TechnicianTeamsResponse)
def update_technician_teams(
    technician_id: UUID,
    data: TechnicianTeamsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Replace a technician's team memberships."""
    technician, teams = update_technician_teams_use_case(
        db=db,
        actor_id=current_user.id,
        technician_id=technician_id,
        team_ids=data.team_ids,
    )
    return TechnicianTeamsResponse(
        id=technician.id,
        name=technician.name,
        email=technician.email,
        role=technician.role,
        teams=[TeamBrief.model_validate(team) for team in teams],
    )
