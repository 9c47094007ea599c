"""Work center endpoints."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User
from ..schemas import WorkCenterResponse
from ..use_cases.work_centers import get_work_center_use_case, list_work_centers_use_case

router = APIRouter(prefix="/work-centers", tags=["work-centers"])


@router.get("", response_model=list[WorkCenterResponse])
def list_work_centers(
    search: Optional[str] = None,
    team_id: Optional[UUID] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List work centers, for request targeting and filters."""
    work_centers = list_work_centers_use_case(
        db=db,
        actor_id=current_user.id,
        search=search,
        team_id=team_id,
    )
    return [WorkCenterResponse.model_validate(item) for item in work_centers]


@router.get("/{work_center_id}", response_model=WorkCenterResponse)
def get_work_center(
    work_center_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get single work center by ID."""
    return get_work_center_use_case(db=db, actor_id=current_user.id, work_center_id=work_center_id)
