from __future__ import annotations

import itertools
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from maintrack import models
from maintrack.database import Base, build_session_factory

_serials = itertools.count(1)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


class Factory:
    """Small helpers to insert rows directly, bypassing use-case validation."""

    def __init__(self, db):
        self.db = db

    def team(self, name: str) -> models.Team:
        team = models.Team(name=name)
        self.db.add(team)
        self.db.commit()
        return team

    def user(self, role: str, *teams: models.Team, name: str | None = None) -> models.User:
        index = next(_serials)
        user = models.User(
            name=name or f"{role.title()} {index}",
            email=f"{role}{index}@maintrack.local",
            password_hash="not-a-real-hash",
            role=role,
        )
        self.db.add(user)
        self.db.flush()
        for team in teams:
            self.db.add(models.TeamMember(team_id=team.id, user_id=user.id))
        self.db.commit()
        return user

    def work_center(self, name: str, team: models.Team | None = None) -> models.WorkCenter:
        work_center = models.WorkCenter(
            name=name,
            code=f"WC-{next(_serials)}",
            default_team_id=team.id if team else None,
        )
        self.db.add(work_center)
        self.db.commit()
        return work_center

    def equipment(
        self,
        name: str,
        *,
        team: models.Team | None = None,
        technician: models.User | None = None,
        owner: models.User | None = None,
        status: str = "active",
        department: str | None = None,
    ) -> models.Equipment:
        equipment = models.Equipment(
            name=name,
            serial_number=f"SN-{next(_serials):05d}",
            status=status,
            department=department,
            maintenance_team_id=team.id if team else None,
            default_technician_id=technician.id if technician else None,
            employee_owner_id=owner.id if owner else None,
        )
        self.db.add(equipment)
        self.db.commit()
        return equipment

    def request(
        self,
        subject: str,
        *,
        team: models.Team,
        created_by: models.User,
        equipment: models.Equipment | None = None,
        work_center: models.WorkCenter | None = None,
        state: str = "new",
        technician: models.User | None = None,
        type: str = "corrective",
        scheduled_date: date | None = None,
    ) -> models.MaintenanceRequest:
        request = models.MaintenanceRequest(
            subject=subject,
            type=type,
            category="work_center" if work_center is not None else "equipment",
            state=state,
            equipment_id=equipment.id if equipment else None,
            work_center_id=work_center.id if work_center else None,
            team_id=team.id,
            assigned_technician_id=technician.id if technician else None,
            created_by=created_by.id,
            scheduled_date=scheduled_date,
        )
        self.db.add(request)
        self.db.commit()
        return request


@pytest.fixture()
def factory(db):
    return Factory(db)
