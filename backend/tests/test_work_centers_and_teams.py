from __future__ import annotations

from uuid import uuid4

import pytest

from maintrack.domain_errors import DomainError
from maintrack.use_cases.teams import list_teams_use_case, sorted_members
from maintrack.use_cases.work_centers import get_work_center_use_case, list_work_centers_use_case


@pytest.fixture()
def org(factory):
    mechanics = factory.team("Mechanics")
    electrical = factory.team("Electrical")
    return {
        "mechanics": mechanics,
        "electrical": electrical,
        "admin": factory.user("admin"),
        "manager": factory.user("manager"),
        "mechanic": factory.user("technician", mechanics, name="Zed Mechanic"),
        "fitter": factory.user("technician", mechanics, electrical, name="Ann Fitter"),
        "idle": factory.user("technician"),
        "employee": factory.user("portal"),
        "paint_shop": factory.work_center("Paint Shop"),
        "assembly": factory.work_center("Assembly Line", team=mechanics),
        "boiler": factory.work_center("Boiler Room", team=electrical),
    }


def _work_center_names(db, user, **kwargs):
    return [item.name for item in list_work_centers_use_case(db=db, actor_id=user.id, **kwargs)]


@pytest.mark.parametrize("role_key", ["admin", "manager", "mechanic", "idle"])
def test_staff_list_every_work_center_by_name(db, org, role_key) -> None:
    assert _work_center_names(db, org[role_key]) == ["Assembly Line", "Boiler Room", "Paint Shop"]


def test_work_center_filters(db, org) -> None:
    admin = org["admin"]

    assert _work_center_names(db, admin, search="line") == ["Assembly Line"]
    assert _work_center_names(db, admin, search=org["boiler"].code.lower()) == ["Boiler Room"]
    assert _work_center_names(db, admin, search="%") == []
    assert _work_center_names(db, admin, search="   ") == ["Assembly Line", "Boiler Room", "Paint Shop"]
    assert _work_center_names(db, admin, team_id=org["mechanics"].id) == ["Assembly Line"]
    assert _work_center_names(db, admin, search="room", team_id=org["mechanics"].id) == []


def test_work_center_detail_includes_default_team(db, org) -> None:
    work_center = get_work_center_use_case(db=db, actor_id=org["mechanic"].id, work_center_id=org["assembly"].id)

    assert work_center.default_team.name == "Mechanics"

    with pytest.raises(DomainError) as exc_info:
        get_work_center_use_case(db=db, actor_id=org["admin"].id, work_center_id=uuid4())
    assert exc_info.value.code == "NOT_FOUND"
    assert exc_info.value.message == "Work center not found"


def test_portal_user_cannot_browse_work_centers(db, org) -> None:
    with pytest.raises(DomainError) as exc_info:
        list_work_centers_use_case(db=db, actor_id=org["employee"].id)
    assert exc_info.value.code == "FORBIDDEN"

    with pytest.raises(DomainError):
        get_work_center_use_case(db=db, actor_id=org["employee"].id, work_center_id=org["assembly"].id)


@pytest.mark.parametrize("role_key", ["admin", "manager"])
def test_admin_and_manager_see_all_teams(db, org, role_key) -> None:
    teams = list_teams_use_case(db=db, actor_id=org[role_key].id)

    assert [team.name for team in teams] == ["Electrical", "Mechanics"]
    mechanics = teams[1]
    assert [user.name for user in sorted_members(mechanics)] == ["Ann Fitter", "Zed Mechanic"]


def test_technician_sees_only_own_teams(db, org) -> None:
    assert [team.name for team in list_teams_use_case(db=db, actor_id=org["mechanic"].id)] == ["Mechanics"]
    assert [team.name for team in list_teams_use_case(db=db, actor_id=org["fitter"].id)] == [
        "Electrical",
        "Mechanics",
    ]
    assert list_teams_use_case(db=db, actor_id=org["idle"].id) == []


def test_portal_user_cannot_list_teams(db, org) -> None:
    with pytest.raises(DomainError) as exc_info:
        list_teams_use_case(db=db, actor_id=org["employee"].id)

    assert exc_info.value.code == "FORBIDDEN"
