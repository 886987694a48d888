"""배정/시작/지점 완료/핀 - 서비스 계층 (실제 저장소 + SQLite)"""
from datetime import timedelta

import pytest
from sqlalchemy import select

from reciapp.core.errors import (
    ErrorKind,
    LocationIDEmpty,
    LocationNotFound,
    MaterialNotAllowed,
    MaterialsEmpty,
    PickingPointIDEmpty,
    PickingPointMismatch,
    PickingPointNotInRoute,
    RouteAlreadyAssigned,
    RouteIDEmpty,
    RouteNotFound,
    ShiftClosed,
    ShiftIDEmpty,
    ShiftNotFound,
    UserIDEmpty,
    UserNotFound,
    WrongGatherer,
    WrongUserType,
)
from reciapp.models import PickingPoint, PickingRoute
from reciapp.models.route import UNASSIGNED_GATHERER, RouteStatus
from reciapp.services import picking


def _route(db, route_id="R") -> PickingRoute:
    db.expire_all()
    return db.execute(select(PickingRoute).where(PickingRoute.id == route_id)).scalar_one()


def _point(db, point_id) -> PickingPoint:
    db.expire_all()
    return db.execute(select(PickingPoint).where(PickingPoint.id == point_id)).scalar_one()


def _assign_and_start(users_repo, routes_repo, time_helper, gatherer="g1"):
    picking.assign_route(users_repo, routes_repo, gatherer, "R")
    picking.start_route(users_repo, routes_repo, time_helper, gatherer, "R")


# --- assign ---

def test_assign_binds_gatherer(seed, db, users_repo, routes_repo):
    picking.assign_route(users_repo, routes_repo, "g1", "R")

    route = _route(db)
    assert route.gatherer_id == "g1"
    assert route.status == RouteStatus.ASSIGNED.value


def test_assign_is_idempotent_for_same_gatherer(seed, db, users_repo, routes_repo):
    picking.assign_route(users_repo, routes_repo, "g1", "R")
    picking.assign_route(users_repo, routes_repo, "g1", "R")

    route = _route(db)
    assert route.gatherer_id == "g1"
    assert route.status == RouteStatus.ASSIGNED.value


def test_assign_rejects_second_gatherer(seed, db, users_repo, routes_repo):
    picking.assign_route(users_repo, routes_repo, "g1", "R")

    with pytest.raises(RouteAlreadyAssigned) as exc:
        picking.assign_route(users_repo, routes_repo, "g2", "R")
    assert exc.value.kind == ErrorKind.UNPROCESSABLE
    assert _route(db).gatherer_id == "g1"


@pytest.mark.parametrize(
    "user_id, route_id, error",
    [
        ("", "R", UserIDEmpty),
        ("g1", "", RouteIDEmpty),
        ("   ", "R", UserIDEmpty),
        ("nobody", "R", UserNotFound),
        ("u1", "R", WrongUserType),
        ("g1", "missing", RouteNotFound),
    ],
)
def test_assign_rejections(seed, db, users_repo, routes_repo, user_id, route_id, error):
    with pytest.raises(error):
        picking.assign_route(users_repo, routes_repo, user_id, route_id)
    assert _route(db).gatherer_id == UNASSIGNED_GATHERER


def test_assign_checks_role_before_route_lookup(seed, users_repo, routes_repo):
    # 요청자 + 없는 루트 → 권한 오류가 먼저
    with pytest.raises(WrongUserType):
        picking.assign_route(users_repo, routes_repo, "u1", "missing")


# --- start ---

def test_start_route_initiates_once(seed, db, users_repo, routes_repo, time_helper):
    picking.assign_route(users_repo, routes_repo, "g1", "R")

    first = picking.start_route(users_repo, routes_repo, time_helper, "g1", "R")
    initiated_at = _route(db).initiated_at
    second = picking.start_route(users_repo, routes_repo, time_helper, "g1", "R")

    assert initiated_at is not None
    assert _route(db).initiated_at == initiated_at
    assert first.assigned_route.status == RouteStatus.INITIATED.value
    assert second.assigned_route.status == RouteStatus.INITIATED.value


def test_start_route_view_contains_full_stop_list(seed, users_repo, routes_repo, time_helper):
    picking.assign_route(users_repo, routes_repo, "g1", "R")

    view = picking.start_route(users_repo, routes_repo, time_helper, "g1", "R").assigned_route

    assert view.id == "R"
    assert view.materials == ["plastic", "metal"]
    assert [pp.location_id for pp in view.picking_points] == ["L1", "L2"]
    assert view.picking_points[0].materials == ["plastic"]
    assert view.picking_points[0].address_2 == "Depto 56"
    time_helper.from_iso8601(view.date)


def test_start_route_rejects_other_gatherer(seed, db, users_repo, routes_repo, time_helper):
    picking.assign_route(users_repo, routes_repo, "g1", "R")

    with pytest.raises(WrongGatherer) as exc:
        picking.start_route(users_repo, routes_repo, time_helper, "g2", "R")
    assert exc.value.kind == ErrorKind.FORBIDDEN
    assert _route(db).initiated_at is None


def test_start_route_resolves_route_before_role_check(seed, users_repo, routes_repo, time_helper):
    # 시작은 사용자 → 루트 조회 후 권한 확인
    with pytest.raises(RouteNotFound):
        picking.start_route(users_repo, routes_repo, time_helper, "u1", "missing")
    with pytest.raises(WrongUserType):
        picking.start_route(users_repo, routes_repo, time_helper, "u1", "R")



def test_start_after_all_points_finished_keeps_route_finished(seed, db, users_repo, routes_repo, time_helper):
    # 시작하지 않고 지점을 모두 완료한 뒤 늦게 들어온 시작 요청
    picking.assign_route(users_repo, routes_repo, "g1", "R")
    picking.finish_picking_point(users_repo, routes_repo, time_helper, "g1", "R", "S1")
    picking.finish_picking_point(users_repo, routes_repo, time_helper, "g1", "R", "S2")
    finished_at = _route(db).finished_at

    view = picking.start_route(users_repo, routes_repo, time_helper, "g1", "R").assigned_route

    route = _route(db)
    assert view.status == RouteStatus.FINISHED.value
    assert route.status == RouteStatus.FINISHED.value
    assert route.finished_at == finished_at
    assert route.initiated_at is None


def test_initiate_does_not_reopen_finished_route(seed, db, users_repo, routes_repo, time_helper):
    picking.assign_route(users_repo, routes_repo, "g1", "R")
    routes_repo.finish("R")

    routes_repo.initiate("R")

    route = _route(db)
    assert route.status == RouteStatus.FINISHED.value
    assert route.initiated_at is None


# --- finish picking point ---

def test_full_lifecycle(seed, db, users_repo, routes_repo, time_helper):
    picking.assign_route(users_repo, routes_repo, "g1", "R")
    route = _route(db)
    assert (route.status, route.gatherer_id) == (RouteStatus.ASSIGNED.value, "g1")

    picking.start_route(users_repo, routes_repo, time_helper, "g1", "R")
    route = _route(db)
    assert route.initiated_at is not None
    assert route.status == RouteStatus.INITIATED.value

    first = picking.finish_picking_point(users_repo, routes_repo, time_helper, "g1", "R", "S1")
    assert [pp.id for pp in first.picking_points] == ["S2"]
    assert first.status == RouteStatus.INITIATED.value

    last = picking.finish_picking_point(users_repo, routes_repo, time_helper, "g1", "R", "S2")
    assert last.picking_points == []
    assert last.status == RouteStatus.FINISHED.value

    route = _route(db)
    assert route.finished_at is not None
    assert route.status == RouteStatus.FINISHED.value
    assert route.remaining_picking_points == 0
    assert all(pp.picked_at is not None for pp in route.picking_points)


def test_finish_is_idempotent(seed, db, users_repo, routes_repo, time_helper):
    _assign_and_start(users_repo, routes_repo, time_helper)

    first = picking.finish_picking_point(users_repo, routes_repo, time_helper, "g1", "R", "S1")
    picked_at = _point(db, "S1").picked_at
    second = picking.finish_picking_point(users_repo, routes_repo, time_helper, "g1", "R", "S1")

    assert picked_at is not None
    assert _point(db, "S1").picked_at == picked_at
    assert [pp.id for pp in first.picking_points] == [pp.id for pp in second.picking_points] == ["S2"]
    assert first.status == second.status == RouteStatus.INITIATED.value
    assert _route(db).remaining_picking_points == 1


def test_finish_last_point_twice_stays_finished(seed, users_repo, routes_repo, time_helper):
    _assign_and_start(users_repo, routes_repo, time_helper)
    picking.finish_picking_point(users_repo, routes_repo, time_helper, "g1", "R", "S1")
    picking.finish_picking_point(users_repo, routes_repo, time_helper, "g1", "R", "S2")

    again = picking.finish_picking_point(users_repo, routes_repo, time_helper, "g1", "R", "S2")

    assert again.status == RouteStatus.FINISHED.value
    assert again.picking_points == []


def test_finish_in_reverse_order(seed, users_repo, routes_repo, time_helper):
    _assign_and_start(users_repo, routes_repo, time_helper)

    view = picking.finish_picking_point(users_repo, routes_repo, time_helper, "g1", "R", "S2")
    assert [pp.id for pp in view.picking_points] == ["S1"]
    assert view.status == RouteStatus.INITIATED.value

    view = picking.finish_picking_point(users_repo, routes_repo, time_helper, "g1", "R", "S1")
    assert view.status == RouteStatus.FINISHED.value


def test_finish_rejects_wrong_gatherer(seed, db, users_repo, routes_repo, time_helper):
    _assign_and_start(users_repo, routes_repo, time_helper)

    with pytest.raises(WrongGatherer) as exc:
        picking.finish_picking_point(users_repo, routes_repo, time_helper, "g2", "R", "S1")
    assert exc.value.kind == ErrorKind.FORBIDDEN
    assert _point(db, "S1").picked_at is None


def test_finish_rejects_unknown_point(seed, db, users_repo, routes_repo, time_helper):
    _assign_and_start(users_repo, routes_repo, time_helper)

    with pytest.raises(PickingPointNotInRoute) as exc:
        picking.finish_picking_point(users_repo, routes_repo, time_helper, "g1", "R", "nonexistent-id")
    assert exc.value.kind == ErrorKind.UNPROCESSABLE
    assert _route(db).remaining_picking_points is None


@pytest.mark.parametrize(
    "user_id, route_id, point_id, error",
    [
        ("", "R", "S1", UserIDEmpty),
        ("g1", "", "S1", RouteIDEmpty),
        ("g1", "R", "", PickingPointIDEmpty),
        ("u1", "R", "S1", WrongUserType),
        ("g1", "missing", "S1", RouteNotFound),
    ],
)
def test_finish_rejections(seed, users_repo, routes_repo, time_helper, user_id, route_id, point_id, error):
    _assign_and_start(users_repo, routes_repo, time_helper)

    with pytest.raises(error):
        picking.finish_picking_point(users_repo, routes_repo, time_helper, user_id, route_id, point_id)


# --- pin ---

def test_pin_appends_snapshot_of_location(seed, db, users_repo, routes_repo, locations_repo):
    picking.pin_picking_point(users_repo, routes_repo, locations_repo, "u1", "R-open", "L1", [" plastic ", "glass"])

    route = _route(db, "R-open")
    assert len(route.picking_points) == 1
    point = route.picking_points[0]
    assert point.location_id == "L1"
    assert point.pinned_by == "u1"
    assert point.materials == ["plastic", "glass"]
    assert point.address_1 == "Av. Providencia 1234"
    assert (point.latitude, point.longitude) == (-33.42, -70.61)
    assert point.picked_at is None
    assert point.id


def test_pin_keeps_pin_order(seed, db, users_repo, routes_repo, locations_repo):
    for location_id in ("L3", "L1", "L2"):
        picking.pin_picking_point(users_repo, routes_repo, locations_repo, "u1", "R-open", location_id, ["paper"])

    route = _route(db, "R-open")
    assert [pp.location_id for pp in route.picking_points] == ["L3", "L1", "L2"]


def test_pin_same_location_twice_creates_one_point(seed, db, users_repo, routes_repo, locations_repo):
    picking.pin_picking_point(users_repo, routes_repo, locations_repo, "u1", "R-open", "L1", ["plastic"])
    picking.pin_picking_point(users_repo, routes_repo, locations_repo, "u1", "R-open", "L1", ["glass"])

    route = _route(db, "R-open")
    assert [pp.location_id for pp in route.picking_points] == ["L1"]
    assert route.picking_points[0].materials == ["plastic"]


def test_pin_rejects_closed_shift(seed, users_repo, routes_repo, locations_repo):
    with pytest.raises(ShiftClosed) as exc:
        picking.pin_picking_point(users_repo, routes_repo, locations_repo, "u1", "R", "L3", ["plastic"])
    assert exc.value.kind == ErrorKind.CONFLICT


def test_pin_closed_shift_checked_before_location(seed, users_repo, routes_repo, locations_repo):
    with pytest.raises(ShiftClosed):
        picking.pin_picking_point(users_repo, routes_repo, locations_repo, "u1", "R", "missing", ["plastic"])


@pytest.mark.parametrize(
    "shift_id, location_id, materials, error",
    [
        ("", "L1", ["plastic"], ShiftIDEmpty),
        ("R-open", "", ["plastic"], LocationIDEmpty),
        ("R-open", "L1", [], MaterialsEmpty),
        ("R-open", "L1", ["plastic", "  "], MaterialsEmpty),
        ("missing", "L1", ["plastic"], ShiftNotFound),
        ("R-open", "L1", ["plastic", "metal"], MaterialNotAllowed),
        ("R-open", "missing", ["plastic"], LocationNotFound),
    ],
)
def test_pin_rejections(seed, db, users_repo, routes_repo, locations_repo, shift_id, location_id, materials, error):
    with pytest.raises(error):
        picking.pin_picking_point(users_repo, routes_repo, locations_repo, "u1", shift_id, location_id, materials)
    assert _route(db, "R-open").picking_points == []


def test_pin_unknown_user(seed, users_repo, routes_repo, locations_repo):
    with pytest.raises(UserNotFound):
        picking.pin_picking_point(users_repo, routes_repo, locations_repo, "nobody", "R-open", "L1", ["plastic"])


# --- listings ---

def test_available_routes_only_closed_and_unassigned(seed, users_repo, routes_repo, time_helper):
    now = seed["now"]
    listed = picking.list_available_routes(routes_repo, time_helper, now, now + timedelta(hours=12))
    assert [r.id for r in listed.routes] == ["R"]
    assert listed.routes[0].formatted_date
    assert [pp.id for pp in listed.routes[0].picking_points] == ["S1", "S2"]

    picking.assign_route(users_repo, routes_repo, "g1", "R")
    listed = picking.list_available_routes(routes_repo, time_helper, now, now + timedelta(hours=12))
    assert listed.routes == []


def test_available_routes_respects_window(seed, routes_repo, time_helper):
    now = seed["now"]
    listed = picking.list_available_routes(routes_repo, time_helper, now, now + timedelta(hours=1))
    assert listed.routes == []


def test_open_shifts(seed, routes_repo, time_helper):
    now = seed["now"]
    listed = picking.list_open_shifts(routes_repo, time_helper, now, now + timedelta(days=7))
    assert [s.id for s in listed.shifts] == ["R-open"]
    assert listed.shifts[0].materials == ["plastic", "glass", "paper"]

    listed = picking.list_open_shifts(routes_repo, time_helper, now, now + timedelta(days=1))
    assert listed.shifts == []


def test_assigned_routes_for_gatherer(seed, users_repo, routes_repo, time_helper):
    assert picking.list_assigned_routes(users_repo, routes_repo, time_helper, "g1").assigned_routes == []

    picking.assign_route(users_repo, routes_repo, "g1", "R")

    listed = picking.list_assigned_routes(users_repo, routes_repo, time_helper, "g1")
    assert [r.id for r in listed.assigned_routes] == ["R"]
    assert listed.assigned_routes[0].status == RouteStatus.ASSIGNED.value
    assert picking.list_assigned_routes(users_repo, routes_repo, time_helper, "g2").assigned_routes == []
    with pytest.raises(WrongUserType):
        picking.list_assigned_routes(users_repo, routes_repo, time_helper, "u1")


# --- users / locations ---

def test_location_score(seed, users_repo, locations_repo):
    score = picking.location_score(users_repo, locations_repo, "u1")
    assert (score.username, score.score) == ("vecino1", 14)

    assert picking.location_score(users_repo, locations_repo, "g1").score == 0


def test_user_locations(seed, users_repo, locations_repo):
    listed = picking.user_locations(users_repo, locations_repo, "u1")
    assert [loc.id for loc in listed.locations] == ["L3", "L1", "L2"]

    assert picking.user_locations(users_repo, locations_repo, "g1").locations == []


def test_find_by_username(seed, users_repo):
    assert users_repo.find_by_username("gatherer1").id == "g1"
    assert users_repo.find_by_username("vecino1").is_gatherer is False

    with pytest.raises(UserNotFound):
        users_repo.find_by_username("nobody")


# --- repository guards ---

@pytest.mark.parametrize("index, location_id", [(5, "L1"), (-1, "L1"), (0, "L2")])
def test_finish_picking_point_rejects_mismatched_index(seed, db, routes_repo, index, location_id):
    with pytest.raises(PickingPointMismatch) as exc:
        routes_repo.finish_picking_point("R", index, location_id, 1)
    assert exc.value.kind == ErrorKind.INTERNAL
    assert _point(db, "S1").picked_at is None
    assert _point(db, "S2").picked_at is None
