"""
수거 루트 배정/시작/지점 완료/핀 처리.

각 작업은 검증 → 조회 → 권한 → 상태 순으로 확인하며, 첫 실패에서 즉시 중단한다
(이미 기록된 쓰기는 되돌리지 않음). 저장소는 필요한 기능만 Protocol로 받는다.
"""
from datetime import datetime
from typing import Protocol

import structlog

from reciapp.core.errors import (
    LocationIDEmpty,
    MaterialNotAllowed,
    MaterialsEmpty,
    PickingError,
    PickingPointIDEmpty,
    PickingPointNotInRoute,
    RouteIDEmpty,
    RouteNotFound,
    ShiftClosed,
    ShiftIDEmpty,
    ShiftNotFound,
    UserIDEmpty,
    WrongGatherer,
    WrongUserType,
)
from reciapp.core.time_helper import TimeHelper
from reciapp.models import Location, PickingRoute, User
from reciapp.models.route import RouteStatus
from reciapp.schemas.route import (
    AssignedRoutesResponse,
    AvailableRoutesResponse,
    OpenShiftsResponse,
    RouteView,
    StartRouteResponse,
)
from reciapp.schemas.user import LocationView, ScoreResponse, UserLocationsResponse
from reciapp.services.route_views import (
    available_route_view,
    route_view,
    shift_view,
    started_route_view,
)

log = structlog.get_logger(__name__)


class UserFinder(Protocol):
    def find(self, user_id: str) -> User: ...


class LocationFinder(Protocol):
    def find(self, location_id: str) -> Location: ...


class LocationLister(Protocol):
    def find_by_user_id(self, user_id: str) -> list[Location]: ...

    def score_by_user_id(self, user_id: str) -> int: ...


class RouteFinder(Protocol):
    def find(self, route_id: str) -> PickingRoute: ...


class RouteAssigner(RouteFinder, Protocol):
    def assign(self, user_id: str, route_id: str) -> None: ...


class RouteInitiator(RouteFinder, Protocol):
    def initiate(self, route_id: str) -> None: ...


class RoutePinner(RouteFinder, Protocol):
    def pin(self, user_id: str, location: Location, route_id: str, materials: list[str]) -> None: ...


class PickingPointFinisher(RouteFinder, Protocol):
    def finish_picking_point(
        self, route_id: str, picking_point_index: int, location_id: str, remaining: int
    ) -> bool: ...

    def finish(self, route_id: str) -> None: ...


class RouteWindowQuery(Protocol):
    def find_available(self, window_start: datetime, window_end: datetime) -> list[PickingRoute]: ...

    def find_open_shifts(self, window_start: datetime, window_end: datetime) -> list[PickingRoute]: ...


class GathererRouteQuery(Protocol):
    def find_assigned_to_gatherer(self, gatherer_id: str) -> list[PickingRoute]: ...


def _require(value: str | None, error: type[PickingError]) -> str:
    if value is None or not value.strip():
        raise error()
    return value


def _require_gatherer(user: User) -> None:
    if not user.is_gatherer:
        raise WrongUserType()


def assign_route(users: UserFinder, routes: RouteAssigner, user_id: str, route_id: str) -> None:
    """gatherer에게 루트 배정. 이미 본인에게 배정된 경우 쓰기 없이 성공."""
    _require(user_id, UserIDEmpty)
    _require(route_id, RouteIDEmpty)

    user = users.find(user_id)
    _require_gatherer(user)
    route = routes.find(route_id)

    log.debug("assign_route", route_id=route.id, current_gatherer=route.gatherer_id, user_id=user.id)
    if route.gatherer_id == user.id:
        return
    routes.assign(user.id, route.id)


def start_route(
    users: UserFinder, routes: RouteInitiator, time_helper: TimeHelper, user_id: str, route_id: str
) -> StartRouteResponse:
    """루트 시작 - initiated_at이 비어 있을 때만 기록 (재호출, 이미 종료된 루트는 no-op)"""
    _require(user_id, UserIDEmpty)
    _require(route_id, RouteIDEmpty)

    user = users.find(user_id)
    route = routes.find(route_id)
    _require_gatherer(user)
    if route.gatherer_id != user.id:
        raise WrongGatherer()

    if route.initiated_at is None and route.finished_at is None:
        routes.initiate(route.id)
        route = routes.find(route.id)
    else:
        log.debug("route_already_initiated", route_id=route.id, status=route.status)

    return StartRouteResponse(assigned_route=started_route_view(route, time_helper))


def finish_picking_point(
    users: UserFinder,
    routes: PickingPointFinisher,
    time_helper: TimeHelper,
    user_id: str,
    route_id: str,
    picking_point_id: str,
) -> RouteView:
    """
    수거 지점 완료. 응답에는 아직 수거되지 않은 지점만 포함.

    remaining = 대상 지점을 제외한 미수거 지점 수 (호출 전 상태 기준).
    같은 지점을 다시 완료해도 remaining은 변하지 않고 쓰기도 일어나지 않는다.
    remaining == 0 이면 이번 호출로 마지막 지점이 끝난 것이므로 Finished로 표시하고
    루트 종료(finished_at)도 기록한다.
    """
    _require(user_id, UserIDEmpty)
    _require(route_id, RouteIDEmpty)
    _require(picking_point_id, PickingPointIDEmpty)

    user = users.find(user_id)
    _require_gatherer(user)
    route = routes.find(route_id)
    if route.gatherer_id != user.id:
        raise WrongGatherer()

    target_index = -1
    target = None
    remaining = 0
    pending = []
    for i, pp in enumerate(route.picking_points):
        if pp.id == picking_point_id:
            target_index = i
            target = pp
            continue
        if not pp.is_picked:
            remaining += 1
            pending.append(pp)
    if target is None:
        raise PickingPointNotInRoute()

    already_picked = target.is_picked
    already_finished = route.finished_at is not None
    presented_status = RouteStatus.FINISHED.value if remaining == 0 else route.status
    # 쓰기 후에는 세션 객체가 만료되므로 응답은 미리 만든다
    view = route_view(route, time_helper, status=presented_status, picking_points=pending)

    if already_picked:
        log.info("picking_point_already_picked", route_id=route_id, picking_point_id=picking_point_id)
    else:
        routes.finish_picking_point(route_id, target_index, target.location_id, remaining)
    if remaining == 0 and not already_finished:
        routes.finish(route_id)

    return view


def pin_picking_point(
    users: UserFinder,
    routes: RoutePinner,
    locations: LocationFinder,
    user_id: str,
    shift_id: str,
    location_id: str,
    materials: list[str] | None,
) -> None:
    """Open 시프트에 장소를 수거 지점으로 추가. 같은 장소가 이미 있으면 쓰기 없이 성공."""
    _require(user_id, UserIDEmpty)
    _require(shift_id, ShiftIDEmpty)
    _require(location_id, LocationIDEmpty)
    cleaned = [str(m).strip() for m in (materials or [])]
    if not cleaned or any(not m for m in cleaned):
        raise MaterialsEmpty()
    cleaned = list(dict.fromkeys(cleaned))

    user = users.find(user_id)
    try:
        route = routes.find(shift_id)
    except RouteNotFound:
        raise ShiftNotFound() from None

    allowed = set(route.materials or [])
    if any(m not in allowed for m in cleaned):
        raise MaterialNotAllowed()
    if route.status != RouteStatus.OPEN.value:
        raise ShiftClosed()

    location = locations.find(location_id)
    if any(pp.location_id == location.id for pp in route.picking_points):
        log.info("picking_point_already_pinned", route_id=route.id, location_id=location.id)
        return
    routes.pin(user.id, location, route.id, cleaned)


def list_available_routes(
    routes: RouteWindowQuery, time_helper: TimeHelper, window_start: datetime, window_end: datetime
) -> AvailableRoutesResponse:
    log.info("finding_available_routes", window_start=window_start.isoformat(), window_end=window_end.isoformat())
    found = routes.find_available(window_start, window_end)
    return AvailableRoutesResponse(routes=[available_route_view(r, time_helper) for r in found])


def list_open_shifts(
    routes: RouteWindowQuery, time_helper: TimeHelper, window_start: datetime, window_end: datetime
) -> OpenShiftsResponse:
    log.info("finding_open_shifts", window_start=window_start.isoformat(), window_end=window_end.isoformat())
    found = routes.find_open_shifts(window_start, window_end)
    return OpenShiftsResponse(shifts=[shift_view(r, time_helper) for r in found])


def list_assigned_routes(
    users: UserFinder, routes: GathererRouteQuery, time_helper: TimeHelper, user_id: str
) -> AssignedRoutesResponse:
    _require(user_id, UserIDEmpty)
    user = users.find(user_id)
    _require_gatherer(user)

    found = routes.find_assigned_to_gatherer(user.id)
    log.info("found_assigned_routes", gatherer_id=user.id, count=len(found))
    return AssignedRoutesResponse(assigned_routes=[route_view(r, time_helper) for r in found])


def location_score(users: UserFinder, locations: LocationLister, user_id: str) -> ScoreResponse:
    """사용자 장소들의 적립 점수 합계"""
    _require(user_id, UserIDEmpty)
    user = users.find(user_id)
    return ScoreResponse(username=user.username, score=locations.score_by_user_id(user.id))


def user_locations(users: UserFinder, locations: LocationLister, user_id: str) -> UserLocationsResponse:
    _require(user_id, UserIDEmpty)
    user = users.find(user_id)
    found = locations.find_by_user_id(user.id)
    return UserLocationsResponse(locations=[LocationView.model_validate(loc) for loc in found])
