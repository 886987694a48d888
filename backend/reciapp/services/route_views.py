"""루트 → 응답 형태 변환 (누가, 어느 단계에서 어떤 지점을 보는지)"""
from collections.abc import Iterable

from reciapp.core.time_helper import TimeHelper
from reciapp.models import PickingPoint, PickingRoute
from reciapp.schemas.route import (
    AvailableRouteView,
    PickingPointView,
    RouteView,
    ShiftView,
    StartedPickingPointView,
    StartedRouteView,
)


def picking_point_view(pp: PickingPoint) -> PickingPointView:
    return PickingPointView(
        id=pp.id,
        location_id=pp.location_id,
        country=pp.country,
        city=pp.city,
        latitude=pp.latitude,
        longitude=pp.longitude,
        address_1=pp.address_1,
        address_2=pp.address_2,
        materials=list(pp.materials or []),
    )


def started_picking_point_view(pp: PickingPoint) -> StartedPickingPointView:
    return StartedPickingPointView(
        country=pp.country,
        city=pp.city,
        address_1=pp.address_1,
        address_2=pp.address_2,
        location_id=pp.location_id,
        latitude=pp.latitude,
        longitude=pp.longitude,
        materials=list(pp.materials or []),
    )


def route_view(
    route: PickingRoute,
    time_helper: TimeHelper,
    status: str | None = None,
    picking_points: Iterable[PickingPoint] | None = None,
) -> RouteView:
    """status/picking_points를 넘기면 저장된 값 대신 사용 (완료 응답 등)"""
    points = route.picking_points if picking_points is None else picking_points
    return RouteView(
        id=route.id,
        materials=list(route.materials or []),
        sector=route.sector,
        status=status or route.status,
        shift=route.shift,
        date=time_helper.to_iso8601(route.starts_at),
        picking_points=[picking_point_view(pp) for pp in points],
    )


def started_route_view(route: PickingRoute, time_helper: TimeHelper) -> StartedRouteView:
    return StartedRouteView(
        id=route.id,
        materials=list(route.materials or []),
        sector=route.sector,
        status=route.status,
        shift=route.shift,
        date=time_helper.to_iso8601(route.starts_at),
        picking_points=[started_picking_point_view(pp) for pp in route.picking_points],
    )


def available_route_view(route: PickingRoute, time_helper: TimeHelper) -> AvailableRouteView:
    base = route_view(route, time_helper)
    return AvailableRouteView(**base.model_dump(), formatted_date=time_helper.to_display_format(route.starts_at))


def shift_view(route: PickingRoute, time_helper: TimeHelper) -> ShiftView:
    return ShiftView(
        id=route.id,
        materials=list(route.materials or []),
        sector=route.sector,
        shift=route.shift,
        date=time_helper.to_iso8601(route.starts_at),
        formatted_date=time_helper.to_display_format(route.starts_at),
    )
