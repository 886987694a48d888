"""수거 루트 API - gatherer 배정/시작/지점 완료, 배정 가능 루트 목록"""
from datetime import timedelta

from fastapi import APIRouter, Depends, Query, status

from reciapp.api.deps import get_routes_repo, get_time_helper, get_users_repo, resolve_window
from reciapp.config import get_settings
from reciapp.core.time_helper import TimeHelper
from reciapp.repositories.routes import RoutesRepository
from reciapp.repositories.users import UsersRepository
from reciapp.schemas.route import (
    AvailableRoutesResponse,
    FinishPickingPointRequest,
    RouteActionRequest,
    RouteView,
    StartRouteResponse,
)
from reciapp.services import picking

router = APIRouter(prefix="/api/routes", tags=["routes"])


@router.get("/available", response_model=AvailableRoutesResponse)
def list_available_routes(
    window_from: str | None = Query(None, alias="from"),
    window_to: str | None = Query(None, alias="to"),
    routes: RoutesRepository = Depends(get_routes_repo),
    time_helper: TimeHelper = Depends(get_time_helper),
):
    """마감 후 아직 배정되지 않은 루트 (기본: 지금부터 HOURS_OFFSET 시간)"""
    start, end = resolve_window(
        time_helper, window_from, window_to, timedelta(hours=get_settings().hours_offset)
    )
    return picking.list_available_routes(routes, time_helper, start, end)


@router.post("/assign", status_code=status.HTTP_204_NO_CONTENT)
def assign_route(
    data: RouteActionRequest,
    users: UsersRepository = Depends(get_users_repo),
    routes: RoutesRepository = Depends(get_routes_repo),
):
    """루트 배정 - 먼저 요청한 gatherer 한 명만 성공, 나머지는 422"""
    picking.assign_route(users, routes, data.user_id, data.route_id)


@router.post("/start", response_model=StartRouteResponse)
def start_route(
    data: RouteActionRequest,
    users: UsersRepository = Depends(get_users_repo),
    routes: RoutesRepository = Depends(get_routes_repo),
    time_helper: TimeHelper = Depends(get_time_helper),
):
    """루트 시작 - 배정된 gatherer만"""
    return picking.start_route(users, routes, time_helper, data.user_id, data.route_id)


@router.post("/finish-picking-point", response_model=RouteView)
def finish_picking_point(
    data: FinishPickingPointRequest,
    users: UsersRepository = Depends(get_users_repo),
    routes: RoutesRepository = Depends(get_routes_repo),
    time_helper: TimeHelper = Depends(get_time_helper),
):
    """수거 지점 완료 - 남은 지점만 응답"""
    return picking.finish_picking_point(
        users, routes, time_helper, data.user_id, data.route_id, data.picking_point_id
    )
