"""시프트 API - 요청자의 수거 지점 핀, 오픈 시프트 목록"""
from datetime import timedelta

from fastapi import APIRouter, Depends, Query, status

from reciapp.api.deps import (
    get_locations_repo,
    get_routes_repo,
    get_time_helper,
    get_users_repo,
    resolve_window,
)
from reciapp.config import get_settings
from reciapp.core.time_helper import TimeHelper
from reciapp.repositories.locations import LocationsRepository
from reciapp.repositories.routes import RoutesRepository
from reciapp.repositories.users import UsersRepository
from reciapp.schemas.route import OpenShiftsResponse, PinPickingPointRequest
from reciapp.services import picking

router = APIRouter(prefix="/api/shifts", tags=["shifts"])


@router.get("/open", response_model=OpenShiftsResponse)
def list_open_shifts(
    window_from: str | None = Query(None, alias="from"),
    window_to: str | None = Query(None, alias="to"),
    routes: RoutesRepository = Depends(get_routes_repo),
    time_helper: TimeHelper = Depends(get_time_helper),
):
    """핀 접수 중인 시프트 (기본: 지금부터 DAYS_OFFSET 일)"""
    start, end = resolve_window(
        time_helper, window_from, window_to, timedelta(days=get_settings().days_offset)
    )
    return picking.list_open_shifts(routes, time_helper, start, end)


@router.post("/pin", status_code=status.HTTP_204_NO_CONTENT)
def pin_picking_point(
    data: PinPickingPointRequest,
    users: UsersRepository = Depends(get_users_repo),
    routes: RoutesRepository = Depends(get_routes_repo),
    locations: LocationsRepository = Depends(get_locations_repo),
):
    picking.pin_picking_point(
        users, routes, locations, data.user_id, data.shift_id, data.location_id, data.materials
    )
