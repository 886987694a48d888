"""수거 루트/시프트 요청·응답 스키마"""
from pydantic import BaseModel, Field


# 필수값 검증(빈 문자열 → bad_input)은 서비스 계층에서 순서대로 수행하므로 기본값은 ""
class RouteActionRequest(BaseModel):
    """배정/시작 요청"""
    user_id: str = ""
    route_id: str = ""


class FinishPickingPointRequest(BaseModel):
    user_id: str = ""
    route_id: str = ""
    picking_point_id: str = ""


class PinPickingPointRequest(BaseModel):
    user_id: str = ""
    shift_id: str = ""
    location_id: str = ""
    materials: list[str] = Field(default_factory=list)


class StartedPickingPointView(BaseModel):
    """시작한 루트의 수거 지점 (gatherer 작업용)"""
    country: str
    city: str
    address_1: str
    address_2: str
    location_id: str
    latitude: float
    longitude: float
    materials: list[str] = Field(default_factory=list)


class PickingPointView(BaseModel):
    id: str
    location_id: str
    country: str
    city: str
    latitude: float
    longitude: float
    address_1: str
    address_2: str
    materials: list[str] = Field(default_factory=list)


class StartedRouteView(BaseModel):
    id: str
    materials: list[str] = Field(default_factory=list)
    sector: str
    status: str
    shift: str
    date: str
    picking_points: list[StartedPickingPointView] = Field(default_factory=list)


class StartRouteResponse(BaseModel):
    assigned_route: StartedRouteView


class RouteView(BaseModel):
    id: str
    materials: list[str] = Field(default_factory=list)
    sector: str
    status: str
    shift: str
    date: str
    picking_points: list[PickingPointView] = Field(default_factory=list)


class AvailableRouteView(RouteView):
    formatted_date: str


class AvailableRoutesResponse(BaseModel):
    routes: list[AvailableRouteView] = Field(default_factory=list)


class AssignedRoutesResponse(BaseModel):
    assigned_routes: list[RouteView] = Field(default_factory=list)


class ShiftView(BaseModel):
    id: str
    materials: list[str] = Field(default_factory=list)
    sector: str
    shift: str
    date: str
    formatted_date: str


class OpenShiftsResponse(BaseModel):
    shifts: list[ShiftView] = Field(default_factory=list)
