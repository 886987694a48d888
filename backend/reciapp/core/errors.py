"""도메인 오류 - 종류(kind)별로 HTTP 상태에 1:1 매핑"""
from enum import Enum

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

log = structlog.get_logger(__name__)


class ErrorKind(str, Enum):
    BAD_INPUT = "bad_input"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    UNPROCESSABLE = "unprocessable"
    INTERNAL = "internal"


HTTP_STATUS_BY_KIND = {
    ErrorKind.BAD_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNPROCESSABLE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class PickingError(Exception):
    """모든 도메인 오류의 기반. 하위 클래스가 kind/message 지정."""

    kind: ErrorKind = ErrorKind.INTERNAL
    message: str = "내부 오류가 발생했습니다"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BadInput(PickingError):
    kind = ErrorKind.BAD_INPUT
    message = "잘못된 요청입니다"


class NotFound(PickingError):
    kind = ErrorKind.NOT_FOUND
    message = "찾을 수 없습니다"


class Forbidden(PickingError):
    kind = ErrorKind.FORBIDDEN
    message = "권한이 없습니다"


class Conflict(PickingError):
    kind = ErrorKind.CONFLICT
    message = "현재 상태에서는 처리할 수 없습니다"


class Unprocessable(PickingError):
    kind = ErrorKind.UNPROCESSABLE
    message = "처리할 수 없는 요청입니다"


# 입력값
class UserIDEmpty(BadInput):
    message = "user_id는 비어 있을 수 없습니다"


class RouteIDEmpty(BadInput):
    message = "route_id는 비어 있을 수 없습니다"


class ShiftIDEmpty(BadInput):
    message = "shift_id는 비어 있을 수 없습니다"


class LocationIDEmpty(BadInput):
    message = "location_id는 비어 있을 수 없습니다"


class PickingPointIDEmpty(BadInput):
    message = "picking_point_id는 비어 있을 수 없습니다"


class MaterialsEmpty(BadInput):
    message = "materials는 비어 있을 수 없습니다"


class InvalidTimestamp(BadInput):
    message = "시각은 YYYY-MM-DDTHH:MM:SS±HHMM 형식이어야 합니다"


# 조회 실패
class UserNotFound(NotFound):
    message = "사용자를 찾을 수 없습니다"


class RouteNotFound(NotFound):
    message = "루트를 찾을 수 없습니다"


class ShiftNotFound(NotFound):
    message = "시프트를 찾을 수 없습니다"


class LocationNotFound(NotFound):
    message = "장소를 찾을 수 없습니다"


# 권한
class WrongUserType(Forbidden):
    message = "gatherer 사용자만 가능합니다"


class WrongGatherer(Forbidden):
    message = "다른 gatherer에게 배정된 루트입니다"


# 상태 충돌
class RouteAlreadyAssigned(Unprocessable):
    message = "이미 다른 gatherer에게 배정된 루트입니다"


class ShiftClosed(Conflict):
    message = "마감된 시프트라 수거 지점을 더 받을 수 없습니다"


class MaterialNotAllowed(Unprocessable):
    message = "허용되지 않은 재질이 포함되어 있습니다"


class PickingPointNotInRoute(Unprocessable):
    message = "해당 수거 지점이 루트에 없습니다"


# 저장소 불일치
class PickingPointMismatch(PickingError):
    message = "수거 지점 위치가 조회 시점과 다릅니다"


def _error_response(kind: ErrorKind, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_STATUS_BY_KIND[kind],
        content={"detail": message, "kind": kind.value},
    )


async def picking_error_handler(request: Request, exc: PickingError) -> JSONResponse:
    if exc.kind == ErrorKind.INTERNAL:
        log.error("request_failed", path=request.url.path, error=exc.message)
    else:
        log.info("request_rejected", path=request.url.path, kind=exc.kind.value, error=exc.message)
    return _error_response(exc.kind, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 본문 파싱 실패는 bad_input(400)으로 통일"""
    log.info("request_rejected", path=request.url.path, kind=ErrorKind.BAD_INPUT.value, errors=exc.errors())
    return _error_response(ErrorKind.BAD_INPUT, "요청 본문을 해석할 수 없습니다")


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    log.error("store_failed", path=request.url.path, error=str(exc))
    return _error_response(ErrorKind.INTERNAL, "저장소 오류가 발생했습니다")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PickingError, picking_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
