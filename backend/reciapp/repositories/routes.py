"""수거 루트 저장소 - 루트/수거 지점 상태 전이의 유일한 기록자"""
from datetime import datetime

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from reciapp.core.errors import PickingPointMismatch, RouteAlreadyAssigned, RouteNotFound
from reciapp.core.identifiers import UUIDHelper
from reciapp.core.time_helper import TimeHelper
from reciapp.models import Location, PickingPoint, PickingRoute
from reciapp.models.route import UNASSIGNED_GATHERER, RouteStatus

log = structlog.get_logger(__name__)


class RoutesRepository:
    def __init__(self, db: Session, time_helper: TimeHelper, uuid_helper: UUIDHelper):
        self.db = db
        self.time_helper = time_helper
        self.uuid_helper = uuid_helper

    def _routes(self):
        return select(PickingRoute).options(selectinload(PickingRoute.picking_points))

    def find(self, route_id: str) -> PickingRoute:
        route = self.db.execute(self._routes().where(PickingRoute.id == route_id)).scalar_one_or_none()
        if route is None:
            raise RouteNotFound()
        return route

    def find_available(self, window_start: datetime, window_end: datetime) -> list[PickingRoute]:
        """마감(Closed) + 미배정 루트 중 시작 시각이 [start, end] 구간인 것. 없으면 빈 목록."""
        stmt = (
            self._routes()
            .where(PickingRoute.status == RouteStatus.CLOSED.value)
            .where(PickingRoute.gatherer_id == UNASSIGNED_GATHERER)
            .where(PickingRoute.starts_at.between(window_start, window_end))
            .order_by(PickingRoute.starts_at, PickingRoute.id)
        )
        return list(self.db.scalars(stmt).all())

    def find_open_shifts(self, window_start: datetime, window_end: datetime) -> list[PickingRoute]:
        """핀 접수 중(Open)인 시프트"""
        stmt = (
            self._routes()
            .where(PickingRoute.status == RouteStatus.OPEN.value)
            .where(PickingRoute.starts_at.between(window_start, window_end))
            .order_by(PickingRoute.starts_at, PickingRoute.id)
        )
        return list(self.db.scalars(stmt).all())

    def find_assigned_to_gatherer(self, gatherer_id: str) -> list[PickingRoute]:
        stmt = (
            self._routes()
            .where(PickingRoute.gatherer_id == gatherer_id)
            .where(PickingRoute.status == RouteStatus.ASSIGNED.value)
            .order_by(PickingRoute.starts_at, PickingRoute.id)
        )
        return list(self.db.scalars(stmt).all())

    def assign(self, user_id: str, route_id: str) -> None:
        """
        조건부 배정: gatherer_id가 아직 미배정 값일 때만 기록.
        동시에 여러 gatherer가 호출해도 DB의 단일 행 UPDATE가 한 건만 성공시킨다.
        """
        result = self.db.execute(
            update(PickingRoute)
            .where(PickingRoute.id == route_id)
            .where(PickingRoute.gatherer_id == UNASSIGNED_GATHERER)
            .values(gatherer_id=user_id, status=RouteStatus.ASSIGNED.value)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            self.db.commit()
            log.info("route_assigned", route_id=route_id, gatherer_id=user_id)
            return
        self.db.rollback()
        exists = self.db.execute(select(PickingRoute.id).where(PickingRoute.id == route_id)).first()
        if exists is None:
            raise RouteNotFound()
        log.info("route_already_assigned", route_id=route_id, gatherer_id=user_id)
        raise RouteAlreadyAssigned()

    def initiate(self, route_id: str) -> None:
        """중복 호출 방지(initiated_at 확인)는 호출자 책임. 종료된 루트(finished_at)는 되돌리지 않음."""
        result = self.db.execute(
            update(PickingRoute)
            .where(PickingRoute.id == route_id)
            .where(PickingRoute.finished_at.is_(None))
            .values(initiated_at=self.time_helper.now(), status=RouteStatus.INITIATED.value)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        if result.rowcount:
            log.info("route_initiated", route_id=route_id)

    def pin(self, user_id: str, location: Location, route_id: str, materials: list[str]) -> None:
        """장소의 주소/좌표를 복사해 새 수거 지점을 루트 끝에 추가"""
        sequence = self.db.execute(
            select(func.count(PickingPoint.id)).where(PickingPoint.route_id == route_id)
        ).scalar() or 0
        point = PickingPoint(
            id=self.uuid_helper.new(),
            route_id=route_id,
            sequence=sequence,
            location_id=location.id,
            pinned_by=user_id,
            name=location.name,
            country=location.country,
            city=location.city,
            state=location.state,
            address_1=location.address_1,
            address_2=location.address_2,
            latitude=location.latitude,
            longitude=location.longitude,
            materials=[m.strip() for m in materials],
            picked_at=None,
            created_at=self.time_helper.now(),
        )
        self.db.add(point)
        try:
            self.db.commit()
        except IntegrityError:
            # 같은 장소를 동시에 핀한 경우 - (route_id, location_id) 유니크 제약
            self.db.rollback()
            log.info("picking_point_already_pinned", route_id=route_id, location_id=location.id)
            return
        log.info("picking_point_pinned", route_id=route_id, location_id=location.id, picking_point_id=point.id)

    def finish_picking_point(
        self, route_id: str, picking_point_index: int, location_id: str, remaining: int
    ) -> bool:
        """
        index 위치 지점의 picked_at 기록 + 남은 지점 수(remaining) 저장.
        picked_at이 비어 있을 때만 기록하므로 동시 완료 요청도 한 번만 반영된다.
        이번 호출이 실제로 기록했으면 True.
        """
        route = self.find(route_id)
        if not 0 <= picking_point_index < len(route.picking_points):
            raise PickingPointMismatch(f"picking point index {picking_point_index} out of range")
        point = route.picking_points[picking_point_index]
        if point.location_id != location_id:
            raise PickingPointMismatch("picking point index does not match location")

        result = self.db.execute(
            update(PickingPoint)
            .where(PickingPoint.id == point.id)
            .where(PickingPoint.picked_at.is_(None))
            .values(picked_at=self.time_helper.now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            log.info("picking_point_already_finished", route_id=route_id, picking_point_id=point.id)
            return False
        self.db.execute(
            update(PickingRoute)
            .where(PickingRoute.id == route_id)
            .values(remaining_picking_points=remaining)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        log.info(
            "picking_point_finished",
            route_id=route_id,
            picking_point_id=point.id,
            location_id=location_id,
            remaining=remaining,
        )
        return True

    def finish(self, route_id: str) -> None:
        """마지막 지점 완료 시 루트 종료 기록 (finished_at이 비어 있을 때만)"""
        result = self.db.execute(
            update(PickingRoute)
            .where(PickingRoute.id == route_id)
            .where(PickingRoute.finished_at.is_(None))
            .values(finished_at=self.time_helper.now(), status=RouteStatus.FINISHED.value)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        if result.rowcount:
            log.info("route_finished", route_id=route_id)
