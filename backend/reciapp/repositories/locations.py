"""장소 조회 (읽기 전용) - 사용자별 장소 목록, 적립 점수"""
import structlog
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from reciapp.core.errors import LocationNotFound
from reciapp.models import Location

log = structlog.get_logger(__name__)


class LocationsRepository:
    def __init__(self, db: Session):
        self.db = db

    def find(self, location_id: str) -> Location:
        location = self.db.get(Location, location_id)
        if location is None:
            raise LocationNotFound()
        return location

    def find_by_user_id(self, user_id: str) -> list[Location]:
        """등록한 장소가 없으면 빈 목록"""
        log.debug("finding_user_locations", user_id=user_id)
        stmt = select(Location).where(Location.created_by == user_id).order_by(Location.name, Location.id)
        return list(self.db.scalars(stmt).all())

    def score_by_user_id(self, user_id: str) -> int:
        """사용자 장소들의 balance 합계 (장소 없으면 0)"""
        total = self.db.execute(
            select(func.coalesce(func.sum(Location.balance), 0)).where(Location.created_by == user_id)
        ).scalar()
        return int(total or 0)
