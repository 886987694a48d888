"""초기 데모 데이터 - 요청자/수거자, 장소, 시프트 생성 (마이그레이션 후 실행)"""
import os
import sys
from datetime import timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select
from reciapp.config import get_settings
from reciapp.core.identifiers import UUIDHelper
from reciapp.core.time_helper import TimeHelper
from reciapp.database import SessionLocal
from reciapp.models import Location, PickingRoute, User
from reciapp.models.route import GLASS, METAL, PAPER, PLASTIC, RouteStatus
from reciapp.models.user import UserType


def main():
    time_helper = TimeHelper(get_settings().timezone)
    uuid_helper = UUIDHelper()
    db = SessionLocal()
    try:
        existing = db.execute(select(User).where(User.username == "gatherer1")).scalar_one_or_none()
        if existing:
            print("데모 데이터가 이미 존재합니다.")
            return
        requester = User(id=uuid_helper.new(), username="vecino1", firstname="Ana", lastname="Rojas",
                         type=UserType.USER.value, country="CL")
        gatherer = User(id=uuid_helper.new(), username="gatherer1", firstname="Luis", lastname="Soto",
                        type=UserType.GATHERER.value, country="CL")
        db.add_all([requester, gatherer])
        db.add(Location(
            id=uuid_helper.new(),
            created_by=requester.id,
            name="Casa",
            country="CL",
            city="Santiago",
            state="RM",
            address_1="Av. Providencia 1234",
            address_2="Depto 56",
            latitude=-33.4263,
            longitude=-70.6200,
        ))
        now = time_helper.now().replace(minute=0, second=0, microsecond=0)
        db.add_all([
            PickingRoute(id=uuid_helper.new(), sector="Providencia", shift="AM",
                         materials=[PLASTIC, GLASS, PAPER], status=RouteStatus.OPEN.value,
                         starts_at=now + timedelta(days=2)),
            PickingRoute(id=uuid_helper.new(), sector="Ñuñoa", shift="PM",
                         materials=[PLASTIC, METAL], status=RouteStatus.CLOSED.value,
                         starts_at=now + timedelta(hours=3)),
        ])
        db.commit()
        print(f"데모 데이터 생성 완료 (requester={requester.id}, gatherer={gatherer.id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
