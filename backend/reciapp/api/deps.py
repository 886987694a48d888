"""요청별 의존성 - 세션 단위 저장소, 시각 변환기, 조회 구간"""
from datetime import datetime, timedelta
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from reciapp.config import get_settings
from reciapp.core.errors import InvalidTimestamp
from reciapp.core.identifiers import UUIDHelper
from reciapp.core.time_helper import TimeHelper
from reciapp.database import get_db
from reciapp.repositories.locations import LocationsRepository
from reciapp.repositories.routes import RoutesRepository
from reciapp.repositories.users import UsersRepository


@lru_cache
def get_time_helper() -> TimeHelper:
    return TimeHelper(get_settings().timezone)


def get_users_repo(db: Session = Depends(get_db)) -> UsersRepository:
    return UsersRepository(db)


def get_locations_repo(db: Session = Depends(get_db)) -> LocationsRepository:
    return LocationsRepository(db)


def get_routes_repo(
    db: Session = Depends(get_db),
    time_helper: TimeHelper = Depends(get_time_helper),
) -> RoutesRepository:
    return RoutesRepository(db, time_helper, UUIDHelper())


def resolve_window(
    time_helper: TimeHelper,
    window_from: str | None,
    window_to: str | None,
    default_length: timedelta,
) -> tuple[datetime, datetime]:
    """from/to 미지정 시 [지금, 지금 + default_length]"""
    try:
        start = time_helper.from_iso8601(window_from) if window_from else time_helper.now()
        end = time_helper.from_iso8601(window_to) if window_to else start + default_length
    except ValueError:
        raise InvalidTimestamp() from None
    return start, end
