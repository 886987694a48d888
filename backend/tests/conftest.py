"""테스트 공통 - 인메모리 SQLite, 의존성 오버라이드, 시드 데이터"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TIMEZONE", "America/Santiago")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from reciapp.api.deps import get_time_helper
from reciapp.core.identifiers import UUIDHelper
from reciapp.core.time_helper import TimeHelper
from reciapp.database import Base, get_db
from reciapp.main import app
from reciapp.models import Location, PickingPoint, PickingRoute, User
from reciapp.models.route import GLASS, METAL, PAPER, PLASTIC, UNASSIGNED_GATHERER, RouteStatus
from reciapp.models.user import UserType
from reciapp.repositories.locations import LocationsRepository
from reciapp.repositories.routes import RoutesRepository
from reciapp.repositories.users import UsersRepository

TIMEZONE = "America/Santiago"


@pytest.fixture
def time_helper() -> TimeHelper:
    return TimeHelper(TIMEZONE)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users_repo(db) -> UsersRepository:
    return UsersRepository(db)


@pytest.fixture
def locations_repo(db) -> LocationsRepository:
    return LocationsRepository(db)


@pytest.fixture
def routes_repo(db, time_helper) -> RoutesRepository:
    return RoutesRepository(db, time_helper, UUIDHelper())


@pytest.fixture
def client(session_factory, time_helper):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_time_helper] = lambda: time_helper
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def seed(db, time_helper):
    """
    g1, g2: gatherer / u1: 요청자(장소 L1, L2, L3 소유)
    open_route: Open, 미배정, 2일 후
    closed_route: Closed, 미배정, 3시간 후, 지점 S1/S2 (L1, L2)
    """
    now = time_helper.now()
    g1 = User(id="g1", username="gatherer1", firstname="Luis", lastname="Soto", type=UserType.GATHERER.value, country="CL")
    g2 = User(id="g2", username="gatherer2", firstname="Eva", lastname="Diaz", type=UserType.GATHERER.value, country="CL")
    u1 = User(id="u1", username="vecino1", firstname="Ana", lastname="Rojas", type=UserType.USER.value, country="CL")
    locations = [
        Location(id="L1", created_by="u1", name="Casa", country="CL", city="Santiago",
                 address_1="Av. Providencia 1234", address_2="Depto 56",
                 latitude=-33.42, longitude=-70.61, balance=10.5),
        Location(id="L2", created_by="u1", name="Oficina", country="CL", city="Santiago",
                 address_1="Los Leones 99", address_2="", latitude=-33.43, longitude=-70.60, balance=4),
        Location(id="L3", created_by="u1", name="Bodega", country="CL", city="Ñuñoa",
                 address_1="Irarrázaval 500", address_2="", latitude=-33.45, longitude=-70.59),
    ]
    open_route = PickingRoute(
        id="R-open", sector="Providencia", shift="AM", materials=[PLASTIC, GLASS, PAPER],
        status=RouteStatus.OPEN.value, starts_at=now + timedelta(days=2),
    )
    closed_route = PickingRoute(
        id="R", sector="Ñuñoa", shift="PM", materials=[PLASTIC, METAL],
        status=RouteStatus.CLOSED.value, gatherer_id=UNASSIGNED_GATHERER, starts_at=now + timedelta(hours=3),
    )
    closed_route.picking_points = [
        PickingPoint(id="S1", sequence=0, location_id="L1", pinned_by="u1", country="CL", city="Santiago",
                     address_1="Av. Providencia 1234", address_2="Depto 56",
                     latitude=-33.42, longitude=-70.61, materials=[PLASTIC], created_at=now),
        PickingPoint(id="S2", sequence=1, location_id="L2", pinned_by="u1", country="CL", city="Santiago",
                     address_1="Los Leones 99", address_2="",
                     latitude=-33.43, longitude=-70.60, materials=[METAL], created_at=now),
    ]
    db.add_all([g1, g2, u1, *locations, open_route, closed_route])
    db.commit()
    return {"now": now}
