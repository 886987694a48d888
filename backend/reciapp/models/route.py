"""수거 루트(시프트) / 수거 지점 모델"""
from datetime import datetime, timezone
from enum import Enum as PyEnum

from sqlalchemy import JSON, Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reciapp.database import Base, UTCDateTime

# 조건부 배정(assign)이 이 값과 비교하므로 NULL 대신 예약 문자열로 저장
UNASSIGNED_GATHERER = "unassigned"

PLASTIC = "plastic"
METAL = "metal"
GLASS = "glass"
PAPER = "paper"
TECHNOLOGY = "technology"


class RouteStatus(str, PyEnum):
    OPEN = "Open"
    CLOSED = "Closed"
    ASSIGNED = "Assigned"
    INITIATED = "Initiated"
    FINISHED = "Finished"
    CANCELLED = "Cancelled"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PickingRoute(Base):
    """수거 루트 - Open(핀 접수) → Closed → Assigned → Initiated → Finished"""

    __tablename__ = "picking_routes"
    __table_args__ = (
        Index("ix_picking_routes_status_starts_at", "status", "starts_at"),
        Index("ix_picking_routes_gatherer_status", "gatherer_id", "status"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    sector: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    shift: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    materials: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=RouteStatus.OPEN.value)
    gatherer_id: Mapped[str] = mapped_column(String(64), nullable=False, default=UNASSIGNED_GATHERER)
    starts_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    initiated_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    finished_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    remaining_picking_points: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)

    picking_points: Mapped[list["PickingPoint"]] = relationship(
        "PickingPoint",
        back_populates="route",
        cascade="all, delete-orphan",
        order_by="PickingPoint.sequence",
    )


class PickingPoint(Base):
    """수거 지점 - 핀 시점의 주소/좌표를 복사해 보관 (이후 장소 변경과 무관)"""

    __tablename__ = "picking_points"
    __table_args__ = (
        UniqueConstraint("route_id", "location_id", name="uq_picking_points_route_location"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    route_id: Mapped[str] = mapped_column(
        ForeignKey("picking_routes.id", ondelete="CASCADE"), index=True, nullable=False
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    location_id: Mapped[str] = mapped_column(String(64), nullable=False)
    pinned_by: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    country: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    state: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    address_1: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    address_2: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    latitude: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    materials: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    picked_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)

    route: Mapped["PickingRoute"] = relationship("PickingRoute", back_populates="picking_points")

    @property
    def is_picked(self) -> bool:
        return self.picked_at is not None
