"""장소 모델 - 요청자가 등록한 수거 주소"""
import uuid

from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column

from reciapp.database import Base


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    created_by: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    balance: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    country: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    state: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    address_1: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    address_2: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    latitude: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, default=0)
