"""사용자 모델 (요청자 / 수거자)"""
import uuid
from enum import Enum as PyEnum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from reciapp.database import Base


class UserType(str, PyEnum):
    USER = "user"
    GATHERER = "gatherer"


class User(Base):
    """사용자 - 요청자(user)는 장소를 등록/핀, 수거자(gatherer)는 루트를 배정받아 수행"""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    firstname: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    lastname: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    type: Mapped[str] = mapped_column(String(16), nullable=False, default=UserType.USER.value)
    country: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    @property
    def is_gatherer(self) -> bool:
        return self.type == UserType.GATHERER.value
