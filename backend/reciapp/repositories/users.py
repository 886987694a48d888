"""사용자 조회 (읽기 전용)"""
from sqlalchemy import select
from sqlalchemy.orm import Session

from reciapp.core.errors import UserNotFound
from reciapp.models import User


class UsersRepository:
    def __init__(self, db: Session):
        self.db = db

    def find(self, user_id: str) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise UserNotFound()
        return user

    def find_by_username(self, username: str) -> User:
        user = self.db.execute(select(User).where(User.username == username)).scalar_one_or_none()
        if user is None:
            raise UserNotFound()
        return user
