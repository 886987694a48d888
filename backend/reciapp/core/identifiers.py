"""식별자 생성"""
import uuid


class UUIDHelper:
    def new(self) -> str:
        return str(uuid.uuid4())
