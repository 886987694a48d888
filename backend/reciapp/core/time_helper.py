"""시각 변환 - 설정 타임존 기준 ISO-8601(±HHMM) 직렬화/파싱"""
import re
from datetime import datetime
from zoneinfo import ZoneInfo

ISO8601_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
DISPLAY_FORMAT = "%d/%m/%Y %H:%M"
_ISO8601_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{4}$")


class TimeHelper:
    """타임존 이름은 생성 시 검증 (잘못된 이름이면 ZoneInfoNotFoundError)"""

    def __init__(self, timezone: str):
        self.timezone = timezone
        self._zone = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self._zone)

    def to_iso8601(self, d: datetime) -> str:
        return d.astimezone(self._zone).strftime(ISO8601_FORMAT)

    def from_iso8601(self, value: str) -> datetime:
        """고정 오프셋 형식만 허용. 'Z', '+05:00', 소수초 등은 ValueError."""
        if not isinstance(value, str) or not _ISO8601_RE.match(value):
            raise ValueError(f"invalid ISO-8601 timestamp: {value!r}")
        return datetime.strptime(value, ISO8601_FORMAT)

    def to_display_format(self, d: datetime) -> str:
        """목록 화면용 (formatted_date)"""
        return d.astimezone(self._zone).strftime(DISPLAY_FORMAT)
