from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal, get_args

from .errors import ConfigurationError

LogLevel = Literal["info", "warn", "error", "debug"]

LOG_LEVELS: tuple[str, ...] = get_args(LogLevel)


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class LogRecord:
    level: LogLevel
    message: str
    metadata: dict[str, Any] = field(default_factory=dict)

    # 쓰기 시점에 기록
    timestamp: str = field(default_factory=utcnow_iso)

    def __post_init__(self) -> None:
        if self.level not in LOG_LEVELS:
            raise ConfigurationError(
                f"잘못된 로그 레벨 '{self.level}'. 가능한 값: {', '.join(LOG_LEVELS)}"
            )
        if not isinstance(self.message, str):
            raise ConfigurationError("message는 문자열이어야 합니다.")

    def to_es(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SearchHit:
    """검색 결과 단건."""

    id: str
    score: float | None
    source: dict[str, Any]

    @classmethod
    def from_es(cls, hit: dict[str, Any]) -> SearchHit:
        return cls(id=hit["_id"], score=hit.get("_score"), source=hit.get("_source", {}))
