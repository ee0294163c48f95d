"""Elasticsearch 설정 관리.

설정은 호출자가 명시적으로 채워서 넘깁니다.
환경변수 로드가 필요하면 ``ESConfig.from_env()``를 직접 호출하세요.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_RETENTION_DAYS = 30

Environment = Literal["development", "staging", "production"]


@dataclass(frozen=True)
class IndexSettings:
    """인덱스 생성 시 샤드/레플리카 설정."""

    shards: int
    replicas: int

    def __post_init__(self) -> None:
        if isinstance(self.shards, bool) or not isinstance(self.shards, int) or self.shards < 1:
            raise ConfigurationError(f"shards는 1 이상의 정수여야 합니다: {self.shards!r}")
        if (
            isinstance(self.replicas, bool)
            or not isinstance(self.replicas, int)
            or self.replicas < 0
        ):
            raise ConfigurationError(f"replicas는 0 이상의 정수여야 합니다: {self.replicas!r}")

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> IndexSettings:
        """``{"shards": .., "replicas": ..}`` 형태에서 생성. 알 수 없는 키는 거부."""
        unknown = set(settings) - {"shards", "replicas"}
        if unknown:
            raise ConfigurationError(
                f"알 수 없는 인덱스 설정 키: {', '.join(sorted(unknown))} "
                "(허용: shards, replicas)"
            )
        missing = {"shards", "replicas"} - set(settings)
        if missing:
            raise ConfigurationError(f"인덱스 설정 키 누락: {', '.join(sorted(missing))}")
        return cls(shards=settings["shards"], replicas=settings["replicas"])

    def to_es(self) -> dict[str, int]:
        return {
            "number_of_shards": self.shards,
            "number_of_replicas": self.replicas,
        }


INDEX_SETTINGS: dict[str, IndexSettings] = {
    "development": IndexSettings(shards=1, replicas=0),
    "staging": IndexSettings(shards=2, replicas=1),
    "production": IndexSettings(shards=3, replicas=2),
}


def get_index_settings(environment: str) -> IndexSettings:
    """환경별 프리셋 조회.

    Raises:
        ConfigurationError: 정의되지 않은 환경인 경우.
    """
    try:
        return INDEX_SETTINGS[environment]
    except KeyError:
        raise ConfigurationError(
            f"잘못된 환경 '{environment}'. 가능한 값: {', '.join(INDEX_SETTINGS)}"
        ) from None


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} 환경변수는 정수여야 합니다: {raw!r}") from e


@dataclass(frozen=True)
class ESConfig:
    """Elasticsearch 연결 설정.

    Attributes:
        url: Elasticsearch 서버 URL (예: http://localhost:9200). 스킴이 없으면
            tls 값에 따라 http/https를 붙입니다.
        username: HTTP Basic Auth 사용자명 (password와 짝)
        password: HTTP Basic Auth 비밀번호 (username과 짝)
        api_key: API Key 인증 (Basic Auth와 동시 사용 불가)
        tls: https 전송 사용 여부
        headers: 모든 요청에 추가할 HTTP 헤더
        verify_certs: SSL 인증서 검증 여부
        ca_certs: CA 인증서 경로 (선택)
        request_timeout_s: 요청 타임아웃 (초)
        retention_days: 보존 정책 기본 기간 (일)
    """

    url: str
    username: str | None = None
    password: str | None = None
    api_key: str | None = None
    tls: bool = False
    headers: dict[str, str] = field(default_factory=dict)

    verify_certs: bool = True
    ca_certs: str | None = None
    request_timeout_s: int = 30

    retention_days: int = DEFAULT_RETENTION_DAYS

    @classmethod
    def from_env(cls) -> ESConfig:
        """환경변수(.env 포함)에서 설정 로드.

        Raises:
            ConfigurationError: ES_URL이 없거나 정수 항목 값이 잘못된 경우.
        """
        load_dotenv()
        url = os.getenv("ES_URL")
        if not url:
            raise ConfigurationError("ES_URL 환경변수를 설정하세요.")
        return cls(
            url=url,
            username=os.getenv("ES_USERNAME"),
            password=os.getenv("ES_PASSWORD"),
            api_key=os.getenv("ES_API_KEY"),
            tls=_env_flag("ES_TLS", "false"),
            verify_certs=_env_flag("ES_VERIFY_CERTS", "true"),
            ca_certs=os.getenv("ES_CA_CERTS"),
            request_timeout_s=_env_int("ES_REQUEST_TIMEOUT_S", 30),
            retention_days=_env_int("ES_RETENTION_DAYS", DEFAULT_RETENTION_DAYS),
        )
