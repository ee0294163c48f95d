"""클러스터 상태 및 API Key 확인 (읽기 전용)."""

from __future__ import annotations

import logging
from typing import Literal

from elasticsearch import Elasticsearch

from .client import resolve_client, response_body
from .errors import translate_errors

logger = logging.getLogger(__name__)

ClusterStatus = Literal["green", "yellow", "red"]
HealthLevel = Literal["healthy", "degraded", "unhealthy"]

_HEALTH_LEVELS: dict[str, HealthLevel] = {
    "green": "healthy",
    "yellow": "degraded",
    "red": "unhealthy",
}


def to_health_level(status: str) -> HealthLevel:
    """ES 클러스터 색상을 healthy/degraded/unhealthy로 변환. 알 수 없는 값은 unhealthy."""
    return _HEALTH_LEVELS.get(status, "unhealthy")


class ClusterHealth:
    def __init__(self, es: Elasticsearch | None = None):
        self.es = resolve_client(es)

    def get_health(self) -> ClusterStatus:
        """클러스터 상태 조회. 'green', 'yellow', 'red' 중 하나."""
        with translate_errors("cluster health"):
            health = response_body(self.es.cluster.health())

        status: ClusterStatus = health["status"]
        logger.info(f"Cluster Health: {status}")
        if status != "green":
            logger.warning(f"클러스터 상태가 정상이 아닙니다: {status}")
        return status

    def is_healthy(self) -> bool:
        return self.get_health() == "green"


def validate_api_key(es: Elasticsearch | None = None) -> bool:
    """API Key 조회 가능 여부 확인.

    Returns:
        등록된 API Key가 하나 이상이면 True.

    Raises:
        OperationError: 권한 부족 등으로 조회가 거부된 경우.
        ConnectivityError: 엔진에 연결할 수 없는 경우.
    """
    client = resolve_client(es)
    with translate_errors("validate api key"):
        resp = response_body(client.security.get_api_key())

    api_keys = resp.get("api_keys") or []
    if not api_keys:
        logger.warning("Elasticsearch에 등록된 API Key가 없습니다.")
        return False

    logger.info(f"API Key 확인 완료: {len(api_keys)}개")
    return True
