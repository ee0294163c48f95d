"""운영 이벤트(헬스체크, 보존 정책 실행)를 system-logs 인덱스에 기록.

기록은 best-effort입니다. 실패해도 예외를 던지지 않고
경고 로그를 남긴 뒤 False를 반환합니다.
"""

from __future__ import annotations

import logging

from elasticsearch import Elasticsearch

from .errors import EsLogLiteError
from .logs import Logs

logger = logging.getLogger(__name__)

SYSTEM_LOGS_INDEX = "system-logs"


class SystemLogger:
    def __init__(self, es: Elasticsearch | None = None, index: str = SYSTEM_LOGS_INDEX):
        self.logs = Logs(index, es)

    def log_health_check(self, status: str) -> bool:
        try:
            self.logs.info("Cluster health check", {"status": status})
        except EsLogLiteError as e:
            logger.warning(f"헬스체크 기록 실패: {e}")
            return False
        return True

    def log_retention_run(self, index: str, deleted: int) -> bool:
        try:
            self.logs.info("Retention policy run", {"index": index, "deleted": deleted})
        except EsLogLiteError as e:
            logger.warning(f"보존 정책 실행 기록 실패 ({index}): {e}")
            return False
        return True
