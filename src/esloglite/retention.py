"""시간 기반 로그 보존 정책.

``timestamp``가 (현재 시각 - 보존 기간)보다 엄격히 이전인 문서를
delete-by-query로 삭제합니다. 버전 충돌은 건너뛰고(conflicts=proceed)
삭제된 건수를 인덱스별로 보고합니다.

Usage:
    >>> policy = RetentionPolicy(es)
    >>> policy.enforce_retention("app-logs", 30).deleted
    12
    >>> report = policy.enforce_retention(["app-logs", "audit-logs"], 7)
    >>> report.total_deleted, [r.index for r in report.failed]
    (40, [])
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, overload

from elasticsearch import Elasticsearch

from .client import resolve_client, response_body
from .config import DEFAULT_RETENTION_DAYS
from .errors import (
    ConfigurationError,
    EsLogLiteError,
    PartialFailure,
    RetentionError,
    translate_errors,
)

if TYPE_CHECKING:
    from .system_logger import SystemLogger

logger = logging.getLogger(__name__)

TIMESTAMP_FIELD = "timestamp"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _validate_days(retention_days: Any) -> int:
    if isinstance(retention_days, bool) or not isinstance(retention_days, int):
        raise ConfigurationError(f"보존 기간은 정수여야 합니다: {retention_days!r}")
    if retention_days < 0:
        raise ConfigurationError(f"보존 기간은 0 이상이어야 합니다: {retention_days}")
    return retention_days


def compute_cutoff(retention_days: int, now: datetime) -> datetime:
    """cutoff = now - retention_days."""
    return now - timedelta(days=_validate_days(retention_days))


def build_expire_query(cutoff: datetime) -> dict[str, Any]:
    """cutoff보다 엄격히 이전(lt)인 문서 매칭."""
    return {"range": {TIMESTAMP_FIELD: {"lt": cutoff.isoformat()}}}


@dataclass
class RetentionResult:
    """단일 인덱스 보존 정책 적용 결과."""

    index: str
    deleted: int = 0
    cutoff: datetime | None = None
    partial: PartialFailure | None = None
    error: EsLogLiteError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RetentionReport:
    """여러 인덱스 보존 정책 적용 결과 모음."""

    results: list[RetentionResult] = field(default_factory=list)

    @property
    def total_deleted(self) -> int:
        return sum(r.deleted for r in self.results)

    @property
    def succeeded(self) -> list[RetentionResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[RetentionResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    def __getitem__(self, index: str) -> RetentionResult:
        for r in self.results:
            if r.index == index:
                return r
        raise KeyError(index)


class RetentionPolicy:
    """delete-by-query 기반 보존 정책 실행기."""

    def __init__(
        self,
        es: Elasticsearch | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        audit: SystemLogger | None = None,
    ):
        self.es = resolve_client(es)
        self.clock = clock
        self.retention_days = _validate_days(retention_days)
        self.audit = audit

    @overload
    def enforce_retention(self, indices: str, retention_days: int | None = ...) -> RetentionResult: ...

    @overload
    def enforce_retention(
        self, indices: Sequence[str], retention_days: int | None = ...
    ) -> RetentionReport: ...

    def enforce_retention(
        self,
        indices: str | Sequence[str],
        retention_days: int | None = None,
    ) -> RetentionResult | RetentionReport:
        """보존 기간보다 오래된 문서 삭제.

        Args:
            indices: 인덱스명 하나 또는 목록
            retention_days: 보존 기간 (일, 0 이상). None이면 생성 시 지정한 기본값

        Returns:
            단일 인덱스면 RetentionResult, 목록이면 RetentionReport.

        Raises:
            ConfigurationError: 보존 기간이나 인덱스명이 잘못된 경우.
            RetentionError, ConnectivityError: 단일 인덱스 적용이 실패한 경우.
                목록으로 호출하면 인덱스별 실패는 결과에 담기고 던지지 않습니다.
        """
        if retention_days is None:
            retention_days = self.retention_days
        cutoff = compute_cutoff(retention_days, self.clock())
        if isinstance(indices, str):
            return self._enforce_one(indices, retention_days, cutoff)

        names = list(indices)
        if not names or not all(isinstance(n, str) and n for n in names):
            raise ConfigurationError(f"인덱스 목록이 잘못되었습니다: {indices!r}")

        report = RetentionReport()
        for index in names:
            try:
                report.results.append(self._enforce_one(index, retention_days, cutoff))
            except EsLogLiteError as e:
                logger.error(f"'{index}' 보존 정책 적용 실패, 다음 인덱스 계속: {e}")
                report.results.append(RetentionResult(index=index, cutoff=cutoff, error=e))

        logger.info(
            f"보존 정책 적용 완료: 총 {report.total_deleted}건 삭제, "
            f"실패 {len(report.failed)}/{len(report.results)}개 인덱스"
        )
        return report

    def _enforce_one(self, index: str, retention_days: int, cutoff: datetime) -> RetentionResult:
        if not index:
            raise ConfigurationError("인덱스 이름이 비어 있습니다.")

        logger.info(
            f"'{index}' 보존 정책 적용: {retention_days}일 이내 로그 유지 (cutoff={cutoff.isoformat()})"
        )

        with translate_errors("enforce retention", index, error_cls=RetentionError):
            resp = self.es.delete_by_query(
                index=index,
                query=build_expire_query(cutoff),
                conflicts="proceed",
                refresh=True,
                wait_for_completion=True,
            )
        body = response_body(resp)

        result = RetentionResult(
            index=index,
            deleted=int(body.get("deleted", 0)),
            cutoff=cutoff,
        )
        conflicts = int(body.get("version_conflicts", 0))
        failures = list(body.get("failures") or [])
        if conflicts or failures:
            result.partial = PartialFailure(version_conflicts=conflicts, failures=failures)
            logger.warning(
                f"'{index}' 일부 문서 삭제 실패: 충돌 {conflicts}건, 오류 {len(failures)}건 "
                f"(삭제 {result.deleted}건)"
            )

        if result.deleted == 0:
            logger.info(f"'{index}'에 {retention_days}일보다 오래된 로그가 없습니다.")
        else:
            logger.info(f"'{index}'에서 {retention_days}일보다 오래된 로그 {result.deleted}건 삭제")

        if self.audit is not None:
            self.audit.log_retention_run(index, result.deleted)
        return result

    def preview(self, index: str, retention_days: int | None = None) -> int:
        """삭제 대상 문서 수 조회 (dry run)."""
        if retention_days is None:
            retention_days = self.retention_days
        if not index:
            raise ConfigurationError("인덱스 이름이 비어 있습니다.")
        cutoff = compute_cutoff(retention_days, self.clock())
        with translate_errors("preview retention", index, error_cls=RetentionError):
            resp = self.es.count(index=index, query=build_expire_query(cutoff))
        return int(resp["count"])


def apply_retention_policy(
    indices: Sequence[str],
    retention_days: int = DEFAULT_RETENTION_DAYS,
    es: Elasticsearch | None = None,
) -> RetentionReport:
    """여러 인덱스에 보존 정책 적용. 인덱스별 실패는 보고서에 기록."""
    if isinstance(indices, str):
        indices = [indices]
    return RetentionPolicy(es).enforce_retention(list(indices), retention_days)
