"""도메인 예외 정의 및 Elasticsearch 예외 변환.

모든 공개 연산은 ``translate_errors``로 감싸서 저수준 예외를
작업명/대상을 담은 도메인 예외로 바꿔 다시 던집니다.
원래 예외는 ``__cause__``와 ``cause`` 속성으로 보존됩니다.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from elastic_transport import TransportError
from elasticsearch import ApiError

logger = logging.getLogger(__name__)


class EsLogLiteError(Exception):
    """패키지 공통 기본 예외."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        target: str | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.target = target
        self.cause = cause


class ConfigurationError(EsLogLiteError, ValueError):
    """연결 설정 오류, 잘못된 인자, 또는 초기화 전 클라이언트 접근."""


class ConnectivityError(EsLogLiteError):
    """엔진에 도달할 수 없거나 전송 계층에서 실패한 경우."""


class OperationError(EsLogLiteError):
    """도달 가능한 엔진에서 특정 작업이 실패한 경우 (인덱스 없음, 잘못된 쿼리 등)."""


class RetentionError(OperationError):
    """단일 인덱스 보존 정책 적용 실패."""


@dataclass(frozen=True)
class PartialFailure:
    """delete-by-query 중 일부 문서를 지우지 못한 내역.

    예외로 던지지 않고 결과에 첨부됩니다.
    """

    version_conflicts: int = 0
    failures: list[dict[str, Any]] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return self.version_conflicts + len(self.failures)


def _describe(operation: str, target: str | None) -> str:
    return f"{operation} 실패: '{target}'" if target else f"{operation} 실패"


@contextmanager
def translate_errors(
    operation: str,
    target: str | None = None,
    *,
    error_cls: type[OperationError] = OperationError,
) -> Iterator[None]:
    """Elasticsearch 예외를 도메인 예외로 변환.

    Args:
        operation: 작업명 (예: "create index")
        target: 대상 인덱스/문서 식별자
        error_cls: ApiError 계열에 사용할 예외 클래스

    Raises:
        ConnectivityError: TransportError 계열 (연결 거부, 타임아웃)
        OperationError: ApiError 계열 (4xx/5xx 응답)
    """
    message = _describe(operation, target)
    try:
        yield
    except EsLogLiteError:
        raise
    except TransportError as e:
        logger.error(f"{message} (연결 오류): {e}")
        raise ConnectivityError(
            message, operation=operation, target=target, cause=e
        ) from e
    except ApiError as e:
        logger.error(f"{message} (status={e.meta.status}): {e}")
        raise error_cls(message, operation=operation, target=target, cause=e) from e
