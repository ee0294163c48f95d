"""Elasticsearch 로그 저장소 경량 래퍼.

구조화 로그 기록, 검색, 문서/인덱스 CRUD, bulk 작업,
시간 기반 보존 정책을 제공합니다.

주요 컴포넌트:
    - Client: create_es_client, initialize / get_client (공유 핸들)
    - Logs: 인덱스 단위 로그 기록, 검색, 문서 CRUD
    - IndexManager: 환경별 프리셋 인덱스 생성/삭제
    - RetentionPolicy: 보존 기간 초과 문서 삭제
    - ClusterHealth, validate_api_key: 진단

Usage:
    >>> from esloglite import ESConfig, initialize, Logs, RetentionPolicy
    >>>
    >>> initialize(ESConfig(url="http://localhost:9200"))
    >>> Logs("app-logs").error("Failed to process request", {"requestId": "abc"})
    >>> RetentionPolicy().enforce_retention(["app-logs", "audit-logs"], 30)
"""

from esloglite.client import (
    check_connection,
    close_client,
    create_es_client,
    get_client,
    initialize,
    is_initialized,
)
from esloglite.config import (
    DEFAULT_RETENTION_DAYS,
    INDEX_SETTINGS,
    ESConfig,
    IndexSettings,
    get_index_settings,
)
from esloglite.documents import LogLevel, LogRecord, SearchHit
from esloglite.errors import (
    ConfigurationError,
    ConnectivityError,
    EsLogLiteError,
    OperationError,
    PartialFailure,
    RetentionError,
)
from esloglite.health import ClusterHealth, to_health_level, validate_api_key
from esloglite.indices import IndexInfo, IndexManager
from esloglite.logs import Logs
from esloglite.retention import (
    RetentionPolicy,
    RetentionReport,
    RetentionResult,
    apply_retention_policy,
    compute_cutoff,
)
from esloglite.system_logger import SystemLogger

__all__ = [
    # Config
    "ESConfig",
    "IndexSettings",
    "INDEX_SETTINGS",
    "DEFAULT_RETENTION_DAYS",
    "get_index_settings",
    # Client
    "create_es_client",
    "check_connection",
    "initialize",
    "get_client",
    "is_initialized",
    "close_client",
    # Documents
    "LogLevel",
    "LogRecord",
    "SearchHit",
    # Errors
    "EsLogLiteError",
    "ConfigurationError",
    "ConnectivityError",
    "OperationError",
    "RetentionError",
    "PartialFailure",
    # Operations
    "Logs",
    "IndexManager",
    "IndexInfo",
    "RetentionPolicy",
    "RetentionResult",
    "RetentionReport",
    "apply_retention_policy",
    "compute_cutoff",
    # Diagnostics
    "ClusterHealth",
    "to_health_level",
    "validate_api_key",
    "SystemLogger",
]
