"""인덱스 단위 로그 기록, 검색, 문서/인덱스 CRUD.

Usage:
    >>> logs = Logs("app-logs", es)
    >>> logs.error("Failed to process request", {"requestId": "abc"})
    >>> logs.count({"match": {"level": "error"}})
    1
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from elasticsearch import Elasticsearch
from elasticsearch.helpers import BulkIndexError, bulk

from .client import resolve_client, response_body
from .config import IndexSettings
from .documents import LogLevel, LogRecord, SearchHit
from .errors import ConfigurationError, OperationError, translate_errors

logger = logging.getLogger(__name__)


def _refresh_arg(refresh: bool) -> str | bool:
    return "wait_for" if refresh else False


def _require_id(doc_id: str) -> None:
    if not doc_id:
        raise ConfigurationError("문서 ID가 비어 있습니다.")


class Logs:
    """단일 인덱스에 묶인 로그/문서 작업 모음."""

    def __init__(self, index: str, es: Elasticsearch | None = None):
        if not index:
            raise ConfigurationError("인덱스 이름이 비어 있습니다.")
        self.index = index
        self.es = resolve_client(es)

    # =========================================================================
    # Logging
    # =========================================================================

    def log(
        self,
        level: LogLevel,
        message: str,
        metadata: Mapping[str, Any] | None = None,
        *,
        refresh: bool = False,
    ) -> str:
        """로그 레코드 기록. 생성된 문서 ID 반환."""
        record = LogRecord(level=level, message=message, metadata=dict(metadata or {}))
        with translate_errors("log", self.index):
            resp = self.es.index(
                index=self.index,
                document=record.to_es(),
                refresh=_refresh_arg(refresh),
            )
        logger.debug(f"[{level.upper()}] 로그 기록 완료 ({self.index}): {message}")
        return str(resp["_id"])

    def info(self, message: str, metadata: Mapping[str, Any] | None = None) -> str:
        return self.log("info", message, metadata)

    def warn(self, message: str, metadata: Mapping[str, Any] | None = None) -> str:
        return self.log("warn", message, metadata)

    def error(self, message: str, metadata: Mapping[str, Any] | None = None) -> str:
        return self.log("error", message, metadata)

    def debug(self, message: str, metadata: Mapping[str, Any] | None = None) -> str:
        return self.log("debug", message, metadata)

    # =========================================================================
    # Querying
    # =========================================================================

    def search_raw(self, query: Mapping[str, Any] | None = None, **params: Any) -> dict[str, Any]:
        """검색 수행 후 ES 응답 전체 반환.

        Args:
            query: ES query DSL (None이면 match_all)
            **params: size, sort, from_, source 등 search API 인자
        """
        with translate_errors("search", self.index):
            resp = self.es.search(
                index=self.index,
                query=dict(query) if query else {"match_all": {}},
                **params,
            )
        return response_body(resp)

    def search(self, query: Mapping[str, Any] | None = None, **params: Any) -> list[SearchHit]:
        """검색 수행. hit 리스트 반환."""
        resp = self.search_raw(query, **params)
        hits = [SearchHit.from_es(h) for h in resp["hits"]["hits"]]
        logger.debug(f"검색 완료 ({self.index}): {len(hits)}건")
        return hits

    def count(self, query: Mapping[str, Any] | None = None) -> int:
        """쿼리에 매칭되는 문서 수."""
        with translate_errors("count", self.index):
            if query:
                resp = self.es.count(index=self.index, query=dict(query))
            else:
                resp = self.es.count(index=self.index)
        return int(resp["count"])

    # =========================================================================
    # Documents
    # =========================================================================

    def add_document(
        self,
        document: Mapping[str, Any],
        doc_id: str | None = None,
        *,
        refresh: bool = False,
    ) -> str:
        """문서 추가. doc_id가 없으면 ES가 생성한 ID 반환."""
        if not isinstance(document, Mapping):
            raise ConfigurationError("document는 mapping이어야 합니다.")
        with translate_errors("add document", self.index):
            resp = self.es.index(
                index=self.index,
                id=doc_id,
                document=dict(document),
                refresh=_refresh_arg(refresh),
            )
        logger.info(f"문서 추가 완료 ({self.index}): {resp['_id']}")
        return str(resp["_id"])

    def get_document(self, doc_id: str) -> dict[str, Any] | None:
        """ID로 단일 문서 조회. 없으면 None."""
        _require_id(doc_id)
        with translate_errors("get document", f"{self.index}/{doc_id}"):
            if not self.es.exists(index=self.index, id=doc_id):
                return None
            resp = self.es.get(index=self.index, id=doc_id)
        return dict(response_body(resp)["_source"])

    def update_document(
        self,
        doc_id: str,
        partial_doc: Mapping[str, Any],
        *,
        refresh: bool = False,
    ) -> dict[str, Any]:
        """문서 부분 업데이트."""
        _require_id(doc_id)
        if not partial_doc:
            raise ConfigurationError("업데이트할 필드가 없습니다.")
        with translate_errors("update document", f"{self.index}/{doc_id}"):
            resp = self.es.update(
                index=self.index,
                id=doc_id,
                doc=dict(partial_doc),
                refresh=_refresh_arg(refresh),
            )
        logger.info(f"문서 업데이트 완료 ({self.index}): {doc_id}")
        return response_body(resp)

    def delete_document(self, doc_id: str, *, refresh: bool = False) -> dict[str, Any]:
        """문서 삭제."""
        _require_id(doc_id)
        with translate_errors("delete document", f"{self.index}/{doc_id}"):
            resp = self.es.delete(
                index=self.index,
                id=doc_id,
                refresh=_refresh_arg(refresh),
            )
        logger.info(f"문서 삭제 완료 ({self.index}): {doc_id}")
        return response_body(resp)

    def bulk(self, operations: Sequence[Mapping[str, Any]], *, refresh: bool = False) -> dict[str, Any]:
        """bulk API 호출 (action/source 줄을 그대로 전달).

        개별 항목 실패는 응답의 ``errors``/``items``로 확인합니다.
        """
        if not operations:
            raise ConfigurationError("bulk 작업 목록이 비어 있습니다.")
        with translate_errors("bulk", self.index):
            resp = self.es.bulk(
                index=self.index,
                operations=[dict(op) for op in operations],
                refresh=_refresh_arg(refresh),
            )
        body = response_body(resp)
        items = body.get("items", [])
        if body.get("errors"):
            failed = [i for i in items if next(iter(i.values())).get("error")]
            logger.warning(f"bulk 일부 실패 ({self.index}): {len(failed)}/{len(items)}건")
        else:
            logger.info(f"bulk 완료 ({self.index}): {len(items)}건")
        return body

    def bulk_index(self, docs: Iterable[Mapping[str, Any]], *, refresh: bool = False) -> int:
        """대량 문서 색인. 성공 건수 반환."""
        actions = [
            {"_op_type": "index", "_index": self.index, "_source": dict(d)} for d in docs
        ]
        if not actions:
            return 0
        with translate_errors("bulk index", self.index):
            try:
                ok, _ = bulk(self.es, actions, refresh=_refresh_arg(refresh))
            except BulkIndexError as e:
                raise OperationError(
                    f"bulk index 실패: '{self.index}' ({len(e.errors)}건 오류)",
                    operation="bulk index",
                    target=self.index,
                    cause=e,
                ) from e
        return int(ok)

    # =========================================================================
    # Index
    # =========================================================================

    def index_exists(self) -> bool:
        with translate_errors("check index", self.index):
            return bool(self.es.indices.exists(index=self.index))

    def create_index(
        self,
        settings: IndexSettings | Mapping[str, Any] | None = None,
        mappings: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """인덱스 생성.

        Args:
            settings: IndexSettings, 또는 ``{"shards": .., "replicas": ..}`` dict
            mappings: 필드 매핑 (선택)

        Raises:
            ConfigurationError: settings에 알 수 없는 키가 있거나 값이 잘못된 경우.
        """
        if isinstance(settings, Mapping):
            settings = IndexSettings.from_mapping(settings)

        kwargs: dict[str, Any] = {"index": self.index}
        if settings is not None:
            kwargs["settings"] = settings.to_es()
        if mappings:
            kwargs["mappings"] = dict(mappings)

        with translate_errors("create index", self.index):
            resp = self.es.indices.create(**kwargs)
        logger.info(f"인덱스 생성 완료: {self.index}")
        return response_body(resp)

    def delete_index(self) -> dict[str, Any]:
        with translate_errors("delete index", self.index):
            resp = self.es.indices.delete(index=self.index)
        logger.info(f"인덱스 삭제 완료: {self.index}")
        return response_body(resp)
