"""Elasticsearch 인덱스 생명주기 관리.

환경별(development/staging/production) 샤드/레플리카 프리셋으로
인덱스를 생성하거나 삭제하고, 상태를 조회합니다.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from elasticsearch import Elasticsearch

from .client import resolve_client, response_body
from .config import IndexSettings, get_index_settings
from .errors import ConfigurationError, translate_errors

logger = logging.getLogger(__name__)


@dataclass
class IndexInfo:
    """인덱스 정보."""

    name: str
    exists: bool
    doc_count: int = 0
    size_bytes: int = 0


def _require_name(index_name: str) -> None:
    if not index_name:
        raise ConfigurationError("인덱스 이름이 비어 있습니다.")


class IndexManager:
    """인덱스 생성/삭제/존재 확인."""

    def __init__(self, es: Elasticsearch | None = None):
        self.es = resolve_client(es)

    def index_exists(self, index_name: str) -> bool:
        _require_name(index_name)
        with translate_errors("check index", index_name):
            exists = bool(self.es.indices.exists(index=index_name))
        logger.debug(f"인덱스 '{index_name}' 존재 여부: {exists}")
        return exists

    def create_index(
        self,
        index_name: str,
        settings: IndexSettings | Mapping[str, Any],
        mappings: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """샤드/레플리카 설정으로 인덱스 생성.

        Args:
            index_name: 생성할 인덱스명
            settings: IndexSettings 또는 ``{"shards": int, "replicas": int}``
            mappings: 필드 매핑 (선택)

        Raises:
            ConfigurationError: 설정 키가 잘못된 경우.
            OperationError: 인덱스가 이미 존재하는 등 ES가 거부한 경우.
        """
        _require_name(index_name)
        if not isinstance(settings, IndexSettings):
            settings = IndexSettings.from_mapping(settings)

        kwargs: dict[str, Any] = {"index": index_name, "settings": settings.to_es()}
        if mappings:
            kwargs["mappings"] = dict(mappings)

        logger.info(f"인덱스 '{index_name}' 생성 중: {settings}")
        with translate_errors("create index", index_name):
            resp = self.es.indices.create(**kwargs)
        logger.info(f"인덱스 '{index_name}' 생성 완료")
        return response_body(resp)

    def create_optimized_index(
        self,
        index_name: str,
        environment: str,
        mappings: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """환경별 프리셋으로 인덱스 생성.

        Raises:
            ConfigurationError: 정의되지 않은 환경인 경우.
        """
        return self.create_index(index_name, get_index_settings(environment), mappings)

    def delete_index(self, index_name: str) -> dict[str, Any]:
        _require_name(index_name)
        logger.info(f"인덱스 '{index_name}' 삭제 중...")
        with translate_errors("delete index", index_name):
            resp = self.es.indices.delete(index=index_name)
        logger.info(f"인덱스 '{index_name}' 삭제 완료")
        return response_body(resp)

    def get_index_info(self, index_name: str) -> IndexInfo:
        """인덱스 정보 조회."""
        if not self.index_exists(index_name):
            return IndexInfo(name=index_name, exists=False)

        with translate_errors("index stats", index_name):
            stats = response_body(self.es.indices.stats(index=index_name))
        index_stats = stats["indices"].get(index_name, {}).get("primaries", {})
        doc_count = index_stats.get("docs", {}).get("count", 0)
        size_bytes = index_stats.get("store", {}).get("size_in_bytes", 0)

        return IndexInfo(
            name=index_name,
            exists=True,
            doc_count=doc_count,
            size_bytes=size_bytes,
        )
