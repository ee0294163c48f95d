"""Elasticsearch 클라이언트 팩토리 및 공유 핸들 관리.

두 가지 사용 방식을 지원합니다.
    - ``create_es_client(cfg)``로 만든 핸들을 각 컴포넌트에 직접 주입
    - ``initialize(cfg)``로 프로세스 전역 핸들을 한 번 만들고 ``get_client()``로 조회

Usage:
    >>> cfg = ESConfig(url="http://localhost:9200")
    >>> es = initialize(cfg)
    >>> get_client() is es
    True
"""

from __future__ import annotations

import logging
import threading
from typing import Any
from urllib.parse import urlsplit

from elasticsearch import Elasticsearch

from .config import ESConfig
from .errors import ConfigurationError, ConnectivityError

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_client: Elasticsearch | None = None


def _normalize_url(cfg: ESConfig) -> str:
    """스킴 보정 및 URL 형식 검증."""
    url = (cfg.url or "").strip()
    if not url:
        raise ConfigurationError("ES url이 비어 있습니다.")

    if "://" not in url:
        url = f"{'https' if cfg.tls else 'http'}://{url}"

    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ConfigurationError(f"잘못된 ES url: {cfg.url!r}")
    try:
        parts.port
    except ValueError as e:
        raise ConfigurationError(f"잘못된 ES url 포트: {cfg.url!r}") from e

    if cfg.tls and parts.scheme != "https":
        raise ConfigurationError(f"tls=True 이지만 url 스킴이 https가 아닙니다: {cfg.url!r}")
    return url


def _auth_kwargs(cfg: ESConfig) -> dict[str, Any]:
    """인증 옵션 조합 검증."""
    if bool(cfg.username) != bool(cfg.password):
        raise ConfigurationError("username과 password는 함께 지정해야 합니다.")
    if cfg.api_key and cfg.username:
        raise ConfigurationError("api_key와 username/password는 동시에 사용할 수 없습니다.")

    if cfg.api_key:
        return {"api_key": cfg.api_key}
    if cfg.username and cfg.password:
        return {"basic_auth": (cfg.username, cfg.password)}
    # No Auth (로컬 개발용)
    return {}


def create_es_client(cfg: ESConfig) -> Elasticsearch:
    """Elasticsearch 클라이언트 생성 (공유 상태 없음).

    Args:
        cfg: ES 연결 설정.

    Returns:
        Elasticsearch 클라이언트 인스턴스.

    Raises:
        ConfigurationError: url 형식 또는 인증 조합이 잘못된 경우.
    """
    url = _normalize_url(cfg)
    kwargs: dict[str, Any] = {
        "hosts": [url],
        "request_timeout": cfg.request_timeout_s,
        **_auth_kwargs(cfg),
    }
    if cfg.headers:
        kwargs["headers"] = dict(cfg.headers)
    # SSL 옵션은 https에서만 유효
    if url.startswith("https://"):
        kwargs["verify_certs"] = cfg.verify_certs
        if cfg.ca_certs:
            kwargs["ca_certs"] = cfg.ca_certs

    try:
        return Elasticsearch(**kwargs)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(
            "Elasticsearch 클라이언트 초기화 실패. 설정을 확인하세요.", cause=e
        ) from e


def check_connection(es: Elasticsearch) -> bool:
    """ES 연결 상태 확인.

    Returns:
        연결 성공 여부.
    """
    try:
        return bool(es.ping())
    except Exception:
        return False


def initialize(cfg: ESConfig, *, lazy: bool = False) -> Elasticsearch:
    """프로세스 전역 클라이언트 초기화.

    이미 초기화되어 있으면 기존 핸들을 그대로 반환합니다 (첫 성공 설정 우선).
    생성 직후 ping으로 연결을 확인하며, 실패 시 전역 상태는 비어 있는 채로 남아
    올바른 설정으로 재시도할 수 있습니다.

    Args:
        cfg: ES 연결 설정.
        lazy: True면 ping 확인을 생략 (엔진보다 먼저 기동되는 프로세스용).

    Raises:
        ConfigurationError: 설정이 잘못된 경우.
        ConnectivityError: 엔진에 연결할 수 없는 경우 (lazy=False).
    """
    global _client

    with _lock:
        if _client is not None:
            return _client

        logger.info("Elasticsearch 클라이언트 초기화 중...")
        es = create_es_client(cfg)
        if not lazy and not check_connection(es):
            es.close()
            logger.error(f"Elasticsearch 연결 실패: {cfg.url}")
            raise ConnectivityError(
                f"Elasticsearch 클라이언트 초기화 실패: '{cfg.url}'에 연결할 수 없습니다.",
                operation="initialize",
                target=cfg.url,
            )

        _client = es
        logger.info(f"Elasticsearch 클라이언트 초기화 완료: {cfg.url}")
        return _client


def get_client() -> Elasticsearch:
    """전역 클라이언트 반환.

    Raises:
        ConfigurationError: initialize()가 호출되지 않은 경우.
    """
    client = _client
    if client is None:
        raise ConfigurationError(
            "Elasticsearch 클라이언트가 초기화되지 않았습니다. initialize()를 먼저 호출하세요.",
            operation="get_client",
        )
    return client


def is_initialized() -> bool:
    return _client is not None


def close_client() -> None:
    """전역 클라이언트 종료 및 상태 초기화."""
    global _client

    with _lock:
        if _client is None:
            return
        try:
            _client.close()
        finally:
            _client = None
        logger.info("Elasticsearch 클라이언트 종료")


def resolve_client(es: Elasticsearch | None) -> Elasticsearch:
    """주입된 핸들이 있으면 사용, 없으면 전역 핸들 조회."""
    return es if es is not None else get_client()


def response_body(resp: Any) -> dict[str, Any]:
    """ObjectApiResponse 또는 dict에서 본문 dict 추출."""
    return dict(getattr(resp, "body", resp))
