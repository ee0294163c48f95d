from __future__ import annotations

from unittest.mock import patch

import pytest
from fakes import NOW, FakeElasticsearch

from esloglite import client as client_module


@pytest.fixture(autouse=True)
def _isolated_shared_client(monkeypatch: pytest.MonkeyPatch) -> None:
    """테스트마다 전역 클라이언트 상태를 비움."""
    monkeypatch.setattr(client_module, "_client", None)


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def reachable_engine():
    """initialize()의 ping 확인을 성공으로 고정."""
    with patch("esloglite.client.check_connection", return_value=True) as ping:
        yield ping
