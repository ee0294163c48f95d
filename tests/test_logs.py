"""Unit tests for index-bound log and document operations."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from elasticsearch import ConnectionError as ESConnectionError
from elasticsearch.helpers import BulkIndexError
from fakes import FakeElasticsearch

from esloglite import (
    ConfigurationError,
    ConnectivityError,
    ESConfig,
    IndexSettings,
    Logs,
    OperationError,
    SearchHit,
    initialize,
)


def test_logs_requires_initialized_client_when_none_injected() -> None:
    with pytest.raises(ConfigurationError):
        Logs("app-logs")


@pytest.mark.usefixtures("reachable_engine")
def test_logs_uses_shared_client_after_initialize() -> None:
    es = initialize(ESConfig(url="http://localhost:9200"))
    assert Logs("app-logs").es is es


def test_logs_rejects_empty_index(fake_es: FakeElasticsearch) -> None:
    with pytest.raises(ConfigurationError):
        Logs("", fake_es)


def test_log_writes_structured_record(fake_es: FakeElasticsearch) -> None:
    logs = Logs("app-logs", fake_es)

    doc_id = logs.log("error", "Failed to process request", {"requestId": "abc"})

    stored = fake_es.store["app-logs"][doc_id]
    assert stored["level"] == "error"
    assert stored["message"] == "Failed to process request"
    assert stored["metadata"] == {"requestId": "abc"}
    assert stored["timestamp"].endswith("+00:00")


def test_error_log_is_counted_by_level(fake_es: FakeElasticsearch) -> None:
    logs = Logs("app-logs", fake_es)
    logs.error("Failed to process request", {"requestId": "abc"})
    logs.info("ok")

    assert logs.count({"match": {"level": "error"}}) >= 1
    assert logs.count() == 2


def test_level_shortcuts(fake_es: FakeElasticsearch) -> None:
    logs = Logs("app-logs", fake_es)
    for method in (logs.info, logs.warn, logs.error, logs.debug):
        method("msg")

    levels = sorted(src["level"] for src in fake_es.store["app-logs"].values())
    assert levels == ["debug", "error", "info", "warn"]
    assert all(src["metadata"] == {} for src in fake_es.store["app-logs"].values())


def test_log_rejects_unknown_level(fake_es: FakeElasticsearch) -> None:
    with pytest.raises(ConfigurationError):
        Logs("app-logs", fake_es).log("fatal", "boom")  # type: ignore[arg-type]
    assert "app-logs" not in fake_es.store


def test_add_search_delete_round_trip(fake_es: FakeElasticsearch) -> None:
    logs = Logs("docs", fake_es)

    doc_id = logs.add_document({"title": "hello", "n": 1}, doc_id="d1", refresh=True)
    hits = logs.search({"match": {"title": "hello"}})

    assert doc_id == "d1"
    assert hits == [SearchHit(id="d1", score=1.0, source={"title": "hello", "n": 1})]

    logs.delete_document("d1", refresh=True)
    assert logs.search({"match": {"title": "hello"}}) == []
    assert logs.count({"match": {"title": "hello"}}) == 0


def test_search_defaults_to_match_all(fake_es: FakeElasticsearch) -> None:
    logs = Logs("docs", fake_es)
    logs.add_document({"a": 1})
    logs.add_document({"a": 2})

    assert len(logs.search()) == 2
    assert fake_es.calls[-1] == ("search", {"index": "docs", "query": {"match_all": {}}})


def test_update_and_get_document(fake_es: FakeElasticsearch) -> None:
    logs = Logs("docs", fake_es)
    logs.add_document({"status": "new", "n": 1}, doc_id="d1")

    logs.update_document("d1", {"status": "done"})

    assert logs.get_document("d1") == {"status": "done", "n": 1}
    assert logs.get_document("missing") is None


def test_update_missing_document_raises_operation_error(fake_es: FakeElasticsearch) -> None:
    logs = Logs("docs", fake_es)
    logs.add_document({"a": 1}, doc_id="d1")

    with pytest.raises(OperationError) as exc_info:
        logs.update_document("nope", {"a": 2})

    err = exc_info.value
    assert err.operation == "update document"
    assert err.target == "docs/nope"
    assert err.__cause__ is err.cause


def test_document_operations_validate_arguments(fake_es: FakeElasticsearch) -> None:
    logs = Logs("docs", fake_es)

    with pytest.raises(ConfigurationError):
        logs.delete_document("")
    with pytest.raises(ConfigurationError):
        logs.update_document("d1", {})
    with pytest.raises(ConfigurationError):
        logs.add_document(["not", "a", "mapping"])  # type: ignore[arg-type]
    with pytest.raises(ConfigurationError):
        logs.bulk([])


def test_search_on_missing_index_raises_operation_error(fake_es: FakeElasticsearch) -> None:
    with pytest.raises(OperationError) as exc_info:
        Logs("missing", fake_es).search({"match_all": {}})
    assert exc_info.value.target == "missing"


def test_transport_failure_raises_connectivity_error() -> None:
    es = MagicMock()
    es.index.side_effect = ESConnectionError("Connection refused")

    with pytest.raises(ConnectivityError) as exc_info:
        Logs("app-logs", es).info("hello")

    assert exc_info.value.operation == "log"
    assert isinstance(exc_info.value.__cause__, ESConnectionError)


def test_bulk_passes_operations_through(fake_es: FakeElasticsearch) -> None:
    logs = Logs("docs", fake_es)
    logs.add_document({"a": 0}, doc_id="old")

    resp = logs.bulk(
        [
            {"index": {"_id": "1"}},
            {"a": 1},
            {"index": {"_id": "2"}},
            {"a": 2},
            {"delete": {"_id": "old"}},
        ]
    )

    assert resp["errors"] is False
    assert set(fake_es.store["docs"]) == {"1", "2"}


def test_bulk_reports_item_errors_without_raising(fake_es: FakeElasticsearch) -> None:
    logs = Logs("docs", fake_es)
    logs.add_document({"a": 0}, doc_id="keep")

    resp = logs.bulk([{"delete": {"_id": "missing"}}])

    assert resp["errors"] is True
    assert "keep" in fake_es.store["docs"]


def test_bulk_index_returns_success_count(fake_es: FakeElasticsearch) -> None:
    with patch("esloglite.logs.bulk", return_value=(2, [])) as bulk_mock:
        ok = Logs("docs", fake_es).bulk_index([{"a": 1}, {"a": 2}])

    assert ok == 2
    actions = bulk_mock.call_args.args[1]
    assert actions == [
        {"_op_type": "index", "_index": "docs", "_source": {"a": 1}},
        {"_op_type": "index", "_index": "docs", "_source": {"a": 2}},
    ]


def test_bulk_index_empty_is_noop(fake_es: FakeElasticsearch) -> None:
    with patch("esloglite.logs.bulk") as bulk_mock:
        assert Logs("docs", fake_es).bulk_index([]) == 0
    bulk_mock.assert_not_called()


def test_bulk_index_failure_raises_operation_error(fake_es: FakeElasticsearch) -> None:
    error = BulkIndexError("1 document(s) failed to index.", [{"index": {"error": "x"}}])
    with patch("esloglite.logs.bulk", side_effect=error):
        with pytest.raises(OperationError) as exc_info:
            Logs("docs", fake_es).bulk_index([{"a": 1}])
    assert exc_info.value.cause is error


def test_index_lifecycle_through_logs(fake_es: FakeElasticsearch) -> None:
    logs = Logs("test-idx", fake_es)

    assert logs.index_exists() is False
    logs.create_index(IndexSettings(shards=1, replicas=0))
    assert logs.index_exists() is True
    assert fake_es.indices.created["test-idx"] == {
        "settings": {"number_of_shards": 1, "number_of_replicas": 0}
    }

    logs.delete_index()
    assert logs.index_exists() is False


def test_create_index_translates_plain_settings_mapping(fake_es: FakeElasticsearch) -> None:
    Logs("test-idx", fake_es).create_index({"shards": 1, "replicas": 0})

    assert fake_es.indices.created["test-idx"] == {
        "settings": {"number_of_shards": 1, "number_of_replicas": 0}
    }


def test_create_index_rejects_unknown_settings_key(fake_es: FakeElasticsearch) -> None:
    logs = Logs("test-idx", fake_es)

    with pytest.raises(ConfigurationError, match="number_of_shards"):
        logs.create_index({"number_of_shards": 1, "replicas": 0})
    assert logs.index_exists() is False


def test_create_existing_index_raises_operation_error(fake_es: FakeElasticsearch) -> None:
    logs = Logs("test-idx", fake_es)
    logs.create_index()

    with pytest.raises(OperationError) as exc_info:
        logs.create_index()
    assert exc_info.value.operation == "create index"
