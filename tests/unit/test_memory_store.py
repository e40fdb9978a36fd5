"""Unit tests for the in-memory and snapshot document stores"""

import json
import pytest
from chronos_analytics.domain.analyzers import analyze_clients
from chronos_analytics.domain.exceptions import DataStoreError
from chronos_analytics.infrastructure.clients.memory import InMemoryStore, SnapshotStore


async def test_in_memory_store_returns_copies():
    store = InMemoryStore({"clientes": [{"id": "1", "nombre": "A"}]})

    records = await store.fetch_all("clientes")
    records[0]["nombre"] = "changed"

    assert (await store.fetch_all("clientes"))[0]["nombre"] == "A"
    assert await store.fetch_all("unknown") == []
    assert store.fetch_count == 3


async def test_snapshot_store_loads_lists_and_document_maps(tmp_path):
    (tmp_path / "ventas.json").write_text(json.dumps([{"id": "v1", "total": 100}]))
    (tmp_path / "bancos.json").write_text(json.dumps({"boveda-usa": {"nombre": "Bóveda USA", "capitalActual": 80000}}))

    store = SnapshotStore(tmp_path)

    assert await store.fetch_all("ventas") == [{"id": "v1", "total": 100}]
    assert await store.fetch_all("bancos") == [{"id": "boveda-usa", "nombre": "Bóveda USA", "capitalActual": 80000}]


def test_snapshot_store_missing_directory(tmp_path):
    with pytest.raises(DataStoreError):
        SnapshotStore(tmp_path / "missing")


def test_snapshot_store_invalid_json(tmp_path):
    (tmp_path / "gastos.json").write_text("{not json")

    with pytest.raises(DataStoreError, match="gastos.json"):
        SnapshotStore(tmp_path)


async def test_snapshot_store_skips_non_mapping_list_entries(tmp_path):
    (tmp_path / "clientes.json").write_text(
        json.dumps([{"id": "1", "nombre": "A", "saldoPendiente": 5}, None, "x", 3])
    )

    store = SnapshotStore(tmp_path)

    assert await store.fetch_all("clientes") == [{"id": "1", "nombre": "A", "saldoPendiente": 5}]
    result = await analyze_clients(store)
    assert result.total == 1


async def test_snapshot_store_skips_non_mapping_documents(tmp_path):
    (tmp_path / "bancos.json").write_text(json.dumps({"doc1": "oops", "b1": {"nombre": "Banco"}}))

    store = SnapshotStore(tmp_path)

    assert await store.fetch_all("bancos") == [{"id": "b1", "nombre": "Banco"}]


def test_snapshot_store_rejects_scalar_file(tmp_path):
    (tmp_path / "productos.json").write_text("42")

    with pytest.raises(DataStoreError, match="productos.json"):
        SnapshotStore(tmp_path)
