from datetime import datetime, timezone

import pytest

from texia.data.db import Db
from texia.data.documents import SERVER_TIMESTAMP, DocumentStore


@pytest.fixture()
def store(tmp_path) -> DocumentStore:
    db = Db(tmp_path / "test.db")
    db.ensure_schema()
    return DocumentStore(db)


def test_add_assigns_id_and_get_returns_data(store):
    doc_id = store.add("telas", {"nombre": "Seda", "precio": 10.5})

    assert doc_id
    doc = store.get("telas", doc_id)
    assert doc is not None
    assert doc.data == {"nombre": "Seda", "precio": 10.5}


def test_get_missing_returns_none(store):
    assert store.get("users", "nope") is None


def test_query_filters_by_equality(store):
    store.add("inventario_telas", {"userId": "u1", "nombre": "A"})
    store.add("inventario_telas", {"userId": "u2", "nombre": "B"})
    store.add("inventario_telas", {"userId": "u1", "nombre": "C"})

    docs = store.query("inventario_telas", where={"userId": "u1"})

    assert [d.data["nombre"] for d in docs] == ["A", "C"]


def test_query_combines_predicates(store):
    store.add("tareas", {"usuarioAsignado": "u1", "estado": "PENDIENTE", "nombre": "a"})
    store.add("tareas", {"usuarioAsignado": "u1", "estado": "COMPLETADA", "nombre": "b"})
    store.add("tareas", {"usuarioAsignado": "u2", "estado": "COMPLETADA", "nombre": "c"})

    docs = store.query("tareas", where={"usuarioAsignado": "u1", "estado": "COMPLETADA"})

    assert [d.data["nombre"] for d in docs] == ["b"]


def test_query_orders_descending_and_caps(store):
    for day in (3, 1, 4, 2):
        store.add("defectos", {"usuarioReporte": "u1", "fecha": datetime(2026, 1, day, tzinfo=timezone.utc)})

    docs = store.query("defectos", where={"usuarioReporte": "u1"}, order_by="fecha", descending=True, limit=3)

    assert [d.data["fecha"][:10] for d in docs] == ["2026-01-04", "2026-01-03", "2026-01-02"]


def test_query_descending_puts_missing_field_last(store):
    store.add("defectos", {"usuarioReporte": "u1"})
    store.add("defectos", {"usuarioReporte": "u1", "fecha": "2026-01-01T00:00:00+00:00"})

    docs = store.query("defectos", order_by="fecha", descending=True)

    assert "fecha" in docs[0].data
    assert "fecha" not in docs[1].data


def test_server_timestamp_is_filled_by_store(store):
    before = datetime.now(timezone.utc)
    doc_id = store.add("defectos", {"fecha": SERVER_TIMESTAMP})

    stored = store.get("defectos", doc_id).data["fecha"]
    assert datetime.fromisoformat(stored) >= before.replace(microsecond=0)


def test_set_merge_keeps_existing_fields(store):
    store.set("users", "u1", {"nombre": "Ana", "telefono": "999"})
    store.set("users", "u1", {"nombre": "Ana María"}, merge=True)

    assert store.get("users", "u1").data == {"nombre": "Ana María", "telefono": "999"}


def test_set_without_merge_replaces_document(store):
    store.set("users", "u1", {"nombre": "Ana", "telefono": "999"})
    store.set("users", "u1", {"nombre": "Eva"})

    assert store.get("users", "u1").data == {"nombre": "Eva"}


def test_unknown_collection_raises(store):
    with pytest.raises(ValueError):
        store.query("pedidos")
    with pytest.raises(ValueError):
        store.add("pedidos", {})


def test_invalid_field_name_raises(store):
    with pytest.raises(ValueError):
        store.query("telas", where={"nombre') OR 1=1 --": "x"})


def test_count(store):
    store.add("telas", {})
    store.add("telas", {})
    assert store.count("telas") == 2
    assert store.count("tareas") == 0


def _corrupt(store, collection, doc_id):
    with store.db.connect() as con:
        con.execute(
            "INSERT INTO documents(collection, doc_id, data_json) VALUES(?, ?, ?)",
            (collection, doc_id, "{no es json"),
        )


def test_corrupt_rows_are_skipped_by_query_and_get(store):
    store.add("telas", {"nombre": "Seda"})
    _corrupt(store, "telas", "roto")

    assert [d.data["nombre"] for d in store.query("telas")] == ["Seda"]
    assert store.get("telas", "roto") is None


def test_merge_over_corrupt_row_starts_from_empty(store):
    _corrupt(store, "users", "u1")

    store.set("users", "u1", {"nombre": "Ana"}, merge=True)

    assert store.get("users", "u1").data == {"nombre": "Ana"}
