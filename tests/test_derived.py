import itertools

import pytest

from texia.core.derived import (
    classify_lot,
    count_by_status,
    dashboard_stats,
    inventory_stats,
    progress_percent,
    progress_stats,
    sum_where,
)
from texia.core.mapping import inventory_lot_from_doc
from texia.core.models import (
    AGOTADO,
    BAJO_STOCK,
    DISPONIBLE,
    EN_PRODUCCION,
    INVENTORY_STATUSES,
    ProductionOrder,
    ProgressRecord,
)


def test_classification_scenario():
    assert classify_lot(100, 90, 0) == BAJO_STOCK
    assert classify_lot(50, 10, 5) == EN_PRODUCCION


def test_exhausted_wins_over_reserved():
    assert classify_lot(10, 5, 5) == AGOTADO
    assert classify_lot(10, 0, 10) == AGOTADO


def test_available_lot():
    assert classify_lot(100, 10, 0) == DISPONIBLE
    # exactly 20% is not low stock
    assert classify_lot(100, 80, 0) == DISPONIBLE


def test_exactly_one_status_for_valid_lots():
    values = range(0, 31, 5)
    for purchased, used, reserved in itertools.product(values, values, values):
        if used + reserved > purchased:
            continue
        status = classify_lot(purchased, used, reserved)
        assert status in INVENTORY_STATUSES
        available = purchased - used - reserved
        if available <= 0:
            assert status == AGOTADO
        elif reserved > 0:
            assert status == EN_PRODUCCION
        elif available < 0.2 * purchased:
            assert status == BAJO_STOCK
        else:
            assert status == DISPONIBLE


@pytest.mark.parametrize(
    "completed, total, expected",
    [(30, 120, 25), (0, 100, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (200, 100, 100), (5, 0, 0), (-5, 10, 0)],
)
def test_progress_percent(completed, total, expected):
    assert progress_percent(completed, total) == expected


def test_count_by_status_is_case_sensitive():
    orders = [ProductionOrder(id="1", estado="EN_CURSO"), ProductionOrder(id="2", estado="en_curso")]
    assert count_by_status(orders) == {"EN_CURSO": 1, "en_curso": 1}


def test_sum_where():
    orders = [ProductionOrder(id=str(i), estado=e) for i, e in enumerate(["A", "B", "A"])]
    assert sum_where(orders, lambda o: 2, lambda o: o.estado == "A") == 4


def test_dashboard_stats():
    orders = [
        ProductionOrder(id="1", estado="EN_CURSO", cantidad="50 mts"),
        ProductionOrder(id="2", estado="PENDIENTE", cantidad="10 mts"),
        ProductionOrder(id="3", estado="COMPLETADA", cantidad="40 mts"),
        ProductionOrder(id="4", estado="COMPLETADA", cantidad="sin dato"),
    ]

    stats = dashboard_stats(orders)

    assert stats.tareas_activas == 1
    assert stats.tareas_pendientes == 1
    assert stats.metros_producidos == 40


def test_inventory_stats():
    lots = [
        inventory_lot_from_doc("a", {"cantidadComprada": 100, "cantidadUsada": 90, "precioCompra": 2}),
        inventory_lot_from_doc("b", {"cantidadComprada": 50, "cantidadUsada": 10, "cantidadEnProduccion": 5, "precioCompra": 4}),
    ]

    stats = inventory_stats(lots)

    assert stats.total_comprado == 150
    assert stats.total_disponible == 45
    assert stats.total_en_produccion == 5
    assert stats.valor_total == 400


def test_progress_stats_empty():
    stats = progress_stats([])
    assert stats.tareas_completadas == 0
    assert stats.promedio_completado == 0
    assert stats.eficiencia == "0%"


def test_progress_stats():
    records = [
        ProgressRecord(id="1", estado="COMPLETADA", progreso=100, metros_completados="40 mts"),
        ProgressRecord(id="2", estado="EN_CURSO", progreso=25, metros_completados="30 mts"),
        ProgressRecord(id="3", estado="PENDIENTE", progreso=0),
    ]

    stats = progress_stats(records)

    assert stats.tareas_completadas == 1
    assert stats.tareas_en_curso == 1
    assert stats.tareas_pendientes == 1
    assert stats.metros_producidos == 40
    assert stats.promedio_completado == 41
    assert stats.eficiencia == "33%"
