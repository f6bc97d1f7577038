"""Read-only aggregates computed from a mapped record set.

Everything here is pure and recomputed from scratch on every reload.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from texia.core.models import (
    AGOTADO,
    BAJO_STOCK,
    DISPONIBLE,
    EN_PRODUCCION,
    ESTADO_COMPLETADA,
    ESTADO_EN_CURSO,
    ESTADO_PENDIENTE,
    InventoryLot,
    ProductionOrder,
    ProgressRecord,
)
from texia.core.coerce import parse_quantity

LOW_STOCK_RATIO = 0.2


def classify_lot(purchased: float, used: float, reserved: float, *, low_stock_ratio: float = LOW_STOCK_RATIO) -> str:
    """Inventory status for a lot.

    Checks run in a fixed order and the first match wins, so an exhausted lot
    with reserved quantity is still AGOTADO.
    """
    available = purchased - used - reserved
    if available <= 0:
        return AGOTADO
    if reserved > 0:
        return EN_PRODUCCION
    if available < low_stock_ratio * purchased:
        return BAJO_STOCK
    return DISPONIBLE


def progress_percent(completed: int | float, total: int | float) -> int:
    if total <= 0:
        return 0
    # round half up; builtin round() is banker's rounding
    pct = math.floor(100.0 * completed / total + 0.5)
    return max(0, min(100, int(pct)))


def count_by_status(records: Iterable, *, attr: str = "estado") -> dict[str, int]:
    """Counts keyed by the exact (case-sensitive) status string."""
    counts: dict[str, int] = {}
    for r in records:
        key = getattr(r, attr)
        counts[key] = counts.get(key, 0) + 1
    return counts


def sum_where(records: Iterable, value: Callable[[object], float], predicate: Callable[[object], bool]) -> float:
    return sum(value(r) for r in records if predicate(r))


@dataclass(frozen=True)
class DashboardStats:
    tareas_activas: int = 0
    tareas_pendientes: int = 0
    metros_producidos: int = 0


@dataclass(frozen=True)
class InventoryStats:
    total_comprado: float = 0.0
    total_disponible: float = 0.0
    total_en_produccion: float = 0.0
    valor_total: float = 0.0


@dataclass(frozen=True)
class ProgressStats:
    tareas_completadas: int = 0
    tareas_en_curso: int = 0
    tareas_pendientes: int = 0
    metros_producidos: int = 0
    promedio_completado: int = 0
    eficiencia: str = "0%"


def dashboard_stats(orders: list[ProductionOrder]) -> DashboardStats:
    counts = count_by_status(orders)
    metros = sum_where(
        orders,
        lambda o: parse_quantity(o.cantidad),
        lambda o: o.estado == ESTADO_COMPLETADA,
    )
    return DashboardStats(
        tareas_activas=counts.get(ESTADO_EN_CURSO, 0),
        tareas_pendientes=counts.get(ESTADO_PENDIENTE, 0),
        metros_producidos=int(metros),
    )


def inventory_stats(lots: list[InventoryLot]) -> InventoryStats:
    return InventoryStats(
        total_comprado=sum(l.cantidad_comprada for l in lots),
        total_disponible=sum(l.cantidad_disponible for l in lots),
        total_en_produccion=sum(l.cantidad_en_produccion for l in lots),
        valor_total=sum(l.valor for l in lots),
    )


def progress_stats(records: list[ProgressRecord]) -> ProgressStats:
    if not records:
        return ProgressStats()

    counts = count_by_status(records)
    completadas = counts.get(ESTADO_COMPLETADA, 0)
    metros = sum_where(
        records,
        lambda r: parse_quantity(r.metros_completados),
        lambda r: r.estado == ESTADO_COMPLETADA,
    )
    promedio = int(sum(r.progreso for r in records) / len(records))
    eficiencia = int(completadas / len(records) * 100)
    return ProgressStats(
        tareas_completadas=completadas,
        tareas_en_curso=counts.get(ESTADO_EN_CURSO, 0),
        tareas_pendientes=counts.get(ESTADO_PENDIENTE, 0),
        metros_producidos=int(metros),
        promedio_completado=promedio,
        eficiencia=f"{eficiencia}%",
    )
