"""Filter/sort pipeline shared by the list screens.

``apply_view`` runs three steps in a fixed order: text search, category
selector, ordering. It returns a new list and never touches its input.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from texia.core.models import (
    AGOTADO,
    BAJO_STOCK,
    DISPONIBLE,
    EN_PRODUCCION,
    ESTADO_COMPLETADA,
    ESTADO_EN_CURSO,
    ESTADO_PENDIENTE,
    ORDER_STATUSES,
    PRIORIDAD_ALTA,
    PRIORIDAD_BAJA,
    PRIORIDAD_MEDIA,
    PRIORIDAD_URGENTE,
)

ALL = "Todas"

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Ordering:
    key: Callable[[Any], Any]
    reverse: bool = False


@dataclass(frozen=True)
class ViewSpec:
    search_fields: tuple[str, ...]
    # Value compared against the selector; None disables the selector step.
    category: Callable[[Any], str] | None
    orderings: dict[str, Ordering]
    default_order: str
    categories: tuple[str, ...] = (ALL,)
    ignore_case_category: bool = False

    def __post_init__(self) -> None:
        if self.default_order not in self.orderings:
            raise ValueError(f"orden por defecto desconocido: {self.default_order!r}")


def _matches_query(record: Any, fields: Sequence[str], needle: str) -> bool:
    for name in fields:
        value = getattr(record, name, "")
        if needle in str(value or "").casefold():
            return True
    return False


def apply_view(records: Sequence[Any], spec: ViewSpec, *, query: str = "", selector: str = ALL, order: str = "") -> list[Any]:
    result = list(records)

    needle = (query or "").casefold()
    if needle:
        result = [r for r in result if _matches_query(r, spec.search_fields, needle)]

    if spec.category is not None and selector and selector != ALL:
        if spec.ignore_case_category:
            wanted = selector.casefold()
            result = [r for r in result if spec.category(r).casefold() == wanted]
        else:
            result = [r for r in result if spec.category(r) == selector]

    ordering = spec.orderings.get(order) or spec.orderings[spec.default_order]
    # sorted() is stable in both directions
    return sorted(result, key=ordering.key, reverse=ordering.reverse)


def _by_name(r: Any) -> str:
    return str(r.nombre or "").casefold()


def _recency(attr: str) -> Callable[[Any], tuple[bool, datetime]]:
    # Missing dates rank oldest so they end up last in descending order.
    def key(r: Any) -> tuple[bool, datetime]:
        ts = getattr(r, attr)
        return (ts is not None, ts or _OLDEST)

    return key


FABRIC_CATEGORIES = (ALL, "Algodón", "Poliéster", "Seda", "Lino")

FABRIC_VIEW = ViewSpec(
    search_fields=("nombre", "tipo", "color"),
    category=lambda t: t.tipo,
    categories=FABRIC_CATEGORIES,
    ignore_case_category=True,
    orderings={
        "Nombre": Ordering(_by_name),
        "Precio: Menor a Mayor": Ordering(lambda t: t.precio),
        "Precio: Mayor a Menor": Ordering(lambda t: t.precio, reverse=True),
        "Stock Disponible": Ordering(lambda t: t.stock_disponible, reverse=True),
        "Más Ordenados": Ordering(lambda t: t.ordenes_nacionales, reverse=True),
    },
    default_order="Nombre",
)


INVENTORY_STATUS_LABELS = {
    DISPONIBLE: "Disponible",
    EN_PRODUCCION: "En Producción",
    BAJO_STOCK: "Bajo Stock",
    AGOTADO: "Agotado",
}

INVENTORY_VIEW = ViewSpec(
    search_fields=("nombre", "tipo", "color", "lote"),
    category=lambda l: INVENTORY_STATUS_LABELS.get(l.estado, l.estado),
    categories=(ALL, *INVENTORY_STATUS_LABELS.values()),
    orderings={
        "Recientes": Ordering(_recency("fecha_compra"), reverse=True),
        "Nombre": Ordering(_by_name),
        "Stock Alto": Ordering(lambda l: l.cantidad_disponible, reverse=True),
        "Stock Bajo": Ordering(lambda l: l.cantidad_disponible),
        "Valor": Ordering(lambda l: l.valor, reverse=True),
    },
    default_order="Nombre",
)

_PRIORITY_RANK = {PRIORIDAD_URGENTE: 0, PRIORIDAD_ALTA: 1, PRIORIDAD_MEDIA: 2, PRIORIDAD_BAJA: 3}

ORDERS_VIEW = ViewSpec(
    search_fields=("numero_orden", "nombre", "tipo_tela"),
    category=lambda o: o.estado,
    categories=(ALL, *ORDER_STATUSES),
    orderings={
        "Recientes": Ordering(_recency("fecha_creacion"), reverse=True),
        "Nombre": Ordering(_by_name),
        "Prioridad": Ordering(lambda o: _PRIORITY_RANK.get(o.prioridad, len(_PRIORITY_RANK))),
    },
    default_order="Nombre",
)


# The progress screen filters in the store query rather than in memory.
PROGRESS_FILTERS: dict[str, str | None] = {
    ALL: None,
    "Completadas": ESTADO_COMPLETADA,
    "En curso": ESTADO_EN_CURSO,
    "Pendientes": ESTADO_PENDIENTE,
}


def progress_filter_estado(label: str) -> str | None:
    """Stored status for a progress selector label; unknown labels mean no filter."""
    return PROGRESS_FILTERS.get(label)
