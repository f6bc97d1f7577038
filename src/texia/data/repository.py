from __future__ import annotations

import logging

from texia.core.derived import LOW_STOCK_RATIO
from texia.core.mapping import (
    defect_from_doc,
    fabric_from_doc,
    inventory_lot_from_doc,
    production_order_from_doc,
    profile_from_doc,
    progress_from_doc,
)
from texia.core.models import (
    DefectReport,
    FabricListing,
    InventoryLot,
    ProductionOrder,
    ProgressRecord,
    UserProfile,
)
from texia.data.auth import AuthService
from texia.data.db import DEFAULT_CONFIG, Db
from texia.data.documents import DocumentStore

logger = logging.getLogger(__name__)


class Repository:
    """Screen-level reads over the document store, plus app configuration."""

    def __init__(self, db: Db):
        self.db = db
        self.store = DocumentStore(db)
        self.auth = AuthService(db)

    # Config
    def get_config(self, *, key: str, default: str | None = None) -> str | None:
        key = str(key).strip()
        if not key:
            raise ValueError("config key vacío")
        with self.db.connect() as con:
            row = con.execute("SELECT config_value FROM app_config WHERE config_key = ?", (key,)).fetchone()
        if row is None:
            return default
        return str(row[0])

    def set_config(self, *, key: str, value: str) -> None:
        key = str(key).strip()
        if not key:
            raise ValueError("config key vacío")
        with self.db.connect() as con:
            con.execute(
                """
                INSERT INTO app_config(config_key, config_value) VALUES(?, ?)
                ON CONFLICT(config_key) DO UPDATE SET
                    config_value = excluded.config_value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, str(value)),
            )
        logger.info("Config '%s' = %r", key, value)

    def _config_int(self, key: str) -> int:
        raw = self.get_config(key=key, default=DEFAULT_CONFIG[key])
        try:
            return max(1, int(str(raw).strip()))
        except (TypeError, ValueError):
            logger.warning("Config %s inválida (%r); usando %s", key, raw, DEFAULT_CONFIG[key])
            return int(DEFAULT_CONFIG[key])

    def _low_stock_ratio(self) -> float:
        raw = self.get_config(key="low_stock_ratio", default=str(LOW_STOCK_RATIO))
        try:
            ratio = float(str(raw).strip())
        except (TypeError, ValueError):
            return LOW_STOCK_RATIO
        return ratio if 0.0 <= ratio <= 1.0 else LOW_STOCK_RATIO

    # Screen queries
    def get_fabrics_model(self) -> list[FabricListing]:
        docs = self.store.query("telas")
        return [fabric_from_doc(d.id, d.data) for d in docs]

    def get_inventory_model(self, *, user_id: str) -> list[InventoryLot]:
        ratio = self._low_stock_ratio()
        docs = self.store.query("inventario_telas", where={"userId": user_id})
        return [inventory_lot_from_doc(d.id, d.data, low_stock_ratio=ratio) for d in docs]

    def get_dashboard_orders_model(self, *, user_id: str) -> list[ProductionOrder]:
        limit = self._config_int("dashboard_task_limit")
        docs = self.store.query("tareas", where={"usuarioAsignado": user_id}, limit=limit)
        return [production_order_from_doc(d.id, d.data) for d in docs]

    def get_orders_model(self, *, user_id: str) -> list[ProductionOrder]:
        docs = self.store.query("tareas", where={"usuarioAsignado": user_id})
        return [production_order_from_doc(d.id, d.data) for d in docs]

    def get_progress_model(self, *, user_id: str, estado: str | None = None) -> list[ProgressRecord]:
        """Progress projection of the user's orders, filtered by the store when ``estado`` is set."""
        where = {"usuarioAsignado": user_id}
        if estado:
            where["estado"] = estado
        docs = self.store.query("tareas", where=where)
        return [progress_from_doc(d.id, d.data) for d in docs]

    def get_recent_defects_model(self, *, user_id: str) -> list[DefectReport]:
        limit = self._config_int("recent_defects_limit")
        docs = self.store.query(
            "defectos",
            where={"usuarioReporte": user_id},
            order_by="fecha",
            descending=True,
            limit=limit,
        )
        return [defect_from_doc(d.id, d.data) for d in docs]

    def get_profile(self, *, uid: str) -> UserProfile:
        doc = self.store.get("users", uid)
        return profile_from_doc(uid, doc.data if doc else None)
