from __future__ import annotations


from contextlib import contextmanager
import sqlite3
from pathlib import Path


# Runtime tunables seeded on first start. Users may edit them afterwards.
DEFAULT_CONFIG: dict[str, str] = {
    "dashboard_task_limit": "10",
    "recent_defects_limit": "5",
    "low_stock_ratio": "0.2",
}


class Db:
    def __init__(self, path: Path):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def connect(self):
        con = sqlite3.connect(self.path, timeout=20.0)
        con.row_factory = sqlite3.Row
        try:
            yield con
            con.commit()
        except Exception:
            con.rollback()
            raise
        finally:
            con.close()

    def ensure_schema(self) -> None:
        con = sqlite3.connect(self.path, timeout=10.0)
        try:
            con.execute("PRAGMA journal_mode=WAL;")

            con.executescript(
                """
                CREATE TABLE IF NOT EXISTS app_config (
                    config_key TEXT PRIMARY KEY,
                    config_value TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );

                -- Schemaless documents: one JSON object per (collection, doc_id).
                CREATE TABLE IF NOT EXISTS documents (
                    collection TEXT NOT NULL,
                    doc_id TEXT NOT NULL,
                    data_json TEXT NOT NULL,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (collection, doc_id)
                );

                CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents(collection);

                CREATE TABLE IF NOT EXISTS accounts (
                    uid TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    display_name TEXT,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );
                """
            )

            con.executemany(
                "INSERT OR IGNORE INTO app_config(config_key, config_value) VALUES(?, ?)",
                list(DEFAULT_CONFIG.items()),
            )
            con.commit()
        finally:
            con.close()
