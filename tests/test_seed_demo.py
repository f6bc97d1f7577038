import pytest

import seed_demo
from texia.data.auth import AuthError
from texia.data.db import Db
from texia.data.repository import Repository


@pytest.fixture()
def repo(tmp_path) -> Repository:
    db = Db(tmp_path / "test.db")
    db.ensure_schema()
    return Repository(db)


def test_seed_runs_once(repo):
    assert seed_demo.seed(repo, email="demo@texia.pe", password="demo123") is True
    counts = {c: repo.store.count(c) for c in ("telas", "inventario_telas", "tareas")}

    assert seed_demo.seed(repo, email="demo@texia.pe", password="demo123") is False
    assert {c: repo.store.count(c) for c in counts} == counts
    assert counts["telas"] == len(seed_demo.TELAS)


def test_seed_with_wrong_password_raises_before_writing(repo):
    repo.auth.create_account("demo@texia.pe", "demo123")

    with pytest.raises(AuthError):
        seed_demo.seed(repo, email="demo@texia.pe", password="otra")
    assert repo.store.count("telas") == 0


def test_main_reports_account_error(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(seed_demo, "configure_logging", lambda level: None)
    db_path = tmp_path / "demo.db"
    assert seed_demo.main(["--db", str(db_path), "--password", "demo123"]) == 0

    assert seed_demo.main(["--db", str(db_path), "--password", "otra"]) == 1
    assert "No se pudo usar la cuenta demo@texia.pe" in capsys.readouterr().out
