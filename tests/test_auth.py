import pytest
from werkzeug.security import check_password_hash

from texia.data.auth import AuthError, AuthService
from texia.data.db import Db


@pytest.fixture()
def auth(tmp_path) -> AuthService:
    db = Db(tmp_path / "test.db")
    db.ensure_schema()
    return AuthService(db)


def test_create_and_sign_in(auth):
    created = auth.create_account("Ana@TexIA.pe ", "secreto1", display_name="Ana")

    user = auth.sign_in("ana@texia.pe", "secreto1")

    assert user.uid == created.uid
    assert user.email == "ana@texia.pe"
    assert user.label == "Ana"


def test_wrong_password_is_rejected(auth):
    auth.create_account("ana@texia.pe", "secreto1")
    with pytest.raises(AuthError):
        auth.sign_in("ana@texia.pe", "otro")


def test_unknown_email_is_rejected(auth):
    with pytest.raises(AuthError):
        auth.sign_in("nadie@texia.pe", "secreto1")


def test_duplicate_email_is_rejected(auth):
    auth.create_account("ana@texia.pe", "secreto1")
    with pytest.raises(AuthError, match="ya está registrado"):
        auth.create_account("ANA@texia.pe", "secreto2")


def test_invalid_email_is_rejected(auth):
    with pytest.raises(AuthError):
        auth.create_account("sin-arroba", "secreto1")


def test_get_user_and_label_fallback(auth):
    created = auth.create_account("luis@texia.pe", "secreto1")

    assert auth.get_user(created.uid).label == "luis"
    assert auth.get_user("no-existe") is None
    assert auth.get_user(None) is None


def test_update_display_name(auth):
    created = auth.create_account("luis@texia.pe", "secreto1")
    auth.update_display_name(created.uid, "Luis")
    assert auth.get_user(created.uid).display_name == "Luis"


def test_password_is_stored_as_werkzeug_hash(auth):
    created = auth.create_account("eva@texia.pe", "secreto1")

    with auth.db.connect() as con:
        row = con.execute("SELECT * FROM accounts WHERE uid = ?", (created.uid,)).fetchone()

    assert "password_salt" not in row.keys()
    assert row["password_hash"] != "secreto1"
    assert check_password_hash(row["password_hash"], "secreto1")
    assert not check_password_hash(row["password_hash"], "secreto2")


def test_empty_password_is_rejected_on_sign_in(auth):
    auth.create_account("eva@texia.pe", "secreto1")
    with pytest.raises(AuthError):
        auth.sign_in("eva@texia.pe", "")
