from __future__ import annotations

import logging
import sqlite3
from uuid import uuid4

from werkzeug.security import check_password_hash, generate_password_hash

from texia.core.models import User
from texia.data.db import Db

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Sign-in / sign-up failure with a user-facing message."""


def _normalize_email(email: str) -> str:
    return str(email or "").strip().lower()


class AuthService:
    """Email + password accounts.

    Sessions are not kept here: callers hold on to the returned ``User`` (the
    web UI stores its uid in the browser session).
    """

    def __init__(self, db: Db):
        self.db = db

    def create_account(self, email: str, password: str, *, display_name: str | None = None) -> User:
        email = _normalize_email(email)
        if not email or "@" not in email:
            raise AuthError("Correo electrónico inválido")
        if not password:
            raise AuthError("Contraseña vacía")

        uid = uuid4().hex[:28]
        try:
            with self.db.connect() as con:
                con.execute(
                    """
                    INSERT INTO accounts(uid, email, password_hash, display_name)
                    VALUES(?, ?, ?, ?)
                    """,
                    (uid, email, generate_password_hash(password), display_name),
                )
        except sqlite3.IntegrityError as ex:
            raise AuthError("El correo ya está registrado") from ex

        logger.info("Cuenta creada: %s", email)
        return User(uid=uid, email=email, display_name=display_name)

    def sign_in(self, email: str, password: str) -> User:
        email = _normalize_email(email)
        with self.db.connect() as con:
            row = con.execute(
                "SELECT uid, email, password_hash, display_name FROM accounts WHERE email = ?",
                (email,),
            ).fetchone()
        if row is None or not password or not check_password_hash(row["password_hash"], password):
            logger.info("Inicio de sesión rechazado: %s", email)
            raise AuthError("Correo o contraseña incorrectos")
        return User(uid=str(row["uid"]), email=str(row["email"]), display_name=row["display_name"])

    def get_user(self, uid: str | None) -> User | None:
        if not uid:
            return None
        with self.db.connect() as con:
            row = con.execute(
                "SELECT uid, email, display_name FROM accounts WHERE uid = ?",
                (str(uid),),
            ).fetchone()
        if row is None:
            return None
        return User(uid=str(row["uid"]), email=str(row["email"]), display_name=row["display_name"])

    def update_display_name(self, uid: str, display_name: str | None) -> None:
        with self.db.connect() as con:
            con.execute("UPDATE accounts SET display_name = ? WHERE uid = ?", (display_name, str(uid)))
