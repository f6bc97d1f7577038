"""Form validation and submission.

Validation is a fixed, ordered list of checks; the first failing check is the
only message reported. Submissions append a new document and never update an
existing one (the profile merge is the single exception).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from texia.core.models import DEFECTO_REPORTADO, GRAVEDAD_MEDIA, SEVERITIES
from texia.data.documents import SERVER_TIMESTAMP, DocumentStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass
class SubmitResult:
    ok: bool
    message: str
    doc_id: str | None = None


@dataclass
class DefectForm:
    numero_orden: str = ""
    tipo_defecto: str = ""
    descripcion: str = ""
    gravedad: str = GRAVEDAD_MEDIA
    metros_afectados: str = ""

    def clear(self) -> None:
        self.numero_orden = ""
        self.tipo_defecto = ""
        self.descripcion = ""
        self.gravedad = GRAVEDAD_MEDIA
        self.metros_afectados = ""


def validate_defect_form(form: DefectForm) -> str | None:
    checks = (
        (form.numero_orden, "Ingrese el número de orden"),
        (form.tipo_defecto, "Seleccione el tipo de defecto"),
        (form.metros_afectados, "Ingrese los metros afectados"),
        (form.descripcion, "Ingrese una descripción"),
    )
    for value, message in checks:
        if not str(value or "").strip():
            return message
    if form.gravedad not in SEVERITIES:
        return "Seleccione la gravedad"
    return None


def submit_defect(store: DocumentStore, form: DefectForm, *, user_id: str, user_name: str = "Usuario") -> SubmitResult:
    error = validate_defect_form(form)
    if error:
        return SubmitResult(ok=False, message=error)

    data = {
        "numeroOrden": form.numero_orden,
        "tipoDefecto": form.tipo_defecto,
        "descripcion": form.descripcion,
        "gravedad": form.gravedad,
        "metrosAfectados": form.metros_afectados,
        "fecha": SERVER_TIMESTAMP,
        "usuarioReporte": user_id,
        "nombreUsuario": user_name,
        "estado": DEFECTO_REPORTADO,
    }
    try:
        doc_id = store.add("defectos", data)
    except Exception as ex:
        logger.exception("No se pudo registrar el defecto de la orden %s", form.numero_orden)
        return SubmitResult(ok=False, message=str(ex))

    form.clear()
    return SubmitResult(ok=True, message="Defecto registrado correctamente", doc_id=doc_id)


@dataclass
class ProfileForm:
    nombre: str = ""
    telefono: str = ""
    direccion: str = ""


def submit_profile(store: DocumentStore, form: ProfileForm, *, uid: str, email: str = "") -> SubmitResult:
    if not form.nombre.strip():
        return SubmitResult(ok=False, message="El nombre es obligatorio")

    data = {
        "nombre": form.nombre,
        "telefono": form.telefono,
        "direccion": form.direccion,
        "email": email,
        "updatedAt": SERVER_TIMESTAMP,
    }
    try:
        store.set("users", uid, data, merge=True)
    except Exception as ex:
        logger.exception("No se pudo guardar el perfil de %s", uid)
        return SubmitResult(ok=False, message=str(ex))
    return SubmitResult(ok=True, message="Perfil actualizado correctamente", doc_id=uid)


def validate_login(email: str, password: str) -> str | None:
    if not (email or "").strip() or not (password or "").strip():
        return "Complete todos los campos"
    return None


def validate_registration(email: str, password: str, confirm: str) -> str | None:
    if not (email or "").strip() or not (password or "").strip() or not (confirm or "").strip():
        return "Complete todos los campos"
    if password != confirm:
        return "Las contraseñas no coinciden"
    if len(password) < MIN_PASSWORD_LENGTH:
        return "Mínimo 6 caracteres"
    return None
