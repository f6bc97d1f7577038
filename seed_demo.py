"""Load a demo account and sample documents into the local database.

Usage: python seed_demo.py [--db db/texia.db] [--email demo@texia.pe] [--password demo123]
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

HERE = Path(__file__).resolve().parent
SRC = HERE / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from texia.data.auth import AuthError  # noqa: E402
from texia.data.db import Db  # noqa: E402
from texia.data.repository import Repository  # noqa: E402
from texia.logging_conf import configure_logging  # noqa: E402
from texia.settings import default_db_path  # noqa: E402


TELAS = [
    {"nombre": "Algodón Pima", "tipo": "Algodón", "color": "Blanco", "precio": 18.5, "stockDisponible": 1200,
     "proveedor": "Textil Norte", "ubicacion": "Lima", "ordenesNacionales": 42},
    {"nombre": "Seda Natural", "tipo": "Seda", "color": "Marfil", "precio": 65.0, "stockDisponible": 150,
     "proveedor": "Sedas del Sur", "ubicacion": "Arequipa", "ordenesNacionales": 7},
    {"nombre": "Poliéster Premium", "tipo": "Poliéster", "color": "Azul", "precio": 9.9, "stockDisponible": 3000,
     "proveedor": "Fibras SAC", "ubicacion": "Callao", "ordenesNacionales": 58},
    {"nombre": "Lino Europeo", "tipo": "Lino", "color": "Beige", "precio": 32.0, "stockDisponible": 0,
     "proveedor": "Importadora Lino", "ubicacion": "Lima", "ordenesNacionales": 12},
]


def seed(repo: Repository, *, email: str, password: str) -> bool:
    """Load the sample documents once. Returns False when telas already exist.

    Raises AuthError when the account exists under a different password.
    """
    try:
        user = repo.auth.create_account(email, password, display_name="Operario Demo")
    except AuthError:
        user = repo.auth.sign_in(email, password)

    if repo.store.count("telas"):
        return False

    now = datetime.now(timezone.utc)
    for tela in TELAS:
        repo.store.add("telas", tela)

    lotes = [
        ("Algodón Pima", "Algodón", "Blanco", 100.0, 90.0, 0.0, "L-001"),
        ("Poliéster Premium", "Poliéster", "Azul", 50.0, 10.0, 5.0, "L-002"),
        ("Seda Natural", "Seda", "Marfil", 30.0, 30.0, 0.0, "L-003"),
        ("Lino Europeo", "Lino", "Beige", 80.0, 5.0, 0.0, "L-004"),
    ]
    for i, (nombre, tipo, color, comprada, usada, prod, lote) in enumerate(lotes):
        repo.store.add(
            "inventario_telas",
            {
                "userId": user.uid,
                "nombre": nombre,
                "tipo": tipo,
                "color": color,
                "cantidadComprada": comprada,
                "cantidadUsada": usada,
                "cantidadEnProduccion": prod,
                "precioCompra": 12.0 + i,
                "proveedor": "Textil Norte",
                "fechaCompra": now - timedelta(days=10 * i),
                "ubicacionAlmacen": f"Estante {i + 1}",
                "lote": lote,
            },
        )

    tareas = [
        ("OP-1001", "Polos básicos", "Algodón", "120 mts", "30 mts", "EN_CURSO", "ALTA"),
        ("OP-1002", "Camisas de seda", "Seda", "40 mts", "40 mts", "COMPLETADA", "MEDIA"),
        ("OP-1003", "Chalecos", "Poliéster", "200 mts", "0 mts", "PENDIENTE", "URGENTE"),
    ]
    for i, (num, nombre, tela, cantidad, hechos, estado, prioridad) in enumerate(tareas):
        repo.store.add(
            "tareas",
            {
                "usuarioAsignado": user.uid,
                "numeroOrden": num,
                "nombre": nombre,
                "tipoTela": tela,
                "cantidad": cantidad,
                "metrosCompletados": hechos,
                "tiempoRestante": f"{2 + i}h",
                "estado": estado,
                "prioridad": prioridad,
                "fechaCreacion": now - timedelta(days=i),
                "fechaInicio": now - timedelta(days=i, hours=3),
                "tiempoTrabajado": f"{3 * i}h",
            },
        )

    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Carga datos de ejemplo")
    parser.add_argument("--db", type=Path, default=default_db_path())
    parser.add_argument("--email", default="demo@texia.pe")
    parser.add_argument("--password", default="demo123")
    args = parser.parse_args(argv)

    configure_logging("INFO")
    db = Db(args.db)
    db.ensure_schema()
    repo = Repository(db)

    try:
        loaded = seed(repo, email=args.email, password=args.password)
    except AuthError as ex:
        print(f"No se pudo usar la cuenta {args.email}: {ex}")
        return 1

    if loaded:
        print(f"Datos de ejemplo cargados para {args.email} en {args.db}")
    else:
        print(f"La base {args.db} ya tiene telas; no se cargó nada")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
