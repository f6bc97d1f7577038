from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


# Order status values as stored in `tareas`.
ESTADO_PENDIENTE = "PENDIENTE"
ESTADO_EN_CURSO = "EN_CURSO"
ESTADO_COMPLETADA = "COMPLETADA"
ORDER_STATUSES = (ESTADO_PENDIENTE, ESTADO_EN_CURSO, ESTADO_COMPLETADA)

PRIORIDAD_BAJA = "BAJA"
PRIORIDAD_MEDIA = "MEDIA"
PRIORIDAD_ALTA = "ALTA"
PRIORIDAD_URGENTE = "URGENTE"
PRIORITIES = (PRIORIDAD_BAJA, PRIORIDAD_MEDIA, PRIORIDAD_ALTA, PRIORIDAD_URGENTE)

GRAVEDAD_BAJA = "BAJA"
GRAVEDAD_MEDIA = "MEDIA"
GRAVEDAD_ALTA = "ALTA"
GRAVEDAD_CRITICA = "CRÍTICA"
SEVERITIES = (GRAVEDAD_BAJA, GRAVEDAD_MEDIA, GRAVEDAD_ALTA, GRAVEDAD_CRITICA)

DEFECTO_REPORTADO = "REPORTADO"

DEFECT_TYPES = (
    "Mancha en tela",
    "Rotura de hilos",
    "Defecto de tejido",
    "Color irregular",
    "Ancho incorrecto",
    "Encogimiento",
    "Defecto de tinte",
    "Agujeros",
    "Otro",
)

# Inventory lot status (derived, never stored).
AGOTADO = "AGOTADO"
EN_PRODUCCION = "EN_PRODUCCION"
BAJO_STOCK = "BAJO_STOCK"
DISPONIBLE = "DISPONIBLE"
INVENTORY_STATUSES = (AGOTADO, EN_PRODUCCION, BAJO_STOCK, DISPONIBLE)

DEFAULT_UNIDAD = "metros"


@dataclass(frozen=True)
class FabricListing:
    id: str
    nombre: str = ""
    tipo: str = ""
    color: str = ""
    precio: float = 0.0
    stock_disponible: int = 0
    unidad: str = DEFAULT_UNIDAD
    proveedor: str = ""
    ubicacion: str = ""
    imagen: str = ""
    descripcion: str = ""
    ordenes_nacionales: int = 0


@dataclass(frozen=True)
class InventoryLot:
    id: str
    user_id: str = ""
    nombre: str = ""
    tipo: str = ""
    color: str = ""
    cantidad_comprada: float = 0.0
    cantidad_usada: float = 0.0
    cantidad_en_produccion: float = 0.0
    unidad: str = DEFAULT_UNIDAD
    precio_compra: float = 0.0
    proveedor: str = ""
    fecha_compra: datetime | None = None
    ubicacion_almacen: str = ""
    lote: str = ""
    estado: str = DISPONIBLE

    @property
    def cantidad_disponible(self) -> float:
        return self.cantidad_comprada - self.cantidad_usada - self.cantidad_en_produccion

    @property
    def valor(self) -> float:
        return self.cantidad_comprada * self.precio_compra


@dataclass(frozen=True)
class ProductionOrder:
    id: str
    numero_orden: str = ""
    nombre: str = ""
    tipo_tela: str = "Sin especificar"
    cantidad: str = "0 mts"
    tiempo_restante: str = "Sin tiempo"
    # Unknown values are kept verbatim.
    estado: str = ESTADO_PENDIENTE
    prioridad: str = PRIORIDAD_MEDIA
    fecha_creacion: datetime | None = None


@dataclass(frozen=True)
class ProgressRecord:
    id: str
    numero_orden: str = ""
    nombre: str = ""
    estado: str = ESTADO_PENDIENTE
    progreso: int = 0
    metros_completados: str = "0"
    metros_totales: str = "100"
    fecha_inicio: datetime | None = None
    fecha_completado: datetime | None = None
    tiempo_trabajado: str = "0h"


@dataclass(frozen=True)
class DefectReport:
    id: str
    numero_orden: str = ""
    tipo_defecto: str = ""
    descripcion: str = ""
    gravedad: str = GRAVEDAD_MEDIA
    metros_afectados: str = ""
    fecha: datetime | None = None
    usuario_reporte: str = ""
    estado: str = DEFECTO_REPORTADO


@dataclass(frozen=True)
class UserProfile:
    uid: str
    nombre: str = ""
    telefono: str = ""
    direccion: str = ""
    email: str = ""


@dataclass(frozen=True)
class User:
    uid: str
    email: str
    display_name: str | None = None

    @property
    def label(self) -> str:
        if self.display_name:
            return self.display_name
        return self.email.split("@")[0] if self.email else "Usuario"
