"""Document -> record projections.

Each ``*_from_doc`` takes the document id and its raw field mapping and returns
a fully populated record. Missing or mistyped fields fall back to the record
defaults; mapping never fails.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from texia.core.coerce import as_float, as_int, as_str, as_timestamp, parse_quantity
from texia.core.derived import LOW_STOCK_RATIO, classify_lot, progress_percent
from texia.core.models import (
    DEFAULT_UNIDAD,
    DEFECTO_REPORTADO,
    ESTADO_PENDIENTE,
    GRAVEDAD_MEDIA,
    PRIORIDAD_MEDIA,
    DefectReport,
    FabricListing,
    InventoryLot,
    ProductionOrder,
    ProgressRecord,
    UserProfile,
)


def fabric_from_doc(doc_id: str, data: Mapping[str, Any] | None) -> FabricListing:
    d = data or {}
    return FabricListing(
        id=str(doc_id),
        nombre=as_str(d.get("nombre")),
        tipo=as_str(d.get("tipo")),
        color=as_str(d.get("color")),
        precio=as_float(d.get("precio")),
        stock_disponible=max(0, as_int(d.get("stockDisponible"))),
        unidad=as_str(d.get("unidad"), DEFAULT_UNIDAD),
        proveedor=as_str(d.get("proveedor")),
        ubicacion=as_str(d.get("ubicacion")),
        imagen=as_str(d.get("imagen")),
        descripcion=as_str(d.get("descripcion")),
        ordenes_nacionales=as_int(d.get("ordenesNacionales")),
    )


def inventory_lot_from_doc(
    doc_id: str,
    data: Mapping[str, Any] | None,
    *,
    low_stock_ratio: float = LOW_STOCK_RATIO,
) -> InventoryLot:
    d = data or {}
    comprada = as_float(d.get("cantidadComprada"))
    usada = as_float(d.get("cantidadUsada"))
    en_produccion = as_float(d.get("cantidadEnProduccion"))
    return InventoryLot(
        id=str(doc_id),
        user_id=as_str(d.get("userId")),
        nombre=as_str(d.get("nombre")),
        tipo=as_str(d.get("tipo")),
        color=as_str(d.get("color")),
        cantidad_comprada=comprada,
        cantidad_usada=usada,
        cantidad_en_produccion=en_produccion,
        unidad=as_str(d.get("unidad"), DEFAULT_UNIDAD),
        precio_compra=as_float(d.get("precioCompra")),
        proveedor=as_str(d.get("proveedor")),
        fecha_compra=as_timestamp(d.get("fechaCompra")),
        ubicacion_almacen=as_str(d.get("ubicacionAlmacen")),
        lote=as_str(d.get("lote")),
        estado=classify_lot(comprada, usada, en_produccion, low_stock_ratio=low_stock_ratio),
    )


def production_order_from_doc(doc_id: str, data: Mapping[str, Any] | None) -> ProductionOrder:
    d = data or {}
    return ProductionOrder(
        id=str(doc_id),
        numero_orden=as_str(d.get("numeroOrden")),
        nombre=as_str(d.get("nombre")),
        tipo_tela=as_str(d.get("tipoTela"), "Sin especificar"),
        cantidad=as_str(d.get("cantidad"), "0 mts"),
        tiempo_restante=as_str(d.get("tiempoRestante"), "Sin tiempo"),
        estado=as_str(d.get("estado"), ESTADO_PENDIENTE),
        prioridad=as_str(d.get("prioridad"), PRIORIDAD_MEDIA),
        fecha_creacion=as_timestamp(d.get("fechaCreacion")),
    )


def progress_from_doc(doc_id: str, data: Mapping[str, Any] | None) -> ProgressRecord:
    d = data or {}
    completados = as_str(d.get("metrosCompletados"), "0")
    totales = as_str(d.get("cantidad"), "100")
    return ProgressRecord(
        id=str(doc_id),
        numero_orden=as_str(d.get("numeroOrden")),
        nombre=as_str(d.get("nombre")),
        estado=as_str(d.get("estado"), ESTADO_PENDIENTE),
        progreso=progress_percent(parse_quantity(completados, 0), parse_quantity(totales, 100)),
        metros_completados=completados,
        metros_totales=totales,
        fecha_inicio=as_timestamp(d.get("fechaInicio")),
        fecha_completado=as_timestamp(d.get("fechaCompletado")),
        tiempo_trabajado=as_str(d.get("tiempoTrabajado"), "0h"),
    )


def defect_from_doc(doc_id: str, data: Mapping[str, Any] | None) -> DefectReport:
    d = data or {}
    return DefectReport(
        id=str(doc_id),
        numero_orden=as_str(d.get("numeroOrden")),
        tipo_defecto=as_str(d.get("tipoDefecto")),
        descripcion=as_str(d.get("descripcion")),
        gravedad=as_str(d.get("gravedad"), GRAVEDAD_MEDIA),
        metros_afectados=as_str(d.get("metrosAfectados")),
        fecha=as_timestamp(d.get("fecha")),
        usuario_reporte=as_str(d.get("usuarioReporte")),
        estado=as_str(d.get("estado"), DEFECTO_REPORTADO),
    )


def profile_from_doc(uid: str, data: Mapping[str, Any] | None) -> UserProfile:
    d = data or {}
    return UserProfile(
        uid=str(uid),
        nombre=as_str(d.get("nombre")),
        telefono=as_str(d.get("telefono")),
        direccion=as_str(d.get("direccion")),
        email=as_str(d.get("email")),
    )
