from __future__ import annotations

import asyncio
import logging

from nicegui import ui

from texia.core.derived import dashboard_stats, inventory_stats, progress_stats
from texia.core.forms import (
    DefectForm,
    ProfileForm,
    submit_defect,
    submit_profile,
    validate_login,
    validate_registration,
)
from texia.core.models import (
    DEFECT_TYPES,
    ESTADO_COMPLETADA,
    ESTADO_EN_CURSO,
    GRAVEDAD_MEDIA,
    SEVERITIES,
)
from texia.core.views import (
    ALL,
    FABRIC_VIEW,
    INVENTORY_STATUS_LABELS,
    INVENTORY_VIEW,
    ORDERS_VIEW,
    PROGRESS_FILTERS,
    apply_view,
    progress_filter_estado,
)
from texia.data.auth import AuthError
from texia.data.repository import Repository
from texia.ui.loader import ScreenLoader
from texia.ui.widgets import (
    chip_selector,
    end_session,
    ensure_theme,
    format_timestamp,
    page_container,
    rename_session,
    render_error_banner,
    render_nav,
    session_label,
    session_uid,
    start_session,
    stat_card,
)

logger = logging.getLogger(__name__)

_PRIORITY_COLORS = {"URGENTE": "negative", "ALTA": "accent", "MEDIA": "primary", "BAJA": "secondary"}
_STATUS_COLORS = {ESTADO_COMPLETADA: "secondary", ESTADO_EN_CURSO: "accent", "PENDIENTE": "purple"}
_INVENTORY_COLORS = {"DISPONIBLE": "positive", "EN_PRODUCCION": "accent", "BAJO_STOCK": "warning", "AGOTADO": "negative"}


def register_pages(repo: Repository) -> None:
    def _require_session() -> str | None:
        uid = session_uid()
        if uid is None or repo.auth.get_user(uid) is None:
            ui.navigate.to("/login")
            return None
        return uid

    def _bind_loader(loader: ScreenLoader, refresh) -> None:
        """Load once on page entry and drop results once the client is deleted."""
        loader.attach(ui.context.client)

        async def _run() -> None:
            if await loader.load():
                refresh()

        ui.timer(0.1, _run, once=True)

    # ------------------------------------------------------------------ auth
    @ui.page("/login")
    def login_page() -> None:
        ensure_theme()
        with page_container():
            with ui.card().classes("tx-card w-full p-6 gap-3"):
                ui.label("TexIA").classes("text-3xl font-bold text-primary")
                ui.label("Bienvenido de nuevo").classes("tx-muted")
                email = ui.input("Correo electrónico").classes("w-full")
                password = ui.input("Contraseña", password=True, password_toggle_button=True).classes("w-full")

                async def _do_login() -> None:
                    error = validate_login(email.value, password.value)
                    if error:
                        ui.notify(error, color="warning")
                        return
                    btn.disable()
                    try:
                        user = await asyncio.to_thread(repo.auth.sign_in, email.value, password.value)
                    except AuthError as ex:
                        ui.notify(f"Error: {ex}", color="negative")
                        return
                    finally:
                        btn.enable()
                    start_session(user)
                    ui.notify("Inicio exitoso", color="positive")
                    ui.navigate.to("/")

                btn = ui.button("Ingresar", on_click=_do_login).classes("w-full").props("unelevated")
                with ui.row().classes("items-center gap-1"):
                    ui.label("¿No tienes cuenta?").classes("tx-muted")
                    ui.link("Regístrate", "/registro")

    @ui.page("/registro")
    def register_page() -> None:
        ensure_theme()
        with page_container():
            with ui.card().classes("tx-card w-full p-6 gap-3"):
                ui.label("Crear Cuenta").classes("text-2xl font-semibold")
                ui.label("Completa tus datos").classes("tx-muted")
                nombre = ui.input("Nombre").classes("w-full")
                email = ui.input("Correo electrónico").classes("w-full")
                password = ui.input("Contraseña", password=True).classes("w-full")
                confirm = ui.input("Confirmar contraseña", password=True).classes("w-full")

                async def _do_register() -> None:
                    error = validate_registration(email.value, password.value, confirm.value)
                    if error:
                        ui.notify(error, color="warning")
                        return
                    display_name = (nombre.value or "").strip() or None
                    try:
                        user = await asyncio.to_thread(
                            lambda: repo.auth.create_account(email.value, password.value, display_name=display_name)
                        )
                    except AuthError as ex:
                        ui.notify(f"Error: {ex}", color="negative")
                        return
                    start_session(user)
                    ui.notify("Usuario creado", color="positive")
                    ui.navigate.to("/")

                ui.button("Registrarse", on_click=_do_register).classes("w-full").props("unelevated")
                with ui.row().classes("items-center gap-1"):
                    ui.label("¿Ya tienes cuenta?").classes("tx-muted")
                    ui.link("Inicia sesión", "/login")

    @ui.page("/logout")
    def logout_page() -> None:
        end_session()
        ui.navigate.to("/login")

    # ------------------------------------------------------------- dashboard
    @ui.page("/")
    def dashboard() -> None:
        uid = _require_session()
        if uid is None:
            return
        render_nav("dashboard")
        loader = ScreenLoader(lambda: repo.get_dashboard_orders_model(user_id=uid), label="datos")

        @ui.refreshable
        def content() -> None:
            render_error_banner(loader.error, on_dismiss=lambda: (loader.dismiss_error(), content.refresh()))
            stats = dashboard_stats(loader.records)
            with ui.row().classes("w-full gap-3 no-wrap"):
                stat_card("En curso", str(stats.tareas_activas), icon="play_circle")
                stat_card("Pendientes", str(stats.tareas_pendientes), icon="schedule")
                stat_card("Metros producidos", f"{stats.metros_producidos:,}", icon="straighten")

            ui.label("Órdenes de hoy").classes("text-lg font-semibold mt-2")
            if loader.loading:
                ui.spinner(size="lg")
            elif not loader.records:
                with ui.card().classes("tx-card w-full items-center p-6"):
                    ui.label("No hay órdenes asignadas").classes("font-medium")
                    ui.label("Disfruta tu día").classes("tx-muted")
            for order in loader.records:
                with ui.card().classes("tx-card w-full p-3"):
                    with ui.row().classes("w-full items-center justify-between no-wrap"):
                        ui.label(f"#{order.numero_orden} · {order.nombre}").classes("font-semibold")
                        ui.badge(order.prioridad, color=_PRIORITY_COLORS.get(order.prioridad, "grey"))
                    ui.label(f"{order.tipo_tela} · {order.cantidad} · {order.tiempo_restante}").classes("text-sm tx-muted")
                    label = "Continuar Producción" if order.estado == ESTADO_EN_CURSO else "Iniciar Producción"
                    ui.button(label, on_click=lambda: ui.navigate.to("/progreso")).props("dense no-caps unelevated")

        with page_container():
            ui.label(f"Hola, {session_label()}").classes("text-2xl font-semibold")
            content()
            with ui.row().classes("w-full gap-2 mt-3"):
                ui.button("Comprar Telas", icon="shopping_cart", on_click=lambda: ui.navigate.to("/comprar")).props("no-caps")
                ui.button("Inventario", icon="inventory_2", on_click=lambda: ui.navigate.to("/inventario")).props("no-caps")
                ui.button("Registrar Defecto", icon="report", on_click=lambda: ui.navigate.to("/defectos")).props(
                    "no-caps color=negative"
                )
                ui.button("Ver Progreso", icon="insights", on_click=lambda: ui.navigate.to("/progreso")).props("no-caps")

        _bind_loader(loader, content.refresh)

    # ----------------------------------------------------------- marketplace
    @ui.page("/comprar")
    def comprar_page() -> None:
        uid = _require_session()
        if uid is None:
            return
        render_nav("comprar")
        loader = ScreenLoader(repo.get_fabrics_model, label="telas")
        state = {"query": "", "selector": ALL, "order": FABRIC_VIEW.default_order}

        def _set(**kw) -> None:
            state.update(kw)
            filters.refresh()
            content.refresh()

        @ui.refreshable
        def filters() -> None:
            chip_selector(FABRIC_VIEW.categories, state["selector"], lambda v: _set(selector=v))
            ui.select(list(FABRIC_VIEW.orderings), value=state["order"], label="Ordenar por",
                      on_change=lambda e: _set(order=e.value)).classes("w-64")

        @ui.refreshable
        def content() -> None:
            render_error_banner(loader.error, on_dismiss=lambda: (loader.dismiss_error(), content.refresh()))
            if loader.loading:
                ui.spinner(size="lg")
                return
            shown = apply_view(loader.records, FABRIC_VIEW, **state)
            ui.label(f"{len(shown)} telas disponibles").classes("text-sm tx-muted")
            for tela in shown:
                with ui.card().classes("tx-card w-full p-3"):
                    with ui.row().classes("w-full items-center justify-between no-wrap"):
                        ui.label(tela.nombre or "(sin nombre)").classes("font-semibold")
                        ui.label(f"S/ {tela.precio:,.2f} / {tela.unidad}").classes("text-primary font-semibold")
                    ui.label(f"{tela.tipo} · {tela.color} · {tela.proveedor}").classes("text-sm tx-muted")
                    if tela.descripcion:
                        ui.label(tela.descripcion).classes("text-sm")
                    with ui.row().classes("gap-3 text-xs tx-muted"):
                        ui.label(f"Stock: {tela.stock_disponible} {tela.unidad}")
                        ui.label(f"Ubicación: {tela.ubicacion or '—'}")
                        ui.label(f"Órdenes: {tela.ordenes_nacionales}")

        with page_container():
            ui.label("Comprar Telas").classes("text-2xl font-semibold")
            ui.input(placeholder="Buscar por nombre, tipo o color...",
                     on_change=lambda e: _set(query=e.value or "")).props("clearable").classes("w-full")
            filters()
            content()

        _bind_loader(loader, content.refresh)

    # ------------------------------------------------------------- inventory
    @ui.page("/inventario")
    def inventario_page() -> None:
        uid = _require_session()
        if uid is None:
            return
        render_nav("inventario")
        loader = ScreenLoader(lambda: repo.get_inventory_model(user_id=uid), label="inventario")
        state = {"query": "", "selector": ALL, "order": "Recientes"}

        def _set(**kw) -> None:
            state.update(kw)
            filters.refresh()
            content.refresh()

        @ui.refreshable
        def filters() -> None:
            chip_selector(INVENTORY_VIEW.categories, state["selector"], lambda v: _set(selector=v))
            chip_selector(tuple(INVENTORY_VIEW.orderings), state["order"], lambda v: _set(order=v))

        @ui.refreshable
        def content() -> None:
            render_error_banner(loader.error, on_dismiss=lambda: (loader.dismiss_error(), content.refresh()))
            stats = inventory_stats(loader.records)
            with ui.row().classes("w-full gap-3 no-wrap"):
                stat_card("Total comprado", f"{stats.total_comprado:,.1f} m")
                stat_card("Disponible", f"{stats.total_disponible:,.1f} m")
                stat_card("En producción", f"{stats.total_en_produccion:,.1f} m")
                stat_card("Valor total", f"S/ {stats.valor_total:,.2f}")
            if loader.loading:
                ui.spinner(size="lg")
                return
            shown = apply_view(loader.records, INVENTORY_VIEW, **state)
            ui.label(f"{len(shown)} telas en stock").classes("text-sm tx-muted")
            for lot in shown:
                with ui.card().classes("tx-card w-full p-3"):
                    with ui.row().classes("w-full items-center justify-between no-wrap"):
                        ui.label(lot.nombre or "(sin nombre)").classes("font-semibold")
                        ui.badge(INVENTORY_STATUS_LABELS.get(lot.estado, lot.estado),
                                 color=_INVENTORY_COLORS.get(lot.estado, "grey"))
                    ui.label(f"{lot.tipo} · {lot.color} · Lote {lot.lote or '—'}").classes("text-sm tx-muted")
                    if lot.cantidad_comprada > 0:
                        ui.linear_progress(value=max(0.0, lot.cantidad_disponible) / lot.cantidad_comprada,
                                           show_value=False)
                    with ui.row().classes("gap-3 text-xs tx-muted"):
                        ui.label(f"Disponible: {lot.cantidad_disponible:,.1f} {lot.unidad}")
                        ui.label(f"En producción: {lot.cantidad_en_produccion:,.1f}")
                        ui.label(f"Usado: {lot.cantidad_usada:,.1f}")
                        ui.label(f"Compra: {format_timestamp(lot.fecha_compra)}")
                        ui.label(f"Almacén: {lot.ubicacion_almacen or '—'}")

        with page_container():
            ui.label("Mi Inventario de Telas").classes("text-2xl font-semibold")
            ui.input(placeholder="Buscar por nombre, tipo, color o lote...",
                     on_change=lambda e: _set(query=e.value or "")).props("clearable").classes("w-full")
            filters()
            content()

        _bind_loader(loader, content.refresh)

    # ---------------------------------------------------------------- orders
    @ui.page("/ordenes")
    def ordenes_page() -> None:
        uid = _require_session()
        if uid is None:
            return
        render_nav("ordenes")
        loader = ScreenLoader(lambda: repo.get_orders_model(user_id=uid), label="tareas")
        state = {"query": "", "selector": ALL, "order": "Recientes"}

        def _set(**kw) -> None:
            state.update(kw)
            filters.refresh()
            content.refresh()

        @ui.refreshable
        def filters() -> None:
            chip_selector(ORDERS_VIEW.categories, state["selector"], lambda v: _set(selector=v))
            chip_selector(tuple(ORDERS_VIEW.orderings), state["order"], lambda v: _set(order=v))

        @ui.refreshable
        def content() -> None:
            render_error_banner(loader.error, on_dismiss=lambda: (loader.dismiss_error(), content.refresh()))
            if loader.loading:
                ui.spinner(size="lg")
                return
            shown = apply_view(loader.records, ORDERS_VIEW, **state)
            ui.label(f"{len(shown)} asignadas").classes("text-sm tx-muted")
            if not shown:
                ui.label("No hay órdenes").classes("tx-muted")
            for order in shown:
                with ui.card().classes("tx-card w-full p-3"):
                    with ui.row().classes("w-full items-center justify-between no-wrap"):
                        ui.label(f"#{order.numero_orden} · {order.nombre}").classes("font-semibold")
                        with ui.row().classes("gap-1"):
                            ui.badge(order.estado, color=_STATUS_COLORS.get(order.estado, "grey"))
                            ui.badge(order.prioridad, color=_PRIORITY_COLORS.get(order.prioridad, "grey"))
                    ui.label(f"{order.tipo_tela} · {order.cantidad} · {order.tiempo_restante}").classes("text-sm tx-muted")
                    ui.label(f"Creada: {format_timestamp(order.fecha_creacion)}").classes("text-xs tx-muted")

        with page_container():
            ui.label("Mis Órdenes").classes("text-2xl font-semibold")
            ui.input(placeholder="Buscar por número, nombre o tela...",
                     on_change=lambda e: _set(query=e.value or "")).props("clearable").classes("w-full")
            filters()
            content()

        _bind_loader(loader, content.refresh)

    # -------------------------------------------------------------- progress
    @ui.page("/progreso")
    def progreso_page() -> None:
        uid = _require_session()
        if uid is None:
            return
        render_nav("progreso")
        state = {"selector": ALL}
        # The status selector is part of the store query, so changing it re-fetches.
        loader = ScreenLoader(
            lambda: repo.get_progress_model(user_id=uid, estado=progress_filter_estado(state["selector"])),
            label="progreso",
        )

        async def _select(label: str) -> None:
            state["selector"] = label
            filters.refresh()
            if await loader.load():
                content.refresh()

        @ui.refreshable
        def filters() -> None:
            chip_selector(tuple(PROGRESS_FILTERS), state["selector"], _select)

        @ui.refreshable
        def content() -> None:
            render_error_banner(loader.error, on_dismiss=lambda: (loader.dismiss_error(), content.refresh()))
            stats = progress_stats(loader.records)
            with ui.row().classes("w-full gap-3 no-wrap"):
                stat_card("Completadas", str(stats.tareas_completadas), icon="task_alt")
                stat_card("En curso", str(stats.tareas_en_curso), icon="play_circle")
                stat_card("Pendientes", str(stats.tareas_pendientes), icon="schedule")
            with ui.row().classes("w-full gap-3 no-wrap"):
                stat_card("Metros producidos", f"{stats.metros_producidos:,}")
                stat_card("Promedio completado", f"{stats.promedio_completado}%")
                stat_card("Eficiencia", stats.eficiencia)
            if loader.loading:
                ui.spinner(size="lg")
                return
            for rec in loader.records:
                with ui.card().classes("tx-card w-full p-3"):
                    with ui.row().classes("w-full items-center justify-between no-wrap"):
                        ui.label(f"#{rec.numero_orden} · {rec.nombre}").classes("font-semibold")
                        ui.badge(rec.estado, color=_STATUS_COLORS.get(rec.estado, "grey"))
                    ui.linear_progress(value=rec.progreso / 100, show_value=False)
                    with ui.row().classes("gap-3 text-xs tx-muted"):
                        ui.label(f"{rec.progreso}%")
                        ui.label(f"{rec.metros_completados} / {rec.metros_totales}")
                        ui.label(f"Trabajado: {rec.tiempo_trabajado}")
                        ui.label(f"Inicio: {format_timestamp(rec.fecha_inicio)}")
                        if rec.estado == ESTADO_COMPLETADA and rec.fecha_completado is not None:
                            ui.label(f"Completada: {format_timestamp(rec.fecha_completado)}")

        with page_container():
            ui.label("Mi Progreso").classes("text-2xl font-semibold")
            filters()
            content()

        _bind_loader(loader, content.refresh)

    # --------------------------------------------------------------- defects
    @ui.page("/defectos")
    def defectos_page() -> None:
        uid = _require_session()
        if uid is None:
            return
        render_nav("defectos")
        user_name = session_label()
        loader = ScreenLoader(lambda: repo.get_recent_defects_model(user_id=uid), label="defectos recientes")
        form = DefectForm()

        @ui.refreshable
        def recent() -> None:
            render_error_banner(loader.error, on_dismiss=lambda: (loader.dismiss_error(), recent.refresh()))
            if loader.loading:
                ui.spinner()
                return
            if not loader.records:
                ui.label("Sin reportes recientes").classes("tx-muted")
            for d in loader.records:
                with ui.card().classes("tx-card w-full p-3"):
                    with ui.row().classes("w-full items-center justify-between no-wrap"):
                        ui.label(f"#{d.numero_orden} · {d.tipo_defecto}").classes("font-semibold")
                        ui.badge(d.gravedad)
                    ui.label(d.descripcion).classes("text-sm")
                    ui.label(f"{d.metros_afectados} · {format_timestamp(d.fecha, '%d-%m-%Y %H:%M')} · {d.estado}").classes(
                        "text-xs tx-muted"
                    )

        with page_container():
            ui.label("Registrar Defecto").classes("text-2xl font-semibold")
            with ui.card().classes("tx-card w-full p-4 gap-2"):
                ui.input("Número de orden").bind_value(form, "numero_orden").classes("w-full")
                tipo_select = ui.select(
                    list(DEFECT_TYPES),
                    label="Tipo de defecto",
                    on_change=lambda e: setattr(form, "tipo_defecto", e.value or ""),
                ).classes("w-full")
                ui.select(list(SEVERITIES), label="Gravedad", value=GRAVEDAD_MEDIA).bind_value(form, "gravedad").classes(
                    "w-full"
                )
                ui.input("Metros afectados").bind_value(form, "metros_afectados").classes("w-full")
                ui.textarea("Descripción").bind_value(form, "descripcion").classes("w-full")

                async def _do_submit() -> None:
                    btn.disable()
                    try:
                        result = await asyncio.to_thread(submit_defect, repo.store, form, user_id=uid, user_name=user_name)
                    finally:
                        btn.enable()
                    if result.ok:
                        tipo_select.value = None
                        # The recent list is not refreshed until the next visit.
                        with ui.dialog() as dialog, ui.card().classes("items-center p-6"):
                            ui.icon("check_circle").classes("text-5xl text-positive")
                            ui.label(result.message).classes("text-lg font-semibold")
                            ui.button("Aceptar", on_click=dialog.close).props("unelevated")
                        dialog.open()
                    else:
                        ui.notify(result.message, color="negative")

                btn = ui.button("Registrar Defecto", icon="report", on_click=_do_submit).classes("w-full").props(
                    "unelevated color=negative"
                )

            ui.label("Defectos recientes").classes("text-lg font-semibold mt-2")
            recent()

        _bind_loader(loader, recent.refresh)

    # --------------------------------------------------------------- profile
    @ui.page("/perfil")
    def perfil_page() -> None:
        uid = _require_session()
        if uid is None:
            return
        render_nav("perfil")
        user = repo.auth.get_user(uid)
        form = ProfileForm()

        with page_container():
            ui.label("Mi Perfil").classes("text-2xl font-semibold")
            ui.label(user.email if user else "").classes("tx-muted")
            with ui.card().classes("tx-card w-full p-4 gap-2"):
                ui.input("Nombre").bind_value(form, "nombre").classes("w-full")
                ui.input("Teléfono").bind_value(form, "telefono").classes("w-full")
                ui.input("Dirección").bind_value(form, "direccion").classes("w-full")

                async def _do_save() -> None:
                    result = await asyncio.to_thread(
                        submit_profile, repo.store, form, uid=uid, email=user.email if user else ""
                    )
                    if result.ok:
                        await asyncio.to_thread(repo.auth.update_display_name, uid, form.nombre.strip())
                        rename_session(form.nombre.strip())
                        ui.notify(result.message, color="positive")
                    else:
                        ui.notify(result.message, color="negative")

                ui.button("Guardar", icon="save", on_click=_do_save).classes("w-full").props("unelevated")

        async def _load_profile() -> None:
            try:
                profile = await asyncio.to_thread(repo.get_profile, uid=uid)
            except Exception as ex:
                logger.exception("Error al cargar perfil de %s", uid)
                ui.notify(f"Error al cargar datos: {ex}", color="negative")
                return
            form.nombre = profile.nombre
            form.telefono = profile.telefono
            form.direccion = profile.direccion

        ui.timer(0.1, _load_profile, once=True)
