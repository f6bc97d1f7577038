from __future__ import annotations

from contextlib import contextmanager
from collections.abc import Callable

from nicegui import app, ui

from texia.core.models import User


_THEMED_CLIENTS: set[str] = set()


def apply_theme() -> None:
    """Global colors and a narrow, mobile-first page width."""
    try:
        ui.colors(
            primary="#6366f1",  # indigo-500
            secondary="#10b981",  # emerald-500
            accent="#f59e0b",  # amber-500
            positive="#16a34a",
            negative="#ef4444",
            warning="#f59e0b",
        )
    except Exception:
        # Keep running even if NiceGUI changes the API.
        pass

    ui.add_css(
        """
        body { background: #f3f4f6; }
        .tx-container { max-width: 720px; margin: 0 auto; padding: 16px; }
        .tx-header { border-bottom: 1px solid rgba(15, 23, 42, 0.08); }
        .tx-card { border-radius: 12px; }
        .tx-muted { color: #6b7280; }
        """
    )


def ensure_theme() -> None:
    """Apply theme once per client page; colors and CSS are scoped to the page."""
    client = ui.context.client
    if client.id in _THEMED_CLIENTS:
        return
    apply_theme()
    _THEMED_CLIENTS.add(client.id)
    client.on_delete(lambda: _THEMED_CLIENTS.discard(client.id))


@contextmanager
def page_container():
    with ui.element("div").classes("tx-container w-full"):
        yield


# Session: the signed-in uid lives in the browser-bound user storage.
def session_uid() -> str | None:
    uid = app.storage.user.get("uid")
    return str(uid) if uid else None


def start_session(user: User) -> None:
    app.storage.user["uid"] = user.uid
    app.storage.user["email"] = user.email
    app.storage.user["display_name"] = user.label


def end_session() -> None:
    app.storage.user.clear()


def session_label() -> str:
    return str(app.storage.user.get("display_name") or "Usuario")


def rename_session(display_name: str) -> None:
    app.storage.user["display_name"] = display_name


def render_nav(active: str | None = None, *, title: str = "TexIA") -> None:
    ensure_theme()
    active_key = active or "dashboard"
    sections: list[tuple[str, str, str]] = [
        ("dashboard", "Inicio", "/"),
        ("ordenes", "Órdenes", "/ordenes"),
        ("progreso", "Progreso", "/progreso"),
        ("defectos", "Defectos", "/defectos"),
        ("comprar", "Comprar", "/comprar"),
        ("inventario", "Inventario", "/inventario"),
    ]

    with ui.header().classes("tx-header bg-white text-slate-900"):
        with ui.row().classes("w-full items-center justify-between gap-2 px-2 py-1"):
            ui.label(title).classes("text-xl font-semibold leading-none")
            with ui.row().classes("items-center gap-1"):
                for key, label, path in sections:
                    props = "dense no-caps color=primary" + (" unelevated" if key == active_key else " flat")
                    ui.button(label, on_click=lambda p=path: ui.navigate.to(p)).props(props)
                with ui.button(icon="account_circle").props("dense flat round color=primary"):
                    with ui.menu().props("auto-close"):
                        ui.menu_item("Perfil", on_click=lambda: ui.navigate.to("/perfil"))
                        ui.menu_item("Cerrar sesión", on_click=lambda: ui.navigate.to("/logout"))


def render_error_banner(message: str | None, *, on_dismiss: Callable[[], None]) -> None:
    if not message:
        return
    with ui.card().classes("tx-card w-full bg-red-50"):
        with ui.row().classes("w-full items-center justify-between no-wrap"):
            ui.label(message).classes("text-red-700")
            ui.button(icon="close", on_click=on_dismiss).props("flat dense round color=negative")


def stat_card(label: str, value: str, *, icon: str | None = None) -> None:
    with ui.card().classes("tx-card p-3 grow"):
        with ui.row().classes("items-center gap-2 no-wrap"):
            if icon:
                ui.icon(icon).classes("text-2xl text-primary")
            with ui.column().classes("gap-0"):
                ui.label(value).classes("text-xl font-semibold")
                ui.label(label).classes("text-xs tx-muted")


def chip_selector(options: tuple[str, ...] | list[str], selected: str, on_select: Callable[[str], None]) -> None:
    with ui.row().classes("gap-1 flex-wrap"):
        for opt in options:
            props = "dense no-caps rounded color=primary" + (" unelevated" if opt == selected else " outline")
            ui.button(opt, on_click=lambda o=opt: on_select(o)).props(props)


def format_timestamp(ts, fmt: str = "%d-%m-%Y") -> str:
    if ts is None:
        return "—"
    try:
        return ts.astimezone().strftime(fmt)
    except (ValueError, OSError):
        return ts.strftime(fmt)
