from html import escape
from typing import List

from charging_app.client.charts import COLOR_MAINTENANCE, COLOR_OPERATIONAL, connector_label, percentage
from charging_app.client.dashboard import DashboardView
from charging_app.schemas.station import STATUS_OPERATIONAL, StationOut

PAGE_STYLE = """
body{font-family:system-ui,sans-serif;background:#f9fafb;margin:0;color:#111827}
header{display:flex;justify-content:space-between;align-items:center;padding:12px 24px;background:#fff;border-bottom:1px solid #e5e7eb}
main{max-width:1200px;margin:0 auto;padding:16px 24px}
.stats span{margin-right:12px}
.error{background:#fef2f2;border:1px solid #fecaca;color:#991b1b;padding:12px;border-radius:8px;margin:12px 0}
.grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(300px,1fr));gap:16px}
.card{background:#fff;border:1px solid #e5e7eb;border-radius:8px;padding:12px}
.card img{width:100%;height:140px;object-fit:cover;border-radius:6px}
.badge{display:inline-block;padding:2px 10px;border-radius:999px;font-size:12px}
.badge.ok{background:#d1fae5;color:#065f46}
.badge.ko{background:#fee2e2;color:#991b1b}
.charts{display:grid;grid-template-columns:1fr 1fr;gap:16px}
.panel{background:#fff;border:1px solid #e5e7eb;border-radius:8px;padding:16px}
.wide{grid-column:1 / -1}
.empty{background:#fff;border:1px solid #e5e7eb;border-radius:8px;padding:48px;text-align:center;color:#6b7280}
"""


def status_badge(status: str | None) -> str:
    # Verde solo para Operational; cualquier otro valor en rojo
    ok = (status or "").lower() == STATUS_OPERATIONAL.lower()
    css = "ok" if ok else "ko"
    return f'<span class="badge {css}">{escape(status or "Unknown")}</span>'


def station_card(station: StationOut, is_admin: bool) -> str:
    parts = [f'<article class="card" data-id="{station.id}">']
    if station.image_url and station.image_url.strip():
        parts.append(f'<img src="{escape(station.image_url, quote=True)}" alt="{escape(station.station_name)}">')
    parts.append(f"<h3>{escape(station.station_name)}</h3>")
    parts.append(status_badge(station.status))
    parts.append(f"<p>{escape(station.location_address)}</p>")
    if station.pin_code:
        parts.append(f"<p>PIN: {escape(station.pin_code)}</p>")
    if station.connector_type:
        parts.append(f"<p>Connector: {escape(connector_label(station.connector_type))}</p>")
    if station.location_link:
        parts.append(
            f'<a href="{escape(station.location_link, quote=True)}" target="_blank" rel="noopener">View on map</a>'
        )
    if is_admin:
        parts.append(
            f'<div class="actions"><button data-action="edit" data-id="{station.id}" data-command="edit {station.id}">Edit</button>'
            f'<button data-action="delete" data-id="{station.id}" data-command="delete {station.id}">Delete</button></div>'
        )
    parts.append("</article>")
    return "".join(parts)


def _summary(view: DashboardView) -> str:
    if view.filters.has_active:
        return f"Showing {view.filtered_count} of {view.total_count} stations"
    noun = "station" if view.total_count == 1 else "stations"
    return f"{view.total_count} {noun} available"


def _header(view: DashboardView) -> str:
    admin = "on" if view.is_admin else "off"
    return (
        "<header>"
        "<strong>Charging Stations</strong>"
        f'<div class="stats"><span>Total: {view.stats.total}</span>'
        f'<span style="color:{COLOR_OPERATIONAL}">Operational: {view.stats.operational}</span>'
        f'<span style="color:{COLOR_MAINTENANCE}">Maintenance: {view.stats.maintenance}</span></div>'
        f'<div><span class="admin-mode">Admin mode: {admin}</span> '
        f'<time>{view.clock.strftime("%b %d %H:%M:%S")}</time></div>'
        "</header>"
    )


def _legend(view: DashboardView) -> str:
    rows = []
    for name, value, color in (
        ("Operational", view.stats.operational, COLOR_OPERATIONAL),
        ("Maintenance", view.stats.maintenance, COLOR_MAINTENANCE),
    ):
        pct = percentage(value, view.stats.total)
        rows.append(f'<li><span style="color:{color}">&#9679;</span> {name}: {value} ({pct:.1f}%)</li>')
    return "<ul>" + "".join(rows) + "</ul>"


def _graph_view(view: DashboardView) -> str:
    if view.filtered_count == 0:
        title = "No stations match your filters" if view.filters.has_active else "No data to display"
        return f'<div class="empty"><p>{title}</p></div>'
    return (
        '<section class="charts">'
        f'<div class="panel"><h2>Status Distribution</h2>{view.status_pie_svg}{_legend(view)}</div>'
        f'<div class="panel"><h2>Connector Types</h2>{view.connector_bars_svg}</div>'
        f'<div class="panel wide"><h2>Live Trends</h2>{view.time_series_svg}</div>'
        "</section>"
    )


def _list_view(view: DashboardView) -> str:
    if view.filtered_count == 0:
        if view.filters.has_active:
            message = "No stations match your filters"
        elif view.is_admin:
            message = "Create your first charging station to get started"
        else:
            message = "Stations will appear here once added"
        return f'<div class="empty"><p>{message}</p></div>'

    cards = "".join(station_card(s, view.is_admin) for s in view.page_stations)
    pager = ""
    if view.total_pages > 1:
        pager = f'<nav class="pagination">Page {view.current_page} of {view.total_pages}</nav>'
    return f'<section class="grid">{cards}</section>{pager}'


def render_dashboard(view: DashboardView) -> str:
    """Página HTML completa a partir de una foto del dashboard."""
    body: List[str] = [_header(view), "<main>"]

    if view.loading:
        body.append('<div class="empty"><p>Loading stations...</p></div>')
    else:
        body.append(f'<h1>Charging Stations</h1><p class="summary">{_summary(view)}</p>')
        if view.filters.has_active:
            body.append(f'<p class="filters">Active filters: {view.filters.active_count}</p>')
        if view.is_admin:
            body.append('<button data-action="create" data-command="add">New Station</button>')
        if view.error:
            body.append(f'<div class="error" role="alert"><strong>Error</strong><div>{escape(view.error)}</div></div>')
        body.append(_graph_view(view) if view.view_mode == "graph" else _list_view(view))

    body.append("</main>")
    return (
        '<!DOCTYPE html><html lang="en"><head><meta charset="utf-8">'
        "<title>Charging Stations</title>"
        f"<style>{PAGE_STYLE}</style></head><body>{''.join(body)}</body></html>"
    )
