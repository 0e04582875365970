"""
Gráficas SVG del dashboard: pastel de estados, barras por conector y serie
temporal. Todo se recalcula desde cero en cada tick a partir de la colección
filtrada; con cero registros cada gráfica pinta un estado vacío.
"""
import math
from dataclasses import dataclass
from html import escape
from typing import Dict, Iterable, List, Sequence

from charging_app.client.stats import StationStats, StatSample, UNKNOWN_CONNECTOR, group_by_connector
from charging_app.schemas.station import STATUS_MAINTENANCE, STATUS_OPERATIONAL, StationOut

COLOR_OPERATIONAL = "#10b981"
COLOR_MAINTENANCE = "#ef4444"
COLOR_TOTAL = "#3b82f6"
COLOR_EMPTY = "#e5e7eb"
COLOR_OTHER = "#6b7280"

CONNECTOR_LABELS: Dict[str, str] = {
    "TYPE_2_AC": "Type 2 (AC)",
    "CCS2_DC": "CCS2 (DC Fast)",
    "BHARAT_AC_001": "Bharat AC-001",
    "BHARAT_DC_001": "Bharat DC-001",
}

CONNECTOR_COLORS: Dict[str, str] = {
    "TYPE_2_AC": "#3b82f6",
    "CCS2_DC": "#8b5cf6",
    "BHARAT_AC_001": "#f59e0b",
    "BHARAT_DC_001": "#ec4899",
}

PIE_SIZE = 140
PIE_RADIUS = 60

LINE_WIDTH = 1000
LINE_HEIGHT = 220
LINE_PADDING = 40
Y_LABELS = 5
X_LABELS = 5
MARKER_EVERY = 5


def _num(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def percentage(value: int, total: int) -> float:
    if total == 0:
        return 0.0
    return value / total * 100


def connector_label(connector_type: str) -> str:
    if connector_type in CONNECTOR_LABELS:
        return CONNECTOR_LABELS[connector_type]
    return connector_type.replace("_", " ")


# ------------------ PASTEL DE ESTADOS ------------------ #
@dataclass(frozen=True)
class PieSlice:
    name: str
    value: int
    percent: float
    color: str
    path: str


def arc_path(percent: float, offset: float = 0.0, radius: float = PIE_RADIUS, center: float = PIE_SIZE / 2) -> str:
    """
    Path SVG de una porción que arranca en las 12 en punto + offset (en %).
    """
    start = math.radians(offset / 100 * 360 - 90)
    end = math.radians((offset + percent) / 100 * 360 - 90)
    x1 = center + radius * math.cos(start)
    y1 = center + radius * math.sin(start)
    x2 = center + radius * math.cos(end)
    y2 = center + radius * math.sin(end)
    large_arc = 1 if percent > 50 else 0
    return (
        f"M {_num(center)} {_num(center)} L {_num(x1)} {_num(y1)} "
        f"A {_num(radius)} {_num(radius)} 0 {large_arc} 1 {_num(x2)} {_num(y2)} Z"
    )


def status_pie(stats: StationStats) -> List[PieSlice]:
    """
    Dos porciones (operativas y en mantenimiento) sobre el total.
    Las estaciones con otro estado dejan un hueco sin pintar.
    """
    op_pct = percentage(stats.operational, stats.total)
    mt_pct = percentage(stats.maintenance, stats.total)
    return [
        PieSlice(STATUS_OPERATIONAL, stats.operational, op_pct, COLOR_OPERATIONAL, arc_path(op_pct, 0)),
        PieSlice(STATUS_MAINTENANCE, stats.maintenance, mt_pct, COLOR_MAINTENANCE, arc_path(mt_pct, op_pct)),
    ]


def render_status_pie(stats: StationStats) -> str:
    center = PIE_SIZE / 2
    parts = [
        f'<svg class="status-pie" width="{PIE_SIZE}" height="{PIE_SIZE}" viewBox="0 0 {PIE_SIZE} {PIE_SIZE}" '
        'xmlns="http://www.w3.org/2000/svg">',
        f'<circle cx="{_num(center)}" cy="{_num(center)}" r="{PIE_RADIUS}" fill="{COLOR_EMPTY}"/>',
    ]
    for slice_ in status_pie(stats):
        if slice_.percent <= 0:
            continue
        if slice_.percent >= 100:
            # un arco de 360° tiene inicio == fin y no se dibuja
            parts.append(
                f'<circle cx="{_num(center)}" cy="{_num(center)}" r="{PIE_RADIUS}" fill="{slice_.color}" '
                f'data-status="{escape(slice_.name)}"/>'
            )
        else:
            parts.append(f'<path d="{slice_.path}" fill="{slice_.color}" data-status="{escape(slice_.name)}"/>')
    parts.append(
        f'<text x="{_num(center)}" y="{_num(center)}" text-anchor="middle" dominant-baseline="central" '
        f'font-size="20" font-weight="bold" fill="#111827">{stats.total}</text>'
    )
    parts.append("</svg>")
    return "".join(parts)


# ------------------ BARRAS POR CONECTOR ------------------ #
@dataclass(frozen=True)
class ConnectorBar:
    connector_type: str
    label: str
    value: int
    percent: float  # relativo al grupo más grande
    color: str


def connector_bars(stations: Iterable[StationOut]) -> List[ConnectorBar]:
    counts = group_by_connector(stations)
    if not counts:
        return []
    max_value = max(max(counts.values()), 1)
    return [
        ConnectorBar(
            connector_type=key,
            label=UNKNOWN_CONNECTOR if key == UNKNOWN_CONNECTOR else connector_label(key),
            value=value,
            percent=value / max_value * 100,
            color=CONNECTOR_COLORS.get(key, COLOR_OTHER),
        )
        for key, value in counts.items()
    ]


def render_connector_bars(bars: Sequence[ConnectorBar], width: int = 400, bar_height: int = 22, gap: int = 12) -> str:
    label_width = 120
    if not bars:
        return (
            f'<svg class="connector-bars" width="{width}" height="40" xmlns="http://www.w3.org/2000/svg">'
            '<text x="10" y="25" font-size="12" fill="#9ca3af">No connector data available</text></svg>'
        )

    track = width - label_width - 10
    height = len(bars) * (bar_height + gap)
    parts = [
        f'<svg class="connector-bars" width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
        'xmlns="http://www.w3.org/2000/svg">'
    ]
    for i, bar in enumerate(bars):
        y = i * (bar_height + gap)
        bar_width = track * bar.percent / 100
        parts.append(
            f'<text x="0" y="{_num(y + bar_height * 0.7)}" font-size="12" fill="#374151">{escape(bar.label)}</text>'
        )
        parts.append(
            f'<rect x="{label_width}" y="{y}" width="{_num(track)}" height="{bar_height}" rx="4" fill="{COLOR_EMPTY}"/>'
        )
        parts.append(
            f'<rect x="{label_width}" y="{y}" width="{_num(bar_width)}" height="{bar_height}" rx="4" '
            f'fill="{bar.color}" data-connector="{escape(bar.connector_type)}"/>'
        )
        if bar.value > 0:
            parts.append(
                f'<text x="{_num(label_width + bar_width - 6)}" y="{_num(y + bar_height * 0.7)}" '
                f'text-anchor="end" font-size="11" fill="#ffffff">{bar.value}</text>'
            )
    parts.append("</svg>")
    return "".join(parts)


# ------------------ SERIE TEMPORAL ------------------ #
def chart_max(samples: Sequence[StatSample]) -> int:
    """Tope del eje Y: 20 % por encima del máximo observado."""
    peak = max((max(s.operational, s.maintenance, s.total) for s in samples), default=0)
    return math.ceil(max(peak, 1) * 1.2)


def x_label_indexes(count: int, labels: int = X_LABELS) -> List[int]:
    if count == 0:
        return []
    if count == 1:
        return [0]
    label_count = min(labels, count)
    step = (count - 1) // (label_count - 1)
    return [count - 1 if i == label_count - 1 else i * step for i in range(label_count)]


class LineGeometry:
    def __init__(self, samples: Sequence[StatSample], width: int = LINE_WIDTH,
                 height: int = LINE_HEIGHT, padding: int = LINE_PADDING):
        self.count = len(samples)
        self.width = width
        self.height = height
        self.padding = padding
        self.chart_width = width - padding * 2
        self.chart_height = height - padding * 2
        self.max_value = chart_max(samples)

    def x(self, index: int) -> float:
        if self.count <= 1:
            return float(self.padding)
        return self.padding + self.chart_width / (self.count - 1) * index

    def y(self, value: float) -> float:
        return self.padding + self.chart_height - value / self.max_value * self.chart_height


def line_path(samples: Sequence[StatSample], field: str, geometry: LineGeometry) -> str:
    return " ".join(
        f"{'M' if i == 0 else 'L'} {_num(geometry.x(i))} {_num(geometry.y(getattr(s, field)))}"
        for i, s in enumerate(samples)
    )


def render_time_series(samples: Sequence[StatSample]) -> str:
    """
    Tres líneas (operativas, mantenimiento y total) contra el tiempo,
    con marcadores cada 5 muestras y la última resaltada.
    """
    geo = LineGeometry(samples)
    parts = [
        f'<svg class="time-series" width="100%" height="{geo.height}" viewBox="0 0 {geo.width} {geo.height}" '
        'preserveAspectRatio="none" xmlns="http://www.w3.org/2000/svg">'
    ]
    if not samples:
        parts.append(
            f'<text x="{geo.width // 2}" y="{geo.height // 2}" text-anchor="middle" font-size="14" '
            'fill="#9ca3af">Collecting data...</text></svg>'
        )
        return "".join(parts)

    # Eje Y y líneas de guía
    for i in range(Y_LABELS):
        value = geo.max_value - geo.max_value / (Y_LABELS - 1) * i
        y = geo.y(value)
        parts.append(
            f'<line x1="{geo.padding}" y1="{_num(y)}" x2="{geo.width - geo.padding}" y2="{_num(y)}" '
            'stroke="#f3f4f6" stroke-width="1"/>'
        )
        parts.append(f'<text x="10" y="{_num(y + 4)}" font-size="11" fill="#6b7280">{math.floor(value + 0.5)}</text>')

    # Eje X con hasta 5 horas; la última con segundos
    last = len(samples) - 1
    for index in x_label_indexes(len(samples)):
        fmt = "%H:%M:%S" if index == last else "%H:%M"
        parts.append(
            f'<text x="{_num(geo.x(index))}" y="{geo.height - 5}" text-anchor="middle" font-size="11" '
            f'fill="#6b7280">{samples[index].timestamp.strftime(fmt)}</text>'
        )

    parts.append(
        f'<path d="{line_path(samples, "operational", geo)}" fill="none" stroke="{COLOR_OPERATIONAL}" '
        'stroke-width="3" stroke-linecap="round" stroke-linejoin="round" data-series="operational"/>'
    )
    parts.append(
        f'<path d="{line_path(samples, "maintenance", geo)}" fill="none" stroke="{COLOR_MAINTENANCE}" '
        'stroke-width="3" stroke-linecap="round" stroke-linejoin="round" data-series="maintenance"/>'
    )
    parts.append(
        f'<path d="{line_path(samples, "total", geo)}" fill="none" stroke="{COLOR_TOTAL}" '
        'stroke-width="2" stroke-dasharray="5,5" stroke-linecap="round" data-series="total"/>'
    )

    for i, s in enumerate(samples):
        if i % MARKER_EVERY and i != last:
            continue
        radius = 5 if i == last else 2
        extra = ' stroke="#ffffff" stroke-width="2" class="latest"' if i == last else ' opacity="0.6"'
        x = _num(geo.x(i))
        for value, color in (
            (s.operational, COLOR_OPERATIONAL),
            (s.maintenance, COLOR_MAINTENANCE),
            (s.total, COLOR_TOTAL),
        ):
            parts.append(f'<circle cx="{x}" cy="{_num(geo.y(value))}" r="{radius}" fill="{color}"{extra}/>')

    parts.append("</svg>")
    return "".join(parts)
