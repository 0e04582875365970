import math
from dataclasses import dataclass, fields, replace
from typing import Iterable, List, Sequence, TypeVar

from charging_app.schemas.station import StationOut

PAGE_SIZE = 6

T = TypeVar("T")


@dataclass(frozen=True)
class StationFilters:
    search: str = ""
    pin_code: str = ""
    connector_type: str = ""
    status: str = ""

    @property
    def active_count(self) -> int:
        return sum(1 for f in fields(self) if getattr(self, f.name))

    @property
    def has_active(self) -> bool:
        return self.active_count > 0

    def updated(self, **changes) -> "StationFilters":
        return replace(self, **changes)


def _searchable_text(station: StationOut) -> str:
    connector = (station.connector_type or "").replace("_", " ")
    return " ".join(
        [
            station.station_name or "",
            station.location_address or "",
            station.pin_code or "",
            connector,
            station.status or "",
        ]
    ).lower()


def matches(station: StationOut, filters: StationFilters) -> bool:
    """
    True si la estación pasa TODOS los filtros activos (AND).
    - search: subcadena sin mayúsculas sobre nombre, dirección, pin, conector y estado
    - pin_code: subcadena sin mayúsculas; sin pin la estación no pasa
    - connector_type: igualdad exacta
    - status: igualdad sin mayúsculas
    """
    if filters.search:
        term = filters.search.strip().lower()
        if term not in _searchable_text(station):
            return False

    if filters.pin_code:
        if not station.pin_code:
            return False
        if filters.pin_code.strip().lower() not in station.pin_code.lower():
            return False

    if filters.connector_type and station.connector_type != filters.connector_type:
        return False

    if filters.status and (station.status or "").lower() != filters.status.lower():
        return False

    return True


def filter_stations(stations: Iterable[StationOut], filters: StationFilters) -> List[StationOut]:
    return [s for s in stations if matches(s, filters)]


class Paginator:
    """Pagina una lista ya filtrada con tamaño fijo (6 por defecto)."""

    def __init__(self, items: Sequence[T], page_size: int = PAGE_SIZE):
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.items = items
        self.page_size = page_size

    @property
    def page_count(self) -> int:
        return math.ceil(len(self.items) / self.page_size)

    def clamp(self, page: int) -> int:
        # Fuera de rango (p.ej. tras borrar) vuelve a la página 1
        if page < 1 or page > max(self.page_count, 1):
            return 1
        return page

    def page(self, page: int) -> List[T]:
        start = (page - 1) * self.page_size
        return list(self.items[start:start + self.page_size])

    def pages(self) -> List[List[T]]:
        return [self.page(n) for n in range(1, self.page_count + 1)]
