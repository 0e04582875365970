import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from charging_app.client.api import StationApiClient, StationApiError
from charging_app.client.charts import render_connector_bars, render_status_pie, render_time_series, connector_bars
from charging_app.client.filters import PAGE_SIZE, Paginator, StationFilters, filter_stations
from charging_app.client.preferences import Preferences
from charging_app.client.stats import HISTORY_SIZE, StationStats, TimeSeriesBuffer, compute_stats
from charging_app.core.config import settings
from charging_app.schemas.station import StationOut

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load charging stations. Please try again later."
CREATE_ERROR = "Failed to create station. Please try again."
UPDATE_ERROR = "Failed to update station. Please try again."
DELETE_ERROR = "Failed to delete station. Please try again."
ADMIN_REQUIRED_ERROR = "Enable admin mode to manage stations."

VIEW_MODES = ("graph", "list")


@dataclass(frozen=True)
class DashboardView:
    """Foto del estado del dashboard lista para pintar."""
    clock: datetime
    is_admin: bool
    loading: bool
    error: Optional[str]
    view_mode: str
    filters: StationFilters
    stats: StationStats
    total_count: int
    filtered_count: int
    current_page: int
    total_pages: int
    page_stations: List[StationOut]
    submitting: bool
    deleting: bool
    status_pie_svg: str
    connector_bars_svg: str
    time_series_svg: str


class Dashboard:
    """
    Estado del cliente: colección en memoria, filtros, paginación y
    estadísticas en vivo.

    - La colección solo cambia con un List completo (tras cada alta/edición/baja
      se vuelve a pedir entera).
    - Cada List lleva un número de secuencia; una respuesta (o un error) más
      vieja que la última ya aplicada se descarta.
    - Las altas, ediciones y bajas solo se envían con el modo admin activo.
    - ``start()`` lanza dos tareas periódicas (reloj y estadísticas) que
      ``stop()`` cancela.
    """

    def __init__(
        self,
        api: StationApiClient,
        preferences: Optional[Preferences] = None,
        *,
        page_size: int = PAGE_SIZE,
        tick_seconds: Optional[float] = None,
        history_size: int = HISTORY_SIZE,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.api = api
        self.preferences = preferences or Preferences()
        self.page_size = page_size
        self.tick_seconds = tick_seconds or settings.TICK_SECONDS
        self._now = now

        self.stations: List[StationOut] = []
        self.loading = True
        self.error: Optional[str] = None
        self.submitting = False
        self.deleting = False
        self.is_admin = self.preferences.get_admin_mode()
        self.view_mode = "graph"
        self.filters = StationFilters()
        self.current_page = 1
        self.stats = StationStats()
        self.history = TimeSeriesBuffer(maxlen=history_size)
        self.clock = now()

        self._issued_seq = 0
        self._applied_seq = 0
        self._tasks: List[asyncio.Task] = []
        self._listeners: List[Callable[["Dashboard"], None]] = []

    # ------------------ CARGA DE DATOS ------------------ #
    async def load(self) -> bool:
        """Primer List; solo aquí se muestra el estado de carga."""
        self.loading = True
        try:
            return await self.refresh()
        finally:
            self.loading = False

    async def retry(self) -> bool:
        self.error = None
        return await self.refresh()

    async def refresh(self) -> bool:
        """
        Pide la colección completa. Devuelve True si la respuesta se aplicó.
        """
        self._issued_seq += 1
        seq = self._issued_seq
        self.error = None

        try:
            stations = await self.api.get_all_stations()
        except StationApiError as exc:
            if seq > self._applied_seq:
                # Un fallo también cuenta como la última respuesta: las más viejas se descartan
                self._applied_seq = seq
                self.error = exc.message or LOAD_ERROR
            logger.warning("Failed to fetch stations: %s", exc.message)
            return False

        if seq <= self._applied_seq:
            logger.debug("Discarding stale station list (request %s, applied %s)", seq, self._applied_seq)
            return False

        self._applied_seq = seq
        self.stations = stations
        self.current_page = self.paginator().clamp(self.current_page)
        self._recompute_stats()
        return True

    def dismiss_error(self) -> None:
        self.error = None

    # ------------------ MUTACIONES ------------------ #
    @property
    def busy(self) -> bool:
        return self.submitting or self.deleting

    async def _mutate(self, flag: str, call: Callable[[], Awaitable[object]], fallback: str) -> bool:
        if not self.is_admin:
            self.error = ADMIN_REQUIRED_ERROR
            return False
        if self.busy:
            logger.debug("Ignoring action while another request is in flight")
            return False

        setattr(self, flag, True)
        self.error = None
        try:
            await call()
        except StationApiError as exc:
            # El estado previo queda intacto
            self.error = exc.message or fallback
            return False
        else:
            await self.refresh()
            return True
        finally:
            setattr(self, flag, False)

    async def create_station(self, data: dict) -> bool:
        return await self._mutate("submitting", lambda: self.api.create_station(data), CREATE_ERROR)

    async def update_station(self, station_id: int, data: dict) -> bool:
        return await self._mutate("submitting", lambda: self.api.update_station(station_id, data), UPDATE_ERROR)

    async def delete_station(self, station_id: int) -> bool:
        return await self._mutate("deleting", lambda: self.api.delete_station(station_id), DELETE_ERROR)

    # ------------------ FILTROS Y PAGINACIÓN ------------------ #
    def set_filter(self, name: str, value: str) -> None:
        if name not in StationFilters.__dataclass_fields__:
            raise ValueError(f"Unknown filter: {name}")
        self.filters = self.filters.updated(**{name: value or ""})
        self.current_page = 1
        self._recompute_stats()

    def clear_filters(self) -> None:
        self.filters = StationFilters()
        self.current_page = 1
        self._recompute_stats()

    def filtered_stations(self) -> List[StationOut]:
        return filter_stations(self.stations, self.filters)

    def paginator(self) -> Paginator:
        return Paginator(self.filtered_stations(), self.page_size)

    @property
    def total_pages(self) -> int:
        return self.paginator().page_count

    def set_page(self, page: int) -> None:
        self.current_page = self.paginator().clamp(page)

    def page_stations(self) -> List[StationOut]:
        return self.paginator().page(self.current_page)

    # ------------------ MODO ADMIN Y VISTA ------------------ #
    def toggle_admin(self) -> bool:
        self.is_admin = not self.is_admin
        self.preferences.set_admin_mode(self.is_admin)
        return self.is_admin

    def set_view_mode(self, mode: str) -> None:
        if mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {mode}")
        self.view_mode = mode

    # ------------------ TICKS ------------------ #
    def _recompute_stats(self) -> StationStats:
        self.stats = compute_stats(self.filtered_stations())
        return self.stats

    def tick_clock(self) -> None:
        self.clock = self._now()

    def tick(self) -> None:
        """Recalcula todo desde la colección filtrada y añade una muestra."""
        stats = self._recompute_stats()
        self.history.append(stats, self._now())
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                # Un listener roto no puede parar el tick
                logger.exception("Dashboard listener %r failed", listener)

    def add_listener(self, listener: Callable[["Dashboard"], None]) -> None:
        self._listeners.append(listener)

    async def _every(self, callback: Callable[[], None]) -> None:
        while True:
            try:
                callback()
            except Exception:
                logger.exception("Periodic task %s failed", getattr(callback, "__name__", callback))
            await asyncio.sleep(self.tick_seconds)

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    def start(self) -> None:
        if self.running:
            return
        self._tasks = [
            asyncio.create_task(self._every(self.tick_clock)),
            asyncio.create_task(self._every(self.tick)),
        ]

    async def stop(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def __aenter__(self) -> "Dashboard":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    # ------------------ VISTA ------------------ #
    def view(self) -> DashboardView:
        filtered = self.filtered_stations()
        paginator = Paginator(filtered, self.page_size)
        return DashboardView(
            clock=self.clock,
            is_admin=self.is_admin,
            loading=self.loading,
            error=self.error,
            view_mode=self.view_mode,
            filters=self.filters,
            stats=self.stats,
            total_count=len(self.stations),
            filtered_count=len(filtered),
            current_page=self.current_page,
            total_pages=paginator.page_count,
            page_stations=paginator.page(self.current_page),
            submitting=self.submitting,
            deleting=self.deleting,
            status_pie_svg=render_status_pie(self.stats),
            connector_bars_svg=render_connector_bars(connector_bars(filtered)),
            time_series_svg=render_time_series(self.history.samples()),
        )
