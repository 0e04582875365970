from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Deque, Dict, Iterable, List, Optional

from charging_app.schemas.station import STATUS_MAINTENANCE, STATUS_OPERATIONAL, StationOut

HISTORY_SIZE = 60
UNKNOWN_CONNECTOR = "Unknown"


@dataclass(frozen=True)
class StationStats:
    total: int = 0
    operational: int = 0
    maintenance: int = 0

    @property
    def other(self) -> int:
        # Estados fuera de Operational/Maintenance (o sin estado)
        return self.total - self.operational - self.maintenance


@dataclass(frozen=True)
class StatSample:
    timestamp: datetime
    operational: int
    maintenance: int
    total: int


def compute_stats(stations: Iterable[StationOut]) -> StationStats:
    """
    Conteos sobre la colección filtrada.
    Un estado distinto de Operational/Maintenance solo suma al total.
    """
    total = operational = maintenance = 0
    for station in stations:
        total += 1
        status = (station.status or "").lower()
        if status == STATUS_OPERATIONAL.lower():
            operational += 1
        elif status == STATUS_MAINTENANCE.lower():
            maintenance += 1
    return StationStats(total=total, operational=operational, maintenance=maintenance)


def group_by_connector(stations: Iterable[StationOut]) -> Dict[str, int]:
    """Conteo por connectorType en orden de aparición; sin tipo -> "Unknown"."""
    counts: Dict[str, int] = {}
    for station in stations:
        key = station.connector_type or UNKNOWN_CONNECTOR
        counts[key] = counts.get(key, 0) + 1
    return counts


class TimeSeriesBuffer:
    """Ventana móvil con las últimas N muestras (una por tick, aunque no cambien)."""

    def __init__(self, maxlen: int = HISTORY_SIZE):
        self._samples: Deque[StatSample] = deque(maxlen=maxlen)

    @property
    def maxlen(self) -> int:
        return self._samples.maxlen or 0

    def append(self, stats: StationStats, timestamp: Optional[datetime] = None) -> StatSample:
        sample = StatSample(
            timestamp=timestamp or datetime.now(),
            operational=stats.operational,
            maintenance=stats.maintenance,
            total=stats.total,
        )
        self._samples.append(sample)
        return sample

    def samples(self) -> List[StatSample]:
        return list(self._samples)

    @property
    def latest(self) -> Optional[StatSample]:
        return self._samples[-1] if self._samples else None

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)
