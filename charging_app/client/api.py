import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from charging_app.core.config import settings
from charging_app.schemas.station import StationOut

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "No response from server. Please check your connection."


class StationApiError(Exception):
    """Error devuelto por la API (400/404/500...) con un mensaje para mostrar."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StationNetworkError(StationApiError):
    """No se pudo llegar al servidor (distinto de un 500)."""

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE):
        super().__init__(message, status_code=None)


def extract_error_message(response: httpx.Response) -> str:
    """
    Saca un texto legible del cuerpo de error, sea texto plano o JSON.
    Orden: string JSON / texto, "message", "error", "detail".
    """
    try:
        data: Any = response.json()
    except ValueError:
        text = response.text.strip()
        if text:
            return text
        data = None

    if isinstance(data, str) and data:
        return data
    if isinstance(data, dict):
        for key in ("message", "error", "detail"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value

    return f"Server error: {response.status_code} {response.reason_phrase}"


def _station_payload(station) -> dict:
    # Acepta modelos o dicts en snake_case o camelCase; siempre envía camelCase
    if isinstance(station, BaseModel):
        return station.model_dump(by_alias=True, mode="json", exclude={"id"})
    return {(to_camel(key) if "_" in key else key): value for key, value in station.items() if key != "id"}


class StationApiClient:
    """Cliente asíncrono para los cinco endpoints de estaciones.

    ``base_url`` apunta al prefijo de la API, p.ej. ``http://localhost:8000/api``.
    Se puede inyectar un ``httpx.AsyncClient`` propio (tests con MockTransport).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.CLIENT_TIMEOUT
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Content-Type": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "StationApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise StationNetworkError() from exc

        if response.is_error:
            message = extract_error_message(response)
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, message)
            raise StationApiError(message, status_code=response.status_code)
        return response

    async def get_all_stations(self) -> list[StationOut]:
        response = await self._request("GET", "/getAllChargingStations")
        data = response.json()
        if not isinstance(data, list):
            return []
        return [StationOut.model_validate(item) for item in data]

    async def get_station_by_id(self, station_id: int) -> StationOut:
        response = await self._request("GET", f"/GetChargingStationById/{station_id}")
        return StationOut.model_validate(response.json())

    async def create_station(self, station: dict) -> StationOut:
        response = await self._request("POST", "/AddChargingStation", json=_station_payload(station))
        return StationOut.model_validate(response.json())

    async def update_station(self, station_id: int, station: dict) -> None:
        # La API exige que el id del body coincida con el de la URL
        payload = {**_station_payload(station), "id": int(station_id)}
        await self._request("PUT", f"/updateChargingStationById/{station_id}", json=payload)

    async def delete_station(self, station_id: int) -> None:
        await self._request("DELETE", f"/deleteChargingStationById/{station_id}")
