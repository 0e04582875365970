"""
Datos de formulario para alta y edición de estaciones.

El alta arranca con status "Operational"; la edición parte de los valores
actuales porque el PUT reemplaza todos los campos.
"""
import base64
import mimetypes
from pathlib import Path
from typing import Optional

from charging_app.schemas.station import STATUS_OPERATIONAL, StationOut

MAX_IMAGE_BYTES = 5 * 1024 * 1024

FORM_FIELDS = (
    "station_name",
    "location_address",
    "pin_code",
    "connector_type",
    "status",
    "image_url",
    "location_link",
)

INVALID_IMAGE_MESSAGE = "Please select a valid image file"
IMAGE_TOO_LARGE_MESSAGE = "Image size should be less than 5MB"


class ImageFileError(ValueError):
    """La imagen elegida no es una imagen o pasa de 5 MB."""


def image_data_url(path: str | Path) -> str:
    """
    Lee una imagen local y la devuelve como ``data:<mime>;base64,...``,
    el mismo formato que guarda la columna image_url.
    """
    path = Path(path)
    mime, _ = mimetypes.guess_type(path.name)
    if not mime or not mime.startswith("image/"):
        raise ImageFileError(INVALID_IMAGE_MESSAGE)
    if path.stat().st_size > MAX_IMAGE_BYTES:
        raise ImageFileError(IMAGE_TOO_LARGE_MESSAGE)

    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def _apply_changes(form: dict, changes: dict) -> dict:
    for field, value in changes.items():
        if field not in FORM_FIELDS:
            raise ValueError(f"Unknown station field: {field}")
        if value is None:
            continue
        # "" borra el campo
        form[field] = value if value != "" else None
    return form


def new_station_form(**changes: Optional[str]) -> dict:
    form = {field: None for field in FORM_FIELDS}
    form["status"] = STATUS_OPERATIONAL
    return _apply_changes(form, changes)


def edit_station_form(station: StationOut, **changes: Optional[str]) -> dict:
    form = {field: getattr(station, field) for field in FORM_FIELDS}
    if not form["status"]:
        form["status"] = STATUS_OPERATIONAL
    return _apply_changes(form, changes)
