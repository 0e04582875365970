from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Tipos de conector conocidos por el cliente (la BD acepta cualquier texto)
CONNECTOR_TYPES: tuple[str, ...] = ("TYPE_2_AC", "CCS2_DC", "BHARAT_AC_001", "BHARAT_DC_001")

STATUS_OPERATIONAL = "Operational"
STATUS_MAINTENANCE = "Maintenance"

NAME_MAX_LENGTH = 200
ADDRESS_MAX_LENGTH = 500


# ----- BASE COMÚN (JSON en camelCase: stationName, locationAddress, ...) -----
class StationBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Opcionales a nivel de schema: el endpoint responde 400 con un mensaje propio
    station_name: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)
    location_address: str | None = Field(default=None, max_length=ADDRESS_MAX_LENGTH)
    pin_code: str | None = None
    connector_type: str | None = None
    status: str | None = None
    image_url: str | None = None
    location_link: str | None = None


# ----- PARA CREAR ESTACIÓN -----
class StationCreate(StationBase):
    id: int | None = None                   # se ignora, lo asigna la BD
    created_at: datetime | None = None      # si no viene, se usa la hora de inserción


# ----- PARA ACTUALIZAR ESTACIÓN (PUT, reemplazo completo) -----
class StationUpdate(StationBase):
    """
    Todos los campos mutables se sobrescriben.
    Un campo opcional omitido queda en null.
    """
    id: int | None = None


# ----- PARA RESPUESTA (INCLUYE ID Y FECHA) -----
class StationOut(StationBase):
    id: int
    station_name: str
    location_address: str
    created_at: datetime | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,  # permite partir de modelos SQLAlchemy
    )
