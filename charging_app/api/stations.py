import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from charging_app.core.config import settings
from charging_app.db.session import get_db
from charging_app.models.station import Station
from charging_app.schemas.station import StationBase, StationCreate, StationOut, StationUpdate

router = APIRouter(prefix=settings.API_PREFIX, tags=["charging-stations"])
logger = logging.getLogger(__name__)


def _not_found(station_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Charging station with ID {station_id} not found.",
    )


def _server_error(db: Session, message: str) -> HTTPException:
    # No se filtra nada interno al cliente, el detalle queda en el log
    db.rollback()
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=message,
    )


def _validate_required(station_in: StationBase) -> None:
    """
    stationName y locationAddress no pueden venir vacíos ni solo con espacios.
    """
    if not station_in.station_name or not station_in.station_name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="StationName is required.",
        )
    if not station_in.location_address or not station_in.location_address.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="LocationAddress is required.",
        )


# ------------------ LISTAR ESTACIONES ------------------ #
@router.get(
    "/getAllChargingStations",
    response_model=list[StationOut],
    name="get_all_charging_stations",
)
def get_all_charging_stations(db: Session = Depends(get_db)):
    """
    Lista todas las estaciones ordenadas por nombre.
    Con la tabla vacía devuelve [].
    """
    try:
        return db.query(Station).order_by(Station.station_name.asc()).all()
    except SQLAlchemyError:
        logger.exception("Error retrieving charging stations")
        raise _server_error(db, "An error occurred while retrieving charging stations")


# ------------------ OBTENER ESTACIÓN POR ID ------------------ #
@router.get(
    "/GetChargingStationById/{id}",
    response_model=StationOut,
    name="get_charging_station_by_id",
)
def get_charging_station_by_id(id: int, db: Session = Depends(get_db)):
    try:
        station = db.get(Station, id)
    except SQLAlchemyError:
        logger.exception("Error retrieving charging station with ID %s", id)
        raise _server_error(db, "An error occurred while retrieving the charging station")

    if not station:
        raise _not_found(id)
    return station


# ------------------ CREAR ESTACIÓN ------------------ #
@router.post(
    "/AddChargingStation",
    response_model=StationOut,
    status_code=status.HTTP_201_CREATED,
    name="add_charging_station",
)
def add_charging_station(
    station_in: StationCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Crea una nueva estación.
    El id lo asigna la BD; createdAt toma la hora actual si no viene en el body.
    """
    _validate_required(station_in)

    data = station_in.model_dump(exclude={"id", "created_at"})
    station = Station(
        **data,
        created_at=station_in.created_at or datetime.now(timezone.utc),
    )

    try:
        db.add(station)
        db.commit()
        db.refresh(station)
    except SQLAlchemyError:
        logger.exception("Error creating charging station")
        raise _server_error(db, "An error occurred while creating the charging station")

    response.headers["Location"] = str(
        request.url_for("get_charging_station_by_id", id=station.id)
    )
    logger.info("Charging station %s created", station.id)
    return station


# ------------------ ACTUALIZAR ESTACIÓN (REEMPLAZO COMPLETO) ------------------ #
@router.put(
    "/updateChargingStationById/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    name="update_charging_station_by_id",
)
def update_charging_station_by_id(
    id: int,
    station_in: StationUpdate,
    db: Session = Depends(get_db),
):
    """
    Sobrescribe todos los campos mutables; id y createdAt no se tocan.
    Orden de validación: id de la URL vs id del body, campos requeridos, existencia.
    """
    if station_in.id != id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="ID in URL does not match ID in request body.",
        )

    _validate_required(station_in)

    try:
        station = db.get(Station, id)
        if not station:
            raise _not_found(id)

        # Campos omitidos en el body quedan en None (no es un PATCH)
        for field, value in station_in.model_dump(exclude={"id"}).items():
            setattr(station, field, value)

        db.commit()
    except SQLAlchemyError:
        logger.exception("Error updating charging station with ID %s", id)
        raise _server_error(db, "An error occurred while updating the charging station")

    logger.info("Charging station %s updated", id)
    return None


# ------------------ ELIMINAR ESTACIÓN ------------------ #
@router.delete(
    "/deleteChargingStationById/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    name="delete_charging_station_by_id",
)
def delete_charging_station_by_id(id: int, db: Session = Depends(get_db)):
    try:
        station = db.get(Station, id)
        if not station:
            raise _not_found(id)

        db.delete(station)
        db.commit()
    except SQLAlchemyError:
        logger.exception("Error deleting charging station with ID %s", id)
        raise _server_error(db, "An error occurred while deleting the charging station")

    logger.info("Charging station %s deleted", id)
    return None
