from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from charging_app.db.base import Base


class Station(Base):
    __tablename__ = "charging_stations"

    # ID autoincremental entero
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    station_name = Column(String(200), nullable=False)
    location_address = Column(String(500), nullable=False)
    pin_code = Column(String, nullable=True)
    # TYPE_2_AC, CCS2_DC, BHARAT_AC_001, BHARAT_DC_001
    connector_type = Column(String, nullable=True)
    # Operational, Maintenance (texto libre en la BD)
    status = Column(String, nullable=True, index=True)
    # URL externa o imagen en base64 (data:...), puede ser muy larga
    image_url = Column(Text, nullable=True)
    location_link = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
