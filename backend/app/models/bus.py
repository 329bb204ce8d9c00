"""
Bus model: a route in the catalog with a fixed fare.

The catalog is read-only to settlement. `seats_available` is displayed
but is not decremented by bookings.
"""

import uuid

from sqlalchemy import Column, Integer, String, Index, CheckConstraint

from app.db.base import Base, TimestampMixin


class Bus(Base, TimestampMixin):
    __tablename__ = "buses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    bus_code = Column(String(20), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    from_city = Column(String(100), nullable=False)
    to_city = Column(String(100), nullable=False)
    fare = Column(Integer, nullable=False)
    seats_available = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("fare >= 0", name="check_bus_fare_non_negative"),
        CheckConstraint("seats_available >= 0", name="check_bus_seats_non_negative"),
        # Route search filters on both cities
        Index("ix_buses_route", "from_city", "to_city"),
        Index("ix_buses_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Bus(id={self.id}, code={self.bus_code}, {self.from_city}->{self.to_city}, fare={self.fare})>"
