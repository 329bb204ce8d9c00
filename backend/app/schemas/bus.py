"""
Pydantic schemas for the bus catalog.
"""

from app.schemas.settlement import CamelModel


class BusResponse(CamelModel):
    id: str
    bus_code: str
    name: str
    from_city: str
    to_city: str
    fare: int
    seats_available: int

    model_config = {"from_attributes": True}


class BusListResponse(CamelModel):
    buses: list[BusResponse]
    total: int
    cached: bool = False
