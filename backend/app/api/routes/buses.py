"""
Bus catalog endpoints with Redis caching on search.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.bus import BusResponse, BusListResponse
from app.services.bus_service import get_bus, search_buses
from app.services.cache_service import get_cached_buses, set_cached_buses
from app.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/buses", tags=["Buses"])


@router.get("/", response_model=BusListResponse)
async def list_buses(
    from_city: Optional[str] = Query(None, max_length=100),
    to_city: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    """
    Search routes by origin and destination (case-insensitive substring).
    Results are cached in Redis for REDIS_CACHE_TTL seconds.
    """
    cached = await get_cached_buses(from_city, to_city)
    if cached:
        logger.info("bus_list_cache_hit", from_city=from_city, to_city=to_city)
        cached["cached"] = True
        return BusListResponse(**cached)

    buses = await search_buses(db, from_city, to_city)
    response_data = {
        "buses": [BusResponse.model_validate(b).model_dump() for b in buses],
        "total": len(buses),
        "cached": False,
    }
    await set_cached_buses(from_city, to_city, response_data)

    return BusListResponse(**response_data)


@router.get("/{bus_id}", response_model=BusResponse)
async def get_bus_endpoint(bus_id: str, db: AsyncSession = Depends(get_db)):
    """Get a single bus. Not cached: the fare shown here is the fare charged."""
    return await get_bus(db, bus_id)
