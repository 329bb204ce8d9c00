"""
Bus catalog read operations.
"""

from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.models.bus import Bus


async def get_bus(db: AsyncSession, bus_id: str) -> Bus:
    """Get a single bus by ID, always from the database."""
    result = await db.execute(select(Bus).where(Bus.id == bus_id))
    bus = result.scalar_one_or_none()

    if not bus:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Bus {bus_id} not found",
        )
    return bus


def _contains(column, needle: str):
    pattern = "%" + needle.replace("%", r"\%").replace("_", r"\_") + "%"
    return func.lower(column).like(pattern.lower(), escape="\\")


async def search_buses(
    db: AsyncSession,
    from_city: Optional[str] = None,
    to_city: Optional[str] = None,
) -> list[Bus]:
    """
    Case-insensitive substring match on either end of the route,
    ordered by bus name. Empty filters match everything.
    """
    query = select(Bus)

    if from_city and from_city.strip():
        query = query.where(_contains(Bus.from_city, from_city.strip()))
    if to_city and to_city.strip():
        query = query.where(_contains(Bus.to_city, to_city.strip()))

    result = await db.execute(query.order_by(Bus.name.asc(), Bus.id.asc()))
    return list(result.scalars().all())
