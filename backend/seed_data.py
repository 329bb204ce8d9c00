#!/usr/bin/env python3
"""
Seed the bus catalog for local development.

    cd backend && python seed_data.py

Existing buses with the same code are left untouched.
"""

import asyncio

from sqlalchemy import select

from app.db.session import AsyncSessionLocal, engine
from app.models.bus import Bus

BUSES = [
    # (code, name, from, to, fare, seats)
    ("KA01-1234", "Airavat Club Class", "Bengaluru", "Mysuru", 350, 40),
    ("KA01-5678", "Rajahamsa Executive", "Bengaluru", "Mangaluru", 720, 36),
    ("TN07-2211", "Chennai Express Sleeper", "Chennai", "Bengaluru", 650, 30),
    ("MH12-9001", "Shivneri Volvo", "Mumbai", "Pune", 525, 45),
    ("DL01-4455", "Himachal Volvo", "Delhi", "Manali", 1450, 38),
    ("TS09-3030", "Garuda Plus", "Hyderabad", "Vijayawada", 480, 40),
    ("KL15-7777", "Minnal Deluxe", "Kochi", "Thiruvananthapuram", 300, 42),
    ("GJ01-1818", "Gurjar Nagari", "Ahmedabad", "Vadodara", 180, 50),
]


async def create_seed_data() -> None:
    async with AsyncSessionLocal() as db:
        try:
            print("Seeding bus catalog...")
            existing = set((await db.execute(select(Bus.bus_code))).scalars().all())

            created = 0
            for code, name, from_city, to_city, fare, seats in BUSES:
                if code in existing:
                    continue
                db.add(Bus(
                    bus_code=code,
                    name=name,
                    from_city=from_city,
                    to_city=to_city,
                    fare=fare,
                    seats_available=seats,
                ))
                created += 1

            await db.commit()
            print(f"  - {created} buses created, {len(existing)} already present")
        except Exception as e:
            print(f"Error creating seed data: {e}")
            await db.rollback()
            raise

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(create_seed_data())
