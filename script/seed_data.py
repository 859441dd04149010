#!/usr/bin/env python3
"""
Seed a demo trip

Creates one trip with 200 regular seats at 500 and 180 earlybird seats at 400,
the shape used by the end-to-end booking scenarios.
"""

import asyncio
import os

from src.platform.config.core_setting import settings
from src.platform.database.scylla_setting import close_all_scylla_sessions, execute_cql


DEMO_TRIP_ID = os.getenv('DEMO_TRIP_ID', 'trip-demo-0001')


async def seed_trip() -> None:
    await execute_cql(
        f"""
        INSERT INTO {settings.TRIPS_TABLE} (
            id, available_earlybird_tickets, earlybird_ticket_price,
            available_regular_tickets, regular_ticket_price,
            total_cancelled_tickets, total_sold_tickets, booking_reference
        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
        """,
        (DEMO_TRIP_ID, 180, 400.0, 200, 500.0, 0, 0, 'SB1001'),
    )
    print(f'✅ Seeded trip {DEMO_TRIP_ID} into {settings.TRIPS_TABLE}')


async def main() -> None:
    try:
        await seed_trip()
    finally:
        await close_all_scylla_sessions()


if __name__ == '__main__':
    asyncio.run(main())
