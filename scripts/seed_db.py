import asyncio
import sys
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from sqlalchemy import insert  # noqa: E402

from app.api.deps import engine  # noqa: E402
from app.infrastructure.db.datetimes import to_db  # noqa: E402
from app.infrastructure.db.tables import metadata, peak_season_pricing, vehicles  # noqa: E402


async def seed():
    now = to_db(datetime.now(timezone.utc))
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        print("Created missing tables.")

        await conn.execute(
            insert(vehicles),
            [
                {
                    "name": "Toyota Vios",
                    "daily_rate": Decimal("1500.00"),
                    "weekly_rate": None,
                    "monthly_rate": None,
                    "available": True,
                    "locations": ["Makati", "BGC"],
                    "created_at": now,
                    "updated_at": now,
                },
                {
                    "name": "Mitsubishi Montero",
                    "daily_rate": Decimal("3500.00"),
                    "weekly_rate": Decimal("21000.00"),
                    "monthly_rate": Decimal("75000.00"),
                    "available": True,
                    "locations": [],
                    "created_at": now,
                    "updated_at": now,
                },
            ],
        )
        await conn.execute(
            insert(peak_season_pricing),
            [
                {
                    "name": "Holy Week",
                    "start_date": date(2026, 3, 29),
                    "end_date": date(2026, 4, 5),
                    "pricing_type": "multiplier",
                    "price_multiplier": Decimal("1.5"),
                    "fixed_increase": Decimal("0"),
                    "is_active": True,
                },
                {
                    "name": "Christmas",
                    "start_date": date(2026, 12, 20),
                    "end_date": date(2027, 1, 2),
                    "pricing_type": "fixed",
                    "price_multiplier": Decimal("1.0"),
                    "fixed_increase": Decimal("500.00"),
                    "is_active": True,
                },
            ],
        )
        print("Seeded vehicles and peak season rules.")

if __name__ == "__main__":
    asyncio.run(seed())
