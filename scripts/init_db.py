# scripts/init_db.py
import asyncio

from listing_pipeline.db import create_all
from listing_pipeline.models import TABLES


async def main() -> None:
    await create_all()
    print(f"OK: created {len(TABLES) + 1} tables (idempotent).")


if __name__ == "__main__":
    asyncio.run(main())
