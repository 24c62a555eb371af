# listing_pipeline/service_layer/use_cases/seed.py
from __future__ import annotations

import logging
import random

from ...adapters.store.base import Store
from ...config import settings
from ...domain.types import SeedResult
from ..seeding import SeedingCascade

log = logging.getLogger(__name__)


async def seed_reference_data(store: Store, *, rng: random.Random | None = None) -> SeedResult:
    cascade = SeedingCascade(store, rng=rng, call_timeout_s=settings.STORE_CALL_TIMEOUT_S)
    result = await cascade.run()
    if result.errors:
        log.warning("Seeding finished with %s phase errors", len(result.errors))
    return result


async def seeding_needed(store: Store) -> bool:
    return await SeedingCascade(store, call_timeout_s=settings.STORE_CALL_TIMEOUT_S).seeding_needed()
