# listing_pipeline/domain/slugs.py
from __future__ import annotations

import re
from typing import Iterable

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """
    "3 BHK Apartment for Sale in My Home Avatar, Narsingi"
      -> "3-bhk-apartment-for-sale-in-my-home-avatar-narsingi"
    """
    return _NON_ALNUM.sub("-", (text or "").lower()).strip("-")


class SlugRegistry:
    """
    Slugs already issued for this run. Seeded from the store at run start,
    only ever appended to afterwards.
    """

    def __init__(self, existing: Iterable[str] = ()) -> None:
        self._slugs: set[str] = {s for s in existing if s}

    def __contains__(self, slug: object) -> bool:
        return slug in self._slugs

    def __len__(self) -> int:
        return len(self._slugs)

    def add(self, slug: str) -> None:
        self._slugs.add(slug)


def ensure_unique(candidate: str, registry: SlugRegistry) -> str:
    slug = candidate
    n = 2
    while slug in registry:
        slug = f"{candidate}-{n}"
        n += 1
    registry.add(slug)
    return slug
