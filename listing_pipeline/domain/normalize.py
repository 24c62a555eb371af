# listing_pipeline/domain/normalize.py
from __future__ import annotations

import re

APARTMENT = "Apartment"
VILLA = "Villa"
INDEPENDENT_HOUSE = "Independent House"

LISTING_TYPES: tuple[str, ...] = (APARTMENT, VILLA, INDEPENDENT_HOUSE)


def normalize_property_type(raw: object) -> str:
    """
    Map the spreadsheet's free-text type column onto the listing types the site renders.
    Conservative: anything we don't recognise is listed as an Apartment.
    """
    if raw is None:
        return APARTMENT

    s = str(raw).strip().lower()
    s = re.sub(r"[\s_/|-]+", " ", s)

    if "villa" in s:
        return VILLA
    if "independent" in s:
        return INDEPENDENT_HOUSE

    return APARTMENT


def normalize_city(raw: object) -> str:
    return str(raw or "").strip().lower()
