# listing_pipeline/adapters/sheets.py
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from ..domain.parsing import get_first, is_blank, to_float, to_int, to_str
from ..domain.types import SourceRow

log = logging.getLogger(__name__)

# normalized header -> SourceRow field. Headers are normalized by dropping
# everything but [a-z0-9], so "S.No", "s_no" and "sNo" all land on "sno".
HEADER_ALIASES: dict[str, str] = {
    "sno": "sequence_number",
    "serialno": "sequence_number",
    "sequencenumber": "sequence_number",
    "city": "city",
    "location": "location",
    "projectname": "project_name",
    "project": "project_name",
    "propertytype": "property_type",
    "configuration": "configuration",
    "bhk": "configuration",
    "sqft": "sqft",
    "areasqft": "sqft",
    "area": "sqft",
    "floor": "floor",
    "floornumber": "floor_number",
    "facing": "facing",
    "parkings": "parkings",
    "parking": "parkings",
    "price": "price",
    "pricedisplay": "price_display",
    "bedrooms": "bedrooms",
    "bathrooms": "bathrooms",
    "totalfloors": "total_floors",
    "status": "status",
    "furnishingstatus": "furnishing_status",
    "school1name": "school1_name",
    "school1distance": "school1_distance",
    "school2name": "school2_name",
    "school2distance": "school2_distance",
    "hospital1name": "hospital1_name",
    "hospital1distance": "hospital1_distance",
    "hospital2name": "hospital2_name",
    "hospital2distance": "hospital2_distance",
    "mallname": "mall_name",
    "malldistance": "mall_distance",
    "ithubname": "it_hub_name",
    "ithubdistance": "it_hub_distance",
    "orrexit": "orr_exit",
    "exitdistance": "exit_distance",
    "googlemapsurl": "google_maps_url",
    "mapurl": "google_maps_url",
    "amenities": "amenities",
    "ownershiptype": "ownership_type",
    "possessionstatus": "possession_status",
}

_INT_FIELDS = {"parkings", "bedrooms", "bathrooms"}
_FLOAT_FIELDS = {"sqft", "price"}
_OPTIONAL_FIELDS = {"ownership_type", "possession_status"}


def _norm_header(h: Any) -> str:
    return re.sub(r"[^a-z0-9]", "", str(h).lower())


def canonicalize_record(rec: dict[str, Any]) -> dict[str, Any]:
    """Rename spreadsheet/API keys to SourceRow field names; unknown columns are dropped."""
    out: dict[str, Any] = {}
    for k, v in rec.items():
        field_name = HEADER_ALIASES.get(_norm_header(k))
        if field_name is None:
            continue
        # first non-empty wins when two headers alias the same field
        if field_name in out and not is_blank(out[field_name]):
            continue
        out[field_name] = v
    return out


def _amenities(v: Any) -> tuple[str, ...] | None:
    if is_blank(v):
        return None
    if isinstance(v, (list, tuple)):
        items = [to_str(x) for x in v]
    else:
        items = [x.strip() for x in str(v).split(",")]
    items = [x for x in items if x]
    return tuple(items) or None


def row_from_record(rec: dict[str, Any]) -> SourceRow:
    c = canonicalize_record(rec)

    seq = to_int(c.get("sequence_number"))
    if seq is None or seq < 1:
        raise ValueError(f"Missing or invalid S.No: {c.get('sequence_number')!r}")

    kwargs: dict[str, Any] = {"sequence_number": seq}
    for name, v in c.items():
        if name == "sequence_number":
            continue
        if name in _INT_FIELDS:
            kwargs[name] = to_int(v)
        elif name in _FLOAT_FIELDS:
            kwargs[name] = to_float(v)
        elif name == "amenities":
            kwargs[name] = _amenities(v)
        elif name in _OPTIONAL_FIELDS:
            kwargs[name] = to_str(v) or None
        else:
            kwargs[name] = to_str(v)

    for required in ("city", "location", "project_name", "property_type", "configuration"):
        kwargs.setdefault(required, "")
    if not get_first(kwargs, "status"):
        kwargs["status"] = "active"

    return SourceRow(**kwargs)


def rows_from_records(records: Iterable[dict[str, Any]]) -> list[SourceRow]:
    rows: list[SourceRow] = []
    seen: set[int] = set()
    for i, rec in enumerate(records, start=1):
        try:
            row = row_from_record(rec)
        except ValueError as e:
            raise ValueError(f"Row {i}: {e}") from e
        if row.sequence_number in seen:
            raise ValueError(f"Row {i}: duplicate S.No {row.sequence_number}")
        seen.add(row.sequence_number)
        rows.append(row)
    return rows


def read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path, dtype=object)
    if suffix in (".xlsx", ".xls"):
        return pd.read_excel(path, sheet_name=0, dtype=object)
    raise ValueError(f"Only .csv, .xls, and .xlsx are supported (got {path.name})")


def read_source_rows(path: Path) -> list[SourceRow]:
    df = read_frame(path)
    df = df.dropna(how="all")
    df = df.astype(object).where(pd.notnull(df), None)
    rows = rows_from_records(df.to_dict(orient="records"))
    log.info("Read %s rows from %s", len(rows), path)
    return rows
