# listing_pipeline/entrypoints/cli.py
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys
from pathlib import Path
from typing import Any

from ..adapters.sheets import read_source_rows
from ..adapters.store.sqlalchemy_store import SqlAlchemyStore
from ..db import AsyncSessionLocal, create_all
from ..service_layer.use_cases.bulk_insert import bulk_insert
from ..service_layer.use_cases.bulk_update_media import bulk_update_media
from ..service_layer.use_cases.seed import seed_reference_data

log = logging.getLogger(__name__)


def _quiet_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    # Quiet the usual offenders
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def _print(summary: dict[str, Any]) -> None:
    print(json.dumps(summary, indent=2, ensure_ascii=False, default=str))


async def _init_db(args: argparse.Namespace) -> int:
    await create_all()
    print("OK: created all tables (idempotent).")
    return 0


async def _bulk_insert(args: argparse.Namespace) -> int:
    rows = read_source_rows(Path(args.sheet))
    await create_all()
    res = await bulk_insert(
        rows,
        args.folder_url,
        store=SqlAlchemyStore(AsyncSessionLocal),
        batch_size=args.batch_size,
    )
    _print(res.snapshot())
    return 1 if res.fatal_error or res.errored_count else 0


async def _bulk_update_media(args: argparse.Namespace) -> int:
    rows = read_source_rows(Path(args.sheet))
    await create_all()
    res = await bulk_update_media(rows, args.folder_url, store=SqlAlchemyStore(AsyncSessionLocal))
    _print(res.snapshot())
    return 1 if res.fatal_error or res.errored_count else 0


async def _seed(args: argparse.Namespace) -> int:
    await create_all()
    rng = random.Random(args.random_seed) if args.random_seed is not None else None
    res = await seed_reference_data(SqlAlchemyStore(AsyncSessionLocal), rng=rng)
    _print(res.snapshot())
    return 1 if res.errors else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="listing-pipeline")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-db", help="Create all tables")
    p.set_defaults(func=_init_db)

    p = sub.add_parser("bulk-insert", help="Insert listings from a spreadsheet + image folder")
    p.add_argument("sheet", help=".xlsx, .xls or .csv file")
    p.add_argument("--folder-url", default=None, help="Drive folder URL (.../folders/<id>)")
    p.add_argument("--batch-size", type=int, default=None, help="Rows per insert call")
    p.set_defaults(func=_bulk_insert)

    p = sub.add_parser("bulk-update-media", help="Attach images to listings still on the placeholder")
    p.add_argument("sheet", help=".xlsx, .xls or .csv file")
    p.add_argument("--folder-url", default=None, help="Drive folder URL (.../folders/<id>)")
    p.set_defaults(func=_bulk_update_media)

    p = sub.add_parser("seed", help="Seed cities, micromarkets, developers and projects")
    p.add_argument("--random-seed", type=int, default=None, help="Seed for generated figures")
    p.set_defaults(func=_seed)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _quiet_logging(args.verbose)
    try:
        return asyncio.run(args.func(args))
    except (OSError, ValueError) as e:
        # unreadable or malformed spreadsheet
        log.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
