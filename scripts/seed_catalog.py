#!/usr/bin/env python3
"""Load unit resource profiles and hardware models into the database.

The input file uses the same layout as data/demo_catalog.json:
{"products": [...], "models": [...]}.

Usage:
  DATABASE_URL=... python scripts/seed_catalog.py --catalog data/demo_catalog.json
  DATABASE_URL=... python scripts/seed_catalog.py --user ops --api-key change-me
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from picks.auth import provision_user
from picks.catalog.sql import SqlCatalog
from picks.data.db import init_schema

DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "demo_catalog.json"


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--catalog", default=str(DEFAULT_CATALOG), help="JSON catalog to load")
    ap.add_argument("--user", default="", help="Provision this user id")
    ap.add_argument("--user-name", default="Operator")
    ap.add_argument("--api-key", default="", help="API key for --user")
    args = ap.parse_args()

    init_schema()
    data = json.loads(Path(args.catalog).read_text(encoding="utf-8"))
    catalog = SqlCatalog()

    for product in data.get("products", []):
        catalog.create_product(product)
    for model in data.get("models", []):
        catalog.create_model(model)

    print(f"Seeded {len(data.get('products', []))} products and {len(data.get('models', []))} models")

    if args.user:
        if not args.api_key:
            ap.error("--api-key is required with --user")
        provision_user(args.user, args.user_name, args.api_key)
        print(f"Provisioned user {args.user}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
