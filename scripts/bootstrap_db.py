#!/usr/bin/env python3
"""Create the catalog / user / configuration tables.

Usage:
  DATABASE_URL=sqlite:///./picks.db python scripts/bootstrap_db.py
"""

from __future__ import annotations

from picks.core.config import settings
from picks.data.db import init_schema


def main() -> int:
    init_schema()
    print(f"Schema ready at {settings.database_url}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
