#!/usr/bin/env python3
"""Offline sizing against a JSON catalog (no database needed).

Usage:
  python scripts/size_channels.py --sd 4 --hd 2 --protocols 5 --rule closest
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from picks.catalog.memory import InMemoryCatalog
from picks.estimation.service import MATCH_RULES, estimate_and_match
from picks.estimation.types import ChannelMix, ProtocolEntry

DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "demo_catalog.json"


def main() -> None:
    ap = argparse.ArgumentParser(description="Estimate resource demand for a channel mix and match a model")
    ap.add_argument("--catalog", default=str(DEFAULT_CATALOG))
    for name in ("sd", "hd", "fhd", "uhd", "passthrough", "decoder"):
        ap.add_argument(f"--{name}", type=int, default=0)
    ap.add_argument("--protocols", type=int, default=0, help="Total protocol quantity")
    ap.add_argument("--rule", choices=MATCH_RULES, default="closest")
    args = ap.parse_args()

    if min(args.sd, args.hd, args.fhd, args.uhd, args.passthrough, args.decoder, args.protocols) < 0:
        ap.error("counts must be non-negative")

    mix = ChannelMix(
        sd=args.sd,
        hd=args.hd,
        fhd=args.fhd,
        uhd=args.uhd,
        passthrough=args.passthrough,
        decoder=args.decoder,
        protocols=(ProtocolEntry(quantity=args.protocols),),
    )
    result = estimate_and_match(mix, InMemoryCatalog.from_json_file(args.catalog), rule=args.rule)
    print(json.dumps(result.to_response(), indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
