from __future__ import annotations

import math
from typing import Mapping

from picks.estimation.parsing import parse_memory, parse_number
from picks.estimation.types import ChannelMix, DemandTotals, UnitResourceProfile

RM_MULTIPLIER = 1.43
CPU_MULTIPLIER = 1.5
MEMORY_MULTIPLIER = 2
MB_PER_GB = 1024
STICK_GB = 16

# Channel count attribute -> catalog product type.
CHANNEL_PRODUCT_TYPES: dict[str, str] = {
    "sd": "Encoder-SD",
    "hd": "Encoder-HD",
    "fhd": "Encoder-FHD",
    "uhd": "Encoder-4k",
    "passthrough": "Passthrough",
    "decoder": "Decoder",
}

# (low, high, bonus), inclusive bounds on the summed protocol quantity.
PROTOCOL_BONUS_STEPS: tuple[tuple[int, int, int], ...] = (
    (4, 6, 500),
    (7, 9, 1000),
)


def protocol_bonus(total_protocols: int) -> int:
    for low, high, bonus in PROTOCOL_BONUS_STEPS:
        if low <= total_protocols <= high:
            return bonus
    return 0


def round_memory(unrounded_gb: float) -> float:
    """Round up to whole 16 GB sticks, then to an even stick count."""
    rounded = math.ceil(unrounded_gb / STICK_GB) * STICK_GB
    if (rounded // STICK_GB) % 2 != 0:
        rounded += STICK_GB
    return float(rounded)


def estimate(mix: ChannelMix, profiles: Mapping[str, UnitResourceProfile]) -> DemandTotals:
    """Aggregate RM, memory and CPU demand for a channel mix.

    `profiles` is keyed by product type. A missing key costs nothing.
    Counts are not validated here.
    """
    raw_rm = 0.0
    raw_mem = 0.0
    raw_cpu = 0.0
    for attr, product_type in CHANNEL_PRODUCT_TYPES.items():
        count = getattr(mix, attr) or 0
        profile = profiles.get(product_type) or UnitResourceProfile.zero(product_type)
        raw_rm += count * parse_number(profile.rm, field="rm")
        raw_mem += count * parse_memory(profile.mem, field="mem")
        raw_cpu += count * parse_number(profile.cpu, field="cpu")

    # Bonus is flat, added after scaling.
    total_rm = raw_rm * RM_MULTIPLIER + protocol_bonus(mix.total_protocols)

    unrounded_gb = (raw_mem * MEMORY_MULTIPLIER) / MB_PER_GB

    return DemandTotals(
        total_rm=total_rm,
        total_memory_before_rounding=unrounded_gb,
        total_memory_after_rounding=round_memory(unrounded_gb),
        total_cpu=raw_cpu * CPU_MULTIPLIER,
    )
