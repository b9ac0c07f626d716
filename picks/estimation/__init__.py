"""
Resource estimation and capacity matching.

Converts a channel mix into aggregate resource-mark / memory / CPU demand and
maps that demand onto a catalog hardware model.
"""

from .aggregator import estimate
from .matcher import find_exact_model, match_capacity
from .service import estimate_and_match
from .types import ChannelMix, DemandTotals, HardwareModel, MatchResult, ProtocolEntry, UnitResourceProfile
