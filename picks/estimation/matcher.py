from __future__ import annotations

import re
from typing import Iterable, Optional

import structlog

from picks.core.observability import MATCH_OUTCOMES
from picks.estimation.parsing import coerce_numeric
from picks.estimation.types import HardwareModel, MatchResult

log = structlog.get_logger(__name__)

# Demand above this needs the overflow (G4) family.
OVERFLOW_THRESHOLD_RM = 40000

_OVERFLOW_NAME = re.compile(r"G4$", re.IGNORECASE)


def is_overflow_model(model: HardwareModel) -> bool:
    return bool(_OVERFLOW_NAME.search(model.model or ""))


def _best_base(demand_rm: float, models: list[HardwareModel]) -> tuple[Optional[HardwareModel], Optional[float]]:
    candidates: list[tuple[float, HardwareModel]] = []
    for m in models:
        if is_overflow_model(m):
            continue
        pm = coerce_numeric(m.pm, field="pm")
        if pm is not None and pm >= demand_rm:
            candidates.append((pm, m))
    if not candidates:
        return None, None
    # min() keeps the first of equal capacities, i.e. catalog order.
    pm, best = min(candidates, key=lambda c: c[0])
    return best, pm


def _best_overflow(demand_rm: float, models: list[HardwareModel]) -> tuple[Optional[HardwareModel], Optional[float]]:
    candidates: list[tuple[tuple[bool, float], HardwareModel, Optional[float], Optional[float]]] = []
    for m in models:
        if not is_overflow_model(m):
            continue
        pm = coerce_numeric(m.pm, field="pm")
        g4_pm = coerce_numeric(m.g4_pm, field="g4_pm")
        if (pm is not None and pm >= demand_rm) or (g4_pm is not None and g4_pm >= demand_rm):
            # Ordered by pm; an unparsable pm sorts last.
            key = (pm is None, pm if pm is not None else 0.0)
            candidates.append((key, m, pm, g4_pm))
    if not candidates:
        return None, None
    _, best, pm, g4_pm = min(candidates, key=lambda c: c[0])
    return best, (g4_pm if g4_pm else pm)


def match_capacity(demand_rm: float, models: Iterable[HardwareModel]) -> MatchResult:
    """Least-sufficient-capacity match ("best fit from above").

    The standard tier and the overflow tier are searched independently; an
    overflow match never replaces the base match.
    """
    models = list(models)
    base, base_pm = _best_base(demand_rm, models)
    MATCH_OUTCOMES.labels(rule="closest", tier="base", outcome="hit" if base else "miss").inc()

    overflow = overflow_pm = None
    if demand_rm > OVERFLOW_THRESHOLD_RM:
        overflow, overflow_pm = _best_overflow(demand_rm, models)
        MATCH_OUTCOMES.labels(rule="closest", tier="overflow", outcome="hit" if overflow else "miss").inc()

    log.info(
        "capacity_matched",
        demand_rm=demand_rm,
        model=base.model if base else None,
        g4_model=overflow.model if overflow else None,
    )
    return MatchResult(base=base, base_pm=base_pm, overflow=overflow, overflow_pm=overflow_pm)


def find_exact_model(demand_rm: float, models: Iterable[HardwareModel]) -> Optional[HardwareModel]:
    """First model whose capacity equals demand_rm exactly.

    Stricter than match_capacity and generally disagrees with it: scaled RM
    totals are rarely whole numbers, so this usually finds nothing.
    """
    for m in models:
        pm = coerce_numeric(m.pm, field="pm")
        if pm is not None and pm == demand_rm:
            MATCH_OUTCOMES.labels(rule="exact", tier="any", outcome="hit").inc()
            return m
    MATCH_OUTCOMES.labels(rule="exact", tier="any", outcome="miss").inc()
    return None
