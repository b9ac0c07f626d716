from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

import structlog

from picks.core.config import settings
from picks.core.observability import ESTIMATE_LATENCY, ESTIMATIONS, timer
from picks.estimation.aggregator import CHANNEL_PRODUCT_TYPES, estimate
from picks.estimation.matcher import find_exact_model, match_capacity
from picks.estimation.parsing import coerce_numeric, format_fixed
from picks.estimation.types import ChannelMix, DemandTotals, HardwareModel, MatchResult

if TYPE_CHECKING:
    from picks.catalog.base import Catalog

log = structlog.get_logger(__name__)

MATCH_RULES = ("exact", "closest")
NO_MATCH_NAME = "No matching model found"


def _or_placeholder(value: Any, name: str) -> str:
    return str(value) if value else f"No {name} field found"


def model_info(
    model: Optional[HardwareModel],
    *,
    pm: Optional[float] = None,
    g4_model: Optional[str] = None,
    g4_pm: Optional[float] = None,
) -> dict[str, Any]:
    """Render the modelInfo block of a sizing response.

    Capacity is numeric unless it is missing; the descriptive fields are text.
    """
    if model is None:
        return {
            "modelName": NO_MATCH_NAME,
            "pm": None,
            "maxSupport": None,
            "ip": None,
            "pci": None,
            "u1": None,
            "u2": None,
            "g4Model": g4_model,
            "g4PM": g4_pm,
        }
    capacity = pm if pm is not None else coerce_numeric(model.pm, field="pm")
    return {
        "modelName": _or_placeholder(model.model, "model"),
        "pm": capacity if capacity else "No pm field found",
        "maxSupport": _or_placeholder(model.max_support, "max_support"),
        "ip": _or_placeholder(model.ip, "ip"),
        "pci": _or_placeholder(model.pci, "pci"),
        "u1": _or_placeholder(model.u1, "1u"),
        "u2": _or_placeholder(model.u2, "2u"),
        "g4Model": g4_model,
        "g4PM": g4_pm,
    }


@dataclass(frozen=True)
class SizingResult:
    totals: DemandTotals
    rule: str
    match: Optional[MatchResult] = None
    exact: Optional[HardwareModel] = None

    def model_info(self) -> dict[str, Any]:
        if self.rule == "closest":
            m = self.match
            return model_info(
                m.base,
                pm=m.base_pm,
                g4_model=m.overflow.model if m.overflow else None,
                g4_pm=m.overflow_pm,
            )
        return model_info(self.exact)

    def to_response(self) -> dict[str, Any]:
        t = self.totals
        return {
            "totalRM": format_fixed(t.total_rm),
            "totalMemoryBeforeRounding": format_fixed(t.total_memory_before_rounding),
            "totalMemoryAfterRounding": format_fixed(t.total_memory_after_rounding),
            "totalCPU": format_fixed(t.total_cpu),
            "modelInfo": self.model_info(),
        }


def estimate_and_match(mix: ChannelMix, catalog: Catalog, *, rule: str | None = None) -> SizingResult:
    """Estimate demand for a mix and pick a model with the given rule.

    The rule defaults to settings.calculate_match_rule. CatalogUnavailable
    from either catalog read propagates; nothing partial is returned.
    """
    rule = (rule or settings.calculate_match_rule).strip().lower()
    if rule not in MATCH_RULES:
        raise ValueError(f"unknown match rule: {rule!r} (expected one of {', '.join(MATCH_RULES)})")

    with timer(ESTIMATE_LATENCY):
        profiles = catalog.unit_profiles(CHANNEL_PRODUCT_TYPES.values())
        totals = estimate(mix, profiles)
        models = catalog.hardware_models()

        if rule == "closest":
            result = SizingResult(totals=totals, rule=rule, match=match_capacity(totals.total_rm, models))
        else:
            result = SizingResult(totals=totals, rule=rule, exact=find_exact_model(totals.total_rm, models))

    ESTIMATIONS.inc()
    log.info(
        "estimate_computed",
        rule=rule,
        total_rm=totals.total_rm,
        memory_gb=totals.total_memory_after_rounding,
        total_cpu=totals.total_cpu,
        protocols=mix.total_protocols,
    )
    return result
