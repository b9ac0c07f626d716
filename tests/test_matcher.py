import pytest
from structlog.testing import capture_logs

from picks.estimation.matcher import OVERFLOW_THRESHOLD_RM, find_exact_model, is_overflow_model, match_capacity
from picks.estimation.types import HardwareModel


def _m(name, pm, g4_pm=None, pci="x16"):
    return HardwareModel(model=name, pm=pm, g4_pm=g4_pm, pci=pci, u1="Y", u2="NA")


def test_overflow_family_by_name_suffix():
    assert is_overflow_model(_m("PX-800 G4", "1"))
    assert is_overflow_model(_m("px-800g4", "1"))
    assert not is_overflow_model(_m("G4-PX-800", "1"))
    assert not is_overflow_model(_m("PX-800", "1"))


def test_least_sufficient_capacity(models):
    result = match_capacity(4200.0, models)
    assert result.found
    assert result.base.model == "PX-200"
    assert result.base_pm == 5000.0
    assert result.overflow is None and result.overflow_pm is None


def test_exact_capacity_is_sufficient(models):
    assert match_capacity(20000, models).base.model == "PX-400"


def test_catalog_order_does_not_matter(models):
    assert match_capacity(900, list(reversed(models))).base.model == "PX-100"


def test_returned_match_is_least_sufficient(models):
    base_caps = [float(m.pm) for m in models if not is_overflow_model(m)]
    for demand in range(0, 41000, 250):
        result = match_capacity(float(demand), models)
        sufficient = [c for c in base_caps if c >= demand]
        if not sufficient:
            assert not result.found
            continue
        assert result.base_pm >= demand
        assert result.base_pm == min(sufficient)


def test_non_numeric_capacity_is_excluded():
    catalog = [_m("BAD-1", "forty"), _m("OK-1", "3000"), _m("BAD-2", None)]
    assert match_capacity(100, catalog).base.model == "OK-1"


def test_numeric_and_string_capacities_mix():
    catalog = [_m("A", 8000), _m("B", "6000"), _m("C", 7000.5)]
    result = match_capacity(6500, catalog)
    assert result.base.model == "C"
    assert result.base_pm == 7000.5


def test_equal_capacity_keeps_catalog_order():
    catalog = [_m("FIRST", "5000"), _m("SECOND", "5000")]
    assert match_capacity(10, catalog).base.model == "FIRST"


def test_no_base_model_is_a_sentinel(models):
    result = match_capacity(10_000_000, models)
    assert not result.found
    assert result.as_dict()["model"] is None
    assert result.as_dict()["pm"] is None
    assert result.as_dict()["pci"] is None


def test_overflow_not_searched_at_threshold(models):
    result = match_capacity(float(OVERFLOW_THRESHOLD_RM), models)
    assert result.base.model == "PX-800"
    assert result.overflow is None
    assert result.overflow_pm is None


def test_overflow_fields_null_at_or_below_threshold(models):
    for demand in (0, 1000, 39999.99, 40000):
        result = match_capacity(demand, models)
        assert result.as_dict()["g4Model"] is None
        assert result.as_dict()["g4PM"] is None


def test_demand_beyond_base_catalog_uses_overflow(models):
    result = match_capacity(45000, models)
    assert not result.found
    assert result.overflow.model == "PX-800 G4"
    assert result.overflow_pm == 50000.0
    assert result.as_dict() == {
        "model": None,
        "pm": None,
        "pci": None,
        "g4Model": "PX-800 G4",
        "g4PM": 50000.0,
    }


def test_overflow_augments_base_match():
    catalog = [_m("PX-MAX", "100000"), _m("ZX G4", "30000", g4_pm="60000")]
    result = match_capacity(41000, catalog)
    assert result.base.model == "PX-MAX"
    assert result.overflow.model == "ZX G4"
    assert result.overflow_pm == 60000.0


def test_overflow_effective_capacity_falls_back_to_pm(models):
    result = match_capacity(55000, models)
    assert result.overflow.model == "PX-1600 G4"
    assert result.overflow_pm == 60000.0


def test_overflow_ordered_by_pm_not_g4_pm():
    catalog = [
        _m("BIG G4", "45000", g4_pm="90000"),
        _m("SMALL G4", "41000", g4_pm="95000"),
    ]
    result = match_capacity(44000, catalog)
    assert result.overflow.model == "SMALL G4"
    assert result.overflow_pm == 95000.0


def test_overflow_unparsable_pm_sorts_last():
    catalog = [_m("ODD G4", "n/a", g4_pm=70000), _m("EVEN G4", "48000", g4_pm=52000)]
    assert match_capacity(46000, catalog).overflow.model == "EVEN G4"
    assert match_capacity(60000, catalog).overflow.model == "ODD G4"


def test_no_overflow_model_large_enough(models):
    result = match_capacity(1_000_000, models)
    assert not result.found
    assert result.overflow is None


def test_exact_match_requires_equality(models):
    assert find_exact_model(5000, models).model == "PX-200"
    assert find_exact_model(5000.0, models).model == "PX-200"
    assert find_exact_model(4999, models) is None


def test_exact_and_closest_disagree(models):
    # 20 RM scaled by 1.43: closest finds a model, exact finds none.
    demand = 20 * 1.43
    assert match_capacity(demand, models).base.model == "PX-100"
    assert find_exact_model(demand, models) is None


@pytest.mark.parametrize("demand", [0, 0.0])
def test_zero_demand_picks_smallest(models, demand):
    assert match_capacity(demand, models).base.model == "PX-100"


def test_non_numeric_capacity_logs_warning():
    with capture_logs() as logs:
        result = match_capacity(100.0, [_m("PX-X", "forty thousand"), _m("PX-200", "5000")])
    assert result.base.model == "PX-200"

    warnings = [e for e in logs if e["event"] == "unparsable_catalog_value"]
    assert len(warnings) == 1
    assert warnings[0]["log_level"] == "warning"
    assert warnings[0]["field"] == "pm"
    assert warnings[0]["value"] == repr("forty thousand")
