import pytest

from picks.estimation.aggregator import estimate, protocol_bonus, round_memory
from picks.estimation.types import ChannelMix, ProtocolEntry, UnitResourceProfile


def _by_type(profiles):
    return {p.product_type: p for p in profiles}


def test_two_sd_channels_no_protocols():
    profiles = {"Encoder-SD": UnitResourceProfile(product_type="Encoder-SD", rm=10, mem="4 GB", cpu=2)}
    totals = estimate(ChannelMix(sd=2), profiles)

    assert totals.total_rm == pytest.approx(28.6)
    # 2 x 4 = 8 raw, doubled to 16, then /1024.
    assert totals.total_memory_before_rounding == pytest.approx(16 / 1024)
    assert totals.total_memory_after_rounding == 32.0
    assert totals.total_cpu == pytest.approx(6.0)


@pytest.mark.parametrize(
    "total,bonus",
    [(0, 0), (3, 0), (4, 500), (5, 500), (6, 500), (7, 1000), (8, 1000), (9, 1000), (10, 0), (25, 0)],
)
def test_protocol_bonus_steps(total, bonus):
    assert protocol_bonus(total) == bonus


def test_protocol_bonus_is_added_after_scaling(profiles):
    mix = ChannelMix(hd=4, protocols=(ProtocolEntry(quantity=3, name="SRT"), ProtocolEntry(quantity=2, name="RTMP")))
    totals = estimate(mix, _by_type(profiles))
    assert totals.total_rm == pytest.approx(4 * 25 * 1.43 + 500)


def test_protocol_bonus_without_channels():
    mix = ChannelMix(protocols=(ProtocolEntry(quantity=8),))
    assert estimate(mix, {}).total_rm == 1000


def test_protocol_quantity_defaults_to_zero():
    mix = ChannelMix(protocols=(ProtocolEntry(name="HLS"), ProtocolEntry(quantity=4)))
    assert mix.total_protocols == 4


@pytest.mark.parametrize(
    "unrounded,rounded",
    [
        (0, 0),
        (0.01, 32),
        (16, 32),  # one stick is odd, so a second is added
        (17, 32),
        (32, 32),
        (33, 64),
        (48, 64),
        (64.5, 96),
    ],
)
def test_round_memory(unrounded, rounded):
    assert round_memory(unrounded) == rounded


def test_rounded_memory_invariants():
    for tenth_gb in range(0, 2000):
        unrounded = tenth_gb / 10
        rounded = round_memory(unrounded)
        assert rounded % 16 == 0
        assert (rounded // 16) % 2 == 0
        assert rounded >= unrounded


def test_missing_profile_contributes_nothing(profiles):
    only_sd = {"Encoder-SD": _by_type(profiles)["Encoder-SD"]}
    totals = estimate(ChannelMix(sd=1, hd=5, uhd=2, decoder=3), only_sd)
    assert totals.total_rm == pytest.approx(14.3)
    assert totals.total_cpu == pytest.approx(3.0)


def test_full_mix(profiles):
    mix = ChannelMix(sd=1, hd=2, fhd=3, uhd=1, passthrough=4, decoder=2)
    totals = estimate(mix, _by_type(profiles))

    raw_rm = 10 + 2 * 25 + 3 * 40 + 120 + 4 * 3 + 2 * 15
    raw_mem = 4 + 2 * 8 + 3 * 12 + 32 + 4 * 1 + 2 * 6
    raw_cpu = 2 + 2 * 4 + 3 * 6 + 16 + 4 * 0.5 + 2 * 3
    assert totals.total_rm == pytest.approx(raw_rm * 1.43)
    assert totals.total_memory_before_rounding == pytest.approx(raw_mem * 2 / 1024)
    assert totals.total_cpu == pytest.approx(raw_cpu * 1.5)


def test_totals_never_negative_for_non_negative_input(profiles):
    by_type = _by_type(profiles)
    for n in range(0, 12):
        mix = ChannelMix(sd=n, hd=n // 2, passthrough=n, protocols=(ProtocolEntry(quantity=n),))
        totals = estimate(mix, by_type)
        assert totals.total_rm >= 0
        assert totals.total_cpu >= 0


def test_string_encoded_rm_and_cpu():
    profiles = {"Decoder": UnitResourceProfile(product_type="Decoder", rm="15", mem="2048", cpu="3")}
    totals = estimate(ChannelMix(decoder=4), profiles)
    assert totals.total_rm == pytest.approx(60 * 1.43)
    assert totals.total_memory_before_rounding == pytest.approx(16.0)
    assert totals.total_memory_after_rounding == 32.0
    assert totals.total_cpu == pytest.approx(18.0)


def test_large_memory_in_megabytes():
    # 17 GB after doubling and conversion rounds up to two sticks.
    profiles = {"Encoder-HD": UnitResourceProfile(product_type="Encoder-HD", rm=0, mem=17 * 512, cpu=0)}
    totals = estimate(ChannelMix(hd=1), profiles)
    assert totals.total_memory_before_rounding == pytest.approx(17.0)
    assert totals.total_memory_after_rounding == 32.0
