import logging
from pathlib import Path
from typing import List, Tuple

import pytest
import requests
from prometheus_client import REGISTRY

from gamedice.backends.twister import TwisterBackend
from gamedice.config import BBSConfig, DiceConfig, EntropyConfig
from gamedice.context import GeneratorContext, parse_seed
from gamedice.errors import (
    BBSCheckFailed,
    GeneratorMalfunction,
    GeneratorNotReady,
    InvalidSeed,
    ReplaySourceError,
    UnsupportedOperation,
)
from gamedice.tests.fakes import FakeResponse, FakeSession, FixedEntropy
from gamedice.types.core import DieRoll, GeneratorKind, SystemSeed

SEEDABLE = ["bbs", "isaac", "md5", "mersenne"]


def _cfg(**kw) -> DiceConfig:
    # toy BBS factors so every context shares the same modulus
    return DiceConfig(bbs=BBSConfig(factor_p=1019, factor_q=2039), **kw)


def _rolls(ctx: GeneratorContext, n: int) -> List[Tuple[int, int]]:
    return [ctx.roll().as_tuple() for _ in range(n)]


def _sample(name: str, **labels) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.fixture
def dice_file(tmp_path: Path) -> str:
    p = tmp_path / "dice.txt"
    p.write_text("1936")
    return str(p)


# ---------------------------------------------------------------------------
# seeds
# ---------------------------------------------------------------------------

def test_parse_seed():
    assert parse_seed(" 42 ") == 42
    assert parse_seed(2**100) == 2**100
    for bad, reason in [("-1", "negative"), (-5, "negative"), ("4x", "not-a-number"),
                        (True, "not-a-number"), (1.5, "not-a-number"),
                        ("1_000", "not-a-number"), ("+7", "not-a-number"),
                        ("\u0661\u0662", "not-a-number")]:
        with pytest.raises(InvalidSeed) as ei:
            parse_seed(bad)
        assert ei.value.reason == reason


@pytest.mark.parametrize("kind", SEEDABLE)
def test_same_seed_same_rolls(kind: str):
    a = GeneratorContext(kind, config=_cfg(), seed=12345)
    b = GeneratorContext(kind, config=_cfg(), seed="12345")
    assert _rolls(a, 30) == _rolls(b, 30)


@pytest.mark.parametrize("kind", SEEDABLE)
def test_reseeding_replays_the_sequence(kind: str):
    ctx = GeneratorContext(kind, config=_cfg())
    ctx.seed_from_value(777)
    first = _rolls(ctx, 10)
    ctx.seed_from_value(777)
    assert ctx.counter_since_seed() == 0
    assert _rolls(ctx, 10) == first


@pytest.mark.parametrize("kind", SEEDABLE)
def test_invalid_seed_leaves_state_untouched(kind: str):
    ctx = GeneratorContext(kind, config=_cfg(), seed=5)
    ref = GeneratorContext(kind, config=_cfg(), seed=5)
    ctx.roll()
    ref.roll()
    for bad in (-1, "abc", 2**32):
        with pytest.raises(InvalidSeed):
            ctx.seed_from_value(bad)
    with pytest.raises(InvalidSeed):
        ctx.seed_from_large_value("-9")
    assert ctx.counter_since_seed() == 2
    assert _rolls(ctx, 10) == _rolls(ref, 10)


def test_seed_picks_path_by_size():
    ctx = GeneratorContext("md5", config=_cfg())
    ctx.seed(2**40)
    # 2^40 mod (2^32 - 1) == 2^8
    assert ctx.query_seed_display() == "The current seed is 256."
    ctx.seed(17)
    assert ctx.query_seed_display() == "The current seed is 17."


def test_large_seed_keeps_full_precision():
    ctx = GeneratorContext("mersenne", config=_cfg())
    ctx.seed_from_large_value("123456789012345678901234567890")
    assert ctx.query_seed_display() == "The current seed is 123456789012345678901234567890."


def test_system_entropy_from_device():
    src = FixedEntropy(bytes(range(64)))
    ctx = GeneratorContext("mersenne", config=_cfg(), entropy_source=src)
    chosen = ctx.seed_from_system_entropy()
    assert chosen == SystemSeed(value=int.from_bytes(bytes(range(64)), "little"), secure=True)
    assert src.requests[-1] == 64
    assert ctx.query_seed_display() == f"The current seed is {chosen.value}."


def test_system_entropy_falls_back_to_clock(tmp_path: Path, caplog):
    cfg = _cfg(entropy=EntropyConfig(device=str(tmp_path / "no-such-device")))
    with caplog.at_level(logging.WARNING, logger="gamedice.entropy"):
        ctx = GeneratorContext("isaac", config=cfg)
        chosen = ctx.seed_from_system_entropy()
    assert not chosen.secure
    assert 0 <= chosen.value < 2**32
    assert "seeding from the clock" in caplog.text


def test_config_seed_is_used_when_none_given():
    a = GeneratorContext("isaac", config=_cfg(seed=2024))
    b = GeneratorContext("isaac", config=_cfg(), seed=2024)
    assert _rolls(a, 10) == _rolls(b, 10)


def test_reseeds_are_counted():
    before = _sample("gamedice_rng_reseeds_total", source="value")
    ctx = GeneratorContext("mersenne", config=_cfg())
    ctx.seed_from_value(1)
    assert _sample("gamedice_rng_reseeds_total", source="value") == before + 1


# ---------------------------------------------------------------------------
# counter and displays
# ---------------------------------------------------------------------------

def test_counter_counts_dice():
    ctx = GeneratorContext("mersenne", config=_cfg(), seed=1)
    _rolls(ctx, 3)
    assert ctx.counter_since_seed() == 6
    assert ctx.query_counter_display() == "Number of calls since last seed: 6."


def test_bbs_display_and_modulus_change():
    ctx = GeneratorContext("bbs", config=_cfg(), seed=3)
    assert ctx.query_seed_display() == "The current seed is 3, and the modulus is 2077741."
    blum = ctx.configure_bbs(factors=(4, 9))
    assert (blum.p, blum.q) == (19, 23)
    assert ctx.query_seed_display() == "The current seed is 3, and the modulus is 437."
    assert ctx.counter_since_seed() == 0


def test_bbs_bad_modulus_blocks_rolls_until_fixed():
    ctx = GeneratorContext("bbs", config=_cfg(), seed=3)
    with pytest.raises(BBSCheckFailed):
        ctx.configure_bbs(modulus="21")
    with pytest.raises(BBSCheckFailed):
        ctx.roll()
    assert ctx.kind is GeneratorKind.BBS
    ctx.configure_bbs(modulus=437)
    assert ctx.roll()


def test_bbs_zero_seed_needs_reseed():
    ctx = GeneratorContext("mersenne", config=_cfg(), seed=1)
    with pytest.raises(BBSCheckFailed):
        ctx.select_generator("bbs", seed=0)
    assert ctx.kind is GeneratorKind.BBS
    with pytest.raises(BBSCheckFailed):
        ctx.roll()
    ctx.seed(5)
    assert ctx.roll()


def test_configure_bbs_needs_exactly_one_source():
    ctx = GeneratorContext("bbs", config=_cfg(), seed=3)
    with pytest.raises(ValueError):
        ctx.configure_bbs()
    with pytest.raises(ValueError):
        ctx.configure_bbs(modulus=437, factors=(19, 23))


def test_generated_modulus_when_no_factors_configured():
    cfg = DiceConfig()
    cfg.bbs.factor_bits = 24
    ctx = GeneratorContext("bbs", config=cfg, seed=99)
    params = ctx.backend.params
    assert params.has_factors
    assert params.modulus == params.p * params.q
    assert all(1 <= d <= 6 for d in ctx.roll())


# ---------------------------------------------------------------------------
# kinds without a seed
# ---------------------------------------------------------------------------

def test_manual_dice_are_trusted_and_not_counted():
    ctx = GeneratorContext("manual", config=_cfg(), manual_dice=lambda: (3, 4))
    assert ctx.roll() == DieRoll(3, 4)
    assert ctx.counter_since_seed() == 0
    assert ctx.query_counter_display() is None
    with pytest.raises(UnsupportedOperation):
        ctx.query_seed_display()


def test_manual_without_provider():
    ctx = GeneratorContext("manual", config=_cfg())
    with pytest.raises(GeneratorNotReady):
        ctx.roll()


def test_network_dice_are_counted():
    s = FakeSession([FakeResponse("2\n"), FakeResponse("2\n")])
    ctx = GeneratorContext("random.org", config=_cfg(), session=s)
    assert ctx.roll() == DieRoll(2, 2)
    assert ctx.query_counter_display() == "Number of dice fetched this session: 2."


def test_replay_through_context(dice_file: str):
    ctx = GeneratorContext(config=_cfg(), seed=1)
    ctx.open_replay_source(dice_file)
    assert ctx.kind is GeneratorKind.FILE
    assert _rolls(ctx, 2) == [(1, 3), (6, 1)]
    assert ctx.query_counter_display() == "Number of dice read from current file: 4."
    assert ctx.query_seed_display() == f"Reading dice from file: {dice_file}"
    ctx.seed(0)
    assert ctx.roll() == DieRoll(1, 3)


def test_missing_replay_file_keeps_current_generator(tmp_path: Path):
    ctx = GeneratorContext("isaac", config=_cfg(), seed=8)
    ref = GeneratorContext("isaac", config=_cfg(), seed=8)
    with pytest.raises(ReplaySourceError):
        ctx.select_generator("file", replay_path=str(tmp_path / "missing.txt"))
    assert ctx.kind is GeneratorKind.ISAAC
    assert _rolls(ctx, 5) == _rolls(ref, 5)


def test_missing_replay_file_keeps_current_file(dice_file: str, tmp_path: Path):
    ctx = GeneratorContext("file", config=_cfg(), replay_path=dice_file)
    assert ctx.roll() == DieRoll(1, 3)
    with pytest.raises(ReplaySourceError):
        ctx.open_replay_source(str(tmp_path / "missing.txt"))
    assert ctx.kind is GeneratorKind.FILE
    assert ctx.counter_since_seed() == 2
    assert ctx.roll() == DieRoll(6, 1)
    assert ctx.kind is GeneratorKind.FILE
    assert ctx.query_seed_display() == f"Reading dice from file: {dice_file}"


# ---------------------------------------------------------------------------
# fallback
# ---------------------------------------------------------------------------

def test_failed_network_falls_back_to_mersenne(caplog):
    before = _sample("gamedice_rng_fallbacks_total", kind="random.org")
    s = FakeSession([requests.ConnectionError("down")])
    src = FixedEntropy(bytes(range(64)))
    ctx = GeneratorContext("random.org", config=_cfg(seed=99), session=s, entropy_source=src)
    with caplog.at_level(logging.WARNING, logger="gamedice.context"):
        roll = ctx.roll()

    # the fallback ignores the configured seed and draws from the entropy device
    expected = int.from_bytes(bytes(range(64)), "little")
    mt = TwisterBackend()
    mt.seed(expected)
    assert roll.as_tuple() == mt.roll()
    assert ctx.kind is GeneratorKind.MERSENNE
    assert ctx.counter_since_seed() == 2
    assert ctx.query_seed_display() == f"The current seed is {expected}."
    assert "falling back on Mersenne Twister" in caplog.text
    assert _sample("gamedice_rng_fallbacks_total", kind="random.org") == before + 1


def test_replay_without_file_falls_back():
    ctx = GeneratorContext("file", config=_cfg())
    roll = ctx.roll()
    assert ctx.kind is GeneratorKind.MERSENNE
    assert 1 <= roll.first <= 6


def test_fallback_failure_is_fatal(monkeypatch):
    monkeypatch.setattr(TwisterBackend, "roll", lambda self: (0, 9))
    ctx = GeneratorContext("random.org", config=_cfg(seed=1), session=FakeSession())
    with pytest.raises(GeneratorMalfunction) as ei:
        ctx.roll()
    assert ei.value.kind == "mersenne"
    assert ei.value.dice == (0, 9)


# ---------------------------------------------------------------------------
# copy / close
# ---------------------------------------------------------------------------

def test_copy_is_independent():
    ctx = GeneratorContext("isaac", config=_cfg(), seed=11)
    ref = GeneratorContext("isaac", config=_cfg(), seed=11)
    ctx.roll()
    ref.roll()
    dup = ctx.copy()
    assert dup.config is not ctx.config
    _rolls(dup, 10)
    assert dup.counter_since_seed() == 22
    assert ctx.counter_since_seed() == 2
    assert _rolls(ctx, 5) == _rolls(ref, 5)


def test_copy_continues_the_same_sequence():
    ctx = GeneratorContext("md5", config=_cfg(), seed=4)
    dup = ctx.copy()
    assert _rolls(dup, 8) == _rolls(ctx, 8)


def test_copy_of_replay_reopens_file(dice_file: str):
    ctx = GeneratorContext("file", config=_cfg(), replay_path=dice_file)
    assert ctx.roll() == DieRoll(1, 3)
    dup = ctx.copy()
    assert dup.roll() == ctx.roll() == DieRoll(6, 1)
    ctx.close()
    assert dup.roll() == DieRoll(3, 6)
    dup.close()


def test_closed_context_refuses_to_roll():
    with GeneratorContext("mersenne", config=_cfg(), seed=3) as ctx:
        ctx.roll()
    with pytest.raises(GeneratorNotReady):
        ctx.roll()


def test_default_kind_comes_from_config():
    assert GeneratorContext(config=_cfg()).kind is GeneratorKind.MERSENNE
    assert GeneratorContext(config=_cfg(generator="mt19937")).kind is GeneratorKind.MERSENNE
    assert GeneratorContext(config=_cfg(generator="md5")).kind is GeneratorKind.MD5
