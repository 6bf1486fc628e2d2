import json
from pathlib import Path

import pytest

from gamedice.config import DEFAULT, BBSConfig, DiceConfig, NetworkConfig
from gamedice.constants import BBS_DEFAULT_FACTOR_BITS, RANDOM_ORG_ENDPOINT
from gamedice.types.core import GeneratorKind

ENV_KEYS = [
    "GENERATOR", "SEED", "BBS_P", "BBS_Q", "BBS_BITS", "BBS_MODULUS", "BBS_ROUNDS",
    "REPLAY_PATH", "NET_ENDPOINT", "NET_TIMEOUT_S", "NET_BATCH",
    "ENTROPY_DEVICE", "ENTROPY_BYTES",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv("GAMEDICE_" + key, raising=False)


def test_defaults():
    cfg = DiceConfig()
    cfg.validate()
    assert cfg.kind is GeneratorKind.MERSENNE
    assert cfg.seed is None
    assert cfg.bbs.factor_p is None and cfg.bbs.factor_q is None
    assert cfg.bbs.factor_bits == BBS_DEFAULT_FACTOR_BITS
    assert cfg.network.endpoint == RANDOM_ORG_ENDPOINT
    assert cfg.network.batch_size == 1
    assert DEFAULT == DiceConfig()


def test_from_env(monkeypatch):
    monkeypatch.setenv("GAMEDICE_GENERATOR", "isaac")
    monkeypatch.setenv("GAMEDICE_SEED", "12345678901234567890")
    monkeypatch.setenv("GAMEDICE_BBS_P", "1019")
    monkeypatch.setenv("GAMEDICE_BBS_Q", "2039")
    monkeypatch.setenv("GAMEDICE_NET_BATCH", "50")
    monkeypatch.setenv("GAMEDICE_ENTROPY_BYTES", "32")
    cfg = DiceConfig.from_env()
    assert cfg.kind is GeneratorKind.ISAAC
    assert cfg.seed == 12345678901234567890
    assert (cfg.bbs.factor_p, cfg.bbs.factor_q) == (1019, 2039)
    assert cfg.network.batch_size == 50
    assert cfg.entropy.nbytes == 32


def test_from_env_custom_prefix(monkeypatch):
    monkeypatch.setenv("DICE_GENERATOR", "md5")
    assert DiceConfig.from_env(prefix="DICE_").kind is GeneratorKind.MD5


@pytest.mark.parametrize(
    "key, value",
    [
        ("SEED", "twelve"),
        ("SEED", "-4"),
        ("SEED", "1_000"),
        ("BBS_MODULUS", "+437"),
        ("GENERATOR", "dice-o-matic"),
        ("NET_ENDPOINT", "ftp://example.test/"),
        ("NET_BATCH", "0"),
        ("BBS_MODULUS", "438"),
        ("BBS_BITS", "4"),
        ("BBS_P", "1019"),   # without BBS_Q
    ],
)
def test_from_env_rejects(monkeypatch, key: str, value: str):
    monkeypatch.setenv("GAMEDICE_" + key, value)
    with pytest.raises(ValueError):
        DiceConfig.from_env()


def test_from_json_file(tmp_path: Path):
    p = tmp_path / "dice.json"
    p.write_text(json.dumps({
        "generator": "bbs",
        "seed": "8675309",
        "bbs": {"factor_p": 1019, "factor_q": 2039, "primality_rounds": 4},
        "replay": {"path": "dice.txt"},
    }))
    cfg = DiceConfig.from_file(str(p))
    assert cfg.kind is GeneratorKind.BBS
    assert cfg.seed == 8675309
    assert cfg.bbs.primality_rounds == 4
    assert cfg.replay.path == "dice.txt"


def test_from_yaml_file(tmp_path: Path):
    p = tmp_path / "dice.yaml"
    p.write_text(
        "generator: random.org\n"
        "network:\n"
        "  timeout_s: 2.5\n"
        "  batch_size: 100\n"
        "bbs:\n"
        "  modulus: 437\n"
    )
    cfg = DiceConfig.from_file(str(p))
    assert cfg.kind is GeneratorKind.RANDOM_ORG
    assert cfg.network.timeout_s == 2.5
    assert cfg.network.batch_size == 100
    assert cfg.bbs.modulus == 437


def test_empty_file_gives_defaults(tmp_path: Path):
    p = tmp_path / "empty.yaml"
    p.write_text("")
    assert DiceConfig.from_file(str(p)) == DiceConfig()


def test_non_mapping_file_is_rejected(tmp_path: Path):
    p = tmp_path / "list.yaml"
    p.write_text("- bbs\n- isaac\n")
    with pytest.raises(ValueError):
        DiceConfig.from_file(str(p))


def test_round_trip_through_json(tmp_path: Path):
    cfg = DiceConfig(generator="md5", seed=3, network=NetworkConfig(batch_size=7))
    p = tmp_path / "out.json"
    p.write_text(cfg.to_json())
    assert DiceConfig.from_file(str(p)) == cfg


def test_factor_validation():
    with pytest.raises(ValueError):
        BBSConfig(factor_p=0, factor_q=5).validate()
    with pytest.raises(ValueError):
        BBSConfig(factor_q=23).validate()
    with pytest.raises(ValueError):
        BBSConfig(primality_rounds=0).validate()
    BBSConfig(factor_p=4, factor_q=9).validate()
