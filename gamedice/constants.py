"""
Dice generator constants.

This module centralizes:
- Die geometry and the 32-bit rejection-sampling bounds derived from it
- Blum-Blum-Shub tuning knobs (factor floor, primality rounds, cycle check)
- ISAAC table sizes
- Seed bounds and system-entropy read sizes

Operational knobs (which generator, which factors, which files) live in
`gamedice.config.DiceConfig`; code that needs stable compile-time values
imports them from here.
"""

from __future__ import annotations

# -----------------------------
# Die geometry / sampler bounds
# -----------------------------
DIE_FACES: int = 6

# Raw word width produced by the stream, digest and twister backends.
RAW_WORD_BITS: int = 32
RAW_WORD_MASK: int = (1 << RAW_WORD_BITS) - 1

# floor(2^32 / 6) and the largest multiple of 6 not exceeding 2^32.
SAMPLER_QUOTIENT: int = (1 << RAW_WORD_BITS) // DIE_FACES   # 715827882
SAMPLER_LIMIT: int = SAMPLER_QUOTIENT * DIE_FACES           # 4294967292

# -----------------------------
# Blum-Blum-Shub
# -----------------------------
BBS_MIN_FACTOR: int = 19
BBS_PRIMALITY_ROUNDS: int = 10

# Seed-quality check: squarings to reach the reference point, the minimum
# acceptable cycle length, and how many consecutive seeds to try.
BBS_WARMUP_SQUARINGS: int = 8
BBS_MIN_CYCLE: int = 16
BBS_SEED_ATTEMPTS: int = 32

# Size of each randomly generated Blum factor when none are configured.
BBS_DEFAULT_FACTOR_BITS: int = 256

# -----------------------------
# ISAAC
# -----------------------------
ISAAC_RANDSIZL: int = 8
ISAAC_RANDSIZ: int = 1 << ISAAC_RANDSIZL
ISAAC_GOLDEN_RATIO: int = 0x9E3779B9

# -----------------------------
# Seeds / entropy
# -----------------------------
# Largest seed accepted by the bounded seeding path.
MAX_BOUNDED_SEED: int = RAW_WORD_MASK
# The digest counter reduces long seeds modulo this value.
DIGEST_SEED_MODULUS: int = RAW_WORD_MASK

SYSTEM_ENTROPY_DEVICE: str = "/dev/urandom"
SYSTEM_ENTROPY_BYTES: int = 64   # 512 bits of state

# -----------------------------
# Network entropy
# -----------------------------
RANDOM_ORG_ENDPOINT: str = "https://www.random.org/integers/"
NETWORK_TIMEOUT_S: float = 10.0
NETWORK_MAX_BATCH: int = 10_000

__all__ = [
    "DIE_FACES",
    "RAW_WORD_BITS",
    "RAW_WORD_MASK",
    "SAMPLER_QUOTIENT",
    "SAMPLER_LIMIT",
    "BBS_MIN_FACTOR",
    "BBS_PRIMALITY_ROUNDS",
    "BBS_WARMUP_SQUARINGS",
    "BBS_MIN_CYCLE",
    "BBS_SEED_ATTEMPTS",
    "BBS_DEFAULT_FACTOR_BITS",
    "ISAAC_RANDSIZL",
    "ISAAC_RANDSIZ",
    "ISAAC_GOLDEN_RATIO",
    "MAX_BOUNDED_SEED",
    "DIGEST_SEED_MODULUS",
    "SYSTEM_ENTROPY_DEVICE",
    "SYSTEM_ENTROPY_BYTES",
    "RANDOM_ORG_ENDPOINT",
    "NETWORK_TIMEOUT_S",
    "NETWORK_MAX_BATCH",
]
