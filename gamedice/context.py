"""
gamedice.context
================

The generator context: one selected generator kind, its backend state, and
the usage counter, behind a single interface.

Roll protocol
-------------
1. The active backend produces a raw pair.
2. Manual dice are trusted and returned as entered.
3. Any other pair with a face outside 1..6 means the backend malfunctioned:
   a warning is logged, the context switches to the Mersenne Twister (always
   available), and the roll is retried once. A second bad pair raises
   :class:`GeneratorMalfunction`; there is no further retry.

Seeding
-------
- :meth:`GeneratorContext.seed_from_value`       bounded seed (0 .. 2^32-1)
- :meth:`GeneratorContext.seed_from_large_value` arbitrary precision
- :meth:`GeneratorContext.seed_from_system_entropy` OS device, clock fallback
All three validate their input before touching any state and reset the
usage counter.

Threading
---------
A context is not synchronized. Drive each context from one caller at a time;
use :meth:`GeneratorContext.copy` to hand an independent generator to another
worker.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional, Union

from .backends import Backend, ReplayBackend, create_backend
from .backends.bbs import BBSBackend
from .backends.manual import ManualDiceProvider
from .bbs.params import BlumModulus
from .config import DiceConfig
from .constants import MAX_BOUNDED_SEED
from .entropy import DeviceEntropy, EntropySource, system_seed
from .errors import GeneratorMalfunction, GeneratorNotReady, InvalidSeed
from .metrics import METRICS
from .types.core import DieRoll, GeneratorKind, SystemSeed, face_in_range, parse_decimal

logger = logging.getLogger(__name__)

DEFAULT_KIND = GeneratorKind.MERSENNE

SeedInput = Union[int, str]


def parse_seed(value: Any) -> int:
    """
    Turn a seed given as an int or decimal string into a non-negative int.

    Raises:
        InvalidSeed: not an integer, or negative.
    """
    if isinstance(value, bool):
        raise InvalidSeed(value, "not-a-number")
    if isinstance(value, int):
        n = value
    elif isinstance(value, str):
        try:
            n = parse_decimal(value)
        except ValueError:
            raise InvalidSeed(value, "not-a-number") from None
    else:
        raise InvalidSeed(value, "not-a-number")
    if n < 0:
        raise InvalidSeed(value, "negative")
    return n


def _valid_pair(pair) -> bool:
    return face_in_range(pair[0]) and face_in_range(pair[1])


class GeneratorContext:
    """
    Dice generator with a switchable entropy source.

    Args:
        kind: Generator to start with; defaults to ``config.generator``.
        config: Settings for every backend; defaults to :class:`DiceConfig`.
        seed: Initial seed; defaults to ``config.seed``, and to system
            entropy when both are None.
        manual_dice: Provider of hand-entered dice for GeneratorKind.MANUAL.
        session: HTTP session for GeneratorKind.RANDOM_ORG.
        entropy_source: Override for the OS entropy device.
        replay_path: Dice file for GeneratorKind.FILE (overrides the config).
    """

    def __init__(
        self,
        kind: Optional[Union[GeneratorKind, str]] = None,
        *,
        config: Optional[DiceConfig] = None,
        seed: Optional[SeedInput] = None,
        manual_dice: Optional[ManualDiceProvider] = None,
        session: Optional[Any] = None,
        entropy_source: Optional[EntropySource] = None,
        replay_path: Optional[str] = None,
    ) -> None:
        self.config = config if config is not None else DiceConfig()
        self.config.validate()
        self._manual = manual_dice
        self._session = session
        self._entropy = entropy_source or DeviceEntropy(self.config.entropy.device)
        self._blum: Optional[BlumModulus] = None
        self._backend: Optional[Backend] = None
        self._kind = DEFAULT_KIND
        self._count = 0
        self._last_seed: Optional[int] = None
        self._closed = False

        start = GeneratorKind.parse(kind) if kind is not None else self.config.kind
        self.select_generator(start, seed=seed, replay_path=replay_path)

    # ----- introspection -----------------------------------------------------

    @property
    def kind(self) -> GeneratorKind:
        return self._kind

    @property
    def backend(self) -> Backend:
        if self._backend is None:
            raise GeneratorNotReady(self._kind.value, "closed")
        return self._backend

    def counter_since_seed(self) -> int:
        """Dice drawn since the last seed or generator selection."""
        return self._count

    def __repr__(self) -> str:
        return f"GeneratorContext(kind={self._kind.value!r}, count={self._count})"

    # ----- selection ---------------------------------------------------------

    def select_generator(
        self,
        kind: Union[GeneratorKind, str],
        *,
        seed: Optional[SeedInput] = None,
        replay_path: Optional[str] = None,
    ) -> None:
        """
        Switch to `kind` with freshly initialized state.

        The new backend is built (and its seed validated) before the current
        one is closed, so a failure leaves the context as it was.

        Raises:
            InvalidSeed: `seed` is negative or not a number.
            ReplaySourceError: FILE with a file that cannot be opened.
            BBSCheckFailed: the BBS seed has no acceptable cycle. The new
                generator is selected but must be reseeded.
        """
        kind = GeneratorKind.parse(kind)
        n = parse_seed(seed) if seed is not None else None
        if n is None and self.config.seed is not None:
            n = self.config.seed

        self._install(kind, replay_path)
        if not kind.seedable or kind is GeneratorKind.FILE:
            return
        if n is None:
            self.seed_from_system_entropy()
        else:
            self._apply_seed(n)

    def _install(self, kind: GeneratorKind, replay_path: Optional[str] = None) -> None:
        backend = create_backend(
            kind,
            self.config,
            manual_dice=self._manual,
            session=self._session,
            replay_path=replay_path,
            blum=self._blum,
        )
        if self._backend is not None:
            self._backend.close()
        self._backend = backend
        self._kind = kind
        self._count = 0
        self._last_seed = None
        self._closed = False
        logger.info("dice generator set to %s", kind.display_name)

    def open_replay_source(self, path: str) -> ReplayBackend:
        """
        Read dice from `path`, selecting the FILE generator if needed.

        Raises:
            ReplaySourceError: the file cannot be opened.
        """
        if self._kind is GeneratorKind.FILE and isinstance(self._backend, ReplayBackend):
            self._backend.open(path)
            self._count = 0
        else:
            self.select_generator(GeneratorKind.FILE, replay_path=path)
        assert isinstance(self._backend, ReplayBackend)
        return self._backend

    def configure_bbs(
        self,
        *,
        modulus: Optional[SeedInput] = None,
        factors: Optional[tuple] = None,
    ) -> BlumModulus:
        """
        Set the Blum-Blum-Shub modulus from a raw value or a factor pair.

        Bad factors are replaced by the next valid Blum factor (logged). If
        BBS is active it is reseeded with the last seed, or from system
        entropy when there is none.

        Raises:
            InvalidModulus / InvalidFactor: unparsable or non-positive input.
        """
        if (modulus is None) == (factors is None):
            raise ValueError("pass exactly one of modulus or factors")
        if modulus is not None:
            blum = BlumModulus.from_modulus(modulus)
        else:
            p, q = factors
            blum = BlumModulus.from_factors(p, q, self.config.bbs.primality_rounds)

        self._blum = blum
        if isinstance(self._backend, BBSBackend):
            self._backend.set_modulus(blum)
            last = self._last_seed
            self._count = 0
            if last is None:
                self.seed_from_system_entropy()
            else:
                self._apply_seed(last)
        return blum

    # ----- seeding -----------------------------------------------------------

    def _apply_seed(self, n: int) -> None:
        self._count = 0
        self._last_seed = n
        if n > MAX_BOUNDED_SEED:
            self.backend.seed_large(n)
        else:
            self.backend.seed(n)

    def seed_from_value(self, value: SeedInput) -> int:
        """
        Seed from an integer in 0 .. 2^32-1.

        Raises:
            InvalidSeed: negative, not a number, or too large for this path.
            BBSCheckFailed: BBS could not find a usable seed.
        """
        n = parse_seed(value)
        if n > MAX_BOUNDED_SEED:
            raise InvalidSeed(value, "too-large")
        backend = self.backend
        self._count = 0
        self._last_seed = n
        backend.seed(n)
        METRICS.record_reseed("value")
        return n

    def seed_from_large_value(self, value: SeedInput) -> int:
        """
        Seed from an arbitrary-precision integer.

        Raises:
            InvalidSeed: negative or not a number.
            BBSCheckFailed: BBS could not find a usable seed.
        """
        n = parse_seed(value)
        backend = self.backend
        self._count = 0
        self._last_seed = n
        backend.seed_large(n)
        METRICS.record_reseed("large")
        return n

    def seed_from_system_entropy(self) -> SystemSeed:
        """
        Seed from the OS entropy device, or from the clock if it is missing.

        Returns the seed used and whether it came from the device.
        """
        chosen = system_seed(self._entropy, self.config.entropy.nbytes)
        backend = self.backend
        self._count = 0
        self._last_seed = chosen.value
        if chosen.secure:
            backend.seed_large(chosen.value)
        else:
            backend.seed(chosen.value)
        METRICS.record_reseed("system" if chosen.secure else "time")
        return chosen

    def seed(self, value: Optional[SeedInput] = None) -> Union[int, SystemSeed]:
        """
        Seed with `value`, choosing the bounded or large path by size, or
        from system entropy when `value` is None.
        """
        if value is None:
            return self.seed_from_system_entropy()
        n = parse_seed(value)
        if n > MAX_BOUNDED_SEED:
            return self.seed_from_large_value(n)
        return self.seed_from_value(n)

    # ----- rolling -----------------------------------------------------------

    def roll(self) -> DieRoll:
        """
        Roll two dice.

        Raises:
            BBSCheckFailed: BBS is selected but not (or no longer) seeded.
            GeneratorNotReady: manual entry without a provider, or closed.
            GeneratorMalfunction: the fallback generator failed as well.
        """
        if self._closed:
            raise GeneratorNotReady(self._kind.value, "closed")
        kind = self._kind
        pair = self.backend.roll()

        if kind is GeneratorKind.MANUAL:
            return DieRoll(*pair)

        self._count += 2
        if not _valid_pair(pair):
            logger.warning(
                "dice generator %s produced %s; falling back on %s",
                kind.display_name, pair, DEFAULT_KIND.display_name,
            )
            METRICS.record_fallback(kind.value)
            # seeded from system entropy, never from config.seed
            self._install(DEFAULT_KIND)
            self.seed_from_system_entropy()
            kind = self._kind
            pair = self.backend.roll()
            if not _valid_pair(pair):
                raise GeneratorMalfunction(kind.value, pair)
            self._count += 2

        METRICS.record_roll(kind.value)
        return DieRoll(*pair)

    # ----- display -----------------------------------------------------------

    def query_seed_display(self) -> str:
        """
        Seed as text: "seed, modulus" for BBS, the full-precision seed for
        ISAAC and the Mersenne Twister, the counter for MD5, the file name for
        replays.

        Raises:
            UnsupportedOperation: manual entry and random.org have no seed.
        """
        return self.backend.describe_seed()

    def query_counter_display(self) -> Optional[str]:
        """Usage counter as text, or None for manual entry."""
        return self.backend.describe_counter(self._count)

    # ----- lifecycle ---------------------------------------------------------

    def copy(self) -> "GeneratorContext":
        """
        Independent copy of the full generator state.

        Rolling either copy afterwards does not affect the other. Replay
        files are reopened at the same position; HTTP sessions, manual
        providers and the entropy source are shared.
        """
        dup = copy.copy(self)
        dup.config = copy.deepcopy(self.config)
        dup._backend = copy.deepcopy(self._backend)
        return dup

    def close(self) -> None:
        if self._backend is not None:
            self._backend.close()
        self._closed = True

    def __enter__(self) -> "GeneratorContext":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


__all__ = ["GeneratorContext", "parse_seed", "DEFAULT_KIND"]
