"""Randomness capability handed to every key generation, encryption and signing operation.

The generator is an explicit, mutable context object. Nothing in the library keeps a global generator, so each caller
owns its own state and concurrent callers must either hold separate states or serialize access.

Typical usage example:

    rng = new_rand_state(256)
    sk, pk = RSA.keygen(80, rng)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import secrets

import gmpy2

from pkeutils.errors import SeedTooShort

logger = logging.getLogger(__name__)


class RandState:
    """A GMP pseudo-random generator state.

    An unseeded state always starts from GMP's fixed default seed, so callers wanting unpredictable output have to
    seed it from the OS first, see `randseed_os_rng`.

    Attributes:
        seeded: Whether the state was seeded explicitly.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._state = gmpy2.random_state() if seed is None else gmpy2.random_state(seed)
        self.seeded = seed is not None

    def seed(self, seed: int) -> None:
        """Reseeds the generator in place.

        Args:
            seed: The new seed. Must be non-negative.
        """
        if seed < 0:
            raise ValueError("Seed must be non-negative")
        self._state = gmpy2.random_state(seed)
        self.seeded = True

    def below(self, bound: int) -> int:
        """Uniform integer in `[0, bound)`.

        Args:
            bound: Exclusive upper bound. Must be positive.

        Returns:
            The sampled integer.
        """
        if bound <= 0:
            raise ValueError("Bound must be positive")
        return int(gmpy2.mpz_random(self._state, bound))

    def bits(self, size: int) -> int:
        """Uniform integer in `[0, 2**size)`.

        Args:
            size: Bit length bound. Must be non-negative.

        Returns:
            The sampled integer.
        """
        if size < 0:
            raise ValueError("Size must be non-negative")
        if size == 0:
            return 0
        return int(gmpy2.mpz_urandomb(self._state, size))


class SystemRandState(RandState):
    """Same interface as `RandState`, but every draw comes straight from the OS CSPRNG.

    Seeding has no effect here.
    """

    def __init__(self) -> None:  # pylint: disable=super-init-not-called
        self.seeded = True

    def seed(self, seed: int) -> None:
        logger.debug("Ignoring seed request for OS backed generator")

    def below(self, bound: int) -> int:
        if bound <= 0:
            raise ValueError("Bound must be positive")
        return secrets.randbelow(bound)

    def bits(self, size: int) -> int:
        if size < 0:
            raise ValueError("Size must be non-negative")
        if size == 0:
            return 0
        return secrets.randbits(size)


def get_randseed_os_rng(seed_bits: int) -> int:
    """Draws seed material from the OS entropy source.

    Args:
        seed_bits: Amount of seed bits to draw. Rounded down to full bytes.

    Returns:
        The seed as a big-endian integer.

    Raises:
        SeedTooShort: If less than a byte would be drawn.
    """
    seed_bytes = seed_bits // 8
    if seed_bytes < 1:
        raise SeedTooShort(f"Seed must be at least 8 bits long, got {seed_bits}")
    return int.from_bytes(secrets.token_bytes(seed_bytes), byteorder="big", signed=False)


def randseed_os_rng(seed_bits: int, rng: RandState) -> None:
    """Seeds `rng` with `seed_bits` bits from the OS entropy source."""
    rng.seed(get_randseed_os_rng(seed_bits))
    logger.debug("Seeded generator with %d bits of OS entropy", seed_bits // 8 * 8)


def new_rand_state(seed_bits: int = 256) -> RandState:
    """Creates a fresh generator already seeded from the OS."""
    rng = RandState()
    randseed_os_rng(seed_bits, rng)
    return rng
