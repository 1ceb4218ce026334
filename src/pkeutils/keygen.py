"""Core Prime Generation Utility, used by every scheme to find its large primes.

Candidates come from the caller's generator, and are checked with a trial division against a cached set of small
primes before running a FIPS 186-5 based Miller-Rabin test. Every search is bounded, running out of attempts raises
`ParameterGenerationFailed` instead of looping forever.

Typical usage example:

    rng = new_rand_state()
    p = generate_probable_prime(512, rng)
    p, q = generate_primes(2048, rng, 65537)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
import secrets

from pkeutils.errors import ParameterGenerationFailed
from pkeutils.rand import RandState

logger = logging.getLogger(__name__)

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
_MINIMUM_PRIME_SEPARATION: int = 100
_MINIMUM_MR_ROUNDS: int = 12


def _sieve(n: int = 10000) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes to generate a set of primes up to `n`.
    Includes memory space optimization and sieving until root.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    return [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]


def get_pre_primes(n: int = 10000, change: bool = False) -> list[int]:
    """Get the small primes, automatically generating if necessary.

    Uses `_SMALL_PRIMES` as a cache. Regeneration occurs if the requested range is greater, forced by `change` or
    the cache is empty.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.
        change: Whether to force a recomputation of primes. Defaults to False.

    Returns:
        List of primes in ascending order. All primes at least to `n` or more unless `change` is True.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if n > _SMALL_PRIMES_CAP or change or not _SMALL_PRIMES:
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _trial_division(no: int, n: int = 10000) -> bool:
    """Check the provided `no` against the known small primes.

    Args:
         no: The number to check. Must be integer and non-negative.
         n: The number up to which to generate primes. Defaults to 10000.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime**2 > no:
            return True
        if no % prime == 0:
            return False
    return True


def _miller_rabin(w: int, iters: int) -> bool:
    """Perform Miller-Rabin primality test as specified in FIPS 186-5.

    Witnesses are drawn from the OS, independent of any caller generator.

    Args:
        w: Odd integer to be tested.
        iters: Number of Miller-Rabin iterations to perform.

    Returns:
        True if `w` is probably prime, False otherwise.
    """
    if w <= 3:
        return w in (2, 3)
    if w % 2 == 0:
        return False
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    for _ in range(iters):
        b = secrets.randbelow(w - 3) + 2
        z = pow(b, m, w)
        if z in (1, tw):
            continue
        for _ in range(1, a):
            z = pow(z, 2, w)
            if z == tw:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def _mr_rounds(bits: int) -> int:
    """Miller-Rabin rounds for a candidate of `bits` bits, FIPS 186-5 Appendix C.1."""
    if bits <= 512:
        return 40
    if bits <= 1024:
        return 56
    if bits <= 1536:
        return 64
    if bits <= 2048:
        return 70
    return 74


def check_prime(candidate: int, iters: None | int = None, n: int = 10000) -> bool:
    """Performs a composite Primality test, using a limited amount of trial divisions, before a Miller-Rabin test.

    Args:
        candidate: The candidate prime to test.
        iters: Number of Miller-Rabin iterations to perform, never less than 12.
            If not provided will use defaults as per the FIPS 186-5 Appendix C.1
        n: The number up to which to generate primes for trial division. Defaults to 10000.

    Returns:
        True if `candidate` is probably prime, False otherwise.
    """
    if candidate < 2:
        return False
    if not _trial_division(candidate, n):
        return False
    if iters is None:
        iters = _mr_rounds(candidate.bit_length())
    return _miller_rabin(candidate, max(iters, _MINIMUM_MR_ROUNDS))


def generate_probable_prime(size: int, rng: RandState, pub: int | None = None, prm_p: int | None = None) -> int:
    """Generate a probable prime number of exactly `size` bits.

    Candidates are odd and carry their two top bits set, so the product of two primes of this size has exactly
    `2 * size` bits.

    Args:
        size: The size of the prime to generate in bits. Must be at least 3.
        rng: The generator to draw candidates from.
        pub: Optional public exponent, if given `gcd(prime - 1, pub) == 1` is enforced.
        prm_p: The other prime in the pair if this is the second generation. Candidates too close to it are
            rejected. Optional, if not provided generates the first prime.

    Returns:
        A probable prime number.

    Raises:
        ParameterGenerationFailed: If generation loops way beyond a reasonable time and a bit.
    """
    if size < 3:
        raise ValueError("Size must be at least 3 bits.")
    ml = 1 if prm_p is None else 2
    rep_cap = size * 5 * ml
    msk = (1 << size - 1) | (1 << size - 2) | 1
    for attempt in range(rep_cap):
        byts = rng.bits(size) | msk
        if prm_p is not None and size > _MINIMUM_PRIME_SEPARATION and abs(prm_p - byts) <= (
                1 << (size - _MINIMUM_PRIME_SEPARATION)):
            continue
        if prm_p == byts:
            continue
        if pub is not None and math.gcd(byts - 1, pub) != 1:
            continue
        if check_prime(byts):
            logger.debug("Found %d bit prime after %d attempts", size, attempt + 1)
            return byts
    raise ParameterGenerationFailed(
        f"Run an improbable {rep_cap} amount of loops with no prime found. Check system random number generator.")


def generate_primes(size: int, rng: RandState, pub: int | None = None) -> tuple[int, int]:
    """Generates a pair of distinct primes for a modulus of `size` bits.

    Args:
        size: The modulus size to generate the prime pair for. Must be even.
        rng: The generator to draw candidates from.
        pub: Optional public exponent the primes have to be compatible with. Must be odd if given.

    Returns:
        A pair of `size // 2` bit primes.

    Raises:
        ValueError: If `size` is odd or `pub` does not meet requirements.
    """
    if size % 2 != 0:
        raise ValueError("Size must be an even number.")
    if pub is not None and (pub % 2 == 0 or pub < 3):
        raise ValueError("Public exponent does not meet requirements.")
    p = generate_probable_prime(size // 2, rng, pub)
    q = generate_probable_prime(size // 2, rng, pub, p)
    return p, q
