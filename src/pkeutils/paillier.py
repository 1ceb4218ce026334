"""Paillier encryption, additively homomorphic modulo n.

Multiplying two ciphertexts modulo n^2 yields an encryption of the sum of their plaintexts modulo n.

Typical usage example:

    sk, pk = Paillier.keygen(80, rng)
    c = Paillier.encrypt(pk, b"\x05", rng)
    r = Paillier.decrypt(pk, sk, c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
from typing import NamedTuple

from pkeutils import keygen
from pkeutils.errors import CiphertextOutOfRange
from pkeutils.errors import MessageOutOfRange
from pkeutils.errors import ParameterGenerationFailed
from pkeutils.interfaces import PublicKeyEncryption
from pkeutils.rand import RandState
from pkeutils.utils import byte_length
from pkeutils.utils import bytes_to_integer
from pkeutils.utils import integer_to_bytes
from pkeutils.utils import invert
from pkeutils.utils import secure_pow

logger = logging.getLogger(__name__)

_BLINDING_RETRIES = 256


class PaillierPublicKey(NamedTuple):
    """Paillier Public Key.

    Attributes:
        n: The modulus p * q.
        n_square: n^2, the ciphertext modulus.
        g: The generator n + 1.
    """
    n: int
    n_square: int
    g: int

    @property
    def mod_bytes(self) -> int:
        return byte_length(self.n)


class PaillierSecretKey(NamedTuple):
    """Paillier Secret Key.

    Attributes:
        lam: lambda = (p - 1)(q - 1).
        mu: lambda^-1 mod n.
    """
    lam: int
    mu: int


class Paillier(PublicKeyEncryption[PaillierSecretKey, PaillierPublicKey]):
    """Paillier with the g = n + 1 simplification."""
    NAME = "Paillier"
    LEVELS = {
        80: 1024,
        112: 2048,
        128: 3072,
        192: 7680,
        256: 15360,
    }

    @classmethod
    def keygen(cls, level: int, rng: RandState) -> tuple[PaillierSecretKey, PaillierPublicKey]:
        """Generates a Paillier key pair from two primes of equal length.

        Equal length primes guarantee `gcd(pq, (p-1)(q-1)) == 1`, which is checked nonetheless.

        Raises:
            InvalidSecurityLevel: For unsupported levels.
            ParameterGenerationFailed: If the primes do not satisfy the gcd condition.
            NoModularInverse: If lambda cannot be inverted modulo n.
        """
        mod_bits = cls.mod_bits(level)
        logger.debug("Generating a new %d bit Paillier key pair", mod_bits)
        p, q = keygen.generate_primes(mod_bits, rng)
        n = p * q
        lam = (p - 1) * (q - 1)
        if math.gcd(n, lam) != 1:
            raise ParameterGenerationFailed("Primes do not satisfy gcd(pq, (p-1)(q-1)) = 1.")
        mu = invert(lam, n)
        return PaillierSecretKey(lam, mu), PaillierPublicKey(n, n * n, n + 1)

    @classmethod
    def _blinding_factor(cls, pk: PaillierPublicKey, rng: RandState) -> int:
        r_size = pk.n.bit_length()
        for _ in range(_BLINDING_RETRIES):
            r = rng.bits(r_size)
            if r.bit_length() == r_size and math.gcd(r, pk.n) == 1:
                return r
        raise ParameterGenerationFailed("Failed to sample a blinding factor. Check random number generator.")

    @classmethod
    def encrypt(cls, pk: PaillierPublicKey, plaintext: bytes, rng: RandState) -> bytes:
        """Encrypts the plaintext as g^m * r^n mod n^2.

        Raises:
            MessageOutOfRange: If the message is not below n.
            ValueError: If `rng` is None.
        """
        if rng is None:
            raise ValueError("Paillier encryption requires a random number generator")
        m = bytes_to_integer(plaintext)
        if not 0 <= m < pk.n:
            raise MessageOutOfRange("Message representative must be in range [0, n-1]")
        r = cls._blinding_factor(pk, rng)
        c = (secure_pow(pk.g, m, pk.n_square) * secure_pow(r, pk.n, pk.n_square)) % pk.n_square
        return integer_to_bytes(c, byte_length(pk.n_square))

    @classmethod
    def decrypt(cls, pk: PaillierPublicKey, sk: PaillierSecretKey, ciphertext: bytes) -> bytes:
        """Decrypts the ciphertext as L(c^lambda mod n^2) * mu mod n.

        Raises:
            CiphertextOutOfRange: If the ciphertext is not in (0, n^2].
        """
        c = bytes_to_integer(ciphertext)
        if not 0 < c <= pk.n_square:
            raise CiphertextOutOfRange("Ciphertext representative must be in range [1, n^2]")
        u = secure_pow(c, sk.lam, pk.n_square)
        m = (((u - 1) // pk.n) * sk.mu) % pk.n
        return integer_to_bytes(m)
