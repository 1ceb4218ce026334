"""Provides "textbook" RSA with CRT accelerated decryption.

The raw primitive offers no protection for small or structured messages, wrap it with `pkeutils.pkcs1.RSAPKCS1v15`
unless the caller pads on its own.

Typical usage example:

    rng = new_rand_state()
    sk, pk = RSA.keygen(112, rng)
    c = RSA.encrypt(pk, b"Hi there!")
    r = RSA.decrypt(pk, sk, c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
from typing import NamedTuple

from pkeutils import keygen
from pkeutils.errors import MessageOutOfRange
from pkeutils.interfaces import PublicKeyEncryption
from pkeutils.rand import RandState
from pkeutils.utils import byte_length
from pkeutils.utils import bytes_to_integer
from pkeutils.utils import integer_to_bytes
from pkeutils.utils import invert
from pkeutils.utils import secure_pow

logger = logging.getLogger(__name__)

DEFAULT_E = 65537

RSA_LEVELS = {
    80: 1024,
    112: 2048,
    128: 3072,
    192: 7680,
    256: 15360,
}


class RSAPublicKey(NamedTuple):
    """RSA Public Key.

    Attributes:
        n: The modulus of the keypair.
        e: The public exponent.
    """
    n: int
    e: int = DEFAULT_E

    @property
    def mod_bytes(self) -> int:
        """Length of the modulus in bytes."""
        return byte_length(self.n)

    def c_rsa(self, message: int) -> int:
        """Performs the core RSA encryption primitive.

        Args:
            message: The int-marshalled message to encrypt

        Returns:
            The encrypted message

        Raises:
            MessageOutOfRange: If the message is out of range for the current key.
        """
        if not 1 < message < self.n:
            raise MessageOutOfRange("Message representative must be in range [2, n-1]")
        return secure_pow(message, self.e, self.n)


class RSASecretKey(NamedTuple):
    """RSA Secret Key in CRT form.

    Attributes:
        p: Private Prime 1.
        q: Private Prime 2.
        d_p: CRT exponent d mod (p - 1).
        d_q: CRT exponent d mod (q - 1).
        q_inv: CRT coefficient q^-1 mod p.
    """
    p: int
    q: int
    d_p: int
    d_q: int
    q_inv: int

    @property
    def n(self) -> int:
        return self.p * self.q

    def c_rsa(self, ciphertext: int) -> int:
        """Performs the core RSA decryption primitive accelerated with CRT.

        The ciphertext is only reduced modulo the primes, no range check takes place.

        Args:
            ciphertext: The int-marshalled ciphertext.

        Returns:
            The decrypted message representative.
        """
        m_p = secure_pow(ciphertext, self.d_p, self.p)
        m_q = secure_pow(ciphertext, self.d_q, self.q)
        h = ((m_p - m_q) * self.q_inv) % self.p
        return m_q + self.q * h

    @classmethod
    def from_primes(cls, p: int, q: int, pub_exp: int = DEFAULT_E) -> "RSASecretKey":
        """Derives the CRT secret key from the prime pair.

        Raises:
            NoModularInverse: If the public exponent is not invertible modulo phi(n).
        """
        d = invert(pub_exp, (p - 1) * (q - 1))
        return cls(p, q, d % (p - 1), d % (q - 1), invert(q, p))


class RSA(PublicKeyEncryption[RSASecretKey, RSAPublicKey]):
    """Raw RSA, with a public exponent of 65537 and CRT decryption."""
    NAME = "RSA"
    LEVELS = RSA_LEVELS

    @classmethod
    def keygen(cls, level: int, rng: RandState) -> tuple[RSASecretKey, RSAPublicKey]:
        """Generates an RSA key pair.

        Both primes have exactly half of the modulus bits and `gcd(e, (p-1)(q-1)) == 1`.

        Args:
            level: Security level, one of 80, 112, 128, 192 or 256.
            rng: The generator to draw the primes from.

        Returns:
            The `(secret key, public key)` pair.

        Raises:
            InvalidSecurityLevel: For unsupported levels.
            NoModularInverse: If the public exponent cannot be inverted.
        """
        mod_bits = cls.mod_bits(level)
        logger.debug("Generating a new %d bit RSA key pair", mod_bits)
        p, q = keygen.generate_primes(mod_bits, rng, DEFAULT_E)
        sk = RSASecretKey.from_primes(p, q, DEFAULT_E)
        pk = RSAPublicKey(p * q, DEFAULT_E)
        logger.debug("RSA key pair generated")
        return sk, pk

    @classmethod
    def encrypt(cls, pk: RSAPublicKey, plaintext: bytes, rng: RandState | None = None) -> bytes:
        """Encrypts the plaintext, requires no randomness.

        Args:
            pk: The public key.
            plaintext: Big-endian message representative, must be in `(1, n)`.
            rng: Unused.

        Returns:
            The ciphertext, as long as the modulus.

        Raises:
            MessageOutOfRange: If the message is out of range.
        """
        m = bytes_to_integer(plaintext)
        return integer_to_bytes(pk.c_rsa(m), pk.mod_bytes)

    @classmethod
    def decrypt(cls, pk: RSAPublicKey, sk: RSASecretKey, ciphertext: bytes) -> bytes:
        """Decrypts the ciphertext.

        Leading zero bytes of the message are not preserved.

        Args:
            pk: The public key. Unused, as the secret key holds everything necessary.
            sk: The secret key.
            ciphertext: Big-endian ciphertext.

        Returns:
            The big-endian message.
        """
        return integer_to_bytes(sk.c_rsa(bytes_to_integer(ciphertext)))
