"""ElGamal encryption over the multiplicative group modulo a prime.

Ciphertexts are the pair `(c1, c2)` wrapped into a small DER sequence, so they travel as a single byte string.

Typical usage example:

    sk, pk = ElGamal.keygen(80, rng)
    c = ElGamal.encrypt(pk, b"Hi there!", rng)
    r = ElGamal.decrypt(pk, sk, c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
from typing import NamedTuple

from pyasn1 import error
from pyasn1.codec.der import decoder
from pyasn1.codec.der import encoder
from pyasn1.type import namedtype
from pyasn1.type import univ

from pkeutils import keygen
from pkeutils.errors import MalformedCiphertext
from pkeutils.errors import MessageOutOfRange
from pkeutils.errors import ParameterGenerationFailed
from pkeutils.interfaces import PublicKeyEncryption
from pkeutils.rand import RandState
from pkeutils.utils import bytes_to_integer
from pkeutils.utils import integer_to_bytes
from pkeutils.utils import secure_pow

logger = logging.getLogger(__name__)

GENERATOR = 4
_EXPONENT_RETRIES = 128


class ElGamalCiphertext(univ.Sequence):
    """The `(c1, c2)` pair of big-endian octet strings."""
    componentType = namedtype.NamedTypes(
        namedtype.NamedType("c1", univ.OctetString()),
        namedtype.NamedType("c2", univ.OctetString()),
    )


class ElGamalPublicKey(NamedTuple):
    """ElGamal Public Key.

    Attributes:
        p: The prime modulus.
        q: (p - 1) / 2. p is no safe prime, so q is generally composite and the order of g is an unknown
            divisor of it.
        g: The generator, fixed at 4.
        h: The public value g^x mod p.
    """
    p: int
    q: int
    g: int
    h: int


class ElGamalSecretKey(NamedTuple):
    """ElGamal Secret Key.

    Attributes:
        x: The secret exponent, 1 < x < p - 1.
    """
    x: int


def _sample_exponent(p: int, rng: RandState) -> int:
    """Uniform exponent in (1, p - 2]."""
    for _ in range(_EXPONENT_RETRIES):
        x = rng.below(p - 1)
        if x > 1:
            return x
    raise ParameterGenerationFailed("Failed to sample an exponent. Check random number generator.")


def encode_ciphertext(c1: int, c2: int) -> bytes:
    """DER encodes the ciphertext pair."""
    pld = ElGamalCiphertext()
    pld["c1"] = integer_to_bytes(c1)
    pld["c2"] = integer_to_bytes(c2)
    return encoder.encode(pld)


def decode_ciphertext(data: bytes) -> tuple[int, int]:
    """Decodes a DER ciphertext pair.

    Raises:
        MalformedCiphertext: If the data is no valid pair or carries trailing bytes.
    """
    try:
        pld, rest = decoder.decode(data, asn1Spec=ElGamalCiphertext())
        c1, c2 = bytes(pld["c1"]), bytes(pld["c2"])
    except error.PyAsn1Error as exc:
        raise MalformedCiphertext("Ciphertext is not a valid ElGamal pair.") from exc
    if rest:
        raise MalformedCiphertext("Ciphertext carries trailing data.")
    return bytes_to_integer(c1), bytes_to_integer(c2)


class ElGamal(PublicKeyEncryption[ElGamalSecretKey, ElGamalPublicKey]):
    """ElGamal with a fixed generator of 4."""
    NAME = "ElGamal"
    LEVELS = {
        80: 1024,
        112: 2048,
        128: 3072,
        192: 7680,
        256: 15360,
    }

    @classmethod
    def keygen(cls, level: int, rng: RandState) -> tuple[ElGamalSecretKey, ElGamalPublicKey]:
        """Generates an ElGamal key pair.

        The modulus is a random prime with exactly the bit length of the level.

        Raises:
            InvalidSecurityLevel: For unsupported levels.
        """
        p_bits = cls.mod_bits(level)
        logger.debug("Generating a new %d bit ElGamal key pair", p_bits)
        p = keygen.generate_probable_prime(p_bits, rng)
        x = _sample_exponent(p, rng)
        h = secure_pow(GENERATOR, x, p)
        return ElGamalSecretKey(x), ElGamalPublicKey(p, (p - 1) // 2, GENERATOR, h)

    @classmethod
    def encrypt(cls, pk: ElGamalPublicKey, plaintext: bytes, rng: RandState) -> bytes:
        """Encrypts the plaintext with a fresh ephemeral exponent.

        Raises:
            MessageOutOfRange: If the message exceeds p - 1.
            ValueError: If `rng` is None.
        """
        if rng is None:
            raise ValueError("ElGamal encryption requires a random number generator")
        m = bytes_to_integer(plaintext)
        if m > pk.p - 1:
            raise MessageOutOfRange("Message representative must be in range [0, p-1]")
        k = _sample_exponent(pk.p, rng)
        c1 = secure_pow(pk.g, k, pk.p)
        c2 = (secure_pow(pk.h, k, pk.p) * m) % pk.p
        return encode_ciphertext(c1, c2)

    @classmethod
    def decrypt(cls, pk: ElGamalPublicKey, sk: ElGamalSecretKey, ciphertext: bytes) -> bytes:
        """Decrypts the ciphertext as c2 * c1^(p-1-x) mod p.

        Raises:
            MalformedCiphertext: If the ciphertext cannot be decoded.
        """
        c1, c2 = decode_ciphertext(ciphertext)
        m = (secure_pow(c1, pk.p - 1 - sk.x, pk.p) * c2) % pk.p
        return integer_to_bytes(m)
