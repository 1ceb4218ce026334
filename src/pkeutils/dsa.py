"""The Digital Signature Algorithm, including generation of its domain parameters.

Messages are hashed with a SHA-2 function, keeping the leftmost bits up to the length of q as FIPS 186 does.
Signatures are the plain `(r, s)` pair, with an optional DER encoding as the RFC 3279 Dss-Sig-Value.

Typical usage example:

    sk, pk = DSA.keygen(80, rng)
    sig = DSA.sign(sk, b"Hi there!", rng)
    assert DSA.verify(pk, b"Hi there!", sig)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import hashlib
import logging
from typing import NamedTuple

from pyasn1 import error
from pyasn1.codec.der import decoder
from pyasn1.codec.der import encoder
from pyasn1_modules import rfc3279

from pkeutils import keygen
from pkeutils.errors import MalformedSignature
from pkeutils.errors import NoModularInverse
from pkeutils.errors import ParameterGenerationFailed
from pkeutils.interfaces import DigitalSignature
from pkeutils.rand import RandState
from pkeutils.utils import bytes_to_integer
from pkeutils.utils import invert
from pkeutils.utils import lookup_level
from pkeutils.utils import secure_pow

logger = logging.getLogger(__name__)

DSA_LEVELS = {
    80: (1024, 160),
    112: (2048, 224),
    128: (2048, 256),
    192: (3072, 256),
    256: (3072, 256),
}

HASH_TLL = {
    "sha256": (hashlib.sha256, 256),
    "sha384": (hashlib.sha384, 384),
    "sha512": (hashlib.sha512, 512),
}

_SAMPLING_RETRIES = 1024


class DSADomainParameters(NamedTuple):
    """The shared (p, q, g) triple."""
    p: int
    q: int
    g: int


class DSAPublicKey(NamedTuple):
    """DSA Public Key.

    Attributes:
        p: The prime modulus.
        q: The prime order of the subgroup, dividing p - 1.
        g: Generator of the order q subgroup.
        y: The public value g^x mod p.
    """
    p: int
    q: int
    g: int
    y: int


class DSASecretKey(NamedTuple):
    """DSA Secret Key, carrying copies of the domain parameters.

    Attributes:
        x: The secret exponent, 0 < x < q.
        p: The prime modulus.
        q: The prime subgroup order.
        g: The subgroup generator.
    """
    x: int
    p: int
    q: int
    g: int

    def public_key(self) -> DSAPublicKey:
        """Derives the matching public key."""
        return DSAPublicKey(self.p, self.q, self.g, secure_pow(self.g, self.x, self.p))


class DSASignature(NamedTuple):
    """A DSA signature, not assumed valid until verified."""
    r: int
    s: int

    def encode(self) -> bytes:
        """DER encodes the signature as an RFC 3279 Dss-Sig-Value."""
        sig = rfc3279.Dss_Sig_Value()
        sig["r"] = self.r
        sig["s"] = self.s
        return encoder.encode(sig)

    @classmethod
    def decode(cls, data: bytes) -> "DSASignature":
        """Decodes a DER Dss-Sig-Value.

        Raises:
            MalformedSignature: If the data is no valid Dss-Sig-Value or carries trailing bytes.
        """
        try:
            sig, rest = decoder.decode(data, asn1Spec=rfc3279.Dss_Sig_Value())
            r, s = int(sig["r"]), int(sig["s"])
        except error.PyAsn1Error as exc:
            raise MalformedSignature("Signature is not a valid Dss-Sig-Value.") from exc
        if rest:
            raise MalformedSignature("Signature carries trailing data.")
        return cls(r, s)


def hash_message(message: bytes, q: int, hashf: str = "sha256") -> int:
    """Hashes the message into the range of q.

    Keeps the leftmost `min(N, outlen)` bits of the digest, N being the bit length of q, then reduces modulo q.

    Args:
        message: The message to hash.
        q: The subgroup order.
        hashf: Hash function (Implemented for sha256, sha384, sha512)

    Returns:
        The message representative.

    Raises:
        ValueError: If the hash function is not supported.
    """
    try:
        fun, outlen = HASH_TLL[hashf]
    except KeyError:
        raise ValueError(f"Unsupported hash function {hashf}, expected one of {sorted(HASH_TLL)}") from None
    z = bytes_to_integer(fun(message).digest())
    n = q.bit_length()
    if outlen > n:
        z >>= outlen - n
    return z % q


def generate_domain_params(l: int, n: int, rng: RandState) -> DSADomainParameters:
    """Generates DSA domain parameters.

    Searches an N-bit prime q first, then an L-bit prime p with q | p - 1 and finally a generator g of the order q
    subgroup.

    Args:
        l: Bit length of p.
        n: Bit length of q.
        rng: The generator to draw candidates from.

    Returns:
        The domain parameters.

    Raises:
        ParameterGenerationFailed: If any of the searches runs out of attempts.
    """
    q_cap = 5 * n
    for _ in range(q_cap):
        q = rng.bits(n) | (1 << (n - 1)) | 1
        if keygen.check_prime(q):
            break
    else:
        raise ParameterGenerationFailed(f"Failed to generate a {n} bit q within {q_cap} attempts.")

    p_cap = 4 * l
    for counter in range(p_cap):
        x = rng.bits(l) | (1 << (l - 1))
        p = x - (x % (2 * q)) + 1
        if p.bit_length() == l and keygen.check_prime(p):
            logger.debug("Found %d bit p after %d attempts", l, counter + 1)
            break
    else:
        raise ParameterGenerationFailed(f"Failed to generate suitable p parameter within {p_cap} attempts.")

    h_exp = (p - 1) // q
    for _ in range(_SAMPLING_RETRIES):
        h = 2 + rng.below(p - 3)
        g = pow(h, h_exp, p)
        if g > 1:
            return DSADomainParameters(p, q, g)
    raise ParameterGenerationFailed("Failed to find a generator. Check random number generator.")


class DSA(DigitalSignature[DSASecretKey, DSAPublicKey, DSASignature]):
    """DSA over freshly generated domain parameters."""
    NAME = "DSA"
    LEVELS = DSA_LEVELS

    @classmethod
    def params(cls, level: int) -> tuple[int, int]:
        """The (L, N) bit lengths for `level`.

        Raises:
            InvalidSecurityLevel: For unsupported levels.
        """
        return lookup_level(cls.LEVELS, level, cls.NAME)

    @classmethod
    def keygen(cls, level: int, rng: RandState) -> tuple[DSASecretKey, DSAPublicKey]:
        """Generates domain parameters and a key pair over them.

        Raises:
            InvalidSecurityLevel: For unsupported levels.
            ParameterGenerationFailed: If the domain parameters could not be generated.
        """
        l, n = cls.params(level)
        logger.debug("Generating new DSA domain parameters, L=%d N=%d", l, n)
        return cls.keygen_with_params(generate_domain_params(l, n, rng), rng)

    @classmethod
    def keygen_with_params(cls, params: DSADomainParameters, rng: RandState) -> tuple[DSASecretKey, DSAPublicKey]:
        """Generates a key pair over existing domain parameters."""
        p, q, g = params
        for _ in range(_SAMPLING_RETRIES):
            x = rng.below(q)
            if x > 1:
                break
        else:
            raise ParameterGenerationFailed("Failed to sample a secret exponent. Check random number generator.")
        sk = DSASecretKey(x, p, q, g)
        return sk, sk.public_key()

    @classmethod
    def sign(cls, sk: DSASecretKey, message: bytes, rng: RandState, hashf: str = "sha256") -> DSASignature:
        """Signs the message with a fresh nonce.

        Args:
            sk: The secret key.
            message: The message to sign.
            rng: The generator to draw the nonce from.
            hashf: Hash function (Implemented for sha256, sha384, sha512)

        Returns:
            The signature, both components in (0, q).

        Raises:
            ParameterGenerationFailed: If no valid nonce turned up within the attempt ceiling.
        """
        h = hash_message(message, sk.q, hashf)
        for attempt in range(_SAMPLING_RETRIES):
            k = rng.below(sk.q)
            if k == 0:
                continue
            r = secure_pow(sk.g, k, sk.p) % sk.q
            if r == 0:
                continue
            try:
                k_inv = invert(k, sk.q)
            except NoModularInverse:
                continue
            s = (k_inv * (h + sk.x * r)) % sk.q
            if s != 0:
                if attempt:
                    logger.debug("Signature found after %d nonce attempts", attempt + 1)
                return DSASignature(r, s)
        raise ParameterGenerationFailed("Failed to find a valid nonce. Check random number generator.")

    @classmethod
    def verify(cls, pk: DSAPublicKey, message: bytes, signature: DSASignature, hashf: str = "sha256") -> bool:
        """Verifies the signature of the message.

        Args:
            pk: The public key.
            message: The message to verify the signature against.
            signature: The signature to verify.
            hashf: Hash function (Implemented for sha256, sha384, sha512)

        Returns:
            True if the signature matches the message, False otherwise.

        Raises:
            ValueError: If the hash function is not supported.
        """
        r, s = signature
        if not (0 < r < pk.q and 0 < s < pk.q):
            return False
        h = hash_message(message, pk.q, hashf)
        try:
            w = invert(s, pk.q)
        except NoModularInverse:
            return False
        u1 = (h * w) % pk.q
        u2 = (r * w) % pk.q
        v = ((secure_pow(pk.g, u1, pk.p) * secure_pow(pk.y, u2, pk.p)) % pk.p) % pk.q
        return v == r
