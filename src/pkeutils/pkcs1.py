"""RSA encryption with PKCS#1 v1.5 (RSAES-PKCS1-v1_5) padding.

A thin layer over `pkeutils.rsa.RSA`, the keys are plain RSA keys.

Typical usage example:

    sk, pk = RSAPKCS1v15.keygen(80, rng)
    c = RSAPKCS1v15.encrypt(pk, b"Hi there!", rng)
    r = RSAPKCS1v15.decrypt(pk, sk, c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging

from pkeutils.errors import MalformedPadding
from pkeutils.errors import ParameterGenerationFailed
from pkeutils.errors import PlaintextTooLong
from pkeutils.interfaces import PublicKeyEncryption
from pkeutils.rand import RandState
from pkeutils.rsa import RSA
from pkeutils.rsa import RSA_LEVELS
from pkeutils.rsa import RSAPublicKey
from pkeutils.rsa import RSASecretKey

logger = logging.getLogger(__name__)

MIN_PADDING = 8
FRAMING = 3
_NONZERO_RETRIES = 64


def _nonzero_byte(rng: RandState) -> int:
    for attempt in range(_NONZERO_RETRIES):
        x = rng.bits(8)
        if x:
            if attempt:
                logger.debug("Resampled padding byte %d times", attempt)
            return x
    raise ParameterGenerationFailed("Generator keeps returning zero bytes. Check random number generator.")


def pkcs1_pad(mod_bytes: int, plaintext: bytes, rng: RandState) -> bytes:
    """Pads the plaintext to an encryption block of exactly `mod_bytes` bytes.

    The block is `00 02 || PS || 00 || M` with PS made of random non-zero bytes.

    Args:
        mod_bytes: Length of the RSA modulus in bytes.
        plaintext: The message to pad.
        rng: The generator to draw the padding string from.

    Returns:
        The padded block.

    Raises:
        PlaintextTooLong: If less than 8 bytes of padding would fit.
    """
    if len(plaintext) + FRAMING + MIN_PADDING > mod_bytes:
        raise PlaintextTooLong(
            f"Plaintext of {len(plaintext)} bytes too long for a {mod_bytes} byte modulus, "
            f"at most {mod_bytes - FRAMING - MIN_PADDING} bytes fit")
    ps = bytes(_nonzero_byte(rng) for _ in range(mod_bytes - len(plaintext) - FRAMING))
    return b"\x00\x02" + ps + b"\x00" + plaintext


def pkcs1_unpad(mod_bytes: int, block: bytes) -> bytes:
    """Strips PKCS#1 v1.5 encryption padding.

    Leading zero bytes dropped by the integer conversion of the RSA transform are restored first.

    Args:
        mod_bytes: Length of the RSA modulus in bytes.
        block: The decrypted block.

    Returns:
        The message behind the separator.

    Raises:
        MalformedPadding: If the block does not carry valid padding.
    """
    if len(block) > mod_bytes:
        raise MalformedPadding("Decryption error.")
    em = block.rjust(mod_bytes, b"\x00")
    if em[0:2] != b"\x00\x02":
        raise MalformedPadding("Decryption error.")
    sep = em.find(b"\x00", 2)
    if sep == -1 or sep - 2 < MIN_PADDING:
        raise MalformedPadding("Decryption error.")
    return em[sep + 1:]


class RSAPKCS1v15(PublicKeyEncryption[RSASecretKey, RSAPublicKey]):
    """RSA with randomized PKCS#1 v1.5 padding."""
    NAME = "RSA-PKCS1v15"
    LEVELS = RSA_LEVELS

    @classmethod
    def keygen(cls, level: int, rng: RandState) -> tuple[RSASecretKey, RSAPublicKey]:
        cls.mod_bits(level)
        return RSA.keygen(level, rng)

    @classmethod
    def encrypt(cls, pk: RSAPublicKey, plaintext: bytes, rng: RandState) -> bytes:
        """Pads and encrypts the plaintext.

        Raises:
            PlaintextTooLong: If the plaintext leaves less than 8 bytes of padding.
            ValueError: If `rng` is None.
        """
        if rng is None:
            raise ValueError("PKCS#1 v1.5 padding requires a random number generator")
        return RSA.encrypt(pk, pkcs1_pad(pk.mod_bytes, plaintext, rng))

    @classmethod
    def decrypt(cls, pk: RSAPublicKey, sk: RSASecretKey, ciphertext: bytes) -> bytes:
        """Decrypts and unpads the ciphertext.

        Raises:
            MalformedPadding: If the decrypted block is not validly padded.
        """
        return pkcs1_unpad(pk.mod_bytes, RSA.decrypt(pk, sk, ciphertext))
