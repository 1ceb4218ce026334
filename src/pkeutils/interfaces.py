"""Capability interfaces every scheme implements.

Schemes are stateless classes exposing classmethods, the state lives entirely in the key values and in the generator
passed to the operations that need randomness.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import abc
from typing import ClassVar, Generic, TypeVar

from pkeutils.rand import RandState
from pkeutils.utils import lookup_level

SK = TypeVar("SK")
PK = TypeVar("PK")
SIG = TypeVar("SIG")


class PublicKeyEncryption(abc.ABC, Generic[SK, PK]):
    """Public key encryption scheme.

    Attributes:
        NAME: Human readable scheme name.
        LEVELS: Security level to modulus bit length table.
    """
    NAME: ClassVar[str]
    LEVELS: ClassVar[dict[int, int]]

    @classmethod
    def mod_bits(cls, level: int) -> int:
        """Modulus bit length for `level`.

        Raises:
            InvalidSecurityLevel: If the level is not supported by the scheme.
        """
        return lookup_level(cls.LEVELS, level, cls.NAME)

    @classmethod
    @abc.abstractmethod
    def keygen(cls, level: int, rng: RandState) -> tuple[SK, PK]:
        """Generates a `(secret key, public key)` pair for the security level."""

    @classmethod
    @abc.abstractmethod
    def encrypt(cls, pk: PK, plaintext: bytes, rng: RandState | None = None) -> bytes:
        """Encrypts the big-endian plaintext.

        Randomized schemes narrow `rng` to a required argument.
        """

    @classmethod
    @abc.abstractmethod
    def decrypt(cls, pk: PK, sk: SK, ciphertext: bytes) -> bytes:
        """Decrypts the ciphertext back into big-endian plaintext."""


class DigitalSignature(abc.ABC, Generic[SK, PK, SIG]):
    """Digital signature scheme.

    Attributes:
        NAME: Human readable scheme name.
    """
    NAME: ClassVar[str]

    @classmethod
    @abc.abstractmethod
    def keygen(cls, level: int, rng: RandState) -> tuple[SK, PK]:
        """Generates a `(secret key, public key)` pair for the security level."""

    @classmethod
    @abc.abstractmethod
    def sign(cls, sk: SK, message: bytes, rng: RandState) -> SIG:
        """Signs the message."""

    @classmethod
    @abc.abstractmethod
    def verify(cls, pk: PK, message: bytes, signature: SIG) -> bool:
        """Checks the signature, a bad signature is reported as False and never raised."""
