"""Exceptions shared by every scheme in the library.

Each exception also derives from the builtin exception Python code would normally raise for the same problem, so
callers catching `ValueError` or `RuntimeError` keep working.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class PKEError(Exception):
    """Base exception for all pkeutils errors."""


class InvalidSecurityLevel(PKEError, ValueError):
    """The requested security level has no parameter set."""


class ParameterGenerationFailed(PKEError, RuntimeError):
    """A prime, domain-parameter or nonce search ran out of attempts."""


class MessageOutOfRange(PKEError, ValueError):
    """The message representative is outside of the scheme's message space."""


class CiphertextOutOfRange(PKEError, ValueError):
    """The ciphertext representative is outside of the scheme's ciphertext space."""


class PlaintextTooLong(PKEError, ValueError):
    """The plaintext does not fit into the padded block."""


class MalformedPadding(PKEError, RuntimeError):
    """Decrypted block does not carry valid PKCS#1 v1.5 padding."""


class MalformedCiphertext(PKEError, RuntimeError):
    """The ciphertext could not be decoded."""


class MalformedSignature(PKEError, RuntimeError):
    """The encoded signature could not be decoded."""


class NoModularInverse(PKEError, ValueError):
    """The value is not invertible modulo the given modulus."""


class SeedTooShort(PKEError, ValueError):
    """Less than a single byte of seed material was requested."""
