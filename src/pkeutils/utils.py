"""Arithmetic and marshalling helpers shared between the schemes.

Integers travel as big-endian unsigned octet strings. Every exponentiation involving secret material goes through
`secure_pow`, which relies on GMP's side-channel resistant `powmod_sec`.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from collections.abc import Mapping
from typing import TypeVar

import gmpy2

from pkeutils.errors import InvalidSecurityLevel
from pkeutils.errors import NoModularInverse

T = TypeVar("T")


def bytes_to_integer(msg: bytes) -> int:
    """Converts a byte string to an integer in accordance to preset procedures.

    Args:
        msg: The bytes (AKA Octet String) to convert.

    Returns:
        The representative integer.
    """
    return int.from_bytes(msg, byteorder="big", signed=False)


def integer_to_bytes(msg: int, fixedlen: int | None = None) -> bytes:
    """Converts an integer to a byte string.

    Args:
        msg: The integer to unmarshal. Must be non-negative.
        fixedlen: The target length of the byte string. Defaults to the shortest representation, where zero
            becomes the empty string.

    Returns:
        The representative bytes. (AKA Octet String)
    """
    if fixedlen is None:
        fixedlen = byte_length(msg)
    return msg.to_bytes(fixedlen, byteorder="big", signed=False)


def byte_length(value: int) -> int:
    """Amount of bytes needed to hold `value`."""
    return (value.bit_length() + 7) // 8


def secure_pow(base: int, expo: int, mod: int) -> int:
    """Constant-time modular exponentiation.

    Args:
        base: The base, reduced modulo `mod` first.
        expo: The exponent. Must be non-negative.
        mod: The modulus. Must be odd and greater than one.

    Returns:
        `base**expo % mod`

    Raises:
        ValueError: If the exponent is negative or the modulus even.
    """
    if expo < 0:
        raise ValueError("Exponent must be non-negative")
    if mod < 3 or mod % 2 == 0:
        raise ValueError("Modulus must be odd and greater than one")
    if expo == 0:
        return 1
    return int(gmpy2.powmod_sec(base % mod, expo, mod))


def invert(value: int, mod: int) -> int:
    """Modular inverse of `value`.

    Raises:
        NoModularInverse: If `value` shares a factor with `mod`.
    """
    try:
        return pow(value, -1, mod)
    except ValueError as exc:
        raise NoModularInverse(f"Value is not invertible modulo a {mod.bit_length()} bit modulus") from exc


def lookup_level(table: Mapping[int, T], level: int, scheme: str) -> T:
    """Resolves a security level against the scheme's parameter table.

    Raises:
        InvalidSecurityLevel: If the level is not part of the table.
    """
    try:
        return table[level]
    except KeyError:
        raise InvalidSecurityLevel(
            f"Invalid security level {level} for {scheme}, expected one of {sorted(table)}") from None
