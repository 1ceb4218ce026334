# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import math

from cryptography.hazmat.primitives.asymmetric import rsa
import pytest
import sympy

from pkeutils.errors import InvalidSecurityLevel
from pkeutils.errors import MessageOutOfRange
from pkeutils.errors import NoModularInverse
from pkeutils.rsa import DEFAULT_E
from pkeutils.rsa import RSA
from pkeutils.rsa import RSAPublicKey
from pkeutils.rsa import RSASecretKey

standard_payload = "The quick brown fox jumps over the lazy dog1234567890!@#$%^&*()-_=+[{}];:\\|<>,./?~`'\""

test_levels = [
    80,
    pytest.param(112, marks=pytest.mark.slow),
    pytest.param(128, marks=pytest.mark.slow),
    pytest.param(192, marks=pytest.mark.extreme),
    pytest.param(256, marks=pytest.mark.extreme),
]


@pytest.fixture(scope="module")
def keypair(module_rng) -> tuple[RSASecretKey, RSAPublicKey]:
    return RSA.keygen(80, module_rng)


@pytest.fixture(scope="module")
def crypto_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=DEFAULT_E, key_size=2048)


def localize_keys(pk: rsa.RSAPrivateKey) -> tuple[RSASecretKey, RSAPublicKey]:
    privs = pk.private_numbers()
    pubs = pk.public_key().public_numbers()
    return RSASecretKey(privs.p, privs.q, privs.dmp1, privs.dmq1, privs.iqmp), RSAPublicKey(pubs.n, pubs.e)


def assert_key_invariants(sk: RSASecretKey, pk: RSAPublicKey, mod_bits: int) -> None:
    """Multi-use invariant assertion suite."""
    assert pk.e == DEFAULT_E
    assert pk.n == sk.p * sk.q == sk.n
    assert pk.n.bit_length() == mod_bits
    assert sk.p.bit_length() == sk.q.bit_length() == mod_bits // 2
    assert sk.p != sk.q
    assert math.gcd(pk.e, (sk.p - 1) * (sk.q - 1)) == 1
    d = pow(pk.e, -1, (sk.p - 1) * (sk.q - 1))
    assert sk.d_p == d % (sk.p - 1)
    assert sk.d_q == d % (sk.q - 1)
    assert (sk.q * sk.q_inv) % sk.p == 1


@pytest.mark.parametrize("level", test_levels)
def test_keygen(level, rng):
    sk, pk = RSA.keygen(level, rng)
    assert_key_invariants(sk, pk, RSA.LEVELS[level])


def test_keygen_primes(keypair):
    sk, pk = keypair
    assert sympy.isprime(sk.p)
    assert sympy.isprime(sk.q)
    assert pk.mod_bytes == 128


def test_keygen_matches_cryptography(keypair):
    sk, pk = keypair
    d = rsa.rsa_recover_private_exponent(pk.e, sk.p, sk.q)
    assert sk.d_p == rsa.rsa_crt_dmp1(d, sk.p)
    assert sk.d_q == rsa.rsa_crt_dmq1(d, sk.q)
    assert sk.q_inv == rsa.rsa_crt_iqmp(sk.p, sk.q)
    numbers = rsa.RSAPrivateNumbers(sk.p, sk.q, d, sk.d_p, sk.d_q, sk.q_inv, rsa.RSAPublicNumbers(pk.e, pk.n))
    assert numbers.private_key().key_size == 1024


def test_keygen_functional(mocker, crypto_key, rng):
    privs = crypto_key.private_numbers()
    mocker.patch("pkeutils.keygen.generate_primes", return_value=(privs.p, privs.q))
    sk, pk = RSA.keygen(112, rng)
    assert (sk, pk) == localize_keys(crypto_key)


@pytest.mark.parametrize("level", [0, 64, 100, 129, 512])
def test_keygen_invalid_level(level, rng):
    with pytest.raises(InvalidSecurityLevel):
        RSA.keygen(level, rng)


def test_from_primes_not_invertible():
    # 65537 * 2 + 1 = 131075 is not prime, but (p - 1) divisible by e suffices.
    with pytest.raises(NoModularInverse):
        RSASecretKey.from_primes(131075, 7)


@pytest.mark.parametrize("payload", [b"test1", b"test2", b"test3", b"\x02", standard_payload.encode("utf-8")])
def test_encrypt_decrypt(keypair, payload):
    sk, pk = keypair
    ciphertext = RSA.encrypt(pk, payload)
    assert len(ciphertext) == pk.mod_bytes
    assert RSA.decrypt(pk, sk, ciphertext) == payload


def test_encrypt_deterministic(keypair):
    _, pk = keypair
    assert RSA.encrypt(pk, b"Quick!") == RSA.encrypt(pk, b"Quick!")


def test_encrypt_textbook(keypair):
    _, pk = keypair
    m = 17092025232642
    c = RSA.encrypt(pk, m.to_bytes(7, "big"))
    assert int.from_bytes(c, "big") == pow(m, pk.e, pk.n)


def test_decrypt_drops_leading_zeros(keypair):
    sk, pk = keypair
    assert RSA.decrypt(pk, sk, RSA.encrypt(pk, b"\x00\x00Quick!")) == b"Quick!"


def test_decrypt_known_key(crypto_key):
    sk, pk = localize_keys(crypto_key)
    payload = standard_payload.encode("utf-8")
    c = pow(int.from_bytes(payload, "big"), pk.e, pk.n)
    assert RSA.decrypt(pk, sk, c.to_bytes(pk.mod_bytes, "big")) == payload


@pytest.mark.parametrize("offset", [0, 1, 2**64])
def test_encrypt_out_of_range(keypair, offset):
    _, pk = keypair
    with pytest.raises(MessageOutOfRange):
        RSA.encrypt(pk, (pk.n + offset).to_bytes(pk.mod_bytes + 8, "big"))


@pytest.mark.parametrize("payload", [b"", b"\x00", b"\x01", b"\x00\x00\x01"])
def test_encrypt_too_small(keypair, payload):
    _, pk = keypair
    with pytest.raises(ValueError):
        RSA.encrypt(pk, payload)


def test_c_rsa_bounds(keypair):
    _, pk = keypair
    assert pk.c_rsa(pk.n - 1) == pk.n - 1
    with pytest.raises(MessageOutOfRange):
        pk.c_rsa(pk.n)
    with pytest.raises(MessageOutOfRange):
        pk.c_rsa(-2)


def test_decrypt_no_upper_bound(keypair):
    sk, pk = keypair
    c = int.from_bytes(RSA.encrypt(pk, b"Quick!"), "big")
    assert RSA.decrypt(pk, sk, (c + pk.n).to_bytes(pk.mod_bytes + 1, "big")) == b"Quick!"
