# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import math

from cryptography.hazmat.primitives.asymmetric import rsa
import pytest
import sympy

from pkeutils.errors import CiphertextOutOfRange
from pkeutils.errors import InvalidSecurityLevel
from pkeutils.errors import MessageOutOfRange
from pkeutils.errors import ParameterGenerationFailed
from pkeutils.paillier import Paillier
from pkeutils.paillier import PaillierPublicKey
from pkeutils.paillier import PaillierSecretKey

test_levels = [
    80,
    pytest.param(112, marks=pytest.mark.slow),
    pytest.param(128, marks=pytest.mark.slow),
    pytest.param(192, marks=pytest.mark.extreme),
    pytest.param(256, marks=pytest.mark.extreme),
]


@pytest.fixture(scope="module")
def keypair(module_rng) -> tuple[PaillierSecretKey, PaillierPublicKey]:
    return Paillier.keygen(80, module_rng)


def assert_key_invariants(sk: PaillierSecretKey, pk: PaillierPublicKey, mod_bits: int) -> None:
    assert pk.n.bit_length() == mod_bits
    assert pk.n_square == pk.n * pk.n
    assert pk.g == pk.n + 1
    assert math.gcd(pk.n, sk.lam) == 1
    assert (sk.lam * sk.mu) % pk.n == 1


@pytest.mark.parametrize("level", test_levels)
def test_keygen(level, rng):
    sk, pk = Paillier.keygen(level, rng)
    assert_key_invariants(sk, pk, Paillier.LEVELS[level])


def test_keygen_factors(keypair):
    sk, pk = keypair
    assert_key_invariants(sk, pk, 1024)
    assert not sympy.isprime(pk.n)
    assert pk.mod_bytes == 128


def test_keygen_functional(mocker, rng):
    privs = rsa.generate_private_key(public_exponent=65537, key_size=2048).private_numbers()
    mocker.patch("pkeutils.keygen.generate_primes", return_value=(privs.p, privs.q))
    sk, pk = Paillier.keygen(112, rng)
    assert pk.n == privs.p * privs.q
    assert sk.lam == (privs.p - 1) * (privs.q - 1)
    assert sk.mu == pow(sk.lam, -1, pk.n)


def test_keygen_gcd_failure(mocker, rng):
    # n = 3 * 7 shares the factor 3 with lambda = 2 * 6.
    mocker.patch("pkeutils.keygen.generate_primes", return_value=(3, 7))
    with pytest.raises(ParameterGenerationFailed):
        Paillier.keygen(80, rng)


@pytest.mark.parametrize("level", [0, 64, 100, 129, 512])
def test_keygen_invalid_level(level, rng):
    with pytest.raises(InvalidSecurityLevel):
        Paillier.keygen(level, rng)


@pytest.mark.parametrize("payload", [b"\x05", b"test1", b"test2", b"The quick brown fox jumps over the lazy dog"])
def test_encrypt_decrypt(keypair, rng, payload):
    sk, pk = keypair
    ciphertext = Paillier.encrypt(pk, payload, rng)
    assert len(ciphertext) == 256
    assert Paillier.decrypt(pk, sk, ciphertext) == payload


def test_encrypt_decrypt_bounds(keypair, rng):
    sk, pk = keypair
    top = (pk.n - 1).to_bytes(pk.mod_bytes, "big")
    assert Paillier.decrypt(pk, sk, Paillier.encrypt(pk, top, rng)) == top
    assert Paillier.decrypt(pk, sk, Paillier.encrypt(pk, b"", rng)) == b""


def test_encrypt_non_deterministic(keypair, rng):
    sk, pk = keypair
    c1 = Paillier.encrypt(pk, b"Quick!", rng)
    c2 = Paillier.encrypt(pk, b"Quick!", rng)
    assert c1 != c2
    assert Paillier.decrypt(pk, sk, c1) == Paillier.decrypt(pk, sk, c2) == b"Quick!"


@pytest.mark.parametrize("offset", [0, 1, 2**64])
def test_encrypt_out_of_range(keypair, rng, offset):
    _, pk = keypair
    with pytest.raises(MessageOutOfRange):
        Paillier.encrypt(pk, (pk.n + offset).to_bytes(pk.mod_bytes + 8, "big"), rng)


def test_encrypt_requires_rng(keypair):
    _, pk = keypair
    with pytest.raises(TypeError):
        Paillier.encrypt(pk, b"Quick!")  # pylint: disable=no-value-for-parameter
    with pytest.raises(ValueError, match="requires a random number generator"):
        Paillier.encrypt(pk, b"Quick!", None)


@pytest.mark.parametrize("m1, m2", [(5, 10), (0, 42), (2**512, 2**512 + 7)])
def test_homomorphic_addition(keypair, rng, m1, m2):
    sk, pk = keypair
    c1 = int.from_bytes(Paillier.encrypt(pk, m1.to_bytes(65, "big"), rng), "big")
    c2 = int.from_bytes(Paillier.encrypt(pk, m2.to_bytes(65, "big"), rng), "big")
    c = (c1 * c2) % pk.n_square
    r = Paillier.decrypt(pk, sk, c.to_bytes(256, "big"))
    assert int.from_bytes(r, "big") == (m1 + m2) % pk.n


def test_homomorphic_wraps(keypair, rng):
    sk, pk = keypair
    c1 = int.from_bytes(Paillier.encrypt(pk, (pk.n - 1).to_bytes(pk.mod_bytes, "big"), rng), "big")
    c2 = int.from_bytes(Paillier.encrypt(pk, b"\x03", rng), "big")
    r = Paillier.decrypt(pk, sk, ((c1 * c2) % pk.n_square).to_bytes(256, "big"))
    assert r == b"\x02"


def test_encrypt_blinding(mocker, keypair, rng):
    sk, pk = keypair
    r = (1 << (pk.n.bit_length() - 1)) | 12345
    mocker.patch.object(rng, "bits", side_effect=[0, pk.n, r])
    c = int.from_bytes(Paillier.encrypt(pk, b"\x2a", rng), "big")
    assert c == (pow(pk.g, 42, pk.n_square) * pow(r, pk.n, pk.n_square)) % pk.n_square
    assert Paillier.decrypt(pk, sk, c.to_bytes(256, "big")) == b"\x2a"


def test_encrypt_blinding_exhausted(mocker, keypair, rng):
    _, pk = keypair
    mocker.patch.object(rng, "bits", return_value=0)
    with pytest.raises(ParameterGenerationFailed):
        Paillier.encrypt(pk, b"Quick!", rng)


def test_decrypt_out_of_range(keypair):
    sk, pk = keypair
    with pytest.raises(CiphertextOutOfRange):
        Paillier.decrypt(pk, sk, b"")
    with pytest.raises(CiphertextOutOfRange):
        Paillier.decrypt(pk, sk, b"\x00" * 256)
    with pytest.raises(CiphertextOutOfRange):
        Paillier.decrypt(pk, sk, (pk.n_square + 1).to_bytes(257, "big"))


def test_decrypt_upper_bound_inclusive(keypair):
    sk, pk = keypair
    r = Paillier.decrypt(pk, sk, pk.n_square.to_bytes(256, "big"))
    assert int.from_bytes(r, "big") == (-sk.mu) % pk.n
