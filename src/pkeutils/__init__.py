"""Classical Public-Key Cryptography Utilities in an Academic Sense.

Provides RSA (raw and PKCS#1 v1.5 padded), ElGamal and Paillier encryption, as well as DSA signatures. Every scheme
generates its keys from a named security level and draws its randomness from an explicit generator state.

Typical usage example:

    rng = new_rand_state()
    sk, pk = RSAPKCS1v15.keygen(112, rng)
    c = RSAPKCS1v15.encrypt(pk, b"Hi there!", rng)
    r = RSAPKCS1v15.decrypt(pk, sk, c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from pkeutils.dsa import DSA
from pkeutils.dsa import DSADomainParameters
from pkeutils.dsa import DSAPublicKey
from pkeutils.dsa import DSASecretKey
from pkeutils.dsa import DSASignature
from pkeutils.elgamal import ElGamal
from pkeutils.elgamal import ElGamalPublicKey
from pkeutils.elgamal import ElGamalSecretKey
from pkeutils.errors import CiphertextOutOfRange
from pkeutils.errors import InvalidSecurityLevel
from pkeutils.errors import MalformedCiphertext
from pkeutils.errors import MalformedPadding
from pkeutils.errors import MalformedSignature
from pkeutils.errors import MessageOutOfRange
from pkeutils.errors import NoModularInverse
from pkeutils.errors import ParameterGenerationFailed
from pkeutils.errors import PKEError
from pkeutils.errors import PlaintextTooLong
from pkeutils.errors import SeedTooShort
from pkeutils.interfaces import DigitalSignature
from pkeutils.interfaces import PublicKeyEncryption
from pkeutils.keygen import check_prime
from pkeutils.keygen import generate_primes
from pkeutils.keygen import generate_probable_prime
from pkeutils.paillier import Paillier
from pkeutils.paillier import PaillierPublicKey
from pkeutils.paillier import PaillierSecretKey
from pkeutils.pkcs1 import RSAPKCS1v15
from pkeutils.rand import new_rand_state
from pkeutils.rand import RandState
from pkeutils.rand import randseed_os_rng
from pkeutils.rand import SystemRandState
from pkeutils.rsa import RSA
from pkeutils.rsa import RSAPublicKey
from pkeutils.rsa import RSASecretKey

__version__ = "0.1.0"
__all__ = [
    "RSA",
    "RSAPublicKey",
    "RSASecretKey",
    "RSAPKCS1v15",
    "ElGamal",
    "ElGamalPublicKey",
    "ElGamalSecretKey",
    "Paillier",
    "PaillierPublicKey",
    "PaillierSecretKey",
    "DSA",
    "DSADomainParameters",
    "DSAPublicKey",
    "DSASecretKey",
    "DSASignature",
    "PublicKeyEncryption",
    "DigitalSignature",
    "RandState",
    "SystemRandState",
    "new_rand_state",
    "randseed_os_rng",
    "check_prime",
    "generate_primes",
    "generate_probable_prime",
    "PKEError",
    "InvalidSecurityLevel",
    "ParameterGenerationFailed",
    "MessageOutOfRange",
    "CiphertextOutOfRange",
    "PlaintextTooLong",
    "MalformedPadding",
    "MalformedCiphertext",
    "MalformedSignature",
    "NoModularInverse",
    "SeedTooShort",
]
