"""
Cryptographic primitives and byte helpers for ZeroSeed.

Thin wrappers over the trusted libraries so the derivation code reads in
terms of the BIP-32 notation (``ser32``, ``ser256``, ``parse256``):

  - SHA-256 / SHA-512 / HMAC-SHA512 / PBKDF2-HMAC-SHA512  (hashlib, hmac)
  - Keccak-256, the pre-standard SHA-3 used for addresses  (pycryptodome)
  - secp256k1 scalar multiplication and point encoding    (ecdsa)

All integer <-> byte conversions are big-endian.
"""

from __future__ import annotations

import hashlib
import hmac
import os
import struct

from Crypto.Hash import keccak
from ecdsa import SECP256k1

# secp256k1 group order; private scalars live in [1, CURVE_ORDER).
CURVE_ORDER: int = SECP256k1.order

_GENERATOR = SECP256k1.generator


# ===================================================================
#  Randomness
# ===================================================================

def random_bytes(n: int) -> bytes:
    """Return *n* bytes from the operating system CSPRNG."""
    return os.urandom(n)


# ===================================================================
#  Hashes
# ===================================================================

def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def hmac_sha512(key: bytes, msg: bytes) -> bytes:
    return hmac.new(key, msg, hashlib.sha512).digest()


def pbkdf2_hmac_sha512(password: bytes, salt: bytes, iterations: int,
                       dklen: int = 64) -> bytes:
    return hashlib.pbkdf2_hmac("sha512", password, salt, iterations, dklen=dklen)


def keccak256(data: bytes) -> bytes:
    """Keccak-256 (original padding, not FIPS-202 SHA3-256)."""
    return keccak.new(digest_bits=256, data=data).digest()


# ===================================================================
#  Integer / byte conversions
# ===================================================================

def parse256(data: bytes) -> int:
    """Interpret a byte sequence as a big-endian unsigned integer."""
    return int.from_bytes(data, "big")


def ser256(value: int) -> bytes:
    """Serialize an integer as 32 big-endian bytes."""
    return value.to_bytes(32, "big")


def ser32(value: int) -> bytes:
    """Serialize a 32-bit unsigned integer as 4 big-endian bytes."""
    return struct.pack(">I", value)


# ===================================================================
#  secp256k1
# ===================================================================

def scalar_to_public_key(scalar: int, compressed: bool = False) -> bytes:
    """
    Multiply the generator by *scalar* and encode the resulting point.

    Compressed form is ``0x02|0x03 || X`` (33 bytes); uncompressed is
    ``0x04 || X || Y`` (65 bytes).
    """
    if not 0 < scalar < CURVE_ORDER:
        raise ValueError("Private scalar out of range for secp256k1")
    point = _GENERATOR * scalar
    x = ser256(int(point.x()))
    if compressed:
        prefix = b"\x02" if int(point.y()) % 2 == 0 else b"\x03"
        return prefix + x
    return b"\x04" + x + ser256(int(point.y()))
