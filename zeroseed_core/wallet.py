"""
Deterministic key material for ZeroSeed.

Everything a candidate needs, from random entropy to a checksummed
address:
  - BIP-39 entropy generation and mnemonic encoding
  - BIP-39 mnemonic -> seed stretching
  - BIP-32 / BIP-44 hierarchical private-key derivation
  - Ethereum-style address derivation (Keccak-256 of the public key)
  - EIP-55 mixed-case checksum rendering
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from pathlib import Path

from zeroseed_core.crypto_utils import (
    CURVE_ORDER,
    hmac_sha512,
    keccak256,
    parse256,
    pbkdf2_hmac_sha512,
    random_bytes,
    scalar_to_public_key,
    ser256,
    ser32,
    sha256,
)

# Account 0, external chain, first address, Ethereum coin type.
DEFAULT_DERIVATION_PATH = "m/44'/60'/0'/0/0"
# Same layout with the Bitcoin coin type; some tools reuse it for EVM keys.
BITCOIN_COIN_PATH = "m/44'/0'/0'/0/0"

WORDLIST_SIZE = 2048
PBKDF2_ROUNDS = 2048


class WordlistError(RuntimeError):
    """The mnemonic dictionary is missing or malformed."""


class InvalidDerivationError(ValueError):
    """A child key fell outside [1, n) and must be discarded."""


# ===================================================================
#  BIP-39 Mnemonic Support
# ===================================================================

def generate_entropy(strength: int = 128) -> bytes:
    """Generate random entropy for mnemonic (128/160/192/224/256 bits)."""
    if strength not in (128, 160, 192, 224, 256):
        raise ValueError("Strength must be 128/160/192/224/256")
    return random_bytes(strength // 8)


def load_wordlist(path: str | None = None) -> list[str]:
    """
    Load the BIP-39 dictionary.

    With no *path* the English list shipped by the ``mnemonic``
    distribution is used; otherwise *path* is read as one word per line.
    Raises WordlistError unless the result is exactly 2048 distinct words.
    """
    if path is None:
        from mnemonic import Mnemonic
        words = list(Mnemonic("english").wordlist)
    else:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise WordlistError(f"Cannot read wordlist {path}: {exc}") from exc
        words = [line.strip() for line in text.splitlines() if line.strip()]

    if len(words) != WORDLIST_SIZE:
        raise WordlistError(
            f"Wordlist must contain {WORDLIST_SIZE} words, got {len(words)}"
        )
    if len(set(words)) != WORDLIST_SIZE:
        raise WordlistError("Wordlist contains duplicate words")
    return words


_WORDLIST: list[str] | None = None


def _get_wordlist() -> list[str]:
    global _WORDLIST
    if _WORDLIST is None:
        _WORDLIST = load_wordlist()
    return _WORDLIST


def entropy_to_mnemonic(entropy: bytes, wordlist: list[str] | None = None) -> str:
    """Convert entropy bytes to a BIP-39 mnemonic phrase."""
    if len(entropy) not in (16, 20, 24, 28, 32):
        raise ValueError("Entropy must be 16/20/24/28/32 bytes")
    if wordlist is None:
        wordlist = _get_wordlist()

    checksum_len = len(entropy) * 8 // 32
    checksum = sha256(entropy)[0] >> (8 - checksum_len)
    total_bits = len(entropy) * 8 + checksum_len
    # entropy || checksum as one big integer, MSB first
    stream = (parse256(entropy) << checksum_len) | checksum

    words = []
    for shift in range(total_bits - 11, -1, -11):
        words.append(wordlist[(stream >> shift) & 0x7FF])
    return " ".join(words)


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """Convert a mnemonic phrase to a 64-byte seed (BIP-39)."""
    password = unicodedata.normalize("NFKD", mnemonic).encode("utf-8")
    salt = unicodedata.normalize("NFKD", "mnemonic" + passphrase).encode("utf-8")
    return pbkdf2_hmac_sha512(password, salt, PBKDF2_ROUNDS, dklen=64)


def generate_mnemonic(strength: int = 128, wordlist: list[str] | None = None) -> str:
    """Generate a new BIP-39 mnemonic phrase."""
    return entropy_to_mnemonic(generate_entropy(strength), wordlist)


# ===================================================================
#  HD Key Derivation (BIP-32 / BIP-44)
# ===================================================================

@dataclass(frozen=True)
class DerivationPath:
    """An immutable sequence of ``(index, hardened)`` steps."""

    steps: tuple[tuple[int, bool], ...]

    @classmethod
    def parse(cls, path: str) -> DerivationPath:
        """
        Parse BIP-44 notation like "m/44'/60'/0'/0/0".

        ``'``, ``h`` and ``H`` all mark a hardened step.
        """
        path = path.strip()
        if path in ("m", ""):
            return cls(())
        if path.startswith("m/"):
            path = path[2:]

        steps = []
        for component in path.split("/"):
            hardened = component[-1:] in ("'", "h", "H")
            digits = component[:-1] if hardened else component
            if not digits.isdigit():
                raise ValueError(f"Invalid path component: {component!r}")
            index = int(digits)
            if index >= HDNode.HARDENED:
                raise ValueError(f"Path index out of range: {component!r}")
            steps.append((index, hardened))
        return cls(tuple(steps))

    def raw_indices(self) -> list[int]:
        """Indices with the hardened bit folded in, as fed to derive_child."""
        return [index | HDNode.HARDENED if hardened else index
                for index, hardened in self.steps]

    def __len__(self) -> int:
        return len(self.steps)

    def __str__(self) -> str:
        parts = [f"{index}'" if hardened else str(index)
                 for index, hardened in self.steps]
        return "/".join(["m", *parts])


class HDNode:
    """
    Hierarchical Deterministic key derivation node.

    Implements BIP-32 private-parent -> private-child derivation with
    HMAC-SHA512.  Only the private side is needed: the search never
    derives from an extended public key.
    """

    HARDENED = 0x80000000

    def __init__(self, private_key: bytes, chain_code: bytes, depth: int = 0,
                 index: int = 0):
        self.private_key = private_key
        self.chain_code = chain_code
        self.depth = depth
        self.index = index

    @classmethod
    def from_seed(cls, seed: bytes) -> HDNode:
        """Create master node from a BIP-39 seed."""
        I = hmac_sha512(b"Bitcoin seed", seed)
        scalar = parse256(I[:32])
        if scalar == 0 or scalar >= CURVE_ORDER:
            raise InvalidDerivationError("Master key out of range")
        return cls(private_key=I[:32], chain_code=I[32:])

    @property
    def scalar(self) -> int:
        return parse256(self.private_key)

    def derive_child(self, index: int) -> HDNode:
        """Derive a child node at the given raw index."""
        if index >= self.HARDENED:
            # Hardened: use private key
            data = b"\x00" + self.private_key + ser32(index)
        else:
            # Normal: use compressed public key
            data = self.public_key(compressed=True) + ser32(index)

        I = hmac_sha512(self.chain_code, data)
        tweak = parse256(I[:32])
        if tweak >= CURVE_ORDER:
            raise InvalidDerivationError(f"Il >= n at index {index}")
        child_scalar = (tweak + self.scalar) % CURVE_ORDER
        if child_scalar == 0:
            raise InvalidDerivationError(f"Zero child key at index {index}")

        return HDNode(
            private_key=ser256(child_scalar),
            chain_code=I[32:],
            depth=self.depth + 1,
            index=index,
        )

    def derive_path(self, path: DerivationPath | str) -> HDNode:
        """Walk every step of *path* from this node."""
        if isinstance(path, str):
            path = DerivationPath.parse(path)
        node = self
        for index in path.raw_indices():
            node = node.derive_child(index)
        return node

    def public_key(self, compressed: bool = False) -> bytes:
        return scalar_to_public_key(self.scalar, compressed=compressed)


def derive_private_scalar(seed: bytes, path: DerivationPath | str) -> int:
    """Master key from *seed*, then every step of *path*; returns the last scalar."""
    return HDNode.from_seed(seed).derive_path(path).scalar


# ===================================================================
#  Addresses
# ===================================================================

def public_key_to_address(public_key: bytes) -> bytes:
    """Last 20 bytes of Keccak-256 over the 64-byte ``X || Y`` point."""
    if len(public_key) == 65 and public_key[0] == 4:
        public_key = public_key[1:]
    if len(public_key) != 64:
        raise ValueError("Expected an uncompressed secp256k1 public key")
    return keccak256(public_key)[-20:]


def private_key_to_address(scalar: int) -> bytes:
    return public_key_to_address(scalar_to_public_key(scalar, compressed=False))


def to_checksum_address(address: bytes | str) -> str:
    """
    EIP-55 mixed-case rendering of a 20-byte address, without ``0x``.

    A letter is upper-cased when the matching nibble of
    ``keccak256(lowercase_hex)`` is >= 8.
    """
    if isinstance(address, bytes):
        if len(address) != 20:
            raise ValueError("Address must be 20 bytes")
        lower = address.hex()
    else:
        lower = address.lower()
        if lower.startswith("0x"):
            lower = lower[2:]
        if len(lower) != 40 or any(c not in "0123456789abcdef" for c in lower):
            raise ValueError(f"Not a 40-digit hex address: {address!r}")

    digest = keccak256(lower.encode("ascii")).hex()
    return "".join(
        c.upper() if c in "abcdef" and int(digest[i], 16) >= 8 else c
        for i, c in enumerate(lower)
    )


def mnemonic_to_address(mnemonic: str, path: DerivationPath | str = DEFAULT_DERIVATION_PATH,
                        passphrase: str = "") -> bytes:
    """Full pipeline from phrase to raw 20-byte address."""
    seed = mnemonic_to_seed(mnemonic, passphrase)
    return private_key_to_address(derive_private_scalar(seed, path))
