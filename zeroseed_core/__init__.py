"""
ZeroSeed - brute-force search for vanity addresses behind BIP-39 phrases.

Key features:
- BIP-39 mnemonic generation and seed stretching
- BIP-32 / BIP-44 private key derivation on secp256k1
- Keccak-256 addresses with EIP-55 checksum casing
- Pluggable scoring rules (leading zeros, uniform runs, ...)
- One worker process per CPU with a shared best-score threshold
"""

__version__ = "1.0.0"
__all__ = [
    "crypto_utils",
    "wallet",
    "scoring",
    "search",
    "reporting",
    "config",
    "logging_config",
]
