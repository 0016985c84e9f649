#!/usr/bin/env python3
"""Signing key loading and address derivation.

The key file holds a hex-encoded 32-byte secp256k1 private key. Surrounding
whitespace and a leading `0x` are ignored.
"""

import logging
from pathlib import Path

from cosmpy.crypto.address import Address
from cosmpy.crypto.keypairs import PrivateKey, PublicKey

from .errors import KeyLoadError
from .models import ValidatorIdentity

logger = logging.getLogger(__name__)

PRIVATE_KEY_LENGTH = 32

# Order of the secp256k1 group; valid private keys lie in [1, n - 1]
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def decode_private_key(key_text: str) -> bytes:
    """Decode a hex-encoded secp256k1 private key.

    Args:
        key_text: Hex string, optionally prefixed with 0x

    Returns:
        The 32 raw private key bytes

    Raises:
        KeyLoadError: If the text is not a valid secp256k1 private key
    """
    key_hex = key_text.strip()
    if key_hex[:2].lower() == "0x":
        key_hex = key_hex[2:]

    if not key_hex:
        raise KeyLoadError("Private key is empty")

    try:
        key_bytes = bytes.fromhex(key_hex)
    except ValueError:
        raise KeyLoadError("Failed to decode private key: not valid hex") from None

    if len(key_bytes) != PRIVATE_KEY_LENGTH:
        raise KeyLoadError(
            f"Invalid private key length. Expected {PRIVATE_KEY_LENGTH} bytes, got {len(key_bytes)}"
        )

    if not 0 < int.from_bytes(key_bytes, "big") < SECP256K1_ORDER:
        raise KeyLoadError("Private key is out of range for secp256k1")

    return key_bytes


def load_signing_key(path: str | Path) -> PrivateKey:
    """Read the signing key file and build a secp256k1 private key.

    Args:
        path: Filesystem path of the key file

    Returns:
        The loaded private key

    Raises:
        KeyLoadError: If the file is unreadable or holds an invalid key
    """
    key_path = Path(path)
    try:
        key_text = key_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise KeyLoadError(f"Failed to read private key from {key_path}: {e}") from e

    key_bytes = decode_private_key(key_text)
    logger.debug(f"Loaded signing key from {key_path}")
    return PrivateKey(key_bytes)


def derive_identity(private_key: PrivateKey, account_prefix: str) -> ValidatorIdentity:
    """Derive the public key and both bech32 addresses of a signing key.

    The account and operator addresses share the same 20-byte hash and only
    differ in their human-readable prefix.

    Args:
        private_key: Validator signing key
        account_prefix: Bech32 account prefix (e.g. "somm")

    Returns:
        ValidatorIdentity with the compressed public key and both addresses
    """
    public_key: PublicKey = private_key.public_key

    return ValidatorIdentity(
        public_key=public_key.public_key_bytes,
        account_address=str(Address(public_key, prefix=account_prefix)),
        operator_address=str(Address(public_key, prefix=f"{account_prefix}valoper"))
    )
