#!/usr/bin/env python3
"""Tests for signing key loading and address derivation."""

import pytest
from cosmpy.crypto.keypairs import PrivateKey

from withdraw_commission.errors import KeyLoadError
from withdraw_commission.keys import (
    SECP256K1_ORDER,
    decode_private_key,
    derive_identity,
    load_signing_key,
)

TEST_KEY_HEX = "1" * 64


@pytest.fixture
def key_file(tmp_path):
    """Write a valid hex key (with trailing newline) to a temporary file."""
    path = tmp_path / "validator.hex"
    path.write_text(TEST_KEY_HEX + "\n")
    return path


class TestDecodePrivateKey:
    """Tests for decode_private_key."""

    def test_plain_hex(self):
        assert decode_private_key(TEST_KEY_HEX) == bytes.fromhex(TEST_KEY_HEX)

    def test_prefixed_hex_with_whitespace(self):
        """Test that 0x prefixes and surrounding whitespace are ignored."""
        assert decode_private_key(f"  0x{TEST_KEY_HEX}\n") == bytes.fromhex(TEST_KEY_HEX)

    def test_empty(self):
        with pytest.raises(KeyLoadError, match="empty"):
            decode_private_key("\n")

    def test_not_hex(self):
        with pytest.raises(KeyLoadError, match="not valid hex"):
            decode_private_key("g" * 64)

    def test_wrong_length(self):
        with pytest.raises(KeyLoadError, match="Invalid private key length"):
            decode_private_key("ab" * 31)

    def test_zero_key(self):
        with pytest.raises(KeyLoadError, match="out of range"):
            decode_private_key("0" * 64)

    def test_key_above_curve_order(self):
        with pytest.raises(KeyLoadError, match="out of range"):
            decode_private_key(f"{SECP256K1_ORDER:064x}")


class TestLoadSigningKey:
    """Tests for load_signing_key."""

    def test_load_valid_key(self, key_file):
        key = load_signing_key(key_file)

        assert isinstance(key, PrivateKey)
        assert key.private_key_bytes == bytes.fromhex(TEST_KEY_HEX)

    def test_accepts_string_path(self, key_file):
        key = load_signing_key(str(key_file))
        assert key.private_key_bytes == bytes.fromhex(TEST_KEY_HEX)

    def test_missing_file(self, tmp_path):
        """Test that a nonexistent path raises KeyLoadError."""
        with pytest.raises(KeyLoadError, match="Failed to read private key"):
            load_signing_key(tmp_path / "missing.hex")

    def test_directory_path(self, tmp_path):
        with pytest.raises(KeyLoadError, match="Failed to read private key"):
            load_signing_key(tmp_path)

    def test_binary_contents(self, tmp_path):
        path = tmp_path / "binary.key"
        path.write_bytes(b"\xff\xfe\x00\x01" * 8)

        with pytest.raises(KeyLoadError):
            load_signing_key(path)

    def test_malformed_contents(self, tmp_path):
        path = tmp_path / "mnemonic.txt"
        path.write_text("abandon abandon abandon about\n")

        with pytest.raises(KeyLoadError, match="not valid hex"):
            load_signing_key(path)


class TestDeriveIdentity:
    """Tests for derive_identity."""

    def test_address_prefixes(self, key_file):
        identity = derive_identity(load_signing_key(key_file), "somm")

        assert identity.account_address.startswith("somm1")
        assert identity.operator_address.startswith("sommvaloper1")
        assert len(identity.public_key) == 33
        assert identity.public_key[0] in (0x02, 0x03)

    def test_public_key_matches_signing_key(self, key_file):
        """Test that the identity carries the signing key's compressed public key."""
        key = load_signing_key(key_file)
        identity = derive_identity(key, "somm")

        assert identity.public_key == key.public_key.public_key_bytes

    def test_derivation_is_deterministic(self, key_file):
        """Test that repeated derivation yields identical results."""
        first = derive_identity(load_signing_key(key_file), "somm")
        second = derive_identity(load_signing_key(key_file), "somm")
        third = derive_identity(PrivateKey(bytes.fromhex(TEST_KEY_HEX)), "somm")

        assert first == second == third

    def test_addresses_share_hash(self, key_file):
        """Test that account and operator addresses differ only in prefix."""
        identity = derive_identity(load_signing_key(key_file), "somm")

        account_data = identity.account_address[len("somm1"):-6]
        operator_data = identity.operator_address[len("sommvaloper1"):-6]
        assert account_data == operator_data

    def test_custom_prefix(self, key_file):
        identity = derive_identity(load_signing_key(key_file), "cosmos")

        assert identity.account_address.startswith("cosmos1")
        assert identity.operator_address.startswith("cosmosvaloper1")

    def test_different_keys_different_addresses(self, key_file):
        other = PrivateKey(bytes.fromhex("2" * 64))

        assert (
            derive_identity(load_signing_key(key_file), "somm").account_address
            != derive_identity(other, "somm").account_address
        )
