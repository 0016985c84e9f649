#!/usr/bin/env python3
"""Data models for the withdraw-commission tool.

This module provides immutable data classes for the values that flow between
the pipeline stages: the identity derived from the signing key, the on-chain
account metadata, the unsigned transaction envelope and the broadcast outcome.
"""

from dataclasses import dataclass
from typing import Any

from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import AuthInfo, TxBody


@dataclass(frozen=True, slots=True)
class ValidatorIdentity:
    """Public identity derived from a validator's signing key.

    Attributes:
        public_key: Compressed secp256k1 public key (33 bytes)
        account_address: Bech32 account address (e.g. somm1...)
        operator_address: Bech32 validator operator address (e.g. sommvaloper1...)
    """

    public_key: bytes
    account_address: str
    operator_address: str

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"ValidatorIdentity(account={self.account_address}, "
            f"operator={self.operator_address})"
        )


@dataclass(frozen=True, slots=True)
class AccountInfo:
    """Account number and sequence of an on-chain account.

    Attributes:
        address: Bech32 account address that was queried
        account_number: Chain-assigned account number
        sequence: Current sequence (nonce) of the account
    """

    address: str
    account_number: int
    sequence: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "address": self.address,
            "account_number": self.account_number,
            "sequence": self.sequence
        }


@dataclass(frozen=True, slots=True)
class UnsignedTx:
    """Transaction envelope ready for signing.

    The account number is not part of the body or auth info but is required
    by the sign doc, so it travels with the envelope.
    """

    body: TxBody
    auth_info: AuthInfo
    account_number: int

    @property
    def body_bytes(self) -> bytes:
        return self.body.SerializeToString()

    @property
    def auth_info_bytes(self) -> bytes:
        return self.auth_info.SerializeToString()


@dataclass(frozen=True, slots=True)
class BroadcastResult:
    """Outcome of a transaction accepted by the node.

    Attributes:
        tx_hash: Upper-case hex transaction hash reported by the node
        code: ABCI result code (always 0 for an accepted transaction)
        codespace: Codespace reported alongside the code
        log: Raw log returned by the node
        height: Block height, only known in commit mode
    """

    tx_hash: str
    code: int = 0
    codespace: str = ""
    log: str = ""
    height: int | None = None

    def __str__(self) -> str:
        """Human-readable string representation."""
        if self.height is not None:
            return f"BroadcastResult(hash={self.tx_hash}, height={self.height})"
        return f"BroadcastResult(hash={self.tx_hash})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "tx_hash": self.tx_hash,
            "code": self.code,
            "codespace": self.codespace,
            "log": self.log,
            "height": self.height
        }
