#!/usr/bin/env python3
"""SIGN_MODE_DIRECT signing of the withdraw-commission transaction."""

import hashlib
import logging

from cosmpy.crypto.keypairs import PrivateKey, PublicKey
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import SignDoc, TxRaw

from .errors import SigningError
from .models import UnsignedTx

logger = logging.getLogger(__name__)


def build_sign_doc(unsigned_tx: UnsignedTx, chain_id: str) -> SignDoc:
    """Build the canonical sign doc for an unsigned transaction."""
    return SignDoc(
        body_bytes=unsigned_tx.body_bytes,
        auth_info_bytes=unsigned_tx.auth_info_bytes,
        chain_id=chain_id,
        account_number=unsigned_tx.account_number
    )


def sign_tx(unsigned_tx: UnsignedTx, private_key: PrivateKey, chain_id: str) -> TxRaw:
    """Sign an unsigned transaction and attach the signature.

    Args:
        unsigned_tx: Envelope produced by the transaction builder
        private_key: Signer's secp256k1 private key
        chain_id: Chain ID embedded in the sign doc

    Returns:
        Broadcast-ready TxRaw carrying exactly one signature

    Raises:
        SigningError: If the signature cannot be produced
    """
    sign_doc = build_sign_doc(unsigned_tx, chain_id)
    payload: bytes = sign_doc.SerializeToString()

    try:
        signature: bytes = private_key.sign(payload, deterministic=True)
    except Exception as e:
        raise SigningError(f"Failed to sign transaction: {e}") from e

    logger.debug(f"Signed {len(payload)} byte sign doc for chain {chain_id}")

    return TxRaw(
        body_bytes=sign_doc.body_bytes,
        auth_info_bytes=sign_doc.auth_info_bytes,
        signatures=[signature]
    )


def verify_signature(public_key: bytes, payload: bytes, signature: bytes) -> bool:
    """Check a 64-byte r||s signature over payload against a compressed public key."""
    return PublicKey(public_key).verify(payload, signature)


def compute_tx_hash(tx_bytes: bytes) -> str:
    """Return the Tendermint transaction hash (upper-case hex SHA-256) of tx bytes."""
    return hashlib.sha256(tx_bytes).hexdigest().upper()
