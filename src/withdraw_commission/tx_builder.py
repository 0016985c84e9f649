#!/usr/bin/env python3
"""Construction of the unsigned withdraw-commission transaction.

The body always carries exactly one MsgWithdrawValidatorCommission. The
upstream chain CLI adds a MsgWithdrawDelegatorReward next to it, which can
fail the whole transaction; building the envelope here avoids that.
"""

from google.protobuf.any_pb2 import Any as ProtoAny

from cosmpy.protos.cosmos.base.v1beta1.coin_pb2 import Coin
from cosmpy.protos.cosmos.crypto.secp256k1.keys_pb2 import PubKey as ProtoPubKey
from cosmpy.protos.cosmos.distribution.v1beta1.tx_pb2 import MsgWithdrawValidatorCommission
from cosmpy.protos.cosmos.tx.signing.v1beta1.signing_pb2 import SignMode
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import AuthInfo, Fee, ModeInfo, SignerInfo, TxBody

from .config import DEFAULT_FEE_AMOUNT, DEFAULT_GAS_LIMIT, DEFAULT_MEMO
from .models import UnsignedTx

MSG_WITHDRAW_VALIDATOR_COMMISSION_TYPE_URL = (
    "/cosmos.distribution.v1beta1.MsgWithdrawValidatorCommission"
)


def pack_any(message) -> ProtoAny:
    """Pack a protobuf message into an Any with a Cosmos style "/" type URL."""
    packed = ProtoAny()
    packed.Pack(message, type_url_prefix="/")
    return packed


def build_fee(denom: str, fee_amount: int, gas_limit: int) -> Fee:
    """Build the fee; an amount of 0 leaves the coin list empty."""
    amount = [Coin(denom=denom, amount=str(fee_amount))] if fee_amount else []
    return Fee(amount=amount, gas_limit=gas_limit)


def build_withdraw_commission_tx(
    operator_address: str,
    public_key: bytes,
    account_number: int,
    sequence: int,
    denom: str,
    timeout_height: int = 0,
    memo: str = DEFAULT_MEMO,
    fee_amount: int = DEFAULT_FEE_AMOUNT,
    gas_limit: int = DEFAULT_GAS_LIMIT
) -> UnsignedTx:
    """Build an unsigned transaction that withdraws validator commission.

    Args:
        operator_address: Bech32 validator operator address
        public_key: Compressed secp256k1 public key of the signer
        account_number: On-chain account number of the signer
        sequence: Current on-chain sequence of the signer
        denom: Fee denomination
        timeout_height: Block height after which the tx is invalid (0 = none)
        memo: Transaction memo
        fee_amount: Fee amount in denom
        gas_limit: Gas limit

    Returns:
        UnsignedTx with a single-message body and single-signer auth info
    """
    message = MsgWithdrawValidatorCommission(validator_address=operator_address)

    body = TxBody(messages=[pack_any(message)], memo=memo)
    if timeout_height > 0:
        body.timeout_height = timeout_height

    signer_info = SignerInfo(
        public_key=pack_any(ProtoPubKey(key=public_key)),
        mode_info=ModeInfo(single=ModeInfo.Single(mode=SignMode.SIGN_MODE_DIRECT)),
        sequence=sequence
    )
    auth_info = AuthInfo(
        signer_infos=[signer_info],
        fee=build_fee(denom, fee_amount, gas_limit)
    )

    return UnsignedTx(body=body, auth_info=auth_info, account_number=account_number)
