#!/usr/bin/env python3
"""Tests for building the unsigned withdraw-commission transaction."""

import pytest
from cosmpy.protos.cosmos.crypto.secp256k1.keys_pb2 import PubKey as ProtoPubKey
from cosmpy.protos.cosmos.distribution.v1beta1.tx_pb2 import MsgWithdrawValidatorCommission
from cosmpy.protos.cosmos.tx.signing.v1beta1.signing_pb2 import SignMode
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import AuthInfo, TxBody

from withdraw_commission.tx_builder import (
    MSG_WITHDRAW_VALIDATOR_COMMISSION_TYPE_URL,
    build_fee,
    build_withdraw_commission_tx,
)

OPERATOR_ADDRESS = "sommvaloper1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqh2cwgl"
PUBLIC_KEY = bytes.fromhex("02" + "ab" * 32)


@pytest.fixture
def unsigned_tx():
    """Build a transaction with account number 7 and sequence 42."""
    return build_withdraw_commission_tx(
        operator_address=OPERATOR_ADDRESS,
        public_key=PUBLIC_KEY,
        account_number=7,
        sequence=42,
        denom="usomm"
    )


class TestBuildWithdrawCommissionTx:
    """Tests for build_withdraw_commission_tx."""

    def test_single_withdraw_commission_message(self, unsigned_tx):
        """Test that the body holds exactly one withdraw-commission message."""
        messages = unsigned_tx.body.messages

        assert len(messages) == 1
        assert messages[0].type_url == MSG_WITHDRAW_VALIDATOR_COMMISSION_TYPE_URL

        message = MsgWithdrawValidatorCommission()
        assert messages[0].Unpack(message)
        assert message.validator_address == OPERATOR_ADDRESS

    def test_no_withdraw_rewards_message(self, unsigned_tx):
        """Test that no delegator reward withdrawal is bundled."""
        type_urls = [message.type_url for message in unsigned_tx.body.messages]
        assert not any("MsgWithdrawDelegatorReward" in url for url in type_urls)

    def test_timeout_height_unset_when_zero(self, unsigned_tx):
        assert unsigned_tx.body.timeout_height == 0

        decoded = TxBody()
        decoded.ParseFromString(unsigned_tx.body_bytes)
        assert decoded.timeout_height == 0

    def test_timeout_height_set_exactly(self):
        unsigned_tx = build_withdraw_commission_tx(
            operator_address=OPERATOR_ADDRESS,
            public_key=PUBLIC_KEY,
            account_number=7,
            sequence=42,
            denom="usomm",
            timeout_height=15_000_123
        )

        decoded = TxBody()
        decoded.ParseFromString(unsigned_tx.body_bytes)
        assert decoded.timeout_height == 15_000_123

    def test_default_memo(self, unsigned_tx):
        assert unsigned_tx.body.memo == "Withdraw validator commission"

    def test_signer_info(self, unsigned_tx):
        """Test that the auth info carries one direct-mode signer."""
        auth_info = AuthInfo()
        auth_info.ParseFromString(unsigned_tx.auth_info_bytes)

        assert len(auth_info.signer_infos) == 1
        signer_info = auth_info.signer_infos[0]
        assert signer_info.sequence == 42
        assert signer_info.mode_info.single.mode == SignMode.SIGN_MODE_DIRECT
        assert signer_info.public_key.type_url == "/cosmos.crypto.secp256k1.PubKey"

        public_key = ProtoPubKey()
        assert signer_info.public_key.Unpack(public_key)
        assert public_key.key == PUBLIC_KEY

    def test_account_number_travels_with_envelope(self, unsigned_tx):
        assert unsigned_tx.account_number == 7

    def test_default_fee(self, unsigned_tx):
        fee = unsigned_tx.auth_info.fee

        assert fee.gas_limit == 200000
        assert len(fee.amount) == 1
        assert fee.amount[0].denom == "usomm"
        assert fee.amount[0].amount == "1000"

    def test_build_is_pure(self):
        """Test that identical inputs produce identical bytes."""
        kwargs = dict(
            operator_address=OPERATOR_ADDRESS,
            public_key=PUBLIC_KEY,
            account_number=7,
            sequence=42,
            denom="usomm",
            timeout_height=10
        )
        first = build_withdraw_commission_tx(**kwargs)
        second = build_withdraw_commission_tx(**kwargs)

        assert first.body_bytes == second.body_bytes
        assert first.auth_info_bytes == second.auth_info_bytes


class TestBuildFee:
    """Tests for build_fee."""

    def test_zero_amount_has_no_coins(self):
        fee = build_fee("usomm", 0, 200000)

        assert len(fee.amount) == 0
        assert fee.gas_limit == 200000

    def test_amount_uses_denom(self):
        fee = build_fee("stake", 2500, 300000)

        assert [(coin.denom, coin.amount) for coin in fee.amount] == [("stake", "2500")]
