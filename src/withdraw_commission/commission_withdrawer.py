import logging

from .config import WithdrawConfig
from .keys import derive_identity, load_signing_key
from .models import AccountInfo, BroadcastResult, ValidatorIdentity
from .signer import compute_tx_hash, sign_tx
from .tx_builder import build_withdraw_commission_tx
from .utils.account_utility import AccountUtility
from .utils.rpc_utility import RpcUtility

# Get logger for this module
logger = logging.getLogger(__name__)


class CommissionWithdrawer:
    """
    Withdraws a validator's commission with a single-message transaction.

    Runs the pipeline key -> account info -> build -> sign -> broadcast.
    Each stage either hands its output to the next one or raises its own
    WithdrawCommissionError, which ends the run.
    """

    def __init__(
        self,
        config: WithdrawConfig,
        account_utility: AccountUtility | None = None,
        rpc_utility: RpcUtility | None = None
    ) -> None:
        """
        Initialize the CommissionWithdrawer with configuration.

        :param config: Validated configuration
        :param account_utility: gRPC account query utility (built from config if omitted)
        :param rpc_utility: Tendermint RPC utility (built from config if omitted)
        """
        self.config = config
        self.account_utility = account_utility or AccountUtility(config.grpc_url)
        self.rpc_utility = rpc_utility or RpcUtility(config.rpc_url)

    async def run(self) -> BroadcastResult:
        """
        Withdraw the commission and return the broadcast result.

        :return: Result of the accepted broadcast
        :raises WithdrawCommissionError: On any failed stage
        """
        logger.info(f"Loading signing key from {self.config.signing_key_path}")
        private_key = load_signing_key(self.config.signing_key_path)

        identity: ValidatorIdentity = derive_identity(private_key, self.config.account_prefix)
        logger.info(f"Validator address: {identity.account_address}")
        logger.info(f"Validator operator address: {identity.operator_address}")

        logger.info(f"Querying account info from {self.config.grpc_url}")
        account: AccountInfo = await self.account_utility.query_account(identity.account_address)
        logger.info(f"Account number: {account.account_number}, sequence: {account.sequence}")

        unsigned_tx = build_withdraw_commission_tx(
            operator_address=identity.operator_address,
            public_key=identity.public_key,
            account_number=account.account_number,
            sequence=account.sequence,
            denom=self.config.denom,
            timeout_height=self.config.timeout_height,
            memo=self.config.memo,
            fee_amount=self.config.fee_amount,
            gas_limit=self.config.gas_limit
        )

        tx_raw = sign_tx(unsigned_tx, private_key, self.config.chain_id)
        tx_bytes: bytes = tx_raw.SerializeToString()
        logger.info(f"Signed transaction {compute_tx_hash(tx_bytes)} ({len(tx_bytes)} bytes)")

        logger.info(f"Broadcasting to {self.config.rpc_url} ({self.config.broadcast_mode} mode)")
        result: BroadcastResult = await self.rpc_utility.broadcast_tx(
            tx_bytes, mode=self.config.broadcast_mode
        )

        logger.info(f"✓ Transaction accepted: {result.tx_hash}")
        if result.height is not None:
            logger.info(f"✓ Included in block {result.height}")
        return result
