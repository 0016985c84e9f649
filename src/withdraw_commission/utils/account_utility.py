import logging
import re
from urllib.parse import urlparse

import grpc
from google.protobuf.any_pb2 import Any as ProtoAny
from google.protobuf.message import DecodeError

from cosmpy.protos.cosmos.auth.v1beta1.auth_pb2 import BaseAccount
from cosmpy.protos.cosmos.auth.v1beta1.query_pb2 import QueryAccountRequest, QueryAccountResponse
from cosmpy.protos.cosmos.auth.v1beta1.query_pb2_grpc import QueryStub
from cosmpy.protos.cosmos.vesting.v1beta1.vesting_pb2 import (
    ContinuousVestingAccount,
    DelayedVestingAccount,
    PeriodicVestingAccount,
    PermanentLockedAccount,
)

from ..errors import AccountNotFoundError, NetworkError
from ..models import AccountInfo

logger = logging.getLogger(__name__)

ACCOUNT_NOT_FOUND_PATTERN = re.compile(r"account\b.*\bnot found", re.IGNORECASE)

VESTING_ACCOUNT_TYPES = {
    "/cosmos.vesting.v1beta1.ContinuousVestingAccount": ContinuousVestingAccount,
    "/cosmos.vesting.v1beta1.DelayedVestingAccount": DelayedVestingAccount,
    "/cosmos.vesting.v1beta1.PeriodicVestingAccount": PeriodicVestingAccount,
    "/cosmos.vesting.v1beta1.PermanentLockedAccount": PermanentLockedAccount,
}


class AccountUtility:
    """
    Utility for querying account state from a Cosmos SDK gRPC endpoint.

    The channel is opened per query and closed afterwards; TLS is used for
    https and grpc+https URLs, plaintext for http and grpc+http.
    """

    SECURE_SCHEMES: set[str] = {"https", "grpc+https"}

    def __init__(self, grpc_url: str) -> None:
        """
        Initialize the AccountUtility.

        Args:
            grpc_url: gRPC endpoint URL (e.g. https://host:9090)
        """
        if not grpc_url:
            raise ValueError("gRPC URL is required")

        parsed = urlparse(grpc_url)
        self.grpc_url: str = grpc_url
        self.secure: bool = parsed.scheme in self.SECURE_SCHEMES
        port: int = parsed.port or (443 if self.secure else 80)
        self.target: str = f"{parsed.hostname}:{port}"

    def _create_channel(self) -> grpc.aio.Channel:
        """Create an async gRPC channel to the configured endpoint."""
        if self.secure:
            logger.debug(f"Opening TLS gRPC channel to {self.target}")
            return grpc.aio.secure_channel(self.target, grpc.ssl_channel_credentials())
        logger.debug(f"Opening plaintext gRPC channel to {self.target}")
        return grpc.aio.insecure_channel(self.target)

    async def query_account(self, address: str) -> AccountInfo:
        """Fetch account number and sequence for an address.

        Args:
            address: Bech32 account address

        Returns:
            AccountInfo with the current account number and sequence

        Raises:
            AccountNotFoundError: If the chain has no account at the address
            NetworkError: If the endpoint cannot be reached or answers garbage
        """
        try:
            async with self._create_channel() as channel:
                stub = QueryStub(channel)
                response: QueryAccountResponse = await stub.Account(
                    QueryAccountRequest(address=address)
                )
        except grpc.aio.AioRpcError as e:
            details: str = e.details() or ""
            if self._is_account_not_found(e.code(), details):
                raise AccountNotFoundError(
                    f"Account {address} not found on chain; has it ever received funds?"
                ) from e
            raise NetworkError(
                f"Failed to query account info from {self.grpc_url}: {e.code().name} {details}"
            ) from e

        if not response.HasField("account"):
            raise AccountNotFoundError(f"Account {address} not found on chain")

        return self._decode_account(address, response.account)

    @staticmethod
    def _is_account_not_found(code: grpc.StatusCode, details: str) -> bool:
        """Tell a missing account apart from a transport failure.

        Older nodes report a missing account as UNKNOWN/INTERNAL with the
        reason only in the details; transport errors (UNAVAILABLE,
        DEADLINE_EXCEEDED, ...) can also mention "not found", e.g. for DNS.
        """
        match code:
            case grpc.StatusCode.NOT_FOUND:
                return True
            case grpc.StatusCode.UNKNOWN | grpc.StatusCode.INTERNAL:
                return ACCOUNT_NOT_FOUND_PATTERN.search(details) is not None
            case _:
                return False

    def _decode_account(self, address: str, account_any: ProtoAny) -> AccountInfo:
        """Extract account number and sequence from a packed account."""
        try:
            match account_any.type_url:
                case "/cosmos.auth.v1beta1.BaseAccount":
                    base_account = BaseAccount()
                    base_account.ParseFromString(account_any.value)
                case type_url if type_url in VESTING_ACCOUNT_TYPES:
                    vesting_account = VESTING_ACCOUNT_TYPES[type_url]()
                    vesting_account.ParseFromString(account_any.value)
                    base_account = vesting_account.base_vesting_account.base_account
                case type_url:
                    raise AccountNotFoundError(
                        f"Account {address} has unsupported account type {type_url}"
                    )
        except DecodeError as e:
            raise NetworkError(f"Failed to decode account {address}: {e}") from e

        logger.debug(f"Decoded {account_any.type_url} for {address}")
        return AccountInfo(
            address=address,
            account_number=base_account.account_number,
            sequence=base_account.sequence
        )
