#!/usr/bin/env python3
"""Configuration management for withdraw-commission.

This module provides a type-safe, immutable configuration dataclass with
validation. Configuration is parsed from command-line flags; every flag
except the signing key path has a default that targets Sommelier mainnet.
"""

import argparse
import logging
import os
import re
from dataclasses import dataclass
from typing import ClassVar, NoReturn
from urllib.parse import urlparse

from .errors import ConfigError

# Get logger for this module
logger = logging.getLogger(__name__)

DEFAULT_CHAIN_ID = "sommelier-3"
DEFAULT_RPC_URL = "https://sommelier-rpc.polkachu.com:443"
DEFAULT_GRPC_URL = "https://sommelier-grpc.polkachu.com:14190"
DEFAULT_DENOM = "usomm"
DEFAULT_ACCOUNT_PREFIX = "somm"
DEFAULT_MEMO = "Withdraw validator commission"
DEFAULT_FEE_AMOUNT = 1000
DEFAULT_GAS_LIMIT = 200000

# Protobuf uint64 fields (timeout_height, gas_limit)
UINT64_MAX = 2**64 - 1

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Cosmos SDK coin denom format
DENOM_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9/:._-]{2,127}$")
ACCOUNT_PREFIX_PATTERN = re.compile(r"^[a-z][a-z0-9]*$")


@dataclass(frozen=True, slots=True)
class WithdrawConfig:
    """Configuration for a single withdraw-commission run.

    Attributes:
        signing_key_path: Path to the hex-encoded validator signing key
        chain_id: Chain identifier embedded in the signing payload
        rpc_url: Tendermint RPC endpoint used for broadcasting
        grpc_url: Cosmos SDK gRPC endpoint used for account queries
        denom: Denomination of the fee coin
        timeout_height: Block height after which the tx is invalid (0 = none)
        account_prefix: Bech32 prefix of account addresses
        memo: Transaction memo
        fee_amount: Fee amount in `denom` (0 = no fee coins)
        gas_limit: Gas limit of the transaction
        broadcast_mode: One of sync, async, commit
        log_level: Logging level name
    """

    signing_key_path: str
    chain_id: str = DEFAULT_CHAIN_ID
    rpc_url: str = DEFAULT_RPC_URL
    grpc_url: str = DEFAULT_GRPC_URL
    denom: str = DEFAULT_DENOM
    timeout_height: int = 0
    account_prefix: str = DEFAULT_ACCOUNT_PREFIX
    memo: str = DEFAULT_MEMO
    fee_amount: int = DEFAULT_FEE_AMOUNT
    gas_limit: int = DEFAULT_GAS_LIMIT
    broadcast_mode: str = "sync"
    log_level: str = "INFO"

    RPC_SCHEMES: ClassVar[set[str]] = {"http", "https"}
    GRPC_SCHEMES: ClassVar[set[str]] = {"http", "https", "grpc+http", "grpc+https"}
    BROADCAST_MODES: ClassVar[set[str]] = {"sync", "async", "commit"}
    MAX_CHAIN_ID_LENGTH: ClassVar[int] = 50
    MAX_MEMO_LENGTH: ClassVar[int] = 256

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.signing_key_path:
            raise ConfigError("Signing key path is required (--signing-key-path)")

        self._validate_url("RPC", self.rpc_url, self.RPC_SCHEMES)
        self._validate_url("gRPC", self.grpc_url, self.GRPC_SCHEMES)

        if not self.chain_id or self.chain_id.strip() != self.chain_id:
            raise ConfigError(f"Invalid chain ID: {self.chain_id!r}")
        if len(self.chain_id) > self.MAX_CHAIN_ID_LENGTH:
            raise ConfigError(
                f"Chain ID too long (max {self.MAX_CHAIN_ID_LENGTH}), got {len(self.chain_id)}"
            )

        if not DENOM_PATTERN.match(self.denom):
            raise ConfigError(f"Invalid denom: {self.denom!r}")

        if not ACCOUNT_PREFIX_PATTERN.match(self.account_prefix):
            raise ConfigError(f"Invalid account prefix: {self.account_prefix!r}")

        if self.timeout_height < 0:
            raise ConfigError(f"Timeout height must be non-negative, got {self.timeout_height}")
        if self.timeout_height > UINT64_MAX:
            raise ConfigError(f"Timeout height exceeds uint64 range, got {self.timeout_height}")
        if self.fee_amount < 0:
            raise ConfigError(f"Fee amount must be non-negative, got {self.fee_amount}")
        if self.gas_limit <= 0:
            raise ConfigError(f"Gas limit must be positive, got {self.gas_limit}")
        if self.gas_limit > UINT64_MAX:
            raise ConfigError(f"Gas limit exceeds uint64 range, got {self.gas_limit}")

        if len(self.memo) > self.MAX_MEMO_LENGTH:
            raise ConfigError(
                f"Memo too long (max {self.MAX_MEMO_LENGTH} characters), got {len(self.memo)}"
            )

        if self.broadcast_mode not in self.BROADCAST_MODES:
            raise ConfigError(
                f"Unsupported broadcast mode: {self.broadcast_mode}. "
                f"Supported modes: {', '.join(sorted(self.BROADCAST_MODES))}"
            )

        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Invalid log level: {self.log_level}")

    @staticmethod
    def _validate_url(name: str, url: str, schemes: set[str]) -> None:
        if not url:
            raise ConfigError(f"{name} URL is required")

        parsed = urlparse(url)
        if parsed.scheme not in schemes:
            raise ConfigError(
                f"Invalid {name} URL scheme: {parsed.scheme!r}. "
                f"Expected {', '.join(sorted(schemes))}"
            )
        if not parsed.hostname:
            raise ConfigError(f"Invalid {name} URL, missing host: {url}")
        try:
            parsed.port
        except ValueError:
            raise ConfigError(f"Invalid {name} URL port: {url}") from None

    @classmethod
    def from_args(cls, argv: list[str] | None = None) -> "WithdrawConfig":
        """Load configuration from command-line arguments.

        Args:
            argv: Argument list (defaults to sys.argv[1:])

        Returns:
            WithdrawConfig instance with parsed values

        Raises:
            ConfigError: If a flag is missing, malformed or out of range
        """
        args: argparse.Namespace = build_parser().parse_args(argv)

        return cls(
            signing_key_path=args.signing_key_path or "",
            chain_id=args.chain_id,
            rpc_url=args.rpc_url,
            grpc_url=args.grpc_url,
            denom=args.denom,
            timeout_height=args.timeout_height,
            account_prefix=args.account_prefix,
            memo=args.memo,
            fee_amount=args.fee_amount,
            gas_limit=args.gas_limit,
            broadcast_mode=args.broadcast_mode,
            log_level=args.log_level.upper()
        )

    @property
    def operator_prefix(self) -> str:
        """Bech32 prefix of validator operator addresses."""
        return f"{self.account_prefix}valoper"

    def log_config(self) -> None:
        """Log the configuration in a readable format for debugging."""
        logger.info("=" * 60)
        logger.info("Withdraw Commission Configuration")
        logger.info("=" * 60)

        logger.info("Chain:")
        logger.info(f"  Chain ID: {self.chain_id}")
        logger.info(f"  RPC URL: {self.rpc_url}")
        logger.info(f"  gRPC URL: {self.grpc_url}")
        logger.info(f"  Account Prefix: {self.account_prefix}")

        logger.info("Transaction:")
        logger.info(f"  Fee: {self.fee_amount}{self.denom}")
        logger.info(f"  Gas Limit: {self.gas_limit}")
        logger.info(f"  Timeout Height: {self.timeout_height or 'none'}")
        logger.info(f"  Memo: {self.memo}")
        logger.info(f"  Broadcast Mode: {self.broadcast_mode}")

        logger.info(f"Signing Key: {self.signing_key_path}")
        logger.info("=" * 60)


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports errors as ConfigError instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise ConfigError(message)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser for withdraw-commission."""
    parser: argparse.ArgumentParser = _ArgumentParser(
        prog="withdraw-commission",
        description=(
            "Withdraw validator commission with a transaction that carries only "
            "MsgWithdrawValidatorCommission"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Environment Variables:
  LOG_LEVEL            - Logging level (can be overridden with --log-level)
        """
    )
    parser.add_argument(
        "--signing-key-path",
        help="Path to the hex-encoded validator signing key (required)"
    )
    parser.add_argument(
        "--chain-id",
        default=DEFAULT_CHAIN_ID,
        help=f"Chain ID (default: {DEFAULT_CHAIN_ID})"
    )
    parser.add_argument(
        "--rpc-url",
        default=DEFAULT_RPC_URL,
        help=f"Tendermint RPC endpoint for broadcasting (default: {DEFAULT_RPC_URL})"
    )
    parser.add_argument(
        "--grpc-url",
        default=DEFAULT_GRPC_URL,
        help=f"gRPC endpoint for account queries (default: {DEFAULT_GRPC_URL})"
    )
    parser.add_argument(
        "--denom",
        default=DEFAULT_DENOM,
        help=f"Fee denomination (default: {DEFAULT_DENOM})"
    )
    parser.add_argument(
        "--timeout-height",
        type=int,
        default=0,
        help="Block height after which the transaction is invalid (default: 0, no timeout)"
    )
    parser.add_argument(
        "--account-prefix",
        default=DEFAULT_ACCOUNT_PREFIX,
        help=f"Bech32 account prefix (default: {DEFAULT_ACCOUNT_PREFIX})"
    )
    parser.add_argument(
        "--memo",
        default=DEFAULT_MEMO,
        help=f"Transaction memo (default: {DEFAULT_MEMO!r})"
    )
    parser.add_argument(
        "--fee-amount",
        type=int,
        default=DEFAULT_FEE_AMOUNT,
        help=f"Fee amount in --denom (default: {DEFAULT_FEE_AMOUNT})"
    )
    parser.add_argument(
        "--gas-limit",
        type=int,
        default=DEFAULT_GAS_LIMIT,
        help=f"Gas limit (default: {DEFAULT_GAS_LIMIT})"
    )
    parser.add_argument(
        "--broadcast-mode",
        default="sync",
        choices=["sync", "async", "commit"],
        help="Broadcast mode (default: sync)"
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        type=str.upper,
        choices=LOG_LEVELS,
        help="Set the logging level (default: INFO)"
    )
    return parser
