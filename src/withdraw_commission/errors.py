#!/usr/bin/env python3
"""Error types for the withdraw-commission pipeline.

Every stage raises its own subclass of WithdrawCommissionError. All of them
are terminal for the run: the entry point reports the error kind and message
and exits non-zero.
"""


class WithdrawCommissionError(Exception):
    """Base class for all errors raised while withdrawing commission."""


class ConfigError(WithdrawCommissionError):
    """Missing or invalid command-line configuration."""


class KeyLoadError(WithdrawCommissionError):
    """Signing key file is unreadable or does not hold a valid secp256k1 key."""


class NetworkError(WithdrawCommissionError):
    """Connection-level failure talking to the gRPC or RPC endpoint."""


class AccountNotFoundError(WithdrawCommissionError):
    """The chain has no usable account record for the derived address."""


class SigningError(WithdrawCommissionError):
    """Internal cryptographic failure while signing the transaction."""


class BroadcastError(WithdrawCommissionError):
    """The node rejected the transaction.

    The node's own error detail is kept verbatim so the operator can act on it
    (sequence mismatch, insufficient fee, invalid message, ...).

    Attributes:
        code: ABCI or JSON-RPC error code reported by the node
        codespace: Module codespace of the error (empty for JSON-RPC errors)
        log: Raw log or error data returned by the node
    """

    def __init__(
        self,
        message: str,
        code: int | None = None,
        codespace: str = "",
        log: str = ""
    ) -> None:
        super().__init__(message)
        self.code: int | None = code
        self.codespace: str = codespace
        self.log: str = log
