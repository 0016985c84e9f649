"""
withdraw-commission package.

Withdraws Cosmos SDK validator commission with a transaction that carries
only MsgWithdrawValidatorCommission.
"""

from .commission_withdrawer import CommissionWithdrawer
from .config import WithdrawConfig
from .errors import (
    AccountNotFoundError,
    BroadcastError,
    ConfigError,
    KeyLoadError,
    NetworkError,
    SigningError,
    WithdrawCommissionError,
)

__all__ = [
    "CommissionWithdrawer",
    "WithdrawConfig",
    "WithdrawCommissionError",
    "ConfigError",
    "KeyLoadError",
    "NetworkError",
    "AccountNotFoundError",
    "SigningError",
    "BroadcastError",
]
__version__ = "0.1.0"
