#!/usr/bin/env python3
"""Entry point for the withdraw-commission command-line tool.

Builds, signs and broadcasts one transaction that only withdraws validator
commission, then prints the transaction hash on stdout. Logs go to stderr.
"""

import asyncio
import logging
import os
import sys

from .commission_withdrawer import CommissionWithdrawer
from .config import WithdrawConfig
from .errors import WithdrawCommissionError

# Get logger for this module
logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level: int = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


async def main(argv: list[str] | None = None) -> int:
    """Run the withdraw-commission pipeline.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Process exit code: 0 on success, 1 on any failure
    """
    setup_logging(os.environ.get("LOG_LEVEL", "INFO"))

    try:
        config: WithdrawConfig = WithdrawConfig.from_args(argv)
        logging.getLogger().setLevel(config.log_level)

        logger.info("=== Withdraw Validator Commission ===")
        config.log_config()

        result = await CommissionWithdrawer(config).run()

    except WithdrawCommissionError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    except Exception as e:
        logger.error(f"Fatal Error: {e}", exc_info=True)
        return 1

    print(result.tx_hash)
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, aborting")
        sys.exit(130)


if __name__ == "__main__":
    run()
