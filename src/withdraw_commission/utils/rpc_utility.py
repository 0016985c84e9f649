import base64
import json
import logging
from typing import Any

import httpx

from ..errors import BroadcastError, NetworkError
from ..models import BroadcastResult

logger = logging.getLogger(__name__)


class RpcUtility:
    """Utility for talking to a Tendermint/CometBFT JSON-RPC endpoint.

    Provides transaction broadcasting in the three Tendermint modes:
    sync (CheckTx), async (no validation) and commit (waits for inclusion).
    """

    BROADCAST_METHODS: dict[str, str] = {
        "sync": "broadcast_tx_sync",
        "async": "broadcast_tx_async",
        "commit": "broadcast_tx_commit",
    }

    def __init__(self, rpc_url: str) -> None:
        """Initialize RPC utility.

        Args:
            rpc_url: Tendermint RPC endpoint URL
        """
        if not rpc_url:
            raise ValueError("RPC URL is required")
        self.rpc_url: str = rpc_url

    async def _rpc_post(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        """Post a JSON-RPC request and return its result.

        Args:
            method: JSON-RPC method name
            params: Method parameters

        Returns:
            The "result" member of the JSON-RPC response

        Raises:
            NetworkError: If the request fails or the response is malformed
            BroadcastError: If the node answers with a JSON-RPC error
        """
        payload: dict[str, Any] = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params,
        }

        try:
            async with httpx.AsyncClient() as client:
                logger.debug(f"Posting {method} to {self.rpc_url}")
                # Use 30-second timeout; commit mode waits for a block
                response: httpx.Response = await client.post(self.rpc_url, json=payload, timeout=30.0)
                response.raise_for_status()
                body: Any = response.json()
        except httpx.HTTPError as e:
            raise NetworkError(f"Failed to reach RPC endpoint {self.rpc_url}: {e}") from e
        except json.JSONDecodeError as e:
            raise NetworkError(f"Invalid JSON from RPC endpoint {self.rpc_url}: {e}") from e

        logger.debug(f"RPC response: {body}")

        match body:
            case {"error": {"code": code, **error}}:
                detail: str = error.get("data") or error.get("message", "")
                raise BroadcastError(
                    f"Node rejected {method} (code={code}): {detail}",
                    code=code,
                    log=detail
                )
            case {"result": dict() as result}:
                return result
            case _:
                raise NetworkError(f"Unexpected RPC response format: {body}")

    async def broadcast_tx(self, tx_bytes: bytes, mode: str = "sync") -> BroadcastResult:
        """Broadcast signed transaction bytes.

        Args:
            tx_bytes: Serialized TxRaw
            mode: One of sync, async, commit

        Returns:
            BroadcastResult for an accepted transaction

        Raises:
            BroadcastError: If the node rejects the transaction
            NetworkError: If the node cannot be reached
        """
        if (method := self.BROADCAST_METHODS.get(mode)) is None:
            raise ValueError(f"Unsupported broadcast mode: {mode}")

        params: dict[str, str] = {"tx": base64.b64encode(tx_bytes).decode("ascii")}
        result: dict[str, Any] = await self._rpc_post(method, params)

        match mode:
            case "commit":
                return self._parse_commit_result(result)
            case _:
                self._raise_for_code("CheckTx", result)
                return BroadcastResult(
                    tx_hash=result.get("hash", ""),
                    code=0,
                    codespace=result.get("codespace", ""),
                    log=result.get("log", "")
                )

    def _parse_commit_result(self, result: dict[str, Any]) -> BroadcastResult:
        """Check both phases of a broadcast_tx_commit result."""
        check_tx: dict[str, Any] = result.get("check_tx") or {}
        # CometBFT 0.38 renamed deliver_tx to tx_result
        deliver_tx: dict[str, Any] = result.get("tx_result") or result.get("deliver_tx") or {}

        self._raise_for_code("CheckTx", check_tx)
        self._raise_for_code("DeliverTx", deliver_tx)

        height: int | None = int(result["height"]) if result.get("height") else None
        return BroadcastResult(
            tx_hash=result.get("hash", ""),
            code=0,
            codespace=deliver_tx.get("codespace", ""),
            log=deliver_tx.get("log", ""),
            height=height
        )

    @staticmethod
    def _raise_for_code(phase: str, outcome: dict[str, Any]) -> None:
        if code := int(outcome.get("code", 0) or 0):
            codespace: str = outcome.get("codespace", "")
            log: str = outcome.get("log", "")
            logger.error(f"{phase} failed: code={code} codespace={codespace} log={log}")
            raise BroadcastError(
                f"Transaction rejected in {phase} (code={code}, codespace={codespace}): {log}",
                code=code,
                codespace=codespace,
                log=log
            )
