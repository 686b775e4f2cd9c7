"""
XRPL JSON-RPC Client

Async client for the ledger's JSON-RPC API: account and ledger queries,
transaction submission and lookup. Every call is a single attempt; failures
are raised as typed errors and retry policy is left to the caller (see
:meth:`ErrorHandler.is_retryable`).
"""

from __future__ import annotations
import asyncio
import logging
import string
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from .codec.hashes import transaction_id
from .enums import TransactionStatus
from .runtime.errors import (
    InvalidFieldError,
    LedgerApiError,
    NetworkError,
    TimeoutError,
    TransactionFailedError,
    error_from_response,
)
from .transactions import AccountInfo, SignedTransaction, TransactionResult, TrustLine
from .tx.validation import validate_address, validate_transaction_hash

logger = logging.getLogger(__name__)

TESTNET_ENDPOINT = "https://s.altnet.rippletest.net:51234"
MAINNET_ENDPOINT = "https://xrplcluster.com"

# Engine result prefixes that mean the transaction was accepted or queued
ACCEPTED_PREFIXES = ("tes", "ter")
SUCCESS_RESULT = "tesSUCCESS"


@dataclass
class ClientConfig:
    """Configuration for the XRPL client."""

    endpoint: str
    timeout: float = 30.0
    debug: bool = False
    user_agent: str = "xrpl-client-python/0.1.0"
    default_fee: str = "12"
    last_ledger_offset: int = 20

    @classmethod
    def for_network(cls, testnet: bool = True, **kwargs: Any) -> ClientConfig:
        """Configuration for the public testnet or mainnet endpoint."""
        return cls(endpoint=TESTNET_ENDPOINT if testnet else MAINNET_ENDPOINT, **kwargs)


def _status_for(validated: bool, engine_result: str) -> TransactionStatus:
    if not validated:
        return TransactionStatus.PENDING
    if engine_result == SUCCESS_RESULT:
        return TransactionStatus.VALIDATED
    return TransactionStatus.FAILED


class XrplClient:
    """
    Async JSON-RPC client for an XRPL node.

    Example:
        ```python
        async with XrplClient(testnet=True) as client:
            sequence = await client.get_account_sequence("rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh")
        ```
    """

    def __init__(
        self,
        testnet: bool = True,
        config: Optional[ClientConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize the client.

        Args:
            testnet: Select the public testnet (True) or mainnet endpoint
            config: Explicit configuration, overriding the network default
            session: Optional aiohttp session; it is not closed by the client
        """
        self.config = config or ClientConfig.for_network(testnet)
        self._testnet = testnet
        self._session = session
        self._owns_session = session is None

        if self.config.debug:
            logger.setLevel(logging.DEBUG)

    @property
    def is_testnet(self) -> bool:
        return self._testnet

    @property
    def endpoint(self) -> str:
        """Get the API endpoint."""
        return self.config.endpoint

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if owned by this client."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> XrplClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # Low-level RPC
    # =========================================================================

    async def _call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name
            params: Method parameters

        Returns:
            The ``result`` object of the response

        Raises:
            NetworkError: On transport failure, non-200 status or an
                undecodable body
            LedgerApiError: If the node reports an error
        """
        request_data = {"method": method, "params": [params or {}]}
        logger.debug(f"Request: {method} {params}")

        session = self._get_session()
        try:
            response = await session.post(
                self.endpoint,
                json=request_data,
                headers={"Content-Type": "application/json"},
            )
            try:
                if response.status != 200:
                    raise NetworkError(
                        f"HTTP {response.status}: {response.reason}",
                        details={"status": response.status, "method": method},
                    )
                response_data = await response.json(content_type=None)
            finally:
                response.release()
        except asyncio.TimeoutError as e:
            raise TimeoutError(f"Request timed out after {self.config.timeout}s",
                               details={"method": method}, cause=e) from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"HTTP request failed: {e}", details={"method": method}, cause=e) from e
        except ValueError as e:
            raise NetworkError(f"Invalid JSON response: {e}", details={"method": method}, cause=e) from e

        logger.debug(f"Response: {method} {response_data}")

        if not isinstance(response_data, dict):
            raise NetworkError("Invalid JSON response: expected an object", details={"method": method})

        result = response_data.get("result")
        error = error_from_response(result)
        if error is not None:
            raise error
        return result

    # =========================================================================
    # Account and ledger queries
    # =========================================================================

    async def get_account(self, address: str) -> AccountInfo:
        """
        Get account root information from the last validated ledger.

        Raises:
            ValidationError: If the address is malformed
            LedgerApiError: E.g. ``actNotFound`` for unfunded accounts
        """
        address = validate_address(address)
        result = await self._call("account_info", {"account": str(address), "ledger_index": "validated"})

        data = result.get("account_data")
        if not isinstance(data, dict):
            raise LedgerApiError("invalidResponse", "account_info response has no account_data")
        try:
            return AccountInfo(
                account=data.get("Account", str(address)),
                sequence=int(data["Sequence"]),
                balance=str(data.get("Balance", "0")),
                flags=int(data.get("Flags", 0)),
                owner_count=int(data.get("OwnerCount", 0)),
                ledger_index=result.get("ledger_index", result.get("ledger_current_index")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise LedgerApiError("invalidResponse", f"Malformed account_data: {e}", cause=e) from e

    async def get_account_sequence(self, address: str) -> int:
        """Next sequence number of an account."""
        return (await self.get_account(address)).sequence

    async def get_account_balance(self, address: str) -> str:
        """Native balance of an account, in drops."""
        return (await self.get_account(address)).balance

    async def get_ledger_index(self) -> int:
        """Index of the most recent validated ledger."""
        result = await self._call("ledger", {"ledger_index": "validated"})
        ledger_index = result.get("ledger_index")
        if ledger_index is None and isinstance(result.get("ledger"), dict):
            ledger_index = result["ledger"].get("ledger_index")
        try:
            return int(ledger_index)
        except (TypeError, ValueError):
            raise LedgerApiError("invalidResponse", "Invalid ledger response") from None

    async def get_trust_lines(self, address: str) -> List[TrustLine]:
        """Trust lines of an account."""
        address = validate_address(address)
        result = await self._call("account_lines", {"account": str(address), "ledger_index": "validated"})

        lines = result.get("lines")
        if not isinstance(lines, list):
            return []
        try:
            return [TrustLine.model_validate(line) for line in lines]
        except PydanticValidationError as e:
            raise LedgerApiError("invalidResponse", f"Malformed trust line: {e.errors()[0]['msg']}", cause=e) from e

    # =========================================================================
    # Transactions
    # =========================================================================

    async def submit(self, signed: Union[SignedTransaction, str]) -> TransactionResult:
        """
        Submit a signed blob.

        The result hash is always derived from the blob, never taken from
        the node's reply.

        Args:
            signed: Signed transaction or its hex blob

        Returns:
            Result with status PENDING for accepted or queued transactions

        Raises:
            InvalidFieldError: If the blob is not hex
            TransactionFailedError: If the node rejects the transaction
                (``tec``/``tef``/``tel``/``tem`` results)
        """
        tx_blob = signed.tx_blob if isinstance(signed, SignedTransaction) else str(signed)
        if not tx_blob or len(tx_blob) % 2 or any(c not in string.hexdigits for c in tx_blob):
            raise InvalidFieldError("tx_blob", "Signed blob must be a non-empty hex string")
        tx_hash = transaction_id(bytes.fromhex(tx_blob))

        result = await self._call("submit", {"tx_blob": tx_blob})

        engine_result = str(result.get("engine_result", ""))
        engine_result_message = str(result.get("engine_result_message", ""))
        if not engine_result.startswith(ACCEPTED_PREFIXES):
            logger.debug(f"Submission rejected: {engine_result}")
            raise TransactionFailedError(
                engine_result,
                engine_result_message,
                details={"engine_result_code": result.get("engine_result_code")},
            )

        tx_json = result.get("tx_json") or {}
        if tx_json.get("hash") and str(tx_json["hash"]).upper() != tx_hash:
            logger.warning(f"Node reported hash {tx_json['hash']} for blob hash {tx_hash}")

        logger.info(f"Submitted transaction {tx_hash}: {engine_result}")
        return TransactionResult(
            hash=tx_hash,
            status=TransactionStatus.PENDING,
            raw_fields=tx_json,
            engine_result=engine_result,
            engine_result_message=engine_result_message,
            ledger_index=result.get("ledger_index"),
            validated=bool(result.get("validated", False)),
        )

    async def get_transaction(self, tx_hash: str) -> TransactionResult:
        """
        Look up a transaction by hash.

        Raises:
            ValidationError: If the hash is malformed
            LedgerApiError: E.g. ``txnNotFound``
        """
        tx_hash = validate_transaction_hash(tx_hash)
        result = await self._call("tx", {"transaction": str(tx_hash), "binary": False})

        raw_fields = result.get("tx_json") or result
        meta = result.get("meta")
        engine_result = meta.get("TransactionResult", "") if isinstance(meta, dict) else ""
        validated = bool(result.get("validated", False))

        return TransactionResult(
            hash=str(result.get("hash") or raw_fields.get("hash") or tx_hash),
            status=_status_for(validated, engine_result),
            raw_fields=raw_fields,
            engine_result=engine_result,
            ledger_index=result.get("ledger_index"),
            validated=validated,
        )


__all__ = [
    "ClientConfig",
    "XrplClient",
    "TESTNET_ENDPOINT",
    "MAINNET_ENDPOINT",
]
