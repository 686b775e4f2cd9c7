"""
Tests for the JSON-RPC client.

Method tests mock ``_call``; transport tests drive ``_call`` through a mocked
aiohttp session.
"""

import asyncio
import json
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import aiohttp
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
from helpers import DESTINATION, ISSUER, SENDER_ADDRESS, SENDER_SECRET, TX_HASH

from xrpl_client.api_client import MAINNET_ENDPOINT, TESTNET_ENDPOINT, ClientConfig, XrplClient
from xrpl_client.codec.hashes import transaction_id
from xrpl_client.enums import TransactionStatus
from xrpl_client.runtime.errors import (
    ErrorCode,
    ErrorHandler,
    InvalidFieldError,
    LedgerApiError,
    NetworkError,
    TimeoutError,
    TransactionFailedError,
    ValidationError,
)


def _mock_session(payload=None, status=200, json_error=None, post_error=None):
    response = Mock()
    response.status = status
    response.reason = "Service Unavailable" if status != 200 else "OK"
    response.json = AsyncMock(return_value=payload, side_effect=json_error)
    response.release = Mock()

    session = Mock()
    session.post = AsyncMock(return_value=response, side_effect=post_error)
    session.close = AsyncMock()
    return session, response


@pytest.fixture
def client():
    client = XrplClient(testnet=True)
    client._call = AsyncMock()
    return client


class TestConfig:
    """Client configuration."""

    def test_defaults(self):
        config = ClientConfig(endpoint="http://localhost:5005")
        assert config.timeout == 30.0
        assert config.debug is False
        assert config.default_fee == "12"
        assert config.last_ledger_offset == 20

    def test_networks(self):
        assert XrplClient(testnet=True).endpoint == TESTNET_ENDPOINT
        assert XrplClient(testnet=False).endpoint == MAINNET_ENDPOINT
        assert XrplClient(testnet=False).is_testnet is False

    def test_explicit_config(self):
        config = ClientConfig.for_network(testnet=False, timeout=5.0)
        client = XrplClient(config=config)
        assert client.endpoint == MAINNET_ENDPOINT
        assert client.config.timeout == 5.0


class TestCall:
    """The JSON-RPC transport."""

    @pytest.mark.asyncio
    async def test_request_payload(self):
        session, response = _mock_session({"result": {"ledger_index": 5, "status": "success"}})
        client = XrplClient(session=session)

        result = await client._call("ledger", {"ledger_index": "validated"})

        assert result["ledger_index"] == 5
        args, kwargs = session.post.call_args
        assert args[0] == TESTNET_ENDPOINT
        assert kwargs["json"] == {"method": "ledger", "params": [{"ledger_index": "validated"}]}
        response.release.assert_called_once()

    @pytest.mark.asyncio
    async def test_empty_params(self):
        session, _ = _mock_session({"result": {"status": "success"}})
        await XrplClient(session=session)._call("server_info")
        assert session.post.call_args.kwargs["json"]["params"] == [{}]

    @pytest.mark.asyncio
    async def test_error_payload(self):
        session, _ = _mock_session({"result": {
            "error": "actNotFound",
            "error_code": 19,
            "error_message": "Account not found.",
            "status": "error",
        }})
        with pytest.raises(LedgerApiError) as excinfo:
            await XrplClient(session=session)._call("account_info", {"account": SENDER_ADDRESS})

        assert excinfo.value.error == "actNotFound"
        assert excinfo.value.message == "Account not found."
        assert excinfo.value.details["error_code"] == 19
        assert not ErrorHandler.is_retryable(excinfo.value)

    @pytest.mark.asyncio
    async def test_busy_node_is_retryable(self):
        session, _ = _mock_session({"result": {"error": "tooBusy", "status": "error"}})
        with pytest.raises(NetworkError) as excinfo:
            await XrplClient(session=session)._call("ledger")
        assert ErrorHandler.is_retryable(excinfo.value)

    @pytest.mark.asyncio
    async def test_http_error(self):
        session, response = _mock_session(status=503)
        with pytest.raises(NetworkError) as excinfo:
            await XrplClient(session=session)._call("ledger")
        assert excinfo.value.details["status"] == 503
        response.json.assert_not_awaited()
        response.release.assert_called_once()

    @pytest.mark.asyncio
    async def test_connection_error(self):
        session, _ = _mock_session(post_error=aiohttp.ClientConnectionError("refused"))
        with pytest.raises(NetworkError) as excinfo:
            await XrplClient(session=session)._call("ledger")
        assert isinstance(excinfo.value.cause, aiohttp.ClientConnectionError)
        assert ErrorHandler.is_retryable(excinfo.value)

    @pytest.mark.asyncio
    async def test_timeout(self):
        session, _ = _mock_session(post_error=asyncio.TimeoutError())
        with pytest.raises(TimeoutError) as excinfo:
            await XrplClient(session=session)._call("ledger")
        assert excinfo.value.code == ErrorCode.TIMEOUT
        assert ErrorHandler.is_retryable(excinfo.value)

    @pytest.mark.asyncio
    async def test_undecodable_body(self):
        session, _ = _mock_session(json_error=json.JSONDecodeError("Expecting value", "<html>", 0))
        with pytest.raises(NetworkError):
            await XrplClient(session=session)._call("ledger")

    @pytest.mark.asyncio
    async def test_non_object_body(self):
        session, _ = _mock_session(["not", "an", "object"])
        with pytest.raises(NetworkError):
            await XrplClient(session=session)._call("ledger")

    @pytest.mark.asyncio
    async def test_missing_result(self):
        session, _ = _mock_session({"id": 1})
        with pytest.raises(LedgerApiError) as excinfo:
            await XrplClient(session=session)._call("ledger")
        assert excinfo.value.error == "invalidResponse"


class TestSession:
    """Session ownership."""

    @pytest.mark.asyncio
    async def test_external_session_is_not_closed(self):
        session, _ = _mock_session()
        async with XrplClient(session=session):
            pass
        session.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_owned_session_is_closed(self):
        client = XrplClient()
        session = client._get_session()
        assert isinstance(session, aiohttp.ClientSession)
        assert client._get_session() is session

        await client.close()
        assert session.closed


class TestAccountQueries:
    """Account and ledger queries."""

    @pytest.mark.asyncio
    async def test_get_account(self, client):
        client._call.return_value = {
            "account_data": {"Account": SENDER_ADDRESS, "Sequence": 7, "Balance": "25000000",
                             "Flags": 0, "OwnerCount": 1},
            "ledger_index": 99,
            "validated": True,
        }

        account = await client.get_account(SENDER_ADDRESS)

        client._call.assert_awaited_once_with(
            "account_info", {"account": SENDER_ADDRESS, "ledger_index": "validated"}
        )
        assert account.sequence == 7
        assert account.balance == "25000000"
        assert account.owner_count == 1
        assert account.ledger_index == 99

    @pytest.mark.asyncio
    async def test_sequence_and_balance(self, client):
        client._call.return_value = {"account_data": {"Sequence": 3, "Balance": "10"}}
        assert await client.get_account_sequence(SENDER_ADDRESS) == 3
        assert await client.get_account_balance(SENDER_ADDRESS) == "10"

    @pytest.mark.asyncio
    async def test_malformed_account_data(self, client):
        client._call.return_value = {"account_data": {"Balance": "10"}}
        with pytest.raises(LedgerApiError) as excinfo:
            await client.get_account(SENDER_ADDRESS)
        assert excinfo.value.error == "invalidResponse"

        client._call.return_value = {}
        with pytest.raises(LedgerApiError):
            await client.get_account(SENDER_ADDRESS)

    @pytest.mark.asyncio
    async def test_invalid_address_makes_no_call(self, client):
        with pytest.raises(ValidationError):
            await client.get_account("not-an-address")
        client._call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_account_not_found_propagates(self, client):
        error = LedgerApiError("actNotFound", "Account not found.")
        client._call.side_effect = error
        with pytest.raises(LedgerApiError) as excinfo:
            await client.get_account(SENDER_ADDRESS)
        assert excinfo.value is error

    @pytest.mark.asyncio
    @pytest.mark.parametrize("result,expected", [
        ({"ledger_index": 1000}, 1000),
        ({"ledger": {"ledger_index": "1001"}}, 1001),
    ])
    async def test_get_ledger_index(self, client, result, expected):
        client._call.return_value = result
        assert await client.get_ledger_index() == expected
        client._call.assert_awaited_once_with("ledger", {"ledger_index": "validated"})

    @pytest.mark.asyncio
    async def test_get_ledger_index_malformed(self, client):
        client._call.return_value = {"ledger": {}}
        with pytest.raises(LedgerApiError):
            await client.get_ledger_index()

    @pytest.mark.asyncio
    async def test_get_trust_lines(self, client):
        client._call.return_value = {"lines": [
            {"account": ISSUER, "balance": "10", "currency": "USD", "limit": "1000",
             "limit_peer": "0", "quality_in": 0, "quality_out": 0, "no_ripple": True},
        ]}
        lines = await client.get_trust_lines(SENDER_ADDRESS)
        assert len(lines) == 1
        assert lines[0].account == ISSUER
        assert lines[0].no_ripple is True

    @pytest.mark.asyncio
    async def test_get_trust_lines_malformed(self, client):
        client._call.return_value = {"lines": [{"account": ISSUER}]}
        with pytest.raises(LedgerApiError):
            await client.get_trust_lines(SENDER_ADDRESS)


class TestSubmit:
    """Submission result mapping."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("engine_result", ["tesSUCCESS", "terQUEUED"])
    async def test_accepted(self, client, engine_result):
        client._call.return_value = {
            "engine_result": engine_result,
            "engine_result_code": 0,
            "engine_result_message": "ok",
            "tx_json": {"hash": TX_HASH, "TransactionType": "Payment"},
        }

        result = await client.submit("ABCD")

        client._call.assert_awaited_once_with("submit", {"tx_blob": "ABCD"})
        assert result.status == TransactionStatus.PENDING
        assert result.hash == transaction_id(bytes.fromhex("ABCD"))
        assert result.engine_result == engine_result
        assert result.transaction_type == "Payment"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("engine_result", [
        "tecUNFUNDED_PAYMENT", "temMALFORMED", "tefPAST_SEQ", "telINSUF_FEE_P",
    ])
    async def test_rejected(self, client, engine_result):
        client._call.return_value = {
            "engine_result": engine_result,
            "engine_result_code": 104,
            "engine_result_message": "Remote reason.",
        }

        with pytest.raises(TransactionFailedError) as excinfo:
            await client.submit("ABCD")

        assert excinfo.value.engine_result == engine_result
        assert excinfo.value.reason == "Remote reason."
        assert excinfo.value.details["engine_result_code"] == 104

    @pytest.mark.asyncio
    async def test_hash_computed_from_blob(self, client, signer, payment):
        signed = signer.sign(payment, SENDER_SECRET)
        client._call.return_value = {"engine_result": "tesSUCCESS"}

        result = await client.submit(signed)

        client._call.assert_awaited_once_with("submit", {"tx_blob": signed.tx_blob})
        assert result.hash == signed.hash == TX_HASH

    @pytest.mark.asyncio
    async def test_node_hash_is_ignored(self, client, signer, payment):
        signed = signer.sign(payment, SENDER_SECRET)
        client._call.return_value = {
            "engine_result": "tesSUCCESS",
            "tx_json": {"hash": "AB" * 32, "TransactionType": "Payment"},
        }

        result = await client.submit(signed)

        assert result.hash == TX_HASH
        assert result.raw_fields["hash"] == "AB" * 32

    @pytest.mark.asyncio
    @pytest.mark.parametrize("blob", ["", "zz", "ABC", "AB  CD", "ABCD\n "])
    async def test_blob_must_be_hex(self, client, blob):
        with pytest.raises(InvalidFieldError) as excinfo:
            await client.submit(blob)

        assert excinfo.value.field == "tx_blob"
        client._call.assert_not_awaited()


class TestGetTransaction:
    """Transaction lookup."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("validated,engine_result,status", [
        (True, "tesSUCCESS", TransactionStatus.VALIDATED),
        (True, "tecPATH_DRY", TransactionStatus.FAILED),
        (False, "tesSUCCESS", TransactionStatus.PENDING),
        (False, "", TransactionStatus.PENDING),
    ])
    async def test_status(self, client, validated, engine_result, status):
        result = {"hash": TX_HASH, "validated": validated, "TransactionType": "Payment"}
        if engine_result:
            result["meta"] = {"TransactionResult": engine_result}
        client._call.return_value = result

        tx = await client.get_transaction(TX_HASH)

        assert tx.status == status
        assert tx.engine_result == engine_result
        assert tx.raw_fields["TransactionType"] == "Payment"

    @pytest.mark.asyncio
    async def test_nested_tx_json(self, client):
        client._call.return_value = {
            "hash": TX_HASH,
            "validated": True,
            "ledger_index": 1234,
            "meta": {"TransactionResult": "tesSUCCESS"},
            "tx_json": {"TransactionType": "Payment", "Account": SENDER_ADDRESS, "Destination": DESTINATION},
        }

        tx = await client.get_transaction(TX_HASH.lower())

        client._call.assert_awaited_once_with("tx", {"transaction": TX_HASH, "binary": False})
        assert tx.hash == TX_HASH
        assert tx.ledger_index == 1234
        assert tx.raw_fields["Destination"] == DESTINATION

    @pytest.mark.asyncio
    async def test_invalid_hash(self, client):
        with pytest.raises(ValidationError):
            await client.get_transaction("1234")
        client._call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_found(self, client):
        client._call.side_effect = LedgerApiError("txnNotFound", "Transaction not found.")
        with pytest.raises(LedgerApiError) as excinfo:
            await client.get_transaction(TX_HASH)
        assert excinfo.value.error == "txnNotFound"
