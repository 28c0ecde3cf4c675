"""Tests for NoditClient with mocked HTTP."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from chaintax.domain.models.transaction import RawTransaction
from chaintax.exceptions import ExternalServiceError, ProviderUnavailableError, UnsupportedChainError
from chaintax.infra.nodit.client import BASE_URL, NoditClient


@pytest.fixture()
def mock_http():
    return AsyncMock()


@pytest.fixture()
def client(mock_http):
    return NoditClient(api_key="test_key", http_client=mock_http)


def _mock_response(data, status_code: int = 200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = data
    resp.text = str(data)
    return resp


def _sent(mock_http, call_index: int = 0) -> tuple[str, dict, dict]:
    call = mock_http.post.call_args_list[call_index]
    return call.args[0], call.kwargs["json"], call.kwargs["headers"]


class TestRequestShape:
    async def test_url_and_api_key_header(self, client, mock_http):
        mock_http.post.return_value = _mock_response({"items": []})
        await client.get_tokens_owned("polygon", "0xabc")

        url, payload, headers = _sent(mock_http)
        assert url == f"{BASE_URL}/polygon/mainnet/token/getTokensOwnedByAccount"
        assert payload == {"accountAddress": "0xabc", "withCount": False}
        assert headers["x-api-key"] == "test_key"

    async def test_unsupported_chain(self, client, mock_http):
        with pytest.raises(UnsupportedChainError, match="solana"):
            await client.get_tokens_owned("solana", "0xabc")
        mock_http.post.assert_not_called()

    async def test_network_override(self, client, mock_http):
        mock_http.post.return_value = _mock_response({"items": []})
        await client.get_transactions_by_account("ethereum", "0xabc", "2024-01-01", "2024-01-31", network="sepolia")

        url, _, _ = _sent(mock_http)
        assert url == f"{BASE_URL}/ethereum/sepolia/transaction/getTransactionsByAccount"


class TestTransactions:
    async def test_date_window_covers_whole_days(self, client, mock_http):
        mock_http.post.return_value = _mock_response({"items": [{"transactionHash": "0x1"}]})
        items = await client.get_transactions_by_account("ethereum", "0xabc", date(2024, 1, 1), date(2024, 1, 31))

        _, payload, _ = _sent(mock_http)
        assert payload["fromDate"] == "2024-01-01T00:00:00+00:00"
        assert payload["toDate"] == "2024-01-31T23:59:59+00:00"
        assert items == [{"transactionHash": "0x1"}]

    async def test_follows_cursor(self, client, mock_http):
        mock_http.post.side_effect = [
            _mock_response({"items": [{"transactionHash": "0x1"}], "cursor": "next-page"}),
            _mock_response({"items": [{"transactionHash": "0x2"}]}),
        ]
        items = await client.get_transactions_by_account("ethereum", "0xabc", "2024-01-01", "2024-01-31")

        assert [i["transactionHash"] for i in items] == ["0x1", "0x2"]
        _, second_payload, _ = _sent(mock_http, 1)
        assert second_payload["cursor"] == "next-page"

    async def test_fetch_transactions_returns_models(self, client, mock_http):
        mock_http.post.return_value = _mock_response({"items": [{
            "transactionHash": "0x1",
            "from": "0xa",
            "to": "0xb",
            "value": 1000,
            "blockTimestamp": 1700000000,
        }]})
        txs = await client.fetch_transactions("0xa", "ethereum", date(2024, 1, 1), date(2024, 1, 2))

        assert len(txs) == 1
        assert isinstance(txs[0], RawTransaction)
        assert txs[0].from_address == "0xa"
        assert txs[0].value == "1000"
        assert txs[0].block_timestamp == "1700000000"

    async def test_null_hash_tolerated(self, client, mock_http):
        mock_http.post.return_value = _mock_response({"items": [{"transactionHash": None, "value": "1"}]})
        txs = await client.fetch_transactions("0xa", "ethereum", date(2024, 1, 1), date(2024, 1, 2))
        assert txs[0].transaction_hash == ""

    async def test_malformed_row_is_external_error(self, client, mock_http):
        mock_http.post.return_value = _mock_response({"items": [{"transactionHash": "0x1", "tokenSymbol": {"x": 1}}]})
        with pytest.raises(ExternalServiceError, match="Malformed Nodit transaction"):
            await client.fetch_transactions("0xa", "ethereum", date(2024, 1, 1), date(2024, 1, 2))


class TestPrices:
    async def test_positional_mapping(self, client, mock_http):
        mock_http.post.return_value = _mock_response([
            {"price": "1.5", "percentChangeFor24h": "-2.1", "updatedAt": "2024-05-01T00:00:00Z"},
            {"price": None},
        ])
        prices = await client.get_token_prices("ethereum", ["0xA", "0xB"])

        assert [p.contract_address for p in prices] == ["0xA", "0xB"]
        assert prices[0].price_usd == Decimal("1.5")
        assert prices[0].price_change_24h == Decimal("-2.1")
        assert prices[0].timestamp is not None
        assert prices[1].price_usd == Decimal(0)

    async def test_contract_field_wins_over_position(self, client, mock_http):
        mock_http.post.return_value = _mock_response([{"contract": {"address": "0xB"}, "price": "7"}])
        prices = await client.fetch_prices("ethereum", ["0xA", "0xB"])

        assert prices[0].contract_address == "0xB"
        assert prices[0].price_usd == Decimal("7")

    async def test_empty_contracts_no_request(self, client, mock_http):
        assert await client.get_token_prices("ethereum", []) == []
        mock_http.post.assert_not_called()

    @pytest.mark.parametrize("bad_price", ["NaN", "Infinity", "-inf", float("nan"), "abc"])
    async def test_unusable_price_dropped(self, client, mock_http, bad_price):
        mock_http.post.return_value = _mock_response({"items": [
            {"contract": {"address": "0xT"}, "price": bad_price},
            {"contract": {"address": "0xU"}, "price": "2"},
        ]})
        prices = await client.get_token_prices("ethereum", ["0xT", "0xU"])

        assert [p.contract_address for p in prices] == ["0xU"]

    async def test_non_finite_change_is_zero(self, client, mock_http):
        mock_http.post.return_value = _mock_response([{"price": "1", "percentChangeFor24h": "NaN"}])
        prices = await client.get_token_prices("ethereum", ["0xA"])
        assert prices[0].price_change_24h == Decimal(0)

    async def test_malformed_payload_is_external_error(self, client, mock_http):
        mock_http.post.return_value = _mock_response({"items": ["not-an-object"]})
        with pytest.raises(ExternalServiceError, match="Malformed"):
            await client.get_token_prices("ethereum", ["0xA"])


class TestOtherEndpoints:
    async def test_transfers_page_size(self, client, mock_http):
        mock_http.post.return_value = _mock_response({"items": [{"id": 1}]})
        assert await client.get_transfers("bsc", "0xabc", limit=10) == [{"id": 1}]

        _, payload, _ = _sent(mock_http)
        assert payload["rpp"] == 10

    async def test_token_holders(self, client, mock_http):
        mock_http.post.return_value = _mock_response({"items": [{"ownerAddress": "0xh", "balance": "99"}]})
        holders = await client.get_token_holders("ethereum", "0xToken")

        assert holders[0].address == "0xh"
        assert holders[0].balance == "99"

    async def test_token_metadata(self, client, mock_http):
        mock_http.post.return_value = _mock_response([{"symbol": "TKN"}])
        assert await client.get_token_metadata("ethereum", ["0xToken"]) == [{"symbol": "TKN"}]

    async def test_balance_changes_always_empty(self, client, mock_http):
        assert await client.get_balance_changes("ethereum", "0xabc") == []
        mock_http.post.assert_not_called()


class TestErrors:
    async def test_client_error_not_retried(self, client, mock_http):
        mock_http.post.return_value = _mock_response({"message": "bad address"}, status_code=400)
        with pytest.raises(ExternalServiceError, match="400"):
            await client.get_tokens_owned("ethereum", "bad")
        assert mock_http.post.call_count == 1

    async def test_server_error_retried_then_succeeds(self, client, mock_http):
        mock_http.post.side_effect = [
            _mock_response({}, status_code=503),
            _mock_response({"items": [{"id": 1}]}),
        ]
        assert await client.get_tokens_owned("ethereum", "0xabc") == [{"id": 1}]
        assert mock_http.post.call_count == 2

    async def test_transport_error_exhausts_retries(self, client, mock_http):
        mock_http.post.side_effect = httpx.ConnectError("boom")
        with pytest.raises(ProviderUnavailableError, match="boom"):
            await client.get_tokens_owned("ethereum", "0xabc")
        assert mock_http.post.call_count == 3
