"""Tests for quote fetching and normalization."""

from decimal import Decimal

import pytest

from swapbridge.bridge.base import RouteKind, RouteRequest
from swapbridge.bridge.quotes import QuoteService, normalize_quote, normalize_quote_list
from swapbridge.errors import NoRouteAvailableError, QuoteProviderError
from swapbridge.wallet.address import create_resolvers
from swapbridge.wallet.base import Credentials

from conftest import NATIVE, TEST_ADDRESS, USDT_BSC, make_transport, quote_route


def eth_to_bsc(**overrides) -> RouteRequest:
    params = dict(
        src_token_address=NATIVE,
        src_chain="ETH",
        src_amount="1000000000000000000",
        dst_token_address=NATIVE,
        dst_chain="BSC",
        slippage_pct=1,
    )
    params.update(overrides)
    return RouteRequest(**params)


class TestQuoteListNormalization:
    """Tests for quoteAll body shapes."""

    def test_single_object_wrapped(self):
        """Test that a bare object with an id becomes a one-element list."""
        route = quote_route()
        assert normalize_quote_list(route) == [route]

    def test_list_unchanged(self):
        """Test that a list is returned as-is."""
        routes = [quote_route("a"), quote_route("b")]
        assert normalize_quote_list(routes) == routes

    @pytest.mark.parametrize("body", [[], None, {}])
    def test_empty_bodies(self, body):
        """Test that empty bodies give an empty list without error."""
        assert normalize_quote_list(body) == []

    def test_routes_envelope(self):
        """Test the {"routes": [...]} shape."""
        routes = [quote_route("a")]
        assert normalize_quote_list({"routes": routes, "failed": []}) == routes


class TestQuoteNormalization:
    """Tests for single route normalization."""

    def test_fields(self):
        """Test that a Rubic route maps onto Quote."""
        quote = normalize_quote(quote_route())

        assert quote.quote_id == "quote-1"
        assert quote.provider == "symbiosis"
        assert quote.route_kind == RouteKind.CROSS_CHAIN
        assert quote.src_amount == Decimal("0.01")
        assert quote.dst_amount_estimate == Decimal("18.5")
        assert quote.dst_amount_min == Decimal("18.3")
        assert quote.duration_minutes == 5
        assert quote.price_impact_pct == Decimal("0.12")
        assert quote.fee_breakdown.gas_fee_native == Decimal("0.0004")
        assert quote.fee_breakdown.gas_token_symbol == "ETH"
        assert quote.fee_breakdown.percent_fee == Decimal("0.3")
        assert quote.src_asset.symbol == "ETH"
        assert quote.dst_asset.symbol == "USDT"
        assert quote.routing_path[0].hop_assets == ["ETH", "USDT"]

    def test_provider_field_variant(self):
        """Test that "provider" is accepted instead of "providerType"."""
        route = quote_route()
        route["provider"] = route.pop("providerType")
        assert normalize_quote(route).provider == "symbiosis"

    def test_provider_from_routing(self):
        """Test provider fallback to the first routing step."""
        route = quote_route(provider="lifi")
        del route["providerType"]
        assert normalize_quote(route).provider == "lifi"

    def test_on_chain_route(self):
        """Test same-chain swap type."""
        route = quote_route()
        route["swapType"] = "on-chain"
        assert normalize_quote(route).route_kind == RouteKind.SAME_CHAIN

    def test_missing_optional_sections(self):
        """Test that a minimal route still normalizes."""
        quote = normalize_quote({"id": "x", "providerType": "rango"}, eth_to_bsc(src_amount="2"))

        assert quote.src_amount == Decimal("2")
        assert quote.dst_amount_estimate == Decimal("0")
        assert quote.duration_minutes is None
        assert quote.price_impact_pct is None
        assert quote.fee_breakdown.gas_fee_native == Decimal("0")

    def test_missing_id_raises(self):
        """Test that a failed route without id is not a quote."""
        with pytest.raises(NoRouteAvailableError):
            normalize_quote({"providerType": "rango", "error": "insufficient liquidity"})

    def test_quote_id_opaque(self):
        """Test that the quote id is kept byte-for-byte."""
        route = quote_route(quote_id="AbC-123_=/+")
        assert normalize_quote(route).quote_id == "AbC-123_=/+"


class TestQuoteService:
    """Tests for QuoteService against a mocked aggregator."""

    @pytest.mark.asyncio
    async def test_best_quote_end_to_end(self, build_client, credentials):
        """Test ETH -> BSC best quote."""
        transport = make_transport({"/routes/quoteBest": (200, quote_route())})
        service = QuoteService(build_client(transport), create_resolvers(credentials))

        quote = await service.get_best_quote(eth_to_bsc())

        assert quote.quote_id
        gas = Decimal(str(quote.fee_breakdown.gas_fee_native))
        assert gas >= 0

        sent = transport.last_json()
        assert transport.requests[-1].method == "POST"
        assert sent["srcTokenAmount"] == "1000000000000000000"
        assert sent["slippageTolerance"] == 0.01
        assert sent["walletAddress"] == TEST_ADDRESS

    @pytest.mark.asyncio
    async def test_best_quote_without_wallet(self, build_client):
        """Test that quotes work when no wallet can be resolved."""
        transport = make_transport({"/routes/quoteBest": (200, quote_route())})
        service = QuoteService(build_client(transport), create_resolvers(Credentials()))

        await service.get_best_quote(eth_to_bsc())

        assert "walletAddress" not in transport.last_json()

    @pytest.mark.asyncio
    async def test_best_quote_empty_body(self, build_client):
        """Test that an empty body means no route."""
        transport = make_transport({"/routes/quoteBest": (200, b"")})
        service = QuoteService(build_client(transport))

        with pytest.raises(NoRouteAvailableError):
            await service.get_best_quote(eth_to_bsc())

    @pytest.mark.asyncio
    async def test_best_quote_http_error(self, build_client):
        """Test that non-2xx becomes QuoteProviderError with the raw body."""
        transport = make_transport(
            {"/routes/quoteBest": (400, {"message": "Amount is too low", "code": 2001})}
        )
        service = QuoteService(build_client(transport))

        with pytest.raises(QuoteProviderError) as exc_info:
            await service.get_best_quote(eth_to_bsc())

        assert exc_info.value.status_code == 400
        assert "Amount is too low" in str(exc_info.value)
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_all_quotes_list(self, build_client):
        """Test that every route with an id is returned."""
        body = [quote_route("a"), {"providerType": "xy", "error": "failed"}, quote_route("b")]
        transport = make_transport({"/routes/quoteAll": (200, body)})
        service = QuoteService(build_client(transport))

        quotes = await service.get_all_quotes(eth_to_bsc())

        assert [q.quote_id for q in quotes] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_all_quotes_single_object(self, build_client):
        """Test a bare object answer."""
        transport = make_transport({"/routes/quoteAll": (200, quote_route("only"))})
        service = QuoteService(build_client(transport))

        quotes = await service.get_all_quotes(eth_to_bsc())

        assert len(quotes) == 1
        assert quotes[0].quote_id == "only"

    @pytest.mark.asyncio
    async def test_all_quotes_empty(self, build_client):
        """Test that [] is a valid empty result."""
        transport = make_transport({"/routes/quoteAll": (200, [])})
        service = QuoteService(build_client(transport))

        assert await service.get_all_quotes(eth_to_bsc()) == []

    @pytest.mark.asyncio
    async def test_supported_chains(self, build_client):
        """Test chain listing."""
        body = [
            {"name": "ETH", "id": 1, "type": "EVM", "providers": {"crossChain": ["symbiosis"], "onChain": []}},
            {"name": "SOLANA", "id": None, "type": "SOLANA", "testnet": False},
        ]
        transport = make_transport({"/info/chains": (200, body)})
        service = QuoteService(build_client(transport))

        chains = await service.get_supported_chains()

        assert [c.name for c in chains] == ["ETH", "SOLANA"]
        assert chains[0].cross_chain_providers == ["symbiosis"]
        assert chains[1].chain_family.value == "opaque-payload"
        assert transport.requests[-1].url.params["includeTestnets"] == "false"


class TestQuoteWalletHandling:
    """Tests for wallet handling and duration parsing in quotes."""

    @pytest.mark.parametrize(
        ("duration", "expected"),
        [(5, 5), ("2.5", 3), (2.1, 3), ("abc", None), (-1, None), (None, None)],
    )
    def test_duration_minutes(self, duration, expected):
        """Test that durations round up and invalid values become None."""
        route = quote_route()
        route["estimate"]["durationInMinutes"] = duration
        assert normalize_quote(route).duration_minutes == expected

    @pytest.mark.asyncio
    async def test_invalid_seed_phrase_quotes_without_wallet(self, build_client):
        """Test that a bad-checksum seed phrase does not break quoting."""
        transport = make_transport({"/routes/quoteBest": (200, quote_route())})
        credentials = Credentials(seed_phrase=" ".join(["abandon"] * 12))
        service = QuoteService(build_client(transport), create_resolvers(credentials))

        quote = await service.get_best_quote(eth_to_bsc())

        assert quote.quote_id == "quote-1"
        assert "walletAddress" not in transport.last_json()

    @pytest.mark.asyncio
    async def test_placeholder_wallet_dropped_without_resolvers(self, build_client):
        """Test that a placeholder wallet is not sent when no resolvers exist."""
        transport = make_transport({"/routes/quoteBest": (200, quote_route())})
        service = QuoteService(build_client(transport))
        request = eth_to_bsc(wallet_address="0x0000000000000000000000000000000000000001")

        await service.get_best_quote(request)

        assert "walletAddress" not in transport.last_json()

    @pytest.mark.asyncio
    async def test_real_wallet_kept_without_resolvers(self, build_client):
        """Test that an explicit real wallet is sent when no resolvers exist."""
        transport = make_transport({"/routes/quoteBest": (200, quote_route())})
        service = QuoteService(build_client(transport))

        await service.get_best_quote(eth_to_bsc(wallet_address=TEST_ADDRESS))

        assert transport.last_json()["walletAddress"] == TEST_ADDRESS
