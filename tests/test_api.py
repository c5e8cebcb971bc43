"""Tests for the FastAPI endpoints."""

import logging

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from swapbridge import __version__
from swapbridge.api.app import create_app
from swapbridge.bridge.serialization import REFERRER
from swapbridge.config import get_settings
from swapbridge.web.controllers.bridge import get_aggregator

from conftest import NATIVE, USDT_BSC, make_transport, quote_route

TARGET = "0x6F7a8e3E1bA4B1a1b0A6D2D0e7B2C3b1e4A5D6C7"

ROUTE_BODY = {
    "src_token_address": NATIVE,
    "src_chain": "ETH",
    "src_amount": "0.01",
    "dst_token_address": USDT_BSC,
    "dst_chain": "BSC",
    "slippage_pct": 1,
}


@pytest.fixture
def upstream():
    """Mutable routing table for the mocked aggregator."""
    return {}


@pytest.fixture
def test_app(upstream, build_aggregator):
    """Create test application wired to a mocked aggregator."""
    app = create_app()
    app.dependency_overrides[get_aggregator] = lambda: build_aggregator(make_transport(upstream))
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app):
    """Create async test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_health_check(self, client):
        """Test basic health check."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "swapbridge"

    @pytest.mark.asyncio
    async def test_detailed_health_redacts_secrets(self, client):
        """Test detailed health check."""
        response = await client.get("/health/detailed")

        assert response.status_code == 200
        config = response.json()["config"]
        assert "environment" in config
        assert config["wallet"]["evm_private_key"] in ("***", "(not set)")

    @pytest.mark.asyncio
    async def test_health_reports_version(self, client):
        """Test that health reports the package version."""
        response = await client.get("/health")

        assert response.json()["version"] == __version__

    @pytest.mark.asyncio
    async def test_detailed_health_reports_aggregator(self, client):
        """Test that detailed health names the aggregator and wallet setup."""
        response = await client.get("/health/detailed")

        data = response.json()
        assert data["aggregator"]["url"] == get_settings().rubic_api_url
        assert data["aggregator"]["referrer"] == REFERRER
        assert set(data["wallets_configured"]) == {"evm", "solana", "utxo", "seed_phrase"}

    @pytest.mark.asyncio
    async def test_lifespan_logs_aggregator(self, test_app, caplog):
        """Test that startup logs the aggregator endpoint."""
        with caplog.at_level(logging.INFO, logger="swapbridge.api.app"):
            async with test_app.router.lifespan_context(test_app):
                pass

        assert get_settings().rubic_api_url in caplog.text

    def test_openapi_version(self, test_app):
        """Test that the OpenAPI schema carries the package version."""
        assert test_app.version == __version__


class TestBridgeEndpoints:
    """Tests for bridge endpoints."""

    @pytest.mark.asyncio
    async def test_chains(self, client, upstream):
        upstream["/info/chains"] = (200, [{"name": "ETH", "id": 1, "type": "EVM"}])

        response = await client.get("/api/v1/bridge/chains")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"][0]["chain_family"] == "account-based"

    @pytest.mark.asyncio
    async def test_best_quote(self, client, upstream):
        upstream["/routes/quoteBest"] = (200, quote_route())

        response = await client.post("/api/v1/bridge/quotes/best", json=ROUTE_BODY)

        assert response.status_code == 200
        data = response.json()
        assert data["data"]["quote_id"] == "quote-1"
        assert data["data"]["dst_amount_estimate"] == "18.5"
        assert "symbiosis" in data["text"]

    @pytest.mark.asyncio
    async def test_no_route_is_404(self, client, upstream):
        upstream["/routes/quoteBest"] = (200, b"")

        response = await client.post("/api/v1/bridge/quotes/best", json=ROUTE_BODY)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_upstream_error_is_502(self, client, upstream):
        upstream["/routes/quoteBest"] = (400, {"message": "Amount is too low"})

        response = await client.post("/api/v1/bridge/quotes/best", json=ROUTE_BODY)

        assert response.status_code == 502
        assert "Amount is too low" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_empty_quotes(self, client, upstream):
        upstream["/routes/quoteAll"] = (200, [])

        response = await client.post("/api/v1/bridge/quotes", json=ROUTE_BODY)

        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.json()["text"] == "No available routes found."

    @pytest.mark.asyncio
    async def test_slippage_validation(self, client):
        response = await client.post("/api/v1/bridge/quotes", json={**ROUTE_BODY, "slippage_pct": 75})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_invalid_amount_rejected(self, client):
        response = await client.post("/api/v1/bridge/quotes", json={**ROUTE_BODY, "src_amount": "abc"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_prepare_swap(self, client, upstream):
        upstream["/routes/swap"] = (200, {"transaction": {"to": TARGET, "data": "0x01", "value": "0"}})

        response = await client.post(
            "/api/v1/bridge/swaps/prepare", json={**ROUTE_BODY, "quote_id": "quote-1"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["to"] == TARGET
        assert data["chain_family"] == "account-based"

    @pytest.mark.asyncio
    async def test_prepare_swap_business_error(self, client, upstream):
        upstream["/routes/swap"] = (200, {"statusCode": 400, "message": "Quote expired"})

        response = await client.post(
            "/api/v1/bridge/swaps/prepare", json={**ROUTE_BODY, "quote_id": "quote-1"}
        )

        assert response.status_code == 422
        assert "Quote expired" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_prepare_swap_malformed(self, client, upstream):
        upstream["/routes/swap"] = (200, {"transaction": {"data": "0x01"}})

        response = await client.post(
            "/api/v1/bridge/swaps/prepare", json={**ROUTE_BODY, "quote_id": "quote-1"}
        )

        assert response.status_code == 502
        assert "'to'" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_status(self, client, upstream):
        upstream["/info/status"] = (200, {"status": "success", "dstTxHash": "0xdst"})

        response = await client.get("/api/v1/bridge/status/0xsrc")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["state"] == "success"
        assert data["is_terminal"] is True
        assert data["dst_tx_hash"] == "0xdst"
