"""Pytest configuration and fixtures."""

import json
import os
from typing import Callable, Optional

import httpx
import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"

from swapbridge.bridge.aggregator import BridgeAggregator
from swapbridge.bridge.client import RubicClient
from swapbridge.bridge.factory import create_bridge_aggregator
from swapbridge.config import Settings
from swapbridge.wallet.base import Credentials

# Well-known test key (Hardhat account #0), never holds real funds
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

NATIVE = "0x0000000000000000000000000000000000000000"
USDT_BSC = "0x55d398326f99059fF775485246999027B3197955"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def last_json(self) -> Optional[dict]:
        if not self.requests:
            return None
        return json.loads(self.requests[-1].content)


def make_transport(routes: dict) -> RecordingTransport:
    """Transport answering by path. Values are (status, json) or a callable."""

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        answer = routes.get(path)
        if answer is None:
            return httpx.Response(404, json={"message": f"no route for {path}"})
        if callable(answer):
            return answer(request)
        status, body = answer
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    return RecordingTransport(handler)


def quote_route(
    quote_id: str = "quote-1",
    provider: str = "symbiosis",
    amount: str = "18.5",
    min_amount: str = "18.3",
) -> dict:
    """A Rubic route object for 0.01 ETH -> USDT on BSC."""
    return {
        "id": quote_id,
        "providerType": provider,
        "swapType": "cross-chain",
        "estimate": {
            "destinationTokenAmount": amount,
            "destinationTokenMinAmount": min_amount,
            "destinationUsdAmount": 18.49,
            "durationInMinutes": 5,
            "priceImpact": 0.0012,
        },
        "fees": {
            "gasTokenFees": {
                "nativeToken": {"symbol": "ETH"},
                "provider": {"fixedAmount": "0.0004", "fixedUsdAmount": 1.2},
                "protocol": {"fixedAmount": "0"},
            },
            "percentFees": {"percent": 0.3},
        },
        "tokens": {
            "from": {
                "address": NATIVE,
                "blockchain": "ETH",
                "blockchainId": 1,
                "decimals": 18,
                "symbol": "ETH",
                "name": "Ethereum",
                "price": 1850,
                "amount": "0.01",
            },
            "to": {
                "address": USDT_BSC,
                "blockchain": "BSC",
                "blockchainId": 56,
                "decimals": 18,
                "symbol": "USDT",
                "name": "Tether USD",
                "price": 1,
            },
        },
        "routing": [
            {"provider": provider, "type": "cross-chain", "path": [{"symbol": "ETH"}, {"symbol": "USDT"}]},
        ],
        "warnings": [],
    }


@pytest.fixture
def credentials() -> Credentials:
    """Credentials with only an EVM private key configured."""
    return Credentials(evm_private_key=TEST_PRIVATE_KEY)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, eth_private_key=TEST_PRIVATE_KEY)


@pytest.fixture
def build_aggregator(settings) -> Callable[[RecordingTransport], BridgeAggregator]:
    """Build an aggregator backed by a mock transport."""

    def build(transport: RecordingTransport) -> BridgeAggregator:
        return create_bridge_aggregator(settings=settings, transport=transport)

    return build


@pytest.fixture
def build_client() -> Callable[[RecordingTransport], RubicClient]:
    def build(transport: RecordingTransport) -> RubicClient:
        return RubicClient(transport=transport)

    return build
