"""Factory for building the bridge aggregator from settings."""

import logging
from typing import Optional

import httpx

from swapbridge.bridge.aggregator import BridgeAggregator
from swapbridge.bridge.client import RubicClient
from swapbridge.bridge.extractors import TransactionExtractor, create_default_extractor
from swapbridge.bridge.quotes import QuoteService
from swapbridge.bridge.status import StatusTracker
from swapbridge.bridge.swap import SwapPreparer
from swapbridge.config import Settings, get_settings
from swapbridge.wallet.address import create_resolvers
from swapbridge.wallet.base import Credentials

logger = logging.getLogger(__name__)


def create_bridge_aggregator(
    settings: Optional[Settings] = None,
    credentials: Optional[Credentials] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    extractor: Optional[TransactionExtractor] = None,
) -> BridgeAggregator:
    """Create a bridge aggregator.

    Args:
        settings: Settings to use (default: cached environment settings)
        credentials: Override the credentials derived from settings
        transport: Optional httpx transport for the aggregator client
        extractor: Override the transaction extractor

    Returns:
        Configured BridgeAggregator
    """
    settings = settings or get_settings()
    credentials = credentials or settings.get_credentials()

    client = RubicClient(
        base_url=settings.rubic_api_url,
        timeout=settings.http_timeout,
        transport=transport,
    )
    resolvers = create_resolvers(credentials)

    logger.info(f"Created bridge aggregator for {client.base_url}")
    return BridgeAggregator(
        quotes=QuoteService(client, resolvers),
        swaps=SwapPreparer(client, resolvers, extractor or create_default_extractor()),
        status=StatusTracker(client),
    )
