"""Cross-chain bridge aggregation via Rubic."""

from swapbridge.bridge.aggregator import BridgeAggregator
from swapbridge.bridge.base import (
    ChainAsset,
    PreparedTransaction,
    Quote,
    RouteKind,
    RouteRequest,
    StatusState,
    SupportedChain,
    TransactionExecutor,
    TransferStatus,
)
from swapbridge.bridge.client import RubicClient
from swapbridge.bridge.extractors import TransactionExtractor, create_default_extractor
from swapbridge.bridge.factory import create_bridge_aggregator
from swapbridge.bridge.quotes import QuoteService
from swapbridge.bridge.status import StatusTracker
from swapbridge.bridge.swap import SwapPreparer

__all__ = [
    "BridgeAggregator",
    "ChainAsset",
    "PreparedTransaction",
    "Quote",
    "QuoteService",
    "RouteKind",
    "RouteRequest",
    "RubicClient",
    "StatusState",
    "StatusTracker",
    "SupportedChain",
    "SwapPreparer",
    "TransactionExecutor",
    "TransactionExtractor",
    "TransferStatus",
    "create_bridge_aggregator",
    "create_default_extractor",
]
