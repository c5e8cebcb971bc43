"""Cross-chain transfer status tracking.

Stateless: every call queries the aggregator and normalizes the answer.
"""

import logging
from typing import Any, Optional

from swapbridge.bridge.base import StatusState, TransferStatus
from swapbridge.bridge.client import RubicClient

logger = logging.getLogger(__name__)

STATUS_EXPLANATIONS: dict[StatusState, str] = {
    StatusState.PENDING: (
        "Your transaction is still in progress. This could take a few minutes to complete."
    ),
    StatusState.INDEXING: (
        "The transaction has been detected but is still being indexed. Please check back soon."
    ),
    StatusState.REVERT: (
        "The transaction on the destination chain failed and needs to be reverted. "
        "You should collect your funds."
    ),
    StatusState.FAILED: (
        "The transaction has failed. Your funds may be reverted automatically."
    ),
    StatusState.CLAIM: (
        "The transaction was successful! You can now claim your tokens on the destination chain."
    ),
    StatusState.SUCCESS: (
        "The transaction was completed successfully! "
        "Your tokens have been sent to the destination address."
    ),
    StatusState.ERROR: (
        "An error occurred during the transaction. Please check the error message for details."
    ),
}

UNKNOWN_STATUS_EXPLANATION = (
    "Unknown status. Please check the bridge provider's interface for more information."
)

_STATES_BY_TOKEN = {state.value: state for state in StatusState}


def parse_status_state(raw_status: Any) -> Optional[StatusState]:
    """Map a provider status token onto StatusState (None if unrecognized)."""
    if not isinstance(raw_status, str):
        return None
    return _STATES_BY_TOKEN.get(raw_status.strip().lower())


def explain_status(state: Optional[StatusState]) -> str:
    """Human-readable explanation for a state."""
    if state is None:
        return UNKNOWN_STATUS_EXPLANATION
    return STATUS_EXPLANATIONS[state]


def normalize_status(data: Any, src_tx_hash: str) -> TransferStatus:
    """Normalize a /info/status body."""
    if not isinstance(data, dict):
        data = {}

    raw_status = data.get("status")
    state = parse_status_state(raw_status)
    if state is None:
        logger.warning(f"Unrecognized transfer status {raw_status!r} for {src_tx_hash}")

    return TransferStatus(
        src_tx_hash=str(data.get("srcTxHash") or src_tx_hash),
        state=state,
        raw_status="" if raw_status is None else str(raw_status),
        explanation=explain_status(state),
        dst_tx_hash=data.get("dstTxHash") or None,
        bridge_name=data.get("bridgeName") or None,
        message=data.get("message") or None,
        error=data.get("error") or None,
    )


class StatusTracker:
    """Queries the cross-chain status of a transfer by source tx hash."""

    def __init__(self, client: RubicClient):
        self.client = client

    async def get_status(self, src_tx_hash: str) -> TransferStatus:
        """Get the current status of a transfer.

        Raises:
            QuoteProviderError: On a non-2xx response
        """
        data = await self.client.get_status(src_tx_hash)
        status = normalize_status(data, src_tx_hash)
        logger.debug(f"Status for {src_tx_hash}: {status.raw_status}")
        return status
