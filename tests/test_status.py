"""Tests for transfer status tracking."""

import pytest

from swapbridge.bridge.base import StatusState
from swapbridge.bridge.client import RubicClient
from swapbridge.bridge.status import (
    STATUS_EXPLANATIONS,
    UNKNOWN_STATUS_EXPLANATION,
    StatusTracker,
    normalize_status,
    parse_status_state,
)
from swapbridge.errors import QuoteProviderError

from conftest import make_transport

SRC_HASH = "0x5c504ed432cb51138bcf09aa5e8a410dd4a1e204ef84bfed1be16dfba1b22060"
DST_HASH = "0x9f1d4b3e2a1c0b9a8d7e6f5a4b3c2d1e0f9a8b7c6d5e4f3a2b1c0d9e8f7a6b5c"


class TestStatusParsing:
    """Tests for status token mapping."""

    @pytest.mark.parametrize("state", list(StatusState))
    def test_every_state_has_explanation(self, state):
        assert STATUS_EXPLANATIONS[state]

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("pending", StatusState.PENDING),
            ("INDEXING", StatusState.INDEXING),
            (" success ", StatusState.SUCCESS),
            ("claim", StatusState.CLAIM),
            ("revert", StatusState.REVERT),
            ("failed", StatusState.FAILED),
            ("error", StatusState.ERROR),
        ],
    )
    def test_known_tokens(self, raw, expected):
        assert parse_status_state(raw) == expected

    @pytest.mark.parametrize("raw", ["foo", "", None, 42])
    def test_unknown_tokens(self, raw):
        assert parse_status_state(raw) is None

    def test_terminal_states(self):
        assert not StatusState.PENDING.is_terminal
        assert not StatusState.INDEXING.is_terminal
        assert StatusState.SUCCESS.is_terminal
        assert StatusState.CLAIM.is_success
        assert StatusState.REVERT.is_failure


class TestNormalizeStatus:
    """Tests for status body normalization."""

    def test_success(self):
        """Test that success is terminal with an explanation."""
        status = normalize_status(
            {"status": "success", "destinationTxHash": None, "dstTxHash": DST_HASH, "bridgeName": "symbiosis"},
            SRC_HASH,
        )

        assert status.state == StatusState.SUCCESS
        assert status.is_terminal
        assert status.explanation
        assert status.dst_tx_hash == DST_HASH
        assert status.bridge_name == "symbiosis"

    def test_unknown_status(self):
        """Test that an unknown token gets the catch-all explanation."""
        status = normalize_status({"status": "foo"}, SRC_HASH)

        assert status.state is None
        assert status.raw_status == "foo"
        assert status.explanation == UNKNOWN_STATUS_EXPLANATION
        assert not status.is_terminal

    def test_missing_body(self):
        """Test that an empty body does not raise."""
        status = normalize_status(None, SRC_HASH)

        assert status.state is None
        assert status.src_tx_hash == SRC_HASH
        assert status.raw_status == ""

    def test_error_fields(self):
        status = normalize_status({"status": "error", "error": "relayer timeout", "message": "retry"}, SRC_HASH)

        assert status.state == StatusState.ERROR
        assert status.error == "relayer timeout"
        assert status.message == "retry"


class TestStatusTracker:
    """Tests for StatusTracker against a mocked aggregator."""

    @pytest.mark.asyncio
    async def test_get_status(self):
        transport = make_transport({"/info/status": (200, {"status": "pending"})})
        tracker = StatusTracker(RubicClient(transport=transport))

        status = await tracker.get_status(SRC_HASH)

        assert status.state == StatusState.PENDING
        assert transport.requests[-1].url.params["srcTxHash"] == SRC_HASH

    @pytest.mark.asyncio
    async def test_idempotent(self):
        """Test that repeated polls without upstream change agree."""
        transport = make_transport({"/info/status": (200, {"status": "indexing"})})
        tracker = StatusTracker(RubicClient(transport=transport))

        first = await tracker.get_status(SRC_HASH)
        second = await tracker.get_status(SRC_HASH)

        assert first.state == second.state == StatusState.INDEXING
        assert first == second

    @pytest.mark.asyncio
    async def test_http_error(self):
        transport = make_transport({"/info/status": (404, {"message": "Transaction not found"})})
        tracker = StatusTracker(RubicClient(transport=transport))

        with pytest.raises(QuoteProviderError) as exc_info:
            await tracker.get_status(SRC_HASH)

        assert exc_info.value.status_code == 404
