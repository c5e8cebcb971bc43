"""Cross-chain bridge aggregation and swap preparation."""

__version__ = "0.1.0"
