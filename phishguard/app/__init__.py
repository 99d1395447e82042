"""Scoring engine: normalizer, detectors and aggregator."""

from .scanner import scan_url, aggregate, classify

__all__ = ["scan_url", "aggregate", "classify"]
