"""PhishGuard: heuristic URL trust scoring with a bounded scan history."""

__version__ = "1.0.0"
