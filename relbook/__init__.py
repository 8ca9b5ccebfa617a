"""Release bookkeeping: version derivation and changelog aggregation."""

__version__ = "0.1.0"
