"""Round settlement server: replay validation, lives ledger and payment reconciliation."""

__version__ = "0.3.0"
