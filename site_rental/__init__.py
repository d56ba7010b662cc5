"""Website rental lifecycle and billing reconciliation."""

__version__ = "0.1.0"
