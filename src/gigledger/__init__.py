"""gigledger: marketplace ledger for clients, contractors, contracts, and jobs."""

__version__ = "0.1.0"
