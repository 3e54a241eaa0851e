"""Atomic double-entry transfers over a relational ledger."""
