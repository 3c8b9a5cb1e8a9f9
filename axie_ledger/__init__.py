"""Axie Ledger — token balance ledger with atomic axie purchases.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
