"""Core Layer — domain types, errors, validation and boundary protocols.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions here are pure; IO happens behind repository_protocols
"""
