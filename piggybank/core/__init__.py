"""Core Layer — domain types, errors, retry policy, estimate parsing, prompt builders.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - Functions are pure and deterministic (logging aside)

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
