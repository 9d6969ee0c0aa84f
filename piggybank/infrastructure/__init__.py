"""Infrastructure Layer — external service clients, storage and cross-cutting concerns.

Invariants:
    - Infrastructure implements the Protocols declared in core/repository_protocols.py
    - All provider calls go through ResilientInvoker (retry/timeout/error mapping)

Design Decisions:
    - Resilient wrapper over a thin provider adapter (ADR: single responsibility)
"""
