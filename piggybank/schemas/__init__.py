"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Wire names for cost fields match the model contract (roomsPerNight, foodDaily)

Design Decisions:
    - Separate from core dataclasses: schemas are API contracts, core types are domain state
"""
