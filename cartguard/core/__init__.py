"""Core Layer: pure domain logic, no IO, no async, no framework imports.

Invariants:
    - No module in core/ imports from services/, schemas/, api/, or infrastructure/
    - All functions are deterministic given their inputs and an explicit now/as_of

Design Decisions:
    - Functional core separated from imperative shell (impureim sandwich)
"""
