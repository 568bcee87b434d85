"""Pydantic Schemas: validation for every document entering the engine.

Invariants:
    - Schemas validate at system boundary (listings, catalogs, evidence, content)
    - Domain enums from core/ used for enum fields
    - Pydantic models satisfy core/ Protocols structurally; core never imports schemas

Design Decisions:
    - Failures are converted to ValidationIssue data by parsing.parse_payload,
      never propagated as exceptions
"""
