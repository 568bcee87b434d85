"""Services Layer: parsing, evidence loading and orchestration around the pure core.

Invariants:
    - Services may import core/ and schemas/; core/ never imports services/
    - Schema problems are returned as ValidationResult data, not raised

Design Decisions:
    - One module per use case (evaluate listing, validate content, evidence commands)
"""
