"""CartGuard: launch-readiness compliance engine for e-commerce listings.

Invariants:
    - Package root holds only the version (import side-effects prohibited)

Design Decisions:
    - No star exports: callers import from cartguard.core / cartguard.services explicitly
"""

__version__ = "0.3.0"
