"""Evidence Repositories: resolve document keys to Evidence values for the rule evaluator.

Invariants:
    - Lookups are case-insensitive on document_key; when several documents share
      a normalized key the LAST one in the listing wins
    - A document that cannot be decoded into a valid Evidence (empty history,
      bad TTL, blank verifier) is logged and reported as absent → "missing"
    - save_evidence on the embedded repository never persists (caller owns durability)

Design Decisions:
    - EmbeddedEvidenceRepository reads the listing payload itself: the default
      deployment has no evidence store
    - prefetch_evidence awaits an async repository up front, then hands the pure
      core a dict lookup (core functions are never async)
"""

import logging
from collections.abc import Iterable
from datetime import date

from cartguard.core.domain_types import normalize_document_key
from cartguard.core.errors import CartGuardError
from cartguard.core.evidence import Evidence
from cartguard.core.repository_protocols import AsyncEvidenceRepository, ListingLike
from cartguard.core.rule_evaluation import EvidenceLookup
from cartguard.services.evidence_codec import (
    DEFAULT_TTL_DAYS,
    LEGACY_SENTINEL_DATE,
    decode_evidence_document,
)
from cartguard.schemas.evidence import LegacyEvidenceDocument
from cartguard.schemas.listing import ListingInput

logger = logging.getLogger(__name__)


class EmbeddedEvidenceRepository:
    """Evidence repository backed by ListingInput.evidence_documents."""

    def __init__(
        self,
        default_ttl_days: int = DEFAULT_TTL_DAYS,
        legacy_sentinel_date: date = LEGACY_SENTINEL_DATE,
    ):
        self.default_ttl_days = default_ttl_days
        self.legacy_sentinel_date = legacy_sentinel_date

    def load_evidence(self, document_key: str, listing: ListingInput) -> Evidence | None:
        wanted = normalize_document_key(document_key)
        for document in reversed(listing.evidence_documents):
            if normalize_document_key(document.document_key) != wanted:
                continue
            return self._decode(document, listing)
        return None

    def save_evidence(self, evidence: Evidence, listing: ListingInput) -> None:
        logger.debug(
            "Embedded repository does not persist evidence",
            extra={"document_key": evidence.document_key, "listing_id": listing.listing_id},
        )

    def _decode(self, document, listing: ListingInput) -> Evidence | None:
        try:
            evidence = decode_evidence_document(
                document, self.default_ttl_days, self.legacy_sentinel_date,
            )
        except CartGuardError as exc:
            logger.warning(
                f"Discarding undecodable evidence: {exc.message}",
                extra={
                    "document_key": document.document_key,
                    "listing_id": listing.listing_id,
                    "error_code": exc.code,
                },
            )
            return None
        if isinstance(document, LegacyEvidenceDocument):
            logger.info(
                "Migrated legacy evidence document",
                extra={"document_key": document.document_key, "listing_id": listing.listing_id},
            )
        return evidence


def lookup_for(repository, listing: ListingLike) -> EvidenceLookup:
    """Bind a sync repository to one listing."""
    return lambda key: repository.load_evidence(key, listing)


async def prefetch_evidence(
    repository: AsyncEvidenceRepository,
    keys: Iterable[str],
    listing: ListingLike,
) -> EvidenceLookup:
    """Await every distinct key once; return a lookup over the results."""
    loaded: dict[str, Evidence | None] = {}
    for key in keys:
        normalized = normalize_document_key(key)
        if normalized not in loaded:
            loaded[normalized] = await repository.load_evidence(key, listing)
    return lambda key: loaded.get(normalize_document_key(key))
