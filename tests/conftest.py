"""Root conftest: shared test configuration and catalog fixtures."""

import os

import pytest

# Keep test runs independent of any local .env
os.environ.setdefault("CARTGUARD_LOG_FORMAT", "text")
os.environ.setdefault("CARTGUARD_DEFAULT_EVIDENCE_TTL_DAYS", "365")


def _make_rule(rule_id: str, **overrides) -> dict:
    """Helper: a schema-valid rule catalog row."""
    rule = {
        "rule_id": rule_id,
        "jurisdiction": "EU",
        "channel": "All",
        "requirement_type": "legal",
        "trigger": "Equipment in scope is placed on the market",
        "required_evidence": ["EU declaration of conformity"],
        "required_evidence_keys": [],
        "validation_checks": ["Declaration exists"],
        "submission_metadata": {"path": "", "deadline": "", "enforcement_if_missed": ""},
        "source_url": "https://eur-lex.europa.eu/eli/dir/2014/35/oj",
        "source_type": "eurlex",
        "last_verified_at": "2026-02-23",
        "confidence": "high",
        "unknown_reason": "",
    }
    rule.update(overrides)
    return rule


def _make_applicability_entry(rule_id: str, conditions: list[str], **overrides) -> dict:
    """Helper: a schema-valid applicability catalog entry."""
    entry = {
        "rule_id": rule_id,
        "if": conditions,
        "then_applies": [],
        "then_not_applies": [],
        "source_url": "https://eur-lex.europa.eu/eli/dir/2014/53/oj",
        "confidence": "high",
        "last_verified_at": "2026-02-23",
    }
    entry.update(overrides)
    return entry


def _make_listing(**overrides) -> dict:
    """Helper: a non-radio mains electronics listing with no evidence."""
    listing = {
        "listing_id": "amz-de-100",
        "product_id": "sku-100",
        "product_version": "v1",
        "product_archetype": "non-radio mains electronics",
        "jurisdiction": "EU",
        "channel": "AmazonDE",
        "is_radio_equipment": False,
        "is_red_excluded": False,
        "is_lvd_annex_ii_excluded": False,
        "is_emc_equipment": True,
        "is_emc_relevant": True,
        "voltage_ac": 230,
        "evidence_documents": [],
    }
    listing.update(overrides)
    return listing


@pytest.fixture
def make_rule():
    return _make_rule


@pytest.fixture
def make_applicability_entry():
    return _make_applicability_entry


@pytest.fixture
def make_listing():
    return _make_listing
