"""Tests that lock filter semantics and prevent drift.

These tests encode the rules from domain.filter_semantics as executable assertions.
"""

from prospect_filters.domain.definitions import FilterType
from prospect_filters.domain.dsl_validator import COMPANIES, CONTACTS, DslValidator
from prospect_filters.domain.filter_semantics import (
    APPLY_PRIORITY,
    DEFAULT_APPLY_PRIORITY,
    RULE_APPLY_ORDER,
    RULE_BUCKET_PLACEMENT,
    RULE_ENTITY_DETECTION,
    RULE_EXCLUSION_OPT_IN,
    RULE_EXISTS_PRESENCE_ONLY,
    RULE_RANGE_REQUIRED,
)


class TestPlacementSemantics:
    """Placement: relocation never overwrites a value already in the target bucket."""

    def test_first_write_wins(self, catalog):
        result = DslValidator(catalog).validate({"contact": {"industry": "A", "industries": "B"}})
        assert result.normalized["company"]["industry"] == {"include": ["A"]}
        assert "first-write-wins" in RULE_BUCKET_PLACEMENT


class TestExclusionSemantics:
    def test_exclusion_is_opt_in(self, catalog):
        assert not catalog.get("experience_years").supports_exclusion
        assert catalog.get("job_title").supports_exclusion
        assert "supports_exclusion" in RULE_EXCLUSION_OPT_IN


class TestModeSemantics:
    def test_range_mode_requires_range(self, catalog):
        assert "range" in RULE_RANGE_REQUIRED
        result = DslValidator(catalog).validate({"contact": {"experience_years": {"include": ["5"]}}})
        assert result.errors == ["Range required for contact.experience_years"]
        ok = DslValidator(catalog).validate({"contact": {"experience_years": {"range": {"min": 5}}}})
        assert ok.valid is True

    def test_exists_mode_keeps_presence_only(self, catalog):
        assert "presence" in RULE_EXISTS_PRESENCE_ONLY
        result = DslValidator(catalog).validate({"contact": {"has_email": {"include": ["a"], "exclude": ["b"]}}})
        assert result.normalized["contact"]["has_email"] == {"include": [], "exclude": [], "presence": "known"}


class TestApplyOrderSemantics:
    """Order: boolean < range/date < keyword < text/direct < other."""

    def test_priority_table(self):
        assert APPLY_PRIORITY["boolean"] < APPLY_PRIORITY["range"] == APPLY_PRIORITY["date"]
        assert APPLY_PRIORITY["date"] < APPLY_PRIORITY["keyword"]
        assert APPLY_PRIORITY["keyword"] < APPLY_PRIORITY["text"] == APPLY_PRIORITY["direct"]
        assert max(APPLY_PRIORITY.values()) < DEFAULT_APPLY_PRIORITY
        assert "stable" in RULE_APPLY_ORDER

    def test_every_filter_type_is_ranked(self):
        assert {t.value for t in FilterType} <= set(APPLY_PRIORITY)


class TestEntityDetectionSemantics:
    def test_job_title_forces_contacts(self, catalog):
        assert "job title" in RULE_ENTITY_DETECTION
        validator = DslValidator(catalog)
        dsl = {"contact": {"title": "CTO"}, "company": {"industry": "Software", "company_size": "11-50"}}
        assert validator.detect_entity(dsl) == CONTACTS
        del dsl["contact"]
        assert validator.detect_entity(dsl) == COMPANIES
