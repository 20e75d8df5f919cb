"""DslValidator: structural validation and bucket placement for filter DSL.

This is the guardrail in front of query compilation. It never raises: every
problem becomes a ``FilterIssue`` on the result, and a best-effort normalized
DSL is always returned so callers can choose strict rejection or proceed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .catalog import FilterCatalog
from .definitions import Entity, FilterMode, Presence
from .errors import (
    BucketPlacementError,
    ExclusionUnsupportedError,
    FilterIssue,
    RangeRequiredError,
    StructureError,
    UnknownFilterError,
)
from .values import is_scalar

_LOGGER = logging.getLogger("prospect_filters.validator")

CONTACTS = "contacts"
COMPANIES = "companies"

FILTER_KEY_ALIASES: dict[str, str] = {
    "title": "job_title",
    "department": "departments",
    "years_of_experience": "experience_years",
    "years_experience": "experience_years",
    "company": "company_name",
    "company_names": "company_name",
    "industries": "industry",
    "technology": "technologies",
    "employee_count": "company_size",
    "company_headcount": "company_size",
    "revenue": "annual_revenue",
    "company_keywords": "keywords",
    "location": "locations",
    "country": "countries",
    "state": "states",
    "city": "cities",
}

CONTACT_ONLY_FILTERS = frozenset({"job_title", "departments", "seniority", "experience_years"})

COMPANY_ONLY_FILTERS = frozenset({
    "company_name", "industry", "technologies", "company_size", "annual_revenue", "keywords",
})

# Both buckets may hold these with different meaning (person vs. HQ location).
LOCATION_FILTERS = frozenset({"locations", "countries", "states", "cities"})

ALLOWED_VALUE_KEYS = ("include", "exclude", "range", "presence", "operator")
ALLOWED_RANGE_KEYS = ("min", "max", "gte", "lte")
ALLOWED_PRESENCE = (Presence.known.value, Presence.unknown.value)

_OPPOSITE_ONLY = {
    Entity.contact: COMPANY_ONLY_FILTERS,
    Entity.company: CONTACT_ONLY_FILTERS,
}


class RangePolicy(str, Enum):
    """What to do with a range-mode filter that arrives without a range."""

    report = "report"   # keep the filter, record the error
    drop = "drop"       # record the error and remove the filter


def normalize_filter_key(key: str) -> str:
    """Lower-case, strip and resolve aliases to the canonical registry id."""
    key = str(key).strip().lower()
    return FILTER_KEY_ALIASES.get(key, key)


class ValidationResult:
    """Result of DSL validation."""

    def __init__(self, normalized: dict[str, dict[str, Any]] | None = None) -> None:
        self.valid = True
        self.issues: list[FilterIssue] = []
        self.normalized: dict[str, dict[str, Any]] = normalized or {"contact": {}, "company": {}}

    @property
    def errors(self) -> list[str]:
        return [str(issue) for issue in self.issues]

    def add_issue(self, issue: FilterIssue) -> ValidationResult:
        """Record an issue and return self for chaining."""
        self.issues.append(issue)
        self.valid = False
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON response."""
        return {
            "valid": self.valid,
            "errors": self.errors,
            "normalized": self.normalized,
        }


class DslValidator:
    """Validate and normalize a two-bucket filter DSL against a catalog."""

    def __init__(self, catalog: FilterCatalog, range_policy: RangePolicy = RangePolicy.report) -> None:
        self._catalog = catalog
        self._range_policy = range_policy

    def validate(self, dsl: Any) -> ValidationResult:
        result = ValidationResult()
        if not isinstance(dsl, Mapping):
            result.add_issue(StructureError("DSL must be an object with contact and company buckets"))
            dsl = {}

        placed = result.normalized
        for entity in (Entity.contact, Entity.company):
            bucket = dsl.get(entity.value)
            if bucket is None:
                continue
            if not isinstance(bucket, Mapping):
                result.add_issue(StructureError(
                    f"{entity.value.capitalize()} filters must be an object", bucket=entity.value,
                ))
                continue
            for key, value in bucket.items():
                self._place(entity, str(key), value, placed, result)

        for entity in (Entity.contact, Entity.company):
            for filter_id in list(placed[entity.value]):
                self._check_value(entity, filter_id, placed, result)

        for issue in result.issues:
            _LOGGER.info("dsl_violation", extra=issue.context())
        if not result.valid:
            _LOGGER.warning(
                "dsl_validation_failed",
                extra={"errors": result.errors, "error_count": len(result.issues)},
            )
        else:
            _LOGGER.debug("dsl_validation_passed", extra={"normalized_dsl": placed})
        return result

    # ------------------------------------------------------------------
    # Entity routing
    # ------------------------------------------------------------------

    def is_contact_only(self, key: str) -> bool:
        filter_id = normalize_filter_key(key)
        if filter_id in CONTACT_ONLY_FILTERS:
            return True
        definition = self._catalog.get(filter_id)
        return definition is not None and definition.applies_to == frozenset({Entity.contact})

    def is_company_only(self, key: str) -> bool:
        filter_id = normalize_filter_key(key)
        if filter_id in COMPANY_ONLY_FILTERS:
            return True
        definition = self._catalog.get(filter_id)
        return definition is not None and definition.applies_to == frozenset({Entity.company})

    def detect_entity(self, dsl: Any) -> str:
        """Pick the index to search, ``"contacts"`` or ``"companies"``, from filter content."""
        if not isinstance(dsl, Mapping):
            return CONTACTS
        contact = dsl.get("contact")
        company = dsl.get("company")
        contact = contact if isinstance(contact, Mapping) else {}
        company = company if isinstance(company, Mapping) else {}

        if any(normalize_filter_key(k) == "job_title" for k in contact):
            return CONTACTS
        if any(self.is_contact_only(str(k)) for k in contact):
            return CONTACTS
        if company:
            return COMPANIES
        return CONTACTS

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _home_bucket(self, entity: Entity, filter_id: str, applies_here: bool, applies_there: bool) -> Entity:
        if not applies_here:
            return entity.opposite
        if applies_there and filter_id not in LOCATION_FILTERS and filter_id in _OPPOSITE_ONLY[entity]:
            return entity.opposite
        return entity

    def _place(
        self,
        entity: Entity,
        key: str,
        value: Any,
        placed: dict[str, dict[str, Any]],
        result: ValidationResult,
    ) -> None:
        filter_id = normalize_filter_key(key)
        definition = self._catalog.get(filter_id)
        if definition is None:
            result.add_issue(UnknownFilterError(f"Unknown filter '{key}'", bucket=entity.value, filter_id=key))
            return

        if is_scalar(value):
            value = {"include": [value]}

        home = self._home_bucket(
            entity,
            filter_id,
            definition.applies_to_entity(entity),
            definition.applies_to_entity(entity.opposite),
        )
        if home is entity:
            placed[entity.value][filter_id] = value
            return

        if entity is Entity.company:
            message = (
                f"Filter '{key}' belongs in contact bucket, not company bucket "
                "(CRITICAL: job titles must be contact-level)"
            )
        else:
            message = f"Filter '{key}' belongs in company bucket, not contact bucket"
        result.add_issue(BucketPlacementError(message, bucket=entity.value, filter_id=filter_id))
        placed[home.value].setdefault(filter_id, value)

    def _check_value(
        self,
        entity: Entity,
        filter_id: str,
        placed: dict[str, dict[str, Any]],
        result: ValidationResult,
    ) -> None:
        bucket = entity.value
        label = f"{bucket}.{filter_id}"
        definition = self._catalog.get(filter_id)
        raw = placed[bucket][filter_id]
        structure_issues = self._structure_issues(label, raw, bucket, filter_id)
        value = dict(raw) if isinstance(raw, Mapping) else None

        if value is not None and value.get("exclude") and not definition.supports_exclusion:
            value["exclude"] = []
            result.add_issue(ExclusionUnsupportedError(
                f"Exclusion not supported for {label}", bucket=bucket, filter_id=filter_id,
            ))

        dropped = False
        if definition.mode is FilterMode.range and (value is None or "range" not in value):
            result.add_issue(RangeRequiredError(
                f"Range required for {label}", bucket=bucket, filter_id=filter_id,
            ))
            dropped = self._range_policy is RangePolicy.drop

        if definition.mode is FilterMode.exists:
            value = dict(value or {})
            value["presence"] = value.get("presence") or Presence.known.value
            value["include"] = []
            value["exclude"] = []

        for issue in structure_issues:
            result.add_issue(issue)

        if dropped:
            del placed[bucket][filter_id]
        elif value is not None:
            placed[bucket][filter_id] = value

    @staticmethod
    def _structure_issues(label: str, value: Any, bucket: str, filter_id: str) -> list[FilterIssue]:
        def issue(message: str) -> StructureError:
            return StructureError(message, bucket=bucket, filter_id=filter_id)

        if is_scalar(value):
            return []
        if not isinstance(value, Mapping):
            return [issue(f"{label} must be a scalar or an object")]

        issues: list[FilterIssue] = []
        for k in value:
            if k not in ALLOWED_VALUE_KEYS:
                issues.append(issue(f"Unknown key '{k}' in {label} filter"))

        if value.get("include") is not None and not isinstance(value["include"], list):
            issues.append(issue(f"{label}.include must be an array"))
        if value.get("exclude") is not None and not isinstance(value["exclude"], list):
            issues.append(issue(f"{label}.exclude must be an array"))

        if value.get("range") is not None:
            if not isinstance(value["range"], Mapping):
                issues.append(issue(f"{label}.range must be an object with min/max"))
            else:
                for rk in value["range"]:
                    if rk not in ALLOWED_RANGE_KEYS:
                        issues.append(issue(f"Invalid range key '{rk}' in {label}.range"))

        if value.get("presence") is not None and value["presence"] not in ALLOWED_PRESENCE:
            issues.append(issue(f"{label}.presence must be 'known' or 'unknown'"))
        return issues
