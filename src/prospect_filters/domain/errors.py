"""Error taxonomy for DSL validation and filter lookup.

Validation problems are modelled as ``FilterIssue`` exceptions so they carry
structured context, but the validator collects them instead of raising.
Only ``FilterNotFoundError`` and ``DslValidationError`` are raised.
"""

from __future__ import annotations


class FilterDslError(Exception):
    """Base class for all filter DSL errors."""


class FilterIssue(FilterDslError):
    """A single validation finding on one DSL entry."""

    violation = "invalid"

    def __init__(self, message: str, *, bucket: str | None = None, filter_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.bucket = bucket
        self.filter_id = filter_id

    def __str__(self) -> str:
        return self.message

    def context(self) -> dict[str, str | None]:
        return {"bucket": self.bucket, "filter_id": self.filter_id, "violation": self.violation}


class UnknownFilterError(FilterIssue):
    """Filter id not present in the registry; entry dropped."""

    violation = "unknown_filter"


class BucketPlacementError(FilterIssue):
    """Filter found in the wrong entity bucket; relocated."""

    violation = "bucket_placement"


class StructureError(FilterIssue):
    """Malformed value object; entry kept as-is."""

    violation = "structure"


class ExclusionUnsupportedError(FilterIssue):
    """Exclusions sent to a filter that does not allow them; cleared."""

    violation = "exclusion_unsupported"


class RangeRequiredError(FilterIssue):
    """Range-mode filter submitted without a range."""

    violation = "range_required"


class FilterNotFoundError(FilterDslError, LookupError):
    """Raised when a caller addresses a filter id that does not exist."""

    def __init__(self, filter_id: str) -> None:
        super().__init__(f"Filter not found: {filter_id}")
        self.filter_id = filter_id


class DslValidationError(FilterDslError):
    """Raised by strict callers that reject any DSL with errors."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__(f"DSL validation failed with {len(errors)} error(s)")
        self.errors = list(errors)
