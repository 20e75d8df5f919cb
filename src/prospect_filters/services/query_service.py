"""QueryService: validate a DSL, pick the index and compile the search body.

Single entry points for callers (MCP tools, CLI): ``validate``, ``compile``
and ``search``. Filter semantics stay in the validator and the manager.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..config.runtime import RuntimeSettings
from ..domain.definitions import Entity
from ..domain.dsl_validator import CONTACTS, LOCATION_FILTERS, DslValidator, ValidationResult
from ..domain.errors import DslValidationError
from ..domain.query_builder import ElasticQueryBuilder
from ..handlers import QueryFactory
from ..models.pages import SearchPage
from .filter_manager import FilterManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledQuery:
    """A validated DSL turned into a request body for one index."""

    entity: str
    index: str
    builder: ElasticQueryBuilder
    validation: ValidationResult
    skipped_filters: tuple[str, ...] = ()

    @property
    def query(self) -> dict[str, Any]:
        return self.builder.to_dict()

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity,
            "index": self.index,
            "query": self.query,
            "validation": self.validation.to_dict(),
            "skipped_filters": list(self.skipped_filters),
        }


class QueryService:
    """Chains validation, entity detection and ordered filter application."""

    def __init__(
        self,
        manager: FilterManager,
        query_factory: QueryFactory | None = None,
        settings: RuntimeSettings | None = None,
    ) -> None:
        self._manager = manager
        self._settings = settings or RuntimeSettings()
        self._query_factory = query_factory or self._offline_query

    @property
    def manager(self) -> FilterManager:
        return self._manager

    def _offline_query(self, entity: Entity) -> ElasticQueryBuilder:
        return ElasticQueryBuilder(self.index_for(entity))

    def index_for(self, entity: Entity) -> str:
        if entity is Entity.contact:
            return self._settings.contact_index
        return self._settings.company_index

    def validator(self) -> DslValidator:
        return DslValidator(self._manager.catalog(), self._settings.range_policy)

    def validate(self, dsl: Any) -> ValidationResult:
        return self.validator().validate(dsl)

    def detect_entity(self, dsl: Any) -> str:
        return self.validator().detect_entity(dsl)

    def compile(self, dsl: Any, strict: bool | None = None) -> CompiledQuery:
        """Validate ``dsl`` and build the query for the detected entity.

        In strict mode any validation error raises DslValidationError;
        otherwise the normalized DSL is compiled best-effort.
        """
        strict = self._settings.strict_validation if strict is None else strict
        validator = self.validator()
        validation = validator.validate(dsl)
        if strict and not validation.valid:
            raise DslValidationError(validation.errors)

        normalized = validation.normalized
        target = validator.detect_entity(normalized)
        entity = Entity.contact if target == CONTACTS else Entity.company

        query = self._query_factory(entity)
        if query.index_name is None:
            query.index(self.index_for(entity))
        cross, skipped = self._split_cross_bucket(normalized.get(entity.opposite.value) or {}, entity)
        query = self._manager.apply_filters(query, normalized.get(entity.value) or {}, entity)
        query = self._manager.apply_filters(query, cross, entity)

        logger.debug(
            "query_compiled",
            extra={
                "entity": target,
                "index": query.index_name,
                "valid": validation.valid,
                "skipped_filters": skipped,
            },
        )
        return CompiledQuery(
            entity=target,
            index=query.index_name or self.index_for(entity),
            builder=query,
            validation=validation,
            skipped_filters=tuple(skipped),
        )

    def _split_cross_bucket(
        self,
        filters: dict[str, Any],
        entity: Entity,
    ) -> tuple[dict[str, Any], list[str]]:
        """Keep other-bucket filters that name their own field on ``entity``'s index.

        Location filters are never carried over: in the contact bucket they
        mean where the person is, in the company bucket where the company is.
        """
        kept: dict[str, Any] = {}
        skipped: list[str] = []
        for filter_id, value in filters.items():
            definition = self._manager.get_filter(filter_id)
            if (
                definition is None
                or filter_id in LOCATION_FILTERS
                or not definition.fields_by_entity.for_entity(entity)
            ):
                skipped.append(filter_id)
                continue
            kept[filter_id] = value
        if skipped:
            logger.warning(
                "cross_bucket_filter_skipped",
                extra={"entity": entity.value, "filter_ids": skipped},
            )
        return kept, skipped

    def search(
        self,
        dsl: Any,
        page: int = 1,
        per_page: int = 10,
        strict: bool | None = None,
    ) -> SearchPage:
        if page < 1:
            raise ValueError("page must be >= 1")
        if not 1 <= per_page <= self._settings.max_per_page:
            raise ValueError(f"per_page must be between 1 and {self._settings.max_per_page}")
        compiled = self.compile(dsl, strict=strict)
        return compiled.builder.paginate(page, per_page)
