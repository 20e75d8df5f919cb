"""Tool registry for the filter MCP server.

Thin wrappers over QueryService / FilterManager: request shaping (page
limits), domain errors turned into JSON error payloads, response allowlists.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

from ..domain.errors import DslValidationError, FilterNotFoundError
from .auth import require_engine_scope
from .observability import record_skipped_filters, record_value_lookup, start_tool

# ---------------------------------------------------------------------------
# Response allowlists (field-level)
# ---------------------------------------------------------------------------
ALLOWED_FILTER_KEYS = frozenset({
    "id", "label", "group", "applies_to", "value_source", "type",
    "supports_exclusion", "mode", "searchable",
})
ALLOWED_SEARCH_PAGE_KEYS = frozenset({"data", "total", "current_page", "per_page", "last_page"})

ENGINE_ALLOWED_TOOLS = frozenset({
    "dsl_validate",
    "dsl_detect_entity",
    "query_compile",
    "filters_list",
    "filter_values",
    "contacts_search",
})


@lru_cache(maxsize=1)
def _get_query_service():
    from ..wiring import build_query_service
    return build_query_service()


def _shape_filter(definition: Any) -> dict[str, Any]:
    d = {
        "id": definition.id,
        "label": definition.label,
        "group": definition.group,
        "applies_to": sorted(e.value for e in definition.applies_to),
        "value_source": definition.value_source.value,
        "type": definition.type.value,
        "supports_exclusion": definition.supports_exclusion,
        "mode": definition.mode.value,
        "searchable": definition.search.enabled,
    }
    return {k: d[k] for k in ALLOWED_FILTER_KEYS if k in d}


def _shape_search_page(page: Any) -> dict[str, Any]:
    d = page.model_dump(mode="json")
    return {k: d[k] for k in ALLOWED_SEARCH_PAGE_KEYS if k in d}


def _clamp_window(page: int, per_page: int) -> tuple[int, int]:
    return max(1, page), max(1, min(100, per_page))


def register_engine_tools(mcp):
    """Register DSL validation, compilation, value listing and search tools."""

    @mcp.tool()
    def dsl_validate(dsl: dict[str, Any]) -> str:
        """Validate and normalize a filter DSL.

        Args:
            dsl: Object with ``contact`` and ``company`` buckets mapping filter ids to values

        Returns:
            JSON with valid, errors (ordered), normalized DSL
        """
        require_engine_scope()
        call = start_tool("dsl_validate")
        result = _get_query_service().validate(dsl)
        call.record_issues(result.issues)
        call.finish(valid=result.valid, error_count=len(result.issues))
        return json.dumps(result.to_dict(), indent=2)

    @mcp.tool()
    def dsl_detect_entity(dsl: dict[str, Any]) -> str:
        """Which index a DSL should search: 'contacts' or 'companies'."""
        require_engine_scope()
        call = start_tool("dsl_detect_entity")
        entity = _get_query_service().detect_entity(dsl)
        call.finish(entity=entity)
        return json.dumps({"entity": entity})

    @mcp.tool()
    def query_compile(dsl: dict[str, Any], strict: bool | None = None) -> str:
        """Compile a filter DSL into an Elasticsearch request body without running it.

        Args:
            dsl: Filter DSL with ``contact`` and ``company`` buckets
            strict: Reject the DSL on any validation error (default: server setting)

        Returns:
            JSON with entity, index, query, validation, skipped_filters; or error and errors
        """
        require_engine_scope()
        call = start_tool("query_compile")
        try:
            compiled = _get_query_service().compile(dsl, strict=strict)
        except DslValidationError as e:
            call.finish(error="dsl_invalid")
            return json.dumps({"error": str(e), "errors": e.errors})
        call.record_issues(compiled.validation.issues)
        record_skipped_filters(compiled.skipped_filters)
        call.finish(entity=compiled.entity, valid=compiled.validation.valid)
        return json.dumps(compiled.to_dict(), indent=2)

    @mcp.tool()
    def filters_list(entity: str | None = None) -> str:
        """List active filters, optionally only those applying to 'contact' or 'company'."""
        require_engine_scope()
        call = start_tool("filters_list")
        definitions = _get_query_service().manager.get_active_filters()
        if entity:
            definitions = [d for d in definitions if entity in {e.value for e in d.applies_to}]
        call.finish(count=len(definitions))
        return json.dumps({"filters": [_shape_filter(d) for d in definitions]}, indent=2)

    @mcp.tool()
    def filter_values(
        filter_id: str,
        search: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> str:
        """Selectable values for one filter (typeahead when ``search`` is given).

        Args:
            filter_id: Registry id of the filter
            search: Optional search text; results are not cached
            page: Page number (>= 1)
            per_page: Page size (1-100, default 10)

        Returns:
            JSON with data (id, name), total, current_page, per_page, last_page
        """
        require_engine_scope()
        call = start_tool("filter_values")
        page, per_page = _clamp_window(page, per_page)
        try:
            result = _get_query_service().manager.get_filter_values(filter_id, search, page, per_page)
        except FilterNotFoundError as e:
            record_value_lookup(filter_id, found=False)
            call.finish(error="not_found")
            return json.dumps({"error": str(e), "filter_id": filter_id})
        record_value_lookup(filter_id, found=True)
        call.finish(filter_id=filter_id, total=result.total)
        return json.dumps(result.model_dump(mode="json"), indent=2)

    @mcp.tool()
    def contacts_search(
        dsl: dict[str, Any],
        page: int = 1,
        per_page: int = 10,
        strict: bool | None = None,
    ) -> str:
        """Run a filter DSL against the contact or company index (whichever it targets).

        Args:
            dsl: Filter DSL with ``contact`` and ``company`` buckets
            page: Page number (>= 1)
            per_page: Page size (1-100, default 10)
            strict: Reject the DSL on any validation error

        Returns:
            JSON with data, total, current_page, per_page, last_page; or error
        """
        require_engine_scope()
        call = start_tool("contacts_search")
        page, per_page = _clamp_window(page, per_page)
        try:
            result = _get_query_service().search(dsl, page=page, per_page=per_page, strict=strict)
        except DslValidationError as e:
            call.finish(error="dsl_invalid")
            return json.dumps({"error": str(e), "errors": e.errors})
        except ValueError as e:
            call.finish(error="bad_request")
            return json.dumps({"error": str(e)})
        call.finish(total=result.total)
        return json.dumps(_shape_search_page(result), indent=2, default=str)
