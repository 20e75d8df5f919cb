"""Typed filter definitions loaded from the filter registry."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Entity(str, Enum):
    """Entity bucket / index a filter can target."""

    contact = "contact"
    company = "company"

    @property
    def opposite(self) -> Entity:
        return Entity.company if self is Entity.contact else Entity.contact


class ValueSource(str, Enum):
    """Where a filter's values come from; selects the handler."""

    elasticsearch = "elasticsearch"
    predefined = "predefined"
    direct = "direct"
    specialized = "specialized"


class FilterType(str, Enum):
    keyword = "keyword"
    text = "text"
    range = "range"
    date = "date"
    boolean = "boolean"
    direct = "direct"


class FilterMode(str, Enum):
    """How a filter value is interpreted."""

    term = "term"       # include / exclude membership
    range = "range"     # numeric bounds only
    exists = "exists"   # presence only


class Presence(str, Enum):
    known = "known"
    unknown = "unknown"
    any = "any"


class Operator(str, Enum):
    and_ = "and"
    or_ = "or"


class FieldsByEntity(BaseModel):
    """Ordered field names per entity index."""

    model_config = {"frozen": True}

    contact: tuple[str, ...] = Field(default=(), description="Fields on the contact index")
    company: tuple[str, ...] = Field(default=(), description="Fields on the company index")

    def for_entity(self, entity: Entity) -> tuple[str, ...]:
        return self.contact if entity is Entity.contact else self.company


class SearchConfig(BaseModel):
    """Typeahead settings for value suggestion."""

    model_config = {"frozen": True}

    enabled: bool = False
    suggest_fields: tuple[str, ...] = ()


class FilteringConfig(BaseModel):
    """Per-filter value policy."""

    model_config = {"frozen": True}

    supports_exclusion: bool = False
    mode: FilterMode = FilterMode.term


class FilterDefinition(BaseModel):
    """Immutable description of one filterable attribute."""

    model_config = {"frozen": True}

    id: str = Field(..., min_length=1, description="Unique filter key")
    label: str = Field(default="", description="Human readable name")
    group: str = Field(default="", description="UI group name")
    applies_to: frozenset[Entity] = Field(..., description="Buckets the filter may live in")
    value_source: ValueSource = Field(default=ValueSource.elasticsearch)
    type: FilterType = Field(default=FilterType.text)
    fields_by_entity: FieldsByEntity = Field(default_factory=FieldsByEntity)
    legacy_field: str | None = Field(default=None, description="Single-field fallback")
    search: SearchConfig = Field(default_factory=SearchConfig)
    filtering: FilteringConfig = Field(default_factory=FilteringConfig)
    sort_order: int = 0
    active: bool = True
    options: tuple[str, ...] = Field(default=(), description="Static values for predefined/specialized sources")

    @field_validator("applies_to")
    @classmethod
    def _applies_to_non_empty(cls, v: frozenset[Entity]) -> frozenset[Entity]:
        if not v:
            raise ValueError("applies_to must name at least one entity")
        return v

    @property
    def target_entity(self) -> Entity:
        """Entity whose index the filter is primarily defined against."""
        return Entity.company if Entity.company in self.applies_to else Entity.contact

    @property
    def supports_exclusion(self) -> bool:
        return self.filtering.supports_exclusion

    @property
    def mode(self) -> FilterMode:
        return self.filtering.mode

    def applies_to_entity(self, entity: Entity) -> bool:
        return entity in self.applies_to

    @classmethod
    def from_registry_entry(cls, entry: dict[str, Any]) -> FilterDefinition:
        """Build a definition from a raw registry entry.

        Registry entries use the wire names ``applies_to``, ``data_source``,
        ``fields``, ``search.suggest_fields`` and ``filtering``; unknown
        entity names in ``fields`` are ignored.
        """
        raw_fields = entry.get("fields") or {}
        search = entry.get("search") or {}
        filtering = entry.get("filtering") or {}
        return cls(
            id=entry["id"],
            label=entry.get("label", ""),
            group=entry.get("group", ""),
            applies_to=frozenset(Entity(e) for e in entry.get("applies_to") or []),
            value_source=ValueSource(entry.get("data_source", ValueSource.elasticsearch.value)),
            type=FilterType(entry.get("type", FilterType.text.value)),
            fields_by_entity=FieldsByEntity(
                contact=tuple(raw_fields.get("contact") or ()),
                company=tuple(raw_fields.get("company") or ()),
            ),
            legacy_field=entry.get("elasticsearch_field"),
            search=SearchConfig(
                enabled=bool(search.get("enabled", False)),
                suggest_fields=tuple(search.get("suggest_fields") or ()),
            ),
            filtering=FilteringConfig(
                supports_exclusion=bool(filtering.get("supports_exclusion", False)),
                mode=FilterMode(filtering.get("mode", FilterMode.term.value)),
            ),
            sort_order=int(entry.get("sort_order", 0)),
            active=bool(entry.get("active", True)),
            options=tuple(str(o) for o in entry.get("options") or ()),
        )
