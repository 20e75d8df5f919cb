"""Canonical filter value record and the raw-value normalizer."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Union

from .definitions import Operator, Presence

Scalar = Union[str, int, float]


@dataclass(frozen=True)
class RangeBound:
    """Numeric bounds; either side may be open."""

    min: float | None = None
    max: float | None = None

    @property
    def is_open(self) -> bool:
        return self.min is None and self.max is None


@dataclass(frozen=True)
class NormalizedFilterValue:
    """What a handler receives: include/exclude sets, range, presence, operator."""

    include: tuple[Scalar, ...] = ()
    exclude: tuple[Scalar, ...] = ()
    range: RangeBound | None = None
    presence: Presence | None = None
    operator: Operator | None = None

    @property
    def effective_operator(self) -> Operator:
        return self.operator or Operator.and_

    def without_exclusions(self) -> NormalizedFilterValue:
        return NormalizedFilterValue(
            include=self.include,
            exclude=(),
            range=self.range,
            presence=self.presence,
            operator=self.operator,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "include": list(self.include),
            "exclude": list(self.exclude),
            "range": None if self.range is None else {"min": self.range.min, "max": self.range.max},
            "presence": self.presence.value if self.presence else None,
            "operator": self.operator.value if self.operator else None,
        }


def is_scalar(value: Any) -> bool:
    """str / int / float, excluding bool."""
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def _coerce_float(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def _unique_scalars(values: Any) -> tuple[Scalar, ...]:
    if not isinstance(values, (list, tuple)):
        return ()
    seen: set[tuple[type, Scalar]] = set()
    out: list[Scalar] = []
    for v in values:
        if not is_scalar(v) or (isinstance(v, float) and not math.isfinite(v)):
            continue
        # Keyed by type so 1 and 1.0 stay separate entries.
        key = (type(v), v)
        if key in seen:
            continue
        seen.add(key)
        out.append(v)
    return tuple(out)


def _enum_or_none(enum_cls: Any, raw: Any) -> Any:
    if not isinstance(raw, str):
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        return None


def normalize_filter_value(value: Any) -> NormalizedFilterValue:
    """Coerce a raw DSL value into a ``NormalizedFilterValue``.

    Scalars become a single include. Objects contribute ``include`` and
    ``exclude`` (string/numeric entries only), ``range`` (``min``/``max``,
    falling back to ``gte``/``lte``), ``presence`` and ``operator`` when they
    hold recognised values. Anything else normalizes to an empty value.
    """
    if is_scalar(value):
        return NormalizedFilterValue(include=_unique_scalars([value]))
    if not isinstance(value, dict):
        return NormalizedFilterValue()

    range_bound = None
    raw_range = value.get("range")
    if isinstance(raw_range, dict):
        low = raw_range.get("min", raw_range.get("gte"))
        high = raw_range.get("max", raw_range.get("lte"))
        range_bound = RangeBound(min=_coerce_float(low), max=_coerce_float(high))

    return NormalizedFilterValue(
        include=_unique_scalars(value.get("include")),
        exclude=_unique_scalars(value.get("exclude")),
        range=range_bound,
        presence=_enum_or_none(Presence, value.get("presence")),
        operator=_enum_or_none(Operator, value.get("operator")),
    )
