"""Filter semantics: executable rules for validation and compilation.

These constants and docstrings lock the semantics. Tests in
test_filter_semantics.py encode them as assertions to prevent drift.

RULES:
------

1. BUCKET PLACEMENT
   A filter may only stay in a bucket listed in its ``applies_to``.
   Misplaced filters move to the other bucket unless it already holds that
   filter; a value placed natively always wins.
   Location filters are exempt from the company-only and contact-only lists.

2. EXCLUSION
   ``exclude`` is honoured only when ``filtering.supports_exclusion`` is true.
   Otherwise it is cleared (validator and manager both enforce this).

3. MODES
   range  -> a ``range`` object is required.
   exists -> include/exclude are emptied; presence defaults to ``known``.

4. APPLY ORDER
   boolean(1) < range/date(2) < keyword(3) < text/direct(4) < other(10).
   Sorting is stable: equal priorities keep request order.

5. CLAUSE SHAPES
   keyword include -> one ``terms`` filter; exclude -> one ``terms`` must_not.
   text include    -> one ``match_phrase`` filter per value (and), or one
                      ``bool.should`` with minimum_should_match=1 (or).
   text exclude    -> one ``match_phrase`` must_not per value.
   presence known  -> ``exists`` filter; unknown -> ``exists`` must_not.
   range           -> ``range`` filter with only the bounds given.

6. ENTITY DETECTION
   Job title (or any contact-only filter) in the contact bucket -> contacts.
   Otherwise a non-empty company bucket -> companies. Default -> contacts.
"""

RULE_BUCKET_PLACEMENT = "placement: filter stays only in buckets it applies to; relocation is first-write-wins"
RULE_EXCLUSION_OPT_IN = "exclusion: exclude cleared unless supports_exclusion"
RULE_RANGE_REQUIRED = "mode range: range object required"
RULE_EXISTS_PRESENCE_ONLY = "mode exists: include/exclude emptied, presence defaults to known"
RULE_APPLY_ORDER = "order: boolean < range/date < keyword < text/direct < other, stable"
RULE_ENTITY_DETECTION = "entity: job title or contact-only filter -> contacts; company filters -> companies"

APPLY_PRIORITY: dict[str, int] = {
    "boolean": 1,
    "range": 2,
    "date": 2,
    "keyword": 3,
    "text": 4,
    "direct": 4,
}
DEFAULT_APPLY_PRIORITY = 10
