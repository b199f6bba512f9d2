"""
Substring filtering for record queries.

A filter maps field names to optional matchers. Empty or missing matchers
impose no constraint; the remaining pairs are combined with OR, so
{"title": term, "description": term} finds records where either field
contains the term.
"""
from typing import Any, Dict, Iterable, Iterator, Optional


def _active_pairs(filters: Optional[Dict[str, Optional[str]]]) -> Dict[str, str]:
    if not filters:
        return {}
    return {field: str(value) for field, value in filters.items() if value is not None and value != ""}


def _contains(value: Any, matcher: str, case_sensitive: bool) -> bool:
    if value is None:
        return False
    text = str(value)
    if case_sensitive:
        return matcher in text
    return matcher.casefold() in text.casefold()


def matches(record: Dict[str, Any], filters: Optional[Dict[str, Optional[str]]], case_sensitive: bool = True) -> bool:
    """Return True if the record passes the filter."""
    pairs = _active_pairs(filters)
    if not pairs:
        return True
    return any(_contains(record.get(field), matcher, case_sensitive) for field, matcher in pairs.items())


def filter_records(
    records: Iterable[Dict[str, Any]],
    filters: Optional[Dict[str, Optional[str]]],
    case_sensitive: bool = True,
) -> Iterator[Dict[str, Any]]:
    """Yield the records that pass the filter, preserving order."""
    for record in records:
        if matches(record, filters, case_sensitive):
            yield record
