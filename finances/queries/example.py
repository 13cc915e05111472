"""
Query-by-Example Matching

A filter entry describes what to look for: every populated field must
match, unset fields match anything.

DESIGN DECISION: The matcher is an explicit list of (field, match kind)
pairs built once from the filter entry. No reflection over arbitrary
attributes. Storage adapters that cannot push the filter down to their
backend (in-memory, Google Sheets) apply it in Python.

Match kinds:
- CONTAINS_IGNORE_CASE: text fields, substring match ignoring case
- EQUALS: numbers, dates, enums
- SAME_USER: the owning user, compared by id only
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, NamedTuple

from finances.models.entry import Entry


class MatchKind(str, Enum):
    """How a single filter field is compared."""
    CONTAINS_IGNORE_CASE = "contains_ignore_case"
    EQUALS = "equals"
    SAME_USER = "same_user"


class FieldMatch(NamedTuple):
    """One populated field of the filter entry."""
    field: str
    kind: MatchKind
    expected: Any


# Fields considered by the matcher, in evaluation order
MATCHED_FIELDS: list[tuple[str, MatchKind]] = [
    ("id", MatchKind.EQUALS),
    ("description", MatchKind.CONTAINS_IGNORE_CASE),
    ("month", MatchKind.EQUALS),
    ("year", MatchKind.EQUALS),
    ("user", MatchKind.SAME_USER),
    ("value", MatchKind.EQUALS),
    ("registry_date", MatchKind.EQUALS),
    ("type", MatchKind.EQUALS),
    ("status", MatchKind.EQUALS),
]


def _is_unset(value: Any) -> bool:
    """None and numeric zero are treated as 'not filtered'."""
    if value is None:
        return True
    if isinstance(value, (int, Decimal)) and not isinstance(value, bool):
        return value == 0
    return False


class ExampleMatcher:
    """
    Matches entries against a filter entry.

    Usage:
        matcher = ExampleMatcher.from_entry(Entry(description="rent", year=2021))
        results = matcher.filter(all_entries)
    """

    def __init__(self, matches: list[FieldMatch]):
        self._matches = matches

    @classmethod
    def from_entry(cls, filter_entry: Entry) -> "ExampleMatcher":
        """Build the predicate list from the populated fields of the filter."""
        matches = []
        for field, kind in MATCHED_FIELDS:
            expected = getattr(filter_entry, field)
            if kind is MatchKind.SAME_USER:
                # A user reference without an id restricts nothing
                expected = expected.id if expected is not None else None
            if _is_unset(expected):
                continue
            matches.append(FieldMatch(field, kind, expected))
        return cls(matches)

    @property
    def matches(self) -> list[FieldMatch]:
        return list(self._matches)

    def describe(self) -> dict:
        """Filters as a plain dict (for logging)."""
        return {
            m.field: m.expected.value if isinstance(m.expected, Enum) else str(m.expected)
            for m in self._matches
        }

    def is_match(self, entry: Entry) -> bool:
        """True if the entry satisfies every populated field of the filter."""
        for match in self._matches:
            if match.kind is MatchKind.SAME_USER:
                if entry.user_id != match.expected:
                    return False
                continue

            actual = getattr(entry, match.field)
            if actual is None:
                return False

            if match.kind is MatchKind.CONTAINS_IGNORE_CASE:
                if str(match.expected).lower() not in str(actual).lower():
                    return False
            elif actual != match.expected:
                return False
        return True

    def filter(self, entries: Iterable[Entry]) -> list[Entry]:
        """Keep matching entries, preserving their order."""
        return [entry for entry in entries if self.is_match(entry)]
