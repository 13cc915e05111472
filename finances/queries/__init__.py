"""Query-by-example package."""

from finances.queries.example import ExampleMatcher, FieldMatch, MatchKind

__all__ = ["ExampleMatcher", "FieldMatch", "MatchKind"]
