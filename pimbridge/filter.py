"""
Builds store filter expressions from a contact search.

The store can only match values with a case-sensitive regular expression,
but contact searches are case-insensitive substring matches. The search string
is therefore rewritten one character at a time into a two-character class:

    "norm"  ->  ".*[nN][oO][rR][mM].*"

One REGEX match is built per backing identifier that the searched field paths
map to, and the matches are OR-ed together left to right:

    build_filter(["name"], "bob")
      -> ((title REGEX p OR firstName REGEX p) OR lastName REGEX p)

Functions:
    case_insensitive_pattern(raw): The "contains, ignoring case" pattern for a search string.
    build_filter(fields, raw_filter): The OR-combined expression, or None when nothing filters.
    uid_filter(uid): Equality match on the contact identity.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from pimbridge.mapping import lookup

from shared.log_config import get_logger
logger = get_logger(f"pimbridge.{__name__}")

REGEX = "REGEX"
EQUALS = "=="
OR = "OR"
AND = "AND"


@dataclass(frozen=True)
class FieldMatch:
    """A single-slot predicate: `field` compared with `value` using `operator`."""
    field: str
    operator: str
    value: str

    def matches(self, record) -> bool:
        values = record.backing_values(self.field)
        if self.operator == REGEX:
            try:
                pattern = re.compile(self.value)
            except re.error as e:
                logger.warning(f"Unusable filter pattern '{self.value}' on {self.field}: {e}")
                return False
            return any(pattern.search(v) for v in values)
        if self.operator == EQUALS:
            return self.value in values
        return False


@dataclass(frozen=True)
class BooleanExpression:
    """Two sub-expressions joined by OR or AND."""
    left: "FilterExpression"
    operator: str
    right: "FilterExpression"

    def matches(self, record) -> bool:
        if self.operator == OR:
            return self.left.matches(record) or self.right.matches(record)
        return self.left.matches(record) and self.right.matches(record)


FilterExpression = Union[FieldMatch, BooleanExpression]


def case_insensitive_pattern(raw: str) -> str:
    """
    Return a pattern matching any value that contains `raw`, ignoring case.

    Characters without case (digits, punctuation) still get a class, e.g. "1" -> "[11]".
    """
    classes = "".join(f"[{c.lower()}{c.upper()}]" for c in raw)
    return f".*{classes}.*"


def build_filter(fields: Optional[Iterable[str]], raw_filter: Optional[str]) -> Optional[FilterExpression]:
    """
    Build the store filter expression for a contact search.

    Args:
        fields (Optional[Iterable[str]]): Field paths to search, in caller order.
        raw_filter (Optional[str]): The search string.

    Returns:
        Optional[FilterExpression]: None if the search string is empty or no
        field path maps to a backing identifier.
    """
    if not raw_filter:
        return None

    pattern = case_insensitive_pattern(raw_filter)

    expression = None
    for path in fields or ():
        for identifier in lookup(path):
            match = FieldMatch(identifier, REGEX, pattern)
            expression = match if expression is None else BooleanExpression(expression, OR, match)

    if expression is None:
        logger.debug(f"No searchable backing fields for {fields}; filter '{raw_filter}' ignored.")
    return expression


def uid_filter(uid: str) -> FieldMatch:
    return FieldMatch("uid", EQUALS, uid)
