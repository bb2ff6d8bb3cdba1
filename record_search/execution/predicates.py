"""
Predicate and coercion algebra for filter evaluation.

Equality is an ordered cascade of coercion strategies; the first strategy
that reports a match wins. Each strategy is a total function of two values.
"""

import math
import re
from typing import Any, Callable, Optional, Tuple, Union

from record_search.core.models import Filter, FilterOperator, Record
from record_search.schema.type_mappings import TypeMapper


_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

_TRUE_STRINGS = {"true", "1"}
_FALSE_STRINGS = {"false", "0"}


def as_text(value: Any) -> str:
    """String form used by text comparisons (booleans render lowercase)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_number(value: Any) -> Optional[Union[int, float]]:
    """
    Parse a value as a number.

    Integers stay exact ints so arbitrarily large values compare without
    float conversion. Infinities are kept; NaN is not a number.

    Args:
        value: Number, boolean or numeric string

    Returns:
        The numeric value, or None when the value is not numeric
    """
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not _NUMBER_PATTERN.match(text):
            return None
        number = float(text)
    else:
        return None
    if math.isnan(number):
        return None
    return number


def to_number(value: Any) -> Union[int, float]:
    """Numeric coercion for relational operators; unparsable values become 0."""
    number = parse_number(value)
    return 0.0 if number is None else number


def to_boolean(value: Any) -> Optional[bool]:
    """Map "true"/"1"/True to True and "false"/"0"/False to False, else None."""
    if isinstance(value, bool):
        return value
    text = as_text(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    return None


def exact_equal(left: Any, right: Any) -> bool:
    """Strict equality: booleans only equal booleans."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if TypeMapper.is_number(left) and TypeMapper.is_number(right):
        return left == right
    return type(left) is type(right) and left == right


def text_equal(left: Any, right: Any) -> bool:
    """Trimmed, case-insensitive string equality."""
    return as_text(left).strip().lower() == as_text(right).strip().lower()


def numeric_equal(left: Any, right: Any) -> bool:
    """Both sides parse as numbers and are numerically equal."""
    left_number = parse_number(left)
    right_number = parse_number(right)
    return left_number is not None and right_number is not None and left_number == right_number


def boolean_equal(left: Any, right: Any) -> bool:
    """Both sides coerce to the same boolean."""
    left_bool = to_boolean(left)
    right_bool = to_boolean(right)
    return left_bool is not None and right_bool is not None and left_bool == right_bool


EqualityStrategy = Callable[[Any, Any], bool]

# Evaluated in order; the first match short-circuits
EQUALITY_STRATEGIES: Tuple[EqualityStrategy, ...] = (
    exact_equal,
    text_equal,
    numeric_equal,
    boolean_equal,
)


def compare_equal(left: Any, right: Any) -> bool:
    """Loose equality used by the "=" and "!=" operators."""
    return any(strategy(left, right) for strategy in EQUALITY_STRATEGIES)


def matches(record: Record, condition: Filter) -> bool:
    """
    Evaluate one filter against one record.

    Missing or null field values satisfy only "!=".

    Args:
        record: Record to test
        condition: Filter to apply

    Returns:
        True if the record satisfies the filter
    """
    field_value = record.get(condition.field)
    filter_value = condition.value
    operator = condition.operator

    if field_value is None:
        return operator is FilterOperator.NE

    if operator is FilterOperator.EQ:
        return compare_equal(field_value, filter_value)
    if operator is FilterOperator.NE:
        return not compare_equal(field_value, filter_value)
    if operator is FilterOperator.GT:
        return to_number(field_value) > to_number(filter_value)
    if operator is FilterOperator.LT:
        return to_number(field_value) < to_number(filter_value)
    if operator is FilterOperator.GE:
        return to_number(field_value) >= to_number(filter_value)
    if operator is FilterOperator.LE:
        return to_number(field_value) <= to_number(filter_value)

    haystack = as_text(field_value).lower()
    needle = as_text(filter_value).lower()
    if operator is FilterOperator.CONTAINS:
        return needle in haystack
    if operator is FilterOperator.STARTS_WITH:
        return haystack.startswith(needle)
    return haystack.endswith(needle)


def compare_for_sort(left: Any, right: Any) -> int:
    """
    Three-way comparison of two non-null sort keys.

    Numbers compare numerically; anything else compares by string form.
    """
    if TypeMapper.is_number(left) and TypeMapper.is_number(right):
        return (left > right) - (left < right)
    left_text = as_text(left)
    right_text = as_text(right)
    return (left_text > right_text) - (left_text < right_text)
