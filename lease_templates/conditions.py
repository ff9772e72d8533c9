"""
Condition evaluation for conditional clause bindings

A binding carries a list of conditions of the form::

    {"field": "has_pets", "operator": "is_true", "value": true}

and is included in a generated lease only when every condition holds.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional, Union

from .choices import ConditionOperator
from .records import Condition

ConditionLike = Union[Condition, Mapping[str, Any]]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _to_number(value: Any) -> Optional[float]:
    """Read a comparison operand as a number, or None when it is not one."""
    if isinstance(value, bool):
        return float(value)
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(Decimal(text))
        except InvalidOperation:
            return None
    return None


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _strict_equals(left: Any, right: Any) -> bool:
    # Booleans only ever equal booleans; numbers compare across int/float.
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if _is_number(left) and _is_number(right):
        return left == right
    if type(left) is not type(right) and not (isinstance(left, str) and isinstance(right, str)):
        return False
    return left == right


def as_condition(condition: ConditionLike) -> Condition:
    if isinstance(condition, Condition):
        return condition
    return Condition.from_dict(condition)


def evaluate_condition(condition: ConditionLike, variables: Mapping[str, Any]) -> bool:
    condition = as_condition(condition)

    # A field missing from the map never satisfies a condition, including
    # not_equals and is_false. Present-but-None is a value like any other.
    if condition.field not in variables:
        return False

    value = variables[condition.field]
    operator = condition.operator

    if operator == ConditionOperator.EQUALS:
        return _strict_equals(value, condition.value)
    if operator == ConditionOperator.NOT_EQUALS:
        return not _strict_equals(value, condition.value)
    if operator == ConditionOperator.CONTAINS:
        return _as_text(condition.value).lower() in _as_text(value).lower()
    if operator in (ConditionOperator.GREATER_THAN, ConditionOperator.LESS_THAN):
        if not _is_number(value):
            return False
        operand = _to_number(condition.value)
        if operand is None:
            return False
        if operator == ConditionOperator.GREATER_THAN:
            return value > operand
        return value < operand
    if operator == ConditionOperator.IS_TRUE:
        return value is True
    if operator == ConditionOperator.IS_FALSE:
        return value is False

    raise ValueError(f"Unhandled condition operator: {operator!r}")


def should_include_clause(conditions: Iterable[ConditionLike], variables: Mapping[str, Any]) -> bool:
    """True when the condition list is empty or every condition holds."""
    return all(evaluate_condition(condition, variables) for condition in conditions or [])
