"""
Placeholder substitution for clause text.

Replaces ``{{ tag }}`` placeholders with display values. Only the exact
placeholder name matches, so ``{{rent}}`` never touches ``{{rent_due_day}}``.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Mapping

PLACEHOLDER_RE = re.compile(r'\{\{\s*([A-Za-z_][\w.]*)\s*\}\}')

CURRENCY_KEYWORDS = ('amount', 'rent', 'deposit')


def _placeholder_pattern(key: str) -> re.Pattern:
    return re.compile(r'\{\{\s*' + re.escape(key) + r'\s*\}\}')


def format_date(value: date) -> str:
    """Long US date, e.g. January 15, 2024."""
    return f"{value:%B} {value.day}, {value.year}"


def format_currency(value: Any) -> str:
    amount = Decimal(str(value))
    if not amount.is_finite():
        return str(value)
    amount = amount.quantize(Decimal('0.01'))
    sign = '-' if amount < 0 else ''
    return f"{sign}${abs(amount):,.2f}"


def format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_value(key: str, value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return format_date(value)
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, (int, float, Decimal)):
        lowered = key.lower()
        if any(keyword in lowered for keyword in CURRENCY_KEYWORDS):
            return format_currency(value)
        return format_number(value)
    return str(value)


def interpolate_variables(content: str, variables: Mapping[str, Any]) -> str:
    result = content
    for key, value in variables.items():
        display_value = format_value(key, value)
        # Callable replacement so backslashes in values are not treated as group refs
        result = _placeholder_pattern(key).sub(lambda _match: display_value, result)
    return result


def find_placeholders(content: str) -> List[str]:
    """Placeholder names in order of first appearance."""
    seen: List[str] = []
    for match in PLACEHOLDER_RE.finditer(content or ''):
        name = match.group(1)
        if name not in seen:
            seen.append(name)
    return seen
