"""Validity predicate and aggregation primitives shared by every analyzer"""

import math
from typing import Any, Callable, Dict, Iterable, Optional, Union

FieldOrFunc = Union[str, Callable[[Dict[str, Any]], Any], None]


def is_number(value: Any) -> bool:
    """True for int/float values; booleans are not numbers here"""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid(value: Any) -> bool:
    """
    A value is valid unless it is missing, zero, blank or empty.

    - None -> invalid
    - numbers -> valid iff non-zero
    - strings -> valid iff non-blank after trimming
    - lists/tuples -> valid iff non-empty
    - anything else (bools, mappings, dates) -> valid
    """
    if value is None:
        return False
    if is_number(value):
        return value != 0
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return True


def number(value: Any) -> float:
    """Numeric value of a field, 0 for missing, non-numeric or NaN"""
    if is_number(value) and not math.isnan(value):
        return value
    return 0


def is_positive(value: Any) -> bool:
    return number(value) > 0


def count_valid(items: Iterable[Dict[str, Any]], field_or_predicate: FieldOrFunc = None) -> int:
    """
    Count items whose named field (or predicate result) is valid.

    Without a field, an item counts when any of its values is valid.
    """
    if not isinstance(items, (list, tuple)):
        return 0

    count = 0
    for item in items:
        if callable(field_or_predicate):
            matched = bool(field_or_predicate(item))
        elif isinstance(field_or_predicate, str):
            matched = is_valid(item.get(field_or_predicate))
        else:
            matched = any(is_valid(v) for v in item.values())
        if matched:
            count += 1
    return count


def sum_valid(items: Iterable[Dict[str, Any]], field_or_extractor: FieldOrFunc) -> float:
    """Sum a numeric field (or extractor result); zero, NaN and non-numbers add nothing"""
    if not isinstance(items, (list, tuple)):
        return 0

    total = 0
    for item in items:
        if callable(field_or_extractor):
            value = field_or_extractor(item)
        elif isinstance(field_or_extractor, str):
            value = item.get(field_or_extractor)
        else:
            return 0
        if is_number(value) and value != 0 and not math.isnan(value):
            total += value
    return total


def round_money(value: float) -> float:
    """Round a monetary amount to 2 decimals"""
    return round(float(value), 2)


def safe_average(total: float, count: int) -> float:
    return round_money(total / count) if count else 0


def validity_rate(valid: int, total: int) -> float:
    return round(valid / total * 100, 2) if total else 0


def resolve_balance(bank: Dict[str, Any], primary: str = "saldoActual", fallback: str = "capitalActual") -> float:
    """Current bank balance, preferring the primary field over the legacy one"""
    value: Optional[Any] = bank.get(primary)
    if number(value) != 0:
        return number(value)
    return number(bank.get(fallback))
