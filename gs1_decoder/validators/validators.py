"""
GS1 Validation Functions

Field-level checks used by the sensor barcode decoder:
- Check digit validation (Mod10 for GTIN)
- YYMMDD date decoding with a fixed 20xx century
- Numeric validation for fixed-length fields

Based on GS1 General Specifications.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, List, Dict, Any


@dataclass
class ValidationResult:
    """Result of a validation operation."""
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)


NUMERIC = frozenset('0123456789')

# All YYMMDD dates on sensor packaging are read as 20YY
CENTURY_OFFSET = 2000


def is_numeric(value: str) -> bool:
    """True for a non-empty string of ASCII digits only."""
    return bool(value) and all(c in NUMERIC for c in value)


def calculate_check_digit_mod10(digits: str) -> int:
    """
    Calculate GS1 Mod10 check digit.

    Algorithm (GS1 General Specifications):
    1. From right to left, alternate multipliers 3 and 1
    2. Sum all products
    3. Check digit = (10 - (sum mod 10)) mod 10

    Args:
        digits: Numeric string without check digit

    Returns:
        Calculated check digit (0-9)
    """
    if not is_numeric(digits):
        raise ValueError("Input must be a non-empty numeric string")

    total = 0
    for i, digit in enumerate(reversed(digits)):
        multiplier = 3 if i % 2 == 0 else 1
        total += int(digit) * multiplier

    return (10 - (total % 10)) % 10


def validate_check_digit(value: str) -> ValidationResult:
    """
    Validate the trailing GS1 check digit of a GTIN-style value.

    Args:
        value: The complete value including check digit

    Returns:
        ValidationResult with check digit status in meta
    """
    result = ValidationResult(valid=True)

    if not is_numeric(value):
        result.valid = False
        result.errors.append("Value must be numeric for check digit validation")
        return result

    if len(value) < 2:
        result.valid = False
        result.errors.append("Value too short for check digit validation")
        return result

    provided_check = int(value[-1])
    calculated_check = calculate_check_digit_mod10(value[:-1])

    result.meta['calculated_check_digit'] = calculated_check
    result.meta['provided_check_digit'] = provided_check
    result.meta['check_digit_valid'] = (provided_check == calculated_check)

    if provided_check != calculated_check:
        result.valid = False
        result.errors.append(
            f"Check digit mismatch: expected {calculated_check}, got {provided_check}"
        )

    return result


def validate_numeric(value: str, fixed_length: Optional[int] = None) -> ValidationResult:
    """
    Validate a numeric field, optionally of an exact length.
    """
    result = ValidationResult(valid=True)

    if not is_numeric(value):
        result.valid = False
        result.errors.append("Value contains non-numeric characters")
        return result

    if fixed_length is not None and len(value) != fixed_length:
        result.valid = False
        result.errors.append(f"Length must be exactly {fixed_length}, got {len(value)}")

    return result


def validate_gtin(value: str) -> ValidationResult:
    """
    Validate GTIN (AI 01).

    GTIN-14 format: N14 with check digit in position 14.
    """
    result = validate_numeric(value, fixed_length=14)

    if result.valid:
        check_result = validate_check_digit(value)
        result.valid = check_result.valid
        result.errors.extend(check_result.errors)
        result.meta.update(check_result.meta)

    return result


def validate_date(value: str) -> ValidationResult:
    """
    Decode a GS1 YYMMDD date.

    Each two-digit group must be numeric. The year is always 2000 + YY;
    there is no century pivot. Month and day are handed to ``datetime.date``
    unchecked, so an impossible calendar date (month 13, 30 February) is
    reported as invalid by the calendar rather than by a range check here.

    Args:
        value: Six-character date string

    Returns:
        ValidationResult with the ``date`` object in meta
    """
    result = ValidationResult(valid=True)

    if len(value) != 6:
        result.valid = False
        result.errors.append(f"YYMMDD date must be 6 digits, got {len(value)}")
        return result

    groups = (value[0:2], value[2:4], value[4:6])
    if not all(is_numeric(group) for group in groups):
        result.valid = False
        result.errors.append("Date must be numeric")
        return result

    yy, mm, dd = (int(group) for group in groups)
    year = CENTURY_OFFSET + yy

    try:
        parsed = date(year, mm, dd)
    except ValueError as e:
        result.valid = False
        result.errors.append(f"Date parsing error: {e}")
        return result

    result.meta['date'] = parsed

    return result
