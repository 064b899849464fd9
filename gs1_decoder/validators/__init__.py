"""
Validation modules for the GS1 sensor decoder.
"""

from .validators import (
    validate_check_digit,
    validate_date,
    validate_numeric,
    validate_gtin,
    calculate_check_digit_mod10,
    is_numeric,
    ValidationResult,
    CENTURY_OFFSET,
    NUMERIC,
)

__all__ = [
    "validate_check_digit",
    "validate_date",
    "validate_numeric",
    "validate_gtin",
    "calculate_check_digit_mod10",
    "is_numeric",
    "ValidationResult",
    "CENTURY_OFFSET",
    "NUMERIC",
]
