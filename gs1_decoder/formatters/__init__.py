"""
Output formatters for the GS1 sensor decoder.
"""

from .json_formatter import (
    record_to_dict,
    failure_to_dict,
    decode_to_dict,
    decode_to_json,
    AI_FIELD_NAMES,
)

__all__ = [
    "record_to_dict",
    "failure_to_dict",
    "decode_to_dict",
    "decode_to_json",
    "AI_FIELD_NAMES",
]
