"""
JSON Formatter for the GS1 sensor decoder

Provides clean JSON output with:
- Human-readable field names
- Date formatting (dd/mm/yyyy)
- A uniform error object when nothing could be decoded
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Union

from ..core.ai_catalog import SerialProfile
from ..core.decoder import DecodedRecord, DecodeFailure, decode


# AI Code to Human-Readable Name Mapping
AI_FIELD_NAMES = {
    "01": "GTIN Code",
    "17": "Expiry Date",
    "21": "Serial Number",
    "10": "Batch/Lot Number",
}


def record_to_dict(record: DecodedRecord, include_check_digit: bool = False) -> Dict[str, Any]:
    """
    Format a decoded record with human-readable keys.

    The lot number is only included when the barcode carried one.
    """
    expiry = record.expiry_date
    output: Dict[str, Any] = {
        AI_FIELD_NAMES["01"]: record.product_code,
        AI_FIELD_NAMES["17"]: f"{expiry.day:02d}/{expiry.month:02d}/{expiry.year:04d}",
        AI_FIELD_NAMES["21"]: record.serial_number,
    }
    if record.lot_number is not None:
        output[AI_FIELD_NAMES["10"]] = record.lot_number

    if include_check_digit:
        output["_check_digit_valid"] = record.gtin_check_digit_valid

    return output


def failure_to_dict(failure: DecodeFailure) -> Dict[str, Any]:
    """Format a decode failure as an error object."""
    output: Dict[str, Any] = {
        "error": failure.reason.value,
        "message": failure.message,
        "input": failure.raw,
    }
    if failure.missing:
        output["missing"] = list(failure.missing)
    return output


def decode_to_dict(
    barcode_data: Optional[str],
    profile: Union[SerialProfile, str] = SerialProfile.FIXED,
    include_check_digit: bool = False,
) -> Dict[str, Any]:
    """
    Decode a barcode and return a dictionary.

    Args:
        barcode_data: Raw barcode string (no separators)
        profile: Serial number profile
        include_check_digit: Add the GTIN check digit status (default: False)

    Returns:
        Dictionary with decoded fields, or an error object
    """
    result = decode(barcode_data, profile)
    if isinstance(result, DecodeFailure):
        return failure_to_dict(result)
    return record_to_dict(result, include_check_digit=include_check_digit)


def decode_to_json(
    barcode_data: Optional[str],
    profile: Union[SerialProfile, str] = SerialProfile.FIXED,
    include_check_digit: bool = False,
) -> str:
    """
    Decode a barcode and return clean JSON output.

    Example:
        >>> print(decode_to_json("0100012345678901172512312112345678901210LOT77"))
        {
          "GTIN Code": "00012345678901",
          "Expiry Date": "31/12/2025",
          "Serial Number": "123456789012",
          "Batch/Lot Number": "LOT77"
        }
    """
    output = decode_to_dict(
        barcode_data,
        profile=profile,
        include_check_digit=include_check_digit,
    )
    return json.dumps(output, ensure_ascii=False, indent=2)
