"""
GS1 Sensor Barcode Decoder

Decodes the concatenated, separator-less element strings printed on
diabetes-sensor packaging into a structured record.

The payload is read left to right with a single integer cursor:
- Fixed-length AIs (01, 11, 17 and 21 under the fixed profile) are read only
  when enough characters remain; a truncated field ends the scan.
- Variable-length AIs (10, and 21 under the generic profile) run up to the
  next recognisable AI or the end of the payload.
- Unknown AIs are skipped by scanning ahead to the next recognisable AI.

Failures are returned as values. Malformed input (mis-scans, partial frames,
non-GS1 symbols) is routine and never raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Union

from .ai_catalog import (
    AI_LENGTH,
    KNOWN_AIS,
    SerialProfile,
    definition_for,
)
from ..validators.validators import validate_date, validate_gtin

# One AI plus the shortest possible field
MIN_PAYLOAD_LENGTH = AI_LENGTH + 1

REQUIRED_FIELDS = ("product_code", "expiry_date", "serial_number")


class FailureReason(str, Enum):
    """Reason codes for a failed decode."""
    TOO_SHORT = "TooShort"
    INCOMPLETE_RECORD = "IncompleteRecord"


@dataclass(frozen=True)
class DecodedRecord:
    """
    Structured content of a sensor barcode.

    Attributes:
        product_code: 14-character GTIN (AI 01)
        expiry_date: Expiry date (AI 17)
        serial_number: Serial number (AI 21)
        lot_number: Batch/lot (AI 10), None when not printed
    """
    product_code: str
    expiry_date: date
    serial_number: str
    lot_number: Optional[str] = None

    @property
    def gtin_check_digit_valid(self) -> bool:
        """Whether the GTIN's Mod10 check digit is correct."""
        return validate_gtin(self.product_code).valid

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert to dictionary representation."""
        return {
            'product_code': self.product_code,
            'expiry_date': self.expiry_date.isoformat(),
            'serial_number': self.serial_number,
            'lot_number': self.lot_number,
        }


@dataclass(frozen=True)
class DecodeFailure:
    """
    A decode that produced no record.

    Attributes:
        reason: Failure reason code
        raw: The payload that was decoded
        message: Human-readable explanation
        missing: Required fields that were never extracted
    """
    reason: FailureReason
    raw: str
    message: str
    missing: List[str] = field(default_factory=list)


DecodeResult = Union[DecodedRecord, DecodeFailure]


class GS1Decoder:
    """
    Decoder for separator-less sensor barcodes.

    One serial profile is chosen per instance and applies to every payload
    it decodes.
    """

    def __init__(self, profile: Union[SerialProfile, str] = SerialProfile.FIXED):
        self.profile = SerialProfile(profile)

    def decode(self, raw: Optional[str]) -> DecodeResult:
        """
        Decode a raw barcode payload.

        Args:
            raw: Text payload from the scanner; None is treated as empty

        Returns:
            DecodedRecord on success, DecodeFailure otherwise
        """
        raw = raw or ""

        if len(raw) < MIN_PAYLOAD_LENGTH:
            return self._fail(
                FailureReason.TOO_SHORT,
                raw,
                f"Payload has {len(raw)} characters, need at least {MIN_PAYLOAD_LENGTH}",
            )

        fields = self._scan(raw)

        missing = [name for name in REQUIRED_FIELDS if fields.get(name) is None]
        if missing:
            return self._fail(
                FailureReason.INCOMPLETE_RECORD,
                raw,
                f"Missing required fields: {', '.join(missing)}",
                missing,
            )

        return DecodedRecord(
            product_code=fields["product_code"],
            expiry_date=fields["expiry_date"],
            serial_number=fields["serial_number"],
            lot_number=fields.get("lot_number"),
        )

    def _scan(self, raw: str) -> Dict[str, object]:
        """Walk the payload once and collect every extracted field."""
        fields: Dict[str, object] = {}
        pos = 0
        end = len(raw)

        while end - pos >= AI_LENGTH:
            ai = raw[pos:pos + AI_LENGTH]
            pos += AI_LENGTH
            defn = definition_for(ai, self.profile)

            if defn is None:
                next_ai = find_next_ai(raw, pos)
                if next_ai is None:
                    # trailing data with no recognisable AI
                    break
                pos = next_ai
                continue

            if defn.is_variable:
                field_end = find_next_ai(raw, pos)
                if field_end is None:
                    field_end = end
                value = raw[pos:field_end]
                pos = field_end
                if not value:
                    continue
            else:
                if end - pos < defn.fixed_length:
                    # truncated field ends the scan
                    break
                value = raw[pos:pos + defn.fixed_length]
                pos += defn.fixed_length

            if defn.field_name is None:
                continue

            if defn.date_format == "YYMMDD":
                result = validate_date(value)
                if not result.valid:
                    fields.pop(defn.field_name, None)
                    continue
                fields[defn.field_name] = result.meta['date']
            else:
                fields[defn.field_name] = value

        return fields

    def _fail(
        self,
        reason: FailureReason,
        raw: str,
        message: str,
        missing: Optional[List[str]] = None,
    ) -> DecodeFailure:
        return DecodeFailure(reason=reason, raw=raw, message=message, missing=missing or [])


def find_next_ai(raw: str, pos: int) -> Optional[int]:
    """
    Find the start of the next known AI after ``pos``.

    The search begins one character past ``pos``, so a field is never empty
    when another AI follows it.

    Returns:
        Index of the next known AI, or None if there is none
    """
    for index in range(pos + 1, len(raw) - AI_LENGTH + 1):
        if raw[index:index + AI_LENGTH] in KNOWN_AIS:
            return index
    return None


def decode(
    raw: Optional[str],
    profile: Union[SerialProfile, str] = SerialProfile.FIXED,
) -> DecodeResult:
    """
    Decode a sensor barcode payload.

    This is the main entry point for decoding.

    Args:
        raw: Raw barcode text (no separators)
        profile: Serial number profile, "fixed" (12 characters) or "generic"

    Returns:
        DecodedRecord or DecodeFailure

    Example:
        >>> record = decode("010001234567890117251231" "21123456789012")
        >>> record.serial_number
        '123456789012'
        >>> record.expiry_date
        datetime.date(2025, 12, 31)
    """
    return GS1Decoder(profile).decode(raw)
