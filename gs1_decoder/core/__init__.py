"""
Core decoding modules for the GS1 sensor decoder.
"""

from .decoder import (
    decode,
    find_next_ai,
    GS1Decoder,
    DecodedRecord,
    DecodeFailure,
    DecodeResult,
    FailureReason,
)
from .ai_catalog import AIDefinition, AI_CATALOG, KNOWN_AIS, SerialProfile

__all__ = [
    "decode",
    "find_next_ai",
    "GS1Decoder",
    "DecodedRecord",
    "DecodeFailure",
    "DecodeResult",
    "FailureReason",
    "AIDefinition",
    "AI_CATALOG",
    "KNOWN_AIS",
    "SerialProfile",
]
