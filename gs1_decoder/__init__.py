"""
GS1 Sensor Barcode Decoder

Decodes the separator-less GS1 element strings printed on diabetes-sensor
packaging (GTIN, expiry date, serial number, optional lot) into a record
ready to be stored in the sensor inventory.

Based on GS1 General Specifications.
"""

import logging

from .core.decoder import (
    decode,
    GS1Decoder,
    DecodedRecord,
    DecodeFailure,
    DecodeResult,
    FailureReason,
)
from .core.ai_catalog import SerialProfile, KNOWN_AIS
from .validators.validators import (
    validate_check_digit,
    validate_date,
    validate_gtin,
)
from .formatters.json_formatter import (
    record_to_dict,
    failure_to_dict,
    decode_to_dict,
    decode_to_json,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    "decode",
    "GS1Decoder",
    "DecodedRecord",
    "DecodeFailure",
    "DecodeResult",
    "FailureReason",
    "SerialProfile",
    "KNOWN_AIS",
    "validate_check_digit",
    "validate_date",
    "validate_gtin",
    "record_to_dict",
    "failure_to_dict",
    "decode_to_dict",
    "decode_to_json",
]
