"""
CLI interface for the GS1 sensor decoder.

Usage:
    python -m gs1_decoder "<barcode text>" [options]

Options:
    --profile {fixed,generic}   Serial number profile (default: fixed)
    --json                      Output as JSON
    -v, --verbose               Log to stderr (-vv for debug)
"""

import argparse
import json
import logging
import sys
from typing import Optional

import structlog

from .core.ai_catalog import SerialProfile, definition_for
from .core.decoder import DecodedRecord, DecodeFailure, DecodeResult, GS1Decoder
from .formatters.json_formatter import failure_to_dict, record_to_dict
from .log_config import configure_logging

logger = structlog.wrap_logger(logging.getLogger("gs1_decoder.cli"))


def _ai_heading(ai: str, profile: SerialProfile) -> str:
    return f"  AI({ai}): {definition_for(ai, profile).title}"


def format_result(result: DecodeResult, profile: SerialProfile) -> str:
    """Format a decode result for display."""
    lines = [
        "=" * 60,
        "GS1 Decode Result",
        "=" * 60,
        f"Serial Profile: {profile.value}",
        "",
    ]

    if isinstance(result, DecodeFailure):
        lines.extend([
            f"Raw Input: {result.raw!r}",
            "",
            "Errors:",
            "-" * 40,
            f"  [{result.reason.value}] {result.message}",
        ])
        return '\n'.join(lines)

    lines.extend([
        "Fields:",
        "-" * 40,
        _ai_heading("01", profile),
        f"    Value: {result.product_code!r}",
        f"    Check Digit Valid: {result.gtin_check_digit_valid}",
        _ai_heading("17", profile),
        f"    Date: {result.expiry_date.isoformat()}",
        _ai_heading("21", profile),
        f"    Value: {result.serial_number!r}",
    ])
    if result.lot_number is not None:
        lines.extend([
            _ai_heading("10", profile),
            f"    Value: {result.lot_number!r}",
        ])

    return '\n'.join(lines)


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='gs1_decoder',
        description='Decode GS1 sensor barcodes'
    )

    parser.add_argument(
        'barcode',
        help='Barcode data to decode'
    )

    parser.add_argument(
        '--profile',
        choices=[p.value for p in SerialProfile],
        default=SerialProfile.FIXED.value,
        help='Serial number profile: fixed 12 characters or variable length'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Output result as JSON'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Log decoding steps to stderr (-vv for debug)'
    )

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    profile = SerialProfile(args.profile)
    result = GS1Decoder(profile).decode(args.barcode)

    if isinstance(result, DecodeFailure):
        logger.info("gs1_decode_failed", reason=result.reason.value, detail=result.message)
    else:
        logger.info("gs1_decoded", serial=result.serial_number)

    if args.json:
        if isinstance(result, DecodedRecord):
            output = record_to_dict(result, include_check_digit=True)
        else:
            output = failure_to_dict(result)
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        print(format_result(result, profile))

    return 0 if isinstance(result, DecodedRecord) else 1


if __name__ == '__main__':
    sys.exit(main())
