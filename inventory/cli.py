"""
Command-line interface for the sensor inventory.

Usage:
    sensor-stock scan "<barcode>" ["<barcode>" ...]
    sensor-stock list [--json]
    sensor-stock set-status <sensor id> <status>
    sensor-stock remove <sensor id>
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from gs1_decoder import GS1Decoder
from gs1_decoder.log_config import configure_logging

from .models import Sensor, SensorStatus
from .scanning import ScanBatch, ScanStatus
from .settings import load_settings
from .storage import SensorNotFound, SensorStorage
from .utils import expiry_status, format_ddmmyyyy


def _sensor_line(sensor: Sensor, near_months: int) -> str:
    return (
        f"{sensor.id}  {sensor.product_type}  Serial: {sensor.serial_number}  "
        f"Exp: {format_ddmmyyyy(sensor.expiry_date)} "
        f"({expiry_status(sensor.expiry_date, near_months)})  {sensor.status.value}"
    )


def cmd_scan(args, storage: SensorStorage, settings: dict) -> int:
    batch = ScanBatch(
        storage,
        decoder=GS1Decoder(settings["serial_profile"]),
        product_type=settings["product_type"],
    )
    failed = False
    for outcome in batch.consume(args.barcodes):
        if outcome.status == ScanStatus.STAGED:
            print(f"Staged serial {outcome.record.serial_number}")
        elif outcome.status == ScanStatus.DUPLICATE:
            print(f"Duplicate serial {outcome.record.serial_number}, skipped")
        elif outcome.status == ScanStatus.REJECTED:
            failed = True
            print(f"Could not decode {outcome.raw!r}: {outcome.failure.message}", file=sys.stderr)
        else:
            failed = True
            print("Empty scan, skipped", file=sys.stderr)

    added = batch.commit()
    print(f"Added {len(added)} sensor(s)")
    return 1 if failed else 0


def cmd_list(args, storage: SensorStorage, settings: dict) -> int:
    near_months = settings["near_expiry_months"]
    if args.json:
        docs = []
        for sensor in storage.list_sensors():
            doc = sensor.to_doc()
            doc.pop("_id", None)
            doc["expiry_status"] = expiry_status(sensor.expiry_date, near_months)
            docs.append(doc)
        print(json.dumps(docs, indent=2, ensure_ascii=False))
        return 0

    available = storage.available_sensors()
    notify = storage.notify_sensors()
    if not available and not notify:
        print("No sensors yet")
        return 0
    for sensor in available:
        print(_sensor_line(sensor, near_months))
    if notify:
        print("\nTo notify supplier:")
        for sensor in notify:
            print(_sensor_line(sensor, near_months))
    return 0


def cmd_set_status(args, storage: SensorStorage, settings: dict) -> int:
    try:
        sensor = storage.set_status(args.sensor_id, args.status)
    except SensorNotFound:
        print(f"No sensor with id {args.sensor_id}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(f"{sensor.serial_number}: {sensor.status.value}")
    return 0


def cmd_remove(args, storage: SensorStorage, settings: dict) -> int:
    if not storage.remove(args.sensor_id):
        print(f"No sensor with id {args.sensor_id}", file=sys.stderr)
        return 1
    print(f"Removed {args.sensor_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sensor-stock",
        description="Track diabetes sensors by scanning their GS1 barcodes",
    )
    parser.add_argument(
        "--backend",
        choices=["json", "mongodb"],
        default=None,
        help="Persistence backend (default: from SENSOR_STOCK_BACKEND)",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory of the JSON backend file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log to stderr (-vv for debug)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Decode barcodes and add the sensors")
    scan.add_argument("barcodes", nargs="+", help="Raw barcode payloads")
    scan.set_defaults(handler=cmd_scan)

    listing = sub.add_parser("list", help="List stored sensors")
    listing.add_argument("--json", action="store_true", help="Output as JSON")
    listing.set_defaults(handler=cmd_list)

    status = sub.add_parser("set-status", help="Change a sensor's status")
    status.add_argument("sensor_id")
    status.add_argument(
        "status",
        help="One of: " + ", ".join(s.name.lower() for s in SensorStatus),
    )
    status.set_defaults(handler=cmd_set_status)

    remove = sub.add_parser("remove", help="Remove a sensor (e.g. once used)")
    remove.add_argument("sensor_id")
    remove.set_defaults(handler=cmd_remove)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        settings = load_settings()
        storage = SensorStorage(backend=args.backend, data_dir=args.data_dir)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return args.handler(args, storage, settings)


if __name__ == "__main__":
    sys.exit(main())
