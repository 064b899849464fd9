"""
Sensor inventory persistence (JSON file or MongoDB).
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import structlog
from pymongo import ASCENDING, MongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from gs1_decoder import DecodedRecord

from .models import DEFAULT_PRODUCT_TYPE, Sensor, SensorStatus

logger = structlog.wrap_logger(logging.getLogger(__name__))


BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.getenv("SENSOR_STOCK_DATA_DIR", str(BASE_DIR / "data")))
PERSISTENCE_BACKEND = os.getenv("SENSOR_STOCK_BACKEND", "")
MONGODB_URI = os.getenv("MONGODB_URI", "")
MONGODB_DB = os.getenv("MONGODB_DB", "T1DStock")

JSON_FILENAME = "sensors.json"

_client: Optional[MongoClient] = None


class SensorNotFound(LookupError):
    """No sensor with the given id."""


@dataclass
class AddResult:
    accepted: bool
    sensor: Sensor


def _get_client() -> MongoClient:
    global _client
    if _client is None:
        if not MONGODB_URI:
            raise ValueError("MONGODB_URI is required for MongoDB backend.")
        _client = MongoClient(MONGODB_URI)
    return _client


def _default_backend() -> str:
    if PERSISTENCE_BACKEND:
        return PERSISTENCE_BACKEND.strip().lower()
    if not MONGODB_URI:
        return "json"
    return "mongodb"


class SensorStorage:
    """
    Keyed list of sensors, deduplicated by serial number.

    The JSON backend re-reads the file on every call so that several
    processes (CLI runs) see each other's writes.
    """

    def __init__(
        self,
        backend: Optional[str] = None,
        data_dir: Optional[Union[str, Path]] = None,
        db: Any = None,
    ):
        self.backend = (backend or _default_backend()).strip().lower()
        if self.backend not in ("json", "mongodb"):
            raise ValueError(f"Unknown persistence backend: {self.backend!r}")
        self.json_path = Path(data_dir or DATA_DIR) / JSON_FILENAME
        self._db = db
        if self.backend == "mongodb":
            self._collection().create_index([("serial_number", ASCENDING)], unique=True)

    # -- backend plumbing -------------------------------------------------

    def _collection(self):
        db = self._db if self._db is not None else _get_client()[MONGODB_DB]
        return db.sensors

    def _json_load(self) -> Dict[str, Any]:
        if not self.json_path.exists():
            return {"sensors": []}
        with self.json_path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def _json_save(self, payload: Dict[str, Any]) -> None:
        self.json_path.parent.mkdir(parents=True, exist_ok=True)
        with self.json_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=True, indent=2)

    def _docs(self) -> List[Dict[str, Any]]:
        if self.backend == "json":
            return self._json_load().get("sensors", [])
        return list(self._collection().find())

    # -- queries ----------------------------------------------------------

    def check_connection(self) -> bool:
        if self.backend == "json":
            return True
        try:
            self._collection().database.command("ping")
            return True
        except PyMongoError:
            return False

    def list_sensors(self) -> List[Sensor]:
        sensors = [Sensor.from_doc(doc) for doc in self._docs()]
        return sorted(sensors, key=lambda s: (s.expiry_date, s.date_added))

    def available_sensors(self) -> List[Sensor]:
        return [s for s in self.list_sensors() if not s.needs_supplier_notice]

    def notify_sensors(self) -> List[Sensor]:
        """Lost or broken sensors the supplier should hear about."""
        return [s for s in self.list_sensors() if s.needs_supplier_notice]

    def get(self, sensor_id: str) -> Optional[Sensor]:
        if self.backend == "json":
            for doc in self._docs():
                if doc.get("id") == sensor_id:
                    return Sensor.from_doc(doc)
            return None
        doc = self._collection().find_one({"_id": sensor_id})
        return Sensor.from_doc(doc) if doc else None

    def find_by_serial(self, serial_number: str) -> Optional[Sensor]:
        if not serial_number:
            return None
        if self.backend == "json":
            for doc in self._docs():
                if doc.get("serial_number") == serial_number:
                    return Sensor.from_doc(doc)
            return None
        doc = self._collection().find_one({"serial_number": serial_number})
        return Sensor.from_doc(doc) if doc else None

    def contains_serial(self, serial_number: str) -> bool:
        return self.find_by_serial(serial_number) is not None

    # -- mutations --------------------------------------------------------

    def add_if_absent(
        self,
        record: DecodedRecord,
        product_type: Optional[str] = None,
    ) -> AddResult:
        """
        Store a decoded record unless its serial number is already known.

        Returns:
            AddResult; when rejected, ``sensor`` is the existing entry
        """
        existing = self.find_by_serial(record.serial_number)
        if existing is not None:
            logger.info("sensor_duplicate", serial=record.serial_number, sensor_id=existing.id)
            return AddResult(accepted=False, sensor=existing)

        sensor = Sensor(
            product_code=record.product_code,
            serial_number=record.serial_number,
            expiry_date=record.expiry_date,
            lot_number=record.lot_number,
            product_type=product_type or DEFAULT_PRODUCT_TYPE,
        )

        if self.backend == "json":
            payload = self._json_load()
            payload.setdefault("sensors", []).append(sensor.to_doc())
            self._json_save(payload)
        else:
            try:
                self._collection().insert_one(sensor.to_doc())
            except DuplicateKeyError:
                # Another writer stored the same serial since the lookup above
                existing = self.find_by_serial(record.serial_number)
                logger.info("sensor_duplicate", serial=record.serial_number)
                return AddResult(accepted=False, sensor=existing or sensor)

        logger.info("sensor_added", serial=sensor.serial_number, sensor_id=sensor.id)
        return AddResult(accepted=True, sensor=sensor)

    def set_status(self, sensor_id: str, status: Union[SensorStatus, str]) -> Sensor:
        if not isinstance(status, SensorStatus):
            status = SensorStatus.parse(status)

        if self.backend == "json":
            payload = self._json_load()
            for doc in payload.get("sensors", []):
                if doc.get("id") == sensor_id:
                    doc["status"] = status.value
                    self._json_save(payload)
                    logger.info("sensor_status_changed", sensor_id=sensor_id, status=status.value)
                    return Sensor.from_doc(doc)
            raise SensorNotFound(sensor_id)

        result = self._collection().update_one({"_id": sensor_id}, {"$set": {"status": status.value}})
        if result.matched_count == 0:
            raise SensorNotFound(sensor_id)
        logger.info("sensor_status_changed", sensor_id=sensor_id, status=status.value)
        return self.get(sensor_id)

    def remove(self, sensor_id: str) -> bool:
        if self.backend == "json":
            payload = self._json_load()
            sensors = payload.get("sensors", [])
            kept = [doc for doc in sensors if doc.get("id") != sensor_id]
            if len(kept) == len(sensors):
                return False
            payload["sensors"] = kept
            self._json_save(payload)
            removed = True
        else:
            removed = self._collection().delete_one({"_id": sensor_id}).deleted_count > 0

        if removed:
            logger.info("sensor_removed", sensor_id=sensor_id)
        return removed

    def mark_as_used(self, sensor_id: str) -> bool:
        """A used sensor leaves the inventory."""
        return self.remove(sensor_id)
