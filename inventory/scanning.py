"""
Scan batch pipeline.

Payloads from a scanner are decoded and staged in a batch; the batch is
committed to storage in one go once the user has finished scanning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

import structlog

from gs1_decoder import DecodedRecord, DecodeFailure, GS1Decoder

from .models import Sensor
from .storage import SensorStorage

logger = structlog.wrap_logger(logging.getLogger(__name__))


class ScanStatus(str, Enum):
    EMPTY = "empty"          # nothing in view
    REJECTED = "rejected"    # not a usable sensor barcode
    DUPLICATE = "duplicate"  # serial already staged or stored
    STAGED = "staged"


@dataclass
class ScanOutcome:
    status: ScanStatus
    raw: str = ""
    record: Optional[DecodedRecord] = None
    failure: Optional[DecodeFailure] = None


class ScanBatch:
    """
    Sensors scanned in one session, not yet saved.

    Serial numbers are checked against both the batch and the storage, so a
    sensor held in front of the camera for several frames is staged once.
    """

    def __init__(
        self,
        storage: SensorStorage,
        decoder: Optional[GS1Decoder] = None,
        product_type: Optional[str] = None,
    ):
        self.storage = storage
        self.decoder = decoder or GS1Decoder()
        self.product_type = product_type
        self._pending: List[DecodedRecord] = []

    @property
    def pending(self) -> List[DecodedRecord]:
        return list(self._pending)

    def _is_duplicate(self, serial_number: str) -> bool:
        if any(r.serial_number == serial_number for r in self._pending):
            return True
        return self.storage.contains_serial(serial_number)

    def submit(self, raw: Optional[str]) -> ScanOutcome:
        if not raw or not raw.strip():
            return ScanOutcome(status=ScanStatus.EMPTY)

        result = self.decoder.decode(raw)
        if isinstance(result, DecodeFailure):
            return ScanOutcome(status=ScanStatus.REJECTED, raw=raw, failure=result)

        if self._is_duplicate(result.serial_number):
            logger.info("scan_duplicate", serial=result.serial_number)
            return ScanOutcome(status=ScanStatus.DUPLICATE, raw=raw, record=result)

        self._pending.append(result)
        logger.info("scan_staged", serial=result.serial_number, pending=len(self._pending))
        return ScanOutcome(status=ScanStatus.STAGED, raw=raw, record=result)

    def consume(self, scanner: Iterable[Optional[str]]) -> List[ScanOutcome]:
        """Feed every payload a scanner yields through submit()."""
        return [self.submit(raw) for raw in scanner]

    def discard(self) -> None:
        self._pending.clear()

    def commit(self) -> List[Sensor]:
        """
        Save staged sensors.

        Returns:
            Sensors that were actually added (duplicates stored meanwhile
            by someone else are skipped)
        """
        added = []
        for record in self._pending:
            result = self.storage.add_if_absent(record, product_type=self.product_type)
            if result.accepted:
                added.append(result.sensor)
        logger.info("scan_batch_committed", staged=len(self._pending), added=len(added))
        self._pending.clear()
        return added
