"""
Sensor inventory records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4


class SensorStatus(str, Enum):
    AVAILABLE = "Available"
    LOST = "Lost/Stolen"
    BROKEN = "Broken/Defective"

    @classmethod
    def parse(cls, value: str) -> "SensorStatus":
        """Accept either the display value ("Lost/Stolen") or the name ("lost")."""
        for status in cls:
            if value == status.value or value.upper() == status.name:
                return status
        raise ValueError(f"Unknown sensor status: {value!r}")


DEFAULT_PRODUCT_TYPE = "Dexcom G7"


def _utc_now() -> str:
    return datetime.utcnow().isoformat(timespec="seconds") + "Z"


@dataclass
class Sensor:
    product_code: str
    serial_number: str
    expiry_date: date
    lot_number: Optional[str] = None
    product_type: str = DEFAULT_PRODUCT_TYPE
    status: SensorStatus = SensorStatus.AVAILABLE
    id: str = field(default_factory=lambda: str(uuid4()))
    date_added: str = field(default_factory=_utc_now)

    @property
    def needs_supplier_notice(self) -> bool:
        return self.status != SensorStatus.AVAILABLE

    def to_doc(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "id": self.id,
            "product_type": self.product_type,
            "product_code": self.product_code,
            "serial_number": self.serial_number,
            "expiry_date": self.expiry_date.isoformat(),
            "lot_number": self.lot_number,
            "status": self.status.value,
            "date_added": self.date_added,
        }

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "Sensor":
        return cls(
            id=doc["id"],
            product_type=doc.get("product_type") or DEFAULT_PRODUCT_TYPE,
            product_code=doc.get("product_code") or "",
            serial_number=doc["serial_number"],
            expiry_date=date.fromisoformat(doc["expiry_date"]),
            lot_number=doc.get("lot_number"),
            status=SensorStatus(doc.get("status") or SensorStatus.AVAILABLE.value),
            date_added=doc.get("date_added") or "",
        )
