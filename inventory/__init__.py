"""
Sensor inventory: storage, scan batches and settings around the GS1 decoder.
"""

import logging

from .models import Sensor, SensorStatus
from .storage import AddResult, SensorNotFound, SensorStorage
from .scanning import ScanBatch, ScanOutcome, ScanStatus
from .settings import load_settings
from .utils import expiry_status

# Silent until an application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Sensor",
    "SensorStatus",
    "AddResult",
    "SensorNotFound",
    "SensorStorage",
    "ScanBatch",
    "ScanOutcome",
    "ScanStatus",
    "load_settings",
    "expiry_status",
]
