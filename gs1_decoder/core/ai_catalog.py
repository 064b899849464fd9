"""
Application Identifier catalog for sensor barcodes.

Only the handful of AIs printed on diabetes-sensor packaging are decoded.
Two further AIs (24x, 30) are recognised purely as boundaries when skipping
over data the decoder does not understand.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional


class SerialProfile(str, Enum):
    """Length policy for AI (21) Serial Number."""
    GENERIC = "generic"  # variable length, ends at next known AI
    FIXED = "fixed"      # exactly 12 characters (Dexcom)


FIXED_SERIAL_LENGTH = 12


@dataclass(frozen=True)
class AIDefinition:
    """Definition of a GS1 Application Identifier and its field policy."""
    ai: str
    title: str
    fixed_length: Optional[int]  # None if variable
    field_name: Optional[str] = None  # DecodedRecord attribute, None if discarded
    date_format: Optional[str] = None

    @property
    def is_variable(self) -> bool:
        return self.fixed_length is None


AI_LENGTH = 2

AI_CATALOG: Dict[str, AIDefinition] = {
    "01": AIDefinition(
        ai="01",
        title="GTIN",
        fixed_length=14,
        field_name="product_code",
    ),
    "11": AIDefinition(
        ai="11",
        title="PROD DATE",
        fixed_length=6,
        date_format="YYMMDD",
    ),
    "17": AIDefinition(
        ai="17",
        title="USE BY or EXPIRY",
        fixed_length=6,
        field_name="expiry_date",
        date_format="YYMMDD",
    ),
    "10": AIDefinition(
        ai="10",
        title="BATCH/LOT",
        fixed_length=None,
        field_name="lot_number",
    ),
    "21": AIDefinition(
        ai="21",
        title="SERIAL",
        fixed_length=None,
        field_name="serial_number",
    ),
}

# Used both for dispatch and when scanning ahead for the next element
KNOWN_AIS: FrozenSet[str] = frozenset(AI_CATALOG) | {"24", "30"}

_FIXED_SERIAL = AIDefinition(
    ai="21",
    title="SERIAL",
    fixed_length=FIXED_SERIAL_LENGTH,
    field_name="serial_number",
)


def definition_for(ai: str, profile: SerialProfile) -> Optional[AIDefinition]:
    """
    Return the field policy for ``ai`` under the given serial profile.

    None means the decoder has no extraction policy for the AI, which is also
    the case for the boundary-only AIs 24 and 30.
    """
    if ai == "21" and profile == SerialProfile.FIXED:
        return _FIXED_SERIAL
    return AI_CATALOG.get(ai)
