"""
Utility helpers for the sensor inventory.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta


def expiry_status(expiry_date: date, near_months: int, today: Optional[date] = None) -> str:
    """
    Returns: Valid, Near Expiry, Expired
    """
    today = today or date.today()
    if expiry_date < today:
        return "Expired"
    threshold = today + relativedelta(months=near_months)
    if expiry_date <= threshold:
        return "Near Expiry"
    return "Valid"


def format_ddmmyyyy(value: date) -> str:
    return value.strftime("%d/%m/%Y")
