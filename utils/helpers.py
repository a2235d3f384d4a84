"""
Helper Functions for BreathSafe Alerts API
Utility functions used across the application
"""

import math
import re
from datetime import datetime
from typing import Optional

from utils.constants import AQI_RANGES, SMS_AQI_LABELS, MONTH_ABBREVIATIONS


def round_half_up(value) -> Optional[int]:
    """
    Round to the nearest integer, halves away from zero for positives

    Args:
        value: Number (or None/NaN)

    Returns:
        Rounded int, or None when the value is missing
    """
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return int(math.floor(value + 0.5))


def normalize_location(location: str) -> str:
    """Collapse internal whitespace and trim"""
    return re.sub(r"\s+", " ", location or "").strip()


def extract_city_name(location: str) -> str:
    """
    Extract the most specific segment of a comma-separated location

    "Mangalagiri, Guntur, Andhra Pradesh" -> "Mangalagiri"
    """
    return normalize_location(location).split(",")[0].strip()


def get_risk_category_key(aqi: float) -> str:
    """
    Get category key for looking up messages

    Args:
        aqi: Air Quality Index value

    Returns:
        Category key (e.g., "good", "unhealthy")
    """
    if aqi <= 50:
        return "good"
    elif aqi <= 100:
        return "moderate"
    elif aqi <= 150:
        return "unhealthy_sensitive"
    elif aqi <= 200:
        return "unhealthy"
    elif aqi <= 300:
        return "very_unhealthy"
    else:
        return "hazardous"


def classify_aqi_short(aqi: float) -> str:
    """Short AQI label for SMS bodies (e.g. "Sensitive Groups")"""
    if aqi is None or math.isnan(aqi):
        return SMS_AQI_LABELS["good"]
    return SMS_AQI_LABELS[get_risk_category_key(aqi)]


def get_aqi_description(aqi: float) -> str:
    """Long-form AQI description for log lines"""
    for aqi_range in AQI_RANGES.values():
        if aqi_range["min"] <= aqi <= aqi_range["max"]:
            return aqi_range["description"]
    return "Unknown"


def format_forecast_time(dt: datetime) -> str:
    """
    Human readable forecast time, e.g. "May 31, 10:30 AM"
    """
    hour12 = dt.hour % 12 or 12
    ampm = "PM" if dt.hour >= 12 else "AM"
    return f"{MONTH_ABBREVIATIONS[dt.month - 1]} {dt.day}, {hour12}:{dt.minute:02d} {ampm}"


def format_log_time(dt: datetime) -> str:
    """
    24h + 12h timestamp for log lines, e.g. "2026-10-19, 14:00 (2:00 PM)"
    """
    hour12 = dt.hour % 12 or 12
    ampm = "PM" if dt.hour >= 12 else "AM"
    return f"{dt:%Y-%m-%d, %H:%M} ({hour12}:{dt.minute:02d} {ampm})"


def to_e164(phone: str, default_country_code: str) -> str:
    """
    Normalise a stored phone number for SMS delivery

    Numbers that already carry a + prefix keep their country code; national
    numbers get default_country_code prepended.
    """
    phone = (phone or "").strip()
    digits = re.sub(r"\D", "", phone)
    if phone.startswith("+"):
        return f"+{digits}"
    country_digits = re.sub(r"\D", "", default_country_code)
    return f"+{country_digits}{digits.lstrip('0')}"
