"""
SMS Message Composer
Renders the alert SMS for one forecast hour under a hard length ceiling
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional

from config.settings import settings
from models.risk_engine import MaskRecommendation, recommend_mask
from utils.constants import SMS_ELLIPSIS, POLLUTANTS
from utils.helpers import (
    classify_aqi_short,
    extract_city_name,
    format_forecast_time,
    round_half_up,
)


@dataclass(frozen=True)
class ComposedMessage:
    text: str
    truncated: bool
    recommendation: MaskRecommendation


def truncate_message(message: str, max_length: int = None) -> str:
    max_length = max_length or settings.SMS_MAX_LENGTH
    if len(message) <= max_length:
        return message
    return message[: max_length - len(SMS_ELLIPSIS)] + SMS_ELLIPSIS


def _format_number(value, suffix: str = "") -> str:
    rounded = round_half_up(value)
    return "N/A" if rounded is None else f"{rounded}{suffix}"


def render_message(
    location: str,
    forecast_time: datetime,
    aqi: float,
    pollutants: Dict[str, Optional[float]],
    recommendation: MaskRecommendation,
    temperature: Optional[float] = None,
    app_name: str = None,
) -> str:
    """Full, untruncated alert body"""
    pollutants = pollutants or {}
    pm25 = pollutants.get("PM2_5", pollutants.get("pm2_5"))
    try:
        readable_time = format_forecast_time(forecast_time)
    except (AttributeError, IndexError, TypeError):
        readable_time = "N/A"

    rounded_aqi = round_half_up(aqi)
    aqi_line = "N/A" if rounded_aqi is None else f"{rounded_aqi} ({classify_aqi_short(rounded_aqi)})"

    return (
        f"{app_name or settings.APP_NAME} Alert for {extract_city_name(location)}\n"
        f"Forecast for: {readable_time}\n"
        f"AQI: {aqi_line}\n"
        f"PM2.5: {_format_number(pm25, ' ' + POLLUTANTS['pm2_5']['unit'])}\n"
        f"Temp: {_format_number(temperature, '°C')}\n"
        f"Mask: {recommendation.status.value}"
    )


def compose_message(
    location: str,
    forecast_time: datetime,
    aqi: float,
    pollutants: Dict[str, Optional[float]],
    symptoms: Iterable = (),
    chronic_conditions: Iterable = (),
    age: Optional[int] = None,
    temperature: Optional[float] = None,
) -> ComposedMessage:
    recommendation = recommend_mask(aqi, symptoms, chronic_conditions, age, temperature)
    full_text = render_message(location, forecast_time, aqi, pollutants, recommendation, temperature)
    text = truncate_message(full_text)
    return ComposedMessage(text=text, truncated=text != full_text, recommendation=recommendation)


def compose(
    location: str,
    forecast_time: datetime,
    aqi: float,
    pollutants: Dict[str, Optional[float]],
    symptoms: Iterable = (),
    chronic_conditions: Iterable = (),
    age: Optional[int] = None,
    temperature: Optional[float] = None,
) -> str:
    """
    Alert SMS text, at most SMS_MAX_LENGTH characters

    Args:
        location: User's free-text location (only the first comma segment is shown)
        forecast_time: Forecast hour
        aqi: AQI of the hour
        pollutants: Snapshot keyed PM2_5, PM10, ...
        symptoms, chronic_conditions, age: Health profile
        temperature: °C or None

    Returns:
        Message text
    """
    return compose_message(
        location, forecast_time, aqi, pollutants, symptoms, chronic_conditions, age, temperature
    ).text
