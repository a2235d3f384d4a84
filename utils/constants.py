"""
Constants used throughout the BreathSafe Alerts API
AQI thresholds, pollutant metadata, mask guidance text and other fixed values
"""

# ==================== AQI Thresholds ====================

AQI_RANGES = {
    "good": {"min": 0, "max": 50, "description": "Good - Air quality is satisfactory"},
    "moderate": {"min": 51, "max": 100, "description": "Moderate - Air quality is acceptable"},
    "unhealthy_sensitive": {"min": 101, "max": 150, "description": "Unhealthy for Sensitive Groups"},
    "unhealthy": {"min": 151, "max": 200, "description": "Unhealthy"},
    "very_unhealthy": {"min": 201, "max": 300, "description": "Very Unhealthy"},
    "hazardous": {"min": 301, "max": 500, "description": "Hazardous"},
}

# Short labels used in SMS bodies, keyed like AQI_RANGES
SMS_AQI_LABELS = {
    "good": "Good",
    "moderate": "Moderate",
    "unhealthy_sensitive": "Sensitive Groups",
    "unhealthy": "Unhealthy",
    "very_unhealthy": "Very Unhealthy",
    "hazardous": "Hazardous",
}

# ==================== Pollutant Information ====================

# Open-Meteo hourly variable -> (alert snapshot key, unit)
POLLUTANTS = {
    "pm2_5": {"key": "PM2_5", "name": "PM2.5", "unit": "μg/m³"},
    "pm10": {"key": "PM10", "name": "PM10", "unit": "μg/m³"},
    "carbon_monoxide": {"key": "CO", "name": "CO", "unit": "μg/m³"},
    "nitrogen_dioxide": {"key": "NO2", "name": "NO2", "unit": "μg/m³"},
    "sulphur_dioxide": {"key": "SO2", "name": "SO2", "unit": "μg/m³"},
    "ozone": {"key": "O3", "name": "O3", "unit": "μg/m³"},
}

# Short series names exposed on Forecast.pollutants
POLLUTANT_SERIES = {
    "pm2_5": "pm2_5",
    "pm10": "pm10",
    "carbon_monoxide": "co",
    "nitrogen_dioxide": "no2",
    "sulphur_dioxide": "so2",
    "ozone": "o3",
}

AIR_QUALITY_HOURLY_FIELDS = ["us_aqi"] + list(POLLUTANTS.keys())

# ==================== Mask Guidance ====================

MASK_BREAKPOINTS = [
    (300, "mandatory"),
    (200, "strongly recommended"),
    (150, "recommended"),
]

DEFAULT_MASK_TYPE = "N95 or KN95 mask"
RESPIRATORY_MASK_TYPE = "N95 or KN95 mask with valve for easier breathing"

MASK_NOTES = {
    "respiratory": "Consider using a bronchodilator before going outside if prescribed by your doctor. ",
    "vulnerable": "Limit outdoor exposure when possible. ",
    "hot": "Use a lightweight mask due to high temperature. Take frequent breaks in air-conditioned spaces.",
    "cold": "Consider a mask with a heat exchanger for comfort in cold weather.",
    "moderate": "Standard protection recommended.",
}

HOT_TEMPERATURE_C = 35
COLD_TEMPERATURE_C = 10

CHILD_MAX_AGE = 12
SENIOR_MIN_AGE = 65

# ==================== Health Profile Defaults ====================

DEFAULT_HEALTH_PROFILE = {
    "age": 30,
    "symptoms": [],
    "chronic_conditions": [],
}

# ==================== SMS ====================

SMS_ELLIPSIS = "..."

MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

# ==================== API Response Messages ====================

API_MESSAGES = {
    "run_in_progress": "An alert run is already in progress",
}
