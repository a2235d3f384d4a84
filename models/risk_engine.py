"""
Mask Recommendation Engine
Derives mask necessity, type and guidance from AQI, health profile and
temperature. Invoked only after the alert threshold is crossed, so the
lowest status it returns is "recommended".
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from utils.constants import (
    MASK_BREAKPOINTS,
    DEFAULT_MASK_TYPE,
    RESPIRATORY_MASK_TYPE,
    MASK_NOTES,
    HOT_TEMPERATURE_C,
    COLD_TEMPERATURE_C,
    CHILD_MAX_AGE,
    SENIOR_MIN_AGE,
    DEFAULT_HEALTH_PROFILE,
)


class MaskStatus(str, Enum):
    RECOMMENDED = "recommended"
    STRONGLY_RECOMMENDED = "strongly recommended"
    MANDATORY = "mandatory"

    @property
    def severity(self) -> int:
        return _STATUS_ORDER.index(self)

    def escalate(self, cap: "MaskStatus" = None) -> "MaskStatus":
        """One level up, never beyond cap (default: mandatory)"""
        cap = cap or MaskStatus.MANDATORY
        next_index = min(self.severity + 1, len(_STATUS_ORDER) - 1)
        escalated = _STATUS_ORDER[next_index]
        if escalated.severity > cap.severity:
            return self if self.severity >= cap.severity else cap
        return escalated


_STATUS_ORDER = [MaskStatus.RECOMMENDED, MaskStatus.STRONGLY_RECOMMENDED, MaskStatus.MANDATORY]


class ConditionCategory(str, Enum):
    RESPIRATORY = "respiratory"
    CARDIOVASCULAR = "cardiovascular"
    IMMUNE = "immune"
    PREGNANCY = "pregnancy"
    OTHER = "other"


# Ordered (category, keywords); first category with a keyword contained in
# the lower-cased condition name wins.
CONDITION_RULES: List[Tuple[ConditionCategory, Tuple[str, ...]]] = [
    (ConditionCategory.RESPIRATORY, ("asthma", "copd", "bronchitis", "emphysema")),
    (ConditionCategory.CARDIOVASCULAR, ("heart", "hypertension", "high blood pressure", "cardio")),
    (ConditionCategory.IMMUNE, ("immunodeficiency", "immunocompromised", "diabetes", "cancer")),
    (ConditionCategory.PREGNANCY, ("pregnant", "pregnancy")),
]

RESPIRATORY_SYMPTOMS = ("cough", "shortness of breath", "wheezing", "chest pain")

VULNERABLE_CATEGORIES = {
    ConditionCategory.CARDIOVASCULAR,
    ConditionCategory.IMMUNE,
    ConditionCategory.PREGNANCY,
}


def _name_of(entry) -> str:
    if isinstance(entry, dict):
        entry = entry.get("name")
    else:
        entry = getattr(entry, "name", entry)
    return entry if isinstance(entry, str) else ""


def classify_condition(condition) -> ConditionCategory:
    """Map a free-text chronic condition to its category"""
    name = _name_of(condition).lower()
    for category, keywords in CONDITION_RULES:
        if any(keyword in name for keyword in keywords):
            return category
    return ConditionCategory.OTHER


def is_respiratory_symptom(symptom) -> bool:
    name = _name_of(symptom).lower()
    return any(keyword in name for keyword in RESPIRATORY_SYMPTOMS)


@dataclass(frozen=True)
class MaskRecommendation:
    status: MaskStatus
    mask_type: str
    note: str

    def to_dict(self) -> dict:
        return {"status": self.status.value, "mask_type": self.mask_type, "note": self.note}


def base_status(aqi: float, default: MaskStatus = MaskStatus.RECOMMENDED) -> MaskStatus:
    if aqi is None or (isinstance(aqi, float) and math.isnan(aqi)):
        return default
    for threshold, status in MASK_BREAKPOINTS:
        if aqi >= threshold:
            return MaskStatus(status)
    return default


def temperature_note(temperature: Optional[float]) -> str:
    if temperature is None or math.isnan(temperature):
        return MASK_NOTES["moderate"]
    if temperature > HOT_TEMPERATURE_C:
        return MASK_NOTES["hot"]
    if temperature < COLD_TEMPERATURE_C:
        return MASK_NOTES["cold"]
    return MASK_NOTES["moderate"]


def recommend_mask(
    aqi: float,
    symptoms: Iterable = (),
    chronic_conditions: Iterable = (),
    age: Optional[int] = None,
    temperature: Optional[float] = None,
) -> MaskRecommendation:
    """
    Mask recommendation for one forecast hour

    Args:
        aqi: AQI of the hour
        symptoms: Reported symptoms (strings)
        chronic_conditions: Condition names, dicts or objects with .name
        age: Age in years (default 30)
        temperature: Ambient temperature in °C, None when unknown

    Returns:
        MaskRecommendation whose note is never empty
    """
    age = DEFAULT_HEALTH_PROFILE["age"] if age is None else age
    symptoms = list(symptoms or [])
    categories = {classify_condition(c) for c in chronic_conditions or []}

    status = base_status(aqi)
    mask_type = DEFAULT_MASK_TYPE
    note = ""

    respiratory = (
        any(is_respiratory_symptom(s) for s in symptoms)
        or ConditionCategory.RESPIRATORY in categories
    )
    vulnerable = (
        bool(categories & VULNERABLE_CATEGORIES)
        or age <= CHILD_MAX_AGE
        or age >= SENIOR_MIN_AGE
    )

    if respiratory:
        status = status.escalate()
        mask_type = RESPIRATORY_MASK_TYPE
        note = MASK_NOTES["respiratory"]
    elif vulnerable:
        status = status.escalate(cap=MaskStatus.STRONGLY_RECOMMENDED)
        note = MASK_NOTES["vulnerable"]

    return MaskRecommendation(status=status, mask_type=mask_type, note=note + temperature_note(temperature))
