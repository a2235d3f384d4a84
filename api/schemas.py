from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Dict, List, Optional


class ChronicCondition(BaseModel):
    name: str
    severity: Optional[str] = None


class UserProfile(BaseModel):
    id: str
    full_name: str
    phone: str
    location: str


class HealthProfile(BaseModel):
    age: int = 30
    symptoms: List[str] = []
    chronic_conditions: List[ChronicCondition] = []

    @property
    def condition_names(self) -> List[str]:
        return [c.name for c in self.chronic_conditions]


class ForecastPointOut(BaseModel):
    timestamp: datetime
    aqi: Optional[float]
    pollutants: Dict[str, Optional[float]]
    temperature: Optional[float] = None


class LocationForecast(BaseModel):
    location: str
    canonical_name: str
    latitude: float
    longitude: float
    temperature_available: bool
    points: List[ForecastPointOut]


class AlertRecord(BaseModel):
    id: str
    user_id: str
    location: str
    aqi_value: float
    pollutants: Dict[str, Optional[int]]
    timestamp: datetime
    sms_sent: bool
    sms_sent_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MaskRecommendationOut(BaseModel):
    status: str
    mask_type: str
    note: str


class MessagePreviewRequest(BaseModel):
    location: str
    timestamp: datetime
    aqi: float
    pollutants: Dict[str, Optional[float]] = {}
    symptoms: List[str] = []
    chronic_conditions: List[str] = []
    age: int = 30
    temperature: Optional[float] = None


class MessagePreview(BaseModel):
    message: str
    length: int
    truncated: bool
    recommendation: MaskRecommendationOut


class UserRunResultOut(BaseModel):
    user_id: str
    alerts_sent: int
    error: Optional[str] = None


class RunSummary(BaseModel):
    started_at: datetime
    finished_at: Optional[datetime] = None
    users_processed: int = 0
    users_failed: int = 0
    total_alerts_sent: int = 0
    skipped: bool = False
    results: List[UserRunResultOut] = Field(default_factory=list)
