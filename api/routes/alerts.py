import logging
from typing import List

from fastapi import APIRouter, HTTPException, Query, Request

from api.schemas import AlertRecord, MaskRecommendationOut, MessagePreview, MessagePreviewRequest, RunSummary
from models.message_composer import compose_message
from utils.constants import API_MESSAGES
from utils.errors import PersistenceError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/v1/alerts/run", response_model=RunSummary)
async def run_alerts(request: Request):
    """Trigger one alert run immediately"""
    dispatcher = request.app.state.pipeline.dispatcher
    if dispatcher.is_running:
        raise HTTPException(status_code=409, detail=API_MESSAGES["run_in_progress"])
    return await dispatcher.process_alerts()


@router.post("/api/v1/alerts/preview", response_model=MessagePreview)
def preview_alert_message(body: MessagePreviewRequest):
    """Render the SMS an alert with these inputs would produce"""
    composed = compose_message(
        body.location,
        body.timestamp,
        body.aqi,
        body.pollutants,
        body.symptoms,
        body.chronic_conditions,
        body.age,
        body.temperature,
    )
    return MessagePreview(
        message=composed.text,
        length=len(composed.text),
        truncated=composed.truncated,
        recommendation=MaskRecommendationOut(**composed.recommendation.to_dict()),
    )


@router.get("/api/v1/alerts/{user_id}", response_model=List[AlertRecord])
async def list_user_alerts(request: Request, user_id: str, limit: int = Query(50, ge=1, le=500)):
    """Most recent alert records of a user"""
    try:
        return await request.app.state.pipeline.alerts.list_for_user(user_id, limit=limit)
    except PersistenceError as e:
        logger.error(f"Alert lookup failed for user {user_id}: {e}")
        raise HTTPException(status_code=503, detail=str(e))
