from fastapi import APIRouter, HTTPException, Query, Request

from api.schemas import ForecastPointOut, LocationForecast
from utils.errors import ForecastUnavailableError, GeocodingUnavailableError, LocationNotFoundError

router = APIRouter()


@router.get("/api/v1/forecast/{location}", response_model=LocationForecast)
async def get_forecast(request: Request, location: str, hours: int = Query(24, ge=1, le=168)):
    """Resolve a location and return its hourly AQI/pollutant/temperature forecast"""
    pipeline = request.app.state.pipeline

    try:
        resolved = await pipeline.resolver.resolve(location)
        forecast = await pipeline.forecaster.fetch_forecast(resolved)
    except LocationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (GeocodingUnavailableError, ForecastUnavailableError) as e:
        raise HTTPException(status_code=502, detail=str(e))

    points = [
        ForecastPointOut(
            timestamp=p.timestamp,
            aqi=p.aqi,
            pollutants=p.pollutants,
            temperature=p.temperature,
        )
        for p in forecast.points()[:hours]
    ]

    return LocationForecast(
        location=location,
        canonical_name=resolved.canonical_name,
        latitude=resolved.latitude,
        longitude=resolved.longitude,
        temperature_available=forecast.temperature_available,
        points=points,
    )
