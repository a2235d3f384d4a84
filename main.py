import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import alerts, forecast
from config.settings import settings
from models.pipeline import AlertPipeline
from models.scheduler import AlertScheduler

logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    pipeline = getattr(app.state, "pipeline", None) or AlertPipeline()
    app.state.pipeline = pipeline
    await pipeline.startup()

    scheduler = None
    if settings.SCHEDULER_ENABLED:
        scheduler = AlertScheduler(pipeline.dispatcher)
        scheduler.start()

    try:
        yield
    finally:
        if scheduler:
            await scheduler.shutdown()
        await pipeline.shutdown()


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(forecast.router)
app.include_router(alerts.router)

@app.get("/")
def root():
    return {
        "message": "BreathSafe Alerts API",
        "version": settings.API_VERSION,
        "endpoints": {
            "forecast": "/api/v1/forecast/{location}",
            "run_alerts": "/api/v1/alerts/run",
            "preview": "/api/v1/alerts/preview",
            "user_alerts": "/api/v1/alerts/{user_id}",
            "docs": "/docs"
        }
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
