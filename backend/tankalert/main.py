from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging

from tankalert.config import settings
from tankalert.api import tanks, events


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create scheduler
scheduler = AsyncIOScheduler()


from tankalert.tasks.status_digest import status_digest_job

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting application...")
    # Schema is managed by Alembic migrations
    scheduler.start()
    
    scheduler.add_job(
        status_digest_job,
        'cron',
        hour=settings.digest_hour,
        minute=settings.digest_minute,
        id='tank_status_digest',
        replace_existing=True
    )
    logger.info(f"Scheduled tank status digest for {settings.digest_hour:02d}:{settings.digest_minute:02d}")
    
    yield
    # Shutdown
    logger.info("Shutting down application...")
    scheduler.shutdown()


app = FastAPI(
    title="TankAlert",
    description="Fuel tank levels, consumption forecasts and alert status",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(tanks.router, prefix="/api/tanks", tags=["Tanks"])
app.include_router(events.router, prefix="/api/events", tags=["Safety Events"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


@app.get("/")
async def root():
    return {"message": "TankAlert API", "docs": "/docs"}
