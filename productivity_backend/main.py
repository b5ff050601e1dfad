from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from pathlib import Path

from productivity_backend.database import engine, Base
from productivity_backend import models  # Import all models to register them with Base
from productivity_backend.auto_migrate import auto_migrate
from productivity_backend.routes import series, mit, output, deepwork, settings
from productivity_backend.constants import (
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV, CORS_ALLOWED_ORIGINS
)

LOG_DIR = os.getenv("DASHBOARD_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("DASHBOARD_LOG_FILE", "app.log")

# Create log directory if it doesn't exist (for development)
try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("dashboard")

# Create database tables
Base.metadata.create_all(bind=engine)

# Add columns introduced since the database file was created
try:
    auto_migrate(engine, Base.metadata)
except Exception as e:
    logger.error(f"Auto-migration failed: {e}")
    # Don't crash the app - continue with existing schema

app = FastAPI(
    title="Productivity Dashboard API",
    description="Daily MIT, output tracking and deep work with streak statistics",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(series.router)
app.include_router(mit.router)
app.include_router(output.router)
app.include_router(deepwork.router)
app.include_router(settings.router)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Productivity Dashboard API started. Logging to: {log_path}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Productivity Dashboard API")


# Health check
@app.get("/")
async def root():
    return {"message": "Productivity Dashboard API", "status": "active"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
