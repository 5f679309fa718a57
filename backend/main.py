from fastapi import FastAPI
from dotenv import load_dotenv

load_dotenv()
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from database import Base, engine
from datetime import datetime
import os
import logging

import config as settings
import models  # noqa: F401  registers every table on Base.metadata
import routers.inventory_items as inventory_items
import routers.recycle_bin as recycle_bin
import routers.inventory_requests as inventory_requests
import routers.notifications as notifications
import routers.activity_log as activity_log
import routers.toasts as toasts
import routers.reports as reports
import routers.app_config as app_config
from services.toast_bus import ToastBus


os.makedirs(settings.LOG_DIR, exist_ok=True) # Create the log directory if it doesn't exist

# Create a unique log file name based on current date/time
current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
LOG_FILE = os.path.join(settings.LOG_DIR, f"app_{current_time_str}.log")

# Configure the root logger
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=LOG_FILE, # Log to a file
    filemode='a' # Append to the file if it exists
)

# Also output logs to the console
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.INFO)
console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
logging.getLogger().addHandler(console_handler) # Add to the root logger

logger = logging.getLogger(__name__)
logger.info("Application starting up...")
# --- End Logging Configuration ---


# Create database tables
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.toast_bus = ToastBus(default_duration=settings.TOAST_DURATION_SECONDS)
    scheduler = None
    if settings.SCHEDULER_ENABLED:
        from scheduler import start_scheduler
        scheduler = start_scheduler(app.state.toast_bus)
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)
            logger.info("Stock sweep scheduler stopped")
        app.state.toast_bus.close()
        logger.info("Application shut down")


app = FastAPI(lifespan=lifespan)


# Split the string into a list, stripping any whitespace
allowed_origins = [origin.strip() for origin in settings.CORS_ALLOWED_ORIGINS.split(',')]

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Barangay Health Inventory API",
        version="1.0.0",
        description="Maternal and child health supply inventory for BHW and BNS programs",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
    }
    # Apply security globally to all endpoints
    openapi_schema["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi


app.include_router(inventory_items.router)
app.include_router(recycle_bin.router)
app.include_router(inventory_requests.router)
app.include_router(notifications.router)
app.include_router(activity_log.router)
app.include_router(toasts.router)
app.include_router(reports.router)
app.include_router(app_config.router)

@app.get("/")
async def test_route():
    return {"message": "Welcome to the Barangay Health Inventory API!"}
