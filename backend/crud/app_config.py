import logging
from typing import Optional
from pydantic import ValidationError
from sqlalchemy.orm import Session
from models.app_config import AppConfig
from models.inventory_items import OwnerRole
from schemas.app_config import AppConfigCreate, AppConfigUpdate
from crud.activity_log import log_activity
from services.stock_alerts import DEFAULT_THRESHOLDS, StockPipelineConfig, StockThresholds
import config as settings

logger = logging.getLogger("app_config")

CRITICAL_THRESHOLD_KEY = "critical_threshold"
LOW_THRESHOLD_KEY = "low_threshold"
TOAST_DURATION_KEY = "toast_duration_seconds"


# Create a new config entry
def create_config(db: Session, config: AppConfigCreate, user_id: Optional[str] = None):
    db_config = AppConfig(name=config.name, value=config.value, created_by=user_id)
    db.add(db_config)
    db.commit()
    db.refresh(db_config)
    log_activity(db, "Configuration Created", f"{db_config.name} = {db_config.value}", user_id)
    return db_config


# Get config by name (or all configs)
def get_config(db: Session, name: Optional[str] = None):
    if name:
        return db.query(AppConfig).filter(AppConfig.name == name).first()
    return db.query(AppConfig).order_by(AppConfig.name).all()


# Update config by name
def update_config_by_name(db: Session, name: str, config: AppConfigUpdate, user_id: Optional[str] = None):
    db_config = db.query(AppConfig).filter(AppConfig.name == name).first()
    if not db_config:
        return None

    old_value = db_config.value
    for field, value in config.model_dump(exclude_unset=True).items():
        setattr(db_config, field, value)
    db_config.updated_by = user_id
    db.commit()
    db.refresh(db_config)
    log_activity(db, "Configuration Updated", f"{name}: {old_value} -> {db_config.value}", user_id)
    return db_config


def _config_values(db: Session) -> dict:
    return {c.name: c.value for c in get_config(db)}


def get_stock_thresholds(db: Session) -> StockThresholds:
    """Thresholds from app_config, falling back to the environment defaults."""
    values = _config_values(db)
    if CRITICAL_THRESHOLD_KEY not in values and LOW_THRESHOLD_KEY not in values:
        return DEFAULT_THRESHOLDS
    try:
        return StockThresholds(
            critical=int(values.get(CRITICAL_THRESHOLD_KEY, DEFAULT_THRESHOLDS.critical)),
            low=int(values.get(LOW_THRESHOLD_KEY, DEFAULT_THRESHOLDS.low)),
        )
    except (ValueError, ValidationError) as e:
        logger.warning(f"Ignoring invalid stock threshold configuration: {e}")
        return DEFAULT_THRESHOLDS


def get_toast_duration(db: Session) -> float:
    value = _config_values(db).get(TOAST_DURATION_KEY)
    if value is None:
        return settings.TOAST_DURATION_SECONDS
    try:
        duration = float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {TOAST_DURATION_KEY}: {value!r}")
        return settings.TOAST_DURATION_SECONDS
    return duration if duration > 0 else settings.TOAST_DURATION_SECONDS


def get_pipeline_config(db: Session, owner_role: OwnerRole) -> StockPipelineConfig:
    return StockPipelineConfig(
        owner_role=owner_role,
        thresholds=get_stock_thresholds(db),
        toast_duration=get_toast_duration(db),
    )
