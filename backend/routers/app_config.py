from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

import config as settings
from database import get_db
from schemas.app_config import AppConfigCreate, AppConfigUpdate, AppConfigOut
from crud import app_config as crud_app_config
from models.app_config import AppConfig as AppConfigModel
from models.profiles import Profile
from services.stock_alerts import StockThresholds
from utils.auth_utils import get_current_profile, require_roles

router = APIRouter(tags=["Configuration"])
logger = logging.getLogger(__name__)


def default_configs():
    """Seed values, taken from the environment at the time of seeding."""
    return [
        {"name": crud_app_config.CRITICAL_THRESHOLD_KEY, "value": str(settings.CRITICAL_THRESHOLD)},
        {"name": crud_app_config.LOW_THRESHOLD_KEY, "value": str(settings.LOW_THRESHOLD)},
        {"name": crud_app_config.TOAST_DURATION_KEY, "value": str(settings.TOAST_DURATION_SECONDS)},
    ]


def _validate_value(db: Session, name: str, value: str):
    """Reject values the stock pipeline would have to ignore."""
    if name == crud_app_config.TOAST_DURATION_KEY:
        try:
            if float(value) <= 0:
                raise ValueError
        except ValueError:
            raise HTTPException(status_code=400, detail=f"{name} must be a positive number")
        return

    if name not in (crud_app_config.CRITICAL_THRESHOLD_KEY, crud_app_config.LOW_THRESHOLD_KEY):
        return

    current = crud_app_config.get_stock_thresholds(db)
    try:
        if name == crud_app_config.CRITICAL_THRESHOLD_KEY:
            StockThresholds(critical=int(value), low=current.low)
        else:
            StockThresholds(critical=current.critical, low=int(value))
    except ValueError as e:
        # pydantic's ValidationError is a ValueError too
        detail = e.errors()[0]["msg"] if isinstance(e, ValidationError) else f"{name} must be a whole number"
        raise HTTPException(status_code=400, detail=detail)


@router.post("/configurations/", response_model=AppConfigOut, status_code=status.HTTP_201_CREATED)
def create_config(config: AppConfigCreate, db: Session = Depends(get_db), profile: Profile = Depends(require_roles(["Admin"]))):
    if crud_app_config.get_config(db, name=config.name):
        raise HTTPException(status_code=409, detail="Configuration already exists")
    _validate_value(db, config.name, config.value)
    return crud_app_config.create_config(db, config, user_id=profile.id)


@router.get("/configurations/", response_model=List[AppConfigOut])
def get_configs(name: Optional[str] = None, db: Session = Depends(get_db), profile: Profile = Depends(get_current_profile)):
    configs = crud_app_config.get_config(db, name=name)
    # Always return a list, even if empty
    return [configs] if name and configs else configs or []


@router.patch("/configurations/{name}/", response_model=AppConfigOut)
def update_config(name: str, config: AppConfigUpdate, db: Session = Depends(get_db), profile: Profile = Depends(require_roles(["Admin"]))):
    if config.value is not None:
        _validate_value(db, name, config.value)
    updated = crud_app_config.update_config_by_name(db, name, config, user_id=profile.id)
    if not updated:
        raise HTTPException(status_code=404, detail="Configuration not found")
    return updated


@router.get("/configurations/initialized")
def are_configurations_initialized(db: Session = Depends(get_db), profile: Profile = Depends(require_roles(["Admin"]))):
    """
    Checks if the default application configurations exist.
    """
    default_config_names = {config["name"] for config in default_configs()}

    existing_configs_query = db.query(AppConfigModel.name).filter(
        AppConfigModel.name.in_(default_config_names)
    )
    existing_config_names = {name for (name,) in existing_configs_query}

    return {"configs_initialized": default_config_names.issubset(existing_config_names)}


@router.post("/configurations/initialize", status_code=status.HTTP_201_CREATED)
def initialize_configurations(db: Session = Depends(get_db), profile: Profile = Depends(require_roles(["Admin"]))):
    """
    Creates the default stock thresholds and toast duration.
    This is idempotent; it will not overwrite existing configurations.
    """
    existing_config_names = {name for (name,) in db.query(AppConfigModel.name)}

    new_configs_created = []
    for config_data in default_configs():
        if config_data["name"] not in existing_config_names:
            crud_app_config.create_config(db, AppConfigCreate(**config_data), user_id=profile.id)
            new_configs_created.append(config_data["name"])

    if not new_configs_created:
        return {"message": "All default configurations already exist."}

    logger.info(f"Initialized default configs by user {profile.id}. New configs: {new_configs_created}")
    return {"message": "Successfully initialized default configurations.", "new_configs": new_configs_created}
