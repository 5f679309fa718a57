import asyncio
import logging
from typing import Optional

from sqlalchemy.orm import Session

from database import SessionLocal
from models.inventory_items import OwnerRole
from crud import app_config as crud_app_config
from crud import inventory_items as crud_inventory_items
from services.stock_alerts import load_rows, run_reconciliation_pass
from services.stock_store import SqlStockStore
from services.toast_bus import ToastBus

logger = logging.getLogger(__name__)


def run_stock_sweep(toast_bus: Optional[ToastBus] = None, session_factory=SessionLocal) -> dict:
    """
    Reconciles every non-deleted BHW and BNS row once.

    Scheduled daily so items nobody opened still get their status corrected.
    There is no signed-in user, so alerts only go out as toasts.

    Returns:
        Number of status changes per owner role.
    """
    logger.info("Starting daily stock sweep.")
    if toast_bus is not None and toast_bus.closed:
        toast_bus = None

    db: Session = session_factory()
    summary = {}
    try:
        for owner_role in OwnerRole:
            rows = load_rows(crud_inventory_items.get_inventory_items(db, owner_role=owner_role))
            result = asyncio.run(run_reconciliation_pass(
                rows,
                crud_app_config.get_pipeline_config(db, owner_role),
                SqlStockStore(db),
                toast_bus=toast_bus,
                user_id=None,
            ))
            summary[owner_role.value] = len(result.changes)
        logger.info(f"Daily stock sweep finished: {summary}")
    except Exception as e:
        logger.error(f"Error during daily stock sweep: {e}", exc_info=True)
        db.rollback()
    finally:
        db.close()
    return summary
