"""
Stock status and low-stock alert pipeline.

Each inventory fetch runs one reconciliation pass over the rows it returned:

1. classify every row's quantity against the stock thresholds,
2. reconcile the result with the stored status and patch the in-memory rows,
3. persist the new statuses (one concurrent update per changed row),
4. fan out alerts for rows that just degraded to Low or Critical.

The BHW and BNS inventories share this module and differ only in the
StockPipelineConfig they pass in.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, List, Optional

from pydantic import BaseModel, model_validator

from config import CRITICAL_THRESHOLD, LOW_THRESHOLD, TOAST_DURATION_SECONDS
from models.inventory_items import OwnerRole, StockStatus
from schemas.inventory_items import InventoryRow, StockAlert
from services.toast_bus import ToastBus

logger = logging.getLogger("stock_alerts")

SEVERITY = {
    StockStatus.NORMAL: 0,
    StockStatus.LOW: 1,
    StockStatus.CRITICAL: 2,
}

DEGRADED_STATUSES = (StockStatus.LOW, StockStatus.CRITICAL)


class StockThresholds(BaseModel):
    critical: int = CRITICAL_THRESHOLD
    low: int = LOW_THRESHOLD

    @model_validator(mode="after")
    def check_order(self):
        if self.low < self.critical:
            raise ValueError("low threshold must not be below the critical threshold")
        return self


DEFAULT_THRESHOLDS = StockThresholds()


class StockPipelineConfig(BaseModel):
    owner_role: OwnerRole
    thresholds: StockThresholds = DEFAULT_THRESHOLDS
    toast_duration: float = TOAST_DURATION_SECONDS


def classify(quantity: int, thresholds: StockThresholds = DEFAULT_THRESHOLDS) -> StockStatus:
    """Map a quantity to its stock status. Boundaries fall in the more severe bucket."""
    if quantity <= thresholds.critical:
        return StockStatus.CRITICAL
    if quantity <= thresholds.low:
        return StockStatus.LOW
    return StockStatus.NORMAL


@dataclass
class StatusChange:
    row: InventoryRow
    previous: StockStatus
    expected: StockStatus

    @property
    def degraded(self) -> bool:
        return self.expected in DEGRADED_STATUSES


@dataclass
class PassResult:
    rows: List[InventoryRow]
    changes: List[StatusChange] = field(default_factory=list)
    alerts: List[StockAlert] = field(default_factory=list)
    failed_writes: List[StatusChange] = field(default_factory=list)


def load_rows(records: Iterable) -> List[InventoryRow]:
    """Validate fetched ORM rows (or dicts) into render-scoped copies."""
    rows = []
    for record in records:
        row = InventoryRow.model_validate(record)
        row.confirmed_status = row.status
        row.synced = True
        rows.append(row)
    return rows


def reconcile(rows: List[InventoryRow], thresholds: StockThresholds = DEFAULT_THRESHOLDS) -> List[StatusChange]:
    """
    Find rows whose stored status disagrees with their quantity.

    Each stale row is patched in place so it renders with the recomputed
    status right away; it stays unsynced until the write is confirmed.
    """
    changes = []
    for row in rows:
        expected = classify(row.quantity, thresholds)
        if expected != row.status:
            changes.append(StatusChange(row=row, previous=row.status, expected=expected))
            row.status = expected
            row.synced = False
    return changes


async def persist_status_changes(
    changes: List[StatusChange],
    write_status: Callable[[int, StockStatus], Awaitable[None]],
) -> List[StatusChange]:
    """
    Issue one status update per change, concurrently.

    Failures are logged and returned; they never propagate. A failed row keeps
    its optimistic status with synced=False until a later pass corrects it.
    """
    if not changes:
        return []

    results = await asyncio.gather(
        *(write_status(change.row.id, change.expected) for change in changes),
        return_exceptions=True,
    )

    failed = []
    for change, result in zip(changes, results):
        if isinstance(result, BaseException):
            logger.error(f"Failed to persist status {change.expected.value} for item {change.row.id} ({change.row.item_name}): {result}")
            failed.append(change)
        else:
            change.row.confirmed_status = change.expected
            change.row.synced = True
            logger.info(f"Item {change.row.id} ({change.row.item_name}) status {change.previous.value} -> {change.expected.value}")
    return failed


def build_alert_message(item_name: str, status: StockStatus, quantity: int) -> str:
    return f"{item_name} stock is {status.value.lower()} ({quantity} units left)."


async def fan_out_alerts(
    changes: List[StatusChange],
    toast_bus: Optional[ToastBus],
    insert_notification: Callable[[str, str], Awaitable[None]],
    user_id: Optional[str] = None,
    toast_duration: Optional[float] = None,
) -> List[StockAlert]:
    """
    Turn degrading transitions into toasts and bell notifications.

    Toasts are de-duplicated by the bus; notifications are not, so two rows
    producing the same message still create two notification records.
    """
    alerts = []
    for change in changes:
        if not change.degraded:
            continue
        message = build_alert_message(change.row.item_name, change.expected, change.row.quantity)
        alerts.append(StockAlert(
            item_id=change.row.id,
            item_name=change.row.item_name,
            status=change.expected,
            quantity=change.row.quantity,
            message=message,
        ))

    if toast_bus is not None and toast_bus.closed:
        logger.warning(f"Toast bus is closed; {len(alerts)} stock toast(s) not shown")
    elif toast_bus is not None:
        for alert in alerts:
            try:
                toast_bus.publish(alert.message, type="warning", duration=toast_duration)
            except RuntimeError:
                # Closed by shutdown while this pass was running
                logger.warning(f"Toast bus closed during fan-out; dropped toast: {alert.message}")
                break

    if user_id and alerts:
        results = await asyncio.gather(
            *(insert_notification(user_id, alert.message) for alert in alerts),
            return_exceptions=True,
        )
        for alert, result in zip(alerts, results):
            if isinstance(result, BaseException):
                logger.error(f"Failed to record inventory alert for user {user_id}: {alert.message} ({result})")

    return alerts


async def run_reconciliation_pass(
    rows: List[InventoryRow],
    config: StockPipelineConfig,
    store,
    toast_bus: Optional[ToastBus] = None,
    user_id: Optional[str] = None,
) -> PassResult:
    """
    Run classify -> reconcile -> persist -> fan-out over freshly fetched rows.

    `store` provides two coroutines: ``write_status(item_id, status)`` and
    ``insert_notification(user_id, message)``.
    """
    changes = reconcile(rows, config.thresholds)
    failed = await persist_status_changes(changes, store.write_status)
    alerts = await fan_out_alerts(
        changes,
        toast_bus,
        store.insert_notification,
        user_id=user_id,
        toast_duration=config.toast_duration,
    )
    if changes:
        logger.info(
            f"{config.owner_role.value} reconciliation: {len(rows)} rows, "
            f"{len(changes)} status changes, {len(failed)} failed writes, {len(alerts)} alerts"
        )
    return PassResult(rows=rows, changes=changes, alerts=alerts, failed_writes=failed)
