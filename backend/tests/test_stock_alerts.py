import asyncio
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from models.inventory_items import OwnerRole, StockStatus
from services.stock_alerts import (
    SEVERITY,
    StockPipelineConfig,
    StockThresholds,
    build_alert_message,
    classify,
    fan_out_alerts,
    load_rows,
    persist_status_changes,
    reconcile,
    run_reconciliation_pass,
)
from services.toast_bus import ToastBus


class FakeStore:
    def __init__(self, fail_ids=(), fail_notifications=False):
        self.writes = []
        self.notifications = []
        self.fail_ids = set(fail_ids)
        self.fail_notifications = fail_notifications

    async def write_status(self, item_id, status):
        if item_id in self.fail_ids:
            raise ConnectionError("status update rejected")
        self.writes.append((item_id, status))

    async def insert_notification(self, user_id, message):
        if self.fail_notifications:
            raise ConnectionError("insert rejected")
        self.notifications.append((user_id, message))


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def row(id, item_name, quantity, status=StockStatus.NORMAL):
    return {"id": id, "item_name": item_name, "quantity": quantity, "status": status, "owner_role": OwnerRole.BHW}


BHW_CONFIG = StockPipelineConfig(owner_role=OwnerRole.BHW)


def test_classify_boundaries():
    assert classify(10) == StockStatus.CRITICAL
    assert classify(11) == StockStatus.LOW
    assert classify(20) == StockStatus.LOW
    assert classify(21) == StockStatus.NORMAL
    assert classify(0) == StockStatus.CRITICAL


def test_classify_negative_quantity_is_critical():
    assert classify(-3) == StockStatus.CRITICAL


def test_classify_is_monotonic():
    statuses = [classify(q) for q in range(-5, 60)]
    severities = [SEVERITY[s] for s in statuses]
    assert severities == sorted(severities, reverse=True)


def test_classify_uses_given_thresholds():
    thresholds = StockThresholds(critical=3, low=5)
    assert classify(3, thresholds) == StockStatus.CRITICAL
    assert classify(5, thresholds) == StockStatus.LOW
    assert classify(6, thresholds) == StockStatus.NORMAL


def test_thresholds_reject_low_below_critical():
    with pytest.raises(ValidationError):
        StockThresholds(critical=20, low=10)


def test_load_rows_marks_rows_synced():
    rows = load_rows([row(1, "Paracetamol", 8)])
    assert rows[0].status == StockStatus.NORMAL
    assert rows[0].confirmed_status == StockStatus.NORMAL
    assert rows[0].synced is True


def test_reconcile_patches_rows_optimistically():
    rows = load_rows([row(1, "Paracetamol", 8), row(2, "Ferrous Sulfate", 50)])
    changes = reconcile(rows)

    assert len(changes) == 1
    assert changes[0].previous == StockStatus.NORMAL
    assert changes[0].expected == StockStatus.CRITICAL
    assert rows[0].status == StockStatus.CRITICAL
    assert rows[0].confirmed_status == StockStatus.NORMAL
    assert rows[0].synced is False
    assert rows[1].synced is True


def test_reconcile_is_idempotent():
    rows = load_rows([row(1, "Paracetamol", 8), row(2, "ORS", 15), row(3, "Zinc", 40, StockStatus.LOW)])
    assert len(reconcile(rows)) == 3
    assert reconcile(rows) == []


def test_normal_to_critical_in_one_step():
    rows = load_rows([row(1, "Vitamin A", 2, StockStatus.NORMAL)])
    changes = reconcile(rows)
    assert changes[0].expected == StockStatus.CRITICAL


def test_persist_marks_successful_writes_synced():
    store = FakeStore()
    rows = load_rows([row(1, "Paracetamol", 8)])
    changes = reconcile(rows)

    failed = asyncio.run(persist_status_changes(changes, store.write_status))

    assert failed == []
    assert store.writes == [(1, StockStatus.CRITICAL)]
    assert rows[0].confirmed_status == StockStatus.CRITICAL
    assert rows[0].synced is True


def test_failed_write_keeps_optimistic_status():
    store = FakeStore(fail_ids={1})
    rows = load_rows([row(1, "Paracetamol", 8), row(2, "ORS", 15)])
    changes = reconcile(rows)

    failed = asyncio.run(persist_status_changes(changes, store.write_status))

    assert [c.row.id for c in failed] == [1]
    assert rows[0].status == StockStatus.CRITICAL
    assert rows[0].confirmed_status == StockStatus.NORMAL
    assert rows[0].synced is False
    assert rows[1].synced is True
    assert store.writes == [(2, StockStatus.LOW)]


def test_alert_message_wording():
    assert build_alert_message("Paracetamol", StockStatus.CRITICAL, 8) == "Paracetamol stock is critical (8 units left)."
    assert build_alert_message("ORS", StockStatus.LOW, 15) == "ORS stock is low (15 units left)."


def test_duplicate_messages_show_one_toast_but_two_notifications():
    bus = ToastBus(clock=FakeClock())
    store = FakeStore()
    rows = load_rows([row(1, "Paracetamol", 8), row(2, "Paracetamol", 8)])
    changes = reconcile(rows)

    alerts = asyncio.run(fan_out_alerts(changes, bus, store.insert_notification, user_id="bhw-1"))

    assert len(alerts) == 2
    assert [t.message for t in bus.active()] == ["Paracetamol stock is critical (8 units left)."]
    assert len(store.notifications) == 2


def test_no_notifications_without_user():
    bus = ToastBus(clock=FakeClock())
    store = FakeStore()
    changes = reconcile(load_rows([row(1, "Paracetamol", 8)]))

    asyncio.run(fan_out_alerts(changes, bus, store.insert_notification, user_id=None))

    assert len(bus.active()) == 1
    assert store.notifications == []


def test_notification_failure_is_not_raised():
    bus = ToastBus(clock=FakeClock())
    store = FakeStore(fail_notifications=True)
    changes = reconcile(load_rows([row(1, "Paracetamol", 8)]))

    alerts = asyncio.run(fan_out_alerts(changes, bus, store.insert_notification, user_id="bhw-1"))

    assert len(alerts) == 1
    assert len(bus.active()) == 1


def test_critical_to_low_alerts():
    store = FakeStore()
    rows = load_rows([row(1, "ORS", 15, StockStatus.CRITICAL)])
    result = asyncio.run(run_reconciliation_pass(rows, BHW_CONFIG, store, toast_bus=None, user_id="bhw-1"))
    assert [a.status for a in result.alerts] == [StockStatus.LOW]


def test_pass_degrading_row_writes_and_alerts():
    bus = ToastBus(clock=FakeClock())
    store = FakeStore()
    rows = load_rows([row(1, "Paracetamol", 8, StockStatus.NORMAL)])

    result = asyncio.run(run_reconciliation_pass(rows, BHW_CONFIG, store, toast_bus=bus, user_id="bhw-1"))

    assert result.rows[0].status == StockStatus.CRITICAL
    assert store.writes == [(1, StockStatus.CRITICAL)]
    assert [t.message for t in bus.active()] == ["Paracetamol stock is critical (8 units left)."]
    assert bus.active()[0].type == "warning"
    assert store.notifications == [("bhw-1", "Paracetamol stock is critical (8 units left).")]


def test_pass_already_critical_row_is_quiet():
    bus = ToastBus(clock=FakeClock())
    store = FakeStore()
    rows = load_rows([row(1, "Paracetamol", 5, StockStatus.CRITICAL)])

    result = asyncio.run(run_reconciliation_pass(rows, BHW_CONFIG, store, toast_bus=bus, user_id="bhw-1"))

    assert result.changes == []
    assert store.writes == []
    assert result.alerts == []
    assert bus.active() == []
    assert store.notifications == []


def test_pass_replenished_row_writes_without_alert():
    bus = ToastBus(clock=FakeClock())
    store = FakeStore()
    rows = load_rows([row(1, "Paracetamol", 25, StockStatus.CRITICAL)])

    result = asyncio.run(run_reconciliation_pass(rows, BHW_CONFIG, store, toast_bus=bus, user_id="bhw-1"))

    assert store.writes == [(1, StockStatus.NORMAL)]
    assert result.alerts == []
    assert bus.active() == []
    assert store.notifications == []


def test_pass_alerts_even_when_write_fails():
    bus = ToastBus(clock=FakeClock())
    store = FakeStore(fail_ids={1})
    rows = load_rows([row(1, "Paracetamol", 8)])

    result = asyncio.run(run_reconciliation_pass(rows, BHW_CONFIG, store, toast_bus=bus, user_id="bhw-1"))

    assert len(result.failed_writes) == 1
    assert result.rows[0].synced is False
    assert len(result.alerts) == 1
    assert len(store.notifications) == 1


def test_pass_uses_configured_toast_duration():
    clock = FakeClock()
    bus = ToastBus(default_duration=60, clock=clock)
    config = StockPipelineConfig(owner_role=OwnerRole.BNS, toast_duration=3)
    rows = load_rows([row(1, "Micronutrient Powder", 4)])

    asyncio.run(run_reconciliation_pass(rows, config, FakeStore(), toast_bus=bus))

    clock.now = 2.9
    assert len(bus.active()) == 1
    clock.now = 3.0
    assert bus.active() == []


def test_closed_bus_skips_toasts_but_keeps_notifications():
    bus = ToastBus(clock=FakeClock())
    bus.close()
    store = FakeStore()
    rows = load_rows([row(1, "Paracetamol", 8), row(2, "ORS", 15)])

    result = asyncio.run(run_reconciliation_pass(rows, BHW_CONFIG, store, toast_bus=bus, user_id="bhw-1"))

    assert len(result.alerts) == 2
    assert len(store.writes) == 2
    assert len(store.notifications) == 2


def test_bus_closed_mid_fan_out_is_not_raised():
    bus = ToastBus(clock=FakeClock())
    store = FakeStore()
    changes = reconcile(load_rows([row(1, "Paracetamol", 8), row(2, "ORS", 15)]))

    with patch.object(bus, "publish", side_effect=RuntimeError("Toast bus is closed")) as publish:
        alerts = asyncio.run(fan_out_alerts(changes, bus, store.insert_notification, user_id="bhw-1"))

    assert publish.call_count == 1
    assert len(alerts) == 2
    assert len(store.notifications) == 2
