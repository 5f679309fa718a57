from database import SessionLocal
from models.inventory_items import OwnerRole, StockStatus
from services.toast_bus import ToastBus
from tasks.stock_sweep import run_stock_sweep


def test_sweep_reconciles_both_programs(add_item, stored_status):
    bhw_id = add_item("Paracetamol", 8)
    bns_id = add_item("Vitamin A Capsules", 100, owner_role=OwnerRole.BNS, status=StockStatus.LOW)
    add_item("ORS", 50)
    bus = ToastBus()

    summary = run_stock_sweep(toast_bus=bus, session_factory=SessionLocal)

    assert summary == {"BHW": 1, "BNS": 1}
    assert stored_status(bhw_id) == StockStatus.CRITICAL
    assert stored_status(bns_id) == StockStatus.NORMAL
    assert [t.message for t in bus.active()] == ["Paracetamol stock is critical (8 units left)."]


def test_sweep_skips_deleted_rows_and_closed_bus(add_item, stored_status):
    item_id = add_item("Paracetamol", 8, is_deleted=True)
    bus = ToastBus()
    bus.close()

    summary = run_stock_sweep(toast_bus=bus)

    assert summary == {"BHW": 0, "BNS": 0}
    assert stored_status(item_id) == StockStatus.NORMAL
