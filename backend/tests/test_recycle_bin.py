from models.inventory_items import OwnerRole


def test_deleted_items_listed_with_source_label(client, add_item, admin_headers):
    bhw_id = add_item("Paracetamol", 50)
    bns_id = add_item("Vitamin A Capsules", 50, owner_role=OwnerRole.BNS)
    client.delete(f"/inventory/BHW/{bhw_id}", headers=admin_headers)
    client.delete(f"/inventory/BNS/{bns_id}", headers=admin_headers)

    response = client.get("/recycle-bin/inventory", headers=admin_headers)

    assert response.status_code == 200
    rows = {r["item_name"]: r for r in response.json()}
    assert rows["Paracetamol"]["source_label"] == "BHW (Maternity)"
    assert rows["Paracetamol"]["deleted_by"] == "admin-1"
    assert rows["Vitamin A Capsules"]["source_label"] == "BNS (Child)"


def test_recycle_bin_requires_admin_or_midwife(client, bhw_headers):
    assert client.get("/recycle-bin/inventory", headers=bhw_headers).status_code == 403


def test_restore(client, add_item, admin_headers, midwife_headers):
    item_id = add_item("Paracetamol", 50)
    client.delete(f"/inventory/BHW/{item_id}", headers=admin_headers)

    response = client.post(f"/recycle-bin/inventory/{item_id}/restore", headers=midwife_headers)

    assert response.status_code == 200
    assert client.get(f"/inventory/BHW/{item_id}").status_code == 200
    assert client.get("/recycle-bin/inventory", headers=midwife_headers).json() == []
    assert client.post(f"/recycle-bin/inventory/{item_id}/restore", headers=midwife_headers).status_code == 404


def test_purge_only_deleted_items(client, add_item, admin_headers, midwife_headers):
    item_id = add_item("Paracetamol", 50)

    # Live rows cannot be purged
    assert client.delete(f"/recycle-bin/inventory/{item_id}", headers=admin_headers).status_code == 404

    client.delete(f"/inventory/BHW/{item_id}", headers=admin_headers)
    assert client.delete(f"/recycle-bin/inventory/{item_id}", headers=midwife_headers).status_code == 403
    assert client.delete(f"/recycle-bin/inventory/{item_id}", headers=admin_headers).status_code == 200
    assert client.get("/recycle-bin/inventory", headers=admin_headers).json() == []

    actions = [e["action"] for e in client.get("/activity-logs/", headers=admin_headers).json()]
    assert "Record Permanently Deleted" in actions
    assert "Inventory Item Deleted" in actions


def test_deleted_name_blocks_recreation(client, add_item, bhw_headers, admin_headers):
    item_id = add_item("Paracetamol", 50)
    client.delete(f"/inventory/BHW/{item_id}", headers=admin_headers)
    response = client.post("/inventory/BHW", json={"item_name": "Paracetamol", "quantity": 5}, headers=bhw_headers)
    assert response.status_code == 409
