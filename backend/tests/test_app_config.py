from crud import app_config as crud_app_config
from models.inventory_items import OwnerRole
from services.stock_alerts import DEFAULT_THRESHOLDS


def test_initialize_defaults_is_idempotent(client, admin_headers):
    assert client.get("/configurations/initialized", headers=admin_headers).json() == {"configs_initialized": False}

    response = client.post("/configurations/initialize", headers=admin_headers)
    assert response.status_code == 201
    assert sorted(response.json()["new_configs"]) == ["critical_threshold", "low_threshold", "toast_duration_seconds"]

    again = client.post("/configurations/initialize", headers=admin_headers).json()
    assert "new_configs" not in again
    assert client.get("/configurations/initialized", headers=admin_headers).json() == {"configs_initialized": True}


def test_configuration_changes_require_admin(client, bhw_headers):
    assert client.post("/configurations/initialize", headers=bhw_headers).status_code == 403
    assert client.post("/configurations/", json={"name": "low_threshold", "value": "30"}, headers=bhw_headers).status_code == 403


def test_list_and_get_by_name(client, admin_headers, bhw_headers):
    client.post("/configurations/initialize", headers=admin_headers)

    assert len(client.get("/configurations/", headers=bhw_headers).json()) == 3
    low = client.get("/configurations/", params={"name": "low_threshold"}, headers=bhw_headers).json()
    assert [(c["name"], c["value"]) for c in low] == [("low_threshold", "20")]
    assert client.get("/configurations/", params={"name": "missing"}, headers=bhw_headers).json() == []


def test_threshold_override_changes_classification(client, add_item, admin_headers):
    client.post("/configurations/initialize", headers=admin_headers)
    response = client.patch("/configurations/low_threshold/", json={"value": "30"}, headers=admin_headers)
    assert response.status_code == 200

    add_item("Ferrous Sulfate", 25)
    body = client.get("/inventory/BHW").json()

    assert body["items"][0]["status"] == "Low"


def test_invalid_threshold_updates_are_rejected(client, admin_headers):
    client.post("/configurations/initialize", headers=admin_headers)

    assert client.patch("/configurations/low_threshold/", json={"value": "5"}, headers=admin_headers).status_code == 400
    assert client.patch("/configurations/critical_threshold/", json={"value": "ten"}, headers=admin_headers).status_code == 400
    assert client.patch("/configurations/toast_duration_seconds/", json={"value": "0"}, headers=admin_headers).status_code == 400
    assert client.patch("/configurations/missing/", json={"value": "1"}, headers=admin_headers).status_code == 404


def test_stored_invalid_thresholds_fall_back_to_defaults(db):
    from models.app_config import AppConfig

    db.add(AppConfig(name=crud_app_config.CRITICAL_THRESHOLD_KEY, value="50"))
    db.add(AppConfig(name=crud_app_config.LOW_THRESHOLD_KEY, value="5"))
    db.commit()

    assert crud_app_config.get_stock_thresholds(db) == DEFAULT_THRESHOLDS


def test_pipeline_config_reads_toast_duration(db):
    from models.app_config import AppConfig

    db.add(AppConfig(name=crud_app_config.TOAST_DURATION_KEY, value="3"))
    db.commit()

    config = crud_app_config.get_pipeline_config(db, OwnerRole.BNS)
    assert config.owner_role == OwnerRole.BNS
    assert config.toast_duration == 3.0
    assert config.thresholds == DEFAULT_THRESHOLDS


def test_initialize_keeps_fractional_toast_duration(client, admin_headers, monkeypatch):
    monkeypatch.setattr("config.TOAST_DURATION_SECONDS", 2.5)

    client.post("/configurations/initialize", headers=admin_headers)

    duration = client.get("/configurations/", params={"name": "toast_duration_seconds"}, headers=admin_headers).json()
    assert [c["value"] for c in duration] == ["2.5"]
