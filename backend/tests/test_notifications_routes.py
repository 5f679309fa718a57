import pytest

from crud import notifications as crud_notifications
from models.notifications import NotificationType
from schemas.notifications import NotificationCreate


@pytest.fixture
def notify(db):
    def _notify(user_id, message, type=NotificationType.INVENTORY_ALERT):
        return crud_notifications.create_notification(db, NotificationCreate(type=type, message=message, user_id=user_id)).id
    return _notify


def test_requires_authentication(client):
    assert client.get("/notifications/").status_code == 401


def test_invalid_token_is_rejected(client):
    response = client.get("/notifications/", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_malformed_header_is_rejected(client):
    response = client.get("/notifications/", headers={"Authorization": "Token abc"})
    assert response.status_code == 401


def test_lists_only_own_notifications_newest_first(client, bhw_headers, notify):
    notify("bhw-1", "first")
    notify("bns-1", "someone else's")
    notify("bhw-1", "second", NotificationType.FOLLOW_UP)

    messages = [n["message"] for n in client.get("/notifications/", headers=bhw_headers).json()]
    assert messages == ["second", "first"]


def test_unread_count_and_mark_read(client, bhw_headers, notify):
    first = notify("bhw-1", "first")
    notify("bhw-1", "second")

    assert client.get("/notifications/unread-count", headers=bhw_headers).json() == {"unread": 2}

    response = client.patch(f"/notifications/{first}/read", headers=bhw_headers)
    assert response.status_code == 200
    assert response.json()["is_read"] is True

    assert client.get("/notifications/unread-count", headers=bhw_headers).json() == {"unread": 1}
    unread = client.get("/notifications/", params={"unread_only": True}, headers=bhw_headers).json()
    assert [n["message"] for n in unread] == ["second"]


def test_mark_all_read(client, bhw_headers, notify):
    notify("bhw-1", "first")
    notify("bhw-1", "second")

    response = client.post("/notifications/read-all", headers=bhw_headers)
    assert response.json()["updated"] == 2
    assert client.get("/notifications/unread-count", headers=bhw_headers).json() == {"unread": 0}


def test_cannot_touch_other_users_notifications(client, bhw_headers, notify):
    other = notify("bns-1", "someone else's")
    assert client.patch(f"/notifications/{other}/read", headers=bhw_headers).status_code == 404
    assert client.delete(f"/notifications/{other}", headers=bhw_headers).status_code == 404


def test_delete_one_and_clear_all(client, bhw_headers, notify):
    first = notify("bhw-1", "first")
    notify("bhw-1", "second")
    notify("bhw-1", "third")

    assert client.delete(f"/notifications/{first}", headers=bhw_headers).status_code == 200
    assert len(client.get("/notifications/", headers=bhw_headers).json()) == 2

    assert client.delete("/notifications/", headers=bhw_headers).json()["deleted"] == 2
    assert client.get("/notifications/", headers=bhw_headers).json() == []
