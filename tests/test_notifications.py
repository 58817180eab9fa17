import os
import threading

import pytest

from lostfound.notifications import (STORAGE_KEY, add_notification,
                                     clear_all_notifications,
                                     delete_notification,
                                     get_user_notifications,
                                     mark_all_notifications_as_read,
                                     mark_notification_as_read, unread_count)


def test_empty_store(app):
    assert get_user_notifications(1) == []


def test_add_prepends_and_keys_by_user(app):
    assert add_notification(1, "first", "report")
    assert add_notification(1, "second", "match", related_item_id=7)
    add_notification(2, "someone else", "report")

    notifications = get_user_notifications(1)
    assert [n["message"] for n in notifications] == ["second", "first"]
    assert notifications[0]["related_item_id"] == 7
    assert notifications[0]["id"] != notifications[1]["id"]
    assert os.path.exists(os.path.join(app.config["NOTIFICATION_STORAGE_DIR"], f"{STORAGE_KEY}_1.json"))


def test_unknown_type_rejected(app):
    with pytest.raises(ValueError):
        add_notification(1, "hello", "claim")


def test_mark_read_and_delete(app):
    add_notification(1, "a", "report")
    add_notification(1, "b", "verification")
    first, second = get_user_notifications(1)

    assert mark_notification_as_read(1, first["id"])
    assert unread_count(get_user_notifications(1)) == 1

    assert mark_all_notifications_as_read(1)
    assert unread_count(get_user_notifications(1)) == 0

    assert delete_notification(1, second["id"])
    assert [n["message"] for n in get_user_notifications(1)] == ["b"]

    assert clear_all_notifications(1)
    assert get_user_notifications(1) == []


def test_corrupt_store_reads_as_empty(app):
    path = os.path.join(app.config["NOTIFICATION_STORAGE_DIR"], f"{STORAGE_KEY}_5.json")
    with open(path, "w") as fh:
        fh.write("{not json")

    assert get_user_notifications(5) == []


def test_notification_endpoints(client, make_account, login):
    user = make_account("user")
    login(user)
    add_notification(user.id, "Your lost item 'Keys' has been verified by security.", "verification")
    add_notification(user.id, "Another", "report")

    listing = client.get("/api/notifications").get_json()
    assert listing["unread_count"] == 2
    target = listing["notifications"][1]["id"]

    response = client.post(f"/api/notifications/{target}/read")
    assert response.get_json()["unread_count"] == 1
    assert client.post("/api/notifications/missing/read").status_code == 404

    assert client.post("/api/notifications/read_all").get_json() == {"success": True, "unread_count": 0}

    response = client.delete(f"/api/notifications/{target}")
    assert len(response.get_json()["notifications"]) == 1

    client.delete("/api/notifications")
    assert client.get("/api/notifications").get_json()["notifications"] == []
    assert client.get("/dashboard/user/notifications").status_code == 200


def test_concurrent_adds_are_all_kept(app):
    def worker(n):
        with app.app_context():
            add_notification(1, f"message {n}", "report")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(40)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    stored = get_user_notifications(1)
    assert len(stored) == 40
    assert {n["message"] for n in stored} == {f"message {n}" for n in range(40)}
    assert not [f for f in os.listdir(app.config["NOTIFICATION_STORAGE_DIR"]) if f.endswith(".tmp")]
