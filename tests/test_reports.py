import io
import os
from datetime import date, timedelta

from PIL import Image

from lostfound import db
from lostfound.auth.models import ActivityLog
from lostfound.notifications import get_user_notifications
from lostfound.reports.models import FoundItem, LostItem
from lostfound.reports.queries import get_categories, get_user_reports, search_items


def report_form(**overrides):
    data = {
        "report_type": "lost",
        "name": "Black Laptop Bag",
        "category": "accessories",
        "description": "Black bag with a blue sticker on the front",
        "location": "Library 3rd floor",
        "date": "2026-01-10",
    }
    data.update(overrides)
    return data


def png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color="blue").save(buf, "PNG")
    buf.seek(0)
    return buf


def test_submit_lost_report(client, make_account, login):
    user = make_account("user")
    login(user)

    response = client.post("/dashboard/user/report", data=report_form())

    assert response.status_code == 302
    item = LostItem.query.one()
    assert item.status == "reported"
    assert item.user_id == user.id
    assert item.lost_date == date(2026, 1, 10)
    assert item.image is None
    assert ActivityLog.query.one().user_id == user.id

    notifications = get_user_notifications(user.id)
    assert notifications[0]["message"] == "Your lost item 'Black Laptop Bag' has been reported successfully."
    assert notifications[0]["type"] == "report"
    assert notifications[0]["is_read"] is False


def test_submit_found_report_with_image(app, client, make_account, login):
    login(make_account("user"))

    data = report_form(report_type="found")
    data["image"] = (png_bytes(), "bottle.png")
    response = client.post("/dashboard/user/report", data=data, content_type="multipart/form-data")

    assert response.status_code == 302
    item = FoundItem.query.one()
    assert item.found_date == date(2026, 1, 10)
    assert item.image.startswith("/item-images/")
    stored = os.path.join(app.config["UPLOAD_FOLDER"], item.image.rsplit("/", 1)[1])
    assert os.path.exists(stored)
    assert client.get(item.image).status_code == 200


def test_broken_image_is_dropped_but_report_saved(client, make_account, login):
    login(make_account("user"))

    data = report_form()
    data["image"] = (io.BytesIO(b"not really a png"), "fake.png")
    response = client.post("/dashboard/user/report", data=data, content_type="multipart/form-data")

    assert response.status_code == 302
    assert LostItem.query.one().image is None


def test_oversized_image_is_dropped_but_report_saved(client, make_account, login):
    login(make_account("user"))
    buf = io.BytesIO()
    Image.new("1", (14000, 14000)).save(buf, "PNG")
    buf.seek(0)

    data = report_form()
    data["image"] = (buf, "huge.png")
    response = client.post("/dashboard/user/report", data=data, content_type="multipart/form-data")

    assert response.status_code == 302
    assert LostItem.query.one().image is None


def test_validation_errors_are_reported(client, make_account, login):
    login(make_account("user"))

    response = client.post("/dashboard/user/report", data=report_form(name="ab", description="short"))

    assert response.status_code == 400
    assert b"Title must be" in response.data
    assert b"Description must be at least 10 characters." in response.data
    assert LostItem.query.count() == 0


def test_future_date_is_rejected(client, make_account, login):
    login(make_account("user"))
    tomorrow = (date.today() + timedelta(days=1)).isoformat()

    response = client.post("/dashboard/user/report", data=report_form(date=tomorrow))

    assert response.status_code == 400
    assert LostItem.query.count() == 0


def test_unknown_category_is_rejected(client, make_account, login):
    login(make_account("user"))

    response = client.post("/dashboard/user/report", data=report_form(category="furniture"))

    assert response.status_code == 400


def test_security_cannot_submit_reports(client, make_account, login):
    login(make_account("security"))

    response = client.post("/dashboard/user/report", data=report_form())

    assert response.status_code == 302
    assert LostItem.query.count() == 0


def test_user_reports_are_merged_newest_first(app, make_account, make_report):
    user = make_account("user")
    other = make_account("user")
    make_report(user, "lost", name="Umbrella")
    make_report(other, "lost", name="Not mine")
    make_report(user, "found", name="Keys")

    reports = get_user_reports(user.id)

    assert [(r["type"], r["name"]) for r in reports] == [("found", "Keys"), ("lost", "Umbrella")]
    assert [r["name"] for r in get_user_reports(user.id, "lost")] == ["Umbrella"]


def test_my_reports_api(client, make_account, make_report, login):
    user = make_account("user")
    make_report(user, "lost", status="verified")
    make_report(user, "found")
    login(user)

    payload = client.get("/api/user/reports").get_json()

    assert payload["stats"]["total"] == 2
    assert payload["stats"]["verified"] == 1
    assert payload["stats"]["found"] == 1
    assert client.get("/api/user/reports?type=stolen").status_code == 400


def test_dashboard_renders(client, make_account, make_report, login):
    user = make_account("user", name="Rina")
    make_report(user)
    login(user)

    response = client.get("/dashboard/user")

    assert response.status_code == 200
    assert b"Welcome, Rina" in response.data


def test_search_filters(app, make_account, make_report):
    user = make_account("user")
    make_report(user, "lost", name="Red Umbrella", category="other", event_date=date(2026, 1, 5))
    make_report(user, "found", name="Laptop charger", category="electronics",
                location="Cafeteria", status="verified", event_date=date(2026, 2, 1))
    make_report(user, "found", name="Student card", category="documents",
                description="Card near the umbrella stand", event_date=date(2026, 3, 1))

    assert {r["name"] for r in search_items(keyword="UMBRELLA")} == {"Red Umbrella", "Student card"}
    assert [r["name"] for r in search_items(keyword="cafeteria")] == ["Laptop charger"]
    assert [r["name"] for r in search_items(status="verified")] == ["Laptop charger"]
    assert [r["name"] for r in search_items(report_type="lost")] == ["Red Umbrella"]
    assert [r["name"] for r in search_items(category="documents")] == ["Student card"]
    ranged = search_items(date_from=date(2026, 1, 6), date_to=date(2026, 2, 1))
    assert [r["name"] for r in ranged] == ["Laptop charger"]

    assert search_items(keyword="_") == []
    assert search_items(keyword="%") == []
    make_report(user, "found", name="Box 100% full", description="Labelled spare_parts inside")
    assert [r["name"] for r in search_items(keyword="100%")] == ["Box 100% full"]
    assert [r["name"] for r in search_items(keyword="e_p")] == ["Box 100% full"]

    everything = search_items()[1:]
    assert [r["name"] for r in everything] == ["Student card", "Laptop charger", "Red Umbrella"]
    assert set(everything[0]) == {"id", "type", "name", "category", "description", "location",
                                  "date", "status", "image", "created_at"}


def test_search_api_validates_parameters(client, make_account, login):
    login(make_account("user"))

    assert client.get("/api/items/search?status=lost").status_code == 400
    assert client.get("/api/items/search?date_from=01-01-2026").status_code == 400
    assert client.get("/api/items/search?keyword=bag").get_json() == {"items": [], "total": 0}


def test_categories_are_distinct_and_sorted(app, make_account, make_report):
    user = make_account("user")
    make_report(user, "lost", category="keys")
    make_report(user, "found", category="electronics")
    make_report(user, "found", category="keys")

    assert get_categories() == ["electronics", "keys"]
