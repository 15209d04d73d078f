from datetime import date, datetime, timedelta, timezone

import pytest

from app.api.schemas import remaining_days


@pytest.fixture
def create_flyer(client, admin_headers):
    """Factory: create a flyer as the superadmin and return it."""
    def _create_flyer(**kwargs):
        payload = {
            "title": "Job fair",
            "description": "Meet employers",
            "url": "https://example.com/fair",
            "from": date.today().isoformat(),
            "end": (date.today() + timedelta(days=10)).isoformat(),
        }
        payload.update(kwargs)
        response = client.post("/api/flyer", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()["publicFlyer"]
    return _create_flyer


def test_remaining_days():
    now = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert remaining_days(date(2030, 1, 3), now) == 2
    assert remaining_days(date(2030, 1, 2), now) == 1
    assert remaining_days(date(2030, 1, 1), now) == 0
    assert remaining_days(date(2029, 12, 1), now) == 0
    assert remaining_days(None, now) == 0


def test_create_flyer_requires_superadmin(client, employee):
    response = client.post("/api/flyer", json={"title": "x", "url": "y"}, headers=employee["headers"])
    assert response.status_code == 403
    assert client.post("/api/flyer", json={"title": "x", "url": "y"}).status_code == 401


def test_create_flyer_validation(client, admin_headers):
    response = client.post("/api/flyer", json={"title": "No url"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"message": "Please provide title and url"}


def test_flyer_status_is_derived(client, create_flyer):
    active = create_flyer()
    assert active["status"] == "active"
    assert active["remainingDays"] >= 9
    assert active["from"] == date.today().isoformat()

    ended = create_flyer(title="Old fair", end=(date.today() - timedelta(days=3)).isoformat())
    assert ended["status"] == "end"
    assert ended["remainingDays"] == 0


def test_list_flyers_with_search_and_paging(client, create_flyer):
    create_flyer(title="Job fair")
    create_flyer(title="Tech meetup", description="Python night")
    create_flyer(title="Career day")

    body = client.get("/api/flyer", params={"limit": 2}).json()
    assert body["totalResult"] == 3
    assert body["page"] == 1
    assert body["limit"] == 2
    assert len(body["data"]) == 2

    body = client.get("/api/flyer", params={"search": "python"}).json()
    assert [f["title"] for f in body["data"]] == ["Tech meetup"]


def test_get_update_delete_flyer(client, create_flyer, admin_headers):
    flyer = create_flyer()
    url = f"/api/flyer/{flyer['id']}"

    assert client.get(url).json()["data"]["title"] == "Job fair"
    assert client.get("/api/flyer/nope").json() == {"message": "Invalid Flyer ID"}

    response = client.put(url, json={"title": "Bigger fair", "url": ""}, headers=admin_headers)
    assert response.json()["message"] == "Flyer Updated Successfully"
    updated = response.json()["flyer"]
    assert updated["title"] == "Bigger fair"
    assert updated["url"] == "https://example.com/fair"

    assert client.delete(url, headers=admin_headers).json() == {"message": "Flyer deleted successfully"}
    assert client.get(url).status_code == 404


def test_like_toggles(client, create_flyer, employee, pending_company):
    flyer = create_flyer()
    url = f"/api/flyer/{flyer['id']}/like"

    assert client.post(url).status_code == 401
    assert client.post(url, headers=employee["headers"]).json() == {"message": "Liked", "likes": 1}
    assert client.post(url, headers=pending_company["headers"]).json() == {"message": "Liked", "likes": 2}
    assert client.post(url, headers=employee["headers"]).json() == {"message": "Unliked", "likes": 1}

    data = client.get(f"/api/flyer/{flyer['id']}").json()["data"]
    assert data["likes"] == [pending_company["id"]]


def test_comments_and_replies(client, create_flyer, employee, pending_company, admin_headers):
    flyer = create_flyer()
    base = f"/api/flyer/{flyer['id']}/comments"

    assert client.post(base, json={"comment": " "}, headers=employee["headers"]).json() == {
        "message": "Comment cannot be empty"
    }

    response = client.post(base, json={"comment": "Will be there"}, headers=employee["headers"])
    assert response.status_code == 201
    comment = response.json()["comments"][0]
    assert comment["userId"] == employee["id"]
    assert comment["user"]["email"] == "jane@example.com"

    replies_url = f"{base}/{comment['id']}/replies"
    response = client.post(replies_url, json={"comment": "See you"}, headers=pending_company["headers"])
    assert response.status_code == 201
    reply = response.json()["comment"]["replies"][0]
    assert reply["user"]["role"] == "company"

    assert [r["comment"] for r in client.get(replies_url).json()["replies"]] == ["See you"]

    reply_url = f"{replies_url}/{reply['id']}"
    assert client.patch(reply_url, json={"comment": "hijack"}, headers=employee["headers"]).status_code == 403
    response = client.patch(reply_url, json={"comment": "See you there"}, headers=pending_company["headers"])
    assert response.json()["replies"][0]["comment"] == "See you there"

    assert client.patch(f"{replies_url}/missing", json={"comment": "x"}, headers=employee["headers"]).json() == {
        "message": "Reply not found"
    }

    response = client.delete(reply_url, headers=admin_headers)
    assert response.json() == {"message": "Reply deleted successfully", "replies": []}

    assert client.get(f"{base}/missing/replies").json() == {"message": "Comment not found"}

    response = client.delete(f"{base}/{comment['id']}", headers=employee["headers"])
    assert response.json() == {"message": "Comment deleted", "comments": []}
