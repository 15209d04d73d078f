import pytest

LOCATION = {
    "province": "Kigali",
    "district": "Gasabo",
    "sector": "Kimironko",
    "cell": "Bibare",
    "village": "Urugwiro",
}


@pytest.fixture
def create_housekeeper(client):
    """Factory: create a housekeeper through the API and return it."""
    def _create_housekeeper(**kwargs):
        payload = {"fullName": "Alice Mukamana", "idNumber": "1199570000000001", "location": LOCATION}
        payload.update(kwargs)
        response = client.post("/api/housekeepers", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["housekeeper"]
    return _create_housekeeper


@pytest.fixture
def create_employer(client):
    """Factory: create an employer through the API and return it."""
    def _create_employer(**kwargs):
        payload = {
            "name": "Uwase Family",
            "nationalId": "1199080000000001",
            "villageLeaderNumber": "0788000001",
            "partnerNumber": "0788000002",
            "churchName": "St. Michel",
            "salaryRangeMin": 30000,
            "salaryRangeMax": 60000,
            "location": LOCATION,
        }
        payload.update(kwargs)
        response = client.post("/api/employers", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["employer"]
    return _create_employer


def test_create_housekeeper_accepts_flat_fields(client):
    payload = {"fullName": "Grace", "idNumber": "42", "workDistrict": "Gasabo", "willingToWorkWithChildren": True}
    payload.update(LOCATION)
    payload["hasParents"] = False
    payload["church"] = "ADEPR"

    response = client.post("/api/housekeepers", json=payload)
    assert response.status_code == 201
    housekeeper = response.json()["housekeeper"]
    assert housekeeper["location"] == LOCATION
    assert housekeeper["workPreferences"] == {
        "workDistrict": "Gasabo",
        "workSector": None,
        "willingToWorkWithChildren": True,
    }
    assert housekeeper["background"] == {"hasParents": False, "church": "ADEPR"}
    assert housekeeper["status"] == "available"


def test_create_housekeeper_requires_location(client):
    response = client.post("/api/housekeepers", json={"fullName": "Grace", "idNumber": "42"})
    assert response.status_code == 400
    assert response.json() == {"message": "Please provide fullName, idNumber and a complete location"}


def test_housekeeper_read_update_delete(client, create_housekeeper, admin_headers, employee):
    housekeeper = create_housekeeper()
    url = f"/api/housekeepers/{housekeeper['id']}"

    assert client.get("/api/housekeepers").json()["housekeepers"][0]["id"] == housekeeper["id"]
    assert client.get(url).json()["housekeeper"]["fullName"] == "Alice Mukamana"

    response = client.put(url, json={"phoneNumber": "0788", "background": {"educationLevel": "Secondary"}})
    updated = response.json()["housekeeper"]
    assert updated["phoneNumber"] == "0788"
    assert updated["background"] == {"educationLevel": "Secondary"}
    assert updated["location"] == LOCATION

    assert client.delete(url, headers=employee["headers"]).status_code == 403
    response = client.delete(url, headers=admin_headers)
    assert response.json() == {"message": "Housekeeper deleted successfully"}
    assert client.get(url).status_code == 404


def test_housekeeper_invalid_id(client):
    response = client.get("/api/housekeepers/xyz")
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid housekeeper ID"}


def test_create_employer_validation(client, create_employer):
    response = client.post("/api/employers", json={"name": "Only a name"})
    assert response.status_code == 400
    assert response.json() == {"message": "Please provide all required employer fields"}

    create_employer()
    response = client.post(
        "/api/employers",
        json={
            "name": "Copy",
            "nationalId": "1199080000000001",
            "villageLeaderNumber": "1",
            "partnerNumber": "2",
            "churchName": "c",
            "salaryRangeMin": 1,
            "salaryRangeMax": 2,
            **LOCATION,
        },
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Employer with this national ID already exists"}


def test_employer_listing_is_paginated_and_hides_deleted(client, create_employer, admin_headers):
    first = create_employer()
    create_employer(nationalId="1199080000000002", name="Second")

    body = client.get("/api/employers?limit=1").json()
    assert body["pagination"]["totalItems"] == 2
    assert len(body["employers"]) == 1

    assert client.delete(f"/api/employers/{first['id']}").status_code == 401
    response = client.delete(f"/api/employers/{first['id']}", headers=admin_headers)
    assert response.json() == {"message": "Employer deleted successfully"}

    names = [e["name"] for e in client.get("/api/employers").json()["employers"]]
    assert names == ["Second"]
    # soft delete: still readable by id
    assert client.get(f"/api/employers/{first['id']}").json()["employer"]["isActive"] is False


def test_update_employer(client, create_employer):
    employer = create_employer()
    response = client.put(
        f"/api/employers/{employer['id']}",
        json={"churchName": "New Church", "location": {"village": "Kibagabaga"}},
    )
    updated = response.json()["employer"]
    assert updated["churchName"] == "New Church"
    assert updated["location"] == {**LOCATION, "village": "Kibagabaga"}

    response = client.put(f"/api/employers/{employer['id']}", json={"salaryRangeMin": 90000})
    assert response.status_code == 400
    assert response.json() == {"message": "salaryRangeMin cannot exceed salaryRangeMax"}


def test_matches_filter_by_location_and_preferences(client, create_employer, create_housekeeper):
    employer = create_employer()
    near_kids = create_housekeeper(workPreferences={"workDistrict": "Gasabo", "willingToWorkWithChildren": True})
    near = create_housekeeper(fullName="Grace", workPreferences={"workDistrict": "Kicukiro"})
    create_housekeeper(fullName="Far Away", location={**LOCATION, "sector": "Remera"})

    url = f"/api/employers/{employer['id']}/matches"
    body = client.get(url).json()
    assert body["totalMatches"] == 2
    assert {h["id"] for h in body["housekeepers"]} == {near_kids["id"], near["id"]}

    body = client.get(url, params={"salaryRange": "true"}).json()
    assert [h["id"] for h in body["housekeepers"]] == [near_kids["id"]]

    body = client.get(url, params={"workWithChildren": "true"}).json()
    assert [h["id"] for h in body["housekeepers"]] == [near_kids["id"]]


def test_select_housekeepers(client, create_employer, create_housekeeper):
    employer = create_employer()
    first = create_housekeeper()
    second = create_housekeeper(fullName="Grace")
    third = create_housekeeper(fullName="Hope")
    url = f"/api/employers/{employer['id']}/select"

    assert client.post(url, json={"housekeeperIds": []}).json() == {
        "message": "housekeeperIds must be a non-empty array"
    }
    assert client.post(url, json={"housekeeperIds": [first["id"], second["id"], third["id"]]}).json() == {
        "message": "Cannot select more than 2 housekeepers"
    }
    assert client.post(url, json={"housekeeperIds": ["bad-id"]}).json() == {
        "message": "Invalid housekeeper ID(s) provided"
    }

    response = client.post(url, json={"housekeeperIds": [first["id"], second["id"]]})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Housekeepers selected successfully"
    assert body["employer"]["status"] == "active"
    assert {h["id"] for h in body["employer"]["selectedHousekeepers"]} == {first["id"], second["id"]}
    assert {h["status"] for h in body["selectedHousekeepers"]} == {"hired"}

    # hired housekeepers are no longer available
    response = client.post(url, json={"housekeeperIds": [first["id"]]})
    assert response.status_code == 400
    assert response.json() == {"message": "Some housekeepers are not available or do not exist"}

    matches = client.get(f"/api/employers/{employer['id']}/matches").json()
    assert [h["id"] for h in matches["housekeepers"]] == [third["id"]]


def test_employer_status(client, create_employer):
    employer = create_employer()
    url = f"/api/employers/{employer['id']}/status"
    response = client.patch(url, json={"status": "archived"})
    assert response.status_code == 400
    assert response.json() == {"message": "Status must be one of: pending, active, completed"}

    assert client.patch(url, json={"status": "completed"}).json()["employer"]["status"] == "completed"


def test_employer_lookup_errors(client):
    assert client.get("/api/employers/xyz").json() == {"message": "Invalid employer ID"}
    response = client.get("/api/employers/9b2f3f1e-3a0f-4c1d-9d6e-2b9b1f0f6a11")
    assert response.status_code == 404
    assert response.json() == {"message": "Employer not found"}
