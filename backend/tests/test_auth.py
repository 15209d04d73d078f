from app.api.v1 import auth
from app.core.security import decode_access_token
from app.models import AdminNotification, Company


def test_register_employee(client, db):
    response = client.post(
        "/api/auth/register/employee",
        json={"name": "Jane Doe", "email": "Jane@Example.com", "password": "secret123", "phoneNumber": "0788"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Employee registered successfully"
    assert body["employee"]["email"] == "jane@example.com"
    assert body["employee"]["role"] == "employee"
    assert body["employee"]["phoneNumber"] == "0788"
    assert "hashedPassword" not in body["employee"]

    db.expire_all()
    assert db.query(AdminNotification).count() == 1


def test_register_employee_requires_fields(client):
    response = client.post("/api/auth/register/employee", json={"email": "jane@example.com"})
    assert response.status_code == 400
    assert response.json() == {"message": "Please provide name, email, and password"}


def test_register_rejects_malformed_email(client):
    response = client.post(
        "/api/auth/register/employee",
        json={"name": "Jane", "email": "not-an-email", "password": "secret123"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request body"


def test_register_company_is_forced_pending(client, db):
    response = client.post(
        "/api/auth/register/company",
        json={
            "companyName": "Acme Ltd",
            "email": "hr@acme.com",
            "password": "acme12345",
            "isApproved": True,
            "status": "approved",
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Company registered successfully. Awaiting admin approval."
    company = body["company"]
    assert company["isApproved"] is False
    assert company["status"] == "pending"
    assert company["isActive"] is True
    assert company["profileCompletionStatus"] == "incomplete"

    db.expire_all()
    stored = db.query(Company).filter(Company.email == "hr@acme.com").one()
    assert stored.is_approved is False


def test_duplicate_registration_leaves_first_account_untouched(client, register_employee, login):
    register_employee()
    response = client.post(
        "/api/auth/register/company",
        json={"companyName": "Other", "email": "jane@example.com", "password": "other"},
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Email already registered"}

    token = login("jane@example.com", "secret123")
    assert decode_access_token(token)["role"] == "employee"


def test_concurrent_duplicate_hits_unique_email(client, register_employee, login, monkeypatch):
    register_employee()
    # the other request passed the lookup before this one committed
    monkeypatch.setattr(auth, "get_user_by_email", lambda db, email: None)
    response = client.post(
        "/api/auth/register/employee",
        json={"name": "Jane Again", "email": "jane@example.com", "password": "other123"},
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Email already registered"}

    monkeypatch.undo()
    token = login("jane@example.com", "secret123")
    assert decode_access_token(token)["role"] == "employee"


def test_login_employee_returns_token(client, register_employee):
    register_employee()
    response = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "secret123"})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["role"] == "employee"
    assert "isApproved" not in body
    assert decode_access_token(body["token"])["role"] == "employee"


def test_login_company_reports_approval(client, register_company):
    register_company()
    response = client.post("/api/auth/login", json={"email": "hr@acme.com", "password": "acme12345"})
    assert response.status_code == 200
    body = response.json()
    assert body["isApproved"] is False
    assert decode_access_token(body["token"])["isApproved"] is False


def test_wrong_password_and_unknown_email_look_the_same(client, register_employee):
    register_employee()
    wrong_password = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "nope"})
    unknown_email = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "nope"})

    assert wrong_password.status_code == unknown_email.status_code == 400
    assert wrong_password.json() == unknown_email.json() == {"message": "Invalid credentials"}



def test_login_does_not_validate_email_format(client, register_employee):
    register_employee()
    malformed = client.post("/api/auth/login", json={"email": "nobody", "password": "nope"})
    assert malformed.status_code == 400
    assert malformed.json() == {"message": "Invalid credentials"}

    response = client.post("/api/auth/login", json={"email": "  Jane@Example.com ", "password": "secret123"})
    assert response.status_code == 200


def test_login_requires_email_and_password(client):
    response = client.post("/api/auth/login", json={"email": "jane@example.com"})
    assert response.status_code == 400
    assert response.json() == {"message": "Please provide email and password"}


def test_me_returns_current_account(client, register_employee, login, bearer):
    register_employee()
    token = login("jane@example.com", "secret123")
    response = client.get("/api/auth/me", headers=bearer(token))
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["email"] == "jane@example.com"
    assert user["name"] == "Jane Doe"
    assert "hashedPassword" not in user


def test_me_requires_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json() == {"message": "Access Denied: No token provided"}


def test_me_rejects_invalid_token(client, bearer):
    response = client.get("/api/auth/me", headers=bearer("not-a-token"))
    assert response.status_code == 403
    assert response.json() == {"message": "Access Denied: Invalid token"}
