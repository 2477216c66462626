"""
Tests for authentication endpoints (register, login, session and profile).

These tests verify:
  - Registration creates a user without returning a token
  - Duplicate username/email/ID number/employee number is rejected (409)
  - Username and password format rules are enforced (422)
  - Admin cannot be chosen at registration
  - Login returns a token in the body and an HttpOnly session cookie
  - Wrong password and unknown username get the same error (anti-enumeration)
  - The session cookie alone authenticates a request
  - Profile updates and password changes
"""

from httpx import AsyncClient, ASGITransport

from conftest import CUSTOMER, EMPLOYEE


def registration(**overrides) -> dict:
    body = {
        "full_name": "Jane Doe",
        "username": "janedoe",
        "email": "jane@example.com",
        "password": "StrongPass99!",
    }
    body.update(overrides)
    return body


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

class TestRegister:
    """Tests for POST /api/auth/register."""

    async def test_register_success(self, client):
        """A valid registration returns 201 with the user and no token."""
        response = await client.post("/api/auth/register", json=registration())
        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "janedoe"
        assert data["email"] == "jane@example.com"
        assert data["role"] == "Customer"
        assert data["id_number"] is None
        assert "token" not in data
        assert "password" not in data
        assert "hashed_password" not in data

    async def test_register_employee(self, client):
        """Employees can self-register with an employee number."""
        response = await client.post(
            "/api/auth/register",
            json=registration(role="Employee", employee_number="EMP-42"),
        )
        assert response.status_code == 201
        assert response.json()["role"] == "Employee"
        assert response.json()["employee_number"] == "EMP-42"

    async def test_register_admin_rejected(self, client):
        """The Admin role is never self-service."""
        response = await client.post("/api/auth/register", json=registration(role="Admin"))
        assert response.status_code == 422

    async def test_register_duplicate_username(self, client):
        """Registering a taken username returns 409 naming the field."""
        assert (await client.post("/api/auth/register", json=registration())).status_code == 201

        response = await client.post(
            "/api/auth/register",
            json=registration(email="other@example.com"),
        )
        assert response.status_code == 409
        data = response.json()
        assert data["detail"] == "Username is already taken"
        assert data["field"] == "username"
        assert data["error_type"] == "duplicate_field"

    async def test_register_duplicate_email(self, client):
        await client.post("/api/auth/register", json=registration())

        response = await client.post(
            "/api/auth/register",
            json=registration(username="someoneelse"),
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "Email is already taken"

    async def test_register_duplicate_id_number(self, client):
        await client.post("/api/auth/register", json=registration(id_number="9001"))

        response = await client.post(
            "/api/auth/register",
            json=registration(username="other", email="other@example.com", id_number="9001"),
        )
        assert response.status_code == 409
        assert response.json()["field"] == "id_number"

    async def test_register_duplicate_employee_number(self, client):
        await client.post(
            "/api/auth/register",
            json=registration(role="Employee", employee_number="EMP-1"),
        )

        response = await client.post(
            "/api/auth/register",
            json=registration(
                username="other", email="other@example.com",
                role="Employee", employee_number="EMP-1",
            ),
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "Employee number is already taken"

    async def test_first_collision_is_reported(self, client):
        """When both username and email are taken, username is reported."""
        await client.post("/api/auth/register", json=registration())
        response = await client.post("/api/auth/register", json=registration())
        assert response.json()["field"] == "username"

    async def test_missing_identity_numbers_do_not_collide(self, client):
        """Many users can leave ID and employee numbers empty."""
        first = await client.post("/api/auth/register", json=registration())
        second = await client.post(
            "/api/auth/register",
            json=registration(username="janedoe2", email="jane2@example.com"),
        )
        assert first.status_code == 201
        assert second.status_code == 201

    async def test_register_weak_password(self, client):
        """Passwords must mix upper, lower, digit and a special character."""
        for weak in ["short1!", "alllowercase1!", "ALLUPPER1!", "NoDigits!!", "NoSpecial123"]:
            response = await client.post(
                "/api/auth/register", json=registration(password=weak)
            )
            assert response.status_code == 422, weak

    async def test_register_invalid_username(self, client):
        """Usernames are 3-20 letters or digits."""
        for bad in ["ab", "has space", "under_score", "a" * 21]:
            response = await client.post(
                "/api/auth/register", json=registration(username=bad)
            )
            assert response.status_code == 422, bad

    async def test_register_invalid_email(self, client):
        response = await client.post(
            "/api/auth/register", json=registration(email="not-an-email")
        )
        assert response.status_code == 422

    async def test_register_missing_fields(self, client):
        response = await client.post("/api/auth/register", json={"username": "janedoe"})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Login and session
# ---------------------------------------------------------------------------

class TestLogin:
    """Tests for POST /api/auth/login and the session it creates."""

    async def test_login_success(self, client):
        """Login returns the user, a bearer token and an HttpOnly cookie."""
        await client.post("/api/auth/register", json=registration())

        response = await client.post(
            "/api/auth/login",
            json={"username": "janedoe", "password": "StrongPass99!"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["username"] == "janedoe"
        assert data["token_type"] == "bearer"
        assert data["token"]

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("payments_session=")
        assert "HttpOnly" in set_cookie

    async def test_login_wrong_password(self, client):
        await client.post("/api/auth/register", json=registration())

        response = await client.post(
            "/api/auth/login",
            json={"username": "janedoe", "password": "WrongPass99!"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    async def test_login_unknown_user_same_error(self, client):
        """An unknown username gets the exact same response as a wrong password."""
        response = await client.post(
            "/api/auth/login",
            json={"username": "nobody", "password": "StrongPass99!"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    async def test_me_with_bearer_token(self, customer_client):
        response = await customer_client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["username"] == CUSTOMER["username"]

    async def test_me_with_session_cookie(self, client, app_with_test_db):
        """The cookie set at login authenticates without an Authorization header."""
        await client.post("/api/auth/register", json=registration())
        login = await client.post(
            "/api/auth/login",
            json={"username": "janedoe", "password": "StrongPass99!"},
        )
        token = login.json()["token"]

        async with AsyncClient(
            transport=ASGITransport(app=app_with_test_db),
            base_url="http://test",
            cookies={"payments_session": token},
        ) as cookie_client:
            response = await cookie_client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["username"] == "janedoe"

    async def test_me_requires_authentication(self, client):
        response = await client.get("/api/auth/me")
        assert response.status_code == 401

    async def test_me_rejects_garbage_token(self, client):
        response = await client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    async def test_logout_clears_cookie(self, customer_client):
        response = await customer_client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully"
        assert "payments_session=" in response.headers["set-cookie"]

    async def test_logout_requires_authentication(self, client):
        response = await client.post("/api/auth/logout")
        assert response.status_code == 401


# ---------------------------------------------------------------------------
# Profile and password
# ---------------------------------------------------------------------------

class TestProfile:
    """Tests for PUT /api/auth/profile and PUT /api/auth/change-password."""

    async def test_update_profile(self, customer_client):
        response = await customer_client.put(
            "/api/auth/profile",
            json={
                "full_name": "Renamed Customer",
                "email": "renamed@example.com",
                "id_number": CUSTOMER["id_number"],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["full_name"] == "Renamed Customer"
        assert data["email"] == "renamed@example.com"
        assert data["username"] == CUSTOMER["username"]

    async def test_email_availability_follows_profile_update(self, customer_client, client):
        """The new email becomes taken and the old one is released."""
        before = await client.get("/api/auth/check-email/renamed@example.com")
        assert before.json()["available"] is True

        response = await customer_client.put(
            "/api/auth/profile",
            json={"full_name": "Renamed Customer", "email": "renamed@example.com"},
        )
        assert response.status_code == 200

        after = await client.get("/api/auth/check-email/renamed@example.com")
        released = await client.get(f"/api/auth/check-email/{CUSTOMER['email']}")
        assert after.json()["available"] is False
        assert released.json()["available"] is True

    async def test_keeping_own_email_is_not_a_collision(self, customer_client):
        response = await customer_client.put(
            "/api/auth/profile",
            json={"full_name": "Same Email", "email": CUSTOMER["email"]},
        )
        assert response.status_code == 200
        assert response.json()["id_number"] is None

    async def test_taking_another_users_email_conflicts(
        self, customer_client, employee_client
    ):
        response = await customer_client.put(
            "/api/auth/profile",
            json={"full_name": "Thief", "email": EMPLOYEE["email"]},
        )
        assert response.status_code == 409
        assert response.json()["field"] == "email"

    async def test_blank_identity_numbers_become_null(self, customer_client):
        response = await customer_client.put(
            "/api/auth/profile",
            json={
                "full_name": "Blank",
                "email": CUSTOMER["email"],
                "id_number": "",
                "employee_number": "",
            },
        )
        assert response.status_code == 200
        assert response.json()["id_number"] is None
        assert response.json()["employee_number"] is None

    async def test_change_password(self, customer_client, client):
        """After a password change only the new password logs in."""
        response = await customer_client.put(
            "/api/auth/change-password",
            json={
                "current_password": CUSTOMER["password"],
                "new_password": "BrandNew456!",
                "confirm_password": "BrandNew456!",
            },
        )
        assert response.status_code == 200

        old = await client.post(
            "/api/auth/login",
            json={"username": CUSTOMER["username"], "password": CUSTOMER["password"]},
        )
        new = await client.post(
            "/api/auth/login",
            json={"username": CUSTOMER["username"], "password": "BrandNew456!"},
        )
        assert old.status_code == 401
        assert new.status_code == 200

    async def test_change_password_wrong_current(self, customer_client):
        response = await customer_client.put(
            "/api/auth/change-password",
            json={
                "current_password": "NotMyPass1!",
                "new_password": "BrandNew456!",
                "confirm_password": "BrandNew456!",
            },
        )
        assert response.status_code == 400
        assert response.json()["error_type"] == "incorrect_password"

    async def test_change_password_mismatched_confirmation(self, customer_client):
        response = await customer_client.put(
            "/api/auth/change-password",
            json={
                "current_password": CUSTOMER["password"],
                "new_password": "BrandNew456!",
                "confirm_password": "Different456!",
            },
        )
        assert response.status_code == 422
