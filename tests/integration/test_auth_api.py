"""Integration tests for authentication endpoints."""

from school_api.core.security import create_access_token, create_refresh_token

SUPERADMIN_LOGIN = {"email": "root@registry.edu", "password": "superpass123"}


class TestHealth:
    """Tests for the unauthenticated health check."""

    async def test_health(self, client) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["ok"] is True
        assert response.json()["data"]["service"] == "School Registry API"
        assert "X-Request-ID" in response.headers


class TestLogin:
    """Tests for POST /api/auth/login."""

    async def test_login_returns_token_pair(self, client, superadmin) -> None:
        response = await client.post("/api/auth/login", json=SUPERADMIN_LOGIN)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["email"] == "root@registry.edu"
        assert data["user"]["role"] == "superadmin"
        assert "passwordHash" not in data["user"]
        assert "password_hash" not in data["user"]
        assert data["longToken"]
        assert data["shortToken"]

    async def test_email_is_case_insensitive(self, client, superadmin) -> None:
        response = await client.post(
            "/api/auth/login", json={"email": "ROOT@registry.edu", "password": "superpass123"}
        )

        assert response.status_code == 200

    async def test_wrong_password(self, client, superadmin) -> None:
        response = await client.post(
            "/api/auth/login", json={"email": "root@registry.edu", "password": "wrong-pass"}
        )

        assert response.status_code == 401
        assert response.json() == {
            "ok": False,
            "data": None,
            "errors": "Invalid credentials",
            "message": "Invalid credentials",
        }

    async def test_missing_field_is_400(self, client) -> None:
        response = await client.post("/api/auth/login", json={"email": "root@registry.edu"})

        assert response.status_code == 400
        assert response.json()["ok"] is False
        assert "password" in response.json()["message"]


class TestRefresh:
    """Tests for POST /api/auth/refresh."""

    async def test_refresh_issues_access_token(self, client, superadmin) -> None:
        login = await client.post("/api/auth/login", json=SUPERADMIN_LOGIN)
        long_token = login.json()["data"]["longToken"]

        response = await client.post("/api/auth/refresh", json={"longToken": long_token})

        assert response.status_code == 200
        short_token = response.json()["data"]["shortToken"]
        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {short_token}"})
        assert me.json()["data"]["id"] == superadmin.id

    async def test_access_token_cannot_refresh(self, client, superadmin) -> None:
        access = create_access_token(superadmin.id, "superadmin", None)

        response = await client.post("/api/auth/refresh", json={"longToken": access})

        assert response.status_code == 401

    async def test_garbage_token(self, client) -> None:
        response = await client.post("/api/auth/refresh", json={"longToken": "not-a-token"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    async def test_unknown_user(self, client) -> None:
        response = await client.post(
            "/api/auth/refresh", json={"longToken": create_refresh_token(404, "superadmin", None)}
        )

        assert response.status_code == 401


class TestRegister:
    """Tests for POST /api/auth/register."""

    async def test_superadmin_registers_school_admin(self, client, superadmin_headers, greenwood) -> None:
        response = await client.post(
            "/api/auth/register",
            json={
                "username": "gw_admin",
                "email": "gw@greenwood.edu",
                "password": "secret123",
                "schoolId": greenwood.id,
            },
            headers=superadmin_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["role"] == "school_admin"
        assert data["schoolId"] == greenwood.id
        assert "passwordHash" not in data

    async def test_registered_admin_can_log_in(self, client, superadmin_headers, greenwood) -> None:
        await client.post(
            "/api/auth/register",
            json={
                "username": "gw_admin",
                "email": "gw@greenwood.edu",
                "password": "secret123",
                "schoolId": greenwood.id,
            },
            headers=superadmin_headers,
        )

        response = await client.post(
            "/api/auth/login", json={"email": "gw@greenwood.edu", "password": "secret123"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["schoolId"] == greenwood.id

    async def test_password_length_is_checked(self, client, superadmin_headers, greenwood) -> None:
        base = {"username": "gw_admin", "email": "gw@greenwood.edu", "schoolId": greenwood.id}

        too_short = await client.post(
            "/api/auth/register", json={**base, "password": "12345"}, headers=superadmin_headers
        )
        too_long = await client.post(
            "/api/auth/register", json={**base, "password": "x" * 73}, headers=superadmin_headers
        )

        assert too_short.status_code == 400
        assert too_long.status_code == 400
        assert "body.password" in too_long.json()["message"]

    async def test_duplicate_is_409(self, client, superadmin_headers, greenwood_admin, greenwood) -> None:
        response = await client.post(
            "/api/auth/register",
            json={
                "username": "greenwood_admin",
                "email": "another@greenwood.edu",
                "password": "secret123",
                "schoolId": greenwood.id,
            },
            headers=superadmin_headers,
        )

        assert response.status_code == 409

    async def test_school_admin_is_forbidden(self, client, headers_for, greenwood_admin, greenwood) -> None:
        response = await client.post(
            "/api/auth/register",
            json={
                "username": "sneaky",
                "email": "sneaky@greenwood.edu",
                "password": "secret123",
                "schoolId": greenwood.id,
            },
            headers=headers_for(greenwood_admin),
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Forbidden: insufficient permissions"

    async def test_short_password_is_400(self, client, superadmin_headers, greenwood) -> None:
        response = await client.post(
            "/api/auth/register",
            json={"username": "gw", "email": "gw@greenwood.edu", "password": "123"},
            headers=superadmin_headers,
        )

        assert response.status_code == 400


class TestMe:
    """Tests for GET /api/auth/me."""

    async def test_me(self, client, headers_for, greenwood_admin) -> None:
        response = await client.get("/api/auth/me", headers=headers_for(greenwood_admin))

        assert response.status_code == 200
        assert response.json()["data"]["username"] == "greenwood_admin"


class TestAuthenticationRequired:
    """Tests that protected endpoints reject anonymous callers."""

    async def test_missing_token(self, client) -> None:
        for method, path in [
            ("GET", "/api/schools"),
            ("POST", "/api/schools"),
            ("GET", "/api/classrooms/1"),
            ("PUT", "/api/students/1"),
            ("POST", "/api/students/1/transfer"),
            ("GET", "/api/users"),
            ("POST", "/api/auth/register"),
            ("GET", "/api/auth/me"),
        ]:
            response = await client.request(method, path)

            assert response.status_code == 401, path
            assert response.json()["ok"] is False
            assert response.json()["message"] == "Authentication required"

    async def test_refresh_token_is_not_an_access_token(self, client, superadmin) -> None:
        refresh = create_refresh_token(superadmin.id, "superadmin", None)

        response = await client.get("/api/schools", headers={"Authorization": f"Bearer {refresh}"})

        assert response.status_code == 401

    async def test_malformed_header(self, client) -> None:
        response = await client.get("/api/schools", headers={"Authorization": "Token abc"})

        assert response.status_code == 401
