"""Integration tests for /api/v1/auth endpoints."""

from httpx import AsyncClient


class TestAuthAPI:

    async def test_register_new_user(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "username": "ada",
                "password": "SecurePass123",
                "display_name": "Ada",
                "grade": 6,
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["access_token"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0
        assert data["user"]["username"] == "ada"
        assert data["user"]["role"] == "student"
        assert "X-Request-ID" in response.headers

    async def test_register_duplicate_username(self, client: AsyncClient, register):
        await register("ada")
        response = await client.post(
            "/api/v1/auth/register",
            json={"username": "ada", "password": "SecurePass123", "display_name": "Other"},
        )
        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    async def test_register_admin_not_allowed(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={"username": "mallory", "password": "SecurePass123", "display_name": "M", "role": "admin"},
        )
        assert response.status_code == 422
        assert response.json()["detail"] == "Validation error"

    async def test_weak_password_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={"username": "bob", "password": "password", "display_name": "Bob"},
        )
        assert response.status_code == 422

    async def test_login(self, client: AsyncClient, register):
        await register("ada")

        response = await client.post(
            "/api/v1/auth/login", json={"username": "ada", "password": "SecurePass123"}
        )
        assert response.status_code == 200

        token = response.json()["access_token"]
        me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["username"] == "ada"

    async def test_login_wrong_password(self, client: AsyncClient, register):
        await register("ada")
        response = await client.post(
            "/api/v1/auth/login", json={"username": "ada", "password": "WrongPass123"}
        )
        assert response.status_code == 401

    async def test_me_requires_token(self, client: AsyncClient):
        assert (await client.get("/api/v1/auth/me")).status_code == 401
        bad = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nope"})
        assert bad.status_code == 401
