"""Registration, login and the current user"""
import logging


class TestRegister:
    async def test_register(self, client):
        response = await client.post(
            "/auth/register",
            json={"email": "new@example.com", "username": "newbie", "password": "longenough"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "new@example.com"
        assert "hashed_password" not in body
        assert "password" not in body

    async def test_duplicate_is_rejected(self, client, test_user):
        response = await client.post(
            "/auth/register",
            json={"email": test_user.email, "username": "someone", "password": "longenough"},
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Registration failed"}

    async def test_registration_outcomes_are_logged(self, client, test_user, caplog):
        caplog.set_level(logging.INFO, logger="timeline_api")

        await client.post(
            "/auth/register",
            json={"email": "new@example.com", "username": "newbie", "password": "longenough"},
        )
        await client.post(
            "/auth/register",
            json={"email": test_user.email, "username": "someone", "password": "longenough"},
        )

        messages = [r.getMessage() for r in caplog.records]
        assert "User registration completed" in messages
        assert "User registration failed - account already exists" in messages
        assert "new@example.com" not in caplog.text

    async def test_short_password_is_rejected(self, client):
        response = await client.post(
            "/auth/register",
            json={"email": "new@example.com", "username": "newbie", "password": "short"},
        )

        assert response.status_code == 422


class TestLogin:
    async def test_login_and_me(self, client, test_user):
        response = await client.post(
            "/auth/login", json={"email": test_user.email, "password": "testpass123"}
        )
        assert response.status_code == 200
        token = response.json()["access_token"]
        assert response.json()["token_type"] == "bearer"

        response = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["username"] == "owner"

    async def test_wrong_password(self, client, test_user):
        response = await client.post(
            "/auth/login", json={"email": test_user.email, "password": "wrong-password"}
        )

        assert response.status_code == 401

    async def test_login_outcomes_are_logged(self, client, test_user, caplog):
        caplog.set_level(logging.INFO, logger="timeline_api")

        await client.post(
            "/auth/login", json={"email": test_user.email, "password": "wrong-password"}
        )
        await client.post(
            "/auth/login", json={"email": test_user.email, "password": "testpass123"}
        )

        records = {r.getMessage(): r for r in caplog.records}
        assert records["Login failed - invalid credentials"].levelno == logging.WARNING
        assert records["User login successful"].levelno == logging.INFO
        assert test_user.email not in caplog.text

    async def test_me_rejects_bad_token(self, client):
        response = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json() == {"detail": "Could not validate credentials"}
