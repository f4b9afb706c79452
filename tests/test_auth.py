import unittest

from tests.base import APITestCase, PASSWORD, run
from workforce.database import AsyncSessionLocal
from workforce.models.user import Profile


async def _deactivate(user_id):
    async with AsyncSessionLocal() as session:
        profile = await session.get(Profile, user_id)
        profile.is_active = False
        await session.commit()


async def _force_change(user_id):
    async with AsyncSessionLocal() as session:
        profile = await session.get(Profile, user_id)
        profile.must_change_password = True
        await session.commit()


class TestLogin(APITestCase):

    def test_login_returns_token_and_user(self):
        """Valid credentials return a bearer token and the profile"""
        response = self.post("/auth/login", json={"email": "employee@workforce.co.uk", "password": PASSWORD})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertIn("access_token", data)
        self.assertEqual(data["token_type"], "bearer")
        self.assertEqual(data["user"]["full_name"], "Eddie Employee")
        self.assertFalse(data["must_change_password"])

        me = self.client.get(
            f"{self.API}/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"}
        )
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["role"]["name"], "employee")

    def test_email_is_case_insensitive(self):
        response = self.post("/auth/login", json={"email": "Employee@Workforce.co.uk", "password": PASSWORD})
        self.assertEqual(response.status_code, 200)

    def test_wrong_password(self):
        response = self.post("/auth/login", json={"email": "employee@workforce.co.uk", "password": "nope"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Incorrect email or password")

    def test_unknown_user(self):
        response = self.post("/auth/login", json={"email": "ghost@workforce.co.uk", "password": PASSWORD})
        self.assertEqual(response.status_code, 401)

    def test_inactive_user_cannot_log_in(self):
        run(_deactivate(self.users["employee"]))
        response = self.post("/auth/login", json={"email": "employee@workforce.co.uk", "password": PASSWORD})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(self.get("/auth/me", "employee").status_code, 401)

    def test_missing_fields_are_bad_requests(self):
        response = self.post("/auth/login", json={"email": "employee@workforce.co.uk"})
        self.assertEqual(response.status_code, 400)


class TestCurrentUser(APITestCase):

    def test_me_requires_token(self):
        self.assertEqual(self.get("/auth/me").status_code, 401)

    def test_garbage_token(self):
        response = self.client.get(f"{self.API}/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        self.assertEqual(response.status_code, 401)

    def test_me(self):
        response = self.get("/auth/me", "manager")
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["email"], "manager@workforce.co.uk")
        self.assertTrue(data["role"]["is_manager_admin"])


class TestChangePassword(APITestCase):

    def test_change_password(self):
        """A successful change clears the forced-change flag"""
        run(_force_change(self.users["employee"]))
        response = self.post("/auth/change-password", "employee", json={
            "current_password": PASSWORD,
            "new_password": "Brand-New-9",
            "confirm_password": "Brand-New-9",
        })
        self.assertEqual(response.status_code, 200, response.text)
        self.assertFalse(self.get("/auth/me", "employee").json()["must_change_password"])

        login = self.post("/auth/login", json={"email": "employee@workforce.co.uk", "password": "Brand-New-9"})
        self.assertEqual(login.status_code, 200)

    def test_forced_change_without_current_password(self):
        run(_force_change(self.users["employee"]))
        response = self.post("/auth/change-password", "employee", json={
            "new_password": "Brand-New-9",
            "confirm_password": "Brand-New-9",
        })
        self.assertEqual(response.status_code, 200, response.text)

    def test_current_password_needed_when_not_forced(self):
        response = self.post("/auth/change-password", "employee", json={
            "new_password": "Brand-New-9",
            "confirm_password": "Brand-New-9",
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Current password is incorrect")

    def test_mismatch(self):
        response = self.post("/auth/change-password", "employee", json={
            "current_password": PASSWORD,
            "new_password": "Brand-New-9",
            "confirm_password": "Brand-New-8",
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Passwords do not match")

    def test_weak_password(self):
        response = self.post("/auth/change-password", "employee", json={
            "current_password": PASSWORD,
            "new_password": "weakpass",
            "confirm_password": "weakpass",
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn("uppercase", response.json()["detail"])

    def test_same_as_current(self):
        response = self.post("/auth/change-password", "employee", json={
            "current_password": PASSWORD,
            "new_password": PASSWORD,
            "confirm_password": PASSWORD,
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn("different", response.json()["detail"])


if __name__ == "__main__":
    unittest.main()
