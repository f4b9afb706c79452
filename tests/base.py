"""
Shared fixtures for the API tests: a fresh schema per test, a handful of
users in each role, and bearer headers for them.
"""
import asyncio
import unittest
from datetime import date, timedelta

from fastapi.testclient import TestClient

from workforce.auth import create_access_token, hash_password
from workforce.database import AsyncSessionLocal, Base, engine
from workforce.main import app
from workforce.models.user import Profile, Role

PASSWORD = "Secret123"
PASSWORD_HASH = hash_password(PASSWORD)

PNG_SIGNATURE = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk"
    "+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
)


def last_sunday(today=None):
    today = today or date.today()
    return today - timedelta(days=(today.weekday() + 1) % 7)


async def reset_schema():
    import workforce.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def seed_people():
    async with AsyncSessionLocal() as session:
        roles = {
            "admin": Role(name="admin", display_name="Administrator", is_manager_admin=True),
            "manager": Role(name="manager", display_name="Manager", is_manager_admin=True),
            "employee": Role(name="employee", display_name="Employee", is_manager_admin=False),
        }
        session.add_all(roles.values())
        await session.flush()

        people = {
            "admin": ("admin@workforce.co.uk", "Alice Admin", "admin"),
            "manager": ("manager@workforce.co.uk", "Mark Manager", "manager"),
            "manager2": ("manager2@workforce.co.uk", "Zoe Supervisor", "manager"),
            "employee": ("employee@workforce.co.uk", "Eddie Employee", "employee"),
            "employee2": ("employee2@workforce.co.uk", "Erin Employee", "employee"),
            "super": ("super@workforce.co.uk", "Sam Super", "admin"),
        }
        profiles = {}
        for key, (email, name, role_name) in people.items():
            profiles[key] = Profile(
                email=email,
                full_name=name,
                hashed_password=PASSWORD_HASH,
                role_id=roles[role_name].id,
                must_change_password=False,
            )
        session.add_all(profiles.values())
        await session.commit()
        return (
            {key: profile.id for key, profile in profiles.items()},
            {key: role.id for key, role in roles.items()},
        )


def run(coro):
    return asyncio.run(coro)


class APITestCase(unittest.TestCase):
    """Fresh database and client for every test."""

    API = "/api/v1"

    def setUp(self):
        run(reset_schema())
        self.users, self.roles = run(seed_people())
        self.client = TestClient(app)

    def tearDown(self):
        self.client.close()

    def headers(self, who):
        return {"Authorization": f"Bearer {create_access_token(self.users[who])}"}

    def get(self, path, who=None, **kwargs):
        if who:
            kwargs["headers"] = self.headers(who)
        return self.client.get(f"{self.API}{path}", **kwargs)

    def post(self, path, who=None, **kwargs):
        if who:
            kwargs["headers"] = self.headers(who)
        return self.client.post(f"{self.API}{path}", **kwargs)

    def put(self, path, who=None, **kwargs):
        if who:
            kwargs["headers"] = self.headers(who)
        return self.client.put(f"{self.API}{path}", **kwargs)

    def delete(self, path, who=None, **kwargs):
        if who:
            kwargs["headers"] = self.headers(who)
        return self.client.delete(f"{self.API}{path}", **kwargs)

    def create_vehicle(self, reg_number="AB12 CDE", category="HGV"):
        """Create a vehicle (and its category when missing) as the admin."""
        categories = self.get("/admin/vehicle-categories", "admin").json()
        match = [c for c in categories if c["name"] == category]
        if match:
            category_id = match[0]["id"]
        else:
            category_id = self.post("/admin/vehicle-categories", "admin", json={"name": category}).json()["id"]
        response = self.post("/admin/vehicles", "admin", json={"reg_number": reg_number, "category_id": category_id})
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()


WEEK_ENTRIES = [
    {"day_of_week": 1, "time_started": "07:00", "time_finished": "16:30", "job_number": "J100"},
    {"day_of_week": 2, "time_started": "07:00", "time_finished": "15:00", "working_in_yard": True},
    {"day_of_week": 6, "did_not_work": True, "time_started": "08:00", "time_finished": "12:00"},
]


def full_week(item_count, defects=None):
    """Every item ticked OK for every day, with the given (item, day) pairs failed."""
    defects = defects or {}
    items = []
    for number in range(1, item_count + 1):
        for day in range(1, 8):
            item = {"item_number": number, "day_of_week": day, "status": "ok"}
            if (number, day) in defects:
                item["status"] = "attention"
                item["comments"] = defects[(number, day)]
            items.append(item)
    return items
