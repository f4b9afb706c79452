import unittest
from datetime import date

from sqlalchemy import func, select

from tests.base import reset_schema, run, seed_people
from workforce.database import AsyncSessionLocal
from workforce.models.inspection import VehicleInspection
from workforce.models.message import Message
from workforce.models.rams import RamsDocument
from workforce.models.timesheet import Timesheet
from workforce.models.user import Profile, Role
from workforce.models.vehicle import Vehicle, VehicleCategory
from workforce.services.demo import (
    DEMO_EMPLOYEES, DEMO_CONTRACTORS, DEMO_MANAGERS, DEMO_ADMINS, DEMO_VEHICLES, DemoDataGenerator,
    clear_demo_data, ensure_reference_data,
)

TODAY = date(2026, 3, 12)


async def count(session, model):
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


async def generate(seed=2025):
    async with AsyncSessionLocal() as session:
        generator = DemoDataGenerator(session, seed=seed, today=TODAY, weeks=1)
        stages = [stage async for stage in generator.run()]
        await session.commit()
        statuses = (await session.execute(
            select(Timesheet.status).order_by(Timesheet.id)
        )).scalars().all()
        return generator.counts, stages, [s.value for s in statuses]


class TestDemoData(unittest.TestCase):

    def setUp(self):
        run(reset_schema())

    def test_reference_data_is_idempotent(self):
        async def go():
            async with AsyncSessionLocal() as session:
                await ensure_reference_data(session)
                await ensure_reference_data(session)
                return await count(session, Role), await count(session, VehicleCategory)

        self.assertEqual(run(go()), (3, 3))

    def test_generation(self):
        counts, stages, _ = run(generate())
        people = len(DEMO_EMPLOYEES) + len(DEMO_CONTRACTORS) + len(DEMO_MANAGERS) + len(DEMO_ADMINS)
        self.assertEqual(counts["users"], people)
        self.assertEqual(counts["vehicles"], len(DEMO_VEHICLES))
        self.assertEqual(counts["timesheets"], len(DEMO_EMPLOYEES) + len(DEMO_CONTRACTORS))
        self.assertEqual(stages[0], "Creating demo users and roles...")
        self.assertIn("Generating timesheets (1 weeks)...", stages)

        async def totals():
            async with AsyncSessionLocal() as session:
                week = (await session.execute(select(func.min(VehicleInspection.week_ending)))).scalar_one()
                return (await count(session, RamsDocument), await count(session, Message), week)

        documents, messages, week = run(totals())
        self.assertEqual((documents, messages), (3, 2))
        self.assertEqual(week, date(2026, 3, 15))

    def test_same_seed_same_data(self):
        first = run(generate())[2]
        run(reset_schema())
        second = run(generate())[2]
        self.assertEqual(first, second)

    def test_clear_keeps_the_caller(self):
        users, roles = run(seed_people())
        run(generate())

        async def clear():
            async with AsyncSessionLocal() as session:
                stages = [stage async for stage in clear_demo_data(session, keep_profile_id=users["super"])]
                profiles = (await session.execute(select(Profile.email))).scalars().all()
                role_names = (await session.execute(select(Role.name))).scalars().all()
                return stages, profiles, role_names, await count(session, Vehicle), await count(session, Timesheet)

        stages, profiles, role_names, vehicles, timesheets = run(clear())
        self.assertIn("Deleting demo user profiles...", stages)
        self.assertEqual(profiles, ["super@workforce.co.uk"])
        self.assertEqual(role_names, ["admin"])
        self.assertEqual((vehicles, timesheets), (0, 0))


if __name__ == "__main__":
    unittest.main()
