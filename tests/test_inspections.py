import unittest
from datetime import timedelta

from tests.base import APITestCase, PNG_SIGNATURE, full_week, last_sunday


class InspectionTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.truck = self.create_vehicle("AB12 CDE", "HGV")
        self.van = self.create_vehicle("VN70 ABC", "Van")
        self.week = last_sunday()

    def payload(self, vehicle=None, **overrides):
        data = {
            "vehicle_id": (vehicle or self.truck)["id"],
            "week_ending": self.week.isoformat(),
            "mileage": 120500,
            "checked_by": "Eddie Employee",
            "items": full_week(3),
            "submit": True,
            "signature_data": PNG_SIGNATURE,
        }
        data.update(overrides)
        return data

    def submit(self, who="employee", **overrides):
        response = self.post("/inspections/", who, json=self.payload(**overrides))
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()


class TestChecklist(APITestCase):

    def test_van_and_truck_templates(self):
        van = self.get("/inspections/checklist", "employee", params={"category": "Small Van"}).json()
        self.assertEqual(van["template"], "van")
        self.assertEqual(van["items"][0], "Fuel")
        self.assertEqual(van["items"][-1], "Nil Defects")

        truck = self.get("/inspections/checklist", "employee", params={"category": "HGV"}).json()
        self.assertEqual(truck["template"], "truck")
        self.assertEqual(len(truck["items"]), 26)
        self.assertEqual(truck["items"][0], "Fuel - and ad-blu")

        default = self.get("/inspections/checklist", "employee").json()
        self.assertEqual(default["template"], "truck")


class TestInspectionDrafts(InspectionTestCase):

    def test_save_draft_without_validation(self):
        """Drafts skip the submission checks"""
        response = self.post("/inspections/", "employee", json=self.payload(
            submit=False, mileage=None, signature_data=None,
            week_ending=(self.week - timedelta(days=2)).isoformat(),
            items=[{"item_number": 9, "day_of_week": 3, "status": "attention"}],
        ))
        self.assertEqual(response.status_code, 201, response.text)
        draft = response.json()
        self.assertEqual(draft["status"], "draft")
        self.assertEqual(draft["items"][0]["item_description"], "Tyres")

    def test_update_and_delete_draft(self):
        draft = self.submit(submit=False)
        response = self.put(f"/inspections/{draft['id']}", "employee", json=self.payload(
            vehicle=self.van, submit=False, items=full_week(1),
        ))
        self.assertEqual(response.status_code, 200, response.text)
        updated = response.json()
        self.assertEqual(updated["vehicle_id"], self.van["id"])
        self.assertEqual(len(updated["items"]), 7)
        self.assertEqual(updated["items"][0]["item_description"], "Fuel")

        self.assertEqual(self.delete(f"/inspections/{draft['id']}", "employee2").status_code, 403)
        self.assertEqual(self.delete(f"/inspections/{draft['id']}", "employee").status_code, 204)
        self.assertEqual(self.get(f"/inspections/{draft['id']}", "employee").status_code, 404)

    def test_unknown_vehicle(self):
        response = self.post("/inspections/", "employee", json=self.payload(vehicle={"id": 999}))
        self.assertEqual(response.status_code, 404)


class TestInspectionSubmission(InspectionTestCase):

    def test_defects_need_comments(self):
        items = full_week(9)
        items[9 * 7 - 5]["status"] = "attention"  # Tyres, Wednesday
        response = self.post("/inspections/", "employee", json=self.payload(items=items))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Please add comments for all defects: Tyres (Wednesday)")

    def test_submission_checks(self):
        no_signature = self.post("/inspections/", "employee", json=self.payload(signature_data=""))
        self.assertEqual(no_signature.json()["error"], "Signature is required")

        no_mileage = self.post("/inspections/", "employee", json=self.payload(mileage=None))
        self.assertEqual(no_mileage.json()["error"], "Please enter a valid current mileage")

        saturday = self.post("/inspections/", "employee", json=self.payload(
            week_ending=(self.week - timedelta(days=1)).isoformat(),
        ))
        self.assertEqual(saturday.json()["error"], "Week ending must be a Sunday")

    def test_item_outside_checklist(self):
        """A van pad only has 14 items"""
        items = full_week(14) + [
            {"item_number": 99, "day_of_week": 1, "status": "attention", "comments": "Loose"},
        ]
        response = self.post("/inspections/", "employee", json=self.payload(vehicle=self.van, items=items))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Item 99 is not on the 14-item checklist for this vehicle")
        self.assertEqual(self.get("/inspections/", "employee").json(), [])

        # Item 15 exists on the truck pad
        truck = self.post("/inspections/", "employee", json=self.payload(items=full_week(15)))
        self.assertEqual(truck.status_code, 201, truck.text)

    def test_submit_creates_defect_actions(self):
        inspection = self.submit(items=full_week(10, {(9, 3): "Nearside front worn", (10, 1): "Spongy"}))
        self.assertEqual(inspection["status"], "submitted")
        self.assertIsNotNone(inspection["submitted_at"])
        self.assertIsNotNone(inspection["signed_at"])

        actions = self.get("/actions/", "manager", params={"inspection_id": inspection["id"]}).json()
        self.assertEqual(len(actions), 2)
        titles = sorted(a["title"] for a in actions)
        self.assertEqual(titles, ["Defect: Brakes (Monday)", "Defect: Tyres (Wednesday)"])
        self.assertTrue(all(a["priority"] == "high" and a["status"] == "pending" for a in actions))

        self.assertEqual(self.get("/actions/", "employee").status_code, 403)

        completed = self.post(f"/actions/{actions[0]['id']}/complete", "manager")
        self.assertEqual(completed.status_code, 200)
        self.assertTrue(completed.json()["actioned"])
        self.assertEqual(completed.json()["status"], "completed")
        self.assertEqual(completed.json()["actioned_by"], self.users["manager"])

        listed = self.get("/actions/", "manager").json()
        self.assertFalse(listed[0]["actioned"])
        self.assertTrue(listed[-1]["actioned"])
        pending = self.get("/actions/", "manager", params={"status": "pending"}).json()
        self.assertEqual(len(pending), 1)

        self.assertEqual(self.post("/actions/999/complete", "manager").status_code, 404)

    def test_submitted_inspection_is_locked(self):
        inspection = self.submit()
        edit = self.put(f"/inspections/{inspection['id']}", "employee", json=self.payload())
        self.assertEqual(edit.status_code, 400)
        remove = self.delete(f"/inspections/{inspection['id']}", "employee")
        self.assertEqual(remove.status_code, 400)

    def test_managers_record_for_others(self):
        inspection = self.submit("manager", user_id=self.users["employee2"])
        self.assertEqual(inspection["user_id"], self.users["employee2"])

        response = self.post("/inspections/", "employee", json=self.payload(user_id=self.users["employee2"]))
        self.assertEqual(response.status_code, 403)


class TestInspectionReview(InspectionTestCase):

    def test_review(self):
        inspection = self.submit()
        path = f"/inspections/{inspection['id']}/review"
        self.assertEqual(self.post(path, "employee", json={"status": "reviewed"}).status_code, 403)

        invalid = self.post(path, "manager", json={"status": "draft"})
        self.assertEqual(invalid.status_code, 400)

        response = self.post(path, "manager", json={
            "status": "reviewed", "manager_comments": "All good", "action_taken": "None required",
        })
        self.assertEqual(response.status_code, 200, response.text)
        data = response.json()
        self.assertEqual(data["status"], "reviewed")
        self.assertEqual(data["reviewed_by"], self.users["manager"])
        self.assertEqual(data["action_taken"], "None required")

        again = self.post(path, "manager", json={"status": "rejected"})
        self.assertEqual(again.status_code, 400)

    def test_listing_filters(self):
        own = self.submit("employee")
        self.submit("employee2", vehicle=self.van, items=full_week(2))

        mine = self.get("/inspections/", "employee").json()
        self.assertEqual([i["id"] for i in mine], [own["id"]])
        self.assertEqual(self.get(f"/inspections/{own['id']}", "employee2").status_code, 403)

        by_vehicle = self.get("/inspections/", "manager", params={"vehicle_id": self.van["id"]}).json()
        self.assertEqual(len(by_vehicle), 1)
        in_range = self.get("/inspections/", "manager", params={
            "date_from": (self.week + timedelta(days=1)).isoformat(),
        }).json()
        self.assertEqual(in_range, [])

    def test_pdf(self):
        inspection = self.submit(items=full_week(10, {(9, 3): "Nearside front worn"}))
        response = self.get(f"/inspections/{inspection['id']}/pdf", "employee")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.content.startswith(b"%PDF"))
        self.assertIn("AB12 CDE", response.headers["content-disposition"])

        van = self.submit(vehicle=self.van, items=full_week(14), week_ending=(self.week - timedelta(days=7)).isoformat())
        response = self.get(f"/inspections/{van['id']}/pdf", "manager")
        self.assertTrue(response.content.startswith(b"%PDF"))


if __name__ == "__main__":
    unittest.main()
