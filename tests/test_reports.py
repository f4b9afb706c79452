import asyncio
import base64
import io
import json
import unittest
import zipfile
from datetime import date
from unittest import mock

from openpyxl import load_workbook

from tests.base import APITestCase, PNG_SIGNATURE, WEEK_ENTRIES, full_week, run
from workforce.config import get_settings
from workforce.database import AsyncSessionLocal
from workforce.reports.bulk import build_bulk_export
from workforce.services.stats import get_stats

# A Thursday; its week ends on Sunday 15 March
TODAY = date(2026, 3, 12)
WEEK_ENDING = date(2026, 3, 15)


class ReportTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.truck = self.create_vehicle("AB12 CDE", "HGV")
        self.van = self.create_vehicle("VN70 ABC", "Van")

    def inspection(self, who, vehicle, items, week_ending=WEEK_ENDING, submit=True):
        response = self.post("/inspections/", who, json={
            "vehicle_id": vehicle["id"],
            "week_ending": week_ending.isoformat(),
            "mileage": 1000,
            "items": items,
            "submit": submit,
            "signature_data": PNG_SIGNATURE,
        })
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def populate(self):
        """One inspection with a defect, one clean reviewed inspection, one draft."""
        failed = self.inspection("employee", self.truck, full_week(2, {(1, 1): "Low on fuel"}))
        clean = self.inspection("employee2", self.van, full_week(1))
        self.post(f"/inspections/{clean['id']}/review", "manager", json={"status": "reviewed"})
        self.inspection("employee2", self.truck, [], week_ending=date(2026, 3, 8), submit=False)
        return failed, clean


class TestStats(ReportTestCase):

    def test_dashboard_numbers(self):
        self.populate()

        timesheet = self.post("/timesheets/", "employee", json={
            "week_ending": WEEK_ENDING.isoformat(), "entries": WEEK_ENTRIES,
        }).json()
        self.post(f"/timesheets/{timesheet['id']}/submit", "employee", json={"signature_data": PNG_SIGNATURE})
        self.post(f"/timesheets/{timesheet['id']}/review", "manager", json={"decision": "approved"})
        pending = self.post("/timesheets/", "employee2", json={"week_ending": WEEK_ENDING.isoformat()}).json()
        self.post(f"/timesheets/{pending['id']}/submit", "employee2", json={"signature_data": PNG_SIGNATURE})

        async def load():
            async with AsyncSessionLocal() as session:
                return await get_stats(session, today=TODAY)

        stats = run(load())
        self.assertEqual(stats["timesheets"], {"week_hours": 17.5, "month_hours": 17.5, "pending_approvals": 1})
        self.assertEqual(stats["inspections"]["week_completed"], 2)
        self.assertEqual(stats["inspections"]["month_completed"], 2)
        self.assertEqual(stats["inspections"]["pending_approvals"], 1)
        # 20 of 21 ticks passed
        self.assertEqual(stats["inspections"]["pass_rate"], 95.2)
        self.assertEqual(stats["inspections"]["outstanding_defects"], 1)
        self.assertEqual(stats["employees"]["active"], 2)
        self.assertEqual(stats["summary"], {"total_pending_approvals": 2, "needs_attention": 1})

    def test_stats_endpoint(self):
        self.assertEqual(self.get("/reports/stats", "employee").status_code, 403)
        response = self.get("/reports/stats", "manager")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(set(response.json()), {"timesheets", "inspections", "employees", "summary"})
        self.assertEqual(response.json()["inspections"]["pass_rate"], 0.0)


class TestWorkbooks(ReportTestCase):

    def test_empty_reports(self):
        compliance = self.get("/reports/inspections/compliance", "manager")
        self.assertEqual(compliance.status_code, 404)
        self.assertEqual(compliance.json()["detail"], "No inspections found for the specified criteria")

        self.inspection("employee", self.truck, full_week(1))
        defects = self.get("/reports/inspections/defects", "manager")
        self.assertEqual(defects.status_code, 404)
        self.assertEqual(defects.json()["detail"], "No defects found for the specified criteria")

    def test_compliance_workbook(self):
        self.populate()
        response = self.get("/reports/inspections/compliance", "manager", params={
            "date_from": "2026-03-01", "date_to": "2026-03-31",
        })
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.content.startswith(b"PK"))
        self.assertIn("Inspection_Compliance_2026-03-01_to_2026-03-31.xlsx",
                      response.headers["content-disposition"])

        sheet = load_workbook(io.BytesIO(response.content))["Inspection Compliance"]
        self.assertEqual(sheet.cell(row=1, column=1).value, "Vehicle Reg")
        self.assertEqual(sheet.cell(row=2, column=5).value, "15/03/2026")
        statuses = sorted(sheet.cell(row=r, column=6).value for r in range(2, 5))
        self.assertEqual(statuses, ["Draft", "Reviewed", "Submitted"])
        self.assertEqual(sheet.cell(row=2, column=4).value, "-")
        summary = [sheet.cell(row=6, column=c).value for c in range(5, 9)]
        self.assertEqual(summary, ["Total: 3", "Submitted: 2", "Reviewed: 1", "Compliance: 66.7%"])

    def test_defects_workbook(self):
        self.populate()
        response = self.get("/reports/inspections/defects", "manager")
        self.assertEqual(response.status_code, 200)

        sheet = load_workbook(io.BytesIO(response.content))["Defects Report"]
        row = [sheet.cell(row=2, column=c).value for c in range(1, 9)]
        self.assertEqual(row, [
            "AB12 CDE", "HGV", "Eddie Employee", "15/03/2026", 1, "Fuel - and ad-blu", "Low on fuel", "Submitted",
        ])
        self.assertEqual(sheet.cell(row=4, column=4).value, "Total Defects: 1")
        self.assertEqual(sheet.cell(row=4, column=6).value, "Affected Vehicles: 1")

    def test_workbooks_need_a_manager(self):
        self.assertEqual(self.get("/reports/inspections/compliance", "employee").status_code, 403)


class TestBulkExport(ReportTestCase):

    RANGE = {"date_from": "2026-03-01", "date_to": "2026-03-31"}

    def test_requires_dates(self):
        response = self.get("/reports/inspections/bulk-pdf", "manager", params={"date_from": "2026-03-01"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.get("/reports/inspections/bulk-pdf", "manager", params=self.RANGE).status_code, 404)

    def test_single_pdf(self):
        self.populate()
        response = self.get("/reports/inspections/bulk-pdf", "manager", params=self.RANGE)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["content-type"], "application/pdf")
        self.assertTrue(response.content.startswith(b"%PDF"))
        self.assertIn("All_Inspections_2026-03-01_to_2026-03-31.pdf", response.headers["content-disposition"])

    def test_zip_when_too_many(self):
        self.populate()
        with mock.patch.object(get_settings(), "max_inspections_per_pdf", 1):
            response = self.get("/reports/inspections/bulk-pdf", "manager", params=self.RANGE)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["content-type"], "application/zip")

        archive = zipfile.ZipFile(io.BytesIO(response.content))
        self.assertEqual(sorted(archive.namelist()), [
            "All_Inspections_2026-03-01_to_2026-03-31_Part1.pdf",
            "All_Inspections_2026-03-01_to_2026-03-31_Part2.pdf",
        ])

    def test_rendered_off_the_event_loop(self):
        self.populate()
        threads = []

        def export(*args):
            try:
                asyncio.get_running_loop()
                threads.append("event loop")
            except RuntimeError:
                threads.append("worker")
            return build_bulk_export(*args)

        with mock.patch("workforce.routers.reports.build_bulk_export", side_effect=export):
            response = self.get("/reports/inspections/bulk-pdf", "manager", params=self.RANGE)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(threads, ["worker"])

    def read_lines(self, response):
        return [json.loads(line) for line in response.text.splitlines() if line.strip()]

    def test_streamed_export(self):
        self.populate()
        response = self.post("/reports/inspections/bulk-pdf", "manager", json=self.RANGE)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("application/x-ndjson"))

        events = self.read_lines(response)
        self.assertEqual(events[0], {"type": "init", "total": 2, "needsZip": False, "numParts": 1})
        self.assertEqual([e["current"] for e in events if e["type"] == "progress"], [1, 2])
        complete = events[-1]
        self.assertEqual(complete["type"], "complete")
        self.assertEqual(complete["contentType"], "application/pdf")
        self.assertTrue(base64.b64decode(complete["data"]).startswith(b"%PDF"))

    def test_streamed_errors(self):
        missing = self.read_lines(self.post("/reports/inspections/bulk-pdf", "manager", json={}))
        self.assertEqual(missing, [{"type": "error", "error": "date_from and date_to are required"}])

        bad = self.read_lines(self.post("/reports/inspections/bulk-pdf", "manager", json={
            "date_from": "01/03/2026", "date_to": "2026-03-31",
        }))
        self.assertEqual(bad[0]["error"], "Dates must be in YYYY-MM-DD format")

        empty = self.read_lines(self.post("/reports/inspections/bulk-pdf", "manager", json=self.RANGE))
        self.assertEqual(empty[0]["error"], "No inspections found in the selected date range")


class TestTimesheetReport(ReportTestCase):

    def test_manager_download(self):
        timesheet = self.post("/timesheets/", "employee", json={
            "week_ending": WEEK_ENDING.isoformat(), "entries": WEEK_ENTRIES,
        }).json()
        response = self.get(f"/reports/timesheets/{timesheet['id']}/pdf", "manager")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.content.startswith(b"%PDF"))
        self.assertEqual(self.get(f"/reports/timesheets/{timesheet['id']}/pdf", "employee").status_code, 403)


if __name__ == "__main__":
    unittest.main()
