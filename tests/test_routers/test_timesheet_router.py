import unittest
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace as Obj
from unittest.mock import patch
from fastapi.testclient import TestClient

from main import app
from core.database import get_db
from core.errors import Unauthorized
from auth.services.auth_service import get_current_active_user
from account.models import Role
from timesheet.service import Approval


def _ts(**kw):
    base = dict(
        id=7,
        shift_id=100,
        worker_id="worker-1",
        company_id="company-1",
        status="pending",
        clock_in_time=datetime(2030, 6, 1, 18, 0, tzinfo=timezone.utc),
        clock_out_time=datetime(2030, 6, 1, 22, 30, tzinfo=timezone.utc),
        manager_approved_start=None,
        manager_approved_end=None,
        is_no_show=False,
    )
    base.update(kw)
    return Obj(**base)


class TimesheetRouterTests(unittest.TestCase):
    def setUp(self):
        class FakeDB:
            def rollback(self): ...
        def _fake_db():
            yield FakeDB()

        app.dependency_overrides[get_db] = _fake_db
        self.as_user("worker-1", Role.worker)
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_current_active_user, None)

    def as_user(self, uid, role):
        app.dependency_overrides[get_current_active_user] = lambda: Obj(id=uid, role=role, is_active=True)

    @patch("timesheet.router.service.clock_in")
    def test_clock_in_uses_current_worker(self, mock_in):
        mock_in.return_value = _ts(clock_out_time=None)
        resp = self.client.post("/api/timesheets/shifts/100/clock-in")
        self.assertEqual(resp.status_code, 200, resp.text)
        _, kwargs = mock_in.call_args
        self.assertEqual(kwargs["worker_id"], "worker-1")
        self.assertEqual(kwargs["shift_id"], 100)

    @patch("timesheet.router.service.clock_in")
    def test_clock_in_not_booked_403(self, mock_in):
        mock_in.side_effect = Unauthorized("You are not booked on this shift")
        resp = self.client.post("/api/timesheets/shifts/100/clock-in")
        self.assertEqual(resp.status_code, 403)

    @patch("timesheet.router.service.get_worker_timesheets")
    def test_mine_includes_earnings(self, mock_mine):
        shift = Obj(
            title="Bartender",
            start_time=datetime(2030, 6, 1, 18, 0, tzinfo=timezone.utc),
            end_time=datetime(2030, 6, 1, 22, 30, tzinfo=timezone.utc),
            hourly_rate=Decimal("200.00"),
            break_minutes=30,
            is_break_paid=False,
        )
        mock_mine.return_value = [_ts(shift=shift)]
        resp = self.client.get("/api/timesheets/mine")
        self.assertEqual(resp.status_code, 200, resp.text)
        row = resp.json()[0]
        self.assertEqual(row["shift_title"], "Bartender")
        self.assertEqual(Decimal(row["hours_worked"]), Decimal("4.00"))
        self.assertEqual(Decimal(row["total_pay"]), Decimal("800.00"))

    def test_worker_cannot_approve(self):
        resp = self.client.post("/api/timesheets/7/approve")
        self.assertEqual(resp.status_code, 403)

    @patch("timesheet.router.service.approve_timesheet")
    def test_company_approves(self, mock_approve):
        self.as_user("company-1", Role.company)
        mock_approve.return_value = Approval(
            timesheet=_ts(status="approved"), payment_created=True, message="Timesheet approved and payment created"
        )
        resp = self.client.post("/api/timesheets/7/approve")
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertTrue(body["payment_created"])
        self.assertEqual(body["timesheet"]["status"], "approved")
        _, kwargs = mock_approve.call_args
        self.assertEqual(kwargs["company_id"], "company-1")

    @patch("timesheet.router.service.get_timesheet_for_company")
    def test_patch_foreign_timesheet_404(self, mock_get):
        self.as_user("company-1", Role.company)
        mock_get.return_value = None
        resp = self.client.patch("/api/timesheets/7", json={"is_no_show": True})
        self.assertEqual(resp.status_code, 404)

    def test_patch_cannot_set_approved(self):
        self.as_user("company-1", Role.company)
        resp = self.client.patch("/api/timesheets/7", json={"status": "approved"})
        self.assertEqual(resp.status_code, 422)


if __name__ == "__main__":
    unittest.main()
