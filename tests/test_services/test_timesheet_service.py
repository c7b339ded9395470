import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace as Obj

from sqlalchemy import create_engine, select, func
from sqlalchemy.orm import sessionmaker

from core.database import Base
import models_bootstrap  # noqa: F401

from fastapi import HTTPException
from account.models import Profile, Role
from shift.models import Shift, ShiftStatus
from application.models import ShiftApplication, ApplicationStatus
from timesheet.models import Timesheet, TimesheetStatus
from timesheet.schema import TimesheetUpdate
from timesheet.earnings import worked_hours, total_pay
from finance.models import Payment
from timesheet import service
from core.clock import aware


START = datetime(2030, 5, 6, 9, 0, tzinfo=timezone.utc)


class EarningsTests(unittest.TestCase):
    def _shift(self, **kw):
        base = dict(start_time=START, end_time=START + timedelta(hours=8),
                    hourly_rate=Decimal("150.00"), break_minutes=30, is_break_paid=False)
        base.update(kw)
        return Obj(**base)

    def _ts(self, **kw):
        base = dict(manager_approved_start=None, manager_approved_end=None,
                    clock_in_time=None, clock_out_time=None, is_no_show=False)
        base.update(kw)
        return Obj(**base)

    def test_planned_window_minus_unpaid_break(self):
        self.assertEqual(worked_hours(self._ts(), self._shift()), Decimal("7.50"))
        self.assertEqual(total_pay(self._ts(), self._shift()), Decimal("1125.00"))

    def test_paid_break_is_not_deducted(self):
        self.assertEqual(worked_hours(self._ts(), self._shift(is_break_paid=True)), Decimal("8.00"))

    def test_manager_times_win_over_clock(self):
        ts = self._ts(
            clock_in_time=START - timedelta(minutes=10),
            clock_out_time=START + timedelta(hours=9),
            manager_approved_start=START,
            manager_approved_end=START + timedelta(hours=4),
        )
        self.assertEqual(worked_hours(ts, self._shift()), Decimal("3.50"))

    def test_no_show_earns_nothing(self):
        self.assertEqual(total_pay(self._ts(is_no_show=True), self._shift()), Decimal("0.00"))

    def test_never_negative(self):
        ts = self._ts(manager_approved_start=START, manager_approved_end=START + timedelta(minutes=10))
        self.assertEqual(worked_hours(ts, self._shift()), Decimal("0.00"))


class TimesheetServiceTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        Session = sessionmaker(bind=self.engine, future=True)
        self.db = Session()

        self.db.add_all([
            Profile(id="company-1", role=Role.company, display_name="Café Nord"),
            Profile(id="company-2", role=Role.company, display_name="Hotel Syd"),
            Profile(id="worker-1", role=Role.worker, display_name="Freja"),
            Profile(id="worker-2", role=Role.worker, display_name="Mads"),
        ])
        self.db.flush()

        self.shift = Shift(
            company_id="company-1", title="Bartender", category="bar",
            start_time=START, end_time=START + timedelta(hours=8),
            hourly_rate=Decimal("150.00"), break_minutes=30, is_break_paid=False,
            vacancies_total=1, vacancies_taken=1, status=ShiftStatus.full,
        )
        self.db.add(self.shift)
        self.db.flush()
        self.app = ShiftApplication(
            shift_id=self.shift.id, worker_id="worker-1", company_id="company-1",
            status=ApplicationStatus.accepted,
        )
        self.db.add(self.app)
        self.db.commit()
        self.shift_id = self.shift.id

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _clocked(self):
        service.clock_in(self.db, worker_id="worker-1", shift_id=self.shift_id, now=START)
        return service.clock_out(self.db, worker_id="worker-1", shift_id=self.shift_id, now=START + timedelta(hours=8))

    # ---------- CLOCK ----------

    def test_clock_in_and_out(self):
        ts = self._clocked()
        self.assertEqual(ts.status, TimesheetStatus.pending)
        self.assertEqual(ts.company_id, "company-1")
        self.assertIsNotNone(ts.clock_out_time)

    def test_clock_in_requires_booking(self):
        with self.assertRaises(HTTPException) as cm:
            service.clock_in(self.db, worker_id="worker-2", shift_id=self.shift_id, now=START)
        self.assertEqual(cm.exception.status_code, 403)

    def test_double_clock_in_conflicts(self):
        service.clock_in(self.db, worker_id="worker-1", shift_id=self.shift_id, now=START)
        with self.assertRaises(HTTPException) as cm:
            service.clock_in(self.db, worker_id="worker-1", shift_id=self.shift_id, now=START)
        self.assertEqual(cm.exception.status_code, 409)

    def test_clock_out_before_clock_in_conflicts(self):
        with self.assertRaises(HTTPException) as cm:
            service.clock_out(self.db, worker_id="worker-1", shift_id=self.shift_id, now=START)
        self.assertEqual(cm.exception.detail, "Clock in first")

    # ---------- UPDATE ----------

    def test_manager_adjusts_times(self):
        ts = self._clocked()
        patch = TimesheetUpdate(
            manager_approved_start=START + timedelta(minutes=15),
            manager_approved_end=START + timedelta(hours=7),
        )
        row = service.update_timesheet(self.db, ts.id, patch, company_id="company-1")
        self.assertIsNotNone(row.manager_approved_start)

    def test_manager_times_in_other_offsets_are_stored_as_utc(self):
        ts = self._clocked()
        cest = timezone(timedelta(hours=2))
        patch = TimesheetUpdate(
            manager_approved_start=(START + timedelta(minutes=30)).astimezone(cest),
            manager_approved_end=(START + timedelta(hours=6)).astimezone(cest),
        )
        self.assertEqual(patch.manager_approved_start.utcoffset(), timedelta(0))

        service.update_timesheet(self.db, ts.id, patch, company_id="company-1")
        self.db.expire_all()
        row = self.db.get(Timesheet, ts.id)
        self.assertEqual(aware(row.manager_approved_start), START + timedelta(minutes=30))
        # 5.5h minus the 30 minute unpaid break
        self.assertEqual(worked_hours(row, row.shift), Decimal("5.00"))

    def test_naive_manager_times_are_rejected(self):
        with self.assertRaises(ValueError):
            TimesheetUpdate(manager_approved_start=datetime(2030, 5, 6, 9, 30))

    def test_other_company_cannot_update(self):
        ts = self._clocked()
        with self.assertRaises(HTTPException) as cm:
            service.update_timesheet(self.db, ts.id, TimesheetUpdate(status="disputed"), company_id="company-2")
        self.assertEqual(cm.exception.status_code, 404)

    # ---------- APPROVE ----------

    def test_approve_creates_payment_once(self):
        ts = self._clocked()

        first = service.approve_timesheet(self.db, ts.id, company_id="company-1")
        self.assertTrue(first.payment_created)
        self.assertEqual(first.timesheet.status, TimesheetStatus.approved)

        payment = self.db.scalars(select(Payment)).one()
        self.assertEqual(payment.amount, Decimal("1125.00"))
        self.assertEqual(payment.hours_worked, Decimal("7.50"))
        self.assertEqual(payment.shift_title_snapshot, "Bartender")
        self.assertEqual(payment.worker_name_snapshot, "Freja")

        second = service.approve_timesheet(self.db, ts.id, company_id="company-1")
        self.assertFalse(second.payment_created)
        self.assertEqual(self.db.scalar(select(func.count(Payment.id))), 1)

    def test_approve_requires_owner(self):
        ts = self._clocked()
        with self.assertRaises(HTTPException) as cm:
            service.approve_timesheet(self.db, ts.id, company_id="company-2")
        self.assertEqual(cm.exception.status_code, 403)

    def test_approved_timesheet_is_locked(self):
        ts = self._clocked()
        service.approve_timesheet(self.db, ts.id, company_id="company-1")
        with self.assertRaises(HTTPException) as cm:
            service.update_timesheet(self.db, ts.id, TimesheetUpdate(is_no_show=True), company_id="company-1")
        self.assertEqual(cm.exception.status_code, 409)

    # ---------- WORKER LIST ----------

    def test_worker_list_skips_future_shifts_and_no_shows(self):
        ts = self._clocked()
        future = Shift(
            company_id="company-1", title="Later", category="bar",
            start_time=START + timedelta(days=30), end_time=START + timedelta(days=30, hours=4),
            hourly_rate=Decimal("150"), vacancies_total=1, status=ShiftStatus.published,
        )
        self.db.add(future)
        self.db.flush()
        self.db.add(Timesheet(shift_id=future.id, worker_id="worker-1", company_id="company-1"))
        self.db.commit()

        rows = service.get_worker_timesheets(self.db, worker_id="worker-1", now=START + timedelta(days=1))
        self.assertEqual([r.id for r in rows], [ts.id])

        ts.is_no_show = True
        self.db.commit()
        rows = service.get_worker_timesheets(self.db, worker_id="worker-1", now=START + timedelta(days=1))
        self.assertEqual(rows, [])


if __name__ == "__main__":
    unittest.main()
