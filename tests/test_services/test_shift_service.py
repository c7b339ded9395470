import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from core.database import Base
import models_bootstrap  # noqa: F401

from fastapi import HTTPException
from account.models import Profile, Role
from shift.models import Shift, ShiftStatus
from application.models import ShiftApplication, ApplicationStatus
from shift import service
from shift.schemas import ShiftCreate, ShiftUpdate
from core.clock import aware
from cancellation.policy import classify_cancellation


START = datetime(2030, 5, 6, 9, 0, tzinfo=timezone.utc)
NOW = datetime(2030, 5, 1, 12, 0, tzinfo=timezone.utc)


class ShiftServiceTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        TestingSession = sessionmaker(bind=self.engine, future=True)
        self.db = TestingSession()

        self.db.add_all([
            Profile(id="company-1", role=Role.company, display_name="Café Nord"),
            Profile(id="company-2", role=Role.company, display_name="Hotel Syd"),
            Profile(id="worker-1", role=Role.worker, display_name="Freja"),
            Profile(id="worker-2", role=Role.worker, display_name="Mads"),
        ])
        self.db.commit()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _create(self, company="company-1", start=START, hours=8, vacancies=2, category="bar"):
        return service.create_shift(self.db, ShiftCreate(
            company_id=company,
            title="Bartender",
            category=category,
            start_time=start,
            end_time=start + timedelta(hours=hours),
            hourly_rate=Decimal("180"),
            vacancies_total=vacancies,
        ))

    # ---------- CREATE ----------

    def test_create_shift_is_published_with_no_taken_vacancies(self):
        row = self._create()
        self.assertEqual(row.status, ShiftStatus.published)
        self.assertEqual(row.vacancies_taken, 0)
        self.assertEqual(row.company_id, "company-1")

    def test_create_dto_rejects_end_before_start(self):
        with self.assertRaises(ValueError):
            ShiftCreate(
                company_id="company-1", title="x", category="bar",
                start_time=START, end_time=START - timedelta(hours=1),
                hourly_rate=Decimal("100"),
            )

    # ---------- JOB BOARD ----------

    def test_job_board_lists_future_published_shifts_only(self):
        future = self._create()
        past = self._create(start=NOW - timedelta(days=1))
        cancelled = self._create()
        cancelled.status = ShiftStatus.cancelled
        self.db.commit()

        rows = service.get_job_board(self.db, now=NOW)
        ids = [r.id for r in rows]
        self.assertIn(future.id, ids)
        self.assertNotIn(past.id, ids)
        self.assertNotIn(cancelled.id, ids)

    def test_job_board_window_and_category_filters(self):
        morning = self._create(start=START, hours=3)
        evening = self._create(start=START + timedelta(hours=9), hours=3, category="kitchen")

        rows = service.get_job_board(self.db, now=NOW, start=START + timedelta(hours=3), end=START + timedelta(hours=12))
        self.assertEqual([r.id for r in rows], [evening.id])

        rows = service.get_job_board(self.db, now=NOW, category="bar")
        self.assertEqual([r.id for r in rows], [morning.id])

    # ---------- UPDATE ----------

    def test_update_cannot_drop_below_taken_vacancies(self):
        row = self._create(vacancies=2)
        row.vacancies_taken = 2
        row.status = ShiftStatus.full
        self.db.commit()

        with self.assertRaises(HTTPException) as cm:
            service.update_shift(self.db, row.id, ShiftUpdate(vacancies_total=1), company_id="company-1")
        self.assertEqual(cm.exception.status_code, 422)

        updated = service.update_shift(self.db, row.id, ShiftUpdate(vacancies_total=3), company_id="company-1")
        self.assertEqual(updated.status, ShiftStatus.published)

    def test_update_other_company_404(self):
        row = self._create()
        with self.assertRaises(HTTPException) as cm:
            service.update_shift(self.db, row.id, ShiftUpdate(title="New"), company_id="company-2")
        self.assertEqual(cm.exception.status_code, 404)

    def test_update_rejects_end_before_existing_start(self):
        row = self._create()
        with self.assertRaises(HTTPException) as cm:
            service.update_shift(
                self.db, row.id, ShiftUpdate(end_time=START - timedelta(hours=1)), company_id="company-1"
            )
        self.assertEqual(cm.exception.status_code, 422)

    # ---------- VACANCY HELPERS ----------

    def test_take_and_release_vacancy(self):
        row = self._create(vacancies=1)
        service.take_vacancy(row)
        self.assertEqual(row.status, ShiftStatus.full)
        with self.assertRaises(HTTPException):
            service.take_vacancy(row)
        service.release_vacancy(row)
        self.assertEqual(row.vacancies_taken, 0)
        self.assertEqual(row.status, ShiftStatus.published)

    # ---------- CANCEL / COMPLETE ----------

    def test_cancel_shift_cancels_live_applications(self):
        row = self._create()
        live = ShiftApplication(shift_id=row.id, worker_id="worker-1", company_id="company-1",
                                status=ApplicationStatus.accepted)
        self.db.add(live)
        row.vacancies_taken = 1
        self.db.commit()

        shift, cls, ids = service.cancel_shift(
            self.db, row.id, company_id="company-1", now=START - timedelta(hours=2)
        )
        self.assertEqual(shift.status, ShiftStatus.cancelled)
        self.assertEqual(shift.vacancies_taken, 0)
        self.assertTrue(cls.is_late)
        self.assertEqual(ids, [live.id])
        self.assertEqual(self.db.get(ShiftApplication, live.id).status, ApplicationStatus.cancelled)

    def test_cancel_shift_requires_owner(self):
        row = self._create()
        with self.assertRaises(HTTPException) as cm:
            service.cancel_shift(self.db, row.id, company_id="company-2", now=NOW)
        self.assertEqual(cm.exception.status_code, 403)

    def test_complete_only_after_end(self):
        row = self._create()
        with self.assertRaises(HTTPException) as cm:
            service.complete_shift(self.db, row.id, company_id="company-1", now=NOW)
        self.assertEqual(cm.exception.status_code, 409)

        done = service.complete_shift(self.db, row.id, company_id="company-1", now=START + timedelta(days=1))
        self.assertEqual(done.status, ShiftStatus.completed)

    # ---------- OFFSETS ----------

    def test_non_utc_offsets_are_stored_as_utc(self):
        cest = timezone(timedelta(hours=2))
        row = self._create(start=datetime(2030, 5, 6, 10, 0, tzinfo=cest), hours=2)
        self.db.expire_all()

        stored = self.db.get(Shift, row.id)
        self.assertEqual(aware(stored.start_time), datetime(2030, 5, 6, 8, 0, tzinfo=timezone.utc))
        self.assertEqual(aware(stored.end_time), datetime(2030, 5, 6, 10, 0, tzinfo=timezone.utc))

        # 23h30m ahead of the real start
        cls = classify_cancellation(stored.start_time, datetime(2030, 5, 5, 8, 30, tzinfo=timezone.utc))
        self.assertTrue(cls.is_upcoming)
        self.assertTrue(cls.is_late)

    # ---------- RESCHEDULE ----------

    def _book(self, shift, worker="worker-1", status=ApplicationStatus.accepted):
        app = ShiftApplication(shift_id=shift.id, worker_id=worker, company_id=shift.company_id, status=status)
        if status == ApplicationStatus.accepted:
            shift.vacancies_taken += 1
        self.db.add(app)
        self.db.commit()
        return app

    def test_reschedule_onto_another_booking_conflicts(self):
        s1 = self._create(start=START, hours=8)                                     # 09-17
        s2 = self._create(company="company-2", start=START + timedelta(hours=9), hours=4)   # 18-22
        self._book(s1)
        self._book(s2)

        with self.assertRaises(HTTPException) as cm:
            service.update_shift(
                self.db, s1.id, ShiftUpdate(end_time=START + timedelta(hours=10)), company_id="company-1", now=NOW
            )
        self.assertEqual(cm.exception.status_code, 409)
        self.db.expire_all()
        self.assertEqual(aware(self.db.get(Shift, s1.id).end_time), START + timedelta(hours=8))

    def test_reschedule_rejects_pending_applications_that_now_overlap(self):
        s1 = self._create(start=START, hours=3)                                     # 09-12
        s2 = self._create(company="company-2", start=START + timedelta(hours=4), hours=3)   # 13-16
        self._book(s1)
        pending = self._book(s2, status=ApplicationStatus.pending)
        other_worker = self._book(s2, worker="worker-2", status=ApplicationStatus.pending)

        service.update_shift(
            self.db, s1.id,
            ShiftUpdate(start_time=START + timedelta(hours=3), end_time=START + timedelta(hours=6)),
            company_id="company-1", now=NOW,
        )
        self.assertEqual(self.db.get(ShiftApplication, pending.id).status, ApplicationStatus.rejected)
        self.assertEqual(self.db.get(ShiftApplication, other_worker.id).status, ApplicationStatus.pending)

    def test_reschedule_into_the_past_is_rejected(self):
        row = self._create()
        with self.assertRaises(HTTPException) as cm:
            service.update_shift(
                self.db, row.id,
                ShiftUpdate(start_time=NOW - timedelta(hours=1), end_time=NOW + timedelta(hours=4)),
                company_id="company-1", now=NOW,
            )
        self.assertEqual(cm.exception.status_code, 422)

    def test_vacancies_taken_cannot_go_negative(self):
        row = self._create()
        row.vacancies_taken = -1
        with self.assertRaises(IntegrityError):
            self.db.commit()
        self.db.rollback()


if __name__ == "__main__":
    unittest.main()
