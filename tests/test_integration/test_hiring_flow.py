import unittest
from datetime import timedelta

from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from core.clock import utcnow
from core.database import Base, get_db
from auth.services.auth_service import get_current_active_user
from account.models import Profile, Role


class HiringFlowTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine(
            "sqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine, future=True)

        # --- Dependency overrides ---
        def _get_db_override():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        # Whoever self.current_id points at is "logged in"
        def _current_user_override(db: Session = Depends(get_db)):
            return db.get(Profile, self.current_id)

        app.dependency_overrides[get_db] = _get_db_override
        app.dependency_overrides[get_current_active_user] = _current_user_override

        with self.SessionLocal() as db:
            db.add_all([
                Profile(id="company-1", role=Role.company, display_name="Kro", company_name="Kroen ApS"),
                Profile(id="worker-1", role=Role.worker, display_name="Freja"),
                Profile(id="worker-2", role=Role.worker, display_name="Mads"),
            ])
            db.commit()

        self.client = TestClient(app)
        self.day = (utcnow() + timedelta(days=3)).replace(hour=0, minute=0, second=0, microsecond=0)

    def tearDown(self):
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_current_active_user, None)
        self.engine.dispose()

    def as_(self, profile_id):
        self.current_id = profile_id

    def create_shift(self, start_h, end_h, vacancies=1):
        self.as_("company-1")
        r = self.client.post(
            "/api/shifts",
            json={
                "title": f"Shift {start_h}-{end_h}",
                "category": "hospitality",
                "start_time": (self.day + timedelta(hours=start_h)).isoformat(),
                "end_time": (self.day + timedelta(hours=end_h)).isoformat(),
                "hourly_rate": "190.00",
                "vacancies_total": vacancies,
            },
        )
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()["id"]

    def apply(self, worker_id, shift_id):
        self.as_(worker_id)
        r = self.client.post("/api/applications", json={"shift_id": shift_id})
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()

    def test_accepting_rejects_overlapping_pending_applications(self):
        # 1) Company publishes three shifts on the same day
        a = self.create_shift(10, 14)
        b = self.create_shift(12, 16)
        c = self.create_shift(14, 18)  # touches a, does not overlap

        # 2) Worker applies to all three
        app_a = self.apply("worker-1", a)
        app_b = self.apply("worker-1", b)
        app_c = self.apply("worker-1", c)
        self.assertEqual(app_a["status"], "pending")

        # 3) Company accepts the application for shift a
        self.as_("company-1")
        r = self.client.patch(f"/api/applications/{app_a['id']}/status", json={"status": "approved"})
        self.assertEqual(r.status_code, 200, r.text)
        body = r.json()
        self.assertEqual(body["application"]["status"], "accepted")
        self.assertTrue(body["changed"])
        self.assertEqual(body["auto_rejected_ids"], [app_b["id"]])
        self.assertIn(f"/shifts/{a}", body["revalidate"])
        self.assertIn("/dashboard", body["revalidate"])

        # 4) Worker sees the cascade on their own list
        self.as_("worker-1")
        r = self.client.get("/api/applications/mine")
        self.assertEqual(r.status_code, 200, r.text)
        statuses = {row["id"]: row["status"] for row in r.json()}
        self.assertEqual(statuses[app_a["id"]], "accepted")
        self.assertEqual(statuses[app_b["id"]], "rejected")
        self.assertEqual(statuses[app_c["id"]], "pending")

        # 5) Shift a is now full
        r = self.client.get(f"/api/shifts/{a}")
        self.assertEqual(r.json()["status"], "full")
        self.assertEqual(r.json()["vacancies_taken"], 1)

        # 6) Accepting again changes nothing
        self.as_("company-1")
        r = self.client.patch(f"/api/applications/{app_a['id']}/status", json={"status": "accepted"})
        self.assertEqual(r.status_code, 200, r.text)
        self.assertFalse(r.json()["changed"])
        self.assertEqual(r.json()["revalidate"], [])

        # 7) A second worker applying to the full shift lands on the waitlist
        late = self.apply("worker-2", a)
        self.assertEqual(late["status"], "waitlist")

        # 8) Company cannot accept beyond the vacancies
        r = self.client.patch(f"/api/applications/{late['id']}/status", json={"status": "accepted"})
        self.assertEqual(r.status_code, 409, r.text)

    def test_worker_cancellation_frees_the_seat(self):
        a = self.create_shift(10, 14)
        app_a = self.apply("worker-1", a)

        self.as_("company-1")
        r = self.client.patch(f"/api/applications/{app_a['id']}/status", json={"status": "accepted"})
        self.assertEqual(r.status_code, 200, r.text)

        # Policy preview before cancelling: three days ahead is not late
        self.as_("worker-1")
        r = self.client.get(f"/api/cancellation-policy/shifts/{a}")
        self.assertEqual(r.status_code, 200, r.text)
        self.assertFalse(r.json()["is_late"])

        r = self.client.post(f"/api/applications/{app_a['id']}/cancel")
        self.assertEqual(r.status_code, 200, r.text)
        body = r.json()
        self.assertEqual(body["application"]["status"], "cancelled")
        self.assertTrue(body["is_upcoming"])
        self.assertFalse(body["is_late"])

        r = self.client.get(f"/api/shifts/{a}")
        self.assertEqual(r.json()["status"], "published")
        self.assertEqual(r.json()["vacancies_taken"], 0)

    def test_stranger_company_cannot_decide(self):
        a = self.create_shift(10, 14)
        app_a = self.apply("worker-1", a)

        with self.SessionLocal() as db:
            db.add(Profile(id="company-2", role=Role.company, display_name="Other"))
            db.commit()

        self.as_("company-2")
        r = self.client.patch(f"/api/applications/{app_a['id']}/status", json={"status": "accepted"})
        self.assertEqual(r.status_code, 403, r.text)

        self.as_("worker-1")
        r = self.client.get("/api/applications/mine")
        self.assertEqual(r.json()[0]["status"], "pending")


if __name__ == "__main__":
    unittest.main()
