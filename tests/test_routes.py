"""Tests for the payment and status endpoints using mockfirestore."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock, patch

from mockfirestore import MockFirestore

from pickletrack import create_app

ADMIN_ID = "organizer1"
PLAYER_ID = "player1"


class RoutesTestCase(unittest.TestCase):
    """Base test case wiring the app to an in-memory Firestore."""

    def setUp(self) -> None:
        """Set up a test client and seed one tournament and one league."""
        self.mock_db = MockFirestore()
        self.mock_firestore_module = MagicMock()
        self.mock_firestore_module.client.return_value = self.mock_db

        patchers = [
            patch("pickletrack.tracker.routes.firestore", new=self.mock_firestore_module),
            patch("pickletrack.tournament.routes.firestore", new=self.mock_firestore_module),
            patch("pickletrack.league.routes.firestore", new=self.mock_firestore_module),
        ]
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)

        self.app = create_app({"TESTING": True, "WTF_CSRF_ENABLED": False})
        self.client = self.app.test_client()

        self.mock_db.collection("tournaments").document("t1").set(
            {
                "name": "Summer Slam",
                "status": "registration_open",
                "eventDate": "2999-07-01",
                "divisions": [
                    {
                        "id": "singles",
                        "name": "Singles",
                        "entryFee": 20,
                        "participants": ["a", "b"],
                        "paymentData": {"a": {"amount": 20}},
                    },
                    {"id": "juniors", "name": "Juniors", "entryFee": 0, "participants": ["c"]},
                ],
            }
        )
        self.mock_db.collection("tournaments").document("old").set(
            {"name": "Spring Fling", "status": "archived", "entryFee": 50, "participants": ["z"]}
        )
        self.mock_db.collection("leagues").document("l1").set(
            {
                "name": "Tuesday Ladder",
                "status": "registered",
                "registrationFee": 40,
                "participants": ["a", "b"],
                "startDate": "2000-01-01",
                "endDate": "2999-01-01",
            }
        )

    def tearDown(self) -> None:
        self.mock_db.reset()

    def login(self, admin: bool = False) -> None:
        with self.client.session_transaction() as sess:
            sess["user_id"] = ADMIN_ID if admin else PLAYER_ID
            sess["is_admin"] = admin

    def tournament(self) -> dict:
        return self.mock_db.collection("tournaments").document("t1").get().to_dict()

    def league(self) -> dict:
        return self.mock_db.collection("leagues").document("l1").get().to_dict()


class AccessControlTestCase(RoutesTestCase):
    """Test case for the login and organizer guards."""

    def test_login_required(self) -> None:
        for url in ("/payments/summary", "/tournaments/t1/payments", "/leagues/l1/payments"):
            with self.subTest(url=url):
                response = self.client.get(url)
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.get_json(), {"error": "Authentication required."})

    def test_writes_require_organizer(self) -> None:
        self.login()
        for url in (
            "/payments/tournaments/t1/divisions/singles/b",
            "/payments/leagues/l1/a",
            "/tournaments/t1/status/apply",
            "/leagues/l1/status",
        ):
            with self.subTest(url=url):
                response = self.client.post(url, data={"amount": "20", "status": "active"})
                self.assertEqual(response.status_code, 403)
        self.assertNotIn("b", self.tournament()["divisions"][0]["paymentData"])


class TrackerRoutesTestCase(RoutesTestCase):
    """Test case for the payment tracker endpoints."""

    def test_portfolio_summary_skips_archived(self) -> None:
        self.login()

        response = self.client.get("/payments/summary")

        self.assertEqual(response.status_code, 200)
        summary = response.get_json()
        self.assertEqual(summary["total_tournaments"], 1)
        self.assertEqual(summary["total_leagues"], 1)
        self.assertEqual(summary["total_expected"], 120.0)
        self.assertEqual(summary["total_collected"], 20.0)
        self.assertEqual(summary["total_owed"], 100.0)
        self.assertEqual(summary["payment_rate"], 25.0)

    def test_record_division_payment(self) -> None:
        """The final payment moves the tournament to registered."""
        self.login(admin=True)

        response = self.client.post(
            "/payments/tournaments/t1/divisions/singles/b",
            data={"amount": "20.00", "method": "cash", "notes": "Paid at check-in"},
        )

        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["status"], "registered")
        self.assertEqual(data["record"]["amount"], 20.0)
        self.assertEqual(data["record"]["method"], "cash")
        self.assertEqual(data["record"]["recordedBy"], ADMIN_ID)
        tournament = self.tournament()
        self.assertEqual(tournament["status"], "registered")
        self.assertEqual(tournament["divisions"][0]["paymentData"]["b"]["notes"], "Paid at check-in")

    def test_status_automation_can_be_disabled(self) -> None:
        self.app.config["STATUS_AUTOMATION_ENABLED"] = False
        self.login(admin=True)

        response = self.client.post(
            "/payments/tournaments/t1/divisions/singles/b", data={"amount": "20"}
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["status"], "registration_open")
        self.assertEqual(self.tournament()["status"], "registration_open")

    def test_negative_amount_rejected(self) -> None:
        self.login(admin=True)

        response = self.client.post(
            "/payments/tournaments/t1/divisions/singles/b", data={"amount": "-3"}
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("Amount cannot be negative.", response.get_json()["error"])

    def test_missing_amount_rejected(self) -> None:
        self.login(admin=True)
        response = self.client.post("/payments/leagues/l1/a", data={})
        self.assertEqual(response.status_code, 400)

    def test_unregistered_participant(self) -> None:
        self.login(admin=True)

        response = self.client.post(
            "/payments/tournaments/t1/divisions/singles/zz", data={"amount": "20"}
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("zz", response.get_json()["error"])

    def test_unknown_division(self) -> None:
        self.login(admin=True)
        response = self.client.post(
            "/payments/tournaments/t1/divisions/mixed/a", data={"amount": "20"}
        )
        self.assertEqual(response.status_code, 404)

    def test_remove_division_payment(self) -> None:
        self.login(admin=True)

        response = self.client.post("/payments/tournaments/t1/divisions/singles/a/delete")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"removed": "a"})
        self.assertEqual(self.tournament()["divisions"][0]["paymentData"], {})

        response = self.client.post("/payments/tournaments/t1/divisions/singles/a/delete")
        self.assertEqual(response.status_code, 404)

    def test_record_and_remove_league_payment(self) -> None:
        self.login(admin=True)

        response = self.client.post("/payments/leagues/l1/a", data={"amount": "40"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["record"]["amount"], 40.0)
        self.assertEqual(self.league()["paymentData"]["a"]["method"], "manual")

        response = self.client.post("/payments/leagues/l1/a/delete")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.league()["paymentData"], {})


class TournamentRoutesTestCase(RoutesTestCase):
    """Test case for the tournament payment overview and status endpoints."""

    def test_payment_overview(self) -> None:
        self.login()

        response = self.client.get("/tournaments/t1/payments")

        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["summary"]["total_expected"], 40.0)
        self.assertEqual(data["summary"]["paid_count"], 1)
        self.assertEqual(data["total_participants"], 3)
        self.assertEqual([d["id"] for d in data["divisions"]], ["singles", "juniors"])
        self.assertTrue(data["divisions"][1]["summary"]["is_fully_paid"])
        self.assertEqual(data["suggested_status"], "registration_open")
        self.assertFalse(data["is_stale"])

    def test_missing_tournament(self) -> None:
        self.login()
        response = self.client.get("/tournaments/nope/payments")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json(), {"error": "Tournament nope not found."})

    def test_apply_suggested_status(self) -> None:
        self.login(admin=True)
        self.mock_db.collection("tournaments").document("t1").update({"eventDate": "2000-01-01"})

        response = self.client.post("/tournaments/t1/status/apply")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.get_json(),
            {"previous": "registration_open", "status": "completed", "changed": True},
        )
        self.assertEqual(self.tournament()["status"], "completed")

    def test_set_status(self) -> None:
        self.login(admin=True)

        response = self.client.post("/tournaments/t1/status", data={"status": "in_progress"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.tournament()["status"], "in_progress")

    def test_set_status_rejects_invalid_transition(self) -> None:
        self.login(admin=True)

        response = self.client.post("/tournaments/old/status", data={"status": "draft"})

        self.assertEqual(response.status_code, 409)
        self.assertEqual(
            response.get_json(), {"error": "Archived tournaments cannot be modified"}
        )

    def test_set_status_rejects_unknown_status(self) -> None:
        self.login(admin=True)
        response = self.client.post("/tournaments/t1/status", data={"status": "cancelled"})
        self.assertEqual(response.status_code, 400)


class LeagueRoutesTestCase(RoutesTestCase):
    """Test case for the league payment overview and status endpoints."""

    def test_payment_overview(self) -> None:
        self.login()

        response = self.client.get("/leagues/l1/payments")

        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["registration_fee"], 40)
        self.assertEqual(data["summary"]["unpaid_count"], 2)
        self.assertEqual(data["suggested_status"], "active")
        self.assertTrue(data["is_stale"])

    def test_apply_suggested_status(self) -> None:
        self.login(admin=True)

        response = self.client.post("/leagues/l1/status/apply")

        self.assertEqual(response.get_json()["status"], "active")
        self.assertEqual(self.league()["status"], "active")

    def test_completed_league_can_only_be_archived(self) -> None:
        self.login(admin=True)
        self.mock_db.collection("leagues").document("l1").update({"status": "completed"})

        response = self.client.post("/leagues/l1/status", data={"status": "active"})
        self.assertEqual(response.status_code, 409)

        response = self.client.post("/leagues/l1/status", data={"status": "archived"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.league()["status"], "archived")


if __name__ == "__main__":
    unittest.main()
