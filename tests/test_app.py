"""Tests for the app factory."""

import os
import unittest
from unittest.mock import patch

from pickletrack import create_app


class AppFactoryTestCase(unittest.TestCase):
    """Test case for the app factory."""

    def test_404_error_handler(self):
        """Unknown routes return a JSON 404."""
        app = create_app({"TESTING": True, "WTF_CSRF_ENABLED": False})

        with app.test_client() as client:
            response = client.get("/non_existent_page")
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.get_json(), {"error": "Page Not Found"})

    @patch("pickletrack.init_firebase")
    def test_testing_skips_firebase(self, mock_init_firebase):
        create_app({"TESTING": True})
        mock_init_firebase.assert_not_called()

    def test_status_automation_defaults_on(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("STATUS_AUTOMATION_ENABLED", None)
            app = create_app({"TESTING": True})
        self.assertTrue(app.config["STATUS_AUTOMATION_ENABLED"])

    def test_status_automation_env_flag(self):
        """The flag accepts the usual spellings of true and false."""
        for value, expected in (("false", False), ("0", False), ("True", True), ("1", True)):
            with self.subTest(value=value):
                with patch.dict(os.environ, {"STATUS_AUTOMATION_ENABLED": value}):
                    app = create_app({"TESTING": True})
                self.assertEqual(app.config["STATUS_AUTOMATION_ENABLED"], expected)

    def test_csrf_errors_return_json(self):
        app = create_app({"TESTING": True})
        with app.test_client() as client:
            with client.session_transaction() as sess:
                sess["user_id"] = "organizer1"
                sess["is_admin"] = True
            response = client.post("/payments/leagues/l1/a", data={"amount": "10"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("session may have expired", response.get_json()["error"])


if __name__ == "__main__":
    unittest.main()
