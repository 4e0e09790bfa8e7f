import unittest
from unittest.mock import patch

from gameasure.meta import get_meta_http_headers, get_user_agent


class TestMeta(unittest.TestCase):
    """Test cases for the meta module."""

    def test_get_user_agent_format(self):
        user_agent = get_user_agent()

        self.assertTrue(user_agent.startswith("gameasure/"))
        self.assertIn("Python/", user_agent)

    @patch("gameasure.meta.platform.system")
    @patch("gameasure.meta.platform.machine")
    @patch("gameasure.meta.platform.python_version")
    @patch("gameasure.meta.get_version")
    def test_get_user_agent_values(
        self, mock_get_version, mock_python_version, mock_machine, mock_system
    ):
        mock_get_version.return_value = "1.0.0"
        mock_system.return_value = "Linux"
        mock_machine.return_value = "aarch64"
        mock_python_version.return_value = "3.12.1"

        self.assertEqual(
            get_user_agent(), "gameasure/1.0.0 (Linux arm_64; Python/3.12.1)"
        )

    @patch("gameasure.meta.get_version", return_value=None)
    def test_unknown_version(self, _):
        self.assertTrue(get_user_agent().startswith("gameasure/unknown "))

    def test_headers_bypass_caches(self):
        headers = get_meta_http_headers()

        self.assertEqual(headers["Cache-Control"], "no-cache")
        self.assertEqual(headers["Pragma"], "no-cache")
        self.assertIn("User-Agent", headers)
