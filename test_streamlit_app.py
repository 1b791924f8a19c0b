#!/usr/bin/env python3
"""Test suite for the Streamlit front end."""

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from streamlit.testing.v1 import AppTest

APP_PATH = str(Path(__file__).with_name("streamlit_app.py"))


class TestStreamlitApp(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        env = {"RESEARCH_OUTPUT_DIR": self._tmp.name, "RESEARCH_INTERACTION_LOG": "off"}
        self._env = mock.patch.dict("os.environ", env)
        self._env.start()

    def tearDown(self):
        self._env.stop()
        self._tmp.cleanup()

    def test_blank_plan_name_does_not_crash(self):
        app = AppTest.from_file(APP_PATH, default_timeout=30).run()
        app.sidebar.text_input[0].input("   ").run()
        topic = next(widget for widget in app.text_input if widget.label == "Topic")
        topic.input("solar panel efficiency").run()

        self.assertEqual(len(app.exception), 0)
        self.assertTrue(app.button[0].disabled)

    def test_shows_saved_plan(self):
        (Path(self._tmp.name) / "research.txt").write_text('["History", "Current tech"]')

        app = AppTest.from_file(APP_PATH, default_timeout=30).run()

        self.assertEqual(len(app.exception), 0)
        self.assertIn("1. History", [md.value for md in app.markdown])


if __name__ == "__main__":
    unittest.main()
