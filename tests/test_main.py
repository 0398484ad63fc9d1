import io
import os
import unittest
from contextlib import redirect_stdout
from unittest import mock

import config
import main


class TestMain(unittest.TestCase):

    def tearDown(self):
        config.reload_config()

    def run_main(self, *args):
        out = io.StringIO()
        with redirect_stdout(out), mock.patch.object(main, "PAUSE_SECONDS", 0):
            status = main.main(["pi-estimate"] + list(args))
        return status, out.getvalue()

    def test_usage(self):
        status, out = self.run_main()
        self.assertEqual(status, 1)
        self.assertIn("Usage:", out)

    def test_unknown_strategy(self):
        status, out = self.run_main("quantum", "100", "2")
        self.assertEqual(status, 1)
        self.assertIn("Unknown strategy: quantum", out)

    def test_bad_number(self):
        status, out = self.run_main("single_thread", "many")
        self.assertEqual(status, 1)
        self.assertIn("Invalid number", out)

    def test_single_strategy(self):
        status, out = self.run_main("thread_based", "4000", "4", "3")
        self.assertEqual(status, 0)
        self.assertIn("thread_based has computed PI as", out)
        self.assertIn("Points inside circle:", out)

    def test_all_strategies(self):
        status, out = self.run_main("all", "4000", "2", "3")
        self.assertEqual(status, 0)
        for strategy in main.STRATEGIES:
            self.assertIn(f"{strategy} has computed PI as", out)

    def test_estimation_error(self):
        status, out = self.run_main("task_based", "0", "2")
        self.assertEqual(status, 2)
        self.assertIn("task_based failed:", out)

    def test_bad_log_level_in_environment(self):
        with mock.patch.dict(os.environ, {"PI_ESTIMATE_LOG_LEVEL": "loud"}):
            status, out = self.run_main("single_thread", "100")
        self.assertEqual(status, 2)
        self.assertIn("Configuration error", out)

    def test_bad_sample_count_in_environment(self):
        with mock.patch.dict(os.environ, {"PI_ESTIMATE_SAMPLES": "lots"}):
            status, out = self.run_main("single_thread")
        self.assertEqual(status, 2)
        self.assertIn("PI_ESTIMATE_SAMPLES", out)


if __name__ == "__main__":
    unittest.main()
