import io
import unittest
from unittest.mock import patch

from idiom_bench.cli import main
from idiom_bench.harness.errors import ConfigurationFault


class TestCLISmoke(unittest.TestCase):
    def setUp(self):
        # Global structlog config would outlive the patched streams below.
        patcher = patch("idiom_bench.cli.configure_logging")
        self.configure_logging = patcher.start()
        self.addCleanup(patcher.stop)

    def test_list_command(self):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            ret = main(["list"])
        self.assertEqual(ret, 0)
        names = out.getvalue().split()
        self.assertEqual(names[0], "null_check")
        self.assertIn("string_concat", names)

    def test_run_single_scenario(self):
        with (
            patch("idiom_bench.cli.loader.DEFAULT_YAML_PATH", "/nonexistent/settings.yaml"),
            patch("sys.stdout", new_callable=io.StringIO) as out,
            patch("sys.stderr", new_callable=io.StringIO),
        ):
            ret = main(["run", "--scenario", "string_concat", "--scale", "0.001", "--no-stability"])
        self.assertEqual(ret, 0)
        text = out.getvalue()
        self.assertIn("=== Idiom benchmark ===", text)
        self.assertIn("=== String concatenation (", text)
        self.assertIn("vs plus_operator", text)
        self.assertTrue(text.rstrip().endswith("=== Done ==="))
        self.configure_logging.assert_called_once()

    def test_unknown_scenario_fails_before_report(self):
        with (
            patch("idiom_bench.cli.loader.DEFAULT_YAML_PATH", "/nonexistent/settings.yaml"),
            patch("sys.stdout", new_callable=io.StringIO) as out,
            patch("sys.stderr", new_callable=io.StringIO),
        ):
            with self.assertRaises(ConfigurationFault):
                main(["run", "--scenario", "does_not_exist"])
        self.assertNotIn("vs ", out.getvalue())


if __name__ == "__main__":
    unittest.main()
