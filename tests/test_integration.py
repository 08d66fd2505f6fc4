import contextlib
import io
import runpy
import unittest
from pathlib import Path

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


class TestIntegration(unittest.TestCase):
    def run_example(self, name):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            runpy.run_path(str(EXAMPLES / name), run_name="__main__")
        return out.getvalue()

    def test_sprinkler_example_runs(self):
        output = self.run_example("sprinkler_example.py")
        self.assertIn("assuming the grass is wet", output)
        self.assertIn("Sprinkler:", output)

    def test_flat_earth_example_runs(self):
        output = self.run_example("flat_earth_example.py")
        self.assertIn("- flat:", output)
        self.assertIn("- conspiracy:", output)


if __name__ == "__main__":
    unittest.main()
