# twisty_sim/tests/test_cli.py
import io
import unittest
from contextlib import redirect_stdout

from PySide6.QtCore import QCoreApplication

from twisty_sim.cli import main, parse_args


class TestCli(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QCoreApplication.instance() or QCoreApplication([])

    def run_main(self, argv):
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as cm:
            main(argv)
        return cm.exception.code, out.getvalue()

    def test_default_mode_is_auto(self):
        self.assertEqual(parse_args([]).mode, "auto")

    def test_reverse_mode_solves_scramble(self):
        code, out = self.run_main(["--order", "4", "--sequence", "R U F'", "--mode", "reverse"])
        self.assertEqual(code, 0)
        self.assertIn("Solución (3): z1.5- y1.5+ x1.5+", out)
        self.assertIn("Estado: resuelto", out)

    def test_search_mode_on_explicit_sequence(self):
        code, out = self.run_main(["--sequence", "R U", "--mode", "bfs"])
        self.assertEqual(code, 0)
        self.assertIn("Estado: resuelto", out)

    def test_invalid_configuration_exits_with_2(self):
        code, _ = self.run_main(["--order", "0"])
        self.assertEqual(code, 2)
        code, _ = self.run_main(["--sequence", "R Q"])
        self.assertEqual(code, 2)


if __name__ == "__main__":
    unittest.main()
