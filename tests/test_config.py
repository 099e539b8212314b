import tempfile
import unittest
from pathlib import Path

from config import find_data_dir


class TestFindDataDir(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.source_root = self.root / "src"
        self.cwd = self.root / "work"
        self.source_root.mkdir()
        self.cwd.mkdir()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_prefers_data_next_to_sources(self) -> None:
        (self.source_root / "data").mkdir()
        self.assertEqual(find_data_dir(self.source_root, self.cwd), self.source_root / "data")

    def test_falls_back_to_working_directory(self) -> None:
        # Installed into site-packages: no data/ beside the modules
        self.assertEqual(find_data_dir(self.source_root, self.cwd), self.cwd / "data")


if __name__ == "__main__":
    unittest.main()
