import json
import tempfile
import unittest
from pathlib import Path

from slide2048.best_score import BEST_SCORE_KEY, BestScoreStore


class TestBestScoreStore(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "best.json"
        self.store = BestScoreStore(self.path)

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_file_reads_zero(self):
        self.assertEqual(self.store.load(), 0)

    def test_save_then_load(self):
        self.store.save(512)
        self.assertEqual(self.store.load(), 512)
        with open(self.path, encoding="utf-8") as f:
            self.assertEqual(json.load(f), {BEST_SCORE_KEY: 512})

    def test_save_keeps_other_keys(self):
        self.path.write_text(json.dumps({"other": "value"}), encoding="utf-8")
        self.store.save(64)
        with open(self.path, encoding="utf-8") as f:
            self.assertEqual(json.load(f), {"other": "value", BEST_SCORE_KEY: 64})

    def test_corrupt_file_reads_zero(self):
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("slide2048.best_score", level="WARNING"):
            self.assertEqual(self.store.load(), 0)

    def test_invalid_value_reads_zero(self):
        for value in (-5, "100", 1.5, True):
            self.path.write_text(json.dumps({BEST_SCORE_KEY: value}), encoding="utf-8")
            self.assertEqual(self.store.load(), 0, value)

    def test_update_only_raises(self):
        self.assertEqual(self.store.update(100), 100)
        self.assertEqual(self.store.update(40), 100)
        self.assertEqual(self.store.load(), 100)
        self.assertEqual(self.store.update(140), 140)

    def test_write_failure_is_logged_not_raised(self):
        store = BestScoreStore(Path(self._tmp.name) / "missing-dir" / "best.json")
        with self.assertLogs("slide2048.best_score", level="ERROR"):
            store.save(10)


if __name__ == "__main__":
    unittest.main()
