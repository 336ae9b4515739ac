import json
import tempfile
import unittest
from pathlib import Path

from persistence import JsonFileSnapshotStore, SnapshotDecodeError


class JsonFileSnapshotStoreTests(unittest.TestCase):
    def test_read_missing_file_returns_none(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = JsonFileSnapshotStore(Path(temp_dir) / "state.json")
            self.assertIsNone(store.read("focus_timer_state"))

    def test_write_creates_parent_directories_and_keeps_other_keys(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "nested" / "state.json"
            store = JsonFileSnapshotStore(path)

            store.write("a", {"mode": "focus"})
            store.write("b", {"mode": "break"})

            self.assertEqual({"mode": "focus"}, store.read("a"))
            self.assertEqual({"mode": "break"}, store.read("b"))
            on_disk = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual({"a", "b"}, set(on_disk))
            self.assertEqual(["state.json"], [p.name for p in path.parent.iterdir()])

    def test_delete_removes_only_the_key(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            store = JsonFileSnapshotStore(Path(temp_dir) / "state.json")
            store.write("a", {"mode": "focus"})
            store.write("b", {"mode": "break"})

            store.delete("a")
            store.delete("missing")

            self.assertIsNone(store.read("a"))
            self.assertEqual({"mode": "break"}, store.read("b"))

    def test_corrupt_file_raises_decode_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "state.json"
            path.write_text("{not json", encoding="utf-8")
            store = JsonFileSnapshotStore(path)

            with self.assertRaises(SnapshotDecodeError):
                store.read("a")

    def test_non_object_record_raises_decode_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "state.json"
            path.write_text(json.dumps({"a": [1, 2]}), encoding="utf-8")

            with self.assertRaises(SnapshotDecodeError):
                JsonFileSnapshotStore(path).read("a")

    def test_write_replaces_corrupt_document(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "state.json"
            path.write_text("[]", encoding="utf-8")
            store = JsonFileSnapshotStore(path)

            with self.assertLogs("persistence", level="WARNING"):
                store.write("a", {"mode": "custom"})

            self.assertEqual({"mode": "custom"}, store.read("a"))


if __name__ == "__main__":
    unittest.main()
