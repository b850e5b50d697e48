# storefront/tests/test_mirror.py

import json
import shutil
import tempfile
from pathlib import Path

from django.test import SimpleTestCase

from storefront.mirror import ORDERS_KEY, PRODUCTS_KEY, LocalMirror


class LocalMirrorTests(SimpleTestCase):
    def setUp(self):
        self.dir = Path(tempfile.mkdtemp())
        self.addCleanup(shutil.rmtree, self.dir, True)
        self.path = self.dir / "mirror.json"

    def test_survives_a_restart(self):
        LocalMirror(self.path).put(PRODUCTS_KEY, [{"id": "p1"}])

        self.assertEqual(LocalMirror(self.path).get(PRODUCTS_KEY), [{"id": "p1"}])

    def test_missing_key_reads_empty(self):
        self.assertEqual(LocalMirror(self.path).get(ORDERS_KEY), [])

    def test_corrupt_file_is_cleared(self):
        self.path.write_text("{broken", encoding="utf-8")

        with self.assertLogs("storefront.mirror", level="ERROR"):
            mirror = LocalMirror(self.path)

        self.assertEqual(mirror.get(PRODUCTS_KEY), [])
        self.assertFalse(self.path.exists())

    def test_corrupt_entry_is_dropped_others_kept(self):
        self.path.write_text(
            json.dumps({PRODUCTS_KEY: "oops", ORDERS_KEY: [{"id": "o1"}]}),
            encoding="utf-8",
        )

        with self.assertLogs("storefront.mirror", level="ERROR"):
            mirror = LocalMirror(self.path)

        self.assertEqual(mirror.get(PRODUCTS_KEY), [])
        self.assertEqual(mirror.get(ORDERS_KEY), [{"id": "o1"}])

    def test_reads_are_copies(self):
        mirror = LocalMirror(self.path)
        mirror.put(PRODUCTS_KEY, [{"id": "p1"}])

        mirror.get(PRODUCTS_KEY)[0]["id"] = "changed"
        self.assertEqual(mirror.get(PRODUCTS_KEY), [{"id": "p1"}])

    def test_unknown_key_is_refused(self):
        with self.assertRaises(KeyError):
            LocalMirror(self.path).put("everything", [])

    def test_no_temp_files_left_behind(self):
        mirror = LocalMirror(self.path)
        mirror.put(PRODUCTS_KEY, [{"id": "p1"}])
        mirror.clear(PRODUCTS_KEY)

        self.assertEqual([p.name for p in self.dir.iterdir()], ["mirror.json"])
