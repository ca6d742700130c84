import datetime as dt
import json
import tempfile
import unittest
from http import HTTPStatus
from pathlib import Path

from server.config import UIServerConfig
from server.events import EventReplayCache, make_event
from server.routes import WidgetRoutes, guess_content_type, resolve_static_file


class StaticFileTests(unittest.TestCase):
    def test_resolve_static_file_returns_file_inside_ui_root(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            ui_root = Path(temp_dir)
            script = ui_root / "js" / "widget.js"
            script.parent.mkdir(parents=True)
            script.write_text("console.log('ok');", encoding="utf-8")

            self.assertEqual(script.resolve(), resolve_static_file(ui_root, "/js/widget.js"))
            self.assertEqual(script.resolve(), resolve_static_file(ui_root, "/js/widget%2Ejs"))

    def test_resolve_static_file_rejects_path_traversal(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            ui_root = root / "ui"
            ui_root.mkdir()
            (root / "secret.txt").write_text("x", encoding="utf-8")

            self.assertIsNone(resolve_static_file(ui_root, "/../secret.txt"))
            self.assertIsNone(resolve_static_file(ui_root, "/%2E%2E/secret.txt"))

    def test_resolve_static_file_rejects_hidden_root_and_missing_files(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            ui_root = Path(temp_dir)
            (ui_root / ".env").write_text("TOKEN=1", encoding="utf-8")

            self.assertIsNone(resolve_static_file(ui_root, "/.env"))
            self.assertIsNone(resolve_static_file(ui_root, "/"))
            self.assertIsNone(resolve_static_file(ui_root, "/missing.txt"))

    def test_guess_content_type_sets_charset_for_text(self) -> None:
        self.assertEqual("text/css; charset=utf-8", guess_content_type(Path("widget.css")))
        self.assertIn("javascript", guess_content_type(Path("widget.js")))
        self.assertEqual(
            "application/octet-stream",
            guess_content_type(Path("blob.unknownbinaryextension")),
        )


class WidgetRoutesTests(unittest.TestCase):
    def setUp(self) -> None:
        temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(temp_dir.cleanup)
        self.ui_root = Path(temp_dir.name)
        index = self.ui_root / "index.html"
        index.write_text("<html>widget</html>", encoding="utf-8")
        (self.ui_root / "widget.css").write_text("body {}", encoding="utf-8")

        self.replay = EventReplayCache()
        self.routes = WidgetRoutes(UIServerConfig(index_file=str(index)), self.replay)

    def test_root_and_index_serve_widget_page(self) -> None:
        for path in ("/", "/index.html"):
            with self.subTest(path=path):
                reply = self.routes.reply_for(path)
                self.assertEqual(HTTPStatus.OK, reply.status)
                self.assertEqual(b"<html>widget</html>", reply.body)
                self.assertTrue(reply.content_type.startswith("text/html"))

    def test_healthz_and_assets(self) -> None:
        self.assertEqual(b"ok\n", self.routes.reply_for("/healthz").body)
        self.assertEqual(b"body {}", self.routes.reply_for("/widget.css").body)
        self.assertEqual(HTTPStatus.NOT_FOUND, self.routes.reply_for("/nope.js").status)

    def test_state_endpoint_reports_latest_cycle_and_settings(self) -> None:
        empty = json.loads(self.routes.reply_for("/api/state").body)
        self.assertEqual({"cycle": None, "settings": None}, empty)

        now = dt.datetime(2024, 3, 4, 9, 0, tzinfo=dt.timezone.utc)
        self.replay.remember(make_event("cycle", now_fn=lambda: now, text="01:00"))
        state = json.loads(self.routes.reply_for("/api/state").body)

        self.assertEqual("01:00", state["cycle"]["text"])
        self.assertIsNone(state["settings"])


if __name__ == "__main__":
    unittest.main()
