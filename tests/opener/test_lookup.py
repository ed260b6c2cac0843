import os
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from kozutsumi.opener._lookup import find_desktop_id, has_scheme_handler


class TestFindDesktopId(unittest.TestCase):
    def test_stem_match_wins_over_display_name(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            apps = Path(td)
            (apps / "code.desktop").write_text("[Desktop Entry]\nName=Visual Studio Code\n", encoding="utf-8")
            (apps / "other.desktop").write_text("[Desktop Entry]\nName=Code\n", encoding="utf-8")
            self.assertEqual(find_desktop_id("Code", [apps]), "code")
            self.assertEqual(find_desktop_id("visual studio code", [apps]), "code")
            self.assertIsNone(find_desktop_id("Sequel", [apps]))

    def test_broken_desktop_files_are_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            apps = Path(td)
            (apps / "broken.desktop").write_text("not an ini file\n", encoding="utf-8")
            (apps / "anki.desktop").write_text("[Desktop Entry]\nName=Anki\n", encoding="utf-8")
            self.assertEqual(find_desktop_id("Anki", [apps]), "anki")

    def test_uses_xdg_data_dirs(self) -> None:
        with tempfile.TemporaryDirectory() as home, tempfile.TemporaryDirectory() as shared:
            (Path(shared) / "applications").mkdir()
            (Path(shared) / "applications" / "iina.desktop").write_text("[Desktop Entry]\nName=IINA\n", encoding="utf-8")
            with patch.dict(os.environ, {"XDG_DATA_HOME": home, "XDG_DATA_DIRS": shared}):
                self.assertEqual(find_desktop_id("IINA"), "iina")


class TestHasSchemeHandler(unittest.TestCase):
    def _cp(self, stdout: str) -> subprocess.CompletedProcess:
        return subprocess.CompletedProcess(args=["xdg-mime"], returncode=0, stdout=stdout)

    def test_linux_queries_xdg_mime(self) -> None:
        with patch("kozutsumi.opener._lookup.subprocess.run", return_value=self._cp("obsidian.desktop\n")) as run:
            self.assertTrue(has_scheme_handler("obsidian", "linux"))
        self.assertEqual(run.call_args.args[0], ["xdg-mime", "query", "default", "x-scheme-handler/obsidian"])
        with patch("kozutsumi.opener._lookup.subprocess.run", return_value=self._cp("")):
            self.assertFalse(has_scheme_handler("obsidian", "linux"))

    def test_unknown_when_lookup_tool_missing(self) -> None:
        with patch("kozutsumi.opener._lookup.subprocess.run", side_effect=FileNotFoundError("xdg-mime")):
            self.assertTrue(has_scheme_handler("obsidian", "linux"))

    def test_macos_defers_to_open(self) -> None:
        with patch("kozutsumi.opener._lookup.subprocess.run") as run:
            self.assertTrue(has_scheme_handler("obsidian", "darwin"))
        run.assert_not_called()


if __name__ == "__main__":
    unittest.main()
