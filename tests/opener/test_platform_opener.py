import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from kozutsumi.core.resource import (
    LAUNCH_ERROR,
    NOT_FOUND,
    PERMISSION_DENIED,
    ApplicationName,
    DeepLink,
    FilesystemPath,
    WebURL,
)
from kozutsumi.opener.platform import PlatformOpener, windows_start_command_line


class TestPlatformOpenerLinux(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.addCleanup(self._td.cleanup)
        self.root = Path(self._td.name)
        self.apps = self.root / "applications"
        self.apps.mkdir()
        self.opener = PlatformOpener(platform="linux", app_dirs=[self.apps])

        popen = patch("kozutsumi.opener.platform.subprocess.Popen")
        self.popen = popen.start()
        self.addCleanup(popen.stop)

    def test_existing_path_is_opened_detached(self) -> None:
        result = self.opener.open(FilesystemPath(str(self.root)))
        self.assertTrue(result.ok)
        self.assertEqual(result.command, ["xdg-open", str(self.root)])
        args, kwargs = self.popen.call_args
        self.assertEqual(args[0], ["xdg-open", str(self.root)])
        self.assertTrue(kwargs["start_new_session"])
        self.assertEqual(kwargs["stdin"], subprocess.DEVNULL)

    def test_missing_path_is_not_found(self) -> None:
        result = self.opener.open(FilesystemPath(str(self.root / "missing")))
        self.assertFalse(result.ok)
        self.assertEqual(result.code, NOT_FOUND)
        self.popen.assert_not_called()

    def test_empty_application_name_is_rejected(self) -> None:
        result = self.opener.open(ApplicationName(""))
        self.assertEqual(result.code, NOT_FOUND)
        self.popen.assert_not_called()

    def test_application_resolved_from_desktop_file(self) -> None:
        (self.apps / "org.example.Anki.desktop").write_text("[Desktop Entry]\nName=Anki\nExec=anki %f\n", encoding="utf-8")
        (self.apps / "iina.desktop").write_text("[Desktop Entry]\nName=Media Player\n", encoding="utf-8")
        self.assertEqual(self.opener.open(ApplicationName("anki")).command, ["gtk-launch", "org.example.Anki"])
        self.assertEqual(self.opener.open(ApplicationName("IINA")).command, ["gtk-launch", "iina"])

    def test_application_falls_back_to_path_lookup(self) -> None:
        with patch("kozutsumi.opener.platform.shutil.which", return_value="/usr/bin/slack"):
            result = self.opener.open(ApplicationName("slack"))
        self.assertEqual(result.command, ["/usr/bin/slack"])

    def test_unknown_application_is_not_found(self) -> None:
        with patch("kozutsumi.opener.platform.shutil.which", return_value=None):
            result = self.opener.open(ApplicationName("Sequel"))
        self.assertEqual(result.code, NOT_FOUND)
        self.assertIn("Sequel", result.reason)
        self.popen.assert_not_called()

    def test_web_url_uses_default_handler(self) -> None:
        result = self.opener.open(WebURL("https://www.duolingo.com"))
        self.assertTrue(result.ok)
        self.assertEqual(result.command, ["xdg-open", "https://www.duolingo.com"])

    def test_deep_link_requires_scheme_handler(self) -> None:
        with patch("kozutsumi.opener.platform.has_scheme_handler", return_value=False) as check:
            result = self.opener.open(DeepLink("obsidian://open?file=notes.md"))
        check.assert_called_once_with("obsidian", "linux")
        self.assertEqual(result.code, NOT_FOUND)
        with patch("kozutsumi.opener.platform.has_scheme_handler", return_value=True):
            result = self.opener.open(DeepLink("obsidian://open?file=notes.md"))
        self.assertTrue(result.ok)

    def test_missing_launcher_is_launch_error(self) -> None:
        self.popen.side_effect = FileNotFoundError("xdg-open")
        result = self.opener.open(WebURL("https://example.com"))
        self.assertEqual(result.code, LAUNCH_ERROR)
        self.assertIn("xdg-open", result.reason)

    def test_permission_error_is_reported(self) -> None:
        self.popen.side_effect = PermissionError("denied")
        result = self.opener.open(WebURL("https://example.com"))
        self.assertEqual(result.code, PERMISSION_DENIED)

    def test_dry_run_validates_but_does_not_spawn(self) -> None:
        result = self.opener.open(WebURL("https://example.com"), dry_run=True)
        self.assertTrue(result.ok)
        self.assertTrue(result.dry_run)
        self.assertEqual(result.command, ["xdg-open", "https://example.com"])
        self.popen.assert_not_called()
        missing = self.opener.open(FilesystemPath(str(self.root / "missing")), dry_run=True)
        self.assertEqual(missing.code, NOT_FOUND)


class TestPlatformOpenerOtherPlatforms(unittest.TestCase):
    def test_macos_commands(self) -> None:
        opener = PlatformOpener(platform="darwin")
        with patch("kozutsumi.opener.platform.find_macos_app", return_value=True):
            self.assertEqual(opener.open(ApplicationName("IINA"), dry_run=True).command, ["open", "-a", "IINA"])
        with patch("kozutsumi.opener.platform.find_macos_app", return_value=False):
            self.assertEqual(opener.open(ApplicationName("IINA"), dry_run=True).code, NOT_FOUND)
        self.assertEqual(opener.open(WebURL("https://a.example"), dry_run=True).command, ["open", "https://a.example"])
        link = opener.open(DeepLink("x-apple.systempreferences://com.apple.preference"), dry_run=True)
        self.assertEqual(link.command, ["open", "x-apple.systempreferences://com.apple.preference"])

    def test_windows_targets_go_through_startfile(self) -> None:
        opener = PlatformOpener(platform="win32")
        url = "https://example.com/search?q=a&lang=en"
        self.assertEqual(opener.open(WebURL(url), dry_run=True).command, ["os.startfile", url])
        with patch("kozutsumi.opener.platform.os.startfile", create=True) as startfile, patch(
            "kozutsumi.opener.platform.subprocess.Popen"
        ) as popen:
            result = opener.open(WebURL(url))
        self.assertTrue(result.ok)
        startfile.assert_called_once_with(url)
        popen.assert_not_called()

    def test_windows_startfile_failure_is_launch_error(self) -> None:
        opener = PlatformOpener(platform="win32")
        with patch("kozutsumi.opener.platform.os.startfile", create=True, side_effect=OSError("no association")):
            result = opener.open(WebURL("https://a.example"))
        self.assertEqual(result.code, LAUNCH_ERROR)

    def test_windows_application_command_line_is_quoted(self) -> None:
        opener = PlatformOpener(platform="win32")
        with patch("kozutsumi.opener.platform.find_windows_app", return_value=True):
            self.assertEqual(opener.open(ApplicationName("notepad"), dry_run=True).command, ["cmd", "/c", "start", "", "notepad"])
            with patch("kozutsumi.opener.platform.subprocess.Popen") as popen:
                result = opener.open(ApplicationName("AT&T Connect|100%"))
            self.assertTrue(result.ok)
            args, kwargs = popen.call_args
            self.assertEqual(args[0], 'cmd /c start "" "AT&T Connect|100"^%""')
            self.assertFalse(kwargs["start_new_session"])
            self.assertEqual(opener.open(ApplicationName('bad"name'), dry_run=True).code, NOT_FOUND)

    def test_windows_start_command_line(self) -> None:
        self.assertEqual(windows_start_command_line("Microsoft Edge"), 'cmd /c start "" "Microsoft Edge"')
        self.assertEqual(windows_start_command_line("%PATH%"), 'cmd /c start "" ""^%"PATH"^%""')


if __name__ == "__main__":
    unittest.main()
