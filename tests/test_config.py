from __future__ import annotations

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from buftui.errors import CredentialError
from buftui.runtime import config
from buftui.runtime.credentials import Credentials, NetrcCredentialSource, resolve_credentials
from buftui.runtime.logs import LOG_LEVEL_ENV, configure_logging, resolve_log_level
from buftui.timefmt import TimeView


class ConfigBehaviorTests(unittest.TestCase):
    def test_preferences_round_trip_through_one_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("buftui.runtime.config.CONFIG_PATH", config_path):
                config.save_time_view(TimeView.RELATIVE)
                config.save_theme_name("ocean")
                config.save_style_name("monokai")

                self.assertIs(config.load_time_view(), TimeView.RELATIVE)
                self.assertEqual(config.load_theme_name(), "ocean")
                self.assertEqual(config.load_style_name(), "monokai")
                self.assertEqual(
                    config.load_config(),
                    {"time_view": "relative", "theme": "ocean", "style": "monokai"},
                )

    def test_missing_or_malformed_file_falls_back(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("buftui.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                self.assertIs(config.load_time_view(), TimeView.ABSOLUTE)

                config_path.write_text("[1, 2", encoding="utf-8")
                self.assertEqual(config.load_config(), {})

                config_path.write_text('["not", "an", "object"]', encoding="utf-8")
                self.assertIsNone(config.load_theme_name())

    def test_blank_values_are_not_saved(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("buftui.runtime.config.CONFIG_PATH", config_path):
                config.save_style_name("   ")
                self.assertFalse(config_path.exists())

    def test_navigator_config_defaults(self) -> None:
        defaults = config.NavigatorConfig()
        self.assertEqual(defaults.remote, "buf.build")
        self.assertEqual(defaults.fetch_timeout, 10.0)
        self.assertEqual(defaults.page_size, 100)
        self.assertEqual(defaults.style, "algol_nu")
        self.assertIs(defaults.time_view, TimeView.ABSOLUTE)


class CredentialTests(unittest.TestCase):
    def _netrc(self, tmp: str, text: str) -> Path:
        path = Path(tmp) / "netrc"
        path.write_text(text, encoding="utf-8")
        return path

    def test_netrc_lookup(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._netrc(tmp, "machine buf.build\n  login bob\n  password tok123\n")
            creds = NetrcCredentialSource(path).lookup("buf.build")
        self.assertEqual(creds, Credentials(username="bob", token="tok123"))

    def test_netrc_missing_machine(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._netrc(tmp, "machine other.example login bob password tok123\n")
            with self.assertRaises(CredentialError):
                NetrcCredentialSource(path).lookup("buf.build")

    def test_missing_netrc_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(CredentialError):
                NetrcCredentialSource(Path(tmp) / "absent").lookup("buf.build")

    def test_netrc_path_from_environment(self) -> None:
        with mock.patch.dict(os.environ, {"NETRC": "/tmp/custom-netrc"}):
            self.assertEqual(NetrcCredentialSource().path, Path("/tmp/custom-netrc"))

    def test_explicit_flags_must_come_together(self) -> None:
        self.assertEqual(resolve_credentials("buf.build", "alice", "tok"), Credentials("alice", "tok"))
        with self.assertRaises(CredentialError):
            resolve_credentials("buf.build", "alice", None)
        with self.assertRaises(CredentialError):
            resolve_credentials("buf.build", None, "tok")
        with self.assertRaises(CredentialError):
            resolve_credentials("buf.build", "", "tok")

    def test_falls_back_to_netrc_source(self) -> None:
        source = mock.Mock()
        source.lookup.return_value = Credentials("bob", "pw")
        self.assertEqual(resolve_credentials("buf.build", None, None, source), Credentials("bob", "pw"))
        source.lookup.assert_called_once_with("buf.build")


class LoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        logger = logging.getLogger("buftui")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def test_records_go_to_log_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logs" / "buftui.log"
            self.assertEqual(configure_logging("debug", path), path)
            logging.getLogger("buftui.registry.client").debug("listed 3 modules")
            for handler in logging.getLogger("buftui").handlers:
                handler.flush()
            self.assertIn("listed 3 modules", path.read_text(encoding="utf-8"))

    def test_level_resolution(self) -> None:
        with mock.patch.dict(os.environ, {LOG_LEVEL_ENV: "info"}):
            self.assertEqual(resolve_log_level(None), logging.INFO)
            self.assertEqual(resolve_log_level("error"), logging.ERROR)
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(resolve_log_level(None), logging.WARNING)
        with self.assertRaises(ValueError):
            resolve_log_level("chatty")


if __name__ == "__main__":
    unittest.main()
