"""
Tests for environment driven settings and logging setup.
"""

import json
import logging
from pathlib import Path

import pytest

from mc_launcher.fs_layout import build_layout, ensure_dirs
from mc_launcher.logging_setup import _JsonFormatter, setup_logging
from mc_launcher.settings import Settings


def test_defaults():
    s = Settings()
    assert s.minecraft_version == ""
    assert s.server_type == ""
    assert s.min_ram == "1G" and s.max_ram == "2G"
    assert s.base_dir == Path.cwd()
    assert s.java_platform_marker == "jdk_x64_linux"
    assert s.http_timeout is None


def test_container_env_names(monkeypatch, tmp_path):
    monkeypatch.setenv("MINECRAFT_VERSION", "1.21.1")
    monkeypatch.setenv("Type", "neoforge")
    monkeypatch.setenv("Min_Ram", "2G")
    monkeypatch.setenv("Max_Ram", "8G")
    monkeypatch.setenv("NEO_VERSION_OVERRIDE", "21.1.77")
    monkeypatch.setenv("JAVA_VERSION_OVERRIDE", "21")
    monkeypatch.setenv("LAUNCHER_BASE_DIR", str(tmp_path))

    s = Settings()
    assert s.minecraft_version == "1.21.1"
    assert s.server_type == "neoforge"
    assert (s.min_ram, s.max_ram) == ("2G", "8G")
    assert s.neo_version_override == "21.1.77"
    assert s.java_version_override == "21"
    assert s.base_dir == tmp_path


def test_alternate_env_names(monkeypatch):
    monkeypatch.setenv("SERVER_TYPE", "purpur")
    monkeypatch.setenv("MAX_RAM", "4G")
    s = Settings()
    assert s.server_type == "purpur"
    assert s.max_ram == "4G"


def test_layout(make_settings, tmp_path):
    layout = build_layout(make_settings())
    assert layout.java_dir == tmp_path / "java"
    assert layout.server_dir == tmp_path / "server"
    ensure_dirs(layout)
    assert layout.java_dir.is_dir() and layout.server_dir.is_dir()


class TestLogging:

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        launcher = logging.getLogger("mc.launcher")
        launcher_handlers = list(launcher.handlers)
        yield
        root.handlers[:] = handlers
        root.setLevel(level)
        for h in launcher.handlers:
            if h not in launcher_handlers:
                h.close()
        launcher.handlers[:] = launcher_handlers

    def test_file_handler(self, make_settings, tmp_path):
        log_file = tmp_path / "logs" / "launcher.log"
        setup_logging(make_settings(log_file=str(log_file), log_level="debug"))
        logging.getLogger("mc.launcher.test").info("hello from test")
        for h in logging.getLogger("mc.launcher").handlers:
            h.flush()
        assert "hello from test" in log_file.read_text()
        assert logging.getLogger().level == logging.DEBUG

    def test_json_formatter(self):
        record = logging.LogRecord("mc.launcher.x", logging.WARNING, __file__, 1, "disk %s", ("full",), None)
        payload = json.loads(_JsonFormatter().format(record))
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "mc.launcher.x"
        assert payload["msg"] == "disk full"
