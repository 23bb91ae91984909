"""
Tests for foreground process execution.
"""

import os
import subprocess
from unittest.mock import patch

import pytest

from mc_launcher.errors import ProcessError
from mc_launcher.process_runner import ProcessRunner, build_path_env


def test_build_path_env_prepends(tmp_path):
    env = build_path_env(tmp_path / "bin", {"PATH": "/usr/bin:/bin", "HOME": "/root"})
    assert env["PATH"] == f"{tmp_path / 'bin'}{os.pathsep}/usr/bin:/bin"
    assert env["HOME"] == "/root"


def test_build_path_env_without_path(tmp_path):
    assert build_path_env(tmp_path, {})["PATH"] == str(tmp_path)


def test_run_foreground_arguments(tmp_path):
    runner = ProcessRunner(base_env={"PATH": "/usr/bin"})
    done = subprocess.CompletedProcess(args=[], returncode=0)
    with patch("subprocess.run", return_value=done) as run:
        rc = runner.run_foreground("server", "java -jar x.jar nogui", cwd=tmp_path, java_bin=tmp_path / "bin")

    assert rc == 0
    args, kwargs = run.call_args
    assert args[0][-2:] == ["-c", "java -jar x.jar nogui"]
    assert kwargs["cwd"] == str(tmp_path)
    assert kwargs["env"]["PATH"].startswith(str(tmp_path / "bin"))
    # stdio is inherited
    assert "stdin" not in kwargs and "stdout" not in kwargs and "stderr" not in kwargs


def test_exit_code_flows_through(tmp_path):
    assert ProcessRunner().run_foreground("sh", "exit 7", cwd=tmp_path, java_bin=tmp_path) == 7


def test_path_visible_to_child(tmp_path):
    bin_dir = tmp_path / "jdk" / "bin"
    bin_dir.mkdir(parents=True)
    rc = ProcessRunner().run_foreground(
        "sh", f'test "${{PATH%%:*}}" = "{bin_dir}"', cwd=tmp_path, java_bin=bin_dir
    )
    assert rc == 0


def test_run_checked_nonzero(tmp_path):
    with pytest.raises(ProcessError) as exc:
        ProcessRunner().run_checked("installer", "exit 3", cwd=tmp_path, java_bin=tmp_path)
    assert exc.value.returncode == 3
    assert exc.value.stage == "run installer"


def test_launch_failure(tmp_path):
    with patch("subprocess.run", side_effect=FileNotFoundError("sh")):
        with pytest.raises(ProcessError, match="failed to start"):
            ProcessRunner().run_foreground("server", "true", cwd=tmp_path, java_bin=tmp_path)
