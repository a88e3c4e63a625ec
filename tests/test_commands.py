"""Tests for the subprocess helpers."""

import subprocess
from unittest.mock import patch

import pytest

from kmp_install.core.commands import StreamedCommand, run_passthrough, run_query
from kmp_install.core.errors import CommandError


class TestRunQuery:
    def test_returns_lines(self):
        completed = subprocess.CompletedProcess(["rpm"], 0, stdout="a\nb\n", stderr="")
        with patch("kmp_install.core.commands.subprocess.run", return_value=completed) as run:
            assert run_query(["rpm", "-qa"]) == ["a", "b"]
        run.assert_called_once_with(["rpm", "-qa"], capture_output=True, text=True, check=False)

    def test_nonzero_exit(self):
        completed = subprocess.CompletedProcess(["rpm"], 1, stdout="", stderr="error: bad\n")
        with patch("kmp_install.core.commands.subprocess.run", return_value=completed):
            with pytest.raises(CommandError) as excinfo:
                run_query(["rpm", "-qp", "x.rpm"])
        assert excinfo.value.returncode == 1
        assert "error: bad" in str(excinfo.value)

    def test_launch_failure(self):
        with patch("kmp_install.core.commands.subprocess.run", side_effect=FileNotFoundError("rpm")):
            with pytest.raises(CommandError) as excinfo:
                run_query(["rpm", "-qa"])
        assert excinfo.value.returncode is None


class TestRunPassthrough:
    def test_exit_code(self):
        completed = subprocess.CompletedProcess(["zypper"], 8)
        with patch("kmp_install.core.commands.subprocess.run", return_value=completed):
            assert run_passthrough(["zypper", "install", "foo"]) == 8

    def test_launch_failure(self):
        with patch("kmp_install.core.commands.subprocess.run", side_effect=PermissionError("denied")):
            with pytest.raises(CommandError):
                run_passthrough(["zypper"])


class TestStreamedCommand:
    def test_lines_and_returncode(self, fake_popen):
        fake_popen.outputs = [(b"one\ntwo\nthree", 0)]
        command = StreamedCommand(["zypper"], read_size=4)
        assert list(command.lines()) == ["one", "two", "three"]
        assert command.returncode == 0
        assert fake_popen.instances[0].waited

    def test_non_interactive_stdio(self, fake_popen):
        fake_popen.outputs = [(b"", 0)]
        list(StreamedCommand(["zypper"]).lines())
        proc = fake_popen.instances[0]
        assert proc.stdin == subprocess.DEVNULL
        assert proc.stderr == subprocess.DEVNULL

    def test_interactive_mirrors_output(self, fake_popen):
        fake_popen.outputs = [(b"Continue? [y/n]\n", 4)]
        echoed = []
        command = StreamedCommand(["zypper"], interactive=True, echo=echoed.append)
        assert list(command.lines()) == ["Continue? [y/n]"]
        assert b"".join(echoed) == b"Continue? [y/n]\n"
        assert command.returncode == 4
        proc = fake_popen.instances[0]
        assert proc.stdin is None
        assert proc.stderr == subprocess.STDOUT

    def test_child_reaped_when_reader_stops(self, fake_popen):
        fake_popen.outputs = [(b"a\nb\nc\n", 0)]
        command = StreamedCommand(["zypper"])
        lines = command.lines()
        assert next(lines) == "a"
        lines.close()
        assert fake_popen.instances[0].waited
        assert command.returncode == 0

    def test_launch_failure(self, monkeypatch):
        def fail(*args, **kwargs):
            raise FileNotFoundError("zypper")

        monkeypatch.setattr("kmp_install.core.commands.subprocess.Popen", fail)
        with pytest.raises(CommandError):
            list(StreamedCommand(["zypper"]).lines())
