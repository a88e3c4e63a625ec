"""Shared fakes for the rpm and zypper subprocess boundary."""

import io

import pytest

from kmp_install.core.config import Settings


class FakePopen:
    """Stands in for subprocess.Popen, replaying canned output."""

    instances: list["FakePopen"] = []
    outputs: list[tuple[bytes, int]] = []

    def __init__(self, cmd, stdin=None, stdout=None, stderr=None):
        self.cmd = cmd
        self.stdin = stdin
        self.stderr = stderr
        data, self.returncode = FakePopen.outputs.pop(0)
        self.stdout = io.BytesIO(data)
        self.waited = False
        FakePopen.instances.append(self)

    def wait(self):
        self.waited = True
        return self.returncode


@pytest.fixture
def fake_popen(monkeypatch):
    FakePopen.instances = []
    FakePopen.outputs = []
    monkeypatch.setattr("kmp_install.core.commands.subprocess.Popen", FakePopen)
    return FakePopen


@pytest.fixture
def settings():
    return Settings(zypper="zypper", rpm="rpm")


ZYPPER_OUTPUT = b"""Loading repository data...
Reading installed packages...
Resolving package dependencies...

The following NEW package is going to be installed:
  foo-kmp-default 1.0_k5.14.21-1.1 x86_64 repoA  openSUSE

The following package is going to be upgraded:
  bar-kmp-default 2.0-1 -> 2.1-1 x86_64 Main Update Repository  openSUSE

The following package is going to be REMOVED:
  old-kmp-default 0.9-3 x86_64 @System  openSUSE

3 packages to install.
"""


@pytest.fixture
def zypper_output():
    return ZYPPER_OUTPUT
