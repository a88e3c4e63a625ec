"""Tests for the installed-KMP inventory."""

from unittest.mock import patch

import pytest

from kmp_install.core.errors import CommandError, InventoryError
from kmp_install.core.inventory import query_installed


class TestQueryInstalled:
    def test_query_command(self, settings):
        with patch("kmp_install.core.inventory.run_query", return_value=[]) as run_query:
            assert query_installed(settings) == []
        cmd = run_query.call_args.args[0]
        assert cmd[:3] == ["rpm", "-qa", "--qf"]
        assert cmd[-1] == "*-kmp-*"

    def test_packages_with_modules(self, settings):
        lines = [
            "a-kmp-default 1.0 1 x86_64 /lib/modules/5.14.0/updates/foo.ko",
            "a-kmp-default 1.0 1 x86_64 /lib/modules/5.14.0/updates/bar-baz.ko",
        ]
        with patch("kmp_install.core.inventory.run_query", return_value=lines):
            [pkg] = query_installed(settings)
        assert pkg.identity == "a-kmp-default-1.0-1.x86_64"
        assert pkg.modules == {"5.14.0/foo", "5.14.0/bar_baz"}

    def test_rpm_failure_is_fatal(self, settings):
        error = CommandError(["rpm", "-qa"], 1, "database locked")
        with patch("kmp_install.core.inventory.run_query", side_effect=error):
            with pytest.raises(InventoryError):
                query_installed(settings)
