"""Tests for SIP path protection."""

from __future__ import annotations

import pytest

from mac_cleanup.core.sip import is_sip_protected


@pytest.mark.parametrize("path", [
    "/System",
    "/System/Library/Caches",
    "/usr/lib/libfoo.dylib",
    "/bin/ls",
    "/sbin/mount",
])
def test_protected(path):
    assert is_sip_protected(path)


@pytest.mark.parametrize("path", [
    "/usr/local",
    "/usr/local/Cellar/foo",
    "/Users/me/Library/Caches/x",
    "/Systemwide/cache",
    "/usrdata",
])
def test_not_protected(path):
    assert not is_sip_protected(path)


def test_symlink_into_protected_location(tmp_path):
    link = tmp_path / "sneaky"
    link.symlink_to("/usr/lib")
    assert is_sip_protected(str(link))


def test_plain_temp_path(tmp_path):
    assert not is_sip_protected(str(tmp_path / "file"))
