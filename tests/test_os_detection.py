import pytest

from core.domain.models import HostOS
from core.errors import UnsupportedOSError
from core.services import os_detection
from core.services.os_detection import current_ostype, detect_os, os_from_ostype


@pytest.mark.parametrize(
    "ostype, expected",
    [
        ("linux-gnu", HostOS.LINUX),
        ("linux-gnueabihf", HostOS.LINUX),
        ("darwin", HostOS.MACOS),
        ("darwin23", HostOS.MACOS),
        ("cygwin", HostOS.WINDOWS),
        ("msys", HostOS.WINDOWS),
    ],
)
def test_supported_ostypes(ostype, expected):
    assert os_from_ostype(ostype) is expected


@pytest.mark.parametrize("ostype", ["linux-musl", "freebsd13.2", "solaris", "msys2", "win32", ""])
def test_unsupported_ostypes(ostype):
    with pytest.raises(UnsupportedOSError) as excinfo:
        os_from_ostype(ostype)
    assert "Unsupported operating system" in str(excinfo.value)


def test_exported_ostype_wins(monkeypatch):
    monkeypatch.setenv("OSTYPE", "darwin22")
    assert current_ostype() == "darwin22"
    assert detect_os() is HostOS.MACOS


@pytest.mark.parametrize(
    "platform, expected",
    [("linux", "linux-gnu"), ("darwin", "darwin"), ("win32", "msys"), ("cygwin", "cygwin")],
)
def test_ostype_derived_from_sys_platform(monkeypatch, platform, expected):
    monkeypatch.delenv("OSTYPE", raising=False)
    monkeypatch.setattr(os_detection.sys, "platform", platform)
    assert current_ostype() == expected


def test_explicit_ostype_overrides_environment(monkeypatch):
    monkeypatch.setenv("OSTYPE", "linux-gnu")
    with pytest.raises(UnsupportedOSError):
        detect_os("aix")


def test_musl_rejected_only_when_bash_exports_it(monkeypatch):
    monkeypatch.setenv("OSTYPE", "linux-musl")
    with pytest.raises(UnsupportedOSError):
        detect_os()

    monkeypatch.delenv("OSTYPE")
    monkeypatch.setattr(os_detection.sys, "platform", "linux")
    assert detect_os() is HostOS.LINUX
