"""System dependency installation (git, Python, build toolchain).

On Linux the first supported package manager found on `PATH` wins, checked
in the order of `LINUX_PACKAGE_MANAGERS`. macOS goes through Homebrew
(installed first when missing). On Windows nothing is installed; the user is
told what to install by hand.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.domain.models import HostOS
from core.errors import UnsupportedDistroError
from core.services.context import InstallContext


@dataclass(frozen=True)
class PackageManager:
    binary: str
    label: str
    commands: tuple[tuple[str, ...], ...]


LINUX_PACKAGE_MANAGERS: tuple[PackageManager, ...] = (
    PackageManager(
        binary="pacman",
        label="Detected Arch-based distribution (Arch/Artix/Manjaro)",
        commands=(
            ("sudo", "pacman", "-Syu", "--noconfirm"),
            (
                "sudo", "pacman", "-S", "--needed", "--noconfirm",
                "git", "python", "python-pip", "python-virtualenv", "base-devel",
            ),
        ),
    ),
    PackageManager(
        binary="apt-get",
        label="Detected Debian-based distribution",
        commands=(
            ("sudo", "apt-get", "update"),
            ("sudo", "apt-get", "install", "-y", "git", "python3", "python3-pip", "python3-venv", "build-essential"),
        ),
    ),
    PackageManager(
        binary="yum",
        label="Detected RHEL-based distribution (yum)",
        commands=(
            ("sudo", "yum", "install", "-y", "git", "python3", "python3-pip", "python3-devel", "gcc", "gcc-c++"),
        ),
    ),
    PackageManager(
        binary="dnf",
        label="Detected RHEL-based distribution (dnf)",
        commands=(
            ("sudo", "dnf", "install", "-y", "git", "python3", "python3-pip", "python3-devel", "gcc", "gcc-c++"),
        ),
    ),
    PackageManager(
        binary="zypper",
        label="Detected openSUSE",
        commands=(
            ("sudo", "zypper", "install", "-y", "git", "python3", "python3-pip", "python3-devel", "gcc", "gcc-c++"),
        ),
    ),
    PackageManager(
        binary="apk",
        label="Detected Alpine Linux",
        commands=(
            ("sudo", "apk", "add", "git", "python3", "python3-dev", "py3-pip", "build-base"),
        ),
    ),
)

BREW_PACKAGES: tuple[str, ...] = ("git", "python@3.10")

WINDOWS_REQUIREMENTS: tuple[str, ...] = (
    "- Git for Windows installed",
    "- Python 3.10+ installed from python.org",
    "- Visual Studio Build Tools or Visual Studio Community",
)


def find_package_manager(ctx: InstallContext) -> PackageManager | None:
    for manager in LINUX_PACKAGE_MANAGERS:
        if ctx.has(manager.binary):
            return manager
    return None


def _install_linux(ctx: InstallContext) -> None:
    manager = find_package_manager(ctx)
    if manager is None:
        raise UnsupportedDistroError()
    ctx.success(manager.label)
    for command in manager.commands:
        ctx.run(command)


def _install_macos(ctx: InstallContext) -> None:
    if not ctx.has("brew"):
        ctx.warning("Homebrew not found. Installing Homebrew...")
        ctx.shell(f'/bin/bash -c "$(curl -fsSL {ctx.settings.homebrew_installer_url})"')
    ctx.run(["brew", "install", *BREW_PACKAGES])


def _install_windows(ctx: InstallContext) -> None:
    ctx.warning("On Windows, please ensure you have:")
    for line in WINDOWS_REQUIREMENTS:
        ctx.warning(line)


def install_system_deps(ctx: InstallContext) -> None:
    ctx.header("Installing System Dependencies")
    if ctx.host_os is HostOS.LINUX:
        _install_linux(ctx)
    elif ctx.host_os is HostOS.MACOS:
        _install_macos(ctx)
    else:
        _install_windows(ctx)
