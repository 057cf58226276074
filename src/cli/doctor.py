"""Doctor command for environment diagnostics."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.subprocess_runner import SubprocessRunner
from core.config import InstallerSettings, get_user_env_file, load_settings, write_user_env_vars
from core.domain.models import GpuProbes, HostOS
from core.errors import InstallerError
from core.services.context import InstallContext
from core.services.gpu import probe_gpu, select_backend
from core.services.os_detection import current_ostype, os_from_ostype
from core.services.python_env import select_python
from core.services.system_deps import find_package_manager

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_TOOLS: tuple[str, ...] = ("git", "curl", "poetry", "pyenv")


def _package_manager_row(ctx: InstallContext) -> tuple[str, str, str]:
    if ctx.host_os is HostOS.LINUX:
        manager = find_package_manager(ctx)
        if manager is None:
            return "Package manager", "FAIL", "No supported package manager found"
        return "Package manager", "OK", f"{manager.binary} ({manager.label})"
    if ctx.host_os is HostOS.MACOS:
        brew = ctx.which("brew")
        if brew:
            return "Package manager", "OK", f"brew ({brew})"
        return "Package manager", "OPTIONAL", "Homebrew missing -> installed on demand"
    return "Package manager", "MANUAL", "Install Git, Python 3.10+ and build tools by hand"


@app.command()
def run() -> None:
    """Report what the installer would detect, without installing anything."""

    table = Table(title="ComfyUI Installer Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    try:
        settings = load_settings()
    except InstallerError as exc:
        table.add_row("Configuration", "FAIL", escape(str(exc)))
        _console.print(table)
        raise typer.Exit(code=1) from exc

    ostype = current_ostype()
    try:
        host_os = os_from_ostype(ostype)
    except InstallerError as exc:
        table.add_row("Operating system", "FAIL", str(exc))
        _console.print(table)
        raise typer.Exit(code=1) from exc
    table.add_row("Operating system", "OK", f"{host_os.value} (OSTYPE={ostype})")

    ctx = InstallContext(host_os=host_os, runner=SubprocessRunner(), settings=settings, workdir=Path.cwd())

    table.add_row(*_package_manager_row(ctx))

    try:
        python = select_python(ctx)
        detail = python.command if not python.version else f"{python.command} ({python.version})"
        table.add_row("Python", "WARN" if python.warning else "OK", python.warning or detail)
    except InstallerError as exc:
        table.add_row("Python", "FAIL", str(exc))

    for tool in _TOOLS:
        path = ctx.which(tool)
        table.add_row(tool, "OK" if path else "MISSING", path or "not on PATH")

    probes = probe_gpu(ctx) if host_os is HostOS.LINUX else GpuProbes()
    detection = select_backend(host_os, probes)
    gpu_detail = detection.device or detection.warning or detection.source
    table.add_row("PyTorch backend", detection.backend.label(), gpu_detail)

    clone = ctx.clone_path
    table.add_row(
        "ComfyUI clone",
        "PRESENT" if clone.is_dir() else "ABSENT",
        f"{clone} (re-runs skip git clone)" if clone.is_dir() else str(clone),
    )

    env_file = get_user_env_file()
    table.add_row("User config", "OK" if env_file.exists() else "DEFAULTS", str(env_file))

    _console.print(table)


@app.command()
def configure() -> None:
    """Interactive setup (stores config in the user config .env)."""

    try:
        settings = load_settings()
    except InstallerError as exc:
        _console.print(f"[yellow]{escape(str(exc))}; starting from defaults.[/yellow]")
        settings = InstallerSettings.model_construct()

    repo_url = typer.prompt("ComfyUI repository URL", default=settings.repo_url, show_default=True).strip()
    clone_dir = typer.prompt("Clone directory", default=settings.clone_dir, show_default=True).strip()
    pyenv_version = typer.prompt(
        "Python version for pyenv installs",
        default=settings.pyenv_python_version,
        show_default=True,
    ).strip()

    if not repo_url or not clone_dir:
        raise typer.BadParameter("repository URL and clone directory are required")

    try:
        load_settings(
            _env_file=None,
            repo_url=repo_url,
            clone_dir=clone_dir,
            pyenv_python_version=pyenv_version,
        )
    except InstallerError as exc:
        raise typer.BadParameter(str(exc)) from exc

    env_path = write_user_env_vars(
        {
            "COMFY_INSTALLER_REPO_URL": repo_url,
            "COMFY_INSTALLER_CLONE_DIR": clone_dir,
            "COMFY_INSTALLER_PYENV_PYTHON_VERSION": pyenv_version,
        }
    )

    _console.print(f"[green]Saved installer config to:[/green] {env_path}")
