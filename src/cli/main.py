"""CLI principal (Typer).

Sin subcomando ejecuta el instalador interactivo; `doctor` agrupa los
diagnósticos y la configuración de usuario.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from adapters.subprocess_runner import DryRunRunner, SubprocessRunner
from cli import doctor
from cli.logging_setup import configure_logging
from cli.ui_components import (
    build_hooks,
    build_menu_table,
    print_banner,
    print_dry_run_summary,
    print_error,
    print_header,
    print_info,
    print_next_steps,
    print_success,
)
from core.config import load_settings
from core.domain.models import InstallMethod
from core.errors import InstallerError
from core.interfaces.runner import CommandRunner
from core.services.context import InstallContext
from core.services.install_pipeline import run_installation
from core.services.os_detection import detect_os

app = typer.Typer(
    help="Install ComfyUI (Stable Diffusion) with the right PyTorch backend.",
    invoke_without_command=True,
    add_completion=False,
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _build_runner(dry_run: bool, console: Console) -> CommandRunner:
    if dry_run:
        return DryRunRunner(echo=lambda line: print_info(console, f"$ {line}"), probe=SubprocessRunner())
    return SubprocessRunner()


def _ask_method(console: Console) -> InstallMethod:
    console.print(build_menu_table())
    choice = typer.prompt("Enter your choice (1-4)")
    return InstallMethod.from_choice(str(choice))


@app.callback()
def main(
    ctx: typer.Context,
    method: Optional[InstallMethod] = typer.Option(
        None,
        "--method",
        "-m",
        case_sensitive=False,
        help="Install method; skips the interactive menu.",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the commands instead of running them."),
    workdir: Optional[Path] = typer.Option(
        None,
        "--workdir",
        file_okay=False,
        help="Directory where ComfyUI is cloned (default: current directory).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Run the ComfyUI installer."""

    if ctx.invoked_subcommand is not None:
        return

    print_header(_console, "ComfyUI (Stable Diffusion) Installation Script")

    try:
        settings = load_settings()
        configure_logging("DEBUG" if verbose else settings.log_level, console=_console)

        host_os = detect_os()
        print_success(_console, f"Detected OS: {host_os.value}")

        selected = method or _ask_method(_console)

        install_ctx = InstallContext(
            host_os=host_os,
            runner=_build_runner(dry_run, _console),
            settings=settings,
            workdir=(workdir or Path.cwd()).resolve(),
            hooks=build_hooks(_console),
            dry_run=dry_run,
        )
        result = run_installation(install_ctx, selected)
    except InstallerError as exc:
        print_error(_console, str(exc))
        raise typer.Exit(code=1) from exc

    if dry_run:
        print_dry_run_summary(_console, run_command=result.run_command)
        return

    if result.method is InstallMethod.SYSTEM_DEPS:
        print_success(_console, "System dependencies installed.")
        return

    print_next_steps(_console, settings, run_command=result.run_command, gpu=result.gpu)


def run() -> None:
    # Windows terminals default to cp1252; the status lines use ✓/✗.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    print_banner(_console)
    app()


if __name__ == "__main__":
    run()
