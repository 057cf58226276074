"""Componentes de UI para CLI (Rich).

- Evita mezclar lógica de comandos con detalles visuales.
- Los servicios del Core reciben estas funciones como `PipelineHooks`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from core.config import InstallerSettings
from core.domain.models import GpuDetection, InstallMethod
from core.services.context import PipelineHooks


def print_banner(console: Console) -> None:
    title = Text("ComfyUI Installer", style="bold cyan")
    subtitle = Text("Stable Diffusion • PyTorch (CUDA / ROCm / Metal / CPU)", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def print_header(console: Console, message: str) -> None:
    console.print(Rule(Text(message, style="bold blue"), style="white"))


def print_success(console: Console, message: str) -> None:
    console.print(Text(f"✓ {message}", style="green"))


def print_warning(console: Console, message: str) -> None:
    console.print(Text(f"⚠ {message}", style="yellow"))


def print_error(console: Console, message: str) -> None:
    console.print(Text(f"✗ {message}", style="red"))


def print_info(console: Console, message: str) -> None:
    console.print(Text(message, style="dim"))


def build_hooks(console: Console) -> PipelineHooks:
    """Conecta la salida del Core con la consola."""

    return PipelineHooks(
        header=lambda m: print_header(console, m),
        success=lambda m: print_success(console, m),
        warning=lambda m: print_warning(console, m),
        info=lambda m: print_info(console, m),
    )


def build_menu_table() -> Table:
    table = Table(title="Choose installation method:", show_header=False, box=None)
    table.add_column("#", style="bold cyan", no_wrap=True)
    table.add_column("Method", style="white")
    for number, method in enumerate(InstallMethod, start=1):
        table.add_row(f"{number})", method.label())
    return table


def print_next_steps(
    console: Console,
    settings: InstallerSettings,
    *,
    run_command: str | None = None,
    gpu: GpuDetection | None = None,
) -> None:
    """Instrucciones finales tras una instalación completa."""

    print_header(console, "Installation Complete!")
    print_success(console, "ComfyUI has been installed successfully!")
    if gpu is not None:
        print_success(console, f"PyTorch backend: {gpu.backend.label()}")

    console.print()
    console.print(Text("Next steps:", style="blue"))
    print_warning(console, "1. Download Stable Diffusion models (checkpoints) and place them in models/checkpoints/")
    print_warning(console, "2. Optionally download VAE files and place them in models/vae/")
    if run_command:
        print_warning(console, f"3. Run ComfyUI: {run_command}")
    else:
        print_warning(console, "3. Run ComfyUI using the command shown above")
    print_warning(console, f"4. Open your browser to http://localhost:{settings.server_port}")

    console.print()
    console.print(Text("For GPU acceleration:", style="blue"))
    print_warning(console, "NVIDIA: The script installs CUDA-enabled PyTorch")
    print_warning(console, "AMD (Linux): Run with HSA_OVERRIDE_GFX_VERSION=10.3.0 python main.py")
    print_warning(console, "Apple Silicon: PyTorch with Metal support is included")

    console.print()
    console.print(Text("Useful commands:", style="blue"))
    print_warning(console, "Queue generation: Ctrl+Enter")
    print_warning(console, "Load workflow: Ctrl+O")
    print_warning(console, "Save workflow: Ctrl+S")


def print_dry_run_summary(console: Console, *, run_command: str | None = None) -> None:
    """Cierre de `--dry-run`: no se ha instalado nada."""

    print_header(console, "Dry Run Complete")
    print_warning(console, "No commands were executed and no files were written.")
    if run_command:
        print_info(console, f"After a real install, start ComfyUI with: {run_command}")
