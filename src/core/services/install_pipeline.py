"""ComfyUI installation orchestration.

Each menu choice maps to a fixed sequence of steps:

1. Poetry: system deps, Python selection, Poetry install, model dirs.
2. Pyenv + venv: system deps, pyenv install, model dirs.
3. System Python + venv: system deps, Python selection, venv install, model dirs.
4. System deps only.

Steps are plain functions over an `InstallContext`; the first failing
external command raises and aborts the rest.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from adapters.manifest import write_poetry_manifest
from core.domain.models import GpuDetection, HostOS, InstallMethod
from core.services.context import InstallContext
from core.services.gpu import detect_gpu_backend, verify_torch
from core.services.python_env import select_python, setup_python_env
from core.services.system_deps import install_system_deps

MODEL_SUBDIRS: tuple[str, ...] = (
    "checkpoints",
    "vae",
    "loras",
    "embeddings",
    "controlnet",
    "upscale_models",
    "vae_approx",
)

VENV_DIR = "venv"


@dataclass
class InstallResult:
    """Output of a full installer run."""

    method: InstallMethod
    clone_path: Path | None = None
    run_command: str | None = None
    gpu: GpuDetection | None = None


def venv_python(venv_dir: Path, host_os: HostOS) -> Path:
    if host_os is HostOS.WINDOWS:
        return venv_dir / "Scripts" / "python.exe"
    return venv_dir / "bin" / "python"


def run_command(ctx: InstallContext, method: InstallMethod) -> str:
    """Shell line that starts ComfyUI after the given install method."""

    clone_dir = ctx.settings.clone_dir
    if method is InstallMethod.POETRY:
        return f"cd {clone_dir} && poetry run python main.py"
    if ctx.host_os is HostOS.WINDOWS:
        return f"cd {clone_dir} && source {VENV_DIR}/Scripts/activate && python main.py"
    return f"cd {clone_dir} && source {VENV_DIR}/bin/activate && python main.py"


def clone_repository(ctx: InstallContext) -> Path:
    """Clone ComfyUI unless the target directory already exists."""

    target = ctx.clone_path
    if target.is_dir():
        ctx.info(f"Found existing {ctx.settings.clone_dir} directory, skipping clone")
        return target
    ctx.success("Cloning ComfyUI repository...")
    ctx.run(["git", "clone", ctx.settings.repo_url, ctx.settings.clone_dir], cwd=ctx.workdir)
    return target


def ensure_poetry(ctx: InstallContext) -> None:
    if ctx.has("poetry"):
        return
    ctx.warning("Poetry not found. Installing Poetry...")
    ctx.shell(f"curl -sSL {ctx.settings.poetry_installer_url} | python3 -")
    ctx.add_to_path(Path.home() / ".local" / "bin")


def ensure_pyenv(ctx: InstallContext) -> None:
    if ctx.has("pyenv"):
        return
    ctx.warning("pyenv not found. Installing pyenv...")
    installer = f"curl {ctx.settings.pyenv_installer_url} | bash"
    if ctx.host_os is HostOS.LINUX and ctx.has("pacman"):
        helper = next((name for name in ("yay", "paru") if ctx.has(name)), None)
        if helper:
            ctx.run([helper, "-S", "pyenv"])
        else:
            ctx.warning("Installing pyenv manually...")
            ctx.shell(installer)
    else:
        ctx.shell(installer)
    pyenv_root = Path.home() / ".pyenv"
    ctx.add_to_path(pyenv_root / "bin", pyenv_root / "shims")


def _python_command(ctx: InstallContext) -> str:
    if ctx.python is None:
        ctx.python = select_python(ctx)
    return ctx.python.command


def install_with_poetry(ctx: InstallContext) -> GpuDetection:
    ctx.header("Installing ComfyUI with Poetry")
    ensure_poetry(ctx)
    repo = clone_repository(ctx)

    if ctx.dry_run:
        ctx.info(f"Would write {repo / 'pyproject.toml'}")
    else:
        write_poetry_manifest(repo)

    ctx.run(["poetry", "env", "use", _python_command(ctx)], cwd=repo)
    ctx.run(["poetry", "install"], cwd=repo)

    detection = detect_gpu_backend(ctx, ["poetry", "run", "pip"], cwd=repo)
    verify_torch(ctx, ["poetry", "run", "python"], cwd=repo)

    ctx.run(["poetry", "run", "pip", "install", "-r", "requirements.txt"], cwd=repo)

    ctx.success("ComfyUI installed with Poetry!")
    ctx.success(f"To run ComfyUI: {run_command(ctx, InstallMethod.POETRY)}")
    return detection


def _install_into_venv(ctx: InstallContext, repo: Path, label: str) -> GpuDetection:
    """Shared tail of the pyenv and venv paths, once `venv/` exists."""

    python = [str(venv_python(repo / VENV_DIR, ctx.host_os))]
    pip = [*python, "-m", "pip"]

    ctx.run([*pip, "install", "--upgrade", "pip"], cwd=repo)

    detection = detect_gpu_backend(ctx, pip, cwd=repo)
    verify_torch(ctx, python, cwd=repo)

    ctx.run([*pip, "install", "-r", "requirements.txt"], cwd=repo)

    ctx.success(f"ComfyUI installed with {label}!")
    ctx.success(f"To run ComfyUI: {run_command(ctx, ctx.method or InstallMethod.VENV)}")
    return detection


def install_with_pyenv(ctx: InstallContext) -> GpuDetection:
    ctx.header("Installing ComfyUI with pyenv")
    ensure_pyenv(ctx)

    version = ctx.settings.pyenv_python_version
    installed = ctx.run(["pyenv", "versions"], check=False, capture=True)
    if version not in installed.stdout:
        ctx.success(f"Installing Python {version} with pyenv...")
        ctx.run(["pyenv", "install", version])
    ctx.run(["pyenv", "global", version])

    repo = clone_repository(ctx)
    ctx.run(["pyenv", "exec", "python", "-m", "venv", VENV_DIR], cwd=repo)
    return _install_into_venv(ctx, repo, "Pyenv")


def install_with_venv(ctx: InstallContext) -> GpuDetection:
    ctx.header("Installing ComfyUI with Python Venv")
    repo = clone_repository(ctx)
    ctx.run([_python_command(ctx), "-m", "venv", VENV_DIR], cwd=repo)
    return _install_into_venv(ctx, repo, "Venv")


def setup_model_dirs(ctx: InstallContext, base: Path | None = None) -> list[Path]:
    """Create the model asset directories ComfyUI expects under `models/`."""

    ctx.header("Setting up Model Directories")
    models = (base or ctx.clone_path) / "models"
    created: list[Path] = []
    for name in MODEL_SUBDIRS:
        path = models / name
        if ctx.dry_run:
            ctx.info(f"mkdir -p {path}")
        else:
            path.mkdir(parents=True, exist_ok=True)
        created.append(path)

    ctx.success("Model directories created!")
    ctx.warning("Remember to place your Stable Diffusion models in:")
    ctx.warning("Checkpoints: models/checkpoints/")
    ctx.warning("VAE: models/vae/")
    ctx.warning("LoRAs: models/loras/")
    return created


def run_installation(ctx: InstallContext, method: InstallMethod) -> InstallResult:
    """Run every step for `method` in order."""

    ctx.method = method
    result = InstallResult(method=method)

    install_system_deps(ctx)
    if method is InstallMethod.SYSTEM_DEPS:
        return result

    if method is InstallMethod.POETRY:
        setup_python_env(ctx)
        result.gpu = install_with_poetry(ctx)
    elif method is InstallMethod.PYENV:
        result.gpu = install_with_pyenv(ctx)
    else:
        setup_python_env(ctx)
        result.gpu = install_with_venv(ctx)

    setup_model_dirs(ctx)
    result.clone_path = ctx.clone_path
    result.run_command = run_command(ctx, method)
    return result
