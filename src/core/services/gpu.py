"""GPU backend detection and PyTorch installation.

Three separate steps:

- `probe_gpu` runs the vendor tools and records their raw output. Tool
  failures are data, never errors.
- `select_backend` is a pure decision over those probes. On Linux the
  priority is NVIDIA, then AMD, then Intel, then CPU. A hybrid machine
  (e.g. Intel iGPU + NVIDIA dGPU) therefore resolves to the discrete vendor.
- `build_torch_plan` / `install_torch` turn the decision into pip commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from core.config import InstallerSettings
from core.domain.models import GpuBackend, GpuDetection, GpuProbes, HostOS, TorchInstallPlan
from core.services.context import InstallContext

NVIDIA_QUERY: tuple[str, ...] = (
    "nvidia-smi",
    "--query-gpu=name",
    "--format=csv,noheader,nounits",
)

VERIFY_TORCH_SNIPPET = (
    "import torch; "
    "print(f'PyTorch version: {torch.__version__}'); "
    "print(f'CUDA available: {torch.cuda.is_available()}'); "
    "print(f'CUDA version: {torch.version.cuda if torch.cuda.is_available() else \"N/A\"}')"
)


def _lspci_lines(probes: GpuProbes) -> list[str]:
    return [line.lower() for line in probes.lspci_output.splitlines()]


def _lspci_vga_match(probes: GpuProbes, vendor: str) -> bool:
    return any(vendor in line and "vga" in line for line in _lspci_lines(probes))


def probe_gpu(ctx: InstallContext) -> GpuProbes:
    """Run the detection tools that exist on this host."""

    probes = GpuProbes()

    if ctx.has("nvidia-smi"):
        probes.nvidia_smi_present = True
        probes.nvidia_smi_ok = ctx.run(["nvidia-smi"], check=False, capture=True).ok
        if probes.nvidia_smi_ok:
            query = ctx.run(NVIDIA_QUERY, check=False, capture=True)
            lines = query.stdout.strip().splitlines() if query.ok else []
            if lines and lines[0].strip():
                probes.nvidia_gpu_name = lines[0].strip()

    if ctx.has("rocm-smi"):
        probes.rocm_smi_present = True
        probes.rocm_smi_ok = ctx.run(["rocm-smi"], check=False, capture=True).ok

    if ctx.has("lspci"):
        lspci = ctx.run(["lspci"], check=False, capture=True)
        if lspci.ok:
            probes.lspci_output = lspci.stdout

    return probes


def select_backend(host_os: HostOS, probes: GpuProbes) -> GpuDetection:
    """Pick the PyTorch backend for `host_os` given the tool outputs."""

    if host_os is HostOS.MACOS:
        return GpuDetection(backend=GpuBackend.METAL, source="macos")
    if host_os is HostOS.WINDOWS:
        return GpuDetection(
            backend=GpuBackend.CPU,
            source="windows",
            warning="Windows detected, installing CPU PyTorch (adjust manually for GPU support)",
        )

    if probes.nvidia_smi_present and probes.nvidia_smi_ok and probes.nvidia_gpu_name:
        return GpuDetection(backend=GpuBackend.CUDA, source="nvidia-smi", device=probes.nvidia_gpu_name)

    if "nvidia" in probes.lspci_output.lower():
        return GpuDetection(backend=GpuBackend.CUDA, source="lspci-nvidia")

    if probes.rocm_smi_present and probes.rocm_smi_ok:
        return GpuDetection(backend=GpuBackend.ROCM, source="rocm-smi")

    if _lspci_vga_match(probes, "amd"):
        return GpuDetection(
            backend=GpuBackend.ROCM,
            source="lspci-amd",
            warning="AMD GPU detected via lspci, installing ROCm PyTorch",
        )

    if _lspci_vga_match(probes, "intel"):
        return GpuDetection(
            backend=GpuBackend.CPU,
            source="lspci-intel",
            warning="Intel GPU detected, installing CPU PyTorch (Intel GPU support experimental)",
        )

    return GpuDetection(
        backend=GpuBackend.CPU,
        source="none",
        warning="No GPU detected or unsupported GPU, installing CPU PyTorch",
    )


def build_torch_plan(detection: GpuDetection, host_os: HostOS, settings: InstallerSettings) -> TorchInstallPlan:
    base = settings.torch_index_base.rstrip("/")
    if detection.backend is GpuBackend.CUDA:
        return TorchInstallPlan(index_url=f"{base}/{settings.cuda_tag}", uninstall_first=True)
    if detection.backend is GpuBackend.ROCM:
        return TorchInstallPlan(index_url=f"{base}/{settings.rocm_tag}")
    if detection.backend is GpuBackend.CPU and host_os is HostOS.LINUX:
        return TorchInstallPlan(index_url=f"{base}/cpu")
    # Metal wheels and Windows CPU wheels both come from the default index.
    return TorchInstallPlan()


def _announce(ctx: InstallContext, detection: GpuDetection) -> None:
    if detection.warning:
        ctx.warning(detection.warning)
        return
    if detection.source == "nvidia-smi":
        ctx.success(f"NVIDIA GPU detected: {detection.device}")
        ctx.success("Installing CUDA PyTorch")
    elif detection.source == "lspci-nvidia":
        ctx.success("NVIDIA GPU detected via lspci, installing CUDA PyTorch")
    elif detection.source == "rocm-smi":
        ctx.success("AMD GPU detected, installing ROCm PyTorch")
    elif detection.source == "macos":
        ctx.success("macOS detected, installing Metal-optimized PyTorch")


def install_torch(
    ctx: InstallContext,
    pip: Sequence[str],
    plan: TorchInstallPlan,
    cwd: Path | None = None,
) -> None:
    """Install the planned PyTorch packages with the given pip command prefix."""

    if plan.uninstall_first:
        ctx.run([*pip, "uninstall", *plan.packages, "-y"], cwd=cwd, check=False, quiet=True)
    args = [*pip, "install", *plan.packages]
    if plan.index_url:
        args += ["--extra-index-url", plan.index_url]
    ctx.run(args, cwd=cwd)


def detect_gpu_backend(ctx: InstallContext, pip: Sequence[str], cwd: Path | None = None) -> GpuDetection:
    """Detect the backend and install the matching PyTorch build."""

    ctx.header("Detecting GPU Backend")
    probes = probe_gpu(ctx) if ctx.host_os is HostOS.LINUX else GpuProbes()
    detection = select_backend(ctx.host_os, probes)
    _announce(ctx, detection)
    install_torch(ctx, pip, build_torch_plan(detection, ctx.host_os, ctx.settings), cwd=cwd)
    return detection


def verify_torch(ctx: InstallContext, python: Sequence[str], cwd: Path | None = None) -> None:
    ctx.success("Verifying PyTorch installation...")
    ctx.run([*python, "-c", VERIFY_TORCH_SNIPPET], cwd=cwd)
