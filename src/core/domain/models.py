"""Modelos del dominio (Pydantic v2).

Contenido:
- Enums del instalador: sistema operativo, backend de cómputo y método de
  instalación.
- Resultados de detección (GPU, intérprete Python) y de ejecución de comandos.

Nota:
- Estos modelos describen *qué* se detectó, no *cómo* se obtuvo.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.errors import InvalidChoiceError


class HostOS(str, Enum):
    """Sistemas operativos soportados."""

    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"


class GpuBackend(str, Enum):
    """Runtime de cómputo objetivo de PyTorch."""

    CUDA = "cuda"
    ROCM = "rocm"
    CPU = "cpu"
    METAL = "metal"

    def label(self) -> str:
        return {
            GpuBackend.CUDA: "CUDA",
            GpuBackend.ROCM: "ROCm",
            GpuBackend.CPU: "CPU",
            GpuBackend.METAL: "Metal",
        }[self]


class InstallMethod(str, Enum):
    """Opciones del menú interactivo, en el orden en que se muestran."""

    POETRY = "poetry"
    PYENV = "pyenv"
    VENV = "venv"
    SYSTEM_DEPS = "system-deps"

    @classmethod
    def from_choice(cls, choice: str) -> "InstallMethod":
        """Traduce la respuesta del menú (1-4) a un método."""

        mapping = {
            "1": cls.POETRY,
            "2": cls.PYENV,
            "3": cls.VENV,
            "4": cls.SYSTEM_DEPS,
        }
        method = mapping.get(choice.strip())
        if method is None:
            raise InvalidChoiceError("Invalid choice. Exiting.")
        return method

    def label(self) -> str:
        return {
            InstallMethod.POETRY: "Poetry (Recommended)",
            InstallMethod.PYENV: "Pyenv + Venv",
            InstallMethod.VENV: "System Python + Venv",
            InstallMethod.SYSTEM_DEPS: "Install system dependencies only",
        }[self]


class CommandResult(BaseModel):
    """Resultado de un proceso externo."""

    model_config = ConfigDict(frozen=True)

    args: list[str] = Field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GpuProbes(BaseModel):
    """Salida cruda de las herramientas de detección de GPU.

    Solo datos: la decisión del backend la toma `select_backend`.
    """

    nvidia_smi_present: bool = False
    nvidia_smi_ok: bool = False
    nvidia_gpu_name: str | None = None
    rocm_smi_present: bool = False
    rocm_smi_ok: bool = False
    lspci_output: str = ""


class GpuDetection(BaseModel):
    """Backend elegido y la señal que lo determinó."""

    model_config = ConfigDict(frozen=True)

    backend: GpuBackend
    source: str = Field(
        ...,
        min_length=1,
        description="Señal que decidió el backend (nvidia-smi, lspci-amd, macos, ...).",
    )
    device: str | None = Field(
        default=None,
        description="Nombre de la GPU cuando la herramienta lo reporta.",
    )
    warning: str | None = Field(
        default=None,
        description="Aviso para el usuario cuando el backend es un fallback.",
    )


class PythonSelection(BaseModel):
    """Intérprete elegido para crear el entorno."""

    command: str = Field(..., min_length=1)
    version: str | None = Field(
        default=None,
        description="Versión major.minor cuando se comprobó.",
    )
    warning: str | None = None


class TorchInstallPlan(BaseModel):
    """Paquetes de PyTorch a instalar y de qué índice."""

    packages: list[str] = Field(
        default_factory=lambda: ["torch", "torchvision", "torchaudio"],
    )
    index_url: str | None = Field(
        default=None,
        description="Índice extra de pip; None usa el índice por defecto.",
    )
    uninstall_first: bool = False
