"""Configuración del Core.

- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Los servicios reciben `InstallerSettings` a través del contexto de
  instalación; nadie lee `os.environ` directamente salvo este módulo.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import InvalidSettingsError


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "comfy-installer"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "comfy-installer"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "comfy-installer"
    return Path.home() / ".config" / "comfy-installer"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# comfy-installer user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class InstallerSettings(BaseSettings):
    """Configuración central del instalador.

    Todas las URLs y versiones fijas del flujo de instalación viven aquí para
    poder sobreescribirlas con `COMFY_INSTALLER_*`.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMFY_INSTALLER_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero, luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    repo_url: str = Field(
        default="https://github.com/comfyanonymous/ComfyUI.git",
        min_length=1,
        description="Repositorio git de ComfyUI.",
    )
    clone_dir: str = Field(
        default="ComfyUI",
        min_length=1,
        description="Directorio destino del clon (relativo al directorio de trabajo).",
    )
    pyenv_python_version: str = Field(
        default="3.10.12",
        pattern=r"^\d+\.\d+\.\d+$",
        description="Versión que instala pyenv en el método 2.",
    )
    min_python: tuple[int, int] = Field(
        default=(3, 8),
        description="Versión mínima aceptada para los intérpretes genéricos python3/python.",
    )

    torch_index_base: str = Field(
        default="https://download.pytorch.org/whl",
        min_length=8,
        description="Base de los índices de wheels de PyTorch.",
    )
    cuda_tag: str = Field(default="cu121", min_length=1)
    rocm_tag: str = Field(default="rocm6.0", min_length=1)

    poetry_installer_url: str = Field(default="https://install.python-poetry.org", min_length=8)
    pyenv_installer_url: str = Field(default="https://pyenv.run", min_length=8)
    homebrew_installer_url: str = Field(
        default="https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh",
        min_length=8,
    )

    server_port: int = Field(
        default=8188,
        ge=1,
        le=65535,
        description="Puerto en el que ComfyUI escucha por defecto (solo para las instrucciones finales).",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging cuando no se pasa --verbose.",
    )


def load_settings(**overrides: Any) -> InstallerSettings:
    """Construye `InstallerSettings` con el .env de usuario resuelto ahora.

    Un valor inválido se reporta como `InvalidSettingsError` (la CLI lo muestra
    como cualquier otro fallo y termina con código 1).
    """

    overrides.setdefault("_env_file", (".env", str(get_user_env_file())))
    try:
        return InstallerSettings(**overrides)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'settings'}: {error['msg']}"
            for error in exc.errors()
        )
        raise InvalidSettingsError(details) from exc
