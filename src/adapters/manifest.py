"""Manifiesto Poetry para el clon de ComfyUI.

El contenido se escribe tal cual (sin plantillas): ComfyUI no trae
`pyproject.toml` propio y Poetry necesita uno para crear el entorno.
"""

from __future__ import annotations

from pathlib import Path

POETRY_MANIFEST = """\
[tool.poetry]
name = "comfyui"
version = "0.1.0"
description = "ComfyUI - The most powerful and modular visual AI engine"
authors = ["ComfyUI Community"]
package-mode = false

[tool.poetry.dependencies]
python = "^3.8"
torch = {version = ">=2.0.0", source = "pytorch-cpu"}
torchvision = {version = ">=0.15.0", source = "pytorch-cpu"}
torchaudio = {version = ">=2.0.0", source = "pytorch-cpu"}

[tool.poetry.group.dev.dependencies]

[[tool.poetry.source]]
name = "pytorch-cpu"
url = "https://download.pytorch.org/whl/cpu"
priority = "explicit"

[[tool.poetry.source]]
name = "pytorch-cuda"
url = "https://download.pytorch.org/whl/cu121"
priority = "explicit"

[build-system]
requires = ["poetry-core"]
build-backend = "poetry.core.masonry.api"
"""


def write_poetry_manifest(project_dir: Path) -> Path:
    """Escribe `pyproject.toml` en `project_dir` (sobrescribe si existe)."""

    output_path = project_dir / "pyproject.toml"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(POETRY_MANIFEST, encoding="utf-8")
    return output_path
