"""Contrato de ejecución de procesos externos.

Todo lo que el instalador hace fuera de Python (gestores de paquetes, git,
pip, poetry, pyenv, curl) pasa por un `CommandRunner`. Los tests lo sustituyen
por un fake que registra las llamadas.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol, Sequence, runtime_checkable

from core.domain.models import CommandResult


@runtime_checkable
class CommandRunner(Protocol):
    """Contrato mínimo para ejecutar comandos.

    Reglas:
    - `check=True` lanza `CommandFailedError` ante un código distinto de cero.
    - `capture=True` devuelve stdout/stderr en el resultado; si no, la salida
      va a la terminal.
    - `quiet=True` descarta la salida sin capturarla.
    - `env` son variables que se añaden al entorno heredado.
    """

    def which(self, name: str, *, env: Mapping[str, str] | None = None) -> str | None:
        """Ruta del ejecutable en PATH, o None."""

        ...

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        capture: bool = False,
        quiet: bool = False,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Ejecuta `args` sin shell intermedio."""

        ...

    def shell(
        self,
        script: str,
        *,
        cwd: Path | None = None,
        check: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Ejecuta una línea de shell (tuberías tipo `curl ... | bash`)."""

        ...
