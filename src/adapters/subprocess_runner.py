"""Implementaciones de `CommandRunner`.

- `SubprocessRunner`: ejecuta de verdad con `subprocess.run`.
- `DryRunRunner`: imprime cada comando y no ejecuta nada (`--dry-run`).
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Mapping, Sequence

from core.domain.models import CommandResult
from core.errors import CommandFailedError, MissingDirectoryError
from core.interfaces.runner import CommandRunner

logger = logging.getLogger(__name__)


def _merged_env(env: Mapping[str, str] | None) -> dict[str, str] | None:
    if not env:
        return None
    merged = dict(os.environ)
    merged.update(env)
    return merged


def _require_dir(cwd: Path | None) -> None:
    if cwd is not None and not Path(cwd).is_dir():
        raise MissingDirectoryError(cwd)


class SubprocessRunner:
    """Ejecuta comandos en primer plano, heredando la terminal."""

    def which(self, name: str, *, env: Mapping[str, str] | None = None) -> str | None:
        path = env.get("PATH") if env else None
        return shutil.which(name, path=path)

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
        argv = [str(a) for a in args]
        logger.debug("run: %s (cwd=%s)", " ".join(argv), cwd or ".")
        _require_dir(cwd)

        stdout = stderr = None
        if capture:
            stdout = stderr = subprocess.PIPE
        elif quiet:
            stdout = stderr = subprocess.DEVNULL

        try:
            completed = subprocess.run(
                argv,
                cwd=cwd,
                env=_merged_env(env),
                stdout=stdout,
                stderr=stderr,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            logger.debug("executable not found: %s", argv[0])
            if check:
                raise CommandFailedError(argv, 127, str(exc)) from exc
            return CommandResult(args=argv, returncode=127, stderr=str(exc))
        except PermissionError as exc:
            logger.debug("not executable: %s", argv[0])
            if check:
                raise CommandFailedError(argv, 126, str(exc)) from exc
            return CommandResult(args=argv, returncode=126, stderr=str(exc))

        result = CommandResult(
            args=argv,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        logger.debug("exit %d: %s", result.returncode, argv[0])
        if check and not result.ok:
            raise CommandFailedError(argv, result.returncode, result.stderr)
        return result

    def shell(
        self,
        script: str,
        *,
        cwd: Path | None = None,
        check: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        logger.debug("shell: %s (cwd=%s)", script, cwd or ".")
        _require_dir(cwd)
        completed = subprocess.run(
            script,
            shell=True,
            cwd=cwd,
            env=_merged_env(env),
            text=True,
            check=False,
        )
        result = CommandResult(args=[script], returncode=completed.returncode)
        if check and not result.ok:
            raise CommandFailedError([script], result.returncode)
        return result


class DryRunRunner:
    """Muestra los comandos que se ejecutarían.

    `which` y los sondeos de solo lectura (`capture=True`: nvidia-smi, lspci,
    versión del intérprete, `pyenv versions`) pasan al runner real para que
    las decisiones sean las mismas que en una ejecución normal.
    """

    def __init__(self, echo: Callable[[str], None], probe: CommandRunner | None = None) -> None:
        self._echo = echo
        self._probe = probe or SubprocessRunner()
        self.commands: list[str] = []

    def which(self, name: str, *, env: Mapping[str, str] | None = None) -> str | None:
        return self._probe.which(name, env=env)

    def _record(self, line: str, cwd: Path | None) -> None:
        if cwd is not None:
            line = f"(cd {cwd} && {line})"
        self.commands.append(line)
        self._echo(line)

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
        argv = [str(a) for a in args]
        if capture:
            return self._probe.run(argv, cwd=cwd, check=False, capture=True, env=env)
        self._record(" ".join(argv), cwd)
        return CommandResult(args=argv)

    def shell(
        self,
        script: str,
        *,
        cwd: Path | None = None,
        check: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        self._record(script, cwd)
        return CommandResult(args=[script])
