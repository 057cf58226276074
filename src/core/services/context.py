"""Installation context shared by every step.

Host OS, selected interpreter, install method and the `PATH` additions made by
earlier steps (Poetry, pyenv) live in an `InstallContext` passed to each step.
User-facing output goes through optional hooks; the Core never prints.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from core.config import InstallerSettings
from core.domain.models import CommandResult, HostOS, InstallMethod, PythonSelection
from core.interfaces.runner import CommandRunner


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (headers, status lines)."""

    header: Callable[[str], None] | None = None
    success: Callable[[str], None] | None = None
    warning: Callable[[str], None] | None = None
    info: Callable[[str], None] | None = None


@dataclass
class InstallContext:
    """Everything a step needs to know about the current run."""

    host_os: HostOS
    runner: CommandRunner
    settings: InstallerSettings = field(default_factory=InstallerSettings)
    workdir: Path = field(default_factory=Path.cwd)
    method: InstallMethod | None = None
    python: PythonSelection | None = None
    path_prefixes: list[Path] = field(default_factory=list)
    hooks: PipelineHooks = field(default_factory=PipelineHooks)
    dry_run: bool = False

    @property
    def clone_path(self) -> Path:
        return self.workdir / self.settings.clone_dir

    def add_to_path(self, *paths: Path) -> None:
        """Prepend directories to `PATH` for every later command."""

        for path in reversed(paths):
            if path not in self.path_prefixes:
                self.path_prefixes.insert(0, path)

    def env(self) -> dict[str, str] | None:
        if not self.path_prefixes:
            return None
        parts = [str(p) for p in self.path_prefixes]
        inherited = os.environ.get("PATH", "")
        if inherited:
            parts.append(inherited)
        return {"PATH": os.pathsep.join(parts)}

    def which(self, name: str) -> str | None:
        return self.runner.which(name, env=self.env())

    def has(self, name: str) -> bool:
        return self.which(name) is not None

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        capture: bool = False,
        quiet: bool = False,
    ) -> CommandResult:
        return self.runner.run(args, cwd=cwd, check=check, capture=capture, quiet=quiet, env=self.env())

    def shell(self, script: str, *, cwd: Path | None = None, check: bool = True) -> CommandResult:
        return self.runner.shell(script, cwd=cwd, check=check, env=self.env())

    def header(self, message: str) -> None:
        if self.hooks.header:
            self.hooks.header(message)

    def success(self, message: str) -> None:
        if self.hooks.success:
            self.hooks.success(message)

    def warning(self, message: str) -> None:
        if self.hooks.warning:
            self.hooks.warning(message)

    def info(self, message: str) -> None:
        if self.hooks.info:
            self.hooks.info(message)
