from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

import pytest

from core.config import InstallerSettings
from core.domain.models import CommandResult, HostOS
from core.errors import CommandFailedError
from core.services.context import InstallContext, PipelineHooks


class FakeRunner:
    """CommandRunner that records calls and answers from a table."""

    def __init__(self, binaries: Sequence[str] = (), responses: Mapping[tuple[str, ...], CommandResult] | None = None):
        self.binaries = set(binaries)
        self.responses = dict(responses or {})
        self.calls: list[list[str]] = []
        self.cwds: list[Path | None] = []
        self.quiet: list[bool] = []
        self.shell_calls: list[str] = []
        self.envs: list[Mapping[str, str] | None] = []

    def respond(self, *args: str, stdout: str = "", returncode: int = 0) -> None:
        self.responses[tuple(args)] = CommandResult(args=list(args), stdout=stdout, returncode=returncode)

    def which(self, name: str, *, env: Mapping[str, str] | None = None) -> str | None:
        return f"/usr/bin/{name}" if name in self.binaries else None

    def run(self, args, *, cwd=None, check=True, capture=False, quiet=False, env=None) -> CommandResult:
        argv = [str(a) for a in args]
        self.calls.append(argv)
        self.cwds.append(cwd)
        self.quiet.append(quiet)
        self.envs.append(env)
        result = self.responses.get(tuple(argv), CommandResult(args=argv))
        if check and not result.ok:
            raise CommandFailedError(argv, result.returncode, result.stderr)
        return result

    def shell(self, script, *, cwd=None, check=True, env=None) -> CommandResult:
        self.shell_calls.append(script)
        return CommandResult(args=[script])


class Recorder:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def hooks(self) -> PipelineHooks:
        return PipelineHooks(
            header=lambda m: self.messages.append(("header", m)),
            success=lambda m: self.messages.append(("success", m)),
            warning=lambda m: self.messages.append(("warning", m)),
            info=lambda m: self.messages.append(("info", m)),
        )

    def of(self, kind: str) -> list[str]:
        return [m for k, m in self.messages if k == kind]


@pytest.fixture
def settings() -> InstallerSettings:
    return InstallerSettings(_env_file=None)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_ctx(tmp_path, settings, recorder):
    def _make(runner: FakeRunner, host_os: HostOS = HostOS.LINUX, **kwargs) -> InstallContext:
        return InstallContext(
            host_os=host_os,
            runner=runner,
            settings=settings,
            workdir=tmp_path,
            hooks=recorder.hooks(),
            **kwargs,
        )

    return _make
