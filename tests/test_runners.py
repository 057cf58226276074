import sys

import pytest

from adapters.subprocess_runner import DryRunRunner, SubprocessRunner
from core.errors import CommandFailedError, MissingDirectoryError
from tests.conftest import FakeRunner


def test_subprocess_runner_captures_output():
    result = SubprocessRunner().run([sys.executable, "-c", "print('hello')"], capture=True)
    assert result.ok
    assert result.stdout.strip() == "hello"


def test_subprocess_runner_raises_on_failure():
    with pytest.raises(CommandFailedError) as excinfo:
        SubprocessRunner().run([sys.executable, "-c", "import sys; sys.exit(3)"], quiet=True)
    assert excinfo.value.returncode == 3


def test_subprocess_runner_check_false_returns_code():
    result = SubprocessRunner().run([sys.executable, "-c", "import sys; sys.exit(2)"], check=False, quiet=True)
    assert result.returncode == 2
    assert not result.ok


def test_missing_executable():
    runner = SubprocessRunner()
    with pytest.raises(CommandFailedError) as excinfo:
        runner.run(["definitely-not-a-real-binary-xyz"])
    assert excinfo.value.returncode == 127
    assert runner.run(["definitely-not-a-real-binary-xyz"], check=False).returncode == 127


def test_missing_working_directory_is_reported(tmp_path):
    missing = tmp_path / "not-there"
    runner = SubprocessRunner()

    with pytest.raises(MissingDirectoryError) as excinfo:
        runner.run([sys.executable, "--version"], cwd=missing, check=False)
    assert str(missing) in str(excinfo.value)

    with pytest.raises(MissingDirectoryError):
        runner.shell("true", cwd=missing)


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_non_executable_file_reports_126(tmp_path):
    script = tmp_path / "install.sh"
    script.write_text("#!/bin/sh\necho hi\n", encoding="utf-8")
    script.chmod(0o644)
    runner = SubprocessRunner()

    assert runner.run([str(script)], check=False).returncode == 126
    with pytest.raises(CommandFailedError) as excinfo:
        runner.run([str(script)])
    assert excinfo.value.returncode == 126


def test_subprocess_runner_env_is_merged():
    result = SubprocessRunner().run(
        [sys.executable, "-c", "import os; print(os.environ['COMFY_TEST_VAR'])"],
        capture=True,
        env={"COMFY_TEST_VAR": "42"},
    )
    assert result.stdout.strip() == "42"


def test_dry_run_records_without_executing(tmp_path):
    echoed: list[str] = []
    probe = FakeRunner()
    runner = DryRunRunner(echo=echoed.append, probe=probe)

    runner.run(["git", "clone", "url", "ComfyUI"], cwd=tmp_path)
    runner.shell("curl -sSL https://install.python-poetry.org | python3 -")

    assert runner.commands == [
        f"(cd {tmp_path} && git clone url ComfyUI)",
        "curl -sSL https://install.python-poetry.org | python3 -",
    ]
    assert echoed == runner.commands
    assert probe.calls == []


def test_dry_run_still_runs_read_only_probes():
    probe = FakeRunner()
    probe.respond("lspci", stdout="00:02.0 VGA compatible controller: Intel Corporation")
    runner = DryRunRunner(echo=lambda line: None, probe=probe)

    result = runner.run(["lspci"], capture=True)

    assert "Intel" in result.stdout
    assert runner.commands == []


def test_dry_run_which_asks_the_real_runner():
    probe = FakeRunner(binaries=["poetry"])
    runner = DryRunRunner(echo=lambda line: None, probe=probe)

    assert runner.which("poetry") == "/usr/bin/poetry"
    assert runner.which("pyenv") is None
