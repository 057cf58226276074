"""Python interpreter selection.

Versioned interpreters are preferred in a fixed order and accepted as soon as
they are on `PATH`. The generic `python3` / `python` fallbacks may be anything,
so only they are asked for their version.
"""

from __future__ import annotations

from core.domain.models import PythonSelection
from core.errors import PythonNotFoundError, PythonTooOldError
from core.services.context import InstallContext

PREFERRED_INTERPRETERS: tuple[str, ...] = (
    "python3.10",
    "python3.11",
    "python3.12",
    "python3.13",
)
GENERIC_INTERPRETERS: tuple[str, ...] = ("python3", "python")

_VERSION_PROBE = "import sys; print('%d.%d' % sys.version_info[:2])"

_WARNINGS: dict[str, str] = {
    "python3.13": "Using Python 3.13 - some dependencies might have compatibility issues",
}


def parse_version(text: str) -> tuple[int, int] | None:
    """Parse `3.10` (or `Python 3.10.12`) into `(3, 10)`."""

    token = text.strip().split()[-1] if text.strip() else ""
    parts = token.split(".")
    if len(parts) < 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def _check_generic(ctx: InstallContext, command: str) -> PythonSelection:
    result = ctx.run([command, "-c", _VERSION_PROBE], capture=True)
    version = parse_version(result.stdout)
    label = result.stdout.strip() or "unknown"
    if version is None or version < tuple(ctx.settings.min_python):
        raise PythonTooOldError(label)
    return PythonSelection(command=command, version=label)


def select_python(ctx: InstallContext) -> PythonSelection:
    """Return the highest-priority interpreter available on `PATH`."""

    for command in PREFERRED_INTERPRETERS:
        if ctx.has(command):
            return PythonSelection(
                command=command,
                version=command.removeprefix("python"),
                warning=_WARNINGS.get(command),
            )

    for command in GENERIC_INTERPRETERS:
        if ctx.has(command):
            return _check_generic(ctx, command)

    raise PythonNotFoundError()


def setup_python_env(ctx: InstallContext) -> PythonSelection:
    """Select the interpreter, report it and store it on the context."""

    ctx.header("Setting up Python Environment")
    selection = select_python(ctx)
    if selection.warning:
        ctx.warning(selection.warning)
    elif selection.command in GENERIC_INTERPRETERS:
        ctx.success(f"Using Python {selection.version}")
    ctx.success(f"Using Python command: {selection.command}")
    ctx.run([selection.command, "--version"])
    ctx.python = selection
    return selection
