import pytest

from core.errors import PythonNotFoundError, PythonTooOldError
from core.services.python_env import parse_version, select_python, setup_python_env
from tests.conftest import FakeRunner

PROBE = ("-c", "import sys; print('%d.%d' % sys.version_info[:2])")


@pytest.mark.parametrize(
    "present, expected",
    [
        (["python3.10", "python3.11", "python3.12", "python3"], "python3.10"),
        (["python3.12", "python3.11"], "python3.11"),
        (["python3.13", "python3.12"], "python3.12"),
        (["python3", "python3.13"], "python3.13"),
    ],
)
def test_highest_priority_interpreter_wins(make_ctx, present, expected):
    runner = FakeRunner(binaries=present)
    assert select_python(make_ctx(runner)).command == expected
    assert runner.calls == []


def test_python313_carries_warning(make_ctx):
    selection = select_python(make_ctx(FakeRunner(binaries=["python3.13"])))
    assert selection.warning and "3.13" in selection.warning


def test_generic_python3_is_version_checked(make_ctx):
    runner = FakeRunner(binaries=["python3", "python"])
    runner.respond("python3", *PROBE, stdout="3.9\n")

    selection = select_python(make_ctx(runner))

    assert selection.command == "python3"
    assert selection.version == "3.9"
    assert runner.calls == [["python3", *PROBE]]


def test_generic_python_fallback(make_ctx):
    runner = FakeRunner(binaries=["python"])
    runner.respond("python", *PROBE, stdout="3.8\n")
    assert select_python(make_ctx(runner)).command == "python"


def test_old_generic_python_is_rejected(make_ctx):
    runner = FakeRunner(binaries=["python3"])
    runner.respond("python3", *PROBE, stdout="3.7\n")
    with pytest.raises(PythonTooOldError, match="3.7 is too old"):
        select_python(make_ctx(runner))


def test_python2_is_rejected(make_ctx):
    runner = FakeRunner(binaries=["python"])
    runner.respond("python", *PROBE, stdout="2.7\n")
    with pytest.raises(PythonTooOldError):
        select_python(make_ctx(runner))


def test_no_interpreter(make_ctx):
    with pytest.raises(PythonNotFoundError):
        select_python(make_ctx(FakeRunner()))


@pytest.mark.parametrize(
    "text, expected",
    [("3.10", (3, 10)), ("Python 3.11.4\n", (3, 11)), ("2.7", (2, 7)), ("", None), ("garbage", None)],
)
def test_parse_version(text, expected):
    assert parse_version(text) == expected


def test_setup_python_env_stores_selection(make_ctx, recorder):
    runner = FakeRunner(binaries=["python3.11"])
    ctx = make_ctx(runner)

    selection = setup_python_env(ctx)

    assert ctx.python == selection
    assert runner.calls == [["python3.11", "--version"]]
    assert "Using Python command: python3.11" in recorder.of("success")
    assert recorder.of("header") == ["Setting up Python Environment"]
