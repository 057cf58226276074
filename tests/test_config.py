import pytest

from core.config import InstallerSettings, load_settings, write_user_env_vars
from core.errors import InvalidSettingsError


def test_defaults():
    settings = InstallerSettings(_env_file=None)
    assert settings.repo_url == "https://github.com/comfyanonymous/ComfyUI.git"
    assert settings.clone_dir == "ComfyUI"
    assert settings.pyenv_python_version == "3.10.12"
    assert settings.min_python == (3, 8)
    assert settings.server_port == 8188


def test_environment_override(monkeypatch):
    monkeypatch.setenv("COMFY_INSTALLER_CLONE_DIR", "comfy-dev")
    monkeypatch.setenv("COMFY_INSTALLER_CUDA_TAG", "cu124")
    settings = InstallerSettings(_env_file=None)
    assert settings.clone_dir == "comfy-dev"
    assert settings.cuda_tag == "cu124"


def test_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("COMFY_INSTALLER_REPO_URL=https://example.invalid/ComfyUI.git\n", encoding="utf-8")
    settings = InstallerSettings(_env_file=env_file)
    assert settings.repo_url == "https://example.invalid/ComfyUI.git"


def test_write_user_env_vars_merges(tmp_path):
    env_path = tmp_path / "cfg" / ".env"
    write_user_env_vars({"B_KEY": "1", "A_KEY": "x"}, env_path=env_path)
    write_user_env_vars({"B_KEY": "2"}, env_path=env_path)

    lines = env_path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert lines[1:] == ["A_KEY=x", "B_KEY=2"]


def test_load_settings_reports_invalid_values(monkeypatch):
    monkeypatch.setenv("COMFY_INSTALLER_PYENV_PYTHON_VERSION", "3.11")
    with pytest.raises(InvalidSettingsError) as excinfo:
        load_settings(_env_file=None)
    assert "pyenv_python_version" in str(excinfo.value)


def test_load_settings_reads_user_env_file_at_call_time(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setattr("core.config.sys.platform", "linux")
    monkeypatch.chdir(tmp_path)
    write_user_env_vars({"COMFY_INSTALLER_CLONE_DIR": "from-user-config"})

    assert load_settings().clone_dir == "from-user-config"
