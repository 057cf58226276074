"""Errores del instalador.

Los servicios del Core lanzan estas excepciones; solo la CLI las captura,
imprime el mensaje y termina con código 1.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base de todos los fallos que abortan la instalación."""


class UnsupportedOSError(InstallerError):
    def __init__(self, ostype: str) -> None:
        super().__init__(f"Unsupported operating system: {ostype}")
        self.ostype = ostype


class UnsupportedDistroError(InstallerError):
    def __init__(self) -> None:
        super().__init__(
            "Unsupported Linux distribution. Please install git, python3, and build tools manually."
        )


class PythonNotFoundError(InstallerError):
    def __init__(self) -> None:
        super().__init__("No compatible Python version found. Please install Python 3.8+ (3.10+ recommended)")


class PythonTooOldError(InstallerError):
    def __init__(self, version: str) -> None:
        super().__init__(f"Python {version} is too old. Need Python 3.8+ (3.10+ recommended)")
        self.version = version


class InvalidChoiceError(InstallerError):
    pass


class CommandFailedError(InstallerError):
    """Un comando externo terminó con código distinto de cero."""

    def __init__(self, args: list[str], returncode: int, stderr: str = "") -> None:
        command = " ".join(args)
        message = f"Command failed with exit code {returncode}: {command}"
        tail = stderr.strip().splitlines()[-5:]
        if tail:
            message += "\n" + "\n".join(tail)
        super().__init__(message)
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr


class InvalidSettingsError(InstallerError):
    """`COMFY_INSTALLER_*` (entorno o .env) no pasa la validación."""

    def __init__(self, details: str) -> None:
        super().__init__(f"Invalid installer configuration: {details}")


class MissingDirectoryError(InstallerError):
    def __init__(self, path: object) -> None:
        super().__init__(f"Working directory does not exist: {path}")
        self.path = path
