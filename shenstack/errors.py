"""
Shenstack Errors - Exception taxonomy for the scaffolding pipeline

ValidationError is recovered locally by re-prompting. Everything else
aborts the run with a non-zero exit code.
"""

from __future__ import annotations

__all__ = [
    "CommandError",
    "ConfigError",
    "DependencyInstallError",
    "DirectoryCreateError",
    "FileWriteError",
    "ShenstackError",
    "TemplateFetchError",
    "UserCancelled",
    "ValidationError",
]


class ShenstackError(Exception):
    """Base exception for create-shenstack errors."""


class ValidationError(ShenstackError):
    """Raised when user input (usually the project name) is rejected."""


class UserCancelled(ShenstackError):
    """Raised when the user interrupts the interactive prompts."""

    def __init__(self) -> None:
        super().__init__("Setup cancelled, nothing was created.")


class ConfigError(ShenstackError):
    """Raised when a shenstack.yaml file cannot be read or parsed."""


class DirectoryCreateError(ShenstackError):
    """Raised when the project directory cannot be created."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not create project directory {path!r}: {reason}")
        self.path = path


class CommandError(ShenstackError):
    """An external command failed or could not be started."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code


class TemplateFetchError(CommandError):
    """Raised when cloning or re-initializing the template repository fails."""


class DependencyInstallError(CommandError):
    """Raised when a package manager invocation fails."""

    def __init__(
        self,
        target: str,
        command: list[str] | None = None,
        exit_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        detail = reason or f"exit code {exit_code}"
        super().__init__(
            f"Dependency install failed in {target!r}: {' '.join(command or [])} ({detail})",
            command=command,
            exit_code=exit_code,
        )
        self.target = target


class FileWriteError(ShenstackError):
    """Raised when a generated file cannot be written."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not write {path!r}: {reason}")
        self.path = path
