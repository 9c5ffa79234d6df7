"""
Shenstack Runner - External commands for materializing and installing

Every step returns a StepResult instead of raising, so the pipeline can
decide what happens next from the outcome alone. Commands always run with
an explicit cwd; the process working directory is never changed.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from shenstack.errors import (
    DependencyInstallError,
    DirectoryCreateError,
    ShenstackError,
    TemplateFetchError,
)
from shenstack.options import AuthProvider, ProjectLayout, ScaffoldOptions, ShenstackConfig

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# COMMAND EXECUTION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass
class CommandOutcome:
    """Result of one external command."""

    command: list[str]
    cwd: Path
    exit_code: int | None = None  # None when the process never started
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.exit_code == 0

    @property
    def reason(self) -> str:
        return self.error or f"exit code {self.exit_code}"


class CommandRunner:
    """Runs commands with inherited stdout/stderr and waits for them."""

    def run(self, command: list[str], cwd: Path) -> CommandOutcome:
        executable = shutil.which(command[0])
        if executable is None:
            return CommandOutcome(command, cwd, error=f"executable {command[0]!r} not found on PATH")

        logger.debug("running %s in %s", " ".join(command), cwd)
        try:
            process = subprocess.run([executable, *command[1:]], cwd=cwd, check=False)
        except OSError as e:
            return CommandOutcome(command, cwd, error=str(e))

        logger.debug("%s exited with %d", command[0], process.returncode)
        return CommandOutcome(command, cwd, exit_code=process.returncode)


@dataclass
class StepResult:
    """Outcome of a pipeline stage that talks to the outside world."""

    commands: list[CommandOutcome] = field(default_factory=list)
    error: ShenstackError | None = None

    @property
    def success(self) -> bool:
        return self.error is None


# ═══════════════════════════════════════════════════════════════════════════
# PROJECT MATERIALIZER
# ═══════════════════════════════════════════════════════════════════════════


def materialize_project(
    root: Path,
    config: ShenstackConfig,
    runner: CommandRunner,
) -> StepResult:
    """
    Create ``root`` and fill it with a fresh copy of the template.

    Clones the full template repository, drops its history and runs
    ``git init`` so the new project starts with an empty one. A failed
    clone leaves the partial directory in place.

    Args:
        root: Project directory to create (must not exist yet)
        config: Tool configuration (template URL, git executable)
        runner: Command runner

    Returns:
        StepResult carrying DirectoryCreateError or TemplateFetchError on failure
    """
    result = StepResult()

    try:
        root.mkdir(parents=False, exist_ok=False)
    except OSError as e:
        result.error = DirectoryCreateError(str(root), e.strerror or str(e))
        return result

    git = config.git_executable
    clone = runner.run([git, "clone", config.template_url, "."], root)
    result.commands.append(clone)
    if not clone.ok:
        result.error = TemplateFetchError(
            f"Could not clone {config.template_url}: {clone.reason}",
            command=clone.command,
            exit_code=clone.exit_code,
        )
        return result

    git_dir = root / ".git"
    if git_dir.exists():
        logger.debug("removing template history at %s", git_dir)
        try:
            shutil.rmtree(git_dir)
        except OSError as e:
            result.error = TemplateFetchError(f"Could not remove template history: {e}")
            return result

    init = runner.run([git, "init"], root)
    result.commands.append(init)
    if not init.ok:
        result.error = TemplateFetchError(
            f"Could not initialize a new repository: {init.reason}",
            command=init.command,
            exit_code=init.exit_code,
        )

    return result


# ═══════════════════════════════════════════════════════════════════════════
# DEPENDENCY INSTALLER
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class InstallStep:
    """One package manager invocation."""

    target: str  # Package directory relative to the project root
    packages: tuple[str, ...] = ()  # Empty means install the existing manifest
    feature: str = "base"

    def command(self, package_manager: str) -> list[str]:
        if not self.packages:
            return [package_manager, "install"]
        return [package_manager, "add", *self.packages]

    @property
    def target_label(self) -> str:
        return "project root" if self.target == "." else self.target


AUTH_PACKAGES: dict[AuthProvider, tuple[str, ...]] = {
    AuthProvider.DIY: (),
    AuthProvider.BETTERAUTH: ("better-auth",),
    AuthProvider.CLERK: ("@clerk/nextjs",),
}


def plan_installs(options: ScaffoldOptions, layout: ProjectLayout) -> list[InstallStep]:
    """Derive the package manager invocations for the selected features."""
    # The root manifest is always installed, subprojects after it
    steps = [InstallStep(target=target) for target in dict.fromkeys([".", *layout.subprojects])]

    auth_packages = AUTH_PACKAGES[options.auth_provider]
    if auth_packages:
        steps.append(InstallStep(layout.app_root, auth_packages, options.auth_provider.value))

    if options.use_redis:
        steps.append(InstallStep(layout.api_root, ("ioredis",), "redis"))

    if options.use_sentry:
        if layout is ProjectLayout.SPLIT:
            steps.append(InstallStep(layout.api_root, ("@sentry/bun",), "sentry"))
            steps.append(InstallStep(layout.app_root, ("@sentry/nextjs",), "sentry"))
        elif layout is ProjectLayout.API_DIR:
            steps.append(InstallStep(".", ("@sentry/node", "@sentry/bun"), "sentry"))
        else:
            steps.append(InstallStep(layout.app_root, ("@sentry/nextjs",), "sentry"))

    return steps


def install_dependencies(
    root: Path,
    steps: list[InstallStep],
    config: ShenstackConfig,
    runner: CommandRunner,
) -> StepResult:
    """Run the install steps one at a time, stopping at the first failure."""
    result = StepResult()

    for step in steps:
        cwd = root / step.target if step.target != "." else root
        outcome = runner.run(step.command(config.package_manager), cwd)
        result.commands.append(outcome)
        if not outcome.ok:
            result.error = DependencyInstallError(
                step.target_label,
                command=outcome.command,
                exit_code=outcome.exit_code,
                reason=outcome.error,
            )
            break

    return result
