"""Shared pytest fixtures for the create-shenstack test suite.

Provides reusable fixtures for:
- A fake command runner standing in for git and bun
- Quiet rich consoles
- Sample scaffold options
"""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
from rich.console import Console

from shenstack.options import AuthProvider, ProjectLayout, ScaffoldOptions, ShenstackConfig
from shenstack.runner import CommandOutcome, CommandRunner


# ---------------------------------------------------------------------------
# Fake external commands
# ---------------------------------------------------------------------------


class FakeRunner(CommandRunner):
    """Records commands instead of running them.

    ``git clone`` populates the target directory with a tiny template of
    the requested layout, including a ``.git`` directory. Any command whose
    joined text contains ``fail_on`` exits with status 1.
    """

    def __init__(self, layout: ProjectLayout = ProjectLayout.SINGLE, fail_on: str | None = None) -> None:
        self.layout = layout
        self.fail_on = fail_on
        self.calls: list[tuple[list[str], Path]] = []

    def run(self, command: list[str], cwd: Path) -> CommandOutcome:
        self.calls.append((list(command), Path(cwd)))
        if self.fail_on and self.fail_on in " ".join(command):
            return CommandOutcome(command, cwd, exit_code=1)
        if command[1:2] == ["clone"]:
            self._populate_template(Path(cwd))
        return CommandOutcome(command, cwd, exit_code=0)

    def _populate_template(self, root: Path) -> None:
        (root / ".git").mkdir()
        (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        (root / "package.json").write_text(json.dumps({"name": "create-shenstack-app"}))
        if self.layout is ProjectLayout.SPLIT:
            for sub in ("api", "app"):
                (root / sub).mkdir()
                (root / sub / "package.json").write_text(json.dumps({"name": sub}))
        elif self.layout is ProjectLayout.API_DIR:
            (root / "api").mkdir()
            (root / "api" / "index.ts").write_text("export default {}\n")

    @property
    def commands(self) -> list[str]:
        return [" ".join(command) for command, _ in self.calls]

    @property
    def install_calls(self) -> list[tuple[list[str], Path]]:
        return [(command, cwd) for command, cwd in self.calls if command[0] == "bun"]


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def split_runner() -> FakeRunner:
    return FakeRunner(layout=ProjectLayout.SPLIT)


@pytest.fixture
def api_dir_runner() -> FakeRunner:
    return FakeRunner(layout=ProjectLayout.API_DIR)


# ---------------------------------------------------------------------------
# Consoles & config
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_console() -> Console:
    """Console writing into a buffer, readable via ``console.file.getvalue()``."""
    return Console(file=io.StringIO(), width=120)


@pytest.fixture
def config() -> ShenstackConfig:
    return ShenstackConfig()


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@pytest.fixture
def demo_options() -> ScaffoldOptions:
    return ScaffoldOptions(project_name="demo")


@pytest.fixture
def full_options() -> ScaffoldOptions:
    return ScaffoldOptions(
        project_name="full-app",
        auth_provider=AuthProvider.CLERK,
        use_redis=True,
        use_sentry=True,
    )


@pytest.fixture
def make_runner():
    """Factory for FakeRunner with a custom layout or failing command."""
    return FakeRunner
