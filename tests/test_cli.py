"""Tests for the create-shenstack command line (shenstack.cli)."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from shenstack import __version__
from shenstack.cli import app

pytestmark = pytest.mark.unit


@pytest.fixture
def cli() -> CliRunner:
    return CliRunner()


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SHENSTACK_TEMPLATE_URL", raising=False)
    monkeypatch.delenv("SHENSTACK_PACKAGE_MANAGER", raising=False)
    return tmp_path


@pytest.fixture
def patched_runner(fake_runner, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr("shenstack.pipeline.CommandRunner", lambda: fake_runner)
    return fake_runner


def test_version(cli: CliRunner):
    result = cli.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_create_with_flags(cli: CliRunner, project_dir: Path, patched_runner):
    result = cli.invoke(app, ["--name", "demo", "--auth", "diy", "--no-redis", "--no-sentry"])

    assert result.exit_code == 0, result.output
    assert (project_dir / "demo" / ".env.example").is_file()
    assert (project_dir / "demo" / "prisma" / "schema.prisma").is_file()
    assert patched_runner.commands[-1] == "bun install"


def test_create_interactive(cli: CliRunner, project_dir: Path, patched_runner):
    # name, auth provider, redis, sentry
    result = cli.invoke(app, [], input="demo\nclerk\ny\nn\n")

    assert result.exit_code == 0, result.output
    env = (project_dir / "demo" / ".env.example").read_text()
    assert "CLERK_SECRET_KEY=" in env
    assert "REDIS_URL=" in env
    assert "SENTRY_DSN" not in env


def test_existing_directory_reprompts(cli: CliRunner, project_dir: Path, patched_runner):
    (project_dir / "demo").mkdir()
    result = cli.invoke(app, ["--auth", "diy", "--no-redis", "--no-sentry"], input="demo\ndemo2\n")

    assert result.exit_code == 0, result.output
    assert "already exists" in result.output
    assert (project_dir / "demo2" / ".env.example").is_file()
    assert list((project_dir / "demo").iterdir()) == []


def test_invalid_preset_name_exits_non_zero(cli: CliRunner, project_dir: Path, patched_runner):
    result = cli.invoke(app, ["--name", "../evil", "--auth", "diy", "--no-redis", "--no-sentry"])

    assert result.exit_code == 1
    assert patched_runner.calls == []


def test_fetch_failure_exits_non_zero(cli: CliRunner, project_dir: Path, make_runner, monkeypatch):
    runner = make_runner(fail_on="clone")
    monkeypatch.setattr("shenstack.pipeline.CommandRunner", lambda: runner)

    result = cli.invoke(app, ["--name", "demo", "--auth", "diy", "--no-redis", "--no-sentry"])

    assert result.exit_code == 1
    assert "Could not clone" in result.output
    assert runner.install_calls == []


def test_cancel_exits_130(cli: CliRunner, project_dir: Path, patched_runner):
    # Input ends before the auth question
    result = cli.invoke(app, [], input="demo\n")

    assert result.exit_code == 130
    assert patched_runner.calls == []
    assert list(project_dir.iterdir()) == []


def test_dry_run_touches_nothing(cli: CliRunner, project_dir: Path, patched_runner):
    result = cli.invoke(
        app, ["--name", "demo", "--auth", "clerk", "--redis", "--no-sentry", "--dry-run"]
    )

    assert result.exit_code == 0, result.output
    assert "bun add @clerk/nextjs" in result.output
    assert "src/middleware.ts" in result.output
    assert patched_runner.calls == []
    assert list(project_dir.iterdir()) == []


def test_dry_run_split_preview_installs_root_first(cli: CliRunner, project_dir: Path, patched_runner):
    result = cli.invoke(
        app,
        ["--name", "demo", "--auth", "diy", "--redis", "--no-sentry", "--dry-run", "--preview-layout", "split"],
    )

    assert result.exit_code == 0, result.output
    assert "(project root)" in result.output
    assert result.output.index("(project root)") < result.output.index("(api)")
    assert "api/lib/redis.ts" in result.output
    assert list(project_dir.iterdir()) == []


def test_config_file(cli: CliRunner, project_dir: Path, patched_runner):
    config = project_dir / "custom.yaml"
    config.write_text("packageManager: pnpm\ntemplateUrl: file:///srv/template.git\n")

    result = cli.invoke(
        app, ["--config", str(config), "--name", "demo", "--auth", "diy", "--no-redis", "--no-sentry"]
    )

    assert result.exit_code == 0, result.output
    assert patched_runner.commands == [
        "git clone file:///srv/template.git .",
        "git init",
        "pnpm install",
    ]


def test_bad_config_file_exits_non_zero(cli: CliRunner, project_dir: Path, patched_runner):
    (project_dir / "shenstack.yaml").write_text("defaults:\n  authProvider: auth0\n")

    result = cli.invoke(app, ["--name", "demo"])

    assert result.exit_code == 1
    assert patched_runner.calls == []
