"""
Shenstack Prompts - Interactive option collection

Asks for the project name, auth provider and optional integrations, and
builds a ScaffoldOptions. Answers already given on the command line are
not asked again.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from shenstack.errors import UserCancelled, ValidationError
from shenstack.options import (
    AUTH_LABELS,
    AuthProvider,
    ScaffoldOptions,
    ShenstackConfig,
    validate_project_name,
)


def ask_project_name(cwd: Path, default: str, console: Console) -> str:
    """Ask until the name passes validation."""
    while True:
        name = Prompt.ask("What is your project name?", default=default, console=console)
        try:
            return validate_project_name(name, cwd)
        except ValidationError as e:
            console.print(f"[red]✗[/red] {escape(str(e))}")


def ask_auth_provider(default: AuthProvider, console: Console) -> AuthProvider:
    for provider, label in AUTH_LABELS.items():
        console.print(f"  [cyan]{provider.value}[/cyan] - {label}")
    answer = Prompt.ask(
        "Which authentication provider?",
        choices=[p.value for p in AuthProvider],
        default=default.value,
        console=console,
    )
    return AuthProvider(answer)


def collect_options(
    cwd: Path,
    config: ShenstackConfig,
    console: Console | None = None,
    project_name: str | None = None,
    auth_provider: AuthProvider | None = None,
    use_redis: bool | None = None,
    use_sentry: bool | None = None,
) -> ScaffoldOptions:
    """
    Collect scaffold options, prompting for anything not preset.

    Args:
        cwd: Directory the project will be created in
        config: Tool configuration supplying the prompt defaults
        console: Console to prompt on
        project_name: Preset name, validated without re-prompting
        auth_provider: Preset auth provider
        use_redis: Preset Redis toggle
        use_sentry: Preset Sentry toggle

    Returns:
        Validated, immutable options

    Raises:
        UserCancelled: If the user interrupts the prompts
        ValidationError: If a preset project name is invalid
    """
    console = console or Console()
    defaults = config.defaults

    try:
        if project_name is None:
            project_name = ask_project_name(cwd, defaults.project_name, console)
        else:
            project_name = validate_project_name(project_name, cwd)

        if auth_provider is None:
            auth_provider = ask_auth_provider(defaults.auth_provider, console)

        if use_redis is None:
            use_redis = Confirm.ask(
                "Would you like to include Redis?", default=defaults.use_redis, console=console
            )

        if use_sentry is None:
            use_sentry = Confirm.ask(
                "Would you like to include Sentry for error tracking?",
                default=defaults.use_sentry,
                console=console,
            )
    except (KeyboardInterrupt, EOFError) as e:
        raise UserCancelled() from e

    return ScaffoldOptions(
        project_name=project_name,
        auth_provider=auth_provider,
        use_redis=use_redis,
        use_sentry=use_sentry,
    )
