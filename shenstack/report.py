"""
Shenstack Report - Summary and next steps after a successful run
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from shenstack.generator import GeneratedFile
from shenstack.options import AuthProvider, ProjectLayout, ScaffoldOptions


def next_steps(
    options: ScaffoldOptions,
    env_files: list[str],
    package_manager: str = "bun",
    layout: ProjectLayout = ProjectLayout.SINGLE,
) -> str:
    """Manual follow-up steps as rich markup."""
    app_env = "app/.env" if layout is ProjectLayout.SPLIT else ".env"
    lines = ["[bold]Next:[/bold]", f"  cd {options.project_name}"]
    for env_file in env_files:
        lines.append(f"  cp {env_file} {env_file.removesuffix('.example')}")
    lines.append(f"  {package_manager} dev")

    if options.use_redis:
        lines += [
            "",
            "[bold]Redis:[/bold]",
            "  Make sure Redis is installed and running",
            "  Update REDIS_URL (or REDIS_HOST and REDIS_PORT) in .env if needed",
        ]

    if options.use_sentry:
        lines += [
            "",
            "[bold]Sentry:[/bold]",
            "  Create a Sentry project and get your DSN",
        ]
        if layout is ProjectLayout.SPLIT:
            lines += [
                "  Add it to .env as SENTRY_DSN",
                "  Add it to app/.env as NEXT_PUBLIC_SENTRY_DSN",
            ]
        else:
            lines.append("  Add it to .env as SENTRY_DSN")

    if options.auth_provider is AuthProvider.CLERK:
        lines += [
            "",
            "[bold]Clerk:[/bold]",
            "  Create an application at https://dashboard.clerk.com",
            f"  Copy NEXT_PUBLIC_CLERK_PUBLISHABLE_KEY and CLERK_SECRET_KEY into {app_env}",
        ]
    elif options.auth_provider is AuthProvider.BETTERAUTH:
        lines += [
            "",
            "[bold]Better Auth:[/bold]",
            "  Set BETTER_AUTH_SECRET to a long random string",
            f"  Run '{package_manager} x @better-auth/cli generate' to add the auth tables",
        ]

    return "\n".join(lines)


def print_report(
    options: ScaffoldOptions,
    root: Path,
    files: list[GeneratedFile],
    console: Console,
    package_manager: str = "bun",
    layout: ProjectLayout = ProjectLayout.SINGLE,
) -> None:
    """Print what was created and what to do next."""
    table = Table(title="Selections")
    table.add_column("Option", style="cyan")
    table.add_column("Value")

    table.add_row("Project", options.project_name)
    table.add_row("Location", str(root))
    table.add_row("Auth", options.auth_label)
    table.add_row("Redis", "yes" if options.use_redis else "no")
    table.add_row("Sentry", "yes" if options.use_sentry else "no")
    table.add_row("Files written", str(len(files)))

    console.print(table)

    env_files = [f.path for f in files if f.path.endswith(".env.example")]
    console.print(Panel(next_steps(options, env_files, package_manager, layout), title="✨ Project setup complete!"))
