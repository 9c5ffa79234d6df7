"""
create-shenstack CLI - Command-line interface for project scaffolding

Usage:
    create-shenstack
    create-shenstack --name my-app --auth clerk --redis --no-sentry
    create-shenstack --dry-run
    create-shenstack version
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from shenstack.errors import ShenstackError, UserCancelled
from shenstack.generator import ProjectGenerator
from shenstack.options import AuthProvider, ProjectLayout, ScaffoldOptions, load_config
from shenstack.pipeline import ScaffoldPipeline
from shenstack.prompts import collect_options
from shenstack.runner import plan_installs

app = typer.Typer(
    name="create-shenstack",
    help="Create a new Shenstack project from the starter template",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


@app.callback(invoke_without_command=True)
def create(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Project name (prompted if omitted)"),
    auth: Optional[AuthProvider] = typer.Option(None, "--auth", "-a", help="Authentication provider"),
    redis: Optional[bool] = typer.Option(None, "--redis/--no-redis", help="Include Redis"),
    sentry: Optional[bool] = typer.Option(None, "--sentry/--no-sentry", help="Include Sentry"),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to shenstack.yaml (defaults to ./shenstack.yaml when present)",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be installed and written without touching the disk",
    ),
    preview_layout: ProjectLayout = typer.Option(
        ProjectLayout.SINGLE,
        "--preview-layout",
        help="Template layout assumed by --dry-run",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every command and file write"),
) -> None:
    """Create a new Shenstack project."""
    if ctx.invoked_subcommand is not None:
        return

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    cwd = Path.cwd()
    try:
        config = load_config(config_file, cwd)
    except ShenstackError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print("\n[cyan]🚀 Welcome to Shenstack Setup![/cyan]\n")

    def collect() -> ScaffoldOptions:
        return collect_options(
            cwd,
            config,
            console=console,
            project_name=name,
            auth_provider=auth,
            use_redis=redis,
            use_sentry=sentry,
        )

    if dry_run:
        try:
            options = collect()
        except UserCancelled as e:
            err_console.print(f"[yellow]{e}[/yellow]")
            raise typer.Exit(130)
        except ShenstackError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)
        rprint(f"\n[yellow]Dry run - would create: {cwd / options.project_name}[/yellow]\n")
        _show_preview(options, preview_layout, config.package_manager, config.write_readme)
        return

    result = ScaffoldPipeline(cwd, config, console=console).run(collect)

    if result.success:
        return

    if isinstance(result.error, UserCancelled):
        err_console.print(f"[yellow]{result.error}[/yellow]")
        raise typer.Exit(130)

    stage = result.failed_stage.value if result.failed_stage else "unknown"
    err_console.print(f"[red]Error ({stage}):[/red] {escape(str(result.error))}")
    if result.root is not None and result.root.exists():
        err_console.print(f"[dim]Partial project left at {result.root}[/dim]")
    raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version."""
    from shenstack import __version__
    rprint(f"create-shenstack {__version__}")


def _show_preview(
    options: ScaffoldOptions,
    layout: ProjectLayout,
    package_manager: str,
    write_readme: bool,
) -> None:
    """Show the install commands and files a real run would produce."""
    tree = Tree(f"[bold]{options.project_name}[/bold] ({layout.value} layout)")

    installs = tree.add("[blue]Install[/blue]")
    for step in plan_installs(options, layout):
        installs.add(f"{' '.join(step.command(package_manager))}  [dim]({step.target_label})[/dim]")

    files = tree.add("[blue]Files[/blue]")
    generator = ProjectGenerator(package_manager=package_manager)
    for generated in generator.plan(options, layout, write_readme=write_readme):
        files.add(f"{escape(generated.path)}  [dim]({generated.feature})[/dim]")

    rprint(tree)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
