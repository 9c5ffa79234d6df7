"""
Shenstack Pipeline - Collect, materialize, install, patch, report

Stages run strictly one after another. The first failing stage moves the
pipeline to FAILED and nothing after it runs. There are no retries and no
cleanup: a partially created project directory stays on disk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from rich.console import Console

from shenstack.errors import ShenstackError
from shenstack.generator import GeneratedFile, ProjectGenerator
from shenstack.options import ProjectLayout, ScaffoldOptions, ShenstackConfig, detect_layout
from shenstack.report import print_report
from shenstack.runner import CommandRunner, install_dependencies, materialize_project, plan_installs

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    COLLECTING = "collecting"
    MATERIALIZING = "materializing"
    INSTALLING = "installing"
    PATCHING = "patching"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PipelineResult:
    """Where the pipeline ended up and what it produced."""

    stage: Stage = Stage.COLLECTING
    history: list[Stage] = field(default_factory=list)
    options: ScaffoldOptions | None = None
    root: Path | None = None
    layout: ProjectLayout | None = None
    files: list[GeneratedFile] = field(default_factory=list)
    error: ShenstackError | None = None
    failed_stage: Stage | None = None

    @property
    def success(self) -> bool:
        return self.stage is Stage.DONE


class ScaffoldPipeline:
    """
    Drives one create-shenstack run.

    Args:
        cwd: Directory the project is created in
        config: Tool configuration
        runner: Runs git and the package manager
        console: Console for progress output
    """

    def __init__(
        self,
        cwd: Path,
        config: ShenstackConfig,
        runner: CommandRunner | None = None,
        console: Console | None = None,
    ):
        self.cwd = Path(cwd)
        self.config = config
        self.runner = runner or CommandRunner()
        self.console = console or Console()
        self.generator = ProjectGenerator(package_manager=config.package_manager)

    def run(self, collect: Callable[[], ScaffoldOptions]) -> PipelineResult:
        """Run every stage, starting with ``collect`` for the options."""
        result = PipelineResult()
        self._enter(result, Stage.COLLECTING)
        try:
            options = collect()
        except ShenstackError as e:
            return self._fail(result, e)

        result.options = options
        result.root = self.cwd / options.project_name

        self._enter(result, Stage.MATERIALIZING)
        self.console.print("\n[yellow]🔄 Cloning Shenstack template...[/yellow]")
        step = materialize_project(result.root, self.config, self.runner)
        if not step.success:
            return self._fail(result, step.error)

        result.layout = detect_layout(result.root)
        logger.debug("detected %s layout", result.layout.value)

        self._enter(result, Stage.INSTALLING)
        self.console.print("\n[yellow]📥 Installing dependencies...[/yellow]")
        steps = plan_installs(options, result.layout)
        step = install_dependencies(result.root, steps, self.config, self.runner)
        if not step.success:
            return self._fail(result, step.error)

        self._enter(result, Stage.PATCHING)
        self.console.print("\n[yellow]🛠  Writing starter files...[/yellow]")
        files = self.generator.plan(options, result.layout, write_readme=self.config.write_readme)
        written = self.generator.write(result.root, files)
        result.files = written.files
        if not written.success:
            return self._fail(result, written.error)

        self._enter(result, Stage.REPORTING)
        print_report(
            options, result.root, result.files, self.console,
            self.config.package_manager, result.layout,
        )

        self._enter(result, Stage.DONE)
        return result

    def _enter(self, result: PipelineResult, stage: Stage) -> None:
        logger.debug("stage %s -> %s", result.stage.value, stage.value)
        result.stage = stage
        result.history.append(stage)

    def _fail(self, result: PipelineResult, error: ShenstackError | None) -> PipelineResult:
        result.failed_stage = result.stage
        result.error = error
        self._enter(result, Stage.FAILED)
        return result
