"""
Shenstack Options - Pydantic models for scaffold options and shenstack.yaml

ScaffoldOptions is built once by the prompts and read-only afterwards.
ShenstackConfig carries the tool's own settings (template source, package
manager, prompt defaults).
"""

from __future__ import annotations

import os
import re
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from shenstack.errors import ConfigError, ValidationError


# ═══════════════════════════════════════════════════════════════════════════
# ENUMS
# ═══════════════════════════════════════════════════════════════════════════


class AuthProvider(str, Enum):
    DIY = "diy"
    BETTERAUTH = "betterauth"
    CLERK = "clerk"


class ProjectLayout(str, Enum):
    """Shape of the fetched template"""
    SINGLE = "single"    # One package at the project root
    API_DIR = "api-dir"  # One root package with the HTTP API under api/
    SPLIT = "split"      # Separate api/ and app/ packages

    @property
    def api_root(self) -> str:
        """Package directory hosting the HTTP API, relative to the project root"""
        return "api" if self is ProjectLayout.SPLIT else "."

    @property
    def app_root(self) -> str:
        """Package directory hosting the Next.js app, relative to the project root"""
        return "app" if self is ProjectLayout.SPLIT else "."

    @property
    def server_lib(self) -> str:
        """Directory for server-side modules (db, redis, sentry)"""
        return "src/lib" if self is ProjectLayout.SINGLE else "api/lib"

    @property
    def subprojects(self) -> list[str]:
        if self is ProjectLayout.SPLIT:
            return [self.api_root, self.app_root]
        return ["."]


AUTH_LABELS: dict[AuthProvider, str] = {
    AuthProvider.DIY: "DIY (roll your own)",
    AuthProvider.BETTERAUTH: "Better Auth",
    AuthProvider.CLERK: "Clerk",
}


# ═══════════════════════════════════════════════════════════════════════════
# PROJECT NAME
# ═══════════════════════════════════════════════════════════════════════════


PROJECT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
DEFAULT_PROJECT_NAME = "my-shenstack-app"


def check_project_name(name: str) -> str:
    """Check the charset rule only. Returns the stripped name."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Project name cannot be empty.")
    if not PROJECT_NAME_PATTERN.match(name):
        raise ValidationError(
            f"Invalid project name {name!r}: use only letters, digits, '-' and '_'."
        )
    return name


def validate_project_name(name: str, cwd: Path) -> str:
    """
    Validate a project name against the charset and collision rules.

    Args:
        name: Raw user input
        cwd: Directory the project will be created in

    Returns:
        The stripped, valid project name

    Raises:
        ValidationError: If the name is empty, has invalid characters, or
            something called ``name`` already exists in ``cwd``.
    """
    name = check_project_name(name)
    target = Path(cwd) / name
    if target.exists() or target.is_symlink():
        raise ValidationError(f"{name!r} already exists in {cwd}. Pick another name.")
    return name


# ═══════════════════════════════════════════════════════════════════════════
# SCAFFOLD OPTIONS
# ═══════════════════════════════════════════════════════════════════════════


class ScaffoldOptions(BaseModel):
    """Options collected from the user, immutable after construction"""

    project_name: str = Field(..., alias="projectName")
    auth_provider: AuthProvider = Field(AuthProvider.DIY, alias="authProvider")
    use_redis: bool = Field(False, alias="useRedis")
    use_sentry: bool = Field(False, alias="useSentry")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("project_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        try:
            return check_project_name(v)
        except ValidationError as e:
            # pydantic only wraps ValueError
            raise ValueError(str(e)) from e

    @property
    def auth_label(self) -> str:
        return AUTH_LABELS[self.auth_provider]


def detect_layout(root: Path) -> ProjectLayout:
    """
    Work out the template shape from what the clone put on disk.

    Split when both api/ and app/ carry their own package.json, api-dir
    when there is an api/ folder without that, single otherwise.
    """
    root = Path(root)
    if (root / "api" / "package.json").is_file() and (root / "app" / "package.json").is_file():
        return ProjectLayout.SPLIT
    if (root / "api").is_dir():
        return ProjectLayout.API_DIR
    return ProjectLayout.SINGLE


# ═══════════════════════════════════════════════════════════════════════════
# TOOL CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════


DEFAULT_TEMPLATE_URL = "https://github.com/yourusername/create-shenstack-app.git"
CONFIG_FILENAME = "shenstack.yaml"


class PromptDefaults(BaseModel):
    """Defaults offered by the interactive prompts"""

    project_name: str = Field(DEFAULT_PROJECT_NAME, alias="projectName")
    auth_provider: AuthProvider = Field(AuthProvider.DIY, alias="authProvider")
    use_redis: bool = Field(False, alias="useRedis")
    use_sentry: bool = Field(False, alias="useSentry")

    model_config = {"populate_by_name": True}


class ShenstackConfig(BaseModel):
    """Contents of shenstack.yaml"""

    template_url: str = Field(DEFAULT_TEMPLATE_URL, alias="templateUrl")
    package_manager: str = Field("bun", alias="packageManager")
    git_executable: str = Field("git", alias="gitExecutable")
    write_readme: bool = Field(False, alias="writeReadme")
    defaults: PromptDefaults = PromptDefaults()

    model_config = {"populate_by_name": True}

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "ShenstackConfig":
        """Parse YAML content into ShenstackConfig"""
        try:
            data = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Config must be a mapping at the top level.")
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigError(str(e)) from e

    @classmethod
    def from_file(cls, path: str | Path) -> "ShenstackConfig":
        """Load config from YAML file"""
        try:
            content = Path(path).read_text()
        except OSError as e:
            raise ConfigError(f"Could not read {path}: {e}") from e
        return cls.from_yaml(content)

    def to_yaml(self) -> str:
        """Export config to YAML"""
        return yaml.dump(
            self.model_dump(by_alias=True, mode="json"),
            default_flow_style=False,
            sort_keys=False,
        )


def load_config(path: Path | None = None, cwd: Path | None = None) -> ShenstackConfig:
    """
    Resolve the tool configuration.

    An explicit path wins, then ./shenstack.yaml, then built-in defaults.
    SHENSTACK_TEMPLATE_URL and SHENSTACK_PACKAGE_MANAGER override the file.
    """
    if path is not None:
        config = ShenstackConfig.from_file(path)
    else:
        candidate = Path(cwd or Path.cwd()) / CONFIG_FILENAME
        config = ShenstackConfig.from_file(candidate) if candidate.is_file() else ShenstackConfig()

    overrides: dict[str, str] = {}
    if os.environ.get("SHENSTACK_TEMPLATE_URL"):
        overrides["template_url"] = os.environ["SHENSTACK_TEMPLATE_URL"]
    if os.environ.get("SHENSTACK_PACKAGE_MANAGER"):
        overrides["package_manager"] = os.environ["SHENSTACK_PACKAGE_MANAGER"]

    return config.model_copy(update=overrides) if overrides else config
