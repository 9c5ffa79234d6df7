"""
create-shenstack - Project scaffolding for the Shenstack starter

Clones the starter template, installs the selected integrations and
writes their configuration stubs.
"""

__version__ = "0.1.0"

from shenstack.options import AuthProvider, ProjectLayout, ScaffoldOptions, ShenstackConfig
from shenstack.generator import ProjectGenerator, apply_files, plan_files
from shenstack.pipeline import ScaffoldPipeline, Stage

__all__ = [
    "AuthProvider",
    "ProjectLayout",
    "ScaffoldOptions",
    "ShenstackConfig",
    "ProjectGenerator",
    "apply_files",
    "plan_files",
    "ScaffoldPipeline",
    "Stage",
]
