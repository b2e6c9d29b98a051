"""
sshdeploy Core

Configuration resolution and the deployment pipeline.
"""

from .config_loader import (
    load_options_file,
    options_from_env,
    merge_options,
    resolve_config,
)
from .pipeline import DeploymentPipeline, PlannedStage

__all__ = [
    "load_options_file",
    "options_from_env",
    "merge_options",
    "resolve_config",
    "DeploymentPipeline",
    "PlannedStage",
]
