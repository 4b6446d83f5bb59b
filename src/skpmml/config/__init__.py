"""
Configuration management with typed Pydantic models.
"""

from skpmml.config.loader import load_config
from skpmml.config.settings import (
    CompilerConfig,
    InputFieldSpec,
    LabelSpec,
    LoggingConfig,
    ModelSpec,
    OutputConfig,
    PipelineSpec,
    StepSpec,
)

__all__ = [
    "CompilerConfig",
    "InputFieldSpec",
    "LabelSpec",
    "LoggingConfig",
    "ModelSpec",
    "OutputConfig",
    "PipelineSpec",
    "StepSpec",
    "load_config",
]
