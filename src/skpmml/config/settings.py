"""
Typed configuration models using Pydantic.

A compiler configuration describes one compilation: the raw inputs, the
transformer steps with their learned attributes, the label, the model and
the ambient settings (logging, output).
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from skpmml.document.nodes import DataType, OpType


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO", description="Log level name")
    json_output: bool = Field(default=False, description="Render log events as JSON")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the level is a known logging level."""
        valid = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if v.upper() not in valid:
            msg = f"level must be one of {valid}, got: {v!r}"
            raise ValueError(msg)
        return v.upper()


class OutputConfig(BaseModel):
    """Where and how the compiled document is written."""

    model_config = ConfigDict(frozen=True)

    format: Literal["json", "yaml"] = Field(default="json", description="Document format")
    indent: int = Field(default=2, ge=0, le=8, description="Indentation width")
    path: Path | None = Field(default=None, description="Output file (stdout if unset)")


class InputFieldSpec(BaseModel):
    """Raw input of the pipeline.

    Without ``op_type`` the input's type is declared by the first step
    consuming it. A categorical input without ``values`` has a domain that
    is discovered later by a transformer.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    op_type: OpType | None = None
    data_type: DataType | None = None
    values: list[Any] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_domain(self) -> "InputFieldSpec":
        """Only categorical or ordinal inputs carry a domain."""
        if self.values and self.op_type in (None, OpType.CONTINUOUS):
            msg = f"Input '{self.name}': values require op_type 'categorical' or 'ordinal'"
            raise ValueError(msg)
        return self


class StepSpec(BaseModel):
    """One transformer step of the pipeline."""

    model_config = ConfigDict(frozen=True)

    transformer: str = Field(description="Transformer kind, e.g. 'one_hot' or 'lookup'")
    columns: list[str] | None = Field(
        default=None, description="Input feature names (default: all current features)"
    )
    attributes: dict[str, Any] = Field(
        default_factory=dict, description="Learned attributes of the transformer"
    )
    continuous: bool = Field(
        default=False, description="Use the continuous view of the step's outputs"
    )

    @field_validator("transformer")
    @classmethod
    def validate_transformer(cls, v: str) -> str:
        """Ensure the transformer kind is known."""
        from skpmml.transformers import TRANSFORMERS

        if v not in TRANSFORMERS:
            msg = f"Unknown transformer kind {v!r}. Valid kinds: {sorted(TRANSFORMERS)}"
            raise ValueError(msg)
        return v


class LabelSpec(BaseModel):
    """Target field of the model."""

    model_config = ConfigDict(frozen=True)

    name: str
    data_type: DataType = DataType.STRING
    values: list[Any] = Field(default_factory=list)


class ModelSpec(BaseModel):
    """Model to encode."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(default="rule_set", description="Model kind")
    attributes: dict[str, Any] = Field(
        default_factory=dict, description="Learned attributes of the model"
    )
    probabilities: bool = Field(
        default=False, description="Declare per-class probability outputs"
    )

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        """Ensure the model kind is known."""
        from skpmml.models import MODEL_ENCODERS

        if v not in MODEL_ENCODERS:
            msg = f"Unknown model kind {v!r}. Valid kinds: {sorted(MODEL_ENCODERS)}"
            raise ValueError(msg)
        return v


class PipelineSpec(BaseModel):
    """Inputs, transformer steps, label and model of one compilation."""

    model_config = ConfigDict(frozen=True)

    inputs: list[InputFieldSpec] = Field(min_length=1)
    steps: list[StepSpec] = Field(default_factory=list)
    label: LabelSpec
    model: ModelSpec = Field(default_factory=ModelSpec)

    @model_validator(mode="after")
    def validate_names(self) -> "PipelineSpec":
        """Input names are unique and distinct from the label."""
        names = [spec.name for spec in self.inputs]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            msg = f"Duplicate input names: {duplicates}"
            raise ValueError(msg)
        if self.label.name in names:
            msg = f"Label '{self.label.name}' must not also be an input"
            raise ValueError(msg)
        return self


class CompilerConfig(BaseModel):
    """Root configuration of a compilation run."""

    model_config = ConfigDict(frozen=True)

    project: str = Field(description="Project name, recorded in the document header")
    description: str | None = Field(default=None, description="Free-text description")
    pipeline: PipelineSpec
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
