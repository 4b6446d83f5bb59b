"""
Compilation pipeline.

Orchestrates one compilation from a pipeline description to a document:
raw inputs -> transformer steps -> schema assembly -> model encoder.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from skpmml import __version__
from skpmml.config.settings import InputFieldSpec, PipelineSpec, StepSpec
from skpmml.document.nodes import DataType, Header, OpType, PMMLDocument
from skpmml.exceptions import UnknownFieldError, UnsupportedFeatureKindError
from skpmml.features.registry import FieldRegistry
from skpmml.features.types import (
    CategoricalFeature,
    ContinuousFeature,
    Feature,
    LookupFeature,
    Schema,
    WildcardFeature,
)
from skpmml.models import create_model_encoder
from skpmml.predicates import PredicateTranslator, translate_predicate
from skpmml.transformers import Transformer, create_transformer
from skpmml.utils.logging import get_logger, log_context
from skpmml.utils.values import infer_data_type

log = get_logger(__name__)


@dataclass
class CompilationResult:
    """Outcome of one compilation.

    Attributes:
        document: Compiled document.
        registry: Field registry the compilation populated.
        schema: Schema handed to the model encoder.
    """

    document: PMMLDocument
    registry: FieldRegistry
    schema: Schema


class Compiler:
    """
    Compile a pipeline description into a scoring document.

    Each call to ``compile`` uses a fresh FieldRegistry, so one compiler
    can be run repeatedly.
    """

    def __init__(
        self,
        spec: PipelineSpec,
        project: str = "skpmml",
        description: str | None = None,
        translator: PredicateTranslator = translate_predicate,
    ) -> None:
        """
        Initialize compiler.

        Args:
            spec: Pipeline description.
            project: Project name for the document header.
            description: Optional header description.
            translator: Predicate translator for rule-based models.
        """
        self.spec = spec
        self.project = project
        self.description = description
        self.translator = translator

    def compile(self) -> CompilationResult:
        """
        Run the full compilation.

        Returns:
            CompilationResult with document, registry and schema.
        """
        registry = FieldRegistry()
        log.info(
            "Starting compilation",
            project=self.project,
            inputs=len(self.spec.inputs),
            steps=len(self.spec.steps),
        )

        pending: dict[str, InputFieldSpec] = {}
        features = [self._register_input(spec, registry, pending) for spec in self.spec.inputs]

        for index, step in enumerate(self.spec.steps):
            transformer = create_transformer(step.transformer, step.attributes)
            with log_context(step=index, transformer=transformer.name):
                features = self._apply_step(index, step, transformer, features, registry, pending)

        # inputs no step consumed are plain numeric inputs
        for name in list(pending):
            spec = pending.pop(name)
            registry.create_data_field(name, OpType.CONTINUOUS, spec.data_type or DataType.FLOAT)
            features = [
                ContinuousFeature(name=name, data_type=spec.data_type or DataType.FLOAT)
                if feature.name == name
                else feature
                for feature in features
            ]

        features = [registry.resolve(feature) for feature in features]
        schema = Schema(label=self._register_label(registry), features=tuple(features))

        model_spec = self.spec.model
        encoder = create_model_encoder(model_spec.kind, model_spec.attributes, translator=self.translator)
        with log_context(model=encoder.name):
            model = encoder.encode_model(schema, registry, probabilities=model_spec.probabilities)

        document = PMMLDocument(
            header=Header(version=__version__, description=self.description or self.project),
            data_dictionary=registry.data_fields(),
            transformation_dictionary=registry.derived_fields(),
            model=model,
        )

        log.info(
            "Compilation complete",
            data_fields=len(document.data_dictionary),
            derived_fields=len(document.transformation_dictionary),
            features=len(schema.features),
        )
        return CompilationResult(document=document, registry=registry, schema=schema)

    def _register_input(
        self,
        spec: InputFieldSpec,
        registry: FieldRegistry,
        pending: dict[str, InputFieldSpec],
    ) -> Feature:
        """Declare a raw input, or defer it to the first step consuming it."""
        if spec.op_type is None:
            pending[spec.name] = spec
            return WildcardFeature(name=spec.name, data_type=spec.data_type or DataType.STRING)

        if spec.op_type == OpType.CONTINUOUS:
            data_type = spec.data_type or DataType.FLOAT
            registry.create_data_field(spec.name, OpType.CONTINUOUS, data_type)
            return ContinuousFeature(name=spec.name, data_type=data_type)

        data_type = spec.data_type or infer_data_type(spec.values, DataType.STRING)
        registry.create_data_field(spec.name, spec.op_type, data_type, spec.values)
        if spec.values:
            return CategoricalFeature(
                name=spec.name,
                data_type=data_type,
                categories=tuple(spec.values),
                op_type=spec.op_type,
            )
        return WildcardFeature(name=spec.name, data_type=data_type, op_type=spec.op_type)

    def _declare_pending(
        self,
        feature: Feature,
        transformer: Transformer,
        registry: FieldRegistry,
        pending: dict[str, InputFieldSpec],
    ) -> Feature:
        """Declare a deferred input with the consuming transformer's types."""
        spec = pending.pop(feature.name, None)
        if spec is None:
            return feature

        data_type = spec.data_type or transformer.data_type
        registry.create_data_field(spec.name, transformer.op_type, data_type)
        log.debug(
            "Declared input from transformer",
            name=spec.name,
            op_type=transformer.op_type.value,
            data_type=data_type.value,
        )
        if transformer.op_type == OpType.CONTINUOUS:
            return ContinuousFeature(name=spec.name, data_type=data_type)
        return WildcardFeature(name=spec.name, data_type=data_type, op_type=transformer.op_type)

    def _apply_step(
        self,
        index: int,
        step: StepSpec,
        transformer: Transformer,
        features: Sequence[Feature],
        registry: FieldRegistry,
        pending: dict[str, InputFieldSpec],
    ) -> list[Feature]:
        """
        Run one transformer step.

        The step's outputs replace its inputs, at the position of the
        first input in the current feature list.
        """
        by_name = {feature.name: feature for feature in features}
        names = list(step.columns) if step.columns is not None else list(by_name)

        missing = [name for name in names if name not in by_name]
        if missing:
            available = ", ".join(by_name)
            msg = f"Step {index} ({transformer.name}) references unknown features {missing}. Available: {available}"
            raise UnknownFieldError(msg)

        inputs = [
            self._declare_pending(by_name[name], transformer, registry, pending) for name in names
        ]
        outputs = transformer.encode_features(inputs, registry)
        if step.continuous:
            outputs = [self._to_continuous(feature, registry) for feature in outputs]

        consumed = set(names)
        positions = [i for i, feature in enumerate(features) if feature.name in consumed]
        insert_at = positions[0] if positions else len(features)

        result = [feature for feature in features[:insert_at] if feature.name not in consumed]
        result.extend(outputs)
        result.extend(feature for feature in features[insert_at:] if feature.name not in consumed)

        log.info(
            "Applied transformer",
            inputs=names,
            outputs=[feature.name for feature in outputs],
        )
        return result

    def _to_continuous(self, feature: Feature, registry: FieldRegistry) -> Feature:
        if isinstance(feature, (LookupFeature, ContinuousFeature)):
            return feature.to_continuous(registry)
        msg = f"{feature.describe()} has no continuous view"
        raise UnsupportedFeatureKindError(msg)

    def _register_label(self, registry: FieldRegistry) -> Feature:
        label = self.spec.label
        registry.create_data_field(label.name, OpType.CATEGORICAL, label.data_type, label.values)
        if label.values:
            return CategoricalFeature(name=label.name, data_type=label.data_type, categories=tuple(label.values))
        return WildcardFeature(name=label.name, data_type=label.data_type)


def compile_pipeline(
    spec: PipelineSpec,
    project: str = "skpmml",
    translator: PredicateTranslator = translate_predicate,
) -> CompilationResult:
    """
    Convenience function to compile a pipeline description.

    Args:
        spec: Pipeline description.
        project: Project name for the document header.
        translator: Predicate translator for rule-based models.

    Returns:
        CompilationResult.
    """
    return Compiler(spec, project=project, translator=translator).compile()
