"""
Base classes for model encoders.

A model encoder turns a Schema plus the model's learned attributes into a
model node. Encoders never score records; they only describe scoring.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from skpmml.document.nodes import (
    DataType,
    FieldUsageType,
    MiningField,
    MiningFunction,
    MiningSchema,
    ModelNode,
    OpType,
    OutputField,
    ResultFeature,
)
from skpmml.exceptions import UnsupportedOutputError
from skpmml.features.registry import FieldRegistry
from skpmml.features.types import Schema
from skpmml.params import ParameterBundle
from skpmml.predicates import PredicateTranslator, translate_predicate


class ModelEncoder(ABC):
    """Abstract base class for model encoders.

    Args:
        attributes: Learned attributes of the model.
        translator: Predicate translator, used by rule-based models.
    """

    def __init__(
        self,
        attributes: Mapping[str, Any] | None = None,
        translator: PredicateTranslator = translate_predicate,
    ) -> None:
        self.attributes = ParameterBundle(attributes, owner=self.name)
        self.translator = translator

    @property
    def name(self) -> str:
        """Model identity used in logs and error messages."""
        return type(self).__name__

    @property
    @abstractmethod
    def mining_function(self) -> MiningFunction:
        ...

    @abstractmethod
    def encode_model(
        self,
        schema: Schema,
        registry: FieldRegistry,
        probabilities: bool = False,
    ) -> ModelNode:
        """Encode the model node.

        Args:
            schema: Label and predictor features after the transformer chain.
            registry: Field registry of the current compilation.
            probabilities: Whether to declare per-class probability outputs.

        Returns:
            Model node.
        """
        ...

    def encode_mining_schema(self, schema: Schema, registry: FieldRegistry) -> MiningSchema:
        """Target field first, then the data fields the predictors read."""
        mining_fields = [MiningField(name=schema.label.field_name, usage_type=FieldUsageType.TARGET)]
        for name in registry.active_fields(schema.features):
            if name != schema.label.field_name:
                mining_fields.append(MiningField(name=name))
        return MiningSchema(mining_fields=mining_fields)

    def encode_output(self, schema: Schema, probabilities: bool = False) -> list[OutputField]:
        """Output fields: the predicted value."""
        if probabilities:
            msg = f"{self.name} is not a classifier and has no probability outputs"
            raise UnsupportedOutputError(msg)
        label = schema.label
        return [
            OutputField(
                name=f"predicted_{label.name}",
                result_feature=ResultFeature.PREDICTED_VALUE,
                op_type=label.op_type,
                data_type=label.data_type,
            )
        ]


class Classifier(ModelEncoder):
    """Model encoder for classification models."""

    @property
    def mining_function(self) -> MiningFunction:
        return MiningFunction.CLASSIFICATION

    @property
    @abstractmethod
    def has_probability_distribution(self) -> bool:
        """Whether the model can report a probability per class."""
        ...

    @property
    @abstractmethod
    def classes(self) -> list[str]:
        """Known class labels, in model order."""
        ...

    def encode_output(self, schema: Schema, probabilities: bool = False) -> list[OutputField]:
        output = super().encode_output(schema)
        if not probabilities:
            return output

        if not self.has_probability_distribution:
            msg = f"{self.name} has no probability distribution; only the predicted value is available"
            raise UnsupportedOutputError(msg)

        for value in self.classes:
            output.append(
                OutputField(
                    name=f"probability({value})",
                    result_feature=ResultFeature.PROBABILITY,
                    op_type=OpType.CONTINUOUS,
                    data_type=DataType.FLOAT,
                    value=value,
                )
            )
        return output
