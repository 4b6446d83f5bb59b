"""
Model encoders and their factory.
"""

from collections.abc import Mapping
from typing import Any

from skpmml.models.base import Classifier, ModelEncoder
from skpmml.models.ruleset import RuleSetClassifier
from skpmml.predicates import PredicateTranslator, translate_predicate

MODEL_ENCODERS: dict[str, type[ModelEncoder]] = {
    "rule_set": RuleSetClassifier,
    "RuleSetClassifier": RuleSetClassifier,
}

__all__ = [
    "Classifier",
    "MODEL_ENCODERS",
    "ModelEncoder",
    "RuleSetClassifier",
    "create_model_encoder",
]


def create_model_encoder(
    kind: str,
    attributes: Mapping[str, Any] | None = None,
    translator: PredicateTranslator = translate_predicate,
) -> ModelEncoder:
    """Factory function to create a model encoder by kind.

    Args:
        kind: Model kind, e.g. "rule_set".
        attributes: Learned attributes of the model.
        translator: Predicate translator for rule-based models.

    Returns:
        Instantiated model encoder.

    Raises:
        ValueError: If kind is unknown.
    """
    encoder_class = MODEL_ENCODERS.get(kind)
    if encoder_class is None:
        raise ValueError(f"Unknown model kind: {kind}. Valid kinds: {sorted(MODEL_ENCODERS)}")
    return encoder_class(attributes, translator=translator)
