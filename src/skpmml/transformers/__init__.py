"""
Feature transformers and their factory.
"""

from collections.abc import Mapping
from typing import Any

from skpmml.transformers.base import Transformer
from skpmml.transformers.lookup import LookupTransformer
from skpmml.transformers.one_hot import OneHotEncoder

TRANSFORMERS: dict[str, type[Transformer]] = {
    "one_hot": OneHotEncoder,
    "OneHotEncoder": OneHotEncoder,
    "lookup": LookupTransformer,
    "LookupTransformer": LookupTransformer,
}

__all__ = [
    "LookupTransformer",
    "OneHotEncoder",
    "TRANSFORMERS",
    "Transformer",
    "create_transformer",
]


def create_transformer(kind: str, attributes: Mapping[str, Any] | None = None) -> Transformer:
    """Factory function to create a transformer by kind.

    Args:
        kind: Transformer kind, e.g. "one_hot" or "LookupTransformer".
        attributes: Learned attributes of the transformer.

    Returns:
        Instantiated transformer.

    Raises:
        ValueError: If kind is unknown.
    """
    transformer_class = TRANSFORMERS.get(kind)
    if transformer_class is None:
        raise ValueError(
            f"Unknown transformer kind: {kind}. Valid kinds: {sorted(TRANSFORMERS)}"
        )
    return transformer_class(attributes)
