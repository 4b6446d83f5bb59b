"""
Feature variants, the per-compilation field registry and the model schema.
"""

from skpmml.features.registry import FieldRegistry
from skpmml.features.types import (
    BinaryFeature,
    CategoricalFeature,
    ContinuousFeature,
    Feature,
    LookupFeature,
    Schema,
    WildcardFeature,
)

__all__ = [
    "BinaryFeature",
    "CategoricalFeature",
    "ContinuousFeature",
    "Feature",
    "FieldRegistry",
    "LookupFeature",
    "Schema",
    "WildcardFeature",
]
