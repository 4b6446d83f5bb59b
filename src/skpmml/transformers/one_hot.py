"""
One-hot expansion of a single categorical input.

The category universe comes from the encoder's learned attributes:

    categories_        discovered categories, used as-is when present
    n_values="auto"    active_features_ (the categories seen in training)
    otherwise          the dense range 0 .. n_values_[0] - 1
"""

from collections.abc import Sequence
from typing import Any

from skpmml.document.nodes import DataType, OpType
from skpmml.exceptions import CardinalityError, InvalidParameterError
from skpmml.features.registry import FieldRegistry
from skpmml.features.types import (
    BinaryFeature,
    CategoricalFeature,
    Feature,
    WildcardFeature,
)
from skpmml.transformers.base import Transformer
from skpmml.utils.logging import get_logger
from skpmml.utils.values import as_int, format_value, infer_data_type

log = get_logger(__name__)

AUTO = "auto"


class OneHotEncoder(Transformer):
    """Expand one input feature into one binary indicator per category."""

    @property
    def op_type(self) -> OpType:
        return OpType.CATEGORICAL

    @property
    def data_type(self) -> DataType:
        return infer_data_type(self.get_values(), DataType.INTEGER)

    def get_values(self) -> list[Any]:
        """Category universe, in learned order."""
        if self.attributes.get_optional("categories_") is not None:
            arrays = self.attributes.get_array("categories_")
            if len(arrays) != 1:
                msg = f"{self.name}.categories_ must hold exactly one category array, got {len(arrays)}"
                raise InvalidParameterError(msg)
            return list(arrays[0])

        feature_sizes = [as_int(size) for size in self.attributes.get_array("n_values_")]
        if len(feature_sizes) != 1:
            msg = f"{self.name}.n_values_ must have exactly one element, got {len(feature_sizes)}"
            raise InvalidParameterError(msg)

        if self.attributes.get_optional("n_values") == AUTO:
            return self.attributes.get_array("active_features_")

        return list(range(feature_sizes[0]))

    def encode_features(
        self,
        features: Sequence[Feature],
        registry: FieldRegistry,
    ) -> list[Feature]:
        values = self.get_values()

        self._check_arity(features, 1)
        feature = registry.resolve(features[0])

        if isinstance(feature, CategoricalFeature):
            if len(values) != len(feature.categories):
                msg = (
                    f"{self.name} learned {len(values)} categories but "
                    f"{feature.describe()} has {len(feature.categories)}: {list(feature.categories)}"
                )
                raise CardinalityError(msg)
            result: list[Feature] = [
                BinaryFeature(source=feature, value=category) for category in feature.categories
            ]

        elif isinstance(feature, WildcardFeature):
            categories = [self._category_label(value) for value in values]
            if not categories:
                msg = f"{self.name} learned no categories, cannot fix the domain of {feature.describe()}"
                raise CardinalityError(msg)
            categorical = registry.materialize_categorical(feature, categories)
            result = [BinaryFeature(source=categorical, value=category) for category in categories]

        else:
            raise self._unsupported(feature)

        log.debug(
            "One-hot encoded feature",
            feature=feature.name,
            n_outputs=len(result),
        )
        return result

    def _category_label(self, value: Any) -> str:
        if isinstance(value, str):
            return value
        return format_value(as_int(value))
