"""
Base class for feature transformers.

A transformer reads its learned attributes from a ParameterBundle, consumes
an ordered list of input features and returns an ordered list of output
features. Derived fields it needs are registered in the FieldRegistry it
is given.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from skpmml.document.nodes import DataType, OpType
from skpmml.exceptions import ArityError, UnsupportedFeatureKindError
from skpmml.features.registry import FieldRegistry
from skpmml.features.types import Feature
from skpmml.params import ParameterBundle


class Transformer(ABC):
    """Abstract base class for transformers.

    Subclasses declare the operational and data type of the raw inputs they
    consume (``op_type``, ``data_type``) so that a raw input of unknown type
    can be declared by the first transformer reading it.
    """

    def __init__(self, attributes: Mapping[str, Any] | None = None) -> None:
        self.attributes = ParameterBundle(attributes, owner=self.name)

    @property
    def name(self) -> str:
        """Transformer identity used in logs and error messages."""
        return type(self).__name__

    @property
    @abstractmethod
    def op_type(self) -> OpType:
        """Operational type of the inputs this transformer consumes."""
        ...

    @property
    @abstractmethod
    def data_type(self) -> DataType:
        """Data type of the inputs this transformer consumes."""
        ...

    @abstractmethod
    def encode_features(
        self,
        features: Sequence[Feature],
        registry: FieldRegistry,
    ) -> list[Feature]:
        """Transform input features into output features.

        Args:
            features: Input features, in order.
            registry: Field registry of the current compilation.

        Returns:
            Output features, in order.
        """
        ...

    def _check_arity(self, features: Sequence[Feature], expected: int) -> None:
        """Raise ArityError unless exactly ``expected`` features are given."""
        if len(features) != expected:
            names = [feature.name for feature in features]
            msg = f"{self.name} expects exactly {expected} input feature(s), got {len(features)}: {names}"
            raise ArityError(msg)

    def _unsupported(self, feature: Feature) -> UnsupportedFeatureKindError:
        msg = f"{self.name} cannot encode {feature.describe()}"
        return UnsupportedFeatureKindError(msg)
