"""
Feature variants flowing through a compilation.

A feature is an immutable, typed handle to one value slot. Transformers
and model encoders dispatch on the concrete variant:

    ContinuousFeature   numeric quantity
    CategoricalFeature  known, ordered domain
    WildcardFeature     domain not yet known
    BinaryFeature       indicator for one category of a source feature
    LookupFeature       categorical view of a lookup-table derived field
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from skpmml.document.nodes import DataType, OpType
from skpmml.exceptions import InvalidParameterError
from skpmml.utils.values import format_value

if TYPE_CHECKING:
    from skpmml.features.registry import FieldRegistry


class Feature:
    """
    Common interface of all feature variants.

    Attributes:
        name: Unique identifier of the feature.
        data_type: Storage type of the values.
        op_type: Operational type.
    """

    name: str
    data_type: DataType
    op_type: OpType

    @property
    def field_name(self) -> str:
        """Name of the registry field this feature reads."""
        return self.name

    @property
    def values(self) -> tuple[str, ...]:
        """Known domain, empty when the domain is not known."""
        return ()

    def describe(self) -> str:
        """Short human-readable label used in error messages."""
        return f"{type(self).__name__}({self.name!r})"


@dataclass(frozen=True)
class ContinuousFeature(Feature):
    name: str
    data_type: DataType = DataType.FLOAT

    op_type: ClassVar[OpType] = OpType.CONTINUOUS

    def to_continuous(self, registry: "FieldRegistry") -> "ContinuousFeature":
        return self


@dataclass(frozen=True)
class CategoricalFeature(Feature):
    """Feature over an explicit, ordered domain of category labels.

    ``op_type`` is categorical or ordinal; an ordinal domain is listed in
    its order.
    """

    name: str
    data_type: DataType
    categories: tuple[str, ...] = field(default=())
    op_type: OpType = OpType.CATEGORICAL

    def __post_init__(self) -> None:
        if self.op_type == OpType.CONTINUOUS:
            msg = f"Categorical feature '{self.name}' cannot have op_type continuous"
            raise InvalidParameterError(msg)
        labels = tuple(format_value(value) for value in self.categories)
        if not labels:
            msg = f"Categorical feature '{self.name}' needs at least one category"
            raise InvalidParameterError(msg)
        if len(set(labels)) != len(labels):
            msg = f"Categorical feature '{self.name}' has duplicate categories: {list(labels)}"
            raise InvalidParameterError(msg)
        object.__setattr__(self, "categories", labels)

    @property
    def values(self) -> tuple[str, ...]:
        return self.categories

    def value(self, index: int) -> str:
        return self.categories[index]


@dataclass(frozen=True)
class WildcardFeature(Feature):
    """Feature whose domain is discovered later by a transformer."""

    name: str
    data_type: DataType
    op_type: OpType = OpType.CATEGORICAL


@dataclass(frozen=True)
class BinaryFeature(Feature):
    """
    Indicator for one category of a source feature.

    Carries exactly one domain value and a back-reference to the feature
    it was derived from. It reads the source's field directly; no derived
    field is registered for it.
    """

    source: Feature
    value: str

    op_type: ClassVar[OpType] = OpType.CATEGORICAL

    @property
    def name(self) -> str:  # type: ignore[override]
        return f"{self.source.name}={self.value}"

    @property
    def data_type(self) -> DataType:  # type: ignore[override]
        return self.source.data_type

    @property
    def field_name(self) -> str:
        return self.source.field_name

    @property
    def values(self) -> tuple[str, ...]:
        return (self.value,)


@dataclass(frozen=True)
class LookupFeature(Feature):
    """
    Categorical view of a lookup-table derived field.

    The continuous view is produced on demand from the same field, without
    re-running the mapping.
    """

    name: str
    data_type: DataType
    categories: tuple[str, ...] = ()

    op_type: ClassVar[OpType] = OpType.CATEGORICAL

    @property
    def values(self) -> tuple[str, ...]:
        return self.categories

    def to_continuous(self, registry: "FieldRegistry") -> ContinuousFeature:
        derived = registry.to_continuous(self.name)
        return ContinuousFeature(name=derived.name, data_type=derived.data_type)


@dataclass(frozen=True)
class Schema:
    """
    Model encoder input: one label plus ordered predictor features.

    Attributes:
        label: Target feature.
        features: Predictor features, in pipeline output order.
    """

    label: Feature
    features: tuple[Feature, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", tuple(self.features))

    def feature_names(self) -> list[str]:
        return [feature.name for feature in self.features]
