"""
Per-compilation field registry.

Holds the data fields (raw inputs and the target) and the derived fields
registered by transformers. One registry belongs to one compilation and is
passed explicitly through the call chain, so later stages can reference
fields created by earlier ones by name.
"""

from collections.abc import Iterable, Sequence

from skpmml.document.nodes import (
    DataField,
    DataType,
    DerivedField,
    Expression,
    FieldRef,
    OpType,
)
from skpmml.exceptions import CardinalityError, DuplicateFieldError, UnknownFieldError
from skpmml.features.types import BinaryFeature, CategoricalFeature, Feature, WildcardFeature
from skpmml.utils.logging import get_logger
from skpmml.utils.values import format_value

log = get_logger(__name__)


class FieldRegistry:
    """
    Append-only table of data fields and derived fields.

    Field names are unique across both tables. Derived field definitions
    are never modified once registered. A data field declared without a
    domain may have its domain fixed exactly once, when a wildcard feature
    over it is materialized into a categorical one.
    """

    def __init__(self) -> None:
        self._data_fields: dict[str, DataField] = {}
        self._derived_fields: dict[str, DerivedField] = {}
        self._inputs: dict[str, tuple[str, ...]] = {}
        self._materialized: dict[str, CategoricalFeature] = {}

    def _check_unique(self, name: str) -> None:
        if self.has_field(name):
            msg = f"Field '{name}' is already registered"
            raise DuplicateFieldError(msg)

    def has_field(self, name: str) -> bool:
        """Whether a data or derived field with this name exists."""
        return name in self._data_fields or name in self._derived_fields

    def get_field(self, name: str) -> DataField | DerivedField:
        """
        Get a field by name.

        Raises:
            UnknownFieldError: If no field has this name.
        """
        if name in self._data_fields:
            return self._data_fields[name]
        if name in self._derived_fields:
            return self._derived_fields[name]
        available = ", ".join([*self._data_fields, *self._derived_fields])
        msg = f"Unknown field '{name}'. Available: {available}"
        raise UnknownFieldError(msg)

    def create_data_field(
        self,
        name: str,
        op_type: OpType,
        data_type: DataType,
        values: Sequence[object] = (),
    ) -> DataField:
        """
        Register a raw input or target field.

        Args:
            name: Field name.
            op_type: Operational type.
            data_type: Storage type.
            values: Optional ordered domain.

        Returns:
            The registered field.
        """
        self._check_unique(name)
        data_field = DataField(
            name=name,
            op_type=op_type,
            data_type=data_type,
            values=[format_value(value) for value in values],
        )
        self._data_fields[name] = data_field
        log.debug("Registered data field", name=name, op_type=op_type.value)
        return data_field

    def create_derived_field(
        self,
        name: str,
        op_type: OpType,
        data_type: DataType,
        expression: Expression,
        inputs: Iterable[str],
        values: Sequence[object] = (),
    ) -> DerivedField:
        """
        Register a derived field.

        Args:
            name: Field name.
            op_type: Operational type of the result.
            data_type: Storage type of the result.
            expression: Expression computing the field.
            inputs: Names of the fields the expression reads.
            values: Optional ordered domain of the result.

        Returns:
            The registered field.

        Raises:
            DuplicateFieldError: If the name is taken.
            UnknownFieldError: If an input field is not registered.
        """
        self._check_unique(name)
        inputs = tuple(inputs)
        for input_name in inputs:
            self.get_field(input_name)

        derived_field = DerivedField(
            name=name,
            op_type=op_type,
            data_type=data_type,
            values=[format_value(value) for value in values],
            expression=expression,
        )
        self._derived_fields[name] = derived_field
        self._inputs[name] = inputs
        log.debug(
            "Registered derived field",
            name=name,
            op_type=op_type.value,
            data_type=data_type.value,
        )
        return derived_field

    def to_continuous(self, name: str) -> DataField | DerivedField:
        """
        Get a continuous view of a field.

        Returns the field itself when it is already continuous. Otherwise a
        derived field ``continuous(name)`` referencing it is registered on
        first use and reused afterwards.
        """
        field = self.get_field(name)
        if field.op_type == OpType.CONTINUOUS:
            return field

        continuous_name = f"continuous({name})"
        if continuous_name in self._derived_fields:
            return self._derived_fields[continuous_name]

        data_type = field.data_type
        if data_type not in (DataType.INTEGER, DataType.FLOAT):
            data_type = DataType.FLOAT

        return self.create_derived_field(
            continuous_name,
            OpType.CONTINUOUS,
            data_type,
            FieldRef(field=name),
            inputs=(name,),
        )

    def materialize_categorical(
        self,
        feature: WildcardFeature,
        categories: Sequence[str],
    ) -> CategoricalFeature:
        """
        Fix the domain of a wildcard feature's data field.

        Materializing the same feature again with the same categories
        returns the existing categorical feature.

        Raises:
            CardinalityError: If the field's domain was already fixed to
                different categories.
        """
        categorical = CategoricalFeature(
            name=feature.name,
            data_type=feature.data_type,
            categories=tuple(categories),
            op_type=feature.op_type,
        )

        existing = self._materialized.get(feature.name)
        if existing is not None:
            if existing.categories != categorical.categories:
                msg = (
                    f"Domain of '{feature.name}' is already fixed to "
                    f"{list(existing.categories)}, cannot change it to {list(categorical.categories)}"
                )
                raise CardinalityError(msg)
            return existing

        data_field = self._data_fields.get(feature.field_name)
        if data_field is None:
            msg = f"Wildcard feature '{feature.name}' has no data field"
            raise UnknownFieldError(msg)
        if data_field.values:
            msg = f"Data field '{data_field.name}' already has a domain of {len(data_field.values)} values"
            raise CardinalityError(msg)

        self._data_fields[data_field.name] = data_field.model_copy(
            update={"op_type": feature.op_type, "values": list(categorical.categories)}
        )
        self._materialized[feature.name] = categorical
        log.debug(
            "Materialized wildcard feature",
            name=feature.name,
            n_categories=len(categorical.categories),
        )
        return categorical

    def resolve(self, feature: Feature) -> Feature:
        """
        Return the current typed version of a feature.

        Wildcards that were materialized come back as categorical features;
        binary features are re-pointed at their materialized source.
        """
        if isinstance(feature, WildcardFeature):
            return self._materialized.get(feature.name, feature)
        if isinstance(feature, BinaryFeature):
            source = self.resolve(feature.source)
            if source is not feature.source:
                return BinaryFeature(source=source, value=feature.value)
        return feature

    def data_fields(self) -> list[DataField]:
        """Registered data fields, in registration order."""
        return list(self._data_fields.values())

    def derived_fields(self) -> list[DerivedField]:
        """Registered derived fields, in registration order."""
        return list(self._derived_fields.values())

    def active_fields(self, features: Iterable[Feature]) -> list[str]:
        """
        Names of the data fields the given features ultimately read.

        Derived fields are followed to their inputs. Order is first
        reference, without duplicates.
        """
        result: list[str] = []

        def visit(name: str) -> None:
            if name in self._data_fields:
                if name not in result:
                    result.append(name)
                return
            self.get_field(name)
            for input_name in self._inputs[name]:
                visit(input_name)

        for feature in features:
            visit(feature.field_name)
        return result
