"""
Lookup-table mapping of a single input.

The learned ``mapping`` becomes an inline table of a MapValues derived
field. Entries mapping to None are dropped. A None key is invalid, and so
are two keys with the same text form (such as 1 and "1").
``default_value``, when present, covers inputs without a row; otherwise
such inputs map to a missing value.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from skpmml.document.nodes import (
    DataType,
    FieldColumnPair,
    InlineTable,
    MapValues,
    OpType,
)
from skpmml.exceptions import InvalidMappingKeyError
from skpmml.features.registry import FieldRegistry
from skpmml.features.types import BinaryFeature, Feature, LookupFeature
from skpmml.transformers.base import Transformer
from skpmml.utils.logging import get_logger
from skpmml.utils.values import format_value, infer_data_type, to_python

log = get_logger(__name__)

INPUT_COLUMN = "data:input"
OUTPUT_COLUMN = "data:output"


class LookupTransformer(Transformer):
    """Map one input feature through a learned value table."""

    @property
    def op_type(self) -> OpType:
        return OpType.CATEGORICAL

    @property
    def data_type(self) -> DataType:
        return infer_data_type(self.get_mapping().keys(), DataType.STRING)

    def get_mapping(self) -> Mapping[Any, Any]:
        return self.attributes.get_mapping("mapping")

    def get_default_value(self) -> Any:
        return self.attributes.get_optional("default_value")

    def encode_features(
        self,
        features: Sequence[Feature],
        registry: FieldRegistry,
    ) -> list[Feature]:
        mapping = self.get_mapping()
        default_value = self.get_default_value()

        self._check_arity(features, 1)
        feature = features[0]
        if isinstance(feature, BinaryFeature):
            raise self._unsupported(feature)

        input_values, output_values = self.parse_mapping(mapping)

        map_values = MapValues(
            field_column_pairs=[FieldColumnPair(field=feature.field_name, column=INPUT_COLUMN)],
            output_column=OUTPUT_COLUMN,
            inline_table=InlineTable(
                rows=[
                    {INPUT_COLUMN: format_value(k), OUTPUT_COLUMN: format_value(v)}
                    for k, v in zip(input_values, output_values)
                ]
            ),
            default_value=format_value(default_value) if default_value is not None else None,
        )

        domain = list(output_values)
        if default_value is not None:
            domain.append(default_value)
        categories = list(dict.fromkeys(format_value(value) for value in domain))

        derived_field = registry.create_derived_field(
            f"lookup({feature.name})",
            OpType.CATEGORICAL,
            infer_data_type(domain, DataType.STRING),
            map_values,
            inputs=(feature.field_name,),
            values=categories,
        )

        log.debug(
            "Registered lookup table",
            feature=feature.name,
            rows=len(input_values),
            has_default=default_value is not None,
        )
        return [
            LookupFeature(
                name=derived_field.name,
                data_type=derived_field.data_type,
                categories=tuple(categories),
            )
        ]

    def parse_mapping(self, mapping: Mapping[Any, Any]) -> tuple[list[Any], list[Any]]:
        """
        Split a mapping into parallel input and output columns.

        Returns:
            Tuple of (input values, output values), in mapping order.

        Raises:
            InvalidMappingKeyError: If any key is None, or two keys format
                to the same table cell.
        """
        input_values: list[Any] = []
        output_values: list[Any] = []
        seen: dict[str, int] = {}

        for position, (input_value, output_value) in enumerate(mapping.items()):
            input_value = to_python(input_value)
            output_value = to_python(output_value)

            if input_value is None:
                msg = f"{self.name}.mapping has a null input key at entry {position}"
                raise InvalidMappingKeyError(msg)

            # 1, 1.0 and "1" all become the same table cell
            key = format_value(input_value)
            if key in seen:
                msg = (
                    f"{self.name}.mapping has input key {input_value!r} at entry {position}, "
                    f"which has the same text form '{key}' as entry {seen[key]}"
                )
                raise InvalidMappingKeyError(msg)
            seen[key] = position

            if output_value is None:
                continue

            input_values.append(input_value)
            output_values.append(output_value)

        return input_values, output_values
