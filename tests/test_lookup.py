"""Tests for the lookup-table transformer."""

from collections import OrderedDict

import pytest

from conftest import map_value
from skpmml.document.nodes import DataType, MapValues, OpType
from skpmml.exceptions import (
    ArityError,
    DuplicateFieldError,
    InvalidMappingKeyError,
    InvalidParameterError,
    MissingKeyError,
    UnsupportedFeatureKindError,
)
from skpmml.features import (
    BinaryFeature,
    CategoricalFeature,
    ContinuousFeature,
    FieldRegistry,
    LookupFeature,
    WildcardFeature,
)
from skpmml.transformers import LookupTransformer


def _encode(registry: FieldRegistry, feature, attributes) -> tuple[LookupFeature, MapValues]:
    (result,) = LookupTransformer(attributes).encode_features([feature], registry)
    expression = registry.get_field(result.name).expression
    assert isinstance(expression, MapValues)
    return result, expression


class TestLookupTable:
    """Tests for the emitted inline table."""

    def test_pets_mapping_with_default(self, registry: FieldRegistry, animal: WildcardFeature) -> None:
        """Test the cat/dog/bird mapping with default '0'."""
        result, map_values = _encode(
            registry, animal, {"mapping": {"cat": "1", "dog": "2", "bird": None}, "default_value": "0"}
        )
        assert map_values.inline_table.rows == [
            {"data:input": "cat", "data:output": "1"},
            {"data:input": "dog", "data:output": "2"},
        ]
        assert map_values.default_value == "0"
        assert result.values == ("1", "2", "0")
        assert registry.get_field("lookup(animal)").values == ["1", "2", "0"]
        assert map_value(map_values, "fish") == "0"
        assert map_value(map_values, "bird") == "0"

    def test_round_trip_of_retained_pairs(self, registry: FieldRegistry, animal: WildcardFeature) -> None:
        """Test that every retained key maps to its value and null-valued keys are absent."""
        mapping = {"cat": "feline", "dog": None, "cow": "bovine", "eel": None}
        _, map_values = _encode(registry, animal, {"mapping": mapping})
        for key, value in mapping.items():
            if value is not None:
                assert map_value(map_values, key) == value
        assert map_values.inline_table.column("data:input") == ["cat", "cow"]

    def test_insertion_order_kept(self, registry: FieldRegistry, code: WildcardFeature) -> None:
        """Test that rows follow the mapping's insertion order."""
        mapping = OrderedDict([(3, 30), (1, 10), (2, 20)])
        _, map_values = _encode(registry, code, {"mapping": mapping})
        assert map_values.inline_table.column("data:input") == ["3", "1", "2"]
        assert map_values.inline_table.column("data:output") == ["30", "10", "20"]

    def test_no_default_means_missing(self, registry: FieldRegistry, animal: WildcardFeature) -> None:
        """Test that without a default, unmatched inputs map to missing."""
        _, map_values = _encode(registry, animal, {"mapping": {"cat": "1"}})
        assert map_values.default_value is None
        assert "default_value" in map_values.model_dump()
        assert map_value(map_values, "dog") is None

    def test_empty_mapping(self, registry: FieldRegistry, animal: WildcardFeature) -> None:
        """Test that a mapping emptied by filtering is valid."""
        result, map_values = _encode(registry, animal, {"mapping": {"cat": None}, "default_value": 5})
        assert map_values.inline_table.rows == []
        assert map_values.default_value == "5"
        assert result.data_type == DataType.INTEGER
        assert map_value(map_values, "cat") == "5"

    def test_field_column_pair(self, registry: FieldRegistry, animal: WildcardFeature) -> None:
        """Test that the input field is bound to the input column."""
        _, map_values = _encode(registry, animal, {"mapping": {"cat": "1"}})
        (pair,) = map_values.field_column_pairs
        assert pair.field == "animal"
        assert pair.column == "data:input"
        assert map_values.output_column == "data:output"


class TestNullKeys:
    """Tests for null input keys."""

    @pytest.mark.parametrize("position", [0, 1, 2])
    def test_null_key_rejected_anywhere(
        self, registry: FieldRegistry, animal: WildcardFeature, position: int
    ) -> None:
        """Test that a None key fails regardless of its position."""
        items = [("cat", "1"), ("dog", "2")]
        items.insert(position, (None, "3"))
        with pytest.raises(InvalidMappingKeyError, match=f"entry {position}"):
            LookupTransformer({"mapping": dict(items)}).encode_features([animal], registry)

    def test_null_key_with_null_value_rejected(self, registry: FieldRegistry, animal: WildcardFeature) -> None:
        """Test that a None key fails even when its value would be skipped."""
        with pytest.raises(InvalidMappingKeyError):
            LookupTransformer({"mapping": {None: None}}).encode_features([animal], registry)


class TestDuplicateKeys:
    """Tests for keys that collide in the emitted table."""

    @pytest.mark.parametrize(
        "mapping",
        [
            {1: "x", "1": "y"},
            {"2": "x", 2.0: "y"},
            {1: "x", "1": None},
        ],
    )
    def test_same_text_form_rejected(
        self, registry: FieldRegistry, code: WildcardFeature, mapping: dict
    ) -> None:
        """Test that two keys formatting to the same cell fail, naming both entries."""
        with pytest.raises(InvalidMappingKeyError, match="at entry 1, which has the same text form .* as entry 0"):
            LookupTransformer({"mapping": mapping}).encode_features([code], registry)

    def test_collision_is_a_parameter_error(self, registry: FieldRegistry, code: WildcardFeature) -> None:
        """Test that key collisions can be caught as invalid parameters."""
        with pytest.raises(InvalidParameterError):
            LookupTransformer({"mapping": {1: "x", "1": "y"}}).encode_features([code], registry)

    def test_distinct_keys_each_found(self, registry: FieldRegistry, code: WildcardFeature) -> None:
        """Test that every retained key maps to its own value."""
        mapping = {1: "x", "2": "y", 3.5: "z"}
        _, expression = _encode(registry, code, {"mapping": mapping})
        for key, value in mapping.items():
            assert map_value(expression, key) == value


class TestTypes:
    """Tests for type inference of the derived field."""

    def test_output_type_from_values(self, registry: FieldRegistry, animal: WildcardFeature) -> None:
        """Test that integer outputs give an integer derived field."""
        result, _ = _encode(registry, animal, {"mapping": {"cat": 1, "dog": 2}, "default_value": 0})
        field = registry.get_field(result.name)
        assert field.op_type == OpType.CATEGORICAL
        assert field.data_type == DataType.INTEGER

    def test_mixed_outputs_default_to_string(self, registry: FieldRegistry, animal: WildcardFeature) -> None:
        """Test that mixed output types fall back to string."""
        result, _ = _encode(registry, animal, {"mapping": {"cat": 1, "dog": "two"}})
        assert result.data_type == DataType.STRING

    def test_empty_outputs_default_to_string(self, registry: FieldRegistry, animal: WildcardFeature) -> None:
        """Test that no observed outputs fall back to string."""
        result, _ = _encode(registry, animal, {"mapping": {}})
        assert result.data_type == DataType.STRING

    def test_declared_input_types(self) -> None:
        """Test the types declared for raw inputs, inferred from keys."""
        assert LookupTransformer({"mapping": {1: "a"}}).data_type == DataType.INTEGER
        assert LookupTransformer({"mapping": {"x": "a"}}).data_type == DataType.STRING
        assert LookupTransformer({"mapping": {}}).op_type == OpType.CATEGORICAL


class TestLookupFeature:
    """Tests for the returned feature and its continuous view."""

    def test_continuous_view(self, registry: FieldRegistry, animal: WildcardFeature) -> None:
        """Test promotion to continuous without a second lookup table."""
        result, _ = _encode(registry, animal, {"mapping": {"cat": 1, "dog": 2}})
        continuous = result.to_continuous(registry)
        assert isinstance(continuous, ContinuousFeature)
        assert continuous.name == "continuous(lookup(animal))"
        derived = registry.derived_fields()
        assert [field.name for field in derived] == ["lookup(animal)", "continuous(lookup(animal))"]
        assert sum(isinstance(field.expression, MapValues) for field in derived) == 1

    def test_chained_on_continuous_input(self, registry: FieldRegistry, income: ContinuousFeature) -> None:
        """Test that lookup accepts any single non-indicator feature."""
        result, map_values = _encode(registry, income, {"mapping": {1.0: "one"}})
        assert result.name == "lookup(income)"
        assert map_values.inline_table.rows == [{"data:input": "1", "data:output": "one"}]


class TestContract:
    """Tests for the input contract."""

    def test_requires_exactly_one_feature(
        self, registry: FieldRegistry, animal: WildcardFeature, code: WildcardFeature
    ) -> None:
        """Test that two inputs raise ArityError."""
        with pytest.raises(ArityError):
            LookupTransformer({"mapping": {}}).encode_features([animal, code], registry)

    def test_mapping_required(self, registry: FieldRegistry, animal: WildcardFeature) -> None:
        """Test that a missing mapping raises MissingKeyError."""
        with pytest.raises(MissingKeyError, match="mapping"):
            LookupTransformer({}).encode_features([animal], registry)

    def test_indicator_input_unsupported(self, registry: FieldRegistry, color: CategoricalFeature) -> None:
        """Test that a binary indicator cannot be looked up."""
        with pytest.raises(UnsupportedFeatureKindError):
            LookupTransformer({"mapping": {}}).encode_features(
                [BinaryFeature(source=color, value="red")], registry
            )

    def test_same_input_twice(self, registry: FieldRegistry, animal: WildcardFeature) -> None:
        """Test that a second lookup over the same feature collides."""
        LookupTransformer({"mapping": {}}).encode_features([animal], registry)
        with pytest.raises(DuplicateFieldError, match="lookup\\(animal\\)"):
            LookupTransformer({"mapping": {}}).encode_features([animal], registry)
