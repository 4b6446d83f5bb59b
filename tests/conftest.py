"""Pytest configuration and shared fixtures."""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

from skpmml.document.nodes import (
    CompoundPredicate,
    DataType,
    FalsePredicate,
    MapValues,
    OpType,
    Predicate,
    RuleSet,
    SimplePredicate,
    SimpleSetPredicate,
    TruePredicate,
)
from skpmml.features import (
    CategoricalFeature,
    ContinuousFeature,
    Feature,
    FieldRegistry,
    WildcardFeature,
)


@pytest.fixture
def registry() -> FieldRegistry:
    """Return an empty field registry."""
    return FieldRegistry()


@pytest.fixture
def color(registry: FieldRegistry) -> CategoricalFeature:
    """Categorical input with a known three-value domain."""
    registry.create_data_field("color", OpType.CATEGORICAL, DataType.STRING, ["red", "green", "blue"])
    return CategoricalFeature(name="color", data_type=DataType.STRING, categories=("red", "green", "blue"))


@pytest.fixture
def code(registry: FieldRegistry) -> WildcardFeature:
    """Integer input whose domain is not known yet."""
    registry.create_data_field("code", OpType.CATEGORICAL, DataType.INTEGER)
    return WildcardFeature(name="code", data_type=DataType.INTEGER)


@pytest.fixture
def animal(registry: FieldRegistry) -> WildcardFeature:
    """String input whose domain is not known yet."""
    registry.create_data_field("animal", OpType.CATEGORICAL, DataType.STRING)
    return WildcardFeature(name="animal", data_type=DataType.STRING)


@pytest.fixture
def income(registry: FieldRegistry) -> ContinuousFeature:
    """Continuous input."""
    registry.create_data_field("income", OpType.CONTINUOUS, DataType.FLOAT)
    return ContinuousFeature(name="income", data_type=DataType.FLOAT)


@pytest.fixture
def pipeline_dict() -> dict[str, Any]:
    """Pipeline section of a configuration, as loaded from YAML."""
    return {
        "inputs": [
            {"name": "animal", "op_type": "categorical", "data_type": "string"},
            {"name": "code"},
            {"name": "income", "op_type": "continuous"},
        ],
        "steps": [
            {
                "transformer": "lookup",
                "columns": ["animal"],
                "attributes": {
                    "mapping": {"cat": "1", "dog": "2", "bird": None},
                    "default_value": "0",
                },
            },
            {
                "transformer": "one_hot",
                "columns": ["code"],
                "attributes": {"n_values_": [8], "n_values": "auto", "active_features_": [1, 4, 7]},
            },
        ],
        "label": {"name": "risk", "data_type": "string"},
        "model": {
            "kind": "rule_set",
            "attributes": {
                "rules": [
                    ['X["lookup(animal)"] == "1"', "high"],
                    ['X["code=4"] == 1 and X["income"] > 1000', "medium"],
                ],
                "default_score": "low",
            },
        },
    }


@pytest.fixture
def config_file(tmp_path: Path, pipeline_dict: dict[str, Any]) -> Path:
    """Write a complete configuration file and return its path."""
    import yaml

    path = tmp_path / "pipeline.yaml"
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump({"project": "pets", "pipeline": pipeline_dict}, f, sort_keys=False)
    return path


# Stub evaluation of emitted nodes. Scoring is not part of the package;
# these helpers only check that emitted nodes mean what they should.


def _compare(operator: str, actual: Any, expected: str) -> bool:
    if operator == "equal":
        return str(actual) == expected
    if operator == "notEqual":
        return str(actual) != expected
    left, right = float(actual), float(expected)
    return {
        "lessThan": left < right,
        "lessOrEqual": left <= right,
        "greaterThan": left > right,
        "greaterOrEqual": left >= right,
    }[operator]


def evaluate_predicate(predicate: Predicate, record: Mapping[str, Any]) -> bool:
    """Evaluate a predicate node against a record of field values."""
    if isinstance(predicate, TruePredicate):
        return True
    if isinstance(predicate, FalsePredicate):
        return False
    if isinstance(predicate, SimplePredicate):
        value = record.get(predicate.field)
        if predicate.operator == "isMissing":
            return value is None
        if predicate.operator == "isNotMissing":
            return value is not None
        if value is None:
            return False
        return _compare(predicate.operator, value, predicate.value)
    if isinstance(predicate, SimpleSetPredicate):
        value = record.get(predicate.field)
        if value is None:
            return False
        found = str(value) in predicate.values
        return found if predicate.boolean_operator == "isIn" else not found
    if isinstance(predicate, CompoundPredicate):
        results = [evaluate_predicate(child, record) for child in predicate.predicates]
        return all(results) if predicate.boolean_operator == "and" else any(results)
    raise TypeError(predicate)


def first_hit(rule_set: RuleSet, record: Mapping[str, Any]) -> str | None:
    """Score of the first firing rule, else the default score (may be None)."""
    for rule in rule_set.rules:
        if evaluate_predicate(rule.predicate, record):
            return rule.score
    return rule_set.default_score


def map_value(map_values: MapValues, value: Any) -> str | None:
    """Look a value up in a MapValues table; None means missing."""
    input_column = map_values.field_column_pairs[0].column
    for row in map_values.inline_table.rows:
        if row[input_column] == str(value):
            return row[map_values.output_column]
    return map_values.default_value


def names(features: Sequence[Feature]) -> list[str]:
    return [feature.name for feature in features]
