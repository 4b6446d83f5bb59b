"""
Typed node models for the output scoring document.

The compiler never renders bytes; it builds these frozen Pydantic models
and leaves serialization to `skpmml.document.export`. Polymorphic nodes
(expressions, predicates) carry a literal ``kind`` discriminator so that a
dumped document can be validated back into the same tree.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class OpType(str, Enum):
    """Operational type of a field."""

    CATEGORICAL = "categorical"
    CONTINUOUS = "continuous"
    ORDINAL = "ordinal"


class DataType(str, Enum):
    """Storage type of a field's values."""

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"


class MiningFunction(str, Enum):
    """Function a model performs."""

    CLASSIFICATION = "classification"
    REGRESSION = "regression"


class RuleSelectionCriterion(str, Enum):
    """How a rule set picks among firing rules."""

    FIRST_HIT = "firstHit"
    WEIGHTED_SUM = "weightedSum"
    WEIGHTED_MAX = "weightedMax"


class FieldUsageType(str, Enum):
    """Role of a field in a model's mining schema."""

    ACTIVE = "active"
    TARGET = "target"


class ResultFeature(str, Enum):
    """Kind of value an output field exposes."""

    PREDICTED_VALUE = "predictedValue"
    PROBABILITY = "probability"


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


# Expressions


class FieldRef(_Node):
    """Reference to another field by name."""

    kind: Literal["FieldRef"] = "FieldRef"
    field: str


class FieldColumnPair(_Node):
    """Binds an input field to a column of an inline table."""

    field: str
    column: str


class InlineTable(_Node):
    """Row-major table of formatted cell values."""

    rows: list[dict[str, str]] = Field(default_factory=list)

    def column(self, name: str) -> list[str]:
        """Values of one column, in row order."""
        return [row[name] for row in self.rows if name in row]


class MapValues(_Node):
    """
    Map the current input values through an inline table.

    ``default_value`` applies to inputs with no matching row. When it is
    None, unmatched inputs map to a missing value.
    """

    kind: Literal["MapValues"] = "MapValues"
    field_column_pairs: list[FieldColumnPair]
    output_column: str
    inline_table: InlineTable
    default_value: str | None = None


Expression = Annotated[Union[FieldRef, MapValues], Field(discriminator="kind")]


# Predicates


class SimplePredicate(_Node):
    """Compare one field against a constant, or test it for missingness."""

    kind: Literal["SimplePredicate"] = "SimplePredicate"
    field: str
    operator: Literal[
        "equal",
        "notEqual",
        "lessThan",
        "lessOrEqual",
        "greaterThan",
        "greaterOrEqual",
        "isMissing",
        "isNotMissing",
    ]
    value: str | None = None


class SimpleSetPredicate(_Node):
    """Test field membership in a set of constants."""

    kind: Literal["SimpleSetPredicate"] = "SimpleSetPredicate"
    field: str
    boolean_operator: Literal["isIn", "isNotIn"]
    values: list[str]


class TruePredicate(_Node):
    kind: Literal["True"] = "True"


class FalsePredicate(_Node):
    kind: Literal["False"] = "False"


class CompoundPredicate(_Node):
    """Combine child predicates with a boolean operator."""

    kind: Literal["CompoundPredicate"] = "CompoundPredicate"
    boolean_operator: Literal["and", "or", "xor", "surrogate"]
    predicates: list["Predicate"]


Predicate = Annotated[
    Union[
        SimplePredicate,
        SimpleSetPredicate,
        CompoundPredicate,
        TruePredicate,
        FalsePredicate,
    ],
    Field(discriminator="kind"),
]

CompoundPredicate.model_rebuild()


# Dictionaries


class DataField(_Node):
    """Raw input (or target) field of the scoring pipeline."""

    name: str
    op_type: OpType
    data_type: DataType
    values: list[str] = Field(default_factory=list)


class DerivedField(_Node):
    """Named expression computed from other fields."""

    name: str
    op_type: OpType
    data_type: DataType
    values: list[str] = Field(default_factory=list)
    expression: Expression


# Model


class MiningField(_Node):
    name: str
    usage_type: FieldUsageType = FieldUsageType.ACTIVE


class MiningSchema(_Node):
    """Fields a model reads, target first."""

    mining_fields: list[MiningField] = Field(default_factory=list)

    @property
    def target_field(self) -> str | None:
        for field in self.mining_fields:
            if field.usage_type == FieldUsageType.TARGET:
                return field.name
        return None


class OutputField(_Node):
    name: str
    result_feature: ResultFeature
    op_type: OpType = OpType.CATEGORICAL
    data_type: DataType = DataType.STRING
    value: str | None = None


class SimpleRule(_Node):
    """A predicate and the score it yields when it is the selected rule."""

    predicate: Predicate
    score: str


class RuleSelectionMethod(_Node):
    criterion: RuleSelectionCriterion


class RuleSet(_Node):
    """
    Ordered rule list with its selection method.

    Rule order is significant under first-hit selection. ``default_score``
    and ``default_confidence`` are both None when the rule set has no
    fallback; a record that no rule matches then has no prediction.
    """

    rule_selection_methods: list[RuleSelectionMethod]
    rules: list[SimpleRule] = Field(default_factory=list)
    default_score: str | None = None
    default_confidence: float | None = None


class RuleSetModel(_Node):
    """Rule-set scoring model."""

    kind: Literal["RuleSetModel"] = "RuleSetModel"
    function_name: MiningFunction
    mining_schema: MiningSchema
    rule_set: RuleSet
    output: list[OutputField] = Field(default_factory=list)


# model nodes a document can hold; a single kind needs no discriminator
ModelNode = RuleSetModel


class Header(_Node):
    application: str = "skpmml"
    version: str
    description: str | None = None


class PMMLDocument(_Node):
    """Complete scoring document: dictionaries plus one model."""

    version: str = "4.4"
    header: Header
    data_dictionary: list[DataField]
    transformation_dictionary: list[DerivedField] = Field(default_factory=list)
    model: ModelNode
