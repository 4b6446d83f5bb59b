"""
Translation of predicate strings into predicate nodes.

Rule-set models store their conditions as Python boolean expressions over
the feature matrix ``X``, for example::

    X["color"] == "red" and X[1] > 3.5

Features are referenced by position (``X[0]``) or by name (``X["color"]``)
within the schema's predictor features. Model encoders receive the
translator as a plain callable so it can be swapped out in tests.
"""

import ast
from collections.abc import Callable, Sequence
from typing import Any

from skpmml.document.nodes import (
    CompoundPredicate,
    FalsePredicate,
    Predicate,
    SimplePredicate,
    SimpleSetPredicate,
    TruePredicate,
)
from skpmml.exceptions import PredicateSyntaxError
from skpmml.features.types import BinaryFeature, Feature
from skpmml.utils.values import format_value

PredicateTranslator = Callable[[str, Sequence[Feature]], Predicate]

MATRIX_NAME = "X"

_COMPARISONS: dict[type[ast.cmpop], str] = {
    ast.Eq: "equal",
    ast.NotEq: "notEqual",
    ast.Lt: "lessThan",
    ast.LtE: "lessOrEqual",
    ast.Gt: "greaterThan",
    ast.GtE: "greaterOrEqual",
}

# operator to use when the feature sits on the right-hand side
_MIRRORED = {
    "equal": "equal",
    "notEqual": "notEqual",
    "lessThan": "greaterThan",
    "lessOrEqual": "greaterOrEqual",
    "greaterThan": "lessThan",
    "greaterOrEqual": "lessOrEqual",
}

_NEGATED = {
    "equal": "notEqual",
    "notEqual": "equal",
    "lessThan": "greaterOrEqual",
    "lessOrEqual": "greaterThan",
    "greaterThan": "lessOrEqual",
    "greaterOrEqual": "lessThan",
    "isMissing": "isNotMissing",
    "isNotMissing": "isMissing",
    "isIn": "isNotIn",
    "isNotIn": "isIn",
}


def translate_predicate(text: str, features: Sequence[Feature]) -> Predicate:
    """
    Translate a predicate string into a predicate node.

    Args:
        text: Python boolean expression over ``X``.
        features: Features the expression may reference.

    Returns:
        Predicate node.

    Raises:
        PredicateSyntaxError: If the text is malformed, uses an unsupported
            construct or references an unknown feature.
    """
    try:
        tree = ast.parse(text.strip(), mode="eval")
    except SyntaxError as e:
        msg = f"Invalid predicate {text!r}: {e.msg}"
        raise PredicateSyntaxError(msg) from e
    return _PredicateBuilder(text, features).build(tree.body)


class _PredicateBuilder:
    def __init__(self, text: str, features: Sequence[Feature]) -> None:
        self.text = text
        self.features = list(features)

    def _error(self, message: str) -> PredicateSyntaxError:
        return PredicateSyntaxError(f"{message} in predicate {self.text!r}")

    def build(self, node: ast.expr) -> Predicate:
        if isinstance(node, ast.BoolOp):
            operator = "and" if isinstance(node.op, ast.And) else "or"
            return CompoundPredicate(
                boolean_operator=operator,
                predicates=[self.build(value) for value in node.values],
            )
        if isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.Not):
            return self._negate(self.build(node.operand))
        if isinstance(node, ast.Constant) and isinstance(node.value, bool):
            return TruePredicate() if node.value else FalsePredicate()
        if isinstance(node, ast.Compare):
            operands = [node.left, *node.comparators]
            predicates = [
                self._comparison(operands[i], op, operands[i + 1])
                for i, op in enumerate(node.ops)
            ]
            if len(predicates) == 1:
                return predicates[0]
            return CompoundPredicate(boolean_operator="and", predicates=predicates)
        raise self._error(f"Unsupported expression {type(node).__name__}")

    def _negate(self, predicate: Predicate) -> Predicate:
        if isinstance(predicate, TruePredicate):
            return FalsePredicate()
        if isinstance(predicate, FalsePredicate):
            return TruePredicate()
        if isinstance(predicate, SimplePredicate):
            return predicate.model_copy(update={"operator": _NEGATED[predicate.operator]})
        if isinstance(predicate, SimpleSetPredicate):
            return predicate.model_copy(
                update={"boolean_operator": _NEGATED[predicate.boolean_operator]}
            )
        if predicate.boolean_operator in ("and", "or"):
            return CompoundPredicate(
                boolean_operator="or" if predicate.boolean_operator == "and" else "and",
                predicates=[self._negate(child) for child in predicate.predicates],
            )
        raise self._error(f"Cannot negate '{predicate.boolean_operator}' predicate")

    def _feature(self, node: ast.expr) -> Feature | None:
        """Feature referenced by ``X[...]``, or None if node is no reference."""
        if not (
            isinstance(node, ast.Subscript)
            and isinstance(node.value, ast.Name)
            and node.value.id == MATRIX_NAME
        ):
            return None

        key = self._literal(node.slice)
        if isinstance(key, int) and not isinstance(key, bool):
            if not 0 <= key < len(self.features):
                raise self._error(
                    f"Feature index {key} out of range for {len(self.features)} features"
                )
            return self.features[key]
        if isinstance(key, str):
            for feature in self.features:
                if feature.name == key:
                    return feature
            available = ", ".join(feature.name for feature in self.features)
            raise self._error(f"Unknown feature {key!r} (available: {available})")
        raise self._error(f"Invalid feature reference {ast.unparse(node)}")

    def _literal(self, node: ast.expr) -> Any:
        try:
            return ast.literal_eval(node)
        except (ValueError, TypeError) as e:
            raise self._error(f"Expected a literal, got {ast.unparse(node)}") from e

    def _comparison(self, left: ast.expr, op: ast.cmpop, right: ast.expr) -> Predicate:
        feature = self._feature(left)
        other = right
        mirrored = False
        if feature is None:
            feature = self._feature(right)
            other = left
            mirrored = True
        if feature is None:
            raise self._error(f"Comparison without feature reference: {ast.unparse(left)}")
        if self._feature(other) is not None:
            raise self._error("Comparisons between two features are not supported")

        if isinstance(op, (ast.Is, ast.IsNot)):
            if self._literal(other) is not None:
                raise self._error("Identity tests are only supported against None")
            operator = "isMissing" if isinstance(op, ast.Is) else "isNotMissing"
            return SimplePredicate(field=feature.field_name, operator=operator)

        if isinstance(op, (ast.In, ast.NotIn)):
            # sets are rejected: their iteration order is not the source order
            if mirrored or not isinstance(other, (ast.List, ast.Tuple)):
                raise self._error(
                    "Membership tests need a feature on the left and a list or tuple on the right"
                )
            if isinstance(feature, BinaryFeature):
                raise self._error(f"Membership test on indicator feature {feature.name!r}")
            values = [format_value(self._literal(element)) for element in other.elts]
            return SimpleSetPredicate(
                field=feature.field_name,
                boolean_operator="isIn" if isinstance(op, ast.In) else "isNotIn",
                values=values,
            )

        operator = _COMPARISONS.get(type(op))
        if operator is None:
            raise self._error(f"Unsupported operator {type(op).__name__}")
        if mirrored:
            operator = _MIRRORED[operator]

        value = self._literal(other)
        if value is None:
            raise self._error("Use 'is None' to test for missing values")

        if isinstance(feature, BinaryFeature):
            return self._indicator(feature, operator, value)
        return SimplePredicate(field=feature.field_name, operator=operator, value=format_value(value))

    def _indicator(self, feature: BinaryFeature, operator: str, value: Any) -> Predicate:
        # X["color=red"] == 1 tests the source field for the indicated category
        if operator not in ("equal", "notEqual") or value not in (0, 1):
            raise self._error(f"Indicator feature {feature.name!r} can only be compared with 0 or 1")
        hit = (operator == "equal") == (value == 1)
        return SimplePredicate(
            field=feature.field_name,
            operator="equal" if hit else "notEqual",
            value=feature.value,
        )
