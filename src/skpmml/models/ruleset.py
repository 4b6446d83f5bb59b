"""
Rule-set classifier encoding.

Rules are ``(predicate, score)`` pairs evaluated in order with first-hit
selection: the first rule whose predicate holds gives the score. When no
rule fires, ``default_score`` applies with full confidence; without a
default score an unmatched record has no prediction.
"""

from typing import Any

from skpmml.document.nodes import (
    RuleSelectionCriterion,
    RuleSelectionMethod,
    RuleSet,
    RuleSetModel,
    SimpleRule,
)
from skpmml.exceptions import PredicateSyntaxError
from skpmml.features.registry import FieldRegistry
from skpmml.features.types import Schema
from skpmml.models.base import Classifier
from skpmml.params import extract_element
from skpmml.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_CONFIDENCE = 1.0


class RuleSetClassifier(Classifier):
    """
    Encode an ordered rule list as a first-hit rule-set model.

    Learned attributes are ``rules`` and an optional ``default_score``.
    Each rule's predicate goes through the encoder's translator.
    """

    @property
    def has_probability_distribution(self) -> bool:
        return False

    @property
    def classes(self) -> list[str]:
        return []

    def get_default_score(self) -> str | None:
        return self.attributes.get_optional_string("default_score")

    def get_rules(self) -> list[tuple[Any, ...]]:
        return self.attributes.get_tuple_list("rules")

    def encode_model(
        self,
        schema: Schema,
        registry: FieldRegistry,
        probabilities: bool = False,
    ) -> RuleSetModel:
        default_score = self.get_default_score()
        rules = self.get_rules()

        simple_rules = []
        for position, rule in enumerate(rules, start=1):
            where = f"{self.name}.rules[{position}]"
            predicate = extract_element(rule, 0, str, where)
            score = extract_element(rule, 1, str, where)

            try:
                translated = self.translator(predicate, schema.features)
            except PredicateSyntaxError as e:
                msg = f"{where}: {e}"
                raise PredicateSyntaxError(msg, rule_index=position) from e

            simple_rules.append(SimpleRule(predicate=translated, score=score))

        rule_set = RuleSet(
            rule_selection_methods=[RuleSelectionMethod(criterion=RuleSelectionCriterion.FIRST_HIT)],
            rules=simple_rules,
            default_score=default_score,
            default_confidence=DEFAULT_CONFIDENCE if default_score is not None else None,
        )

        log.info(
            "Encoded rule set",
            rules=len(simple_rules),
            has_default=default_score is not None,
        )
        return RuleSetModel(
            function_name=self.mining_function,
            mining_schema=self.encode_mining_schema(schema, registry),
            rule_set=rule_set,
            output=self.encode_output(schema, probabilities=probabilities),
        )
