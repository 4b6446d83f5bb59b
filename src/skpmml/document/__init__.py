"""
Output document model.

Frozen Pydantic nodes describing the data dictionary, the transformation
dictionary and the model of a compiled scoring pipeline.
"""

from skpmml.document.export import dump_document, load_document, write_document
from skpmml.document.nodes import (
    CompoundPredicate,
    DataField,
    DataType,
    DerivedField,
    FalsePredicate,
    FieldColumnPair,
    FieldRef,
    FieldUsageType,
    Header,
    InlineTable,
    MapValues,
    MiningField,
    MiningFunction,
    MiningSchema,
    ModelNode,
    OpType,
    OutputField,
    PMMLDocument,
    Predicate,
    ResultFeature,
    RuleSelectionCriterion,
    RuleSelectionMethod,
    RuleSet,
    RuleSetModel,
    SimplePredicate,
    SimpleRule,
    SimpleSetPredicate,
    TruePredicate,
)

__all__ = [
    "CompoundPredicate",
    "DataField",
    "DataType",
    "DerivedField",
    "FalsePredicate",
    "FieldColumnPair",
    "FieldRef",
    "FieldUsageType",
    "Header",
    "InlineTable",
    "MapValues",
    "MiningField",
    "MiningFunction",
    "MiningSchema",
    "ModelNode",
    "OpType",
    "OutputField",
    "PMMLDocument",
    "Predicate",
    "ResultFeature",
    "RuleSelectionCriterion",
    "RuleSelectionMethod",
    "RuleSet",
    "RuleSetModel",
    "SimplePredicate",
    "SimpleRule",
    "SimpleSetPredicate",
    "TruePredicate",
    "dump_document",
    "load_document",
    "write_document",
]
