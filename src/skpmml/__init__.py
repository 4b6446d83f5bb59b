"""
skpmml: compile fitted model attributes into PMML-style scoring documents.

This package turns the learned attributes of preprocessing transformers
(one-hot encoders, lookup tables) and rule-set classifiers into a typed
feature graph plus a model node that consumes it.
"""

from importlib.metadata import version

__version__ = version("skpmml")

__all__ = ["__version__"]
