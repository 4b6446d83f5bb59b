"""
Errors raised while compiling a model description.

Compilation is one-shot and fail-fast: every error carries enough context
(transformer or model identity, feature name, parameter key) to locate the
faulty construct in the source model. Nothing here is retryable.
"""


class CompilationError(ValueError):
    """Base exception for all compilation errors."""


class ArityError(CompilationError):
    """Raised when a transformer receives the wrong number of input features."""


class CardinalityError(CompilationError):
    """Raised when a category universe disagrees with a feature's known domain."""


class UnsupportedFeatureKindError(CompilationError):
    """Raised when a transformer has no behavior for the given feature variant."""


class MissingKeyError(CompilationError, KeyError):
    """Raised when a required parameter key is absent."""

    def __str__(self) -> str:
        # KeyError would quote the message
        return str(self.args[0]) if self.args else ""


class InvalidParameterError(CompilationError):
    """Raised when a parameter value has the wrong shape or type."""


class InvalidMappingKeyError(InvalidParameterError):
    """Raised when a lookup mapping has a null input key, or two keys with the same text form."""


class PredicateSyntaxError(CompilationError):
    """
    Raised when a predicate string cannot be translated.

    Attributes:
        rule_index: 1-based position of the offending rule, when known.
    """

    def __init__(self, message: str, rule_index: int | None = None) -> None:
        super().__init__(message)
        self.rule_index = rule_index


class DuplicateFieldError(CompilationError):
    """Raised when a field name is registered twice."""


class UnknownFieldError(CompilationError, KeyError):
    """Raised when a field or feature name cannot be resolved."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class UnsupportedOutputError(CompilationError):
    """Raised when a model is asked for an output it cannot produce."""
