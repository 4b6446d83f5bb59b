"""Basic package tests to verify installation."""


def test_package_imports() -> None:
    """Verify the main package can be imported."""
    import skpmml

    assert skpmml.__version__


def test_config_module_imports() -> None:
    """Verify config module structure is correct."""
    from skpmml.config import (
        CompilerConfig,
        InputFieldSpec,
        LabelSpec,
        ModelSpec,
        PipelineSpec,
        StepSpec,
        load_config,
    )

    assert CompilerConfig is not None
    assert InputFieldSpec is not None
    assert LabelSpec is not None
    assert ModelSpec is not None
    assert PipelineSpec is not None
    assert StepSpec is not None
    assert load_config is not None


def test_transformer_and_model_factories() -> None:
    """Verify factories resolve both short and class-style kinds."""
    from skpmml.models import RuleSetClassifier, create_model_encoder
    from skpmml.transformers import LookupTransformer, OneHotEncoder, create_transformer

    assert isinstance(create_transformer("one_hot"), OneHotEncoder)
    assert isinstance(create_transformer("OneHotEncoder"), OneHotEncoder)
    assert isinstance(create_transformer("lookup"), LookupTransformer)
    assert isinstance(create_model_encoder("RuleSetClassifier"), RuleSetClassifier)


def test_unknown_kinds_rejected() -> None:
    """Verify factories reject unknown kinds with the valid choices."""
    import pytest

    from skpmml.models import create_model_encoder
    from skpmml.transformers import create_transformer

    with pytest.raises(ValueError, match="Valid kinds"):
        create_transformer("scaler")
    with pytest.raises(ValueError, match="Valid kinds"):
        create_model_encoder("tree")


def test_model_encoders_share_base() -> None:
    """Verify every registered model encoder takes attributes and a translator."""
    from skpmml.document.nodes import TruePredicate
    from skpmml.models import MODEL_ENCODERS, ModelEncoder, create_model_encoder

    def translator(text, features):  # type: ignore[no-untyped-def]
        return TruePredicate()

    for kind, encoder_class in MODEL_ENCODERS.items():
        assert issubclass(encoder_class, ModelEncoder)
        encoder = create_model_encoder(kind, {"rules": []}, translator=translator)
        assert encoder.translator is translator
