"""
Value normalization, formatting and data type inference.

Attribute dictionaries may carry numpy arrays and scalars; everything is
normalized to plain Python values before it reaches a document node.
"""

import math
from collections.abc import Iterable
from typing import Any

import numpy as np

from skpmml.document.nodes import DataType
from skpmml.exceptions import InvalidParameterError


def to_python(value: Any) -> Any:
    """Convert numpy arrays and scalars to Python lists and scalars."""
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    return value


def _value_type(value: Any) -> DataType | None:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return DataType.BOOLEAN
    if isinstance(value, int):
        return DataType.INTEGER
    if isinstance(value, float):
        return DataType.FLOAT
    if isinstance(value, str):
        return DataType.STRING
    return None


def infer_data_type(values: Iterable[Any], default: DataType) -> DataType:
    """
    Infer the data type shared by all values.

    Args:
        values: Observed values.
        default: Type returned when values are empty, mixed or unrecognized.

    Returns:
        The common data type, or ``default``.
    """
    types = {_value_type(to_python(value)) for value in values}
    if len(types) != 1 or None in types:
        return default
    return types.pop()


def format_value(value: Any) -> str:
    """
    Format a value as its canonical string form.

    Integral floats lose their fractional part (``1.0`` -> ``"1"``),
    booleans are lower case.
    """
    value = to_python(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def as_int(value: Any) -> int:
    """
    Convert an integral number to int.

    Raises:
        InvalidParameterError: If the value is not an integral number.
    """
    value = to_python(value)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"Expected an integral number, got {type(value).__name__}: {value!r}"
        raise InvalidParameterError(msg)
    if isinstance(value, float) and not value.is_integer():
        msg = f"Expected an integral number, got non-integral value {value!r}"
        raise InvalidParameterError(msg)
    return int(value)
