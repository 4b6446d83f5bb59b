"""
Read-only access to a transformer's or model's learned attributes.

Attribute dictionaries come from a deserialized source model (or a YAML
pipeline file). Keys are looked up by their documented names; numpy
arrays and scalars are converted to Python values on read.
"""

from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from skpmml.exceptions import InvalidParameterError, MissingKeyError
from skpmml.utils.values import to_python


class ParameterBundle(Mapping[str, Any]):
    """
    Immutable view over an attribute dictionary.

    Args:
        attributes: Learned attributes keyed by name.
        owner: Name of the transformer or model, used in error messages.
    """

    def __init__(self, attributes: Mapping[str, Any] | None = None, owner: str = "") -> None:
        self._attributes = dict(attributes or {})
        self.owner = owner

    def __getitem__(self, key: str) -> Any:
        return to_python(self._attributes[key])

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f"ParameterBundle(owner={self.owner!r}, keys={list(self._attributes)})"

    def _where(self, key: str) -> str:
        return f"{self.owner}.{key}" if self.owner else key

    def get_required(self, key: str) -> Any:
        """
        Get a required attribute.

        Raises:
            MissingKeyError: If the key is absent.
        """
        if key not in self._attributes:
            available = ", ".join(self._attributes) or "<none>"
            msg = f"Required attribute '{self._where(key)}' is missing. Available: {available}"
            raise MissingKeyError(msg)
        return self[key]

    def get_optional(self, key: str, default: Any = None) -> Any:
        """Get an optional attribute; absent or None yields ``default``."""
        value = self.get(key, None)
        return default if value is None else value

    def get_optional_string(self, key: str) -> str | None:
        """Get an optional string attribute."""
        value = self.get_optional(key)
        if value is not None and not isinstance(value, str):
            msg = f"Attribute '{self._where(key)}' must be a string, got {type(value).__name__}"
            raise InvalidParameterError(msg)
        return value

    def get_array(self, key: str) -> list[Any]:
        """Get a required ordered sequence, as a list."""
        value = self.get_required(key)
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            msg = f"Attribute '{self._where(key)}' must be a sequence, got {type(value).__name__}"
            raise InvalidParameterError(msg)
        return [to_python(item) for item in value]

    def get_mapping(self, key: str) -> Mapping[Any, Any]:
        """Get a required mapping, keeping its insertion order."""
        value = self.get_required(key)
        if not isinstance(value, Mapping):
            msg = f"Attribute '{self._where(key)}' must be a mapping, got {type(value).__name__}"
            raise InvalidParameterError(msg)
        return value

    def get_tuple_list(self, key: str) -> list[tuple[Any, ...]]:
        """Get a required sequence of tuples (lists are accepted as tuples)."""
        result = []
        for i, item in enumerate(self.get_array(key)):
            if not isinstance(item, (tuple, list)):
                msg = (
                    f"Attribute '{self._where(key)}' must contain tuples, "
                    f"element {i} is {type(item).__name__}"
                )
                raise InvalidParameterError(msg)
            result.append(tuple(to_python(element) for element in item))
        return result


def extract_element(row: Sequence[Any], index: int, expected: type, where: str = "") -> Any:
    """
    Get one element of a tuple attribute, checking its type.

    Raises:
        InvalidParameterError: If the tuple is too short or the element has
            another type.
    """
    if index >= len(row):
        msg = f"{where}: expected at least {index + 1} elements, got {len(row)}"
        raise InvalidParameterError(msg)
    value = row[index]
    if not isinstance(value, expected):
        msg = f"{where}: element {index} must be {expected.__name__}, got {type(value).__name__}"
        raise InvalidParameterError(msg)
    return value
