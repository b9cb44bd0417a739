"""Helpers for YAML parsing quirks."""

from typing import Any, Dict, TypeVar

V = TypeVar("V")


def normalize_yaml_dict_keys(data: Dict[Any, V]) -> Dict[str, V]:
    """Return ``data`` with every key converted to ``str``.

    YAML 1.1 reads unquoted keys such as ``yes``/``on``/``true`` as booleans and
    numeric keys as numbers. Problem documents use string keys only, so keys
    are stringified before they are compared against the known option names.

    Example:
        >>> normalize_yaml_dict_keys({True: 1, 5: 2, "groups": 3})
        {'True': 1, '5': 2, 'groups': 3}
    """
    return {str(key): value for key, value in data.items()}
