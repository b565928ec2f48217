"""Recursive merge used for overrides, description includes and operation extends.

Merge rules:
- Mappings are recursively merged
- Lists are replaced, not concatenated
- Scalars use last-wins semantics
"""

import copy
from typing import Any, Dict, Iterable, Mapping


def deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``overlay`` on top of ``base`` without mutating either.

    Examples:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 20}})
        {'a': 1, 'b': {'x': 10, 'y': 20}}

        >>> deep_merge({"items": [1, 2, 3]}, {"items": [4, 5]})
        {'items': [4, 5]}
    """
    result = copy.deepcopy(dict(base))

    for key, overlay_value in overlay.items():
        base_value = result.get(key)
        if isinstance(base_value, Mapping) and isinstance(overlay_value, Mapping):
            result[key] = deep_merge(base_value, overlay_value)
        else:
            result[key] = copy.deepcopy(overlay_value)

    return result


def merge_all(documents: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Merge documents in order, first one has the lowest priority."""
    result: Dict[str, Any] = {}
    for document in documents:
        result = deep_merge(result, document)
    return result
