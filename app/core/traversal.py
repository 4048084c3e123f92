# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Key-name traversal and dot-path access over parsed documents.

Documents are trees of dicts, lists and scalars: parsed JSON as is, XML after
normalization by ``core.xml_tree``. The same functions serve both formats.

Dot paths (``customer.address.city``) follow these rules:
    - a numeric segment indexes into a list
    - any other segment applied to a list is applied to every element
    - reading a missing key yields nothing, writing creates ``{}`` on the way
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from core.pseudonymizer import to_text

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    Transform = Callable[[Any], Any]


def visit_key(node: Any, key_name: str, transform: Transform) -> int:
    """Replace the value of every ``key_name`` key at any depth, in place.

    ``None`` values are left alone. After a replacement, the traversal
    continues into the new value.

    Returns:
        Number of replaced values.

    """
    replaced = 0

    if isinstance(node, dict):
        for key, value in node.items():
            if key == key_name and value is not None:
                value = transform(value)
                node[key] = value
                replaced += 1

            replaced += visit_key(value, key_name, transform)

    elif isinstance(node, list):
        for item in node:
            replaced += visit_key(item, key_name, transform)

    return replaced


def apply_source_fields(doc: Any, source_field_names: Iterable[str], transform: Transform) -> Any:
    """Transform the values of all source fields in a document."""
    for field_name in source_field_names:
        visit_key(doc, field_name, transform)

    return doc


def _list_index(node: list, segment: str) -> int | None:
    """Index a path segment refers to in a list, None when it is not a valid index."""
    if segment.isdigit() and int(segment) < len(node):
        return int(segment)
    return None


def _resolve(node: Any, segments: list[str]) -> list[Any]:
    if not segments:
        return [node]

    head, rest = segments[0], segments[1:]

    if isinstance(node, dict):
        return _resolve(node[head], rest) if head in node else []

    if isinstance(node, list):
        index = _list_index(node, head)
        if index is not None:
            return _resolve(node[index], rest)

        values = []
        for item in node:
            values.extend(_resolve(item, segments))
        return values

    return []


def get_path(node: Any, path: str) -> list[Any]:
    """Return every value found at a dot path, an empty list when the path does not resolve."""
    return _resolve(node, path.split('.'))


def _assign(node: Any, segments: list[str], value: Any, *, broadcast: bool = False) -> None:
    head, rest = segments[0], segments[1:]

    if isinstance(node, dict):
        if not rest:
            node[head] = value
            return

        if node.get(head) is None:
            node[head] = {}
        _assign(node[head], rest, value)

    elif isinstance(node, list):
        index = _list_index(node, head)

        if index is None:
            for item in node:
                _assign(item, segments, value, broadcast=True)
        elif not rest:
            node[index] = value
        else:
            if node[index] is None:
                node[index] = {}
            _assign(node[index], rest, value)

    elif not broadcast:
        message = f'Cannot set "{head}" on a {type(node).__name__} value'
        raise TypeError(message)


def set_path(node: Any, path: str, value: Any) -> None:
    """Write a value at a dot path, creating missing objects and broadcasting through lists.

    Raises:
        TypeError: when the path runs into a scalar value.

    """
    _assign(node, path.split('.'), value)


def apply_derived_fields(doc: Any, derived: dict[str, dict[str, Any]]) -> Any:
    """Compute derived fields by joining the values at their source paths.

    Each target receives the text of all resolved source values joined with
    the separator (default empty), or ``None`` when no source path resolves.
    """
    for target_path, definition in derived.items():
        separator = definition.get('separator', '')
        values = [value for source_path in definition.get('sources', []) for value in get_path(doc, source_path)]

        set_path(doc, target_path, separator.join(to_text(value) for value in values) if values else None)

    return doc
