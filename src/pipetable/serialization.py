"""JSON serialization for syntax trees, patches and diagnostics.

Converts nodes, layouts, patches and diagnostics to JSON-compatible dicts.
Node trees also round-trip, so an external parser can hand tables to the
formatter as JSON. Useful for:
- ``pipetable --format json`` output
- Feeding tables parsed by another tool into ``generate_patches``
- Debugging and inspection

All output is deterministic (sorted keys).

Example:
    from pipetable.parsing import parse
    from pipetable.serialization import to_json, from_json

    doc = parse("| a |\\n| - |")
    assert from_json(to_json(doc)) == doc

Thread Safety:
    All functions are pure and safe to call from any thread.

"""

import json
from dataclasses import fields, is_dataclass
from typing import Any

from pipetable.location import SourceLocation, SourceRange
from pipetable.nodes import (
    CodeSpan,
    Document,
    HtmlInline,
    Node,
    Table,
    TableCell,
    TableRow,
    Text,
)

# Registry of node type names to classes for deserialization
_NODE_TYPES: dict[str, type] = {
    "Document": Document,
    "Table": Table,
    "TableRow": TableRow,
    "TableCell": TableCell,
    "Text": Text,
    "CodeSpan": CodeSpan,
    "HtmlInline": HtmlInline,
}


def to_dict(value: Any) -> dict[str, Any]:
    """Convert a node, Patch, Diagnostic or TableLayout to a JSON-compatible dict.

    Includes a ``_type`` discriminator field. Nested dataclasses and
    tuples are serialized recursively.

    Raises:
        TypeError: ``value`` is not a dataclass instance

    """
    if not is_dataclass(value) or isinstance(value, type):
        msg = f"Cannot serialize {type(value).__name__}"
        raise TypeError(msg)

    result: dict[str, Any] = {"_type": type(value).__name__}
    for f in fields(value):
        result[f.name] = _serialize_value(getattr(value, f.name))
    return result


def _serialize_value(value: Any) -> Any:
    """Serialize a single field value."""
    if is_dataclass(value) and not isinstance(value, type):
        return to_dict(value)
    if isinstance(value, tuple | list):
        return [_serialize_value(item) for item in value]
    # Primitives: str, int, bool, None
    return value


def from_dict(data: dict[str, Any]) -> Node:
    """Reconstruct a typed node from a dict.

    Uses the ``_type`` discriminator to determine the node class.

    Raises:
        ValueError: If ``_type`` is missing or not a node type.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized node"
        raise ValueError(msg)

    node_cls = _NODE_TYPES.get(type_name)
    if node_cls is None:
        msg = f"Unknown node type: {type_name!r}"
        raise ValueError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(node_cls):
        if f.name not in data:
            continue
        kwargs[f.name] = _deserialize_value(data[f.name])

    return node_cls(**kwargs)


def _deserialize_value(value: Any) -> Any:
    """Deserialize a single field value."""
    if isinstance(value, dict):
        type_name = value.get("_type")
        if type_name == "SourceLocation":
            return SourceLocation(
                lineno=value["lineno"],
                col_offset=value["col_offset"],
                offset=value.get("offset", 0),
                end_offset=value.get("end_offset", 0),
                end_lineno=value.get("end_lineno"),
                end_col_offset=value.get("end_col_offset"),
                source_file=value.get("source_file"),
            )
        if type_name == "SourceRange":
            return SourceRange(value["start"], value["end"])
        if type_name is not None:
            return from_dict(value)
        return value
    if isinstance(value, list):
        return tuple(_deserialize_value(item) for item in value)
    return value


def to_json(value: Any, *, indent: int | None = None) -> str:
    """Serialize a node, patch, diagnostic or layout to a JSON string.

    Lists are serialized item by item. Output is deterministic (sorted keys).

    """
    if isinstance(value, list | tuple):
        payload: Any = [to_dict(item) for item in value]
    else:
        payload = to_dict(value)
    return json.dumps(payload, sort_keys=True, indent=indent, ensure_ascii=False)


def from_json(data: str) -> Document:
    """Deserialize a Document from a JSON string.

    Raises:
        ValueError: If the JSON doesn't represent a Document.

    """
    raw = json.loads(data)
    node = from_dict(raw)
    if not isinstance(node, Document):
        msg = f"Expected Document, got {type(node).__name__}"
        raise ValueError(msg)
    return node
