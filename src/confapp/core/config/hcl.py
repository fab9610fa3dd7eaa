"""
Reading and writing the HCL subset used by config files.

Supported: attributes (``key = value``), nested blocks with optional string
labels, objects, lists, strings, numbers, booleans, ``null`` and the three
comment styles. Expressions, interpolation and heredocs are not.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Iterable

from lark import Lark, Token, Transformer

_GRAMMAR = r"""
    ?start: body

    body: (attribute | block)*
    attribute: key "=" value
    block: key label* "{" body "}"
    label: STRING
    key: IDENTIFIER | STRING

    ?value: STRING -> string
          | NUMBER -> number
          | "true" -> true
          | "false" -> false
          | "null" -> null
          | "[" (value ("," value)* ","?)? "]" -> array
          | "{" (pair (","? pair)* ","?)? "}" -> object

    pair: key ("=" | ":") value

    IDENTIFIER: /[A-Za-z_][A-Za-z0-9_-]*/
    STRING: /"(\\.|[^"\\])*"/
    NUMBER: /-?\d+(\.\d+)?([eE][+-]?\d+)?/
    LINE_COMMENT: /(#|\/\/)[^\n]*/
    BLOCK_COMMENT: /\/\*(.|\n)*?\*\//

    %import common.WS
    %ignore WS
    %ignore LINE_COMMENT
    %ignore BLOCK_COMMENT
"""

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


def _unquote(token: Token) -> str:
    return json.loads(str(token), strict=False)


def _merge(target: Dict[str, Any], key: str, value: Any) -> None:
    existing = target.get(key)
    if isinstance(existing, dict) and isinstance(value, dict):
        merged = dict(existing)
        for inner_key, inner_value in value.items():
            _merge(merged, inner_key, inner_value)
        target[key] = merged
    else:
        target[key] = value


class _HclTransformer(Transformer):
    def body(self, items):
        result: Dict[str, Any] = {}
        for key, value in items:
            _merge(result, key, value)
        return result

    def attribute(self, items):
        key, value = items
        return key, value

    def block(self, items):
        key, *labels, body = items
        for label in reversed(labels):
            body = {label: body}
        return key, body

    def label(self, items):
        return _unquote(items[0])

    def key(self, items):
        token = items[0]
        return _unquote(token) if token.type == "STRING" else str(token)

    def pair(self, items):
        key, value = items
        return key, value

    def string(self, items):
        return _unquote(items[0])

    def number(self, items):
        text = str(items[0])
        if any(marker in text for marker in ".eE"):
            return float(text)
        return int(text)

    def true(self, _items):
        return True

    def false(self, _items):
        return False

    def null(self, _items):
        return None

    def array(self, items):
        return list(items)

    def object(self, items):
        result: Dict[str, Any] = {}
        for key, value in items:
            _merge(result, key, value)
        return result


_parser = Lark(_GRAMMAR, parser="lalr", transformer=_HclTransformer())


def loads(text: str) -> Dict[str, Any]:
    """
    Parse an HCL document into nested dicts.

    Raises:
        lark.exceptions.LarkError: If the document is not valid HCL
    """
    if not text.strip():
        return {}
    return _parser.parse(text)


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_literal(item) for item in value) + "]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        pairs = ", ".join(f"{_key(str(k))} = {_literal(v)}" for k, v in value.items())
        return "{ " + pairs + " }"
    return json.dumps(str(value), ensure_ascii=False)


def _key(key: str) -> str:
    return key if _IDENTIFIER.match(key) else json.dumps(key, ensure_ascii=False)


def _lines(nested: Dict[str, Any], indent: int = 0) -> Iterable[str]:
    pad = "  " * indent
    for key, value in nested.items():
        if isinstance(value, dict):
            yield f"{pad}{_key(key)} = {{"
            yield from _lines(value, indent + 1)
            yield f"{pad}}}"
        else:
            yield f"{pad}{_key(key)} = {_literal(value)}"


def dumps(nested: Dict[str, Any]) -> str:
    """Render nested dicts as HCL attributes, nesting maps as objects."""
    return "\n".join(_lines(nested)) + "\n"
