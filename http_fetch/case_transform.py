"""Key-case transformer for nested payloads.

Rewrites mapping keys between camelCase and snake_case, recursing into
nested mappings and sequences up to a depth budget. The input is deep-copied
first and only the copy is modified.

Word boundaries are explicit (see _WORD_PATTERN) and Unicode-aware:
    userId       -> ["user", "Id"]
    HTTPServer   -> ["HTTP", "Server"]
    user2Name    -> ["user", "2", "Name"]
    user_id      -> ["user", "id"]
    caféName     -> ["café", "Name"]
    名前         -> ["名前"]
Anything outside a word (underscores, hyphens, spaces) is a separator.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any

import regex

DEFAULT_DEPTH = 10

# Caseless scripts (CJK, etc.) and combining marks behave like lowercase.
_LOWER = r"[\p{Ll}\p{Lt}\p{Lm}\p{Lo}\p{M}]"

# Order matters: an acronym run stops before the capital that starts the next
# word ("HTTPServer" -> "HTTP", "Server"), then capitalized/lowercase words,
# then a trailing acronym, then digit runs.
_WORD_PATTERN = regex.compile(
    rf"\p{{Lu}}+(?=\p{{Lu}}{_LOWER})|\p{{Lu}}?{_LOWER}+|\p{{Lu}}+|\p{{N}}+"
)


def split_words(key: str) -> list[str]:
    """Split an identifier-style key into words."""
    return _WORD_PATTERN.findall(key)


def to_snake_key(key: Any) -> Any:
    """camelCase -> snake_case. Non-string keys are returned unchanged."""
    if not isinstance(key, str):
        return key
    return "_".join(word.lower() for word in split_words(key))


def to_camel_key(key: Any) -> Any:
    """snake_case -> camelCase. Non-string keys are returned unchanged."""
    if not isinstance(key, str):
        return key
    words = split_words(key)
    if not words:
        return ""
    head, *rest = words
    return head.lower() + "".join(word[0].upper() + word[1:].lower() for word in rest)


def camel_to_snake(value: Any, depth: int = DEFAULT_DEPTH) -> Any:
    """Return a deep copy of value with every mapping key in snake_case.

    Returns None when depth is 0. Subtrees nested deeper than depth keep
    their original keys.
    """
    return _walk(copy.deepcopy(value), depth, to_snake_key)


def snake_to_camel(value: Any, depth: int = DEFAULT_DEPTH) -> Any:
    """Return a deep copy of value with every mapping key in camelCase.

    Returns None when depth is 0. Subtrees nested deeper than depth keep
    their original keys.
    """
    return _walk(copy.deepcopy(value), depth, to_camel_key)


def _walk(node: Any, depth: int, rename: Callable[[Any], Any]) -> Any:
    """Rename keys of node in place. node must be a private copy."""
    depth -= 1
    if depth < 0:
        return None

    if isinstance(node, (list, tuple)):
        for item in node:
            if _is_container(item):
                _walk(item, depth, rename)
    elif isinstance(node, dict):
        for key in list(node):
            # A self-referencing mapping may already have been renamed deeper down.
            if key not in node:
                continue
            new_key = rename(key)
            if new_key != key:
                node[new_key] = node.pop(key)
            if _is_container(node[new_key]):
                _walk(node[new_key], depth, rename)
    return node


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, list, tuple))
