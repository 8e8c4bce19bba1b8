"""Scalar typing under the YAML 1.2 core schema.

PyYAML's default ``Resolver`` implements YAML 1.1 (``yes``/``no`` booleans,
sexagesimal numbers, no ``0o`` octal).  ``CoreSchemaResolver`` registers the
YAML 1.2 core-schema patterns on PyYAML's ``BaseResolver`` instead, in the
order integer, float, boolean, null.  Anything unmatched is a string.

Only plain scalars are implicitly typed; quoted and block scalars are always
strings unless a core-schema tag says otherwise.
"""

from __future__ import annotations

import math
import re
from typing import Any

import yaml
from yaml.resolver import BaseResolver

from yamdocs.tree.nodes import ScalarKind

__all__ = ["CoreSchemaResolver", "resolve_scalar"]

_STR_TAG = "tag:yaml.org,2002:str"
_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"
_BOOL_TAG = "tag:yaml.org,2002:bool"
_NULL_TAG = "tag:yaml.org,2002:null"

_TAG_KINDS: dict[str, ScalarKind] = {
    _STR_TAG: ScalarKind.STRING,
    _INT_TAG: ScalarKind.INTEGER,
    _FLOAT_TAG: ScalarKind.FLOAT,
    _BOOL_TAG: ScalarKind.BOOLEAN,
    _NULL_TAG: ScalarKind.NULL,
}

# Shorthand spellings accepted on scalars (``!!int 42``).
CORE_TAGS: dict[str, str] = {
    "!!str": _STR_TAG,
    "!!int": _INT_TAG,
    "!!float": _FLOAT_TAG,
    "!!bool": _BOOL_TAG,
    "!!null": _NULL_TAG,
    **{tag: tag for tag in _TAG_KINDS},
}

# Collection tags are accepted and ignored.
COLLECTION_TAGS = frozenset(
    {"!!map", "!!seq", "tag:yaml.org,2002:map", "tag:yaml.org,2002:seq"}
)

_INT_PATTERN = re.compile(r"^(?:[-+]?[0-9]+|0o[0-7]+|0x[0-9a-fA-F]+)$")
_FLOAT_PATTERN = re.compile(
    r"""^(?:[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?
    |[-+]?\.(?:inf|Inf|INF)
    |\.(?:nan|NaN|NAN))$""",
    re.X,
)
_BOOL_PATTERN = re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$")
_NULL_PATTERN = re.compile(r"^(?:~|null|Null|NULL|)$")


class CoreSchemaResolver(BaseResolver):
    """PyYAML resolver configured with the YAML 1.2 core schema."""


# Registration order is the resolution order for a shared first character.
CoreSchemaResolver.add_implicit_resolver(
    _INT_TAG, _INT_PATTERN, list("-+0123456789")
)
CoreSchemaResolver.add_implicit_resolver(
    _FLOAT_TAG, _FLOAT_PATTERN, list("-+0123456789.")
)
CoreSchemaResolver.add_implicit_resolver(_BOOL_TAG, _BOOL_PATTERN, list("tTfF"))
CoreSchemaResolver.add_implicit_resolver(_NULL_TAG, _NULL_PATTERN, ["~", "n", "N", ""])

# Module-level resolver (stateless once configured, safe to share)
_resolver = CoreSchemaResolver()


def _to_int(text: str) -> int:
    if text.startswith("0o"):
        return int(text[2:], 8)
    if text.startswith("0x"):
        return int(text[2:], 16)
    return int(text, 10)


def _to_float(text: str) -> float:
    lowered = text.lower()
    if lowered.endswith(".inf"):
        return -math.inf if lowered.startswith("-") else math.inf
    if lowered == ".nan":
        return math.nan
    return float(text)


def resolve_scalar(
    value: str, plain: bool, tag: str | None = None
) -> tuple[ScalarKind, Any]:
    """Infer the kind of a scalar and convert its value.

    Args:
        value: Scalar content as produced by the PyYAML scanner.
        plain: True when the scalar was written unquoted.
        tag:   Core-schema tag written on the scalar, if any (shorthand or
               full form).  Callers reject unsupported tags beforehand.

    Returns:
        ``(kind, python_value)``.  A tag whose pattern does not match the
        value falls back to a string.
    """
    if tag is not None:
        full_tag = CORE_TAGS[tag]
    elif plain:
        full_tag = _resolver.resolve(yaml.ScalarNode, value, (True, False))
    else:
        full_tag = _STR_TAG

    kind = _TAG_KINDS.get(full_tag, ScalarKind.STRING)
    stripped = value.strip()
    try:
        if kind is ScalarKind.INTEGER and _INT_PATTERN.match(stripped):
            return kind, _to_int(stripped)
        if kind is ScalarKind.FLOAT and (
            _FLOAT_PATTERN.match(stripped) or _INT_PATTERN.match(stripped)
        ):
            return kind, _to_float(stripped)
        if kind is ScalarKind.BOOLEAN and _BOOL_PATTERN.match(stripped):
            return kind, stripped.lower() == "true"
        if kind is ScalarKind.NULL and _NULL_PATTERN.match(stripped):
            return kind, None
    except ValueError:
        pass
    return ScalarKind.STRING, value
