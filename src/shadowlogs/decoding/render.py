"""Value renderer: decoded tokens → display values keyed by parameter names.

`render_value()` produces the canonical string form (every scalar becomes a
string, tuples become name-keyed dicts, arrays become lists). `render_typed()`
walks the same structure but keeps native Python values (int, bool, str) at
the leaves, with byte values as unprefixed hex so the result stays
JSON-serializable.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from shadowlogs.decoding.specs import ParameterSchema
from shadowlogs.decoding.types import (
    AddressType,
    BoolType,
    BytesType,
    FixedBytesType,
    IntType,
    StringType,
    UintType,
)
from shadowlogs.decoding.words import Composite, DecodedToken, Primitive, Sequence

RenderedValue = str | list[Any] | dict[str, Any]


def stringify(token: DecodedToken) -> str:
    """Canonical string form of one token.

    - address → 0x-prefixed lowercase hex
    - bytes / bytesN → lowercase hex without prefix
    - intN / uintN → decimal
    - bool → "true" / "false"
    - nested arrays → "[a,b]", nested tuples → "(a,b)"
    """
    match token:
        case Primitive(type=AddressType(), value=value):
            return "0x" + value.hex()
        case Primitive(type=BytesType() | FixedBytesType(), value=value):
            return value.hex()
        case Primitive(type=IntType() | UintType(), value=value):
            return str(value)
        case Primitive(type=BoolType(), value=value):
            return "true" if value else "false"
        case Primitive(type=StringType(), value=value):
            return value
        case Sequence(items=items):
            return "[" + ",".join(stringify(t) for t in items) + "]"
        case Composite(items=items):
            return "(" + ",".join(stringify(t) for t in items) + ")"
    return str(token)


def to_python(token: DecodedToken) -> Any:
    """Native form of one token (lists for arrays, tuples for tuples)."""
    match token:
        case Primitive(type=AddressType(), value=value):
            return "0x" + value.hex()
        case Primitive(type=BytesType() | FixedBytesType(), value=value):
            return value.hex()
        case Primitive(value=value):
            return value
        case Sequence(items=items):
            return [to_python(t) for t in items]
        case Composite(items=items):
            return tuple(to_python(t) for t in items)
    return token


def _render(
    param: ParameterSchema,
    token: DecodedToken,
    leaf: Callable[[DecodedToken], Any],
) -> Any:
    # Hashed topics and plain scalars
    if isinstance(token, Primitive):
        return leaf(token)

    if param.is_complex:
        # Array of tuples (possibly nested): every element shares the same components
        if isinstance(token, Sequence):
            return [_render(param, t, leaf) for t in token.items]
        if isinstance(token, Composite):
            return {
                component.name: _render(component, t, leaf)
                for component, t in zip(param.components, token.items)
            }

    if isinstance(token, Sequence):
        return [leaf(t) for t in token.items]

    return leaf(token)


def render_value(param: ParameterSchema, token: DecodedToken) -> RenderedValue:
    """Render one decoded token against the parameter it was decoded for."""
    return _render(param, token, stringify)


def render_typed(param: ParameterSchema, token: DecodedToken) -> Any:
    """Like `render_value` but with native Python leaves."""
    return _render(param, token, to_python)


def render_values(
    params: Iterable[ParameterSchema],
    tokens: Iterable[DecodedToken],
    *,
    typed: bool = False,
) -> dict[str, Any]:
    """Render parameters and tokens pairwise into one name-keyed dict."""
    render = render_typed if typed else render_value
    return {param.name: render(param, token) for param, token in zip(params, tokens)}
