"""Registry builder utilities for creating event schemas from signatures.

This module provides the tools for building EventSchema / EventRegistry
instances from human-readable Solidity event signatures:
- `event_schema_from_signature()` for one signature
- generic `make_registry()` for single or multiple signatures

Inline tuple types are supported, e.g.
  "OrderFulfilled(bytes32 orderHash, address indexed offerer, (uint8 itemType, address token)[] offer)"
"""

from __future__ import annotations

from shadowlogs.core.exceptions import SchemaError
from shadowlogs.decoding.specs import EventRegistry, EventSchema, ParameterSchema


# ---- Helpers: build schemas from event signature ----
def _split_params(params_str: str) -> list[str]:
    """Split the parameter list by commas while respecting nested tuple types."""
    items: list[str] = []
    depth = 0
    buf: list[str] = []
    for ch in params_str:
        if ch == '(':
            depth += 1
            buf.append(ch)
        elif ch == ')':
            depth -= 1
            if depth < 0:
                raise SchemaError(f"Unbalanced parentheses in {params_str!r}")
            buf.append(ch)
        elif ch == ',' and depth == 0:
            items.append(''.join(buf).strip())
            buf = []
        else:
            buf.append(ch)
    if depth != 0:
        raise SchemaError(f"Unbalanced parentheses in {params_str!r}")
    if buf:
        items.append(''.join(buf).strip())
    # Handle empty list for no params
    return [i for i in items if i]


def _split_tuple_type(s: str) -> tuple[str, str]:
    """Split a fragment starting with '(' into (inner params, rest after ')')."""
    depth = 0
    for i, ch in enumerate(s):
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth == 0:
                return s[1:i], s[i + 1 :]
    raise SchemaError(f"Unbalanced parentheses in {s!r}")


def _parse_param(p: str, fallback_name: str) -> ParameterSchema:
    """Parse one parameter fragment, e.g. `address indexed from` or `(uint8 a, bool b)[] items`."""
    s = ' '.join(p.strip().split())  # normalize spaces
    if s.startswith('tuple('):
        s = s[len('tuple'):]

    components: list[ParameterSchema] = []
    if s.startswith('('):
        inner, rest = _split_tuple_type(s)
        components = [
            _parse_param(part, fallback_name=f"arg{i}")
            for i, part in enumerate(_split_params(inner))
        ]
        if not components:
            raise SchemaError(f"Empty tuple type in {p!r}")
        # Dimensions stay glued to the tuple: "(...)[] name" → "tuple[]" + "name"
        rest = rest.lstrip()
        dims = ''
        while rest.startswith('['):
            close = rest.find(']')
            if close == -1:
                raise SchemaError(f"Unbalanced brackets in {p!r}")
            dims += rest[: close + 1]
            rest = rest[close + 1 :].lstrip()
        tokens = ['tuple' + dims] + rest.split()
    else:
        tokens = s.split()

    indexed = False
    if 'indexed' in tokens[1:]:
        indexed = True
        tokens = [tokens[0]] + [t for t in tokens[1:] if t != 'indexed']

    if not tokens or len(tokens) > 2:
        raise SchemaError(f"Cannot parse parameter {p!r}")

    abi_type = tokens[0]
    name = tokens[1] if len(tokens) == 2 else ''
    return ParameterSchema.build(
        name,
        abi_type,
        indexed=indexed,
        components=components,
        fallback_name=fallback_name,
    )


def event_schema_from_signature(signature: str, *, anonymous: bool = False) -> EventSchema:
    """Build an EventSchema from a Solidity event signature string.

    Example input:
      "Transfer(address indexed from, address indexed to, uint256 value)"
    A leading `event ` keyword and a trailing `;` are accepted.
    """
    sig = signature.strip().rstrip(';').strip()
    if sig.startswith('event '):
        sig = sig[len('event '):].strip()
    if sig.endswith(' anonymous'):
        anonymous = True
        sig = sig[: -len(' anonymous')].strip()

    # Extract name and parameters content
    open_paren = sig.find('(')
    close_paren = sig.rfind(')')
    if open_paren <= 0 or close_paren == -1 or close_paren < open_paren:
        raise SchemaError(f"Invalid event signature: {signature}")
    name = sig[:open_paren].strip()
    params_str = sig[open_paren + 1 : close_paren].strip()

    params = tuple(
        _parse_param(part, fallback_name=f"arg{i}")
        for i, part in enumerate(_split_params(params_str))
    )
    return EventSchema(name=name, params=params, anonymous=anonymous)


def canonical_signature(signature: str) -> str:
    """Normalize a canonical or human-readable signature to `Name(type,...)`."""
    return event_schema_from_signature(signature).signature


def registry_from_signature(signature: str) -> EventRegistry:
    """Build an EventRegistry (single entry) from a signature string."""
    schema = event_schema_from_signature(signature)
    return {schema.selector: schema}


def make_registry(signatures: str | list[str]) -> EventRegistry:
    """Create a registry from one or multiple event signatures.

    Args:
        signatures: Single signature string or list of signature strings

    Returns:
        EventRegistry with entries for each signature
    """
    reg: EventRegistry = {}

    # Normalize to list
    sig_list = [signatures] if isinstance(signatures, str) else signatures

    for signature in sig_list:
        reg.update(registry_from_signature(signature))

    return reg
