from __future__ import annotations

import json
from typing import Any
import collections.abc

import yaml

from curry.curry_datatypes import Bound, CurriedHandle, Ownership


# --------------------------
# Helpers
# --------------------------

def _to_builtin(obj: Any) -> Any:
    # Plain structures only: tuples become lists, mappings plain dicts,
    # enums their value, handles their description.
    if isinstance(obj, CurriedHandle):
        return describe(obj)
    if isinstance(obj, Ownership):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [_to_builtin(x) for x in obj]
    if isinstance(obj, collections.abc.Mapping):
        return {str(k): _to_builtin(v) for k, v in obj.items()}
    return obj


# --------------------------
# Introspection
# --------------------------

def describe(handle: CurriedHandle) -> dict:
    """
    A plain-data snapshot of a handle: what it wraps, how it holds it,
    and what has been applied so far. Values appear as reprs so the
    result is always serializable.
    """
    from curry.curry_printer import Printer
    printer = Printer()
    cell = handle._cell
    value = cell.value
    out: dict = {'ownership': cell.ownership.value}
    if isinstance(value, Bound):
        out['callable'] = printer.callable_name(value.func)
        out['args'] = [printer.pformat(a) for a in value.args]
        out['keywords'] = {k: printer.pformat(v) for k, v in value.keywords.items()}
        out['terminal'] = False
    elif callable(value):
        out['callable'] = printer.callable_name(value)
        out['args'] = []
        out['keywords'] = {}
        out['terminal'] = False
    else:
        out['terminal'] = True
        out['type'] = type(value).__name__
        out['value'] = printer.pformat(value)
    return out


def serialize(value: Any,
              *,
              fmt: str,
              pretty: bool = True) -> str:
    """
    Convert a value (handles included) into a textual representation.
    - fmt: 'json' | 'yaml'
    """
    f = (fmt or '').lower()
    built = _to_builtin(value)
    if f == 'json':
        return json.dumps(built, ensure_ascii=False, indent=2 if pretty else None, default=repr)
    if f == 'yaml':
        return yaml.safe_dump(built, sort_keys=False, default_flow_style=not pretty)
    raise ValueError(f"Unsupported serialization format: {fmt!r}")


__all__ = [
    "describe",
    "serialize",
]
