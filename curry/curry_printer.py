"""
A pretty-printer for curried handles and signature descriptors.
"""
import collections.abc
import functools
from typing import Any

from curry.curry_datatypes import Bound, Cell, Ownership, Unit


class Printer:
    """Formats handles as the call chain that would rebuild them.

        curry(expr)(1, 2)
        curry(expr, ownership=Ownership.OWNED)(1)
        curry(15)
        int -> () -> str
    """

    def __init__(self, max_repr: int = 0):
        # 0 disables truncation of argument reprs
        self.max_repr = max_repr
        self._handlers = self._create_handlers()

    def pformat(self, obj, level=0):
        """Public entry point to format an object."""
        handler = self._get_handler(obj)
        return handler(obj, level)

    def _get_handler(self, obj):
        """Dispatcher to find the correct formatting method."""
        if obj is Unit: return self._pformat_unit

        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        from curry.curry_datatypes import CurriedHandle
        from curry.curry_signature import CurriedSignature
        if isinstance(obj, CurriedHandle): return self._pformat_handle
        if isinstance(obj, CurriedSignature): return self._pformat_signature
        if isinstance(obj, functools.partial): return self._pformat_partial
        if isinstance(obj, collections.abc.Mapping): return self._pformat_dict
        # Default to Python's repr for unknown types
        return lambda o, l: self._clip(repr(o))

    def _create_handlers(self):
        return {
            Bound: self._pformat_bound,
            Cell: self._pformat_cell,
            Ownership: self._pformat_ownership,
            list: self._pformat_list,
            tuple: self._pformat_tuple,
        }

    def _clip(self, text: str) -> str:
        if self.max_repr and len(text) > self.max_repr:
            return text[:max(self.max_repr - 3, 0)] + "..."
        return text

    # -----------------------------------------------------------------
    # Callables
    # -----------------------------------------------------------------

    def callable_name(self, func: Any) -> str:
        """Short, readable name of a callable: qualified name when it has one."""
        if isinstance(func, Bound):
            func = func.func
        name = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
        if isinstance(name, str):
            return name
        return self._clip(repr(func))

    def _pformat_arguments(self, args, keywords, level) -> str:
        parts = [self.pformat(a, level + 1) for a in args]
        parts.extend(f"{k}={self.pformat(v, level + 1)}" for k, v in keywords.items())
        return ", ".join(parts)

    def _pformat_bound(self, obj: Bound, level):
        return f"{self.callable_name(obj.func)}({self._pformat_arguments(obj.args, obj.keywords, level)})"

    def _pformat_partial(self, obj, level):
        return f"partial({self.callable_name(obj.func)})({self._pformat_arguments(obj.args, obj.keywords, level)})"

    def _pformat_handle(self, obj, level):
        cell = obj._cell
        value = cell.value
        suffix = ""
        if cell.ownership is Ownership.OWNED:
            suffix = ", ownership=Ownership.OWNED"
        if isinstance(value, Bound):
            head = f"curry({self.callable_name(value.func)}{suffix})"
            return f"{head}({self._pformat_arguments(value.args, value.keywords, level)})"
        if callable(value):
            return f"curry({self.callable_name(value)}{suffix})"
        return f"curry({self.pformat(value, level + 1)}{suffix})"

    def _pformat_cell(self, obj: Cell, level):
        return f"Cell({self.pformat(obj.value, level + 1)}, {self.pformat(obj.ownership, level)})"

    def _pformat_ownership(self, obj, level):
        return f"Ownership.{obj.name}"

    # -----------------------------------------------------------------
    # Signatures
    # -----------------------------------------------------------------

    def type_name(self, tp: Any) -> str:
        if tp is Unit:
            return "()"
        if tp is None or tp is type(None):
            return "None"
        from curry.curry_signature import CurriedSignature
        if isinstance(tp, CurriedSignature):
            return f"({self._pformat_signature(tp, 0)})"
        if isinstance(tp, type):
            return tp.__qualname__
        return repr(tp).replace("typing.", "")

    def _pformat_signature(self, obj, level):
        steps = [self.type_name(t) for t in obj.arg_types]
        steps.append(self.type_name(obj.return_type))
        return " -> ".join(steps)

    def _pformat_unit(self, obj, level):
        return "Unit"

    # -----------------------------------------------------------------
    # Containers
    # -----------------------------------------------------------------

    def _pformat_list(self, obj, level):
        return "[" + ", ".join(self.pformat(x, level + 1) for x in obj) + "]"

    def _pformat_tuple(self, obj, level):
        if len(obj) == 1:
            return "(" + self.pformat(obj[0], level + 1) + ",)"
        return "(" + ", ".join(self.pformat(x, level + 1) for x in obj) + ")"

    def _pformat_dict(self, obj, level):
        items = ", ".join(f"{self.pformat(k, level + 1)}: {self.pformat(v, level + 1)}" for k, v in obj.items())
        return "{" + items + "}"
