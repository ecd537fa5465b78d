"""
The externally visible curried handle.

`curry(value)` wraps any value in a `Curried` handle. Calling the handle
applies arguments through the shared `Applier`; everything else a handle
does makes it stand in for the value it holds.
"""
import inspect
import operator
from typing import Any, Optional

from curry.curry_apply import Applier
from curry.curry_datatypes import Bound, Cell, CurriedHandle, CurryError, Ownership
from curry.curry_ownership import OwnershipResolver

# Names forwarded to the held value even though they look private.
_FORWARDED_DUNDERS = frozenset({"__name__", "__qualname__"})


def _unwrap_operand(other):
    return other._cell.value if isinstance(other, CurriedHandle) else other


def _forward(op):
    def method(self, *others):
        return op(self._cell.value, *(_unwrap_operand(o) for o in others))
    method.__name__ = f"__{op.__name__.strip('_')}__"
    return method


def _reflected(op):
    def method(self, other):
        return op(_unwrap_operand(other), self._cell.value)
    method.__name__ = f"__r{op.__name__.strip('_')}__"
    return method


class Curried(CurriedHandle):
    """A value at some stage of partial application.

    Calling the handle applies arguments one application at a time; the
    result is a new handle, or None when the wrapped call returned None.
    The handle itself is never mutated, so it can be re-applied freely.

    Anywhere else a handle behaves as the value it holds: it compares,
    hashes, converts, indexes and computes like that value.
    """

    _applier = Applier()

    def __init__(self, cell: Cell):
        if not isinstance(cell, Cell):
            raise TypeError(f"Curried expects a Cell, not {type(cell).__name__}; use curry() to wrap values")
        self._cell = cell

    # -----------------------------------------------------------------
    # Application
    # -----------------------------------------------------------------

    def __call__(self, *args, **kwargs):
        return self._applier.apply(self._cell, args, kwargs)

    def __get__(self, instance, owner=None):
        """Binds the instance as first argument when used as a method decorator.

        Only held functions bind, as with plain class attributes; classes,
        builtins, partial applications and callable instances are returned
        unchanged.
        """
        value = self._cell.value
        if instance is None or not inspect.isfunction(value):
            return self
        return Curried(Cell(Bound(value, (instance,)), self._cell.ownership))

    def __class_getitem__(cls, params):
        from curry.curry_signature import CurriedSignature
        if not isinstance(params, tuple):
            params = (params,)
        return CurriedSignature(*params)

    # -----------------------------------------------------------------
    # Inspection
    # -----------------------------------------------------------------

    @property
    def value(self) -> Any:
        """The held value, by reference."""
        return self._cell.value

    @property
    def ownership(self) -> Ownership:
        return self._cell.ownership

    @property
    def wrapped_type(self) -> type:
        return type(self._cell.value)

    @property
    def __wrapped__(self):
        return self._cell.value

    def owned(self) -> 'Curried':
        """A new handle owning a snapshot of the held value."""
        return curry(self, ownership=Ownership.OWNED)

    def borrowed(self) -> 'Curried':
        """A new handle borrowing the held value."""
        return curry(self, ownership=Ownership.BORROWED)

    def __getattr__(self, name: str):
        if name.startswith("_") and name not in _FORWARDED_DUNDERS:
            raise AttributeError(name)
        return getattr(self._cell.value, name)

    def __repr__(self) -> str:
        from curry.curry_printer import Printer
        return Printer().pformat(self)

    # -----------------------------------------------------------------
    # Conversions
    # -----------------------------------------------------------------

    def __str__(self) -> str:
        return str(self._cell.value)

    def __format__(self, spec: str) -> str:
        return format(self._cell.value, spec)

    def __bytes__(self) -> bytes:
        return bytes(self._cell.value)

    def __bool__(self) -> bool:
        return bool(self._cell.value)

    def __int__(self) -> int:
        return int(self._cell.value)

    def __float__(self) -> float:
        return float(self._cell.value)

    def __complex__(self) -> complex:
        return complex(self._cell.value)

    def __index__(self) -> int:
        return operator.index(self._cell.value)

    def __hash__(self) -> int:
        return hash(self._cell.value)

    def __eq__(self, other):
        return self._cell.value == _unwrap_operand(other)

    def __ne__(self, other):
        return self._cell.value != _unwrap_operand(other)

    __lt__ = _forward(operator.lt)
    __le__ = _forward(operator.le)
    __gt__ = _forward(operator.gt)
    __ge__ = _forward(operator.ge)

    # Container protocol
    def __len__(self) -> int:
        return len(self._cell.value)

    def __iter__(self):
        return iter(self._cell.value)

    def __contains__(self, item) -> bool:
        return _unwrap_operand(item) in self._cell.value

    def __getitem__(self, key):
        return self._cell.value[_unwrap_operand(key)]

    # Arithmetic and bitwise operators return raw results
    __add__ = _forward(operator.add)
    __sub__ = _forward(operator.sub)
    __mul__ = _forward(operator.mul)
    __matmul__ = _forward(operator.matmul)
    __truediv__ = _forward(operator.truediv)
    __floordiv__ = _forward(operator.floordiv)
    __mod__ = _forward(operator.mod)
    __pow__ = _forward(operator.pow)
    __lshift__ = _forward(operator.lshift)
    __rshift__ = _forward(operator.rshift)
    __and__ = _forward(operator.and_)
    __or__ = _forward(operator.or_)
    __xor__ = _forward(operator.xor)

    __radd__ = _reflected(operator.add)
    __rsub__ = _reflected(operator.sub)
    __rmul__ = _reflected(operator.mul)
    __rmatmul__ = _reflected(operator.matmul)
    __rtruediv__ = _reflected(operator.truediv)
    __rfloordiv__ = _reflected(operator.floordiv)
    __rmod__ = _reflected(operator.mod)
    __rpow__ = _reflected(operator.pow)
    __rlshift__ = _reflected(operator.lshift)
    __rrshift__ = _reflected(operator.rshift)
    __rand__ = _reflected(operator.and_)
    __ror__ = _reflected(operator.or_)
    __rxor__ = _reflected(operator.xor)

    __neg__ = _forward(operator.neg)
    __pos__ = _forward(operator.pos)
    __abs__ = _forward(operator.abs)
    __invert__ = _forward(operator.invert)


_resolver = OwnershipResolver()


def curry(value: Any, ownership: Optional[Ownership] = None) -> Curried:
    """Wraps any value so it can be applied any number of arguments at a time.

    Wrapping a handle returns it unchanged, so curry(curry(f)) is curry(f).
    Passing an ownership that differs from the handle's builds a new handle
    with that mode instead. Plain values are borrowed unless
    ownership=Ownership.OWNED, in which case a shallow snapshot is held.

    Works as a decorator as well:

        @curry
        def add(a, b, c):
            return a + b + c

        add(1)(2, 3)  # -> curry(6)
    """
    if isinstance(value, Curried):
        if ownership is None or ownership is value.ownership:
            return value
        value = value.value
    return Curried(_resolver.wrap(value, ownership))


def uncurry(handle: Curried) -> Any:
    """Returns the value held by a handle (a reference, whatever its ownership)."""
    if not isinstance(handle, Curried):
        raise CurryError(
            f"uncurry() expects a curried handle, not {type(handle).__name__}",
            "only values produced by curry() can be uncurried",
        )
    return handle.value


def uncurried_type(handle: Curried) -> type:
    """Returns the type of the value held by a handle."""
    if not isinstance(handle, Curried):
        raise CurryError(
            f"uncurried_type() expects a curried handle, not {type(handle).__name__}",
        )
    return handle.wrapped_type
