"""
Curried-signature descriptors and the predicate that checks handles
against them.

A descriptor `Curried[R, A1, A2, ...]` reads as `A1 -> A2 -> ... -> R`:
applying an A1, then an A2, and so on, one application at a time, ends in
something convertible to R. `Unit` in an argument position stands for a
zero-argument application.

The predicate is a static walk over signatures and annotations. It binds
placeholder arguments exactly the way the applier binds real ones, and
reads result types from return annotations, so the wrapped callable is
never invoked. Only the one-argument-at-a-time path is checked; every
other grouping of the same arguments is equivalent to it.
"""
import collections.abc
import functools
import inspect
import types
import typing
from typing import Any, Optional, Tuple

from curry.curry_apply import signature_of
from curry.curry_datatypes import Bound, CurriedHandle, CurriedSignatureError, Unit
from curry.curry_handle import Curried

_EMPTY = inspect.Parameter.empty
_NONE_TYPE = type(None)
_UNION_ORIGINS = tuple(o for o in (typing.Union, getattr(types, "UnionType", None)) if o is not None)
# Implicit numeric promotions accepted wherever the wider type is expected.
_PROMOTIONS = {
    bool: (int, float, complex),
    int: (float, complex),
    float: (complex,),
}


class CurriedSignature:
    """Declarative description of a curried handle's type.

    Never instantiated by the engine at runtime; it only exists to be
    checked against. `isinstance(h, Curried[int, str])` runs the predicate.
    """
    def __init__(self, return_type: Any = Any, *arg_types: Any):
        self.return_type = return_type
        self.arg_types: Tuple[Any, ...] = tuple(arg_types)

    @property
    def types(self) -> Tuple[Any, ...]:
        return (self.return_type,) + self.arg_types

    def describe(self) -> str:
        from curry.curry_printer import Printer
        return Printer().pformat(self)

    def __instancecheck__(self, obj) -> bool:
        return is_curried(obj, *self.types)

    def __repr__(self) -> str:
        from curry.curry_printer import Printer
        printer = Printer()
        names = ", ".join("Unit" if t is Unit else printer.type_name(t) for t in self.types)
        return f"Curried[{names}]"

    def __eq__(self, other):
        if not isinstance(other, CurriedSignature):
            return NotImplemented
        return self.types == other.types

    def __hash__(self):
        return hash(self.types)


# =================================================================
# Type helpers
# =================================================================

def _is_union(tp) -> bool:
    return typing.get_origin(tp) in _UNION_ORIGINS


def _is_unknown(tp) -> bool:
    return tp is _EMPTY or tp is Any or tp is object or isinstance(tp, (str, typing.TypeVar))


def _is_callable_type(tp) -> bool:
    origin = typing.get_origin(tp) or tp
    return origin is collections.abc.Callable or tp is typing.Callable


def _type_conforms(src, dst) -> bool:
    """True when a value of type src may be passed where dst is declared."""
    if _is_unknown(dst) or src is Any:
        return True
    if src is Unit or dst is Unit:
        return src is dst
    if dst is None:
        dst = _NONE_TYPE
    if src is None:
        src = _NONE_TYPE
    if _is_union(src):
        return all(_type_conforms(m, dst) for m in typing.get_args(src))
    if _is_union(dst):
        return any(_type_conforms(src, m) for m in typing.get_args(dst))
    if isinstance(src, CurriedSignature) or isinstance(dst, CurriedSignature):
        if src == dst:
            return True
        return isinstance(src, CurriedSignature) and (_is_callable_type(dst) or dst in (Curried, CurriedHandle))
    src_cls = typing.get_origin(src) or src
    dst_cls = typing.get_origin(dst) or dst
    if dst_cls in _PROMOTIONS.get(src_cls, ()):
        return True
    try:
        return issubclass(src_cls, dst_cls)
    except TypeError:
        # Literal, NewType and friends: nothing to order them by
        return True


def _value_conforms(value, dst) -> bool:
    """True when a live value is usable where dst is expected."""
    if _is_unknown(dst):
        return True
    if dst is None or dst is _NONE_TYPE:
        return value is None
    if _is_union(dst):
        return any(_value_conforms(value, m) for m in typing.get_args(dst))
    if isinstance(dst, CurriedSignature):
        return is_curried(value, *dst.types)
    cls = typing.get_origin(dst) or dst
    if cls in _PROMOTIONS.get(type(value), ()):
        return True
    try:
        return isinstance(value, cls)
    except TypeError:
        return True


def _resolved_signature(func) -> Optional[inspect.Signature]:
    """Signature with string annotations evaluated where possible."""
    try:
        return inspect.signature(func, eval_str=True)
    except Exception:
        return signature_of(func)


# =================================================================
# Shapes: what is statically known about a handle at one step
# =================================================================

class _Placeholder:
    """Stands in for an argument of a given type while binding."""
    __slots__ = ("type",)

    def __init__(self, tp):
        self.type = tp

    def __repr__(self) -> str:
        return f"<{self.type!r}>"


class _Shape:
    def apply(self, arg_type) -> Optional['_Shape']:
        return None

    def unit(self) -> Optional['_Shape']:
        return None

    def convertible(self, target) -> bool:
        return False


class _AnyShape(_Shape):
    """Nothing is known (no annotation); every step is accepted."""
    def apply(self, arg_type):
        return self

    def unit(self):
        return self

    def convertible(self, target):
        return True


class _VoidShape(_Shape):
    """A call that returned no value; it converts only to None."""
    def convertible(self, target):
        if target is None or target is _NONE_TYPE:
            return True
        return _is_union(target) and any(m is _NONE_TYPE for m in typing.get_args(target))


class _ValueShape(_Shape):
    """A terminal value, known either by its declared type or as a live value."""
    def __init__(self, tp=_EMPTY, value=_EMPTY):
        self.tp = tp
        self.value = value

    def convertible(self, target):
        if self.value is not _EMPTY:
            return _value_conforms(self.value, target)
        if self.tp is _EMPTY:
            return True
        return _type_conforms(self.tp, target)


class _CallableShape(_Shape):
    """Common conversions for every shape that is still callable."""
    live = _EMPTY

    def convertible(self, target):
        if isinstance(target, CurriedSignature):
            return _satisfies(self, target.types)
        if _is_callable_type(target):
            return True
        if self.live is not _EMPTY:
            try:
                return isinstance(self.live, typing.get_origin(target) or target)
            except TypeError:
                return False
        return False


class _CallShape(_CallableShape):
    """A real callable with the arguments bound to it so far."""
    def __init__(self, func, args=(), keywords=None, live=_EMPTY):
        self.func = func
        self.args = tuple(args)
        self.keywords = dict(keywords or {})
        self.live = live

    def apply(self, arg_type):
        sig = _resolved_signature(self.func)
        if sig is None:
            return _AnyShape()
        placeholder = _Placeholder(arg_type)
        args = self.args + (placeholder,)
        try:
            partial = sig.bind_partial(*args, **self.keywords)
        except TypeError:
            return None
        if not _type_conforms(arg_type, self._annotation_for(sig, partial, placeholder)):
            return None
        try:
            sig.bind(*args, **self.keywords)
        except TypeError:
            return _CallShape(self.func, args, self.keywords)
        return self._result(sig)

    def unit(self):
        sig = _resolved_signature(self.func)
        if sig is None:
            return _AnyShape()
        try:
            sig.bind(*self.args, **self.keywords)
        except TypeError:
            return None
        return self._result(sig)

    def _result(self, sig):
        if inspect.isclass(self.func):
            return _shape_of_annotation(self.func)
        return _shape_of_annotation(sig.return_annotation)

    @staticmethod
    def _annotation_for(sig, partial, placeholder):
        for name, bound_value in partial.arguments.items():
            param = sig.parameters[name]
            if bound_value is placeholder:
                return param.annotation
            if param.kind is inspect.Parameter.VAR_POSITIONAL and any(v is placeholder for v in bound_value):
                return param.annotation
        return _EMPTY


class _TypedCallShape(_CallableShape):
    """A callable known only from `Callable[[A, B], R]`."""
    def __init__(self, params, ret, consumed=0):
        self.params = list(params)
        self.ret = ret
        self.consumed = consumed

    def apply(self, arg_type):
        if self.consumed >= len(self.params):
            return None
        if not _type_conforms(arg_type, self.params[self.consumed]):
            return None
        if self.consumed + 1 < len(self.params):
            return _TypedCallShape(self.params, self.ret, self.consumed + 1)
        return _shape_of_annotation(self.ret)

    def unit(self):
        if self.params:
            return None
        return _shape_of_annotation(self.ret)


class _LooseCallShape(_CallableShape):
    """A callable known only from `Callable[..., R]`; any application invokes it."""
    def __init__(self, ret):
        self.ret = ret

    def apply(self, arg_type):
        return _shape_of_annotation(self.ret)

    def unit(self):
        return _shape_of_annotation(self.ret)


class _DescriptorShape(_CallableShape):
    """A handle declared through a nested `Curried[R, ...]` annotation."""
    def __init__(self, ret, arg_types):
        self.ret = ret
        self.arg_types = tuple(arg_types)

    def _next(self):
        rest = self.arg_types[1:]
        if rest:
            return _DescriptorShape(self.ret, rest)
        return _shape_of_annotation(self.ret)

    def apply(self, arg_type):
        if not self.arg_types or self.arg_types[0] is Unit:
            return None
        if not _type_conforms(arg_type, self.arg_types[0]):
            return None
        return self._next()

    def unit(self):
        if not self.arg_types or self.arg_types[0] is not Unit:
            return None
        return self._next()


def _shape_of_annotation(ann) -> _Shape:
    if ann is _EMPTY or ann is Any or isinstance(ann, (str, typing.TypeVar)):
        return _AnyShape()
    if ann is None or ann is _NONE_TYPE:
        return _VoidShape()
    if isinstance(ann, CurriedSignature):
        if ann.arg_types:
            return _DescriptorShape(ann.return_type, ann.arg_types)
        return _shape_of_annotation(ann.return_type)
    if ann is Curried or ann is CurriedHandle:
        return _AnyShape()
    if _is_callable_type(ann):
        args = typing.get_args(ann)
        if not args:
            return _AnyShape()
        params, ret = args
        if params is Ellipsis:
            return _LooseCallShape(ret)
        return _TypedCallShape(params, ret)
    return _ValueShape(tp=ann)


def _shape_of_handle(handle: Curried) -> _Shape:
    value = handle.value
    if isinstance(value, Bound):
        return _CallShape(value.func, value.args, value.keywords, live=value)
    if callable(value):
        return _CallShape(value, live=value)
    return _ValueShape(value=value)


def _convertible(shape: _Shape, target) -> bool:
    if isinstance(shape, _VoidShape):
        return shape.convertible(target)
    if _is_unknown(target) or target is Curried or target is CurriedHandle:
        return True
    if _is_union(target):
        return shape.convertible(target) or any(_convertible(shape, m) for m in typing.get_args(target))
    return shape.convertible(target)


def _satisfies(shape: _Shape, types_: Tuple[Any, ...]) -> bool:
    return_type, steps = types_[0], types_[1:]
    for step in steps:
        shape = shape.unit() if step is Unit else shape.apply(step)
        if shape is None:
            return False
    return _convertible(shape, return_type)


# =================================================================
# Public API
# =================================================================

def is_curried(obj: Any, *types_: Any) -> bool:
    """The curried-signature predicate.

    is_curried(h)                 -- h is a curried handle
    is_curried(h, R)              -- h is convertible to R
    is_curried(h, R, Unit, ...)   -- h() is well-formed and the rest holds
    is_curried(h, R, A, ...)      -- h(a) for an A is well-formed and the rest holds
    """
    if not isinstance(obj, Curried):
        return False
    if not types_:
        return True
    return _satisfies(_shape_of_handle(obj), types_)


def check_curried(obj: Any, *types_: Any, name: Optional[str] = None) -> Any:
    """Returns obj when it satisfies the signature, raises CurriedSignatureError otherwise."""
    if is_curried(obj, *types_):
        return obj
    label = f"argument {name!r}" if name else repr(obj)
    if not types_:
        expected = "a curried handle"
    else:
        expected = CurriedSignature(*types_).describe()
    raise CurriedSignatureError(
        f"{label} does not satisfy {expected}",
        f"got {type(obj).__name__}",
    )


def signature_checked(func):
    """Checks every argument annotated with a `Curried[...]` descriptor at call time."""
    sig = _resolved_signature(func)
    checked = {
        name: param.annotation
        for name, param in (sig.parameters.items() if sig is not None else ())
        if isinstance(param.annotation, CurriedSignature)
    }

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if not checked:
            return func(*args, **kwargs)
        bound = sig.bind(*args, **kwargs)
        for name, descriptor in checked.items():
            if name in bound.arguments:
                check_curried(bound.arguments[name], *descriptor.types, name=name)
        return func(*args, **kwargs)

    return wrapper


__all__ = [
    "CurriedSignature",
    "is_curried",
    "check_curried",
    "signature_checked",
]
