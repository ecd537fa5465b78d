"""
Defines the core data types for the curry engine.

This module provides the ownership vocabulary, the partial value produced
by binding arguments (`Bound`), the minimal unit of partial application
(`Cell`), the error hierarchy, and the `Unit` marker used by signature
descriptors.
"""

from abc import ABC
from enum import Enum
from typing import Any, Dict, Optional, Tuple


# =================================================================
# Errors
# =================================================================

class CurryError(TypeError):
    """Base class for contract violations detected by the engine.

    Subclasses TypeError so that a misuse reads like Python's own call
    errors. `detail` carries a short, human readable explanation.
    """
    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail or message


class ArityError(CurryError):
    """An application that no argument count could make well-formed."""
    pass


class OwnershipError(CurryError):
    """An attempt to move a value out of a cell that only borrows it."""
    pass


class CurriedSignatureError(CurryError):
    """A handle does not satisfy a curried signature it was checked against."""
    pass


# =================================================================
# Ownership vocabulary
# =================================================================

class Ownership(Enum):
    """How a cell holds its value.

    OWNED cells hold their value exclusively; BORROWED cells hold a
    reference to a value that lives elsewhere and whose mutations they
    observe.
    """
    OWNED = "owned"
    BORROWED = "borrowed"

    def __repr__(self) -> str:
        return f"Ownership.{self.name}"


class Capture(Enum):
    """How a single application captures the value of its cell."""
    REFERENCE = "reference"
    MOVE = "move"

    def __repr__(self) -> str:
        return f"Capture.{self.name}"


class Context(Enum):
    """The calling context of one application.

    PERSISTENT is a handle the caller holds and may reuse. TRANSIENT is an
    intermediate handle the engine created inside one request, which
    nobody else can observe.
    """
    PERSISTENT = "persistent"
    TRANSIENT = "transient"


# =================================================================
# Markers
# =================================================================

class CurriedHandle(ABC):
    """Abstract base class for every handle produced by the engine."""
    pass


class _UnitMarker:
    """Singleton marking a zero-argument application in a signature descriptor."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Unit"

    def __reduce__(self):
        return (_UnitMarker, ())


Unit = _UnitMarker()


# =================================================================
# Partial values
# =================================================================

class Bound:
    """Represents `func` partially applied to `args` and `keywords`.

    A Bound over a Bound is flattened at construction, so `func` is never
    itself a Bound. Bounds built by users are sealed. The engine builds
    unsealed Bounds for the intermediate steps of one request and extends
    those in place; it seals them before they can escape.
    """
    def __init__(self, func: Any, args: Tuple[Any, ...] = (), keywords: Optional[Dict[str, Any]] = None):
        if isinstance(func, Bound):
            args = func.args + tuple(args)
            keywords = {**func.keywords, **(keywords or {})}
            func = func.func
        self.func = func
        self._args = list(args)
        self.keywords: Dict[str, Any] = dict(keywords or {})
        self.sealed = True

    @classmethod
    def fresh(cls, func: Any, args: Tuple[Any, ...] = (), keywords: Optional[Dict[str, Any]] = None) -> 'Bound':
        """Builds an unsealed Bound, owned by the request that creates it."""
        bound = cls(func, args, keywords)
        bound.sealed = False
        return bound

    @property
    def args(self) -> Tuple[Any, ...]:
        return tuple(self._args)

    def extend(self, args: Tuple[Any, ...] = (), keywords: Optional[Dict[str, Any]] = None) -> 'Bound':
        """Returns a new unsealed Bound with more arguments; self is untouched."""
        return Bound.fresh(self, args, keywords)

    def extend_in_place(self, args: Tuple[Any, ...] = (), keywords: Optional[Dict[str, Any]] = None) -> 'Bound':
        """Appends arguments to this Bound and returns it. Only valid while unsealed."""
        if self.sealed:
            raise OwnershipError(
                "Cannot extend a sealed partial application in place",
                "sealed Bound values may be shared; extend() copies instead",
            )
        self._args.extend(args)
        if keywords:
            self.keywords.update(keywords)
        return self

    def seal(self) -> 'Bound':
        self.sealed = True
        return self

    def __copy__(self) -> 'Bound':
        return Bound(self.func, self.args, self.keywords)

    def __call__(self, *more_args, **more_kwargs):
        all_kwargs = {**self.keywords, **more_kwargs}
        return self.func(*self._args, *more_args, **all_kwargs)

    def __repr__(self) -> str:
        from curry.curry_printer import Printer
        return Printer().pformat(self)

    def __eq__(self, other):
        if not isinstance(other, Bound):
            return NotImplemented
        return self.func == other.func and self.args == other.args and self.keywords == other.keywords

    __hash__ = None


class Cell:
    """The minimal unit of partial application: a value and its ownership.

    Cells are never mutated. `borrow()` hands out the value by reference;
    `take()` moves it out and is rejected for borrowed cells.
    """
    def __init__(self, value: Any, ownership: Ownership = Ownership.BORROWED):
        if not isinstance(ownership, Ownership):
            raise TypeError(f"ownership must be an Ownership, not {type(ownership).__name__}")
        self._value = value
        self._ownership = ownership

    @property
    def value(self) -> Any:
        return self._value

    @property
    def ownership(self) -> Ownership:
        return self._ownership

    def borrow(self) -> Any:
        return self._value

    def take(self) -> Any:
        if self._ownership is Ownership.BORROWED:
            raise OwnershipError(
                "Cannot move a value out of a borrowed cell",
                f"cell borrows {type(self._value).__name__}; capture it by reference instead",
            )
        return self._value

    def __repr__(self) -> str:
        return f"Cell({self._value!r}, {self._ownership!r})"

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return self._ownership is other._ownership and self._value == other._value

    __hash__ = None
