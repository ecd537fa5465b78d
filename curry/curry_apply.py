"""
The application engine: applies argument requests to cells one
application at a time and re-wraps whatever comes out.
"""
import inspect
import os
import sys
from typing import Any, Dict, Optional, Tuple

from curry.curry_datatypes import (
    ArityError, Bound, Capture, Cell, Context, CurriedHandle, Ownership
)
from curry.curry_ownership import OwnershipResolver
from curry.curry_printer import Printer


# Outcomes of binding an argument list against a callable's signature
COMPLETE = "complete"
PARTIAL = "partial"
OVERFULL = "overfull"


def signature_of(func: Any) -> Optional[inspect.Signature]:
    """Returns the signature of func, or None when it cannot be inspected."""
    try:
        return inspect.signature(func)
    except (TypeError, ValueError):
        return None


def binding_state(func: Any, args: Tuple[Any, ...] = (), keywords: Optional[Dict[str, Any]] = None) -> str:
    """Classifies args/keywords against func's signature.

    COMPLETE: func can be invoked with exactly these arguments.
    PARTIAL: more arguments are needed.
    OVERFULL: no further arguments can ever make the call well-formed.

    Bound values are checked against their root callable with all the
    arguments accumulated so far. A callable whose signature cannot be
    inspected is assumed to be invocable.
    """
    keywords = keywords or {}
    if isinstance(func, Bound):
        args = func.args + tuple(args)
        keywords = {**func.keywords, **keywords}
        func = func.func
    sig = signature_of(func)
    if sig is None:
        return COMPLETE
    try:
        sig.bind_partial(*args, **keywords)
    except TypeError:
        return OVERFULL
    try:
        sig.bind(*args, **keywords)
    except TypeError:
        return PARTIAL
    return COMPLETE


class Applier:
    """Applies argument requests to cells.

    Every public call is one application request: the first argument is
    applied in the caller's context, the remaining ones are applied one at
    a time to the intermediate handles, which are transient.
    """

    def __init__(self, resolver: Optional[OwnershipResolver] = None):
        self.resolver = resolver or OwnershipResolver()
        self.printer = Printer()

    def _dbg(self, event: str, **fields):
        mode = os.environ.get("CURRY_DEBUG")
        if not mode:
            return
        try:
            if mode.lower() in ("yaml", "json"):
                from curry.curry_serialize import serialize
                doc = serialize({"event": event, **{k: repr(v) for k, v in fields.items()}}, fmt=mode.lower())
                print(doc.rstrip("\n"), file=sys.stderr)
                if mode.lower() == "yaml":
                    print("---", file=sys.stderr)
            else:
                parts = " ".join(f"{k}={v!r}" for k, v in fields.items())
                print("[DBG]", event, parts, file=sys.stderr)
        except Exception:
            pass

    # -----------------------------------------------------------------
    # Public entry points
    # -----------------------------------------------------------------

    def apply(self, cell: Cell, args: Tuple[Any, ...], kwargs: Dict[str, Any],
              context: Context = Context.PERSISTENT) -> Any:
        """Applies one request to a cell; returns a handle or None (no value)."""
        if not args and not kwargs:
            return self._seal(self.apply_unit(cell, context))

        result = self._apply_one(cell, args[:1], kwargs, context)
        for position, arg in enumerate(args[1:], start=2):
            if result is None:
                raise ArityError(
                    f"{self.printer.callable_name(cell.value)}() returned no value before argument {position} was applied",
                    "a call that returns None ends the chain",
                )
            result = self._apply_one(result._cell, (arg,), {}, Context.TRANSIENT)
        return self._seal(result)

    def apply_unit(self, cell: Cell, context: Context = Context.PERSISTENT) -> Any:
        """Invokes the cell's value with no further arguments."""
        capture = self.resolver.capture(cell, context)
        func = self.resolver.captured_value(cell, capture)
        if not callable(func):
            raise ArityError(
                f"'{type(func).__name__}' object is not callable",
                "a unit application needs a callable value",
            )
        state = binding_state(func)
        if state != COMPLETE:
            raise ArityError(
                f"{self.printer.callable_name(func)}() cannot be invoked without arguments",
                f"unit application on a callable that is {state}",
            )
        self._dbg("invoke", func=self.printer.callable_name(func), capture=capture, argc=0)
        return self.rewrap(func(), func)

    def rewrap(self, result: Any, invoked: Any) -> Any:
        """Folds an invocation result back into a handle.

        None is "no value" and passes through. Handles are returned as they
        are. Anything else, callable or not, becomes a new handle whose
        ownership reflects whether the result outlives the call.
        """
        if result is None:
            self._dbg("rewrap", result=None)
            return None
        if isinstance(result, CurriedHandle):
            self._dbg("rewrap", result="handle", unchanged=True)
            return result
        ownership = self.resolver.result(result, invoked)
        self._dbg("rewrap", result=type(result).__name__, ownership=ownership)
        return self._handle(Cell(result, ownership))

    # -----------------------------------------------------------------
    # Single application
    # -----------------------------------------------------------------

    def _apply_one(self, cell: Cell, args: Tuple[Any, ...], kwargs: Dict[str, Any], context: Context) -> Any:
        capture = self.resolver.capture(cell, context)
        func = self.resolver.captured_value(cell, capture)
        if not callable(func):
            raise ArityError(
                f"'{type(func).__name__}' object is not callable",
                "arguments were applied to a terminal value",
            )

        bound = self._bind(func, args, kwargs, capture)
        state = binding_state(bound)
        self._dbg("bind", func=self.printer.callable_name(bound), capture=capture, argc=len(bound.args), state=state)

        if state == OVERFULL:
            raise ArityError(
                f"{self.printer.callable_name(bound)}() does not accept the arguments applied to it",
                f"args={bound.args!r} keywords={bound.keywords!r}",
            )
        if state == PARTIAL:
            self._dbg("defer", func=self.printer.callable_name(bound), ownership=cell.ownership)
            return self._handle(Cell(bound, cell.ownership))

        self._dbg("invoke", func=self.printer.callable_name(bound), argc=len(bound.args))
        return self.rewrap(bound(), bound)

    def _bind(self, func: Any, args: Tuple[Any, ...], kwargs: Dict[str, Any], capture: Capture) -> Bound:
        # Only an unsealed Bound owned by this request can be extended in place.
        if capture is Capture.MOVE and isinstance(func, Bound) and not func.sealed:
            return func.extend_in_place(args, kwargs)
        if isinstance(func, Bound):
            return func.extend(args, kwargs)
        return Bound.fresh(func, args, kwargs)

    def _seal(self, result: Any) -> Any:
        if isinstance(result, CurriedHandle):
            value = result._cell.value
            if isinstance(value, Bound) and not value.sealed:
                value.seal()
        return result

    def _handle(self, cell: Cell) -> CurriedHandle:
        from curry.curry_handle import Curried  # local import to avoid an import cycle
        return Curried(cell)
