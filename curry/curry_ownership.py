"""
Resolves how the engine holds and captures values.

Three decisions live here:
  - wrap: how a freshly wrapped value is held (borrowed reference or an
    owned snapshot),
  - capture: how one application captures the value of its cell,
  - result: how an invocation's result is held once it is re-wrapped.
"""
import copy
import inspect
from typing import Any, Iterable, Optional

from curry.curry_datatypes import Bound, Capture, Cell, Context, Ownership


class OwnershipResolver:
    """Decides ownership modes and capture kinds for the applier."""

    def wrap(self, value: Any, ownership: Optional[Ownership] = None) -> Cell:
        """Builds the cell for a value handed to `curry`.

        Values passed in from the outside are named references the caller
        keeps, so the default is to borrow them. An owned cell cannot move
        out of the caller's reference, so it takes a shallow copy.
        """
        if ownership is None or ownership is Ownership.BORROWED:
            return Cell(value, Ownership.BORROWED)
        return Cell(copy.copy(value), Ownership.OWNED)

    def capture(self, cell: Cell, context: Context) -> Capture:
        """Persistent contexts always borrow; transient ones move what they own."""
        if context is Context.PERSISTENT:
            return Capture.REFERENCE
        if cell.ownership is Ownership.OWNED:
            return Capture.MOVE
        return Capture.REFERENCE

    def captured_value(self, cell: Cell, capture: Capture) -> Any:
        if capture is Capture.MOVE:
            return cell.take()
        return cell.borrow()

    def result(self, result: Any, invoked: Any) -> Ownership:
        """Ownership of an invocation result.

        A result that is a reference into state outliving the call (the
        callable itself, one of its captured arguments, or a field of a
        bound method's receiver) is borrowed. Anything else is a fresh
        value and is moved into an owned cell without copying.
        """
        for survivor in self._survivors(invoked):
            if survivor is result:
                return Ownership.BORROWED
        return Ownership.OWNED

    def _survivors(self, invoked: Any) -> Iterable[Any]:
        func = invoked
        if isinstance(invoked, Bound):
            func = invoked.func
            yield from invoked.args
            yield from invoked.keywords.values()
        yield func
        receiver = getattr(func, "__self__", None)
        if receiver is None or inspect.ismodule(receiver):
            return
        yield receiver
        try:
            fields = vars(receiver)
        except TypeError:
            return
        yield from list(fields.values())
