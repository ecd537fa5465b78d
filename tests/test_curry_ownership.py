import pytest

from curry.curry_datatypes import Bound, Capture, Cell, Context, Ownership, OwnershipError
from curry.curry_handle import curry
from curry.curry_ownership import OwnershipResolver


class Counter:
    def __init__(self, offset):
        self.offset = offset

    def __call__(self, x):
        return x + self.offset


class Box:
    def __init__(self):
        self.fn = lambda x: x * 2

    def get(self):
        return self.fn

    def build(self):
        return lambda x: x * 3

    def pick(self, name):
        return getattr(self, name)


def identity(x):
    return x


def make_list(x):
    return [x]

# --- Wrap ---

def test_wrap_defaults_to_borrowed_reference():
    counter = Counter(1)
    cell = OwnershipResolver().wrap(counter)
    assert cell.ownership is Ownership.BORROWED
    assert cell.value is counter


def test_wrap_owned_takes_a_snapshot():
    counter = Counter(1)
    cell = OwnershipResolver().wrap(counter, Ownership.OWNED)
    assert cell.ownership is Ownership.OWNED
    assert cell.value is not counter
    counter.offset = 100
    assert cell.value(1) == 2

# --- Capture ---

@pytest.mark.parametrize(
    "ownership,context,expected",
    [
        (Ownership.BORROWED, Context.PERSISTENT, Capture.REFERENCE),
        (Ownership.OWNED, Context.PERSISTENT, Capture.REFERENCE),
        (Ownership.BORROWED, Context.TRANSIENT, Capture.REFERENCE),
        (Ownership.OWNED, Context.TRANSIENT, Capture.MOVE),
    ],
)
def test_capture_rules(ownership, context, expected):
    cell = Cell(identity, ownership)
    assert OwnershipResolver().capture(cell, context) is expected


def test_captured_value_by_reference_and_move():
    r = OwnershipResolver()
    owned = Cell(identity, Ownership.OWNED)
    assert r.captured_value(owned, Capture.MOVE) is identity
    assert r.captured_value(owned, Capture.REFERENCE) is identity


def test_moving_out_of_borrowed_cell_is_rejected():
    r = OwnershipResolver()
    with pytest.raises(OwnershipError):
        r.captured_value(Cell(identity, Ownership.BORROWED), Capture.MOVE)

# --- Results ---

def test_fresh_result_is_owned():
    r = OwnershipResolver()
    result = make_list(1)
    assert r.result(result, Bound(make_list, (1,))) is Ownership.OWNED


def test_result_returning_captured_argument_is_borrowed():
    r = OwnershipResolver()
    item = ["kept"]
    assert r.result(item, Bound(identity, (item,))) is Ownership.BORROWED


def test_result_returning_the_callable_itself_is_borrowed():
    r = OwnershipResolver()
    assert r.result(identity, identity) is Ownership.BORROWED


def test_result_returning_receiver_field_is_borrowed():
    r = OwnershipResolver()
    box = Box()
    assert r.result(box.get(), box.get) is Ownership.BORROWED
    assert r.result(box.get(), Bound(box.get)) is Ownership.BORROWED
    assert r.result(box.build(), box.build) is Ownership.OWNED


def test_builtin_receiver_without_fields():
    r = OwnershipResolver()
    items = []
    assert r.result(object(), items.append) is Ownership.OWNED
    assert r.result(items.copy(), items.copy) is Ownership.OWNED

# --- Results through handles ---

def test_accessor_results_are_borrowed_through_handles():
    box = Box()
    got = curry(box.get)()
    assert got.ownership is Ownership.BORROWED
    assert got.value is box.fn
    picked = curry(box.pick)("fn")
    assert picked.ownership is Ownership.BORROWED
    assert picked(4) == 8


def test_fresh_results_are_owned_through_handles():
    box = Box()
    assert curry(box.build)().ownership is Ownership.OWNED
    assert curry(make_list)(1).ownership is Ownership.OWNED
    item = ["kept"]
    assert curry(identity)(item).ownership is Ownership.BORROWED
