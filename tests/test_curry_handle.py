import pytest

from curry.curry_handle import Curried, curry, uncurried_type, uncurry
from curry.curry_datatypes import Cell, CurriedHandle, CurryError, Ownership


def add3(a, b, c):
    return a + b + c


class Scale:
    def __init__(self, factor):
        self.factor = factor

    def __call__(self, x):
        return x * self.factor


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y


class Account:
    def __init__(self, balance):
        self.balance = balance

    @curry
    def deposit(self, amount, fee):
        self.balance += amount - fee
        return self.balance


class Secretive:
    _secret = "hidden"
    public = "shown"

# --- Wrapping ---

def test_curry_is_idempotent():
    h = curry(add3)
    assert curry(h) is h
    assert curry(h, Ownership.BORROWED) is h
    assert isinstance(h, CurriedHandle)


def test_curry_switches_ownership():
    h = curry(add3)
    o = curry(h, Ownership.OWNED)
    assert o is not h
    assert o.ownership is Ownership.OWNED
    assert h.owned().ownership is Ownership.OWNED
    assert o.borrowed().ownership is Ownership.BORROWED
    assert o(1, 2, 3) == 6


def test_curried_requires_a_cell():
    with pytest.raises(TypeError):
        Curried(add3)
    assert Curried(Cell(add3))(1)(2)(3) == 6

# --- Terminal values ---

def test_terminal_handle_behaves_as_value():
    t = curry(add3)(4, 5, 6)
    assert t == 15
    assert t != 14
    assert int(t) == 15
    assert float(t) == 15.0
    assert t + 1 == 16
    assert 1 + t == 16
    assert t * t == 225
    assert format(t, "03") == "015"
    assert str(t) == "15"
    assert hash(t) == hash(15)
    assert t < 16 and t >= 15
    assert list(range(20))[t] == 15
    assert -t == -15
    assert bool(t)


def test_string_handle():
    s = curry("hello world")
    assert len(s) == 11
    assert "world" in s
    assert s.upper() == "HELLO WORLD"
    assert s[0] == "h"
    assert list(curry("ab")) == ["a", "b"]


def test_uncurry():
    items = [1, 2]
    h = curry(items)
    assert uncurry(h) is items
    assert uncurried_type(h) is list
    assert uncurried_type(curry(add3)(1)).__name__ == "Bound"
    with pytest.raises(CurryError):
        uncurry(items)
    with pytest.raises(CurryError):
        uncurried_type(items)

# --- Borrowing and owning ---

def test_borrowed_handle_observes_mutation():
    sc = Scale(2)
    h = curry(sc)
    sc.factor = 3
    assert h(5) == 15


def test_owned_handle_holds_snapshot():
    sc = Scale(3)
    o = curry(sc, Ownership.OWNED)
    sc.factor = 10
    assert o(5) == 15
    assert uncurry(o) is not sc


def test_handles_are_reapplicable():
    h = curry(add3)(1)
    assert h(2)(3) == 6
    assert h(10, 20) == 31
    assert h(2, 3) == 6

# --- Methods and attributes ---

def test_method_decorator_binds_instance():
    acct = Account(100)
    assert acct.deposit(50)(5) == 145
    assert acct.balance == 145
    assert acct.deposit(10, 0) == 155
    assert isinstance(Account.deposit, Curried)


def test_non_function_class_attributes_do_not_bind():
    class Holder:
        make = curry(Point)
        scale = curry(Scale(2))
        sized = curry(len)
        add_one = curry(add3)(1)

    holder = Holder()
    assert holder.make is Holder.make
    point = holder.make(1, 2)
    assert (point.x, point.y) == (1, 2)
    assert holder.scale(4) == 8
    assert holder.sized("abc") == 3
    assert holder.add_one(2, 3) == 6


def test_name_is_forwarded():
    h = curry(add3)
    assert h.__name__ == "add3"
    assert h.__qualname__ == "add3"
    assert h.__wrapped__ is add3


def test_private_attributes_are_not_forwarded():
    h = curry(Secretive())
    assert h.public == "shown"
    with pytest.raises(AttributeError):
        h._secret

# --- Representation ---

@pytest.mark.parametrize(
    "handle, expected",
    [
        (curry(add3), "curry(add3)"),
        (curry(add3)(1, 2), "curry(add3)(1, 2)"),
        (curry(add3, Ownership.OWNED)(1), "curry(add3, ownership=Ownership.OWNED)(1)"),
        (curry(15), "curry(15)"),
        (curry("x"), "curry('x')"),
        (curry(add3)(4, 5, 6), "curry(15, ownership=Ownership.OWNED)"),
    ],
)
def test_repr(handle, expected):
    assert repr(handle) == expected
