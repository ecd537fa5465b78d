import pytest

from curry.curry_datatypes import Ownership
from curry.curry_handle import curry, uncurry


def make_expr(log):
    def expr(a, b):
        log.append("expr")

        def inner(c, d):
            log.append("inner")
            return a + b + c + d

        return inner

    return expr


def hundred():
    return 100


def outer():
    def first(a):
        def second(b):
            def last():
                return a + b
            return last
        return second
    return first

@pytest.mark.parametrize(
    "apply",
    [
        lambda h: h(1)(2, 4)(8),
        lambda h: h(1, 2, 4, 8),
        lambda h: h(1)(2)(4)(8),
        lambda h: h(1, 2)(4, 8),
        lambda h: h(1, 2, 4)(8),
        lambda h: h(1)(2, 4, 8),
    ],
    ids=["1-2,4-8", "1,2,4,8", "1-2-4-8", "1,2-4,8", "1,2,4-8", "1-2,4,8"],
)
def test_groupings_are_equivalent(apply):
    log = []
    assert apply(curry(make_expr(log))) == 15
    assert log == ["expr", "inner"]


@pytest.mark.parametrize("ownership", [Ownership.BORROWED, Ownership.OWNED])
def test_groupings_under_both_ownerships(ownership):
    log = []
    h = curry(make_expr(log), ownership)
    assert h(1)(2, 4)(8) == 15
    assert h(1, 2, 4, 8) == 15
    assert log == ["expr", "inner", "expr", "inner"]


def test_wrap_is_idempotent():
    log = []
    h = curry(make_expr(log))
    assert curry(curry(h)) is h
    assert curry(h)(1, 2, 4, 8) == 15


def test_unit_application_invokes_zero_argument_callable():
    h = curry(hundred)
    assert h() == 100
    assert h != 100
    assert callable(uncurry(h))


def test_unit_grouping_unit_chain():
    assert curry(outer)()(1, 2)() == 3
    assert curry(outer)()(10)(20)() == 30


def test_void_callable(capsys):
    assert curry(print)("hi") is None
    assert capsys.readouterr().out == "hi\n"


def test_terminal_handles_mix_with_plain_values():
    assert sum([curry(1), curry(2), 3]) == 6
    total = curry(make_expr([]))(1, 2, 4, 8)
    assert total * 2 == 30
    assert max(total, 10) == 15
