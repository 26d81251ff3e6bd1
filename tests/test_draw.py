from __future__ import annotations

import math

import pytest

from jyro_sim.draw import PopMatrix, PushMatrix, Rotate, TransformStack, Translate


def test_translate_then_rotate() -> None:
    stack = TransformStack()
    for command in (PushMatrix(), Translate(10.0, 5.0), Rotate(math.pi / 2)):
        assert stack.apply(command)
    (x, y), = stack.transform([(1.0, 0.0)])
    assert math.isclose(x, 10.0, abs_tol=1e-9)
    assert math.isclose(y, 6.0)

    stack.apply(PopMatrix())
    assert stack.transform([(1.0, 2.0)]) == [(1.0, 2.0)]


def test_pop_past_root_raises() -> None:
    with pytest.raises(IndexError):
        TransformStack().pop()
