#!/usr/bin/env python3
"""
Pointer and counter primitives.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfengine.errors import BoundsError, ProgramCounterError
from bfengine.state import TAPE_CAPACITY, DataPointer, ProgramCounter


def test_pointer_moves_by_whole_offset():
    ptr = DataPointer()
    ptr.shift(10)
    ptr.shift(-4)
    assert ptr.index == 6
    ptr.shift(TAPE_CAPACITY - 1 - 6)
    assert ptr.index == TAPE_CAPACITY - 1


@pytest.mark.parametrize("start, offset", [(0, -1), (5, -6), (0, TAPE_CAPACITY), (TAPE_CAPACITY - 1, 1)])
def test_pointer_out_of_range_is_rejected(start, offset):
    ptr = DataPointer(index=start)
    with pytest.raises(BoundsError) as excinfo:
        ptr.shift(offset)
    assert ptr.index == start
    assert excinfo.value.pointer == start
    assert excinfo.value.offset == offset


def test_bounds_messages_name_direction():
    with pytest.raises(BoundsError, match="past the last cell"):
        DataPointer(capacity=3, index=2).shift(1)
    with pytest.raises(BoundsError, match="before the first cell"):
        DataPointer(capacity=3).shift(-1)


def test_counter_runs_to_length():
    counter = ProgramCounter(2)
    counter.advance()
    assert not counter.at_end
    counter.advance()
    assert counter.at_end
    with pytest.raises(ProgramCounterError):
        counter.advance()
    assert counter.index == 2


@pytest.mark.parametrize("target", [-1, 3, 10])
def test_counter_rejects_bad_jump(target):
    counter = ProgramCounter(3, index=1)
    with pytest.raises(ProgramCounterError) as excinfo:
        counter.jump(target)
    assert counter.index == 1
    assert excinfo.value.length == 3


def test_counter_reset():
    counter = ProgramCounter(4, index=4)
    counter.reset(length=7)
    assert (counter.index, counter.length) == (0, 7)
    assert ProgramCounter(0).at_end
