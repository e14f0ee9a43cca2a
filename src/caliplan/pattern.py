"""
Rotation patterns.

A pattern is a cycle of slots: an int is an index into the routine list, REST
is a rest day. The shape depends only on how many routines there are.
"""
from enum import IntEnum
from typing import Dict, Optional, Sequence, Tuple

REST = None

Slot = Optional[int]


class RotationShape(IntEnum):
    FULL_BODY = 1
    AB = 2
    ABC = 3
    ABCD = 4  # also used for five or more routines; extra ones are left out

    @classmethod
    def for_count(cls, routine_count: int) -> Optional["RotationShape"]:
        if routine_count <= 0:
            return None
        return cls(min(routine_count, cls.ABCD))


PATTERNS: Dict[RotationShape, Tuple[Slot, ...]] = {
    RotationShape.FULL_BODY: (0, REST),
    RotationShape.AB: (0, 1, REST),
    RotationShape.ABC: (0, 1, 2, REST),
    RotationShape.ABCD: (0, 1, REST, 2, 3, REST, REST),
}


def pattern_for(routine_count: int) -> Tuple[Slot, ...]:
    shape = RotationShape.for_count(routine_count)
    if shape is None:
        return ()
    return PATTERNS[shape]


def first_slot_for(pattern: Sequence[Slot], routine_index: int) -> int:
    """Position of the first slot for a routine index, or -1"""
    for position, slot in enumerate(pattern):
        if slot is not REST and slot == routine_index:
            return position
    return -1
