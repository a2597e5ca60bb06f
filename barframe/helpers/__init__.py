# barframe/helpers/__init__.py
"""
Element helpers and the behaviour flags that select them.

A BarElement's behaviour is a BarBehaviour bitmask. Every single flag maps
to exactly one helper constructor in BEHAVIOUR_HELPERS; the element asks
`helpers_for(behaviour)` for its helper set and sums their matrices.

    >>> [repr(h) for h in helpers_for(BarBehaviour.TRUSS | BarBehaviour.SHAFT)]
    ['TrussHelper()', 'ShaftHelper()']
"""

from enum import IntFlag
from typing import Callable, Dict, List

from ..errors import ConfigurationError
from .base import ElementHelper, cut_resultant
from .beam import BeamDirection, EulerBernoulliBeamHelper, TimoshenkoBeamHelper
from .rod import ShaftHelper, TrussHelper


class BarBehaviour(IntFlag):
    """Physical behaviours a bar element can combine."""
    NONE = 0
    BEAM_Y_EULER_BERNOULLI = 1
    BEAM_Y_TIMOSHENKO = 2
    BEAM_Z_EULER_BERNOULLI = 4
    BEAM_Z_TIMOSHENKO = 8
    TRUSS = 16
    SHAFT = 32

    FULL_BEAM = BEAM_Y_EULER_BERNOULLI | BEAM_Z_EULER_BERNOULLI
    FULL_FRAME = FULL_BEAM | TRUSS | SHAFT
    FULL_FRAME_TIMOSHENKO = BEAM_Y_TIMOSHENKO | BEAM_Z_TIMOSHENKO | TRUSS | SHAFT


BEHAVIOUR_HELPERS: Dict[BarBehaviour, Callable[[], ElementHelper]] = {
    BarBehaviour.BEAM_Y_EULER_BERNOULLI: lambda: EulerBernoulliBeamHelper(BeamDirection.Y),
    BarBehaviour.BEAM_Y_TIMOSHENKO: lambda: TimoshenkoBeamHelper(BeamDirection.Y),
    BarBehaviour.BEAM_Z_EULER_BERNOULLI: lambda: EulerBernoulliBeamHelper(BeamDirection.Z),
    BarBehaviour.BEAM_Z_TIMOSHENKO: lambda: TimoshenkoBeamHelper(BeamDirection.Z),
    BarBehaviour.TRUSS: TrussHelper,
    BarBehaviour.SHAFT: ShaftHelper,
}

# flag pairs that would add two bending formulations to one DOF block
_EXCLUSIVE = (
    BarBehaviour.BEAM_Y_EULER_BERNOULLI | BarBehaviour.BEAM_Y_TIMOSHENKO,
    BarBehaviour.BEAM_Z_EULER_BERNOULLI | BarBehaviour.BEAM_Z_TIMOSHENKO,
)


def validate_behaviour(behaviour: int) -> BarBehaviour:
    """Check a behaviour bitmask, returning it as BarBehaviour."""
    known = sum(int(flag) for flag in BEHAVIOUR_HELPERS)
    if int(behaviour) & ~known:
        raise ConfigurationError(f"Unknown behaviour bits in {behaviour:#x}")
    behaviour = BarBehaviour(behaviour)
    if not behaviour:
        raise ConfigurationError("Element behaviour is empty")
    for pair in _EXCLUSIVE:
        if behaviour & pair == pair:
            raise ConfigurationError(
                f"{behaviour!r} combines Euler-Bernoulli and Timoshenko bending on the same axis"
            )
    return behaviour


def helpers_for(behaviour: int) -> List[ElementHelper]:
    """Helper instances for every flag set in `behaviour`, in table order."""
    behaviour = validate_behaviour(behaviour)
    return [make() for flag, make in BEHAVIOUR_HELPERS.items() if behaviour & flag]


__all__ = [
    "BarBehaviour",
    "BEHAVIOUR_HELPERS",
    "BeamDirection",
    "ElementHelper",
    "EulerBernoulliBeamHelper",
    "ShaftHelper",
    "TimoshenkoBeamHelper",
    "TrussHelper",
    "cut_resultant",
    "helpers_for",
    "validate_behaviour",
]
