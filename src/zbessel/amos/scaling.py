"""Scale guard and three-level scale ladder

Recurrences near the overflow or underflow limits carry their terms
multiplied by 1/tol or tol, and only remove the factor when storing a
result. These helpers decide when that removal would underflow.
"""

from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from zbessel.amos.machine import WorkingPrecision


class ScaleLevel(IntEnum):
    """Protection applied to a recurrence in progress

    Values index into the ScaleLadder tuples.
    """

    UNDERFLOW_GUARD = 0
    """Terms are multiplied by 1/tol"""
    NONE = 1
    OVERFLOW_GUARD = 2
    """Terms are multiplied by tol"""


@dataclass(frozen=True)
class ScaleLadder:
    """Multipliers and magnitude bounds for each ScaleLevel"""

    scales: tuple[float, float, float]
    """Factor applied to recurrence terms at each level"""
    rescales: tuple[float, float, float]
    """Inverse factor, applied when storing a result"""
    bounds: tuple[float, float, float]
    """Largest scaled magnitude that is safe at each level"""

    @classmethod
    def for_precision(cls, wp: WorkingPrecision):
        tol = wp.tol
        ascle = wp.ascle
        return cls(
            scales=(1.0 / tol, 1.0, tol),
            rescales=(tol, 1.0, 1.0 / tol),
            bounds=(ascle, 1.0 / ascle, wp.machine.huge),
        )


class LadderRecurrence:
    """Three-term recurrence s_next = ck s2 + s1 carried on a ScaleLadder

    The stored terms s1, s2 include the multiplier of the current level.
    Each step returns the new term with the multiplier removed and moves
    up one level when that value exceeds the bound of the current level.
    """

    def __init__(self, s1: complex, s2: complex, level: ScaleLevel, ladder: ScaleLadder):
        self.s1 = s1
        self.s2 = s2
        self.level = level
        self.ladder = ladder

    def step(self, ck: complex) -> complex:
        rescale = self.ladder.rescales[self.level]
        self.s1, self.s2 = self.s2, ck * self.s2 + self.s1
        value = self.s2 * rescale
        if self.level == ScaleLevel.OVERFLOW_GUARD:
            return value
        if max(abs(value.real), abs(value.imag)) <= self.ladder.bounds[self.level]:
            return value
        self.level = ScaleLevel(self.level + 1)
        scale = self.ladder.scales[self.level]
        self.s1 = self.s1 * rescale * scale
        self.s2 = value * scale
        return value


def underflows(y: complex, ascle: float, tol: float) -> bool:
    """Whether a value carried with a 1/tol scale factor underflows once unscaled

    The smaller component is tested against ascle; the value is treated as
    lost when the larger component is below smaller/tol, since then the
    complex magnitude is dominated by a component that will flush to zero.
    """
    wr = abs(y.real)
    wi = abs(y.imag)
    st = min(wr, wi)
    if st > ascle:
        return False
    return max(wr, wi) < st / tol


def add_decaying_term(
    z: complex, s1: complex, s2: complex, ascle: float, alim: float, iuf: int
) -> tuple[complex, complex, bool, int]:
    """Combine K-type analytic continuation terms on the scaled scale

    For scaled evaluations in the left half plane, s1 is a K-function value
    that must be multiplied by exp(-2z) before it is added to the I-function
    term s2. The product is formed in logarithms so it can underflow
    gracefully.

    Returns:
        (s1, s2, underflow, iuf): the adjusted terms, whether both terms are
        below ascle (in which case both are zeroed), and the updated count
        of consecutive scaled-term underflows.
    """
    as1 = abs(s1)
    as2 = abs(s2)
    if as1 != 0.0:
        aln = -2.0 * z.real + np.log(as1)
        s1d = s1
        s1 = 0j
        as1 = 0.0
        if aln >= -alim:
            s1 = complex(np.exp(np.log(s1d) - 2.0 * z))
            as1 = abs(s1)
            iuf += 1
    if max(as1, as2) > ascle:
        return s1, s2, False, iuf
    return 0j, 0j, True, 0
