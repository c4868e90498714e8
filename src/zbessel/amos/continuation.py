"""Analytic continuation of K into the left half plane

For Re(z) < 0,

    K(fnu, z) = exp(-i pi mr fnu) K(fnu, -z) - i pi mr I(fnu, -z),   mr = +-1

with both functions on the right of the imaginary axis. The K sequence at
-z is recurred forward from its two lowest orders, and each member is
combined with the matching I member. For scaled values the K term carries
an extra exp(-2z), which is applied in logarithms until it is either
negligible three times in a row or safely on scale.
"""

import logging

import numpy as np

from zbessel.amos.binu import binu
from zbessel.amos.kfunc import bknu
from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.scaling import LadderRecurrence, ScaleLadder, ScaleLevel, add_decaying_term
from zbessel.amos.types import Evaluation, Scaling

logger = logging.getLogger(__name__)


def acon(
    z: complex, fnu: float, kode: Scaling, mr: int, n: int, wp: WorkingPrecision
) -> Evaluation:
    """K(fnu + k, z), k = 0..n-1, for Re(z) < 0

    Args:
        mr: +1 or -1, the direction of rotation from -z to z

    Returns:
        Evaluation with nz the number of scaled members lost to underflow,
        or negative on failure of either underlying evaluation.
    """
    zn = -z
    y, nw = binu(zn, fnu, kode, n, wp)
    if nw < 0:
        return Evaluation(y, -2 if nw == -2 else -1)
    cy, nw = bknu(zn, fnu, kode, min(2, n), wp)
    if nw != 0:
        return Evaluation(y, -2 if nw == -2 else -1)

    nz = 0
    sgn = -np.copysign(np.pi, mr)
    csgn = complex(0.0, sgn)
    if kode == Scaling.SCALED:
        csgn = csgn * complex(np.cos(z.imag), np.sin(z.imag))
    # exp(i fnu pi sgn), reduced by the integer part of fnu
    inu = int(fnu)
    arg = (fnu - inu) * sgn
    cspn = complex(np.cos(arg), np.sin(arg))
    if inu % 2:
        cspn = -cspn

    ascle = wp.ascle
    iuf = 0
    saved = [0j, 0j]
    for i in range(min(2, n)):
        c1 = complex(cy[i])
        c2 = complex(y[i])
        if kode == Scaling.SCALED:
            c1, c2, underflow, iuf = add_decaying_term(zn, c1, c2, ascle, wp.alim, iuf)
            nz += underflow
            saved[i] = c1
        y[i] = cspn * c1 + csgn * c2
        cspn = -cspn
    if n <= 2:
        return Evaluation(y, nz)

    ladder = ScaleLadder.for_precision(wp)
    as2 = abs(cy[1])
    level = ScaleLevel.NONE
    if as2 <= ladder.bounds[0]:
        level = ScaleLevel.UNDERFLOW_GUARD
    elif as2 >= ladder.bounds[1]:
        level = ScaleLevel.OVERFLOW_GUARD
    scale = ladder.scales[level]
    rec = LadderRecurrence(complex(cy[0]) * scale, complex(cy[1]) * scale, level, ladder)
    azn = abs(zn)
    razn = 1.0 / azn
    rz = 2.0 * complex(zn.real * razn, -zn.imag * razn) * razn
    ck = (fnu + 1.0) * rz
    for i in range(2, n):
        c1 = rec.step(ck)
        c2 = complex(y[i])
        if kode == Scaling.SCALED and iuf >= 0:
            c1, c2, underflow, iuf = add_decaying_term(zn, c1, c2, ascle, wp.alim, iuf)
            nz += underflow
            saved = [saved[1], c1]
            if iuf == 3:
                # exp(-2z) K is now on scale; recur on it directly
                iuf = -4
                scale = ladder.scales[rec.level]
                rec.s1 = saved[0] * scale
                rec.s2 = saved[1] * scale
        y[i] = cspn * c1 + csgn * c2
        ck += rz
        cspn = -cspn
    return Evaluation(y, nz)
