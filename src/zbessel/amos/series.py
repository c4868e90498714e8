"""Power series for the I-type Bessel function

I(fnu, z) = (z/2)**fnu * sum_k (z**2/4)**k / (k! Gamma(fnu + k + 1))

Valid for |z| <= 2 or |z|**2/4 <= fnu + 1. The two highest requested
orders are summed directly and the rest come from backward recurrence.
"""

import logging

import numpy as np
from scipy.special import gammaln

from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.scaling import underflows
from zbessel.amos.types import Evaluation, Scaling

logger = logging.getLogger(__name__)


def seri(z: complex, fnu: float, kode: Scaling, n: int, wp: WorkingPrecision) -> Evaluation:
    """I(fnu + k, z) for k = 0..n-1 by the power series

    Leading terms that underflow are set to zero and counted in nz. If an
    underflowed order is still inside the region where the series terms
    grow (|z|**2/4 > order), nz is returned negated so that the caller can
    switch to an overflow/underflow pre-test.
    """
    y = np.zeros(n, dtype=np.complex128)
    az = abs(z)
    if az == 0.0:
        if fnu == 0.0:
            y[0] = 1.0
        return Evaluation(y, 0)
    arm = 1000.0 * wp.machine.tiny
    if az < arm:
        if fnu == 0.0:
            y[0] = 1.0
            return Evaluation(y, n - 1)
        return Evaluation(y, n)

    tol = wp.tol
    rtr1 = np.sqrt(arm)
    hz = 0.5 * z
    cz = hz * hz if az > rtr1 else 0j
    acz = abs(cz)
    ck = complex(np.log(hz))
    guarded = False
    crscr = 1.0
    ss = 1.0
    ascle = arm
    w = [0j, 0j]

    nz = 0
    nn = n
    while nn > 0:
        dfnu = fnu + (nn - 1)
        fnup = dfnu + 1.0
        ak1 = ck * dfnu - gammaln(fnup)
        ak1r = ak1.real
        if kode == Scaling.SCALED:
            ak1r -= z.real
        lost = ak1r <= -wp.elim
        if not lost:
            if ak1r <= -wp.alim:
                guarded = True
                ss = 1.0 / tol
                crscr = tol
                ascle = arm * ss
            aa = np.exp(ak1r)
            if guarded:
                aa *= ss
            coef = complex(aa * np.cos(ak1.imag), aa * np.sin(ak1.imag))
            atol = tol * acz / fnup
            il = min(2, nn)
            for i in range(il):
                dfnu = fnu + (nn - 1 - i)
                fnup = dfnu + 1.0
                s1 = 1 + 0j
                if acz >= tol * fnup:
                    ak1 = 1 + 0j
                    ak = fnup + 2.0
                    s = fnup
                    aa = 2.0
                    while True:
                        rs = 1.0 / s
                        ak1 = ak1 * cz * rs
                        s1 += ak1
                        s += ak
                        ak += 2.0
                        aa = aa * acz * rs
                        if aa <= atol:
                            break
                s2 = s1 * coef
                w[i] = s2
                if guarded and underflows(s2, ascle, tol):
                    lost = True
                    break
                y[nn - 1 - i] = s2 * crscr
                if i != il - 1:
                    coef = coef / hz * dfnu
        if not lost:
            break
        nz += 1
        y[nn - 1] = 0j
        if acz > dfnu:
            logger.debug(f"Series underflow at order {dfnu} inside the growth region")
            return Evaluation(y, -nz)
        nn -= 1
    if nn <= 2:
        return Evaluation(y, nz)

    raz = 1.0 / az
    rz = 2.0 * complex(z.real * raz, -z.imag * raz) * raz
    k = nn - 3
    ak = float(nn - 2)
    start = 3
    if guarded:
        s1, s2 = w
        start = nn + 1
        for step in range(3, nn + 1):
            ck = s2
            s2 = s1 + (ak + fnu) * (rz * ck)
            s1 = ck
            ck = s2 * crscr
            y[k] = ck
            ak -= 1.0
            k -= 1
            if abs(ck) > ascle:
                start = step + 1
                break
    for _ in range(start, nn + 1):
        y[k] = (ak + fnu) * (rz * y[k + 1]) + y[k + 2]
        ak -= 1.0
        k -= 1
    return Evaluation(y, nz)
