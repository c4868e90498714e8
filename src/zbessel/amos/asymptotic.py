"""Large-argument asymptotic expansion for the I-type Bessel function

I(fnu, z) ~ exp(z)/sqrt(2 pi z) * sum_k (-1)**k a_k(fnu) / z**k
          + phase * exp(-z)/sqrt(2 pi z) * sum_k a_k(fnu) / z**k

where a_k(fnu) = prod_{j=1..k} (4 fnu**2 - (2j-1)**2) / (k! 8**k).
Valid for |z| >= rl; the second sum matters only off the real axis.
"""

import logging

import numpy as np

from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.types import Evaluation, Scaling

logger = logging.getLogger(__name__)

RTPI = 0.159154943091895336
"""1 / (2 pi)"""


def asyi(z: complex, fnu: float, kode: Scaling, n: int, wp: WorkingPrecision) -> Evaluation:
    """I(fnu + k, z) for k = 0..n-1, Re(z) >= 0, by the asymptotic expansion

    Returns nz = -1 if exp(z) overflows and nz = -2 if the expansion does
    not converge within its term limit.
    """
    y = np.zeros(n, dtype=np.complex128)
    az = abs(z)
    arm = 1000.0 * wp.machine.tiny
    rtr1 = np.sqrt(arm)
    il = min(2, n)
    dfnu = fnu + (n - il)

    raz = 1.0 / az
    ak1 = complex(np.sqrt(complex(RTPI * z.real * raz * raz, -RTPI * z.imag * raz * raz)))
    cz = z if kode == Scaling.UNSCALED else complex(0.0, z.imag)
    if abs(cz.real) > wp.elim:
        return Evaluation(y, -1)
    dnu2 = dfnu + dfnu
    # multiply by exp(cz) only after recurrence, to avoid overflow in the terms
    deferred = abs(cz.real) > wp.alim and n > 2
    if not deferred:
        ak1 = ak1 * complex(np.exp(cz))
    fdn = dnu2 * dnu2 if dnu2 > rtr1 else 0.0
    ez = 8.0 * z
    aez = 8.0 * az
    s = wp.tol / aez
    jl = int(wp.rl + wp.rl) + 2
    p1 = 0j
    if z.imag != 0.0:
        # phase of the exponentially small contribution, exp(+-i pi fnu)
        inu = int(fnu)
        arg = (fnu - inu) * np.pi
        inu = inu + n - il
        bk = np.cos(arg)
        if z.imag < 0.0:
            bk = -bk
        p1 = complex(-np.sin(arg), bk)
        if inu % 2 == 1:
            p1 = -p1

    for k in range(il):
        sqk = fdn - 1.0
        atol = s * abs(sqk)
        sgn = 1.0
        cs1 = 1 + 0j
        cs2 = 1 + 0j
        ck = 1 + 0j
        ak = 0.0
        aa = 1.0
        bb = aez
        dk = ez
        for _ in range(jl):
            ck = ck / dk * sqk
            cs2 += ck
            sgn = -sgn
            cs1 += ck * sgn
            dk += ez
            aa = aa * abs(sqk) / bb
            bb += aez
            ak += 8.0
            sqk -= ak
            if aa <= atol:
                break
        else:
            logger.debug(f"Asymptotic expansion for |z|={az} did not converge")
            return Evaluation(y, -2)
        s2 = cs1
        if z.real + z.real < wp.elim:
            s2 += complex(np.exp(-2.0 * z)) * p1 * cs2
        fdn = fdn + 8.0 * dfnu + 4.0
        p1 = -p1
        y[n - il + k] = s2 * ak1

    if n <= 2:
        return Evaluation(y, 0)
    raz = 1.0 / az
    rz = 2.0 * complex(z.real * raz, -z.imag * raz) * raz
    k = n - 3
    ak = float(n - 2)
    for _ in range(3, n + 1):
        y[k] = (ak + fnu) * (rz * y[k + 1]) + y[k + 2]
        ak -= 1.0
        k -= 1
    if deferred:
        y *= complex(np.exp(cz))
    return Evaluation(y, 0)
