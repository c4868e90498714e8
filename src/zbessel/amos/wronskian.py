"""I-type Bessel function normalized by the Wronskian

Backward recurrence gives the ratios I(fnu+k+1, z)/I(fnu+k, z) without
any normalization. The K function at fnu and fnu+1 then fixes the scale:

    I(fnu, z) K(fnu+1, z) + I(fnu+1, z) K(fnu, z) = 1/z

Used for Re(z) >= 0 when the power series, asymptotic expansion and
Miller's algorithm are all out of range or would overflow.
"""

import logging

import numpy as np

from zbessel.amos.kfunc import bknu
from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.types import Evaluation, Scaling

logger = logging.getLogger(__name__)

RT2 = 1.41421356237309505


def rati(z: complex, fnu: float, n: int, tol: float) -> np.ndarray:
    """Ratios I(fnu+k+1, z)/I(fnu+k, z) for k = 0..n-1, Re(z) >= 0

    The starting index of the backward recurrence is placed with the same
    Olver-Sookne error test as in Miller's algorithm.
    """
    cy = np.zeros(n, dtype=np.complex128)
    az = abs(z)
    inu = int(fnu)
    idnu = inu + n - 1
    magz = int(az)
    fnup = max(float(magz + 1), float(idnu))
    id_ = min(idnu - magz - 1, 0)
    pt = 1.0 / az
    rz = complex(pt * (z.real + z.real) * pt, -pt * (z.imag + z.imag) * pt)
    t1 = rz * fnup
    p2 = -t1
    p1 = 1 + 0j
    t1 += rz
    ap2 = abs(p2)
    ap1 = abs(p1)
    test1 = np.sqrt((ap2 + ap2) / (ap1 * tol))
    test = test1
    rap1 = 1.0 / ap1
    p1 *= rap1
    p2 *= rap1
    ap2 *= rap1

    # forward recurrence until the error test passes, twice
    k = 1
    second = False
    while True:
        k += 1
        ap1 = ap2
        p1, p2 = p2, p1 - t1 * p2
        t1 += rz
        ap2 = abs(p2)
        if ap1 <= test:
            continue
        if second:
            break
        ak = abs(t1) * 0.5
        flam = ak + np.sqrt(ak * ak - 1.0)
        rho = min(ap2 / ap1, flam)
        test = test1 * np.sqrt(rho / (rho * rho - 1.0))
        second = True

    kk = k + 1 - id_
    t1r = float(kk)
    dfnu = fnu + (n - 1)
    p1 = complex(1.0 / ap2)
    p2 = 0j
    for _ in range(kk):
        p1, p2 = p1 * (rz * (dfnu + t1r)) + p2, p1
        t1r -= 1.0
    if p1 == 0:
        p1 = complex(tol, tol)
    cy[n - 1] = p2 / p1
    if n == 1:
        return cy

    t1r = float(n - 1)
    cdfnu = fnu * rz
    for k in range(n - 2, -1, -1):
        pt = cdfnu + t1r * rz + cy[k + 1]
        ak = abs(pt)
        if ak == 0.0:
            pt = complex(tol, tol)
            ak = tol * RT2
        rak = 1.0 / ak
        cy[k] = complex(rak * pt.real * rak, -rak * pt.imag * rak)
        t1r -= 1.0
    return cy


def wrsk(z: complex, fnu: float, kode: Scaling, n: int, wp: WorkingPrecision) -> Evaluation:
    """I(fnu + k, z) for k = 0..n-1, Re(z) >= 0, from ratios and the Wronskian

    Returns a negative nz when the K-function evaluation fails.
    """
    y = np.zeros(n, dtype=np.complex128)
    cw, nw = bknu(z, fnu, kode, 2, wp)
    if nw != 0:
        logger.debug(f"K evaluation for the Wronskian failed with nz={nw}")
        return Evaluation(y, -2 if nw == -2 else -1)
    y[:] = rati(z, fnu, n, wp.tol)

    # the scaled I carries exp(-|Re z|) and the scaled K carries exp(z),
    # leaving a factor exp(i Im z) on the product
    cinu = 1 + 0j
    if kode == Scaling.SCALED:
        cinu = complex(np.cos(z.imag), np.sin(z.imag))

    # K values near the exponent limits are scaled before forming the Wronskian
    acw = abs(cw[1])
    ascle = wp.ascle
    csclr = 1.0
    if acw <= ascle:
        csclr = 1.0 / wp.tol
    elif acw >= 1.0 / ascle:
        csclr = wp.tol
    c1 = complex(cw[0]) * csclr
    c2 = complex(cw[1]) * csclr
    st = complex(y[0])

    ct = z * (st * c1 + c2)
    act = abs(ct)
    ract = 1.0 / act
    ct = complex(ct.real * ract, -ct.imag * ract)
    cinu = cinu * ract * ct
    y[0] = cinu * csclr
    for i in range(1, n):
        cinu = st * cinu
        st = complex(y[i])
        y[i] = cinu * csclr
    return Evaluation(y, 0)
