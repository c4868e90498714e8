"""Airy function Ai and its derivative for complex argument

For |z| <= 1 the Maclaurin series are summed directly. Otherwise

    Ai(z)  = c sqrt(z) K(1/3, zeta)
    Ai'(z) = -c z K(2/3, zeta),     zeta = (2/3) z**(3/2),  c = 1/(pi sqrt(3))

with K evaluated in the right half plane, or analytically continued from
-zeta when Re(zeta) < 0. The scaled functions carry exp(zeta).

References:
D. E. Amos, "A portable package for Bessel functions of a complex argument
and nonnegative order", ACM TOMS 12 (1986) 265-273.
M. Abramowitz and I. A. Stegun, "Handbook of Mathematical Functions",
Section 10.4.
"""

import logging

import numpy as np

from zbessel.amos.asymptotic import asyi
from zbessel.amos.kfunc import bknu
from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.miller import mlri
from zbessel.amos.scaling import add_decaying_term
from zbessel.amos.series import seri
from zbessel.amos.types import Evaluation, Outcome, Scaling, Status, failed

logger = logging.getLogger(__name__)

TTH = 6.66666666666666667e-01
C1 = 3.55028053887817240e-01
"""Ai(0)"""
C2 = 2.58819403792806799e-01
"""-Ai'(0)"""
COEF = 1.83776298473930683e-01
"""1/(pi sqrt(3))"""
MAX_SERIES_TERMS = 25


def maclaurin_sums(z: complex, derivative: int, tol: float) -> tuple[complex, complex]:
    """Partial sums (f, g) of the Maclaurin series in z**3

    Ai(z) = c1 f - c2 z g for derivative = 0, and
    Ai'(z) = c1 z**2 f / 2 - c2 g for derivative = 1.
    """
    s1 = 1 + 0j
    s2 = 1 + 0j
    az = abs(z)
    aa = az * az
    if aa < tol / az:
        return s1, s2
    fid = float(derivative)
    trm1 = 1 + 0j
    trm2 = 1 + 0j
    atrm = 1.0
    z3 = z * z * z
    az3 = az * aa
    ak = 2.0 + fid
    bk = 3.0 - fid - fid
    ck = 4.0 - fid
    dk = 3.0 + fid + fid
    d1 = ak * dk
    d2 = bk * ck
    ad = min(d1, d2)
    ak = 24.0 + 9.0 * fid
    bk = 30.0 - 9.0 * fid
    for _ in range(MAX_SERIES_TERMS):
        trm1 = trm1 * z3 / d1
        s1 += trm1
        trm2 = trm2 * z3 / d2
        s2 += trm2
        atrm = atrm * az3 / ad
        d1 += ak
        d2 += bk
        ad = min(d1, d2)
        if atrm < tol * ad:
            break
        ak += 18.0
        bk += 18.0
    return s1, s2


def acai(z: complex, fnu: float, kode: Scaling, mr: int, wp: WorkingPrecision) -> Evaluation:
    """K(fnu, z) for Re(z) < 0 by continuation, specialized to one order

    K(fnu, z) = exp(-i pi mr fnu) K(fnu, -z) - i pi mr I(fnu, -z), with I
    from the series, asymptotic or Miller evaluator as |z| dictates.

    Args:
        mr: +1 or -1, the direction of rotation from -z to z
    """
    zn = -z
    az = abs(z)
    if az <= 2.0 or az * az * 0.25 <= fnu + 1.0:
        yi = seri(zn, fnu, kode, 1, wp).values
    elif az >= wp.rl:
        yi, nw = asyi(zn, fnu, kode, 1, wp)
        if nw < 0:
            return Evaluation(yi, -2 if nw == -2 else -1)
    else:
        yi, nw = mlri(zn, fnu, kode, 1, wp)
        if nw < 0:
            return Evaluation(yi, -2 if nw == -2 else -1)

    cy, nw = bknu(zn, fnu, kode, 1, wp)
    if nw != 0:
        return Evaluation(yi, -2 if nw == -2 else -1)

    sgn = -np.copysign(np.pi, mr)
    csgn = complex(0.0, sgn)
    if kode == Scaling.SCALED:
        csgn = csgn * complex(np.cos(z.imag), np.sin(z.imag))
    inu = int(fnu)
    ang = (fnu - inu) * sgn
    cspn = complex(np.cos(ang), np.sin(ang))
    if inu % 2:
        cspn = -cspn
    c1 = complex(cy[0])
    c2 = complex(yi[0])
    nz = 0
    if kode == Scaling.SCALED:
        c1, c2, underflow, _ = add_decaying_term(zn, c1, c2, wp.ascle, wp.alim, 0)
        nz += underflow
    y = np.array([cspn * c1 + csgn * c2], dtype=np.complex128)
    return Evaluation(y, nz)


def airy(
    z: complex,
    derivative: int = 0,
    kode: Scaling = Scaling.UNSCALED,
    wp: WorkingPrecision | None = None,
) -> Outcome:
    """Ai(z) or Ai'(z)

    Args:
        z: Argument
        derivative: 0 for Ai, 1 for Ai'
        kode: SCALED multiplies the result by exp((2/3) z**(3/2))

    Returns:
        Outcome with one value; nz = 1 if the unscaled value underflowed
    """
    valid_kode = kode in (Scaling.UNSCALED, Scaling.SCALED)
    if derivative not in (0, 1) or not valid_kode or not np.isfinite(z):
        return failed(1, Status.INPUT_ERROR)
    if wp is None:
        wp = WorkingPrecision.from_machine()
    tol = wp.tol
    az = abs(z)
    values = np.zeros(1, dtype=np.complex128)

    if az <= 1.0:
        if az < tol:
            values[0] = _near_origin(z, az, derivative, wp)
            return Outcome(values, 0, Status.OK)
        s1, s2 = maclaurin_sums(z, derivative, tol)
        if derivative == 0:
            ai = s1 * C1 - C2 * (z * s2)
        else:
            ai = -s2 * C2 + C1 / 2.0 * (z * s1 * z)
        if kode == Scaling.SCALED:
            ai = ai * complex(np.exp(TTH * z * complex(np.sqrt(z))))
        values[0] = ai
        return Outcome(values, 0, Status.OK)

    fnu = (1.0 + derivative) / 3.0
    alaz = np.log(az)
    total = wp.range_limits()[1]
    aa = total**TTH
    if az > aa:
        return failed(1, Status.TOTAL_LOSS)
    status = Status.PRECISION_LOSS if az > np.sqrt(aa) else Status.OK
    csq = complex(np.sqrt(z))
    zta = TTH * (z * csq)

    # Re(zeta) <= 0 when Re(z) < 0, especially when Im(z) is small
    guarded = False
    sfac = 1.0
    ak = zta.imag
    if z.real < 0.0:
        zta = complex(-abs(zta.real), ak)
    if z.imag == 0.0 and z.real <= 0.0:
        zta = complex(0.0, ak)
    aa = zta.real
    if aa >= 0.0 and z.real > 0.0:
        if kode == Scaling.UNSCALED and aa >= wp.alim:
            aa = -aa - 0.25 * alaz
            guarded = True
            sfac = 1.0 / tol
            if aa < -wp.elim:
                logger.debug(f"Ai({z}) underflows")
                return Outcome(values, 1, status)
        cy, nz = bknu(zta, fnu, kode, 1, wp)
        if nz < 0:
            return failed(1, Status.NO_CONVERGENCE if nz == -2 else Status.OVERFLOW)
    else:
        if kode == Scaling.UNSCALED and aa <= -wp.alim:
            aa = -aa + 0.25 * alaz
            guarded = True
            sfac = tol
            if aa > wp.elim:
                return failed(1, Status.OVERFLOW)
        mr = -1 if z.imag < 0.0 else 1
        cy, nz = acai(zta, fnu, kode, mr, wp)
        if nz < 0:
            return failed(1, Status.OVERFLOW if nz == -1 else Status.NO_CONVERGENCE)

    s1 = complex(cy[0]) * COEF
    if guarded:
        s1 = s1 * sfac
        values[0] = (s1 * csq if derivative == 0 else -(s1 * z)) / sfac
    else:
        values[0] = s1 * csq if derivative == 0 else -(s1 * z)
    return Outcome(values, nz, status)


def _near_origin(z: complex, az: float, derivative: int, wp: WorkingPrecision) -> complex:
    """Two-term Taylor values for |z| below the unit roundoff"""
    aa = 1.0e3 * wp.machine.tiny
    if derivative == 0:
        s1 = C2 * z if az > aa else 0j
        return C1 - s1
    s1 = 0.5 * z * z if az > np.sqrt(aa) else 0j
    return -C2 + C1 * s1
