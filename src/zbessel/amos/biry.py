"""Airy function Bi and its derivative for complex argument

For |z| > 1,

    Bi(z)  = sqrt(z/3) (I(-1/3, zeta) + I(1/3, zeta))
    Bi'(z) = (z/sqrt(3)) (I(-2/3, zeta) + I(2/3, zeta)),   zeta = (2/3) z**(3/2)

where the negative orders come from one backward recurrence step and
Re(zeta) < 0 is handled by I(fnu, -zeta) = exp(+-i pi fnu) I(fnu, zeta).
The scaled functions carry exp(-|Re(zeta)|).

References:
D. E. Amos, "A portable package for Bessel functions of a complex argument
and nonnegative order", ACM TOMS 12 (1986) 265-273.
"""

import numpy as np

from zbessel.amos.airy import TTH, maclaurin_sums
from zbessel.amos.binu import binu
from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.types import Outcome, Scaling, Status, failed

C1 = 6.14926627446000736e-01
"""Bi(0)"""
C2 = 4.48288357353826359e-01
"""Bi'(0)"""
COEF = 5.77350269189625765e-01
"""1/sqrt(3)"""


def biry(
    z: complex,
    derivative: int = 0,
    kode: Scaling = Scaling.UNSCALED,
    wp: WorkingPrecision | None = None,
) -> Outcome:
    """Bi(z) or Bi'(z)

    Args:
        z: Argument
        derivative: 0 for Bi, 1 for Bi'
        kode: SCALED multiplies the result by exp(-|Re((2/3) z**(3/2))|)
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
            values[0] = C2 if derivative else C1
            return Outcome(values, 0, Status.OK)
        s1, s2 = maclaurin_sums(z, derivative, tol)
        if derivative == 0:
            bi = C1 * s1 + C2 * (z * s2)
        else:
            bi = s2 * C2 + C1 / 2.0 * (z * s1 * z)
        if kode == Scaling.SCALED:
            zta = TTH * z * complex(np.sqrt(z))
            bi = bi * np.exp(-abs(zta.real))
        values[0] = bi
        return Outcome(values, 0, Status.OK)

    fnu = (1.0 + derivative) / 3.0
    aa = wp.range_limits()[1] ** TTH
    if az > aa:
        return failed(1, Status.TOTAL_LOSS)
    status = Status.PRECISION_LOSS if az > np.sqrt(aa) else Status.OK
    csq = complex(np.sqrt(z))
    zta = TTH * (z * csq)

    sfac = 1.0
    ak = zta.imag
    if z.real < 0.0:
        zta = complex(-abs(zta.real), ak)
    if z.imag == 0.0 and z.real <= 0.0:
        zta = complex(0.0, ak)
    aa = zta.real
    if kode == Scaling.UNSCALED and abs(aa) >= wp.alim:
        if abs(aa) + 0.25 * np.log(az) > wp.elim:
            return failed(1, Status.OVERFLOW)
        sfac = tol

    # I(fnu, zeta) for Re(zeta) < 0 from I(fnu, -zeta)
    fmr = 0.0
    if not (aa >= 0.0 and z.real > 0.0):
        fmr = -np.pi if z.imag < 0.0 else np.pi
        zta = -zta

    cy, nz = binu(zta, fnu, kode, 1, wp)
    if nz < 0:
        return failed(1, Status.OVERFLOW if nz == -1 else Status.NO_CONVERGENCE)
    ang = fmr * fnu
    bi = complex(np.cos(ang), np.sin(ang)) * complex(cy[0]) * sfac

    fnu = (2.0 - derivative) / 3.0
    cy, _ = binu(zta, fnu, kode, 2, wp)
    cy = cy * sfac
    # one backward step to order fnu - 1
    s2 = (fnu + fnu) * (complex(cy[0]) / zta) + complex(cy[1])
    ang = fmr * (fnu - 1.0)
    s1 = COEF * (bi + s2 * complex(np.cos(ang), np.sin(ang)))
    values[0] = (csq * s1 if derivative == 0 else z * s1) / sfac
    return Outcome(values, 0, status)
