"""Top-level drivers for I, J, K, Y and the Hankel functions

Each driver validates its input, applies the argument and order range
tests, reduces the problem to I or K in the right half plane and rotates
the result back:

- I(fnu, z), Re z < 0: I(fnu, -z) times exp(+-i pi fnu)
- J(fnu, z) = exp(i pi fnu/2) I(fnu, -iz) in the upper half plane
- H(m, fnu, z) = -fmm (i/hpi) exp(-fmm i pi fnu/2) K(fnu, -fmm i z), fmm = 3 - 2m
- Y(fnu, z) = (i/2) (H2(fnu, z) - H1(fnu, z))

The phase factors are formed from the fractional part of the order to
keep their accuracy for large fnu.

References:
D. E. Amos, "Algorithm 644: A portable package for Bessel functions of a
complex argument and nonnegative order", ACM TOMS 12 (1986) 265-273.
"""

import logging

import numpy as np

from zbessel.amos.binu import binu
from zbessel.amos.continuation import acon
from zbessel.amos.kfunc import bknu
from zbessel.amos.large_order import bunk
from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.overflow import uoik
from zbessel.amos.types import Outcome, Scaling, Status, failed
from zbessel.amos.uniform import Family

logger = logging.getLogger(__name__)

HPI = 1.57079632679489662


def _invalid(z: complex, fnu: float, kode: Scaling, n: int, nonzero: bool = False) -> bool:
    if not np.isfinite(z) or not np.isfinite(fnu):
        return True
    if nonzero and z == 0:
        return True
    return fnu < 0.0 or n < 1 or kode not in (Scaling.UNSCALED, Scaling.SCALED)


def _range_status(az: float, fn: float, wp: WorkingPrecision) -> Status:
    """TOTAL_LOSS, PRECISION_LOSS or OK according to the larger of |z| and the top order"""
    partial, total = wp.range_limits()
    if az > total or fn > total:
        return Status.TOTAL_LOSS
    if az > partial or fn > partial:
        return Status.PRECISION_LOSS
    return Status.OK


def _rotate(y: np.ndarray, nn: int, csgn: complex, step: complex, wp: WorkingPrecision):
    """y[k] *= csgn step**k for k < nn, rescaling members near underflow

    Values near the underflow threshold are multiplied by 1/tol before the
    complex product and by tol after, so that the product does not lose
    digits to gradual underflow.
    """
    rtol = 1.0 / wp.tol
    ascle = wp.ascle
    for i in range(nn):
        aa = complex(y[i])
        atol = 1.0
        if max(abs(aa.real), abs(aa.imag)) <= ascle:
            aa = aa * rtol
            atol = wp.tol
        y[i] = aa * csgn * atol
        csgn = csgn * step


def _failure(nw: int) -> Status:
    return Status.NO_CONVERGENCE if nw == -2 else Status.OVERFLOW


def zbesi(
    z: complex,
    fnu: float,
    kode: Scaling = Scaling.UNSCALED,
    n: int = 1,
    wp: WorkingPrecision | None = None,
) -> Outcome:
    """I(fnu + k, z), k = 0..n-1

    The scaled values are exp(-|Re z|) I.
    """
    if _invalid(z, fnu, kode, n):
        return failed(max(n, 1), Status.INPUT_ERROR)
    if wp is None:
        wp = WorkingPrecision.from_machine()
    status = _range_status(abs(z), fnu + (n - 1), wp)
    if status == Status.TOTAL_LOSS:
        return failed(n, status)

    zn = z
    csgn = 1 + 0j
    if z.real < 0.0:
        zn = -z
        # exp(+-i pi fnu) from the fractional part of fnu
        inu = int(fnu)
        arg = (fnu - inu) * np.pi
        if z.imag < 0.0:
            arg = -arg
        csgn = complex(np.cos(arg), np.sin(arg))
        if inu % 2:
            csgn = -csgn
    y, nz = binu(zn, fnu, kode, n, wp)
    if nz < 0:
        logger.debug(f"I({fnu}, {z}) failed with nz={nz}")
        return failed(n, _failure(nz))
    if z.real < 0.0:
        _rotate(y, n - nz, csgn, -1 + 0j, wp)
    return Outcome(y, nz, status)


def zbesj(
    z: complex,
    fnu: float,
    kode: Scaling = Scaling.UNSCALED,
    n: int = 1,
    wp: WorkingPrecision | None = None,
) -> Outcome:
    """J(fnu + k, z), k = 0..n-1

    The scaled values are exp(-|Im z|) J.
    """
    if _invalid(z, fnu, kode, n):
        return failed(max(n, 1), Status.INPUT_ERROR)
    if wp is None:
        wp = WorkingPrecision.from_machine()
    status = _range_status(abs(z), fnu + (n - 1), wp)
    if status == Status.TOTAL_LOSS:
        return failed(n, status)

    # exp(i pi fnu/2), with the integer part reduced mod 4
    cii = 1.0
    inu = int(fnu)
    inuh = inu // 2
    ir = inu - 2 * inuh
    arg = (fnu - (inu - ir)) * HPI
    csgn = complex(np.cos(arg), np.sin(arg))
    if inuh % 2:
        csgn = -csgn
    zn = complex(z.imag, -z.real)
    if z.imag < 0.0:
        zn = -zn
        csgn = csgn.conjugate()
        cii = -cii
    y, nz = binu(zn, fnu, kode, n, wp)
    if nz < 0:
        logger.debug(f"J({fnu}, {z}) failed with nz={nz}")
        return failed(n, _failure(nz))
    _rotate(y, n - nz, csgn, complex(0.0, cii), wp)
    return Outcome(y, nz, status)


def zbesk(
    z: complex,
    fnu: float,
    kode: Scaling = Scaling.UNSCALED,
    n: int = 1,
    wp: WorkingPrecision | None = None,
) -> Outcome:
    """K(fnu + k, z), k = 0..n-1

    The scaled values are exp(z) K.
    """
    if _invalid(z, fnu, kode, n, nonzero=True):
        return failed(max(n, 1), Status.INPUT_ERROR)
    if wp is None:
        wp = WorkingPrecision.from_machine()
    az = abs(z)
    fn = fnu + (n - 1)
    status = _range_status(az, fn, wp)
    if status == Status.TOTAL_LOSS:
        return failed(n, status)

    y = np.zeros(n, dtype=np.complex128)
    if az < 1.0e3 * wp.machine.tiny:
        return failed(n, Status.OVERFLOW)
    mr = 0
    if z.real < 0.0:
        mr = -1 if z.imag < 0.0 else 1
    if fnu > wp.fnul:
        logger.debug(f"K({fnu}, {z}) by the uniform expansion")
        nw = bunk(z, fnu, kode, mr, n, y, wp)
        if nw < 0:
            return failed(n, _failure(nw))
        return Outcome(y, nw, status)

    if fn > 2.0:
        nuf = uoik(z, fnu, kode, Family.K, n, y, wp)
        if nuf < 0:
            return failed(n, Status.OVERFLOW)
        if nuf == n:
            # K underflows; continued to the left half plane it overflows
            if z.real < 0.0:
                return failed(n, Status.OVERFLOW)
            return Outcome(y, nuf, status)
    elif fn > 1.0 and az <= wp.tol:
        if -fn * np.log(0.5 * az) > wp.elim:
            return failed(n, Status.OVERFLOW)

    if z.real >= 0.0:
        y, nw = bknu(z, fnu, kode, n, wp)
    else:
        y, nw = acon(z, fnu, kode, mr, n, wp)
    if nw < 0:
        logger.debug(f"K({fnu}, {z}) failed with nz={nw}")
        return failed(n, _failure(nw))
    return Outcome(y, nw, status)


def zbesh(
    z: complex,
    fnu: float,
    kode: Scaling = Scaling.UNSCALED,
    m: int = 1,
    n: int = 1,
    wp: WorkingPrecision | None = None,
) -> Outcome:
    """Hankel function H(m, fnu + k, z), k = 0..n-1

    The scaled values are exp(-iz) H1 for m = 1 and exp(iz) H2 for m = 2.
    """
    if _invalid(z, fnu, kode, n, nonzero=True) or m not in (1, 2):
        return failed(max(n, 1), Status.INPUT_ERROR)
    if wp is None:
        wp = WorkingPrecision.from_machine()
    az = abs(z)
    fn = fnu + (n - 1)
    status = _range_status(az, fn, wp)
    if status == Status.TOTAL_LOSS:
        return failed(n, status)

    fmm = float(3 - 2 * m)
    zn = complex(fmm * z.imag, -fmm * z.real)
    y = np.zeros(n, dtype=np.complex128)
    nz = 0
    nn = n
    if az < 1.0e3 * wp.machine.tiny:
        return failed(n, Status.OVERFLOW)
    # the cut of H2 lies along the positive imaginary axis of zn
    left = zn.real < 0.0 or (zn.real == 0.0 and zn.imag < 0.0 and m == 2)

    if fnu > wp.fnul:
        mr = 0
        if left:
            mr = -int(fmm)
            if zn.real == 0.0 and zn.imag < 0.0:
                zn = -zn
        logger.debug(f"H{m}({fnu}, {z}) by the uniform expansion")
        nw = bunk(zn, fnu, kode, mr, nn, y, wp)
        if nw < 0:
            return failed(n, _failure(nw))
        nz += nw
    else:
        if fn > 2.0:
            nuf = uoik(zn, fnu, kode, Family.K, nn, y, wp)
            if nuf < 0:
                return failed(n, Status.OVERFLOW)
            nz += nuf
            nn -= nuf
            if nn == 0:
                if zn.real < 0.0:
                    return failed(n, Status.OVERFLOW)
                return Outcome(y, nz, status)
        elif fn > 1.0 and az <= wp.tol:
            if -fn * np.log(0.5 * az) > wp.elim:
                return failed(n, Status.OVERFLOW)
        if left:
            y, nw = acon(zn, fnu, kode, -int(fmm), nn, wp)
        else:
            y, nw = bknu(zn, fnu, kode, nn, wp)
        if nw < 0:
            logger.debug(f"H{m}({fnu}, {z}) failed with nz={nw}")
            return failed(n, _failure(nw))
        nz = nw

    # -fmm (i/hpi) exp(-fmm i pi fnu/2), with the integer part reduced mod 4
    sgn = np.copysign(HPI, -fmm)
    inu = int(fnu)
    inuh = inu // 2
    ir = inu - 2 * inuh
    arg = (fnu - (inu - ir)) * sgn
    rhpi = 1.0 / sgn
    csgn = complex(-rhpi * np.sin(arg), rhpi * np.cos(arg))
    if inuh % 2:
        csgn = -csgn
    _rotate(y, nn, csgn, complex(0.0, -fmm), wp)
    return Outcome(y, nz, status)


def zbesy(
    z: complex,
    fnu: float,
    kode: Scaling = Scaling.UNSCALED,
    n: int = 1,
    wp: WorkingPrecision | None = None,
) -> Outcome:
    """Y(fnu + k, z), k = 0..n-1, from the two Hankel functions

    The scaled values are exp(-|Im z|) Y.
    """
    if _invalid(z, fnu, kode, n, nonzero=True):
        return failed(max(n, 1), Status.INPUT_ERROR)
    if wp is None:
        wp = WorkingPrecision.from_machine()
    h1 = zbesh(z, fnu, kode, 1, n, wp)
    if not h1.ok:
        return h1
    h2 = zbesh(z, fnu, kode, 2, n, wp)
    if not h2.ok:
        return h2
    status = max(h1.ierr, h2.ierr)
    nz = min(h1.nz, h2.nz)
    if kode == Scaling.UNSCALED:
        return Outcome(0.5j * (h2.values - h1.values), nz, status)

    # exp(-|y|) exp(-+iz) for the two terms; exp(-2|y|) is the decaying part
    exr = np.cos(z.real)
    exi = np.sin(z.real)
    tay = abs(z.imag + z.imag)
    ey = np.exp(-tay) if tay < wp.elim else 0.0
    if z.imag >= 0.0:
        c1 = complex(exr * ey, exi * ey)
        c2 = complex(exr, -exi)
    else:
        c1 = complex(exr, exi)
        c2 = complex(exr * ey, -exi * ey)
    y = np.zeros(n, dtype=np.complex128)
    nz = 0
    rtol = 1.0 / wp.tol
    ascle = wp.ascle
    for i in range(n):
        st = _guarded_product(complex(h2.values[i]), c2, rtol, ascle, wp.tol)
        st -= _guarded_product(complex(h1.values[i]), c1, rtol, ascle, wp.tol)
        y[i] = 0.5j * st
        if st == 0 and ey == 0.0:
            nz += 1
    return Outcome(y, nz, status)


def _guarded_product(a: complex, b: complex, rtol: float, ascle: float, tol: float) -> complex:
    if max(abs(a.real), abs(a.imag)) <= ascle:
        return a * rtol * b * tol
    return a * b
