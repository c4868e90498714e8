"""K-type Bessel function in the right half plane

K(fnu, z) for Re(z) >= 0 is computed at the two lowest orders
dnu and dnu + 1, with |dnu| <= 1/2, and forward recurrence supplies the
rest. The starting pair comes from

- a series in z (Temme's method) for |z| <= 2,
- Miller backward recurrence on the confluent hypergeometric
  representation K = sqrt(pi/2z) exp(-z) U(...) for |z| > 2,
- the closed form sqrt(pi/2z) exp(-z) when dnu = +-1/2.

The forward recurrence keeps its two terms scaled by a ScaleLevel
multiplier and climbs a level whenever a term grows past the bound of
the current level. When exp(-z) itself would underflow, the recurrence
instead runs in logarithms until two consecutive terms are on scale.

References:
N. M. Temme, "On the numerical evaluation of the modified Bessel function
of the third kind", J. Comput. Phys. 19 (1975) 324-337.
"""

import logging

import numpy as np
from scipy.special import gammaln

from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.scaling import LadderRecurrence, ScaleLadder, ScaleLevel, underflows
from zbessel.amos.types import Evaluation, Scaling

logger = logging.getLogger(__name__)

RTHPI = 1.25331413731550025
"""sqrt(pi/2)"""
SPI = 1.90985931710274403
"""6/pi"""
FPI = 1.89769999331517738
R1 = 2.0
"""|z| boundary between the Temme series and Miller's algorithm"""
KMAX = 30

CC = (
    5.77215664901532861e-01,
    -4.20026350340952355e-02,
    -4.21977345555443367e-02,
    7.21894324666309954e-03,
    -2.15241674114950973e-04,
    -2.01348547807882387e-05,
    1.13302723198169588e-06,
    6.11609510448141582e-09,
)
"""Taylor coefficients of 1/Gamma(1-x) - 1/Gamma(1+x) about x=0, divided by 2x"""


def shch(z: complex) -> tuple[complex, complex]:
    """sinh(z) and cosh(z)"""
    sh = np.sinh(z.real)
    ch = np.cosh(z.real)
    sn = np.sin(z.imag)
    cn = np.cos(z.imag)
    return complex(sh * cn, ch * sn), complex(ch * cn, sh * sn)


def _temme_series(
    z: complex, dnu: float, dnu2: float, rz: complex, pair: bool, tol: float
) -> tuple[complex, complex, float]:
    """K(dnu, z) and K(dnu + 1, z) * z/2 by Temme's series, for |z| <= R1

    Returns:
        (s1, s2, smur): the two values (s2 only when pair is set) and the
        real part of (log(2/z) sinh(dnu log(2/z)) / dnu), used to judge
        overflow of the upward recurrence.
    """
    caz = abs(z)
    fc = 1.0
    smu = complex(np.log(rz))
    fmu = smu * dnu
    csh, cch = shch(fmu)
    if dnu != 0.0:
        fc = dnu * np.pi
        fc = fc / np.sin(fc)
        smu = csh / dnu
    t2 = np.exp(-gammaln(1.0 + dnu))
    t1 = 1.0 / (t2 * fc)
    if abs(dnu) > 0.1:
        g1 = (t1 - t2) / (dnu + dnu)
    else:
        # the difference above cancels; sum its Taylor series instead
        ak = 1.0
        s = CC[0]
        for c in CC[1:]:
            ak *= dnu2
            tm = c * ak
            s += tm
            if abs(tm) < tol:
                break
        g1 = -s
    g2 = (t1 + t2) * 0.5
    f = fc * (cch * g1 + smu * g2)
    emu = complex(np.exp(fmu))
    p = 0.5 * emu / t2
    q = (0.5 / emu) / t1
    s1 = f
    s2 = p
    ak = 1.0
    a1 = 1.0
    ck = 1 + 0j
    bk = 1.0 - dnu2
    if caz >= tol:
        cz = 0.25 * (z * z)
        t1 = 0.25 * caz * caz
        while True:
            f = (f * ak + p + q) / bk
            p = p / (ak - dnu)
            q = q / (ak + dnu)
            rak = 1.0 / ak
            ck = ck * cz * rak
            s1 = ck * f + s1
            if pair:
                s2 = ck * (p - f * ak) + s2
            a1 = a1 * t1 * rak
            bk = bk + ak + ak + 1.0
            ak += 1.0
            if a1 <= tol:
                break
    return s1, s2, smu.real


def _miller_ratio(
    z: complex, dnu: float, dnu2: float, coef: complex, pair: bool, wp: WorkingPrecision
) -> tuple[complex, complex] | None:
    """K(dnu, z) and K(dnu + 1, z) by Miller's algorithm, for |z| > R1

    The recurrence runs on the coefficients of the confluent
    hypergeometric function U(dnu + 1/2, 2 dnu + 1, 2z); its starting
    index comes from a backward-recurrence error test (|z| below the
    cutoff) or from a fitted formula (|z| above it).

    Returns None when the error test does not converge.
    """
    tol = wp.tol
    caz = abs(z)
    ak = abs(np.cos(np.pi * dnu))
    fhs = abs(0.25 - dnu2)
    t1 = (wp.machine.mantissa_digits - 1) * wp.machine.log10_radix * 3.321928094
    t1 = min(max(t1, 12.0), 60.0)
    t2 = 2.0 / 3.0 * t1 - 6.0
    if z.real != 0.0:
        t1 = abs(np.arctan(z.imag / z.real))
    else:
        t1 = np.pi / 2
    if t2 <= caz:
        # forward recurrence on the error test for the starting index
        etest = ak / (np.pi * caz * tol)
        fk = 1.0
        if etest >= 1.0:
            fks = 2.0
            ckr = caz + caz + 2.0
            p1r = 0.0
            p2r = 1.0
            for _ in range(KMAX):
                ak = fhs / fks
                cbr = ckr / (fk + 1.0)
                p1r, p2r = p2r, cbr * p2r - p1r * ak
                ckr += 2.0
                fks = fks + fk + fk + 2.0
                fhs = fhs + fk + fk
                fk += 1.0
                if etest < abs(p2r) * fk:
                    break
            else:
                return None
            fk = fk + SPI * t1 * np.sqrt(t2 / caz)
            fhs = abs(0.25 - dnu2)
    else:
        a2 = np.sqrt(caz)
        ak = FPI * ak / (tol * np.sqrt(a2))
        aa = 3.0 * t1 / (1.0 + caz)
        bb = 14.7 * t1 / (28.0 + caz)
        ak = (np.log(ak) + caz * np.cos(aa) / (1.0 + 0.008 * caz)) / np.cos(bb)
        fk = 0.12125 * ak * ak / caz + 1.5

    # backward recurrence on the U coefficients
    k = int(fk)
    fk = float(k)
    fks = fk * fk
    p1 = 0j
    p2 = complex(tol)
    cs = p2
    for _ in range(k):
        a1 = fks - fk
        ak = (fks + fk) / (a1 + fhs)
        rak = 2.0 / (fk + 1.0)
        cb = complex((fk + z.real) * rak, z.imag * rak)
        p1, p2 = p2, (p2 * cb - p1) * ak
        cs += p2
        fks = a1 - fk + 1.0
        fk -= 1.0

    # (p2/cs) = (p2/|cs|) * (conj(cs)/|cs|), for better scaling
    tm = abs(cs)
    s1 = coef * (p2 / tm) * complex(cs.real / tm, -cs.imag / tm)
    if not pair:
        return s1, 0j
    tm = abs(p2)
    pt = (p1 / tm) * complex(p2.real / tm, -p2.imag / tm)
    s2 = ((complex(dnu + 0.5, 0.0) - pt) / z + 1.0) * s1
    return s1, s2


def _climb(
    s1: complex,
    s2: complex,
    ck: complex,
    rz: complex,
    steps: int,
    kflag: ScaleLevel,
    ladder: ScaleLadder,
) -> tuple[complex, complex, complex, ScaleLevel]:
    """Forward recurrence over `steps` orders, raising the scale level as needed"""
    rec = LadderRecurrence(s1, s2, kflag, ladder)
    for _ in range(steps):
        rec.step(ck)
        ck += rz
    return rec.s1, rec.s2, ck, rec.level


def _fill(
    y: np.ndarray,
    start: int,
    s1: complex,
    s2: complex,
    ck: complex,
    rz: complex,
    kflag: ScaleLevel,
    ladder: ScaleLadder,
):
    """Store forward-recurrence values in y[start:], raising the scale level as needed"""
    rec = LadderRecurrence(s1, s2, kflag, ladder)
    for i in range(start, len(y)):
        y[i] = rec.step(ck)
        ck += rz


def _climb_from_underflow(
    s1: complex,
    s2: complex,
    ck: complex,
    rz: complex,
    z: complex,
    steps: int,
    wp: WorkingPrecision,
    ascle: float,
) -> tuple[complex, complex, complex, complex, int | None]:
    """Forward recurrence for exp(-z) K, tracking the exponent in zd

    Terms are recurred unscaled (exp(-z) not applied) and the scaled value
    exp(log(s2) - zd)/tol is tested at each step. Once two consecutive
    orders are on scale, the recurrence can resume on ScaleLevel.UNDERFLOW_GUARD.

    Returns:
        (s1, s2, ck, zd, resume): if resume is not None, s1, s2 are the scaled
        pair and the recurrence should continue from step index resume.
        Otherwise s1, s2 are the unscaled terms with exponent offset zd.
    """
    helim = 0.5 * wp.elim
    celm = np.exp(-wp.elim)
    zd = z
    cy = [0j, 0j]
    j = 1
    ic = -2
    for i in range(steps):
        s1, s2 = s2, s2 * ck + s1
        ck += rz
        alas = np.log(abs(s2))
        if -zd.real + alas >= -wp.elim:
            p2 = complex(np.log(s2)) - zd
            p2m = np.exp(p2.real) / wp.tol
            p1 = complex(p2m * np.cos(p2.imag), p2m * np.sin(p2.imag))
            if not underflows(p1, ascle, wp.tol):
                j = 1 - j
                cy[j] = p1
                if ic == i - 1:
                    return cy[1 - j], cy[j], ck, zd, i + 1
                ic = i
                continue
        if alas >= helim:
            zd = zd - wp.elim
            s1 = s1 * celm
            s2 = s2 * celm
    return s1, s2, ck, zd, None


def kscl(y: np.ndarray, zr: complex, fnu: float, rz: complex, wp: WorkingPrecision, ascle: float) -> int:
    """Rescale exp(-zr) * y, zeroing leading orders that underflow

    On entry y[0] and y[1] hold unscaled K values at orders fnu, fnu+1
    (with exponential factor exp(-zr) not yet applied). Recurrence
    continues until two consecutive orders survive the rescaling;
    those are left in y with a 1/tol scale factor, and all entries
    before them are set to zero.

    Returns:
        nz, the number of leading entries set to zero
    """
    n = len(y)
    tol = wp.tol
    elim = wp.elim
    nz = 0
    ic = -1
    nn = min(2, n)
    cy = [0j, 0j]
    for i in range(nn):
        s1 = complex(y[i])
        cy[i] = s1
        nz += 1
        y[i] = 0j
        if -zr.real + np.log(abs(s1)) < -elim:
            continue
        cs = complex(np.log(s1)) - zr
        st = np.exp(cs.real) / tol
        cs = complex(st * np.cos(cs.imag), st * np.sin(cs.imag))
        if underflows(cs, ascle, tol):
            continue
        y[i] = cs
        ic = i
        nz -= 1
    if n == 1:
        return nz
    if ic <= 0:
        y[0] = 0j
        nz = 2
    if n == 2 or nz == 0:
        return nz

    ck = (fnu + 1.0) * rz
    s1, s2 = cy
    helim = 0.5 * elim
    celm = np.exp(-elim)
    zd = zr
    for i in range(2, n):
        s1, s2 = s2, ck * s2 + s1
        ck += rz
        alas = np.log(abs(s2))
        nz += 1
        y[i] = 0j
        if -zd.real + alas >= -elim:
            cs = complex(np.log(s2)) - zd
            st = np.exp(cs.real) / tol
            cs = complex(st * np.cos(cs.imag), st * np.sin(cs.imag))
            if not underflows(cs, ascle, tol):
                y[i] = cs
                nz -= 1
                if ic == i - 1:
                    nz = i - 1
                    y[:nz] = 0j
                    return nz
                ic = i
                continue
        if alas >= helim:
            zd = zd - elim
            s1 = s1 * celm
            s2 = s2 * celm
    nz = n - 1 if ic == n - 1 else n
    y[:nz] = 0j
    return nz


def bknu(z: complex, fnu: float, kode: Scaling, n: int, wp: WorkingPrecision) -> Evaluation:
    """K(fnu + k, z) for k = 0..n-1 and Re(z) >= 0

    Returns nz = -2 if Miller's algorithm does not converge; otherwise nz
    is the count of leading orders that underflowed (only possible for
    the unscaled function with large Re(z)).
    """
    y = np.zeros(n, dtype=np.complex128)
    tol = wp.tol
    ladder = ScaleLadder.for_precision(wp)
    caz = abs(z)
    rcaz = 1.0 / caz
    rz = 2.0 * complex(z.real * rcaz, -z.imag * rcaz) * rcaz
    inu = int(fnu + 0.5)
    dnu = fnu - inu
    half_odd = abs(dnu) == 0.5
    dnu2 = dnu * dnu if abs(dnu) > tol and not half_odd else 0.0
    pair = inu > 0 or n > 1
    koded = kode
    # exp(-z) itself underflows: recur in logarithms, rescale at the end
    log_scaled = False
    kflag = ScaleLevel.NONE

    if not half_odd and caz <= R1:
        logger.debug(f"K series for |z|={caz}, dnu={dnu}")
        s1, s2, smur = _temme_series(z, dnu, dnu2, rz, pair, tol)
        if not pair:
            if koded == Scaling.SCALED:
                s1 = s1 * complex(np.exp(z))
            y[0] = s1
            return Evaluation(y, 0)
        if (fnu + 1.0) * abs(smur) > wp.alim:
            kflag = ScaleLevel.OVERFLOW_GUARD
        scale = ladder.scales[kflag]
        s2 = s2 * scale * rz
        s1 = s1 * scale
        if koded == Scaling.SCALED:
            ez = complex(np.exp(z))
            s1 = s1 * ez
            s2 = s2 * ez
    else:
        coef = RTHPI / complex(np.sqrt(z))
        if koded == Scaling.UNSCALED:
            if z.real > wp.alim:
                koded = Scaling.SCALED
                log_scaled = True
            else:
                st = np.exp(-z.real) * ladder.scales[kflag]
                coef = coef * complex(st * np.cos(z.imag), -st * np.sin(z.imag))
        if half_odd or abs(np.cos(np.pi * dnu)) == 0.0 or abs(0.25 - dnu2) == 0.0:
            s1 = s2 = coef
        else:
            logger.debug(f"K Miller algorithm for |z|={caz}, dnu={dnu}")
            pair_values = _miller_ratio(z, dnu, dnu2, coef, pair, wp)
            if pair_values is None:
                logger.debug("K Miller starting index did not converge")
                return Evaluation(y, -2)
            s1, s2 = pair_values
            if not pair:
                if log_scaled:
                    y[0] = s1
                    nz = kscl(y, z, fnu, rz, wp, ladder.bounds[0])
                    if nz < n:
                        y[nz] *= ladder.rescales[0]
                    return Evaluation(y, nz)
                y[0] = s1 * ladder.rescales[kflag]
                return Evaluation(y, 0)

    # forward recurrence from dnu, dnu + 1 up to fnu
    ck = (dnu + 1.0) * rz
    if n == 1:
        inu -= 1
    zd = z
    if inu > 0:
        steps = inu
        if log_scaled:
            s1, s2, ck, zd, resume = _climb_from_underflow(
                s1, s2, ck, rz, z, inu, wp, ladder.bounds[0]
            )
            if resume is not None:
                kflag = ScaleLevel.UNDERFLOW_GUARD
                log_scaled = False
                steps = inu - resume
            else:
                steps = 0
        if not log_scaled:
            s1, s2, ck, kflag = _climb(s1, s2, ck, rz, steps, kflag, ladder)
    if n == 1:
        s1 = s2

    if log_scaled:
        y[0] = s1
        if n > 1:
            y[1] = s2
        nz = kscl(y, zd, fnu, rz, wp, ladder.bounds[0])
        remaining = n - nz
        if remaining <= 0:
            return Evaluation(y, nz)
        s1 = complex(y[nz])
        y[nz] = s1 * ladder.rescales[0]
        if remaining == 1:
            return Evaluation(y, nz)
        s2 = complex(y[nz + 1])
        y[nz + 1] = s2 * ladder.rescales[0]
        if remaining == 2:
            return Evaluation(y, nz)
        ck = (fnu + nz + 1.0) * rz
        _fill(y, nz + 2, s1, s2, ck, rz, ScaleLevel.UNDERFLOW_GUARD, ladder)
        return Evaluation(y, nz)

    rescale = ladder.rescales[kflag]
    y[0] = s1 * rescale
    if n == 1:
        return Evaluation(y, 0)
    y[1] = s2 * rescale
    _fill(y, 2, s1, s2, ck, rz, kflag, ladder)
    return Evaluation(y, 0)
