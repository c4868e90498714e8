"""Large-order evaluators built on the uniform asymptotic expansions

For fnu >= fnul the I and K functions are summed directly from their
uniform expansions in the order:

- uni1 / unk1: Debye expansion, |arg z| <= pi/3
- uni2 / unk2: Airy expansion through I(fnu, z) = exp(i pi fnu/2) J(fnu, -iz)
  and K(fnu, z) = -(i pi/2) exp(-i pi fnu/2) H2(fnu, -iz), pi/3 < |arg z| <= pi/2

The two highest I orders (lowest K orders) are formed from the expansion
and the rest of the sequence comes from the stable direction of the three
term recurrence. buni reaches orders below fnul by starting the expansion
above fnul and recurring down; bunk dispatches between the K forms, which
also carry the analytic continuation into the left half plane.

References:
D. E. Amos, "Computation of Bessel functions of complex argument and large
order", SAND83-0643, 1983.
F. W. J. Olver, "Asymptotics and Special Functions", Academic Press, 1974.
"""

import logging
from typing import NamedTuple

import numpy as np

from zbessel.amos.airy import airy
from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.overflow import AIC, uoik
from zbessel.amos.scaling import (
    LadderRecurrence,
    ScaleLadder,
    ScaleLevel,
    add_decaying_term,
    underflows,
)
from zbessel.amos.types import Scaling
from zbessel.amos.uniform import AiryExpansion, DebyeExpansion, Family, unhj, unik

logger = logging.getLogger(__name__)

HPI = 1.57079632679489662
CR1 = complex(1.0, 1.73205080756887729)
"""2 exp(i pi/3)"""
CR2 = complex(-0.5, -8.66025403784438647e-01)
"""exp(-2 i pi/3)"""


class Partial(NamedTuple):
    """Outcome of a large-order I evaluation that may stop early"""

    nz: int
    """Members set to zero, or -1 on overflow"""
    nlast: int
    """If nonzero, y[:nlast] are below fnul and must be computed by another method"""


def _exponent(zeta1: complex, zeta2: complex, zb: complex, fn: float, kode: Scaling) -> complex:
    """zeta2 - zeta1, less zb for scaled values

    zeta2 - zb = fn**2/(zb + zeta2) is used to avoid cancellation.
    """
    if kode == Scaling.UNSCALED:
        return zeta2 - zeta1
    st = zb + zeta2
    rast = fn / abs(st)
    return st.conjugate() * rast * rast - zeta1


def _classify(
    rs1: float, phi: complex, arg: complex | None, wp: WorkingPrecision
) -> tuple[float, ScaleLevel | None]:
    """Refined log magnitude of a leading term and the scale level it needs

    The level is None when the term over- or underflows outright; the sign
    of the returned exponent tells which.
    """
    if abs(rs1) > wp.elim:
        return rs1, None
    if abs(rs1) < wp.alim:
        return rs1, ScaleLevel.NONE
    rs1 += np.log(abs(phi))
    if arg is not None:
        rs1 += -0.25 * np.log(abs(arg)) - AIC
    if abs(rs1) > wp.elim:
        return rs1, None
    return rs1, ScaleLevel.UNDERFLOW_GUARD if rs1 < 0.0 else ScaleLevel.OVERFLOW_GUARD


def _scaled_term(s1: complex, s2: complex, scale: float) -> complex:
    """s2 exp(s1), with the ladder multiplier applied to the exponential"""
    st = np.exp(s1.real) * scale
    return s2 * complex(st * np.cos(s1.imag), st * np.sin(s1.imag))


def _airy_sum(expansion: AiryExpansion, rotation: complex = 1 + 0j) -> complex:
    """phi (Ai(w) A + rotation Ai'(w) B), scaled Airy functions at w = rotation arg"""
    w = expansion.arg * rotation
    ai = airy(w, 0, Scaling.SCALED).value
    dai = airy(w, 1, Scaling.SCALED).value
    return expansion.phi * (dai * rotation * expansion.bsum + ai * expansion.asum)


def _two_over(z: complex) -> complex:
    raz = 1.0 / abs(z)
    return 2.0 * complex(z.real * raz, -z.imag * raz) * raz


def _recur_down(
    y: np.ndarray, nd: int, cy: list[complex], fnu: float, z: complex, level: ScaleLevel, ladder: ScaleLadder
):
    """Fill y[:nd-2] by backward recurrence from the top two members in cy"""
    rz = _two_over(z)
    rec = LadderRecurrence(cy[0], cy[1], level, ladder)
    fn = float(nd - 2)
    for k in range(nd - 3, -1, -1):
        y[k] = rec.step((fnu + fn) * rz)
        fn -= 1.0


def uni1(
    z: complex, fnu: float, kode: Scaling, n: int, y: np.ndarray, wp: WorkingPrecision
) -> Partial:
    """I(fnu + k, z), k = 0..n-1, from the Debye expansion, |arg z| <= pi/3

    Underflowing top members are zeroed and the sequence shortened; when the
    remaining top order falls below fnul the lower members are left for the
    caller (nlast).
    """
    tol, tiny = wp.tol, wp.machine.tiny
    ladder = ScaleLadder.for_precision(wp)
    nz = 0
    nd = n

    fn = max(fnu, 1.0)
    debye = unik(z, fn, Family.I, tol, tiny, parameters_only=True)
    rs1 = _exponent(debye.zeta1, debye.zeta2, z, fn, kode).real
    if abs(rs1) > wp.elim:
        if rs1 > 0.0:
            return Partial(-1, 0)
        y[:n] = 0j
        return Partial(n, 0)

    while True:
        cy = [0j, 0j]
        iflag = ScaleLevel.NONE
        lost = False
        for i in range(min(2, nd)):
            fn = fnu + (nd - 1 - i)
            debye = unik(z, fn, Family.I, tol, tiny)
            s1 = _exponent(debye.zeta1, debye.zeta2, z, fn, kode)
            if kode == Scaling.SCALED:
                s1 += complex(0.0, z.imag)
            rs1, level = _classify(s1.real, debye.phi, None, wp)
            if level is None:
                lost = True
                break
            if i == 0:
                iflag = level
            s2 = _scaled_term(s1, debye.phi * debye.sum, ladder.scales[iflag])
            if iflag == ScaleLevel.UNDERFLOW_GUARD and underflows(s2, ladder.bounds[0], tol):
                lost = True
                break
            cy[i] = s2
            y[nd - 1 - i] = s2 * ladder.rescales[iflag]
        if not lost:
            break
        if rs1 > 0.0:
            return Partial(-1, 0)
        y[nd - 1] = 0j
        nz += 1
        nd -= 1
        if nd == 0:
            return Partial(nz, 0)
        nuf = uoik(z, fnu, kode, Family.I, nd, y, wp)
        if nuf < 0:
            return Partial(-1, 0)
        nd -= nuf
        nz += nuf
        if nd == 0:
            return Partial(nz, 0)
        if fnu + (nd - 1) < wp.fnul:
            return Partial(nz, nd)

    if nd > 2:
        _recur_down(y, nd, cy, fnu, z, iflag, ladder)
    return Partial(nz, 0)


def uni2(
    z: complex, fnu: float, kode: Scaling, n: int, y: np.ndarray, wp: WorkingPrecision
) -> Partial:
    """I(fnu + k, z), k = 0..n-1, from the Airy expansion, pi/3 < |arg z| <= pi/2

    Same contract as uni1. Lower half plane values are computed by
    conjugation.
    """
    tol, tiny = wp.tol, wp.machine.tiny
    ladder = ScaleLadder.for_precision(wp)
    nz = 0
    nd = n

    upper = z.imag > 0.0
    zn = complex(z.imag, -z.real)
    zb = z
    rotate = -1j
    if not upper:
        zn = complex(-zn.real, zn.imag)
        zb = z.conjugate()
        rotate = 1j
    inu = int(fnu)
    ang = HPI * (fnu - inu)
    cis = complex(np.cos(ang), np.sin(ang))

    def phase(top: int) -> complex:
        """exp(i pi (fnu + top)/2), conjugated below the real axis"""
        c2 = cis * 1j ** ((inu + top) % 4)
        return c2 if upper else c2.conjugate()

    c2 = phase(n - 1)
    fn = max(fnu, 1.0)
    hj = unhj(zn, fn, tol, tiny, parameters_only=True)
    rs1 = _exponent(hj.zeta1, hj.zeta2, zb, fn, kode).real
    if abs(rs1) > wp.elim:
        if rs1 > 0.0:
            return Partial(-1, 0)
        y[:n] = 0j
        return Partial(n, 0)

    while True:
        cy = [0j, 0j]
        iflag = ScaleLevel.NONE
        lost = False
        for i in range(min(2, nd)):
            fn = fnu + (nd - 1 - i)
            hj = unhj(zn, fn, tol, tiny)
            s1 = _exponent(hj.zeta1, hj.zeta2, zb, fn, kode)
            if kode == Scaling.SCALED:
                s1 += complex(0.0, abs(z.imag))
            rs1, level = _classify(s1.real, hj.phi, hj.arg, wp)
            if level is None:
                lost = True
                break
            if i == 0:
                iflag = level
            s2 = _scaled_term(s1, _airy_sum(hj), ladder.scales[iflag])
            if iflag == ScaleLevel.UNDERFLOW_GUARD and underflows(s2, ladder.bounds[0], tol):
                lost = True
                break
            if not upper:
                s2 = s2.conjugate()
            s2 = s2 * c2
            cy[i] = s2
            y[nd - 1 - i] = s2 * ladder.rescales[iflag]
            c2 = c2 * rotate
        if not lost:
            break
        if rs1 > 0.0:
            return Partial(-1, 0)
        y[nd - 1] = 0j
        nz += 1
        nd -= 1
        if nd == 0:
            return Partial(nz, 0)
        nuf = uoik(z, fnu, kode, Family.I, nd, y, wp)
        if nuf < 0:
            return Partial(-1, 0)
        nd -= nuf
        nz += nuf
        if nd == 0:
            return Partial(nz, 0)
        if fnu + (nd - 1) < wp.fnul:
            return Partial(nz, nd)
        c2 = phase(nd - 1)

    if nd > 2:
        _recur_down(y, nd, cy, fnu, z, iflag, ladder)
    return Partial(nz, 0)


def buni(
    z: complex, fnu: float, kode: Scaling, n: int, y: np.ndarray, nui: int, wp: WorkingPrecision
) -> Partial:
    """I(fnu + k, z), k = 0..n-1, for |z| or orders near fnul

    With nui > 0 the expansion is evaluated at orders fnu + n - 1 + nui
    and one above, and the sequence recurred down nui + n - 1 steps.

    Args:
        nui: Number of orders to climb above the top requested order
    """
    uni = uni2 if abs(z.imag) > abs(z.real) * 1.7321 else uni1
    if nui == 0:
        return uni(z, fnu, kode, n, y, wp)

    dfnu = fnu + (n - 1)
    gnu = dfnu + nui
    cy = np.zeros(2, dtype=np.complex128)
    part = uni(z, gnu, kode, 2, cy, wp)
    if part.nz < 0:
        return Partial(part.nz, 0)
    if part.nz != 0:
        logger.debug(f"Uniform expansion at order {gnu} underflows; deferring {n} orders")
        return Partial(0, n)

    ladder = ScaleLadder.for_precision(wp)
    st = abs(cy[0])
    level = ScaleLevel.NONE
    if st <= ladder.bounds[0]:
        level = ScaleLevel.UNDERFLOW_GUARD
    elif st >= ladder.bounds[1]:
        level = ScaleLevel.OVERFLOW_GUARD
    scale = ladder.scales[level]
    rec = LadderRecurrence(cy[1] * scale, cy[0] * scale, level, ladder)
    rz = _two_over(z)
    fnui = float(nui)
    for _ in range(nui):
        rec.step((dfnu + fnui) * rz)
        fnui -= 1.0
    y[n - 1] = rec.s2 * ladder.rescales[rec.level]
    fnui = float(n - 1)
    for k in range(n - 2, -1, -1):
        y[k] = rec.step((fnu + fnui) * rz)
        fnui -= 1.0
    return Partial(0, 0)


def _tail_lost(
    s1: complex, phi: complex, arg: complex | None, wp: WorkingPrecision
) -> tuple[float, bool]:
    """Refined exponent of the top K member and whether it is off scale"""
    rs1 = s1.real
    if abs(rs1) > wp.elim:
        return rs1, True
    if abs(rs1) < wp.alim:
        return rs1, False
    rs1 += np.log(abs(phi))
    if arg is not None:
        rs1 += -0.25 * np.log(abs(arg)) - AIC
    return rs1, abs(rs1) >= wp.elim


def _continuation_phase(fnu: float, mr: int, n: int) -> tuple[float, complex, int, float]:
    """sgn = -pi sign(mr) and exp(i sgn (fnu + n - 1)) for the K term"""
    sgn = -np.copysign(np.pi, mr)
    inu = int(fnu)
    fnf = fnu - inu
    ang = fnf * sgn
    cspn = complex(np.cos(ang), np.sin(ang))
    if (inu + n - 1) % 2:
        cspn = -cspn
    return sgn, cspn, inu, fnf


def unk1(
    z: complex, fnu: float, kode: Scaling, mr: int, n: int, y: np.ndarray, wp: WorkingPrecision
) -> int:
    """K(fnu + k, z), k = 0..n-1, from the Debye expansion, |arg(+-z)| <= pi/3

    For mr != 0 the K sequence at -z is continued to z in the left half
    plane, K(z) = exp(-i pi mr fnu) K(-z) - i pi mr I(-z), with both
    terms from the same expansions.

    Returns:
        Number of members set to zero, or -1 on overflow.
    """
    tol, tiny, alim = wp.tol, wp.machine.tiny, wp.alim
    ladder = ScaleLadder.for_precision(wp)
    zr = z if z.real >= 0.0 else -z
    nz = 0
    expansions: dict[int, DebyeExpansion] = {}
    cy = [0j, 0j]
    second = False
    kflag = ScaleLevel.NONE
    last = n - 1
    for i in range(n):
        fn = fnu + i
        debye = unik(zr, fn, Family.K, tol, tiny)
        expansions[i] = debye
        s1 = -_exponent(debye.zeta1, debye.zeta2, zr, fn, kode)
        rs1, level = _classify(s1.real, debye.phi, None, wp)
        if level is not None:
            if not second:
                kflag = level
            s2 = _scaled_term(s1, debye.phi * debye.sum, ladder.scales[kflag])
            if kflag == ScaleLevel.UNDERFLOW_GUARD and underflows(s2, ladder.bounds[0], tol):
                level = None
        if level is None:
            if rs1 > 0.0 or z.real < 0.0:
                return -1
            second = False
            y[i] = 0j
            nz += 1
            if i > 0 and y[i - 1] != 0:
                y[i - 1] = 0j
                nz += 1
            continue
        cy[int(second)] = s2
        y[i] = s2 * ladder.rescales[kflag]
        if second:
            last = i
            break
        second = True

    rz = _two_over(zr)
    ib = last + 1
    if ib < n:
        fn = fnu + (n - 1)
        tail = unik(zr, fn, Family.K, tol, tiny, parameters_only=(mr == 0))
        rs1, lost = _tail_lost(-_exponent(tail.zeta1, tail.zeta2, zr, fn, kode), tail.phi, None, wp)
        if lost:
            if rs1 > 0.0 or z.real < 0.0:
                return -1
            y[:n] = 0j
            return n
        if mr != 0:
            expansions[n - 1] = tail
        ck = (fnu + last) * rz
        rec = LadderRecurrence(cy[0], cy[1], kflag, ladder)
        for k in range(ib, n):
            y[k] = rec.step(ck)
            ck += rz
    if mr == 0:
        return nz

    nz = 0
    sgn, cspn, inu, fnf = _continuation_phase(fnu, mr, n)
    csgn = complex(0.0, sgn)
    asc = ladder.bounds[0]
    iuf = 0
    second = False
    iflag = ScaleLevel.NONE
    cy = [0j, 0j]
    il = 0
    for kk in range(n - 1, -1, -1):
        fn = fnu + kk
        if kk in expansions:
            debye = expansions[kk].resum(Family.I)
        else:
            debye = unik(zr, fn, Family.I, tol, tiny)
        s1 = _exponent(debye.zeta1, debye.zeta2, zr, fn, kode)
        rs1, level = _classify(s1.real, debye.phi, None, wp)
        if level is None:
            if rs1 > 0.0:
                return -1
            s2 = 0j
        else:
            if not second:
                iflag = level
            s2 = _scaled_term(s1, csgn * debye.phi * debye.sum, ladder.scales[iflag])
            if iflag == ScaleLevel.UNDERFLOW_GUARD and underflows(s2, asc, tol):
                s2 = 0j
        cy[int(second)] = s2
        c2 = s2
        s2 = s2 * ladder.rescales[iflag]
        s1 = y[kk]
        if kode == Scaling.SCALED:
            s1, s2, underflow, iuf = add_decaying_term(zr, s1, s2, asc, alim, iuf)
            nz += underflow
        y[kk] = s1 * cspn + s2
        cspn = -cspn
        if c2 == 0:
            second = False
            continue
        if second:
            il = kk
            break
        second = True
    if il == 0:
        return nz

    rec = LadderRecurrence(cy[0], cy[1], iflag, ladder)
    fn = float(inu + il)
    for kk in range(il - 1, -1, -1):
        c2 = rec.step((fn + fnf) * rz)
        fn -= 1.0
        c1 = y[kk]
        if kode == Scaling.SCALED:
            c1, c2, underflow, iuf = add_decaying_term(zr, c1, c2, asc, alim, iuf)
            nz += underflow
        y[kk] = c1 * cspn + c2
        cspn = -cspn
    return nz


CIP_K = (1 + 0j, -1j, -1 + 0j, 1j)
"""(-i)**k"""


def unk2(
    z: complex, fnu: float, kode: Scaling, mr: int, n: int, y: np.ndarray, wp: WorkingPrecision
) -> int:
    """K(fnu + k, z), k = 0..n-1, from the Airy expansion, pi/3 < |arg(+-z)| <= pi/2

    Same contract as unk1. K is computed from H2(fnu, -iz) with z in the
    first quadrant, and fourth quadrant values by conjugation.
    """
    tol, tiny, alim = wp.tol, wp.machine.tiny, wp.alim
    ladder = ScaleLadder.for_precision(wp)
    zr = z if z.real >= 0.0 else -z
    upper = zr.imag > 0.0
    zn = complex(zr.imag, -zr.real)
    zb = zr
    inu = int(fnu)
    fnf = fnu - inu
    ang = -HPI * fnf
    car = np.cos(ang)
    sar = np.sin(ang)
    cs = CR1 * (HPI * complex(sar, -car)) * CIP_K[inu % 4]
    if not upper:
        zn = complex(-zn.real, zn.imag)
        zb = zb.conjugate()

    nz = 0
    expansions: dict[int, AiryExpansion] = {}
    cy = [0j, 0j]
    second = False
    kflag = ScaleLevel.NONE
    last = n - 1
    for i in range(n):
        fn = fnu + i
        hj = unhj(zn, fn, tol, tiny)
        expansions[i] = hj
        s1 = -_exponent(hj.zeta1, hj.zeta2, zb, fn, kode)
        rs1, level = _classify(s1.real, hj.phi, hj.arg, wp)
        if level is not None:
            if not second:
                kflag = level
            s2 = _scaled_term(s1, cs * _airy_sum(hj, CR2), ladder.scales[kflag])
            if kflag == ScaleLevel.UNDERFLOW_GUARD and underflows(s2, ladder.bounds[0], tol):
                level = None
        if level is None:
            if rs1 > 0.0 or z.real < 0.0:
                return -1
            second = False
            y[i] = 0j
            nz += 1
            cs = cs * -1j
            if i > 0 and y[i - 1] != 0:
                y[i - 1] = 0j
                nz += 1
            continue
        if not upper:
            s2 = s2.conjugate()
        cy[int(second)] = s2
        y[i] = s2 * ladder.rescales[kflag]
        cs = cs * -1j
        if second:
            last = i
            break
        second = True

    rz = _two_over(zr)
    ib = last + 1
    if ib < n:
        fn = fnu + (n - 1)
        tail = unhj(zn, fn, tol, tiny, parameters_only=(mr == 0))
        rs1, lost = _tail_lost(-_exponent(tail.zeta1, tail.zeta2, zb, fn, kode), tail.phi, tail.arg, wp)
        if lost:
            if rs1 > 0.0 or z.real < 0.0:
                return -1
            y[:n] = 0j
            return n
        if mr != 0:
            expansions[n - 1] = tail
        ck = (fnu + last) * rz
        rec = LadderRecurrence(cy[0], cy[1], kflag, ladder)
        for k in range(ib, n):
            y[k] = rec.step(ck)
            ck += rz
    if mr == 0:
        return nz

    nz = 0
    sgn, cspn, _, _ = _continuation_phase(fnu, mr, n)
    csgni = sgn if upper else -sgn
    # I(fnu, z) = exp(i pi fnu/2) J(fnu, -iz), times the continuation factor
    cs = complex(sar * csgni, car * csgni) * CIP_K[(inu + n - 1) % 4].conjugate()
    asc = ladder.bounds[0]
    iuf = 0
    second = False
    iflag = ScaleLevel.NONE
    cy = [0j, 0j]
    il = 0
    for kk in range(n - 1, -1, -1):
        fn = fnu + kk
        hj = expansions[kk] if kk in expansions else unhj(zn, fn, tol, tiny)
        s1 = _exponent(hj.zeta1, hj.zeta2, zb, fn, kode)
        rs1, level = _classify(s1.real, hj.phi, hj.arg, wp)
        if level is None:
            if rs1 > 0.0:
                return -1
            s2 = 0j
        else:
            if not second:
                iflag = level
            s2 = _scaled_term(s1, cs * _airy_sum(hj), ladder.scales[iflag])
            if iflag == ScaleLevel.UNDERFLOW_GUARD and underflows(s2, asc, tol):
                s2 = 0j
        if not upper:
            s2 = s2.conjugate()
        cy[int(second)] = s2
        c2 = s2
        s2 = s2 * ladder.rescales[iflag]
        s1 = y[kk]
        if kode == Scaling.SCALED:
            s1, s2, underflow, iuf = add_decaying_term(zr, s1, s2, asc, alim, iuf)
            nz += underflow
        y[kk] = s1 * cspn + s2
        cspn = -cspn
        cs = cs * -1j
        if c2 == 0:
            second = False
            continue
        if second:
            il = kk
            break
        second = True
    if il == 0:
        return nz

    rec = LadderRecurrence(cy[0], cy[1], iflag, ladder)
    fn = float(inu + il)
    for kk in range(il - 1, -1, -1):
        c2 = rec.step((fn + fnf) * rz)
        fn -= 1.0
        c1 = y[kk]
        if kode == Scaling.SCALED:
            c1, c2, underflow, iuf = add_decaying_term(zr, c1, c2, asc, alim, iuf)
            nz += underflow
        y[kk] = c1 * cspn + c2
        cspn = -cspn
    return nz


def bunk(
    z: complex, fnu: float, kode: Scaling, mr: int, n: int, y: np.ndarray, wp: WorkingPrecision
) -> int:
    """K(fnu + k, z) for fnu > fnul, choosing the Debye or Airy form by arg z"""
    if abs(z.imag) > abs(z.real) * 1.7321:
        logger.debug(f"Large-order K at {z} by the Airy expansion")
        return unk2(z, fnu, kode, mr, n, y, wp)
    logger.debug(f"Large-order K at {z} by the Debye expansion")
    return unk1(z, fnu, kode, mr, n, y, wp)
