"""Parameters of the uniform asymptotic expansions for large order

Two families of expansions in 1/fnu (Olver, Chapters 10-11):

- Debye type, for I and K in the principal sector, with
  zeta1 = fnu log((1 + sqrt(1 + t**2))/t), zeta2 = fnu sqrt(1 + t**2),
  t = z/fnu, so that I ~ phi exp(zeta2 - zeta1) sum u_k/fnu**k.
- Airy type, for J (and hence I and K off the principal sector), with
  (2/3) zeta**(3/2) = log((1 + w)/z) - w, w = sqrt(1 - z**2), so that
  J ~ phi (Ai(fnu**(2/3) zeta) A + Ai'(fnu**(2/3) zeta) B / fnu**(4/3)).

Near the turning point (|w**2| <= 1/4) the Airy-type quantities are
computed from power series in w**2 instead of the closed forms.

References:
F. W. J. Olver, "Asymptotics and Special Functions", Academic Press, 1974.
D. E. Amos, "Computation of Bessel functions of complex argument and large
order", SAND83-0643, 1983.
"""

from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np

from zbessel.amos._tables import ALFA, AR, BETA, BR, GAMA, HJ_C, UNIK_C

CON = (3.98942280401432678e-01, 1.25331413731550025e00)
"""1/sqrt(2 pi) and sqrt(pi/2)"""
HPI = 1.57079632679489662
THPI = 4.71238898038468986
EX1 = 1.0 / 3.0
EX2 = 2.0 / 3.0
MAX_DEBYE_TERMS = 15


class Family(IntEnum):
    """Which modified Bessel function an expansion approximates"""

    I = 1  # noqa: E741
    K = 2


@dataclass
class DebyeExpansion:
    """Debye-type expansion for I(fnu, fnu t) or K(fnu, fnu t)"""

    phi: complex
    """Prefactor, 1/sqrt(2 pi fnu (1+t^2)^(1/2)) for I and pi times that for K"""
    zeta1: complex
    zeta2: complex
    sum: complex = 0j
    """Sum of u_k/fnu^k (alternating for K)"""
    terms: list[complex] = field(default_factory=list)
    """u_k(1/sqrt(1+t^2)) / fnu^k, reusable between families"""
    root: complex = 1 + 0j
    """sqrt(1/(fnu sqrt(1+t^2)))"""

    def resum(self, family: Family) -> "DebyeExpansion":
        """The same expansion for the other family, reusing the computed terms"""
        if family == Family.I:
            total = sum(self.terms, 0j)
        else:
            total = sum(((-1) ** k * u for k, u in enumerate(self.terms)), 0j)
        return DebyeExpansion(
            phi=self.root * CON[family - 1],
            zeta1=self.zeta1,
            zeta2=self.zeta2,
            sum=total,
            terms=self.terms,
            root=self.root,
        )


def unik(
    zr: complex,
    fnu: float,
    family: Family,
    tol: float,
    tiny: float,
    parameters_only: bool = False,
) -> DebyeExpansion:
    """Debye-type parameters for I(fnu, zr) or K(fnu, zr), Re(zr) >= 0

    Args:
        zr: Argument, rotated into the right half plane
        fnu: Order, large
        family: I or K
        tol: Relative accuracy of the sum
        tiny: Smallest normal magnitude
        parameters_only: Compute phi, zeta1, zeta2 but not the sum
    """
    rfn = 1.0 / fnu
    test = tiny * 1.0e3
    ac = fnu * test
    if abs(zr.real) <= ac and abs(zr.imag) <= ac:
        # z/fnu so small that only the exponent matters; forces underflow
        return DebyeExpansion(
            phi=1 + 0j, zeta1=complex(2.0 * abs(np.log(test)) + fnu, 0.0), zeta2=complex(fnu, 0.0)
        )
    t = zr * rfn
    s = 1.0 + t * t
    sr = complex(np.sqrt(s))
    zn = (1.0 + sr) / t
    zeta1 = fnu * complex(np.log(zn))
    zeta2 = fnu * sr
    sr = (1.0 / sr) * rfn
    root = complex(np.sqrt(sr))
    phi = root * CON[family - 1]
    expansion = DebyeExpansion(phi=phi, zeta1=zeta1, zeta2=zeta2, root=root)
    if parameters_only:
        return expansion

    # u_k(t) with t = 1/sqrt(1+z^2/fnu^2), divided by fnu^k
    t2 = 1.0 / s
    terms = [1 + 0j]
    crfn = 1 + 0j
    ac = 1.0
    ell = 0
    for k in range(1, MAX_DEBYE_TERMS):
        sk = 0j
        for _ in range(k + 1):
            ell += 1
            sk = sk * t2 + UNIK_C[ell]
        crfn = crfn * sr
        terms.append(crfn * sk)
        ac *= rfn
        u = terms[-1]
        if ac < tol and abs(u.real) + abs(u.imag) < tol:
            break
    expansion.terms = terms
    return expansion.resum(family)


@dataclass
class AiryExpansion:
    """Airy-type expansion for J(fnu, fnu z)"""

    phi: complex
    """Prefactor (4 zeta/(1-z^2))^(1/4) / fnu^(1/3)"""
    arg: complex
    """Airy function argument fnu^(2/3) zeta"""
    zeta1: complex
    zeta2: complex
    asum: complex = 0j
    """Sum multiplying Ai(arg)"""
    bsum: complex = 0j
    """Sum multiplying Ai'(arg)"""


def unhj(
    z: complex, fnu: float, tol: float, tiny: float, parameters_only: bool = False
) -> AiryExpansion:
    """Airy-type parameters for J(fnu, fnu z) in the principal sector

    Args:
        z: Argument in the fourth quadrant, unscaled by fnu
        fnu: Order, large
        tol: Relative accuracy of the sums
        tiny: Smallest normal magnitude
        parameters_only: Compute phi, arg, zeta1, zeta2 but not asum, bsum
    """
    rfnu = 1.0 / fnu
    test = tiny * 1.0e3
    ac = fnu * test
    if abs(z.real) <= ac and abs(z.imag) <= ac:
        return AiryExpansion(
            phi=1 + 0j,
            arg=1 + 0j,
            zeta1=complex(2.0 * abs(np.log(test)) + fnu, 0.0),
            zeta2=complex(fnu, 0.0),
        )
    zb = z * rfnu
    rfnu2 = rfnu * rfnu
    fn13 = fnu**EX1
    fn23 = fn13 * fn13
    rfn13 = 1.0 / fn13
    w2 = 1.0 - zb * zb
    aw2 = abs(w2)
    if aw2 > 0.25:
        return _unhj_outer(zb, w2, aw2, fnu, rfnu, rfn13, fn23, tol, parameters_only)

    # power series in w^2 near the turning point
    p = [1 + 0j]
    ap = [1.0]
    suma = complex(GAMA[0])
    if aw2 >= tol:
        for k in range(1, 30):
            p.append(p[-1] * w2)
            suma += p[k] * GAMA[k]
            ap.append(ap[-1] * aw2)
            if ap[k] < tol:
                break
    kmax = len(p)
    zeta = w2 * suma
    arg = zeta * fn23
    za = complex(np.sqrt(suma))
    zeta2 = complex(np.sqrt(w2)) * fnu
    zeta1 = (1.0 + EX2 * (zeta * za)) * zeta2
    za = za + za
    phi = complex(np.sqrt(za)) * rfn13
    expansion = AiryExpansion(phi=phi, arg=arg, zeta1=zeta1, zeta2=zeta2)
    if parameters_only:
        return expansion

    sumb = sum((p[k] * BETA[k] for k in range(kmax)), 0j)
    asum = 0j
    bsum = sumb
    l1 = 0
    l2 = 30
    btol = tol * (abs(bsum.real) + abs(bsum.imag))
    atol = tol
    pp = 1.0
    a_done = False
    b_done = False
    if rfnu2 >= tol:
        for _ in range(2, 8):
            atol = atol / rfnu2
            pp = pp * rfnu2
            if not a_done:
                suma = 0j
                for k in range(kmax):
                    suma += p[k] * ALFA[l1 + k]
                    if ap[k] < atol:
                        break
                asum += suma * pp
                if pp < tol:
                    a_done = True
            if not b_done:
                sumb = 0j
                for k in range(kmax):
                    sumb += p[k] * BETA[l2 + k]
                    if ap[k] < atol:
                        break
                bsum += sumb * pp
                if pp < btol:
                    b_done = True
            if a_done and b_done:
                break
            l1 += 30
            l2 += 30
    expansion.asum = asum + 1.0
    expansion.bsum = bsum * (rfnu * rfn13)
    return expansion


def _unhj_outer(
    zb: complex,
    w2: complex,
    aw2: float,
    fnu: float,
    rfnu: float,
    rfn13: float,
    fn23: float,
    tol: float,
    parameters_only: bool,
) -> AiryExpansion:
    """Airy-type parameters from the closed forms, for |1 - (z/fnu)^2| > 1/4"""
    w = complex(np.sqrt(w2))
    w = complex(max(w.real, 0.0), max(w.imag, 0.0))
    za = (1.0 + w) / zb
    zc = complex(np.log(za))
    zc = complex(max(zc.real, 0.0), min(max(zc.imag, 0.0), HPI))
    zth = (zc - w) * 1.5
    zeta1 = zc * fnu
    zeta2 = w * fnu
    azth = abs(zth)
    if zth.real >= 0.0 and zth.imag < 0.0:
        ang = THPI
    elif zth.real == 0.0:
        ang = HPI
    else:
        ang = np.arctan(zth.imag / zth.real)
        if zth.real < 0.0:
            ang += np.pi
    pp = azth**EX2
    ang *= EX2
    zeta = complex(pp * np.cos(ang), max(pp * np.sin(ang), 0.0))
    arg = zeta * fn23
    rtzt = zth / zeta
    za = rtzt / w
    phi = complex(np.sqrt(za + za)) * rfn13
    expansion = AiryExpansion(phi=phi, arg=arg, zeta1=zeta1, zeta2=zeta2)
    if parameters_only:
        return expansion

    rfnu2 = rfnu * rfnu
    raw = 1.0 / np.sqrt(aw2)
    tfn = complex(w.real * raw, -w.imag * raw) * rfnu * raw
    razth = 1.0 / azth
    rzth = complex(zth.real * razth, -zth.imag * razth) * razth * rfnu
    zc = rzth * AR[1]
    raw2 = 1.0 / aw2
    t2 = complex(w2.real * raw2, -w2.imag * raw2) * raw2
    up = [0j] * 14
    cr = [0j] * 12
    dr = [0j] * 12
    up[1] = (t2 * HJ_C[1] + HJ_C[2]) * tfn
    bsum = up[1] + zc
    asum = 0j
    if rfnu >= tol:
        przth = rzth
        ptfn = tfn
        up[0] = 1 + 0j
        pp = 1.0
        btol = tol * (abs(bsum.real) + abs(bsum.imag))
        ks = -1
        kp1 = 1
        ell = 2
        a_done = False
        b_done = False
        for lr in range(2, 13, 2):
            lrp1 = lr + 1
            for _ in range(lr, lrp1 + 1):
                ks += 1
                kp1 += 1
                ell += 1
                za = complex(HJ_C[ell])
                for _ in range(kp1):
                    ell += 1
                    za = za * t2 + HJ_C[ell]
                ptfn = ptfn * tfn
                up[kp1] = ptfn * za
                cr[ks] = przth * BR[ks + 1]
                przth = przth * rzth
                dr[ks] = przth * AR[ks + 2]
            pp *= rfnu2
            if not a_done:
                suma = up[lrp1 - 1]
                ju = lrp1 - 1
                for jr in range(lr):
                    ju -= 1
                    suma += cr[jr] * up[ju]
                asum += suma
                if pp < tol and abs(suma.real) + abs(suma.imag) < tol:
                    a_done = True
            if not b_done:
                sumb = up[lr + 1] + up[lrp1 - 1] * zc
                ju = lrp1 - 1
                for jr in range(lr):
                    ju -= 1
                    sumb += dr[jr] * up[ju]
                bsum += sumb
                if pp < btol and abs(sumb.real) + abs(sumb.imag) < btol:
                    b_done = True
            if a_done and b_done:
                break
    expansion.asum = asum + 1.0
    expansion.bsum = -bsum * rfn13 / rtzt
    return expansion
