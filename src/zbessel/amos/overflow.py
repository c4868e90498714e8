"""Overflow and underflow pre-test for I and K sequences

The leading exponential factor of the uniform asymptotic expansion gives
log|I(fnu, z)| or log|K(fnu, z)| to within a few units without summing any
series. Comparing it against alim and elim decides cheaply whether a
sequence is on scale, overflows, or has underflowing members that can be
zeroed before a more expensive method is run.

The Debye form is used when |arg z| <= pi/3 and the Airy form otherwise.
"""

import logging

import numpy as np

from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.scaling import underflows
from zbessel.amos.types import Scaling
from zbessel.amos.uniform import Family, unhj, unik

logger = logging.getLogger(__name__)

AIC = 1.265512123484645396
"""log(2 sqrt(pi))"""


def _exponent(
    zr: complex, zn: complex | None, gnu: float, kode: Scaling, family: Family, wp: WorkingPrecision
) -> tuple[complex, complex, complex | None]:
    """Leading exponent, phi and Airy argument of the expansion at order gnu"""
    tiny = wp.machine.tiny
    if zn is None:
        debye = unik(zr, gnu, family, wp.tol, tiny, parameters_only=True)
        cz, phi, arg = debye.zeta2 - debye.zeta1, debye.phi, None
    else:
        airy = unhj(zn, gnu, wp.tol, tiny, parameters_only=True)
        cz, phi, arg = airy.zeta2 - airy.zeta1, airy.phi, airy.arg
    if kode == Scaling.SCALED:
        cz -= zr
    return cz, phi, arg


def _refine(cz: complex, phi: complex, arg: complex | None) -> complex:
    """Complex logarithm of the leading term including its algebraic factors"""
    lcz = cz + complex(np.log(phi))
    if arg is not None:
        lcz = lcz - 0.25 * complex(np.log(arg)) - AIC
    return lcz


def _lost(lcz: complex, wp: WorkingPrecision) -> bool:
    ax = np.exp(lcz.real) / wp.tol
    term = complex(ax * np.cos(lcz.imag), ax * np.sin(lcz.imag))
    return underflows(term, wp.ascle, wp.tol)


def uoik(
    z: complex,
    fnu: float,
    kode: Scaling,
    family: Family,
    n: int,
    y: np.ndarray,
    wp: WorkingPrecision,
) -> int:
    """Test the sequence of orders fnu..fnu+n-1 for over- and underflow

    Args:
        z: Argument
        fnu: Lowest order
        kode: Scaling of the sequence being tested
        family: I or K
        n: Number of orders
        y: Output array; members found to underflow are set to zero

    Returns:
        -1 if the sequence overflows. Otherwise the number of members
        zeroed: for I these are the highest orders, and the remaining
        n - nuf must be computed by another method. For K the result is
        either 0 or n.
    """
    zr = z if z.real >= 0.0 else -z
    zn = None
    if abs(z.imag) > abs(z.real) * 1.7321:
        zn = complex(zr.imag, -zr.real)
        if z.imag <= 0.0:
            zn = complex(-zn.real, zn.imag)
    elim = wp.elim
    alim = wp.alim

    gnu = max(fnu, 1.0)
    if family == Family.K:
        gnu = max(fnu + n - 1.0, float(n))
    cz, phi, arg = _exponent(zr, zn, gnu, kode, family, wp)
    if family == Family.K:
        cz = -cz
    rcz = cz.real
    if rcz > elim:
        logger.debug(f"Pre-test: {family.name}({gnu}, {z}) overflows")
        return -1
    if rcz >= alim:
        if _refine(cz, phi, arg).real > elim:
            logger.debug(f"Pre-test: {family.name}({gnu}, {z}) overflows")
            return -1
    elif rcz <= -alim:
        lost = rcz < -elim
        if not lost:
            lcz = _refine(cz, phi, arg)
            lost = lcz.real <= -elim or _lost(lcz, wp)
        if lost:
            y[:n] = 0j
            logger.debug(f"Pre-test: all of {family.name}({fnu}.., {z}) underflow")
            return n
    if family == Family.K or n == 1:
        return 0

    nuf = 0
    nn = n
    while nn > 0:
        gnu = fnu + (nn - 1)
        cz, phi, arg = _exponent(zr, zn, gnu, kode, family, wp)
        if cz.real >= -elim:
            if cz.real > -alim:
                return nuf
            lcz = _refine(cz, phi, arg)
            if lcz.real > -elim and not _lost(lcz, wp):
                return nuf
        y[nn - 1] = 0j
        nn -= 1
        nuf += 1
    return nuf
