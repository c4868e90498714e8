"""Miller backward recurrence for the I-type Bessel function

The recurrence I(v-1) = (2v/z) I(v) + I(v+1) is run backward from a
starting index where the minimal solution is negligible, and the result
is normalized with the Neumann series

    exp(z) = sum_k eps_k (k + fnf) Gamma(k + 2 fnf) / (k! Gamma(1 + 2 fnf))
             * (z/2)**(-fnf) Gamma(1 + fnf) I(k + fnf, z)

The starting index comes from a truncation error bound (Olver and
Sookne), so that it is computed rather than guessed.

References:
F. W. J. Olver, D. J. Sookne, "Note on backward recurrence algorithms",
Math. Comp. 26 (1972) 941-947.
"""

import logging

import numpy as np
from scipy.special import gammaln

from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.types import Evaluation, Scaling

logger = logging.getLogger(__name__)

MAX_STEPS = 80
"""Limit on the forward-recurrence steps used to place the starting index"""


def _start_index(z: complex, fnu: float, n: int, tol: float) -> int | None:
    """Backward recurrence starting index, or None if the bound does not converge"""
    az = abs(z)
    iaz = int(az)
    inu = int(fnu) + n - 1
    raz = 1.0 / az
    zc = complex(z.real * raz, -z.imag * raz)
    rz = 2.0 * zc * raz

    # forward recurrence from order |z| until the growth bound is satisfied
    at = iaz + 1.0
    ck = zc * at * raz
    p1 = 0j
    p2 = 1 + 0j
    ack = (at + 1.0) * raz
    rho = ack + np.sqrt(ack * ack - 1.0)
    rho2 = rho * rho
    tst = (rho2 + rho2) / ((rho2 - 1.0) * (rho - 1.0)) / tol
    ak = at
    for i in range(1, MAX_STEPS + 1):
        p1, p2 = p2, p1 - ck * p2
        ck += rz
        if abs(p2) > tst * ak * ak:
            break
        ak += 1.0
    else:
        return None
    i += 1
    if inu < iaz:
        return max(i + iaz, 1 + inu)

    # order exceeds |z|: a second bound relative to the highest order
    p1 = 0j
    p2 = 1 + 0j
    at = inu + 1.0
    ck = zc * at * raz
    ack = at * raz
    tst = np.sqrt(ack / tol)
    second = False
    for k in range(1, MAX_STEPS + 1):
        p1, p2 = p2, p1 - ck * p2
        ck += rz
        ap = abs(p2)
        if ap < tst:
            continue
        if second:
            break
        ack = abs(ck)
        flam = ack + np.sqrt(ack * ack - 1.0)
        fkap = ap / abs(p1)
        rho = min(flam, fkap)
        tst = tst * np.sqrt(rho / (rho * rho - 1.0))
        second = True
    else:
        return None
    k += 1
    return max(i + iaz, k + inu)


def mlri(z: complex, fnu: float, kode: Scaling, n: int, wp: WorkingPrecision) -> Evaluation:
    """I(fnu + k, z) for k = 0..n-1, Re(z) >= 0, by Miller's algorithm

    Returns nz = -2 if the starting index bound does not converge.
    """
    y = np.zeros(n, dtype=np.complex128)
    tol = wp.tol
    kk = _start_index(z, fnu, n, tol)
    if kk is None:
        logger.debug(f"Miller starting index did not converge for |z|={abs(z)}, fnu={fnu}")
        return Evaluation(y, -2)

    az = abs(z)
    raz = 1.0 / az
    rz = 2.0 * complex(z.real * raz, -z.imag * raz) * raz
    ifnu = int(fnu)
    inu = ifnu + n - 1
    fkk = float(kk)
    fnf = fnu - ifnu
    tfnf = fnf + fnf
    bk = np.exp(gammaln(fkk + tfnf + 1.0) - gammaln(fkk + 1.0) - gammaln(tfnf + 1.0))
    p1 = 0j
    p2 = complex(wp.machine.tiny / tol)
    total = 0j

    def step():
        nonlocal p1, p2, bk, fkk, total
        p1, p2 = p2, p1 + (fkk + fnf) * (rz * p2)
        ack = bk * (1.0 - tfnf / (fkk + tfnf))
        total += (ack + bk) * p1
        bk = ack
        fkk -= 1.0

    for _ in range(kk - inu):
        step()
    y[n - 1] = p2
    for m in range(n - 2, -1, -1):
        step()
        y[m] = p2
    for _ in range(ifnu):
        step()

    # normalize with the Neumann sum; the scaled form drops exp(Re z)
    pt = z if kode == Scaling.UNSCALED else complex(0.0, z.imag)
    p1 = -fnf * complex(np.log(rz)) + pt
    pt = p1 - gammaln(1.0 + fnf)
    p2 = p2 + total
    ap = abs(p2)
    rap = 1.0 / ap
    ck = complex(np.exp(pt)) * rap
    cnorm = ck * complex(p2.real * rap, -p2.imag * rap)
    y *= cnorm
    return Evaluation(y, 0)
