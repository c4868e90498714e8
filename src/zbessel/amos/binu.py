"""I(fnu + k, z) in the right half plane, choosing the evaluator by region

The (|z|, order) plane is divided among the evaluators:

- power series for |z| <= 2 or |z|**2/4 <= fnu + n
- Hankel asymptotic expansion for |z| >= rl and small order
- uniform asymptotic expansion once the top order or |z| exceeds fnul
- Miller's algorithm otherwise, normalized by the Neumann series for
  |z| <= rl and by the Wronskian with K for |z| > rl

Members that underflow are zeroed from the top order down and the rest of
the sequence is handed to the next method.
"""

import logging

import numpy as np

from zbessel.amos.asymptotic import asyi
from zbessel.amos.large_order import buni
from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.miller import mlri
from zbessel.amos.overflow import uoik
from zbessel.amos.series import seri
from zbessel.amos.types import Evaluation, Scaling
from zbessel.amos.uniform import Family
from zbessel.amos.wronskian import wrsk

logger = logging.getLogger(__name__)


def _failure(nw: int) -> int:
    return -2 if nw == -2 else -1


def binu(z: complex, fnu: float, kode: Scaling, n: int, wp: WorkingPrecision) -> Evaluation:
    """I(fnu + k, z) for k = 0..n-1, Re(z) >= 0

    Returns:
        Evaluation whose nz counts the top orders set to zero by underflow,
        or is -1 (overflow) / -2 (no convergence) on failure.
    """
    y = np.zeros(n, dtype=np.complex128)
    nz = 0
    az = abs(z)
    nn = n
    dfnu = fnu + (n - 1)

    if az <= 2.0 or az * az * 0.25 <= dfnu + 1.0:
        values, nw = seri(z, fnu, kode, nn, wp)
        y[:nn] = values
        nz += abs(nw)
        nn -= abs(nw)
        if nn == 0 or nw >= 0:
            return Evaluation(y, nz)
        dfnu = fnu + (nn - 1)
        logger.debug(f"Series for I({fnu}, {z}) underflowed inside its growth region")

    if az >= wp.rl and (dfnu <= 1.0 or az + az >= dfnu * dfnu):
        values, nw = asyi(z, fnu, kode, nn, wp)
        if nw == -1:
            return Evaluation(y, -1)
        if nw == 0:
            y[:nn] = values
            return Evaluation(y, nz)
        # Miller's band ends at rl, so retry through the Wronskian normalizer
        logger.debug(f"Asymptotic expansion for I({fnu}, {z}) did not converge")

    if az >= wp.rl or dfnu > 1.0:
        nw = uoik(z, fnu, kode, Family.I, nn, y, wp)
        if nw < 0:
            return Evaluation(y, _failure(nw))
        nz += nw
        nn -= nw
        if nn == 0:
            return Evaluation(y, nz)
        dfnu = fnu + (nn - 1)
        if dfnu > wp.fnul or az > wp.fnul:
            nui = max(int(wp.fnul - dfnu) + 1, 0)
            nw, nlast = buni(z, fnu, kode, nn, y[:nn], nui, wp)
            if nw < 0:
                return Evaluation(y, _failure(nw))
            nz += nw
            if nlast == 0:
                return Evaluation(y, nz)
            nn = nlast

        if az > wp.rl:
            cw = np.zeros(2, dtype=np.complex128)
            nw = uoik(z, fnu, kode, Family.K, 2, cw, wp)
            if nw < 0:
                logger.debug(f"K for the Wronskian at {z} overflows; I underflows")
                y[:nn] = 0j
                return Evaluation(y, nn)
            if nw > 0:
                return Evaluation(y, -1)
            values, nw = wrsk(z, fnu, kode, nn, wp)
            if nw < 0:
                return Evaluation(y, _failure(nw))
            y[:nn] = values
            return Evaluation(y, nz)

    values, nw = mlri(z, fnu, kode, nn, wp)
    if nw < 0:
        return Evaluation(y, _failure(nw))
    y[:nn] = values
    return Evaluation(y, nz)
