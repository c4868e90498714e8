"""Test the Airy evaluators across the |z| = 1 switch between series and Bessel paths"""

import numpy as np
import pytest
import scipy.special

from zbessel.amos import airy as ai_engine
from zbessel.amos import biry as bi_engine
from zbessel.amos.airy import acai, airy, maclaurin_sums
from zbessel.amos.biry import biry
from zbessel.amos.kfunc import bknu
from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.types import Scaling, Status

TOL = 2.0**-52


def _series_ai(z: complex, derivative: int) -> complex:
    s1, s2 = maclaurin_sums(z, derivative, TOL)
    if derivative == 0:
        return ai_engine.C1 * s1 - ai_engine.C2 * z * s2
    return ai_engine.C1 * z * z * s1 / 2 - ai_engine.C2 * s2


def _series_bi(z: complex, derivative: int) -> complex:
    s1, s2 = maclaurin_sums(z, derivative, TOL)
    if derivative == 0:
        return bi_engine.C1 * s1 + bi_engine.C2 * z * s2
    return bi_engine.C1 * z * z * s1 / 2 + bi_engine.C2 * s2


@pytest.mark.parametrize("derivative", [0, 1])
@pytest.mark.parametrize("theta", [-0.9, -0.3, 0.0, 0.5, 1.0])
@pytest.mark.parametrize("r", [0.6, 0.9])
def test_series_region_vs_bessel(wp: WorkingPrecision, derivative: int, theta: float, r: float):
    """Inside |z| <= 1, compare with (1/pi) sqrt(z/3) K(1/3, zeta) and its derivative"""
    z = r * np.exp(1j * theta)
    zeta = 2.0 / 3.0 * z * np.sqrt(z)
    fnu = (1.0 + derivative) / 3.0
    k, nz = bknu(complex(zeta), fnu, Scaling.UNSCALED, 1, wp)
    assert nz == 0
    factor = np.sqrt(z) if derivative == 0 else -z
    expected = ai_engine.COEF * factor * k[0]
    out = airy(complex(z), derivative)
    assert out.ierr == Status.OK
    assert out.value == pytest.approx(expected, rel=1e-12)


@pytest.mark.parametrize("derivative", [0, 1])
@pytest.mark.parametrize("z", [1.5 + 0j, 1.2 + 0.9j, -1.4 + 0.2j, 0.3 - 1.6j, -1.1 - 1.1j])
def test_bessel_region_vs_series(derivative: int, z: complex):
    """Just outside |z| = 1 the Maclaurin series are still accurate"""
    assert airy(z, derivative).value == pytest.approx(_series_ai(z, derivative), rel=1e-12)
    assert biry(z, derivative).value == pytest.approx(_series_bi(z, derivative), rel=1e-12)


@pytest.mark.parametrize("kode", [Scaling.UNSCALED, Scaling.SCALED])
@pytest.mark.parametrize("z", [-1.5 + 0.5j, -4.0 - 3.0j, -30.0 + 2.0j])
def test_continuation(wp: WorkingPrecision, kode: Scaling, z: complex):
    mr = -1 if z.imag < 0 else 1
    for fnu in (1.0 / 3.0, 2.0 / 3.0):
        values, nz = acai(z, fnu, kode, mr, wp)
        assert nz == 0
        ref = scipy.special.kve if kode == Scaling.SCALED else scipy.special.kv
        assert values[0] == pytest.approx(ref(fnu, z), rel=1e-12)


def test_scaled_origin():
    assert airy(0j, 0, Scaling.SCALED).value == ai_engine.C1
    assert airy(0j, 1, Scaling.SCALED).value == -ai_engine.C2
    assert biry(0j, 0, Scaling.SCALED).value == bi_engine.C1
    assert biry(0j, 1, Scaling.SCALED).value == bi_engine.C2


def test_negative_real_axis():
    """Both Ai and Bi oscillate with O(1) magnitude on the negative axis"""
    x = -np.geomspace(1.5, 200.0, 50)
    ai, aip, bi, bip = scipy.special.airy(x + 0j)
    assert np.array([airy(xi + 0j).value for xi in x]) == pytest.approx(ai, abs=1e-12)
    assert np.array([airy(xi + 0j, 1).value for xi in x]) == pytest.approx(aip, abs=1e-10)
    assert np.array([biry(xi + 0j).value for xi in x]) == pytest.approx(bi, abs=1e-12)
    assert np.array([biry(xi + 0j, 1).value for xi in x]) == pytest.approx(bip, abs=1e-10)
