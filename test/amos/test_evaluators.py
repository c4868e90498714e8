"""Test the individual I and K evaluators against each other and scipy versions

Where two algorithms are both valid for the same argument they are
checked against each other, so that a disagreement points at one region
boundary rather than at the dispatch logic.
"""

import numpy as np
import pytest
import scipy.special

from zbessel.amos import binu as binu_module
from zbessel.amos.asymptotic import asyi
from zbessel.amos.continuation import acon
from zbessel.amos.kfunc import bknu
from zbessel.amos.large_order import buni, bunk
from zbessel.amos.machine import WorkingPrecision
from zbessel.amos.miller import mlri
from zbessel.amos.overflow import uoik
from zbessel.amos.series import seri
from zbessel.amos.types import Evaluation, Scaling
from zbessel.amos.uniform import Family, unik
from zbessel.amos.wronskian import rati, wrsk


@pytest.mark.parametrize("kode", [Scaling.UNSCALED, Scaling.SCALED])
@pytest.mark.parametrize("z", [1.2 + 0.9j, 0.6 - 0.3j, 1.9j, 2.5 + 0.5j])
def test_series_vs_miller(wp: WorkingPrecision, kode: Scaling, z: complex):
    fnu = 1.4
    series, nz = seri(z, fnu, kode, 3, wp)
    assert nz == 0
    miller, nz = mlri(z, fnu, kode, 3, wp)
    assert nz == 0
    assert series == pytest.approx(miller, rel=1e-12)


@pytest.mark.parametrize("kode", [Scaling.UNSCALED, Scaling.SCALED])
@pytest.mark.parametrize("z", [25.0 + 3.0j, 22.0 - 4.0j, 0.5 + 30.0j])
def test_asymptotic_vs_wronskian(wp: WorkingPrecision, kode: Scaling, z: complex):
    fnu = 0.7
    asymptotic, nz = asyi(z, fnu, kode, 2, wp)
    assert nz == 0
    wronskian, nz = wrsk(z, fnu, kode, 2, wp)
    assert nz == 0
    assert asymptotic == pytest.approx(wronskian, rel=1e-12)


def test_asymptotic_nonconvergence_falls_back(
    wp: WorkingPrecision, monkeypatch: pytest.MonkeyPatch
):
    """An unconverged expansion is retried through the Wronskian normalizer"""

    def unconverged(z, fnu, kode, n, wp):
        return Evaluation(np.zeros(n, dtype=np.complex128), -2)

    monkeypatch.setattr(binu_module, "asyi", unconverged)
    z = 25.0 + 3.0j
    values, nz = binu_module.binu(z, 0.7, Scaling.UNSCALED, 2, wp)
    assert nz == 0
    assert values == pytest.approx(scipy.special.iv(0.7 + np.arange(2), z), rel=1e-12)


def test_series_tiny_argument(wp: WorkingPrecision):
    values, nz = seri(1e-310 + 0j, 0.0, Scaling.UNSCALED, 3, wp)
    assert nz == 2
    assert list(values) == [1, 0, 0]


def test_asymptotic_overflow(wp: WorkingPrecision):
    assert asyi(750.0 + 1j, 0.5, Scaling.UNSCALED, 1, wp).nz == -1
    assert asyi(750.0 + 1j, 0.5, Scaling.SCALED, 1, wp).nz == 0


def test_ratios():
    z = 3.0 + 2.0j
    fnu = 0.4
    orders = fnu + np.arange(5)
    i = scipy.special.iv(orders, z)
    expected = i[1:] / i[:-1]
    assert rati(z, fnu, 4, 2.0**-52) == pytest.approx(expected, rel=1e-12)


@pytest.mark.parametrize("kode", [Scaling.UNSCALED, Scaling.SCALED])
@pytest.mark.parametrize("fnu", [0.0, 0.5, 0.3, 2.7, 10.2])
@pytest.mark.parametrize("z", [0.05 + 0.01j, 1.0 + 1.0j, 1.5 - 1.0j, 4.0 + 3.0j, 40.0j, 15.0 - 2.0j])
def test_bknu(wp: WorkingPrecision, kode: Scaling, fnu: float, z: complex):
    n = 4
    values, nz = bknu(z, fnu, kode, n, wp)
    assert nz == 0
    ref = scipy.special.kve if kode == Scaling.SCALED else scipy.special.kv
    expected = ref(fnu + np.arange(n), z)
    assert values == pytest.approx(expected, rel=1e-12)


def test_bknu_underflow(wp: WorkingPrecision):
    values, nz = bknu(710.0 + 0j, 0.3, Scaling.UNSCALED, 3, wp)
    assert nz == 3
    assert np.all(values == 0)
    values, nz = bknu(710.0 + 0j, 0.3, Scaling.SCALED, 3, wp)
    assert nz == 0
    assert values == pytest.approx(scipy.special.kve(0.3 + np.arange(3), 710.0 + 0j), rel=1e-12)


@pytest.mark.parametrize("kode", [Scaling.UNSCALED, Scaling.SCALED])
@pytest.mark.parametrize("z", [-0.5 + 0.2j, -3.0 - 1.0j, -8.0 + 6.0j, -25.0 + 1.0j])
def test_continuation(wp: WorkingPrecision, kode: Scaling, z: complex):
    fnu = 0.6
    n = 3
    mr = -1 if z.imag < 0 else 1
    values, nz = acon(z, fnu, kode, mr, n, wp)
    assert nz == 0
    ref = scipy.special.kve if kode == Scaling.SCALED else scipy.special.kv
    expected = ref(fnu + np.arange(n), z)
    assert values == pytest.approx(expected, rel=1e-11)


@pytest.mark.parametrize("family", [Family.I, Family.K])
@pytest.mark.parametrize("z", [40.0 + 10.0j, 120.0 - 5.0j, 5.0 + 2.0j])
def test_debye_expansion(wp: WorkingPrecision, family: Family, z: complex):
    fnu = 100.0
    expansion = unik(z, fnu, family, wp.tol, wp.machine.tiny)
    if family == Family.I:
        approx = expansion.phi * np.exp(expansion.zeta2 - expansion.zeta1) * expansion.sum
        expected = scipy.special.iv(fnu, z)
    else:
        approx = expansion.phi * np.exp(expansion.zeta1 - expansion.zeta2) * expansion.sum
        expected = scipy.special.kv(fnu, z)
    assert approx == pytest.approx(expected, rel=1e-12)


def test_debye_resum(wp: WorkingPrecision):
    z = 60.0 - 20.0j
    i = unik(z, 95.0, Family.I, wp.tol, wp.machine.tiny)
    k = unik(z, 95.0, Family.K, wp.tol, wp.machine.tiny)
    resummed = i.resum(Family.K)
    assert resummed.sum == pytest.approx(k.sum, rel=1e-15)
    assert resummed.phi == pytest.approx(k.phi, rel=1e-15)


@pytest.mark.parametrize("nui", [0, 5])
@pytest.mark.parametrize("z", [40.0 + 10.0j, 10.0 + 50.0j])
def test_large_order_i(wp: WorkingPrecision, nui: int, z: complex):
    fnu = 100.0 - nui
    n = 3
    y = np.zeros(n, dtype=np.complex128)
    nz, nlast = buni(z, fnu, Scaling.UNSCALED, n, y, nui, wp)
    assert (nz, nlast) == (0, 0)
    assert y == pytest.approx(scipy.special.iv(fnu + np.arange(n), z), rel=1e-11)


@pytest.mark.parametrize("kode", [Scaling.UNSCALED, Scaling.SCALED])
@pytest.mark.parametrize("z", [30.0 + 20.0j, 10.0 + 60.0j, -30.0 + 10.0j, -10.0 - 60.0j])
def test_large_order_k(wp: WorkingPrecision, kode: Scaling, z: complex):
    fnu = 100.0
    n = 3
    mr = 0
    if z.real < 0:
        mr = -1 if z.imag < 0 else 1
    y = np.zeros(n, dtype=np.complex128)
    nz = bunk(z, fnu, kode, mr, n, y, wp)
    assert nz == 0
    ref = scipy.special.kve if kode == Scaling.SCALED else scipy.special.kv
    assert y == pytest.approx(ref(fnu + np.arange(n), z), rel=1e-11)


def test_overflow_pretest(wp: WorkingPrecision):
    y = np.ones(3, dtype=np.complex128)
    assert uoik(1e-3 + 0j, 100.0, Scaling.UNSCALED, Family.I, 3, y, wp) == 3
    assert np.all(y == 0)

    y = np.ones(3, dtype=np.complex128)
    assert uoik(1e-3 + 0j, 100.0, Scaling.UNSCALED, Family.K, 3, y, wp) == -1

    y = np.ones(3, dtype=np.complex128)
    assert uoik(50.0 + 10.0j, 100.0, Scaling.UNSCALED, Family.I, 3, y, wp) == 0
    assert np.all(y == 1)
