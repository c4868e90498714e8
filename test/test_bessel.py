"""Test Bessel function implementations against reference tables and scipy versions"""

from pathlib import Path

import numpy as np
import pytest
import scipy.special
from matplotlib import pyplot as plt

import zbessel.bessel as zb
from zbessel.amos.types import Scaling, Status

NSAMP = 200


@pytest.mark.parametrize(
    ("fun", "v", "z", "expected"),
    [
        (zb.iv, 0, 5, 27.239871823604446),
        (zb.iv, 0, 0.4 + 0.1j, 1.0377517751879539 + 0.020377126774808103j),
        (zb.iv, 0.25, 0.4 + 0.1j, 0.76366778895580939 + 0.058945676897604619j),
        (zb.iv, 1, 0.4 + 0.1j, 0.20326050491778127 + 0.052966801658563763j),
        (zb.iv, 0, 333 - 876j, -2.4246699579157289e142 - 4.8625974778167156e142j),
        (zb.iv, 0.5, -1 - 1j, 0.64183847533798587 - 0.72698064596355457j),
        (zb.iv, 2.5, -1 - 1j, 0.10905125139314990 + 0.064700017336815790j),
        (zb.iv, -2.5, -1 - 1j, 0.62942959427995172 - 0.68414399252960234j),
        (zb.iv, 0, 0, 1.0),
        (zb.ive, 0, 1, 0.46575960759364044),
        (zb.ive, 0, 0.4 + 0.1j, 0.69562581771755567 + 0.013659196557763426j),
        (zb.ive, 2.5, 0.4 + 0.1j, 0.0032060787129630517 + 0.0022798934501397092j),
        (zb.ive, -2.5, -1 - 1j, 0.23155420740047631 - 0.25168250965258952j),
        (zb.ive, 0, 0, 1.0),
        (zb.jv, 0, 1, 0.76519768655796655),
        (zb.jv, 0, 0.4 + 0.1j, 0.96275134551528445 - 0.019627116293032712j),
        (zb.jve, 0, 1, 0.76519768655796655),
        (zb.jve, 0, 0.4 + 0.1j, 0.87113344168669599 - 0.017759349230079233j),
        (zb.kv, 0, 1, 0.42102443824070833),
        (zb.kv, 0, 0.4 + 0.1j, 1.0826035097235082 - 0.21324459634740556j),
        (zb.kv, 2.5, -1 - 1j, 0.81740838955020351 - 1.1762814200405309j),
        (zb.kv, -2.5, -1 - 1j, 0.81740838955020351 - 1.1762814200405309j),
        (zb.kv, 2.5, -1 + 1j, 0.81740838955020351 + 1.1762814200405309j),
        (zb.kv, 2.5, 1 + 1j, -0.97302032088805817 - 1.1600029997916969j),
        (zb.kv, 25, 1 + 1j, 1.2439203102132610e27 - 1.2968608808638513e27j),
        (zb.yv, 0, 1, 0.088256964215676958),
        (zb.yv, 0, 0.4 + 0.1j, -0.58738287359843294 + 0.17504466636571074j),
        (zb.yve, 0, 1, 0.088256964215676958),
        (zb.yve, 0, 0.4 + 0.1j, -0.53148600274534847 + 0.15838696395531568j),
        (zb.hankel1, 0, 1, 0.76519768655796655 + 0.088256964215676958j),
        (zb.hankel1, -1, 1, -0.44005058574493352 + 0.78121282130028872j),
        (zb.hankel1, -0.75, 1, 0.044701115814504631 + 0.83475504835840586j),
        (zb.hankel1, -1, 0.5 + 0.75j, 0.31538103527285508 + 0.41218087155579729j),
        (zb.hankel1, 2, 0.75 - 0.75j, 1.0798261992096499 - 0.54090933484017059j),
        (zb.hankel1, 2, 0.75 + 0.75j, -1.0534763907873929 - 0.26058610260506038j),
        (zb.hankel1, 0.5, -1 - 1j, 0.32309924477918838 - 1.7949514649306923j),
        (zb.hankel1, 2.5, 0.75 - 0.75j, 1.9460186316088614 + 0.31385846950840913j),
        (zb.hankel1, 0, 1e-19, 1.0 - 27.925357052526941j),
        (zb.hankel1e, 0, 1, 0.48770374908695632 - 0.59620620960600407j),
        (zb.hankel1e, 2, 1, -1.3269189009019485 - 0.98855556734275969j),
        (zb.hankel1e, 2, 0.75 - 0.75j, 0.19905150622945094 - 0.53463803588129574j),
        (zb.hankel1e, -2, 1, -1.3269189009019485 - 0.98855556734275969j),
        (zb.hankel2, 0, 1, 0.76519768655796655 - 0.088256964215676958j),
        (zb.hankel2, 0.75, 1, 0.55865249320489175 + 0.62186941744297464j),
        (zb.hankel2, -0.75, 1, 0.044701115814504631 - 0.83475504835840586j),
        (zb.hankel2e, 0, 1, 0.48770374908695632 + 0.59620620960600407j),
        (zb.hankel2e, 0.75, 1, -0.22144384086006450 + 0.80608734381582291j),
        (zb.hankel2e, -0.75, 1, 0.72657426856496667 - 0.41340538551667412j),
    ],
)
def test_reference_values(fun, v: float, z: complex, expected: complex):
    assert fun(v, z) == pytest.approx(expected, rel=1e-13, abs=0.0)


def test_far_hankel():
    expected = -1.9247251946295874e-34 + 7.9990631314254958e-35j
    assert zb.hankel1(1.25, 75 + 75j) == pytest.approx(expected, rel=1e-12, abs=0.0)


def test_zero_argument():
    assert zb.iv(0.5, 0) == 0.0
    assert zb.ive(0.5, 0) == 0.0
    assert zb.jv(0, 0) == 1.0
    assert zb.jv(1.5, 0) == 0.0
    for fun in (zb.hankel1, zb.hankel2, zb.hankel1e, zb.hankel2e):
        assert np.isinf(fun(0, 0))
        assert np.isinf(fun(1.5, 0))


def test_singular_at_origin():
    for fun in (zb.kv, zb.kve, zb.yv, zb.yve):
        assert np.isinf(fun(0, 0))
        assert np.isinf(fun(1.3, 0))
    # the K or Y reflection term carries the pole
    assert np.isinf(zb.iv(-1.3, 0))
    assert np.isinf(zb.ive(-1.3, 0))
    assert np.isinf(zb.jv(-0.5, 0))
    assert np.isinf(zb.yv(-1.3, 0))
    # and vanishes at integer and half-integer orders
    assert zb.iv(-2.0, 0) == 0.0
    assert zb.jv(-2.0, 0) == 0.0
    assert zb.yv(-0.5, 0) == 0.0


def _samples(rng: np.random.Generator, rmin: float, rmax: float):
    r = 10 ** rng.uniform(np.log10(rmin), np.log10(rmax), NSAMP)
    theta = rng.uniform(-np.pi, np.pi, NSAMP)
    v = rng.uniform(0.0, 6.0, NSAMP)
    return v, r * np.exp(1j * theta)


@pytest.mark.parametrize(
    ("name", "reference"),
    [
        ("iv", scipy.special.iv),
        ("ive", scipy.special.ive),
        ("jv", scipy.special.jv),
        ("jve", scipy.special.jve),
        ("kv", scipy.special.kv),
        ("kve", scipy.special.kve),
        ("yv", scipy.special.yv),
        ("yve", scipy.special.yve),
        ("hankel1", scipy.special.hankel1),
        ("hankel1e", scipy.special.hankel1e),
        ("hankel2", scipy.special.hankel2),
        ("hankel2e", scipy.special.hankel2e),
    ],
)
def test_against_scipy(name: str, reference):
    rng = np.random.default_rng(1234)
    v, z = _samples(rng, 0.01, 30.0)
    fun = getattr(zb, name)
    actual = np.array([fun(vi, zi) for vi, zi in zip(v, z)])
    expected = reference(v, z)
    assert actual == pytest.approx(expected, rel=1e-9, abs=0.0)


@pytest.mark.parametrize(
    ("name", "v", "z"),
    [
        ("iv", 100.0, 50 + 10j),
        ("iv", 100.0, 10 + 50j),
        ("iv", 80.0, 120 + 3j),
        ("iv", 95.5, -40 + 20j),
        ("kv", 100.0, 30 + 20j),
        ("kv", 100.0, 10 + 60j),
        ("kv", 100.0, -30 + 10j),
        ("kve", 120.0, -10 - 70j),
        ("jv", 100.0, 120 + 1j),
        ("jv", 100.0, 100 + 1j),
        ("yv", 90.0, 100 + 0.5j),
        ("hankel1", 100.0, 95 + 2j),
        ("hankel2", 100.0, -95 + 3j),
    ],
)
def test_large_order_against_scipy(name: str, v: float, z: complex):
    fun = getattr(zb, name)
    expected = getattr(scipy.special, name)(v, z)
    assert fun(v, z) == pytest.approx(expected, rel=1e-9, abs=0.0)


@pytest.mark.parametrize("v", [-0.3, -1.3, -2.5, -4.75])
@pytest.mark.parametrize("z", [0.7 + 0.2j, 3.0 - 4.0j, -2.0 + 1.5j])
def test_negative_order(v: float, z: complex):
    for name in ("iv", "ive", "jv", "jve", "yv", "kv", "hankel1", "hankel2"):
        expected = getattr(scipy.special, name)(v, z)
        assert getattr(zb, name)(v, z) == pytest.approx(expected, rel=1e-10), name


@pytest.mark.parametrize("v", [1, 2, 3, 4])
def test_negative_integer_order(v: int):
    z = 1.7 - 0.6j
    sign = (-1) ** v
    assert zb.iv(-v, z) == zb.iv(v, z)
    assert zb.jv(-v, z) == sign * zb.jv(v, z)
    assert zb.yv(-v, z) == sign * zb.yv(v, z)
    assert zb.kv(-v, z) == zb.kv(v, z)


@pytest.mark.parametrize("v", [0.0, 0.6, 3.2, 11.0])
@pytest.mark.parametrize("z", [1e-3 + 0j, 0.2j, 0.5 + 0.5j, 3.0 - 2.0j, 10 + 10j, 25 + 1j])
def test_wronskian(v: float, z: complex):
    """I_v K_{v+1} + I_{v+1} K_v = 1/z"""
    i = zb.besseli(z, v, n=2).check().values
    k = zb.besselk(z, v, n=2).check().values
    assert i[0] * k[1] + i[1] * k[0] == pytest.approx(1 / z, rel=1e-12)


@pytest.mark.parametrize("z", [1.5 + 0.7j, -2.0 + 3.0j, 0.3 - 4.0j, -6.0 - 0.5j])
def test_scaling_factors(z: complex):
    v = 1.3
    assert zb.ive(v, z) == pytest.approx(zb.iv(v, z) * np.exp(-abs(z.real)), rel=1e-12)
    assert zb.kve(v, z) == pytest.approx(zb.kv(v, z) * np.exp(z), rel=1e-12)
    assert zb.jve(v, z) == pytest.approx(zb.jv(v, z) * np.exp(-abs(z.imag)), rel=1e-12)
    assert zb.yve(v, z) == pytest.approx(zb.yv(v, z) * np.exp(-abs(z.imag)), rel=1e-12)
    assert zb.hankel1e(v, z) == pytest.approx(zb.hankel1(v, z) * np.exp(-1j * z), rel=1e-12)
    assert zb.hankel2e(v, z) == pytest.approx(zb.hankel2(v, z) * np.exp(1j * z), rel=1e-12)


@pytest.mark.parametrize("kode", [Scaling.UNSCALED, Scaling.SCALED])
@pytest.mark.parametrize("z", [1.2 + 0.8j, 8.0 + 3.0j, -4.0 + 6.0j, 30.0 - 5.0j])
def test_sequence_matches_scalar(kode: Scaling, z: complex):
    fnu = 0.3
    n = 6
    scalar = {
        "besseli": zb.ive if kode == Scaling.SCALED else zb.iv,
        "besselj": zb.jve if kode == Scaling.SCALED else zb.jv,
        "besselk": zb.kve if kode == Scaling.SCALED else zb.kv,
        "bessely": zb.yve if kode == Scaling.SCALED else zb.yv,
    }
    for name, fun in scalar.items():
        out = getattr(zb, name)(z, fnu, kode, n)
        assert out.ierr == Status.OK
        assert out.nz == 0
        expected = [fun(fnu + k, z) for k in range(n)]
        assert out.values == pytest.approx(expected, rel=1e-11), name
    for m, fun in ((1, zb.hankel1), (2, zb.hankel2)):
        if kode == Scaling.SCALED:
            fun = zb.hankel1e if m == 1 else zb.hankel2e
        out = zb.besselh(z, fnu, kode, m, n)
        expected = [fun(fnu + k, z) for k in range(n)]
        assert out.values == pytest.approx(expected, rel=1e-11)


def test_hankel_combination():
    z = 2.5 - 1.5j
    v = 0.8
    j = zb.jv(v, z)
    y = zb.yv(v, z)
    assert zb.hankel1(v, z) == pytest.approx(j + 1j * y, rel=1e-13)
    assert zb.hankel2(v, z) == pytest.approx(j - 1j * y, rel=1e-13)


def test_plot_bessel(artifacts_dir: Path):
    x = np.geomspace(1e-3, 1e3, 500)

    fig, ax = plt.subplots()

    for v in [0, 1, 2.5, 10]:
        z = x * np.exp(0.3j)
        expected = scipy.special.jve(v, z)
        computed = np.array([zb.jve(v, zi) for zi in z])
        ax.plot(x, abs(expected - computed) / abs(expected), ".", label=f"{v=}")

    ax.axhline(np.finfo("d").eps, color="gray", linestyle="--")
    ax.set_xscale("log")
    ax.set_yscale("log")
    ax.set_xlabel("|z|")
    ax.set_ylabel("|scipy - zbessel| / |scipy|")
    ax.legend(title=r"Bessel $J_v(|z| e^{0.3i})$")
    fig.savefig(artifacts_dir / "bessel_jve_difference.png")
