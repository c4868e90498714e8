"""Test Airy function implementations against reference tables and scipy versions"""

from pathlib import Path

import numpy as np
import pytest
import scipy.special
from matplotlib import pyplot as plt

import zbessel.airy as za
from zbessel.amos.types import Scaling, Status

NSAMP = 500


@pytest.mark.parametrize(
    ("fun", "z", "expected", "rel"),
    [
        (za.airy_ai, 5, 1.0834442813607442e-04, 1e-13),
        (za.airy_ai, 5j, 29.901482398007166 + 21.677831598783637j, 1e-13),
        (za.airy_ai, -0.8 - 5j, -40.502439645308446 - 117.58608694901611j, 1e-13),
        (za.airy_ai, -80 - 50j, 1.2826471721043458e196 + 4.8679974219847838e195j, 1e-12),
        (za.airy_ai, 69 + 27.345345j, -4.1680951604712214e-158 - 3.1646991120150008e-158j, 1e-12),
        (za.airy_aie, 3 + 4j, 0.18357553003565632 - 0.041617648739380279j, 1e-13),
        (za.airy_aip, 3 + 4j, -0.075209961195903029 + 0.082364077155537795j, 1e-13),
        (za.airy_aipe, 3 + 4j, -0.41299090580142256 - 0.092083707743126340j, 1e-13),
        (za.airy_bi, 5, 657.79204417117118, 1e-13),
        (za.airy_bie, 3 + 4j, 0.27319149262040082 + 0.27713977915811109j, 1e-13),
        (za.airy_bip, 3 + 4j, 0.78788923789635748 + 2.9998668872583760j, 1e-13),
        (za.airy_bipe, 3 + 4j, 0.20768534826166085 + 0.79075632620944148j, 1e-13),
    ],
)
def test_reference_values(fun, z: complex, expected: complex, rel: float):
    assert fun(z) == pytest.approx(expected, rel=rel, abs=0.0)


def test_origin():
    assert za.airy_ai(0) == pytest.approx(0.35502805388781724, rel=1e-15)
    assert za.airy_aip(0) == pytest.approx(-0.25881940379280680, rel=1e-15)
    assert za.airy_bi(0) == pytest.approx(0.61492662744600074, rel=1e-15)
    assert za.airy_bip(0) == pytest.approx(0.44828835735382636, rel=1e-15)


def _samples(rng: np.random.Generator, rmin: float, rmax: float):
    r = 10 ** rng.uniform(np.log10(rmin), np.log10(rmax), NSAMP)
    theta = rng.uniform(-np.pi, np.pi, NSAMP)
    return r * np.exp(1j * theta)


def test_against_scipy():
    rng = np.random.default_rng(1234)
    z = _samples(rng, 1e-3, 20.0)
    ai, aip, bi, bip = scipy.special.airy(z)
    assert np.array([za.airy_ai(zi) for zi in z]) == pytest.approx(ai, rel=1e-10)
    assert np.array([za.airy_aip(zi) for zi in z]) == pytest.approx(aip, rel=1e-10)
    assert np.array([za.airy_bi(zi) for zi in z]) == pytest.approx(bi, rel=1e-10)
    assert np.array([za.airy_bip(zi) for zi in z]) == pytest.approx(bip, rel=1e-10)


def test_scaled_against_scipy():
    rng = np.random.default_rng(1234)
    z = _samples(rng, 1e-3, 200.0)
    eai, eaip, ebi, ebip = scipy.special.airye(z)
    assert np.array([za.airy_aie(zi) for zi in z]) == pytest.approx(eai, rel=1e-10)
    assert np.array([za.airy_aipe(zi) for zi in z]) == pytest.approx(eaip, rel=1e-10)
    assert np.array([za.airy_bie(zi) for zi in z]) == pytest.approx(ebi, rel=1e-10)
    assert np.array([za.airy_bipe(zi) for zi in z]) == pytest.approx(ebip, rel=1e-10)


@pytest.mark.parametrize("z", [0.5, -5.0, 0.3 - 0.8j, 2 + 1j, -3 + 0.5j, 5j, 12 - 7j])
def test_wronskian(z: complex):
    """Ai Bi' - Ai' Bi = 1/pi, to rounding of the larger product"""
    first = za.airy_ai(z) * za.airy_bip(z)
    second = za.airy_aip(z) * za.airy_bi(z)
    scale = max(abs(first), abs(second), 1.0)
    assert first - second == pytest.approx(1 / np.pi, rel=0.0, abs=1e-13 * scale)


@pytest.mark.parametrize("z", [0.4 + 0.3j, 2 + 1j, -1.5 + 2.5j, 4 - 3j, -6 - 1j])
def test_scaling_factors(z: complex):
    zeta = 2.0 / 3.0 * z * np.sqrt(z)
    assert za.airy_aie(z) == pytest.approx(za.airy_ai(z) * np.exp(zeta), rel=1e-12)
    assert za.airy_aipe(z) == pytest.approx(za.airy_aip(z) * np.exp(zeta), rel=1e-12)
    bscale = np.exp(-abs(zeta.real))
    assert za.airy_bie(z) == pytest.approx(za.airy_bi(z) * bscale, rel=1e-12)
    assert za.airy_bipe(z) == pytest.approx(za.airy_bip(z) * bscale, rel=1e-12)


def test_conjugate_symmetry():
    z = -2.2 + 1.7j
    assert za.airy_ai(z.conjugate()) == pytest.approx(za.airy_ai(z).conjugate(), rel=1e-13)
    assert za.airy_bi(z.conjugate()) == pytest.approx(za.airy_bi(z).conjugate(), rel=1e-13)


def test_structured_outcome():
    out = za.airy(1 + 1j, derivative=1, kode=Scaling.SCALED)
    assert out.ierr == Status.OK
    assert out.nz == 0
    assert out.values.shape == (1,)
    assert out.value == za.airy_aipe(1 + 1j)
    assert za.biry(1 + 1j).value == za.airy_bi(1 + 1j)


def test_plot_airy(artifacts_dir: Path):
    x = np.linspace(-30, 30, 1001)

    fig, ax = plt.subplots()

    for phase in [0.0, 0.5, 1.5, 3.0]:
        z = x * np.exp(1j * phase)
        eai, _, ebi, _ = scipy.special.airye(z)
        ai = np.array([za.airy_aie(zi) for zi in z])
        bi = np.array([za.airy_bie(zi) for zi in z])
        ax.plot(x, abs(ai - eai) / abs(eai), ".", label=f"Ai {phase=}")
        ax.plot(x, abs(bi - ebi) / abs(ebi), "x", label=f"Bi {phase=}")

    ax.axhline(np.finfo("d").eps, color="gray", linestyle="--")
    ax.set_yscale("log")
    ax.set_xlabel("Re(z) / cos(phase)")
    ax.set_ylabel("|scipy - zbessel| / |scipy|")
    ax.legend()
    fig.savefig(artifacts_dir / "airy_scaled_difference.png")
