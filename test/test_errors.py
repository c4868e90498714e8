"""Test the status codes of the structured entry points and their exceptions"""

import numpy as np
import pytest
import scipy.special

import zbessel.airy as za
import zbessel.bessel as zb
from zbessel.amos.types import Outcome, Scaling, Status
from zbessel.errors import (
    AmosError,
    BesselOverflowError,
    ConvergenceError,
    PrecisionLossWarning,
    TotalPrecisionLossError,
)


@pytest.mark.parametrize(
    "outcome",
    [
        lambda: zb.besseli(1 + 1j, -1.0),
        lambda: zb.besseli(1 + 1j, 1.0, n=0),
        lambda: zb.besseli(1 + 1j, 1.0, kode=3),
        lambda: zb.besseli(complex(np.nan, 1.0), 1.0),
        lambda: zb.besselj(complex(np.inf, 0.0), 0.0),
        lambda: zb.besselk(0j, 1.0),
        lambda: zb.bessely(0j, 1.0),
        lambda: zb.besselh(0j, 1.0),
        lambda: zb.besselh(1 + 1j, 1.0, m=3),
        lambda: za.airy(1 + 1j, derivative=2),
        lambda: za.biry(1 + 1j, kode=0),
    ],
)
def test_input_error(outcome):
    out = outcome()
    assert out.ierr == Status.INPUT_ERROR
    assert not out.ok
    with pytest.raises(ValueError):
        out.check()


def test_scalar_input_error():
    with pytest.raises(ValueError):
        za.airy_ai(complex(np.nan, 0.0))


def test_overflow():
    assert zb.besseli(800.0, 0.0).ierr == Status.OVERFLOW
    with pytest.raises(BesselOverflowError):
        zb.iv(0, 800)
    with pytest.raises(OverflowError):
        zb.kv(0, 1e-306)
    with pytest.raises(BesselOverflowError):
        za.airy_bi(200)
    # the scaled variants stay representable
    assert zb.ive(0, 800) == pytest.approx(scipy.special.ive(0, 800.0), rel=1e-13)
    assert za.airy_bie(200) == pytest.approx(scipy.special.airye(200.0)[2], rel=1e-12)


def test_underflow():
    out = zb.besselk(800.0, 0.0)
    assert out.ierr == Status.OK
    assert out.nz == 1
    assert out.value == 0
    assert zb.besselk(800.0, 0.0, Scaling.SCALED).nz == 0

    out = zb.besseli(1e-3, 100.0, n=3)
    assert out.ierr == Status.OK
    assert out.nz == 3
    assert np.all(out.values == 0)

    out = za.airy(200.0)
    assert out.ierr == Status.OK
    assert out.nz == 1
    assert za.airy_ai(200) == 0


def test_partial_underflow():
    """The highest orders of a sequence underflow first"""
    out = zb.besseli(1.0, 140.0, n=10)
    assert out.ierr == Status.OK
    assert out.nz == 1
    assert np.all(out.values[-out.nz :] == 0)
    assert np.all(out.values[: -out.nz] != 0)
    assert out.values[0] == pytest.approx(scipy.special.iv(140.0, 1.0 + 0j), rel=1e-12)


def test_total_loss():
    assert zb.besselj(1e10, 0.0).ierr == Status.TOTAL_LOSS
    with pytest.raises(TotalPrecisionLossError):
        zb.jv(0, 1e10)
    with pytest.raises(TotalPrecisionLossError):
        zb.kv(1e10, 1.0)
    with pytest.raises(TotalPrecisionLossError):
        za.airy_aie(1e7)


def test_precision_loss_warning():
    out = zb.besselj(1e5, 0.0)
    assert out.ierr == Status.PRECISION_LOSS
    assert out.ok
    with pytest.warns(PrecisionLossWarning):
        value = zb.jv(0, 1e5)
    assert value == pytest.approx(scipy.special.jv(0, 1e5 + 0j), abs=1e-9)
    with pytest.warns(PrecisionLossWarning):
        value = za.airy_aie(1500)
    assert value == pytest.approx(scipy.special.airye(1500.0)[0], rel=1e-8)


def test_check_passthrough():
    out = zb.besseli(1 + 1j, 0.5, n=2)
    assert out.check() is out
    assert out.ok


@pytest.mark.parametrize(
    ("status", "exception"),
    [
        (Status.OVERFLOW, BesselOverflowError),
        (Status.TOTAL_LOSS, TotalPrecisionLossError),
        (Status.NO_CONVERGENCE, ConvergenceError),
    ],
)
def test_check_raises(status: Status, exception):
    out = Outcome(np.zeros(1, dtype=np.complex128), 0, status)
    with pytest.raises(exception) as excinfo:
        out.check("test")
    assert isinstance(excinfo.value, AmosError)
    assert excinfo.value.status == status
