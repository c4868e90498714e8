"""Bessel and Hankel functions of complex argument and real order

Scalar functions follow the scipy.special naming, with an ``e`` suffix for
the exponentially scaled variant:

    iv, ive    I_v(z),  exp(-|Re z|) I_v(z)
    jv, jve    J_v(z),  exp(-|Im z|) J_v(z)
    kv, kve    K_v(z),  exp(z) K_v(z)
    yv, yve    Y_v(z),  exp(-|Im z|) Y_v(z)
    hankel1, hankel1e    H1_v(z),  exp(-iz) H1_v(z)
    hankel2, hankel2e    H2_v(z),  exp(iz) H2_v(z)

They raise the exceptions in zbessel.errors, or warn with
PrecisionLossWarning when the result is computed with reduced accuracy.
Negative orders are reduced to positive ones with the reflection formulas

    I_{-v} = I_v + (2/pi) sin(pi v) K_v
    K_{-v} = K_v
    J_{-v} = cos(pi v) J_v - sin(pi v) Y_v
    Y_{-v} = sin(pi v) J_v + cos(pi v) Y_v
    H1_{-v} = exp(i pi v) H1_v,   H2_{-v} = exp(-i pi v) H2_v

The structured entry points besseli, besselj, besselk, bessely and besselh
evaluate n consecutive nonnegative orders and return the engine Outcome
without raising.

References:
M. Abramowitz and I. A. Stegun, "Handbook of Mathematical Functions",
Sections 9.1 and 9.6.
"""

import numpy as np

from zbessel.amos.bessel import zbesh, zbesi, zbesj, zbesk, zbesy
from zbessel.amos.types import Outcome, Scaling

# K, Y and H are singular at z = 0
_POLE = complex(np.inf, np.inf)


def _sincospi(v: float) -> tuple[float, float]:
    """sin(pi v) and cos(pi v), exact at integer and half-integer v"""
    r = float(np.fmod(v, 2.0))
    if r == int(r):
        return 0.0, 1.0 if r == 0.0 else -1.0
    if 2.0 * r == int(2.0 * r):
        return (1.0 if r in (0.5, -1.5) else -1.0), 0.0
    return float(np.sin(np.pi * r)), float(np.cos(np.pi * r))


def besseli(z: complex, fnu: float, kode: Scaling = Scaling.UNSCALED, n: int = 1) -> Outcome:
    """I(fnu + k, z) for k = 0..n-1"""
    return zbesi(complex(z), fnu, kode, n)


def besselj(z: complex, fnu: float, kode: Scaling = Scaling.UNSCALED, n: int = 1) -> Outcome:
    """J(fnu + k, z) for k = 0..n-1"""
    return zbesj(complex(z), fnu, kode, n)


def besselk(z: complex, fnu: float, kode: Scaling = Scaling.UNSCALED, n: int = 1) -> Outcome:
    """K(fnu + k, z) for k = 0..n-1"""
    return zbesk(complex(z), fnu, kode, n)


def bessely(z: complex, fnu: float, kode: Scaling = Scaling.UNSCALED, n: int = 1) -> Outcome:
    """Y(fnu + k, z) for k = 0..n-1"""
    return zbesy(complex(z), fnu, kode, n)


def besselh(
    z: complex, fnu: float, kode: Scaling = Scaling.UNSCALED, m: int = 1, n: int = 1
) -> Outcome:
    """H(m, fnu + k, z) for k = 0..n-1, m = 1 or 2"""
    return zbesh(complex(z), fnu, kode, m, n)


def iv(v: float, z: complex) -> complex:
    """Modified Bessel function of the first kind"""
    z = complex(z)
    result = zbesi(z, abs(v)).check("iv", stacklevel=2).value
    if v < 0:
        s, _ = _sincospi(abs(v))
        if s != 0.0:
            if z == 0:
                return _POLE
            result += 2.0 / np.pi * s * zbesk(z, abs(v)).check("iv", stacklevel=2).value
    return result


def ive(v: float, z: complex) -> complex:
    """Exponentially scaled modified Bessel function of the first kind, exp(-|Re z|) I_v(z)"""
    z = complex(z)
    result = zbesi(z, abs(v), Scaling.SCALED).check("ive", stacklevel=2).value
    if v < 0:
        s, _ = _sincospi(abs(v))
        if s != 0.0:
            if z == 0:
                return _POLE
            kx = zbesk(z, abs(v), Scaling.SCALED).check("ive", stacklevel=2).value
            # exp(z) K to exp(-|Re z|) K
            result += 2.0 / np.pi * s * kx * complex(np.exp(-z - abs(z.real)))
    return result


def kv(v: float, z: complex) -> complex:
    """Modified Bessel function of the second kind"""
    z = complex(z)
    if z == 0:
        return _POLE
    return zbesk(z, abs(v)).check("kv", stacklevel=2).value


def kve(v: float, z: complex) -> complex:
    """Exponentially scaled modified Bessel function of the second kind, exp(z) K_v(z)"""
    z = complex(z)
    if z == 0:
        return _POLE
    return zbesk(z, abs(v), Scaling.SCALED).check("kve", stacklevel=2).value


def _reflect(v: float, z: complex, kode: Scaling, what: str, first: bool) -> complex:
    """J (first=True) or Y of negative order v from J and Y of order -v"""
    s, c = _sincospi(-v)
    result = 0j
    # J_{-v} = c J_v - s Y_v, Y_{-v} = s J_v + c Y_v
    jcoef, ycoef = (c, -s) if first else (s, c)
    if ycoef != 0.0 and z == 0:
        return _POLE
    if jcoef != 0.0:
        result += jcoef * zbesj(z, -v, kode).check(what, stacklevel=3).value
    if ycoef != 0.0:
        result += ycoef * zbesy(z, -v, kode).check(what, stacklevel=3).value
    return result


def jv(v: float, z: complex) -> complex:
    """Bessel function of the first kind"""
    z = complex(z)
    if v < 0:
        return _reflect(v, z, Scaling.UNSCALED, "jv", True)
    return zbesj(z, v).check("jv", stacklevel=2).value


def jve(v: float, z: complex) -> complex:
    """Exponentially scaled Bessel function of the first kind, exp(-|Im z|) J_v(z)"""
    z = complex(z)
    if v < 0:
        return _reflect(v, z, Scaling.SCALED, "jve", True)
    return zbesj(z, v, Scaling.SCALED).check("jve", stacklevel=2).value


def yv(v: float, z: complex) -> complex:
    """Bessel function of the second kind"""
    z = complex(z)
    if v < 0:
        return _reflect(v, z, Scaling.UNSCALED, "yv", False)
    if z == 0:
        return _POLE
    return zbesy(z, v).check("yv", stacklevel=2).value


def yve(v: float, z: complex) -> complex:
    """Exponentially scaled Bessel function of the second kind, exp(-|Im z|) Y_v(z)"""
    z = complex(z)
    if v < 0:
        return _reflect(v, z, Scaling.SCALED, "yve", False)
    if z == 0:
        return _POLE
    return zbesy(z, v, Scaling.SCALED).check("yve", stacklevel=2).value


def _hankel(v: float, z: complex, kode: Scaling, m: int, what: str) -> complex:
    z = complex(z)
    if z == 0:
        return _POLE
    result = zbesh(z, abs(v), kode, m).check(what, stacklevel=3).value
    if v < 0:
        s, c = _sincospi(-v)
        # exp(+-i pi |v|)
        result *= complex(c, s if m == 1 else -s)
    return result


def hankel1(v: float, z: complex) -> complex:
    """Hankel function of the first kind, J_v(z) + i Y_v(z)"""
    return _hankel(v, z, Scaling.UNSCALED, 1, "hankel1")


def hankel1e(v: float, z: complex) -> complex:
    """Exponentially scaled Hankel function of the first kind, exp(-iz) H1_v(z)"""
    return _hankel(v, z, Scaling.SCALED, 1, "hankel1e")


def hankel2(v: float, z: complex) -> complex:
    """Hankel function of the second kind, J_v(z) - i Y_v(z)"""
    return _hankel(v, z, Scaling.UNSCALED, 2, "hankel2")


def hankel2e(v: float, z: complex) -> complex:
    """Exponentially scaled Hankel function of the second kind, exp(iz) H2_v(z)"""
    return _hankel(v, z, Scaling.SCALED, 2, "hankel2e")
