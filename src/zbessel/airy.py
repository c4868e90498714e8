"""Airy functions of complex argument

    airy_ai, airy_aie      Ai(z),  exp(zeta) Ai(z)
    airy_aip, airy_aipe    Ai'(z), exp(zeta) Ai'(z)
    airy_bi, airy_bie      Bi(z),  exp(-|Re zeta|) Bi(z)
    airy_bip, airy_bipe    Bi'(z), exp(-|Re zeta|) Bi'(z)

with zeta = (2/3) z**(3/2). The structured entry points airy and biry
return the engine Outcome without raising.
"""

from zbessel.amos.airy import airy as _ai
from zbessel.amos.biry import biry as _bi
from zbessel.amos.types import Outcome, Scaling


def airy(z: complex, derivative: int = 0, kode: Scaling = Scaling.UNSCALED) -> Outcome:
    """Ai(z) (derivative=0) or Ai'(z) (derivative=1)"""
    return _ai(complex(z), derivative, kode)


def biry(z: complex, derivative: int = 0, kode: Scaling = Scaling.UNSCALED) -> Outcome:
    """Bi(z) (derivative=0) or Bi'(z) (derivative=1)"""
    return _bi(complex(z), derivative, kode)


def airy_ai(z: complex) -> complex:
    """Airy function Ai"""
    return _ai(complex(z)).check("airy_ai", stacklevel=2).value


def airy_aie(z: complex) -> complex:
    """Exponentially scaled Airy function, exp(zeta) Ai(z)"""
    return _ai(complex(z), 0, Scaling.SCALED).check("airy_aie", stacklevel=2).value


def airy_aip(z: complex) -> complex:
    """Derivative of the Airy function Ai"""
    return _ai(complex(z), 1).check("airy_aip", stacklevel=2).value


def airy_aipe(z: complex) -> complex:
    """Exponentially scaled derivative, exp(zeta) Ai'(z)"""
    return _ai(complex(z), 1, Scaling.SCALED).check("airy_aipe", stacklevel=2).value


def airy_bi(z: complex) -> complex:
    """Airy function Bi"""
    return _bi(complex(z)).check("airy_bi", stacklevel=2).value


def airy_bie(z: complex) -> complex:
    """Exponentially scaled Airy function, exp(-|Re zeta|) Bi(z)"""
    return _bi(complex(z), 0, Scaling.SCALED).check("airy_bie", stacklevel=2).value


def airy_bip(z: complex) -> complex:
    """Derivative of the Airy function Bi"""
    return _bi(complex(z), 1).check("airy_bip", stacklevel=2).value


def airy_bipe(z: complex) -> complex:
    """Exponentially scaled derivative, exp(-|Re zeta|) Bi'(z)"""
    return _bi(complex(z), 1, Scaling.SCALED).check("airy_bipe", stacklevel=2).value
