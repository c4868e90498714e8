"""Machine constants and working-precision parameters

Every algorithm boundary in the engine (series vs. asymptotic regions,
scaled arithmetic near overflow, the large-order threshold) is placed
relative to the floating point environment. The constants are read once
from numpy and memoized; the derived working-precision parameters are
cheap and are rebuilt for every top-level evaluation.

References:
D. E. Amos, "A portable package for Bessel functions of a complex argument
and nonnegative order", ACM TOMS 12 (1986) 265-273.
"""

from dataclasses import dataclass
from functools import cache

import numpy as np


@dataclass(frozen=True)
class MachineConstants:
    """Floating point environment, in the 0.5 <= mantissa < 1 model"""

    tiny: float
    """Smallest positive normal magnitude"""
    huge: float
    """Largest finite magnitude"""
    eps: float
    """Unit roundoff (spacing of floats at 1.0)"""
    log10_radix: float
    """log10 of the floating point radix"""
    min_exponent: int
    """Smallest exponent e such that 0.5 * 2**e is normal"""
    max_exponent: int
    """Largest exponent e such that 0.5 * 2**e is finite"""
    mantissa_digits: int
    """Number of radix digits in the significand"""
    largest_int: int
    """Largest machine integer"""


@cache
def machine_constants() -> MachineConstants:
    """Double precision constants, computed once per process"""
    info = np.finfo(np.float64)
    return MachineConstants(
        tiny=float(info.smallest_normal),
        huge=float(info.max),
        eps=float(info.eps),
        log10_radix=float(np.log10(2.0)),
        min_exponent=int(info.minexp) + 1,
        max_exponent=int(info.maxexp),
        mantissa_digits=int(info.nmant) + 1,
        largest_int=int(np.iinfo(np.int32).max),
    )


@dataclass(frozen=True)
class WorkingPrecision:
    """Algorithm thresholds derived from the machine constants"""

    tol: float
    """Unit roundoff, limited to 18 digits"""
    elim: float
    """Exponent bound: exp(-elim) underflows and exp(elim) overflows"""
    alim: float
    """Exponent bound where scaled arithmetic is needed (elim + log(tol))"""
    rl: float
    """Lower bound on |z| for the large-argument asymptotic expansion"""
    fnul: float
    """Lower bound on the order for the large-order uniform expansion"""
    dig: float
    """Number of decimal digits in tol"""
    machine: MachineConstants
    """Environment these were derived from"""

    @classmethod
    def from_machine(cls, machine: MachineConstants | None = None):
        if machine is None:
            machine = machine_constants()
        tol = max(machine.eps, 1.0e-18)
        k = min(abs(machine.min_exponent), abs(machine.max_exponent))
        elim = 2.303 * (k * machine.log10_radix - 3.0)
        aa = machine.log10_radix * (machine.mantissa_digits - 1)
        dig = min(aa, 18.0)
        alim = elim + max(-2.303 * aa, -41.45)
        return cls(
            tol=tol,
            elim=elim,
            alim=alim,
            rl=1.2 * dig + 3.0,
            fnul=10.0 + 6.0 * (dig - 3.0),
            dig=dig,
            machine=machine,
        )

    @property
    def ascle(self) -> float:
        """Underflow threshold for values carried with a 1/tol scale factor"""
        return 1000.0 * self.machine.tiny / self.tol

    def range_limits(self) -> tuple[float, float]:
        """Argument/order magnitudes beyond which precision is degraded or lost

        Returns:
            (partial, total): beyond ``partial`` at most half the digits survive
            argument reduction, beyond ``total`` none do.
        """
        total = min(0.5 / self.tol, 0.5 * self.machine.largest_int)
        return float(np.sqrt(total)), total
