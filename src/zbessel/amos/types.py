"""Result structures and flags shared by the engine"""

import warnings
from dataclasses import dataclass
from enum import IntEnum
from typing import NamedTuple

import numpy as np

from zbessel.errors import (
    BesselOverflowError,
    ConvergenceError,
    PrecisionLossWarning,
    TotalPrecisionLossError,
)


class Scaling(IntEnum):
    """Whether the dominant exponential behavior is factored out of the result"""

    UNSCALED = 1
    SCALED = 2


class Status(IntEnum):
    """Outcome of a top-level evaluation"""

    OK = 0
    INPUT_ERROR = 1
    OVERFLOW = 2
    PRECISION_LOSS = 3
    """Computed, but half or more of the significant digits may be lost"""
    TOTAL_LOSS = 4
    NO_CONVERGENCE = 5


class Evaluation(NamedTuple):
    """Values of one evaluator for consecutive orders fnu, fnu+1, ...

    A negative ``nz`` is a failure code telling the caller to try another
    algorithm; -1 generally means overflow and -2 non-convergence.
    """

    values: np.ndarray
    nz: int


@dataclass
class Outcome:
    """Values of a top-level evaluation plus its bookkeeping"""

    values: np.ndarray
    """Complex values for orders fnu, fnu+1, ..., fnu+n-1"""
    nz: int
    """Number of entries set to zero due to underflow"""
    ierr: Status
    """Overall status; values are meaningless for INPUT_ERROR, OVERFLOW, TOTAL_LOSS, NO_CONVERGENCE"""

    @property
    def value(self) -> complex:
        """Value at the first requested order"""
        return complex(self.values[0])

    @property
    def ok(self) -> bool:
        return self.ierr in (Status.OK, Status.PRECISION_LOSS)

    def check(self, what: str = "evaluation", stacklevel: int = 1):
        """Raise or warn according to the status, and return self

        Args:
            what: Description of the evaluation, for messages
            stacklevel: As for warnings.warn, counted from the caller of check
        """
        if self.ierr == Status.INPUT_ERROR:
            raise ValueError(f"Invalid input to {what}")
        if self.ierr == Status.OVERFLOW:
            raise BesselOverflowError(
                f"{what} overflows; use the scaled variant", self.ierr
            )
        if self.ierr == Status.TOTAL_LOSS:
            raise TotalPrecisionLossError(
                f"{what}: argument or order too large, no significant digits remain",
                self.ierr,
            )
        if self.ierr == Status.NO_CONVERGENCE:
            raise ConvergenceError(f"{what} did not converge", self.ierr)
        if self.ierr == Status.PRECISION_LOSS:
            warnings.warn(
                f"{what}: half or more of the significant digits may be lost",
                PrecisionLossWarning,
                stacklevel=stacklevel + 1,
            )
        return self


def failed(n: int, status: Status, nz: int = 0) -> Outcome:
    """Outcome carrying no values"""
    return Outcome(np.zeros(n, dtype=np.complex128), nz, status)
