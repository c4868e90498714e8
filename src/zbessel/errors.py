"""Exceptions and warnings raised by the public evaluation functions

The engine itself never raises; it reports a status code alongside the
computed values. These are what ``Outcome.check`` turns the codes into.
"""


class AmosError(ArithmeticError):
    """An evaluation that did not produce a usable value"""

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.status = status


class BesselOverflowError(AmosError, OverflowError):
    """The result magnitude is beyond the representable range

    The scaled variant of the same function is usually representable.
    """


class TotalPrecisionLossError(AmosError):
    """Argument or order so large that no significant digits survive"""


class ConvergenceError(AmosError):
    """An internal iteration limit was exhausted"""


class PrecisionLossWarning(RuntimeWarning):
    """Argument or order large enough that half or more of the digits are lost"""
