"""
Exception types raised by the LBM core.
"""


class LBMError(Exception):
    """Base class for all errors raised by lbm3d."""


class InvalidConfigurationError(LBMError, ValueError):
    """Raised when grid dimensions or the relaxation time are unusable."""


class NumericalDivergenceError(LBMError, RuntimeError):
    """
    Raised by the optional stability check when NaN or Inf values appear.

    Parameters
    ----------
    message : str
        Human readable description
    field : str, optional
        Name of the first field found to be non-finite
    step : int, optional
        Timestep at which the check ran
    """

    def __init__(self, message, field=None, step=None):
        super().__init__(message)
        self.field = field
        self.step = step
