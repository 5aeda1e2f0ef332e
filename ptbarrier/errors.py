"""Exception types raised by ptbarrier."""


class InvalidParameter(ValueError):
    """Malformed contract or market input, detected before any computation."""


class NumericalInstability(ArithmeticError):
    """A computation produced a non-finite value."""
