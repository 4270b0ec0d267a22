"""Exceptions raised by bitqueens."""


class BitQueensError(Exception):
    """Base class for every error raised by this package."""


class InvalidConfiguration(BitQueensError, ValueError):
    """Raised for a board size or option the solver cannot work with."""


class EncodingInvariantError(BitQueensError, AssertionError):
    """A model assigned a row value that is neither zero nor a power of two."""


class OracleUndecided(BitQueensError):
    """The satisfiability oracle answered ``unknown``."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Oracle could not decide satisfiability: {reason}")
        self.reason = reason


class SessionClosed(BitQueensError):
    """An oracle session or solver was used after ``close()``."""


class BackendUnavailable(BitQueensError):
    """The Z3 backend could not be initialised."""
