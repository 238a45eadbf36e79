"""Calculator exception hierarchy.

Recoverable errors (bad input) derive from CalcError and are reported by the
session, which then skips to the next statement. CalcInternalError marks a
broken invariant and is never caught by the session.
"""


class CalcError(Exception):
    """Base class for errors caused by the input being evaluated."""


class CalcInternalError(Exception):
    """Base class for errors that indicate a bug in the calculator itself."""
