# errors.py
"""Exceptions raised by the scoring engine and its callers."""


class InputRejected(ValueError):
    """Input refused before normalization (caller-level validation)."""


class EmptyInput(InputRejected):
    pass


class MissingDot(InputRejected):
    pass


class ParseError(ValueError):
    """The URL could not be parsed. Never escapes scan_url."""
