"""
Error policies for the validation layer.

A policy decides what happens once a check has found an invalid value:
- THROW raises a DomainError carrying the context label and the value
- SENTINEL writes NaN into the caller's ResultRef and returns False

On success neither policy touches the ResultRef; success is signalled by
the boolean alone.
"""

import math
from enum import Enum

from ..errors import DomainError

SENTINEL_VALUE = math.nan


class ResultRef:
    """Output slot handed to a check, standing in for a by-reference result."""

    __slots__ = ('value',)

    def __init__(self, value=0.0):
        self.value = value

    def __repr__(self):
        return f"ResultRef({self.value!r})"


class ErrorPolicy(Enum):
    """Closed set of failure policies, selected by the caller per check."""
    THROW = 'throw'
    SENTINEL = 'sentinel'

    def report(self, value, context, name, requirement, out=None):
        """
        Handle one invalid value.

        Args:
            value: The offending value (already converted to float)
            context: Caller label, e.g. the density function name
            name: Argument label, e.g. 'x' or 'x[2]'
            requirement: Text describing the valid domain
            out: ResultRef to receive the sentinel (SENTINEL only)

        Returns:
            False (SENTINEL). THROW never returns.

        Raises:
            DomainError: Under THROW
        """
        if self is ErrorPolicy.THROW:
            raise DomainError(context, name, value, requirement)
        if out is not None:
            out.value = SENTINEL_VALUE
        return False


# Aliases matching the historical policy names
default_policy = ErrorPolicy.THROW
errno_policy = ErrorPolicy.SENTINEL
