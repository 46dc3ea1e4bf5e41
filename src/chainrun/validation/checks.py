"""
Precondition checks run by density code before computing a result.

Each check is a scalar predicate lifted over scalars, sequences and matrices
by check_all(), with failures routed through an ErrorPolicy:

    out = ResultRef()
    if not check_value('normal_log_density', mu, out, ErrorPolicy.SENTINEL, name='mu'):
        return out.value   # NaN

New checks only need a predicate and a requirement string.
"""

import math

from .policies import ErrorPolicy
from .shapes import check_all, to_float


# =============================================================================
# SCALAR PREDICATES
# =============================================================================

def is_finite(value):
    return math.isfinite(value)


def is_positive(value):
    return math.isfinite(value) and value > 0.0


def is_nonnegative(value):
    return math.isfinite(value) and value >= 0.0


def is_integer(value):
    return math.isfinite(value) and value == math.floor(value)


def make_bounded_predicate(low, high):
    """
    Predicate for low <= x <= high.

    x must itself be finite. A lower bound of -inf (or upper bound of +inf)
    leaves that side unconstrained. NaN bounds are rejected separately by
    check_bounded_value before this predicate is used.
    """
    def in_bounds(value):
        if not math.isfinite(value):
            return False
        if low != -math.inf and value < low:
            return False
        if high != math.inf and value > high:
            return False
        return True
    return in_bounds


# =============================================================================
# CHECKS
# =============================================================================

def check_value(context, x, out=None, policy=ErrorPolicy.THROW, name='x'):
    """True iff every element of x is finite (not +/-inf, not NaN)."""
    return check_all(context, name, x, is_finite, 'finite', out, policy)


def check_bounded_value(context, x, low, high, out=None, policy=ErrorPolicy.THROW, name='x'):
    """
    True iff every element of x is finite and lies in [low, high].

    Args:
        context: Caller label used in diagnostics
        x: Scalar, sequence or matrix to check
        low: Scalar lower bound (-inf for none)
        high: Scalar upper bound (+inf for none)
        out: ResultRef receiving NaN on failure under SENTINEL
        policy: ErrorPolicy.THROW or ErrorPolicy.SENTINEL
        name: Label of x in diagnostics

    The bounds are validated first and independently of x: a NaN bound makes
    the check fail whatever x is.
    """
    low = to_float(low)
    high = to_float(high)
    requirement = f"in the interval [{low}, {high}]"

    if math.isnan(low):
        return policy.report(low, context, f"lower bound of {name}", 'not NaN', out)
    if math.isnan(high):
        return policy.report(high, context, f"upper bound of {name}", 'not NaN', out)

    return check_all(context, name, x, make_bounded_predicate(low, high), requirement, out, policy)


def check_positive(context, x, out=None, policy=ErrorPolicy.THROW, name='x'):
    """True iff every element of x is finite and strictly positive."""
    return check_all(context, name, x, is_positive, 'finite and positive', out, policy)


def check_nonnegative(context, x, out=None, policy=ErrorPolicy.THROW, name='x'):
    """True iff every element of x is finite and >= 0."""
    return check_all(context, name, x, is_nonnegative, 'finite and non-negative', out, policy)


def check_integer(context, x, out=None, policy=ErrorPolicy.THROW, name='x'):
    """True iff every element of x is a finite whole number."""
    return check_all(context, name, x, is_integer, 'a finite integer', out, policy)


def check_probability(context, x, out=None, policy=ErrorPolicy.THROW, name='x'):
    """True iff every element of x lies in [0, 1]."""
    return check_bounded_value(context, x, 0.0, 1.0, out, policy, name=name)


# Historical names
check_x = check_value
check_bounded_x = check_bounded_value
