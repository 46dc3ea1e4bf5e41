"""
Validation Subpackage - precondition checks for density code.

- policies: ErrorPolicy (THROW / SENTINEL) and the ResultRef output slot
- shapes: scalar / vector / matrix dispatch (check_all)
- checks: check_value, check_bounded_value and friends
"""

from .policies import (
    ErrorPolicy,
    ResultRef,
    SENTINEL_VALUE,
    default_policy,
    errno_policy,
)
from .shapes import ShapeKind, shape_kind, iter_elements, check_all
from .checks import (
    check_value,
    check_bounded_value,
    check_positive,
    check_nonnegative,
    check_integer,
    check_probability,
    check_x,
    check_bounded_x,
)

__all__ = [
    'ErrorPolicy',
    'ResultRef',
    'SENTINEL_VALUE',
    'default_policy',
    'errno_policy',
    'ShapeKind',
    'shape_kind',
    'iter_elements',
    'check_all',
    'check_value',
    'check_bounded_value',
    'check_positive',
    'check_nonnegative',
    'check_integer',
    'check_probability',
    'check_x',
    'check_bounded_x',
]
