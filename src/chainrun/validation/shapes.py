"""
Shape dispatch for the validation layer.

Every check is written once as a scalar predicate. The helpers here lift it
to sequences and matrices by visiting each element in row-major order, so
the first offending element is always the same for a given input.

Accepted inputs:
- Python numbers and 0-d numpy/JAX arrays (SCALAR)
- lists, tuples and 1-d arrays (VECTOR)
- nested lists and arrays of rank >= 2 (MATRIX)
"""

import math
from enum import IntEnum

import numpy as np


class ShapeKind(IntEnum):
    SCALAR = 0
    VECTOR = 1
    MATRIX = 2


def to_float(value):
    """float(value), with integers beyond the float64 range mapped to a signed infinity."""
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _as_array(x):
    # Concrete JAX arrays convert without a copy on CPU; tracers raise here,
    # checks only run on concrete values.
    try:
        return np.asarray(x, dtype=np.float64)
    except OverflowError:
        pass
    elements = np.asarray(x, dtype=object)
    arr = np.empty(elements.shape, dtype=np.float64)
    for idx in np.ndindex(elements.shape):
        arr[idx] = to_float(elements[idx])
    return arr



def shape_kind(x):
    """Classify a validation input as scalar, vector or matrix."""
    ndim = np.ndim(x)
    if ndim == 0:
        return ShapeKind.SCALAR
    if ndim == 1:
        return ShapeKind.VECTOR
    return ShapeKind.MATRIX


def iter_elements(x):
    """
    Yield (index, value) pairs for every element of x in row-major order.

    index is None for scalars, an int for vectors and a tuple for matrices.
    """
    arr = _as_array(x)
    kind = shape_kind(arr)
    if kind == ShapeKind.SCALAR:
        yield None, float(arr)
    elif kind == ShapeKind.VECTOR:
        for i, value in enumerate(arr):
            yield i, float(value)
    else:
        for idx in np.ndindex(arr.shape):
            yield idx, float(arr[idx])


def element_label(name, index):
    """Label for one element, e.g. 'x', 'x[2]' or 'x[1, 0]'."""
    if index is None:
        return name
    if isinstance(index, tuple):
        return f"{name}[{', '.join(str(i) for i in index)}]"
    return f"{name}[{index}]"


def first_failure(x, predicate):
    """Return (index, value) of the first element failing predicate, or None."""
    for index, value in iter_elements(x):
        if not predicate(value):
            return index, value
    return None


def check_all(context, name, x, predicate, requirement, out, policy):
    """
    Apply a scalar predicate to every element of x under an error policy.

    Args:
        context: Caller label used in diagnostics
        name: Argument label
        x: Scalar, sequence or matrix
        predicate: fn(float) -> bool, True for a valid element
        requirement: Text describing the valid domain
        out: ResultRef receiving the sentinel on failure (may be None)
        policy: ErrorPolicy

    Returns:
        True if every element is valid, else whatever the policy returns.
    """
    failure = first_failure(x, predicate)
    if failure is None:
        return True
    index, value = failure
    return policy.report(value, context, element_label(name, index), requirement, out)
