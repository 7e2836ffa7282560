import keyword
import operator
import re
from functools import reduce

import numpy as np
from toolz import memoize

from .error import ShapeMismatch


def prod(dims):
    """

    >>> prod((2, 3))
    6
    >>> prod(())
    1
    """
    return reduce(operator.mul, dims, 1)


_identifier = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def isvalid_identifier(s):
    """Check whether a string is a valid Python identifier

    >>> isvalid_identifier('Hello')
    True
    >>> isvalid_identifier('Hello world')
    False
    >>> isvalid_identifier('class')
    False
    """
    return (isinstance(s, str) and _identifier.match(s) is not None and
            not keyword.iskeyword(s))


def check_flat(data, what='flat buffer'):
    """ Ensure ``data`` is a one dimensional real valued numpy array """
    if not isinstance(data, np.ndarray):
        raise TypeError('Expected a numpy array as %s, got %s' %
                        (what, type(data).__name__))
    if data.ndim != 1:
        raise ShapeMismatch('Expected a one dimensional %s, got %d dimensions'
                            % (what, data.ndim))
    check_real_dtype(data.dtype, what)
    return data


def check_real_dtype(dtype, what='flat buffer'):
    if not (issubclass(dtype.type, (np.integer, np.floating)) or
            dtype.type is np.bool_):
        raise ShapeMismatch('%s must have a real element type, got %s' %
                            (what.capitalize(), dtype))


@memoize
def complex_dtype(real):
    """ Complex counterpart of a real floating point dtype, or None

    >>> complex_dtype(np.dtype('f8'))
    dtype('complex128')
    >>> complex_dtype(np.dtype('i4')) is None
    True
    """
    real = np.dtype(real)
    if not issubclass(real.type, np.floating):
        return None
    try:
        return np.result_type(real, np.complex64)
    except TypeError:
        return None


def complex_view(data):
    """ Reinterpret pairs of reals along the last axis as complex values

    Returns ``None`` when numpy can not express this without a copy.
    """
    ctype = complex_dtype(data.dtype)
    if ctype is None or ctype.itemsize != 2 * data.dtype.itemsize:
        return None
    if data.shape[-1] % 2:
        return None
    if data.shape[-1] > 1 and data.strides[-1] != data.dtype.itemsize:
        return None
    try:
        return data.view(ctype)
    except ValueError:
        return None


def compose_complex(data):
    """ Copy pairs of reals along the last axis into complex values

    >>> compose_complex(np.array([1., 2., 3., 4.]))
    array([1.+2.j, 3.+4.j])
    """
    data = np.asarray(data)
    return data[..., 0::2] + 1j * data[..., 1::2]


def decompose_complex(values):
    """ Flatten complex values into (real, imag) pairs

    >>> decompose_complex(np.array([1+2j, 3+4j]))
    array([1., 2., 3., 4.])
    """
    values = np.asarray(values)
    out = np.empty(values.shape[:-1] + (2 * values.shape[-1],),
                   dtype=np.asarray(values.real).dtype)
    out[..., 0::2] = values.real
    out[..., 1::2] = values.imag
    return out


def fortran_view(flat, dims):
    """ View a one dimensional array as a column-major array of ``dims``

    >>> x = np.arange(6)
    >>> fortran_view(x, (2, 3))
    array([[0, 2, 4],
           [1, 3, 5]])
    """
    if len(dims) <= 1:
        return flat.reshape(dims)
    return flat.reshape(tuple(reversed(dims))).transpose()


def batched_fortran_view(data, dims):
    """ Column-major view of ``dims`` for every row of a 2-D array

    Only the trailing axis is split, so numpy never needs to copy.

    >>> x = np.arange(12).reshape(2, 6)
    >>> batched_fortran_view(x, (2, 3))[1]
    array([[ 6,  8, 10],
           [ 7,  9, 11]])
    """
    n = len(dims)
    split = data.reshape((data.shape[0],) + tuple(reversed(dims)))
    return split.transpose((0,) + tuple(range(n, 0, -1)))
