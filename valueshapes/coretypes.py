# -*- coding: utf-8 -*-

"""
This defines the value shapes: the combination of the element type and the
size of a value. Shapes translate between flat real valued buffers and
structured values of that shape.
"""

import numbers
from collections.abc import Mapping

import numpy as np

from .config import config
from .eltypes import (eltype, default_datatype, issubtype, isnumeric,
                      eltype_ndof, unshaped_eltype, typename)
from .error import ShapeDefinitionError, ShapeMismatch
from .utils import (prod, fortran_view, batched_fortran_view, complex_view,
                    compose_complex, decompose_complex)

__all__ = ['ValueShape', 'ScalarShape', 'ArrayShape', 'ConstValueShape']


def _readonly(x):
    x.flags.writeable = False
    return x


#------------------------------------------------------------------------
# Base
#------------------------------------------------------------------------

class ValueShape(object):
    """
    A value shape combines type and size information.

    Every shape knows its element type, its extents and its total number of
    degrees of freedom (``ndof``), the length of a flat real valued vector
    holding the non-constant content of a value of that shape.

    Shapes are immutable and must be reconstructable from their parameters:

        type(shape)(*shape.parameters) == shape

    Calling a shape on a flat buffer views the buffer as a value of the
    shape, see ``valueshapes.apply_shape``.
    """

    def __init__(self, *params):
        self.parameters = params

    @property
    def eltype(self):
        raise NotImplementedError

    @property
    def shape(self):
        return ()

    @property
    def ndof(self):
        raise NotImplementedError

    def default_unshaped_eltype(self):
        """ Numpy type of flat buffers allocated for this shape, or None """
        raise NotImplementedError

    def make_uninitialized(self, dtype=None):
        raise NotImplementedError

    def __call__(self, data):
        from .api import apply_shape
        return apply_shape(self, data)

    # View protocol, ``flat`` holds exactly ``ndof`` elements and ``data``
    # has ``ndof`` columns, one row per record.

    def _view(self, flat):
        raise NotImplementedError

    def _view_batched(self, data):
        raise NotImplementedError

    def _write(self, flat, value):
        raise NotImplementedError

    def _alloc_type(self, dtype):
        if dtype is None:
            return default_datatype(self.eltype)
        t = eltype(dtype)
        if not issubtype(t, self.eltype):
            raise ShapeMismatch('Element type %s does not specialize %s'
                                % (typename(t), typename(self.eltype)))
        return default_datatype(t)

    def __eq__(self, other):
        return (type(self) is type(other) and
                self.parameters == other.parameters)

    def __ne__(self, other):
        return not (self == other)

    def __hash__(self):
        return hash((type(self), self.parameters))

    def __le__(self, other):
        from .ordering import issubshape
        if not isinstance(other, ValueShape):
            return NotImplemented
        return issubshape(self, other)

    def __ge__(self, other):
        from .ordering import issubshape
        if not isinstance(other, ValueShape):
            return NotImplemented
        return issubshape(other, self)

    def __lt__(self, other):
        if not isinstance(other, ValueShape):
            return NotImplemented
        return self <= other and self != other

    def __gt__(self, other):
        if not isinstance(other, ValueShape):
            return NotImplemented
        return self >= other and self != other

    def __repr__(self):
        return '%s(%s)' % (type(self).__name__,
                           ', '.join(map(repr, self.parameters)))


def _numeric_eltype(T):
    T = eltype(T)
    # Resolution errors take precedence over non-numeric element types
    ndof = eltype_ndof(T)
    if not isnumeric(T):
        raise ShapeDefinitionError('Element type %s is not numeric'
                                   % typename(T))
    return T, ndof


#------------------------------------------------------------------------
# Scalars
#------------------------------------------------------------------------

class ScalarShape(ValueShape):
    """
    Shape of scalar values of a given, possibly abstract, type.

    >>> ScalarShape('real').ndof
    1
    >>> ScalarShape('complex').ndof
    2
    """

    def __init__(self, T='real'):
        T, self._elndof = _numeric_eltype(T)
        self.parameters = (T,)

    @property
    def eltype(self):
        return self.parameters[0]

    @property
    def ndof(self):
        return self._elndof

    def default_unshaped_eltype(self):
        return unshaped_eltype(self.eltype)

    def make_uninitialized(self, dtype=None):
        return np.empty((), dtype=self._alloc_type(dtype))

    def _view(self, flat):
        if self._elndof == 1:
            return flat.reshape(())
        cv = complex_view(flat)
        if cv is None:
            return _readonly(compose_complex(flat).reshape(()))
        return cv.reshape(())

    def _view_batched(self, data):
        if self._elndof == 1:
            return data[:, 0]
        cv = complex_view(data)
        if cv is None:
            return _readonly(compose_complex(data)[:, 0])
        return cv[:, 0]

    def _write(self, flat, value):
        if np.ndim(value) != 0:
            raise ShapeMismatch('Cannot assign a value with shape %s to %s'
                                % (np.shape(value), self))
        if self._elndof == 1:
            flat[0] = value
        else:
            value = complex(value)
            flat[0], flat[1] = value.real, value.imag

    def __repr__(self):
        return 'ScalarShape(%s)' % typename(self.eltype)


#------------------------------------------------------------------------
# Arrays
#------------------------------------------------------------------------

def _dims(dims):
    if len(dims) == 1 and isinstance(dims[0], (tuple, list)):
        dims = tuple(dims[0])
    for d in dims:
        if not isinstance(d, numbers.Integral) or isinstance(d, bool):
            raise ShapeDefinitionError('Array extents must be integers, got %r'
                                       % (d,))
        if d < 0:
            raise ShapeDefinitionError('Array extents must not be negative, '
                                       'got %r' % (d,))
    return tuple(int(d) for d in dims)


class ArrayShape(ValueShape):
    """
    Shape of N-dimensional arrays of a given element type and fixed extents.

    Arrays are stored in column-major order inside flat buffers:

    >>> shape = ArrayShape('real', 2, 3)
    >>> shape.ndof
    6
    >>> shape(np.arange(6.0))
    array([[0., 2., 4.],
           [1., 3., 5.]])
    """

    def __init__(self, T='real', *dims):
        T, self._elndof = _numeric_eltype(T)
        dims = _dims(dims)
        self.parameters = (T, dims)

    @property
    def eltype(self):
        return self.parameters[0]

    @property
    def shape(self):
        return self.parameters[1]

    @property
    def ndim(self):
        return len(self.shape)

    @property
    def ndof(self):
        return self._elndof * prod(self.shape)

    def default_unshaped_eltype(self):
        return unshaped_eltype(self.eltype)

    def make_uninitialized(self, dtype=None):
        return np.empty(self.shape, dtype=self._alloc_type(dtype), order='F')

    def _view(self, flat):
        if self._elndof == 1:
            return fortran_view(flat, self.shape)
        cv = complex_view(flat)
        if cv is None:
            return _readonly(fortran_view(compose_complex(flat), self.shape))
        return fortran_view(cv, self.shape)

    def _view_batched(self, data):
        if self._elndof == 1:
            return batched_fortran_view(data, self.shape)
        cv = complex_view(data)
        if cv is None:
            return _readonly(batched_fortran_view(compose_complex(data),
                                                  self.shape))
        return batched_fortran_view(cv, self.shape)

    def _write(self, flat, value):
        value = np.asarray(value)
        if value.shape != self.shape:
            raise ShapeMismatch('Cannot assign an array of shape %s to %s'
                                % (value.shape, self))
        if self._elndof == 1:
            fortran_view(flat, self.shape)[...] = value
        else:
            flat[...] = decompose_complex(value.reshape(-1, order='F'))

    def __repr__(self):
        return 'ArrayShape(%s)' % ', '.join(
            [typename(self.eltype)] + [str(d) for d in self.shape])


#------------------------------------------------------------------------
# Constants
#------------------------------------------------------------------------

def const_equal(a, b):
    """ Compare two constant values, arrays compare element-wise

    >>> const_equal(np.array([1, 2]), [1, 2])
    True
    >>> const_equal(1, 2)
    False
    """
    if isinstance(a, Mapping) or isinstance(b, Mapping):
        return (isinstance(a, Mapping) and isinstance(b, Mapping) and
                set(a) == set(b) and
                all(const_equal(a[k], b[k]) for k in a))
    if isinstance(a, (np.ndarray, np.generic)) or \
            isinstance(b, (np.ndarray, np.generic)):
        try:
            a, b = np.asarray(a), np.asarray(b)
            return a.shape == b.shape and bool(np.all(a == b))
        except (TypeError, ValueError):
            return False
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return (len(a) == len(b) and
                all(const_equal(x, y) for x, y in zip(a, b)))
    return bool(a == b)


def _hashable(value):
    # Equal constants must hash equal, so numbers are hashed by value
    # independent of their dtype
    try:
        arr = np.asarray(value)
    except ValueError:
        return ()
    if arr.dtype.kind == "c" and not arr.imag.any():
        arr = arr.real
    if arr.dtype.kind in "biuf":
        return arr.shape, (arr.astype(np.float64) + 0.0).tobytes()
    if arr.dtype.kind == "c":
        return arr.shape, (arr.astype(np.complex128) + 0j).tobytes()
    return arr.shape


class ConstValueShape(ValueShape):
    """
    Shape of a fixed value. Constants have zero degrees of freedom and
    never occupy space in flat buffers.

    >>> shape = ConstValueShape(4.2)
    >>> shape.ndof
    0
    >>> shape(np.empty(0))
    4.2
    """

    def __init__(self, value):
        if isinstance(value, np.ndarray):
            value = _readonly(value.copy())
        self.parameters = (value,)

    @property
    def value(self):
        return self.parameters[0]

    @property
    def eltype(self):
        try:
            return np.result_type(self.value).type
        except TypeError:
            return np.object_

    @property
    def shape(self):
        return np.shape(self.value)

    @property
    def ndof(self):
        return 0

    def default_unshaped_eltype(self):
        return None

    def make_uninitialized(self, dtype=None):
        return self.value

    def _view(self, flat):
        return self.value

    def _view_batched(self, data):
        value = np.asarray(self.value)
        return np.broadcast_to(value, (data.shape[0],) + value.shape)

    def _write(self, flat, value):
        if config.check_constants and not const_equal(value, self.value):
            raise ShapeMismatch('Cannot assign %r to constant %r'
                                % (value, self.value))

    def __eq__(self, other):
        return (isinstance(other, ConstValueShape) and
                const_equal(self.value, other.value))

    def __hash__(self):
        return hash((ConstValueShape, _hashable(self.value)))
