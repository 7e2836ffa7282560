"""
Entry points of the view engine.

    * apply_shape / apply_shape_batched: view flat data as shaped values
    * unshaped / flatten: back from shaped values to flat data
    * allocate_flat / make_uninitialized: the only allocating operations
    * valshape / elshape / totalndof: shape queries
"""

import logging
import numbers
from collections.abc import Mapping

import numpy as np
from toolz import valmap

from .accessor import ValueAccessor
from .coretypes import (ValueShape, ScalarShape, ArrayShape, ConstValueShape,
                        const_equal)
from .dispatch import dispatch
from .eltypes import default_datatype, typename
from .error import ShapeMismatch
from .ordering import issubshape
from .record import NamedTupleShape, ShapedRecord, stripscalar
from .table import ShapedTable, MappedColumn, materialize_columns, _as_batch
from .utils import check_flat, check_real_dtype

__all__ = ['apply_shape', 'apply_shape_batched', 'unshaped', 'flatten',
           'allocate_flat', 'make_uninitialized', 'materialize_columns',
           'stripscalar', 'valshape', 'elshape', 'totalndof',
           'replace_const_shapes', 'const_zero', 'const_zero_shape',
           'gradient_shape']

logger = logging.getLogger(__name__)


#------------------------------------------------------------------------
# Shaping
#------------------------------------------------------------------------

def apply_shape(shape, data):
    """ View the flat vector ``data`` as a value of ``shape``

    ``data`` must be a one dimensional numpy array of exactly
    ``shape.ndof`` real numbers. The result shares memory with ``data``:

    >>> shape = ArrayShape('real', 2, 3)
    >>> data = np.arange(6.0)
    >>> x = apply_shape(shape, data)
    >>> x[1, 2] = 42
    >>> float(data[5])
    42.0
    """
    if not isinstance(shape, ValueShape):
        raise TypeError('Expected a ValueShape, got %s' % type(shape).__name__)
    check_flat(data)
    if len(data) != shape.ndof:
        raise ShapeMismatch('Flat data does not fit shape', shape, len(data))
    return shape._view(data)


def apply_shape_batched(shape, data):
    """ View many flat vectors at once

    ``data`` is a two dimensional array whose rows are flat vectors, or a
    sequence of flat vectors, each holding at least ``shape.ndof`` elements.
    Named tuple shapes yield a ``ShapedTable``; other shapes yield a strided
    array view with one leading row axis (2-D data) or a ``MappedColumn``
    (sequence of vectors).
    """
    if isinstance(shape, NamedTupleShape):
        return ShapedTable(data, shape)
    batch = _as_batch(data, shape)
    acc = ValueAccessor(shape, 0)
    if isinstance(batch, np.ndarray):
        return acc.view_batched(batch)
    return MappedColumn(acc, batch)


#------------------------------------------------------------------------
# Unshaping
#------------------------------------------------------------------------

def _same_geometry(a, b):
    return (a.dtype == b.dtype and a.shape == b.shape and
            a.strides == b.strides and
            a.__array_interface__['data'][0] ==
            b.__array_interface__['data'][0])


@dispatch(np.ndarray)
def _unshaped(x):
    if x.ndim == 0:
        flat = x.reshape(1)
    elif x.ndim == 1:
        flat = x
    else:
        # Column-major order must map onto a single stride of the buffer
        flat = x.reshape(-1, order='F')
        if x.size and not np.may_share_memory(flat, x):
            raise ShapeMismatch('Array of shape %s is not a column-major '
                                'view of flat data' % (x.shape,))
    if issubclass(x.dtype.type, np.complexfloating):
        base = x.base
        if base is None or (isinstance(base, np.ndarray) and
                             issubclass(base.dtype.type, np.complexfloating)):
            raise ShapeMismatch('Complex array is a copy, not a view of '
                                'flat data')
        if flat.strides[0] != flat.dtype.itemsize:
            raise ShapeMismatch('Complex array is not backed by contiguous '
                                'flat data')
        flat = flat.view(flat.real.dtype)
    check_real_dtype(flat.dtype, 'unshaped data')
    base = x.base
    if isinstance(base, np.ndarray) and _same_geometry(base, flat):
        return base
    return flat


@dispatch(ShapedRecord)
def _unshaped(x):
    return x._data


@dispatch(ShapedTable)
def _unshaped(x):
    return x.unshaped()


@dispatch(object)
def _unshaped(x):
    raise ShapeMismatch('%s is not a view of flat data' % type(x).__name__)


def unshaped(x, shape=None):
    """ The flat data behind the shaped view ``x``

    If ``shape`` is given, the shape of ``x`` must be compatible with it,
    i.e. ``valshape(x) <= shape``. Constants have no flat data, they unshape
    to an empty vector.

    >>> shape = NamedTupleShape(a=ScalarShape('real'),
    ...                         b=ArrayShape('real', 2, 3))
    >>> data = np.arange(7.0)
    >>> unshaped(shape(data)) is data
    True
    >>> unshaped(shape(data).b)
    array([1., 2., 3., 4., 5., 6.])
    """
    if isinstance(shape, ConstValueShape):
        if not const_equal(x, shape.value):
            raise ShapeMismatch('%r is not the value of %r' % (x, shape))
        return np.empty(0, dtype=np.float64)
    if shape is not None:
        actual = elshape(x) if isinstance(x, ShapedTable) else valshape(x)
        if not issubshape(actual, shape):
            raise ShapeMismatch('Value of shape %r is not compatible with %r'
                                % (actual, shape))
    return _unshaped(x)


def flatten(value, shape):
    """ Copy a structured value into a new flat vector

    >>> shape = NamedTupleShape(a=ScalarShape('real'),
    ...                         b=ArrayShape('real', 2))
    >>> flatten({'a': 1, 'b': [2, 3]}, shape)
    array([1., 2., 3.])
    """
    data = allocate_flat(shape)
    ValueAccessor(shape, 0).set(data, value)
    return data


#------------------------------------------------------------------------
# Allocation
#------------------------------------------------------------------------

def allocate_flat(shape, count=None, dtype=None):
    """ Allocate uninitialized flat storage for ``shape``

    Without ``count`` a vector of ``shape.ndof`` elements, otherwise one
    contiguous ``(count, shape.ndof)`` array whose rows are the flat
    vectors of ``count`` records.

    >>> allocate_flat(ArrayShape('real', 2, 3)).shape
    (6,)
    >>> allocate_flat(ArrayShape('real', 2, 3), 10).shape
    (10, 6)
    """
    if dtype is None:
        dtype = shape.default_unshaped_eltype() or np.float64
    dtype = np.dtype(default_datatype(dtype))
    check_real_dtype(dtype)
    if count is None:
        return np.empty(shape.ndof, dtype=dtype)
    if count < 0:
        raise ValueError('Negative record count %d' % count)
    logger.debug("Allocating %d flat vectors of %d %s for %r",
                 count, shape.ndof, typename(dtype.type), shape)
    return np.empty((count, shape.ndof), dtype=dtype)


def make_uninitialized(shape, dtype=None):
    """ An uninitialized value of ``shape``

    Abstract element types are resolved to their defaults unless ``dtype``
    names a more specific type:

    >>> make_uninitialized(ArrayShape('real', 2, 3)).dtype
    dtype('float64')
    >>> make_uninitialized(ArrayShape('real', 2, 3), 'int32').dtype
    dtype('int32')
    """
    return shape.make_uninitialized(dtype)


#------------------------------------------------------------------------
# Shape queries
#------------------------------------------------------------------------

def totalndof(shape):
    """ Total degrees of freedom of ``shape``, constants excluded """
    if not isinstance(shape, ValueShape):
        raise TypeError('Expected a ValueShape, got %s' % type(shape).__name__)
    return shape.ndof


@dispatch((numbers.Number, np.generic))
def valshape(x):
    """ The shape of a value

    >>> valshape(1.5)
    ScalarShape(float64)
    >>> valshape(np.zeros((2, 3), dtype='int32'))
    ArrayShape(int32, 2, 3)
    """
    return ScalarShape(type(x))


@dispatch(np.ndarray)
def valshape(x):
    if x.ndim == 0:
        return ScalarShape(x.dtype.type)
    return ArrayShape(x.dtype.type, x.shape)


@dispatch((list, tuple))
def valshape(x):
    return valshape(np.asarray(x))


@dispatch(Mapping)
def valshape(x):
    return NamedTupleShape([(k, valshape(v)) for k, v in x.items()])


@dispatch(ShapedRecord)
def valshape(x):
    return x._shape


@dispatch(ValueAccessor)
def valshape(x):
    return x.shape


@dispatch(object)
def valshape(x):
    raise TypeError('Cannot determine the value shape of %s'
                    % type(x).__name__)


@dispatch(ShapedTable)
def elshape(x):
    """ The shape of the elements of ``x`` """
    return x.elshape


@dispatch(MappedColumn)
def elshape(x):
    return x.accessor.shape


@dispatch(np.ndarray)
def elshape(x):
    if x.ndim == 0:
        raise TypeError('Zero dimensional arrays have no elements')
    return ScalarShape(x.dtype.type)


@dispatch((list, tuple))
def elshape(x):
    if not x:
        raise TypeError('Cannot determine the element shape of an empty %s'
                        % type(x).__name__)
    return valshape(x[0])


#------------------------------------------------------------------------
# Constants
#------------------------------------------------------------------------

@dispatch(object, ConstValueShape)
def replace_const_shapes(f, shape):
    """ Replace constant shapes, nested ones included, by ``f(shape)`` """
    return f(shape)


@dispatch(object, NamedTupleShape)
def replace_const_shapes(f, shape):
    return NamedTupleShape([(name, replace_const_shapes(f, child))
                            for name, child in shape.fields.items()])


@dispatch(object, ValueShape)
def replace_const_shapes(f, shape):
    return shape


@dispatch(np.ndarray)
def const_zero(x):
    """ The zero equivalent of a constant value

    >>> const_zero(4.2)
    0.0
    >>> const_zero(np.array([1, 2]))
    array([0, 0])
    """
    return np.zeros_like(x)


@dispatch((numbers.Number, np.generic))
def const_zero(x):
    return type(x)(0)


@dispatch((list, tuple))
def const_zero(x):
    return type(x)(const_zero(v) for v in x)


@dispatch(Mapping)
def const_zero(x):
    return valmap(const_zero, x)


def const_zero_shape(shape):
    """ Constant shape holding the zero equivalent of ``shape.value`` """
    return ConstValueShape(const_zero(shape.value))


def gradient_shape(shape):
    """ Shape of gradients of functions taking values of ``shape``

    Variable parts keep their shape, constants are replaced by zeros.
    """
    return replace_const_shapes(const_zero_shape, shape)
