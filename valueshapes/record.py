"""
Named tuple shapes and record views over flat buffers.
"""

from collections import OrderedDict
from collections.abc import Mapping

import numpy as np
from toolz import keyfilter

from .coretypes import ValueShape, const_equal
from .dispatch import dispatch
from .eltypes import default_datatype
from .error import ShapeDefinitionError, ShapeMismatch
from .layout import plan_layout
from .utils import check_flat, check_real_dtype

__all__ = ['NamedTupleShape', 'ShapedRecord', 'stripscalar']


def _field_pairs(args, kwargs):
    if args and kwargs:
        raise ShapeDefinitionError('NamedTupleShape takes either a sequence '
                                   'of fields or keyword arguments')
    if not args:
        return tuple(kwargs.items())
    if len(args) != 1:
        raise ShapeDefinitionError('NamedTupleShape takes one sequence of '
                                   'fields, got %d arguments' % len(args))
    fields = args[0]
    if isinstance(fields, Mapping):
        fields = fields.items()
    try:
        pairs = tuple((name, shape) for name, shape in fields)
    except (TypeError, ValueError):
        raise ShapeDefinitionError('Expected (name, shape) pairs, got %r'
                                   % (fields,))
    return pairs


class NamedTupleShape(ValueShape):
    """
    Shape of a set of named values.

    Field order is significant: it fixes the layout inside flat buffers and
    the column order of table views.

    >>> from valueshapes import ScalarShape, ArrayShape, ConstValueShape
    >>> shape = NamedTupleShape(a=ScalarShape('real'),
    ...                         b=ArrayShape('real', 2, 3),
    ...                         c=ConstValueShape(42))
    >>> shape.ndof
    7
    >>> shape.names
    ('a', 'b', 'c')
    """

    def __init__(self, *args, **kwargs):
        fields = _field_pairs(args, kwargs)
        self._accessors, self._ndof = plan_layout(fields)
        self.parameters = (fields,)

    @property
    def names(self):
        return tuple(self._accessors)

    @property
    def fields(self):
        return OrderedDict((name, acc.shape)
                           for name, acc in self._accessors.items())

    @property
    def accessors(self):
        return OrderedDict(self._accessors)

    def accessor(self, name):
        try:
            return self._accessors[name]
        except KeyError:
            raise KeyError('%r has no field %r' % (self, name))

    @property
    def eltype(self):
        return OrderedDict

    @property
    def ndof(self):
        return self._ndof

    def __getitem__(self, name):
        return self.accessor(name).shape

    def __contains__(self, name):
        return name in self._accessors

    def __iter__(self):
        return iter(self._accessors)

    def __len__(self):
        return len(self._accessors)

    def default_unshaped_eltype(self):
        types = [acc.shape.default_unshaped_eltype()
                 for acc in self._accessors.values()]
        types = [t for t in types if t is not None]
        if not types:
            return np.float64
        return np.result_type(*types).type

    def make_uninitialized(self, dtype=None):
        if dtype is None:
            dtype = self.default_unshaped_eltype()
        dtype = np.dtype(default_datatype(dtype))
        check_real_dtype(dtype)
        return ShapedRecord(np.empty(self.ndof, dtype=dtype), self)

    def _view(self, flat):
        return ShapedRecord(flat, self)

    def _view_batched(self, data):
        from .table import ShapedTable
        return ShapedTable(data, self)

    def _write(self, flat, value):
        if isinstance(value, ShapedRecord):
            value = value.value()
        if not isinstance(value, Mapping):
            raise ShapeMismatch('Cannot assign %s to %r'
                                % (type(value).__name__, self))
        required = set(name for name, acc in self._accessors.items()
                       if acc.offset is not None)
        if not required <= set(value) or not set(value) <= set(self.names):
            raise ShapeMismatch('Field names %s do not match %s'
                                % (sorted(value), list(self.names)))
        # Write into a scratch copy so a failing field leaves flat untouched
        scratch = flat.copy()
        for name, acc in self._accessors.items():
            if name in value:
                acc.set(scratch, value[name])
        flat[...] = scratch

    def __repr__(self):
        return 'NamedTupleShape(%s)' % ', '.join(
            '%s=%r' % (name, acc.shape)
            for name, acc in self._accessors.items())


class ShapedRecord(object):
    """
    View of a flat real valued buffer as a set of named values.

    Fields are views into the buffer, assigning to a field writes into the
    buffer:

    >>> from valueshapes import ScalarShape, ArrayShape
    >>> shape = NamedTupleShape(a=ScalarShape('real'),
    ...                         b=ArrayShape('real', 2))
    >>> data = np.array([1.0, 2.0, 3.0])
    >>> x = shape(data)
    >>> x.b
    array([2., 3.])
    >>> x.a = 4.2
    >>> data
    array([4.2, 2. , 3. ])

    Methods take precedence over fields of the same name, use item access
    (``x['keys']``) in that case.
    """
    __slots__ = '_data', '_shape'

    def __init__(self, data, shape):
        check_flat(data)
        if len(data) != shape.ndof:
            raise ShapeMismatch('Flat data does not fit shape', shape,
                                len(data))
        object.__setattr__(self, '_data', data)
        object.__setattr__(self, '_shape', shape)

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        try:
            acc = self._shape._accessors[name]
        except KeyError:
            raise AttributeError('%s has no field %r'
                                 % (type(self).__name__, name))
        return acc.view(self._data)

    def __setattr__(self, name, value):
        try:
            acc = self._shape._accessors[name]
        except KeyError:
            raise AttributeError('%s has no field %r'
                                 % (type(self).__name__, name))
        acc.set(self._data, value)

    def __getitem__(self, name):
        return self._shape.accessor(name).view(self._data)

    def __setitem__(self, name, value):
        self._shape.accessor(name).set(self._data, value)

    def __dir__(self):
        return sorted(set(dir(type(self))) | set(self._shape.names))

    def __iter__(self):
        return iter(self._shape.names)

    def __len__(self):
        return len(self._shape)

    def __contains__(self, name):
        return name in self._shape

    def keys(self):
        return list(self._shape.names)

    def items(self):
        return [(name, self[name]) for name in self._shape.names]

    def value(self):
        """ Field values, scalar fields dereferenced, array fields as views """
        return OrderedDict((name, stripscalar(view))
                           for name, view in self.items())

    def set(self, values):
        """ Assign all fields at once from a mapping or another record """
        self._shape._write(self._data, values)

    def subset(self, names):
        """ Field values of the given names only """
        names = set(names)
        return keyfilter(names.__contains__, self.value())

    def __eq__(self, other):
        if not isinstance(other, ShapedRecord):
            return NotImplemented
        if self._shape.names != other._shape.names:
            return False
        return all(_field_equal(self[name], other[name])
                   for name in self._shape.names)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return 'ShapedRecord(%s)' % ', '.join(
            '%s=%r' % (name, stripscalar(view))
            for name, view in self.items())


def _field_equal(a, b):
    if isinstance(a, ShapedRecord) or isinstance(b, ShapedRecord):
        return a == b
    return const_equal(a, b)


#------------------------------------------------------------------------
# Scalar dereferencing
#------------------------------------------------------------------------

@dispatch(np.ndarray)
def stripscalar(x):
    """ Dereference scalar-like views

    Zero dimensional arrays yield their element, records yield their field
    values, anything else is returned unchanged.

    >>> float(stripscalar(np.array(3.0)))
    3.0
    >>> stripscalar(np.array([3.0]))
    array([3.])
    """
    if x.ndim == 0:
        return x[()]
    return x


@dispatch(ShapedRecord)
def stripscalar(x):
    return x.value()


@dispatch(object)
def stripscalar(x):
    return x
