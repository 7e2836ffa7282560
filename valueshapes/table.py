"""
Table views: many flat buffers of equal layout viewed as rows of named
values.

    * Columnar
    * MappedColumn
    * ShapedTable

"""

import abc
import logging
from collections import OrderedDict
from collections.abc import Mapping

import numpy as np
import pandas as pd

from .coretypes import ConstValueShape
from .error import ShapeMismatch
from .record import NamedTupleShape, ShapedRecord, stripscalar
from .utils import check_flat, check_real_dtype

__all__ = ['Columnar', 'MappedColumn', 'ShapedTable', 'materialize_columns',
           'to_frame']

logger = logging.getLogger(__name__)


#------------------------------------------------------------------------
# Columnar
#------------------------------------------------------------------------

class Columnar(metaclass=abc.ABCMeta):
    """
    The columnar interface exposes tabular data to table libraries: named
    columns, a row count, per column access and a full materialization into
    independent contiguous storage.
    """

    @property
    @abc.abstractmethod
    def colnames(self):
        """Column names in canonical order"""
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def nrows(self):
        raise NotImplementedError

    @abc.abstractmethod
    def column(self, name):
        """
        Column ``name``, sharing memory with the underlying data where
        possible.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def materialize(self):
        """
        Copy every column into one contiguous array, returns an OrderedDict
        """
        raise NotImplementedError

    def columns(self):
        return OrderedDict((name, self.column(name)) for name in self.colnames)

    def __len__(self):
        return self.nrows


#------------------------------------------------------------------------
# Columns over separate buffers
#------------------------------------------------------------------------

class MappedColumn(object):
    """
    One field of many separate flat buffers.

    Elements are produced on access by applying the field's accessor to the
    corresponding buffer, assignments write into that buffer.
    """

    def __init__(self, accessor, buffers):
        self.accessor = accessor
        self.buffers = buffers

    @property
    def shape(self):
        return (len(self.buffers),) + self.accessor.shape.shape

    def __len__(self):
        return len(self.buffers)

    def __getitem__(self, key):
        if isinstance(key, slice):
            return MappedColumn(self.accessor, self.buffers[key])
        return stripscalar(self.accessor.view(self.buffers[key]))

    def __setitem__(self, key, value):
        if isinstance(key, slice):
            self.assign(value, self.buffers[key])
        else:
            self.accessor.set(self.buffers[key], value)

    def __iter__(self):
        for buf in self.buffers:
            yield stripscalar(self.accessor.view(buf))

    def assign(self, values, buffers=None):
        """ Write one value per buffer, or the same value into all of them """
        buffers = self.buffers if buffers is None else buffers
        values = _per_row(values, self.accessor.shape, len(buffers))
        for buf, value in zip(buffers, values):
            self.accessor.set(buf, value)

    def fill(self, value):
        self.assign([value] * len(self.buffers))

    def __array__(self, dtype=None, copy=None):
        shape = self.accessor.shape
        if not self.buffers:
            if dtype is None:
                dtype = np.asarray(shape.make_uninitialized()).dtype
            return np.empty(self.shape, dtype=dtype)
        return np.array([self.accessor.get(buf) for buf in self.buffers],
                        dtype=dtype)

    def __eq__(self, other):
        return np.asarray(self) == np.asarray(other)

    def __ne__(self, other):
        return np.asarray(self) != np.asarray(other)

    __hash__ = None

    def __repr__(self):
        return 'MappedColumn(%r, %d buffers)' % (self.accessor,
                                                 len(self.buffers))


#------------------------------------------------------------------------
# ShapedTable
#------------------------------------------------------------------------

def _per_row(values, shape, n):
    """ One value per row, repeating a single value of ``shape`` n times """
    if isinstance(shape, NamedTupleShape):
        single = isinstance(values, (Mapping, ShapedRecord))
    else:
        single = np.ndim(values) == len(shape.shape)
    if single:
        return [values] * n
    if len(values) != n:
        raise ShapeMismatch('Cannot assign %d values to a column of length %d'
                            % (len(values), n))
    return values


def _as_batch(data, shape):
    if isinstance(data, np.ndarray) and data.dtype != np.object_:
        if data.ndim != 2:
            raise ShapeMismatch('Expected a two dimensional batch of flat '
                                'buffers, got %d dimensions' % data.ndim)
        check_real_dtype(data.dtype)
        if data.shape[1] < shape.ndof:
            raise ShapeMismatch('Rows are too short', shape, data.shape[1])
        return data
    if isinstance(data, (ShapedTable, Mapping)) or np.isscalar(data):
        raise TypeError('Expected a sequence of flat buffers, got %s'
                        % type(data).__name__)
    buffers = list(data)
    for buf in buffers:
        check_flat(buf)
        if len(buf) < shape.ndof:
            raise ShapeMismatch('Buffer is too short', shape, len(buf))
    return buffers


class ShapedTable(Columnar):
    """
    View of many flat buffers as a table of records.

    ``data`` is either a two dimensional array whose rows are the flat
    buffers, or a sequence of one dimensional buffers. Every buffer must hold
    at least ``shape.ndof`` elements. Columns and rows share memory with
    ``data``:

    >>> from valueshapes import ScalarShape, ArrayShape, allocate_flat
    >>> shape = NamedTupleShape(a=ScalarShape('real'),
    ...                         b=ArrayShape('real', 2))
    >>> data = allocate_flat(shape, 4)
    >>> table = ShapedTable(data, shape)
    >>> table.a[:] = 4.2
    >>> data[:, 0]
    array([4.2, 4.2, 4.2, 4.2])

    Columns of a two dimensional batch are strided numpy views, columns of a
    sequence of buffers are ``MappedColumn`` objects. Use
    ``materialize_columns`` for independent contiguous columns.
    """

    def __init__(self, data, shape):
        if not isinstance(shape, NamedTupleShape):
            raise TypeError('Table views require a NamedTupleShape, got %r'
                            % (shape,))
        data = _as_batch(data, shape)
        self.__dict__['_data'] = data
        self.__dict__['_shape'] = shape
        logger.debug("Table view of %d rows with %s", len(data), shape)

    @property
    def colnames(self):
        return list(self._shape.names)

    @property
    def nrows(self):
        return len(self._data)

    @property
    def elshape(self):
        return self._shape

    def column(self, name):
        acc = self._shape.accessor(name)
        data = self._data
        if isinstance(data, np.ndarray):
            return acc.view_batched(data)
        if isinstance(acc.shape, ConstValueShape):
            value = np.asarray(acc.shape.value)
            return np.broadcast_to(value, (len(data),) + value.shape)
        if isinstance(acc.shape, NamedTupleShape):
            return ShapedTable([buf[acc.slice] for buf in data], acc.shape)
        return MappedColumn(acc, data)

    def materialize(self):
        return materialize_columns(self)

    def unshaped(self):
        """ The flat buffers this table views """
        return self._data

    def row(self, i):
        return ShapedRecord(self._data[i][:self._shape.ndof], self._shape)

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        if name in self._shape:
            return self.column(name)
        raise AttributeError('%s has no column %r'
                             % (type(self).__name__, name))

    def __setattr__(self, name, values):
        if name not in self._shape:
            raise AttributeError('%s has no column %r'
                                 % (type(self).__name__, name))
        self.assign_column(name, values)

    def assign_column(self, name, values):
        """ Write a whole column, or broadcast one value into it """
        acc = self._shape.accessor(name)
        col = self.column(name)
        if isinstance(col, MappedColumn):
            col.assign(values)
        elif isinstance(col, np.ndarray) and col.flags.writeable:
            col[...] = values
        else:
            # Constants, nested tables and composed complex copies are
            # written row by row through the accessor
            rows = self._data
            for i, value in enumerate(_per_row(values, acc.shape, len(rows))):
                acc.set(rows[i], value)

    def __getitem__(self, key):
        if isinstance(key, str):
            return self.column(key)
        if isinstance(key, slice):
            return ShapedTable(self._data[key], self._shape)
        return self.row(key)

    def __setitem__(self, key, value):
        if isinstance(key, str):
            self.assign_column(key, value)
        else:
            self.row(key).set(value)

    def __iter__(self):
        for i in range(self.nrows):
            yield self.row(i)

    def __dir__(self):
        return sorted(set(dir(type(self))) | set(self._shape.names))

    def __repr__(self):
        return 'ShapedTable(%d rows, %r)' % (self.nrows, self._shape)


#------------------------------------------------------------------------
# Materialization
#------------------------------------------------------------------------

def materialize_columns(table):
    """ Copy every column of a table view into contiguous storage

    The result shares no memory with the table's buffers. Nested named
    tuples become nested OrderedDicts.
    """
    result = OrderedDict()
    for name in table.colnames:
        col = table.column(name)
        if isinstance(col, Columnar):
            result[name] = materialize_columns(col)
        elif isinstance(col, np.ndarray):
            result[name] = col.copy(order='C')
        else:
            result[name] = np.ascontiguousarray(np.array(col))
    return result


def _flat_columns(columns, prefix=''):
    for name, col in columns.items():
        if isinstance(col, Mapping):
            for item in _flat_columns(col, prefix + name + '.'):
                yield item
        elif col.ndim > 1:
            cells = np.empty(len(col), dtype=object)
            for i, cell in enumerate(col):
                cells[i] = cell
            yield prefix + name, pd.Series(cells)
        else:
            yield prefix + name, col


def to_frame(table):
    """ A pandas DataFrame holding copies of the table's columns

    Array valued fields become object columns of per-row arrays, nested
    records are flattened into dotted column names.
    """
    columns = materialize_columns(table)
    return pd.DataFrame(OrderedDict(_flat_columns(columns)),
                        index=pd.RangeIndex(len(table)))
