import numpy as np

from .coretypes import ValueShape, ConstValueShape
from .error import ShapeMismatch

__all__ = ['ValueAccessor']


class ValueAccessor(object):
    """ Access a value of a given shape stored in a flat data vector

    The offset is the index of the first real number of the value inside the
    flat vector. Accessors for constant shapes have no offset (``None``) and
    resolve directly to the constant.

    >>> from valueshapes import ArrayShape
    >>> acc = ValueAccessor(ArrayShape('real', 2, 3), 2)
    >>> data = np.arange(1.0, 10.0)
    >>> acc.view(data)
    array([[3., 5., 7.],
           [4., 6., 8.]])
    """
    __slots__ = 'shape', 'offset'

    def __init__(self, shape, offset):
        if not isinstance(shape, ValueShape):
            raise TypeError('Expected a ValueShape, got %s'
                            % type(shape).__name__)
        if isinstance(shape, ConstValueShape):
            offset = None
        elif offset is None or offset < 0:
            raise ValueError('Invalid offset %r for %s' % (offset, shape))
        object.__setattr__(self, 'shape', shape)
        object.__setattr__(self, 'offset', offset)

    def __setattr__(self, name, value):
        raise AttributeError('ValueAccessor is immutable')

    @property
    def ndof(self):
        return self.shape.ndof

    def __len__(self):
        return self.shape.ndof

    @property
    def slice(self):
        if self.offset is None:
            return slice(0, 0)
        return slice(self.offset, self.offset + self.ndof)

    def _check(self, data, length):
        if self.offset is not None and length < self.slice.stop:
            raise ShapeMismatch('Flat data of length %d is too short for %r'
                                % (length, self))

    def view(self, data):
        """ Zero-copy view of this accessor's value inside ``data`` """
        self._check(data, len(data))
        return self.shape._view(data[self.slice])

    def view_batched(self, data):
        """ Views of this accessor's value in every row of a 2-D batch """
        self._check(data, data.shape[1])
        return self.shape._view_batched(data[:, self.slice])

    def get(self, data):
        """ Copy of this accessor's value inside ``data`` """
        value = self.view(data)
        if isinstance(value, np.ndarray):
            return value.copy()
        return value

    def set(self, data, value):
        """ Write ``value`` into the range of ``data`` addressed here """
        self._check(data, len(data))
        self.shape._write(data[self.slice], value)

    def __eq__(self, other):
        return (isinstance(other, ValueAccessor) and
                self.shape == other.shape and self.offset == other.offset)

    def __ne__(self, other):
        return not (self == other)

    def __hash__(self):
        return hash((ValueAccessor, self.shape, self.offset))

    def __repr__(self):
        return 'ValueAccessor(%r, %r)' % (self.shape, self.offset)
