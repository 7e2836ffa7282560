"""
Element types of value shapes.

Element types are numpy scalar classes. Concrete classes such as
``np.float64`` describe actual buffers, numpy's abstract classes such as
``np.floating`` and the named type sets defined here (``real``,
``number``) describe families of them. Abstract types are resolved to one
default concrete type whenever memory has to be allocated.
"""

import numbers

import numpy as np

from .error import ShapeDefinitionError, TypeResolutionError

__all__ = ['TypeSet', 'real', 'number', 'eltype', 'default_datatype',
           'issubtype', 'isconcrete', 'isnumeric', 'eltype_ndof',
           'unshaped_eltype', 'typename']


class TypeSet(object):
    """
    A named union of numpy scalar classes.

    >>> np.float32 in real
    True
    >>> np.complex64 in real
    False
    """

    def __init__(self, *types, **kwds):
        self.types = tuple(types)
        self.name = kwds.get('name')

    def __contains__(self, t):
        return isinstance(t, type) and issubclass(t, self.types)

    def __eq__(self, other):
        return (isinstance(other, TypeSet) and
                set(self.types) == set(other.types))

    def __ne__(self, other):
        return not (self == other)

    def __hash__(self):
        return hash((TypeSet, frozenset(self.types)))

    def __iter__(self):
        return iter(self.types)

    def __repr__(self):
        if self.name:
            return self.name
        return 'TypeSet(%s)' % ', '.join(t.__name__ for t in self.types)


real = TypeSet(np.integer, np.floating, np.bool_, name='real')
number = TypeSet(np.number, np.bool_, name='number')


_abstract = frozenset([np.generic, np.number, np.integer, np.signedinteger,
                       np.unsignedinteger, np.inexact, np.floating,
                       np.complexfloating, np.flexible, np.character])

_defaults = {
    real: np.float64,
    number: np.float64,
    np.number: np.float64,
    np.inexact: np.float64,
    np.floating: np.float64,
    np.complexfloating: np.complex128,
    np.integer: np.int64,
    np.signedinteger: np.int64,
    np.unsignedinteger: np.uint64,
}

_names = {
    'real': real,
    'number': number,
    'complex': np.complexfloating,
    'integer': np.integer,
    'signed': np.signedinteger,
    'unsigned': np.unsignedinteger,
    'floating': np.floating,
    'inexact': np.inexact,
}

_builtins = {
    float: np.float64,
    int: np.int64,
    complex: np.complex128,
    bool: np.bool_,
    numbers.Number: number,
    numbers.Complex: number,
    numbers.Real: real,
    numbers.Integral: np.integer,
}


def eltype(t):
    """ Normalize the many spellings of an element type

    >>> eltype('real')
    real
    >>> eltype(float)
    <class 'numpy.float64'>
    >>> eltype('i4')
    <class 'numpy.int32'>
    >>> eltype(np.dtype('c16'))
    <class 'numpy.complex128'>
    """
    if isinstance(t, TypeSet):
        return t
    if isinstance(t, np.dtype):
        return t.type
    if isinstance(t, str):
        if t in _names:
            return _names[t]
        try:
            return np.dtype(t).type
        except TypeError:
            raise ShapeDefinitionError('Unknown element type %r' % t)
    if isinstance(t, type):
        if t in _builtins:
            return _builtins[t]
        if issubclass(t, np.generic):
            return t
    raise ShapeDefinitionError('Unknown element type %r' % (t,))


def isconcrete(t):
    return (isinstance(t, type) and issubclass(t, np.generic) and
            t not in _abstract)


def typename(t):
    if isinstance(t, TypeSet):
        return repr(t)
    return t.__name__


def default_datatype(t):
    """ Concrete default type that specializes ``t``

    >>> default_datatype(real)
    <class 'numpy.float64'>
    >>> default_datatype(np.complexfloating)
    <class 'numpy.complex128'>
    >>> default_datatype(np.int32)
    <class 'numpy.int32'>
    """
    t = eltype(t)
    if isconcrete(t):
        return t
    try:
        return _defaults[t]
    except KeyError:
        raise TypeResolutionError('No default concrete type for %s'
                                  % typename(t))


def issubtype(a, b):
    """ Whether element type ``a`` is the same as or more specific than ``b``

    >>> issubtype(np.float64, real)
    True
    >>> issubtype(np.float64, np.integer)
    False
    >>> issubtype(real, number)
    True
    """
    a, b = eltype(a), eltype(b)
    if a == b:
        return True
    members = a.types if isinstance(a, TypeSet) else (a,)
    if isinstance(b, TypeSet):
        return all(issubclass(m, b.types) for m in members)
    return all(issubclass(m, b) for m in members)


def isnumeric(t):
    return issubtype(t, number)


def eltype_ndof(t):
    """ Number of reals needed to store one value of type ``t``

    >>> eltype_ndof(real)
    1
    >>> eltype_ndof(np.complexfloating)
    2
    """
    if issubclass(default_datatype(t), np.complexfloating):
        return 2
    return 1


def unshaped_eltype(t):
    """ Real buffer type able to hold values of type ``t``

    >>> unshaped_eltype(np.complex64)
    <class 'numpy.float32'>
    >>> unshaped_eltype(real)
    <class 'numpy.float64'>
    """
    t = default_datatype(t)
    if issubclass(t, np.complexfloating):
        return np.empty(0, dtype=t).real.dtype.type
    return t
