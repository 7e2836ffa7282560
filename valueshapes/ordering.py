# -*- coding: utf-8 -*-

"""
This module implements the compatibility relation between value shapes.

``issubshape(a, b)`` reads "values of shape ``a`` may be used wherever
values of shape ``b`` are expected". It is a partial order: shapes of
different kinds are incomparable, which is reported as ``False`` in both
directions and never raises.
"""

from .coretypes import ValueShape, ScalarShape, ArrayShape, ConstValueShape
from .dispatch import dispatch
from .eltypes import issubtype
from .record import NamedTupleShape

__all__ = ['issubshape', 'compare']


@dispatch(ValueShape, ValueShape)
def issubshape(a, b):
    """ Whether values of shape ``a`` can stand in for values of shape ``b``

    >>> issubshape(ArrayShape('float64', 2, 3), ArrayShape('real', 2, 3))
    True
    >>> issubshape(ArrayShape('float64', 2, 3), ArrayShape('integer', 2, 3))
    False
    >>> issubshape(ScalarShape('real'), ArrayShape('real', 1))
    False
    """
    return False


@dispatch(ScalarShape, ScalarShape)
def issubshape(a, b):
    return issubtype(a.eltype, b.eltype)


@dispatch(ArrayShape, ArrayShape)
def issubshape(a, b):
    return a.shape == b.shape and issubtype(a.eltype, b.eltype)


@dispatch(ConstValueShape, ConstValueShape)
def issubshape(a, b):
    return a == b


@dispatch(NamedTupleShape, NamedTupleShape)
def issubshape(a, b):
    if a.names != b.names:
        return False
    return all(issubshape(a[name], b[name]) for name in a.names)


def compare(a, b):
    """ Order two shapes

    Returns ``0`` for equal shapes, ``-1`` if ``a`` is more specific than
    ``b``, ``1`` if ``a`` is more general than ``b`` and ``None`` if the two
    shapes are incomparable.

    >>> compare(ScalarShape('int32'), ScalarShape('integer'))
    -1
    >>> compare(ScalarShape('real'), ConstValueShape(1)) is None
    True
    """
    le = issubshape(a, b)
    ge = issubshape(b, a)
    if le and ge:
        return 0
    if le:
        return -1
    if ge:
        return 1
    return None
