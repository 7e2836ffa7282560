"""
Layout planning for composite shapes.

Children are laid out one after another in declaration order. Each
non-constant child occupies ``ndof`` consecutive slots; constant children
occupy none and receive accessors without an offset.
"""

import logging
from collections import OrderedDict

from .accessor import ValueAccessor
from .coretypes import ValueShape, ConstValueShape
from .error import ShapeDefinitionError
from .utils import isvalid_identifier

__all__ = ['plan_layout']

logger = logging.getLogger(__name__)


def plan_layout(fields):
    """ Assign an accessor to every named child shape

    Parameters
    ----------
    fields : sequence of (name, ValueShape) pairs
        Children in declaration order.

    Returns
    -------
    accessors : OrderedDict
        Mapping from field name to ``ValueAccessor``.
    ndof : int
        Total degrees of freedom, the sum over non-constant children.

    Examples
    --------
    >>> from valueshapes import ScalarShape, ArrayShape, ConstValueShape
    >>> accessors, ndof = plan_layout([('a', ScalarShape('real')),
    ...                                ('c', ConstValueShape(42)),
    ...                                ('b', ArrayShape('real', 2, 3))])
    >>> ndof
    7
    >>> [acc.offset for acc in accessors.values()]
    [0, None, 1]
    """
    accessors = OrderedDict()
    offset = 0
    for name, shape in fields:
        if not isvalid_identifier(name) or name.startswith('_'):
            raise ShapeDefinitionError('Invalid field name %r' % (name,))
        if name in accessors:
            raise ShapeDefinitionError('Duplicate field name %r' % name)
        if not isinstance(shape, ValueShape):
            raise ShapeDefinitionError('Field %r must be a ValueShape, got %r'
                                       % (name, shape))
        if isinstance(shape, ConstValueShape):
            accessors[name] = ValueAccessor(shape, None)
        else:
            accessors[name] = ValueAccessor(shape, offset)
            offset += shape.ndof
    logger.debug("Layout: %s (%d degrees of freedom)",
                 ', '.join('%s@%s' % (k, a.offset)
                           for k, a in accessors.items()),
                 offset)
    return accessors, offset
