"""
Functions annotated with the shapes of their argument and result.

Numerical algorithms call functions on flat vectors, user code writes them
for structured values. ``unshaped_function`` bridges the two.
"""

from functools import update_wrapper

from .api import apply_shape, flatten
from .coretypes import ValueShape, ArrayShape
from .dispatch import dispatch

__all__ = ['ShapedFunction', 'shaped_function', 'unshaped_function',
           'varshape', 'vardof']


class ShapedFunction(object):
    """ A unary function together with the shape of its argument

    >>> from valueshapes import ScalarShape
    >>> f = ShapedFunction(abs, ScalarShape('real'))
    >>> f(-2)
    2
    >>> varshape(f)
    ScalarShape(real)
    """

    def __init__(self, func, varshape, valshape=None):
        if not isinstance(varshape, ValueShape):
            raise TypeError('Expected a ValueShape, got %s'
                            % type(varshape).__name__)
        update_wrapper(self, func)
        self.func = func
        self.varshape = varshape
        self.valshape = valshape

    def __call__(self, x):
        return self.func(x)

    def __repr__(self):
        return 'ShapedFunction(%s, %r)' % (getattr(self.func, '__name__',
                                                   self.func),
                                           self.varshape)


def shaped_function(varshape, valshape=None):
    """ Decorator attaching argument (and optionally result) shapes

    >>> from valueshapes import NamedTupleShape, ScalarShape
    >>> @shaped_function(NamedTupleShape(a=ScalarShape('real')))
    ... def f(x):
    ...     return x['a'] ** 2
    >>> vardof(f)
    1
    """
    def decorator(func):
        return ShapedFunction(func, varshape, valshape)
    return decorator


@dispatch(ShapedFunction)
def varshape(f):
    """ The shape of the argument of the unary function ``f`` """
    return f.varshape


@dispatch(object)
def varshape(f):
    raise TypeError('%r carries no argument shape, wrap it with '
                    'shaped_function' % (f,))


def vardof(f):
    """ Degrees of freedom of the argument of ``f`` """
    return varshape(f).ndof


def unshaped_function(f, varshape=None, valshape=None):
    """ Turn ``f`` into a function of flat vectors

    The returned function views its flat argument with ``varshape`` (if
    given), calls ``f`` and copies the result into a flat vector with
    ``valshape`` (if given).

    >>> import numpy as np
    >>> from valueshapes import NamedTupleShape, ScalarShape, ArrayShape
    >>> shape = NamedTupleShape(a=ScalarShape('real'),
    ...                         b=ArrayShape('real', 2))
    >>> g = unshaped_function(lambda x: x.a * x.b.sum(), shape)
    >>> float(g(np.array([2.0, 3.0, 4.0])))
    14.0
    """
    if varshape is None and isinstance(f, ShapedFunction):
        varshape = f.varshape

    def flat_call(data):
        x = apply_shape(varshape, data) if varshape is not None else data
        y = f(x)
        if valshape is not None:
            y = flatten(y, valshape)
        return y

    if varshape is None:
        return flat_call
    return ShapedFunction(flat_call, ArrayShape('real', varshape.ndof),
                          None if valshape is None
                          else ArrayShape('real', valshape.ndof))
