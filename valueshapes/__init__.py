import logging

from .error import (ValueShapesException, ShapeDefinitionError, ShapeMismatch,
                    TypeResolutionError)
from .config import config, set_debug
from .eltypes import (TypeSet, real, number, eltype, default_datatype,
                      issubtype)
from .coretypes import ValueShape, ScalarShape, ArrayShape, ConstValueShape
from .accessor import ValueAccessor
from .layout import plan_layout
from .record import NamedTupleShape, ShapedRecord, stripscalar
from .table import (Columnar, MappedColumn, ShapedTable, materialize_columns,
                    to_frame)
from .ordering import issubshape, compare
from .api import (apply_shape, apply_shape_batched, unshaped, flatten,
                  allocate_flat, make_uninitialized, valshape, elshape,
                  totalndof, replace_const_shapes, const_zero,
                  const_zero_shape, gradient_shape)
from .functions import (ShapedFunction, shaped_function, unshaped_function,
                        varshape, vardof)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = '0.1.0'
