__all__ = [
    'ValueShapesException',
    'ShapeDefinitionError',
    'ShapeMismatch',
    'TypeResolutionError',
]

class ValueShapesException(Exception):
    """Exception that all valueshapes exceptions derive from"""

#------------------------------------------------------------------------
# Shape construction errors
#------------------------------------------------------------------------

class ShapeDefinitionError(ValueShapesException):
    """
    Raised when a shape is declared with structurally invalid parameters,
    e.g. duplicate field names or negative extents.
    """

class TypeResolutionError(ValueShapesException):
    """
    Raised when an abstract element type has no default concrete type.
    """

#------------------------------------------------------------------------
# Buffer/view errors
#------------------------------------------------------------------------

class ShapeMismatch(ValueShapesException):
    """
    An error for when a flat buffer or a view does not fit the shape it is
    used with.
    """

    def __init__(self, msg, shape=None, length=None):
        self.msg = msg
        self.shape = shape
        self.length = length
        super(ShapeMismatch, self).__init__(msg)

    def __str__(self):
        if self.shape is not None and self.length is not None:
            return '%s (shape %s with %d degrees of freedom, got length %d)' % (
                self.msg, self.shape, self.shape.ndof, self.length)
        return self.msg
