import numpy as np
import pytest

from valueshapes import (NamedTupleShape, ScalarShape, ArrayShape,
                         ConstValueShape)


@pytest.fixture
def shape():
    return NamedTupleShape(a=ScalarShape('real'),
                           b=ArrayShape('real', 2, 3),
                           c=ConstValueShape(np.array([[1, 2], [3, 4]])))


@pytest.fixture
def nested():
    inner = NamedTupleShape(x=ScalarShape('real'), y=ArrayShape('real', 2))
    return NamedTupleShape(p=inner, q=ScalarShape('real'))
