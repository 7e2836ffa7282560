import numpy as np
import pytest

from valueshapes import (ScalarShape, ArrayShape, ConstValueShape,
                         NamedTupleShape, real)
from valueshapes.error import (ShapeDefinitionError, ShapeMismatch,
                               TypeResolutionError)


def test_scalar_shape():
    s = ScalarShape('real')
    assert s.eltype is real
    assert s.shape == ()
    assert s.ndof == 1
    assert ScalarShape() == s


def test_complex_scalar_takes_two_slots():
    assert ScalarShape('complex').ndof == 2
    assert ScalarShape(np.complex64).ndof == 2
    assert ScalarShape(complex).eltype is np.complex128


def test_scalar_shape_rejects_non_numeric():
    with pytest.raises(ShapeDefinitionError):
        ScalarShape(np.str_)
    with pytest.raises(ShapeDefinitionError):
        ScalarShape('nonsense')


def test_unresolvable_eltype():
    with pytest.raises(TypeResolutionError):
        ScalarShape(np.generic)


def test_array_shape():
    s = ArrayShape('real', 2, 3)
    assert s.shape == (2, 3)
    assert s.ndim == 2
    assert s.ndof == 6
    assert ArrayShape('real', (2, 3)) == s
    assert ArrayShape('complex', 2).ndof == 4
    assert ArrayShape('real').ndof == 1
    assert ArrayShape('real', 0, 4).ndof == 0


def test_array_shape_invalid_extents():
    with pytest.raises(ShapeDefinitionError):
        ArrayShape('real', -1)
    with pytest.raises(ShapeDefinitionError):
        ArrayShape('real', 2.5)
    with pytest.raises(ShapeDefinitionError):
        ArrayShape('real', True)


def test_equality_and_hashing():
    assert ArrayShape('float64', 2, 3) == ArrayShape(np.float64, (2, 3))
    assert ArrayShape('real', 2, 3) != ArrayShape('real', 3, 2)
    assert ArrayShape('real', 2) != ScalarShape('real')
    d = {ArrayShape('real', 2, 3): 1}
    assert d[ArrayShape('real', (2, 3))] == 1


@pytest.mark.parametrize('s', [ScalarShape('real'),
                               ScalarShape('complex'),
                               ArrayShape('int32', 4, 2),
                               ConstValueShape(np.array([1.0, 2.0])),
                               NamedTupleShape(a=ScalarShape('real'),
                                               b=ArrayShape('real', 2))])
def test_reconstructable_from_parameters(s):
    assert type(s)(*s.parameters) == s


def test_repr():
    assert repr(ArrayShape('real', 2, 3)) == 'ArrayShape(real, 2, 3)'
    assert repr(ScalarShape(float)) == 'ScalarShape(float64)'
    assert repr(ConstValueShape(42)) == 'ConstValueShape(42)'


def test_array_view_is_column_major():
    data = np.arange(1.0, 7.0)
    x = ArrayShape('real', 2, 3)(data)
    assert np.array_equal(x, [[1, 3, 5], [2, 4, 6]])
    x[1, 2] = 0
    assert data[5] == 0


def test_scalar_view_is_writeable():
    data = np.array([1.0])
    x = ScalarShape('real')(data)
    assert x.ndim == 0
    x[()] = 5
    assert data[0] == 5


def test_complex_scalar_view():
    data = np.array([1.0, 2.0])
    z = ScalarShape('complex')(data)
    assert z[()] == 1 + 2j
    z[()] = 3 + 4j
    assert np.array_equal(data, [3.0, 4.0])


def test_complex_view_of_integer_buffer_is_readonly_copy():
    data = np.array([1, 2])
    z = ScalarShape('complex')(data)
    assert z[()] == 1 + 2j
    assert not z.flags.writeable


def test_complex_array_view():
    data = np.array([1.0, 2.0, 3.0, 4.0])
    z = ArrayShape('complex', 2)(data)
    assert np.array_equal(z, [1 + 2j, 3 + 4j])


def test_const_value_shape():
    v = np.array([1, 2])
    s = ConstValueShape(v)
    assert s.ndof == 0
    assert s.shape == (2,)
    v[0] = 5
    assert s.value[0] == 1
    assert not s.value.flags.writeable


def test_const_equality():
    a = ConstValueShape(np.array([[1, 2], [3, 4]]))
    b = ConstValueShape(np.array([[1, 2], [3, 4]]))
    assert a == b
    assert hash(a) == hash(b)
    assert ConstValueShape(1) != ConstValueShape(2)
    assert ConstValueShape(np.array([1])) != ConstValueShape(1)


def test_const_view_ignores_buffer():
    s = ConstValueShape(4.2)
    assert s(np.empty(0)) == 4.2
    assert s(np.empty(0, dtype='int32')) == 4.2
    with pytest.raises(ShapeMismatch):
        s(np.zeros(1))


def test_make_uninitialized():
    x = ArrayShape('real', 2, 3).make_uninitialized()
    assert x.shape == (2, 3)
    assert x.dtype == np.float64
    assert x.flags.f_contiguous

    z = ScalarShape('complex').make_uninitialized()
    assert z.ndim == 0
    assert z.dtype == np.complex128

    assert ArrayShape('real', 2).make_uninitialized('int32').dtype == np.int32
    assert ConstValueShape(4.2).make_uninitialized() == 4.2


def test_make_uninitialized_incompatible_dtype():
    with pytest.raises(ShapeMismatch):
        ArrayShape('float64', 2).make_uninitialized('int32')
    with pytest.raises(ShapeMismatch):
        ScalarShape('real').make_uninitialized('complex')


def test_comparison_operators():
    assert ArrayShape('float64', 2, 3) <= ArrayShape('real', 2, 3)
    assert ArrayShape('float64', 2, 3) < ArrayShape('real', 2, 3)
    assert ScalarShape('real') >= ScalarShape('int32')
    assert ScalarShape('real') > ScalarShape('int32')
    assert not ScalarShape('real') < ScalarShape('real')
    assert not ArrayShape('float64', 2, 3) <= ArrayShape('integer', 2, 3)


@pytest.mark.parametrize('a, b', [(np.array([1, 2]), [1, 2]),
                                  (np.array([1, 2]), np.array([1.0, 2.0])),
                                  (np.array(1), 1),
                                  (1, 1.0),
                                  (-0.0, 0.0),
                                  (np.array([1 + 0j]), [1]),
                                  ({'x': np.array([1, 2])}, {'x': [1, 2]})])
def test_equal_constants_hash_equal(a, b):
    assert ConstValueShape(a) == ConstValueShape(b)
    assert hash(ConstValueShape(a)) == hash(ConstValueShape(b))
    assert len({ConstValueShape(a), ConstValueShape(b)}) == 1


def test_nested_constants_compare_element_wise():
    a = ConstValueShape({'x': np.array([1, 2])})
    assert a == ConstValueShape({'x': np.array([1, 2])})
    assert a != ConstValueShape({'x': np.array([1, 3])})
    assert a != ConstValueShape({'y': np.array([1, 2])})
    assert a != ConstValueShape(np.array([1, 2]))
    assert (ConstValueShape([np.array([1, 2]), 3]) ==
            ConstValueShape([np.array([1, 2]), 3]))
    assert (ConstValueShape([np.array([1, 2]), 3]) !=
            ConstValueShape([np.array([1, 2]), 4]))
