import numbers

import numpy as np
import pytest

from valueshapes.eltypes import (TypeSet, real, number, eltype, isconcrete,
                                 default_datatype, issubtype, isnumeric,
                                 eltype_ndof, unshaped_eltype, typename)
from valueshapes.error import ShapeDefinitionError, TypeResolutionError


def test_eltype_spellings():
    assert eltype('real') is real
    assert eltype('number') is number
    assert eltype('complex') is np.complexfloating
    assert eltype('integer') is np.integer
    assert eltype('float32') is np.float32
    assert eltype('i4') is np.int32
    assert eltype(np.dtype('f8')) is np.float64
    assert eltype(np.floating) is np.floating
    assert eltype(real) is real


def test_eltype_builtins():
    assert eltype(float) is np.float64
    assert eltype(int) is np.int64
    assert eltype(complex) is np.complex128
    assert eltype(bool) is np.bool_
    assert eltype(numbers.Real) is real
    assert eltype(numbers.Integral) is np.integer


def test_eltype_unknown():
    with pytest.raises(ShapeDefinitionError):
        eltype('nonsense')
    with pytest.raises(ShapeDefinitionError):
        eltype(object())
    with pytest.raises(ShapeDefinitionError):
        eltype(dict)


def test_isconcrete():
    assert isconcrete(np.float64)
    assert isconcrete(np.int8)
    assert not isconcrete(np.floating)
    assert not isconcrete(real)
    assert not isconcrete(float)


def test_default_datatype():
    assert default_datatype(real) is np.float64
    assert default_datatype('number') is np.float64
    assert default_datatype(np.inexact) is np.float64
    assert default_datatype(np.complexfloating) is np.complex128
    assert default_datatype(np.integer) is np.int64
    assert default_datatype(np.unsignedinteger) is np.uint64
    assert default_datatype(np.float32) is np.float32


def test_default_datatype_unresolvable():
    with pytest.raises(TypeResolutionError):
        default_datatype(np.generic)
    with pytest.raises(TypeResolutionError):
        default_datatype(np.character)


def test_issubtype():
    assert issubtype(np.float64, real)
    assert issubtype(np.int32, real)
    assert issubtype(np.bool_, real)
    assert issubtype(np.float32, np.floating)
    assert issubtype(real, number)
    assert issubtype(np.complex64, number)
    assert issubtype(real, real)

    assert not issubtype(np.complex128, real)
    assert not issubtype(np.float64, np.integer)
    assert not issubtype(number, real)
    assert not issubtype(real, np.floating)


def test_isnumeric():
    assert isnumeric(np.float64)
    assert isnumeric(np.complexfloating)
    assert not isnumeric(np.str_)


def test_eltype_ndof():
    assert eltype_ndof(real) == 1
    assert eltype_ndof(np.int8) == 1
    assert eltype_ndof(np.complex64) == 2
    assert eltype_ndof('complex') == 2


def test_unshaped_eltype():
    assert unshaped_eltype(np.complex64) is np.float32
    assert unshaped_eltype(np.complexfloating) is np.float64
    assert unshaped_eltype(real) is np.float64
    assert unshaped_eltype(np.int32) is np.int32


def test_typeset():
    ints = TypeSet(np.integer, name='ints')
    assert np.int16 in ints
    assert np.float64 not in ints
    assert 'int16' not in ints
    assert TypeSet(np.bool_, np.floating, np.integer) == real
    assert hash(TypeSet(np.bool_, np.floating, np.integer)) == hash(real)
    assert repr(ints) == 'ints'


def test_typename():
    assert typename(real) == 'real'
    assert typename(np.float64) == 'float64'
    assert typename(np.complexfloating) == 'complexfloating'
